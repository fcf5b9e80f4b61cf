"""
Element symbols and bond orders.

Only the data the layout engine and the SMILES reader need: which symbols
exist, which may appear unbracketed, and the bond order enumeration.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final, FrozenSet


class BondOrder(IntEnum):
    """Bond order enumeration."""

    SINGLE = 1
    DOUBLE = 2
    TRIPLE = 3
    QUADRUPLE = 4

    def __str__(self) -> str:
        return self.name.lower()


# Periodic table in atomic number order; index + 1 is the atomic number
PERIODIC_TABLE: Final[tuple[str, ...]] = (
    "H", "He",
    "Li", "Be", "B", "C", "N", "O", "F", "Ne",
    "Na", "Mg", "Al", "Si", "P", "S", "Cl", "Ar",
    "K", "Ca", "Sc", "Ti", "V", "Cr", "Mn", "Fe", "Co", "Ni", "Cu", "Zn",
    "Ga", "Ge", "As", "Se", "Br", "Kr",
    "Rb", "Sr", "Y", "Zr", "Nb", "Mo", "Tc", "Ru", "Rh", "Pd", "Ag", "Cd",
    "In", "Sn", "Sb", "Te", "I", "Xe",
    "Cs", "Ba",
    "La", "Ce", "Pr", "Nd", "Pm", "Sm", "Eu", "Gd", "Tb", "Dy", "Ho", "Er",
    "Tm", "Yb", "Lu",
    "Hf", "Ta", "W", "Re", "Os", "Ir", "Pt", "Au", "Hg",
    "Tl", "Pb", "Bi", "Po", "At", "Rn",
    "Fr", "Ra",
    "Ac", "Th", "Pa", "U", "Np", "Pu", "Am", "Cm", "Bk", "Cf", "Es", "Fm",
    "Md", "No", "Lr",
    "Rf", "Db", "Sg", "Bh", "Hs", "Mt", "Ds", "Rg", "Cn",
    "Nh", "Fl", "Mc", "Lv", "Ts", "Og",
)

_ATOMIC_NUMBERS: Final[dict[str, int]] = {
    symbol: number for number, symbol in enumerate(PERIODIC_TABLE, start=1)
}

# Daylight "organic subset" - atoms that can appear without brackets
ORGANIC_SUBSET: Final[FrozenSet[str]] = frozenset({
    "B", "C", "N", "O", "P", "S", "F", "Cl", "Br", "I",
})

# Aromatic element symbols allowed in lowercase SMILES form
AROMATIC_SUBSET: Final[FrozenSet[str]] = frozenset({
    "b", "c", "n", "o", "p", "s", "as", "se",
})

# Two-letter elements in organic subset (need lookahead in the parser)
TWO_LETTER_ORGANIC: Final[FrozenSet[str]] = frozenset({"Cl", "Br"})

HYDROGEN: Final = "H"


def get_atomic_number(symbol: str) -> int:
    """Get atomic number for an element symbol.

    Lowercase aromatic forms ("c", "se") resolve to their element.

    Args:
        symbol: Element symbol.

    Returns:
        Atomic number, or 0 if the symbol is unknown or a wildcard.
    """
    number = _ATOMIC_NUMBERS.get(symbol)
    if number is None:
        number = _ATOMIC_NUMBERS.get(symbol.capitalize(), 0)
    return number


def is_element_symbol(symbol: str) -> bool:
    """Check if symbol names a real element (case-sensitive)."""
    return symbol in _ATOMIC_NUMBERS


def is_hydrogen(symbol: str) -> bool:
    """Check if symbol is hydrogen, including its isotope spellings."""
    return symbol in (HYDROGEN, "D", "T")
