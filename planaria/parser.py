"""
SMILES string parser.

Builds Molecule graphs from SMILES strings so that structures can be fed to
the layout engine without constructing them atom by atom.

Supported:
    - Organic subset atoms (B, C, N, O, P, S, F, Cl, Br, I)
    - Aromatic lowercase atoms (b, c, n, o, p, s, as, se)
    - Bracket atoms with isotope, chirality, hydrogens, charge, atom class
    - Single, double, triple, quadruple and aromatic bond symbols
    - Bond stereochemistry (/ and \\)
    - Ring closures (1-9, %10-99, %(100+))
    - Branches and dot-separated components

Chirality and atom classes are read and discarded; a 2D layout has no use
for them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from .elements import (
    AROMATIC_SUBSET,
    ORGANIC_SUBSET,
    TWO_LETTER_ORGANIC,
    BondOrder,
    is_element_symbol,
)
from .exceptions import ParseError, RingError
from .types import Molecule


class _Tokenizer:
    """Character cursor over a SMILES string with lookahead."""

    __slots__ = ("_string", "_pos")

    def __init__(self, string: str) -> None:
        self._string = string
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    def peek(self, offset: int = 0) -> str | None:
        pos = self._pos + offset
        if pos >= len(self._string):
            return None
        return self._string[pos]

    def next(self) -> str | None:
        if self._pos >= len(self._string):
            return None
        char = self._string[self._pos]
        self._pos += 1
        return char

    def read_while(self, predicate) -> str:
        start = self._pos
        while self._pos < len(self._string) and predicate(self._string[self._pos]):
            self._pos += 1
        return self._string[start:self._pos]

    def read_number(self) -> int | None:
        """Read an unsigned integer, or None if no digit follows."""
        digits = self.read_while(str.isdigit)
        return int(digits) if digits else None

    def is_eof(self) -> bool:
        return self._pos >= len(self._string)

    def expect(self, char: str) -> None:
        """Consume ``char`` or raise ParseError."""
        actual = self.next()
        if actual != char:
            raise ParseError(
                f"Expected '{char}', got '{actual}'",
                self._string,
                self._pos - 1,
            )


@dataclass
class _ParserState:
    """Mutable state for the SMILES parser."""

    # ring_index -> (atom_idx, bond order written at the opening digit)
    open_rings: dict[int, tuple[int, int | None]] = field(default_factory=dict)
    branch_stack: list[int | None] = field(default_factory=list)
    prev_atom: int | None = None
    pending_bond_order: int | None = None
    pending_bond_aromatic: bool = False
    pending_bond_stereo: str | None = None

    @property
    def has_pending_bond(self) -> bool:
        return (
            self.pending_bond_order is not None
            or self.pending_bond_aromatic
            or self.pending_bond_stereo is not None
        )

    def reset_bond(self) -> None:
        self.pending_bond_order = None
        self.pending_bond_aromatic = False
        self.pending_bond_stereo = None


class SmilesParser:
    """SMILES string parser.

    Example:
        >>> parser = SmilesParser("CCO")
        >>> mol = parser.parse()
        >>> len(mol.atoms)
        3

    For convenience, use the module-level `parse()` function.
    """

    # Bond character -> bond order
    _BOND_CHARS: Final[dict[str, int]] = {
        "-": BondOrder.SINGLE,
        "=": BondOrder.DOUBLE,
        "#": BondOrder.TRIPLE,
        "$": BondOrder.QUADRUPLE,
    }

    def __init__(self, smiles: str) -> None:
        self._smiles = smiles
        self._tokenizer = _Tokenizer(smiles)
        self._mol = Molecule()
        self._state = _ParserState()

    def _error(self, message: str, position: int | None = None) -> ParseError:
        if position is None:
            position = self._tokenizer.position
        return ParseError(message, self._smiles, position)

    def parse(self) -> Molecule:
        """Parse the SMILES string into a Molecule.

        Returns:
            Parsed Molecule object.

        Raises:
            ParseError: If SMILES syntax is invalid.
            RingError: If ring closures are unmatched or malformed.
        """
        tok = self._tokenizer
        state = self._state

        while not tok.is_eof():
            char = tok.peek()

            if char in ".()" and state.has_pending_bond:
                raise self._error(f"Bond symbol not followed by an atom before '{char}'")

            if char == ".":
                tok.next()
                if state.branch_stack:
                    raise self._error("Component separator inside a branch")
                state.prev_atom = None
                state.reset_bond()
            elif char in self._BOND_CHARS or char in ":/\\":
                self._parse_bond_symbol(char)
            elif char == "(":
                if state.prev_atom is None:
                    raise self._error("Branch without preceding atom")
                tok.next()
                state.branch_stack.append(state.prev_atom)
            elif char == ")":
                if not state.branch_stack:
                    raise self._error("Unmatched closing parenthesis")
                tok.next()
                state.prev_atom = state.branch_stack.pop()
                state.reset_bond()
            elif char.isdigit() or char == "%":
                self._parse_ring_closure()
            elif char == "[":
                self._parse_bracket_atom()
            elif char.isalpha():
                self._parse_organic_atom()
            else:
                raise self._error(f"Unexpected character: '{char}'")

        if state.has_pending_bond:
            raise self._error("Bond symbol at end of input", len(self._smiles))
        if state.branch_stack:
            raise self._error("Unclosed branch", len(self._smiles))
        if state.open_rings:
            unclosed = sorted(state.open_rings)
            raise RingError(
                f"Unclosed ring indices: {unclosed}",
                ring_index=unclosed[0],
            )

        return self._mol

    def _parse_bond_symbol(self, char: str) -> None:
        state = self._state
        if state.prev_atom is None:
            raise self._error(f"Bond symbol '{char}' without preceding atom")
        if state.has_pending_bond:
            raise self._error(f"Bond symbol '{char}' follows another bond symbol")
        self._tokenizer.next()
        if char == ":":
            state.pending_bond_aromatic = True
        elif char in "/\\":
            state.pending_bond_stereo = char
        else:
            state.pending_bond_order = self._BOND_CHARS[char]

    def _parse_ring_closure(self) -> None:
        tok = self._tokenizer
        state = self._state
        start = tok.position
        ring_idx = self._read_ring_index()

        if state.prev_atom is None:
            raise self._error("Ring closure without preceding atom", start)

        if ring_idx not in state.open_rings:
            state.open_rings[ring_idx] = (state.prev_atom, state.pending_bond_order)
            state.reset_bond()
            return

        atom1, order1 = state.open_rings.pop(ring_idx)
        atom2 = state.prev_atom
        if atom1 == atom2:
            raise RingError(f"Ring {ring_idx} closes on its own atom", ring_index=ring_idx)
        if self._mol.get_bond_between(atom1, atom2) is not None:
            raise RingError(
                f"Ring {ring_idx} duplicates an existing bond",
                ring_index=ring_idx,
            )
        if (
            state.pending_bond_order is not None
            and order1 is not None
            and state.pending_bond_order != order1
        ):
            raise RingError(
                f"Conflicting bond orders on ring closure {ring_idx}",
                ring_index=ring_idx,
            )

        order = state.pending_bond_order or order1
        self._add_bond(atom1, atom2, order)
        state.reset_bond()

    def _read_ring_index(self) -> int:
        """Read a ring closure index (1-9, %nn, %(n))."""
        tok = self._tokenizer

        if tok.peek() != "%":
            return int(tok.next())

        tok.next()
        if tok.peek() == "(":
            tok.next()
            num = tok.read_number()
            if num is None:
                raise self._error("Empty ring index in %()")
            tok.expect(")")
            return num

        d1 = tok.next()
        d2 = tok.next()
        if not (d1 and d1.isdigit() and d2 and d2.isdigit()):
            raise self._error("Expected two digits after %")
        return int(d1 + d2)

    def _parse_organic_atom(self) -> None:
        """Parse an organic subset atom (not in brackets)."""
        tok = self._tokenizer
        start = tok.position
        symbol = tok.next()

        follower = tok.peek()
        if follower and follower.islower():
            candidate = symbol + follower
            if candidate in TWO_LETTER_ORGANIC or candidate in AROMATIC_SUBSET:
                tok.next()
                symbol = candidate

        if symbol in ORGANIC_SUBSET:
            aromatic = False
        elif symbol in AROMATIC_SUBSET:
            aromatic = True
        else:
            raise self._error(f"Unknown organic subset atom '{symbol}'", start)

        self._add_atom(symbol, aromatic=aromatic)

    def _parse_bracket_atom(self) -> None:
        """Parse [isotope? symbol chirality? hcount? charge? class?]."""
        tok = self._tokenizer
        start = tok.position
        tok.expect("[")

        isotope = tok.read_number()
        symbol, aromatic = self._read_bracket_symbol(start)

        # Chirality does not affect a 2D layout
        chirality = tok.read_while(lambda c: c == "@")
        if chirality and tok.peek() in ("T", "A", "S", "O"):
            # Extended classes such as @TH1, @SP2, @OH15
            tok.read_while(str.isupper)
            tok.read_number()

        hydrogens = 0
        if tok.peek() == "H":
            tok.next()
            count = tok.read_number()
            hydrogens = 1 if count is None else count

        charge = self._parse_charge()

        if tok.peek() == ":":
            tok.next()
            if tok.read_number() is None:
                raise self._error("Expected atom class number after ':'")

        if tok.peek() != "]":
            raise self._error(f"Unexpected character in bracket atom: '{tok.peek()}'")
        tok.next()

        self._add_atom(
            symbol,
            aromatic=aromatic,
            charge=charge,
            explicit_hydrogens=hydrogens,
            isotope=isotope,
        )

    def _read_bracket_symbol(self, start: int) -> tuple[str, bool]:
        tok = self._tokenizer
        first = tok.peek()
        if first is None or not first.isalpha():
            raise self._error("Expected element symbol in bracket atom")

        second = tok.peek(1)
        if first.isupper():
            if second and second.islower() and is_element_symbol(first + second):
                tok.next()
                tok.next()
                return first + second, False
            if is_element_symbol(first):
                tok.next()
                return first, False
        else:
            if second and second.islower() and (first + second) in AROMATIC_SUBSET:
                tok.next()
                tok.next()
                return first + second, True
            if first in AROMATIC_SUBSET:
                tok.next()
                return first, True

        raise self._error("Unknown element symbol in bracket atom", start + 1)

    def _parse_charge(self) -> int:
        """Parse optional charge (+, -, ++, --, +2, -3, etc.)."""
        tok = self._tokenizer
        char = tok.peek()
        if char is None or char not in "+-":
            return 0

        sign = 1 if char == "+" else -1
        count = len(tok.read_while(lambda c: c == char))
        num = tok.read_number()
        if num is not None:
            return sign * num
        return sign * count

    def _add_atom(self, symbol: str, *, aromatic: bool, **properties) -> None:
        atom_idx = self._mol.add_atom(symbol, is_aromatic=aromatic, **properties)
        prev = self._state.prev_atom
        if prev is not None:
            self._add_bond(prev, atom_idx, self._state.pending_bond_order)
        self._state.reset_bond()
        self._state.prev_atom = atom_idx

    def _add_bond(self, atom1: int, atom2: int, order: int | None) -> None:
        atoms = self._mol.atoms
        aromatic = order is None and (
            self._state.pending_bond_aromatic
            or (atoms[atom1].is_aromatic and atoms[atom2].is_aromatic)
        )
        self._mol.add_bond(
            atom1,
            atom2,
            order=order or BondOrder.SINGLE,
            is_aromatic=aromatic,
            stereo=self._state.pending_bond_stereo,
        )


def parse(smiles: str) -> Molecule:
    """Parse a SMILES string into a Molecule.

    Args:
        smiles: SMILES string to parse.

    Returns:
        Parsed Molecule object.

    Raises:
        ParseError: If SMILES syntax is invalid.
        RingError: If ring closures are unmatched or malformed.

    Example:
        >>> mol = parse("c1ccccc1")
        >>> len(mol.atoms), len(mol.bonds), mol.bonds[0].is_aromatic
        (6, 6, True)
    """
    return SmilesParser(smiles).parse()
