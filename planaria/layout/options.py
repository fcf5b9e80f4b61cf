"""
Layout constants and options.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final

from ..geometry import Vector2D

# Default distance between bonded atoms, in drawing units
BOND_LENGTH: Final = 1.5

# Bonds to hydrogen are drawn shorter by this factor
HYDROGEN_BOND_SCALE: Final = 0.6

# Direction of the very first bond placed in a layout
DEFAULT_FIRST_BOND_VECTOR: Final = Vector2D(0.0, 1.0)


@dataclass(frozen=True, slots=True)
class LayoutOptions:
    """Tunable parameters of the coordinate generator.

    Attributes:
        bond_length: Distance between bonded atoms.
        first_bond_vector: Direction of the first bond drawn.
        hydrogen_scale: Factor applied to bonds ending in hydrogen when
            substituents are spread around an atom.

    Raises:
        ValueError: On a non-positive or non-finite bond length, a
            zero first bond vector, or a hydrogen scale outside (0, 1].
    """

    bond_length: float = BOND_LENGTH
    first_bond_vector: Vector2D = DEFAULT_FIRST_BOND_VECTOR
    hydrogen_scale: float = HYDROGEN_BOND_SCALE

    def __post_init__(self) -> None:
        if not (math.isfinite(self.bond_length) and self.bond_length > 0):
            raise ValueError(f"bond_length must be positive, got {self.bond_length}")
        if self.first_bond_vector.is_zero():
            raise ValueError("first_bond_vector must not be zero")
        if not 0 < self.hydrogen_scale <= 1:
            raise ValueError(
                f"hydrogen_scale must be in (0, 1], got {self.hydrogen_scale}"
            )
