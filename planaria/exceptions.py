"""
Custom exceptions for the layout library.

This module defines a hierarchy of exceptions for handling graph, parsing
and geometry errors in a structured way, plus the warning category used
when a layout finishes without placing every atom.
"""

from __future__ import annotations


class ChemError(Exception):
    """Base exception for all chemistry-related errors."""

    pass


class ParseError(ChemError):
    """Error during SMILES parsing.

    Attributes:
        position: Character position in the SMILES string where error occurred.
        smiles: The original SMILES string being parsed.
        message: Description of what went wrong.
    """

    def __init__(
        self,
        message: str,
        smiles: str | None = None,
        position: int | None = None,
    ) -> None:
        self.message = message
        self.smiles = smiles
        self.position = position

        parts = [message]
        if smiles is not None and position is not None:
            parts.append(f"\n  {smiles}")
            parts.append(f"\n  {' ' * position}^")
        elif smiles is not None:
            parts.append(f" in: {smiles}")

        super().__init__("".join(parts))


class RingError(ChemError):
    """Error related to ring closures or malformed ring records.

    Attributes:
        ring_index: The problematic ring closure index, if any.
    """

    def __init__(self, message: str, ring_index: int | None = None) -> None:
        self.message = message
        self.ring_index = ring_index
        super().__init__(message)


class GeometryError(ChemError):
    """Degenerate geometry, such as normalizing a zero-length vector."""

    pass


class LayoutError(ChemError):
    """Error raised by the coordinate generator."""

    pass


class DisconnectedMoleculeError(LayoutError):
    """The molecule handed to the layout engine has more than one fragment.

    Attributes:
        fragment_count: Number of disconnected fragments found.
    """

    def __init__(self, fragment_count: int) -> None:
        self.fragment_count = fragment_count
        super().__init__(
            f"Molecule has {fragment_count} fragments; "
            "lay out each fragment separately (see layout_fragments)"
        )


class IncompleteLayoutWarning(UserWarning):
    """Issued when the layout loop stops with atoms still unplaced."""
