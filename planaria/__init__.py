"""
Planaria - Pure Python 2D structure diagram generation.

A zero-dependency library that computes depiction coordinates for
molecular graphs: rings become regular polygons, fused, bridged and spiro
systems are joined, and chains are drawn as zig-zags.

    >>> from planaria import parse, generate_coordinates
    >>> mol = generate_coordinates(parse("c1ccccc1O"))
    >>> mol.all_placed
    True

Submodules:
    planaria.rings  - Ring detection (SSSR) and ring systems
    planaria.layout - Atom and ring placement, coordinate generator
"""

__version__ = "0.1.0"

# Core types
from planaria.types import Atom, Bond, LayoutFlags, Molecule, Ring
from planaria.geometry import Transform2D, Vector2D

# Parsing
from planaria.parser import parse, SmilesParser

# Layout
from planaria.layout import (
    BOND_LENGTH,
    CoordinateGenerator,
    LayoutOptions,
    generate_coordinates,
    layout_fragments,
)
from planaria.neighbors import Neighbor, NeighborKind, NeighborList, find_close_contacts

# Exceptions
from planaria.exceptions import (
    ChemError,
    DisconnectedMoleculeError,
    GeometryError,
    IncompleteLayoutWarning,
    LayoutError,
    ParseError,
    RingError,
)

# Element data
from planaria.elements import BondOrder, ORGANIC_SUBSET, AROMATIC_SUBSET

# Submodules
from planaria import layout, rings

__all__ = [
    # Types
    "Atom", "Bond", "LayoutFlags", "Molecule", "Ring", "Transform2D", "Vector2D",
    # Parsing
    "parse", "SmilesParser",
    # Layout
    "BOND_LENGTH", "CoordinateGenerator", "LayoutOptions",
    "generate_coordinates", "layout_fragments",
    "Neighbor", "NeighborKind", "NeighborList", "find_close_contacts",
    # Exceptions
    "ChemError", "DisconnectedMoleculeError", "GeometryError",
    "IncompleteLayoutWarning", "LayoutError", "ParseError", "RingError",
    # Elements
    "BondOrder", "ORGANIC_SUBSET", "AROMATIC_SUBSET",
    # Submodules
    "layout", "rings",
]
