"""2D layout: chain and ring placement and the coordinate generator."""

from planaria.layout.options import (
    BOND_LENGTH,
    DEFAULT_FIRST_BOND_VECTOR,
    HYDROGEN_BOND_SCALE,
    LayoutOptions,
)
from planaria.layout.atom_placer import (
    distribute_partners,
    next_bond_vector,
    partition_partners,
    place_linear_chain,
    populate_polygon_corners,
)
from planaria.layout.ring_placer import (
    get_ring_center_of_first_ring,
    layout_next_ring_system,
    layout_ring_set,
    native_ring_radius,
    place_ring,
    place_ring_substituents,
)
from planaria.layout.generator import (
    CoordinateGenerator,
    generate_coordinates,
    layout_fragments,
)

__all__ = [
    # Options
    "BOND_LENGTH", "DEFAULT_FIRST_BOND_VECTOR", "HYDROGEN_BOND_SCALE", "LayoutOptions",
    # Atom placement
    "distribute_partners", "next_bond_vector", "partition_partners",
    "place_linear_chain", "populate_polygon_corners",
    # Ring placement
    "get_ring_center_of_first_ring", "layout_next_ring_system", "layout_ring_set",
    "native_ring_radius", "place_ring", "place_ring_substituents",
    # Generator
    "CoordinateGenerator", "generate_coordinates", "layout_fragments",
]
