"""Ring detection and ring system partitioning."""

from planaria.rings.detection import find_ring_bonds, find_sssr
from planaria.rings.partition import direct_connected_rings, partition_rings

__all__ = [
    "find_ring_bonds",
    "find_sssr",
    "direct_connected_rings",
    "partition_rings",
]
