"""
Ring system partitioning.

Rings that share at least one atom belong to the same ring system; the
relation is closed transitively, so fused, bridged and spiro assemblies
each end up as a single system.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from ..types import Ring


def direct_connected_rings(ring: "Ring", candidates: Iterable["Ring"]) -> list["Ring"]:
    """Rings from ``candidates`` sharing at least one atom with ``ring``.

    ``ring`` itself is never part of the result, even if it appears among
    the candidates.

    Args:
        ring: Reference ring.
        candidates: Rings to test, in the order they should be returned.

    Returns:
        Connected rings in candidate order.
    """
    atoms = set(ring.atoms)
    return [
        other for other in candidates
        if other is not ring and not atoms.isdisjoint(other.atoms)
    ]


def partition_rings(rings: Iterable["Ring"]) -> list[list["Ring"]]:
    """Group rings into ring systems.

    The first unassigned ring seeds a system; every remaining ring that
    shares an atom with a member, directly or through other members, is
    pulled in. Output is deterministic: systems appear in the order of
    their seeds, members in discovery order.

    Args:
        rings: Rings to partition.

    Returns:
        List of ring systems, each a list of rings.

    Example:
        >>> from planaria import parse
        >>> mol = parse("c1ccccc1-c1ccccc1")
        >>> [len(system) for system in partition_rings(mol.rings)]
        [1, 1]
    """
    remaining = list(rings)
    systems: list[list["Ring"]] = []

    while remaining:
        seed = remaining.pop(0)
        system = [seed]
        queue = deque([seed])
        while queue:
            current = queue.popleft()
            for other in direct_connected_rings(current, remaining):
                remaining.remove(other)
                system.append(other)
                queue.append(other)
        systems.append(system)

    return systems
