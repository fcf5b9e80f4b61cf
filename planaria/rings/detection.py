"""
Ring detection algorithms.

This module finds the Smallest Set of Smallest Rings (SSSR) of a molecule
and returns each ring as an ordered cycle, which is what the layout engine
needs to walk around a ring while placing its atoms.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..types import Ring

if TYPE_CHECKING:
    from ..types import Molecule


def find_ring_bonds(mol: "Molecule") -> set[int]:
    """Indices of bonds that lie on at least one cycle.

    A bond is a ring bond exactly when it is not a bridge of the graph, so
    this runs Tarjan's bridge-finding pass in O(V + E).

    Args:
        mol: Molecule to analyze.

    Returns:
        Set of ring bond indices.
    """
    if mol.num_atoms == 0:
        return set()

    adj: dict[int, list[tuple[int, int]]] = {i: [] for i in range(mol.num_atoms)}
    for bond in mol.bonds:
        adj[bond.atom1_idx].append((bond.atom2_idx, bond.idx))
        adj[bond.atom2_idx].append((bond.atom1_idx, bond.idx))

    discovery: dict[int, int] = {}
    low: dict[int, int] = {}
    bridges: set[int] = set()
    time_counter = 0

    # Iterative DFS; each frame is (node, parent bond, neighbor cursor)
    for root in range(mol.num_atoms):
        if root in discovery:
            continue
        discovery[root] = low[root] = time_counter
        time_counter += 1
        stack: list[tuple[int, int, int]] = [(root, -1, 0)]
        while stack:
            node, parent_bond, cursor = stack[-1]
            if cursor < len(adj[node]):
                stack[-1] = (node, parent_bond, cursor + 1)
                neighbor, bond_idx = adj[node][cursor]
                if neighbor not in discovery:
                    discovery[neighbor] = low[neighbor] = time_counter
                    time_counter += 1
                    stack.append((neighbor, bond_idx, 0))
                elif bond_idx != parent_bond:
                    low[node] = min(low[node], discovery[neighbor])
            else:
                stack.pop()
                if stack:
                    parent = stack[-1][0]
                    low[parent] = min(low[parent], low[node])
                    if low[node] > discovery[parent]:
                        bridges.add(parent_bond)

    return {bond.idx for bond in mol.bonds if bond.idx not in bridges}


def find_sssr(mol: "Molecule", max_ring_size: int | None = None) -> list[Ring]:
    """Find Smallest Set of Smallest Rings (SSSR).

    The SSSR is a linearly independent basis of cycles where:
    - The number of rings equals the cyclomatic complexity (E - V + C)
    - Larger rings that can be expressed as combinations of smaller rings are excluded

    For example, naphthalene has cyclomatic complexity 2 (11 bonds - 10 atoms + 1),
    so its SSSR contains exactly 2 rings (the two 6-membered rings), not the
    10-membered envelope ring.

    Cycles are enumerated only over ring bonds, so chains hanging off ring
    systems never enter the search.

    Args:
        mol: Molecule to analyze.
        max_ring_size: Maximum ring size to consider (default None = no limit).

    Returns:
        Rings sorted by size, each with atoms and bonds in cycle order.

    Example:
        >>> from planaria import parse
        >>> rings = find_sssr(parse("c1ccc2ccccc2c1"))
        >>> [len(r) for r in rings]
        [6, 6]
    """
    ring_bonds = find_ring_bonds(mol)
    if not ring_bonds:
        return []

    adj: dict[int, list[tuple[int, int]]] = {}
    for bond_idx in sorted(ring_bonds):
        bond = mol.bonds[bond_idx]
        adj.setdefault(bond.atom1_idx, []).append((bond.atom2_idx, bond_idx))
        adj.setdefault(bond.atom2_idx, []).append((bond.atom1_idx, bond_idx))

    candidates: list[tuple[list[int], list[int]]] = []

    def dfs_find_cycles(
        start: int,
        current: int,
        path: list[int],
        path_bonds: list[int],
        visited: set[int],
    ) -> None:
        """DFS to find cycles starting from start node."""
        if max_ring_size is not None and len(path) > max_ring_size:
            return

        for neighbor, bond_idx in adj[current]:
            if neighbor == start and len(path) >= 3:
                candidates.append((list(path), path_bonds + [bond_idx]))
            elif neighbor not in visited and neighbor > start:
                # Only visit higher-indexed atoms to avoid rotations
                visited.add(neighbor)
                path.append(neighbor)
                path_bonds.append(bond_idx)
                dfs_find_cycles(start, neighbor, path, path_bonds, visited)
                path_bonds.pop()
                path.pop()
                visited.remove(neighbor)

    for start in sorted(adj):
        dfs_find_cycles(start, start, [start], [], {start})

    unique = _filter_unique_rings(candidates)
    mu = mol.num_bonds - mol.num_atoms + len(mol.connected_components())
    return _compute_sssr(unique, mu)


def _filter_unique_rings(
    candidates: list[tuple[list[int], list[int]]],
) -> list[Ring]:
    """Drop duplicate traversals, keeping smaller rings first.

    Each cycle is found once per direction; two traversals are the same
    ring when they use the same bonds.
    """
    seen: set[frozenset[int]] = set()
    unique: list[Ring] = []

    for atoms, bonds in sorted(candidates, key=lambda c: (len(c[0]), sorted(c[0]))):
        key = frozenset(bonds)
        if key not in seen:
            seen.add(key)
            unique.append(Ring(atoms=atoms, bonds=bonds))

    return unique


def _compute_sssr(rings: list[Ring], mu: int) -> list[Ring]:
    """Greedily pick ``mu`` linearly independent rings, smallest first.

    Rings are bond vectors over GF(2), stored as integer bitmasks, and
    independence is checked by Gaussian elimination against a basis keyed
    by leading bit.
    """
    if mu <= 0:
        return []

    basis: dict[int, int] = {}
    sssr: list[Ring] = []

    for ring in rings:
        if len(sssr) >= mu:
            break

        vector = 0
        for bond_idx in ring.bonds:
            vector |= 1 << bond_idx

        while vector:
            lead = vector.bit_length() - 1
            if lead not in basis:
                basis[lead] = vector
                sssr.append(ring)
                break
            vector ^= basis[lead]

    return sssr
