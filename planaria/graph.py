"""
Graph utilities for chain layout.

Connection matrices, all-pairs shortest paths and the breadth-first search
that finds the longest chain of not-yet-placed atoms.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, Iterable

if TYPE_CHECKING:
    from .types import Molecule

# Distance between atoms with no connecting path
UNREACHABLE: Final = 999999


@dataclass
class Chain:
    """An ordered path of atoms with the bonds between them.

    Attributes:
        atoms: Atom indices from the start atom outwards.
        bonds: ``bonds[i]`` joins ``atoms[i]`` and ``atoms[i + 1]``.
    """

    atoms: list[int] = field(default_factory=list)
    bonds: list[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.atoms)

    def extended(self, atom_idx: int, bond_idx: int) -> Chain:
        """Return a copy of this chain with one more atom appended."""
        return Chain(self.atoms + [atom_idx], self.bonds + [bond_idx])


def connection_matrix(mol: "Molecule") -> list[list[int]]:
    """Build the N x N adjacency matrix (1 for a bond, 0 otherwise)."""
    n = mol.num_atoms
    matrix = [[0] * n for _ in range(n)]
    for bond in mol.bonds:
        matrix[bond.atom1_idx][bond.atom2_idx] = 1
        matrix[bond.atom2_idx][bond.atom1_idx] = 1
    return matrix


def all_pairs_shortest_paths(matrix: list[list[int]]) -> list[list[int]]:
    """Topological distances by Floyd-Warshall.

    Args:
        matrix: Connection matrix; non-zero entries are edges of length 1.

    Returns:
        Distance matrix with 0 on the diagonal and :data:`UNREACHABLE`
        between disconnected atoms.
    """
    n = len(matrix)
    dist = [
        [0 if i == j else (1 if matrix[i][j] else UNREACHABLE) for j in range(n)]
        for i in range(n)
    ]
    for k in range(n):
        row_k = dist[k]
        for i in range(n):
            row_i = dist[i]
            d_ik = row_i[k]
            if d_ik == UNREACHABLE:
                continue
            for j in range(n):
                candidate = d_ik + row_k[j]
                if candidate < row_i[j]:
                    row_i[j] = candidate
    return dist


def degree_sum(mol: "Molecule", atoms: Iterable[int]) -> int:
    """Sum of the degrees of the given atoms."""
    return sum(mol.atoms[idx].degree() for idx in atoms)


def longest_unplaced_chain(mol: "Molecule", start_idx: int) -> Chain:
    """Longest path of unplaced atoms reachable from ``start_idx``.

    The search runs breadth first, one sphere at a time, and keeps one
    path per reached atom. Placed atoms are never entered. Ring atoms are
    appended to a path but not expanded, so a chain may end on a ring
    without running into it. The start atom is always expanded. Terminal
    atoms (degree 1) end their path.

    Among all paths the one with the most atoms wins; ties go to the
    higher degree sum, then to the lower end atom index.

    Args:
        mol: Molecule with layout flags set.
        start_idx: Index of the atom the chain grows from.

    Returns:
        The selected chain, starting with ``start_idx``.
    """
    visited = {start_idx}
    paths: dict[int, Chain] = {start_idx: Chain([start_idx], [])}
    sphere = [start_idx]

    while sphere:
        next_sphere: list[int] = []
        for atom_idx in sphere:
            atom = mol.atoms[atom_idx]
            if atom.flags.in_ring and atom_idx != start_idx:
                continue
            for bond in mol.connected_bonds(atom_idx):
                neighbor_idx = bond.other_atom(atom_idx)
                neighbor = mol.atoms[neighbor_idx]
                if neighbor_idx in visited or neighbor.flags.placed:
                    continue
                visited.add(neighbor_idx)
                neighbor.flags.visited = True
                paths[neighbor_idx] = paths[atom_idx].extended(neighbor_idx, bond.idx)
                if neighbor.degree() > 1:
                    next_sphere.append(neighbor_idx)
        sphere = next_sphere

    best = paths[start_idx]
    best_key = (len(best), degree_sum(mol, best.atoms))
    for atom_idx in sorted(paths):
        chain = paths[atom_idx]
        key = (len(chain), degree_sum(mol, chain.atoms))
        if key > best_key:
            best, best_key = chain, key
    return best


def initial_longest_chain(mol: "Molecule") -> Chain:
    """Longest chain of an acyclic molecule, used to seed the layout.

    Finds the pair of terminal atoms with the greatest topological
    distance (the first such pair in index order) and returns the longest
    unplaced chain grown from the first atom of that pair.

    Args:
        mol: Molecule with at least one atom.

    Returns:
        Chain starting at the chosen terminal atom.
    """
    distances = all_pairs_shortest_paths(connection_matrix(mol))
    terminals = [atom.idx for atom in mol.atoms if atom.degree() == 1]

    start_idx = 0
    max_distance = -1
    for first in terminals:
        for second in terminals:
            d = distances[first][second]
            if d != UNREACHABLE and d > max_distance:
                max_distance = d
                start_idx = first

    return longest_unplaced_chain(mol, start_idx)
