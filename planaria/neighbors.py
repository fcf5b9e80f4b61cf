"""
Spatial lookup over a laid-out molecule.

A uniform grid indexes atoms and bond midpoints so that the objects near a
point can be found without scanning the whole molecule. This serves hit
testing (which atom or bond is under a cursor) and layout checks (which
non-bonded atoms ended up too close together).
"""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .geometry import Vector2D

if TYPE_CHECKING:
    from .types import Molecule


class NeighborKind(Enum):
    """What a neighbor-list hit refers to."""

    ATOM = "atom"
    BOND = "bond"
    MOLECULE = "molecule"


@dataclass(frozen=True, slots=True)
class Neighbor:
    """One hit of a neighbor-list query.

    Attributes:
        kind: Kind of object hit.
        index: Atom index (ATOM, MOLECULE) or bond index (BOND).
        distance: Ranking distance; smaller is closer.
    """

    kind: NeighborKind
    index: int
    distance: float


def _segment_distance(point: Vector2D, start: Vector2D, end: Vector2D) -> float:
    segment = end - start
    length_sq = segment.dot(segment)
    if length_sq == 0.0:
        return point.distance(start)
    t = max(0.0, min(1.0, (point - start).dot(segment) / length_sq))
    return point.distance(start + segment * t)


class NeighborList:
    """Grid index of atoms and bonds for nearest-object queries.

    Ranking follows the usual editor convention: an atom within
    ``tolerance`` is hit at its true distance; a bond within ``tolerance``
    is hit at distance plus tolerance, so atoms win over the bonds that
    end in them; an atom within three tolerances only marks the molecule,
    at twice its distance.

    Args:
        mol: Molecule with coordinates.
        cell_size: Edge length of a grid cell.
        tolerance: Hit radius.

    Example:
        >>> from planaria import parse, generate_coordinates
        >>> mol = generate_coordinates(parse("CC"))
        >>> hit = NeighborList(mol).nearest(mol[1].coord)
        >>> hit.kind, hit.index
        (<NeighborKind.ATOM: 'atom'>, 1)
    """

    def __init__(self, mol: "Molecule", cell_size: float = 2.0, tolerance: float = 0.3) -> None:
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        self._mol = mol
        self.cell_size = cell_size
        self.tolerance = tolerance
        self._cells: dict[tuple[int, int], list[tuple[NeighborKind, int]]] = defaultdict(list)

        half_bond = 0.0
        for atom in mol.atoms:
            self._cells[self._key(atom.coord)].append((NeighborKind.ATOM, atom.idx))
        for bond in mol.bonds:
            start = mol.atoms[bond.atom1_idx].coord
            end = mol.atoms[bond.atom2_idx].coord
            self._cells[self._key((start + end) / 2.0)].append((NeighborKind.BOND, bond.idx))
            half_bond = max(half_bond, start.distance(end) / 2.0)

        reach = max(3.0 * tolerance, half_bond + tolerance)
        self._reach = int(math.ceil(reach / cell_size))

    def _key(self, point: Vector2D) -> tuple[int, int]:
        return (
            int(math.floor(point.x / self.cell_size)),
            int(math.floor(point.y / self.cell_size)),
        )

    def nearest_list(self, point: Vector2D) -> list[Neighbor]:
        """All objects within reach of ``point``, nearest first."""
        mol = self._mol
        tol = self.tolerance
        cx, cy = self._key(point)
        hits: list[Neighbor] = []

        for gx in range(cx - self._reach, cx + self._reach + 1):
            for gy in range(cy - self._reach, cy + self._reach + 1):
                for kind, index in self._cells.get((gx, gy), ()):
                    if kind is NeighborKind.ATOM:
                        r = point.distance(mol.atoms[index].coord)
                        if r < tol:
                            hits.append(Neighbor(NeighborKind.ATOM, index, r))
                        elif r < 3.0 * tol:
                            hits.append(Neighbor(NeighborKind.MOLECULE, index, 2.0 * r))
                    else:
                        bond = mol.bonds[index]
                        r = _segment_distance(
                            point,
                            mol.atoms[bond.atom1_idx].coord,
                            mol.atoms[bond.atom2_idx].coord,
                        )
                        if r < tol:
                            hits.append(Neighbor(NeighborKind.BOND, index, r + tol))

        hits.sort(key=lambda hit: hit.distance)
        return hits

    def nearest(self, point: Vector2D) -> Neighbor | None:
        """The closest hit, or None if nothing is within reach."""
        hits = self.nearest_list(point)
        return hits[0] if hits else None


def find_close_contacts(mol: "Molecule", threshold: float) -> list[tuple[int, int]]:
    """Pairs of non-bonded atoms closer than ``threshold``.

    Args:
        mol: Molecule with coordinates.
        threshold: Minimum acceptable separation.

    Returns:
        Sorted ``(i, j)`` pairs with ``i < j``.
    """
    if threshold <= 0:
        return []
    cells: dict[tuple[int, int], list[int]] = defaultdict(list)
    for atom in mol.atoms:
        key = (int(math.floor(atom.x / threshold)), int(math.floor(atom.y / threshold)))
        cells[key].append(atom.idx)

    contacts: list[tuple[int, int]] = []
    for (cx, cy), members in cells.items():
        for gx in (cx - 1, cx, cx + 1):
            for gy in (cy - 1, cy, cy + 1):
                for i in members:
                    for j in cells.get((gx, gy), ()):
                        if j <= i or mol.get_bond_between(i, j) is not None:
                            continue
                        if mol.atoms[i].coord.distance(mol.atoms[j].coord) < threshold:
                            contacts.append((i, j))
    return sorted(contacts)
