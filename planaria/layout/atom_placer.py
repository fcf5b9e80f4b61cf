"""
Placement of chain atoms and of the partners around a single atom.

Chains are drawn as zig-zags with 120 degree bond angles; the partners of
an atom are spread evenly over the angle its placed neighbors leave free.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterable, Sequence

from ..geometry import EPSILON, TWO_PI, Vector2D, centroid, normalize_angle, signed_angle
from .options import BOND_LENGTH, HYDROGEN_BOND_SCALE

if TYPE_CHECKING:
    from ..graph import Chain
    from ..types import Molecule


def mark_placed(mol: "Molecule", atoms: Iterable[int]) -> None:
    for idx in atoms:
        mol.atoms[idx].flags.placed = True


def mark_not_placed(mol: "Molecule", atoms: Iterable[int]) -> None:
    for idx in atoms:
        mol.atoms[idx].flags.placed = False


def all_placed(mol: "Molecule", atoms: Iterable[int]) -> bool:
    return all(mol.atoms[idx].flags.placed for idx in atoms)


def placed_center(mol: "Molecule", atoms: Iterable[int]) -> Vector2D:
    """Centroid of the placed atoms among ``atoms``.

    Raises:
        GeometryError: If none of the atoms is placed.
    """
    return centroid(mol.atoms[idx].coord for idx in atoms if mol.atoms[idx].flags.placed)


def partition_partners(mol: "Molecule", atom_idx: int) -> tuple[list[int], list[int]]:
    """Split the neighbors of an atom by placement state.

    Returns:
        Tuple of (unplaced, placed) neighbor indices, each in bond order.
    """
    unplaced: list[int] = []
    placed: list[int] = []
    for neighbor_idx in mol.atoms[atom_idx].neighbors(mol):
        if mol.atoms[neighbor_idx].flags.placed:
            placed.append(neighbor_idx)
        else:
            unplaced.append(neighbor_idx)
    return unplaced, placed


def sort_by_distance(mol: "Molecule", atoms: Iterable[int], point: Vector2D) -> list[int]:
    """Atoms ordered by distance from ``point``, nearest first (stable)."""
    return sorted(atoms, key=lambda idx: mol.atoms[idx].coord.distance(point))


def populate_polygon_corners(
    mol: "Molecule",
    atoms: Sequence[int],
    center: Vector2D,
    start_angle: float,
    increment: float,
    radius: float,
    hydrogen_scale: float = HYDROGEN_BOND_SCALE,
) -> None:
    """Place atoms on a circle at regular angular steps.

    The angle advances by ``increment`` before each atom is placed, so the
    first atom sits at ``start_angle + increment``. Hydrogens are pulled
    in to ``radius * hydrogen_scale``. Every atom placed is flagged.

    Args:
        mol: Molecule owning the atoms.
        atoms: Atoms to place, in order.
        center: Circle center.
        start_angle: Heading the walk starts from.
        increment: Signed angular step.
        radius: Circle radius.
        hydrogen_scale: Radius factor for hydrogen atoms.
    """
    angle = start_angle
    for idx in atoms:
        angle = normalize_angle(angle + increment)
        atom = mol.atoms[idx]
        r = radius * hydrogen_scale if atom.is_hydrogen else radius
        atom.coord = center + Vector2D.from_angle(angle, r)
        atom.flags.placed = True


def _away_direction(atom_pos: Vector2D, center: Vector2D, fallback: Vector2D) -> Vector2D:
    away = atom_pos - center
    if away.is_zero():
        away = atom_pos - fallback
    if away.is_zero():
        away = Vector2D(1.0, 0.0)
    return away


def distribute_partners(
    mol: "Molecule",
    atom_idx: int,
    placed: Sequence[int],
    shared_center: Vector2D,
    unplaced: Sequence[int],
    bond_length: float = BOND_LENGTH,
    hydrogen_scale: float = HYDROGEN_BOND_SCALE,
) -> None:
    """Spread the unplaced partners of an atom over its free angle.

    With no placed neighbor the partners go round the full circle starting
    at heading 0. With one placed neighbor they share the circle with it,
    starting from its heading. With two or more, the two placed neighbors
    nearest to the point one bond length away from ``shared_center`` bound
    the free sector, and the partners divide it evenly.

    Args:
        mol: Molecule owning the atoms.
        atom_idx: Atom whose partners are placed.
        placed: Already-placed neighbors.
        shared_center: Center of the atoms around ``atom_idx`` (usually the
            ring or neighbor centroid); partners are pushed away from it.
        unplaced: Neighbors to place.
        bond_length: Radius of the placement circle.
        hydrogen_scale: Radius factor for hydrogen partners.

    Example:
        >>> from planaria import Molecule
        >>> mol = Molecule()
        >>> center = mol.add_atom("C")
        >>> for _ in range(3):
        ...     _ = mol.add_bond(center, mol.add_atom("C"))
        >>> distribute_partners(mol, center, [], mol[center].coord, [1, 2, 3])
        >>> [round(mol[i].coord.distance(mol[center].coord), 6) for i in (1, 2, 3)]
        [1.5, 1.5, 1.5]
    """
    if not unplaced:
        return
    atom_pos = mol.atoms[atom_idx].coord

    if not placed:
        increment = TWO_PI / len(unplaced)
        populate_polygon_corners(
            mol, unplaced, atom_pos, 0.0, increment, bond_length, hydrogen_scale,
        )
        return

    if len(placed) == 1:
        increment = TWO_PI / (len(unplaced) + 1)
        start_angle = (mol.atoms[placed[0]].coord - atom_pos).heading()
        populate_polygon_corners(
            mol, unplaced, atom_pos, start_angle, increment, bond_length, hydrogen_scale,
        )
        return

    neighbor_center = centroid(mol.atoms[idx].coord for idx in placed)
    away = _away_direction(atom_pos, shared_center, neighbor_center)
    distance_measure = atom_pos + away.scaled_to(bond_length)

    first, second = sort_by_distance(mol, placed, distance_measure)[:2]
    first_heading = (mol.atoms[first].coord - atom_pos).heading()
    # Start from the neighbor clockwise of the free direction
    if signed_angle(first_heading - away.heading()) > 0:
        start, other = second, first
    else:
        start, other = first, second

    start_angle = (mol.atoms[start].coord - atom_pos).heading()
    other_angle = (mol.atoms[other].coord - atom_pos).heading()
    remaining = normalize_angle(other_angle - start_angle)
    if remaining < EPSILON:
        remaining = TWO_PI
    occupied = TWO_PI - remaining
    increment = (TWO_PI - occupied) / (len(unplaced) + 1)
    populate_polygon_corners(
        mol, unplaced, atom_pos, start_angle, increment, bond_length, hydrogen_scale,
    )


def next_bond_vector(
    mol: "Molecule",
    atom_idx: int,
    previous_idx: int,
    distance_measure: Vector2D,
) -> Vector2D:
    """Direction of the next bond in a zig-zag chain.

    The two candidates lie at +120 and +240 degrees from the bond back to
    the previous atom; the one whose tip lands farther from
    ``distance_measure`` wins, the first on a tie.

    Returns:
        Unit vector.
    """
    atom_pos = mol.atoms[atom_idx].coord
    back = (mol.atoms[previous_idx].coord - atom_pos).heading()

    first = Vector2D.from_angle(back + 2.0 * math.pi / 3.0)
    second = Vector2D.from_angle(back + 4.0 * math.pi / 3.0)

    d_first = (atom_pos + first).distance(distance_measure)
    d_second = (atom_pos + second).distance(distance_measure)
    if d_second > d_first + 1e-9:
        return second
    return first


def place_linear_chain(
    mol: "Molecule",
    chain: "Chain",
    initial_direction: Vector2D,
    bond_length: float = BOND_LENGTH,
    hydrogen_scale: float = HYDROGEN_BOND_SCALE,
) -> None:
    """Lay out a chain as a zig-zag starting from its (placed) first atom.

    Each atom after the first is put one bond length along the current
    direction and flagged placed; the direction then turns by 120 degrees,
    away from the centroid of the chain atoms placed so far. Bonds with a
    hydrogen at either end are shortened by ``hydrogen_scale``, as in
    :func:`populate_polygon_corners`.

    Args:
        mol: Molecule owning the chain.
        chain: Chain whose first atom already has its coordinate.
        initial_direction: Direction of the first chain bond.
        bond_length: Distance between consecutive atoms.
        hydrogen_scale: Bond length factor for bonds to hydrogen.
    """
    atoms = chain.atoms
    direction = initial_direction
    for i in range(len(atoms) - 1):
        previous = mol.atoms[atoms[i]]
        current = mol.atoms[atoms[i + 1]]
        length = bond_length
        if previous.is_hydrogen or current.is_hydrogen:
            length *= hydrogen_scale
        current.coord = previous.coord + direction.scaled_to(length)
        current.flags.placed = True
        if i + 2 < len(atoms):
            direction = next_bond_vector(
                mol, current.idx, previous.idx, placed_center(mol, atoms),
            )
