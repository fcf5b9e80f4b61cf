"""
Placement of rings and ring systems.

A ring system is laid out ring by ring. The most connected ring is drawn
first as a regular polygon anchored on its first bond; every other ring
is then fitted onto the atoms it shares with rings already drawn:

- one shared atom: a spiro ring, grown away from the shared atom;
- two shared atoms: a fused ring on the other side of the shared bond;
- more shared atoms: a bridged ring closing over the shared chain along
  the arc that keeps its new atoms clear of everything already placed.

Ring systems after the first are laid out at the origin and then moved
onto their attachment bond with a rigid transform.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from ..exceptions import GeometryError
from ..geometry import EPSILON, TWO_PI, Transform2D, Vector2D, centroid
from ..rings.partition import direct_connected_rings
from .atom_placer import (
    distribute_partners,
    mark_not_placed,
    mark_placed,
    next_bond_vector,
    partition_partners,
    placed_center,
    populate_polygon_corners,
)
from .options import BOND_LENGTH, HYDROGEN_BOND_SCALE

if TYPE_CHECKING:
    from ..types import Molecule, Ring

logger = logging.getLogger(__name__)


@dataclass
class SharedFragment:
    """Atoms (and the bonds between them) a ring shares with placed rings."""

    atoms: list[int] = field(default_factory=list)
    bonds: list[int] = field(default_factory=list)

    def center(self, mol: "Molecule") -> Vector2D:
        return centroid(mol.atoms[idx].coord for idx in self.atoms)


def native_ring_radius(size: int, bond_length: float = BOND_LENGTH) -> float:
    """Circumradius of a regular polygon with ``size`` sides of ``bond_length``.

    Raises:
        GeometryError: If ``size`` is below 3 or ``bond_length`` is not positive.

    Example:
        >>> round(native_ring_radius(6, 1.5), 6)
        1.5
    """
    if size < 3:
        raise GeometryError(f"Ring size must be at least 3, got {size}")
    if bond_length <= 0:
        raise GeometryError(f"Bond length must be positive, got {bond_length}")
    return bond_length / (2.0 * math.sin(math.pi / size))


def get_ring_center_of_first_ring(
    ring: "Ring",
    bond_vector: Vector2D,
    bond_length: float = BOND_LENGTH,
) -> Vector2D:
    """Offset from the midpoint of the first bond to the ring center.

    The offset is perpendicular to ``bond_vector`` (rotated by +90 degrees)
    and as long as the apothem of the ring.
    """
    radius = native_ring_radius(len(ring), bond_length)
    height = math.sqrt(radius * radius - (bond_length / 2.0) ** 2)
    return Vector2D.from_angle(bond_vector.heading() + math.pi / 2.0, height)


def place_first_bond(
    mol: "Molecule",
    bond_idx: int,
    bond_vector: Vector2D,
    bond_length: float = BOND_LENGTH,
) -> list[int]:
    """Put a bond's source atom at the origin and its target along ``bond_vector``.

    Returns:
        The two atom indices, source first.
    """
    bond = mol.bonds[bond_idx]
    source = mol.atoms[bond.atom1_idx]
    target = mol.atoms[bond.atom2_idx]
    source.coord = Vector2D(0.0, 0.0)
    target.coord = bond_vector.scaled_to(bond_length)
    source.flags.placed = True
    target.flags.placed = True
    return [source.idx, target.idx]


def placed_fragment(mol: "Molecule", ring: "Ring") -> SharedFragment:
    """The ring's already-placed atoms and the ring bonds between them."""
    n = len(ring)
    placed = [mol.atoms[idx].flags.placed for idx in ring.atoms]
    return SharedFragment(
        atoms=[idx for idx, flag in zip(ring.atoms, placed) if flag],
        bonds=[ring.bonds[i] for i in range(n) if placed[i] and placed[(i + 1) % n]],
    )


def get_bridge_atoms(mol: "Molecule", fragment: SharedFragment) -> list[int]:
    """Ends of the shared chain: atoms with exactly one shared bond."""
    counts = {idx: 0 for idx in fragment.atoms}
    for bond_idx in fragment.bonds:
        bond = mol.bonds[bond_idx]
        for idx in (bond.atom1_idx, bond.atom2_idx):
            if idx in counts:
                counts[idx] += 1
    return [idx for idx in fragment.atoms if counts[idx] == 1]


def _longest_run_bounds(ring: "Ring", shared: set[int]) -> list[int]:
    """Shared atoms enclosing the longest stretch of unshared ring atoms."""
    atoms = ring.atoms
    n = len(atoms)
    best: list[int] = []
    best_length = -1
    for i, idx in enumerate(atoms):
        if idx not in shared or atoms[(i + 1) % n] in shared:
            continue
        j = (i + 1) % n
        length = 0
        while atoms[j] not in shared:
            length += 1
            j = (j + 1) % n
        if length > best_length:
            best, best_length = [idx, atoms[j]], length
    return best


def find_start_atom(mol: "Molecule", atom1_idx: int, atom2_idx: int) -> int:
    """Pick the bridge atom a ring walk starts from.

    For a vertical shared bond this is the atom with the larger y,
    otherwise the atom with the larger x.
    """
    p1 = mol.atoms[atom1_idx].coord
    p2 = mol.atoms[atom2_idx].coord
    if abs(p1.x - p2.x) < EPSILON:
        return atom1_idx if p1.y > p2.y else atom2_idx
    return atom1_idx if p1.x > p2.x else atom2_idx


def find_direction(start: Vector2D, other: Vector2D, side: Vector2D) -> int:
    """Angular direction (+1 counter-clockwise, -1 clockwise) of a ring walk.

    New atoms must end up on ``side`` of the line from ``start`` to
    ``other``; walking the long way round the ring center from ``start``
    achieves that in the returned direction.
    """
    return -1 if (other - start).cross(side) > 0 else 1


def atoms_in_placement_order(ring: "Ring", start_idx: int, shared: set[int]) -> list[int]:
    """Walk the ring from ``start_idx`` away from the shared atoms.

    Collects atoms in cycle order until the next shared atom is reached
    (for a spiro ring, until the walk returns to the start).
    """
    atoms = ring.atoms
    n = len(atoms)
    i = atoms.index(start_idx)
    step = 1 if atoms[(i + 1) % n] not in shared else -1
    order: list[int] = []
    j = (i + step) % n
    while atoms[j] not in shared:
        order.append(atoms[j])
        j = (j + step) % n
    return order


def _place_spiro_ring(
    mol: "Molecule",
    ring: "Ring",
    shared_idx: int,
    ring_center_vector: Vector2D,
    bond_length: float,
) -> None:
    radius = native_ring_radius(len(ring), bond_length)
    shared_pos = mol.atoms[shared_idx].coord
    direction = ring_center_vector if not ring_center_vector.is_zero() else Vector2D(1.0, 0.0)
    center = shared_pos + direction.scaled_to(radius)
    start_angle = (shared_pos - center).heading()
    order = atoms_in_placement_order(ring, shared_idx, {shared_idx})
    populate_polygon_corners(mol, order, center, start_angle, TWO_PI / len(ring), radius)


def _place_fused_ring(
    mol: "Molecule",
    ring: "Ring",
    bridge: Sequence[int],
    shared: set[int],
    midpoint: Vector2D,
    ring_center_vector: Vector2D,
    bond_length: float,
) -> None:
    p1 = mol.atoms[bridge[0]].coord
    p2 = mol.atoms[bridge[1]].coord
    chord = p2 - p1
    half = chord.length() / 2.0
    if half < EPSILON:
        _place_spiro_ring(mol, ring, bridge[0], ring_center_vector, bond_length)
        return

    radius = max(native_ring_radius(len(ring), bond_length), half)
    side = chord.perpendicular().normalized()
    if side.dot(ring_center_vector) < 0:
        side = -side
    height = math.sqrt(max(radius * radius - half * half, 0.0))
    center = midpoint + side * height

    start_idx = find_start_atom(mol, bridge[0], bridge[1])
    other_idx = bridge[1] if start_idx == bridge[0] else bridge[0]
    start_pos = mol.atoms[start_idx].coord
    other_pos = mol.atoms[other_idx].coord
    sign = find_direction(start_pos, other_pos, side)

    order = atoms_in_placement_order(ring, start_idx, shared)
    if not order:
        return
    occupied = (start_pos - center).angle(other_pos - center)
    increment = sign * (TWO_PI - occupied) / (len(order) + 1)
    start_angle = (start_pos - center).heading()
    populate_polygon_corners(mol, order, center, start_angle, increment, radius)


def arc_step_angle(chord: float, steps: int, bond_length: float = BOND_LENGTH) -> float | None:
    """Central angle per bond of an arc spanning ``chord`` in ``steps`` bonds.

    Every bond along the arc is ``bond_length`` long. Returns None when the
    chord is too long for the bonds to reach.

    Example:
        >>> round(math.degrees(arc_step_angle(3.0, 3, 1.5)), 6)
        60.0
    """
    if chord >= steps * bond_length - EPSILON:
        return None
    target = chord / bond_length
    low, high = 0.0, TWO_PI / steps
    # sin(n x / 2) / sin(x / 2) falls monotonically from n to 0 on (0, 2 pi / n)
    for _ in range(100):
        mid = (low + high) / 2.0
        if math.sin(steps * mid / 2.0) / math.sin(mid / 2.0) > target:
            low = mid
        else:
            high = mid
    return (low + high) / 2.0


def arc_points(
    start: Vector2D,
    end: Vector2D,
    side: Vector2D,
    sweep: float,
    count: int,
) -> list[Vector2D]:
    """``count`` points spaced evenly on an arc from ``start`` to ``end``.

    The arc spans ``sweep`` radians and bulges towards ``side``; a zero
    sweep gives points on the straight segment.
    """
    steps = count + 1
    if sweep < EPSILON:
        return [start + (end - start) * (k / steps) for k in range(1, steps)]

    half = start.distance(end) / 2.0
    radius = half / math.sin(sweep / 2.0)
    side = side.normalized()
    center = (start + end) / 2.0 - side * (radius * math.cos(sweep / 2.0))
    apex = center + side * radius
    start_angle = (start - center).heading()

    forward = center + Vector2D.from_angle(start_angle + sweep / 2.0, radius)
    backward = center + Vector2D.from_angle(start_angle - sweep / 2.0, radius)
    sign = 1.0 if forward.distance(apex) <= backward.distance(apex) else -1.0
    step = sign * sweep / steps
    return [
        center + Vector2D.from_angle(start_angle + k * step, radius)
        for k in range(1, steps)
    ]


def _clearance(points: Sequence[Vector2D], placed: Sequence[Vector2D]) -> float:
    """Smallest distance from a new point to a placed one or to another new one."""
    best = math.inf
    for i, point in enumerate(points):
        for other in placed:
            best = min(best, point.distance(other))
        for other in points[i + 1:]:
            best = min(best, point.distance(other))
    return best


def _bridge_path(ring: "Ring", start_idx: int, end_idx: int, shared: set[int]) -> list[int]:
    """Unshared ring atoms walked from ``start_idx`` until ``end_idx``."""
    atoms = ring.atoms
    n = len(atoms)
    i = atoms.index(start_idx)
    for step in (1, -1):
        path: list[int] = []
        j = (i + step) % n
        while atoms[j] not in shared:
            path.append(atoms[j])
            j = (j + step) % n
        if path and atoms[j] == end_idx:
            return path
    return []


def _place_bridged_ring(
    mol: "Molecule",
    ring: "Ring",
    bridge: Sequence[int],
    shared: set[int],
    ring_center_vector: Vector2D,
    bond_length: float,
) -> None:
    start_idx, end_idx = bridge
    path = _bridge_path(ring, start_idx, end_idx, shared)
    if not path:
        bounds = _longest_run_bounds(ring, shared)
        if len(bounds) != 2 or set(bounds) == {start_idx, end_idx}:
            return
        start_idx, end_idx = bounds
        path = _bridge_path(ring, start_idx, end_idx, shared)

    start = mol.atoms[start_idx].coord
    end = mol.atoms[end_idx].coord
    chord = end - start
    if chord.length() < EPSILON:
        _place_spiro_ring(mol, ring, start_idx, ring_center_vector, bond_length)
        return

    side = chord.perpendicular().normalized()
    if side.dot(ring_center_vector) < 0:
        side = -side

    candidates: list[list[Vector2D]] = []
    step = arc_step_angle(chord.length(), len(path) + 1, bond_length)
    if step is not None:
        sweep = step * (len(path) + 1)
        for fraction in (1.0, 0.75, 0.5, 0.25):
            for direction in (side, -side):
                candidates.append(arc_points(start, end, direction, sweep * fraction, len(path)))
    candidates.append(arc_points(start, end, side, 0.0, len(path)))

    placed = [atom.coord for atom in mol.atoms if atom.flags.placed]
    best = candidates[0]
    best_clearance = _clearance(best, placed)
    for points in candidates[1:]:
        clearance = _clearance(points, placed)
        if clearance > best_clearance + 1e-9:
            best, best_clearance = points, clearance

    for idx, point in zip(path, best):
        mol.atoms[idx].coord = point
    mark_placed(mol, path)


def place_ring(
    mol: "Molecule",
    ring: "Ring",
    fragment: SharedFragment,
    shared_center: Vector2D,
    ring_center_vector: Vector2D,
    bond_length: float = BOND_LENGTH,
) -> None:
    """Place the unplaced atoms of a ring around its shared fragment.

    Dispatches on the number of shared atoms: one gives a spiro ring, two
    a fused ring, more a bridged ring. Shared atoms keep their
    coordinates.

    Args:
        mol: Molecule owning the ring.
        ring: Ring to place.
        fragment: Already-placed atoms the ring shares.
        shared_center: Centroid of the shared atoms.
        ring_center_vector: Direction from the shared atoms towards the
            new ring's center.
        bond_length: Side length of the polygon.
    """
    shared = set(fragment.atoms)
    if not shared:
        return
    if len(shared) == 1:
        _place_spiro_ring(mol, ring, fragment.atoms[0], ring_center_vector, bond_length)
        return

    if len(shared) == 2:
        _place_fused_ring(
            mol, ring, fragment.atoms, shared, shared_center, ring_center_vector, bond_length,
        )
        return

    bridge = get_bridge_atoms(mol, fragment)
    if len(bridge) != 2:
        bridge = _longest_run_bounds(ring, shared)
    if len(bridge) != 2:
        return
    _place_bridged_ring(mol, ring, bridge, shared, ring_center_vector, bond_length)


def ring_complexity(ring: "Ring", ring_set: Sequence["Ring"]) -> int:
    """Number of atoms ``ring`` shares with the other rings of its set."""
    return sum(len(ring.shared_atoms(other)) for other in ring_set if other is not ring)


def _place_connected_ring(
    mol: "Molecule",
    placed_ring: "Ring",
    ring: "Ring",
    bond_length: float,
) -> None:
    for _ in range(len(ring)):
        fragment = placed_fragment(mol, ring)
        unplaced = len(ring) - len(fragment.atoms)
        if unplaced == 0:
            return
        shared_center = fragment.center(mol)
        direction = shared_center - placed_ring.center(mol)
        place_ring(mol, ring, fragment, shared_center, direction, bond_length)
        if len(placed_fragment(mol, ring).atoms) == len(ring) - unplaced:
            return


def layout_ring_set(
    mol: "Molecule",
    ring_set: Sequence["Ring"],
    bond_vector: Vector2D,
    bond_length: float = BOND_LENGTH,
) -> None:
    """Lay out all rings of one ring system.

    The ring sharing the most atoms with the others goes first; if none
    of its atoms is placed it is anchored at the origin on its first bond.
    Rings touching a placed ring are then placed from a work queue until
    the whole system is drawn. Every ring ends with ``placed`` set.

    Args:
        mol: Molecule owning the rings.
        ring_set: Rings of one ring system.
        bond_vector: Direction of the anchoring bond.
        bond_length: Side length of every polygon.
    """
    if not ring_set:
        return
    ordered = sorted(ring_set, key=lambda r: ring_complexity(r, ring_set), reverse=True)
    first = ordered[0]

    fragment = placed_fragment(mol, first)
    if not fragment.atoms:
        bond = mol.bonds[first.bonds[0]]
        place_first_bond(mol, bond.idx, bond_vector, bond_length)
        fragment = SharedFragment([bond.atom1_idx, bond.atom2_idx], [bond.idx])
        ring_center_vector = get_ring_center_of_first_ring(first, bond_vector, bond_length)
    else:
        outside = [
            atom.coord for atom in mol.atoms
            if atom.flags.placed and atom.idx not in first
        ]
        if outside:
            ring_center_vector = fragment.center(mol) - centroid(outside)
        else:
            ring_center_vector = bond_vector.perpendicular()

    place_ring(mol, first, fragment, fragment.center(mol), ring_center_vector, bond_length)
    first.placed = True

    queue = deque([first])
    while queue:
        ring = queue.popleft()
        for other in direct_connected_rings(ring, ordered):
            if other.placed:
                continue
            _place_connected_ring(mol, ring, other, bond_length)
            other.placed = True
            queue.append(other)


def place_ring_substituents(
    mol: "Molecule",
    ring_set: Sequence["Ring"],
    bond_length: float = BOND_LENGTH,
    hydrogen_scale: float = HYDROGEN_BOND_SCALE,
) -> list[int]:
    """Spread the non-ring neighbors of every ring-system atom.

    Each substituent is marked unplaced first and then distributed around
    its ring atom, pointing away from the centroid of the rings that
    contain that atom.

    Returns:
        Indices of the substituent atoms placed.
    """
    system_atoms = {idx for ring in ring_set for idx in ring.atoms}
    treated: list[int] = []
    seen: set[int] = set()

    for ring in ring_set:
        for atom_idx in ring.atoms:
            if atom_idx in seen:
                continue
            seen.add(atom_idx)
            neighbors = list(mol.atoms[atom_idx].neighbors(mol))
            substituents = [idx for idx in neighbors if idx not in system_atoms]
            if not substituents:
                continue
            placed = [idx for idx in neighbors if idx in system_atoms]
            cluster = {idx for r in ring_set if atom_idx in r for idx in r.atoms}
            center = centroid(mol.atoms[idx].coord for idx in sorted(cluster))

            mark_not_placed(mol, substituents)
            distribute_partners(
                mol, atom_idx, placed, center, substituents, bond_length, hydrogen_scale,
            )
            treated.extend(substituents)

    return treated


def release_pending_ring_atoms(mol: "Molecule", rings: Sequence["Ring"]) -> None:
    """Clear ``placed`` on atoms of rings that have not been laid out.

    Chains and substituents may reach into a ring system that is still to
    come; those positions only served to find a direction.
    """
    for ring in rings:
        if not ring.placed:
            mark_not_placed(mol, ring.atoms)


def _next_ring_attachment(
    mol: "Molecule",
    ring_systems: Sequence[Sequence["Ring"]],
) -> tuple[int, int, Sequence["Ring"]] | None:
    system_of: dict[int, Sequence["Ring"]] = {}
    for system in ring_systems:
        if all(ring.placed for ring in system):
            continue
        for ring in system:
            for idx in ring.atoms:
                system_of[idx] = system

    for bond in mol.bonds:
        for anchor_idx, ring_idx in (
            (bond.atom1_idx, bond.atom2_idx),
            (bond.atom2_idx, bond.atom1_idx),
        ):
            system = system_of.get(ring_idx)
            if system is None or anchor_idx in system_of:
                continue
            if mol.atoms[anchor_idx].flags.placed and not mol.atoms[ring_idx].flags.placed:
                return anchor_idx, ring_idx, system
    return None


def _attachment_direction(
    mol: "Molecule",
    anchor_idx: int,
    ring_atom_idx: int,
    bond_vector: Vector2D,
    bond_length: float,
    hydrogen_scale: float,
) -> Vector2D:
    unplaced, placed = partition_partners(mol, anchor_idx)
    anchor_pos = mol.atoms[anchor_idx].coord
    if len(placed) >= 2:
        distribute_partners(
            mol, anchor_idx, placed, placed_center(mol, placed), unplaced,
            bond_length, hydrogen_scale,
        )
        return mol.atoms[ring_atom_idx].coord - anchor_pos
    if len(placed) == 1:
        everything = placed_center(mol, range(mol.num_atoms))
        return next_bond_vector(mol, anchor_idx, placed[0], everything)
    return bond_vector


def layout_next_ring_system(
    mol: "Molecule",
    ring_systems: Sequence[Sequence["Ring"]],
    bond_vector: Vector2D,
    bond_length: float = BOND_LENGTH,
    hydrogen_scale: float = HYDROGEN_BOND_SCALE,
) -> bool:
    """Attach one more ring system to the placed part of the molecule.

    Looks for the first bond joining a placed atom (the anchor) to an
    atom of a ring system not yet drawn. The system is laid out from
    scratch at the origin together with its substituents, the anchor
    among them, and then moved rigidly so that its copy of the anchor
    lands on the real anchor and the attachment bond points along the
    direction the anchor's placed neighbors leave free.

    Args:
        mol: Molecule being laid out.
        ring_systems: All ring systems of the molecule.
        bond_vector: Anchoring direction for the fresh layout.
        bond_length: Bond length.
        hydrogen_scale: Radius factor for hydrogen substituents.

    Returns:
        True if a ring system was placed, False if none is left to attach.
    """
    attachment = _next_ring_attachment(mol, ring_systems)
    if attachment is None:
        return False
    anchor_idx, ring_atom_idx, system = attachment
    anchor = mol.atoms[anchor_idx]
    old_anchor = anchor.coord

    direction = _attachment_direction(
        mol, anchor_idx, ring_atom_idx, bond_vector, bond_length, hydrogen_scale,
    )

    system_atoms = sorted({idx for ring in system for idx in ring.atoms})
    mark_not_placed(mol, system_atoms)
    layout_ring_set(mol, system, bond_vector, bond_length)
    substituents = place_ring_substituents(mol, system, bond_length, hydrogen_scale)

    new_anchor = anchor.coord
    new_bond = mol.atoms[ring_atom_idx].coord - new_anchor
    theta = direction.heading() - new_bond.heading()
    transform = (
        Transform2D.translation(-new_anchor)
        .then(Transform2D.rotation(theta))
        .then(Transform2D.translation(old_anchor))
    )
    for idx in system_atoms + substituents:
        if idx != anchor_idx:
            atom = mol.atoms[idx]
            atom.coord = transform.apply(atom.coord)

    anchor.coord = old_anchor
    anchor.flags.placed = True
    logger.debug(
        "attached ring system of %d rings via bond %d-%d",
        len(system), anchor_idx, ring_atom_idx,
    )
    return True
