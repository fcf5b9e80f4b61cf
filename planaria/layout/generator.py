"""
2D coordinate generation.

The generator draws the largest ring system first (or, for acyclic
molecules, the longest chain), then alternates between growing chains off
placed atoms and attaching further ring systems until every atom has a
position.

    >>> from planaria import parse, generate_coordinates
    >>> mol = generate_coordinates(parse("CCO"))
    >>> mol.all_placed
    True
    >>> round(mol[0].coord.distance(mol[1].coord), 6)
    1.5
"""

from __future__ import annotations

import logging
import warnings
from typing import TYPE_CHECKING

from ..exceptions import DisconnectedMoleculeError, IncompleteLayoutWarning
from ..geometry import Vector2D
from ..graph import initial_longest_chain, longest_unplaced_chain
from ..rings.partition import partition_rings
from .atom_placer import (
    distribute_partners,
    mark_not_placed,
    next_bond_vector,
    partition_partners,
    place_linear_chain,
    placed_center,
)
from .options import LayoutOptions
from .ring_placer import (
    layout_next_ring_system,
    layout_ring_set,
    place_ring_substituents,
    release_pending_ring_atoms,
)

if TYPE_CHECKING:
    from ..types import Molecule, Ring

logger = logging.getLogger(__name__)


class CoordinateGenerator:
    """Computes 2D depiction coordinates for a connected molecule.

    The generator keeps no state between runs; one instance can lay out
    any number of molecules in turn.

    Args:
        options: Layout parameters; defaults to :class:`LayoutOptions`.

    Example:
        >>> from planaria import parse
        >>> mol = CoordinateGenerator().generate(parse("c1ccccc1"))
        >>> mol.all_placed
        True
    """

    def __init__(self, options: LayoutOptions | None = None) -> None:
        self.options = options if options is not None else LayoutOptions()

    def generate(self, mol: "Molecule") -> "Molecule":
        """Lay out ``mol`` in place and return it.

        Raises:
            DisconnectedMoleculeError: If the molecule has more than one
                fragment. Nothing is modified in that case.

        Warns:
            IncompleteLayoutWarning: If some atoms could not be placed; the
                partial layout is kept and ``mol.all_placed`` is False.
        """
        if mol.fragment_count > 1:
            raise DisconnectedMoleculeError(mol.fragment_count)
        if mol.num_atoms == 0:
            return mol

        mol.reset_layout_flags()
        options = self.options

        if mol.num_atoms == 1:
            atom = mol.atoms[0]
            atom.coord = Vector2D(0.0, 0.0)
            atom.flags.placed = True
            atom.flags.aliphatic = True
            return mol

        rings: list["Ring"] = []
        ring_systems: list[list["Ring"]] = []
        expected_ring_count = mol.num_bonds - mol.num_atoms + 1
        if expected_ring_count > 0:
            rings = mol.rings
            ring_systems = partition_rings(rings)

        for ring in rings:
            for idx in ring.atoms:
                mol.atoms[idx].flags.in_ring = True
        for atom in mol.atoms:
            atom.flags.aliphatic = not atom.flags.in_ring

        if ring_systems:
            largest = sorted(ring_systems, key=len)[-1]
            logger.debug(
                "placing first ring system: %d of %d rings",
                len(largest), len(rings),
            )
            layout_ring_set(mol, largest, options.first_bond_vector, options.bond_length)
            place_ring_substituents(
                mol, largest, options.bond_length, options.hydrogen_scale,
            )
            for ring in largest:
                ring.placed = True
            release_pending_ring_atoms(mol, rings)
        else:
            chain = initial_longest_chain(mol)
            first = mol.atoms[chain.atoms[0]]
            first.coord = Vector2D(0.0, 0.0)
            first.flags.placed = True
            logger.debug("placing initial chain of %d atoms", len(chain))
            place_linear_chain(
                mol, chain, options.first_bond_vector,
                options.bond_length, options.hydrogen_scale,
            )

        iterations = 0
        while not mol.all_placed and iterations < mol.num_atoms:
            iterations += 1
            self._handle_aliphatics(mol, rings)
            if layout_next_ring_system(
                mol, ring_systems, options.first_bond_vector,
                options.bond_length, options.hydrogen_scale,
            ):
                release_pending_ring_atoms(mol, rings)
        logger.debug("layout loop finished after %d iterations", iterations)

        if not mol.all_placed:
            missing = sum(1 for atom in mol.atoms if not atom.flags.placed)
            warnings.warn(
                f"Layout stopped with {missing} of {mol.num_atoms} atoms unplaced",
                IncompleteLayoutWarning,
                stacklevel=2,
            )
        return mol

    def _next_atom_with_aliphatic_unplaced_neighbors(self, mol: "Molecule") -> int | None:
        """Placed end of the first bond leading to an unplaced chain atom."""
        for bond in mol.bonds:
            a1 = mol.atoms[bond.atom1_idx]
            a2 = mol.atoms[bond.atom2_idx]
            if a1.flags.placed and not a2.flags.placed and not a2.flags.in_ring:
                return a1.idx
            if a2.flags.placed and not a1.flags.placed and not a1.flags.in_ring:
                return a2.idx
        return None

    def _handle_aliphatics(self, mol: "Molecule", rings: list["Ring"]) -> None:
        """Grow zig-zag chains from placed atoms until none is left to grow."""
        options = self.options
        for _ in range(mol.num_atoms):
            anchor_idx = self._next_atom_with_aliphatic_unplaced_neighbors(mol)
            if anchor_idx is None:
                return
            chain = longest_unplaced_chain(mol, anchor_idx)
            if len(chain) < 2:
                return

            anchor = mol.atoms[anchor_idx]
            unplaced, placed = partition_partners(mol, anchor_idx)
            if len(placed) > 1:
                distribute_partners(
                    mol, anchor_idx, placed, placed_center(mol, placed), unplaced,
                    options.bond_length, options.hydrogen_scale,
                )
                direction = mol.atoms[chain.atoms[1]].coord - anchor.coord
            elif placed:
                everything = placed_center(mol, range(mol.num_atoms))
                direction = next_bond_vector(mol, anchor_idx, placed[0], everything)
            else:
                direction = options.first_bond_vector

            mark_not_placed(mol, chain.atoms[1:])
            place_linear_chain(
                mol, chain, direction, options.bond_length, options.hydrogen_scale,
            )
            release_pending_ring_atoms(mol, rings)


def generate_coordinates(
    mol: "Molecule",
    options: LayoutOptions | None = None,
) -> "Molecule":
    """Compute 2D coordinates for a connected molecule, in place.

    Args:
        mol: Molecule to lay out.
        options: Layout parameters.

    Returns:
        The same molecule.

    Raises:
        DisconnectedMoleculeError: If the molecule has several fragments.
    """
    return CoordinateGenerator(options).generate(mol)


def layout_fragments(
    mol: "Molecule",
    options: LayoutOptions | None = None,
    spacing: float | None = None,
) -> "Molecule":
    """Lay out every fragment of a molecule and line them up left to right.

    Each connected component is laid out on its own; components are then
    shifted so their bounding boxes sit side by side, ``spacing`` apart
    (two bond lengths by default), bottoms aligned.

    Args:
        mol: Molecule with one or more fragments.
        options: Layout parameters.
        spacing: Horizontal gap between fragments.

    Returns:
        The same molecule, with coordinates and flags filled in.

    Example:
        >>> from planaria import parse
        >>> mol = layout_fragments(parse("CC.O"))
        >>> mol[2].x > max(mol[0].x, mol[1].x)
        True
    """
    generator = CoordinateGenerator(options)
    if spacing is None:
        spacing = 2.0 * generator.options.bond_length

    cursor = 0.0
    for component, fragment in zip(mol.connected_components(), mol.get_fragments()):
        generator.generate(fragment)
        min_x, min_y, max_x, _ = fragment.bounding_box()
        offset = Vector2D(cursor - min_x, -min_y)
        for new_idx, old_idx in enumerate(component):
            source = fragment.atoms[new_idx]
            target = mol.atoms[old_idx]
            target.coord = source.coord + offset
            target.flags.placed = source.flags.placed
            target.flags.visited = source.flags.visited
            target.flags.in_ring = source.flags.in_ring
            target.flags.aliphatic = source.flags.aliphatic
        cursor += (max_x - min_x) + spacing
    return mol
