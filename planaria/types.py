"""
Core molecular data types.

This module defines the graph model the layout engine works on: Atom, Bond,
Molecule and Ring, plus the per-atom layout flags. Atoms refer to their
bonds by index and bonds refer to their atoms by index; the molecule owns
both lists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator

from .elements import BondOrder, get_atomic_number, is_hydrogen
from .exceptions import RingError
from .geometry import Vector2D, centroid

if TYPE_CHECKING:
    from typing import Self


@dataclass(slots=True)
class LayoutFlags:
    """Per-atom bookkeeping for the coordinate generator.

    Attributes:
        placed: Atom has its final coordinate.
        visited: Atom was reached by a chain search.
        in_ring: Atom belongs to a ring of the SSSR.
        aliphatic: Atom is not part of any ring.
    """

    placed: bool = False
    visited: bool = False
    in_ring: bool = False
    aliphatic: bool = False

    def reset(self) -> None:
        self.placed = False
        self.visited = False
        self.in_ring = False
        self.aliphatic = False


@dataclass(slots=True)
class Bond:
    """Represents a chemical bond between two atoms.

    Attributes:
        idx: Unique index of this bond in the molecule.
        atom1_idx: Index of the source atom.
        atom2_idx: Index of the target atom.
        order: Bond order (1=single, 2=double, 3=triple, 4=quadruple).
        is_aromatic: Whether this bond is aromatic.
        stereo: Stereochemistry marker ('/' or '\\' for E/Z).
    """

    idx: int
    atom1_idx: int
    atom2_idx: int
    order: int = BondOrder.SINGLE
    is_aromatic: bool = False
    stereo: str | None = None

    def other_atom(self, atom_idx: int) -> int:
        """Get the index of the atom on the other end of this bond.

        Args:
            atom_idx: Index of one atom in the bond.

        Returns:
            Index of the other atom.

        Raises:
            ValueError: If atom_idx is not part of this bond.
        """
        if atom_idx == self.atom1_idx:
            return self.atom2_idx
        if atom_idx == self.atom2_idx:
            return self.atom1_idx
        raise ValueError(f"Atom {atom_idx} not in bond {self.idx}")

    @property
    def bond_order(self) -> BondOrder:
        """Get bond order as enum."""
        return BondOrder(self.order)

    def __contains__(self, atom_idx: int) -> bool:
        """Check if atom is part of this bond."""
        return atom_idx in (self.atom1_idx, self.atom2_idx)


@dataclass(slots=True)
class Atom:
    """Represents an atom in a molecule.

    Attributes:
        idx: Unique index of this atom in the molecule.
        symbol: Element symbol (e.g., "C", "N", "Cl").
        charge: Formal charge.
        explicit_hydrogens: Hydrogen count from bracket notation.
        is_aromatic: Whether this atom is aromatic.
        isotope: Mass number, or None for natural abundance.
        x: Horizontal drawing coordinate.
        y: Vertical drawing coordinate.
        bond_indices: Indices of bonds connected to this atom.
        flags: Layout bookkeeping flags.
    """

    idx: int
    symbol: str
    charge: int = 0
    explicit_hydrogens: int = 0
    is_aromatic: bool = False
    isotope: int | None = None
    x: float = 0.0
    y: float = 0.0
    bond_indices: list[int] = field(default_factory=list)
    flags: LayoutFlags = field(default_factory=LayoutFlags)

    @property
    def atomic_number(self) -> int:
        """Get the atomic number for this element."""
        return get_atomic_number(self.symbol)

    @property
    def is_hydrogen(self) -> bool:
        return is_hydrogen(self.symbol)

    @property
    def coord(self) -> Vector2D:
        """The atom position as a vector."""
        return Vector2D(self.x, self.y)

    @coord.setter
    def coord(self, point: Vector2D) -> None:
        self.x = point.x
        self.y = point.y

    def degree(self) -> int:
        """Number of bonds to this atom."""
        return len(self.bond_indices)

    def neighbors(self, mol: Molecule) -> Iterator[int]:
        """Iterate over indices of neighboring atoms.

        Args:
            mol: Parent molecule.

        Yields:
            Indices of atoms bonded to this atom.
        """
        for bond_idx in self.bond_indices:
            yield mol.bonds[bond_idx].other_atom(self.idx)

    def get_bonds(self, mol: Molecule) -> Iterator[Bond]:
        """Iterate over bonds connected to this atom."""
        for bond_idx in self.bond_indices:
            yield mol.bonds[bond_idx]


@dataclass(eq=False)
class Ring:
    """An elementary ring from the SSSR.

    Atoms are stored in cycle order and bonds in matching order, so
    ``bonds[i]`` joins ``atoms[i]`` and ``atoms[(i + 1) % size]``.
    Rings compare by identity.

    Attributes:
        atoms: Atom indices in cycle order.
        bonds: Bond indices in cycle order.
        placed: Whether the layout engine has drawn this ring.
    """

    atoms: list[int]
    bonds: list[int]
    placed: bool = False

    def __post_init__(self) -> None:
        if len(self.atoms) != len(self.bonds):
            raise RingError(
                f"Ring has {len(self.atoms)} atoms but {len(self.bonds)} bonds"
            )

    def __len__(self) -> int:
        return len(self.atoms)

    def __contains__(self, atom_idx: int) -> bool:
        return atom_idx in self.atoms

    @property
    def size(self) -> int:
        return len(self.atoms)

    def shared_atoms(self, other: Ring) -> list[int]:
        """Atoms of this ring that also belong to ``other``, in cycle order."""
        others = set(other.atoms)
        return [a for a in self.atoms if a in others]

    def center(self, mol: Molecule) -> Vector2D:
        """Centroid of the ring's current atom coordinates."""
        return centroid(mol.atoms[a].coord for a in self.atoms)


@dataclass
class Molecule:
    """Represents a molecular structure.

    A molecule consists of atoms connected by bonds. Besides building and
    querying the graph, it tracks connected fragments incrementally and
    caches its smallest set of smallest rings.

    Attributes:
        atoms: List of atoms in the molecule.
        bonds: List of bonds in the molecule.
        name: Optional molecule name/identifier.

    Example:
        >>> mol = Molecule()
        >>> c1 = mol.add_atom("C")
        >>> c2 = mol.add_atom("C")
        >>> mol.fragment_count
        2
        >>> mol.add_bond(c1, c2)
        0
        >>> mol.fragment_count
        1
    """

    atoms: list[Atom] = field(default_factory=list)
    bonds: list[Bond] = field(default_factory=list)
    name: str | None = None
    _fragment_ids: list[int] = field(default_factory=list, repr=False, compare=False)
    _next_fragment: int = field(default=0, repr=False, compare=False)
    _fragment_count: int = field(default=0, repr=False, compare=False)
    _rings: list[Ring] | None = field(default=None, repr=False, compare=False)

    def __len__(self) -> int:
        """Return number of atoms."""
        return len(self.atoms)

    def __iter__(self) -> Iterator[Atom]:
        return iter(self.atoms)

    def __getitem__(self, idx: int) -> Atom:
        return self.atoms[idx]

    @property
    def num_atoms(self) -> int:
        return len(self.atoms)

    @property
    def num_bonds(self) -> int:
        return len(self.bonds)

    @property
    def fragment_count(self) -> int:
        """Number of disconnected fragments."""
        return self._fragment_count

    def is_connected(self) -> bool:
        return self._fragment_count <= 1

    def add_atom(
        self,
        symbol: str,
        *,
        charge: int = 0,
        explicit_hydrogens: int = 0,
        is_aromatic: bool = False,
        isotope: int | None = None,
        x: float = 0.0,
        y: float = 0.0,
    ) -> int:
        """Add an atom to the molecule.

        Every new atom starts out as its own fragment.

        Returns:
            Index of the newly added atom.
        """
        idx = len(self.atoms)
        self.atoms.append(Atom(
            idx=idx,
            symbol=symbol,
            charge=charge,
            explicit_hydrogens=explicit_hydrogens,
            is_aromatic=is_aromatic,
            isotope=isotope,
            x=x,
            y=y,
        ))
        self._fragment_ids.append(self._next_fragment)
        self._next_fragment += 1
        self._fragment_count += 1
        self._rings = None
        return idx

    def add_bond(
        self,
        atom1_idx: int,
        atom2_idx: int,
        *,
        order: int = BondOrder.SINGLE,
        is_aromatic: bool = False,
        stereo: str | None = None,
    ) -> int:
        """Add a bond between two atoms.

        Joining two fragments relabels the second one and decrements the
        fragment count.

        Args:
            atom1_idx: Index of the source atom.
            atom2_idx: Index of the target atom.
            order: Bond order.
            is_aromatic: Whether bond is aromatic.
            stereo: Stereochemistry marker.

        Returns:
            Index of the newly added bond.

        Raises:
            IndexError: If atom indices are out of bounds.
            ValueError: If both indices name the same atom.
        """
        n = len(self.atoms)
        if not (0 <= atom1_idx < n and 0 <= atom2_idx < n):
            raise IndexError(f"Atom index out of bounds: {atom1_idx}, {atom2_idx}")
        if atom1_idx == atom2_idx:
            raise ValueError(f"Cannot bond atom {atom1_idx} to itself")

        idx = len(self.bonds)
        self.bonds.append(Bond(
            idx=idx,
            atom1_idx=atom1_idx,
            atom2_idx=atom2_idx,
            order=order,
            is_aromatic=is_aromatic,
            stereo=stereo,
        ))
        self.atoms[atom1_idx].bond_indices.append(idx)
        self.atoms[atom2_idx].bond_indices.append(idx)

        keep = self._fragment_ids[atom1_idx]
        merge = self._fragment_ids[atom2_idx]
        if keep != merge:
            self._fragment_ids = [
                keep if frag == merge else frag for frag in self._fragment_ids
            ]
            self._fragment_count -= 1
        self._rings = None
        return idx

    def get_bond_between(self, atom1_idx: int, atom2_idx: int) -> Bond | None:
        """Find the bond between two atoms, or None."""
        for bond_idx in self.atoms[atom1_idx].bond_indices:
            bond = self.bonds[bond_idx]
            if atom2_idx in bond:
                return bond
        return None

    def connected_bonds(self, atom_idx: int) -> list[Bond]:
        """Bonds incident to an atom."""
        return list(self.atoms[atom_idx].get_bonds(self))

    def neighbors(self, atom_idx: int) -> list[int]:
        """Indices of atoms bonded to an atom."""
        return list(self.atoms[atom_idx].neighbors(self))

    def connected_components(self) -> list[list[int]]:
        """Find connected components in the molecule.

        Returns:
            List of components, each being a sorted list of atom indices,
            ordered by their lowest atom index.
        """
        visited: set[int] = set()
        components: list[list[int]] = []

        for start in range(len(self.atoms)):
            if start in visited:
                continue
            component: list[int] = []
            stack = [start]
            visited.add(start)
            while stack:
                atom_idx = stack.pop()
                component.append(atom_idx)
                for neighbor in self.atoms[atom_idx].neighbors(self):
                    if neighbor not in visited:
                        visited.add(neighbor)
                        stack.append(neighbor)
            components.append(sorted(component))

        return components

    def get_fragments(self) -> list[Molecule]:
        """Split into one new molecule per connected component.

        Fragments come in the order of :meth:`connected_components`, and
        atom ``i`` of a fragment corresponds to the ``i``-th index of its
        component. Coordinates are copied; layout flags are not.
        """
        fragments: list[Molecule] = []
        for component in self.connected_components():
            fragment = Molecule(name=self.name)
            mapping: dict[int, int] = {}
            for old_idx in component:
                atom = self.atoms[old_idx]
                mapping[old_idx] = fragment.add_atom(
                    atom.symbol,
                    charge=atom.charge,
                    explicit_hydrogens=atom.explicit_hydrogens,
                    is_aromatic=atom.is_aromatic,
                    isotope=atom.isotope,
                    x=atom.x,
                    y=atom.y,
                )
            for bond in self.bonds:
                if bond.atom1_idx in mapping:
                    fragment.add_bond(
                        mapping[bond.atom1_idx],
                        mapping[bond.atom2_idx],
                        order=bond.order,
                        is_aromatic=bond.is_aromatic,
                        stereo=bond.stereo,
                    )
            fragments.append(fragment)
        return fragments

    @property
    def rings(self) -> list[Ring]:
        """Smallest set of smallest rings, computed on first access.

        The cache is dropped whenever an atom or bond is added. Ring
        ``placed`` flags live on these cached objects.
        """
        if self._rings is None:
            from .rings.detection import find_sssr

            self._rings = find_sssr(self)
        return self._rings

    def is_atom_in_ring(self, atom_idx: int) -> bool:
        return any(atom_idx in ring for ring in self.rings)

    def is_bond_in_ring(self, bond_idx: int) -> bool:
        return any(bond_idx in ring.bonds for ring in self.rings)

    def reset_layout_flags(self) -> None:
        """Clear every atom's layout flags and every ring's placed flag."""
        for atom in self.atoms:
            atom.flags.reset()
        if self._rings is not None:
            for ring in self._rings:
                ring.placed = False

    @property
    def all_placed(self) -> bool:
        """True once every atom has been given a coordinate by the layout."""
        return all(atom.flags.placed for atom in self.atoms)

    def center(self) -> Vector2D:
        """Centroid of all atom coordinates (origin for an empty molecule)."""
        if not self.atoms:
            return Vector2D()
        return centroid(atom.coord for atom in self.atoms)

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Return ``(min_x, min_y, max_x, max_y)`` over all atoms.

        Raises:
            ValueError: If the molecule has no atoms.
        """
        if not self.atoms:
            raise ValueError("Empty molecule has no bounding box")
        xs = [atom.x for atom in self.atoms]
        ys = [atom.y for atom in self.atoms]
        return min(xs), min(ys), max(xs), max(ys)

    def copy(self) -> "Self":
        """Create a deep copy of the molecule, coordinates and flags included.

        The ring cache is not copied; the copy recomputes it on demand.
        """
        mol = Molecule(name=self.name)
        for atom in self.atoms:
            mol.atoms.append(Atom(
                idx=atom.idx,
                symbol=atom.symbol,
                charge=atom.charge,
                explicit_hydrogens=atom.explicit_hydrogens,
                is_aromatic=atom.is_aromatic,
                isotope=atom.isotope,
                x=atom.x,
                y=atom.y,
                bond_indices=list(atom.bond_indices),
                flags=LayoutFlags(
                    placed=atom.flags.placed,
                    visited=atom.flags.visited,
                    in_ring=atom.flags.in_ring,
                    aliphatic=atom.flags.aliphatic,
                ),
            ))
        for bond in self.bonds:
            mol.bonds.append(Bond(
                idx=bond.idx,
                atom1_idx=bond.atom1_idx,
                atom2_idx=bond.atom2_idx,
                order=bond.order,
                is_aromatic=bond.is_aromatic,
                stereo=bond.stereo,
            ))
        mol._fragment_ids = list(self._fragment_ids)
        mol._next_fragment = self._next_fragment
        mol._fragment_count = self._fragment_count
        return mol
