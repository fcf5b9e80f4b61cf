"""Tests for ring detection and ring system partitioning."""

import itertools

import pytest

from planaria import Molecule, Ring, parse
from planaria.exceptions import RingError
from planaria.rings import (
    direct_connected_rings,
    find_ring_bonds,
    find_sssr,
    partition_rings,
)

from conftest import rdkit_ring_sizes


def assert_ordered_cycle(mol: Molecule, ring: Ring) -> None:
    """bonds[i] must join atoms[i] and atoms[i + 1], wrapping around."""
    n = len(ring)
    assert n >= 3
    assert len(set(ring.atoms)) == n
    for i in range(n):
        bond = mol.bonds[ring.bonds[i]]
        assert {bond.atom1_idx, bond.atom2_idx} == {ring.atoms[i], ring.atoms[(i + 1) % n]}


class TestRingBonds:

    def test_chain_has_no_ring_bonds(self):
        assert find_ring_bonds(parse("CCCC")) == set()

    def test_substituent_bond_is_not_a_ring_bond(self):
        mol = parse("Cc1ccccc1")
        ring_bonds = find_ring_bonds(mol)
        assert len(ring_bonds) == 6
        assert 0 not in ring_bonds

    def test_biphenyl_link(self):
        mol = parse("c1ccccc1-c1ccccc1")
        link = mol.get_bond_between(5, 6)
        assert link.idx not in find_ring_bonds(mol)

    def test_empty_molecule(self):
        assert find_ring_bonds(Molecule()) == set()


class TestSSSR:

    @pytest.mark.parametrize("smiles", [
        "C1CC1",
        "c1ccccc1",
        "c1ccc2ccccc2c1",
        "c1ccc2cc3ccccc3cc2c1",
        "c1cc2ccc3cccc4ccc(c1)c2c34",
        "c1ccc2cccc2cc1",
        "C1CC2CCC1C2",
        "C1C2CC3CC1CC(C2)C3",
        "CC1=CCC2CC1C2(C)C",
        "C1CCC2(CC1)CCCC2",
        "c1ccc(-c2ccccc2)cc1",
        "CN1C=NC2=C1C(=O)N(C(=O)N2C)C",
        "Cc1ccc(cc1Nc2nccc(n2)c3cccnc3)NC(=O)c4ccc(cc4)CN5CCN(CC5)C",
    ])
    def test_ring_sizes_match_rdkit(self, smiles):
        rings = find_sssr(parse(smiles))
        assert sorted(len(r) for r in rings) == rdkit_ring_sizes(smiles)

    def test_acyclic(self):
        assert find_sssr(parse("CC(C)CC")) == []

    def test_rings_are_ordered_cycles(self, complex_smiles):
        for smiles in complex_smiles:
            mol = parse(smiles)
            for ring in find_sssr(mol):
                assert_ordered_cycle(mol, ring)

    def test_sorted_by_size(self):
        rings = find_sssr(parse("C1CCC2(CC1)CCCC2"))
        assert [len(r) for r in rings] == [5, 6]

    def test_count_is_cyclomatic_number(self):
        mol = parse("C1CC1.C1CCC1")
        assert len(find_sssr(mol)) == mol.num_bonds - mol.num_atoms + mol.fragment_count

    def test_max_ring_size(self):
        mol = parse("C1CC1C1CCCCCCC1")
        assert [len(r) for r in find_sssr(mol, max_ring_size=5)] == [3]


class TestMoleculeRings:

    def test_rings_cached(self):
        mol = parse("c1ccccc1")
        assert mol.rings is mol.rings

    def test_cache_dropped_on_edit(self):
        mol = parse("CCCC")
        assert mol.rings == []
        mol.add_bond(0, 3)
        assert len(mol.rings) == 1

    def test_ring_membership(self):
        mol = parse("Cc1ccccc1")
        assert not mol.is_atom_in_ring(0)
        assert mol.is_atom_in_ring(1)
        assert not mol.is_bond_in_ring(0)
        assert mol.is_bond_in_ring(1)


class TestRingType:

    def test_mismatched_lengths(self):
        with pytest.raises(RingError):
            Ring(atoms=[0, 1, 2], bonds=[0, 1])

    def test_identity_equality(self):
        assert Ring([0, 1, 2], [0, 1, 2]) != Ring([0, 1, 2], [0, 1, 2])

    def test_shared_atoms_in_cycle_order(self):
        ring = Ring([4, 0, 1, 2], [0, 1, 2, 3])
        other = Ring([2, 9, 4], [4, 5, 6])
        assert ring.shared_atoms(other) == [4, 2]

    def test_center(self):
        mol = parse("C1CC1")
        mol.atoms[0].x, mol.atoms[0].y = 0.0, 0.0
        mol.atoms[1].x, mol.atoms[1].y = 3.0, 0.0
        mol.atoms[2].x, mol.atoms[2].y = 0.0, 3.0
        center = mol.rings[0].center(mol)
        assert center.x == pytest.approx(1.0)
        assert center.y == pytest.approx(1.0)


def make_ring(atoms: list[int]) -> Ring:
    # Bond indices are irrelevant to the partition
    return Ring(atoms=atoms, bonds=list(range(len(atoms))))


class TestPartition:

    @pytest.mark.parametrize("order", list(itertools.permutations(range(3))))
    def test_groups_independent_of_order(self, order):
        r1 = make_ring([0, 1, 2])   # a b c
        r2 = make_ring([2, 3, 4])   # c d e
        r3 = make_ring([5, 6, 7])   # f g h
        rings = [r1, r2, r3]
        systems = partition_rings([rings[i] for i in order])

        groups = sorted(
            (sorted(id(r) for r in system) for system in systems),
            key=len,
        )
        assert groups == [[id(r3)], sorted([id(r1), id(r2)])]

    def test_transitive_closure(self):
        rings = [make_ring([0, 1, 2]), make_ring([5, 6, 7]), make_ring([2, 3, 5])]
        systems = partition_rings(rings)
        assert len(systems) == 1
        assert len(systems[0]) == 3

    def test_seed_order(self):
        r1 = make_ring([0, 1, 2])
        r2 = make_ring([5, 6, 7])
        r3 = make_ring([2, 3, 4])
        systems = partition_rings([r1, r2, r3])
        assert systems[0] == [r1, r3]
        assert systems[1] == [r2]

    def test_empty(self):
        assert partition_rings([]) == []

    @pytest.mark.parametrize("smiles,sizes", [
        ("c1ccc2ccccc2c1", [2]),
        ("c1ccc(-c2ccccc2)cc1", [1, 1]),
        ("C1CCC2(CC1)CCCC2", [2]),
        ("c1ccccc1CCc1ccc2ccccc2c1", [1, 2]),
        ("C1C2CC3CC1CC(C2)C3", [3]),
    ])
    def test_molecules(self, smiles, sizes):
        systems = partition_rings(parse(smiles).rings)
        assert sorted(len(s) for s in systems) == sizes


class TestDirectConnectedRings:

    def test_excludes_self(self):
        r1 = make_ring([0, 1, 2])
        r2 = make_ring([2, 3, 4])
        assert direct_connected_rings(r1, [r1, r2]) == [r2]

    def test_identical_atoms_still_excluded_by_identity(self):
        r1 = make_ring([0, 1, 2])
        twin = make_ring([0, 1, 2])
        assert direct_connected_rings(r1, [r1, twin]) == [twin]

    def test_candidate_order_kept(self):
        r1 = make_ring([0, 1, 2, 3])
        a = make_ring([3, 4, 5])
        b = make_ring([9, 10, 11])
        c = make_ring([0, 6, 7])
        assert direct_connected_rings(r1, [c, b, a]) == [c, a]
