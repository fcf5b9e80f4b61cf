"""Tests for connection matrices, shortest paths and chain search."""

import pytest

from planaria import parse
from planaria.graph import (
    UNREACHABLE,
    Chain,
    all_pairs_shortest_paths,
    connection_matrix,
    degree_sum,
    initial_longest_chain,
    longest_unplaced_chain,
)

from conftest import build_y_chain


class TestMatrices:

    def test_connection_matrix_symmetric(self):
        matrix = connection_matrix(parse("CC(C)O"))
        assert matrix[0][1] == matrix[1][0] == 1
        assert matrix[1][3] == 1
        assert matrix[0][2] == 0
        assert all(matrix[i][i] == 0 for i in range(4))

    def test_shortest_paths_chain(self):
        dist = all_pairs_shortest_paths(connection_matrix(parse("CCCCC")))
        assert dist[0][4] == 4
        assert dist[4][0] == 4
        assert dist[1][3] == 2
        assert dist[2][2] == 0

    def test_shortest_paths_ring(self):
        dist = all_pairs_shortest_paths(connection_matrix(parse("C1CCCCC1")))
        assert dist[0][3] == 3
        assert dist[0][5] == 1

    def test_unreachable(self):
        dist = all_pairs_shortest_paths(connection_matrix(parse("CC.O")))
        assert dist[0][2] == UNREACHABLE
        assert dist[0][1] == 1

    def test_degree_sum(self):
        mol = parse("CC(C)(C)C")
        assert degree_sum(mol, [0, 1]) == 5


class TestChain:

    def test_extended_copies(self):
        chain = Chain([0], [])
        longer = chain.extended(1, 0)
        assert chain.atoms == [0]
        assert longer.atoms == [0, 1]
        assert longer.bonds == [0]
        assert len(longer) == 2


class TestLongestUnplacedChain:

    def test_y_chain(self, y_chain):
        chain = longest_unplaced_chain(y_chain, 7)
        # H C B D F G I
        assert chain.atoms == [7, 2, 1, 3, 5, 6, 8]
        assert len(chain.bonds) == 6
        for i, bond_idx in enumerate(chain.bonds):
            bond = y_chain.bonds[bond_idx]
            assert {bond.atom1_idx, bond.atom2_idx} == {chain.atoms[i], chain.atoms[i + 1]}

    def test_marks_visited(self, y_chain):
        longest_unplaced_chain(y_chain, 7)
        assert all(atom.flags.visited for atom in y_chain.atoms if atom.idx != 7)

    def test_skips_placed_atoms(self):
        mol = parse("CCCCCC")
        mol.atoms[3].flags.placed = True
        chain = longest_unplaced_chain(mol, 0)
        assert chain.atoms == [0, 1, 2]

    def test_stops_on_ring_atom(self):
        mol = parse("CCCc1ccccc1")
        for ring in mol.rings:
            for idx in ring.atoms:
                mol.atoms[idx].flags.in_ring = True
        chain = longest_unplaced_chain(mol, 0)
        assert chain.atoms == [0, 1, 2, 3]

    def test_ring_start_is_expanded(self):
        mol = parse("c1ccccc1CCC")
        for ring in mol.rings:
            for idx in ring.atoms:
                mol.atoms[idx].flags.in_ring = True
                mol.atoms[idx].flags.placed = True
        chain = longest_unplaced_chain(mol, 5)
        assert chain.atoms == [5, 6, 7, 8]

    def test_tie_prefers_higher_degree_sum(self):
        # From 0 both branches reach three more atoms; the one through the
        # branched carbon has the larger degree sum
        mol = parse("CC(CCC)CC(C)C")
        chain = longest_unplaced_chain(mol, 0)
        assert chain.atoms == [0, 1, 5, 6, 7]

    def test_isolated_start(self):
        mol = parse("C")
        assert longest_unplaced_chain(mol, 0).atoms == [0]


class TestInitialLongestChain:

    def test_linear(self):
        assert initial_longest_chain(parse("CCCC")).atoms == [0, 1, 2, 3]

    def test_y_chain(self):
        mol = build_y_chain()
        chain = initial_longest_chain(mol)
        # A, H, I and J are terminal; H-I is the longest terminal pair
        assert chain.atoms[0] == 7
        assert len(chain) == 7

    def test_single_atom(self):
        assert initial_longest_chain(parse("O")).atoms == [0]

    def test_branched(self):
        chain = initial_longest_chain(parse("CC(C)CC(C)(C)O"))
        assert len(chain) == 5
        assert chain.atoms[0] == 0
