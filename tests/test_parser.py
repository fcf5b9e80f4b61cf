"""Tests for the SMILES parser.

The parser only has to produce the graph the layout engine needs, so these
tests check atoms, bonds and their properties, using RDKit as reference
for the counts.
"""

import pytest

from planaria import parse, Molecule, SmilesParser, BondOrder
from planaria.exceptions import ParseError, RingError

from conftest import rdkit_mol


def rdkit_atom_count(smiles: str) -> int:
    """Get number of atoms from RDKit for comparison."""
    return rdkit_mol(smiles).GetNumAtoms()


def rdkit_bond_count(smiles: str) -> int:
    """Get number of bonds from RDKit for comparison."""
    return rdkit_mol(smiles).GetNumBonds()


class TestBasicParsing:
    """Test basic SMILES parsing functionality."""

    def test_parse_returns_molecule(self):
        mol = parse("C")
        assert isinstance(mol, Molecule)

    def test_single_carbon(self):
        mol = parse("C")
        assert len(mol.atoms) == 1
        assert mol.atoms[0].symbol == "C"
        assert mol.atoms[0].atomic_number == 6

    @pytest.mark.parametrize("smiles,order", [
        ("CC", BondOrder.SINGLE),
        ("C-C", BondOrder.SINGLE),
        ("C=C", BondOrder.DOUBLE),
        ("C#C", BondOrder.TRIPLE),
        ("[Rh]$[Rh]", BondOrder.QUADRUPLE),
    ])
    def test_bond_orders(self, smiles, order):
        mol = parse(smiles)
        assert len(mol.bonds) == 1
        assert mol.bonds[0].order == order
        assert mol.bonds[0].bond_order is order

    def test_two_letter_organic(self):
        mol = parse("ClCBr")
        assert [a.symbol for a in mol.atoms] == ["Cl", "C", "Br"]

    def test_empty_string(self):
        mol = parse("")
        assert mol.num_atoms == 0
        assert mol.fragment_count == 0

    def test_parser_class(self):
        mol = SmilesParser("CCO").parse()
        assert [a.symbol for a in mol.atoms] == ["C", "C", "O"]


class TestAromaticParsing:

    def test_benzene(self):
        mol = parse("c1ccccc1")
        assert len(mol.atoms) == 6
        assert len(mol.bonds) == 6
        assert all(a.is_aromatic for a in mol.atoms)
        assert all(b.is_aromatic for b in mol.bonds)

    def test_pyridine(self):
        symbols = [a.symbol for a in parse("c1ccncc1").atoms]
        assert symbols.count("c") == 5
        assert symbols.count("n") == 1

    def test_biphenyl_link_not_aromatic(self):
        """An explicit single bond between aromatic atoms stays non-aromatic."""
        mol = parse("c1ccccc1-c1ccccc1")
        link = mol.get_bond_between(5, 6)
        assert link is not None
        assert not link.is_aromatic

    def test_aromatic_bond_symbol(self):
        mol = parse("C:C")
        assert mol.bonds[0].is_aromatic


class TestBracketAtoms:

    def test_charge_and_hydrogens(self):
        atom = parse("[NH4+]").atoms[0]
        assert atom.symbol == "N"
        assert atom.explicit_hydrogens == 4
        assert atom.charge == 1

    @pytest.mark.parametrize("smiles,charge", [
        ("[O-]", -1),
        ("[O--]", -2),
        ("[Fe+3]", 3),
        ("[Fe+++]", 3),
        ("[Cu+2]", 2),
    ])
    def test_charges(self, smiles, charge):
        assert parse(smiles).atoms[0].charge == charge

    def test_isotope(self):
        atom = parse("[13CH4]").atoms[0]
        assert atom.isotope == 13
        assert atom.explicit_hydrogens == 4

    @pytest.mark.parametrize("smiles", [
        "C[C@H](O)F",
        "C[C@@H](O)F",
        "F[C@TH1](Cl)(Br)I",
        "F[Pt@SP1](Cl)(Br)I",
        "[CH3:1]C",
    ])
    def test_chirality_and_class_ignored(self, smiles):
        mol = parse(smiles)
        assert mol.num_atoms == rdkit_atom_count(smiles)

    def test_aromatic_selenium(self):
        atom = parse("[se]1cccc1").atoms[0]
        assert atom.symbol == "se"
        assert atom.is_aromatic
        assert atom.atomic_number == 34

    def test_hydrogen_atom(self):
        atom = parse("[2H]C").atoms[0]
        assert atom.is_hydrogen
        assert atom.isotope == 2

    def test_stereo_bond_marker(self):
        mol = parse("F/C=C/F")
        assert mol.bonds[0].stereo == "/"
        assert mol.bonds[1].stereo is None


class TestRingClosures:

    def test_cyclohexane(self):
        mol = parse("C1CCCCC1")
        assert mol.num_bonds == 6
        assert mol.get_bond_between(0, 5) is not None

    @pytest.mark.parametrize("smiles", ["C%10CC%10", "C%99CC%99", "C%(123)CC%(123)"])
    def test_high_ring_numbers(self, smiles):
        mol = parse(smiles)
        assert mol.num_atoms == 3
        assert mol.num_bonds == 3

    def test_ring_bond_order_on_opening(self):
        mol = parse("C=1CCCCC1")
        assert mol.get_bond_between(0, 5).order == BondOrder.DOUBLE

    def test_ring_bond_order_on_closing(self):
        mol = parse("C1CCCCC=1")
        assert mol.get_bond_between(0, 5).order == BondOrder.DOUBLE

    def test_ring_number_reuse(self):
        mol = parse("C1CC1C1CC1")
        assert mol.num_bonds == 7
        assert len(mol.rings) == 2


class TestComponents:

    def test_dot_separated(self):
        mol = parse("[Na+].[Cl-]")
        assert mol.num_atoms == 2
        assert mol.num_bonds == 0
        assert mol.fragment_count == 2
        assert not mol.is_connected()

    def test_ring_across_dot(self):
        """A ring bond may join two dot-separated parts."""
        mol = parse("C1.C1")
        assert mol.num_bonds == 1
        assert mol.is_connected()


class TestParseErrors:

    @pytest.mark.parametrize("smiles", [
        "C(",
        "C)",
        "(C)",
        "C[",
        "[C",
        "[Xx]",
        "Q",
        "C%1",
        "C(C.C)",
        "[C:]",
    ])
    def test_invalid_syntax(self, smiles):
        with pytest.raises(ParseError):
            parse(smiles)

    @pytest.mark.parametrize("smiles", [
        "C1CC",
        "C11",
        "C1C1",
        "C=1CCC#1",
    ])
    def test_invalid_rings(self, smiles):
        with pytest.raises(RingError):
            parse(smiles)

    @pytest.mark.parametrize("smiles", [
        "C=",
        "C==C",
        "C=#C",
        "C/=C",
        "=CC",
        "C(C=)C",
        "C=(C)C",
        "CC=.C",
    ])
    def test_dangling_or_repeated_bond(self, smiles):
        with pytest.raises(ParseError):
            parse(smiles)

    def test_dangling_bond_position(self):
        with pytest.raises(ParseError) as exc_info:
            parse("CC#")
        assert exc_info.value.position == 3

    def test_error_position(self):
        with pytest.raises(ParseError) as exc_info:
            parse("CC?C")
        assert exc_info.value.position == 2
        assert exc_info.value.smiles == "CC?C"
        assert "^" in str(exc_info.value)

    def test_unclosed_ring_index(self):
        with pytest.raises(RingError) as exc_info:
            parse("C1CC2CC")
        assert exc_info.value.ring_index == 1


class TestAgainstRDKit:

    @pytest.mark.parametrize("smiles", [
        "CCO",
        "CC(C)Cc1ccc(cc1)C(C)C(=O)O",
        "CN1C=NC2=C1C(=O)N(C(=O)N2C)C",
        "c1ccc2ccccc2c1",
        "c1cc2ccc3cccc4ccc(c1)c2c34",
        "C1C2CC3CC1CC(C2)C3",
        "CC1=CCC2CC1C2(C)C",
        "C1CCC2(CC1)CCCC2",
        "Cc1ccc(cc1Nc2nccc(n2)c3cccnc3)NC(=O)c4ccc(cc4)CN5CCN(CC5)C",
        "[NH4+].[Cl-]",
        "OC(=O)[C@@H](N)Cc1c[nH]c2ccccc12",
    ])
    def test_counts_match(self, smiles):
        mol = parse(smiles)
        assert mol.num_atoms == rdkit_atom_count(smiles)
        assert mol.num_bonds == rdkit_bond_count(smiles)

    def test_complex_molecules(self, complex_smiles):
        for smiles in complex_smiles:
            mol = parse(smiles)
            assert mol.num_atoms == rdkit_atom_count(smiles), smiles
            assert mol.num_bonds == rdkit_bond_count(smiles), smiles
