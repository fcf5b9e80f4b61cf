"""Test configuration and fixtures for planaria tests."""

import math

import pytest

# RDKit is used as reference for atom, bond and ring counts
from rdkit import Chem

from planaria import Molecule


def rdkit_mol(smiles: str):
    """Parse with RDKit, failing loudly on SMILES it rejects."""
    mol = Chem.MolFromSmiles(smiles)
    if mol is None:
        raise ValueError(f"RDKit could not parse: {smiles}")
    return mol


def rdkit_ring_sizes(smiles: str) -> list[int]:
    """Sorted SSSR ring sizes according to RDKit."""
    return sorted(len(ring) for ring in Chem.GetSSSR(rdkit_mol(smiles)))


def bond_lengths(mol: Molecule) -> list[float]:
    """Length of every bond of a laid-out molecule."""
    return [
        mol.atoms[bond.atom1_idx].coord.distance(mol.atoms[bond.atom2_idx].coord)
        for bond in mol.bonds
    ]


def assert_bond_lengths(mol: Molecule, expected: float, tol: float = 1e-6) -> None:
    """Every bond of ``mol`` must be ``expected`` long."""
    for bond, length in zip(mol.bonds, bond_lengths(mol)):
        assert length == pytest.approx(expected, abs=tol), (
            f"bond {bond.idx} ({bond.atom1_idx}-{bond.atom2_idx}) has length {length}"
        )


def assert_finite(mol: Molecule) -> None:
    for atom in mol.atoms:
        assert math.isfinite(atom.x) and math.isfinite(atom.y), f"atom {atom.idx}"


def build_y_chain() -> Molecule:
    """Branched acyclic fixture.

    Atoms A..J are indices 0..9; bonds A-B, B-C, B-D, D-E, D-F, F-G, C-H,
    G-I, E-J. The longest chain from H is H C B D F G I.
    """
    mol = Molecule(name="y-chain")
    for _ in range(10):
        mol.add_atom("C")
    for a, b in [(0, 1), (1, 2), (1, 3), (3, 4), (3, 5), (5, 6), (2, 7), (6, 8), (4, 9)]:
        mol.add_bond(a, b)
    return mol


@pytest.fixture
def y_chain() -> Molecule:
    return build_y_chain()


@pytest.fixture
def tree_smiles() -> list[str]:
    """Acyclic molecules without explicit hydrogens."""
    return [
        "CC",
        "CCC",
        "CCCCCCCC",
        "CCO",
        "CC(C)C",
        "CC(C)(C)C",
        "CC(C)CC(C)(C)O",
        "C=CC#N",
        "OC(=O)CN",
        "CC(C)CCCC(C)CCCC(C)C",
    ]


@pytest.fixture
def ring_smiles() -> list[str]:
    """Single and fused ring systems with regular geometry."""
    return [
        "C1CC1",
        "C1CCC1",
        "C1CCCC1",
        "c1ccccc1",
        "C1CCCCCC1",
        "c1ccc2ccccc2c1",
        "c1ccc2[nH]ccc2c1",
        "c1ccc2cccc2cc1",
        "c1ccc2cc3ccccc3cc2c1",
    ]


@pytest.fixture
def complex_smiles() -> list[str]:
    """Real-world molecules mixing rings and chains."""
    return [
        # Aspirin
        "CC(=O)OC1=CC=CC=C1C(=O)O",
        # Caffeine
        "CN1C=NC2=C1C(=O)N(C(=O)N2C)C",
        # Ibuprofen
        "CC(C)Cc1ccc(cc1)C(C)C(=O)O",
        # Acetaminophen
        "CC(=O)Nc1ccc(O)cc1",
        # Pyrene
        "c1cc2ccc3cccc4ccc(c1)c2c34",
        # Biphenyl
        "c1ccc(-c2ccccc2)cc1",
        # Imatinib-like
        "Cc1ccc(cc1Nc2nccc(n2)c3cccnc3)NC(=O)c4ccc(cc4)CN5CCN(CC5)C",
        # Norbornane
        "C1CC2CCC1C2",
        # Adamantane
        "C1C2CC3CC1CC(C2)C3",
    ]
