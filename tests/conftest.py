"""Test configuration and fixtures for chemlayer tests."""

from collections import Counter

import pytest

from chemlayer import Molecule


def rdkit_canonical(smiles: str) -> str:
    """Get RDKit canonical SMILES for comparison.

    Skips the calling test when RDKit is not installed.

    Args:
        smiles: Input SMILES string.

    Returns:
        RDKit's canonical SMILES.
    """
    Chem = pytest.importorskip("rdkit.Chem")
    mol = Chem.MolFromSmiles(smiles)
    if mol is None:
        raise ValueError(f"RDKit could not parse: {smiles}")
    return Chem.MolToSmiles(mol, canonical=True)


def atom_signature(mol: Molecule) -> Counter:
    """Multiset of (atomic number, charge, isotope) over all atoms."""
    return Counter((a.atomic_number, a.charge, a.isotope) for a in mol.atoms)


def bond_signature(mol: Molecule) -> Counter:
    """Multiset of bond orders."""
    return Counter(int(b.order) for b in mol.bonds)


@pytest.fixture
def simple_smiles() -> list[str]:
    """Basic valid SMILES strings for smoke testing."""
    return [
        "C",
        "CC",
        "CCC",
        "CCCC",
        "CCO",
        "C=C",
        "C#C",
        "C=O",
        "C#N",
    ]


@pytest.fixture
def aromatic_smiles() -> list[str]:
    """Aromatic SMILES strings."""
    return [
        "c1ccccc1",
        "c1ccncc1",
        "c1ccoc1",
        "c1ccsc1",
        "c1cc[nH]c1",
        "c1ccc2ccccc2c1",
    ]


@pytest.fixture
def ring_smiles() -> list[str]:
    """SMILES with ring closures."""
    return [
        "C1CC1",
        "C1CCC1",
        "C1CCCC1",
        "C1CCCCC1",
        "C1CC2CCCCC2C1",
        "C12CC1CC2",
    ]


@pytest.fixture
def charged_smiles() -> list[str]:
    """SMILES with charged atoms."""
    return [
        "[O-]",
        "[NH4+]",
        "[Na+]",
        "[Cl-]",
        "[O-]C=O",
        "[NH4+].[Cl-]",
        "CC([O-])=O",
    ]


@pytest.fixture
def chiral_smiles() -> list[str]:
    """SMILES with tetrahedral chirality."""
    return [
        "C[C@H](O)F",
        "C[C@@H](O)F",
        "F[C@H](Cl)Br",
        "F[C@@H](Cl)Br",
        "C[C@H]1CCCCC1O",
    ]


@pytest.fixture
def stereo_bond_smiles() -> list[str]:
    """SMILES with E/Z stereochemistry."""
    return [
        "F/C=C/F",
        r"F/C=C\F",
        "C/C=C/C",
        r"C/C=C\C",
        r"Cl/C=C/Cl",
    ]


@pytest.fixture
def drug_smiles() -> list[str]:
    """A few drug-like molecules."""
    return [
        "CC(=O)Oc1ccccc1C(=O)O",        # aspirin
        "CC(=O)Nc1ccc(O)cc1",           # paracetamol
        "Cn1cnc2c1c(=O)n(C)c(=O)n2C",   # caffeine
        "CC(C)Cc1ccc(cc1)C(C)C(=O)O",   # ibuprofen
    ]
