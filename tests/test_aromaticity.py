"""Tests for aromaticity perception."""

import pytest

from chemlayer import parse, aromatize, perceive_aromaticity
from chemlayer.elements import BondOrder
from chemlayer.rings import find_rings, ring_edge_bonds
from chemlayer.transform import (
    AromaticityModel,
    AromaticityPerceiver,
    PiLabel,
    is_huckel,
    pi_label,
    ring_pi_electrons,
)


def _aromatic_bond_count(mol):
    return sum(1 for b in mol.bonds if b.order == BondOrder.AROMATIC)


class TestHuckelRule:
    """4n+2 electron counts."""

    @pytest.mark.parametrize("electrons", [2, 6, 10, 14])
    def test_aromatic_counts(self, electrons):
        assert is_huckel(electrons)

    @pytest.mark.parametrize("electrons", [0, 4, 8, 5])
    def test_non_aromatic_counts(self, electrons):
        assert not is_huckel(electrons)


class TestPiLabels:
    """Per-atom pi contributions."""

    def _ring_bonds(self, mol):
        return set(ring_edge_bonds(mol, find_rings(mol)[0]))

    def test_pyrrole_nitrogen_donates_pair(self):
        mol = parse("C1=CNC=C1")
        assert pi_label(mol, 2, self._ring_bonds(mol)) == PiLabel.PAIR

    def test_double_bond_carbon(self):
        mol = parse("C1=CNC=C1")
        assert pi_label(mol, 0, self._ring_bonds(mol)) == PiLabel.ONE

    def test_sp3_carbon_is_ineligible(self):
        mol = parse("C1=CCC=C1")
        assert pi_label(mol, 2, self._ring_bonds(mol)) is None

    def test_carbonyl_carbon_is_vacant(self):
        mol = parse("O=C1C=CC=C1")
        assert pi_label(mol, 1, self._ring_bonds(mol)) == PiLabel.VACANT

    def test_exocyclic_methylene_is_ineligible(self):
        mol = parse("C=C1C=CC=C1")
        assert pi_label(mol, 1, self._ring_bonds(mol)) is None

    def test_ring_electron_count(self):
        mol = parse("C1=CNC=C1")
        assert ring_pi_electrons(mol, find_rings(mol)[0]) == 6


class TestPerception:
    """Rings converted by the perceiver."""

    @pytest.mark.parametrize("smiles,ring_size", [
        ("C1=CC=CC=C1", 6),
        ("C1=CNC=C1", 5),
        ("C1=COC=C1", 5),
        ("C1=CSC=C1", 5),
        ("C1=CC=NC=C1", 6),
        ("[CH-]1C=CC=C1", 5),
    ])
    def test_aromatic_rings(self, smiles, ring_size):
        mol = parse(smiles)
        aromatize(mol)
        assert _aromatic_bond_count(mol) == ring_size
        assert all(a.is_aromatic for a in mol.atoms)

    @pytest.mark.parametrize("smiles", [
        "C1CCCCC1",
        "C1=CCC=C1",
        "C1=CC=CC=CC=C1",
        "C1=CCCC=C1",
    ])
    def test_non_aromatic_rings(self, smiles):
        mol = parse(smiles)
        orders = [b.order for b in mol.bonds]
        aromatize(mol)
        assert [b.order for b in mol.bonds] == orders

    def test_fused_kekule_form(self):
        mol = parse("C1=CC=C2C=CC=CC2=C1")
        aromatize(mol)
        assert _aromatic_bond_count(mol) == 11

    def test_substituent_bond_untouched(self):
        mol = parse("CC1=CC=CC=C1")
        aromatize(mol)
        assert mol.bonds[0].order == BondOrder.SINGLE
        assert not mol.atoms[0].is_aromatic

    def test_no_ring_left_unchanged(self):
        mol = parse("CC=CC")
        aromatize(mol)
        assert mol.bonds[1].order == BondOrder.DOUBLE

    def test_hydrogen_counts_preserved(self):
        mol = parse("C1=CNC=C1")
        before = [mol.total_hydrogens(i) for i in range(mol.num_atoms)]
        aromatize(mol)
        assert [mol.total_hydrogens(i) for i in range(mol.num_atoms)] == before

    def test_idempotent(self, aromatic_smiles):
        for smiles in aromatic_smiles:
            mol = parse(smiles)
            aromatize(mol)
            once = [b.order for b in mol.bonds]
            aromatize(mol)
            assert [b.order for b in mol.bonds] == once

    def test_kekule_and_aromatic_input_agree(self):
        kekule = parse("C1=CC=CC=C1")
        aromatize(kekule)
        aromatic = parse("c1ccccc1")
        aromatize(aromatic)
        assert [b.order for b in kekule.bonds] == [b.order for b in aromatic.bonds]


class TestModels:
    """Pluggable perception models."""

    def test_default_model(self):
        mol = parse("C1=CC=CC=C1")
        perceive_aromaticity(mol, AromaticityPerceiver())
        assert _aromatic_bond_count(mol) == 6

    def test_ring_size_window(self):
        mol = parse("C1=CC=CC=C1")
        perceive_aromaticity(mol, AromaticityPerceiver(min_ring_size=7))
        assert _aromatic_bond_count(mol) == 0

    def test_protocol(self):
        assert isinstance(AromaticityPerceiver(), AromaticityModel)

    def test_custom_model(self):
        class NoAromaticity:
            def perceive(self, mol):
                pass

        mol = parse("C1=CC=CC=C1")
        perceive_aromaticity(mol, NoAromaticity())
        assert _aromatic_bond_count(mol) == 0
