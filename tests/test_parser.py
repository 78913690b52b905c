"""Tests for the SMILES parser.

This module tests the chemlayer SMILES parser with common molecules and
malformed input. RDKit, when installed, is used as a reference for atom
and bond counts.
"""

import pytest

from chemlayer import parse, Molecule, SmilesParser
from chemlayer.elements import BondDirection, BondOrder
from chemlayer.exceptions import ParseError, RingError
from chemlayer.stereo import IMPLICIT, CisTransParity, StereoKind


class TestBasicParsing:
    """Test basic SMILES parsing functionality."""

    def test_parse_returns_molecule(self):
        """parse() should return a Molecule object."""
        mol = parse("C")
        assert isinstance(mol, Molecule)

    def test_parser_class(self):
        mol = SmilesParser("CCO").parse()
        assert mol.num_atoms == 3

    def test_single_carbon(self):
        """Parse single carbon atom."""
        mol = parse("C")
        assert len(mol.atoms) == 1
        assert mol.atoms[0].symbol == "C"
        assert mol.atoms[0].atomic_number == 6
        assert mol.implicit_hydrogens(0) == 4

    def test_ethanol(self):
        mol = parse("CCO")
        assert [a.symbol for a in mol.atoms] == ["C", "C", "O"]
        assert mol.num_bonds == 2
        assert [mol.implicit_hydrogens(i) for i in range(3)] == [3, 2, 1]

    def test_two_letter_organic(self):
        mol = parse("ClCBr")
        assert [a.symbol for a in mol.atoms] == ["Cl", "C", "Br"]

    @pytest.mark.parametrize("smiles,order", [
        ("CC", BondOrder.SINGLE),
        ("C-C", BondOrder.SINGLE),
        ("C=C", BondOrder.DOUBLE),
        ("C#C", BondOrder.TRIPLE),
        ("c:c", BondOrder.AROMATIC),
        ("C~C", BondOrder.ANY),
    ])
    def test_bond_orders(self, smiles, order):
        mol = parse(smiles)
        assert mol.bonds[0].order == order

    def test_hydrogen_counts_follow_bond_orders(self):
        mol = parse("C=CC#N")
        assert [mol.implicit_hydrogens(i) for i in range(4)] == [2, 1, 0, 0]

    def test_simple_corpus(self, simple_smiles):
        for smiles in simple_smiles:
            mol = parse(smiles)
            assert mol.num_atoms >= 1


class TestBranchesAndRings:
    """Test branches, ring closures and components."""

    def test_branch(self):
        mol = parse("CC(C)C")
        assert mol.num_atoms == 4
        assert mol.degree(1) == 3

    def test_nested_branches(self):
        mol = parse("CC(C(C)C)C")
        assert mol.degree(1) == 3
        assert mol.degree(2) == 3

    def test_cyclopropane(self):
        mol = parse("C1CC1")
        assert mol.num_atoms == 3
        assert mol.num_bonds == 3

    def test_ring_closure_bond_order(self):
        mol = parse("C=1CCCCC1")
        ring_bond = mol.get_bond_between(0, 5)
        assert ring_bond.order == BondOrder.DOUBLE

    def test_ring_number_reuse(self):
        mol = parse("C1CC1C1CC1")
        assert mol.num_atoms == 6
        assert mol.num_bonds == 7

    @pytest.mark.parametrize("smiles", ["C%10CC%10", "C%(123)CC%(123)"])
    def test_extended_ring_numbers(self, smiles):
        mol = parse(smiles)
        assert mol.num_atoms == 3
        assert mol.num_bonds == 3

    def test_ring_corpus(self, ring_smiles):
        for smiles in ring_smiles:
            mol = parse(smiles)
            assert mol.num_bonds >= mol.num_atoms

    def test_disconnected_components(self):
        mol = parse("CC.O")
        assert mol.connected_components() == [[0, 1], [2]]
        assert not mol.is_connected


class TestAromaticInput:
    """Lowercase atoms are recorded as written."""

    def test_benzene(self):
        mol = parse("c1ccccc1")
        assert all(a.is_aromatic for a in mol.atoms)
        assert all(b.order == BondOrder.AROMATIC for b in mol.bonds)
        assert all(mol.implicit_hydrogens(i) == 1 for i in range(6))

    def test_aromatic_to_aliphatic_bond_is_single(self):
        mol = parse("Cc1ccccc1")
        assert mol.bonds[0].order == BondOrder.SINGLE

    def test_pyrrole_nh(self):
        mol = parse("c1cc[nH]c1")
        assert mol.atoms[3].explicit_hydrogens == 1
        assert mol.total_hydrogens(3) == 1

    def test_pyridine_nitrogen_has_no_hydrogen(self):
        mol = parse("c1ccncc1")
        assert mol.implicit_hydrogens(3) == 0

    def test_aromatic_corpus(self, aromatic_smiles):
        for smiles in aromatic_smiles:
            mol = parse(smiles)
            assert any(b.is_aromatic for b in mol.bonds)


class TestBracketAtoms:
    """Test bracket atom features."""

    def test_isotope(self):
        mol = parse("[13CH4]")
        atom = mol.atoms[0]
        assert atom.isotope == 13
        assert atom.explicit_hydrogens == 4

    def test_bracket_without_h_has_zero_hydrogens(self):
        mol = parse("[C]")
        assert mol.implicit_hydrogens(0) == 0

    @pytest.mark.parametrize("smiles,charge", [
        ("[NH4+]", 1),
        ("[O-]", -1),
        ("[Fe+3]", 3),
        ("[O--]", -2),
        ("[Cu++]", 2),
        ("[S-2]", -2),
    ])
    def test_charges(self, smiles, charge):
        assert parse(smiles).atoms[0].charge == charge

    def test_charged_corpus(self, charged_smiles):
        for smiles in charged_smiles:
            mol = parse(smiles)
            assert any(a.charge for a in mol.atoms)

    def test_atom_class(self):
        mol = parse("[CH3:5]C")
        assert mol.atoms[0].atom_class == 5

    def test_aromatic_selenium(self):
        mol = parse("c1cc[se]c1")
        assert mol.atoms[3].symbol == "Se"
        assert mol.atoms[3].is_aromatic

    def test_non_organic_element(self):
        mol = parse("[Na+].[Cl-]")
        assert [a.symbol for a in mol.atoms] == ["Na", "Cl"]


class TestSpecialAtoms:
    """Pseudo atoms and attachment points."""

    def test_pseudo_atom(self):
        mol = parse("*C")
        assert mol.atoms[0].is_pseudo
        assert mol.num_bonds == 1

    def test_pseudo_atom_with_class(self):
        mol = parse("[*:1]CC")
        assert mol.atoms[0].is_pseudo
        assert mol.atoms[0].atom_class == 1

    def test_attachment_point(self):
        mol = parse("[R1]CC")
        atom = mol.atoms[0]
        assert atom.is_rsite
        assert atom.label == "R1"


class TestStereoParsing:
    """Chirality and directional bond marks."""

    def test_tetrahedral_with_preceding_atom(self):
        mol = parse("F[C@H](Cl)Br")
        center = mol.stereocenters.get(1)
        assert center is not None
        assert center.kind == StereoKind.ABS
        assert center.pyramid == (0, IMPLICIT, 2, 3)

    def test_double_at_swaps_last_two(self):
        mol = parse("F[C@@H](Cl)Br")
        assert mol.stereocenters.get(1).pyramid == (0, IMPLICIT, 3, 2)

    def test_tetrahedral_first_atom(self):
        mol = parse("[C@H](F)(Cl)Br")
        assert mol.stereocenters.get(0).pyramid == (IMPLICIT, 1, 2, 3)

    def test_tetrahedral_with_ring_closure(self):
        mol = parse("C[C@H]1CCCCC1O")
        center = mol.stereocenters.get(1)
        assert center.pyramid == (0, IMPLICIT, 6, 2)

    def test_chiral_corpus(self, chiral_smiles):
        for smiles in chiral_smiles:
            assert len(parse(smiles).stereocenters) == 1

    def test_directional_marks_are_stored(self):
        mol = parse("F/C=C/F")
        assert mol.bonds[0].direction == BondDirection.UP
        assert mol.bonds[2].direction == BondDirection.UP

    def test_trans(self):
        mol = parse("F/C=C/F")
        assert mol.cis_trans.parity(1) == CisTransParity.TRANS

    def test_cis(self):
        mol = parse(r"F/C=C\F")
        assert mol.cis_trans.parity(1) == CisTransParity.CIS

    def test_mark_before_first_atom_reads_backwards(self):
        assert parse(r"F\C=C/F").cis_trans.parity(1) == CisTransParity.CIS

    def test_stereo_bond_corpus(self, stereo_bond_smiles):
        for smiles in stereo_bond_smiles:
            assert len(parse(smiles).cis_trans) == 1

    def test_marks_on_one_side_only(self):
        mol = parse("F/C=CF")
        assert len(mol.cis_trans) == 0


class TestParseErrors:
    """Malformed input raises ParseError with an offset."""

    def test_unclosed_ring(self):
        with pytest.raises(RingError) as exc_info:
            parse("C1CC")
        assert exc_info.value.offset == 1
        assert exc_info.value.ring_index == 1

    def test_ring_error_is_parse_error(self):
        with pytest.raises(ParseError):
            parse("C1CC")

    def test_conflicting_ring_bond_orders(self):
        with pytest.raises(RingError):
            parse("C=1CCC-1")

    def test_unmatched_open_paren(self):
        with pytest.raises(ParseError) as exc_info:
            parse("C(C")
        assert exc_info.value.position == 1

    def test_unmatched_close_paren(self):
        with pytest.raises(ParseError) as exc_info:
            parse("CC)")
        assert exc_info.value.position == 2

    def test_empty_branch(self):
        with pytest.raises(ParseError):
            parse("C()C")

    def test_branch_opened_inside_empty_branch(self):
        with pytest.raises(ParseError, match="Empty branch") as exc_info:
            parse("C((C))")
        assert exc_info.value.position == 2

    def test_nested_branches_still_parse(self):
        mol = parse("C(C(C))C")
        assert mol.num_atoms == 4
        assert mol.heavy_degree(0) == 2

    def test_unterminated_bracket(self):
        with pytest.raises(ParseError):
            parse("C[CH3")

    def test_unknown_element(self):
        with pytest.raises(ParseError) as exc_info:
            parse("CX")
        assert exc_info.value.position == 1

    def test_unknown_bracket_element(self):
        with pytest.raises(ParseError):
            parse("[Xx]")

    def test_dangling_bond(self):
        with pytest.raises(ParseError) as exc_info:
            parse("CC=")
        assert exc_info.value.position == 2

    def test_ring_closing_on_itself(self):
        with pytest.raises(RingError):
            parse("C11")

    def test_message_points_at_offset(self):
        with pytest.raises(ParseError) as exc_info:
            parse("CC)")
        text = str(exc_info.value)
        assert "CC)" in text
        assert text.rstrip().endswith("^")


class TestAgainstRDKit:
    """Atom and bond counts agree with RDKit."""

    @pytest.mark.parametrize("smiles", [
        "CCO",
        "c1ccccc1",
        "CC(=O)Oc1ccccc1C(=O)O",
        "C1CC2CCCCC2C1",
        "[NH4+].[Cl-]",
        "F/C=C/F",
    ])
    def test_counts(self, smiles):
        Chem = pytest.importorskip("rdkit.Chem")
        reference = Chem.MolFromSmiles(smiles)
        mol = parse(smiles)
        assert mol.num_atoms == reference.GetNumAtoms()
        assert mol.num_bonds == reference.GetNumBonds()
