"""Tests for the molecular graph: construction, caches and stereo tables."""

import pytest

from chemlayer import parse, Molecule
from chemlayer.elements import BondDirection, BondOrder, Radical
from chemlayer.exceptions import StructuralError
from chemlayer.stereo import IMPLICIT, CisTransParity, StereoKind


class TestConstruction:
    """Building molecules atom by atom."""

    def test_add_atoms_and_bond(self):
        mol = Molecule()
        c1 = mol.add_atom("C")
        c2 = mol.add_atom("C")
        assert mol.add_bond(c1, c2) == 0
        assert mol.implicit_hydrogens(c1) == 3
        assert mol.neighbors(c1) == [c2]

    def test_add_atom_by_number(self):
        mol = Molecule()
        idx = mol.add_atom(8)
        assert mol.atoms[idx].symbol == "O"

    def test_adjacency_is_consistent(self):
        mol = parse("CC(C)O")
        for bond in mol.bonds:
            assert bond.idx in mol.atoms[bond.atom1_idx].bond_indices
            assert bond.idx in mol.atoms[bond.atom2_idx].bond_indices

    def test_unknown_symbol(self):
        with pytest.raises(StructuralError):
            Molecule().add_atom("Qq")

    def test_self_bond(self):
        mol = Molecule()
        a = mol.add_atom("C")
        with pytest.raises(StructuralError):
            mol.add_bond(a, a)

    def test_duplicate_bond(self):
        mol = parse("CC")
        with pytest.raises(StructuralError):
            mol.add_bond(1, 0)

    def test_out_of_range_index(self):
        mol = parse("CC")
        with pytest.raises(StructuralError):
            mol.implicit_hydrogens(5)

    def test_structural_error_is_index_error(self):
        mol = parse("CC")
        with pytest.raises(IndexError):
            mol.atom(7)

    def test_sentinel_atoms(self):
        mol = Molecule()
        p = mol.add_pseudo_atom("X1")
        r = mol.add_rsite(2)
        t = mol.add_template_atom("Gly")
        assert mol.atoms[p].is_pseudo
        assert mol.atoms[r].is_rsite
        assert mol.atoms[t].is_template
        assert not any(mol.atoms[i].is_element for i in (p, r, t))
        assert mol.implicit_hydrogens(p) == 0


class TestDerivedCache:
    """The cache is either absent or consistent."""

    def test_cache_filled_on_read(self):
        mol = parse("CC")
        mol.implicit_hydrogens(0)
        assert mol.has_cache

    def test_bond_order_change_invalidates(self):
        mol = parse("CC")
        assert mol.implicit_hydrogens(0) == 3
        mol.set_bond_order(0, BondOrder.DOUBLE)
        assert not mol.has_cache
        assert mol.implicit_hydrogens(0) == 2

    def test_charge_change_invalidates(self):
        mol = parse("CN")
        assert mol.implicit_hydrogens(1) == 2
        mol.set_charge(1, 1)
        assert mol.implicit_hydrogens(1) == 3

    def test_radical_change_invalidates(self):
        mol = parse("CC")
        mol.set_radical(0, Radical.DOUBLET)
        assert mol.implicit_hydrogens(0) == 2

    def test_explicit_hydrogen_override(self):
        mol = parse("CC")
        mol.set_explicit_hydrogens(0, 1)
        assert mol.implicit_hydrogens(0) == 1
        mol.set_explicit_hydrogens(0, None)
        assert mol.implicit_hydrogens(0) == 3

    def test_explicit_valence_override(self):
        mol = parse("C")
        mol.set_explicit_valence(0, 2)
        assert mol.implicit_hydrogens(0) == 2

    def test_higher_valence(self):
        mol = parse("CS(=O)(=O)C")
        assert mol.implicit_hydrogens(1) == 0

    def test_connectivity(self):
        mol = parse("C=CC")
        assert mol.connectivity(1) == 3

    def test_aromatic_flag_from_bonds(self):
        mol = Molecule()
        a = mol.add_atom("C")
        b = mol.add_atom("C")
        mol.add_bond(a, b, order=BondOrder.AROMATIC)
        assert mol.is_aromatic_atom(a)


class TestRemoval:
    """Removing atoms and bonds keeps indices and stereo tables consistent."""

    def test_remove_bond_shifts_indices(self):
        mol = parse("CCCC")
        mol.remove_bond(0)
        assert mol.num_bonds == 2
        assert [b.idx for b in mol.bonds] == [0, 1]
        assert mol.atoms[0].bond_indices == []
        assert mol.atoms[1].bond_indices == [0]

    def test_remove_atom_shifts_indices(self):
        mol = parse("OCC")
        mol.remove_atom(0)
        assert [a.symbol for a in mol.atoms] == ["C", "C"]
        assert mol.bonds[0].atom1_idx == 0
        assert mol.bonds[0].atom2_idx == 1

    def test_remove_neighbour_drops_stereocenter(self):
        mol = parse("F[C@H](Cl)Br")
        mol.remove_atom(3)
        assert len(mol.stereocenters) == 0

    def test_stereocenter_rekeyed(self):
        mol = parse("O.F[C@H](Cl)Br")
        mol.remove_atom(0)
        center = mol.stereocenters.get(1)
        assert center is not None
        assert center.pyramid == (0, IMPLICIT, 2, 3)

    def test_remove_substituent_bond_drops_cis_trans(self):
        mol = parse("F/C=C/F")
        mol.remove_bond(0)
        assert len(mol.cis_trans) == 0

    def test_cis_trans_rekeyed(self):
        mol = parse("CC.F/C=C/F")
        assert mol.cis_trans.parity(2) == CisTransParity.TRANS
        mol.remove_atom(0)
        entry = mol.cis_trans.get(1)
        assert entry is not None
        assert entry.parity == CisTransParity.TRANS
        assert entry.substituents == (1, IMPLICIT, 4, IMPLICIT)


class TestSubmolecule:
    """Copies restricted to a subset of atoms."""

    def test_keeps_order_and_internal_bonds(self):
        mol = parse("CCOC(=O)N")
        sub = mol.submolecule([5, 3, 4])
        assert [a.symbol for a in sub.atoms] == ["C", "O", "N"]
        assert sub.num_bonds == 2
        assert sub.get_bond_between(0, 1).order == BondOrder.DOUBLE
        assert sub.get_bond_between(0, 2) is not None

    def test_original_untouched(self):
        mol = parse("CCO")
        mol.submolecule([0])
        assert mol.num_atoms == 3
        assert mol.num_bonds == 2

    def test_duplicates_ignored(self):
        assert parse("CCO").submolecule([2, 2, 1]).num_atoms == 2

    def test_stereocenter_kept_and_rekeyed(self):
        mol = parse("O.F[C@H](Cl)Br")
        sub = mol.submolecule(range(1, 5))
        center = sub.stereocenters.get(1)
        assert center is not None
        assert center.pyramid == (0, IMPLICIT, 2, 3)

    def test_stereocenter_pruned(self):
        sub = parse("F[C@H](Cl)Br").submolecule([0, 1, 2])
        assert len(sub.stereocenters) == 0

    def test_cis_trans_kept(self):
        sub = parse("CC.F/C=C/F").submolecule([2, 3, 4, 5])
        assert sub.cis_trans.parity(1) == CisTransParity.TRANS

    def test_cis_trans_pruned(self):
        sub = parse("F/C=C/F").submolecule([1, 2, 3])
        assert len(sub.cis_trans) == 0

    def test_empty_selection(self):
        with pytest.raises(StructuralError):
            parse("CC").submolecule([])

    def test_out_of_range(self):
        with pytest.raises(StructuralError):
            parse("CC").submolecule([0, 2])


class TestBondEditing:
    """Changing bond endpoints and marks."""

    def test_flip_bond(self):
        mol = parse("CCO")
        mol.flip_bond(0, 1, 2)
        assert mol.neighbors(0) == [2]
        assert mol.get_bond_between(0, 1) is None
        assert mol.atoms[1].bond_indices == [1]
        assert mol.implicit_hydrogens(2) == 0

    def test_flip_missing_bond(self):
        with pytest.raises(StructuralError):
            parse("CCO").flip_bond(0, 2, 1)

    def test_flip_onto_existing_bond(self):
        with pytest.raises(StructuralError):
            parse("C1CC1").flip_bond(0, 1, 2)

    def test_flip_drops_stereocenter(self):
        mol = parse("F[C@H](Cl)BrC")
        mol.flip_bond(1, 3, 4)
        assert len(mol.stereocenters) == 0

    def test_set_direction(self):
        mol = parse("FC=CF")
        mol.set_bond_direction(0, BondDirection.UP)
        assert mol.bonds[0].direction == BondDirection.UP
        assert mol.bonds[0].direction_from(1) == BondDirection.DOWN


class TestQueries:
    """Read-only helpers."""

    def test_get_bond_between(self):
        mol = parse("CCO")
        assert mol.get_bond_between(1, 2).idx == 1
        assert mol.get_bond_between(0, 2) is None

    def test_heavy_degree_ignores_hydrogen(self):
        mol = parse("[H]C([H])O")
        assert mol.degree(1) == 3
        assert mol.heavy_degree(1) == 1
        assert mol.total_hydrogens(1) == 3

    def test_atom_description(self):
        mol = parse("[13C+2]")
        assert mol.atom_description(0) == "13C+2"

    def test_coordinates(self):
        mol = parse("CC")
        assert not mol.has_coordinates()
        mol.set_xyz(0, 0.0, 0.0, 0.0)
        mol.set_xyz(1, 1.5, 0.0, 0.0)
        assert mol.has_coordinates()
        assert mol.distance(0, 1) == pytest.approx(1.5)

    def test_distance_without_coordinates(self):
        with pytest.raises(StructuralError):
            parse("CC").distance(0, 1)


class TestClone:
    """Clones are deep and independent."""

    def test_clone_is_independent(self):
        mol = parse("C=C")
        copy = mol.clone()
        copy.set_bond_order(0, BondOrder.SINGLE)
        assert mol.bonds[0].order == BondOrder.DOUBLE
        assert copy.implicit_hydrogens(0) == 3

    def test_clone_copies_stereo_tables(self):
        mol = parse("F[C@H](Cl)Br")
        copy = mol.clone()
        copy.stereocenters.invert(1)
        assert mol.stereocenters.get(1).pyramid == (0, IMPLICIT, 2, 3)
        assert copy.stereocenters.get(1).pyramid == (0, IMPLICIT, 3, 2)

    def test_clone_has_no_cache(self):
        mol = parse("CC")
        mol.implicit_hydrogens(0)
        assert not mol.clone().has_cache


class TestStereoTables:
    """Direct use of the side tables."""

    def test_three_member_pyramid_gets_implicit(self):
        mol = parse("CC(O)F")
        center = mol.stereocenters.add(1, StereoKind.ABS, (0, 2, 3))
        assert center.pyramid == (0, 2, 3, IMPLICIT)

    def test_repeated_neighbour_rejected(self):
        mol = parse("CC(O)F")
        with pytest.raises(StructuralError):
            mol.stereocenters.add(1, StereoKind.ABS, (0, 0, 2, 3))

    def test_cis_trans_needs_reference(self):
        mol = parse("CC=CC")
        with pytest.raises(StructuralError):
            mol.cis_trans.add(1, (IMPLICIT, IMPLICIT, 3, IMPLICIT))
