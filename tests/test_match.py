"""Tests for substructure matching."""

from collections import deque

import pytest

from chemlayer import parse, Molecule, SubstructureMatcher
from chemlayer.elements import BondOrder
from chemlayer.match import (
    Match,
    count_substructure_matches,
    find_substructure_matches,
    is_exact_match,
    is_substructure_of,
)


def bfs_prefix(mol, size):
    """First ``size`` atoms of a breadth-first walk from atom 0."""
    seen = [0]
    queue = deque([0])
    while queue and len(seen) < size:
        for nbr in mol.neighbors(queue.popleft()):
            if nbr not in seen and len(seen) < size:
                seen.append(nbr)
                queue.append(nbr)
    return seen


class TestBasicMatching:
    """Simple embeddings."""

    def test_methanol_in_ethanol(self):
        matches = SubstructureMatcher(parse("CO"), parse("CCO")).find_all()
        assert [m.atom_mapping for m in matches] == [(1, 2)]
        assert matches[0].bond_mapping == (1,)

    def test_first_match(self):
        match = SubstructureMatcher(parse("CO"), parse("CCO")).find_first()
        assert match == Match((1, 2), (1,))

    def test_no_match(self):
        assert SubstructureMatcher(parse("N"), parse("CCO")).find_first() is None
        assert not is_substructure_of(parse("N"), parse("CCO"))

    def test_carbonyl_in_acetic_acid(self):
        assert is_substructure_of(parse("C=O"), parse("CC(=O)O"))

    def test_benzene_in_toluene(self):
        query, target = parse("c1ccccc1"), parse("Cc1ccccc1")
        matcher = SubstructureMatcher(query, target)
        assert matcher.count_matches() == 12
        assert matcher.count_matches(uniquify=True) == 1
        assert all(0 not in m.atom_mapping for m in matcher.find_all())

    def test_bond_orders_must_agree(self):
        assert not is_substructure_of(parse("C1=CC=CC=C1"), parse("c1ccccc1"))
        assert not is_substructure_of(parse("C=C"), parse("CC"))

    def test_charge_must_agree(self):
        assert not is_substructure_of(parse("[O-]"), parse("CC(=O)O"))
        assert is_substructure_of(parse("[O-]"), parse("CC(=O)[O-]"))

    def test_query_degree_bound(self):
        assert not is_substructure_of(parse("CC(C)C"), parse("CCCC"))


class TestQueryFeatures:
    """Query bond orders and wildcard atoms."""

    def test_any_bond(self):
        assert count_substructure_matches(parse("C~O"), parse("CC(=O)O")) == 2

    def test_single_or_double(self):
        query = Molecule()
        c = query.add_atom("C")
        o = query.add_atom("O")
        query.add_bond(c, o, order=BondOrder.SINGLE_OR_DOUBLE)
        assert is_substructure_of(query, parse("C=O"))
        assert is_substructure_of(query, parse("CO"))
        assert not is_substructure_of(query, parse("c1ccoc1"))

    def test_single_or_aromatic(self):
        query = Molecule()
        a = query.add_atom("C")
        b = query.add_atom("C")
        query.add_bond(a, b, order=BondOrder.SINGLE_OR_AROMATIC)
        assert is_substructure_of(query, parse("c1ccccc1"))
        assert not is_substructure_of(query, parse("C=C"))

    @pytest.mark.parametrize("query", ["[R1]O", "*O"])
    def test_wildcard_atom(self, query):
        matches = SubstructureMatcher(parse(query), parse("CCO")).find_all()
        assert [m.atom_mapping for m in matches] == [(1, 2)]

    def test_disconnected_query(self):
        matches = SubstructureMatcher(parse("C.O"), parse("CCO")).find_all()
        assert [m.atom_mapping for m in matches] == [(0, 2), (1, 2)]


class TestLimits:
    """Edge cases and the node limit."""

    def test_empty_query(self):
        assert SubstructureMatcher(Molecule(), parse("CC")).find_all() == [Match((), ())]

    def test_query_larger_than_target(self):
        assert SubstructureMatcher(parse("CCC"), parse("CC")).find_all() == []

    def test_node_limit(self):
        matcher = SubstructureMatcher(parse("CCCCCC"), parse("C" * 30), max_nodes=5)
        matches = matcher.find_all()
        assert matcher.exhausted
        assert matcher.nodes > 5
        assert len(matches) < count_substructure_matches(parse("CCCCCC"), parse("C" * 30), uniquify=False)

    def test_unbounded_search_not_exhausted(self):
        matcher = SubstructureMatcher(parse("CC"), parse("CCC"))
        assert matcher.count_matches() == 4
        assert not matcher.exhausted

    def test_uniquified_helper(self):
        matches = find_substructure_matches(parse("CC"), parse("CCC"))
        assert len(matches) == 2


class TestContainment:
    """Induced connected subgraphs are always found in their parent."""

    @pytest.mark.parametrize("size", [1, 2, 3, 5, 8])
    def test_drug_fragments(self, drug_smiles, size):
        for smiles in drug_smiles:
            mol = parse(smiles)
            fragment = mol.submolecule(bfs_prefix(mol, size))
            assert fragment.num_atoms == size
            assert is_substructure_of(fragment, mol)

    def test_whole_molecule(self, drug_smiles):
        for smiles in drug_smiles:
            mol = parse(smiles)
            match = SubstructureMatcher(mol, mol).find_first()
            assert match is not None
            assert sorted(match.atom_mapping) == list(range(mol.num_atoms))


class TestExactMatch:
    """Whole-molecule identity."""

    def test_same_molecule_different_order(self):
        assert is_exact_match(parse("OCC"), parse("CCO"))
        assert is_exact_match(parse("Cc1ccccc1"), parse("c1ccc(C)cc1"))

    def test_isomers_differ(self):
        assert not is_exact_match(parse("CCO"), parse("COC"))
        assert not is_exact_match(parse("C=CCC"), parse("CC=CC"))

    def test_substructure_is_not_exact(self):
        assert is_substructure_of(parse("CO"), parse("CCO"))
        assert not is_exact_match(parse("CO"), parse("CCO"))

    def test_charge_isotope_and_hydrogens_compared(self):
        assert not is_exact_match(parse("CC[O-]"), parse("CCO"))
        assert not is_exact_match(parse("[13CH4]"), parse("C"))
        assert not is_exact_match(parse("[CH2]C"), parse("CC"))

    def test_bond_order_compared_exactly(self):
        assert not is_exact_match(parse("C~C"), parse("CC"))

    def test_empty_molecules(self):
        assert is_exact_match(Molecule(), Molecule())

    def test_every_drug_matches_itself(self, drug_smiles):
        for smiles in drug_smiles:
            assert is_exact_match(parse(smiles), parse(smiles))
