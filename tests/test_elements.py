"""Tests for the element table and shared enumerations."""

import pytest

from chemlayer.elements import (
    AROMATIC_SUBSET,
    ORGANIC_SUBSET,
    PSEUDO,
    RSITE,
    BondDirection,
    BondOrder,
    Element,
    Radical,
    get_atomic_mass,
    get_atomic_number,
    get_default_valences,
    get_element_group,
    get_isotope_mass,
    get_isotopes,
    get_principal_isotope_mass,
    get_symbol,
    is_aromatic_capable,
)


class TestElementLookup:
    """Symbol and number lookups."""

    @pytest.mark.parametrize("symbol,number", [
        ("H", 1), ("C", 6), ("N", 7), ("O", 8), ("Cl", 17), ("Br", 35), ("Og", 118),
    ])
    def test_atomic_number(self, symbol, number):
        assert get_atomic_number(symbol) == number
        assert get_symbol(number) == symbol

    def test_aromatic_spelling(self):
        assert get_atomic_number("c") == 6
        assert get_atomic_number("se") == 34

    def test_unknown_symbol(self):
        assert get_atomic_number("Xx") == 0
        assert Element.from_symbol("Xx") is None
        assert Element.from_atomic_number(200) is None

    def test_unknown_number_symbol(self):
        with pytest.raises(KeyError):
            get_symbol(500)

    def test_sentinel_symbols(self):
        assert get_symbol(PSEUDO) == "*"
        assert get_symbol(RSITE) == "R#"

    def test_table_is_complete(self):
        for z in range(1, 119):
            assert Element.from_atomic_number(z) is not None


class TestPeriodicPosition:
    """Group and period derivation."""

    @pytest.mark.parametrize("symbol,group,period", [
        ("H", 1, 1),
        ("He", 18, 1),
        ("C", 14, 2),
        ("Na", 1, 3),
        ("Cl", 17, 3),
        ("Fe", 8, 4),
        ("I", 17, 5),
        ("La", 3, 6),
        ("Lu", 3, 6),
        ("Hf", 4, 6),
        ("U", 3, 7),
    ])
    def test_group_and_period(self, symbol, group, period):
        elem = Element.from_symbol(symbol)
        assert elem.group == group
        assert elem.period == period

    def test_group_helper(self):
        assert get_element_group(8) == 16
        assert get_element_group(-1) is None


class TestElementProperties:
    """Masses, valences and aromatic eligibility."""

    def test_masses(self):
        assert get_atomic_mass(6) == pytest.approx(12.011)
        assert get_atomic_mass(PSEUDO) == 0.0

    def test_default_valences(self):
        assert get_default_valences(6) == (4,)
        assert get_default_valences(16) == (2, 4, 6)
        assert get_default_valences(26) == ()

    @pytest.mark.parametrize("z", [5, 6, 7, 8, 14, 15, 16, 33, 34, 52])
    def test_aromatic_capable(self, z):
        assert is_aromatic_capable(z)
        assert Element.from_atomic_number(z).is_aromatic_capable

    @pytest.mark.parametrize("z", [1, 9, 17, 26])
    def test_not_aromatic_capable(self, z):
        assert not is_aromatic_capable(z)

    def test_subsets(self):
        assert "Cl" in ORGANIC_SUBSET
        assert "Na" not in ORGANIC_SUBSET
        assert "se" in AROMATIC_SUBSET


class TestIsotopes:
    """Isotope masses and abundances."""

    def test_abundances_sum_to_one(self):
        for z in (1, 6, 7, 8, 16, 17, 35):
            assert sum(entry[2] for entry in get_isotopes(z)) == pytest.approx(1.0, abs=1e-3)

    def test_principal_isotope(self):
        assert get_principal_isotope_mass(6) == 12.0
        assert get_principal_isotope_mass(35) == pytest.approx(78.9183371)

    def test_principal_falls_back_to_weight(self):
        assert get_principal_isotope_mass(26) == get_atomic_mass(26)

    def test_isotope_mass(self):
        assert get_isotope_mass(1, 2) == pytest.approx(2.0141017778)
        assert get_isotope_mass(6, 11) == 11.0

    def test_untabulated_element(self):
        assert get_isotopes(26) == ()


class TestEnumerations:
    """Bond orders, directions and radicals."""

    def test_query_orders(self):
        assert not BondOrder.AROMATIC.is_query
        assert BondOrder.SINGLE_OR_DOUBLE.is_query
        assert BondOrder.ANY.is_query

    @pytest.mark.parametrize("query,target,expected", [
        (BondOrder.SINGLE, BondOrder.SINGLE, True),
        (BondOrder.SINGLE, BondOrder.DOUBLE, False),
        (BondOrder.SINGLE_OR_DOUBLE, BondOrder.DOUBLE, True),
        (BondOrder.SINGLE_OR_DOUBLE, BondOrder.AROMATIC, False),
        (BondOrder.SINGLE_OR_AROMATIC, BondOrder.AROMATIC, True),
        (BondOrder.DOUBLE_OR_AROMATIC, BondOrder.SINGLE, False),
        (BondOrder.ANY, BondOrder.TRIPLE, True),
    ])
    def test_admits(self, query, target, expected):
        assert query.admits(target) is expected

    def test_direction_flip(self):
        assert BondDirection.UP.flipped() == BondDirection.DOWN
        assert BondDirection.DOWN.flipped() == BondDirection.UP
        assert BondDirection.NONE.flipped() == BondDirection.NONE

    def test_radical_electrons(self):
        assert Radical.NONE.unpaired_electrons == 0
        assert Radical.DOUBLET.unpaired_electrons == 1
        assert Radical.TRIPLET.unpaired_electrons == 2
