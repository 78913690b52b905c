"""
Chemical elements and constants.

This module provides the periodic table (symbol, name, group, period and
standard atomic weight for every element), the bond and radical
enumerations shared by the molecular graph, and the valence tables used
for implicit hydrogen calculation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Final, FrozenSet


# Atomic numbers of the three "non-element" atom kinds.
PSEUDO: Final[int] = -1
RSITE: Final[int] = -2
TEMPLATE: Final[int] = -3

SENTINEL_SYMBOLS: Final[dict[int, str]] = {
    PSEUDO: "*",
    RSITE: "R#",
    TEMPLATE: "T",
}


class BondOrder(IntEnum):
    """Bond order enumeration.

    The last four members only appear in query graphs.
    """

    SINGLE = 1
    DOUBLE = 2
    TRIPLE = 3
    AROMATIC = 4
    SINGLE_OR_DOUBLE = 5
    SINGLE_OR_AROMATIC = 6
    DOUBLE_OR_AROMATIC = 7
    ANY = 8

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def is_query(self) -> bool:
        """Whether this order is only meaningful in a query graph."""
        return self >= BondOrder.SINGLE_OR_DOUBLE

    def admits(self, order: int) -> bool:
        """Check whether a concrete target order satisfies this order."""
        if self is BondOrder.ANY:
            return True
        return order in _QUERY_ADMITS.get(self, (self,))


_QUERY_ADMITS: Final[dict[BondOrder, tuple[BondOrder, ...]]] = {
    BondOrder.SINGLE_OR_DOUBLE: (BondOrder.SINGLE, BondOrder.DOUBLE),
    BondOrder.SINGLE_OR_AROMATIC: (BondOrder.SINGLE, BondOrder.AROMATIC),
    BondOrder.DOUBLE_OR_AROMATIC: (BondOrder.DOUBLE, BondOrder.AROMATIC),
}


class BondDirection(IntEnum):
    """Directional mark on a single bond (``/`` is UP, ``\\`` is DOWN).

    The mark reads from ``atom1_idx`` towards ``atom2_idx`` of the bond.
    """

    NONE = 0
    UP = 1
    DOWN = 2
    EITHER = 3

    def flipped(self) -> "BondDirection":
        if self is BondDirection.UP:
            return BondDirection.DOWN
        if self is BondDirection.DOWN:
            return BondDirection.UP
        return self


class Radical(IntEnum):
    """Radical state of an atom."""

    NONE = 0
    SINGLET = 2
    DOUBLET = 3
    TRIPLET = 4

    @property
    def unpaired_electrons(self) -> int:
        """Number of electrons removed from bonding by this state."""
        if self is Radical.DOUBLET:
            return 1
        if self in (Radical.SINGLET, Radical.TRIPLET):
            return 2
        return 0


@dataclass(frozen=True, slots=True)
class Element:
    """Immutable element data.

    Attributes:
        atomic_number: Atomic number (proton count).
        symbol: Element symbol (e.g., "C", "Cl").
        name: Full element name.
        mass: Standard atomic weight in g/mol.
        group: Periodic table group (1-18, f-block reports 3).
        period: Periodic table row (1-7).
    """

    atomic_number: int
    symbol: str
    name: str
    mass: float
    group: int
    period: int

    # Class-level registry
    _by_symbol: ClassVar[dict[str, "Element"]] = {}
    _by_number: ClassVar[dict[int, "Element"]] = {}

    def __post_init__(self) -> None:
        Element._by_symbol[self.symbol] = self
        Element._by_number[self.atomic_number] = self

    @property
    def is_aromatic_capable(self) -> bool:
        """Whether the element can take part in an aromatic ring."""
        return self.atomic_number in AROMATIC_CAPABLE_ELEMENTS

    @property
    def default_valences(self) -> tuple[int, ...]:
        return DEFAULT_VALENCES.get(self.atomic_number, ())

    @classmethod
    def from_symbol(cls, symbol: str) -> "Element | None":
        """Look up element by symbol.

        Exact spelling is tried first, then the capitalized form so that
        aromatic spellings such as ``c`` or ``se`` resolve.
        """
        if symbol in cls._by_symbol:
            return cls._by_symbol[symbol]
        return cls._by_symbol.get(symbol.capitalize())

    @classmethod
    def from_atomic_number(cls, num: int) -> "Element | None":
        """Look up element by atomic number."""
        return cls._by_number.get(num)


def _group_and_period(z: int) -> tuple[int, int]:
    """Derive (group, period) from the atomic number."""
    if z <= 2:
        return (1 if z == 1 else 18), 1

    period_ends = (2, 10, 18, 36, 54, 86, 118)
    period = next(p for p, end in enumerate(period_ends, start=1) if z <= end)
    offset = z - period_ends[period - 2]  # 1-based position in the row

    if period in (2, 3):
        return (offset if offset <= 2 else offset + 10), period
    if period in (4, 5):
        return offset, period

    # Periods 6 and 7 carry the f-block (positions 3..17)
    if offset <= 2:
        return offset, period
    if offset <= 17:
        return 3, period
    return offset - 14, period


_ELEMENTS_DATA: Final[list[tuple[int, str, str, float]]] = [
    # (atomic_number, symbol, name, standard atomic weight)
    (1, "H", "Hydrogen", 1.008),
    (2, "He", "Helium", 4.0026),
    (3, "Li", "Lithium", 6.94),
    (4, "Be", "Beryllium", 9.0122),
    (5, "B", "Boron", 10.81),
    (6, "C", "Carbon", 12.011),
    (7, "N", "Nitrogen", 14.007),
    (8, "O", "Oxygen", 15.999),
    (9, "F", "Fluorine", 18.998),
    (10, "Ne", "Neon", 20.180),
    (11, "Na", "Sodium", 22.990),
    (12, "Mg", "Magnesium", 24.305),
    (13, "Al", "Aluminum", 26.982),
    (14, "Si", "Silicon", 28.085),
    (15, "P", "Phosphorus", 30.974),
    (16, "S", "Sulfur", 32.06),
    (17, "Cl", "Chlorine", 35.45),
    (18, "Ar", "Argon", 39.948),
    (19, "K", "Potassium", 39.098),
    (20, "Ca", "Calcium", 40.078),
    (21, "Sc", "Scandium", 44.956),
    (22, "Ti", "Titanium", 47.867),
    (23, "V", "Vanadium", 50.942),
    (24, "Cr", "Chromium", 51.996),
    (25, "Mn", "Manganese", 54.938),
    (26, "Fe", "Iron", 55.845),
    (27, "Co", "Cobalt", 58.933),
    (28, "Ni", "Nickel", 58.693),
    (29, "Cu", "Copper", 63.546),
    (30, "Zn", "Zinc", 65.38),
    (31, "Ga", "Gallium", 69.723),
    (32, "Ge", "Germanium", 72.630),
    (33, "As", "Arsenic", 74.922),
    (34, "Se", "Selenium", 78.971),
    (35, "Br", "Bromine", 79.904),
    (36, "Kr", "Krypton", 83.798),
    (37, "Rb", "Rubidium", 85.468),
    (38, "Sr", "Strontium", 87.62),
    (39, "Y", "Yttrium", 88.906),
    (40, "Zr", "Zirconium", 91.224),
    (41, "Nb", "Niobium", 92.906),
    (42, "Mo", "Molybdenum", 95.95),
    (43, "Tc", "Technetium", 98.0),
    (44, "Ru", "Ruthenium", 101.07),
    (45, "Rh", "Rhodium", 102.91),
    (46, "Pd", "Palladium", 106.42),
    (47, "Ag", "Silver", 107.87),
    (48, "Cd", "Cadmium", 112.41),
    (49, "In", "Indium", 114.82),
    (50, "Sn", "Tin", 118.71),
    (51, "Sb", "Antimony", 121.76),
    (52, "Te", "Tellurium", 127.60),
    (53, "I", "Iodine", 126.90),
    (54, "Xe", "Xenon", 131.29),
    (55, "Cs", "Cesium", 132.91),
    (56, "Ba", "Barium", 137.33),
    (57, "La", "Lanthanum", 138.91),
    (58, "Ce", "Cerium", 140.12),
    (59, "Pr", "Praseodymium", 140.91),
    (60, "Nd", "Neodymium", 144.24),
    (61, "Pm", "Promethium", 145.0),
    (62, "Sm", "Samarium", 150.36),
    (63, "Eu", "Europium", 151.96),
    (64, "Gd", "Gadolinium", 157.25),
    (65, "Tb", "Terbium", 158.93),
    (66, "Dy", "Dysprosium", 162.50),
    (67, "Ho", "Holmium", 164.93),
    (68, "Er", "Erbium", 167.26),
    (69, "Tm", "Thulium", 168.93),
    (70, "Yb", "Ytterbium", 173.05),
    (71, "Lu", "Lutetium", 174.97),
    (72, "Hf", "Hafnium", 178.49),
    (73, "Ta", "Tantalum", 180.95),
    (74, "W", "Tungsten", 183.84),
    (75, "Re", "Rhenium", 186.21),
    (76, "Os", "Osmium", 190.23),
    (77, "Ir", "Iridium", 192.22),
    (78, "Pt", "Platinum", 195.08),
    (79, "Au", "Gold", 196.97),
    (80, "Hg", "Mercury", 200.59),
    (81, "Tl", "Thallium", 204.38),
    (82, "Pb", "Lead", 207.2),
    (83, "Bi", "Bismuth", 208.98),
    (84, "Po", "Polonium", 209.0),
    (85, "At", "Astatine", 210.0),
    (86, "Rn", "Radon", 222.0),
    (87, "Fr", "Francium", 223.0),
    (88, "Ra", "Radium", 226.0),
    (89, "Ac", "Actinium", 227.0),
    (90, "Th", "Thorium", 232.04),
    (91, "Pa", "Protactinium", 231.04),
    (92, "U", "Uranium", 238.03),
    (93, "Np", "Neptunium", 237.0),
    (94, "Pu", "Plutonium", 244.0),
    (95, "Am", "Americium", 243.0),
    (96, "Cm", "Curium", 247.0),
    (97, "Bk", "Berkelium", 247.0),
    (98, "Cf", "Californium", 251.0),
    (99, "Es", "Einsteinium", 252.0),
    (100, "Fm", "Fermium", 257.0),
    (101, "Md", "Mendelevium", 258.0),
    (102, "No", "Nobelium", 259.0),
    (103, "Lr", "Lawrencium", 266.0),
    (104, "Rf", "Rutherfordium", 267.0),
    (105, "Db", "Dubnium", 268.0),
    (106, "Sg", "Seaborgium", 269.0),
    (107, "Bh", "Bohrium", 270.0),
    (108, "Hs", "Hassium", 269.0),
    (109, "Mt", "Meitnerium", 278.0),
    (110, "Ds", "Darmstadtium", 281.0),
    (111, "Rg", "Roentgenium", 282.0),
    (112, "Cn", "Copernicium", 285.0),
    (113, "Nh", "Nihonium", 286.0),
    (114, "Fl", "Flerovium", 289.0),
    (115, "Mc", "Moscovium", 290.0),
    (116, "Lv", "Livermorium", 293.0),
    (117, "Ts", "Tennessine", 294.0),
    (118, "Og", "Oganesson", 294.0),
]

ELEMENTS: Final[tuple[Element, ...]] = tuple(
    Element(num, sym, name, mass, *_group_and_period(num))
    for num, sym, name, mass in _ELEMENTS_DATA
)

# Daylight "organic subset" - atoms that can appear without brackets
ORGANIC_SUBSET: Final[FrozenSet[str]] = frozenset({
    "B", "C", "N", "O", "P", "S", "F", "Cl", "Br", "I",
})

# Aromatic element symbols allowed in lowercase form
AROMATIC_SUBSET: Final[FrozenSet[str]] = frozenset({
    "b", "c", "n", "o", "p", "s", "as", "se",
})

TWO_LETTER_ORGANIC: Final[FrozenSet[str]] = frozenset({"Cl", "Br"})

# Elements able to adopt a planar sp2 arrangement inside a ring
AROMATIC_CAPABLE_ELEMENTS: Final[FrozenSet[int]] = frozenset({
    5,   # B
    6,   # C
    7,   # N
    8,   # O
    14,  # Si
    15,  # P
    16,  # S
    33,  # As
    34,  # Se
    52,  # Te
})

# Allowed valences, lowest first, for implicit hydrogen calculation
DEFAULT_VALENCES: Final[dict[int, tuple[int, ...]]] = {
    1: (1,),          # H
    5: (3,),          # B
    6: (4,),          # C
    7: (3, 5),        # N
    8: (2,),          # O
    9: (1,),          # F
    14: (4,),         # Si
    15: (3, 5),       # P
    16: (2, 4, 6),    # S
    17: (1,),         # Cl
    33: (3, 5),       # As
    34: (2, 4, 6),    # Se
    35: (1,),         # Br
    52: (2, 4, 6),    # Te
    53: (1,),         # I
}

# Stable isotopes: (mass number, exact mass, natural abundance)
ISOTOPES: Final[dict[int, tuple[tuple[int, float, float], ...]]] = {
    1: ((1, 1.00782503207, 0.999885), (2, 2.0141017778, 0.000115), (3, 3.0160492777, 0.0)),
    3: ((6, 6.015122795, 0.0759), (7, 7.01600455, 0.9241)),
    5: ((10, 10.0129370, 0.199), (11, 11.0093054, 0.801)),
    6: ((12, 12.0, 0.9893), (13, 13.0033548378, 0.0107), (14, 14.003241989, 0.0)),
    7: ((14, 14.0030740048, 0.99636), (15, 15.0001088982, 0.00364)),
    8: ((16, 15.99491461956, 0.99757), (17, 16.99913170, 0.00038), (18, 17.9991610, 0.00205)),
    9: ((19, 18.99840322, 1.0),),
    11: ((23, 22.9897692809, 1.0),),
    12: ((24, 23.985041700, 0.7899), (25, 24.98583692, 0.1000), (26, 25.982592929, 0.1101)),
    14: ((28, 27.9769265325, 0.92223), (29, 28.976494700, 0.04685), (30, 29.97377017, 0.03092)),
    15: ((31, 30.97376163, 1.0),),
    16: ((32, 31.97207100, 0.9499), (33, 32.97145876, 0.0075), (34, 33.96786690, 0.0425),
         (36, 35.96708076, 0.0001)),
    17: ((35, 34.96885268, 0.7576), (37, 36.96590259, 0.2424)),
    19: ((39, 38.96370668, 0.932581), (40, 39.96399848, 0.000117), (41, 40.96182576, 0.067302)),
    20: ((40, 39.96259098, 0.96941), (42, 41.95861801, 0.00647), (43, 42.9587666, 0.00135),
         (44, 43.9554818, 0.02086), (46, 45.9536926, 0.00004), (48, 47.952534, 0.00187)),
    34: ((74, 73.9224764, 0.0089), (76, 75.9192136, 0.0937), (77, 76.9199140, 0.0763),
         (78, 77.9173091, 0.2377), (80, 79.9165213, 0.4961), (82, 81.9166994, 0.0873)),
    35: ((79, 78.9183371, 0.5069), (81, 80.9162906, 0.4931)),
    53: ((127, 126.904473, 1.0),),
}


def get_atomic_number(symbol: str) -> int:
    """Get atomic number for an element symbol.

    Args:
        symbol: Element symbol (e.g., "C", "cl", "Cl").

    Returns:
        Atomic number, or 0 if not found.
    """
    elem = Element.from_symbol(symbol)
    return elem.atomic_number if elem else 0


def get_symbol(atomic_num: int) -> str:
    """Get the symbol for an atomic number or sentinel kind.

    Raises:
        KeyError: If the number is neither an element nor a sentinel.
    """
    if atomic_num in SENTINEL_SYMBOLS:
        return SENTINEL_SYMBOLS[atomic_num]
    elem = Element.from_atomic_number(atomic_num)
    if elem is None:
        raise KeyError(f"Unknown atomic number: {atomic_num}")
    return elem.symbol


def get_default_valences(atomic_num: int) -> tuple[int, ...]:
    """Get allowed valences for an element (empty if not tabulated)."""
    return DEFAULT_VALENCES.get(atomic_num, ())


def get_atomic_mass(atomic_num: int) -> float:
    """Get standard atomic weight, 0.0 for sentinels and unknowns."""
    elem = Element.from_atomic_number(atomic_num)
    return elem.mass if elem else 0.0


def get_isotopes(atomic_num: int) -> tuple[tuple[int, float, float], ...]:
    """Get (mass number, exact mass, abundance) entries, empty if not tabulated."""
    return ISOTOPES.get(atomic_num, ())


def get_isotope_mass(atomic_num: int, mass_number: int) -> float:
    """Exact mass of one isotope.

    Untabulated isotopes fall back to the mass number itself.
    """
    for number, mass, _ in get_isotopes(atomic_num):
        if number == mass_number:
            return mass
    return float(mass_number)


def get_principal_isotope_mass(atomic_num: int) -> float:
    """Exact mass of the most abundant isotope.

    Elements without isotope data fall back to the standard atomic weight.
    """
    isotopes = get_isotopes(atomic_num)
    if not isotopes:
        return get_atomic_mass(atomic_num)
    return max(isotopes, key=lambda entry: entry[2])[1]


def get_element_group(atomic_num: int) -> int | None:
    """Get periodic table group for an element."""
    elem = Element.from_atomic_number(atomic_num)
    return elem.group if elem else None


def is_aromatic_capable(atomic_num: int) -> bool:
    return atomic_num in AROMATIC_CAPABLE_ELEMENTS


def is_organic_symbol(symbol: str) -> bool:
    """Check if symbol may be written without brackets."""
    return symbol in ORGANIC_SUBSET or symbol in AROMATIC_SUBSET


def is_aromatic_symbol(symbol: str) -> bool:
    """Check if symbol is a lowercase aromatic spelling."""
    return symbol in AROMATIC_SUBSET
