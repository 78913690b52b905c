"""
Simple molecular descriptors.

Counts and sums computed directly from the molecular graph: formula,
average and isotopic masses, elemental composition, heavy atoms,
rotatable bonds, hydrogen-bond donors and acceptors, topological polar
surface area, and an order-independent structural hash.

Example:
    >>> from chemlayer import parse
    >>> from chemlayer.properties import molecular_formula, rotatable_bonds
    >>> molecular_formula(parse("CCO"))
    'C2H6O'
    >>> rotatable_bonds(parse("CCCC"))
    1
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from chemlayer.elements import (
    BondOrder,
    get_atomic_mass,
    get_isotope_mass,
    get_isotopes,
    get_principal_isotope_mass,
)
from chemlayer.identifier.layers import formula_layer
from chemlayer.rings import find_rings, ring_bonds

if TYPE_CHECKING:
    from chemlayer.types import Molecule

_HYDROGEN_MASS = get_atomic_mass(1)

_FNV64_OFFSET = 0xCBF29CE484222325
_FNV64_PRIME = 0x100000001B3
_MASK64 = 0xFFFFFFFFFFFFFFFF
_GOLDEN64 = 0x9E3779B97F4A7C15


def molecular_formula(mol: "Molecule") -> str:
    """Molecular formula in Hill order, implicit hydrogens included."""
    return formula_layer(mol)


def molecular_weight(mol: "Molecule") -> float:
    """Average molecular weight in g/mol.

    Isotope-labelled atoms contribute their mass number instead of the
    standard atomic weight. Pseudo atoms and attachment points weigh
    nothing.
    """
    weight = 0.0
    for atom in mol.atoms:
        if not atom.is_element:
            continue
        weight += float(atom.isotope) if atom.isotope else get_atomic_mass(atom.atomic_number)
        weight += mol.implicit_hydrogens(atom.idx) * _HYDROGEN_MASS
    return weight


def heavy_atom_count(mol: "Molecule") -> int:
    return sum(1 for atom in mol.atoms if atom.is_element and atom.atomic_number != 1)


def rotatable_bonds(mol: "Molecule") -> int:
    """Count single, acyclic bonds between two non-terminal heavy atoms."""
    in_ring = ring_bonds(mol)
    count = 0
    for bond in mol.bonds:
        if bond.order != BondOrder.SINGLE or bond.idx in in_ring:
            continue
        if mol.heavy_degree(bond.atom1_idx) < 2 or mol.heavy_degree(bond.atom2_idx) < 2:
            continue
        if mol.atoms[bond.atom1_idx].atomic_number == 1 or mol.atoms[bond.atom2_idx].atomic_number == 1:
            continue
        count += 1
    return count


def hbond_acceptors(mol: "Molecule") -> int:
    """Count uncharged or anionic O (connectivity <= 2) and N (<= 3)."""
    count = 0
    for atom in mol.atoms:
        if atom.charge > 0:
            continue
        conn = mol.connectivity(atom.idx)
        if atom.atomic_number == 8 and conn <= 2:
            count += 1
        elif atom.atomic_number == 7 and conn <= 3:
            count += 1
    return count


def hbond_donors(mol: "Molecule") -> int:
    """Count O and N atoms, not anionic, that carry at least one hydrogen."""
    count = 0
    for atom in mol.atoms:
        if atom.atomic_number not in (7, 8) or atom.charge < 0:
            continue
        if mol.total_hydrogens(atom.idx) > 0:
            count += 1
    return count


def _fnv1a_64(h: int, value: int) -> int:
    for _ in range(8):
        h ^= value & 0xFF
        h = (h * _FNV64_PRIME) & _MASK64
        value >>= 8
    return h


def molecule_hash(mol: "Molecule") -> int:
    """64-bit structural hash over the heavy-atom graph.

    Atom codes start from (atomic number, charge, isotope, heavy degree)
    and are refined by repeatedly folding in the sorted (neighbour code,
    bond order) pairs, at least twice and otherwise ``(bonds + 1) // 2``
    times. The result does not depend on atom or bond order.

    Returns:
        Unsigned 64-bit integer, 0 for a molecule without heavy atoms.
    """
    heavy = [atom.idx for atom in mol.atoms if atom.atomic_number != 1]
    if not heavy:
        return 0
    heavy_set = set(heavy)

    codes: dict[int, int] = {}
    for idx in heavy:
        atom = mol.atoms[idx]
        charge = min(max(atom.charge + 2048, 0), 4095)
        degree = sum(1 for n in mol.neighbors(idx) if n in heavy_set)
        packed = (
            ((atom.atomic_number & 0xFFFF) << 48)
            | (charge << 36)
            | ((atom.isotope & 0xFFFF) << 20)
            | ((degree & 0xFF) << 12)
        )
        codes[idx] = _fnv1a_64(_FNV64_OFFSET, packed)

    iterations = max(2, (mol.num_bonds + 1) // 2)
    for _ in range(iterations):
        refined: dict[int, int] = {}
        for idx in heavy:
            pairs = sorted(
                (codes[bond.other_atom(idx)] ^ _GOLDEN64, bond.order & 0xF)
                for bond in mol.atoms[idx].get_bonds(mol)
                if bond.other_atom(idx) in heavy_set
            )
            h = _fnv1a_64(_FNV64_OFFSET, codes[idx])
            for code, order in pairs:
                h = _fnv1a_64(h, code)
                h = _fnv1a_64(h, order)
            refined[idx] = h
        codes = refined

    graph_hash = _FNV64_OFFSET
    for code in sorted(codes.values()):
        graph_hash = _fnv1a_64(graph_hash, code)
    return graph_hash


# Ertl polar surface contributions keyed by
# (heavy neighbours, hydrogens, single, double, triple, aromatic, charge)
_NITROGEN_AREAS: dict[tuple[int, ...], float] = {
    (1, 0, 0, 0, 1, 0, 0): 23.79,
    (1, 1, 0, 1, 0, 0, 0): 23.85,
    (1, 2, 1, 0, 0, 0, 0): 26.02,
    (1, 2, 0, 1, 0, 0, 1): 25.59,
    (1, 3, 1, 0, 0, 0, 1): 27.64,
    (2, 0, 1, 1, 0, 0, 0): 12.36,
    (2, 0, 0, 1, 1, 0, 0): 13.60,
    (2, 1, 2, 0, 0, 0, 0): 12.03,
    (2, 0, 1, 0, 1, 0, 1): 4.36,
    (2, 1, 1, 1, 0, 0, 1): 13.97,
    (2, 2, 2, 0, 0, 0, 1): 16.61,
    (2, 0, 0, 0, 0, 2, 0): 12.89,
    (2, 1, 0, 0, 0, 2, 0): 15.79,
    (2, 1, 0, 0, 0, 2, 1): 14.14,
    (3, 0, 3, 0, 0, 0, 0): 3.24,
    (3, 0, 1, 2, 0, 0, 0): 11.68,
    (3, 0, 2, 1, 0, 0, 1): 3.01,
    (3, 1, 3, 0, 0, 0, 1): 4.44,
    (3, 0, 0, 0, 0, 3, 0): 4.41,
    (3, 0, 1, 0, 0, 2, 0): 4.93,
    (3, 0, 0, 1, 0, 2, 0): 8.39,
    (3, 0, 0, 0, 0, 3, 1): 4.10,
    (3, 0, 1, 0, 0, 2, 1): 3.88,
    (4, 0, 4, 0, 0, 0, 1): 0.00,
}

_OXYGEN_AREAS: dict[tuple[int, ...], float] = {
    (1, 0, 0, 1, 0, 0, 0): 17.07,
    (1, 1, 1, 0, 0, 0, 0): 20.23,
    (1, 0, 1, 0, 0, 0, -1): 23.06,
    (2, 0, 2, 0, 0, 0, 0): 9.23,
    (2, 0, 0, 0, 0, 2, 0): 13.14,
}

# Same environments inside a three-membered ring
_SMALL_RING_AREAS: dict[tuple[int, tuple[int, ...]], float] = {
    (7, (2, 1, 2, 0, 0, 0, 0)): 21.94,
    (7, (3, 0, 3, 0, 0, 0, 0)): 3.01,
    (8, (2, 0, 2, 0, 0, 0, 0)): 12.53,
}

_SULFUR_AREAS: dict[tuple[int, ...], float] = {
    (1, 0, 0, 1, 0, 0, 0): 32.09,
    (1, 1, 1, 0, 0, 0, 0): 38.80,
    (2, 0, 2, 0, 0, 0, 0): 25.30,
    (2, 0, 0, 0, 0, 2, 0): 28.24,
    (3, 0, 0, 1, 0, 2, 0): 21.70,
    (3, 0, 2, 1, 0, 0, 0): 19.21,
    (4, 0, 2, 2, 0, 0, 0): 8.38,
}

_PHOSPHORUS_AREAS: dict[tuple[int, ...], float] = {
    (2, 0, 1, 1, 0, 0, 0): 34.14,
    (3, 0, 3, 0, 0, 0, 0): 13.59,
    (3, 1, 2, 1, 0, 0, 0): 23.47,
    (4, 0, 3, 1, 0, 0, 0): 9.81,
}


def _polar_environment(mol: "Molecule", idx: int) -> tuple[int, ...]:
    orders = [
        bond.order
        for bond in mol.atoms[idx].get_bonds(mol)
        if mol.atoms[bond.other_atom(idx)].atomic_number != 1
    ]
    return (
        len(orders),
        mol.total_hydrogens(idx),
        orders.count(BondOrder.SINGLE),
        orders.count(BondOrder.DOUBLE),
        orders.count(BondOrder.TRIPLE),
        orders.count(BondOrder.AROMATIC),
        mol.atoms[idx].charge,
    )


def tpsa(mol: "Molecule", include_sp: bool = False) -> float:
    """Topological polar surface area in square angstroms.

    Sums the fragment contributions of Ertl et al. (J. Med. Chem. 2000)
    over nitrogen and oxygen atoms. Environments missing from the table
    use the fallback formula of the same paper.

    Args:
        mol: Molecule to describe.
        include_sp: Also count sulfur and phosphorus contributions.

    Example:
        >>> tpsa(parse("CCO"))
        20.23
    """
    small_ring = {atom for ring in find_rings(mol, 3, 3) for atom in ring}
    area = 0.0
    for atom in mol.atoms:
        z = atom.atomic_number
        if z not in (7, 8) and not (include_sp and z in (15, 16)):
            continue
        env = _polar_environment(mol, atom.idx)
        if atom.idx in small_ring and (z, env) in _SMALL_RING_AREAS:
            area += _SMALL_RING_AREAS[(z, env)]
        elif z == 7:
            area += _NITROGEN_AREAS.get(env, max(0.0, 30.5 - 8.2 * env[0] + 1.5 * env[1]))
        elif z == 8:
            area += _OXYGEN_AREAS.get(env, max(0.0, 28.5 - 8.6 * env[0] + 1.5 * env[1]))
        elif z == 16:
            area += _SULFUR_AREAS.get(env, 0.0)
        else:
            area += _PHOSPHORUS_AREAS.get(env, 0.0)
    return round(area, 2)


def monoisotopic_mass(mol: "Molecule") -> float:
    """Exact mass with every atom as its most abundant isotope.

    Isotope-labelled atoms use the exact mass of their label.
    """
    mass = 0.0
    for atom in mol.atoms:
        if not atom.is_element:
            continue
        if atom.isotope:
            mass += get_isotope_mass(atom.atomic_number, atom.isotope)
        else:
            mass += get_principal_isotope_mass(atom.atomic_number)
        mass += mol.implicit_hydrogens(atom.idx) * get_principal_isotope_mass(1)
    return mass


def _most_abundant_split(atomic_number: int, count: int) -> float:
    """Mass of the most probable isotope mix of ``count`` atoms.

    Greedily adds one atom at a time as the isotope that raises the
    multinomial probability most, which reaches its mode.
    """
    isotopes = [entry for entry in get_isotopes(atomic_number) if entry[2] > 0.0]
    if not isotopes:
        return count * get_atomic_mass(atomic_number)
    taken = [0] * len(isotopes)
    for _ in range(count):
        best = max(range(len(isotopes)), key=lambda i: isotopes[i][2] / (taken[i] + 1))
        taken[best] += 1
    return sum(n * isotopes[i][1] for i, n in enumerate(taken))


def most_abundant_mass(mol: "Molecule") -> float:
    """Mass of the most abundant isotopic species.

    Unlabelled atoms of each element (implicit hydrogens included) take
    their most probable isotope distribution; labelled atoms keep their
    label.

    Example:
        >>> round(most_abundant_mass(parse("BrBr")), 4)
        159.8346
    """
    counts: dict[int, int] = {}
    mass = 0.0
    for atom in mol.atoms:
        if not atom.is_element:
            continue
        if atom.isotope:
            mass += get_isotope_mass(atom.atomic_number, atom.isotope)
        else:
            counts[atom.atomic_number] = counts.get(atom.atomic_number, 0) + 1
        hydrogens = mol.implicit_hydrogens(atom.idx)
        if hydrogens:
            counts[1] = counts.get(1, 0) + hydrogens
    for atomic_number, count in counts.items():
        mass += _most_abundant_split(atomic_number, count)
    return mass


def mass_composition(mol: "Molecule") -> dict[str, float]:
    """Mass percent of each element, keys in Hill order.

    Masses follow ``molecular_weight``. A molecule without element atoms
    gives an empty mapping.

    Example:
        >>> {k: round(v, 2) for k, v in mass_composition(parse("CCO")).items()}
        {'C': 52.14, 'H': 13.13, 'O': 34.73}
    """
    masses: dict[str, float] = {}
    for atom in mol.atoms:
        if not atom.is_element:
            continue
        atom_mass = float(atom.isotope) if atom.isotope else get_atomic_mass(atom.atomic_number)
        masses[atom.symbol] = masses.get(atom.symbol, 0.0) + atom_mass
        hydrogens = mol.implicit_hydrogens(atom.idx)
        if hydrogens:
            masses["H"] = masses.get("H", 0.0) + hydrogens * _HYDROGEN_MASS

    total = sum(masses.values())
    if total <= 0.0:
        return {}
    if "C" in masses:
        order = ["C"] + (["H"] if "H" in masses else [])
        order += sorted(s for s in masses if s not in ("C", "H"))
    else:
        order = sorted(masses)
    return {symbol: 100.0 * masses[symbol] / total for symbol in order}
