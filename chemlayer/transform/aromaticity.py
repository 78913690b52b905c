"""
Aromaticity perception.

This module detects aromatic rings with Hückel's rule (4n+2 pi electrons).

Every simple ring of 5 to 8 atoms is examined on its own. Each ring atom
receives a pi label (how many electrons it puts into the ring's pi system)
from its element, charge, hydrogen count and the bonds it makes inside and
outside that ring. A ring whose atoms are all eligible and whose label sum
satisfies Hückel's rule has its bonds set to aromatic. Passes repeat until
no further ring qualifies, so fused rings drawn in a Kekulé form that only
becomes aromatic once a neighbouring ring is converted are also found.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from chemlayer.elements import BondOrder, Radical, is_aromatic_capable
from chemlayer.rings import find_rings, ring_edge_bonds

if TYPE_CHECKING:
    from chemlayer.types import Molecule

logger = logging.getLogger(__name__)

MIN_RING_SIZE = 5
MAX_RING_SIZE = 8

# Exocyclic double bonds that keep a ring atom eligible
_CARBONYL_LIKE: frozenset[int] = frozenset({7, 8, 16})  # C=N, C=O, C=S
_SULFOXIDE_LIKE: frozenset[int] = frozenset({8})        # S=O


@runtime_checkable
class AromaticityModel(Protocol):
    """Protocol for aromaticity perception models."""

    def perceive(self, mol: "Molecule") -> None:
        """Perceive and assign aromaticity to atoms and bonds."""
        ...


class PiLabel(IntEnum):
    """Electrons a ring atom contributes to the ring's pi system."""

    VACANT = 0  # empty p orbital
    ONE = 1     # one electron (double bond partner or radical)
    PAIR = 2    # lone pair


def pi_label(mol: "Molecule", atom_idx: int, ring_bonds: set[int]) -> PiLabel | None:
    """Pi label of one atom with respect to one ring.

    Args:
        mol: Parent molecule.
        atom_idx: Ring atom.
        ring_bonds: Bond indices of the ring's edges.

    Returns:
        The label, or None if the atom cannot take part in an aromatic
        ring (ineligible element, sp3 centre, disallowed exocyclic double
        bond, triple bond).

    Example:
        >>> mol = parse("C1=CNC=C1")  # pyrrole, Kekulé form
        >>> ring = find_rings(mol)[0]
        >>> pi_label(mol, 2, set(ring_edge_bonds(mol, ring)))
        <PiLabel.PAIR: 2>
    """
    atom = mol.atoms[atom_idx]
    if not atom.is_element or not is_aromatic_capable(atom.atomic_number):
        return None
    elem = atom.element
    group = elem.group if elem else 0

    if atom.radical == Radical.DOUBLET:
        return PiLabel.ONE

    ring_orders: list[int] = []
    exocyclic_double: list[int] = []
    for bond in atom.get_bonds(mol):
        if bond.order == BondOrder.TRIPLE:
            return None
        if bond.idx in ring_bonds:
            ring_orders.append(bond.order)
        elif bond.order == BondOrder.DOUBLE:
            exocyclic_double.append(mol.atoms[bond.other_atom(atom_idx)].atomic_number)

    has_ring_double = BondOrder.DOUBLE in ring_orders

    if exocyclic_double:
        if len(exocyclic_double) > 1 or has_ring_double:
            return None
        partner = exocyclic_double[0]
        if group == 14 and partner in _CARBONYL_LIKE:
            return PiLabel.VACANT
        if atom.atomic_number == 16 and partner in _SULFOXIDE_LIKE:
            return PiLabel.PAIR
        return None

    if has_ring_double:
        return PiLabel.ONE

    charge = atom.charge
    if BondOrder.AROMATIC in ring_orders:
        if group == 13:
            return PiLabel.VACANT
        if group == 14:
            if charge == -1:
                return PiLabel.PAIR
            if charge == 1:
                return PiLabel.VACANT
            return PiLabel.ONE
        if group == 15:
            if charge == 0:
                sigma = mol.degree(atom_idx) + mol.implicit_hydrogens(atom_idx)
                return PiLabel.PAIR if sigma == 3 else PiLabel.ONE
            return PiLabel.ONE if charge == 1 else PiLabel.PAIR
        if group == 16:
            return PiLabel.ONE if charge == 1 else PiLabel.PAIR
        return None

    # Only single bonds in this ring
    sigma = mol.degree(atom_idx) + mol.implicit_hydrogens(atom_idx)
    if group == 13:
        return PiLabel.VACANT
    if group == 14:
        if charge == 1:
            return PiLabel.VACANT
        if charge == -1:
            return PiLabel.PAIR
        return None
    if group == 15:
        if (charge == 0 and sigma == 3) or charge == -1:
            return PiLabel.PAIR
        return None
    if group == 16:
        if charge == 0 and sigma == 2:
            return PiLabel.PAIR
        return None
    return None


def is_huckel(electrons: int) -> bool:
    """Check Hückel's rule: 4n+2 pi electrons, n >= 0."""
    return electrons >= 2 and (electrons - 2) % 4 == 0


def ring_pi_electrons(mol: "Molecule", ring: tuple[int, ...]) -> int | None:
    """Total pi electrons of a ring, or None if any atom is ineligible."""
    bonds = set(ring_edge_bonds(mol, ring))
    total = 0
    for atom_idx in ring:
        label = pi_label(mol, atom_idx, bonds)
        if label is None:
            return None
        total += label
    return total


def freeze_hydrogens(mol: "Molecule", atoms: set[int], before: dict[int, int]) -> None:
    """Pin hydrogen counts that a bond-order change would otherwise alter."""
    for atom_idx in sorted(atoms):
        atom = mol.atoms[atom_idx]
        if atom.explicit_hydrogens is not None or not atom.is_element:
            continue
        if mol.implicit_hydrogens(atom_idx) != before[atom_idx]:
            mol.set_explicit_hydrogens(atom_idx, before[atom_idx])


class AromaticityPerceiver:
    """Hückel-based aromaticity perception.

    This perceiver implements aromaticity detection using:

    1. Enumerate simple rings within the size window
    2. Label each ring atom with its pi contribution for that ring
    3. Keep rings whose atoms are all eligible and satisfy 4n+2
    4. Set every bond of a kept ring aromatic, once per bond
    5. Repeat until a pass converts nothing new

    Hydrogen counts of converted atoms are frozen into explicit overrides,
    and cis/trans entries of bonds that stopped being double are dropped.
    """

    def __init__(
        self,
        min_ring_size: int = MIN_RING_SIZE,
        max_ring_size: int = MAX_RING_SIZE,
    ) -> None:
        """Initialize perceiver.

        Args:
            min_ring_size: Smallest ring examined.
            max_ring_size: Largest ring examined.
        """
        self._min_ring_size = min_ring_size
        self._max_ring_size = max_ring_size

    def perceive(self, mol: "Molecule") -> None:
        """Perceive and assign aromaticity.

        Args:
            mol: Molecule to analyze (modified in-place).
        """
        rings = find_rings(mol, self._min_ring_size, self._max_ring_size)
        if not rings:
            return

        before = {i: mol.implicit_hydrogens(i) for i in range(mol.num_atoms)}
        touched: set[int] = set()
        aromatic_rings: set[tuple[int, ...]] = set()
        passes = 0

        while True:
            passes += 1
            membership: dict[int, int] = {}
            qualifying: list[tuple[int, ...]] = []
            for ring in rings:
                if ring in aromatic_rings:
                    continue
                electrons = ring_pi_electrons(mol, ring)
                if electrons is None or not is_huckel(electrons):
                    continue
                qualifying.append(ring)
                for bond_idx in ring_edge_bonds(mol, ring):
                    membership[bond_idx] = membership.get(bond_idx, 0) + 1

            if not qualifying:
                break

            for bond_idx in membership:
                if mol.bonds[bond_idx].order != BondOrder.AROMATIC:
                    mol.set_bond_order(bond_idx, BondOrder.AROMATIC)
            for ring in qualifying:
                aromatic_rings.add(ring)
                for atom_idx in ring:
                    touched.add(atom_idx)
                    if not mol.atoms[atom_idx].is_aromatic:
                        mol.set_aromatic_flag(atom_idx, True)

        if not aromatic_rings:
            return

        freeze_hydrogens(mol, touched, before)
        mol.cis_trans.retain(lambda k, v: mol.bonds[k].order == BondOrder.DOUBLE)
        logger.debug(
            "Perceived %d aromatic rings in %d passes", len(aromatic_rings), passes
        )


def perceive_aromaticity(
    mol: "Molecule",
    model: AromaticityModel | None = None,
) -> None:
    """Perceive aromaticity in a molecule.

    This is a convenience function that applies aromaticity perception
    to a molecule using the specified model (or default). A molecule with
    no qualifying ring is left unchanged.

    Args:
        mol: Molecule to analyze (modified in-place).
        model: Aromaticity model to use (default: AromaticityPerceiver).

    Example:
        >>> mol = parse("C1=CC=CC=C1")  # Benzene with explicit double bonds
        >>> perceive_aromaticity(mol)
        >>> mol.bonds[0].is_aromatic
        True
    """
    if model is None:
        model = AromaticityPerceiver()

    model.perceive(mol)


aromatize = perceive_aromaticity
