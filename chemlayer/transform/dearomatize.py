"""
Dearomatization - convert aromatic bonds back to single/double bonds.

Each all-aromatic six-membered ring receives an alternating single/double
pattern starting at its lowest-indexed atom. Edges already fixed by an
earlier ring are kept; when neither phase fits the whole ring, the
remaining edges of a fused ring get whichever phase avoids a second double
bond on an atom. Aromatic bonds outside any processed six-ring become
single. The pattern
is a deterministic choice, not a search for a chemically valid Kekulé
structure.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chemlayer.elements import BondOrder
from chemlayer.rings import find_rings, ring_edge_bonds
from chemlayer.transform.aromaticity import freeze_hydrogens

if TYPE_CHECKING:
    from chemlayer.types import Molecule

logger = logging.getLogger(__name__)


def _phase_pattern(edges: list[int], phase: int) -> dict[int, BondOrder]:
    return {
        bond_idx: BondOrder.DOUBLE if i % 2 == phase else BondOrder.SINGLE
        for i, bond_idx in enumerate(edges)
    }


def _fits(
    mol: "Molecule",
    pattern: dict[int, BondOrder],
    assigned: dict[int, BondOrder],
) -> bool:
    """Whether a ring pattern agrees with earlier rings and gives no atom
    two double bonds."""
    for bond_idx, order in pattern.items():
        if bond_idx in assigned and assigned[bond_idx] != order:
            return False

    merged = dict(assigned)
    merged.update(pattern)
    doubles: dict[int, int] = {}
    for bond_idx, order in merged.items():
        if order != BondOrder.DOUBLE:
            continue
        bond = mol.bonds[bond_idx]
        for atom_idx in (bond.atom1_idx, bond.atom2_idx):
            doubles[atom_idx] = doubles.get(atom_idx, 0) + 1
            if doubles[atom_idx] > 1:
                return False
    return True


def dearomatize(mol: "Molecule") -> None:
    """Replace aromatic bonds by an alternating single/double pattern.

    Hydrogen counts are preserved through explicit overrides, and atoms
    left without aromatic bonds lose their aromatic flag. A molecule
    without aromatic bonds is left unchanged.

    Args:
        mol: Molecule to modify in place.

    Example:
        >>> mol = parse("c1ccccc1")
        >>> dearomatize(mol)
        >>> [int(b.order) for b in mol.bonds]
        [2, 1, 2, 1, 2, 1]
    """
    aromatic_bonds = [b.idx for b in mol.bonds if b.order == BondOrder.AROMATIC]
    if not aromatic_bonds:
        return

    before = {i: mol.implicit_hydrogens(i) for i in range(mol.num_atoms)}
    touched: set[int] = set()
    for bond_idx in aromatic_bonds:
        touched.add(mol.bonds[bond_idx].atom1_idx)
        touched.add(mol.bonds[bond_idx].atom2_idx)

    assigned: dict[int, BondOrder] = {}
    rings = 0
    for ring in find_rings(mol, 6, 6):
        edges = ring_edge_bonds(mol, ring)
        if any(mol.bonds[b].order != BondOrder.AROMATIC for b in edges):
            continue
        rings += 1
        # Whole-ring phases first, then the same phases on unassigned edges only
        candidates = [_phase_pattern(edges, phase) for phase in (0, 1)]
        candidates += [
            {b: order for b, order in p.items() if b not in assigned} for p in candidates
        ]
        pattern = next((p for p in candidates if _fits(mol, p, assigned)), candidates[2])
        assigned.update(pattern)

    for bond_idx in aromatic_bonds:
        mol.set_bond_order(bond_idx, assigned.get(bond_idx, BondOrder.SINGLE))

    for atom_idx in sorted(touched):
        if mol.atoms[atom_idx].is_aromatic and not any(
            b.order == BondOrder.AROMATIC for b in mol.atoms[atom_idx].get_bonds(mol)
        ):
            mol.set_aromatic_flag(atom_idx, False)

    freeze_hydrogens(mol, touched, before)
    logger.debug(
        "Dearomatized %d bonds using %d six-membered rings", len(aromatic_bonds), rings
    )
