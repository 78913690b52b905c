"""
Cis/trans (double bond) stereo perception.

Configurations are derived either from the directional single-bond marks
(``/`` and ``\\``) read by the parser, or from 3D coordinates. Both paths
only consider candidate double bonds: not in a ring smaller than eight,
each end carrying one or two distinguishable substituents.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chemlayer.canon import symmetry_classes
from chemlayer.elements import BondDirection, BondOrder
from chemlayer.rings import smallest_ring_size
from chemlayer.stereo.geometry import cross, dot, norm, sub
from chemlayer.stereo.tables import IMPLICIT, CisTransParity

if TYPE_CHECKING:
    from chemlayer.types import Molecule

logger = logging.getLogger(__name__)

# Double bonds in rings up to this size cannot be trans
MAX_RIGID_RING_SIZE = 7

# Minimum |cos| between the substituent half-planes for a 3D assignment
COORDINATE_TOLERANCE = 0.01


def _side_substituents(mol: "Molecule", center: int, partner: int) -> list[int] | None:
    """Neighbours of ``center`` other than ``partner``, or None if the side
    cannot carry a configuration."""
    subs = [n for n in mol.neighbors(center) if n != partner]
    if not 1 <= len(subs) <= 2:
        return None
    for neighbor in subs:
        bond = mol.get_bond_between(center, neighbor)
        if bond.order not in (BondOrder.SINGLE, BondOrder.AROMATIC):
            return None
    if len(subs) + mol.implicit_hydrogens(center) > 2:
        return None
    return subs


def find_cis_trans_candidates(
    mol: "Molecule",
    classes: list[int] | None = None,
) -> dict[int, tuple[int, int, int, int]]:
    """Find double bonds that can carry a cis/trans configuration.

    Args:
        mol: Molecule to analyze.
        classes: Symmetry classes; computed when omitted.

    Returns:
        Mapping of bond index to substituent slots
        ``(begin_sub1, begin_sub2, end_sub1, end_sub2)`` with ``-1`` for a
        missing second substituent.

    Example:
        >>> mol = parse("CC=CC")
        >>> find_cis_trans_candidates(mol)
        {1: (0, -1, 3, -1)}
        >>> find_cis_trans_candidates(parse("CC(C)=CC"))
        {}
    """
    if classes is None:
        classes = symmetry_classes(mol)

    candidates: dict[int, tuple[int, int, int, int]] = {}
    for bond in mol.bonds:
        if bond.order != BondOrder.DOUBLE:
            continue
        begin, end = bond.atom1_idx, bond.atom2_idx
        if not (mol.atoms[begin].is_element and mol.atoms[end].is_element):
            continue
        begin_subs = _side_substituents(mol, begin, end)
        end_subs = _side_substituents(mol, end, begin)
        if begin_subs is None or end_subs is None:
            continue
        if any(len(s) == 2 and classes[s[0]] == classes[s[1]] for s in (begin_subs, end_subs)):
            continue
        if smallest_ring_size(mol, bond.idx, MAX_RIGID_RING_SIZE) is not None:
            continue
        candidates[bond.idx] = (
            begin_subs[0],
            begin_subs[1] if len(begin_subs) == 2 else IMPLICIT,
            end_subs[0],
            end_subs[1] if len(end_subs) == 2 else IMPLICIT,
        )
    return candidates


def _outward_mark(mol: "Molecule", center: int, subs: tuple[int, int]) -> BondDirection | None:
    """Mark of the reference substituent, read from ``center`` outward.

    A mark found only on the second substituent is flipped, since the two
    substituents of one atom lie on opposite sides.
    """
    for i, neighbor in enumerate(subs):
        if neighbor == IMPLICIT:
            continue
        bond = mol.get_bond_between(center, neighbor)
        if bond.direction not in (BondDirection.UP, BondDirection.DOWN):
            continue
        mark = bond.direction_from(center)
        return mark if i == 0 else mark.flipped()
    return None


def perceive_cis_trans_from_marks(mol: "Molecule") -> int:
    """Rebuild the cis/trans table from directional bond marks.

    Matching outward marks on the two ends mean the reference substituents
    are on the same side (cis); differing marks mean trans. Candidate bonds
    with marks on one end only are left out.

    Returns:
        Number of configured double bonds.

    Example:
        >>> mol = parse("F/C=C/F")
        >>> mol.cis_trans.parity(1)
        <CisTransParity.TRANS: 2>
    """
    mol.cis_trans.clear()
    if not any(b.direction != BondDirection.NONE for b in mol.bonds):
        return 0

    configured = 0
    for bond_idx, subs in find_cis_trans_candidates(mol).items():
        bond = mol.bonds[bond_idx]
        begin_mark = _outward_mark(mol, bond.atom1_idx, subs[:2])
        end_mark = _outward_mark(mol, bond.atom2_idx, subs[2:])
        if begin_mark is None or end_mark is None:
            if begin_mark is not None or end_mark is not None:
                logger.debug("Double bond %d has marks on one end only", bond_idx)
            continue
        parity = CisTransParity.CIS if begin_mark == end_mark else CisTransParity.TRANS
        mol.cis_trans.add(bond_idx, subs, parity)
        configured += 1
    return configured


def cis_trans_from_coordinates(
    mol: "Molecule",
    bond_idx: int,
    substituents: tuple[int, int, int, int],
) -> CisTransParity:
    """Configuration of one double bond from 3D coordinates.

    The normals of the planes (bond, reference substituent) on both ends
    point the same way for cis and opposite ways for trans; nearly
    perpendicular normals leave the bond undetermined.
    """
    bond = mol.bonds[bond_idx]
    begin, end = bond.atom1_idx, bond.atom2_idx
    points = [mol.atoms[i].xyz for i in (begin, end, substituents[0], substituents[2])]
    if any(p is None for p in points):
        return CisTransParity.NONE
    p_begin, p_end, p_sub1, p_sub2 = points

    axis = sub(p_end, p_begin)
    n1 = cross(axis, sub(p_sub1, p_begin))
    n2 = cross(axis, sub(p_sub2, p_end))
    length = norm(n1) * norm(n2)
    if length == 0.0:
        return CisTransParity.NONE
    cosine = dot(n1, n2) / length
    if cosine > COORDINATE_TOLERANCE:
        return CisTransParity.CIS
    if cosine < -COORDINATE_TOLERANCE:
        return CisTransParity.TRANS
    return CisTransParity.NONE


def perceive_cis_trans_from_coordinates(mol: "Molecule") -> int:
    """Rebuild the cis/trans table from 3D coordinates.

    Returns:
        Number of configured double bonds.
    """
    mol.cis_trans.clear()
    configured = 0
    for bond_idx, subs in find_cis_trans_candidates(mol).items():
        parity = cis_trans_from_coordinates(mol, bond_idx, subs)
        if parity == CisTransParity.NONE:
            logger.debug("Double bond %d is too distorted to assign", bond_idx)
            continue
        mol.cis_trans.add(bond_idx, subs, parity)
        configured += 1
    return configured
