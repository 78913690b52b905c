"""
Tetrahedral stereocenter perception.

A pyramid lists four neighbours in "@" order: looking from the first, the
other three run counter-clockwise. Pyramids come from the parser's ``@``/
``@@`` marks, from 3D coordinates, or from an explicit assignment.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from chemlayer.canon import symmetry_classes
from chemlayer.exceptions import StructuralError
from chemlayer.stereo.cis_trans import (
    perceive_cis_trans_from_coordinates,
    perceive_cis_trans_from_marks,
)
from chemlayer.stereo.geometry import signed_volume, sub, unit
from chemlayer.stereo.tables import IMPLICIT, Stereocenter, StereoKind

if TYPE_CHECKING:
    from chemlayer.types import Molecule

logger = logging.getLogger(__name__)

# Elements that may carry a tetrahedral center: C, N, P, S
STEREO_ELEMENTS: frozenset[int] = frozenset({6, 7, 15, 16})

# Minimum |signed volume| of normalised bond vectors
VOLUME_TOLERANCE = 0.01


def permutation_parity(reference: Sequence[int], other: Sequence[int]) -> int:
    """Parity (0 even, 1 odd) of the permutation taking ``reference`` to ``other``.

    Raises:
        ValueError: If the sequences are not permutations of each other.

    Example:
        >>> permutation_parity([1, 2, 3, 4], [1, 2, 4, 3])
        1
    """
    if sorted(reference) != sorted(other):
        raise ValueError(f"{list(other)} is not a permutation of {list(reference)}")
    position = {value: i for i, value in enumerate(reference)}
    perm = [position[value] for value in other]
    parity = 0
    seen = [False] * len(perm)
    for i in range(len(perm)):
        if seen[i]:
            continue
        length = 0
        j = i
        while not seen[j]:
            seen[j] = True
            j = perm[j]
            length += 1
        parity ^= (length - 1) & 1
    return parity


def pyramid_parity(center: Stereocenter, order: Sequence[int]) -> int:
    """Parity of a neighbour ordering relative to a center's pyramid.

    0 means ``order`` describes the same configuration as the pyramid
    (``@`` when written in that order), 1 the mirror image.
    """
    return permutation_parity(center.pyramid, order)


def _substituents(mol: "Molecule", atom_idx: int) -> list[int]:
    subs = mol.neighbors(atom_idx)
    subs.extend([IMPLICIT] * mol.implicit_hydrogens(atom_idx))
    return subs


def find_stereocenter_candidates(
    mol: "Molecule",
    classes: list[int] | None = None,
) -> list[int]:
    """Atoms that can carry a tetrahedral configuration.

    Carbon needs four substituents (implicit hydrogens included); N, P
    and S accept three plus a lone pair. All substituents must be
    pairwise distinguishable by symmetry class, with hydrogens (implicit
    or explicit) forming one class.

    Example:
        >>> find_stereocenter_candidates(parse("CC(O)CC"))
        [1]
        >>> find_stereocenter_candidates(parse("CC(C)O"))
        []
    """
    if classes is None:
        classes = symmetry_classes(mol)

    candidates: list[int] = []
    for atom in mol.atoms:
        if atom.atomic_number not in STEREO_ELEMENTS:
            continue
        if mol.is_aromatic_atom(atom.idx):
            continue
        subs = _substituents(mol, atom.idx)
        required = (4,) if atom.atomic_number == 6 else (3, 4)
        if len(subs) not in required:
            continue
        keys = [
            -1 if s == IMPLICIT or mol.atoms[s].atomic_number == 1 else classes[s]
            for s in subs
        ]
        if len(set(keys)) == len(keys):
            candidates.append(atom.idx)
    return candidates


def set_stereocenter(
    mol: "Molecule",
    atom_idx: int,
    pyramid: Sequence[int],
    kind: StereoKind = StereoKind.ABS,
    group: int = 0,
) -> Stereocenter:
    """Assign a stereocenter with an explicit pyramid.

    Args:
        mol: Molecule to modify.
        atom_idx: Center atom.
        pyramid: Neighbours in "@" order, with ``-1`` for an implicit
            hydrogen or lone pair (a 3-tuple gets it appended).
        kind: Configuration class.
        group: AND/OR group number.

    Raises:
        StructuralError: If the pyramid does not list exactly the atom's
            neighbours.
    """
    members = list(pyramid)
    if len(members) == 3:
        members.append(IMPLICIT)
    neighbors = mol.neighbors(atom_idx)
    real = [p for p in members if p != IMPLICIT]
    if sorted(real) != sorted(neighbors):
        raise StructuralError(
            f"Pyramid {tuple(pyramid)} does not match neighbours {neighbors} of atom {atom_idx}"
        )
    return mol.stereocenters.add(atom_idx, kind, tuple(members), group)


def pyramid_from_coordinates(mol: "Molecule", atom_idx: int) -> tuple[int, int, int, int] | None:
    """Pyramid of a center from 3D coordinates, or None if near-planar.

    A missing hydrogen or lone pair direction is taken as the negative sum
    of the others.
    """
    center = mol.atoms[atom_idx].xyz
    neighbors = mol.neighbors(atom_idx)
    if center is None or any(mol.atoms[n].xyz is None for n in neighbors):
        return None
    if len(neighbors) not in (3, 4):
        return None

    vectors = [unit(sub(mol.atoms[n].xyz, center)) for n in neighbors]
    order = list(neighbors)
    if len(neighbors) == 3:
        vectors.append(unit(tuple(-sum(v[k] for v in vectors) for k in range(3))))
        order.append(IMPLICIT)

    v0, v1, v2, v3 = vectors
    vol_a = signed_volume(v0, v1, v2)
    vol_b = signed_volume(v0, v2, v3)
    if abs(vol_a) <= VOLUME_TOLERANCE or abs(vol_b) <= VOLUME_TOLERANCE:
        return None
    if (vol_a > 0) != (vol_b > 0):
        return None
    if vol_a > 0:
        return (order[0], order[1], order[2], order[3])
    return (order[0], order[1], order[3], order[2])


def perceive_stereocenters_from_coordinates(mol: "Molecule") -> int:
    """Rebuild the stereocenter table from 3D coordinates.

    Returns:
        Number of assigned stereocenters.
    """
    mol.stereocenters.clear()
    assigned = 0
    for atom_idx in find_stereocenter_candidates(mol):
        if mol.implicit_hydrogens(atom_idx) > 1:
            continue
        pyramid = pyramid_from_coordinates(mol, atom_idx)
        if pyramid is None:
            logger.debug("Atom %d is too flat to assign", atom_idx)
            continue
        mol.stereocenters.add(atom_idx, StereoKind.ABS, pyramid)
        assigned += 1
    return assigned


def perceive_stereo(mol: "Molecule") -> None:
    """Perceive all stereo configurations of a molecule.

    With full 3D coordinates both tables are rebuilt from geometry.
    Otherwise cis/trans comes from directional marks, and recorded
    stereocenters on atoms that cannot be stereogenic are dropped.

    Example:
        >>> mol = parse("C[C@H](C)O")
        >>> perceive_stereo(mol)
        >>> len(mol.stereocenters)
        0
    """
    if mol.has_coordinates(three_d=True):
        centers = perceive_stereocenters_from_coordinates(mol)
        bonds = perceive_cis_trans_from_coordinates(mol)
        logger.debug("Perceived %d centers and %d double bonds from 3D", centers, bonds)
        return

    perceive_cis_trans_from_marks(mol)
    candidates = set(find_stereocenter_candidates(mol))
    dropped = [a for a in mol.stereocenters if a not in candidates]
    for atom_idx in dropped:
        mol.stereocenters.remove(atom_idx)
    if dropped:
        logger.debug("Dropped stereo marks on non-stereogenic atoms %s", dropped)
