"""
Canonical atom ranking.

Canonical numbering is isolated behind the ``CanonicalRanking`` protocol so
that the writer and the identifier generator never depend on a particular
algorithm. Two strategies are provided:

* ``ElementDegreeRanking``: the coarse sort by atomic number (descending)
  then heavy-atom degree (descending), ties broken by atom index.
* ``RefinementRanking``: iterative colour refinement over atom invariants
  followed by tie-breaking. Atoms with different refined classes get
  the same relative order for any input order of the same graph; atoms
  left tied (symmetric atoms) are ordered by input index. Callers that
  must not depend on that choice use ``rank_choices``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Hashable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from chemlayer.types import Molecule

logger = logging.getLogger(__name__)

AtomInvariant = Callable[["Molecule", int], Hashable]

# Upper bound on tie-breaking alternatives explored by rank_choices
CHOICE_LIMIT = 64


@runtime_checkable
class CanonicalRanking(Protocol):
    """Strategy producing a total order of a molecule's atoms."""

    def ranks(self, mol: "Molecule") -> list[int]:
        """Return ``ranks[i]``, the 0-based canonical position of atom ``i``.

        Ranks form a permutation of ``range(mol.num_atoms)``.
        """
        ...


def _dense_rank(keys: list) -> list[int]:
    order = {key: i for i, key in enumerate(sorted(set(keys)))}
    return [order[key] for key in keys]


def _neighbor_table(mol: "Molecule") -> list[list[tuple[int, int]]]:
    neighbors: list[list[tuple[int, int]]] = [[] for _ in range(mol.num_atoms)]
    for bond in mol.bonds:
        neighbors[bond.atom1_idx].append((bond.atom2_idx, int(bond.order)))
        neighbors[bond.atom2_idx].append((bond.atom1_idx, int(bond.order)))
    return neighbors


def _lowest_tie(classes: list[int]) -> int | None:
    """Smallest class shared by more than one atom, or None."""
    counts: dict[int, int] = {}
    for c in classes:
        counts[c] = counts.get(c, 0) + 1
    tied = [c for c, count in counts.items() if count > 1]
    return min(tied) if tied else None


def atom_invariant(mol: "Molecule", idx: int) -> tuple:
    """Default refinement seed: local features that survive renumbering."""
    atom = mol.atoms[idx]
    return (
        mol.heavy_degree(idx),
        atom.atomic_number,
        atom.isotope,
        atom.charge,
        mol.total_hydrogens(idx),
        mol.is_aromatic_atom(idx),
        int(atom.radical),
    )


class ElementDegreeRanking:
    """Coarse ranking: atomic number descending, then degree descending.

    Atoms the key cannot separate keep their input order, so the result
    depends on how the molecule was written.
    """

    @staticmethod
    def invariant(mol: "Molecule", idx: int) -> tuple[int, int]:
        return (-mol.atoms[idx].atomic_number, -mol.heavy_degree(idx))

    def ranks(self, mol: "Molecule") -> list[int]:
        order = sorted(range(mol.num_atoms), key=lambda i: (self.invariant(mol, i), i))
        ranks = [0] * mol.num_atoms
        for position, atom_idx in enumerate(order):
            ranks[atom_idx] = position
        return ranks


class RefinementRanking:
    """Colour refinement with tie-breaking.

    Atoms start in classes given by ``invariant``; each round splits a
    class by the sorted multiset of (neighbour class, bond order). When
    refinement stalls with tied atoms, the lowest tied class is split by
    promoting one member and refinement resumes, until every atom has its
    own rank. ``ranks`` always promotes the lowest-indexed member, so
    atoms that refinement cannot tell apart are ordered by input index;
    ``rank_choices`` explores every member instead.

    Args:
        invariant: Seed function ``(mol, idx) -> hashable``; classes are
            ordered by it. Defaults to ``atom_invariant``.
    """

    def __init__(self, invariant: AtomInvariant | None = None) -> None:
        self._invariant = invariant or atom_invariant

    def _initial(self, mol: "Molecule") -> tuple[list[int], list[list[tuple[int, int]]]]:
        neighbors = _neighbor_table(mol)
        classes = _dense_rank([self._invariant(mol, i) for i in range(mol.num_atoms)])
        return self._refine(classes, neighbors), neighbors

    def ranks(self, mol: "Molecule") -> list[int]:
        n = mol.num_atoms
        if n == 0:
            return []

        classes, neighbors = self._initial(mol)
        ties_broken = 0
        tied = _lowest_tie(classes)
        while tied is not None:
            classes = self._promote(classes, tied, classes.index(tied), neighbors)
            ties_broken += 1
            tied = _lowest_tie(classes)

        logger.debug("Canonical ranking of %d atoms broke %d ties", n, ties_broken)
        return classes

    def rank_choices(self, mol: "Molecule", limit: int = CHOICE_LIMIT) -> list[list[int]]:
        """Rankings for every way of breaking ties, at most ``limit``.

        The first entry equals ``ranks(mol)``. Symmetric atoms yield
        several rankings that describe the same graph; callers pick among
        them by a criterion that does not depend on atom order.
        """
        if mol.num_atoms == 0:
            return [[]]

        start, neighbors = self._initial(mol)
        results: list[list[int]] = []
        stack = [start]
        while stack and len(results) < limit:
            classes = stack.pop()
            tied = _lowest_tie(classes)
            if tied is None:
                results.append(classes)
                continue
            members = [i for i, c in enumerate(classes) if c == tied]
            for chosen in reversed(members):
                stack.append(self._promote(classes, tied, chosen, neighbors))

        if stack:
            logger.debug("Stopped tie exploration at %d rankings", limit)
        return results

    @classmethod
    def _promote(
        cls,
        classes: list[int],
        tied: int,
        chosen: int,
        neighbors: list[list[tuple[int, int]]],
    ) -> list[int]:
        split = _dense_rank([
            2 * c + (1 if c == tied and i != chosen else 0)
            for i, c in enumerate(classes)
        ])
        return cls._refine(split, neighbors)

    @staticmethod
    def _refine(classes: list[int], neighbors: list[list[tuple[int, int]]]) -> list[int]:
        count = len(set(classes))
        while True:
            keys = [
                (classes[i], tuple(sorted((classes[j], order) for j, order in neighbors[i])))
                for i in range(len(classes))
            ]
            refined = _dense_rank(keys)
            refined_count = len(set(refined))
            if refined_count == count:
                return refined
            classes, count = refined, refined_count


def symmetry_classes(mol: "Molecule", invariant: AtomInvariant | None = None) -> list[int]:
    """Refined atom classes without tie-breaking.

    Atoms sharing a class are indistinguishable by refinement, which is
    how symmetry-equivalent atoms (the two methyls of isopropyl, the ring
    carbons of benzene) are detected.
    """
    if mol.num_atoms == 0:
        return []
    return RefinementRanking(invariant)._initial(mol)[0]


def canonical_ranks(mol: "Molecule", ranking: CanonicalRanking | None = None) -> list[int]:
    """Compute canonical ranks for all atoms.

    Args:
        mol: Molecule to rank.
        ranking: Strategy to use (``RefinementRanking()`` by default).

    Returns:
        ``ranks[i]`` is the 0-based canonical position of atom ``i``.

    Example:
        >>> mol = parse("OCC")
        >>> canonical_ranks(mol)
        [1, 2, 0]
    """
    strategy = ranking if ranking is not None else RefinementRanking()
    return strategy.ranks(mol)


def canonical_order(mol: "Molecule", ranking: CanonicalRanking | None = None) -> list[int]:
    """Atom indices sorted by canonical rank."""
    ranks = canonical_ranks(mol, ranking)
    return sorted(range(mol.num_atoms), key=lambda i: ranks[i])
