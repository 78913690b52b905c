"""
Substructure matching.

This module finds embeddings of a query molecule in a target molecule by
backtracking subgraph search: query atoms are mapped one at a time onto
unused target atoms, pruned by atom compatibility and by requiring every
already-mapped query bond to have a compatible target bond.

Example:
    >>> from chemlayer import parse
    >>> from chemlayer.match import SubstructureMatcher
    >>>
    >>> matcher = SubstructureMatcher(parse("CO"), parse("CCO"))
    >>> [m.atom_mapping for m in matcher.find_all()]
    [(1, 2)]
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

from chemlayer.elements import BondOrder

if TYPE_CHECKING:
    from chemlayer.types import Atom, Bond, Molecule

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Match:
    """One embedding of a query in a target.

    Attributes:
        atom_mapping: ``atom_mapping[i]`` is the target atom matched by
            query atom ``i``.
        bond_mapping: ``bond_mapping[j]`` is the target bond matched by
            query bond ``j``.
    """

    atom_mapping: tuple[int, ...]
    bond_mapping: tuple[int, ...]


def _atom_matches(query_atom: "Atom", target_atom: "Atom") -> bool:
    """Check if a target atom satisfies a query atom.

    Attachment points and pseudo atoms in the query match any atom.
    Otherwise element and charge must agree, and the target atom needs at
    least as many explicit neighbours as the query atom.
    """
    if query_atom.is_rsite or query_atom.is_pseudo:
        return True
    if query_atom.atomic_number != target_atom.atomic_number:
        return False
    if query_atom.charge != target_atom.charge:
        return False
    return len(target_atom.bond_indices) >= len(query_atom.bond_indices)


def _bond_matches(query_bond: "Bond", target_bond: "Bond") -> bool:
    return BondOrder(query_bond.order).admits(target_bond.order)


def _search_order(query: "Molecule") -> list[int]:
    """Query atoms in breadth-first order, component by component, so
    that every atom after a component's first has a mapped neighbour."""
    order: list[int] = []
    seen: set[int] = set()
    for root in range(query.num_atoms):
        if root in seen:
            continue
        seen.add(root)
        queue = deque([root])
        while queue:
            atom_idx = queue.popleft()
            order.append(atom_idx)
            for nbr in query.atoms[atom_idx].neighbors(query):
                if nbr not in seen:
                    seen.add(nbr)
                    queue.append(nbr)
    return order


class SubstructureMatcher:
    """Backtracking subgraph matcher.

    Args:
        query: Molecule to look for.
        target: Molecule to search in.
        max_nodes: Optional cap on search nodes (candidate extensions);
            when reached the search stops and ``exhausted`` is set.
    """

    def __init__(
        self,
        query: "Molecule",
        target: "Molecule",
        max_nodes: int | None = None,
    ) -> None:
        self.query = query
        self.target = target
        self.max_nodes = max_nodes
        self.nodes = 0
        self.exhausted = False
        self._order = _search_order(query)

        # For each query atom: (earlier query neighbour, query bond index)
        position = {atom_idx: i for i, atom_idx in enumerate(self._order)}
        self._back_links: dict[int, list[tuple[int, int]]] = {}
        for atom_idx in self._order:
            links = []
            for bond in query.atoms[atom_idx].get_bonds(query):
                other = bond.other_atom(atom_idx)
                if position[other] < position[atom_idx]:
                    links.append((other, bond.idx))
            self._back_links[atom_idx] = links

    def _atom_ok(self, query_idx: int, target_idx: int) -> bool:
        return _atom_matches(self.query.atoms[query_idx], self.target.atoms[target_idx])

    def _bond_ok(self, query_bond: "Bond", target_bond: "Bond") -> bool:
        return _bond_matches(query_bond, target_bond)

    def _candidates(self, query_idx: int, mapping: dict[int, int]) -> Iterator[int]:
        links = self._back_links[query_idx]
        if not links:
            yield from range(self.target.num_atoms)
            return
        anchor_query, _ = links[0]
        yield from self.target.atoms[mapping[anchor_query]].neighbors(self.target)

    def _extend(self, mapping: dict[int, int], used: set[int], depth: int) -> Iterator[dict[int, int]]:
        if depth == len(self._order):
            yield dict(mapping)
            return

        query_idx = self._order[depth]
        for target_idx in self._candidates(query_idx, mapping):
            if self.exhausted:
                return
            if target_idx in used:
                continue
            self.nodes += 1
            if self.max_nodes is not None and self.nodes > self.max_nodes:
                self.exhausted = True
                logger.debug("Substructure search stopped after %d nodes", self.max_nodes)
                return
            if not self._atom_ok(query_idx, target_idx):
                continue

            bonds_ok = True
            for query_nbr, query_bond_idx in self._back_links[query_idx]:
                target_bond = self.target.get_bond_between(target_idx, mapping[query_nbr])
                if target_bond is None or not self._bond_ok(self.query.bonds[query_bond_idx], target_bond):
                    bonds_ok = False
                    break
            if not bonds_ok:
                continue

            mapping[query_idx] = target_idx
            used.add(target_idx)
            yield from self._extend(mapping, used, depth + 1)
            used.discard(target_idx)
            del mapping[query_idx]

    def _to_match(self, mapping: dict[int, int]) -> Match:
        atoms = tuple(mapping[i] for i in range(self.query.num_atoms))
        bonds = tuple(
            self.target.get_bond_between(atoms[b.atom1_idx], atoms[b.atom2_idx]).idx
            for b in self.query.bonds
        )
        return Match(atoms, bonds)

    def iter_matches(self) -> Iterator[Match]:
        """Lazily yield every embedding (all atom permutations)."""
        self.nodes = 0
        self.exhausted = False
        if self.query.num_atoms == 0:
            yield Match((), ())
            return
        if self.query.num_atoms > self.target.num_atoms:
            return
        for mapping in self._extend({}, set(), 0):
            yield self._to_match(mapping)

    def find_all(self, uniquify: bool = False) -> list[Match]:
        """Find all matches.

        Args:
            uniquify: Keep only one match per set of target atoms.
        """
        matches: list[Match] = []
        seen: set[frozenset[int]] = set()
        for match in self.iter_matches():
            if uniquify:
                key = frozenset(match.atom_mapping)
                if key in seen:
                    continue
                seen.add(key)
            matches.append(match)
        logger.debug("Found %d matches in %d nodes", len(matches), self.nodes)
        return matches

    def find_first(self) -> Match | None:
        """Return the first match found, or None."""
        return next(self.iter_matches(), None)

    def has_match(self) -> bool:
        return self.find_first() is not None

    def count_matches(self, uniquify: bool = False) -> int:
        return len(self.find_all(uniquify))


class ExactMatcher(SubstructureMatcher):
    """Matcher for whole-molecule identity.

    Atoms must agree on element, charge, isotope, radical and total
    hydrogen count, and bonds on their exact order. Pseudo atoms and
    attachment points match only their own kind and label.
    """

    def _atom_ok(self, query_idx: int, target_idx: int) -> bool:
        a = self.query.atoms[query_idx]
        b = self.target.atoms[target_idx]
        if (a.atomic_number, a.charge, a.isotope, a.radical) != (b.atomic_number, b.charge, b.isotope, b.radical):
            return False
        if not a.is_element and a.label != b.label:
            return False
        if len(a.bond_indices) != len(b.bond_indices):
            return False
        return self.query.total_hydrogens(query_idx) == self.target.total_hydrogens(target_idx)

    def _bond_ok(self, query_bond: "Bond", target_bond: "Bond") -> bool:
        return query_bond.order == target_bond.order


def is_exact_match(first: "Molecule", second: "Molecule") -> bool:
    """Check if two molecules are the same graph.

    Stereo marks are not compared.

    Example:
        >>> is_exact_match(parse("OCC"), parse("CCO"))
        True
        >>> is_exact_match(parse("CCO"), parse("COC"))
        False
    """
    if first.num_atoms != second.num_atoms or first.num_bonds != second.num_bonds:
        return False
    return ExactMatcher(first, second).has_match()


def is_substructure_of(query: "Molecule", target: "Molecule") -> bool:
    """Check if ``target`` contains ``query``.

    Example:
        >>> is_substructure_of(parse("C=O"), parse("CC(=O)O"))
        True
    """
    return SubstructureMatcher(query, target).has_match()


def find_substructure_matches(
    query: "Molecule",
    target: "Molecule",
    uniquify: bool = True,
    max_nodes: int | None = None,
) -> list[Match]:
    """Find matches of ``query`` in ``target``, one per atom set by default."""
    return SubstructureMatcher(query, target, max_nodes).find_all(uniquify)


def count_substructure_matches(query: "Molecule", target: "Molecule", uniquify: bool = True) -> int:
    return SubstructureMatcher(query, target).count_matches(uniquify)
