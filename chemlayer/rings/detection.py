"""
Ring detection algorithms.

Rings are found, never assumed: simple cycles are enumerated with a
bounded-depth DFS that only walks to atoms with a higher index than the
start atom and closes back onto it. Ring membership of bonds (any cycle,
any size) comes from Tarjan's bridge algorithm.

These algorithms are used by aromaticity perception, the writer and the
stereo engine.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chemlayer.types import Molecule

logger = logging.getLogger(__name__)


def _adjacency(mol: "Molecule") -> list[list[tuple[int, int]]]:
    adj: list[list[tuple[int, int]]] = [[] for _ in range(mol.num_atoms)]
    for bond in mol.bonds:
        adj[bond.atom1_idx].append((bond.atom2_idx, bond.idx))
        adj[bond.atom2_idx].append((bond.atom1_idx, bond.idx))
    return adj


def _normalize_cycle(path: list[int]) -> tuple[int, ...]:
    """Rotate a cycle to start at its lowest atom, walking towards the
    smaller of the two neighbours."""
    i = path.index(min(path))
    rotated = path[i:] + path[:i]
    if len(rotated) > 2 and rotated[-1] < rotated[1]:
        rotated = [rotated[0]] + rotated[:0:-1]
    return tuple(rotated)


def find_rings(
    mol: "Molecule",
    min_size: int = 3,
    max_size: int = 8,
) -> list[tuple[int, ...]]:
    """Enumerate all simple rings within a size window.

    Args:
        mol: Molecule to analyze.
        min_size: Smallest ring size reported.
        max_size: Largest ring size reported; also bounds the DFS depth.

    Returns:
        Rings as atom index tuples in ring order, each starting at its
        lowest atom index, sorted by (size, atoms).

    Example:
        >>> mol = parse("c1ccc2ccccc2c1")  # naphthalene
        >>> [len(r) for r in find_rings(mol, 5, 8)]
        [6, 6]
    """
    adj = _adjacency(mol)
    found: set[tuple[int, ...]] = set()

    def dfs(start: int, current: int, path: list[int], on_path: set[int]) -> None:
        for neighbor, _ in adj[current]:
            if neighbor == start:
                if len(path) >= max(min_size, 3):
                    found.add(_normalize_cycle(path))
            elif neighbor > start and neighbor not in on_path and len(path) < max_size:
                on_path.add(neighbor)
                path.append(neighbor)
                dfs(start, neighbor, path, on_path)
                path.pop()
                on_path.remove(neighbor)

    for start in range(mol.num_atoms):
        dfs(start, start, [start], {start})

    rings = sorted(found, key=lambda r: (len(r), r))
    logger.debug("Found %d rings of size %d-%d", len(rings), min_size, max_size)
    return rings


def ring_edge_bonds(mol: "Molecule", ring: tuple[int, ...]) -> list[int]:
    """Bond indices along a ring, edge i joining ring[i] and ring[i + 1]."""
    bonds: list[int] = []
    for i, atom in enumerate(ring):
        bond = mol.get_bond_between(atom, ring[(i + 1) % len(ring)])
        if bond is None:
            raise ValueError(f"Atoms {atom} and {ring[(i + 1) % len(ring)]} are not bonded")
        bonds.append(bond.idx)
    return bonds


def ring_bonds(mol: "Molecule") -> set[int]:
    """Indices of bonds lying on any cycle (the non-bridges)."""
    adj = _adjacency(mol)
    discovery: dict[int, int] = {}
    low: dict[int, int] = {}
    bridges: set[int] = set()
    counter = 0

    # Iterative Tarjan so long chains do not hit the recursion limit
    for root in range(mol.num_atoms):
        if root in discovery:
            continue
        discovery[root] = low[root] = counter
        counter += 1
        stack: list[tuple[int, int, int]] = [(root, -1, 0)]
        while stack:
            node, parent_bond, i = stack[-1]
            if i < len(adj[node]):
                stack[-1] = (node, parent_bond, i + 1)
                neighbor, bond_idx = adj[node][i]
                if bond_idx == parent_bond:
                    continue
                if neighbor in discovery:
                    low[node] = min(low[node], discovery[neighbor])
                else:
                    discovery[neighbor] = low[neighbor] = counter
                    counter += 1
                    stack.append((neighbor, bond_idx, 0))
            else:
                stack.pop()
                if stack:
                    parent = stack[-1][0]
                    low[parent] = min(low[parent], low[node])
                    if low[node] > discovery[parent]:
                        bridges.add(parent_bond)

    return {bond.idx for bond in mol.bonds if bond.idx not in bridges}


def ring_atoms(mol: "Molecule") -> set[int]:
    """Indices of atoms lying on any cycle."""
    atoms: set[int] = set()
    for bond_idx in ring_bonds(mol):
        bond = mol.bonds[bond_idx]
        atoms.add(bond.atom1_idx)
        atoms.add(bond.atom2_idx)
    return atoms


def is_ring_bond(mol: "Molecule", bond_idx: int) -> bool:
    return smallest_ring_size(mol, bond_idx) is not None


def smallest_ring_size(mol: "Molecule", bond_idx: int, max_size: int | None = None) -> int | None:
    """Size of the smallest ring through a bond, or None if acyclic.

    Breadth-first search between the bond's ends without using the bond.
    """
    bond = mol.bond(bond_idx)
    start, goal = bond.atom1_idx, bond.atom2_idx
    adj = _adjacency(mol)
    dist = {start: 0}
    queue = deque([start])
    while queue:
        node = queue.popleft()
        if max_size is not None and dist[node] + 2 > max_size:
            continue
        for neighbor, b in adj[node]:
            if b == bond_idx or neighbor in dist:
                continue
            dist[neighbor] = dist[node] + 1
            if neighbor == goal:
                return dist[neighbor] + 1
            queue.append(neighbor)
    return None


def find_ring_systems(rings: list[tuple[int, ...]]) -> list[list[tuple[int, ...]]]:
    """Group rings into fused systems (rings sharing at least one bond)."""
    if not rings:
        return []

    parent = list(range(len(rings)))

    def find(x: int) -> int:
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    atom_sets = [set(r) for r in rings]
    for i in range(len(rings)):
        for j in range(i + 1, len(rings)):
            if len(atom_sets[i] & atom_sets[j]) >= 2:
                pi, pj = find(i), find(j)
                if pi != pj:
                    parent[pi] = pj

    systems: dict[int, list[tuple[int, ...]]] = {}
    for i, ring in enumerate(rings):
        systems.setdefault(find(i), []).append(ring)
    return list(systems.values())
