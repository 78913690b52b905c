"""
Layer builders for the layered structure identifier.

Every builder is a pure function of a molecule and its canonical numbering
(atom index -> 1-based number). Hydrogen atoms bonded to a heavy atom are
not numbered; they only contribute to formula and hydrogen counts.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from chemlayer.canon import CanonicalRanking, ElementDegreeRanking, RefinementRanking
from chemlayer.elements import BondOrder
from chemlayer.stereo import (
    IMPLICIT,
    CisTransParity,
    StereoKind,
    find_cis_trans_candidates,
    find_stereocenter_candidates,
    permutation_parity,
)

if TYPE_CHECKING:
    from chemlayer.types import Molecule


def default_ranking() -> CanonicalRanking:
    """Refinement seeded by (atomic number desc, degree desc)."""
    return RefinementRanking(ElementDegreeRanking.invariant)


def _is_attached_hydrogen(mol: "Molecule", atom_idx: int) -> bool:
    if mol.atoms[atom_idx].atomic_number != 1:
        return False
    return any(mol.atoms[n].atomic_number != 1 for n in mol.neighbors(atom_idx))


def canonical_numbering(
    mol: "Molecule",
    ranking: CanonicalRanking | None = None,
) -> dict[int, int]:
    """1-based canonical numbers of the atoms that appear in the layers.

    Example:
        >>> canonical_numbering(parse("CCO"))
        {2: 1, 1: 2, 0: 3}
    """
    strategy = ranking if ranking is not None else default_ranking()
    return numbering_from_ranks(mol, strategy.ranks(mol))


def numbering_from_ranks(mol: "Molecule", ranks: list[int]) -> dict[int, int]:
    """Number the non-hydrogen-attached atoms in rank order."""
    kept = [i for i in range(mol.num_atoms) if not _is_attached_hydrogen(mol, i)]
    kept.sort(key=lambda i: ranks[i])
    return {atom_idx: number for number, atom_idx in enumerate(kept, start=1)}


def candidate_numberings(
    mol: "Molecule",
    ranking: CanonicalRanking | None = None,
) -> list[dict[int, int]]:
    """Numberings for each way the ranking may order symmetric atoms.

    Only refinement rankings expose their tie choices; any other strategy
    contributes its single numbering.
    """
    strategy = ranking if ranking is not None else default_ranking()
    if isinstance(strategy, RefinementRanking):
        return [numbering_from_ranks(mol, r) for r in strategy.rank_choices(mol)]
    return [numbering_from_ranks(mol, strategy.ranks(mol))]


def compress_ranges(numbers: list[int]) -> str:
    """Render sorted numbers with runs collapsed, e.g. ``1,3-5``."""
    parts: list[str] = []
    start = prev = None
    for n in numbers:
        if start is None:
            start = prev = n
        elif n == prev + 1:
            prev = n
        else:
            parts.append(str(start) if start == prev else f"{start}-{prev}")
            start = prev = n
    if start is not None:
        parts.append(str(start) if start == prev else f"{start}-{prev}")
    return ",".join(parts)


def formula_layer(mol: "Molecule") -> str:
    """Molecular formula in Hill order.

    With carbon present: C, then H, then the rest alphabetically. Without
    carbon every element, hydrogen included, is alphabetical. Counts of
    one are omitted.

    Example:
        >>> formula_layer(parse("CCO"))
        'C2H6O'
        >>> formula_layer(parse("O"))
        'H2O'
    """
    counts: dict[str, int] = {}
    for atom in mol.atoms:
        if not atom.is_element:
            continue
        counts[atom.symbol] = counts.get(atom.symbol, 0) + 1
        hydrogens = mol.implicit_hydrogens(atom.idx)
        if hydrogens:
            counts["H"] = counts.get("H", 0) + hydrogens

    def render(symbol: str) -> str:
        n = counts.pop(symbol)
        return symbol if n == 1 else f"{symbol}{n}"

    parts: list[str] = []
    if "C" in counts:
        parts.append(render("C"))
        if "H" in counts:
            parts.append(render("H"))
    for symbol in sorted(counts):
        parts.append(render(symbol))
    return "".join(parts)


def connectivity_layer(mol: "Molecule", numbering: dict[int, int]) -> str:
    """Connection table as spanning-tree chains, components joined by ``;``.

    Each component is walked breadth-first from its lowest number to fix a
    spanning tree, then printed depth-first: an atom's number is followed
    by its ring closures to already printed atoms and its subtrees
    (largest first). Every item but the last is parenthesised; the last
    continues the chain after ``-``. Single-atom components print nothing.
    """
    adjacency: dict[int, list[int]] = {number: [] for number in numbering.values()}
    for bond in mol.bonds:
        a, b = numbering.get(bond.atom1_idx), numbering.get(bond.atom2_idx)
        if a is not None and b is not None:
            adjacency[a].append(b)
            adjacency[b].append(a)
    for neighbors in adjacency.values():
        neighbors.sort()

    seen: set[int] = set()
    chains: list[str] = []
    for root in sorted(adjacency):
        if root in seen:
            continue

        parent: dict[int, int | None] = {root: None}
        children: dict[int, list[int]] = {root: []}
        order = [root]
        queue = deque([root])
        while queue:
            node = queue.popleft()
            for nbr in adjacency[node]:
                if nbr not in parent:
                    parent[nbr] = node
                    children[nbr] = []
                    children[node].append(nbr)
                    order.append(nbr)
                    queue.append(nbr)
        seen.update(order)
        if len(order) == 1:
            continue

        size = {n: 1 for n in order}
        for n in reversed(order):
            if parent[n] is not None:
                size[parent[n]] += size[n]

        printed: set[int] = set()

        def render(node: int) -> str:
            printed.add(node)
            closures = sorted(
                nbr for nbr in adjacency[node]
                if nbr in printed and nbr != parent[node]
            )
            items: list[str] = [str(c) for c in closures]
            for child in sorted(children[node], key=lambda c: (-size[c], c)):
                items.append(render(child))
            if not items:
                return str(node)
            head = "".join(f"({item})" for item in items[:-1])
            return f"{node}{head}-{items[-1]}"

        chains.append(render(root))
    return ";".join(chains)


def hydrogen_layer(mol: "Molecule", numbering: dict[int, int]) -> str:
    """Hydrogen counts grouped by count, e.g. ``1,3-5H,2,6H2``."""
    groups: dict[int, list[int]] = {}
    for atom_idx, number in numbering.items():
        if mol.atoms[atom_idx].atomic_number == 1:
            continue
        hydrogens = mol.total_hydrogens(atom_idx)
        if hydrogens:
            groups.setdefault(hydrogens, []).append(number)

    parts: list[str] = []
    for count in sorted(groups):
        atoms = compress_ranges(sorted(groups[count]))
        parts.append(f"{atoms}H" if count == 1 else f"{atoms}H{count}")
    return ",".join(parts)


def _side_reference(subs: tuple[int, int], numbering: dict[int, int]) -> int:
    """Number-highest substituent of one double-bond end (hydrogen lowest)."""
    real = [s for s in subs if s != IMPLICIT and s in numbering]
    if not real:
        return IMPLICIT
    return max(real, key=lambda s: numbering[s])


def cis_trans_layer(
    mol: "Molecule",
    numbering: dict[int, int],
    include_all: bool = False,
) -> str:
    """Double-bond descriptors: smaller end number, ``-`` cis, ``+`` trans.

    Parities are re-expressed relative to the highest-numbered substituent
    on each end, so the layer does not depend on input atom order.

    Args:
        mol: Molecule with a cis/trans table.
        numbering: Canonical numbering.
        include_all: Keep configured bonds that are not stereogenic.
    """
    candidates = None if include_all else set(find_cis_trans_candidates(mol))
    descriptors: list[tuple[int, str]] = []
    for bond_idx, entry in mol.cis_trans.items():
        if entry.ignored or entry.parity == CisTransParity.NONE:
            continue
        bond = mol.bonds[bond_idx]
        if bond.order != BondOrder.DOUBLE:
            continue
        if candidates is not None and bond_idx not in candidates:
            continue
        if bond.atom1_idx not in numbering or bond.atom2_idx not in numbering:
            continue

        parity = entry.parity
        b1, b2, e1, e2 = entry.substituents
        if _side_reference((b1, b2), numbering) != b1:
            parity = parity.flipped()
        if _side_reference((e1, e2), numbering) != e1:
            parity = parity.flipped()

        low = min(numbering[bond.atom1_idx], numbering[bond.atom2_idx])
        descriptors.append((low, "-" if parity == CisTransParity.CIS else "+"))

    descriptors.sort()
    return ",".join(f"{n}{sign}" for n, sign in descriptors)


def tetrahedral_layer(
    mol: "Molecule",
    numbering: dict[int, int],
    include_all: bool = False,
) -> str:
    """Tetrahedral descriptors: ``+`` when the pyramid's canonical numbers
    are an odd permutation of ascending order, ``-`` when even.

    Implicit and explicit hydrogens (and lone pairs) count as -1, the
    lowest position. Centers of kind ANY are skipped.
    """
    candidates = None if include_all else set(find_stereocenter_candidates(mol))
    descriptors: list[tuple[int, str]] = []
    for atom_idx, center in mol.stereocenters.items():
        if center.kind == StereoKind.ANY or atom_idx not in numbering:
            continue
        if candidates is not None and atom_idx not in candidates:
            continue
        ranked = [numbering.get(p, IMPLICIT) if p != IMPLICIT else IMPLICIT for p in center.pyramid]
        if len(set(ranked)) != 4:
            continue
        parity = permutation_parity(sorted(ranked), ranked)
        descriptors.append((numbering[atom_idx], "+" if parity else "-"))

    descriptors.sort()
    return ",".join(f"{n}{sign}" for n, sign in descriptors)


def enantiomer_layer(mol: "Molecule") -> str:
    """``1`` if any center belongs to an AND or OR group, else ``0``."""
    for _, center in mol.stereocenters.items():
        if center.kind in (StereoKind.AND, StereoKind.OR):
            return "1"
    return "0"
