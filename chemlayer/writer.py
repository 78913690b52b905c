"""
SMILES string writer.

This module converts Molecule objects back to SMILES strings. Output is
non-canonical by default (each component starts at its lowest-indexed atom
and neighbours are visited in index order); canonical output uses a
``CanonicalRanking`` to choose the start atom and the traversal order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from chemlayer.canon import CanonicalRanking, canonical_ranks
from chemlayer.elements import AROMATIC_SUBSET, ORGANIC_SUBSET, BondDirection, BondOrder
from chemlayer.stereo.tables import IMPLICIT, CisTransParity, StereoKind
from chemlayer.stereo.tetrahedral import pyramid_parity
from chemlayer.transform.aromaticity import perceive_aromaticity

if TYPE_CHECKING:
    from chemlayer.types import Bond, Molecule


# Lowercase spellings that may be written without brackets
_BARE_AROMATIC: frozenset[str] = frozenset({"b", "c", "n", "o", "p", "s"})

_BOND_SYMBOLS: dict[int, str] = {
    BondOrder.DOUBLE: "=",
    BondOrder.TRIPLE: "#",
    BondOrder.ANY: "~",
    BondOrder.SINGLE_OR_DOUBLE: "~",
    BondOrder.SINGLE_OR_AROMATIC: "~",
    BondOrder.DOUBLE_OR_AROMATIC: "~",
}


class SmilesWriter:
    """SMILES string writer.

    The traversal algorithm:
    1. Start from the lowest-ranked atom in each component
    2. DFS recording tree edges and ring-closure (back) edges
    3. Emit atoms, ring digits (lowest free digit, reused once closed)
       and branches in the recorded order

    Example:
        >>> from chemlayer import parse
        >>> mol = parse("C(C)CC")
        >>> SmilesWriter(mol).to_smiles()
        'C(C)CC'
        >>> SmilesWriter(mol, canonical=True).to_smiles()
        'CCCC'
    """

    def __init__(
        self,
        mol: "Molecule",
        *,
        canonical: bool = False,
        ranking: CanonicalRanking | None = None,
        ranks: list[int] | None = None,
    ) -> None:
        """Initialize writer.

        Args:
            mol: Molecule to write.
            canonical: Order the traversal by canonical ranks.
            ranking: Ranking strategy for canonical output.
            ranks: Pre-computed ranks; overrides ``canonical``/``ranking``.
        """
        self._mol = mol
        self._canonical = canonical or ranks is not None
        if ranks is not None:
            self._ranks = ranks
        elif canonical:
            self._ranks = canonical_ranks(mol, ranking)
        else:
            self._ranks = list(range(mol.num_atoms))
        self._lowercase = [self._writes_lowercase(i) for i in range(mol.num_atoms)]
        self._directions = self._resolve_directions()

    def to_smiles(self) -> str:
        """Generate the SMILES string."""
        parts = [self._write_component(comp) for comp in self._mol.connected_components()]
        if self._canonical:
            parts.sort()
        return ".".join(parts)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _sorted_neighbors(self, atom_idx: int) -> list[tuple[int, int]]:
        mol = self._mol
        pairs = [(mol.bonds[b].other_atom(atom_idx), b) for b in mol.atoms[atom_idx].bond_indices]
        pairs.sort(key=lambda p: (self._ranks[p[0]], p[0]))
        return pairs

    def _write_component(self, comp: list[int]) -> str:
        start = min(comp, key=lambda a: (self._ranks[a], a))

        # Phase 1: DFS tree edges and ring closures
        WHITE, GREY, BLACK = 0, 1, 2
        colors = {a: WHITE for a in comp}
        children: dict[int, list[tuple[int, int]]] = {a: [] for a in comp}
        closures: dict[int, list[int]] = {a: [] for a in comp}

        def dfs_find_cycles(atom_idx: int, in_bond: int | None) -> None:
            colors[atom_idx] = GREY
            for nbr, bond_idx in self._sorted_neighbors(atom_idx):
                if bond_idx == in_bond:
                    continue
                if colors[nbr] == WHITE:
                    children[atom_idx].append((nbr, bond_idx))
                    dfs_find_cycles(nbr, bond_idx)
                elif colors[nbr] == GREY:
                    closures[nbr].append(bond_idx)
                    closures[atom_idx].append(bond_idx)
            colors[atom_idx] = BLACK

        dfs_find_cycles(start, None)

        # Phase 2: emit
        ring_digit_map: dict[int, int] = {}
        available_digits: list[int] = list(range(1, 100))
        out: list[str] = []

        def dfs_build(atom_idx: int, parent: int | None) -> None:
            closure_partners = [self._mol.bonds[b].other_atom(atom_idx) for b in closures[atom_idx]]
            child_atoms = [nbr for nbr, _ in children[atom_idx]]
            out.append(self._atom_to_smiles(atom_idx, parent, closure_partners + child_atoms))

            released: list[int] = []
            for bond_idx in closures[atom_idx]:
                bond = self._mol.bonds[bond_idx]
                if bond_idx in ring_digit_map:
                    digit = ring_digit_map.pop(bond_idx)
                    out.append(self._bond_to_smiles(bond, atom_idx))
                    out.append(self._ring_number_to_smiles(digit))
                    released.append(digit)
                else:
                    digit = available_digits.pop(0)
                    ring_digit_map[bond_idx] = digit
                    out.append(self._ring_number_to_smiles(digit))
            if released:
                available_digits.extend(released)
                available_digits.sort()

            for i, (nbr, bond_idx) in enumerate(children[atom_idx]):
                is_branch = i + 1 < len(children[atom_idx])
                if is_branch:
                    out.append("(")
                out.append(self._bond_to_smiles(self._mol.bonds[bond_idx], atom_idx))
                dfs_build(nbr, atom_idx)
                if is_branch:
                    out.append(")")

        dfs_build(start, None)
        return "".join(out)

    # ------------------------------------------------------------------
    # Atoms
    # ------------------------------------------------------------------

    def _writes_lowercase(self, atom_idx: int) -> bool:
        atom = self._mol.atoms[atom_idx]
        if not atom.is_element or not self._mol.is_aromatic_atom(atom_idx):
            return False
        return atom.symbol.lower() in AROMATIC_SUBSET

    def _chirality(self, atom_idx: int, parent: int | None, later: list[int]) -> str:
        center = self._mol.stereocenters.get(atom_idx)
        if center is None or center.kind == StereoKind.ANY:
            return ""
        order: list[int] = [] if parent is None else [parent]
        if IMPLICIT in center.pyramid:
            order.append(IMPLICIT)
        order.extend(later)
        try:
            parity = pyramid_parity(center, order)
        except ValueError:
            return ""
        return "@" if parity == 0 else "@@"

    def _atom_to_smiles(self, atom_idx: int, parent: int | None, later: list[int]) -> str:
        mol = self._mol
        atom = mol.atoms[atom_idx]

        if atom.is_rsite:
            return f"[{atom.label or 'R'}]"
        if not atom.is_element:
            return f"[*:{atom.atom_class}]" if atom.atom_class is not None else "*"

        symbol = atom.symbol
        lowercase = self._lowercase[atom_idx]
        written = symbol.lower() if lowercase else symbol
        chirality = self._chirality(atom_idx, parent, later)

        if not self._needs_brackets(atom_idx, chirality):
            return written

        parts = ["["]
        if atom.isotope:
            parts.append(str(atom.isotope))
        parts.append(written)
        parts.append(chirality)
        hydrogens = mol.implicit_hydrogens(atom_idx)
        if hydrogens:
            parts.append("H" if hydrogens == 1 else f"H{hydrogens}")
        if atom.charge:
            sign = "+" if atom.charge > 0 else "-"
            parts.append(sign if abs(atom.charge) == 1 else f"{sign}{abs(atom.charge)}")
        if atom.atom_class is not None:
            parts.append(f":{atom.atom_class}")
        parts.append("]")
        return "".join(parts)

    def _needs_brackets(self, atom_idx: int, chirality: str) -> bool:
        """Check if atom needs bracket notation.

        An atom needs brackets if it is outside the bracket-free set,
        charged, isotopically labelled, carries a hydrogen or valence
        override, is a radical, has written chirality or an atom class, or
        is aromatic without a bare lowercase spelling.
        """
        atom = self._mol.atoms[atom_idx]
        if atom.symbol not in ORGANIC_SUBSET:
            return True
        if self._mol.is_aromatic_atom(atom_idx) and atom.symbol.lower() not in _BARE_AROMATIC:
            return True
        return bool(
            atom.charge
            or atom.isotope
            or atom.explicit_hydrogens is not None
            or atom.explicit_valence is not None
            or atom.radical
            or chirality
            or atom.atom_class is not None
        )

    # ------------------------------------------------------------------
    # Bonds
    # ------------------------------------------------------------------

    def _bond_to_smiles(self, bond: "Bond", from_atom: int) -> str:
        """Bond symbol as written starting from ``from_atom``."""
        both_lower = self._lowercase[bond.atom1_idx] and self._lowercase[bond.atom2_idx]

        if bond.order == BondOrder.AROMATIC:
            return "" if both_lower else ":"

        if bond.order == BondOrder.SINGLE:
            direction = self._directions.get(bond.idx, BondDirection.NONE)
            if from_atom != bond.atom1_idx:
                direction = direction.flipped()
            if direction == BondDirection.UP:
                return "/"
            if direction == BondDirection.DOWN:
                return "\\"
            return "-" if both_lower else ""

        return _BOND_SYMBOLS.get(bond.order, "")

    def _resolve_directions(self) -> dict[int, BondDirection]:
        """Directional marks to write, keyed by bond index.

        Stored marks are kept; double bonds with a known configuration but
        unmarked substituent bonds get synthesised marks.
        """
        mol = self._mol
        directions = {
            bond.idx: bond.direction
            for bond in mol.bonds
            if bond.direction in (BondDirection.UP, BondDirection.DOWN)
        }

        def outward(center: int, sub: int) -> BondDirection | None:
            bond = mol.get_bond_between(center, sub)
            if bond is None or bond.order != BondOrder.SINGLE:
                return None
            mark = directions.get(bond.idx)
            if mark is None:
                return None
            return mark if bond.atom1_idx == center else mark.flipped()

        def set_outward(center: int, sub: int, mark: BondDirection) -> bool:
            bond = mol.get_bond_between(center, sub)
            if bond is None or bond.order != BondOrder.SINGLE:
                return False
            directions[bond.idx] = mark if bond.atom1_idx == center else mark.flipped()
            return True

        for bond_idx, entry in mol.cis_trans.items():
            if entry.ignored or entry.parity == CisTransParity.NONE:
                continue
            db = mol.bonds[bond_idx]
            begin, end = db.atom1_idx, db.atom2_idx
            b1, b2, e1, e2 = entry.substituents

            left = outward(begin, b1)
            if left is None and b2 != IMPLICIT:
                other = outward(begin, b2)
                left = other.flipped() if other is not None else None
            if left is None:
                left = BondDirection.DOWN
                if not set_outward(begin, b1, left):
                    continue

            wanted = left if entry.parity == CisTransParity.CIS else left.flipped()
            right = outward(end, e1)
            if right is None and e2 != IMPLICIT:
                other = outward(end, e2)
                right = other.flipped() if other is not None else None
            if right is None:
                set_outward(end, e1, wanted)

        return directions

    def _ring_number_to_smiles(self, n: int) -> str:
        if 1 <= n <= 9:
            return str(n)
        if 10 <= n <= 99:
            return f"%{n}"
        return f"%({n})"


def to_smiles(
    mol: "Molecule",
    canonical: bool = False,
    ranking: CanonicalRanking | None = None,
) -> str:
    """Convert a Molecule to a SMILES string.

    Args:
        mol: Molecule to convert.
        canonical: Produce the canonical form.
        ranking: Ranking strategy for canonical output.

    Example:
        >>> to_smiles(parse("OCC"))
        'OCC'
    """
    return SmilesWriter(mol, canonical=canonical, ranking=ranking).to_smiles()


def canonical_smiles(smiles_or_mol: "str | Molecule") -> str:
    """Get canonical SMILES for a molecule.

    Parses the input if needed, perceives aromaticity on a copy, and writes
    the canonical form.

    Example:
        >>> canonical_smiles("C1=CC=CC=C1")
        'c1ccccc1'
    """
    from chemlayer.parser import parse

    if isinstance(smiles_or_mol, str):
        mol = parse(smiles_or_mol)
    else:
        mol = smiles_or_mol.clone()

    perceive_aromaticity(mol)
    return SmilesWriter(mol, canonical=True).to_smiles()
