"""
Stereo side tables owned by a Molecule.

Both tables are keyed by integer index (atom index for stereocenters, bond
index for double bonds) and never hold references to Atom or Bond objects.
The owning molecule prunes and re-keys them whenever atoms or bonds are
removed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Iterator, Mapping

from chemlayer.exceptions import StructuralError


# Placeholder for an implicit hydrogen or lone pair in a pyramid, and for a
# missing second substituent in a cis/trans entry.
IMPLICIT: int = -1


class StereoKind(IntEnum):
    """Configuration class of a tetrahedral stereocenter."""

    ANY = 1  # explicitly unspecified
    AND = 2  # racemic group
    OR = 3   # relative group
    ABS = 4  # absolute configuration

    def __str__(self) -> str:
        return self.name.lower()


class CisTransParity(IntEnum):
    NONE = 0
    CIS = 1
    TRANS = 2

    def flipped(self) -> "CisTransParity":
        if self is CisTransParity.CIS:
            return CisTransParity.TRANS
        if self is CisTransParity.TRANS:
            return CisTransParity.CIS
        return self


@dataclass(slots=True)
class Stereocenter:
    """A tetrahedral center.

    Attributes:
        kind: Configuration class.
        pyramid: Four atom indices in "@" order: looking from ``pyramid[0]``
            the remaining three run counter-clockwise. ``-1`` marks an
            implicit hydrogen or lone pair.
        group: Group number for AND/OR centers (0 for ABS and ANY).
    """

    kind: StereoKind
    pyramid: tuple[int, int, int, int]
    group: int = 0

    def inverted(self) -> "Stereocenter":
        p = self.pyramid
        return Stereocenter(self.kind, (p[0], p[1], p[3], p[2]), self.group)


@dataclass(slots=True)
class CisTransEntry:
    """Configuration of one double bond.

    Attributes:
        substituents: ``(begin_sub1, begin_sub2, end_sub1, end_sub2)``;
            the parity refers to ``begin_sub1`` and ``end_sub1``.
        parity: CIS, TRANS or NONE when undetermined.
        ignored: The bond is explicitly marked as unspecified.
    """

    substituents: tuple[int, int, int, int]
    parity: CisTransParity = CisTransParity.NONE
    ignored: bool = False


def _check_pyramid(center: int, pyramid: tuple[int, ...]) -> tuple[int, int, int, int]:
    if len(pyramid) == 3:
        pyramid = (*pyramid, IMPLICIT)
    if len(pyramid) != 4:
        raise StructuralError(
            f"Stereocenter {center} needs 3 or 4 neighbours, got {len(pyramid)}"
        )
    real = [p for p in pyramid if p != IMPLICIT]
    if len(set(real)) != len(real) or pyramid.count(IMPLICIT) > 1:
        raise StructuralError(f"Stereocenter {center} has repeated neighbours: {pyramid}")
    if center in real:
        raise StructuralError(f"Stereocenter {center} lists itself as a neighbour")
    return (pyramid[0], pyramid[1], pyramid[2], pyramid[3])


class StereocenterTable:
    """Atom index -> Stereocenter."""

    __slots__ = ("_centers",)

    def __init__(self) -> None:
        self._centers: dict[int, Stereocenter] = {}

    def __len__(self) -> int:
        return len(self._centers)

    def __contains__(self, atom_idx: object) -> bool:
        return atom_idx in self._centers

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._centers))

    def __repr__(self) -> str:
        return f"StereocenterTable({dict(sorted(self._centers.items()))!r})"

    def add(
        self,
        atom_idx: int,
        kind: StereoKind,
        pyramid: tuple[int, ...],
        group: int = 0,
    ) -> Stereocenter:
        """Record (or replace) a stereocenter.

        Args:
            atom_idx: Center atom index.
            kind: Configuration class.
            pyramid: 3 or 4 neighbour indices in "@" order; a 3-tuple gets
                an implicit hydrogen/lone pair appended.
            group: AND/OR group number.

        Returns:
            The stored entry.

        Raises:
            StructuralError: If the pyramid is malformed.
        """
        center = Stereocenter(StereoKind(kind), _check_pyramid(atom_idx, tuple(pyramid)), group)
        self._centers[atom_idx] = center
        return center

    def get(self, atom_idx: int) -> Stereocenter | None:
        return self._centers.get(atom_idx)

    def remove(self, atom_idx: int) -> None:
        self._centers.pop(atom_idx, None)

    def invert(self, atom_idx: int) -> None:
        """Swap the last two pyramid entries of a center (mirror image)."""
        center = self._centers.get(atom_idx)
        if center is not None:
            self._centers[atom_idx] = center.inverted()

    def items(self) -> list[tuple[int, Stereocenter]]:
        return sorted(self._centers.items())

    def retain(self, keep: Callable[[int, Stereocenter], bool]) -> None:
        """Drop every entry for which ``keep`` returns False."""
        self._centers = {k: v for k, v in self._centers.items() if keep(k, v)}

    def remap_atoms(self, atom_map: Mapping[int, int]) -> None:
        """Re-key entries after atom indices shifted.

        Entries whose center or any pyramid member is missing from
        ``atom_map`` are dropped.
        """
        remapped: dict[int, Stereocenter] = {}
        for center, entry in self._centers.items():
            if center not in atom_map:
                continue
            if any(p != IMPLICIT and p not in atom_map for p in entry.pyramid):
                continue
            pyramid = tuple(p if p == IMPLICIT else atom_map[p] for p in entry.pyramid)
            remapped[atom_map[center]] = Stereocenter(entry.kind, pyramid, entry.group)
        self._centers = remapped

    def clear(self) -> None:
        self._centers.clear()

    def copy(self) -> "StereocenterTable":
        table = StereocenterTable()
        table._centers = {
            k: Stereocenter(v.kind, v.pyramid, v.group) for k, v in self._centers.items()
        }
        return table


class CisTransTable:
    """Bond index -> CisTransEntry."""

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[int, CisTransEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, bond_idx: object) -> bool:
        return bond_idx in self._entries

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._entries))

    def __repr__(self) -> str:
        return f"CisTransTable({dict(sorted(self._entries.items()))!r})"

    def add(
        self,
        bond_idx: int,
        substituents: tuple[int, int, int, int],
        parity: CisTransParity = CisTransParity.NONE,
        ignored: bool = False,
    ) -> CisTransEntry:
        if len(substituents) != 4:
            raise StructuralError(
                f"Cis/trans entry for bond {bond_idx} needs 4 substituent slots"
            )
        if substituents[0] == IMPLICIT or substituents[2] == IMPLICIT:
            raise StructuralError(
                f"Cis/trans entry for bond {bond_idx} lacks a reference substituent"
            )
        entry = CisTransEntry(tuple(substituents), CisTransParity(parity), ignored)
        self._entries[bond_idx] = entry
        return entry

    def get(self, bond_idx: int) -> CisTransEntry | None:
        return self._entries.get(bond_idx)

    def parity(self, bond_idx: int) -> CisTransParity:
        entry = self._entries.get(bond_idx)
        return entry.parity if entry is not None else CisTransParity.NONE

    def is_ignored(self, bond_idx: int) -> bool:
        entry = self._entries.get(bond_idx)
        return entry is not None and entry.ignored

    def remove(self, bond_idx: int) -> None:
        self._entries.pop(bond_idx, None)

    def items(self) -> list[tuple[int, CisTransEntry]]:
        return sorted(self._entries.items())

    def retain(self, keep: Callable[[int, CisTransEntry], bool]) -> None:
        self._entries = {k: v for k, v in self._entries.items() if keep(k, v)}

    def remap(
        self,
        bond_map: Mapping[int, int],
        atom_map: Mapping[int, int] | None = None,
    ) -> None:
        """Re-key entries after bond (and optionally atom) indices shifted.

        Entries whose bond is missing from ``bond_map``, or whose reference
        substituents are missing from ``atom_map``, are dropped.
        """
        remapped: dict[int, CisTransEntry] = {}
        for bond_idx, entry in self._entries.items():
            if bond_idx not in bond_map:
                continue
            subs = entry.substituents
            if atom_map is not None:
                if any(s != IMPLICIT and s not in atom_map for s in subs):
                    continue
                subs = tuple(s if s == IMPLICIT else atom_map[s] for s in subs)
            remapped[bond_map[bond_idx]] = CisTransEntry(subs, entry.parity, entry.ignored)
        self._entries = remapped

    def clear(self) -> None:
        self._entries.clear()

    def copy(self) -> "CisTransTable":
        table = CisTransTable()
        table._entries = {
            k: CisTransEntry(v.substituents, v.parity, v.ignored)
            for k, v in self._entries.items()
        }
        return table
