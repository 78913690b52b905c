"""
Core molecular data types.

This module defines the molecular graph: Atom, Bond and Molecule. Atoms and
bonds are owned by their Molecule and referenced elsewhere only by index.
Derived per-atom attributes (implicit hydrogens, connectivity, aromatic
flag) are computed lazily and cached; every mutating method of Molecule
drops the cache through a single invalidation point, so the cache is either
absent or consistent with the current graph.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Iterator

from chemlayer.elements import (
    PSEUDO,
    RSITE,
    TEMPLATE,
    BondDirection,
    BondOrder,
    Element,
    Radical,
    get_atomic_number,
    get_default_valences,
    get_symbol,
)
from chemlayer.exceptions import StructuralError
from chemlayer.stereo.tables import IMPLICIT, CisTransTable, StereocenterTable

if TYPE_CHECKING:
    from typing import Self


@dataclass(slots=True)
class Bond:
    """Represents a chemical bond between two atoms.

    Attributes:
        idx: Index of this bond in the molecule.
        atom1_idx: Index of the first atom (bookkeeping order only).
        atom2_idx: Index of the second atom.
        order: Bond order (see BondOrder).
        direction: Directional mark read from atom1 towards atom2.
    """

    idx: int
    atom1_idx: int
    atom2_idx: int
    order: int = BondOrder.SINGLE
    direction: BondDirection = BondDirection.NONE

    def other_atom(self, atom_idx: int) -> int:
        """Get the index of the atom on the other end of this bond.

        Raises:
            ValueError: If atom_idx is not part of this bond.
        """
        if atom_idx == self.atom1_idx:
            return self.atom2_idx
        if atom_idx == self.atom2_idx:
            return self.atom1_idx
        raise ValueError(f"Atom {atom_idx} not in bond {self.idx}")

    @property
    def bond_order(self) -> BondOrder:
        return BondOrder(self.order)

    @property
    def is_aromatic(self) -> bool:
        return self.order == BondOrder.AROMATIC

    def direction_from(self, atom_idx: int) -> BondDirection:
        """Direction mark as read starting from ``atom_idx``."""
        if atom_idx == self.atom1_idx:
            return self.direction
        if atom_idx == self.atom2_idx:
            return self.direction.flipped()
        raise ValueError(f"Atom {atom_idx} not in bond {self.idx}")

    def __contains__(self, atom_idx: int) -> bool:
        return atom_idx in (self.atom1_idx, self.atom2_idx)


@dataclass(slots=True)
class Atom:
    """Represents an atom in a molecule.

    Attributes:
        idx: Index of this atom in the molecule.
        atomic_number: Atomic number, or PSEUDO / RSITE / TEMPLATE.
        charge: Formal charge.
        isotope: Mass number, 0 for natural abundance.
        radical: Radical state.
        explicit_valence: Valence override, None when absent.
        explicit_hydrogens: Implicit hydrogen count override, None when
            absent (bracket atoms always set it).
        is_aromatic: Atom was written or perceived as aromatic.
        label: Free-text label of a pseudo atom, attachment point or
            template reference.
        atom_class: Atom class number from ``[C:1]`` notation.
        xyz: Optional 3D coordinates.
        xy: Optional 2D coordinates.
        bond_indices: Indices of bonds connected to this atom.
    """

    idx: int
    atomic_number: int
    charge: int = 0
    isotope: int = 0
    radical: Radical = Radical.NONE
    explicit_valence: int | None = None
    explicit_hydrogens: int | None = None
    is_aromatic: bool = False
    label: str | None = None
    atom_class: int | None = None
    xyz: tuple[float, float, float] | None = None
    xy: tuple[float, float] | None = None
    bond_indices: list[int] = field(default_factory=list)

    @property
    def symbol(self) -> str:
        """Element symbol, ``*`` for pseudo atoms, ``R#`` for attachment points."""
        return get_symbol(self.atomic_number)

    @property
    def element(self) -> Element | None:
        return Element.from_atomic_number(self.atomic_number)

    @property
    def is_pseudo(self) -> bool:
        return self.atomic_number == PSEUDO

    @property
    def is_rsite(self) -> bool:
        return self.atomic_number == RSITE

    @property
    def is_template(self) -> bool:
        return self.atomic_number == TEMPLATE

    @property
    def is_element(self) -> bool:
        return self.atomic_number > 0

    def degree(self, mol: "Molecule") -> int:
        """Number of explicit bonds to this atom."""
        return len(self.bond_indices)

    def neighbors(self, mol: "Molecule") -> Iterator[int]:
        """Iterate over indices of neighboring atoms."""
        for bond_idx in self.bond_indices:
            yield mol.bonds[bond_idx].other_atom(self.idx)

    def get_bonds(self, mol: "Molecule") -> Iterator[Bond]:
        """Iterate over bonds connected to this atom."""
        for bond_idx in self.bond_indices:
            yield mol.bonds[bond_idx]


@dataclass(slots=True)
class _DerivedCache:
    """Per-atom derived attributes, valid for one graph state."""

    connectivity: list[int]
    implicit_hydrogens: list[int]
    aromatic: list[bool]


def _charge_adjustment(atom: Atom) -> int:
    """Shift of the allowed valence caused by formal charge."""
    elem = atom.element
    group = elem.group if elem else 0
    if group in (15, 16, 17):
        return atom.charge
    if group == 13:
        return -atom.charge
    return -abs(atom.charge)


@dataclass
class Molecule:
    """Represents a molecular structure.

    A molecule consists of atoms connected by bonds, plus two index-keyed
    stereo side tables. Build and modify it only through its methods so
    that adjacency, caches and stereo tables stay consistent.

    Attributes:
        atoms: List of atoms in the molecule.
        bonds: List of bonds in the molecule.
        name: Optional molecule name/identifier.
        stereocenters: Tetrahedral centers keyed by atom index.
        cis_trans: Double-bond configurations keyed by bond index.

    Example:
        >>> mol = Molecule()
        >>> c1 = mol.add_atom("C")
        >>> c2 = mol.add_atom("C")
        >>> mol.add_bond(c1, c2)
        0
        >>> mol.implicit_hydrogens(c1)
        3
    """

    atoms: list[Atom] = field(default_factory=list)
    bonds: list[Bond] = field(default_factory=list)
    name: str | None = None
    stereocenters: StereocenterTable = field(default_factory=StereocenterTable, compare=False)
    cis_trans: CisTransTable = field(default_factory=CisTransTable, compare=False)
    _cache: _DerivedCache | None = field(default=None, repr=False, compare=False)

    def __len__(self) -> int:
        return len(self.atoms)

    def __iter__(self) -> Iterator[Atom]:
        return iter(self.atoms)

    def __getitem__(self, idx: int) -> Atom:
        return self.atom(idx)

    # ------------------------------------------------------------------
    # Validation and cache control
    # ------------------------------------------------------------------

    def _check_atom(self, idx: int) -> None:
        if not isinstance(idx, int) or not 0 <= idx < len(self.atoms):
            raise StructuralError(f"Atom index out of range: {idx}")

    def _check_bond(self, idx: int) -> None:
        if not isinstance(idx, int) or not 0 <= idx < len(self.bonds):
            raise StructuralError(f"Bond index out of range: {idx}")

    def _touch(self) -> None:
        """Drop derived attributes; they are recomputed on next read."""
        self._cache = None

    def atom(self, idx: int) -> Atom:
        """Get atom by index.

        Raises:
            StructuralError: If the index is out of range.
        """
        self._check_atom(idx)
        return self.atoms[idx]

    def bond(self, idx: int) -> Bond:
        """Get bond by index.

        Raises:
            StructuralError: If the index is out of range.
        """
        self._check_bond(idx)
        return self.bonds[idx]

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_atom(
        self,
        symbol: str | int,
        *,
        charge: int = 0,
        isotope: int = 0,
        radical: Radical = Radical.NONE,
        explicit_hydrogens: int | None = None,
        explicit_valence: int | None = None,
        is_aromatic: bool = False,
        atom_class: int | None = None,
        xyz: tuple[float, float, float] | None = None,
    ) -> int:
        """Add an element atom to the molecule.

        Args:
            symbol: Element symbol (aromatic lowercase accepted) or atomic
                number.
            charge: Formal charge.
            isotope: Mass number, 0 for natural abundance.
            radical: Radical state.
            explicit_hydrogens: Hydrogen count override.
            explicit_valence: Valence override.
            is_aromatic: Whether the atom is written aromatic.
            atom_class: Atom class number.
            xyz: 3D coordinates.

        Returns:
            Index of the newly added atom.

        Raises:
            StructuralError: If the symbol or number is not an element.
        """
        if isinstance(symbol, int):
            atomic_number = symbol
            if Element.from_atomic_number(atomic_number) is None:
                raise StructuralError(f"Unknown atomic number: {symbol}")
        else:
            atomic_number = get_atomic_number(symbol)
            if atomic_number == 0:
                raise StructuralError(f"Unknown element symbol: {symbol!r}")

        idx = len(self.atoms)
        self.atoms.append(Atom(
            idx=idx,
            atomic_number=atomic_number,
            charge=charge,
            isotope=isotope,
            radical=Radical(radical),
            explicit_hydrogens=explicit_hydrogens,
            explicit_valence=explicit_valence,
            is_aromatic=is_aromatic,
            atom_class=atom_class,
            xyz=xyz,
        ))
        self._touch()
        return idx

    def _add_sentinel(self, atomic_number: int, label: str | None, atom_class: int | None) -> int:
        idx = len(self.atoms)
        self.atoms.append(Atom(
            idx=idx,
            atomic_number=atomic_number,
            label=label,
            atom_class=atom_class,
        ))
        self._touch()
        return idx

    def add_pseudo_atom(self, label: str = "*", atom_class: int | None = None) -> int:
        """Add a pseudo atom with a free-text label."""
        return self._add_sentinel(PSEUDO, label, atom_class)

    def add_rsite(self, number: int | None = None) -> int:
        """Add a substituent attachment point (R-site)."""
        label = f"R{number}" if number is not None else None
        return self._add_sentinel(RSITE, label, None)

    def add_template_atom(self, name: str) -> int:
        """Add a template reference atom."""
        return self._add_sentinel(TEMPLATE, name, None)

    def add_bond(
        self,
        atom1_idx: int,
        atom2_idx: int,
        *,
        order: int = BondOrder.SINGLE,
        direction: BondDirection = BondDirection.NONE,
    ) -> int:
        """Add a bond between two atoms.

        Args:
            atom1_idx: Index of the first atom.
            atom2_idx: Index of the second atom.
            order: Bond order.
            direction: Directional mark read from atom1 towards atom2.

        Returns:
            Index of the newly added bond.

        Raises:
            StructuralError: If an index is out of range, the atoms are the
                same, or they are already bonded.
        """
        self._check_atom(atom1_idx)
        self._check_atom(atom2_idx)
        if atom1_idx == atom2_idx:
            raise StructuralError(f"Cannot bond atom {atom1_idx} to itself")
        if self.get_bond_between(atom1_idx, atom2_idx) is not None:
            raise StructuralError(f"Atoms {atom1_idx} and {atom2_idx} are already bonded")

        idx = len(self.bonds)
        self.bonds.append(Bond(
            idx=idx,
            atom1_idx=atom1_idx,
            atom2_idx=atom2_idx,
            order=BondOrder(order),
            direction=BondDirection(direction),
        ))
        self.atoms[atom1_idx].bond_indices.append(idx)
        self.atoms[atom2_idx].bond_indices.append(idx)
        self._touch()
        return idx

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def remove_bond(self, bond_idx: int) -> None:
        """Remove a bond; later bond indices shift down by one.

        Stereocenters using the bond and cis/trans entries of the bond, or
        referencing it as a substituent bond, are dropped.
        """
        self._check_bond(bond_idx)
        bond = self.bonds[bond_idx]
        a, b = bond.atom1_idx, bond.atom2_idx

        self.stereocenters.retain(
            lambda center, entry: not (
                (center == a and b in entry.pyramid) or (center == b and a in entry.pyramid)
            )
        )

        def uses_bond(db_idx: int, entry) -> bool:
            db = self.bonds[db_idx]
            begin_subs, end_subs = entry.substituents[:2], entry.substituents[2:]
            return (
                (db.atom1_idx in (a, b) and {a, b} - {db.atom1_idx} <= set(begin_subs))
                or (db.atom2_idx in (a, b) and {a, b} - {db.atom2_idx} <= set(end_subs))
            )

        self.cis_trans.retain(lambda k, v: k != bond_idx and not uses_bond(k, v))

        self.atoms[a].bond_indices.remove(bond_idx)
        self.atoms[b].bond_indices.remove(bond_idx)
        del self.bonds[bond_idx]
        for i in range(bond_idx, len(self.bonds)):
            self.bonds[i].idx = i
        for atom in self.atoms:
            atom.bond_indices = [i - 1 if i > bond_idx else i for i in atom.bond_indices]

        bond_map = {i: (i - 1 if i > bond_idx else i) for i in range(len(self.bonds) + 1) if i != bond_idx}
        self.cis_trans.remap(bond_map)
        self._touch()

    def remove_atom(self, atom_idx: int) -> None:
        """Remove an atom and its bonds; later atom indices shift down."""
        self._check_atom(atom_idx)
        for bond_idx in sorted(self.atoms[atom_idx].bond_indices, reverse=True):
            self.remove_bond(bond_idx)

        del self.atoms[atom_idx]
        atom_map = {
            i: (i - 1 if i > atom_idx else i)
            for i in range(len(self.atoms) + 1)
            if i != atom_idx
        }
        for i, atom in enumerate(self.atoms):
            atom.idx = i
        for bond in self.bonds:
            bond.atom1_idx = atom_map[bond.atom1_idx]
            bond.atom2_idx = atom_map[bond.atom2_idx]

        self.stereocenters.remap_atoms(atom_map)
        self.cis_trans.remap({i: i for i in range(len(self.bonds))}, atom_map)
        self._touch()

    # ------------------------------------------------------------------
    # Property setters
    # ------------------------------------------------------------------

    def set_bond_order(self, bond_idx: int, order: int) -> None:
        self._check_bond(bond_idx)
        self.bonds[bond_idx].order = BondOrder(order)
        self._touch()

    def set_bond_direction(self, bond_idx: int, direction: BondDirection) -> None:
        self._check_bond(bond_idx)
        self.bonds[bond_idx].direction = BondDirection(direction)

    def flip_bond(self, atom_parent: int, atom_child: int, atom_new_child: int) -> None:
        """Reattach the bond ``atom_parent``-``atom_child`` to ``atom_new_child``.

        Raises:
            StructuralError: If the bond does not exist or the new bond
                would be a self-bond or a duplicate.
        """
        self._check_atom(atom_new_child)
        bond = self.get_bond_between(atom_parent, atom_child)
        if bond is None:
            raise StructuralError(f"No bond between {atom_parent} and {atom_child}")
        if atom_new_child == atom_parent:
            raise StructuralError(f"Cannot bond atom {atom_parent} to itself")
        if self.get_bond_between(atom_parent, atom_new_child) is not None:
            raise StructuralError(f"Atoms {atom_parent} and {atom_new_child} are already bonded")

        self.stereocenters.remove(atom_parent)
        self.stereocenters.remove(atom_child)
        self.cis_trans.retain(lambda k, v: k != bond.idx and atom_child not in v.substituents)

        self.atoms[atom_child].bond_indices.remove(bond.idx)
        self.atoms[atom_new_child].bond_indices.append(bond.idx)
        if bond.atom1_idx == atom_child:
            bond.atom1_idx = atom_new_child
        else:
            bond.atom2_idx = atom_new_child
        self._touch()

    def set_charge(self, atom_idx: int, charge: int) -> None:
        self._check_atom(atom_idx)
        self.atoms[atom_idx].charge = charge
        self._touch()

    def set_isotope(self, atom_idx: int, isotope: int) -> None:
        self._check_atom(atom_idx)
        self.atoms[atom_idx].isotope = isotope
        self._touch()

    def set_radical(self, atom_idx: int, radical: Radical) -> None:
        self._check_atom(atom_idx)
        self.atoms[atom_idx].radical = Radical(radical)
        self._touch()

    def set_explicit_valence(self, atom_idx: int, valence: int | None) -> None:
        self._check_atom(atom_idx)
        self.atoms[atom_idx].explicit_valence = valence
        self._touch()

    def set_explicit_hydrogens(self, atom_idx: int, count: int | None) -> None:
        self._check_atom(atom_idx)
        self.atoms[atom_idx].explicit_hydrogens = count
        self._touch()

    def set_aromatic_flag(self, atom_idx: int, aromatic: bool) -> None:
        self._check_atom(atom_idx)
        self.atoms[atom_idx].is_aromatic = aromatic
        self._touch()

    def set_xyz(self, atom_idx: int, x: float, y: float, z: float) -> None:
        self._check_atom(atom_idx)
        self.atoms[atom_idx].xyz = (float(x), float(y), float(z))

    def set_xy(self, atom_idx: int, x: float, y: float) -> None:
        self._check_atom(atom_idx)
        self.atoms[atom_idx].xy = (float(x), float(y))

    # ------------------------------------------------------------------
    # Derived attributes
    # ------------------------------------------------------------------

    def _derived(self) -> _DerivedCache:
        if self._cache is None:
            self._cache = self._compute_derived()
        return self._cache

    def _compute_derived(self) -> _DerivedCache:
        n = len(self.atoms)
        connectivity = [0] * n
        hydrogens = [0] * n
        aromatic = [False] * n

        for atom in self.atoms:
            base = 0
            n_aromatic = 0
            for bond in atom.get_bonds(self):
                if bond.order == BondOrder.AROMATIC:
                    n_aromatic += 1
                elif bond.order in (BondOrder.DOUBLE, BondOrder.TRIPLE):
                    base += int(bond.order)
                else:
                    base += 1
            aromatic[atom.idx] = atom.is_aromatic or n_aromatic > 0

            valences = get_default_valences(atom.atomic_number) if atom.is_element else ()
            shift = _charge_adjustment(atom) - atom.radical.unpaired_electrons
            conn = base + n_aromatic
            if n_aromatic:
                # One delocalised pi bond, when the lowest valence leaves room for it
                limit = valences[0] + shift if valences else conn + 1
                if conn + 1 <= limit:
                    conn += 1
            connectivity[atom.idx] = conn
            hydrogens[atom.idx] = self._implicit_from(atom, conn, valences, shift)

        return _DerivedCache(connectivity, hydrogens, aromatic)

    @staticmethod
    def _implicit_from(atom: Atom, conn: int, valences: tuple[int, ...], shift: int) -> int:
        if atom.explicit_hydrogens is not None:
            return atom.explicit_hydrogens
        if not atom.is_element or not valences:
            return 0
        if atom.explicit_valence is not None:
            return max(0, atom.explicit_valence - conn)
        for valence in valences:
            target = valence + shift
            if target >= conn:
                return target - conn
        return 0

    def implicit_hydrogens(self, atom_idx: int) -> int:
        """Implicit hydrogen count of an atom (override or valence model)."""
        self._check_atom(atom_idx)
        return self._derived().implicit_hydrogens[atom_idx]

    def connectivity(self, atom_idx: int) -> int:
        """Sum of bond orders to explicit neighbours.

        Aromatic bonds count one each, plus one for the shared pi bond when
        the atom's lowest valence leaves room for it.
        """
        self._check_atom(atom_idx)
        return self._derived().connectivity[atom_idx]

    def is_aromatic_atom(self, atom_idx: int) -> bool:
        """Whether the atom is aromatic (flagged or has an aromatic bond)."""
        self._check_atom(atom_idx)
        return self._derived().aromatic[atom_idx]

    @property
    def has_cache(self) -> bool:
        return self._cache is not None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def neighbors(self, atom_idx: int) -> list[int]:
        self._check_atom(atom_idx)
        return list(self.atoms[atom_idx].neighbors(self))

    def degree(self, atom_idx: int) -> int:
        self._check_atom(atom_idx)
        return len(self.atoms[atom_idx].bond_indices)

    def heavy_degree(self, atom_idx: int) -> int:
        """Number of explicit neighbours that are not hydrogen."""
        return sum(1 for n in self.neighbors(atom_idx) if self.atoms[n].atomic_number != 1)

    def total_hydrogens(self, atom_idx: int) -> int:
        """Implicit hydrogens plus explicit hydrogen neighbours."""
        explicit = sum(1 for n in self.neighbors(atom_idx) if self.atoms[n].atomic_number == 1)
        return self.implicit_hydrogens(atom_idx) + explicit

    def get_bond_between(self, atom1_idx: int, atom2_idx: int) -> Bond | None:
        """Find the bond between two atoms, or None."""
        self._check_atom(atom1_idx)
        self._check_atom(atom2_idx)
        for bond_idx in self.atoms[atom1_idx].bond_indices:
            bond = self.bonds[bond_idx]
            if atom2_idx in bond and atom1_idx in bond:
                return bond
        return None

    def connected_components(self) -> list[list[int]]:
        """Find connected components, each a sorted list of atom indices."""
        visited: set[int] = set()
        components: list[list[int]] = []

        for start in range(len(self.atoms)):
            if start in visited:
                continue

            component: list[int] = []
            stack = [start]
            visited.add(start)

            while stack:
                atom_idx = stack.pop()
                component.append(atom_idx)
                for neighbor in self.atoms[atom_idx].neighbors(self):
                    if neighbor not in visited:
                        visited.add(neighbor)
                        stack.append(neighbor)

            components.append(sorted(component))

        return components

    def has_coordinates(self, three_d: bool = True) -> bool:
        """Whether every atom carries 3D (or 2D) coordinates."""
        if not self.atoms:
            return False
        if three_d:
            return all(a.xyz is not None for a in self.atoms)
        return all(a.xy is not None for a in self.atoms)

    def distance(self, atom1_idx: int, atom2_idx: int) -> float:
        """Euclidean distance between two atoms' 3D coordinates.

        Raises:
            StructuralError: If either atom lacks coordinates.
        """
        p = self.atom(atom1_idx).xyz
        q = self.atom(atom2_idx).xyz
        if p is None or q is None:
            raise StructuralError("Both atoms need 3D coordinates")
        return math.dist(p, q)

    def atom_description(self, atom_idx: int) -> str:
        """Short text form of an atom, e.g. ``13C+2`` or ``O-``."""
        atom = self.atom(atom_idx)
        parts: list[str] = []
        if atom.isotope:
            parts.append(str(atom.isotope))
        parts.append(atom.label if atom.label and not atom.is_element else atom.symbol)
        if atom.charge:
            sign = "+" if atom.charge > 0 else "-"
            parts.append(sign if abs(atom.charge) == 1 else f"{sign}{abs(atom.charge)}")
        return "".join(parts)

    def clone(self) -> "Self":
        """Deep copy of atoms, bonds, adjacency and stereo tables.

        Derived caches are not copied; the clone recomputes them lazily.
        """
        mol = Molecule(name=self.name)
        for atom in self.atoms:
            mol.atoms.append(Atom(
                idx=atom.idx,
                atomic_number=atom.atomic_number,
                charge=atom.charge,
                isotope=atom.isotope,
                radical=atom.radical,
                explicit_valence=atom.explicit_valence,
                explicit_hydrogens=atom.explicit_hydrogens,
                is_aromatic=atom.is_aromatic,
                label=atom.label,
                atom_class=atom.atom_class,
                xyz=atom.xyz,
                xy=atom.xy,
                bond_indices=list(atom.bond_indices),
            ))
        for bond in self.bonds:
            mol.bonds.append(Bond(
                idx=bond.idx,
                atom1_idx=bond.atom1_idx,
                atom2_idx=bond.atom2_idx,
                order=bond.order,
                direction=bond.direction,
            ))
        mol.stereocenters = self.stereocenters.copy()
        mol.cis_trans = self.cis_trans.copy()
        return mol

    copy = clone

    def submolecule(self, atom_indices: Iterable[int]) -> "Self":
        """Copy of the molecule restricted to the given atoms.

        Kept atoms stay in their original relative order and bonds between
        them are kept. Stereo entries referring to a dropped atom or bond
        are pruned or remapped as by ``remove_atom``.

        Args:
            atom_indices: Atoms to keep, in any order; duplicates are ignored.

        Raises:
            StructuralError: If no atom is given or an index is out of range.
        """
        keep = set(atom_indices)
        if not keep:
            raise StructuralError("Submolecule needs at least one atom")
        for idx in keep:
            self._check_atom(idx)

        mol = self.clone()
        for idx in range(self.num_atoms - 1, -1, -1):
            if idx not in keep:
                mol.remove_atom(idx)
        return mol

    @property
    def num_atoms(self) -> int:
        return len(self.atoms)

    @property
    def num_bonds(self) -> int:
        return len(self.bonds)

    @property
    def is_connected(self) -> bool:
        """Check if molecule is a single connected component."""
        return len(self.connected_components()) <= 1


__all__ = ["Atom", "Bond", "Molecule", "IMPLICIT"]
