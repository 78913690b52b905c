"""
SMILES string parser.

This module provides a recursive-descent parser that converts SMILES
strings into Molecule objects.

Supported features:
    - Organic subset atoms and lowercase aromatic atoms
    - Bracket atoms with isotope, chirality, hydrogen count, charge, class
    - Single, double, triple, aromatic and query "any" (~) bonds
    - Ring closures (0-9, %nn, %(n)) and branches
    - Disconnected components (dot separator)
    - Tetrahedral chirality (@ / @@) and directional bonds (/ and \\)
    - Pseudo atoms (*) and attachment points ([R], [R1])
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Final

from chemlayer.elements import (
    AROMATIC_SUBSET,
    ORGANIC_SUBSET,
    TWO_LETTER_ORGANIC,
    BondDirection,
    BondOrder,
    Element,
)
from chemlayer.exceptions import ParseError, RingError, StructuralError
from chemlayer.stereo.cis_trans import perceive_cis_trans_from_marks
from chemlayer.stereo.tables import IMPLICIT, StereoKind
from chemlayer.types import Molecule

logger = logging.getLogger(__name__)


class _Tokenizer:
    """Low-level SMILES tokenizer with lookahead."""

    __slots__ = ("_string", "_pos")

    def __init__(self, string: str) -> None:
        self._string = string
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    def peek(self, offset: int = 0) -> str | None:
        """Look at character at current position + offset without consuming."""
        pos = self._pos + offset
        if pos >= len(self._string):
            return None
        return self._string[pos]

    def next(self) -> str | None:
        """Consume and return the next character, or None at end."""
        if self._pos >= len(self._string):
            return None
        char = self._string[self._pos]
        self._pos += 1
        return char

    def read_while(self, predicate) -> str:
        start = self._pos
        while self._pos < len(self._string) and predicate(self._string[self._pos]):
            self._pos += 1
        return self._string[start:self._pos]

    def read_number(self) -> int | None:
        """Read and return an integer, or None if no digits present."""
        digits = self.read_while(str.isdigit)
        return int(digits) if digits else None

    def is_eof(self) -> bool:
        return self._pos >= len(self._string)

    def expect(self, char: str, what: str | None = None) -> None:
        """Consume expected character or raise ParseError."""
        pos = self._pos
        actual = self.next()
        if actual != char:
            found = "end of input" if actual is None else f"'{actual}'"
            raise ParseError(
                f"Expected '{char}'{' ' + what if what else ''}, got {found}",
                self._string,
                pos,
            )


class _RingSlot:
    """Placeholder in a chiral atom's neighbour list for a pending ring bond."""

    __slots__ = ("atom",)

    def __init__(self) -> None:
        self.atom: int | None = None


@dataclass
class _OpenRing:
    atom: int
    order: BondOrder | None
    direction: BondDirection
    position: int
    slot: _RingSlot | None


@dataclass
class _ChiralMark:
    marker: str
    has_preceding: bool
    slots: list[int | _RingSlot] = field(default_factory=list)


@dataclass
class _ParserState:
    """Mutable state for the SMILES parser."""

    open_rings: dict[int, _OpenRing] = field(default_factory=dict)
    # (atom index, position of '(')
    branch_stack: list[tuple[int, int]] = field(default_factory=list)

    prev_atom: int | None = None
    pending_bond_order: BondOrder | None = None
    pending_bond_direction: BondDirection = BondDirection.NONE
    pending_bond_position: int | None = None
    # Set right after '(' until the first atom of the branch is read
    branch_just_opened: int | None = None

    chiral: dict[int, _ChiralMark] = field(default_factory=dict)


class SmilesParser:
    """SMILES string parser.

    Bond orders are inferred as aromatic between two atoms written in
    lowercase form and single otherwise. Aromaticity is only recorded as
    written; run ``perceive_aromaticity`` afterwards for ring-level
    perception.

    Example:
        >>> parser = SmilesParser("CCO")
        >>> mol = parser.parse()
        >>> len(mol.atoms)
        3

    For convenience, use the module-level ``parse()`` function:
        >>> from chemlayer import parse
        >>> mol = parse("CCO")
    """

    _BOND_CHARS: Final[dict[str, tuple[BondOrder | None, BondDirection]]] = {
        "-": (BondOrder.SINGLE, BondDirection.NONE),
        "=": (BondOrder.DOUBLE, BondDirection.NONE),
        "#": (BondOrder.TRIPLE, BondDirection.NONE),
        ":": (BondOrder.AROMATIC, BondDirection.NONE),
        "~": (BondOrder.ANY, BondDirection.NONE),
        "/": (BondOrder.SINGLE, BondDirection.UP),
        "\\": (BondOrder.SINGLE, BondDirection.DOWN),
    }

    def __init__(self, smiles: str) -> None:
        self._smiles = smiles
        self._tokenizer = _Tokenizer(smiles)
        self._mol = Molecule()
        self._state = _ParserState()

    def _error(self, message: str, position: int | None = None) -> ParseError:
        if position is None:
            position = self._tokenizer.position
        return ParseError(message, self._smiles, position)

    def parse(self) -> Molecule:
        """Parse the SMILES string into a Molecule.

        Returns:
            Parsed Molecule object.

        Raises:
            ParseError: If SMILES syntax is invalid.
            RingError: If ring closures are unclosed or conflicting.
        """
        tok = self._tokenizer
        state = self._state

        while not tok.is_eof():
            char = tok.peek()
            assert char is not None

            if char == ".":
                self._check_no_pending_bond()
                if state.prev_atom is None:
                    raise self._error("Empty component before '.'")
                tok.next()
                state.prev_atom = None
                continue

            if char in self._BOND_CHARS:
                self._parse_bond()
                continue

            if char == "(":
                if state.prev_atom is None:
                    raise self._error("Branch without preceding atom")
                if state.pending_bond_order is not None:
                    raise self._error("Bond symbol before '('")
                if state.branch_just_opened is not None:
                    raise self._error("Empty branch")
                state.branch_stack.append((state.prev_atom, tok.position))
                state.branch_just_opened = tok.position
                tok.next()
                continue

            if char == ")":
                if not state.branch_stack:
                    raise self._error("Unmatched ')'")
                if state.branch_just_opened is not None:
                    raise self._error("Empty branch")
                self._check_no_pending_bond()
                state.prev_atom, _ = state.branch_stack.pop()
                tok.next()
                continue

            if char.isdigit() or char == "%":
                self._parse_ring_closure()
                continue

            if char == "[":
                self._parse_bracket_atom()
                continue

            if char == "*":
                tok.next()
                self._add_atom(self._mol.add_pseudo_atom(), aromatic=False)
                continue

            if char.isalpha():
                self._parse_organic_atom()
                continue

            raise self._error(f"Unexpected character: '{char}'")

        self._check_no_pending_bond()

        if state.branch_stack:
            _, pos = state.branch_stack[-1]
            raise self._error("Unmatched '('", pos)

        if state.open_rings:
            ring_idx = min(state.open_rings)
            raise RingError(
                f"Unclosed ring {ring_idx}",
                self._smiles,
                state.open_rings[ring_idx].position,
                ring_index=ring_idx,
            )

        self._record_chirality()
        perceive_cis_trans_from_marks(self._mol)

        logger.debug(
            "Parsed %r: %d atoms, %d bonds",
            self._smiles, self._mol.num_atoms, self._mol.num_bonds,
        )
        return self._mol

    def _check_no_pending_bond(self) -> None:
        if self._state.pending_bond_order is not None:
            raise self._error("Bond symbol not followed by an atom", self._state.pending_bond_position)

    def _parse_bond(self) -> None:
        tok = self._tokenizer
        state = self._state
        if state.prev_atom is None:
            raise self._error("Bond symbol without preceding atom")
        if state.pending_bond_order is not None:
            raise self._error("Two consecutive bond symbols")
        state.pending_bond_position = tok.position
        char = tok.next()
        order, direction = self._BOND_CHARS[char]
        state.pending_bond_order = order
        state.pending_bond_direction = direction

    def _take_pending_bond(self) -> tuple[BondOrder | None, BondDirection]:
        state = self._state
        order, direction = state.pending_bond_order, state.pending_bond_direction
        state.pending_bond_order = None
        state.pending_bond_direction = BondDirection.NONE
        state.pending_bond_position = None
        return order, direction

    def _implicit_order(self, atom1: int, atom2: int) -> BondOrder:
        if self._mol.atoms[atom1].is_aromatic and self._mol.atoms[atom2].is_aromatic:
            return BondOrder.AROMATIC
        return BondOrder.SINGLE

    def _add_atom(self, atom_idx: int, aromatic: bool) -> None:
        """Link a freshly created atom to the previous one."""
        state = self._state
        self._mol.atoms[atom_idx].is_aromatic = aromatic
        state.branch_just_opened = None

        prev = state.prev_atom
        if prev is not None:
            order, direction = self._take_pending_bond()
            if order is None:
                order = self._implicit_order(prev, atom_idx)
            self._mol.add_bond(prev, atom_idx, order=order, direction=direction)
            if prev in state.chiral:
                state.chiral[prev].slots.append(atom_idx)

        state.prev_atom = atom_idx

    def _parse_ring_closure(self) -> None:
        tok = self._tokenizer
        state = self._state
        start = tok.position
        ring_idx = self._read_ring_index()

        if state.prev_atom is None:
            raise self._error("Ring closure without preceding atom", start)

        current = state.prev_atom
        order, direction = self._take_pending_bond()

        opened = state.open_rings.pop(ring_idx, None)
        if opened is None:
            slot = None
            if current in state.chiral:
                slot = _RingSlot()
                state.chiral[current].slots.append(slot)
            state.open_rings[ring_idx] = _OpenRing(current, order, direction, start, slot)
            return

        if opened.atom == current:
            raise RingError(f"Ring {ring_idx} closes on the atom that opened it",
                            self._smiles, start, ring_index=ring_idx)
        if opened.order is not None and order is not None and opened.order != order:
            raise RingError(
                f"Conflicting bond orders for ring {ring_idx}",
                self._smiles, start, ring_index=ring_idx,
            )
        bond_order = opened.order or order or self._implicit_order(opened.atom, current)

        # Store the mark relative to opener -> closer
        bond_direction = opened.direction
        if bond_direction == BondDirection.NONE:
            bond_direction = direction.flipped()

        try:
            self._mol.add_bond(opened.atom, current, order=bond_order, direction=bond_direction)
        except StructuralError as exc:
            raise RingError(str(exc), self._smiles, start, ring_index=ring_idx) from exc

        if opened.slot is not None:
            opened.slot.atom = current
        if current in state.chiral:
            state.chiral[current].slots.append(opened.atom)

    def _read_ring_index(self) -> int:
        """Read a ring closure index (0-9, %nn, %(n))."""
        tok = self._tokenizer

        if tok.peek() == "%":
            tok.next()
            if tok.peek() == "(":
                tok.next()
                num = tok.read_number()
                if num is None:
                    raise self._error("Empty ring index in %()")
                tok.expect(")", "after ring number")
                return num

            pos = tok.position
            d1 = tok.next()
            d2 = tok.next()
            if not (d1 and d1.isdigit() and d2 and d2.isdigit()):
                raise self._error("Expected two digits after %", pos)
            return int(d1 + d2)

        return int(tok.next())

    def _parse_organic_atom(self) -> None:
        """Parse an organic subset atom (not in brackets)."""
        tok = self._tokenizer
        start = tok.position
        char1 = tok.next()
        assert char1 is not None
        symbol = char1

        char2 = tok.peek()
        if char2 and char2.islower():
            candidate = char1 + char2
            if candidate in TWO_LETTER_ORGANIC or candidate in AROMATIC_SUBSET:
                tok.next()
                symbol = candidate

        if symbol not in ORGANIC_SUBSET and symbol not in AROMATIC_SUBSET:
            raise self._error(f"Unknown organic-subset atom '{symbol}'", start)

        aromatic = symbol in AROMATIC_SUBSET
        self._add_atom(self._mol.add_atom(symbol), aromatic)

    def _read_bracket_symbol(self) -> tuple[str, bool]:
        """Read the element part of a bracket atom: (symbol, aromatic)."""
        tok = self._tokenizer
        start = tok.position
        char1 = tok.next()
        if char1 is None:
            raise self._error("Unterminated bracket atom", start)

        if char1 == "*":
            return "*", False

        if char1 == "R" and not (tok.peek() or "").islower():
            return "R", False

        if char1.isupper():
            char2 = tok.peek()
            if char2 and char2.islower() and Element.from_symbol(char1 + char2) is not None:
                tok.next()
                return char1 + char2, False
            if Element.from_symbol(char1) is None:
                raise self._error(f"Unknown element symbol '{char1}'", start)
            return char1, False

        if char1.islower():
            char2 = tok.peek()
            if char2 and (char1 + char2) in AROMATIC_SUBSET:
                tok.next()
                return char1 + char2, True
            if char1 in AROMATIC_SUBSET:
                return char1, True
            raise self._error(f"Unknown aromatic symbol '{char1}'", start)

        raise self._error(f"Expected element symbol, got '{char1}'", start)

    def _parse_bracket_atom(self) -> None:
        """Parse a bracket atom ``[isotope symbol chirality Hn charge :class]``."""
        tok = self._tokenizer
        start = tok.position
        tok.expect("[")

        isotope = tok.read_number() or 0
        symbol, aromatic = self._read_bracket_symbol()
        rsite_number = tok.read_number() if symbol == "R" else None

        chirality: str | None = None
        hydrogens = 0
        charge = 0
        atom_class: int | None = None

        while True:
            char = tok.peek()
            if char is None:
                raise self._error("Unterminated bracket atom", start)
            if char == "]":
                tok.next()
                break
            if char == "@":
                tok.next()
                if tok.peek() == "@":
                    tok.next()
                    chirality = "@@"
                elif tok.peek() == "T" and tok.peek(1) == "H":
                    tok.next()
                    tok.next()
                    num = tok.read_number()
                    if num not in (1, 2):
                        raise self._error("Expected @TH1 or @TH2")
                    chirality = "@" if num == 1 else "@@"
                else:
                    chirality = "@"
            elif char == "H":
                tok.next()
                count = tok.read_number()
                hydrogens = 1 if count is None else count
            elif char in "+-":
                charge = self._parse_charge()
            elif char == ":":
                tok.next()
                atom_class = tok.read_number()
                if atom_class is None:
                    raise self._error("Expected atom class number after ':'")
            else:
                raise self._error(f"Unexpected character in bracket atom: '{char}'")

        mol = self._mol
        if symbol == "*":
            atom_idx = mol.add_pseudo_atom(atom_class=atom_class)
        elif symbol == "R":
            atom_idx = mol.add_rsite(rsite_number)
        else:
            atom_idx = mol.add_atom(
                symbol,
                charge=charge,
                isotope=isotope,
                explicit_hydrogens=hydrogens,
                atom_class=atom_class,
            )

        prev = self._state.prev_atom
        self._add_atom(atom_idx, aromatic)

        if chirality is not None:
            mark = _ChiralMark(chirality, has_preceding=prev is not None)
            if prev is not None:
                mark.slots.append(prev)
            if hydrogens == 1:
                mark.slots.append(IMPLICIT)
            self._state.chiral[atom_idx] = mark

    def _parse_charge(self) -> int:
        """Parse a charge: +, -, ++, --, +2, -3."""
        tok = self._tokenizer
        char = tok.next()
        sign = 1 if char == "+" else -1

        count = 1
        while tok.peek() == char:
            tok.next()
            count += 1

        num = tok.read_number()
        if num is not None:
            if count > 1:
                raise self._error("Mixed repeated and numeric charge")
            return sign * num
        return sign * count

    def _record_chirality(self) -> None:
        """Turn chirality markers into stereocenter table entries."""
        mol = self._mol
        for atom_idx, mark in self._state.chiral.items():
            neighbors = [s.atom if isinstance(s, _RingSlot) else s for s in mark.slots]
            if IMPLICIT not in neighbors and len(neighbors) == 3:
                # Lone pair sits where an implicit hydrogen would
                neighbors.insert(1 if mark.has_preceding else 0, IMPLICIT)
            if len(neighbors) != 4:
                logger.debug(
                    "Ignoring chirality on atom %d with %d neighbours",
                    atom_idx, len(neighbors),
                )
                continue
            pyramid = tuple(neighbors)
            if mark.marker == "@@":
                pyramid = (pyramid[0], pyramid[1], pyramid[3], pyramid[2])
            mol.stereocenters.add(atom_idx, StereoKind.ABS, pyramid)


def parse(smiles: str) -> Molecule:
    """Parse a SMILES string into a Molecule.

    This is a convenience function that creates a SmilesParser and
    calls parse().

    Args:
        smiles: SMILES string to parse.

    Returns:
        Parsed Molecule object.

    Raises:
        ParseError: If SMILES syntax is invalid.

    Example:
        >>> mol = parse("CCO")
        >>> len(mol.atoms)
        3
    """
    return SmilesParser(smiles).parse()
