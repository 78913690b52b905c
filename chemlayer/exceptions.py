"""
Custom exceptions for the chemlayer library.

This module defines a hierarchy of exceptions for handling chemistry-related
errors in a structured way.
"""

from __future__ import annotations


class ChemError(Exception):
    """Base exception for all chemistry-related errors."""

    pass


class ParseError(ChemError):
    """Error during SMILES parsing.

    Attributes:
        position: Character position in the SMILES string where error occurred.
        smiles: The original SMILES string being parsed.
        message: Description of what went wrong.
    """

    def __init__(
        self,
        message: str,
        smiles: str | None = None,
        position: int | None = None,
    ) -> None:
        self.message = message
        self.smiles = smiles
        self.position = position

        parts = [message]
        if smiles is not None and position is not None:
            parts.append(f" at position {position}")
            parts.append(f"\n  {smiles}")
            parts.append(f"\n  {' ' * position}^")
        elif smiles is not None:
            parts.append(f" in: {smiles}")

        super().__init__("".join(parts))

    @property
    def offset(self) -> int | None:
        """Alias of ``position``."""
        return self.position


class RingError(ParseError):
    """Error related to ring closures in SMILES.

    Attributes:
        ring_index: The problematic ring closure number.
    """

    def __init__(
        self,
        message: str,
        smiles: str | None = None,
        position: int | None = None,
        ring_index: int | None = None,
    ) -> None:
        self.ring_index = ring_index
        super().__init__(message, smiles, position)


class StructuralError(ChemError, IndexError):
    """Chemically meaningless access to a molecular graph.

    Raised for out-of-range atom or bond indices, self-bonds, duplicate
    bonds and inconsistent stereo table entries.
    """

    pass


class UnsupportedFeatureError(ChemError):
    """Operation cannot handle a feature present in the molecule.

    Attributes:
        atom_idx: Index of the offending atom, if any.
    """

    def __init__(self, message: str, atom_idx: int | None = None) -> None:
        self.message = message
        self.atom_idx = atom_idx
        super().__init__(message)
