"""Layered structure identifier and hashed key."""

from chemlayer.identifier.generator import (
    IdentifierGenerator,
    IdentifierOptions,
    IdentifierResult,
    compare_identifiers,
    decode_identifier,
    encode_identifier,
    generate_identifier,
    identifier_from_smiles,
    validate_identifier,
)
from chemlayer.identifier.key import identifier_key, is_valid_key
from chemlayer.identifier.layers import canonical_numbering, formula_layer

__all__ = [
    "IdentifierGenerator",
    "IdentifierOptions",
    "IdentifierResult",
    "canonical_numbering",
    "compare_identifiers",
    "decode_identifier",
    "encode_identifier",
    "formula_layer",
    "generate_identifier",
    "identifier_from_smiles",
    "identifier_key",
    "is_valid_key",
    "validate_identifier",
]
