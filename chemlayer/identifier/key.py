"""
Hashed key derived from a layered identifier.

The identifier body is split at its first stereo layer. Both halves are
hashed with SHA-256; the leading bytes of each digest are encoded as
fixed-width base-26 (A-Z) blocks, followed by a two-letter flag block:
``XXXXXXXXXXXXXX-YYYYYYYYY-SA``.
"""

from __future__ import annotations

import hashlib
import re
from typing import Final

IDENTIFIER_PREFIX: Final[str] = "InChI="
STEREO_TAGS: Final[tuple[str, ...]] = ("/b", "/t", "/m", "/s")

MAIN_BLOCK_LENGTH: Final[int] = 14
STEREO_BLOCK_LENGTH: Final[int] = 9

# Stereo block of identifiers without stereo layers
NO_STEREO_BLOCK: Final[str] = "UHFFFAOYS"

_ALPHABET: Final[str] = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_KEY_PATTERN = re.compile(r"^[A-Z]{14}-[A-Z]{9}-[A-Z]{2}$")


def encode_base26(digest: bytes, length: int) -> str:
    """Encode the first ``length`` bytes of a digest as ``length`` letters.

    The bytes are read as one big-endian integer, reduced modulo
    ``26 ** length`` and written most significant letter first.
    """
    value = int.from_bytes(digest[:length], "big") % (26 ** length)
    letters: list[str] = []
    for _ in range(length):
        value, digit = divmod(value, 26)
        letters.append(_ALPHABET[digit])
    return "".join(reversed(letters))


def split_identifier(identifier: str) -> tuple[str, str]:
    """Split an identifier body into (main part, stereo part).

    Raises:
        ValueError: If the string lacks the identifier prefix.
    """
    if not identifier.startswith(IDENTIFIER_PREFIX):
        raise ValueError(f"Not a layered identifier: {identifier!r}")
    body = identifier[len(IDENTIFIER_PREFIX):]
    positions = [body.find(tag) for tag in STEREO_TAGS if tag in body]
    if not positions:
        return body, ""
    cut = min(positions)
    return body[:cut], body[cut:]


def identifier_key(identifier: str) -> str:
    """Compute the hashed key of a layered identifier.

    Args:
        identifier: Identifier string starting with ``InChI=``.

    Returns:
        Key of the form ``XXXXXXXXXXXXXX-YYYYYYYYY-ZZ``. The first flag
        letter is ``S`` for standard identifiers (``1S/``) and ``N``
        otherwise.

    Raises:
        ValueError: If the identifier is empty or lacks the prefix.

    Example:
        >>> key = identifier_key("InChI=1S/CH4")
        >>> len(key), key[14], key[24]
        (27, '-', '-')
    """
    if not identifier:
        raise ValueError("Empty identifier")
    main, stereo = split_identifier(identifier)

    main_block = encode_base26(hashlib.sha256(main.encode()).digest(), MAIN_BLOCK_LENGTH)
    if stereo:
        stereo_block = encode_base26(
            hashlib.sha256(stereo.encode()).digest(), STEREO_BLOCK_LENGTH
        )
    else:
        stereo_block = NO_STEREO_BLOCK

    version = "S" if main.startswith("1S/") or main == "1S" else "N"
    return f"{main_block}-{stereo_block}-{version}A"


def is_valid_key(key: str) -> bool:
    """Check the ``14-9-2`` uppercase key shape."""
    return bool(_KEY_PATTERN.match(key))
