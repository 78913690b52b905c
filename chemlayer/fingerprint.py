"""
Topological fingerprints and similarity metrics.

Two families of hashed bit vectors are supported:

* PATH: every linear path of ``min_path``..``max_path`` bonds, hashed
  from the atomic numbers and bond orders along the path.
* ECFP2 / ECFP4 / ECFP6: circular neighbourhoods of radius 1, 2 or 3,
  built by iteratively rehashing each atom's identifier together with the
  sorted identifiers of its neighbours.

Each feature hash (32-bit FNV-1a) sets two bits. Similarity and distance
functions are pure and operate on fingerprints of the same size.

Example:
    >>> from chemlayer import parse
    >>> from chemlayer.fingerprint import generate_fingerprint, tanimoto
    >>> fp1 = generate_fingerprint(parse("CCO"))
    >>> fp2 = generate_fingerprint(parse("CCO"))
    >>> tanimoto(fp1, fp2)
    1.0
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Iterable, Iterator

if TYPE_CHECKING:
    from chemlayer.types import Molecule

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 2048
BITS_PER_FEATURE = 2

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193
_MASK32 = 0xFFFFFFFF
_GOLDEN = 0x9E3779B9


class FingerprintKind(IntEnum):
    """Fingerprint family."""

    PATH = 0
    ECFP2 = 1
    ECFP4 = 2
    ECFP6 = 3

    @property
    def radius(self) -> int:
        """Neighbourhood radius of circular kinds (0 for PATH)."""
        return int(self.value)


@dataclass(slots=True)
class FingerprintParameters:
    """Fingerprint generation options.

    Attributes:
        kind: Fingerprint family.
        size: Vector length in bits.
        min_path: Shortest path, in bonds, hashed by PATH fingerprints.
        max_path: Longest path, in bonds, hashed by PATH fingerprints.
    """

    kind: FingerprintKind = FingerprintKind.PATH
    size: int = DEFAULT_SIZE
    min_path: int = 1
    max_path: int = 7

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError(f"Fingerprint size must be positive, got {self.size}")
        if self.min_path < 1 or self.max_path < self.min_path:
            raise ValueError(f"Invalid path range {self.min_path}..{self.max_path}")


def fnv1a_32(data: Iterable[int]) -> int:
    """32-bit FNV-1a hash of a byte sequence."""
    h = _FNV32_OFFSET
    for byte in data:
        h ^= byte & 0xFF
        h = (h * _FNV32_PRIME) & _MASK32
    return h


def _u32_bytes(value: int) -> tuple[int, int, int, int]:
    return (value & 0xFF, (value >> 8) & 0xFF, (value >> 16) & 0xFF, (value >> 24) & 0xFF)


class Fingerprint:
    """Fixed-length bit vector.

    Bits are kept in a single Python integer; bit ``i`` is set when
    ``(bits >> i) & 1``.
    """

    __slots__ = ("size", "bits", "kind")

    def __init__(self, size: int = DEFAULT_SIZE, bits: int = 0, kind: FingerprintKind = FingerprintKind.PATH) -> None:
        if size <= 0:
            raise ValueError(f"Fingerprint size must be positive, got {size}")
        self.size = size
        self.bits = bits & ((1 << size) - 1)
        self.kind = kind

    def set_bit(self, pos: int) -> None:
        """Set one bit; positions outside the vector are ignored."""
        if 0 <= pos < self.size:
            self.bits |= 1 << pos

    def get_bit(self, pos: int) -> bool:
        if pos < 0 or pos >= self.size:
            return False
        return bool((self.bits >> pos) & 1)

    def set_bits_from_hash(self, feature_hash: int, count: int = BITS_PER_FEATURE) -> None:
        """Set ``count`` bits derived from a 32-bit feature hash."""
        for i in range(count):
            seed = (feature_hash + i * _GOLDEN) & _MASK32
            self.set_bit(seed % self.size)

    @property
    def bit_count(self) -> int:
        return self.bits.bit_count()

    def on_bits(self) -> list[int]:
        """Positions of the set bits in ascending order."""
        positions = []
        bits = self.bits
        while bits:
            low = bits & -bits
            positions.append(low.bit_length() - 1)
            bits ^= low
        return positions

    def to_hex(self) -> str:
        """Hex dump in 64-bit words, each word written as little-endian bytes."""
        num_words = (self.size + 63) // 64
        return self.bits.to_bytes(num_words * 8, "little").hex()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fingerprint):
            return NotImplemented
        return self.size == other.size and self.bits == other.bits

    def __hash__(self) -> int:
        return hash((self.size, self.bits))

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return f"Fingerprint(size={self.size}, on={self.bit_count})"


class FingerprintGenerator:
    """Builds fingerprints of one molecule.

    Args:
        mol: Molecule to describe (not modified).
        params: Generation options; defaults to a 2048-bit PATH fingerprint.
    """

    def __init__(self, mol: "Molecule", params: FingerprintParameters | None = None) -> None:
        self.mol = mol
        self.params = params if params is not None else FingerprintParameters()

    def build(self) -> Fingerprint:
        fp = Fingerprint(self.params.size, kind=self.params.kind)
        if self.params.kind == FingerprintKind.PATH:
            features = self._path_hashes()
        else:
            features = self._circular_hashes(self.params.kind.radius)

        count = 0
        for feature in features:
            fp.set_bits_from_hash(feature)
            count += 1
        logger.debug(
            "%s fingerprint: %d features, %d bits set", self.params.kind.name, count, fp.bit_count
        )
        return fp

    def _path_hashes(self) -> Iterator[int]:
        for length in range(self.params.min_path, self.params.max_path + 1):
            for start in range(self.mol.num_atoms):
                yield from self._walk([start], {start}, length)

    def _walk(self, path: list[int], visited: set[int], remaining: int) -> Iterator[int]:
        if remaining == 0:
            yield self._hash_path(path)
            return
        current = path[-1]
        for nbr in self.mol.neighbors(current):
            if nbr in visited:
                continue
            path.append(nbr)
            visited.add(nbr)
            yield from self._walk(path, visited, remaining - 1)
            visited.discard(nbr)
            path.pop()

    def _hash_path(self, path: list[int]) -> int:
        data: list[int] = []
        for i, atom_idx in enumerate(path):
            data.append(self.mol.atoms[atom_idx].atomic_number)
            if i > 0:
                bond = self.mol.get_bond_between(path[i - 1], atom_idx)
                data.append(bond.order)
        return fnv1a_32(data)

    def _initial_identifier(self, atom_idx: int) -> int:
        atom = self.mol.atoms[atom_idx]
        z = atom.atomic_number
        return fnv1a_32(
            (
                z & 0xFF,
                (z >> 8) & 0xFF,
                self.mol.heavy_degree(atom_idx),
                self.mol.degree(atom_idx) + self.mol.total_hydrogens(atom_idx),
                atom.charge + 128,
            )
        )

    def _circular_hashes(self, radius: int) -> Iterator[int]:
        identifiers = [self._initial_identifier(i) for i in range(self.mol.num_atoms)]
        for r in range(radius + 1):
            yield from identifiers
            if r == radius:
                break
            updated = []
            for atom_idx, own in enumerate(identifiers):
                data = list(_u32_bytes(own))
                for nbr_id in sorted(identifiers[n] for n in self.mol.neighbors(atom_idx)):
                    data.extend(_u32_bytes(nbr_id))
                updated.append(fnv1a_32(data))
            identifiers = updated


def generate_fingerprint(
    mol: "Molecule",
    params: FingerprintParameters | None = None,
) -> Fingerprint:
    """Generate a fingerprint for a molecule.

    Args:
        mol: Molecule to describe.
        params: Options; default is a 2048-bit path fingerprint over 1..7
            bonds.

    Returns:
        Fingerprint of ``params.size`` bits.
    """
    return FingerprintGenerator(mol, params).build()


def ecfp4(mol: "Molecule", size: int = DEFAULT_SIZE) -> Fingerprint:
    """Radius-2 circular fingerprint."""
    return generate_fingerprint(mol, FingerprintParameters(FingerprintKind.ECFP4, size))


def _check_sizes(first: Fingerprint, second: Fingerprint) -> None:
    if first.size != second.size:
        raise ValueError(f"Fingerprint sizes differ: {first.size} != {second.size}")


def tanimoto(first: Fingerprint, second: Fingerprint) -> float:
    """Tanimoto coefficient, |A & B| / |A | B|.

    Returns 0.0 when both fingerprints are empty.

    Raises:
        ValueError: If the fingerprints have different sizes.
    """
    _check_sizes(first, second)
    union = (first.bits | second.bits).bit_count()
    if union == 0:
        return 0.0
    return (first.bits & second.bits).bit_count() / union


def dice(first: Fingerprint, second: Fingerprint) -> float:
    """Dice coefficient, 2|A & B| / (|A| + |B|)."""
    _check_sizes(first, second)
    total = first.bit_count + second.bit_count
    if total == 0:
        return 0.0
    return 2.0 * (first.bits & second.bits).bit_count() / total


def cosine(first: Fingerprint, second: Fingerprint) -> float:
    """Cosine similarity, |A & B| / sqrt(|A| |B|); 0.0 if either is empty."""
    _check_sizes(first, second)
    a, b = first.bit_count, second.bit_count
    if a == 0 or b == 0:
        return 0.0
    return (first.bits & second.bits).bit_count() / math.sqrt(a * b)


def hamming(first: Fingerprint, second: Fingerprint) -> int:
    """Number of differing bits."""
    _check_sizes(first, second)
    return (first.bits ^ second.bits).bit_count()


def euclidean(first: Fingerprint, second: Fingerprint) -> float:
    return math.sqrt(hamming(first, second))
