"""
Layered structure identifier generation.

The identifier is assembled from independent layers behind a version
prefix::

    InChI=1S/<formula>/c<connections>/h<hydrogens>/b<double bonds>/t<centers>/m<class>/s1

Each ``/``-segment is present only when non-empty. Canonical numbering is
pluggable through ``CanonicalRanking``; the default refines the coarse
(atomic number, degree) order so that the layers do not depend on the
order in which atoms were written.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chemlayer.canon import CanonicalRanking
from chemlayer.exceptions import UnsupportedFeatureError
from chemlayer.identifier.key import IDENTIFIER_PREFIX, identifier_key
from chemlayer.identifier.layers import (
    candidate_numberings,
    canonical_numbering,
    cis_trans_layer,
    connectivity_layer,
    enantiomer_layer,
    formula_layer,
    hydrogen_layer,
    tetrahedral_layer,
)
from chemlayer.stereo import StereoKind

if TYPE_CHECKING:
    from chemlayer.types import Molecule

logger = logging.getLogger(__name__)

STANDARD_PREFIX = "InChI=1S"
NON_STANDARD_PREFIX = "InChI=1"


@dataclass(slots=True)
class IdentifierOptions:
    """Options for identifier generation.

    Attributes:
        fixed_h: Treat every hydrogen as fixed to its atom. Hydrogens are
            never perceived as mobile, so the layers are unchanged; the
            identifier is marked non-standard.
        rec_met: Request metal reconnection. Makes the identifier
            non-standard; bonds to metals are always kept as given.
        aux_info: Also produce an auxiliary line mapping canonical numbers
            back to input atom indices.
        s_non: Keep recorded stereo marks on atoms and bonds that are not
            stereogenic.
    """

    fixed_h: bool = False
    rec_met: bool = False
    aux_info: bool = False
    s_non: bool = False

    @property
    def is_standard(self) -> bool:
        return not (self.fixed_h or self.rec_met)


@dataclass(slots=True)
class IdentifierResult:
    """Generated identifier, its key and diagnostics."""

    inchi: str
    key: str
    aux_info: str = ""
    warnings: list[str] = field(default_factory=list)
    log: list[str] = field(default_factory=list)


class IdentifierGenerator:
    """Layered identifier generator.

    Example:
        >>> gen = IdentifierGenerator()
        >>> gen.generate(parse("CCO")).inchi
        'InChI=1S/C2H6O/c1-2-3/h1H,2H2,3H3'
    """

    def __init__(
        self,
        options: IdentifierOptions | None = None,
        ranking: CanonicalRanking | None = None,
        prefix: str | None = None,
    ) -> None:
        """Initialize generator.

        Args:
            options: Generation options (defaults: standard identifier).
            ranking: Canonical ranking strategy for atom numbering.
            prefix: Override of the version prefix.
        """
        self.options = options if options is not None else IdentifierOptions()
        self._ranking = ranking
        if prefix is not None:
            self.prefix = prefix
        else:
            self.prefix = STANDARD_PREFIX if self.options.is_standard else NON_STANDARD_PREFIX

    def _validate(self, mol: "Molecule") -> None:
        for atom in mol.atoms:
            if atom.is_pseudo:
                raise UnsupportedFeatureError("Pseudo atoms are not supported", atom.idx)
            if atom.is_rsite:
                raise UnsupportedFeatureError("Attachment points are not supported", atom.idx)

    def _collect_warnings(self, mol: "Molecule") -> list[str]:
        warnings: list[str] = []
        if any(a.charge for a in mol.atoms):
            warnings.append("Formal charges are not encoded")
        if any(a.isotope for a in mol.atoms):
            warnings.append("Isotopic labels are not encoded")
        if any(a.is_template for a in mol.atoms):
            warnings.append("Template atoms are not counted in the formula")
        if any(c.kind == StereoKind.ANY for _, c in mol.stereocenters.items()):
            warnings.append("Undefined stereocenters omitted")
        return warnings

    def _layers(self, mol: "Molecule", numbering: dict[int, int]) -> dict[str, str]:
        include_all = self.options.s_non
        return {
            "c": connectivity_layer(mol, numbering),
            "h": hydrogen_layer(mol, numbering),
            "b": cis_trans_layer(mol, numbering, include_all),
            "t": tetrahedral_layer(mol, numbering, include_all),
        }

    def _choose_numbering(self, mol: "Molecule") -> tuple[dict[int, int], dict[str, str]]:
        """Pick the numbering and its layers.

        Without stereo the ranking's own numbering is used. With stereo,
        every way of ordering symmetric atoms that keeps the connection and
        hydrogen layers is tried and the smallest (``/b``, ``/t``) pair
        wins, so mirror spellings of a meso compound agree.
        """
        if not len(mol.stereocenters) and not len(mol.cis_trans):
            numbering = canonical_numbering(mol, self._ranking)
            return numbering, self._layers(mol, numbering)

        numberings = candidate_numberings(mol, self._ranking)
        numbering = numberings[0]
        best = self._layers(mol, numbering)
        for candidate in numberings[1:]:
            layers = self._layers(mol, candidate)
            if (layers["c"], layers["h"]) != (best["c"], best["h"]):
                continue
            if (layers["b"], layers["t"]) < (best["b"], best["t"]):
                numbering, best = candidate, layers
        return numbering, best

    def generate(self, mol: "Molecule") -> IdentifierResult:
        """Generate the identifier and key of a molecule.

        Args:
            mol: Molecule to describe (not modified).

        Returns:
            IdentifierResult. An empty molecule yields the bare prefix and
            an empty key.

        Raises:
            UnsupportedFeatureError: If the molecule holds pseudo atoms or
                attachment points.
        """
        self._validate(mol)
        result = IdentifierResult(inchi=self.prefix, key="")
        if mol.num_atoms == 0:
            return result

        numbering, layers_by_tag = self._choose_numbering(mol)
        result.log.append(f"Numbered {len(numbering)} of {mol.num_atoms} atoms")

        cis_trans, tetrahedral = layers_by_tag["b"], layers_by_tag["t"]
        layers: list[tuple[str, str]] = [("", formula_layer(mol))]
        layers.extend((tag, layers_by_tag[tag]) for tag in ("c", "h", "b", "t"))
        if cis_trans or tetrahedral:
            layers.append(("m", enantiomer_layer(mol)))
            layers.append(("s", "1"))
            result.log.append("Stereo layers present")

        if self.options.fixed_h:
            result.log.append("Fixed hydrogens requested; no mobile groups perceived")
        if self.options.rec_met:
            result.log.append("Metal reconnection requested; bonds kept as given")

        parts = [self.prefix]
        for tag, content in layers:
            if content:
                parts.append(f"{tag}{content}")
        result.inchi = "/".join(parts)
        result.key = identifier_key(result.inchi)

        if self.options.aux_info:
            ordered = sorted(numbering, key=numbering.__getitem__)
            mapping = ",".join(str(i + 1) for i in ordered)
            result.aux_info = f"AuxInfo=1/{1 if cis_trans or tetrahedral else 0}/N:{mapping}"

        result.warnings = self._collect_warnings(mol)
        for warning in result.warnings:
            logger.warning("%s: %s", result.inchi, warning)
        return result


def generate_identifier(
    mol: "Molecule",
    options: IdentifierOptions | None = None,
    ranking: CanonicalRanking | None = None,
) -> IdentifierResult:
    """Generate a layered identifier for a molecule.

    This is a convenience function that creates an IdentifierGenerator and
    calls generate().

    Example:
        >>> generate_identifier(parse("c1ccccc1")).inchi.split("/")[1]
        'C6H6'
    """
    return IdentifierGenerator(options, ranking).generate(mol)


def identifier_from_smiles(
    smiles: str,
    options: IdentifierOptions | None = None,
) -> IdentifierResult:
    """Parse a SMILES string and generate its identifier.

    Raises:
        ParseError: If the SMILES string is invalid.
        UnsupportedFeatureError: If it contains pseudo atoms or attachment
            points.
    """
    from chemlayer.parser import parse

    return generate_identifier(parse(smiles), options)


def validate_identifier(identifier: str) -> bool:
    """Check that a string has the identifier prefix and at least one layer."""
    if not identifier.startswith(IDENTIFIER_PREFIX):
        return False
    return len(identifier.split("/")) >= 2


def _strip_version(identifier: str) -> str:
    for prefix in (STANDARD_PREFIX + "/", NON_STANDARD_PREFIX + "/"):
        if identifier.startswith(prefix):
            return identifier[len(prefix):]
    return identifier


def compare_identifiers(first: str, second: str) -> int:
    """Compare two identifiers ignoring the standard/non-standard prefix.

    Returns:
        0 if equal, -1 if ``first`` sorts before ``second``, 1 otherwise.
    """
    a, b = _strip_version(first), _strip_version(second)
    if a == b:
        return 0
    return -1 if a < b else 1


def encode_identifier(identifier: str) -> str:
    """Base64 form of an identifier for compact transport."""
    return base64.b64encode(identifier.encode()).decode("ascii")


def decode_identifier(encoded: str) -> str:
    """Inverse of ``encode_identifier``.

    Raises:
        ValueError: If the input is not valid base64.
    """
    return base64.b64decode(encoded, validate=True).decode()
