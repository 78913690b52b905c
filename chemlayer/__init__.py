"""
Chemlayer - Pure Python molecular graph toolkit.

A zero-dependency library for reading and writing SMILES, perceiving
aromaticity and stereochemistry, and producing layered structure
identifiers, substructure matches and fingerprints.

    >>> from chemlayer import parse, canonical_smiles, generate_identifier
    >>> mol = parse("CCO")
    >>> canonical_smiles(mol)
    'CCO'
    >>> generate_identifier(mol).inchi
    'InChI=1S/C2H6O/c1-2-3/h1H,2H2,3H3'

Submodules:
    chemlayer.rings       - Ring enumeration and membership
    chemlayer.transform   - Aromaticity perception and dearomatization
    chemlayer.stereo      - Cis/trans and tetrahedral stereo
    chemlayer.identifier  - Layered identifier and hashed key
    chemlayer.match       - Substructure search
    chemlayer.fingerprint - Path and circular fingerprints
    chemlayer.properties  - Simple molecular descriptors
"""

__version__ = "0.1.0"
__author__ = "Vladimir Lekić"

# Core types
from chemlayer.types import Atom, Bond, Molecule

# Parsing and writing
from chemlayer.parser import parse, SmilesParser
from chemlayer.writer import canonical_smiles, to_smiles, SmilesWriter
from chemlayer.canon import (
    CanonicalRanking,
    ElementDegreeRanking,
    RefinementRanking,
    canonical_ranks,
)

# Exceptions
from chemlayer.exceptions import (
    ChemError,
    ParseError,
    RingError,
    StructuralError,
    UnsupportedFeatureError,
)

# Element data
from chemlayer.elements import (
    AROMATIC_SUBSET,
    ORGANIC_SUBSET,
    BondDirection,
    BondOrder,
    Element,
    Radical,
)

# Perception and identifiers
from chemlayer.transform import aromatize, dearomatize, perceive_aromaticity
from chemlayer.stereo import perceive_stereo
from chemlayer.identifier import IdentifierOptions, generate_identifier
from chemlayer.match import SubstructureMatcher
from chemlayer.fingerprint import FingerprintKind, FingerprintParameters, generate_fingerprint

# Submodules
from chemlayer import fingerprint, identifier, match, properties, rings, stereo, transform

__all__ = [
    # Types
    "Atom", "Bond", "Molecule",
    # Parsing
    "parse", "SmilesParser",
    # Writing
    "canonical_smiles", "to_smiles", "SmilesWriter",
    # Canonicalization
    "CanonicalRanking", "ElementDegreeRanking", "RefinementRanking", "canonical_ranks",
    # Exceptions
    "ChemError", "ParseError", "RingError", "StructuralError", "UnsupportedFeatureError",
    # Elements
    "Element", "BondOrder", "BondDirection", "Radical", "ORGANIC_SUBSET", "AROMATIC_SUBSET",
    # Perception
    "aromatize", "dearomatize", "perceive_aromaticity", "perceive_stereo",
    # Identifiers, matching, fingerprints
    "IdentifierOptions", "generate_identifier", "SubstructureMatcher",
    "FingerprintKind", "FingerprintParameters", "generate_fingerprint",
    # Submodules
    "fingerprint", "identifier", "match", "properties", "rings", "stereo", "transform",
]
