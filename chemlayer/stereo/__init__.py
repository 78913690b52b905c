"""Stereo side tables and stereo perception."""

from chemlayer.stereo.tables import (
    IMPLICIT,
    CisTransEntry,
    CisTransParity,
    CisTransTable,
    Stereocenter,
    StereocenterTable,
    StereoKind,
)
from chemlayer.stereo.cis_trans import (
    cis_trans_from_coordinates,
    find_cis_trans_candidates,
    perceive_cis_trans_from_coordinates,
    perceive_cis_trans_from_marks,
)
from chemlayer.stereo.tetrahedral import (
    find_stereocenter_candidates,
    perceive_stereo,
    perceive_stereocenters_from_coordinates,
    permutation_parity,
    pyramid_from_coordinates,
    pyramid_parity,
    set_stereocenter,
)

__all__ = [
    # Tables
    "IMPLICIT",
    "CisTransEntry",
    "CisTransParity",
    "CisTransTable",
    "Stereocenter",
    "StereocenterTable",
    "StereoKind",
    # Cis/trans
    "cis_trans_from_coordinates",
    "find_cis_trans_candidates",
    "perceive_cis_trans_from_coordinates",
    "perceive_cis_trans_from_marks",
    # Tetrahedral
    "find_stereocenter_candidates",
    "perceive_stereo",
    "perceive_stereocenters_from_coordinates",
    "permutation_parity",
    "pyramid_from_coordinates",
    "pyramid_parity",
    "set_stereocenter",
]
