"""Aromaticity perception and dearomatization."""

from chemlayer.transform.aromaticity import (
    AromaticityModel,
    AromaticityPerceiver,
    PiLabel,
    aromatize,
    is_huckel,
    perceive_aromaticity,
    pi_label,
    ring_pi_electrons,
)
from chemlayer.transform.dearomatize import dearomatize

__all__ = [
    "AromaticityModel",
    "AromaticityPerceiver",
    "PiLabel",
    "aromatize",
    "dearomatize",
    "is_huckel",
    "perceive_aromaticity",
    "pi_label",
    "ring_pi_electrons",
]
