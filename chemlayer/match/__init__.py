"""Substructure matching."""

from chemlayer.match.substructure import (
    ExactMatcher,
    Match,
    SubstructureMatcher,
    count_substructure_matches,
    find_substructure_matches,
    is_exact_match,
    is_substructure_of,
)

__all__ = [
    "ExactMatcher",
    "Match",
    "SubstructureMatcher",
    "count_substructure_matches",
    "find_substructure_matches",
    "is_exact_match",
    "is_substructure_of",
]
