"""Ring detection and analysis."""

from chemlayer.rings.detection import (
    find_rings,
    find_ring_systems,
    is_ring_bond,
    ring_atoms,
    ring_bonds,
    ring_edge_bonds,
    smallest_ring_size,
)

__all__ = [
    "find_rings",
    "find_ring_systems",
    "is_ring_bond",
    "ring_atoms",
    "ring_bonds",
    "ring_edge_bonds",
    "smallest_ring_size",
]
