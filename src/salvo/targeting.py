from __future__ import annotations

import random
from typing import Optional, Tuple

from .board import RevealedBoard

Coord = Tuple[int, int]

# up, down, left, right
_PROBE_ORDER = ((-1, 0), (1, 0), (0, -1), (0, 1))


def select_target(revealed: RevealedBoard, rng: Optional[random.Random] = None) -> Coord:
    """
    Pick the computer's next shot.

    1. Hunt: walk the hit cells in row-major order and return the first
       orthogonal neighbour (up, down, left, right) that is still unknown.
    2. Otherwise choose uniformly among all unknown cells.
    """
    for r, c in revealed.hit_cells():
        for dr, dc in _PROBE_ORDER:
            nbr = (r + dr, c + dc)
            if revealed.is_unknown(*nbr):
                return nbr

    unknown = revealed.unknown_cells()
    if not unknown:
        raise ValueError("No unknown cells left to target")
    return (rng or random).choice(unknown)
