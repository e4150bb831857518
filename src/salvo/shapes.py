"""Ship catalogue and footprint rotation.

Every ship type carries a rectangular 0/1 footprint matrix.  Footprints are
stored as tuples of tuples so they can be shared freely; ``rotate`` always
builds a new matrix.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Tuple

Footprint = Tuple[Tuple[int, ...], ...]

ROTATIONS: Tuple[int, ...] = (0, 90, 180, 270)


@dataclass(frozen=True)
class ShipType:
    key: str
    name: str
    footprint: Footprint

    @property
    def size(self) -> int:
        """Number of occupied cells in the footprint."""
        return sum(cell for row in self.footprint for cell in row)

    def __str__(self) -> str:
        return self.name


SUBMARINE = ShipType("SUBMARINE", "Submarine", ((1,),))
DESTROYER = ShipType("DESTROYER", "Destroyer", ((1, 1),))
CRUISER = ShipType("CRUISER", "Cruiser", ((1, 1, 1),))
BATTLESHIP = ShipType("BATTLESHIP", "Battleship", ((1, 1, 1, 1),))
CARRIER = ShipType(
    "CARRIER",
    "Aircraft carrier",
    (
        (0, 0, 1, 0, 0),
        (1, 1, 1, 1, 1),
        (0, 0, 1, 0, 0),
    ),
)

# Canonical order: layout files list fleet counts in exactly this order.
SHIP_TYPES: Tuple[ShipType, ...] = (SUBMARINE, DESTROYER, CRUISER, BATTLESHIP, CARRIER)

SHIP_BY_KEY: Dict[str, ShipType] = {ship.key: ship for ship in SHIP_TYPES}


def ship_type_for(name: str) -> ShipType:
    """Look up a ship type by key or display name, case-insensitively."""
    wanted = name.strip().upper()
    for ship in SHIP_TYPES:
        if wanted in (ship.key, ship.name.upper()):
            return ship
    raise KeyError(f"Unknown ship type: {name}")


def _rotate_once(matrix: Sequence[Sequence[int]]) -> Footprint:
    rows = len(matrix)
    cols = len(matrix[0])
    out: List[List[int]] = [[0] * rows for _ in range(cols)]
    for r in range(rows):
        for c in range(cols):
            out[c][rows - 1 - r] = matrix[r][c]
    return tuple(tuple(row) for row in out)


def rotate(footprint: Sequence[Sequence[int]], degrees: int) -> Footprint:
    """Return *footprint* turned clockwise by *degrees* (0, 90, 180 or 270).

    An r x c matrix becomes c x r after each quarter turn, cell (row, col)
    moving to (col, r - 1 - row).  The input is never modified.
    """
    if degrees not in ROTATIONS:
        raise ValueError(f"Rotation must be one of {ROTATIONS}, got {degrees!r}")
    rotated: Footprint = tuple(tuple(row) for row in footprint)
    for _ in range(degrees // 90):
        rotated = _rotate_once(rotated)
    return rotated


def occupied_offsets(footprint: Sequence[Sequence[int]]) -> Iterator[Tuple[int, int]]:
    """Yield (dr, dc) for every occupied footprint cell in row-major order."""
    for r, row in enumerate(footprint):
        for c, cell in enumerate(row):
            if cell:
                yield r, c
