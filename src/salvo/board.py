"""Occupancy and shot grids.

Contains the two per-side grids of a match:
 - Board: which cell is covered by which ship (0 = water, >0 = ship id)
 - RevealedBoard: what a shooter has learned (0 unknown, -1 miss, >0 hit)
plus the placement rule shared by manual setup and the fleet generator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

import numpy as np

from .shapes import Footprint, ShipType, occupied_offsets, rotate

Coord = Tuple[int, int]

UNKNOWN = 0
MISS = -1


def can_place(grid, anchor_row: int, anchor_col: int, footprint: Sequence[Sequence[int]]) -> bool:
    """Return True if *footprint* fits at the anchor with a one-cell buffer to every other ship."""
    cells = np.asarray(grid)
    size = cells.shape[0]
    for dr, dc in occupied_offsets(footprint):
        r, c = anchor_row + dr, anchor_col + dc
        if not (0 <= r < size and 0 <= c < size):
            return False
        if cells[r, c] != 0:
            return False
        # Any ship in the 8-neighbourhood breaks the buffer rule.
        if np.any(cells[max(r - 1, 0) : r + 2, max(c - 1, 0) : c + 2] != 0):
            return False
    return True


@dataclass(frozen=True)
class PlacedShip:
    ship_type: ShipType
    row: int
    col: int
    rotation: int
    ship_id: int

    @property
    def footprint(self) -> Footprint:
        return rotate(self.ship_type.footprint, self.rotation)

    @property
    def cells(self) -> FrozenSet[Coord]:
        return frozenset((self.row + dr, self.col + dc) for dr, dc in occupied_offsets(self.footprint))


class Board:
    """A single side's fleet layout."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"Board size must be positive, got {size}")
        self.size = size
        self.grid = np.zeros((size, size), dtype=np.int32)
        self.ships: Dict[int, PlacedShip] = {}

    @classmethod
    def from_occupancy(cls, occupancy) -> "Board":
        """Rebuild a board from a raw 0/1 grid; individual ships are not recoverable."""
        cells = np.asarray(occupancy)
        if cells.ndim != 2 or cells.shape[0] != cells.shape[1]:
            raise ValueError(f"Occupancy grid must be square, got shape {cells.shape}")
        board = cls(cells.shape[0])
        board.grid[:] = (cells > 0).astype(np.int32)
        return board

    def can_place(self, row: int, col: int, footprint: Sequence[Sequence[int]]) -> bool:
        return can_place(self.grid, row, col, footprint)

    def place(self, ship_type: ShipType, row: int, col: int, rotation: int, ship_id: int) -> Optional[PlacedShip]:
        """Write a ship into the grid, or return None without touching it when the spot is illegal."""
        if ship_id < 1 or ship_id in self.ships:
            raise ValueError(f"Ship id {ship_id} is invalid or already in use")
        footprint = rotate(ship_type.footprint, rotation)
        if not self.can_place(row, col, footprint):
            return None
        ship = PlacedShip(ship_type, row, col, rotation, ship_id)
        for r, c in ship.cells:
            self.grid[r, c] = ship_id
        self.ships[ship_id] = ship
        return ship

    def remove(self, ship_id: int) -> Optional[PlacedShip]:
        ship = self.ships.pop(ship_id, None)
        if ship is not None:
            self.grid[self.grid == ship_id] = 0
        return ship

    def clear(self) -> None:
        self.grid[:] = 0
        self.ships.clear()

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    @property
    def ship_cell_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def occupancy(self) -> np.ndarray:
        """Raw 0/1 view of the layout (a fresh array)."""
        return (self.grid > 0).astype(np.int8)

    def placed_ships(self) -> List[PlacedShip]:
        return [self.ships[k] for k in sorted(self.ships)]

    def copy(self) -> "Board":
        other = Board(self.size)
        other.grid = self.grid.copy()
        other.ships = dict(self.ships)
        return other


class RevealedBoard:
    """A shooter's view of the opponent board; every cell can be revealed once."""

    def __init__(self, size: int) -> None:
        self.size = size
        self.grid = np.zeros((size, size), dtype=np.int32)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def is_unknown(self, row: int, col: int) -> bool:
        return self.in_bounds(row, col) and self.grid[row, col] == UNKNOWN

    def reveal(self, row: int, col: int, target: Board) -> Optional[int]:
        """Record a shot at (*row*, *col*) against *target*.

        Returns the stored value (-1 miss, ship id on hit) or None when the
        cell is off the board or was already revealed.
        """
        if not self.is_unknown(row, col):
            return None
        value = int(target.grid[row, col])
        self.grid[row, col] = value if value > 0 else MISS
        return int(self.grid[row, col])

    @property
    def hit_count(self) -> int:
        return int(np.count_nonzero(self.grid > 0))

    @property
    def shot_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def hit_cells(self) -> List[Coord]:
        """Hit coordinates in row-major order."""
        return [(int(r), int(c)) for r, c in np.argwhere(self.grid > 0)]

    def unknown_cells(self) -> List[Coord]:
        return [(int(r), int(c)) for r, c in np.argwhere(self.grid == UNKNOWN)]

    def copy(self) -> "RevealedBoard":
        other = RevealedBoard(self.size)
        other.grid = self.grid.copy()
        return other
