# editor.py
"""
Manual fleet placement.

Used for the competitive-mode setup phase and for the standalone layout
editor.  The editor tracks which units of the fleet are still waiting to be
placed; a layout is complete once every counter reaches zero.
"""

from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional

from . import codec
from .board import Board, PlacedShip
from .generator import generate_placements
from .presets import BoardConfig
from .shapes import ROTATIONS, SHIP_TYPES, ShipType

logger = logging.getLogger(__name__)


class PlacementEditor:
    def __init__(self, config: BoardConfig) -> None:
        self.config = config
        self.composition: Dict[ShipType, int] = {ship: config.count(ship) for ship in SHIP_TYPES}
        self.board = Board(config.size)
        self.remaining: Dict[ShipType, int] = dict(self.composition)
        self._next_id = 1

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #
    @property
    def placed(self) -> List[PlacedShip]:
        return self.board.placed_ships()

    @property
    def is_complete(self) -> bool:
        return all(n == 0 for n in self.remaining.values())

    def available(self) -> List[ShipType]:
        """Ship types that still have units to place."""
        return [ship for ship in SHIP_TYPES if self.remaining.get(ship, 0) > 0]

    # ------------------------------------------------------------------ #
    # Actions
    # ------------------------------------------------------------------ #
    def place(self, ship_type: ShipType, row: int, col: int, rotation: int = 0) -> Optional[PlacedShip]:
        """Place one unit of *ship_type*; returns None if none remain or the spot is illegal."""
        if rotation not in ROTATIONS:
            raise ValueError(f"Rotation must be one of {ROTATIONS}, got {rotation!r}")
        if self.remaining.get(ship_type, 0) <= 0:
            logger.debug("No %s left to place", ship_type.name)
            return None
        ship = self.board.place(ship_type, row, col, rotation, self._next_id)
        if ship is None:
            logger.debug("Rejected %s at (%d, %d) rot=%d", ship_type.name, row, col, rotation)
            return None
        self._next_id += 1
        self.remaining[ship_type] -= 1
        return ship

    def remove(self, ship_id: int) -> bool:
        ship = self.board.remove(ship_id)
        if ship is None:
            return False
        self.remaining[ship.ship_type] = self.remaining.get(ship.ship_type, 0) + 1
        return True

    def clear(self) -> None:
        self.board.clear()
        self.remaining = dict(self.composition)
        self._next_id = 1

    def auto_place(self, rng: Optional[random.Random] = None) -> List[PlacedShip]:
        """Replace the layout with a random one covering the whole fleet.

        ``UnderfilledFleet`` propagates and the current layout is kept.
        """
        board, placed = generate_placements(self.config.size, self.composition, rng=rng)
        self.board = board
        self.remaining = {ship: 0 for ship in self.composition}
        self._next_id = len(placed) + 1
        return placed

    # ------------------------------------------------------------------ #
    # Files
    # ------------------------------------------------------------------ #
    def export(self) -> str:
        return codec.encode(self.board.grid, self.composition)

    def load(self, text: str) -> None:
        """Replace the layout with decoded *text*; ships become plain occupancy.

        The file must carry exactly this editor's fleet, fully placed.
        """
        field = codec.decode(text)
        size = self.config.size
        if field.size != size:
            raise codec.FieldParseError(f"Layout is {field.size}x{field.size}, expected {size}x{size}")
        if any(field.composition.get(ship, 0) != n for ship, n in self.composition.items()):
            raise codec.FieldParseError(
                f"Layout fleet {_counts(field.composition)} does not match {_counts(self.composition)}", 1
            )
        cells = int(field.grid.sum())
        if cells != self.config.total_cells:
            raise codec.FieldParseError(f"Layout has {cells} ship cells, expected {self.config.total_cells}")
        self.board = Board.from_occupancy(field.grid)
        self.remaining = {ship: 0 for ship in SHIP_TYPES}
        self._next_id = 2  # imported cells carry id 1


def _counts(composition: Dict[ShipType, int]) -> str:
    return ";".join(str(composition.get(ship, 0)) for ship in SHIP_TYPES)
