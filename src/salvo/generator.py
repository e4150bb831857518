"""Random fleet placement."""

from __future__ import annotations

import logging
import random
from typing import Dict, List, Mapping, Optional, Tuple

from . import config as _cfg
from .board import Board, PlacedShip
from .shapes import ROTATIONS, SHIP_TYPES, ShipType, rotate

logger = logging.getLogger(__name__)


class UnderfilledFleet(Exception):
    """Raised when some ship units could not be placed within the attempt budget.

    ``missing`` maps each ship type to the number of units left unplaced;
    ``board`` and ``placed`` hold the partial layout that was built.
    """

    def __init__(self, missing: Dict[ShipType, int], board: Board, placed: List[PlacedShip]) -> None:
        self.missing = missing
        self.board = board
        self.placed = placed
        names = ", ".join(f"{ship.name} x{n}" for ship, n in missing.items())
        super().__init__(f"Could not place: {names}")


def generate_placements(
    size: int,
    composition: Mapping[ShipType, int],
    *,
    rng: Optional[random.Random] = None,
    max_attempts: Optional[int] = None,
) -> Tuple[Board, List[PlacedShip]]:
    """Randomly position every unit of *composition* on a fresh *size* x *size* board.

    Ship types are handled in canonical order.  Each unit gets up to
    *max_attempts* uniform draws of (row, col, rotation); the first legal one
    is committed.  Raises ``UnderfilledFleet`` if any unit could not be placed.
    """
    rnd = rng or random.Random()
    attempts = _cfg.PLACEMENT_ATTEMPTS if max_attempts is None else max_attempts
    board = Board(size)
    placed: List[PlacedShip] = []
    missing: Dict[ShipType, int] = {}
    next_id = 1

    for ship_type in SHIP_TYPES:
        for _ in range(composition.get(ship_type, 0)):
            ship = None
            for _ in range(attempts):
                row = rnd.randrange(size)
                col = rnd.randrange(size)
                rotation = rnd.choice(ROTATIONS)
                if board.can_place(row, col, rotate(ship_type.footprint, rotation)):
                    ship = board.place(ship_type, row, col, rotation, next_id)
                    break
            if ship is None:
                missing[ship_type] = missing.get(ship_type, 0) + 1
                continue
            placed.append(ship)
            next_id += 1

    if missing:
        logger.debug("Fleet generation left units unplaced on %dx%d: %s", size, size, missing)
        raise UnderfilledFleet(missing, board, placed)
    logger.debug("Generated %d ships covering %d cells", len(placed), board.ship_cell_count)
    return board, placed


def generate_fleet(
    size: int,
    composition: Mapping[ShipType, int],
    *,
    rng: Optional[random.Random] = None,
    max_attempts: Optional[int] = None,
) -> Board:
    """Like ``generate_placements`` but returns only the board."""
    board, _ = generate_placements(size, composition, rng=rng, max_attempts=max_attempts)
    return board


def generate_with_retries(
    size: int,
    composition: Mapping[ShipType, int],
    *,
    rng: Optional[random.Random] = None,
    retries: Optional[int] = None,
) -> Tuple[Board, List[PlacedShip]]:
    """Run ``generate_placements`` up to *retries* times, re-raising the last failure."""
    tries = _cfg.FLEET_RETRIES if retries is None else retries
    attempts = max(tries, 1)
    attempt = 1
    while True:
        try:
            return generate_placements(size, composition, rng=rng)
        except UnderfilledFleet as exc:
            logger.info("Fleet generation attempt %d/%d failed: %s", attempt, attempts, exc)
            if attempt >= attempts:
                raise
        attempt += 1
