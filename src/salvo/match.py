"""Match lifecycle for classic and competitive games.

A match is an explicit ``MatchState`` value.  Transition functions never
mutate the state they are given: they return a new state together with a
``ShotOutcome``.  Rejected actions (cell already revealed, off the board,
wrong turn, match over) hand back the *same* state object and a REJECTED
outcome so callers can ignore them without special casing.

Phases::

    classic:      ACTIVE -> FINISHED
    competitive:  SETUP -> ACTIVE -> FINISHED
"""

from __future__ import annotations

import dataclasses
import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Tuple

from .board import Board, RevealedBoard
from .generator import generate_with_retries
from .presets import BoardConfig
from .shapes import ShipType
from .targeting import select_target

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    CLASSIC = "classic"
    COMPETITIVE = "competitive"


class Phase(Enum):
    SETUP = "setup"
    ACTIVE = "active"
    FINISHED = "finished"


class Side(str, Enum):
    PLAYER = "player"
    COMPUTER = "computer"

    @property
    def other(self) -> "Side":
        return Side.COMPUTER if self is Side.PLAYER else Side.PLAYER


class ShotResult(Enum):
    HIT = "hit"
    MISS = "miss"
    REJECTED = "rejected"


class SetupIncomplete(Exception):
    """Raised when a competitive match is started before the fleet is fully placed."""


@dataclass(frozen=True)
class ShotOutcome:
    shooter: Side
    row: int
    col: int
    result: ShotResult
    finished: bool = False
    winner: Optional[Side] = None

    @property
    def accepted(self) -> bool:
        return self.result is not ShotResult.REJECTED


@dataclass(frozen=True)
class MatchState:
    mode: Mode
    config: BoardConfig
    phase: Phase
    computer_board: Optional[Board] = None
    shots_at_computer: Optional[RevealedBoard] = None
    player_board: Optional[Board] = None
    shots_at_player: Optional[RevealedBoard] = None
    moves: int = 0
    computer_moves: int = 0
    started_at: float = 0.0
    turn: Optional[Side] = None
    winner: Optional[Side] = None

    @property
    def finished(self) -> bool:
        return self.phase is Phase.FINISHED

    @property
    def computer_ship_cells(self) -> int:
        return self.computer_board.ship_cell_count if self.computer_board is not None else 0

    @property
    def player_ship_cells(self) -> int:
        return self.player_board.ship_cell_count if self.player_board is not None else 0

    def elapsed_ms(self, now: Optional[float] = None) -> int:
        if not self.started_at:
            return 0
        return int(((time.time() if now is None else now) - self.started_at) * 1000)


# ---------------------------------------------------------------------- #
# Construction
# ---------------------------------------------------------------------- #
def new_classic_match(
    config: BoardConfig,
    *,
    target: Optional[Board] = None,
    rng: Optional[random.Random] = None,
    now: Optional[float] = None,
) -> MatchState:
    """Start a classic match against *target* or a freshly generated computer fleet."""
    if target is None:
        target, _ = generate_with_retries(config.size, config.fleet, rng=rng)
    elif target.size != config.size:
        raise ValueError(f"Target board is {target.size}x{target.size}, expected {config.size}x{config.size}")
    logger.info("Classic match on %s: %d ship cells to find", config.difficulty, target.ship_cell_count)
    return MatchState(
        mode=Mode.CLASSIC,
        config=config,
        phase=Phase.ACTIVE,
        computer_board=target,
        shots_at_computer=RevealedBoard(config.size),
        started_at=time.time() if now is None else now,
    )


def new_competitive_match(config: BoardConfig) -> MatchState:
    """Create a competitive match waiting for the player's fleet."""
    return MatchState(mode=Mode.COMPETITIVE, config=config, phase=Phase.SETUP)


def start_competitive(
    state: MatchState,
    player_board: Board,
    remaining: Mapping[ShipType, int],
    *,
    computer_board: Optional[Board] = None,
    rng: Optional[random.Random] = None,
    now: Optional[float] = None,
) -> MatchState:
    """Leave SETUP: lock the player's fleet, generate the computer's and hand the first turn to the player."""
    if state.mode is not Mode.COMPETITIVE or state.phase is not Phase.SETUP:
        raise SetupIncomplete(f"Match is not in competitive setup (mode={state.mode.value}, phase={state.phase.value})")
    unplaced = {ship.name: n for ship, n in remaining.items() if n > 0}
    if unplaced:
        raise SetupIncomplete(f"Ships still to place: {unplaced}")
    if player_board.size != state.config.size:
        raise ValueError(f"Player board is {player_board.size}x{player_board.size}, expected {state.config.size}")
    if player_board.ship_cell_count != state.config.total_cells:
        raise SetupIncomplete(
            f"Player fleet covers {player_board.ship_cell_count} cells, expected {state.config.total_cells}"
        )
    if computer_board is None:
        computer_board, _ = generate_with_retries(state.config.size, state.config.fleet, rng=rng)
    logger.info(
        "Competitive match on %s: player %d cells vs computer %d cells",
        state.config.difficulty,
        player_board.ship_cell_count,
        computer_board.ship_cell_count,
    )
    return dataclasses.replace(
        state,
        phase=Phase.ACTIVE,
        player_board=player_board,
        shots_at_player=RevealedBoard(state.config.size),
        computer_board=computer_board,
        shots_at_computer=RevealedBoard(state.config.size),
        started_at=time.time() if now is None else now,
        turn=Side.PLAYER,
    )


# ---------------------------------------------------------------------- #
# Shots
# ---------------------------------------------------------------------- #
def _rejected(state: MatchState, shooter: Side, row: int, col: int, reason: str) -> Tuple[MatchState, ShotOutcome]:
    logger.debug("Rejected %s shot at (%d, %d): %s", shooter.value, row, col, reason)
    return state, ShotOutcome(shooter, row, col, ShotResult.REJECTED, state.finished, state.winner)


def fire(state: MatchState, row: int, col: int) -> Tuple[MatchState, ShotOutcome]:
    """The player shoots at the computer's board."""
    if state.phase is not Phase.ACTIVE:
        return _rejected(state, Side.PLAYER, row, col, f"phase is {state.phase.value}")
    if state.mode is Mode.COMPETITIVE and state.turn is not Side.PLAYER:
        return _rejected(state, Side.PLAYER, row, col, "not the player's turn")
    assert state.shots_at_computer is not None and state.computer_board is not None
    if not state.shots_at_computer.is_unknown(row, col):
        return _rejected(state, Side.PLAYER, row, col, "cell unavailable")

    revealed = state.shots_at_computer.copy()
    value = revealed.reveal(row, col, state.computer_board)
    result = ShotResult.HIT if value is not None and value > 0 else ShotResult.MISS
    moves = state.moves + 1

    if revealed.hit_count == state.computer_ship_cells:
        new_state = dataclasses.replace(
            state, shots_at_computer=revealed, moves=moves, phase=Phase.FINISHED, winner=Side.PLAYER, turn=None
        )
        logger.info("Player sank the whole fleet in %d moves", moves)
        return new_state, ShotOutcome(Side.PLAYER, row, col, result, True, Side.PLAYER)

    turn = Side.COMPUTER if state.mode is Mode.COMPETITIVE else state.turn
    new_state = dataclasses.replace(state, shots_at_computer=revealed, moves=moves, turn=turn)
    return new_state, ShotOutcome(Side.PLAYER, row, col, result)


def computer_fire(state: MatchState, rng: Optional[random.Random] = None) -> Tuple[MatchState, ShotOutcome]:
    """The computer shoots at the player's board using the hunt heuristic."""
    if state.mode is not Mode.COMPETITIVE or state.phase is not Phase.ACTIVE or state.turn is not Side.COMPUTER:
        return _rejected(state, Side.COMPUTER, -1, -1, "not the computer's turn")
    assert state.shots_at_player is not None and state.player_board is not None

    row, col = select_target(state.shots_at_player, rng)
    revealed = state.shots_at_player.copy()
    value = revealed.reveal(row, col, state.player_board)
    result = ShotResult.HIT if value is not None and value > 0 else ShotResult.MISS
    computer_moves = state.computer_moves + 1

    if revealed.hit_count == state.player_ship_cells:
        new_state = dataclasses.replace(
            state,
            shots_at_player=revealed,
            computer_moves=computer_moves,
            phase=Phase.FINISHED,
            winner=Side.COMPUTER,
            turn=None,
        )
        logger.info("Computer sank the player's fleet in %d moves", computer_moves)
        return new_state, ShotOutcome(Side.COMPUTER, row, col, result, True, Side.COMPUTER)

    new_state = dataclasses.replace(state, shots_at_player=revealed, computer_moves=computer_moves, turn=Side.PLAYER)
    return new_state, ShotOutcome(Side.COMPUTER, row, col, result)
