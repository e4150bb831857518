"""Single-player game session.

The class in this module owns *one* match between the local player and the
computer, from fleet setup to the final shot:

Setup actions (competitive mode, SETUP phase)
---------------------------------------------
place_ship(type, row, col, rotation)   Place one unit of the fleet.
remove_ship(id)                        Return a placed unit to the pool.
auto_place()                           Randomly place the whole fleet.
clear_board()                          Remove every placed unit.
import_field(text) / export_field()    Load or save the layout as text.
start()                                Lock the fleet and begin firing.

Play actions (ACTIVE phase)
---------------------------
fire(row, col)                         Player shot.  In competitive mode a
                                       non-final shot schedules the computer's
                                       reply after ``COMPUTER_MOVE_DELAY``.

Events are emitted to subscribers for every start, shot and end of match so
that statistics and front ends never poll the state.  ``close()`` discards the
match and cancels a pending computer move.
"""

from __future__ import annotations

import dataclasses
import logging
import random
import threading
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from . import config as _cfg
from .board import Board, PlacedShip
from .codec import encode
from .editor import PlacementEditor
from .events import Category, Event
from .match import (
    MatchState,
    Mode,
    Phase,
    ShotOutcome,
    Side,
    computer_fire,
    fire,
    new_classic_match,
    new_competitive_match,
    start_competitive,
)
from .presets import BoardConfig
from .scheduler import TurnScheduler
from .shapes import ShipType
from .stats import MatchRecord

logger = logging.getLogger(__name__)


class SessionClosed(RuntimeError):
    """Raised when a closed session is used."""


class GameSession:
    """Owns a single match for one player."""

    def __init__(
        self,
        config: BoardConfig,
        mode: Mode = Mode.CLASSIC,
        *,
        player_name: Optional[str] = None,
        target: Optional[Board] = None,
        rng: Optional[random.Random] = None,
        move_delay: Optional[float] = None,
        subscribers: Iterable[Callable[[Event], None]] = (),
    ) -> None:
        """Create the session and, in classic mode, the match itself.

        Args:
            config: Board size and fleet composition.
            mode: Classic (player fires only) or competitive (both sides fire).
            target: Optional pre-built computer board for classic mode, e.g. a
                layout loaded from a field file.
            move_delay: Seconds before the computer replies; defaults to
                ``config.COMPUTER_MOVE_DELAY``.
        """
        self.config = config
        self.mode = Mode(mode)
        self.player_name = player_name or _cfg.DEFAULT_PLAYER
        self.rng = rng or random.Random()
        self._lock = threading.RLock()
        self._subs: List[Callable[[Event], None]] = list(subscribers)
        self._scheduler = TurnScheduler(_cfg.COMPUTER_MOVE_DELAY if move_delay is None else move_delay)
        self._closed = False
        self.editor: Optional[PlacementEditor] = None

        if self.mode is Mode.CLASSIC:
            self._state: Optional[MatchState] = new_classic_match(config, target=target, rng=self.rng)
            self._emit_start()
        else:
            self._state = new_competitive_match(config)
            self.editor = PlacementEditor(config)

    # -------------------- context manager --------------------
    def __enter__(self) -> "GameSession":
        return self

    def __exit__(self, *_exc) -> None:
        self.close()

    # -------------------- state access --------------------
    @property
    def state(self) -> MatchState:
        if self._closed or self._state is None:
            raise SessionClosed("Session has been closed")
        return self._state

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def computer_move_pending(self) -> bool:
        return self._scheduler.pending

    def _setup_editor(self) -> PlacementEditor:
        if self.phase is not Phase.SETUP or self.editor is None:
            raise RuntimeError("Fleet can only be edited during competitive setup")
        return self.editor

    # -------------------- setup --------------------
    def place_ship(self, ship_type: ShipType, row: int, col: int, rotation: int = 0) -> Optional[PlacedShip]:
        with self._lock:
            return self._setup_editor().place(ship_type, row, col, rotation)

    def remove_ship(self, ship_id: int) -> bool:
        with self._lock:
            return self._setup_editor().remove(ship_id)

    def auto_place(self) -> List[PlacedShip]:
        with self._lock:
            return self._setup_editor().auto_place(self.rng)

    def clear_board(self) -> None:
        with self._lock:
            self._setup_editor().clear()

    def import_field(self, text: str) -> None:
        """Load a layout; a ``FieldParseError`` leaves the current layout untouched."""
        with self._lock:
            self._setup_editor().load(text)

    def export_field(self) -> str:
        with self._lock:
            if self.editor is not None and self.phase is Phase.SETUP:
                return self.editor.export()
            if self.state.player_board is None:
                raise RuntimeError("No player layout to export in classic mode")
            return encode(self.state.player_board.grid, self.config.fleet)

    def start(self) -> MatchState:
        """Leave setup and begin the competitive match (raises ``SetupIncomplete``)."""
        with self._lock:
            editor = self._setup_editor()
            self._state = start_competitive(self.state, editor.board, editor.remaining, rng=self.rng)
            self.editor = None
            self._emit_start()
            return self._state

    # -------------------- gameplay --------------------
    def fire(self, row: int, col: int) -> ShotOutcome:
        """Player shot; rejected shots leave the match unchanged."""
        with self._lock:
            self._state, outcome = fire(self.state, row, col)
            if not outcome.accepted:
                return outcome
            self._emit_shot(outcome)
            if outcome.finished:
                self._conclude()
            elif self._state.turn is Side.COMPUTER:
                self._scheduler.schedule(self.play_computer_turn)
            return outcome

    def play_computer_turn(self) -> Optional[ShotOutcome]:
        """Apply the computer's shot; a no-op once the session has been closed."""
        with self._lock:
            if self._closed or self._state is None:
                logger.debug("Dropping computer move for closed session")
                return None
            self._state, outcome = computer_fire(self._state, self.rng)
            if not outcome.accepted:
                return outcome
            self._emit_shot(outcome)
            if outcome.finished:
                self._conclude()
            return outcome

    def wait_for_computer(self, timeout: Optional[float] = None) -> bool:
        """Block until the pending computer move (if any) has run or was cancelled."""
        move = self._scheduler.current
        return move.wait(timeout) if move is not None else True

    def close(self) -> None:
        """Discard the match and cancel any pending computer move."""
        with self._lock:
            if self._closed:
                return
            cancelled = self._scheduler.cancel()
            self._closed = True
            self._state = None
            self.editor = None
        self._emit(Event(Category.SYSTEM, "closed", {"cancelled_move": cancelled}))
        logger.debug("Session for %s closed (cancelled_move=%s)", self.player_name, cancelled)

    # -------------------- results --------------------
    def record(self, now: Optional[float] = None) -> MatchRecord:
        """Statistics record for a finished match."""
        state = self.state
        if not state.finished:
            raise RuntimeError("Match is not finished yet")
        return MatchRecord(
            player_name=self.player_name,
            mode=state.mode.value,
            difficulty=state.config.difficulty,
            moves=state.moves,
            computer_moves=state.computer_moves if state.mode is Mode.COMPETITIVE else None,
            elapsed_ms=state.elapsed_ms(now),
            result="win" if state.winner is Side.PLAYER else "loss",
            timestamp=datetime.now(timezone.utc).isoformat(),
            ships={ship.key: n for ship, n in state.config.fleet.items()},
        )

    def _conclude(self) -> None:
        state = self.state
        record = self.record()
        logger.info(
            "Match over: %s wins (%s, %s, %d moves)",
            state.winner.value if state.winner else "nobody",
            state.mode.value,
            state.config.difficulty,
            state.moves,
        )
        self._emit(
            Event(
                Category.TURN,
                "end",
                {
                    "winner": state.winner.value if state.winner else None,
                    "moves": state.moves,
                    "computer_moves": state.computer_moves,
                    "record": dataclasses.asdict(record),
                },
            )
        )

    # -------------------- event bus --------------------
    def subscribe(self, cb: Callable[[Event], None]) -> None:
        """Allow external components (stats, front ends) to receive game events."""
        self._subs.append(cb)

    def _emit(self, ev: Event) -> None:
        for cb in tuple(self._subs):
            try:
                cb(ev)
            except Exception:
                # A misbehaving subscriber must not break the match
                logger.exception("Event subscriber failed for %s", ev.type)

    def _emit_start(self) -> None:
        state = self.state
        self._emit(
            Event(
                Category.TURN,
                "start",
                {"mode": state.mode.value, "difficulty": state.config.difficulty, "size": state.config.size},
            )
        )

    def _emit_shot(self, outcome: ShotOutcome) -> None:
        self._emit(
            Event(
                Category.TURN,
                "shot",
                {
                    "shooter": outcome.shooter.value,
                    "row": outcome.row,
                    "col": outcome.col,
                    "result": outcome.result.value,
                },
            )
        )
