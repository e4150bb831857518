"""Deferred, cancellable computer moves."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class DeferredMove:
    """
    Run *action* once after *delay* seconds on a daemon timer thread.

    ``cancel()`` guarantees the action will not start afterwards; ``done`` is
    set once the action has run or the move was cancelled.
    """

    def __init__(self, delay: float, action: Callable[[], None]) -> None:
        self.delay = delay
        self._action = action
        self._lock = threading.Lock()
        self._cancelled = False
        self._started = False
        self.done = threading.Event()
        self._timer: Optional[threading.Timer] = None

    def start(self) -> "DeferredMove":
        if self.delay <= 0:
            self._run()
            return self
        self._timer = threading.Timer(self.delay, self._run)
        self._timer.daemon = True
        self._timer.start()
        return self

    def _run(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._started = True
        try:
            self._action()
        except Exception:
            logger.exception("Deferred move failed")
        finally:
            self.done.set()

    def cancel(self) -> bool:
        """Cancel the move; returns False if it already started running."""
        with self._lock:
            if self._started:
                return False
            self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
        self.done.set()
        return True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def pending(self) -> bool:
        return not self.done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self.done.wait(timeout)


class TurnScheduler:
    """Holds at most one pending computer move."""

    def __init__(self, delay: float) -> None:
        self.delay = delay
        self._current: Optional[DeferredMove] = None

    def schedule(self, action: Callable[[], None]) -> DeferredMove:
        self.cancel()
        move = DeferredMove(self.delay, action)
        self._current = move
        logger.debug("Computer move scheduled in %.2fs", self.delay)
        return move.start()

    def cancel(self) -> bool:
        move, self._current = self._current, None
        if move is not None and move.pending:
            logger.debug("Cancelling pending computer move")
            return move.cancel()
        return False

    @property
    def current(self) -> Optional[DeferredMove]:
        return self._current

    @property
    def pending(self) -> bool:
        return self._current is not None and self._current.pending
