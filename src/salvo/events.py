"""Lightweight event model used by GameSession to decouple game logic from its observers.

Subscribers (the stats recorder, the CLI, logging) receive strongly-typed
events instead of parsing free-text strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict


class Category(Enum):
    """High-level event categories."""

    TURN = auto()  # per-turn lifecycle (start, shot, end)
    SYSTEM = auto()  # session closed, computer move cancelled etc.


@dataclass(frozen=True)
class Event:
    """Immutable event emitted by GameSession."""

    category: Category
    type: str  # finer-grained identifier, e.g. "start", "shot", "end"
    payload: Dict[str, Any]
