"""Per-player match history stored as a local JSON file."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from . import config as _cfg
from .events import Category, Event

logger = logging.getLogger(__name__)


@dataclass
class MatchRecord:
    player_name: str
    mode: str
    difficulty: str
    moves: int
    elapsed_ms: int
    result: str  # "win" | "loss"
    timestamp: str  # ISO-8601, UTC
    computer_moves: Optional[int] = None
    ships: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchRecord":
        known = {k: data[k] for k in cls.__dataclass_fields__ if k in data}
        return cls(**known)


class StatsStore:
    """JSON file of the form ``{player_name: [record, ...]}``."""

    def __init__(self, path: Union[str, Path, None] = None) -> None:
        self.path = Path(path) if path is not None else _cfg.STATS_PATH

    def _read(self) -> Dict[str, List[Dict[str, Any]]]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Stats file %s is corrupt; starting a fresh history", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, List[Dict[str, Any]]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def append(self, record: MatchRecord) -> None:
        data = self._read()
        data.setdefault(record.player_name, []).append(asdict(record))
        self._write(data)
        logger.info("Recorded %s for %s (%d moves)", record.result, record.player_name, record.moves)

    def history(self, player_name: str) -> List[MatchRecord]:
        return [MatchRecord.from_dict(item) for item in self._read().get(player_name, [])]

    def players(self) -> List[str]:
        return sorted(self._read())

    def summary(self, player_name: str) -> Dict[str, Any]:
        games = self.history(player_name)
        wins = [g for g in games if g.result == "win"]
        return {
            "games": len(games),
            "wins": len(wins),
            "losses": len(games) - len(wins),
            "best_moves": min((g.moves for g in wins), default=None),
            "average_moves": round(sum(g.moves for g in games) / len(games), 1) if games else None,
        }


class StatsRecorder:
    """Session subscriber that appends a record whenever a match ends."""

    def __init__(self, store: StatsStore) -> None:
        self.store = store

    def __call__(self, ev: Event) -> None:
        if ev.category is not Category.TURN or ev.type != "end":
            return
        self.store.append(MatchRecord.from_dict(ev.payload["record"]))
