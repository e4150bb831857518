"""Difficulty presets and fleet compositions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence, Union

from .shapes import SHIP_TYPES, ShipType, ship_type_for

logger = logging.getLogger(__name__)

Composition = Dict[ShipType, int]


@dataclass(frozen=True)
class BoardConfig:
    """Board dimension plus the number of units required per ship type."""

    difficulty: str
    size: int
    fleet: Composition = field(default_factory=dict)
    custom: bool = False

    def count(self, ship_type: ShipType) -> int:
        return self.fleet.get(ship_type, 0)

    def counts(self) -> List[int]:
        """Unit counts in canonical ship order."""
        return [self.count(ship) for ship in SHIP_TYPES]

    @property
    def total_units(self) -> int:
        return sum(self.fleet.values())

    @property
    def total_cells(self) -> int:
        return sum(ship.size * n for ship, n in self.fleet.items())

    def describe(self) -> str:
        parts = [f"{ship.name}: {self.count(ship)}" for ship in SHIP_TYPES if self.count(ship) > 0]
        return f"{self.difficulty} - " + ", ".join(parts)


def _composition(*counts: int) -> Composition:
    return dict(zip(SHIP_TYPES, counts))


PRESETS: Dict[str, BoardConfig] = {
    "6x6": BoardConfig("6x6", 6, _composition(3, 2, 1, 0, 0)),
    "9x9": BoardConfig("9x9", 9, _composition(4, 3, 1, 1, 0)),
    "12x12": BoardConfig("12x12", 12, _composition(5, 3, 2, 1, 1)),
    "15x15": BoardConfig("15x15", 15, _composition(7, 4, 3, 2, 1)),
}


def preset(difficulty: str) -> BoardConfig:
    """Return the preset for *difficulty* (e.g. ``"9x9"``)."""
    try:
        return PRESETS[difficulty]
    except KeyError:
        raise ValueError(f"Unknown difficulty {difficulty!r}; choose one of {', '.join(PRESETS)}") from None


def custom_config(
    difficulty: str,
    counts: Union[Mapping[Union[ShipType, str], int], Sequence[int]],
) -> BoardConfig:
    """Build a custom fleet for *difficulty*, clamping each count to the preset maximum.

    *counts* is either a mapping keyed by ship type (or ship key/name) or a
    sequence in canonical ship order.  Ship types left out default to zero.
    """
    base = preset(difficulty)
    if isinstance(counts, Mapping):
        requested = {
            (key if isinstance(key, ShipType) else ship_type_for(key)): int(n) for key, n in counts.items()
        }
    else:
        values = list(counts)
        if len(values) > len(SHIP_TYPES):
            raise ValueError(f"Expected at most {len(SHIP_TYPES)} ship counts, got {len(values)}")
        requested = {ship: int(n) for ship, n in zip(SHIP_TYPES, values)}

    fleet: Composition = {}
    for ship in SHIP_TYPES:
        want = requested.get(ship, 0)
        limit = base.count(ship)
        got = max(0, min(want, limit))
        if got != want:
            logger.warning("Clamped %s count %d to %d for %s", ship.name, want, got, difficulty)
        fleet[ship] = got
    return BoardConfig(difficulty, base.size, fleet, custom=True)
