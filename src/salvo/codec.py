"""Plain-text board layout files.

Layout::

    9x9;4;3;1;1;0
    LMMMMMMML
    MMMLLMMMM
    ...

The header carries the board size and the unit count of every ship type in
canonical order.  Each body row holds one marker per cell: ``L`` for ship,
``M`` for water.  Only occupancy is stored, so ship identity, rotation and
anchor are lost on reload.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Union

import numpy as np

from .config import FIELD_SHIP_MARK, FIELD_WATER_MARK
from .shapes import SHIP_TYPES, ShipType

logger = logging.getLogger(__name__)


class FieldParseError(ValueError):
    """Raised when layout text cannot be decoded."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        super().__init__(f"line {line}: {message}" if line is not None else message)


@dataclass
class DecodedField:
    grid: np.ndarray
    composition: Dict[ShipType, int]

    @property
    def size(self) -> int:
        return int(self.grid.shape[0])


def encode(grid, composition: Mapping[ShipType, int]) -> str:
    """Serialise an occupancy grid (any array where >0 means ship) plus fleet counts."""
    cells = np.asarray(grid)
    size = cells.shape[0]
    if cells.ndim != 2 or cells.shape[1] != size:
        raise ValueError(f"Grid must be square, got shape {cells.shape}")
    counts = ";".join(str(composition.get(ship, 0)) for ship in SHIP_TYPES)
    lines = [f"{size}x{size};{counts}"]
    for row in cells:
        lines.append("".join(FIELD_SHIP_MARK if cell > 0 else FIELD_WATER_MARK for cell in row))
    return "\n".join(lines)


def _parse_size(token: str) -> int:
    parts = token.strip().lower().split("x")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise FieldParseError(f"Malformed size {token!r}, expected NxN", 1)
    rows, cols = int(parts[0]), int(parts[1])
    if rows != cols:
        raise FieldParseError(f"Board must be square, got {token!r}", 1)
    if rows < 1:
        raise FieldParseError("Board size must be positive", 1)
    return rows


def _parse_count(token: str) -> int:
    token = token.strip()
    if not token.isdigit():
        raise FieldParseError(f"Invalid ship count {token!r}", 1)
    return int(token)


def decode(text: str) -> DecodedField:
    """Parse layout text, raising ``FieldParseError`` on any structural problem."""
    lines = [line.rstrip() for line in text.strip().splitlines()]
    if not lines or not lines[0]:
        raise FieldParseError("Empty layout", 1)

    header = lines[0].split(";")
    size = _parse_size(header[0])
    counts = header[1:]
    if len(counts) != len(SHIP_TYPES):
        raise FieldParseError(f"Expected {len(SHIP_TYPES)} ship counts, got {len(counts)}", 1)
    composition = {ship: _parse_count(tok) for ship, tok in zip(SHIP_TYPES, counts)}

    body = lines[1:]
    if len(body) != size:
        raise FieldParseError(f"Expected {size} board rows, got {len(body)}")
    grid = np.zeros((size, size), dtype=np.int8)
    for r, row in enumerate(body):
        lineno = r + 2
        if len(row) != size:
            raise FieldParseError(f"Row has {len(row)} cells, expected {size}", lineno)
        for c, mark in enumerate(row):
            if mark == FIELD_SHIP_MARK:
                grid[r, c] = 1
            elif mark != FIELD_WATER_MARK:
                raise FieldParseError(f"Unexpected marker {mark!r} at column {c + 1}", lineno)
    return DecodedField(grid, composition)


def save_field(path: Union[str, Path], grid, composition: Mapping[ShipType, int]) -> Path:
    target = Path(path)
    target.write_text(encode(grid, composition) + "\n", encoding="utf-8")
    logger.info("Saved layout to %s", target)
    return target


def load_field(path: Union[str, Path]) -> DecodedField:
    source = Path(path)
    field = decode(source.read_text(encoding="utf-8"))
    logger.info("Loaded %dx%d layout from %s", field.size, field.size, source)
    return field
