import logging
import random
import sys
from pathlib import Path

import pytest

# Ensure local `src` directory is importable before project is installed.
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from salvo.board import Board  # noqa: E402
from salvo.shapes import SUBMARINE  # noqa: E402

# Suppress INFO & DEBUG logs from sessions during tests
logging.basicConfig(level=logging.WARNING)


@pytest.fixture
def rng() -> random.Random:
    """Deterministic random source shared by generator/AI tests."""
    return random.Random(1234)


@pytest.fixture
def three_subs_board() -> Board:
    """6x6 board with submarines at (0,0), (2,2) and (4,4)."""
    board = Board(6)
    for ship_id, (r, c) in enumerate([(0, 0), (2, 2), (4, 4)], start=1):
        assert board.place(SUBMARINE, r, c, 0, ship_id) is not None
    return board


@pytest.fixture
def stats_path(tmp_path: Path) -> Path:
    return tmp_path / "stats.json"
