"""Randomised fleet generation."""

from __future__ import annotations

import itertools
import random

import numpy as np
import pytest

from salvo.generator import UnderfilledFleet, generate_fleet, generate_placements, generate_with_retries
from salvo.presets import PRESETS
from salvo.shapes import SUBMARINE


def assert_fleet_separated(placed) -> None:
    """No two ships overlap or come within Chebyshev distance 1."""
    for a, b in itertools.combinations(placed, 2):
        assert not (a.cells & b.cells)
        for (r1, c1), (r2, c2) in itertools.product(a.cells, b.cells):
            assert max(abs(r1 - r2), abs(c1 - c2)) > 1, f"ship {a.ship_id} touches ship {b.ship_id}"


@pytest.mark.parametrize("difficulty", list(PRESETS))
def test_presets_generate_full_fleets(difficulty: str) -> None:
    config = PRESETS[difficulty]
    board, placed = generate_with_retries(config.size, config.fleet, rng=random.Random(7))
    assert len(placed) == config.total_units
    assert board.ship_cell_count == config.total_cells
    assert board.ship_cell_count <= config.size ** 2
    assert_fleet_separated(placed)


def test_grid_ids_match_placed_ships(rng: random.Random) -> None:
    config = PRESETS["9x9"]
    board, placed = generate_placements(config.size, config.fleet, rng=rng)
    assert [ship.ship_id for ship in placed] == list(range(1, len(placed) + 1))
    for ship in placed:
        for r, c in ship.cells:
            assert board.grid[r, c] == ship.ship_id
    assert {int(v) for v in np.unique(board.grid)} == {0, *range(1, len(placed) + 1)}


def test_same_seed_same_layout() -> None:
    config = PRESETS["12x12"]
    a = generate_fleet(config.size, config.fleet, rng=random.Random(99))
    b = generate_fleet(config.size, config.fleet, rng=random.Random(99))
    assert np.array_equal(a.grid, b.grid)


def test_impossible_fleet_reports_unplaced_units() -> None:
    # A 3x3 board fits at most four buffered submarines.
    with pytest.raises(UnderfilledFleet) as info:
        generate_placements(3, {SUBMARINE: 5}, rng=random.Random(0), max_attempts=200)
    exc = info.value
    assert SUBMARINE in exc.missing
    assert exc.missing[SUBMARINE] >= 1
    assert len(exc.placed) + exc.missing[SUBMARINE] == 5
    assert "Submarine" in str(exc)
    assert_fleet_separated(exc.placed)


def test_retries_give_up_with_last_failure() -> None:
    with pytest.raises(UnderfilledFleet):
        generate_with_retries(2, {SUBMARINE: 2}, rng=random.Random(3), retries=2)


def test_empty_composition_gives_empty_board() -> None:
    board, placed = generate_placements(6, {}, rng=random.Random(1))
    assert placed == []
    assert board.ship_cell_count == 0


def test_retries_stop_after_configured_attempts(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    real = generate_placements

    def _counting(*args, **kwargs):
        calls.append(1)
        return real(*args, **kwargs)

    monkeypatch.setattr("salvo.generator.generate_placements", _counting)
    with pytest.raises(UnderfilledFleet) as info:
        generate_with_retries(2, {SUBMARINE: 2}, rng=random.Random(3), retries=3)
    assert len(calls) == 3
    assert info.value.missing == {SUBMARINE: 1}


def test_zero_retries_still_tries_once(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    real = generate_placements
    monkeypatch.setattr("salvo.generator.generate_placements", lambda *a, **kw: calls.append(1) or real(*a, **kw))
    board, placed = generate_with_retries(6, {SUBMARINE: 1}, rng=random.Random(1), retries=0)
    assert len(calls) == 1 and len(placed) == 1
