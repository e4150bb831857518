"""Layout file encoding and decoding."""

from __future__ import annotations

import random
from pathlib import Path

import numpy as np
import pytest

from salvo.codec import FieldParseError, decode, encode, load_field, save_field
from salvo.generator import generate_with_retries
from salvo.presets import PRESETS
from salvo.shapes import CARRIER, SUBMARINE


def test_encode_layout(three_subs_board) -> None:
    text = encode(three_subs_board.grid, PRESETS["6x6"].fleet)
    lines = text.split("\n")
    assert lines[0] == "6x6;3;2;1;0;0"
    assert lines[1] == "LMMMMM"
    assert lines[3] == "MMLMMM"
    assert lines[5] == "MMMMLM"
    assert len(lines) == 7


@pytest.mark.parametrize("difficulty", list(PRESETS))
def test_decode_restores_raw_occupancy(difficulty: str) -> None:
    config = PRESETS[difficulty]
    board, _ = generate_with_retries(config.size, config.fleet, rng=random.Random(5))
    field = decode(encode(board.grid, config.fleet))
    assert np.array_equal(field.grid, board.occupancy())
    assert field.composition == config.fleet
    assert field.size == config.size


def test_round_trip_drops_ship_identity(three_subs_board) -> None:
    field = decode(encode(three_subs_board.grid, {SUBMARINE: 3}))
    # Ship ids 1..3 collapse to plain occupancy.
    assert sorted(int(v) for v in np.unique(field.grid)) == [0, 1]
    assert field.composition[CARRIER] == 0


def test_crlf_and_trailing_whitespace_tolerated() -> None:
    text = "2x2;0;1;0;0;0\r\nLL  \r\nMM\r\n\r\n"
    field = decode(text)
    assert field.grid.tolist() == [[1, 1], [0, 0]]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "2;0;0;0;0;0\nMM\nMM",
        "2x3;0;0;0;0;0\nMM\nMM",
        "axb;0;0;0;0;0\nMM\nMM",
        "0x0;0;0;0;0;0",
        "2x2;0;0;0;0\nMM\nMM",
        "2x2;0;0;0;0;0;0\nMM\nMM",
        "2x2;0;x;0;0;0\nMM\nMM",
        "2x2;0;-1;0;0;0\nMM\nMM",
        "2x2;0;0;0;0;0\nMM",
        "2x2;0;0;0;0;0\nMM\nMM\nMM",
        "2x2;0;0;0;0;0\nMMM\nMM",
        "2x2;0;0;0;0;0\nM\nMM",
        "2x2;0;0;0;0;0\nMX\nMM",
    ],
)
def test_malformed_layouts_raise(text: str) -> None:
    with pytest.raises(FieldParseError):
        decode(text)


def test_parse_error_reports_line() -> None:
    with pytest.raises(FieldParseError) as info:
        decode("2x2;0;0;0;0;0\nMM\nMQ")
    assert info.value.line == 3
    assert isinstance(info.value, ValueError)


def test_save_and_load_file(tmp_path: Path, three_subs_board) -> None:
    path = save_field(tmp_path / "harbour.fieldfile", three_subs_board.grid, {SUBMARINE: 3})
    assert path.read_text(encoding="utf-8").startswith("6x6;3;0;0;0;0\n")
    field = load_field(path)
    assert np.array_equal(field.grid, three_subs_board.occupancy())
