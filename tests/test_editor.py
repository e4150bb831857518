import random

import pytest

from salvo.codec import FieldParseError, decode
from salvo.editor import PlacementEditor
from salvo.generator import UnderfilledFleet
from salvo.presets import PRESETS, custom_config
from salvo.shapes import CRUISER, DESTROYER, SUBMARINE

EMPTY_6X6 = "6x6;0;0;0;0;0\n" + "MMMMMM\n" * 6


@pytest.fixture
def editor() -> PlacementEditor:
    return PlacementEditor(PRESETS["6x6"])


def test_new_editor_has_full_pool(editor: PlacementEditor) -> None:
    assert editor.remaining[SUBMARINE] == 3
    assert editor.remaining[DESTROYER] == 2
    assert editor.available() == [SUBMARINE, DESTROYER, CRUISER]
    assert not editor.is_complete


def test_place_decrements_pool(editor: PlacementEditor) -> None:
    ship = editor.place(SUBMARINE, 0, 0)
    assert ship is not None and ship.ship_id == 1
    assert editor.remaining[SUBMARINE] == 2
    assert editor.board.grid[0, 0] == 1


def test_place_rejects_exhausted_type(editor: PlacementEditor) -> None:
    for r, c in [(0, 0), (0, 2), (0, 4)]:
        assert editor.place(SUBMARINE, r, c) is not None
    assert editor.place(SUBMARINE, 5, 5) is None
    assert editor.remaining[SUBMARINE] == 0


def test_place_rejects_buffer_violation(editor: PlacementEditor) -> None:
    editor.place(SUBMARINE, 2, 2)
    assert editor.place(SUBMARINE, 3, 3) is None
    assert editor.remaining[SUBMARINE] == 2


def test_place_invalid_rotation(editor: PlacementEditor) -> None:
    with pytest.raises(ValueError):
        editor.place(DESTROYER, 0, 0, 45)


def test_ids_are_never_reused(editor: PlacementEditor) -> None:
    first = editor.place(SUBMARINE, 0, 0)
    second = editor.place(SUBMARINE, 0, 2)
    assert editor.remove(first.ship_id)
    third = editor.place(SUBMARINE, 0, 4)
    assert third.ship_id not in {first.ship_id, second.ship_id}
    assert {s.ship_id for s in editor.placed} == {second.ship_id, third.ship_id}


def test_remove_returns_unit_to_pool(editor: PlacementEditor) -> None:
    ship = editor.place(DESTROYER, 4, 0, 0)
    assert editor.remove(ship.ship_id)
    assert editor.remaining[DESTROYER] == 2
    assert not editor.board.grid.any()
    assert not editor.remove(ship.ship_id)


def test_clear_resets_everything(editor: PlacementEditor) -> None:
    editor.place(SUBMARINE, 0, 0)
    editor.place(CRUISER, 5, 0)
    editor.clear()
    assert editor.remaining == editor.composition
    assert not editor.placed
    assert editor.place(SUBMARINE, 0, 0).ship_id == 1


def test_auto_place_completes_fleet(editor: PlacementEditor, rng: random.Random) -> None:
    placed = editor.auto_place(rng)
    assert editor.is_complete
    assert len(placed) == PRESETS["6x6"].total_units
    assert editor.board.ship_cell_count == PRESETS["6x6"].total_cells


def test_auto_place_failure_keeps_layout(monkeypatch: pytest.MonkeyPatch, editor: PlacementEditor) -> None:
    editor.place(SUBMARINE, 0, 0)

    def _fail(*_args, **_kwargs):
        raise UnderfilledFleet({SUBMARINE: 1}, editor.board.copy(), [])

    monkeypatch.setattr("salvo.editor.generate_placements", _fail)
    with pytest.raises(UnderfilledFleet):
        editor.auto_place()
    assert editor.remaining[SUBMARINE] == 2
    assert editor.board.grid[0, 0] == 1


def test_export_then_load(editor: PlacementEditor, rng: random.Random) -> None:
    editor.auto_place(rng)
    text = editor.export()
    assert text.splitlines()[0] == "6x6;3;2;1;0;0"

    other = PlacementEditor(PRESETS["6x6"])
    other.load(text)
    assert (other.board.occupancy() == editor.board.occupancy()).all()
    assert other.is_complete
    # imported ships lose their identity
    assert other.remove(1) is False


def test_load_keeps_configured_fleet() -> None:
    editor = PlacementEditor(custom_config("6x6", [0, 1]))
    editor.load("6x6;0;1;0;0;0\nLLMMMM\nMMMMMM\nMMMMMM\nMMMMMM\nMMMMMM\nMMMMMM\n")
    assert editor.composition[DESTROYER] == 1
    assert editor.is_complete
    assert decode(editor.export()).composition == editor.composition


def test_load_rejects_empty_layout(editor: PlacementEditor) -> None:
    with pytest.raises(FieldParseError):
        editor.load(EMPTY_6X6)
    assert not editor.is_complete
    assert editor.composition == PRESETS["6x6"].fleet


def test_load_rejects_other_fleet(editor: PlacementEditor) -> None:
    editor.place(SUBMARINE, 0, 0)
    with pytest.raises(FieldParseError):
        editor.load("6x6;1;0;0;0;0\nLMMMMM\nMMMMMM\nMMMMMM\nMMMMMM\nMMMMMM\nMMMMMM\n")
    assert editor.remaining[SUBMARINE] == 2
    assert editor.board.grid[0, 0] == 1
    assert editor.composition[DESTROYER] == 2


def test_load_rejects_header_without_ship_cells() -> None:
    editor = PlacementEditor(custom_config("6x6", [1]))
    with pytest.raises(FieldParseError):
        editor.load("6x6;1;0;0;0;0\n" + "MMMMMM\n" * 6)
    assert editor.remaining[SUBMARINE] == 1


def test_load_wrong_size_keeps_layout(editor: PlacementEditor) -> None:
    editor.place(SUBMARINE, 0, 0)
    with pytest.raises(FieldParseError):
        editor.load("2x2;0;0;0;0;0\nMM\nMM")
    assert editor.remaining[SUBMARINE] == 2
    assert editor.board.grid[0, 0] == 1


def test_load_malformed_keeps_layout(editor: PlacementEditor) -> None:
    editor.place(SUBMARINE, 0, 0)
    with pytest.raises(FieldParseError):
        editor.load("garbage")
    assert editor.placed[0].ship_id == 1
