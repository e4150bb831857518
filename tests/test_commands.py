import pytest

from salvo.commands import (
    AutoCommand,
    ClearCommand,
    CommandParseError,
    FireCommand,
    LoadCommand,
    PlaceCommand,
    QuitCommand,
    RemoveCommand,
    SaveCommand,
    StartCommand,
    parse_command,
)
from salvo.coord_utils import coord_to_rowcol, format_coord
from salvo.shapes import CARRIER, DESTROYER


def test_fire_valid_A1():
    cmd = parse_command("FIRE A1")
    assert isinstance(cmd, FireCommand)
    assert (cmd.row, cmd.col) == (0, 0)


def test_fire_valid_lowercase_o15():
    cmd = parse_command("fire o15")
    assert isinstance(cmd, FireCommand)
    assert (cmd.row, cmd.col) == (14, 14)


def test_fire_off_small_board():
    with pytest.raises(CommandParseError):
        parse_command("FIRE G1", size=6)


def test_fire_invalid_coord():
    with pytest.raises(CommandParseError):
        parse_command("FIRE P1")


def test_fire_missing_arg():
    with pytest.raises(CommandParseError):
        parse_command("FIRE")


def test_place_with_rotation():
    cmd = parse_command("place destroyer b3 90")
    assert cmd == PlaceCommand(DESTROYER, 1, 2, 90)


def test_place_default_rotation():
    cmd = parse_command("PLACE CARRIER C2")
    assert isinstance(cmd, PlaceCommand)
    assert cmd.ship_type is CARRIER and cmd.rotation == 0


@pytest.mark.parametrize("line", ["PLACE BOAT A1", "PLACE DESTROYER A1 45", "PLACE DESTROYER"])
def test_place_invalid(line):
    with pytest.raises(CommandParseError):
        parse_command(line)


def test_remove():
    assert parse_command("REMOVE 3") == RemoveCommand(3)
    with pytest.raises(CommandParseError):
        parse_command("REMOVE x")


def test_bare_verbs():
    assert isinstance(parse_command("auto"), AutoCommand)
    assert isinstance(parse_command("CLEAR"), ClearCommand)
    assert isinstance(parse_command("Start"), StartCommand)
    assert isinstance(parse_command("QUIT"), QuitCommand)
    with pytest.raises(CommandParseError):
        parse_command("QUIT now")


def test_save_and_load_paths():
    assert parse_command("SAVE fleet.fieldfile") == SaveCommand("fleet.fieldfile")
    assert parse_command("LOAD fleet.fieldfile") == LoadCommand("fleet.fieldfile")


def test_unknown_command():
    with pytest.raises(CommandParseError):
        parse_command("HELLO there")


def test_empty_line():
    with pytest.raises(CommandParseError):
        parse_command("    ")


def test_coordinate_helpers():
    assert coord_to_rowcol("C10") == (2, 9)
    assert format_coord(2, 9) == "C10"
    with pytest.raises(ValueError):
        coord_to_rowcol("A0")
