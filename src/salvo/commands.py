from dataclasses import dataclass
from typing import Union

from .coord_utils import COORD_RE, coord_to_rowcol
from .shapes import ROTATIONS, ShipType, ship_type_for


class CommandParseError(Exception):
    """Raised when a line cannot be parsed as a valid command."""


@dataclass(frozen=True)
class FireCommand:
    row: int
    col: int


@dataclass(frozen=True)
class PlaceCommand:
    ship_type: ShipType
    row: int
    col: int
    rotation: int = 0


@dataclass(frozen=True)
class RemoveCommand:
    ship_id: int


@dataclass(frozen=True)
class AutoCommand:
    pass


@dataclass(frozen=True)
class ClearCommand:
    pass


@dataclass(frozen=True)
class StartCommand:
    pass


@dataclass(frozen=True)
class SaveCommand:
    path: str


@dataclass(frozen=True)
class LoadCommand:
    path: str


@dataclass(frozen=True)
class QuitCommand:
    pass


Command = Union[
    FireCommand,
    PlaceCommand,
    RemoveCommand,
    AutoCommand,
    ClearCommand,
    StartCommand,
    SaveCommand,
    LoadCommand,
    QuitCommand,
]

_BARE = {
    "AUTO": AutoCommand,
    "CLEAR": ClearCommand,
    "START": StartCommand,
    "QUIT": QuitCommand,
}


def _coord(token: str, size: int):
    coord = token.strip().upper()
    if not COORD_RE.match(coord):
        raise CommandParseError(f"Invalid coordinate: {coord}")
    row, col = coord_to_rowcol(coord)
    if row >= size or col >= size:
        raise CommandParseError(f"Coordinate {coord} is off the {size}x{size} board")
    return row, col


def parse_command(line: str, size: int = 15) -> Command:
    if line is None:
        raise CommandParseError("No command to parse")
    raw = line.strip()
    if not raw:
        raise CommandParseError("Empty command")
    parts = raw.split()
    verb = parts[0].upper()
    args = parts[1:]

    if verb in _BARE:
        if args:
            raise CommandParseError(f"{verb} takes no arguments")
        return _BARE[verb]()
    elif verb == "FIRE":
        if len(args) != 1:
            raise CommandParseError("FIRE requires a coordinate")
        row, col = _coord(args[0], size)
        return FireCommand(row=row, col=col)
    elif verb == "PLACE":
        if len(args) not in (2, 3):
            raise CommandParseError("Syntax: PLACE <ship> <coord> [rotation]")
        try:
            ship_type = ship_type_for(args[0])
        except KeyError as exc:
            raise CommandParseError(str(exc.args[0])) from None
        row, col = _coord(args[1], size)
        rotation = 0
        if len(args) == 3:
            if not args[2].isdigit() or int(args[2]) not in ROTATIONS:
                raise CommandParseError(f"Rotation must be one of {ROTATIONS}")
            rotation = int(args[2])
        return PlaceCommand(ship_type, row, col, rotation)
    elif verb == "REMOVE":
        if len(args) != 1 or not args[0].isdigit():
            raise CommandParseError("REMOVE requires a ship id")
        return RemoveCommand(int(args[0]))
    elif verb in ("SAVE", "LOAD"):
        if len(args) != 1:
            raise CommandParseError(f"{verb} requires a file path")
        return SaveCommand(args[0]) if verb == "SAVE" else LoadCommand(args[0])
    else:
        raise CommandParseError(f"Unknown command: {raw}")
