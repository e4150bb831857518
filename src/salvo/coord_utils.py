import re
from typing import Tuple

# Row letter A-O followed by a 1-based column, e.g. A1, O15
COORD_RE = re.compile(r"^([A-O])(1[0-5]|[1-9])$")

MAX_SIZE = 15


def coord_to_rowcol(coord: str) -> Tuple[int, int]:
    """
    Convert a coordinate like 'A1' through 'O15' to zero-based (row, col) tuple.
    """
    coord = coord.strip().upper()
    if not COORD_RE.match(coord):
        raise ValueError(f"Invalid coordinate: {coord}")
    row = ord(coord[0]) - ord('A')
    col = int(coord[1:]) - 1
    return row, col


def format_coord(row: int, col: int) -> str:
    """
    Convert zero-based (row, col) to coordinate string like 'A1'.
    """
    return f"{chr(ord('A') + row)}{col + 1}"
