import re
from typing import List, Optional, Tuple

from .config import BOARD_SIZE

Coord = Tuple[int, int]

# Two ASCII digits, row then column
COORD_RE = re.compile(r"[0-9]{2}")

# Up, down, left, right
ORTHOGONAL_STEPS: Tuple[Coord, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


def in_bounds(coord: Coord, size: int = BOARD_SIZE) -> bool:
    """Return True if both components of *coord* lie in ``[0, size)``."""
    r, c = coord
    return 0 <= r < size and 0 <= c < size


def parse_coord(text: Optional[str]) -> Coord:
    """
    Convert a two-digit coordinate like '34' to a (row, col) tuple.

    Raises ValueError when *text* is not exactly two ASCII digits.
    """
    if text is None or not COORD_RE.fullmatch(text):
        raise ValueError(f"Invalid coordinate: {text!r}")
    return int(text[0]), int(text[1])


def format_coord(coord: Coord) -> str:
    """
    Convert (row, col) to the canonical two-digit string, e.g. (3, 4) -> '34'.
    """
    r, c = coord
    return f"{r}{c}"


def neighbours(coord: Coord, size: int = BOARD_SIZE) -> List[Coord]:
    """In-bounds orthogonal neighbours of *coord* in up/down/left/right order."""
    r, c = coord
    out = []
    for dr, dc in ORTHOGONAL_STEPS:
        nbr = (r + dr, c + dc)
        if in_bounds(nbr, size):
            out.append(nbr)
    return out
