"""Human side of the match: guess validation and guess history.

The player owns no board. Its duplicate check only looks at its own history
and is independent of the target board's AlreadyGuessed outcome.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .config import BOARD_SIZE
from .coord_utils import Coord, format_coord, in_bounds, parse_coord

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Player"


@dataclass(frozen=True)
class Ok:
    coord: Coord


@dataclass(frozen=True)
class MalformedInput:
    raw: Optional[str]


@dataclass(frozen=True)
class OutOfBounds:
    coord: Coord


@dataclass(frozen=True)
class DuplicateGuess:
    coord: Coord


Validation = Union[Ok, MalformedInput, OutOfBounds, DuplicateGuess]


@dataclass(frozen=True)
class GuessRecord:
    coord: Coord
    timestamp: float


class Player:
    def __init__(self, name: str = DEFAULT_NAME, *, size: int = BOARD_SIZE) -> None:
        self.name = name or DEFAULT_NAME
        self.size = size
        self._history: List[GuessRecord] = []

    def validate(self, raw: Optional[str]) -> Validation:
        """Check that *raw* is two ASCII digits naming a fresh, on-board cell."""
        try:
            coord = parse_coord(raw)
        except ValueError:
            return MalformedInput(raw)
        if not in_bounds(coord, self.size):
            return OutOfBounds(coord)
        if self.has_guessed(coord):
            return DuplicateGuess(coord)
        return Ok(coord)

    def record_guess(self, coord: Coord) -> None:
        if self.has_guessed(coord):
            return
        self._history.append(GuessRecord(coord, time.time()))
        logger.debug("%s guessed %s", self.name, format_coord(coord))

    def has_guessed(self, coord: Coord) -> bool:
        return any(rec.coord == coord for rec in self._history)

    @property
    def guess_count(self) -> int:
        return len(self._history)

    def guess_history(self) -> List[GuessRecord]:
        return list(self._history)

    def last_guess(self) -> Optional[GuessRecord]:
        return self._history[-1] if self._history else None

    def rename(self, name: Optional[str]) -> None:
        self.name = name or DEFAULT_NAME

    def stats(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "total_guesses": self.guess_count,
            "guess_history": self.guess_history(),
        }

    def reset(self) -> None:
        self._history = []

    def __str__(self) -> str:
        return f"Player: {self.name} ({self.guess_count} guesses)"
