import logging
import random
import sys
from collections import deque
from pathlib import Path
from typing import Iterable, List, Union

import pytest

# Ensure local `src` directory is importable before project is installed.
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from seabattle.board import Board  # noqa: E402
from seabattle.events import Event  # noqa: E402

# Suppress INFO & DEBUG logs during tests
logging.basicConfig(level=logging.WARNING)


class ScriptedRandom:
    """Replay a fixed sequence of draws, then continue from a seeded generator.

    ``coin()`` consumes a bool and ``randrange()`` an int; a mismatch means the
    test script is out of step with the code under test.
    """

    def __init__(self, script: Iterable[Union[bool, int]] = (), seed: int = 0) -> None:
        self._script = deque(script)
        self._fallback = random.Random(seed)

    def coin(self) -> bool:
        if self._script:
            value = self._script.popleft()
            assert isinstance(value, bool), f"expected a coin flip, script had {value!r}"
            return value
        return self._fallback.random() < 0.5

    def randrange(self, stop: int) -> int:
        if self._script:
            value = self._script.popleft()
            assert not isinstance(value, bool), f"expected an int, script had {value!r}"
            assert 0 <= value < stop, f"scripted {value} outside [0, {stop})"
            return value
        return self._fallback.randrange(stop)

    @property
    def remaining(self) -> int:
        return len(self._script)


def horizontal_ships(*origins) -> List[Union[bool, int]]:
    """Placement script putting one horizontal ship at each (row, col) origin."""
    script: List[Union[bool, int]] = []
    for row, col in origins:
        script.extend([True, row, col])
    return script


@pytest.fixture
def scripted():
    """Factory for ScriptedRandom instances."""

    def _make(script: Iterable[Union[bool, int]] = (), seed: int = 0) -> ScriptedRandom:
        return ScriptedRandom(script, seed)

    return _make


@pytest.fixture
def board_with_ships():
    """Factory returning a board whose ships start at the given origins (horizontal)."""

    def _make(*origins, show_ships: bool = False) -> Board:
        board = Board(show_ships, rng=ScriptedRandom(horizontal_ships(*origins)))
        board.place_ships_randomly(len(origins))
        return board

    return _make


@pytest.fixture
def event_log():
    """Collector that can be passed to Game.subscribe()."""
    events: List[Event] = []

    def _collect(ev: Event) -> None:
        events.append(ev)

    _collect.events = events  # type: ignore[attr-defined]
    return _collect

