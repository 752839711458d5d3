from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Deque, Dict, FrozenSet, Iterable, Optional, Tuple

from .config import BOARD_SIZE, MAX_GUESS_ATTEMPTS
from .coord_utils import Coord, format_coord, neighbours
from .rng import RandomLike, RandomSource

logger = logging.getLogger(__name__)

DEFAULT_NAME = "CPU"


class Mode(Enum):
    HUNT = "hunt"
    TARGET = "target"


class NoTargetsLeft(RuntimeError):
    """Raised when every cell of the grid is excluded from selection."""


@dataclass(frozen=True)
class GuessEntry:
    coord: Coord
    mode: Mode
    timestamp: float


@dataclass(frozen=True)
class HitEntry:
    coord: Coord
    timestamp: float


@dataclass(frozen=True)
class TargetingState:
    """
    Everything the CPU remembers between turns.

    * ``queue`` – FIFO of cells to probe; only neighbours of an unsunk hit,
      never a cell already in ``guesses``.
    * ``guesses`` / ``hits`` – append-only, used for statistics and for
      filtering neighbour candidates.
    """

    mode: Mode = Mode.HUNT
    queue: Tuple[Coord, ...] = ()
    guesses: Tuple[GuessEntry, ...] = ()
    hits: Tuple[HitEntry, ...] = ()
    _guessed: FrozenSet[Coord] = field(default=frozenset(), init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_guessed", frozenset(g.coord for g in self.guesses))

    def has_guessed(self, coord: Coord) -> bool:
        return coord in self._guessed


# ---------------------------------------------------------------------- #
# Pure transitions
# ---------------------------------------------------------------------- #
def record_guess(state: TargetingState, coord: Coord, *, now: Optional[float] = None) -> TargetingState:
    """Append *coord* to the guess history unless it is already there."""
    if state.has_guessed(coord):
        return state
    entry = GuessEntry(coord, state.mode, time.time() if now is None else now)
    return replace(state, guesses=state.guesses + (entry,))


def record_result(
    state: TargetingState,
    coord: Coord,
    was_hit: bool,
    was_sunk: bool,
    *,
    size: int = BOARD_SIZE,
    now: Optional[float] = None,
) -> TargetingState:
    """
    Apply the outcome of a shot at *coord*.

    HIT + SUNK   -> back to HUNT, queue cleared.
    HIT          -> TARGET, fresh neighbours appended to the queue.
    MISS         -> HUNT if the queue has run dry while targeting.
    """
    if was_hit:
        hits = state.hits + (HitEntry(coord, time.time() if now is None else now),)
        if was_sunk:
            return replace(state, mode=Mode.HUNT, queue=(), hits=hits)
        queue = list(state.queue)
        for nbr in neighbours(coord, size):
            if nbr in queue or state.has_guessed(nbr):
                continue
            queue.append(nbr)
        return replace(state, mode=Mode.TARGET, queue=tuple(queue), hits=hits)

    if state.mode is Mode.TARGET and not state.queue:
        return replace(state, mode=Mode.HUNT)
    return state


def pop_target(
    state: TargetingState, exclude: Iterable[Coord] = (), *, limit: int = MAX_GUESS_ATTEMPTS
) -> Tuple[Optional[Coord], TargetingState]:
    """
    Pop the first queued cell not in *exclude*.

    Excluded entries are discarded as they are popped. Returns ``(None, state)``
    once the queue is empty or *limit* pops have been spent.
    """
    excluded = exclude if isinstance(exclude, (set, frozenset)) else set(exclude)
    pending: Deque[Coord] = deque(state.queue)
    chosen: Optional[Coord] = None
    pops = 0
    while pending and pops < limit:
        pops += 1
        rc = pending.popleft()
        if rc in excluded:
            logger.debug("dropping queued %s, already guessed", format_coord(rc))
            continue
        chosen = rc
        break
    return chosen, replace(state, queue=tuple(pending))


# ---------------------------------------------------------------------- #
# Stateful wrapper
# ---------------------------------------------------------------------- #
class CpuPlayer:
    """
    Hunt / target opponent.

    1. Hunt: fire at uniformly random cells not yet guessed on the
       opponent's board.
    2. Target: once a hit does not sink a ship, probe its up/down/left/right
       neighbours in FIFO order. A sink clears the queue and returns to hunt.
    """

    def __init__(
        self, name: str = DEFAULT_NAME, *, size: int = BOARD_SIZE, rng: Optional[RandomLike] = None
    ) -> None:
        self.name = name or DEFAULT_NAME
        self.size = size
        self._rng: RandomLike = rng if rng is not None else RandomSource()
        self.state = TargetingState()

    # ------------------------------------------------------------------ #
    # Shot selection
    # ------------------------------------------------------------------ #
    def select_guess(self, exclude: Iterable[Coord] = ()) -> Coord:
        """Choose the next cell to fire at; never one contained in *exclude*."""
        excluded = frozenset(exclude)
        rc: Optional[Coord] = None

        if self.state.mode is Mode.TARGET and self.state.queue:
            rc, self.state = pop_target(self.state, excluded)

        if rc is None:
            if self.state.mode is Mode.TARGET:
                logger.debug("target queue exhausted, falling back to hunt")
            self.state = replace(self.state, mode=Mode.HUNT)
            rc = self._hunt(excluded)

        self.state = record_guess(self.state, rc)
        logger.debug("%s selects %s (%s)", self.name, format_coord(rc), self.state.mode.value)
        return rc

    def _hunt(self, excluded: FrozenSet[Coord]) -> Coord:
        for _ in range(MAX_GUESS_ATTEMPTS):
            rc = (self._rng.randrange(self.size), self._rng.randrange(self.size))
            if rc not in excluded:
                return rc

        # Fallback (only reached on a nearly full board)
        for r in range(self.size):
            for c in range(self.size):
                if (r, c) not in excluded:
                    return (r, c)
        raise NoTargetsLeft(f"all {self.size * self.size} cells already guessed")

    # ------------------------------------------------------------------ #
    # Result handling
    # ------------------------------------------------------------------ #
    def record_result(self, coord: Coord, was_hit: bool, was_sunk: bool) -> None:
        self.state = record_result(self.state, coord, was_hit, was_sunk, size=self.size)

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #
    @property
    def mode(self) -> Mode:
        return self.state.mode

    def target_queue(self) -> Tuple[Coord, ...]:
        return self.state.queue

    def has_guessed(self, coord: Coord) -> bool:
        return self.state.has_guessed(coord)

    @property
    def guess_count(self) -> int:
        return len(self.state.guesses)

    @property
    def hit_count(self) -> int:
        return len(self.state.hits)

    def hit_rate(self) -> float:
        """Hits as a percentage of guesses (0 before the first guess)."""
        if not self.guess_count:
            return 0.0
        return self.hit_count / self.guess_count * 100

    def guess_history(self) -> Tuple[GuessEntry, ...]:
        return self.state.guesses

    def hit_history(self) -> Tuple[HitEntry, ...]:
        return self.state.hits

    def rename(self, name: Optional[str]) -> None:
        self.name = name or DEFAULT_NAME

    def stats(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "mode": self.mode.value,
            "total_guesses": self.guess_count,
            "total_hits": self.hit_count,
            "hit_rate": self.hit_rate(),
            "target_queue_length": len(self.state.queue),
        }

    def reset(self) -> None:
        """Forget all targeting state and history."""
        self.state = TargetingState()

    def __str__(self) -> str:
        return f"CPU: {self.name} (Mode: {self.mode.value}, Guesses: {self.guess_count}, Hits: {self.hit_count})"
