"""
board.py

Core data structures for one side of a Sea Battle match:
 - CellState codes stored in the board grid
 - Board, which owns the grid, its ships and the set of guessed coordinates
 - Outcome types returned by random placement and guess resolution

Nothing here raises for ordinary game situations. Placement shortfalls and
repeated guesses come back as values the caller branches on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import FrozenSet, List, Optional, Set, Union

import numpy as np
from typing_extensions import Literal

from .config import BOARD_SIZE, MAX_PLACEMENT_ATTEMPTS, SHIP_LENGTH
from .coord_utils import Coord, format_coord, in_bounds
from .rng import RandomLike, RandomSource
from .ship import HitResult, Ship

logger = logging.getLogger(__name__)

Orientation = Literal["horizontal", "vertical"]


class CellState(IntEnum):
    WATER = 0
    SHIP_HIDDEN = 1
    SHIP_VISIBLE = 2
    HIT = 3
    MISS = 4


# ---------------------------------------------------------------------------
# Placement outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Placed:
    count: int


@dataclass(frozen=True)
class PartiallyPlaced:
    placed: int
    requested: int


Placement = Union[Placed, PartiallyPlaced]


# ---------------------------------------------------------------------------
# Guess outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AlreadyGuessed:
    coord: Coord


@dataclass(frozen=True)
class Hit:
    coord: Coord
    sunk: bool


@dataclass(frozen=True)
class AlreadyHit:
    coord: Coord


@dataclass(frozen=True)
class Miss:
    coord: Coord


GuessOutcome = Union[AlreadyGuessed, Hit, AlreadyHit, Miss]


class Board:
    """
    Represents a single Sea Battle board.
    We store:
      - self._grid: numpy int8 array of CellState codes
      - self._ships: the Ship objects placed on this board
      - self._guesses: coordinates already resolved by process_guess()

    ``show_ships`` decides how ship cells are marked: the player's own board
    reveals them (SHIP_VISIBLE), the opponent's board conceals them
    (SHIP_HIDDEN). Hidden cells still block placement.
    """

    def __init__(
        self,
        show_ships: bool = False,
        *,
        size: int = BOARD_SIZE,
        ship_length: int = SHIP_LENGTH,
        rng: Optional[RandomLike] = None,
    ) -> None:
        self.size = size
        self.ship_length = ship_length
        self.show_ships = show_ships
        self._rng: RandomLike = rng if rng is not None else RandomSource()
        self._grid = self._empty_grid()
        self._ships: List[Ship] = []
        self._guesses: Set[Coord] = set()

    def _empty_grid(self) -> np.ndarray:
        return np.full((self.size, self.size), CellState.WATER, dtype=np.int8)

    # ------------------------------------------------------------------ #
    # Placement
    # ------------------------------------------------------------------ #
    def place_ships_randomly(self, count: int) -> Placement:
        """Randomly position *count* ships without collisions.

        Any previous ships, marks and guesses are discarded first. Attempts are
        capped at MAX_PLACEMENT_ATTEMPTS in total, so a crowded request ends
        with a PartiallyPlaced result rather than looping forever.
        """
        self.reset()
        placed = 0
        attempts = 0
        while placed < count and attempts < MAX_PLACEMENT_ATTEMPTS:
            attempts += 1
            orientation: Orientation = "horizontal" if self._rng.coin() else "vertical"
            row, col = self._random_origin(orientation)
            if not self._can_place_ship(row, col, orientation):
                continue
            ship = Ship(self._ship_cells(row, col, orientation))
            self._ships.append(ship)
            self._mark_ship(ship)
            placed += 1

        if placed == count:
            logger.debug("placed %d ships in %d attempts", placed, attempts)
            return Placed(placed)
        logger.warning("placement exhausted after %d attempts: %d/%d ships", attempts, placed, count)
        return PartiallyPlaced(placed, count)

    def _random_origin(self, orientation: Orientation) -> Coord:
        """Origin whose ship_length cells stay on the board for *orientation*."""
        span = self.size - self.ship_length + 1
        if orientation == "horizontal":
            return self._rng.randrange(self.size), self._rng.randrange(span)
        return self._rng.randrange(span), self._rng.randrange(self.size)

    def _ship_cells(self, row: int, col: int, orientation: Orientation) -> List[Coord]:
        if orientation == "horizontal":
            return [(row, c) for c in range(col, col + self.ship_length)]
        return [(r, col) for r in range(row, row + self.ship_length)]

    def _can_place_ship(self, row: int, col: int, orientation: Orientation) -> bool:
        """Return True if every target cell is on the board and still water."""
        cells = self._ship_cells(row, col, orientation)
        if not all(in_bounds(rc, self.size) for rc in cells):
            return False
        return all(self._grid[r, c] == CellState.WATER for r, c in cells)

    def _mark_ship(self, ship: Ship) -> None:
        mark = CellState.SHIP_VISIBLE if self.show_ships else CellState.SHIP_HIDDEN
        for r, c in ship.coordinates:
            self._grid[r, c] = mark

    # ------------------------------------------------------------------ #
    # Guess resolution
    # ------------------------------------------------------------------ #
    def process_guess(self, coord: Coord) -> GuessOutcome:
        """Resolve a shot at *coord*. Each coordinate is resolved at most once."""
        if coord in self._guesses:
            return AlreadyGuessed(coord)
        if not in_bounds(coord, self.size):
            raise ValueError(f"Coordinate out of range: {coord}")

        self._guesses.add(coord)
        r, c = coord
        for ship in self._ships:
            if not ship.contains(coord):
                continue
            if ship.hit(coord) is HitResult.ALREADY_HIT:
                logger.debug("guess %s landed on an already damaged cell", format_coord(coord))
                return AlreadyHit(coord)
            self._grid[r, c] = CellState.HIT
            sunk = ship.is_sunk()
            logger.debug("guess %s hit %s", format_coord(coord), ship)
            return Hit(coord, sunk)

        self._grid[r, c] = CellState.MISS
        logger.debug("guess %s missed", format_coord(coord))
        return Miss(coord)

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #
    def remaining_ship_count(self) -> int:
        return sum(1 for ship in self._ships if not ship.is_sunk())

    def all_sunk(self) -> bool:
        """Return True if every ship on this board has been sunk."""
        return self.remaining_ship_count() == 0

    def cell_state(self, coord: Coord) -> CellState:
        if not in_bounds(coord, self.size):
            return CellState.WATER
        r, c = coord
        return CellState(int(self._grid[r, c]))

    def grid(self) -> np.ndarray:
        """Read-only copy of the cell-state grid."""
        snapshot = self._grid.copy()
        snapshot.setflags(write=False)
        return snapshot

    def guesses(self) -> FrozenSet[Coord]:
        return frozenset(self._guesses)

    def ships(self) -> List[Ship]:
        return [ship.clone() for ship in self._ships]

    def reset(self) -> None:
        """Clear ships, marks and guesses."""
        self._grid = self._empty_grid()
        self._ships = []
        self._guesses = set()
