from __future__ import annotations

from enum import Enum, auto
from typing import Iterable, List, Tuple

from .coord_utils import Coord, format_coord


class HitResult(Enum):
    """Outcome of striking a single ship."""

    APPLIED = auto()
    ALREADY_HIT = auto()
    NOT_PART_OF_SHIP = auto()


class Ship:
    """
    A ship over a fixed, ordered run of coordinates.

    Each coordinate carries a hit flag that can flip from False to True exactly
    once. The ship is sunk when every flag is set.
    """

    def __init__(self, coordinates: Iterable[Coord]) -> None:
        self._coordinates: Tuple[Coord, ...] = tuple(coordinates)
        if len(set(self._coordinates)) != len(self._coordinates):
            raise ValueError(f"Ship coordinates must be distinct: {self._coordinates}")
        self._hits: List[bool] = [False] * len(self._coordinates)

    @property
    def coordinates(self) -> Tuple[Coord, ...]:
        return self._coordinates

    @property
    def size(self) -> int:
        return len(self._coordinates)

    def hit(self, coord: Coord) -> HitResult:
        """Mark *coord* as hit; repeated or foreign coordinates change nothing."""
        try:
            idx = self._coordinates.index(coord)
        except ValueError:
            return HitResult.NOT_PART_OF_SHIP
        if self._hits[idx]:
            return HitResult.ALREADY_HIT
        self._hits[idx] = True
        return HitResult.APPLIED

    def contains(self, coord: Coord) -> bool:
        return coord in self._coordinates

    def is_hit_at(self, coord: Coord) -> bool:
        return coord in self._coordinates and self._hits[self._coordinates.index(coord)]

    def hit_count(self) -> int:
        return sum(self._hits)

    def health_remaining(self) -> int:
        return self.size - self.hit_count()

    def is_sunk(self) -> bool:
        return all(self._hits)

    def clone(self) -> "Ship":
        copy = Ship(self._coordinates)
        copy._hits = list(self._hits)
        return copy

    def __str__(self) -> str:
        status = "SUNK" if self.is_sunk() else f"{self.health_remaining()}/{self.size}"
        return f"Ship[{','.join(format_coord(c) for c in self._coordinates)}] - {status}"

    def __repr__(self) -> str:
        return f"Ship({list(self._coordinates)!r}, hits={self._hits!r})"
