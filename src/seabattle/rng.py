"""Injectable randomness for ship placement and CPU hunting.

Board and CpuPlayer only ever ask for two things: a uniform integer in
``[0, stop)`` and a fair coin flip. Anything exposing ``randrange`` and
``coin`` can be passed in, which is how the tests replay fixed sequences.
"""

from __future__ import annotations

import random
from typing import Optional

from typing_extensions import Protocol


class RandomLike(Protocol):
    def randrange(self, stop: int) -> int: ...

    def coin(self) -> bool: ...


class RandomSource:
    """Seedable wrapper around :class:`random.Random`."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._rnd = random.Random(seed)

    def randrange(self, stop: int) -> int:
        return self._rnd.randrange(stop)

    def coin(self) -> bool:
        return self._rnd.random() < 0.5

    def spawn(self) -> "RandomSource":
        """Derive an independent source, deterministic when this one is seeded."""
        return RandomSource(self._rnd.randrange(2**32) if self.seed is not None else None)
