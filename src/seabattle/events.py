"""Lightweight event model used by Game to decouple turn logic from output.

Game emits typed events; the console router turns them into printed text and
tests subscribe to assert on turn ordering without parsing output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict


class Category(Enum):
    """High-level event categories."""

    SETUP = auto()  # placement success / failure
    TURN = auto()  # per-turn lifecycle (prompt, shot, cpu mode)
    INPUT = auto()  # rejected player input
    SYSTEM = auto()  # game over, interruption


@dataclass(frozen=True)
class Event:
    """Immutable event emitted by Game."""

    category: Category
    type: str  # finer-grained identifier, e.g. "shot", "invalid", "end"
    payload: Dict[str, Any] = field(default_factory=dict)
