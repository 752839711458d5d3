"""Console rendering of Game events.

Game never prints. ConsoleRouter is subscribed to it by the CLI and owns all
player-facing wording: shot reports, rejected input, board redraws before
each prompt and the end-of-game summary.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from . import display
from .board import AlreadyGuessed, AlreadyHit, Hit
from .bot_logic import Mode
from .config import BOARD_SIZE
from .coord_utils import format_coord
from .events import Category, Event
from .game import Side
from .player import DuplicateGuess, MalformedInput, OutOfBounds

logger = logging.getLogger(__name__)


class ConsoleRouter:
    """Session-scoped helper that converts `Event` → printed lines."""

    def __init__(self, out: TextIO | None = None, *, show_cpu_mode: bool = True, board_size: int = BOARD_SIZE) -> None:
        self._out = out if out is not None else sys.stdout
        self.show_cpu_mode = show_cpu_mode
        self.board_size = board_size

    # ------------------------------------------------------------------
    # Public dispatch entry
    # ------------------------------------------------------------------
    def __call__(self, ev: Event) -> None:  # Game calls router(event)
        self.dispatch(ev)

    def dispatch(self, ev: Event) -> None:
        cat = ev.category
        if cat is Category.SETUP:
            self._handle_setup(ev)
        elif cat is Category.TURN:
            self._handle_turn(ev)
        elif cat is Category.INPUT:
            self._handle_input(ev)
        elif cat is Category.SYSTEM:
            self._handle_system(ev)
        else:  # pragma: no cover – unknown category
            logger.debug("Ignoring event %s", ev)

    def _write(self, text: str) -> None:
        print(text, file=self._out)

    # ------------------------------------------------------------------
    # Category handlers
    # ------------------------------------------------------------------
    def _handle_setup(self, ev: Event) -> None:
        if ev.type == "ready":
            n = ev.payload["ships"]
            self._write(display.colour(f"{n} ships placed for both Player and CPU.", display.GREEN))
            self._write(f"Try to sink the {n} enemy ships!")
        elif ev.type == "failed":
            self._write(display.colour("Failed to place ships on the board.", display.RED))

    def _handle_turn(self, ev: Event) -> None:
        t = ev.type
        if t == "prompt":
            self._write("")
            self._write(display.render_boards(ev.payload["cpu_board"].grid(), ev.payload["player_board"].grid()))
            self._write("")
        elif t == "shot":
            self._report_shot(ev.payload["side"], ev.payload["coord"], ev.payload["result"])
        elif t == "cpu_mode" and self.show_cpu_mode:
            mode: Mode = ev.payload["mode"]
            self._write(f"CPU is in {mode.value} mode.")

    def _report_shot(self, side: Side, coord, result) -> None:
        where = format_coord(coord)
        hit = isinstance(result, Hit)
        if side is Side.PLAYER:
            if hit:
                self._write(display.colour(f"{display.MESSAGES['player_hit']} at {where}", display.GREEN))
                if result.sunk:
                    self._write(display.colour(display.MESSAGES["sunk_by_player"], display.GREEN))
            else:
                self._write(f"{display.MESSAGES['player_miss']} at {where}")
        else:
            # header goes with the CPU shot; a winning player shot has none
            self._write("\n--- CPU's Turn ---")
            if hit:
                self._write(display.colour(f"{display.MESSAGES['cpu_hit']} at {where}!", display.RED))
                if result.sunk:
                    self._write(display.colour(display.MESSAGES["sunk_by_cpu"], display.RED))
            else:
                self._write(f"{display.MESSAGES['cpu_miss']} at {where}.")

    def _handle_input(self, ev: Event) -> None:
        result = ev.payload["result"]
        if isinstance(result, MalformedInput):
            msg = display.MESSAGES["malformed"]
        elif isinstance(result, OutOfBounds):
            msg = f"{display.MESSAGES['out_of_bounds']} {self.board_size - 1}."
        elif isinstance(result, DuplicateGuess):
            msg = display.MESSAGES["duplicate"]
        elif isinstance(result, AlreadyGuessed):
            msg = display.MESSAGES["already_guessed"]
        elif isinstance(result, AlreadyHit):
            msg = display.MESSAGES["already_hit"]
        else:  # pragma: no cover
            msg = str(result)
        self._write(display.colour(msg, display.GOLD))

    def _handle_system(self, ev: Event) -> None:
        t = ev.type
        if t == "end":
            self._write(display.render_boards(ev.payload["cpu_grid"], ev.payload["player_grid"]))
            self._write(display.game_over_banner(ev.payload["winner"]))
            self._write(display.render_stats(ev.payload["stats"]))
        elif t in ("quit", "interrupted"):
            self._write("\nGame interrupted. Thanks for playing!")
