"""Single-player match logic: one human against the CPU.

The Game owns both boards and drives a strict alternating round:

1. terminal check
2. player turn   (validate -> record -> resolve on the CPU board)
3. terminal check (a player win skips the CPU turn)
4. CPU turn      (select -> resolve on the player board -> feed back result)
5. terminal check

Rejected input, AlreadyGuessed and AlreadyHit do not consume the player's
turn; the round ends there and the caller is expected to re-prompt.

Output is not produced here. Every step is published as an Event so that
the console router (or a test) can observe it.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from .board import AlreadyGuessed, AlreadyHit, Board, GuessOutcome, Hit, PartiallyPlaced
from .bot_logic import CpuPlayer
from .commands import QuitCommand, parse_command
from .config import NUM_SHIPS
from .coord_utils import Coord, format_coord
from .events import Category, Event
from .player import Ok, Player, Validation
from .rng import RandomSource

logger = logging.getLogger(__name__)


class Status(Enum):
    SETUP = "setup"
    IN_PROGRESS = "in_progress"
    GAME_OVER = "game_over"


class Side(Enum):
    PLAYER = "Player"
    CPU = "CPU"


class GameStateError(RuntimeError):
    """Raised when a turn is requested before a successful setup."""


@dataclass(frozen=True)
class Ready:
    ships: int


@dataclass(frozen=True)
class PlacementExhausted:
    player_placed: int
    cpu_placed: int
    requested: int


SetupResult = Union[Ready, PlacementExhausted]


@dataclass(frozen=True)
class RoundResult:
    """What happened in one call to Game.play_round()."""

    player: Optional[Union[Validation, GuessOutcome]] = None
    cpu_guess: Optional[Coord] = None
    cpu_outcome: Optional[GuessOutcome] = None
    turn_consumed: bool = False
    winner: Optional[Side] = None


@dataclass(frozen=True)
class GameStats:
    player_ships_remaining: int
    cpu_ships_remaining: int
    player_guesses: int
    cpu_guesses: int
    cpu_hit_rate: float
    elapsed_seconds: float
    winner: Optional[Side]


class Game:
    """Orchestrates two boards, a Player and a CpuPlayer through one match."""

    def __init__(
        self,
        *,
        player_name: str = "Player",
        cpu_name: str = "CPU",
        num_ships: int = NUM_SHIPS,
        rng: Optional[RandomSource] = None,
        player_board: Optional[Board] = None,
        cpu_board: Optional[Board] = None,
        cpu: Optional[CpuPlayer] = None,
    ) -> None:
        rng = rng if rng is not None else RandomSource()
        self.num_ships = num_ships
        # The player sees their own ships; the CPU fleet stays hidden.
        self.player_board = player_board if player_board is not None else Board(True, rng=rng.spawn())
        self.cpu_board = cpu_board if cpu_board is not None else Board(False, rng=rng.spawn())
        self.player = Player(player_name)
        self.cpu = cpu if cpu is not None else CpuPlayer(cpu_name, rng=rng.spawn())

        self.status = Status.SETUP
        self.winner: Optional[Side] = None
        self.started_at: Optional[float] = None
        self.ended_at: Optional[float] = None

        # Event subscribers
        self._subs: List[Callable[[Event], None]] = []

    # -------------------- event bus --------------------
    def subscribe(self, cb: Callable[[Event], None]) -> None:
        """Allow external components (renderer/logger) to receive game events."""
        self._subs.append(cb)

    def _emit(self, ev: Event) -> None:
        for cb in tuple(self._subs):
            try:
                cb(ev)
            except Exception:
                # A misbehaving subscriber must not end the match
                logger.exception("Event subscriber failed for %s", ev)

    # -------------------- setup --------------------
    def setup(self) -> SetupResult:
        """Place ships on both boards; only full placement on both starts the game."""
        self.reset()
        placed_player = self.player_board.place_ships_randomly(self.num_ships)
        placed_cpu = self.cpu_board.place_ships_randomly(self.num_ships)

        if isinstance(placed_player, PartiallyPlaced) or isinstance(placed_cpu, PartiallyPlaced):
            result = PlacementExhausted(
                player_placed=getattr(placed_player, "placed", self.num_ships),
                cpu_placed=getattr(placed_cpu, "placed", self.num_ships),
                requested=self.num_ships,
            )
            logger.warning("setup failed: %s", result)
            self._emit(Event(Category.SETUP, "failed", {"result": result}))
            return result

        self.status = Status.IN_PROGRESS
        self.started_at = time.monotonic()
        logger.info("setup complete: %d ships per side", self.num_ships)
        self._emit(Event(Category.SETUP, "ready", {"ships": self.num_ships}))
        return Ready(self.num_ships)

    # -------------------- gameplay --------------------
    def run(self, read_line: Callable[[], Optional[str]]) -> Optional[Side]:
        """Main game loop. Blocks on *read_line* for every player turn.

        Returns the winner, or None when the input ends (EOF / QUIT) first.
        """
        if self.status is Status.SETUP:
            raise GameStateError("setup() must succeed before the game can run")

        while self.status is Status.IN_PROGRESS:
            if self._check_terminal():
                break
            self._emit(Event(Category.TURN, "prompt", {"player_board": self.player_board, "cpu_board": self.cpu_board}))

            line = read_line()
            if line is None:
                logger.info("input closed – leaving game unfinished")
                self._emit(Event(Category.SYSTEM, "interrupted", {}))
                return None
            cmd = parse_command(line)
            if isinstance(cmd, QuitCommand):
                logger.info("%s quit the game", self.player.name)
                self._emit(Event(Category.SYSTEM, "quit", {}))
                return None
            self.play_round(cmd.text)

        return self.winner

    def play_round(self, raw: Optional[str]) -> RoundResult:
        """Run one round for the player input *raw*; see the module docstring."""
        if self.status is Status.SETUP:
            raise GameStateError("setup() must succeed before playing a round")
        if self.status is Status.GAME_OVER or self._check_terminal():
            return RoundResult(winner=self.winner)

        # 1) Player turn
        validation = self.player.validate(raw)
        if not isinstance(validation, Ok):
            self._emit(Event(Category.INPUT, "invalid", {"result": validation}))
            return RoundResult(player=validation)

        coord = validation.coord
        self.player.record_guess(coord)
        outcome = self.cpu_board.process_guess(coord)
        if isinstance(outcome, (AlreadyGuessed, AlreadyHit)):
            self._emit(Event(Category.INPUT, "repeat", {"result": outcome}))
            return RoundResult(player=outcome)
        self._emit(Event(Category.TURN, "shot", {"side": Side.PLAYER, "coord": coord, "result": outcome}))

        # 2) Victory?  The CPU does not get a turn once its fleet is gone
        if self._check_terminal():
            return RoundResult(player=outcome, turn_consumed=True, winner=self.winner)

        # 3) CPU turn
        cpu_coord, cpu_outcome = self._cpu_turn()
        self._check_terminal()
        return RoundResult(
            player=outcome,
            cpu_guess=cpu_coord,
            cpu_outcome=cpu_outcome,
            turn_consumed=True,
            winner=self.winner,
        )

    def _cpu_turn(self) -> tuple[Coord, GuessOutcome]:
        coord = self.cpu.select_guess(self.player_board.guesses())
        outcome = self.player_board.process_guess(coord)
        was_hit = isinstance(outcome, Hit)
        self.cpu.record_result(coord, was_hit, was_hit and outcome.sunk)
        logger.debug("CPU fired at %s: %s", format_coord(coord), outcome)
        self._emit(Event(Category.TURN, "shot", {"side": Side.CPU, "coord": coord, "result": outcome}))
        self._emit(Event(Category.TURN, "cpu_mode", {"mode": self.cpu.mode}))
        return coord, outcome

    def _check_terminal(self) -> bool:
        if self.status is Status.GAME_OVER:
            return True
        if self.cpu_board.all_sunk():
            self._conclude(Side.PLAYER)
            return True
        if self.player_board.all_sunk():
            self._conclude(Side.CPU)
            return True
        return False

    def _conclude(self, winner: Side) -> None:
        self.status = Status.GAME_OVER
        self.winner = winner
        self.ended_at = time.monotonic()
        logger.info("game over: %s wins", winner.value)
        self._emit(
            Event(
                Category.SYSTEM,
                "end",
                {
                    "winner": winner,
                    "stats": self.stats(),
                    "player_grid": self.player_board.grid(),
                    "cpu_grid": self.cpu_board.grid(),
                },
            )
        )

    # -------------------- snapshots --------------------
    def elapsed_seconds(self) -> float:
        if self.started_at is None:
            return 0.0
        end = self.ended_at if self.ended_at is not None else time.monotonic()
        return end - self.started_at

    def stats(self) -> GameStats:
        return GameStats(
            player_ships_remaining=self.player_board.remaining_ship_count(),
            cpu_ships_remaining=self.cpu_board.remaining_ship_count(),
            player_guesses=self.player.guess_count,
            cpu_guesses=self.cpu.guess_count,
            cpu_hit_rate=self.cpu.hit_rate(),
            elapsed_seconds=self.elapsed_seconds(),
            winner=self.winner,
        )

    def state(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "winner": self.winner,
            "player_board": self.player_board.grid(),
            "cpu_board": self.cpu_board.grid(),
            "player_stats": self.player.stats(),
            "cpu_stats": self.cpu.stats(),
            "stats": self.stats(),
        }

    def reset(self) -> None:
        """Return to a fresh SETUP state; boards are emptied."""
        self.player_board.reset()
        self.cpu_board.reset()
        self.player.reset()
        self.cpu.reset()
        self.status = Status.SETUP
        self.winner = None
        self.started_at = None
        self.ended_at = None
