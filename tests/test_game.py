"""Turn-orchestration tests for Game."""

from __future__ import annotations

from typing import Iterator, List, Optional

import pytest

from conftest import ScriptedRandom, horizontal_ships
from seabattle.board import AlreadyGuessed, AlreadyHit, Board, Hit, Miss, PartiallyPlaced
from seabattle.bot_logic import CpuPlayer, Mode
from seabattle.events import Category
from seabattle.game import Game, GameStateError, PlacementExhausted, Ready, RoundResult, Side, Status
from seabattle.player import DuplicateGuess, MalformedInput
from seabattle.rng import RandomSource


def make_game(player_ships, cpu_ships, cpu_script=(), num_ships: Optional[int] = None) -> Game:
    """Game with fixed fleets: each fleet is a list of horizontal ship origins."""
    return Game(
        num_ships=num_ships if num_ships is not None else len(player_ships),
        player_board=Board(True, rng=ScriptedRandom(horizontal_ships(*player_ships))),
        cpu_board=Board(False, rng=ScriptedRandom(horizontal_ships(*cpu_ships))),
        cpu=CpuPlayer(rng=ScriptedRandom(cpu_script)),
    )


def feed(lines: List[Optional[str]]):
    it: Iterator[Optional[str]] = iter(lines)
    return lambda: next(it, None)


class ShortBoard(Board):
    """Board whose placement always falls short."""

    def place_ships_randomly(self, count):
        return PartiallyPlaced(max(count - 1, 0), count)


# ---------------------------------------------------------------------- #
# Setup
# ---------------------------------------------------------------------- #
def test_setup_places_both_fleets() -> None:
    game = Game(rng=RandomSource(42))
    assert game.status is Status.SETUP
    assert game.setup() == Ready(3)
    assert game.status is Status.IN_PROGRESS
    assert game.player_board.remaining_ship_count() == 3
    assert game.cpu_board.remaining_ship_count() == 3
    assert game.player_board.show_ships
    assert not game.cpu_board.show_ships
    assert game.started_at is not None


def test_setup_fails_when_placement_exhausted() -> None:
    game = Game(num_ships=100, rng=RandomSource(1))
    result = game.setup()
    assert isinstance(result, PlacementExhausted)
    assert result.requested == 100
    assert result.player_placed < 100 and result.cpu_placed < 100
    assert game.status is Status.SETUP


def test_one_short_board_blocks_start(event_log) -> None:
    game = Game(rng=RandomSource(2), cpu_board=ShortBoard(False))
    game.subscribe(event_log)
    result = game.setup()
    assert result == PlacementExhausted(player_placed=3, cpu_placed=2, requested=3)
    assert game.status is Status.SETUP
    assert [e.type for e in event_log.events] == ["failed"]
    with pytest.raises(GameStateError):
        game.play_round("00")
    with pytest.raises(GameStateError):
        game.run(feed(["00"]))


def test_same_seed_same_fleets() -> None:
    a, b = Game(rng=RandomSource(9)), Game(rng=RandomSource(9))
    a.setup()
    b.setup()
    assert [s.coordinates for s in a.cpu_board.ships()] == [s.coordinates for s in b.cpu_board.ships()]
    assert [s.coordinates for s in a.player_board.ships()] == [s.coordinates for s in b.player_board.ships()]


# ---------------------------------------------------------------------- #
# Rounds
# ---------------------------------------------------------------------- #
def test_round_player_then_cpu(event_log) -> None:
    game = make_game([(9, 0)], [(0, 0)], cpu_script=[5, 5])
    game.setup()
    game.subscribe(event_log)

    result = game.play_round("55")
    assert result.turn_consumed
    assert result.player == Miss((5, 5))
    assert result.cpu_guess == (5, 5)
    assert result.cpu_outcome == Miss((5, 5))
    assert result.winner is None

    shots = [e for e in event_log.events if e.type == "shot"]
    assert [e.payload["side"] for e in shots] == [Side.PLAYER, Side.CPU]


def test_invalid_input_does_not_consume_turn(event_log) -> None:
    game = make_game([(9, 0)], [(0, 0)])
    game.setup()
    game.subscribe(event_log)

    result = game.play_round("x1")
    assert result == RoundResult(player=MalformedInput("x1"))
    assert not result.turn_consumed
    assert game.cpu.guess_count == 0
    assert game.player.guess_count == 0
    assert [(e.category, e.type) for e in event_log.events] == [(Category.INPUT, "invalid")]


def test_duplicate_guess_is_rejected_by_player() -> None:
    game = make_game([(9, 0)], [(0, 0)], cpu_script=[5, 5])
    game.setup()
    game.play_round("33")
    result = game.play_round("33")
    assert result.player == DuplicateGuess((3, 3))
    assert game.cpu.guess_count == 1


def test_already_guessed_on_board_does_not_consume_turn() -> None:
    game = make_game([(9, 0)], [(0, 0)])
    game.setup()
    game.cpu_board.process_guess((4, 4))
    result = game.play_round("44")
    assert result.player == AlreadyGuessed((4, 4))
    assert not result.turn_consumed
    assert game.cpu.guess_count == 0


def test_already_hit_does_not_consume_turn() -> None:
    game = make_game([(9, 0)], [(0, 0)])
    game.setup()
    game.cpu_board._ships[0].hit((0, 1))
    result = game.play_round("01")
    assert result.player == AlreadyHit((0, 1))
    assert not result.turn_consumed
    assert game.cpu.guess_count == 0


def test_player_win_skips_cpu_turn(event_log) -> None:
    game = make_game([(9, 0)], [(0, 0)], cpu_script=[5, 5, 6, 6])
    game.setup()
    game.subscribe(event_log)

    game.play_round("00")
    game.play_round("01")
    result = game.play_round("02")

    assert result.player == Hit((0, 2), sunk=True)
    assert result.cpu_guess is None
    assert result.winner is Side.PLAYER
    assert game.status is Status.GAME_OVER
    assert game.cpu.guess_count == 2
    assert event_log.events[-1].type == "end"
    assert event_log.events[-1].payload["winner"] is Side.PLAYER


def test_cpu_hunts_then_targets_to_victory() -> None:
    game = make_game([(9, 0)], [(0, 0)], cpu_script=[9, 0])
    game.setup()

    cpu_shots = []
    for raw in ["55", "56", "57", "58", "59"]:
        result = game.play_round(raw)
        cpu_shots.append(result.cpu_guess)

    # hit (9,0) -> probe up, right; (9,1) hit -> probe (8,1), (9,2)
    assert cpu_shots == [(9, 0), (8, 0), (9, 1), (8, 1), (9, 2)]
    assert result.cpu_outcome == Hit((9, 2), sunk=True)
    assert result.winner is Side.CPU
    assert game.cpu.mode is Mode.HUNT
    assert game.cpu.target_queue() == ()


def test_round_after_game_over_changes_nothing() -> None:
    game = make_game([(9, 0)], [(0, 0)], cpu_script=[5, 5, 6, 6])
    game.setup()
    for raw in ["00", "01", "02"]:
        game.play_round(raw)
    guesses = game.player.guess_count
    result = game.play_round("77")
    assert result.winner is Side.PLAYER
    assert result.player is None
    assert game.player.guess_count == guesses


def test_stats_snapshot() -> None:
    game = make_game([(9, 0)], [(0, 0)], cpu_script=[9, 0])
    game.setup()
    game.play_round("00")
    stats = game.stats()
    assert stats.player_ships_remaining == 1
    assert stats.cpu_ships_remaining == 1
    assert stats.player_guesses == 1
    assert stats.cpu_guesses == 1
    assert stats.cpu_hit_rate == 100.0
    assert stats.elapsed_seconds >= 0
    assert stats.winner is None

    state = game.state()
    assert state["status"] is Status.IN_PROGRESS
    assert state["player_board"].shape == (10, 10)
    assert state["cpu_stats"]["mode"] == "target"


def test_elapsed_time_freezes_at_end() -> None:
    game = make_game([(9, 0)], [(0, 0)])
    game.setup()
    game.started_at, game.ended_at = 100.0, 142.5
    assert game.elapsed_seconds() == 42.5


def test_reset_returns_to_setup() -> None:
    game = make_game([(9, 0)], [(0, 0)], cpu_script=[5, 5])
    game.setup()
    game.play_round("11")
    game.reset()
    assert game.status is Status.SETUP
    assert game.player.guess_count == 0
    assert game.cpu.guess_count == 0
    assert game.cpu_board.ships() == []


def test_failing_subscriber_does_not_break_round() -> None:
    game = make_game([(9, 0)], [(0, 0)], cpu_script=[5, 5])
    game.setup()

    def boom(_ev):
        raise RuntimeError("subscriber bug")

    game.subscribe(boom)
    assert game.play_round("11").turn_consumed


# ---------------------------------------------------------------------- #
# Loop
# ---------------------------------------------------------------------- #
@pytest.mark.timeout(5)
def test_run_until_player_wins(event_log) -> None:
    game = make_game([(9, 0)], [(0, 0)], cpu_script=[5, 5, 6, 6])
    game.setup()
    game.subscribe(event_log)
    winner = game.run(feed(["00", "bad", "01", " 02 "]))
    assert winner is Side.PLAYER
    prompts = [e for e in event_log.events if e.type == "prompt"]
    assert len(prompts) == 4


@pytest.mark.timeout(5)
def test_run_stops_on_eof(event_log) -> None:
    game = make_game([(9, 0)], [(0, 0)], cpu_script=[5, 5])
    game.setup()
    game.subscribe(event_log)
    assert game.run(feed(["33"])) is None
    assert game.status is Status.IN_PROGRESS
    assert event_log.events[-1].type == "interrupted"


@pytest.mark.timeout(5)
def test_run_stops_on_quit(event_log) -> None:
    game = make_game([(9, 0)], [(0, 0)])
    game.setup()
    game.subscribe(event_log)
    assert game.run(feed(["quit", "00"])) is None
    assert game.player.guess_count == 0
    assert event_log.events[-1].type == "quit"


@pytest.mark.timeout(10)
@pytest.mark.parametrize("seed", range(5))
def test_full_random_game_terminates(seed: int) -> None:
    game = Game(rng=RandomSource(seed))
    assert isinstance(game.setup(), Ready)
    cells = [f"{r}{c}" for r in range(10) for c in range(10)]
    winner = game.run(feed(cells))
    assert winner in (Side.PLAYER, Side.CPU)
    loser_board = game.cpu_board if winner is Side.PLAYER else game.player_board
    assert loser_board.all_sunk()
