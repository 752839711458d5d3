# display.py
"""
Text rendering helpers for the console client
–––––––––––––––––––––––––––––––––––––––––––––
• grid_rows()     – cell-state grid → ["~ ~ X O …", …]
• render_board()  – single titled board with row/column labels
• render_boards() – opponent and own board side by side
• render_stats()  – end-of-game summary

Renderers only read snapshots (Board.grid(), GameStats). Concealed ship
cells are drawn as water here; the core keeps them distinct.
"""

from __future__ import annotations

import logging
from typing import Dict, List

import numpy as np

from .board import CellState
from .game import GameStats, Side

logger = logging.getLogger(__name__)

GLYPHS: Dict[CellState, str] = {
    CellState.WATER: "~",
    CellState.SHIP_HIDDEN: "~",
    CellState.SHIP_VISIBLE: "S",
    CellState.HIT: "X",
    CellState.MISS: "O",
}

RED = "\033[91m"
GREEN = "\033[92m"
GOLD = "\033[93m"
RESET = "\033[0m"

MESSAGES = {
    "player_hit": "PLAYER HIT!",
    "player_miss": "PLAYER MISS.",
    "cpu_hit": "CPU HIT",
    "cpu_miss": "CPU MISS",
    "sunk_by_player": "You sunk an enemy battleship!",
    "sunk_by_cpu": "CPU sunk your battleship!",
    "player_wins": "*** CONGRATULATIONS! You sunk all enemy battleships! ***",
    "cpu_wins": "*** GAME OVER! The CPU sunk all your battleships! ***",
    "malformed": "Oops, input must be exactly two digits (e.g., 00, 34, 98).",
    "out_of_bounds": "Oops, please enter valid row and column numbers between 0 and",
    "duplicate": "You already guessed that location!",
    "already_guessed": "Already guessed this location",
    "already_hit": "You already hit that spot!",
}


def colour(text: str, code: str) -> str:
    return f"{code}{text}{RESET}"


def grid_rows(grid: np.ndarray) -> List[str]:
    logger.debug("grid_rows() start – shape=%s", grid.shape)
    return [" ".join(GLYPHS[CellState(int(cell))] for cell in row) for row in grid]


def _header(size: int) -> str:
    return "  " + " ".join(str(i) for i in range(size))


def render_board(grid: np.ndarray, title: str = "BOARD") -> str:
    lines = [f"   --- {title} ---", _header(grid.shape[1])]
    lines.extend(f"{idx} {row}" for idx, row in enumerate(grid_rows(grid)))
    return "\n".join(lines)


def render_boards(opponent: np.ndarray, own: np.ndarray) -> str:
    """Opponent board on the left, own board on the right."""
    left_rows = grid_rows(opponent)
    right_rows = grid_rows(own)
    lines = [
        "   --- OPPONENT BOARD ---          --- YOUR BOARD ---",
        f"{_header(opponent.shape[1])}    {_header(own.shape[1])}",
    ]
    for idx, (left, right) in enumerate(zip(left_rows, right_rows)):
        lines.append(f"{idx} {left}    {idx} {right}")
    return "\n".join(lines)


def render_stats(stats: GameStats) -> str:
    winner = stats.winner.value if stats.winner is not None else "-"
    return "\n".join(
        [
            "========== GAME STATISTICS ==========",
            f"Winner:                  {winner}",
            f"Your ships remaining:    {stats.player_ships_remaining}",
            f"CPU ships remaining:     {stats.cpu_ships_remaining}",
            f"Your guesses:            {stats.player_guesses}",
            f"CPU guesses:             {stats.cpu_guesses}",
            f"CPU hit rate:            {stats.cpu_hit_rate:.1f}%",
            f"Game duration:           {round(stats.elapsed_seconds)} seconds",
            "=====================================",
        ]
    )


def game_over_banner(winner: Side) -> str:
    if winner is Side.PLAYER:
        return colour(MESSAGES["player_wins"], GREEN)
    return colour(MESSAGES["cpu_wins"], RED)
