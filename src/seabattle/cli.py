"""Console front-end: ``python -m seabattle.cli`` or the ``seabattle`` script."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, List, Optional

from . import config as _cfg
from .game import Game, PlacementExhausted
from .rng import RandomSource
from .router import ConsoleRouter

logger = logging.getLogger(__name__)

BANNER = "\n".join(
    [
        "=" * 41,
        "         Welcome to SEA BATTLE!",
        "=" * 41,
        f"Board {_cfg.BOARD_SIZE}x{_cfg.BOARD_SIZE}, {_cfg.NUM_SHIPS} ships of length {_cfg.SHIP_LENGTH} per side.",
        "Enter a guess as two digits, row then column (e.g. 00, 34, 98).",
        "Type QUIT to leave.",
    ]
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="seabattle", description="Play Sea Battle against the CPU")
    parser.add_argument("--seed", type=int, default=_cfg.SEED, help="seed for placement and CPU moves")
    parser.add_argument("--name", default="Player", help="your name in the statistics")
    parser.add_argument("--debug", action="store_true", default=_cfg.DEBUG, help="enable debug logging")
    parser.add_argument(
        "--hide-cpu-mode",
        dest="show_cpu_mode",
        action="store_false",
        default=_cfg.SHOW_CPU_MODE,
        help="do not print the CPU's hunt/target mode after its turns",
    )
    return parser


def configure_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else getattr(logging, _cfg.LOG_LEVEL, logging.WARNING)
    logging.basicConfig(level=level, format=_cfg.LOG_FORMAT)


def prompt_reader(prompt: str = "Enter your guess (e.g., 00): ") -> Callable[[], Optional[str]]:
    """Blocking input collaborator; returns None on EOF."""

    def _read() -> Optional[str]:
        try:
            return input(prompt)
        except EOFError:
            return None

    return _read


def setup_with_retries(game: Game, retries: int) -> bool:
    """Run setup until both fleets are placed, at most *retries* times."""
    for attempt in range(1, retries + 1):
        result = game.setup()
        if not isinstance(result, PlacementExhausted):
            return True
        logger.warning("setup attempt %d/%d failed: %s", attempt, retries, result)
    return False


def main(argv: Optional[List[str]] = None, read_line: Optional[Callable[[], Optional[str]]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.debug)

    game = Game(player_name=args.name, rng=RandomSource(args.seed))
    game.subscribe(ConsoleRouter(show_cpu_mode=args.show_cpu_mode))
    print(BANNER)

    if not setup_with_retries(game, max(1, _cfg.SETUP_RETRIES)):
        print("Failed to setup the game. Please try again.", file=sys.stderr)
        return 1

    try:
        game.run(read_line if read_line is not None else prompt_reader())
    except KeyboardInterrupt:
        print("\n\nGame interrupted. Thanks for playing!")
        return 0
    except Exception:
        logger.exception("An error occurred while running the game")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
