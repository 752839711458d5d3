"""Central configuration for runtime-tunable parameters.

Board geometry is fixed; only the knobs that affect how a session is run
(seed, logging, setup retries) can be overridden via environment variables.
The CLI flags take precedence over the environment.
"""

from __future__ import annotations

import os


# ===========================================================================
# Game Constants
# ===========================================================================
# Width and height of the square board.
BOARD_SIZE: int = 10

# Every ship occupies the same number of cells.
SHIP_LENGTH: int = 3

# Ships placed on each side at setup.
NUM_SHIPS: int = 3

# Total random placement attempts per place_ships_randomly() call, across all
# ships. Lowering this changes how often setup fails.
MAX_PLACEMENT_ATTEMPTS: int = 1000

# Upper bound on random draws / queue pops the CPU makes for one guess.
MAX_GUESS_ATTEMPTS: int = 1000


# ===========================================================================
# Randomness
# ===========================================================================
# SEABATTLE_SEED: Integer seed for every random source created by the CLI.
#   Unset (default) means a fresh, non-deterministic game every run.
#   Example: export SEABATTLE_SEED=1234
SEED: int | None = int(os.environ["SEABATTLE_SEED"]) if os.getenv("SEABATTLE_SEED") else None


# ===========================================================================
# Setup
# ===========================================================================
# SEABATTLE_SETUP_RETRIES: How many times the CLI re-runs setup from scratch
#   when ship placement is exhausted before giving up.
#   Defaults to 3.
SETUP_RETRIES: int = int(os.getenv("SEABATTLE_SETUP_RETRIES", "3"))


# ===========================================================================
# Display
# ===========================================================================
# SEABATTLE_SHOW_CPU_MODE: If "1", print the CPU's hunt/target mode after each
#   of its turns. Defaults to "1".
SHOW_CPU_MODE: bool = os.getenv("SEABATTLE_SHOW_CPU_MODE", "1") == "1"


# ===========================================================================
# Debugging and Logging
# ===========================================================================
# SEABATTLE_DEBUG: If "1", enables detailed debug logging across modules.
#   Defaults to "0" (disabled).
#   Example: export SEABATTLE_DEBUG=1
DEBUG: bool = os.getenv("SEABATTLE_DEBUG", "0") == "1"

# SEABATTLE_LOG_LEVEL: Level used when DEBUG is off. Log records go to stderr
#   so the default keeps them out of the way of the board output.
#   Defaults to "WARNING".
LOG_LEVEL: str = os.getenv("SEABATTLE_LOG_LEVEL", "WARNING").upper()

LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
