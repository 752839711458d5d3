from dataclasses import dataclass
from typing import Union

QUIT_WORDS = frozenset({"Q", "QUIT", "EXIT"})


@dataclass(frozen=True)
class GuessCommand:
    text: str


@dataclass(frozen=True)
class QuitCommand:
    pass


Command = Union[GuessCommand, QuitCommand]


def parse_command(line: str) -> Command:
    """
    Turn one console line into a command.

    Anything that is not a quit word is handed on as a guess; whether it is a
    well-formed coordinate is the Player's call. EOF is the caller's business.
    """
    raw = line.strip()
    if raw.upper() in QUIT_WORDS:
        return QuitCommand()
    return GuessCommand(text=raw)
