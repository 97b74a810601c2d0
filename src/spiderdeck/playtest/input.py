"""Human input handling."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

HELP_TEXT = """Commands (columns and card positions count from 1):
  m S T       move the top run of column S onto column T
  m S N T     move cards from position N up in column S onto column T
  c S [N]     send a run to the best column (click-to-move)
  f S         turn over the top card of column S
  d           deal a row from the stock
  u           undo
  h           hint
  a           auto-complete (stock empty, all cards face-up)
  r           restart this deal
  w           use a magic wand
  ?           show this help
  q           quit"""

# command letter -> accepted argument counts
COMMANDS: dict[str, tuple[int, ...]] = {
    "m": (2, 3),
    "c": (1, 2),
    "f": (1,),
    "d": (0,),
    "u": (0,),
    "h": (0,),
    "a": (0,),
    "r": (0,),
    "w": (0,),
    "?": (0,),
}

ALIASES = {
    "move": "m",
    "click": "c",
    "flip": "f",
    "deal": "d",
    "undo": "u",
    "hint": "h",
    "auto": "a",
    "restart": "r",
    "wand": "w",
    "help": "?",
}


@dataclass
class InputResult:
    """Result of human input.

    ``args`` are converted to 0-based indices.
    """

    command: Optional[str] = None
    args: tuple[int, ...] = field(default_factory=tuple)
    quit: bool = False
    error: Optional[str] = None


def parse_command(raw: str) -> InputResult:
    """Parse one line of player input."""
    parts = raw.strip().lower().split()
    if not parts:
        return InputResult(error="Enter a command, or ? for help.")

    name = ALIASES.get(parts[0], parts[0])
    if name in ("q", "quit", "exit"):
        return InputResult(quit=True)
    if name not in COMMANDS:
        return InputResult(error=f"Unknown command '{parts[0]}'. Enter ? for help.")

    raw_args = parts[1:]
    if len(raw_args) not in COMMANDS[name]:
        counts = " or ".join(str(n) for n in COMMANDS[name])
        return InputResult(error=f"'{name}' takes {counts} number(s).")

    try:
        numbers = [int(a) for a in raw_args]
    except ValueError:
        return InputResult(error=f"Invalid number in '{raw.strip()}'.")
    if any(n < 1 for n in numbers):
        return InputResult(error="Columns and positions start at 1.")

    return InputResult(command=name, args=tuple(n - 1 for n in numbers))


class HumanPlayer:
    """Reads commands from the terminal."""

    def __init__(self, input_fn: Callable[[str], str] = input):
        self.input_fn = input_fn

    def get_command(self, prompt: str = "> ") -> InputResult:
        """Read one command; EOF or Ctrl-C means quit."""
        try:
            raw = self.input_fn(prompt)
        except (EOFError, KeyboardInterrupt):
            return InputResult(quit=True)
        return parse_command(raw)
