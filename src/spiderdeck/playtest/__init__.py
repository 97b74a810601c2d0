"""Terminal front end for playing against the engine."""

from spiderdeck.playtest.display import BoardRenderer, HintPresenter, format_card
from spiderdeck.playtest.input import HumanPlayer, InputResult, parse_command
from spiderdeck.playtest.session import PlaytestSession, SessionConfig, SessionSummary

__all__ = [
    "BoardRenderer",
    "HintPresenter",
    "format_card",
    "HumanPlayer",
    "InputResult",
    "parse_command",
    "PlaytestSession",
    "SessionConfig",
    "SessionSummary",
]
