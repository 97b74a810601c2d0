"""Terminal play session.

Translates typed commands into engine calls and prints the returned board.
All game rules live in the engine; this module only adapts input and output.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from spiderdeck.persistence.db import SqlStore
from spiderdeck.persistence.store import JsonFileStore, SaveStore
from spiderdeck.playtest.display import BoardRenderer, HintPresenter
from spiderdeck.playtest.input import HELP_TEXT, HumanPlayer, InputResult
from spiderdeck.simulation.engine import CommandResult, EngineError, SpiderEngine
from spiderdeck.simulation.hints import NoMovesAvailable
from spiderdeck.simulation.schema import Level
from spiderdeck.simulation.sequences import run_start
from spiderdeck.simulation.solver import StepOutcome

logger = logging.getLogger(__name__)

STORE_KINDS = ("none", "json", "sqlite")

# Safety cap for one auto-complete request
MAX_AUTO_STEPS = 500


@dataclass
class SessionConfig:
    """Configuration for a terminal session."""

    level: Level = Level.BEGINNER
    seed: Optional[int] = None
    store: str = "json"  # none, json, sqlite
    save_path: Path = field(default_factory=lambda: Path("spider_save.json"))
    resume: bool = True
    show_help: bool = True
    show_time: bool = True
    debug: bool = False

    def __post_init__(self):
        """Generate seed if not provided."""
        if self.seed is None:
            self.seed = random.randint(0, 2**32 - 1)
        self.level = Level(self.level)
        self.save_path = Path(self.save_path)


def make_store(config: SessionConfig) -> Optional[SaveStore]:
    """Build the save store selected in the config."""
    if config.store == "json":
        return JsonFileStore(config.save_path)
    if config.store == "sqlite":
        return SqlStore.open(str(config.save_path))
    if config.store == "none":
        return None
    raise ValueError(f"Unknown store kind: {config.store}")


@dataclass
class SessionSummary:
    """How a session ended."""

    won: bool
    score: int
    moves: int
    elapsed_time: int
    quit_early: bool


class PlaytestSession:
    """Runs an interactive game against the engine."""

    def __init__(
        self,
        config: SessionConfig,
        engine: Optional[SpiderEngine] = None,
        human_input: Optional[HumanPlayer] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize session."""
        self.config = config
        self.engine = engine or SpiderEngine(store=make_store(config), seed=config.seed)
        self.human_input = human_input or HumanPlayer()
        self.renderer = BoardRenderer()
        self.hints = HintPresenter()
        self.clock = clock
        self._last_tick = clock()

    def start(self, output_fn: Callable[[str], None] = print) -> None:
        """Resume a saved game if allowed, otherwise deal a new one."""
        if self.config.resume and self.engine.store is not None:
            result = self.engine.load_saved()
            if result.ok:
                output_fn("Continuing saved game.")
                return
            if result.error == EngineError.INVALID_RECORD:
                output_fn(f"Saved game could not be loaded: {result.message}")
        self.engine.new_game(self.config.level)
        output_fn(f"Seed: {self.config.seed} (use --seed {self.config.seed} to replay)")

    def run(self, output_fn: Callable[[str], None] = print) -> SessionSummary:
        """Run the session until the game is won or the player quits."""
        self.start(output_fn)
        if self.config.show_help:
            output_fn(HELP_TEXT)

        quit_early = False
        while True:
            self._tick()
            state = self.engine.state
            output_fn("")
            output_fn(self.renderer.render(
                state,
                self.engine.level,
                self.engine.elapsed_time,
                show_time=self.config.show_time,
                debug=self.config.debug,
            ))
            if state.won:
                break

            command = self.human_input.get_command()
            if command.quit:
                quit_early = True
                break
            if command.error:
                output_fn(command.error)
                continue
            self.handle(command, output_fn)

        state = self.engine.state
        return SessionSummary(
            won=state.won,
            score=state.score,
            moves=state.move_count,
            elapsed_time=self.engine.elapsed_time,
            quit_early=quit_early,
        )

    def handle(self, command: InputResult, output_fn: Callable[[str], None]) -> None:
        """Dispatch a parsed command to the engine."""
        engine = self.engine
        name, args = command.command, command.args

        if name == "m":
            if len(args) == 2:
                source, target = args
                card_index = self._top_run_index(source)
            else:
                source, card_index, target = args
            self._report(engine.move(source, card_index, target), output_fn)
        elif name == "c":
            source = args[0]
            card_index = args[1] if len(args) == 2 else self._top_run_index(source)
            self._report(engine.quick_move(source, card_index), output_fn)
        elif name == "f":
            self._report(engine.flip(args[0]), output_fn)
        elif name == "d":
            self._report(engine.deal(), output_fn)
        elif name == "u":
            self._report(engine.undo(), output_fn)
        elif name == "h":
            hint = engine.request_hint()
            output_fn(self.hints.present(hint, engine.state))
            # Terminal hints are shown once; nothing times them out
            if not isinstance(hint, NoMovesAvailable):
                engine.clear_hint()
        elif name == "a":
            self.auto_complete(output_fn)
        elif name == "r":
            self._report(engine.restart(), output_fn)
        elif name == "w":
            result = engine.use_special_action()
            if result.ok:
                output_fn(f"Magic wands left: {engine.remaining_special_actions}")
            else:
                self._report(result, output_fn)
        elif name == "?":
            output_fn(HELP_TEXT)

    def auto_complete(self, output_fn: Callable[[str], None]) -> StepOutcome:
        """Drive the auto-solver until it stops making progress."""
        if not self.engine.can_auto_complete():
            output_fn("Auto-complete needs an empty stock and every card face-up.")
            return StepOutcome.STALLED

        outcome = StepOutcome.STALLED
        for _ in range(MAX_AUTO_STEPS):
            outcome = self.engine.step()
            if outcome not in (StepOutcome.MOVED, StepOutcome.COMPLETED):
                break
        if outcome == StepOutcome.STALLED:
            output_fn("Auto-complete stopped: no more same-suit moves.")
        logger.debug(f"Auto-complete finished: {outcome.value}")
        return outcome

    def _top_run_index(self, column: int) -> int:
        columns = self.engine.state.columns
        if column >= len(columns):
            return -1
        return run_start(columns[column])

    def _report(self, result: CommandResult, output_fn: Callable[[str], None]) -> None:
        if not result.ok:
            output_fn(result.message or result.error.value)

    def _tick(self) -> None:
        now = self.clock()
        seconds = int(now - self._last_tick)
        if seconds > 0:
            self.engine.tick(seconds)
            self._last_tick += seconds
