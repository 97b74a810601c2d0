"""Spider Solitaire command engine.

The engine is the single owner of the board. Front ends submit commands and
read back immutable BoardState snapshots; every command either commits fully
or leaves the state untouched and reports a tagged failure.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from spiderdeck.persistence.serialization import (
    GameSnapshot,
    InvalidRecordError,
    game_from_record,
    game_to_record,
)
from spiderdeck.persistence.store import SaveStore, StoreError
from spiderdeck.simulation.deck import new_board
from spiderdeck.simulation.hints import Hint, NoMovesAvailable, suggest
from spiderdeck.simulation.history import HistoryManager
from spiderdeck.simulation.movegen import (
    Move,
    apply_deal,
    apply_flip,
    apply_move,
    can_deal,
    can_flip,
    quick_move_target,
)
from spiderdeck.simulation.schema import (
    HISTORY_LIMIT,
    SPECIAL_ACTIONS,
    STARTING_SCORE,
    Level,
)
from spiderdeck.simulation.solver import AutoSolver, StepOutcome, StepResult, can_auto_complete
from spiderdeck.simulation.state import BoardState, Pile
from spiderdeck.simulation.validation import is_legal_move

logger = logging.getLogger(__name__)


class EngineError(Enum):
    """Failure tags for rejected commands."""

    ILLEGAL_MOVE = "illegal_move"
    EMPTY_STOCK = "empty_stock"
    HISTORY_EMPTY = "history_empty"
    INVALID_RECORD = "invalid_record"
    ALREADY_WON = "already_won"
    NO_GAME = "no_game"
    NO_SPECIAL_ACTIONS = "no_special_actions"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of an engine command.

    ``state`` is always the current board after the command (the unchanged
    board on failure, None only when no game exists).
    """

    ok: bool
    state: Optional[BoardState]
    error: Optional[EngineError] = None
    message: str = ""

    @classmethod
    def success(cls, state: BoardState) -> "CommandResult":
        return cls(ok=True, state=state)

    @classmethod
    def failure(
        cls,
        error: EngineError,
        state: Optional[BoardState],
        message: str = "",
    ) -> "CommandResult":
        return cls(ok=False, state=state, error=error, message=message)


@dataclass
class EngineConfig:
    """Engine rule settings."""

    history_limit: int = HISTORY_LIMIT
    starting_score: int = STARTING_SCORE
    special_actions: int = SPECIAL_ACTIONS
    autosave: bool = True


class SpiderEngine:
    """Owns a single Spider Solitaire game and processes commands."""

    def __init__(
        self,
        store: Optional[SaveStore] = None,
        config: Optional[EngineConfig] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.store = store
        self.config = config or EngineConfig()
        self.rng = random.Random(seed)

        self.history = HistoryManager(limit=self.config.history_limit)
        self.solver = AutoSolver()

        self._state: Optional[BoardState] = None
        self.level: Optional[Level] = None
        self.elapsed_time = 0
        self.remaining_special_actions = self.config.special_actions
        self._initial_columns: tuple[Pile, ...] = ()
        self._initial_stock: Pile = ()
        self._showing_hint: Optional[Hint] = None
        self.last_step: Optional[StepResult] = None

    # ----- Read access -----
    @property
    def state(self) -> Optional[BoardState]:
        return self._state

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo()

    @property
    def showing_hint(self) -> Optional[Hint]:
        return self._showing_hint

    def can_auto_complete(self) -> bool:
        return self._state is not None and can_auto_complete(self._state)

    # ----- Game lifecycle -----
    def new_game(self, level: Union[Level, str]) -> BoardState:
        """Shuffle and deal a new game, discarding the current one."""
        level = Level(level)
        board = new_board(level, self.rng, self.config.starting_score)
        self.level = level
        self._initial_columns = board.columns
        self._initial_stock = board.stock
        self._reset_session()
        self._state = board
        logger.info(f"New {level.value} game dealt")

        self._clear_store()
        self._autosave()
        return self._state

    def restart(self) -> CommandResult:
        """Start the current deal over from its opening layout."""
        if self._state is None:
            return CommandResult.failure(EngineError.NO_GAME, None, "No game in progress")
        self._reset_session()
        self._state = BoardState(
            columns=self._initial_columns,
            stock=self._initial_stock,
            score=self.config.starting_score,
        )
        logger.info("Deal restarted")
        self._autosave()
        return CommandResult.success(self._state)

    def tick(self, seconds: int = 1) -> int:
        """Advance the game clock; the caller owns the timer."""
        if self._state is not None and not self._state.won:
            self.elapsed_time += seconds
        return self.elapsed_time

    # ----- Commands -----
    def move(self, source: int, card_index: int, target: int) -> CommandResult:
        """Move the run starting at ``card_index`` in ``source`` onto ``target``."""
        blocked = self._check_playable()
        if blocked:
            return blocked
        if not is_legal_move(self._state, source, card_index, target):
            return CommandResult.failure(
                EngineError.ILLEGAL_MOVE,
                self._state,
                f"Cannot move card {card_index} of column {source} to column {target}",
            )
        move = Move(source=source, card_index=card_index, target=target)
        logger.debug(f"Move {move}")
        return self._commit(apply_move(self._state, move))

    def quick_move(self, source: int, card_index: int) -> CommandResult:
        """Move a run to the best column that accepts it."""
        blocked = self._check_playable()
        if blocked:
            return blocked
        target = quick_move_target(self._state, source, card_index)
        if target is None:
            return CommandResult.failure(
                EngineError.ILLEGAL_MOVE,
                self._state,
                f"No column accepts card {card_index} of column {source}",
            )
        return self.move(source, card_index, target)

    def flip(self, pile: int) -> CommandResult:
        """Turn over the face-down top card of ``pile``."""
        blocked = self._check_playable()
        if blocked:
            return blocked
        if not can_flip(self._state, pile):
            return CommandResult.failure(
                EngineError.ILLEGAL_MOVE,
                self._state,
                f"Column {pile} has no face-down top card",
            )
        logger.debug(f"Flip column {pile}")
        return self._commit(apply_flip(self._state, pile))

    def deal(self) -> CommandResult:
        """Deal a row from the stock."""
        blocked = self._check_playable()
        if blocked:
            return blocked
        if not can_deal(self._state):
            reason = "Stock is empty" if not self._state.stock else "Cannot deal onto an empty column"
            return CommandResult.failure(EngineError.EMPTY_STOCK, self._state, reason)
        logger.debug(f"Deal ({len(self._state.stock)} cards left in stock)")
        return self._commit(apply_deal(self._state))

    def undo(self) -> CommandResult:
        """Restore the board as it was before the last committed command."""
        previous = self.history.undo()
        if previous is None:
            return CommandResult.failure(EngineError.HISTORY_EMPTY, self._state, "Nothing to undo")
        self._state = previous
        self._showing_hint = None
        self.solver.reset()
        logger.debug(f"Undo ({len(self.history)} snapshots left)")
        self._autosave()
        return CommandResult.success(self._state)

    def use_special_action(self) -> CommandResult:
        """Spend one magic-wand charge."""
        blocked = self._check_playable()
        if blocked:
            return blocked
        if self.remaining_special_actions <= 0:
            return CommandResult.failure(
                EngineError.NO_SPECIAL_ACTIONS, self._state, "No magic wands left"
            )
        self.remaining_special_actions -= 1
        self._autosave()
        return CommandResult.success(self._state)

    # ----- Hints -----
    def request_hint(self) -> Hint:
        """Suggest a move.

        While a hint is on display the same hint is returned; the caller
        clears it with ``clear_hint()`` when its display time runs out.
        """
        if self._state is None:
            return NoMovesAvailable()
        if self._showing_hint is not None:
            return self._showing_hint
        hint = suggest(self._state)
        if not isinstance(hint, NoMovesAvailable):
            self._showing_hint = hint
        return hint

    def clear_hint(self) -> None:
        self._showing_hint = None

    # ----- Auto-solver -----
    def step(self) -> StepOutcome:
        """Run one auto-complete step."""
        if self._state is None:
            return StepOutcome.STALLED
        result = self.solver.step(self._state)
        self.last_step = result
        if result.state is not self._state:
            self._commit(result.state)
        return result.outcome

    # ----- Persistence -----
    def snapshot(self) -> GameSnapshot:
        """Current board plus session data."""
        if self._state is None or self.level is None:
            raise RuntimeError("No game in progress")
        return GameSnapshot(
            board=self._state,
            level=self.level,
            elapsed_time=self.elapsed_time,
            remaining_special_actions=self.remaining_special_actions,
            initial_columns=self._initial_columns,
            initial_stock=self._initial_stock,
        )

    def serialize(self) -> Dict[str, Any]:
        """Encode the current game as a save record."""
        return game_to_record(self.snapshot())

    def load_state(self, record: Any) -> CommandResult:
        """Replace the current game with one decoded from ``record``."""
        try:
            game = game_from_record(record)
        except InvalidRecordError as e:
            logger.warning(f"Rejected save record: {e}")
            return CommandResult.failure(EngineError.INVALID_RECORD, self._state, str(e))

        self.level = game.level
        self._initial_columns = game.initial_columns
        self._initial_stock = game.initial_stock
        self._reset_session()
        self.elapsed_time = game.elapsed_time
        self.remaining_special_actions = game.remaining_special_actions
        self._state = game.board
        logger.info(f"Loaded {game.level.value} game with score {game.board.score}")
        return CommandResult.success(self._state)

    def load_saved(self) -> CommandResult:
        """Resume the game held by the injected store."""
        record = self.store.load() if self.store is not None else None
        if record is None:
            return CommandResult.failure(EngineError.NO_GAME, self._state, "No saved game")
        return self.load_state(record)

    # ----- Internals -----
    def _reset_session(self) -> None:
        self.history.clear()
        self.solver.reset()
        self._showing_hint = None
        self.last_step = None
        self.elapsed_time = 0
        self.remaining_special_actions = self.config.special_actions

    def _check_playable(self) -> Optional[CommandResult]:
        if self._state is None:
            return CommandResult.failure(EngineError.NO_GAME, None, "No game in progress")
        if self._state.won:
            return CommandResult.failure(EngineError.ALREADY_WON, self._state, "Game already won")
        return None

    def _commit(self, new_state: BoardState) -> CommandResult:
        self.history.snapshot(self._state)
        self._state = new_state
        self._showing_hint = None
        if new_state.won:
            logger.info(f"Game won with score {new_state.score} in {new_state.move_count} moves")
        self._autosave()
        return CommandResult.success(new_state)

    def _autosave(self) -> None:
        if self.store is None or not self.config.autosave or self._state is None:
            return
        try:
            if self._state.won:
                self.store.clear()
            else:
                self.store.save(self.serialize())
        except StoreError as e:
            logger.warning(f"Autosave failed: {e}")

    def _clear_store(self) -> None:
        if self.store is None:
            return
        try:
            self.store.clear()
        except StoreError as e:
            logger.warning(f"Could not clear saved game: {e}")
