"""Terminal-phase auto-completion.

Once the stock is empty and every card is face-up, the remaining play is
mechanical: clear finished sets and merge same-suit runs. The solver exposes
that as a single-step function so the caller controls pacing and may stop
between any two steps.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from spiderdeck.simulation.movegen import Move, relocate, settle
from spiderdeck.simulation.scoring import count_relocation
from spiderdeck.simulation.sequences import find_completed_sets, run_start
from spiderdeck.simulation.state import BoardState

logger = logging.getLogger(__name__)


class SolverStatus(Enum):
    """Auto-solver lifecycle."""

    IDLE = "idle"
    RUNNING = "running"
    STALLED = "stalled"
    DONE = "done"


class StepOutcome(Enum):
    """Result of one solver step."""

    MOVED = "moved"
    COMPLETED = "completed"
    STALLED = "stalled"
    WON = "won"


@dataclass(frozen=True)
class StepResult:
    """Outcome of a step plus the board after it (unchanged unless committed)."""

    outcome: StepOutcome
    state: BoardState
    move: Optional[Move] = None


def can_auto_complete(state: BoardState) -> bool:
    """Terminal phase: stock exhausted, nothing face-down, game not won."""
    return not state.won and not state.stock and state.all_face_up()


def find_relocation(state: BoardState) -> Optional[Move]:
    """First run (ascending source) that fits a same-suit target (ascending)."""
    columns = state.columns
    for source, pile in enumerate(columns):
        start = run_start(pile)
        if start < 0:
            continue
        bottom = pile[start]
        for target, dest in enumerate(columns):
            if target == source or not dest:
                continue
            top = dest[-1]
            if top.suit == bottom.suit and top.rank == bottom.rank + 1:
                return Move(source=source, card_index=start, target=target)
    return None


def solve_step(state: BoardState) -> StepResult:
    """Run one auto-complete step.

    1. Remove the first completed set found (lowest column index).
    2. Otherwise relocate the first run that extends a same-suit run.
    3. Otherwise report STALLED and leave the board untouched.
    """
    if state.won:
        return StepResult(StepOutcome.WON, state)
    # Finished sets are cleared in any phase
    if find_completed_sets(state.columns):
        new_state = settle(state, only_first=True)
        outcome = StepOutcome.WON if new_state.won else StepOutcome.COMPLETED
        return StepResult(outcome, new_state)

    if not can_auto_complete(state):
        return StepResult(StepOutcome.STALLED, state)

    move = find_relocation(state)
    if move is None:
        return StepResult(StepOutcome.STALLED, state)

    # A set finished by this relocation is cleared by the next step
    return StepResult(StepOutcome.MOVED, count_relocation(relocate(state, move)), move)


class AutoSolver:
    """Tracks auto-solver status across caller-driven steps."""

    def __init__(self) -> None:
        self.status = SolverStatus.IDLE

    def reset(self) -> None:
        self.status = SolverStatus.IDLE

    def step(self, state: BoardState) -> StepResult:
        """Advance one step and update the status."""
        if self.status in (SolverStatus.IDLE, SolverStatus.STALLED):
            self.status = SolverStatus.RUNNING

        result = solve_step(state)

        if result.outcome == StepOutcome.WON:
            self.status = SolverStatus.DONE
        elif result.outcome == StepOutcome.STALLED:
            self.status = SolverStatus.STALLED
            logger.debug("Auto-solver stalled")
        else:
            logger.debug(f"Auto-solver step: {result.outcome.value}")
        return result
