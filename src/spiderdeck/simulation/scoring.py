"""Score and move-count bookkeeping."""

from spiderdeck.simulation.schema import (
    COMPLETED_SET_BONUS,
    DEAL_PENALTY,
    MOVE_PENALTY,
    SETS_TO_WIN,
)
from spiderdeck.simulation.state import BoardState, Card


def adjust_score(score: int, delta: int) -> int:
    """Apply ``delta``; the score never drops below zero."""
    return max(0, score + delta)


def charge_move(state: BoardState) -> BoardState:
    """Account for a player run move."""
    return state.copy_with(
        score=adjust_score(state.score, -MOVE_PENALTY),
        move_count=state.move_count + 1,
    )


def charge_deal(state: BoardState) -> BoardState:
    """Account for a stock deal."""
    return state.copy_with(
        score=adjust_score(state.score, -DEAL_PENALTY),
        move_count=state.move_count + 1,
    )


def count_relocation(state: BoardState) -> BoardState:
    """Account for an auto-solver relocation (counted, not charged)."""
    return state.copy_with(move_count=state.move_count + 1)


def credit_sets(state: BoardState, markers: list[Card]) -> BoardState:
    """Add removed sets to the foundation, award the bonus, check for a win."""
    if not markers:
        return state
    completed = state.completed_sets + len(markers)
    return state.copy_with(
        foundation=state.foundation + tuple(markers),
        completed_sets=completed,
        score=adjust_score(state.score, COMPLETED_SET_BONUS * len(markers)),
        won=state.won or completed >= SETS_TO_WIN,
    )
