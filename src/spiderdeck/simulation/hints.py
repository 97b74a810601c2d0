"""Heuristic hint generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from spiderdeck.simulation.movegen import Move
from spiderdeck.simulation.schema import KING
from spiderdeck.simulation.sequences import run_start
from spiderdeck.simulation.state import BoardState
from spiderdeck.simulation.validation import is_legal_move

# Hint weights
REVEAL_BONUS = 50
KING_TO_EMPTY_BONUS = 30
EMPTY_TARGET_BONUS = 10
PER_CARD_BONUS = 5
KING_RUN_PER_CARD_BONUS = 10
SAME_SUIT_BONUS = 20


@dataclass(frozen=True)
class MoveHint:
    """Suggested run move and its heuristic score."""

    move: Move
    score: int


@dataclass(frozen=True)
class FlipHint:
    """Suggest turning over the face-down top card of a column."""

    column: int


@dataclass(frozen=True)
class NoMovesAvailable:
    """Nothing to suggest."""


Hint = Union[MoveHint, FlipHint, NoMovesAvailable]


def enumerate_moves(state: BoardState) -> list[Move]:
    """All legal moves of each column's full top run.

    Ordered by ascending source, then ascending target.
    """
    moves: list[Move] = []
    for source, pile in enumerate(state.columns):
        start = run_start(pile)
        if start < 0:
            continue
        for target in range(len(state.columns)):
            if is_legal_move(state, source, start, target):
                moves.append(Move(source=source, card_index=start, target=target))
    return moves


def score_move(state: BoardState, move: Move) -> int:
    """Additive heuristic score for a candidate move."""
    source = state.columns[move.source]
    target = state.columns[move.target]
    run = source[move.card_index:]
    bottom = run[0]
    length = len(run)
    score = 0

    # Lifting the run uncovers a hidden card
    if move.card_index > 0 and not source[move.card_index - 1].face_up:
        score += REVEAL_BONUS

    if not target:
        score += KING_TO_EMPTY_BONUS if bottom.rank == KING else EMPTY_TARGET_BONUS

    score += PER_CARD_BONUS * length

    if bottom.rank == KING and length > 1:
        score += KING_RUN_PER_CARD_BONUS * length

    if target and target[-1].suit == bottom.suit:
        score += SAME_SUIT_BONUS

    return score


def best_move(state: BoardState) -> Optional[MoveHint]:
    """Highest-scoring move; the first one enumerated wins a tie."""
    best: Optional[MoveHint] = None
    for move in enumerate_moves(state):
        score = score_move(state, move)
        if best is None or score > best.score:
            best = MoveHint(move=move, score=score)
    return best


def first_flippable(state: BoardState) -> Optional[int]:
    """Lowest column index whose top card is face-down."""
    for i, pile in enumerate(state.columns):
        if pile and not pile[-1].face_up:
            return i
    return None


def suggest(state: BoardState) -> Hint:
    """Best move, else a flip suggestion, else NoMovesAvailable."""
    hint = best_move(state)
    if hint is not None:
        return hint
    column = first_flippable(state)
    if column is not None:
        return FlipHint(column=column)
    return NoMovesAvailable()
