"""Move definitions and state transitions.

Every function here is pure: it takes a BoardState and returns a new one.
Callers are expected to check legality first (see validation.py).
"""

from dataclasses import dataclass
from typing import Optional

from spiderdeck.simulation.schema import COLUMN_COUNT, KING
from spiderdeck.simulation.scoring import charge_deal, charge_move, credit_sets
from spiderdeck.simulation.sequences import (
    draggable_run,
    expose_top,
    remove_completed_sets,
)
from spiderdeck.simulation.state import BoardState
from spiderdeck.simulation.validation import accepts


@dataclass(frozen=True)
class Move:
    """Move the cards from ``card_index`` up in ``source`` onto ``target``."""

    source: int
    card_index: int
    target: int


def relocate(state: BoardState, move: Move) -> BoardState:
    """Transfer a run between columns without any scoring.

    Builds both new piles first and swaps them into the board together; the
    card left on top of the source is turned face-up.
    """
    source_pile = state.columns[move.source]
    run = source_pile[move.card_index:]
    new_source = expose_top(source_pile[:move.card_index])
    new_target = state.columns[move.target] + run
    return state.replace_columns({move.source: new_source, move.target: new_target})


def settle(state: BoardState, only_first: bool = False) -> BoardState:
    """Remove completed sets and credit them."""
    columns, markers = remove_completed_sets(state.columns, only_first=only_first)
    if not markers:
        return state
    return credit_sets(state.copy_with(columns=columns), markers)


def apply_move(state: BoardState, move: Move) -> BoardState:
    """Apply a player move: relocate, charge, then clear completed sets."""
    return settle(charge_move(relocate(state, move)))


def can_flip(state: BoardState, pile: int) -> bool:
    """Only a face-down top card may be turned over."""
    if not 0 <= pile < len(state.columns):
        return False
    cards = state.columns[pile]
    return bool(cards) and not cards[-1].face_up


def apply_flip(state: BoardState, pile: int) -> BoardState:
    """Turn the top card of ``pile`` face-up."""
    flipped = state.replace_columns({pile: expose_top(state.columns[pile])})
    return settle(flipped)


def can_deal(state: BoardState) -> bool:
    """Dealing needs cards in the stock and no empty column."""
    return bool(state.stock) and all(state.columns)


def apply_deal(state: BoardState) -> BoardState:
    """Deal one face-up card from the end of the stock onto each column.

    The last deal may be short; columns past the stock's end get nothing.
    """
    stock = list(state.stock)
    columns = list(state.columns)
    for i in range(COLUMN_COUNT):
        if not stock:
            break
        card = stock.pop().flipped(True)
        columns[i] = columns[i] + (card,)
    dealt = state.copy_with(columns=tuple(columns), stock=tuple(stock))
    return settle(charge_deal(dealt))


def quick_move_target(state: BoardState, source: int, card_index: int) -> Optional[int]:
    """Pick a destination for a click-to-move on a run.

    Preference: same-suit fit, then any rank fit, then a King to an empty
    column, then anything to an empty column. Lower column indices win ties.

    Returns:
        Target column index, or None if nothing accepts the run
    """
    if not 0 <= source < len(state.columns):
        return None
    pile = state.columns[source]
    if card_index not in draggable_run(pile):
        return None
    bottom = pile[card_index]

    best_target: Optional[int] = None
    best_score = -1
    for i, target in enumerate(state.columns):
        if i == source or not accepts(target, bottom):
            continue
        if not target:
            score = 1 if bottom.rank == KING else 0
        elif target[-1].suit == bottom.suit:
            score = 10
        else:
            score = 5
        if score > best_score:
            best_target, best_score = i, score

    return best_target
