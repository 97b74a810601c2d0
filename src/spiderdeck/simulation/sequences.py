"""Run scanning and completed-set detection."""

from __future__ import annotations

from typing import Sequence

from spiderdeck.simulation.schema import SET_SIZE
from spiderdeck.simulation.state import Card, Pile


def follows(lower: Card, upper: Card) -> bool:
    """True if ``upper`` may sit on ``lower`` inside a run."""
    return (
        lower.face_up
        and upper.face_up
        and lower.suit == upper.suit
        and lower.rank == upper.rank + 1
    )


def draggable_run(pile: Sequence[Card]) -> list[int]:
    """Indices of the movable run at the top of a pile, bottom first.

    The scan starts at the top card and walks down while each card is
    face-up and continues the same-suit, descending-by-one sequence.
    A face-up top card alone is a 1-card run; a face-down top (or an empty
    pile) gives no run.
    """
    indices: list[int] = []
    for i in range(len(pile) - 1, -1, -1):
        if not pile[i].face_up:
            break
        indices.insert(0, i)
        if i == 0 or not follows(pile[i - 1], pile[i]):
            break
    return indices


def run_start(pile: Sequence[Card]) -> int:
    """Index of the bottom card of the top run, or -1 if there is none."""
    run = draggable_run(pile)
    return run[0] if run else -1


def is_run(cards: Sequence[Card]) -> bool:
    """True for a non-empty face-up same-suit descending-by-one sequence."""
    if not cards or not cards[0].face_up:
        return False
    return all(follows(cards[i], cards[i + 1]) for i in range(len(cards) - 1))


def is_completed_set(cards: Sequence[Card]) -> bool:
    """True iff ``cards`` is exactly K..A of one suit, all face-up."""
    if len(cards) != SET_SIZE:
        return False
    suit = cards[0].suit
    for i, card in enumerate(cards):
        if not card.face_up or card.suit != suit or card.rank != SET_SIZE - i:
            return False
    return True


def find_completed_sets(columns: Sequence[Pile]) -> list[int]:
    """Indices of columns whose top 13 cards form a completed set."""
    return [
        i for i, pile in enumerate(columns)
        if len(pile) >= SET_SIZE and is_completed_set(pile[-SET_SIZE:])
    ]


def expose_top(pile: Pile) -> Pile:
    """Turn the top card face-up if it is face-down."""
    if pile and not pile[-1].face_up:
        return pile[:-1] + (pile[-1].flipped(True),)
    return pile


def strip_completed_set(pile: Pile) -> tuple[Pile, Card]:
    """Remove the completed set on top of ``pile``.

    Returns the remaining pile (new top exposed) and the set's King, which
    is kept as the foundation marker.
    """
    removed = pile[-SET_SIZE:]
    return expose_top(pile[:-SET_SIZE]), removed[0]


def remove_completed_sets(
    columns: tuple[Pile, ...],
    only_first: bool = False,
) -> tuple[tuple[Pile, ...], list[Card]]:
    """Remove completed sets from every column in one pass.

    Returns the new columns and the foundation markers in column order.
    With ``only_first`` a single set (lowest column index) is removed.
    """
    found = find_completed_sets(columns)
    if only_first:
        found = found[:1]
    if not found:
        return columns, []

    new_columns = list(columns)
    markers: list[Card] = []
    for i in found:
        new_columns[i], marker = strip_completed_set(columns[i])
        markers.append(marker)
    return tuple(new_columns), markers
