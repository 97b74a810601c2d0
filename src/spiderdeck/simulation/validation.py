"""Move legality checks."""

from typing import Sequence

from spiderdeck.simulation.sequences import draggable_run, is_run
from spiderdeck.simulation.state import BoardState, Card


def accepts(target: Sequence[Card], bottom: Card) -> bool:
    """True if a run whose bottom card is ``bottom`` may land on ``target``.

    Empty columns take anything. Otherwise the target's top must be face-up
    and exactly one rank higher; suit does not matter for legality.
    """
    if not target:
        return True
    top = target[-1]
    return top.face_up and top.rank == bottom.rank + 1


def can_move(run: Sequence[Card], target: Sequence[Card]) -> bool:
    """Check whether ``run`` is a valid run that ``target`` accepts."""
    if not is_run(run):
        return False
    return accepts(target, run[0])


def is_legal_move(
    state: BoardState,
    source: int,
    card_index: int,
    target: int,
) -> bool:
    """Validate a move of the cards from ``card_index`` up in ``source``.

    Args:
        state: Current board
        source: Column the run is lifted from
        card_index: Index of the run's bottom card within ``source``
        target: Column the run is dropped on

    Returns:
        True if the move is legal
    """
    columns = state.columns
    if source == target:
        return False
    if not (0 <= source < len(columns) and 0 <= target < len(columns)):
        return False
    pile = columns[source]
    if card_index not in draggable_run(pile):
        return False
    return can_move(pile[card_index:], columns[target])
