"""Shared board builders."""

from collections import Counter
from typing import Dict, List, Optional

import pytest

from spiderdeck.persistence.serialization import GameSnapshot, expected_composition, game_to_record
from spiderdeck.simulation.engine import SpiderEngine
from spiderdeck.simulation.schema import ACE, COLUMN_COUNT, KING, STARTING_SCORE, Level
from spiderdeck.simulation.state import BoardState, Card


def build_board(
    columns: Dict[int, List[Card]],
    level: Level = Level.BEGINNER,
    foundation: tuple = (),
    score: int = STARTING_SCORE,
    stock: Optional[List[Card]] = None,
) -> BoardState:
    """Board with the given columns; every card not placed goes to the stock.

    Pass ``stock=[]`` to require that the columns already use every card.
    """
    used: Counter = Counter()
    for pile in columns.values():
        for card in pile:
            used[(card.suit, card.rank)] += 1
    for marker in foundation:
        for rank in range(ACE, KING + 1):
            used[(marker.suit, rank)] += 1

    remaining = expected_composition(level) - used
    if stock is None:
        stock = [
            Card(suit, rank)
            for (suit, rank), count in sorted(remaining.items(), key=lambda kv: (kv[0][0].value, kv[0][1]))
            for _ in range(count)
        ]
    else:
        assert not remaining, f"cards left over: {remaining}"

    return BoardState(
        columns=tuple(tuple(columns.get(i, [])) for i in range(COLUMN_COUNT)),
        stock=tuple(stock),
        foundation=tuple(foundation),
        score=score,
        completed_sets=len(foundation),
    )


def load_board(engine: SpiderEngine, board: BoardState, level: Level = Level.BEGINNER):
    """Put ``board`` into ``engine`` through a save record."""
    snapshot = GameSnapshot(
        board=board,
        level=level,
        initial_columns=board.columns if not board.foundation else _fresh_columns(level),
        initial_stock=board.stock if not board.foundation else (),
    )
    result = engine.load_state(game_to_record(snapshot))
    assert result.ok, result.message
    return result


def _fresh_columns(level: Level):
    # Any full deck works as an opening layout for tests
    cards = [
        Card(suit, rank)
        for (suit, rank), count in expected_composition(level).items()
        for _ in range(count)
    ]
    return tuple(tuple(cards[i * 13:(i + 1) * 13]) for i in range(COLUMN_COUNT))


@pytest.fixture
def make_board():
    return build_board


@pytest.fixture
def loader():
    return load_board


@pytest.fixture
def engine():
    return SpiderEngine(seed=1234)
