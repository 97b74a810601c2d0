"""Deck construction and the opening deal."""

from __future__ import annotations

import random
from typing import Optional

from spiderdeck.simulation.schema import (
    ACE,
    INITIAL_COLUMN_HEIGHTS,
    KING,
    LEVEL_REPETITIONS,
    LEVEL_SUITS,
    STARTING_SCORE,
    Level,
)
from spiderdeck.simulation.state import BoardState, Card, Pile


def build_deck(level: Level) -> list[Card]:
    """Build the unshuffled 104-card deck for a difficulty level.

    Cards are produced face-down, repetition by repetition, suit by suit,
    Ace to King.
    """
    deck: list[Card] = []
    for _ in range(LEVEL_REPETITIONS[level]):
        for suit in LEVEL_SUITS[level]:
            for rank in range(ACE, KING + 1):
                deck.append(Card(suit=suit, rank=rank))
    return deck


def shuffled_deck(level: Level, rng: Optional[random.Random] = None) -> list[Card]:
    """Build and shuffle a deck."""
    rng = rng or random.Random()
    deck = build_deck(level)
    rng.shuffle(deck)
    return deck


def deal_columns(deck: list[Card]) -> tuple[tuple[Pile, ...], Pile]:
    """Lay out the opening columns from the front of the deck.

    Returns (columns, stock). Only the top card of each column is face-up;
    everything left over becomes the stock.
    """
    columns: list[Pile] = []
    idx = 0
    for height in INITIAL_COLUMN_HEIGHTS:
        pile = [card.flipped(False) for card in deck[idx:idx + height]]
        pile[-1] = pile[-1].flipped(True)
        columns.append(tuple(pile))
        idx += height
    stock = tuple(card.flipped(False) for card in deck[idx:])
    return tuple(columns), stock


def new_board(
    level: Level,
    rng: Optional[random.Random] = None,
    starting_score: int = STARTING_SCORE,
) -> BoardState:
    """Create a freshly dealt board."""
    columns, stock = deal_columns(shuffled_deck(level, rng))
    return BoardState(columns=columns, stock=stock, score=starting_score)
