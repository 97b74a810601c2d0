"""Core rule constants and enumerations."""

from __future__ import annotations

from enum import Enum


class Suit(Enum):
    """Playing card suits."""

    SPADES = "S"
    HEARTS = "H"
    DIAMONDS = "D"
    CLUBS = "C"


class Level(Enum):
    """Difficulty levels (number of suits in the deck)."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


# Suits used at each level, in deck construction order
LEVEL_SUITS: dict[Level, tuple[Suit, ...]] = {
    Level.BEGINNER: (Suit.SPADES,),
    Level.INTERMEDIATE: (Suit.SPADES, Suit.HEARTS),
    Level.ADVANCED: (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS),
}

# Copies of each suit's 13 ranks at each level (always 104 cards)
LEVEL_REPETITIONS: dict[Level, int] = {
    Level.BEGINNER: 8,
    Level.INTERMEDIATE: 4,
    Level.ADVANCED: 2,
}

ACE = 1
KING = 13

RANK_LABELS = {
    1: "A",
    2: "2",
    3: "3",
    4: "4",
    5: "5",
    6: "6",
    7: "7",
    8: "8",
    9: "9",
    10: "10",
    11: "J",
    12: "Q",
    13: "K",
}

COLUMN_COUNT = 8
SET_SIZE = 13
DECK_SIZE = 104
SETS_TO_WIN = DECK_SIZE // SET_SIZE

# Initial column heights: first four columns get one extra card
INITIAL_COLUMN_HEIGHTS = (6, 6, 6, 6, 5, 5, 5, 5)

# Scoring
STARTING_SCORE = 500
MOVE_PENALTY = 1
DEAL_PENALTY = 5
COMPLETED_SET_BONUS = 100

HISTORY_LIMIT = 20
SPECIAL_ACTIONS = 4

SAVE_KEY = "spider-solitaire-save"
