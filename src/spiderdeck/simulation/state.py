"""Immutable board state representation."""

from dataclasses import dataclass

from spiderdeck.simulation.schema import RANK_LABELS, SET_SIZE, Suit

Pile = tuple["Card", ...]


@dataclass(frozen=True)
class Card:
    """Immutable playing card.

    Flipping a card produces a new Card; nothing ever mutates one in place.
    """

    suit: Suit
    rank: int
    face_up: bool = False

    def flipped(self, face_up: bool = True) -> "Card":
        """Return a copy of this card with the given orientation."""
        if self.face_up == face_up:
            return self
        return Card(suit=self.suit, rank=self.rank, face_up=face_up)

    def __str__(self) -> str:
        return f"{RANK_LABELS[self.rank]}{self.suit.value}"


@dataclass(frozen=True)
class BoardState:
    """Immutable board state.

    All nested structures are tuples, so a BoardState can be stored in the
    undo history as-is and shared with renderers without copying.
    """

    columns: tuple[Pile, ...]
    stock: Pile
    foundation: Pile = ()
    score: int = 0
    completed_sets: int = 0
    move_count: int = 0
    won: bool = False

    def copy_with(self, **changes) -> "BoardState":  # type: ignore
        """Create a new state with specified changes."""
        current = {
            "columns": self.columns,
            "stock": self.stock,
            "foundation": self.foundation,
            "score": self.score,
            "completed_sets": self.completed_sets,
            "move_count": self.move_count,
            "won": self.won,
        }
        current.update(changes)
        return BoardState(**current)

    def replace_columns(self, updates: dict[int, Pile]) -> "BoardState":
        """Return a new state with the given column slots swapped out."""
        columns = tuple(
            updates.get(i, pile) for i, pile in enumerate(self.columns)
        )
        return self.copy_with(columns=columns)

    def card_count(self) -> int:
        """Cards accounted for on the board, counting each completed set as 13."""
        return (
            sum(len(pile) for pile in self.columns)
            + len(self.stock)
            + SET_SIZE * len(self.foundation)
        )

    def all_face_up(self) -> bool:
        """True when no column holds a face-down card."""
        return all(card.face_up for pile in self.columns for card in pile)
