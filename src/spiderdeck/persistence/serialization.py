"""JSON-compatible save records for a game in progress."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from spiderdeck.simulation.schema import (
    ACE,
    COLUMN_COUNT,
    DECK_SIZE,
    KING,
    LEVEL_REPETITIONS,
    LEVEL_SUITS,
    SET_SIZE,
    SETS_TO_WIN,
    SPECIAL_ACTIONS,
    Level,
    Suit,
)
from spiderdeck.simulation.state import BoardState, Card, Pile

SCHEMA_VERSION = "1.0"

REQUIRED_KEYS = (
    "columns",
    "stock",
    "foundation",
    "score",
    "completed_sets",
    "move_count",
    "level",
    "elapsed_time",
    "remaining_special_actions",
    "initial_deal",
)


class InvalidRecordError(ValueError):
    """A save record is malformed or describes an impossible board."""


def utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class GameSnapshot:
    """Everything needed to resume a game: the board plus session data."""

    board: BoardState
    level: Level
    elapsed_time: int = 0
    remaining_special_actions: int = SPECIAL_ACTIONS
    initial_columns: tuple[Pile, ...] = ()
    initial_stock: Pile = ()
    saved_at: Optional[datetime] = None


# --- encoding ---

def card_to_dict(card: Card) -> Dict[str, Any]:
    """Convert Card to dict."""
    return {"suit": card.suit.name, "rank": card.rank, "face_up": card.face_up}


def _pile_to_list(pile: Pile) -> List[Dict[str, Any]]:
    return [card_to_dict(c) for c in pile]


def game_to_record(game: GameSnapshot, saved_at: Optional[datetime] = None) -> Dict[str, Any]:
    """Convert a GameSnapshot to a JSON-serializable record."""
    stamp = saved_at or game.saved_at or utc_now()
    board = game.board
    return {
        "schema_version": SCHEMA_VERSION,
        "columns": [_pile_to_list(p) for p in board.columns],
        "stock": _pile_to_list(board.stock),
        "foundation": _pile_to_list(board.foundation),
        "score": board.score,
        "completed_sets": board.completed_sets,
        "move_count": board.move_count,
        "level": game.level.value,
        "elapsed_time": game.elapsed_time,
        "remaining_special_actions": game.remaining_special_actions,
        "initial_deal": {
            "columns": [_pile_to_list(p) for p in game.initial_columns],
            "stock": _pile_to_list(game.initial_stock),
        },
        "saved_at": stamp.isoformat(),
    }


def record_to_json(record: Dict[str, Any], indent: Optional[int] = None) -> str:
    """Serialize a record to a JSON string."""
    return json.dumps(record, indent=indent)


# --- decoding ---

def record_from_json(json_str: str) -> Dict[str, Any]:
    """Parse a JSON string into a record dict."""
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise InvalidRecordError(f"Not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise InvalidRecordError("Record must be a JSON object")
    return data


def _require_int(data: Dict[str, Any], key: str, minimum: int = 0) -> int:
    value = data[key]
    # bool is an int subclass; reject it explicitly
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidRecordError(f"{key} must be an integer")
    if value < minimum:
        raise InvalidRecordError(f"{key} must be >= {minimum}")
    return value


def card_from_dict(data: Any) -> Card:
    """Create Card from dict."""
    if not isinstance(data, dict):
        raise InvalidRecordError(f"Card must be an object, got {data!r}")
    try:
        suit = Suit[data["suit"]]
        rank = data["rank"]
        face_up = data["face_up"]
    except (KeyError, TypeError) as e:
        raise InvalidRecordError(f"Bad card {data!r}") from e
    if not isinstance(rank, int) or isinstance(rank, bool) or not ACE <= rank <= KING:
        raise InvalidRecordError(f"Bad rank in card {data!r}")
    if not isinstance(face_up, bool):
        raise InvalidRecordError(f"Bad face_up flag in card {data!r}")
    return Card(suit=suit, rank=rank, face_up=face_up)


def _pile_from_list(data: Any, name: str) -> Pile:
    if not isinstance(data, list):
        raise InvalidRecordError(f"{name} must be a list")
    return tuple(card_from_dict(c) for c in data)


def _columns_from_list(data: Any, name: str) -> tuple[Pile, ...]:
    if not isinstance(data, list) or len(data) != COLUMN_COUNT:
        raise InvalidRecordError(f"{name} must hold exactly {COLUMN_COUNT} columns")
    return tuple(_pile_from_list(p, f"{name}[{i}]") for i, p in enumerate(data))


def _parse_saved_at(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # Epoch milliseconds
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise InvalidRecordError(f"Bad saved_at {value!r}") from e
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError as e:
            raise InvalidRecordError(f"Bad saved_at {value!r}") from e
    raise InvalidRecordError(f"Bad saved_at {value!r}")


def expected_composition(level: Level) -> Counter:
    """Count of each (suit, rank) in a full deck for ``level``."""
    reps = LEVEL_REPETITIONS[level]
    return Counter({
        (suit, rank): reps
        for suit in LEVEL_SUITS[level]
        for rank in range(ACE, KING + 1)
    })


def check_composition(
    level: Level,
    piles: List[Pile],
    foundation: Pile = (),
    label: str = "board",
) -> None:
    """Verify the cards in play make up exactly one deck for ``level``.

    Each foundation marker stands for a whole King-to-Ace set of its suit.

    Raises:
        InvalidRecordError: If any card is missing, extra or off-level
    """
    total = sum(len(p) for p in piles) + SET_SIZE * len(foundation)
    if total != DECK_SIZE:
        raise InvalidRecordError(f"{label} holds {total} cards, expected {DECK_SIZE}")

    seen: Counter = Counter()
    for pile in piles:
        for card in pile:
            seen[(card.suit, card.rank)] += 1
    for marker in foundation:
        for rank in range(ACE, KING + 1):
            seen[(marker.suit, rank)] += 1

    if seen != expected_composition(level):
        raise InvalidRecordError(f"{label} cards do not match a {level.value} deck")


def check_layout(columns: tuple[Pile, ...], stock: Pile, foundation: Pile) -> None:
    """Reject card orientations no sequence of commands can produce.

    Raises:
        InvalidRecordError: On a non-King foundation marker, a face-up stock
            card, or a face-down card above a face-up one in a column
    """
    for marker in foundation:
        if marker.rank != KING:
            raise InvalidRecordError(f"Foundation marker {marker} is not a King")
    if any(card.face_up for card in stock):
        raise InvalidRecordError("Stock cards must be face-down")
    for i, pile in enumerate(columns):
        for lower, upper in zip(pile, pile[1:]):
            if lower.face_up and not upper.face_up:
                raise InvalidRecordError(f"Column {i} has a face-down card above a face-up one")


def game_from_record(record: Any) -> GameSnapshot:
    """Validate a record and rebuild the GameSnapshot.

    Raises:
        InvalidRecordError: On missing keys, bad types, broken card counts
            or an impossible card layout
    """
    if not isinstance(record, dict):
        raise InvalidRecordError("Record must be a dict")
    missing = [k for k in REQUIRED_KEYS if k not in record]
    if missing:
        raise InvalidRecordError(f"Missing keys: {', '.join(missing)}")

    try:
        level = Level(record["level"])
    except (ValueError, TypeError) as e:
        raise InvalidRecordError(f"Unknown level {record['level']!r}") from e

    columns = _columns_from_list(record["columns"], "columns")
    stock = _pile_from_list(record["stock"], "stock")
    foundation = _pile_from_list(record["foundation"], "foundation")

    score = _require_int(record, "score")
    completed_sets = _require_int(record, "completed_sets")
    move_count = _require_int(record, "move_count")
    elapsed_time = _require_int(record, "elapsed_time")
    special_actions = _require_int(record, "remaining_special_actions")

    if completed_sets > SETS_TO_WIN:
        raise InvalidRecordError(f"completed_sets must be <= {SETS_TO_WIN}")
    if completed_sets != len(foundation):
        raise InvalidRecordError("completed_sets does not match foundation size")

    check_composition(level, list(columns) + [stock], foundation)
    check_layout(columns, stock, foundation)

    initial = record["initial_deal"]
    if not isinstance(initial, dict) or "columns" not in initial or "stock" not in initial:
        raise InvalidRecordError("initial_deal must hold columns and stock")
    initial_columns = _columns_from_list(initial["columns"], "initial_deal.columns")
    initial_stock = _pile_from_list(initial["stock"], "initial_deal.stock")
    check_composition(level, list(initial_columns) + [initial_stock], label="initial_deal")

    board = BoardState(
        columns=columns,
        stock=stock,
        foundation=foundation,
        score=score,
        completed_sets=completed_sets,
        move_count=move_count,
        won=completed_sets >= SETS_TO_WIN,
    )
    return GameSnapshot(
        board=board,
        level=level,
        elapsed_time=elapsed_time,
        remaining_special_actions=special_actions,
        initial_columns=initial_columns,
        initial_stock=initial_stock,
        saved_at=_parse_saved_at(record.get("saved_at")),
    )
