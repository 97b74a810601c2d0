"""Bounded undo history."""

from collections import deque
from typing import Optional

from spiderdeck.simulation.schema import HISTORY_LIMIT
from spiderdeck.simulation.state import BoardState


class HistoryManager:
    """
    Stack of whole-board snapshots. Push the state before each committed
    command; undo pops the most recent one. The oldest entry is dropped once
    the limit is reached.

    BoardState is immutable, so storing the object itself is a deep snapshot.
    """

    def __init__(self, limit: int = HISTORY_LIMIT):
        self.limit = limit
        self._stack: deque[BoardState] = deque(maxlen=limit)

    def snapshot(self, state: BoardState) -> None:
        self._stack.append(state)

    def can_undo(self) -> bool:
        return len(self._stack) > 0

    def undo(self) -> Optional[BoardState]:
        """Pop the latest snapshot, or None when empty."""
        if self._stack:
            return self._stack.pop()
        return None

    def clear(self) -> None:
        self._stack.clear()

    def __len__(self) -> int:
        return len(self._stack)
