"""Terminal display for board state and hints."""

from __future__ import annotations

import math
from typing import Optional

from spiderdeck.simulation.hints import FlipHint, Hint, MoveHint
from spiderdeck.simulation.schema import COLUMN_COUNT, RANK_LABELS, SETS_TO_WIN, Level
from spiderdeck.simulation.state import BoardState, Card

# Unicode card symbols
SUIT_SYMBOLS = {"H": "♥", "D": "♦", "C": "♣", "S": "♠"}

HIDDEN = "##"
CELL_WIDTH = 5


def format_card(card: Card) -> str:
    """Format card with unicode suit symbol."""
    suit_symbol = SUIT_SYMBOLS.get(card.suit.value, card.suit.value)
    return f"{RANK_LABELS[card.rank]}{suit_symbol}"


def format_time(seconds: int) -> str:
    """Format seconds as m:ss."""
    return f"{seconds // 60}:{seconds % 60:02d}"


class BoardRenderer:
    """Renders the tableau to text, one row per card depth."""

    def render(
        self,
        state: BoardState,
        level: Optional[Level] = None,
        elapsed_time: int = 0,
        show_time: bool = True,
        debug: bool = False,
    ) -> str:
        """Render the full board.

        Columns are numbered from 1 for players. With ``debug`` face-down
        cards are shown in brackets instead of ``##``.
        """
        lines: list[str] = []

        title = f"=== Spider ({level.value}) ===" if level else "=== Spider ==="
        lines.append(title)

        stats = [f"Score: {state.score}", f"Moves: {state.move_count}"]
        if show_time:
            stats.insert(0, f"Time: {format_time(elapsed_time)}")
        lines.append("  ".join(stats))

        deals_left = math.ceil(len(state.stock) / COLUMN_COUNT)
        foundation = " ".join(format_card(c) for c in state.foundation) or "-"
        lines.append(
            f"Stock: {deals_left} deal(s)  "
            f"Sets: {state.completed_sets}/{SETS_TO_WIN} [{foundation}]"
        )
        lines.append("")

        header = "".join(f"{i + 1:^{CELL_WIDTH}}" for i in range(len(state.columns)))
        lines.append(header)

        depth = max((len(p) for p in state.columns), default=0)
        for row in range(depth):
            cells: list[str] = []
            for pile in state.columns:
                if row < len(pile):
                    cells.append(f"{self._cell(pile[row], debug):^{CELL_WIDTH}}")
                else:
                    cells.append(" " * CELL_WIDTH)
            lines.append("".join(cells).rstrip())

        if state.won:
            lines.append("")
            lines.append(f"=== You Win! Score: {state.score} ===")

        return "\n".join(lines)

    def _cell(self, card: Card, debug: bool) -> str:
        if card.face_up:
            return format_card(card)
        if debug:
            return f"[{format_card(card)}]"
        return HIDDEN


class HintPresenter:
    """Describes hints in player terms (1-indexed columns)."""

    def present(self, hint: Hint, state: BoardState) -> str:
        if isinstance(hint, MoveHint):
            move = hint.move
            card = state.columns[move.source][move.card_index]
            target = state.columns[move.target]
            dest = f"column {move.target + 1}" if target else f"empty column {move.target + 1}"
            return (
                f"Hint: move {format_card(card)} from column {move.source + 1} "
                f"to {dest}"
            )
        if isinstance(hint, FlipHint):
            return f"Hint: turn over the top card of column {hint.column + 1}"
        return "No moves available. Try dealing from the stock."
