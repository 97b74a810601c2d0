"""Tests for terminal display."""

from spiderdeck.playtest.display import BoardRenderer, HintPresenter, format_card, format_time
from spiderdeck.simulation.hints import FlipHint, MoveHint, NoMovesAvailable
from spiderdeck.simulation.movegen import Move
from spiderdeck.simulation.schema import KING, Level, Suit
from spiderdeck.simulation.state import BoardState, Card
from spiderdeck.simulation.engine import SpiderEngine


def board(*columns, stock=(), **kwargs):
    piles = tuple(tuple(p) for p in columns)
    return BoardState(columns=piles + ((),) * (8 - len(piles)), stock=tuple(stock), **kwargs)


def test_format_card():
    assert format_card(Card(Suit.SPADES, KING)) == "K♠"
    assert format_card(Card(Suit.HEARTS, 10)) == "10♥"


def test_format_time():
    assert format_time(0) == "0:00"
    assert format_time(75) == "1:15"


class TestBoardRenderer:
    """Tests for BoardRenderer."""

    def test_new_game(self):
        engine = SpiderEngine(seed=2)
        state = engine.new_game(Level.BEGINNER)

        output = BoardRenderer().render(state, Level.BEGINNER, 65)

        assert "=== Spider (beginner) ===" in output
        assert "Time: 1:05" in output
        assert "Score: 500" in output
        assert "Stock: 8 deal(s)" in output
        assert "Sets: 0/8" in output
        assert "##" in output

    def test_hidden_time(self):
        output = BoardRenderer().render(board([Card(Suit.SPADES, 1, True)]), show_time=False)
        assert "Time:" not in output

    def test_debug_shows_face_down(self):
        state = board([Card(Suit.SPADES, 5), Card(Suit.SPADES, 1, True)])

        assert "[5♠]" in BoardRenderer().render(state, debug=True)
        assert "[5♠]" not in BoardRenderer().render(state)

    def test_partial_deal_counts(self):
        """A short stock still counts as one deal."""
        state = board(stock=[Card(Suit.SPADES, 1)] * 4)
        assert "Stock: 1 deal(s)" in BoardRenderer().render(state)

    def test_win_banner(self):
        state = board(score=1234, won=True, completed_sets=8)
        output = BoardRenderer().render(state)

        assert "You Win! Score: 1234" in output
        assert "Sets: 8/8" in output


class TestHintPresenter:
    """Tests for HintPresenter."""

    def test_move_hint(self):
        state = board([Card(Suit.SPADES, 7, True)], [Card(Suit.HEARTS, 8, True)])
        text = HintPresenter().present(MoveHint(Move(0, 0, 1), 5), state)
        assert text == "Hint: move 7♠ from column 1 to column 2"

    def test_move_to_empty(self):
        state = board([Card(Suit.SPADES, 7, True)])
        text = HintPresenter().present(MoveHint(Move(0, 0, 3), 15), state)
        assert text.endswith("to empty column 4")

    def test_flip_hint(self):
        text = HintPresenter().present(FlipHint(column=2), board())
        assert "column 3" in text

    def test_no_moves(self):
        assert "No moves" in HintPresenter().present(NoMovesAvailable(), board())
