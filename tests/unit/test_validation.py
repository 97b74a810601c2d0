"""Tests for move legality."""

from spiderdeck.simulation.schema import KING, Suit
from spiderdeck.simulation.state import BoardState, Card
from spiderdeck.simulation.validation import accepts, can_move, is_legal_move


def up(suit, rank):
    return Card(suit, rank, True)


def down(suit, rank):
    return Card(suit, rank, False)


S, H = Suit.SPADES, Suit.HEARTS


def board(*columns):
    piles = tuple(tuple(p) for p in columns)
    return BoardState(columns=piles + ((),) * (8 - len(piles)), stock=())


class TestAccepts:
    """Tests for target acceptance."""

    def test_empty_target_takes_anything(self):
        assert accepts((), up(S, 4))
        assert accepts((), up(S, KING))

    def test_one_rank_higher_any_suit(self):
        assert accepts((up(H, 8),), up(S, 7))
        assert accepts((up(S, 8),), up(S, 7))

    def test_wrong_rank(self):
        assert not accepts((up(S, 9),), up(S, 7))
        assert not accepts((up(S, 7),), up(S, 7))

    def test_face_down_top_rejected(self):
        assert not accepts((down(S, 8),), up(S, 7))

    def test_nothing_goes_on_ace(self):
        assert not accepts((up(S, 1),), up(S, KING))


def test_can_move_needs_valid_run():
    """A broken sequence cannot be moved as a unit."""
    assert can_move((up(S, 7), up(S, 6)), (up(H, 8),))
    assert not can_move((up(S, 7), up(H, 6)), (up(H, 8),))
    assert not can_move((), (up(H, 8),))


class TestIsLegalMove:
    """Tests for is_legal_move."""

    def test_run_to_matching_column(self):
        state = board([down(S, 2), up(S, 7), up(S, 6)], [up(H, 8)])
        assert is_legal_move(state, 0, 1, 1)

    def test_sub_run_may_move(self):
        """Any card inside the top run may be picked up."""
        state = board([up(S, 7), up(S, 6)], [up(H, 7)])
        assert is_legal_move(state, 0, 1, 1)

    def test_card_below_run_cannot_move(self):
        state = board([up(H, 9), up(S, 7), up(S, 6)], [up(H, 10)])
        assert not is_legal_move(state, 0, 0, 1)

    def test_face_down_card_cannot_move(self):
        state = board([down(S, 7)], [])
        assert not is_legal_move(state, 0, 0, 1)

    def test_same_column(self):
        state = board([up(S, 7)])
        assert not is_legal_move(state, 0, 0, 0)

    def test_out_of_range(self):
        state = board([up(S, 7)])
        assert not is_legal_move(state, 0, 0, 8)
        assert not is_legal_move(state, -1, 0, 1)
        assert not is_legal_move(state, 0, 5, 1)

    def test_empty_source(self):
        state = board([], [up(S, 7)])
        assert not is_legal_move(state, 0, 0, 1)
