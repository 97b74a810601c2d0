"""Tests for the auto-complete solver."""

from spiderdeck.simulation.movegen import Move
from spiderdeck.simulation.schema import COMPLETED_SET_BONUS, KING, SETS_TO_WIN, Suit
from spiderdeck.simulation.solver import (
    AutoSolver,
    SolverStatus,
    StepOutcome,
    can_auto_complete,
    find_relocation,
    solve_step,
)
from spiderdeck.simulation.state import BoardState, Card


def up(suit, rank):
    return Card(suit, rank, True)


def down(suit, rank):
    return Card(suit, rank, False)


def descending(suit, high, low):
    return [up(suit, r) for r in range(high, low - 1, -1)]


S, H = Suit.SPADES, Suit.HEARTS


def board(*columns, stock=(), foundation=(), score=500):
    piles = tuple(tuple(p) for p in columns)
    return BoardState(
        columns=piles + ((),) * (8 - len(piles)),
        stock=tuple(stock),
        foundation=tuple(foundation),
        completed_sets=len(foundation),
        score=score,
    )


class TestCanAutoComplete:
    """Tests for the terminal-phase check."""

    def test_terminal_phase(self):
        assert can_auto_complete(board([up(S, 5)], [up(H, 2)]))

    def test_stock_not_empty(self):
        assert not can_auto_complete(board([up(S, 5)], stock=[down(S, 1)]))

    def test_face_down_card(self):
        assert not can_auto_complete(board([down(S, 4), up(S, 5)]))

    def test_won(self):
        assert not can_auto_complete(board([up(S, 5)]).copy_with(won=True))


class TestFindRelocation:
    """Tests for relocation search."""

    def test_same_suit_only(self):
        """A rank fit of another suit is not an auto move."""
        state = board([up(H, 8)], [up(S, 7)])
        assert find_relocation(state) is None

    def test_first_source_then_first_target(self):
        state = board(
            descending(S, 9, 8),
            descending(S, 7, 6),
            [up(S, 8)],
        )
        assert find_relocation(state) == Move(source=1, card_index=0, target=0)

    def test_moves_whole_top_run(self):
        state = board([up(H, 10), up(S, 9)], [up(H, 2)] + descending(S, 8, 6))
        assert find_relocation(state) == Move(source=1, card_index=1, target=0)


class TestSolveStep:
    """Tests for solve_step."""

    def test_completed_set_removed(self):
        """A finished K..A is cleared with the bonus, even with stock left."""
        state = board([down(S, 3)] + descending(H, KING, 1), stock=[down(S, 1)])
        result = solve_step(state)

        assert result.outcome == StepOutcome.COMPLETED
        assert result.state.completed_sets == 1
        assert result.state.score == 500 + COMPLETED_SET_BONUS
        assert result.state.columns[0] == (up(S, 3),)
        assert result.state.foundation == (up(H, KING),)

    def test_one_set_per_step(self):
        state = board(descending(H, KING, 1), descending(S, KING, 1))
        first = solve_step(state)

        assert first.outcome == StepOutcome.COMPLETED
        assert first.state.completed_sets == 1
        assert first.state.columns[1] == state.columns[1]

    def test_relocation_counts_move_without_penalty(self):
        state = board(descending(S, 9, 8), descending(S, 7, 6))
        result = solve_step(state)

        assert result.outcome == StepOutcome.MOVED
        assert result.move == Move(1, 0, 0)
        assert result.state.columns[0] == tuple(descending(S, 9, 6))
        assert result.state.columns[1] == ()
        assert result.state.score == 500
        assert result.state.move_count == 1

    def test_stalled_outside_terminal_phase(self):
        state = board(descending(S, 9, 8), descending(S, 7, 6), stock=[down(S, 1)])
        result = solve_step(state)

        assert result.outcome == StepOutcome.STALLED
        assert result.state is state

    def test_stalled_without_same_suit_fit(self):
        state = board([up(S, 9)], [up(H, 8)])
        result = solve_step(state)

        assert result.outcome == StepOutcome.STALLED
        assert result.state is state

    def test_last_set_wins(self):
        markers = [up(S, KING)] * (SETS_TO_WIN - 1)
        state = board(descending(S, KING, 1), foundation=markers)
        result = solve_step(state)

        assert result.outcome == StepOutcome.WON
        assert result.state.won is True

    def test_already_won(self):
        state = board([up(S, 1)]).copy_with(won=True)
        result = solve_step(state)

        assert result.outcome == StepOutcome.WON
        assert result.state is state


class TestAutoSolver:
    """Tests for AutoSolver status tracking."""

    def test_starts_idle(self):
        assert AutoSolver().status == SolverStatus.IDLE

    def test_running_then_stalled(self):
        solver = AutoSolver()
        state = board(descending(S, 9, 8), descending(S, 7, 6))

        result = solver.step(state)
        assert solver.status == SolverStatus.RUNNING

        solver.step(result.state)
        assert solver.status == SolverStatus.STALLED

    def test_done_on_win(self):
        solver = AutoSolver()
        markers = [up(S, KING)] * (SETS_TO_WIN - 1)
        solver.step(board(descending(S, KING, 1), foundation=markers))
        assert solver.status == SolverStatus.DONE

    def test_reset(self):
        solver = AutoSolver()
        solver.step(board([up(S, 9)]))
        solver.reset()
        assert solver.status == SolverStatus.IDLE
