"""Tests for terminal input parsing."""

from spiderdeck.playtest.input import HumanPlayer, InputResult, parse_command


class TestParseCommand:
    """Tests for parse_command."""

    def test_move_two_args(self):
        """Columns are converted to 0-based."""
        result = parse_command("m 1 3")
        assert result == InputResult(command="m", args=(0, 2))

    def test_move_three_args(self):
        assert parse_command("m 2 4 5").args == (1, 3, 4)

    def test_alias(self):
        assert parse_command("DEAL").command == "d"
        assert parse_command("flip 8").args == (7,)

    def test_quit(self):
        for raw in ("q", "quit", "exit"):
            assert parse_command(raw).quit

    def test_empty_line(self):
        assert parse_command("   ").error

    def test_unknown_command(self):
        assert "Unknown" in parse_command("jump").error

    def test_wrong_arg_count(self):
        assert parse_command("f").error
        assert parse_command("d 1").error

    def test_non_number(self):
        assert "Invalid" in parse_command("m a b").error

    def test_zero_rejected(self):
        assert parse_command("f 0").error


class TestHumanPlayer:
    """Tests for HumanPlayer."""

    def test_reads_command(self):
        player = HumanPlayer(input_fn=lambda prompt: "u")
        assert player.get_command().command == "u"

    def test_eof_quits(self):
        def raise_eof(prompt):
            raise EOFError

        assert HumanPlayer(input_fn=raise_eof).get_command().quit
