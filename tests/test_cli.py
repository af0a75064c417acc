"""Tests for the terminal interface."""

import itertools

from c4bot.interfaces.cli import SimpleCLI
from c4bot.utils import Player


def scripted(inputs):
    """CLI wired to a list of inputs, collecting everything it prints."""
    output = []
    feed = iter(inputs)
    cli = SimpleCLI(ai='none', input_func=lambda prompt: next(feed), output_func=output.append)
    return cli, output


class TestSimpleCLI:

    def test_two_humans_red_wins(self):
        cli, output = scripted(["0", "1", "0", "1", "0", "1", "0"])
        assert cli.play_game() == Player.RED
        assert output[-1] == "Red wins! Congratulations!"

    def test_bad_input_is_reprompted(self):
        cli, output = scripted(["x", "9", "q"])
        assert cli.play_game() is None
        assert "Invalid input. Please enter a column number or special command." in output
        assert "Column must be between 0 and 6." in output
        assert output[-1] == "Quitting game."

    def test_restart(self):
        cli, output = scripted(["3", "r", "q"])
        cli.play_game()
        assert "Game restarted." in output
        assert len(cli.game.board) == 0

    def test_full_column_is_invalid(self):
        cli, output = scripted(["0"] * 7 + ["q"])
        cli.play_game()
        assert "Invalid move: 0" in output

    def test_against_bot(self):
        output = []
        columns = itertools.cycle("0123456")
        cli = SimpleCLI(ai='random', input_func=lambda prompt: next(columns),
                        output_func=output.append)
        cli.play_game()
        assert cli.game.is_game_over()
        assert output[-1] in ("It's a draw!", "AI wins! Better luck next time.",
                              "Red wins! Congratulations!")

    def test_render(self):
        cli, _ = scripted([])
        cli.game.emplace(2)
        lines = cli.render().splitlines()
        assert "X" in lines[-3]
