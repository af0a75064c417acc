"""
cli.py - Command-line interface for playing Connect Four locally

This module lets you play the same games the chat bot runs, in a terminal:
against one of the bots, or hot-seat with two people at one keyboard.
"""

from typing import Callable, Optional

from c4bot.ai.players import make_bot
from c4bot.debug import debug
from c4bot.game.rules import ConnectFour, OnePlayerGame, TwoPlayerGame
from c4bot.utils import (DEFAULT_HEIGHT, DEFAULT_WIDTH, PLAYER_ENCODING,
                         GameStatus, Player, render_board_ascii)

QUIT = -1
RESTART = -2


class SimpleCLI:
    """Simple command-line interface for Connect Four."""

    def __init__(self, ai: str = 'random', width: int = DEFAULT_WIDTH,
                 height: int = DEFAULT_HEIGHT, depth: int = 4,
                 input_func: Callable[[str], str] = input,
                 output_func: Callable[[str], None] = print):
        """
        Initialize the CLI.

        Args:
            ai: Bot kind ("random", "minimax") or "none" for two humans
            width: Board width
            height: Board height
            depth: Search depth for the minimax bot
            input_func: Source of player input
            output_func: Sink for everything printed
        """
        self.ai = ai
        self.width = width
        self.height = height
        self.depth = depth
        self.input = input_func
        self.output = output_func
        self.game = self.new_game()

    def new_game(self) -> ConnectFour:
        if self.ai == 'none':
            return TwoPlayerGame(self.width, self.height)
        return OnePlayerGame(self.width, self.height, bot=make_bot(self.ai, self.depth))

    def render(self) -> str:
        return render_board_ascii(self.game.board.to_array(PLAYER_ENCODING))

    def play_game(self) -> Optional[Player]:
        """
        Play one game interactively.

        Returns:
            The winner, or None for a draw or when the player quits
        """
        self.output("Starting a new Connect Four game!")
        self.output(f"Enter column number (0-{self.width - 1}) to make a move.")
        self.output("Other commands: 'q' to quit, 'r' to restart.")
        self.output(self.render())

        while not self.game.is_game_over():
            move = self.get_human_move()

            if move is None:
                continue
            elif move == QUIT:
                self.output("Quitting game.")
                return None
            elif move == RESTART:
                self.game = self.new_game()
                self.output("Game restarted.")
                self.output(self.render())
                continue

            if self.game.emplace(move):
                self.output(self.render())
            else:
                self.output(f"Invalid move: {move}")

        self.output("Game over!")
        winner = self.game.get_winner()
        if winner is None:
            self.output("It's a draw!")
        elif self.ai != 'none' and winner == Player.BLUE:
            self.output("AI wins! Better luck next time.")
        else:
            self.output(f"{winner.name.capitalize()} wins! Congratulations!")

        debug.info(f"Terminal game finished after {len(self.game.moves)} moves "
                   f"({self.game.state.name})", "cli")
        return winner if self.game.state == GameStatus.WON else None

    def get_human_move(self) -> Optional[int]:
        """
        Get a move from human player input.

        Returns:
            Column index, QUIT, RESTART, or None if the input was invalid
        """
        player = self.game.turn.name.capitalize()
        user_input = self.input(f"{player} move (columns 0-{self.width - 1}, q/r): ").strip().lower()

        if user_input == 'q':
            return QUIT
        elif user_input == 'r':
            return RESTART

        try:
            move = int(user_input)
        except ValueError:
            self.output("Invalid input. Please enter a column number or special command.")
            return None

        if 0 <= move < self.width:
            return move
        self.output(f"Column must be between 0 and {self.width - 1}.")
        return None
