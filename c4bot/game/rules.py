"""
rules.py - Game state management for Connect Four

This module provides:
1. The ConnectFour interface shared by every game variant
2. TwoPlayerGame, where two people alternate turns on one board
3. OnePlayerGame, where a person plays RED against a bot playing BLUE
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from c4bot.debug import debug
from c4bot.utils import (AXES, CONNECT_N, DEFAULT_HEIGHT, DEFAULT_WIDTH,
                         GameStatus, Player)
from c4bot.game.board import Board


class ConnectFour(ABC):
    """Interface for a Connect Four game, whatever drives its moves."""

    @property
    @abstractmethod
    def board(self) -> Board:
        """The board being played on."""

    @property
    @abstractmethod
    def state(self) -> GameStatus:
        """Whether the game is being played, was won or was closed."""

    @property
    @abstractmethod
    def turn(self) -> Player:
        """The player whose token goes in next."""

    @property
    @abstractmethod
    def moves(self) -> List[int]:
        """Columns played so far, in order."""

    @abstractmethod
    def close(self) -> None:
        """End the game without a winner."""

    @abstractmethod
    def emplace(self, column: int) -> bool:
        """
        Drop the current player's token into a column.

        Returns:
            True if the move was made, False if it was rejected
        """

    @abstractmethod
    def get_winner(self) -> Optional[Player]:
        """The winner, or None while playing or after a draw."""

    @property
    def winner(self) -> Optional[Player]:
        return self.get_winner()

    def is_game_over(self) -> bool:
        return self.state.is_game_over()


class TwoPlayerGame(ConnectFour):
    """
    Connect Four for two people sharing one board.

    RED always moves first. A move that completes a line of CONNECT_N wins
    immediately; filling the board without a winner closes the game as a draw.
    """

    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT):
        debug.debug(f"Initializing TwoPlayerGame ({width}x{height})", "game")
        self._board = Board(width, height)
        self._state = GameStatus.PLAYING
        self._turn = Player.RED
        self._winner: Optional[Player] = None
        self._moves: List[int] = []

    @property
    def board(self) -> Board:
        return self._board

    @property
    def state(self) -> GameStatus:
        return self._state

    @property
    def turn(self) -> Player:
        return self._turn

    @property
    def moves(self) -> List[int]:
        return list(self._moves)

    def close(self) -> None:
        debug.debug("Closing game", "game")
        self._state = GameStatus.CLOSED

    def is_valid_move(self, column: int) -> bool:
        """
        Check if a move is valid.

        Args:
            column: The column to place a piece (0-indexed)

        Returns:
            True if the move is valid, False otherwise
        """
        if self._state != GameStatus.PLAYING:
            debug.debug(f"Invalid move: game is not being played (state: {self._state})", "game")
            return False

        if not (0 <= column < self._board.width):
            debug.debug(f"Invalid move: column {column} out of bounds", "game")
            return False

        if not self._board.column_has_room(column):
            debug.debug(f"Invalid move: column {column} is full", "game")
            return False

        return True

    def get_valid_moves(self) -> List[int]:
        """Get a list of columns where a piece can be placed."""
        return [col for col in range(self._board.width) if self.is_valid_move(col)]

    def emplace(self, column: int) -> bool:
        debug.debug(f"Attempting move in column {column} for player {self._turn.name}", "game")

        if not self.is_valid_move(column):
            return False

        row = self._board.drop_row(column)
        self._board.set(row, column, self._turn)
        self._moves.append(column)
        debug.trace(f"Placed {self._turn.name} at ({row}, {column})", "game")

        if self._completes_line(row, column):
            self._winner = self._turn
            self._state = GameStatus.WON
            debug.info(f"{self._turn.name} wins after move at {(row, column)}", "game")
        elif self._board.is_full():
            self._state = GameStatus.CLOSED
            debug.info("Game ends in a draw", "game")

        self._turn = ~self._turn
        return True

    def _completes_line(self, row: int, column: int) -> bool:
        return any(self._board.count_in_bidirection(row, column, axis) >= CONNECT_N
                   for axis in AXES)

    def get_winner(self) -> Optional[Player]:
        if self._state == GameStatus.WON:
            return self._winner
        return None


class OnePlayerGame(ConnectFour):
    """
    Connect Four against a bot.

    The person plays RED. Every accepted move is answered straight away by the
    bot's move for BLUE, so from the outside each `emplace` is a full round.
    """

    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT, bot=None):
        """
        Initialize a game against a bot.

        Args:
            width: Number of columns
            height: Number of rows
            bot: A BotPlayer; defaults to a RandomPlayer
        """
        if bot is None:
            from c4bot.ai.players import RandomPlayer
            bot = RandomPlayer()
        self._game = TwoPlayerGame(width, height)
        self.bot = bot

    @property
    def board(self) -> Board:
        return self._game.board

    @property
    def state(self) -> GameStatus:
        return self._game.state

    @property
    def turn(self) -> Player:
        return self._game.turn

    @property
    def moves(self) -> List[int]:
        return self._game.moves

    def close(self) -> None:
        self._game.close()

    def emplace(self, column: int) -> bool:
        if not self._game.emplace(column):
            return False

        if self.state == GameStatus.PLAYING:
            decision = self.bot.choose_column(self.board, self.turn)
            debug.debug(f"Bot chose column {decision}", "game")

            if not self._game.emplace(decision):
                self.close()
                debug.warning(f"C4 bot made invalid decision! (column {decision})", "game")
        return True

    def get_winner(self) -> Optional[Player]:
        return self._game.get_winner()
