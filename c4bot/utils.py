"""
utils.py - Utility functions and constants for the Connect Four command

This module provides common constants, enumerations, and numpy grid helpers
used throughout the game, the bot players and the terminal interface.
"""

from enum import Enum, auto
from typing import Optional

import numpy as np

# Game constants
DEFAULT_WIDTH = 7
DEFAULT_HEIGHT = 6
CONNECT_N = 4  # Number of pieces in a row to win
MAX_COLUMNS = 10  # Keycap emoji only exist for the digits 0-9
MAX_HEIGHT = 12

# Values used when a board is encoded as a numpy grid
EMPTY_CELL = 0


class Player(Enum):
    """Enumeration of the two token colours."""
    RED = 1    # Always moves first
    BLUE = 2

    def other(self) -> 'Player':
        """Get the other player."""
        return Player.BLUE if self == Player.RED else Player.RED

    def __invert__(self) -> 'Player':
        return self.other()

    def __str__(self):
        return "R" if self == Player.RED else "B"


class GameStatus(Enum):
    """Enumeration representing the state of a game."""
    CLOSED = auto()   # Ended without a winner: draw, forced close or prune
    PLAYING = auto()
    WON = auto()

    def is_game_over(self) -> bool:
        """Check if the game is over."""
        return self != GameStatus.PLAYING


class Direction(Enum):
    """The eight compass directions, as (row, column) steps. Row 0 is the top row."""
    NORTH = (-1, 0)
    NORTH_EAST = (-1, 1)
    EAST = (0, 1)
    SOUTH_EAST = (1, 1)
    SOUTH = (1, 0)
    SOUTH_WEST = (1, -1)
    WEST = (0, -1)
    NORTH_WEST = (-1, -1)

    @property
    def row_delta(self) -> int:
        return self.value[0]

    @property
    def col_delta(self) -> int:
        return self.value[1]

    def opposite(self) -> 'Direction':
        """Get the direction pointing the other way."""
        return Direction((-self.row_delta, -self.col_delta))

    def __invert__(self) -> 'Direction':
        return self.opposite()


# One direction per line through a cell: vertical, both diagonals, horizontal
AXES = (Direction.NORTH, Direction.NORTH_EAST, Direction.EAST, Direction.NORTH_WEST)

# Encoding used when handing a board to numpy based code
PLAYER_ENCODING = {Player.RED: 1, Player.BLUE: 2}


def is_valid_position(grid: np.ndarray, row: int, col: int) -> bool:
    """
    Check if a position is within the grid boundaries.

    Args:
        grid: The encoded board
        row: Row index
        col: Column index

    Returns:
        True if position is valid, False otherwise
    """
    rows, cols = grid.shape
    return 0 <= row < rows and 0 <= col < cols


def drop_row(grid: np.ndarray, column: int) -> Optional[int]:
    """
    Get the row a token dropped into `column` would land on.

    Returns:
        The lowest empty row index, or None if the column is full
    """
    empty_rows = np.flatnonzero(grid[:, column] == EMPTY_CELL)
    if empty_rows.size == 0:
        return None
    return int(empty_rows[-1])


def check_win_at_position(grid: np.ndarray, row: int, col: int,
                          connect_n: int = CONNECT_N) -> bool:
    """
    Check if the piece at the given position completes a line.

    Args:
        grid: The encoded board
        row: Row index where piece was placed
        col: Column index where piece was placed
        connect_n: Line length needed to win

    Returns:
        True if the piece is part of a line of at least `connect_n`
    """
    player_value = grid[row, col]
    if player_value == EMPTY_CELL:
        return False

    for axis in AXES:
        dr, dc = axis.value
        count = 1  # Start with 1 for the piece itself

        r, c = row + dr, col + dc
        while is_valid_position(grid, r, c) and grid[r, c] == player_value:
            count += 1
            r += dr
            c += dc

        r, c = row - dr, col - dc
        while is_valid_position(grid, r, c) and grid[r, c] == player_value:
            count += 1
            r -= dr
            c -= dc

        if count >= connect_n:
            return True

    return False


def render_board_ascii(grid: np.ndarray) -> str:
    """
    Render an encoded board as ASCII art.

    Args:
        grid: The encoded board

    Returns:
        ASCII representation of the board with column numbers underneath
    """
    rows, cols = grid.shape
    symbols = {EMPTY_CELL: " ", PLAYER_ENCODING[Player.RED]: "X", PLAYER_ENCODING[Player.BLUE]: "O"}

    result = ["|" + "-" * (cols * 2 - 1) + "|"]
    for row in range(rows):
        result.append("|" + " ".join(symbols[int(cell)] for cell in grid[row]) + "|")
    result.append("|" + "-" * (cols * 2 - 1) + "|")
    result.append("|" + " ".join(str(col % 10) for col in range(cols)) + "|")

    return "\n".join(result)
