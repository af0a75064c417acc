"""
board.py - Generic grid board used by the Connect Four games

This module implements the Board class: a fixed-size grid of tokens with
neighbour lookup and line counting in any of the eight compass directions.
Row 0 is the top row and column 0 the leftmost column.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

import numpy as np

from c4bot.debug import debug
from c4bot.utils import Direction, EMPTY_CELL


@dataclass(frozen=True)
class Token:
    """A value placed on the board, remembering where it sits."""
    row: int
    column: int
    value: Any


class Board:
    """
    A width x height grid holding at most one Token per cell.

    The board does not know about turns or winners; games build those rules
    on top of `set`, `drop_row` and `count_in_bidirection`.
    """

    def __init__(self, width: int, height: int):
        """
        Initialize an empty board.

        Args:
            width: Number of columns (at least 1)
            height: Number of rows (at least 1)
        """
        if width < 1 or height < 1:
            raise ValueError(f"Board dimensions must be positive, got {width}x{height}")
        debug.trace(f"Initializing {width}x{height} board", "board")
        self._width = width
        self._height = height
        self._grid = np.full((height, width), None, dtype=object)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def index_from_rc(self, row: int, column: int) -> Optional[int]:
        """
        Convert a (row, column) pair into a flat index.

        Returns:
            row * width + column, or None when the position is off the board
        """
        if 0 <= row < self._height and 0 <= column < self._width:
            return row * self._width + column
        return None

    def get(self, row: int, column: int) -> Optional[Token]:
        """Get the token at a position, or None when empty or off the board."""
        if self.index_from_rc(row, column) is None:
            return None
        return self._grid[row, column]

    def set(self, row: int, column: int, value: Any) -> None:
        """Place a value at a position. Positions off the board are ignored."""
        if self.index_from_rc(row, column) is None:
            debug.trace(f"Ignoring set outside board at ({row}, {column})", "board")
            return
        self._grid[row, column] = Token(row, column, value)

    def fill(self, value: Any) -> None:
        """Place `value` in every cell."""
        for row in range(self._height):
            for column in range(self._width):
                self.set(row, column, value)

    def tokens(self) -> Dict[Tuple[int, int], Token]:
        """
        Get the occupied cells.

        Returns:
            Mapping of (row, column) to the Token found there
        """
        return {(token.row, token.column): token
                for token in self._grid.flat if token is not None}

    def __len__(self) -> int:
        """Number of occupied cells."""
        return sum(1 for token in self._grid.flat if token is not None)

    def is_full(self) -> bool:
        return len(self) == self._width * self._height

    def column_has_room(self, column: int) -> bool:
        """Check whether another token fits in `column`."""
        return self.index_from_rc(0, column) is not None and self.get(0, column) is None

    def drop_row(self, column: int) -> Optional[int]:
        """
        Find where a token dropped into `column` would land.

        Returns:
            The lowest empty row, or None if the column is full or off the board
        """
        if self.index_from_rc(0, column) is None:
            return None
        for row in range(self._height - 1, -1, -1):
            if self._grid[row, column] is None:
                return row
        return None

    def get_neighbor(self, row: int, column: int, direction: Direction) -> Optional[Token]:
        """Get the token one step away in `direction`, if any."""
        return self.get(row + direction.row_delta, column + direction.col_delta)

    def count_in_direction(self, row: int, column: int, direction: Direction) -> int:
        """
        Count the run of equal values starting at a cell and moving in `direction`.

        Returns:
            0 for an empty cell, otherwise 1 plus the matching tokens that follow
        """
        token = self.get(row, column)
        if token is None:
            return 0

        count = 1
        neighbor = self.get_neighbor(row, column, direction)
        while neighbor is not None and neighbor.value == token.value:
            count += 1
            neighbor = self.get_neighbor(neighbor.row, neighbor.column, direction)
        return count

    def count_in_bidirection(self, row: int, column: int, direction: Direction) -> int:
        """
        Length of the line of equal values through a cell along `direction`.

        Both `direction` and its opposite are followed; the cell itself counts once.
        """
        forward = self.count_in_direction(row, column, direction)
        if forward == 0:
            return 0
        return forward + self.count_in_direction(row, column, ~direction) - 1

    def copy(self) -> 'Board':
        """Create a copy of this board. Tokens are immutable, so they are shared."""
        new_board = Board(self._width, self._height)
        new_board._grid = self._grid.copy()
        return new_board

    def to_array(self, encoding: Mapping[Any, int]) -> np.ndarray:
        """
        Encode the board as an integer grid.

        Args:
            encoding: Mapping from token value to a non-zero integer

        Returns:
            height x width int array, 0 for empty cells
        """
        grid = np.full((self._height, self._width), EMPTY_CELL, dtype=int)
        for (row, column), token in self.tokens().items():
            grid[row, column] = encoding[token.value]
        return grid

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (self._width == other._width and self._height == other._height
                and self.tokens() == other.tokens())

    def render(self) -> str:
        """
        Render the board as text, one row per line.

        Returns:
            Rows of space separated cells, '-' marking empty cells
        """
        lines = []
        for row in range(self._height):
            cells = []
            for column in range(self._width):
                token = self._grid[row, column]
                cells.append("-" if token is None else str(token.value))
            lines.append(" ".join(cells))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()
