"""
players.py - Bot players for one-player Connect Four games

This module provides the BotPlayer interface and two implementations:
1. RandomPlayer, which picks any column that still has room
2. MinimaxPlayer, an alpha-beta search with a threat-counting heuristic

The heuristic evaluation is designed to:
1. Balance offense and defense
2. Only count threats that are actually playable
3. Prefer horizontal/diagonal threats over vertical (more dangerous)
4. Detect and reward fork positions (two threats at once)
"""

import math
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

import numpy as np

from c4bot.debug import debug
from c4bot.utils import (CONNECT_N, EMPTY_CELL, PLAYER_ENCODING, Player,
                         check_win_at_position, drop_row)
from c4bot.game.board import Board


class BotPlayer(ABC):
    """A computer opponent. Given the board and its colour, it picks a column."""

    @abstractmethod
    def choose_column(self, board: Board, player: Player) -> int:
        """
        Decide which column to place a token in.

        Args:
            board: The current board (must not be modified)
            player: The colour the bot is playing

        Returns:
            The chosen column index
        """


class RandomPlayer(BotPlayer):
    """Chooses uniformly among the columns that are not yet full."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def choose_column(self, board: Board, player: Player) -> int:
        options = [column for column in range(board.width) if board.column_has_room(column)]
        if not options:
            debug.warning("RandomPlayer found no open column", "ai")
            return 0
        return int(self.rng.choice(options))


class MinimaxPlayer(BotPlayer):
    """
    A player that uses the minimax algorithm with alpha-beta pruning.

    The board is encoded as a numpy grid and searched in place by dropping and
    lifting tokens, up to `depth` plies.
    """

    def __init__(self, depth: int = 4):
        """
        Initialize the minimax player.

        Args:
            depth: Maximum search depth (higher = stronger but slower)
        """
        self.depth = max(1, depth)
        self.nodes_evaluated = 0  # For performance tracking

    def choose_column(self, board: Board, player: Player) -> int:
        self.nodes_evaluated = 0
        grid = board.to_array(PLAYER_ENCODING)
        my_value = PLAYER_ENCODING[player]
        opp_value = PLAYER_ENCODING[player.other()]

        valid_moves = self._ordered_moves(grid)
        if not valid_moves:
            debug.warning("MinimaxPlayer found no open column", "ai")
            return 0

        debug.start_timer("minimax")
        best_score = -math.inf
        best_column = valid_moves[0]
        alpha = -math.inf
        beta = math.inf

        for column in valid_moves:
            row = drop_row(grid, column)
            grid[row, column] = my_value
            if check_win_at_position(grid, row, column):
                score = 1000 + self.depth
            else:
                score = self._minimax(grid, self.depth - 1, alpha, beta, False, my_value, opp_value)
            grid[row, column] = EMPTY_CELL

            if score > best_score:
                best_score = score
                best_column = column
            alpha = max(alpha, score)

        debug.end_timer("minimax", "ai")
        debug.debug(f"Minimax chose column {best_column} (score {best_score}, "
                    f"{self.nodes_evaluated} nodes)", "ai")
        return best_column

    def _ordered_moves(self, grid: np.ndarray) -> List[int]:
        """Open columns, centre first for better pruning."""
        cols = grid.shape[1]
        center = (cols - 1) / 2
        moves = [col for col in range(cols) if grid[0, col] == EMPTY_CELL]
        return sorted(moves, key=lambda c: abs(c - center))

    def _minimax(self, grid: np.ndarray, depth: int, alpha: float, beta: float,
                 is_maximizing: bool, my_value: int, opp_value: int) -> float:
        """
        Minimax algorithm with alpha-beta pruning.

        The caller has already checked that the last move did not end the game
        with a win.

        Args:
            grid: Encoded board, modified in place and restored before returning
            depth: Remaining search depth
            alpha: Best score the maximizer can guarantee
            beta: Best score the minimizer can guarantee
            is_maximizing: True if the bot is to move at this node
            my_value: Grid value of the bot's tokens
            opp_value: Grid value of the opponent's tokens

        Returns:
            The evaluation score for this position
        """
        self.nodes_evaluated += 1

        valid_moves = self._ordered_moves(grid)
        if not valid_moves:
            return 0  # Draw

        if depth == 0:
            return self._evaluate_position(grid, my_value, opp_value)

        mover = my_value if is_maximizing else opp_value
        best = -math.inf if is_maximizing else math.inf

        for column in valid_moves:
            row = drop_row(grid, column)
            grid[row, column] = mover
            if check_win_at_position(grid, row, column):
                # Prefer faster wins and slower losses
                score = (1000 + depth) if is_maximizing else (-1000 - depth)
            else:
                score = self._minimax(grid, depth - 1, alpha, beta,
                                      not is_maximizing, my_value, opp_value)
            grid[row, column] = EMPTY_CELL

            if is_maximizing:
                best = max(best, score)
                alpha = max(alpha, score)
            else:
                best = min(best, score)
                beta = min(beta, score)

            if beta <= alpha:
                break

        return best

    def _is_playable(self, grid: np.ndarray, row: int, col: int) -> bool:
        """Check if a cell is empty and either on the bottom row or supported."""
        rows, cols = grid.shape
        if not (0 <= row < rows and 0 <= col < cols):
            return False
        if grid[row, col] != EMPTY_CELL:
            return False
        if row == rows - 1:
            return True
        return grid[row + 1, col] != EMPTY_CELL

    def _evaluate_position(self, grid: np.ndarray, my_value: int, opp_value: int) -> float:
        """
        Heuristic evaluation of a non-terminal position.

        The evaluation considers:
        - Center column control
        - Playable threats (CONNECT_N - 1 in a window whose gap can be played now)
        - Potential threats (the gap exists but is not playable yet)
        - Building potential (half-filled windows)
        - Forks (multiple threats)

        Returns:
            A score representing how good the position is for the bot
        """
        rows, cols = grid.shape
        center = (cols - 1) / 2

        # Pieces near the centre take part in more windows
        col_weights = (cols // 2) - np.abs(np.arange(cols) - center)
        score = 0.5 * float(np.sum(((grid == my_value) * col_weights)
                                   - ((grid == opp_value) * col_weights)))

        windows = self._evaluate_all_windows(grid, my_value, opp_value)
        score += windows['score']

        score += windows['my_playable_threats'] * 50
        score -= windows['opp_playable_threats'] * 50
        score += windows['my_potential_threats'] * 8
        score -= windows['opp_potential_threats'] * 8

        # Fork bonus: the opponent can only block one threat per move
        if windows['my_playable_threats'] >= 2:
            score += 200
        if windows['opp_playable_threats'] >= 2:
            score -= 200

        unique_mine = len(set(windows['my_threat_positions']))
        unique_theirs = len(set(windows['opp_threat_positions']))
        if unique_mine >= 2:
            score += unique_mine * 5
        if unique_theirs >= 2:
            score -= unique_theirs * 5

        return score

    def _evaluate_all_windows(self, grid: np.ndarray, my_value: int, opp_value: int) -> Dict:
        """Score every CONNECT_N long window on the board."""
        result = {
            'score': 0.0,
            'my_playable_threats': 0,
            'my_potential_threats': 0,
            'opp_playable_threats': 0,
            'opp_potential_threats': 0,
            'my_threat_positions': [],
            'opp_threat_positions': [],
        }
        rows, cols = grid.shape
        span = CONNECT_N - 1

        # (row_delta, col_delta, threat_multiplier); vertical threats are easiest to block
        directions = [
            (0, 1, 1.2),
            (1, 0, 0.8),
            (1, 1, 1.2),
            (-1, 1, 1.2),
        ]

        for row in range(rows):
            for col in range(cols):
                for dr, dc, multiplier in directions:
                    end_row, end_col = row + span * dr, col + span * dc
                    if not (0 <= end_row < rows and 0 <= end_col < cols):
                        continue

                    positions = [(row + i * dr, col + i * dc) for i in range(CONNECT_N)]
                    window = [grid[r, c] for r, c in positions]
                    self._analyze_window(grid, window, positions, my_value, opp_value,
                                         multiplier, result)

        return result

    def _analyze_window(self, grid: np.ndarray, window: list, positions: List[Tuple[int, int]],
                        my_value: int, opp_value: int, multiplier: float, result: Dict) -> None:
        """Add one window's contribution to `result`."""
        my_count = window.count(my_value)
        opp_count = window.count(opp_value)

        # A window holding both colours can never be completed
        if my_count > 0 and opp_count > 0:
            return

        empties = [pos for pos, cell in zip(positions, window) if cell == EMPTY_CELL]

        for owner, count, sign in (('my', my_count, 1), ('opp', opp_count, -1)):
            if count == 0:
                continue
            if count == CONNECT_N - 1:
                gap = empties[0]
                if self._is_playable(grid, gap[0], gap[1]):
                    result[f'{owner}_playable_threats'] += 1
                else:
                    result[f'{owner}_potential_threats'] += 1
                result[f'{owner}_threat_positions'].append(gap)
                result['score'] += sign * 5 * multiplier
            elif count == CONNECT_N - 2:
                playable = any(self._is_playable(grid, r, c) for r, c in empties)
                result['score'] += sign * (3 if playable else 1) * multiplier
            elif count == 1:
                result['score'] += sign * 0.5 * multiplier


BOT_KINDS = ('random', 'minimax')


def make_bot(kind: str, depth: int = 4) -> BotPlayer:
    """
    Create a bot player by name.

    Args:
        kind: "random" or "minimax"
        depth: Search depth for the minimax player

    Returns:
        A new BotPlayer
    """
    if kind == 'random':
        return RandomPlayer()
    if kind == 'minimax':
        return MinimaxPlayer(depth=depth)
    raise ValueError(f"Unknown bot kind '{kind}', expected one of {', '.join(BOT_KINDS)}")
