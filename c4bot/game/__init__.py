"""
c4bot.game - Core game mechanics for Connect Four

This package contains the board representation and the rules for
two-player and bot games.
"""

from c4bot.game.board import Board, Token
from c4bot.game.rules import ConnectFour, OnePlayerGame, TwoPlayerGame

__all__ = ['Board', 'Token', 'ConnectFour', 'OnePlayerGame', 'TwoPlayerGame']
