"""
c4bot.ai - Computer opponents for one-player Connect Four games
"""

from c4bot.ai.players import BotPlayer, MinimaxPlayer, RandomPlayer, make_bot

__all__ = ['BotPlayer', 'MinimaxPlayer', 'RandomPlayer', 'make_bot']
