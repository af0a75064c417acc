"""
c4bot - A chat bot that hosts Connect Four games

This package provides a generic game board, one- and two-player Connect Four
rules, bot opponents, and a Telegram front end where players drop tokens by
pressing a button under the board.
"""

# Version number
__version__ = '0.1.0'
