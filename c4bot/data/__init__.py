"""
c4bot.data - Data management for the Connect Four command

This package stores finished game records and the statistics built from them.
"""

__all__ = []
