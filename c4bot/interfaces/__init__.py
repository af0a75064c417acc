"""
c4bot.interfaces - User interfaces for Connect Four

This package contains the chat bot (command routing, the Connect Four
command and its Telegram wiring) and the terminal interface.
"""

# Don't import anything here: the chat modules pull in python-telegram-bot
__all__ = []
