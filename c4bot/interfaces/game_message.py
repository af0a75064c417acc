"""
game_message.py - A Connect Four game as a chat message

This module turns a game into message text (a turn header, the board drawn
with coloured circles, and a column axis) plus one keycap button per column,
and keeps the posted message in step with the game.
"""

from enum import Enum
from typing import List, Optional

from telegram import InlineKeyboardButton, InlineKeyboardMarkup
from telegram.error import TelegramError

from c4bot.debug import debug, scope_timer
from c4bot.utils import GameStatus, MAX_COLUMNS, Player

CALLBACK_PREFIX = "c4:"
BUTTONS_PER_ROW = 8  # Telegram clients wrap wider keyboard rows badly

EMPTY_TOKEN = "⚫"


class InteractionMode(Enum):
    ONE_PLAYER = "1p"
    TWO_PLAYER = "2p"


# Mode -> player -> (token, label)
PLAYER_STYLES = {
    InteractionMode.TWO_PLAYER: {
        Player.RED: ("🔴", "Red"),
        Player.BLUE: ("🔵", "Blue"),
    },
    InteractionMode.ONE_PLAYER: {
        Player.RED: ("🟠", "Player"),
        Player.BLUE: ("🟣", "Bot"),
    },
}


def column_keycap(column: int) -> str:
    """
    Keycap emoji for a column number.

    Keycaps are the digit followed by VARIATION SELECTOR-16 and
    COMBINING ENCLOSING KEYCAP, so only 0-9 exist.
    """
    if not 0 <= column < MAX_COLUMNS:
        raise ValueError(f"No keycap for column {column}")
    return f"{column}\ufe0f\u20e3"


def callback_data_for_column(column: int) -> str:
    return f"{CALLBACK_PREFIX}{column}"


def column_from_callback_data(data: Optional[str]) -> Optional[int]:
    """Parse "c4:<column>" back into a column, None for anything else."""
    if not data or not data.startswith(CALLBACK_PREFIX):
        return None
    try:
        return int(data[len(CALLBACK_PREFIX):])
    except ValueError:
        return None


class GameMessage:
    """Renders a game and mirrors it into a chat message."""

    def __init__(self, game, mode: InteractionMode, message=None):
        if game.board.width > MAX_COLUMNS:
            raise ValueError(f"Boards wider than {MAX_COLUMNS} columns cannot be controlled")
        self.game = game
        self.mode = mode
        self.message = message

    def player_token(self, player: Optional[Player]) -> str:
        if player is None:
            return EMPTY_TOKEN
        return PLAYER_STYLES[self.mode][player][0]

    def player_label(self, player: Optional[Player]) -> str:
        name = "Nobody" if player is None else PLAYER_STYLES[self.mode][player][1]
        return f"{self.player_token(player)} {name}"

    def header(self) -> str:
        if self.game.state == GameStatus.PLAYING:
            return f"> Current turn: {self.player_label(self.game.turn)}\n"
        return f"> {self.player_label(self.game.get_winner())} wins!\n"

    def board_text(self) -> str:
        board = self.game.board
        lines = []
        for row in range(board.height):
            cells = []
            for column in range(board.width):
                token = board.get(row, column)
                cells.append(self.player_token(token.value if token else None) + " ")
            lines.append("".join(cells) + "\n")
        return "".join(lines)

    def axis(self) -> str:
        if self.game.state != GameStatus.PLAYING:
            return ""
        return "".join(column_keycap(column) + " "
                       for column in range(self.game.board.width)) + "\n"

    def render_text(self) -> str:
        return self.header() + self.board_text() + self.axis()

    def controls(self) -> Optional[InlineKeyboardMarkup]:
        """One keycap button per column while the game is being played, otherwise None."""
        if self.game.state != GameStatus.PLAYING:
            return None

        buttons = [InlineKeyboardButton(column_keycap(column),
                                        callback_data=callback_data_for_column(column))
                   for column in range(self.game.board.width)]
        rows: List[List[InlineKeyboardButton]] = [
            buttons[i:i + BUTTONS_PER_ROW] for i in range(0, len(buttons), BUTTONS_PER_ROW)
        ]
        return InlineKeyboardMarkup(rows)

    async def render(self) -> None:
        """Edit the posted message to show the current game. Controls go away once it is over."""
        if self.message is None:
            return

        with scope_timer("Render", "chat"):
            try:
                await self.message.edit_text(self.render_text(), reply_markup=self.controls())
            except TelegramError as e:
                debug.debug(f"Could not edit message because {e}", "chat")

    async def finalize(self) -> None:
        """
        End the game for good.

        A game still being played is closed, which reads as a draw; a won game
        keeps its winner. The final render removes the controls.
        """
        if self.game.state == GameStatus.PLAYING:
            self.game.close()
        await self.render()
