"""
connect_four.py - The `c4` chat command

This module runs Connect Four games inside chats. `!c4` posts a board with one
button per column; pressing a button drops a token for whoever holds the seat
of the colour to move.

Games are kept in memory, keyed by the message showing them. Only a limited
number may be active at once: starting a game first prunes games nobody has
touched for a while, then the least recently played ones until there is room.
A pruned game is closed as a draw, redrawn one last time and loses its buttons.

Every game has its own asyncio lock. Presses on the same board are resolved one
at a time, in the order they arrive, while different boards are resolved
concurrently. Starting games is serialized so the limit holds while old
games are being pruned.
"""

import asyncio
import datetime
import itertools
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from telegram.error import TelegramError

from c4bot.ai.players import make_bot
from c4bot.data.history import build_record, end_reason, get_player_stats, record_game
from c4bot.debug import debug
from c4bot.game.rules import ConnectFour, OnePlayerGame, TwoPlayerGame
from c4bot.interfaces.arbiter import EventSubHandler, MessageRecipient
from c4bot.interfaces.game_message import (GameMessage, InteractionMode,
                                           column_from_callback_data)
from c4bot.utils import (DEFAULT_HEIGHT, DEFAULT_WIDTH, MAX_COLUMNS, MAX_HEIGHT,
                         Player)

USAGE = (
    "Usage:\n"
    "!c4 [2p] [width height] - play against someone in this chat\n"
    "!c4 1p [width height] - play against the bot\n"
    "!c4 stats - show your record\n"
    f"Boards are 1-{MAX_COLUMNS} columns wide and 1-{MAX_HEIGHT} rows high."
)
GAME_OVER_TEXT = "This game is over."
NOT_YOUR_TURN_TEXT = "It's not your turn."

SessionKey = Tuple[int, int]


def display_name(user) -> str:
    """Best human readable name for a chat user."""
    for attribute in ("full_name", "username"):
        value = getattr(user, attribute, None)
        if isinstance(value, str) and value:
            return value
    return str(user.id)


@dataclass(eq=False)
class GameSession:
    """A game being played in a chat, plus who is playing it."""
    game_id: int
    chat_id: int
    message_id: int
    view: GameMessage
    started_at: datetime.datetime
    last_activity: float
    seats: Dict[Player, Tuple[int, str]] = field(default_factory=dict)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @property
    def key(self) -> SessionKey:
        return (self.chat_id, self.message_id)

    @property
    def game(self) -> ConnectFour:
        return self.view.game

    @property
    def mode(self) -> InteractionMode:
        return self.view.mode

    @property
    def mode_label(self) -> str:
        return self.view.mode.value

    @property
    def human_colors(self) -> Tuple[Player, ...]:
        if self.mode == InteractionMode.ONE_PLAYER:
            return (Player.RED,)
        return (Player.RED, Player.BLUE)


class ConnectFourCommand(MessageRecipient, EventSubHandler):
    """Starts games on `!c4` and resolves the button presses on their boards."""

    def __init__(self, history_path: Optional[str] = None,
                 max_active: int = 10,
                 stale_after_seconds: float = 3600,
                 width: int = DEFAULT_WIDTH,
                 height: int = DEFAULT_HEIGHT,
                 bot_kind: str = "random",
                 bot_depth: int = 4,
                 allow_self_play: bool = False,
                 clock: Callable[[], float] = time.monotonic):
        """
        Args:
            history_path: JSON file for finished games, None to keep no history
            max_active: Most games allowed in memory at once
            stale_after_seconds: Idle time after which a game is pruned
            width: Default board width
            height: Default board height
            bot_kind: Bot used for one-player games ("random" or "minimax")
            bot_depth: Search depth for the minimax bot
            allow_self_play: Whether one user may hold both seats of a game
            clock: Monotonic time source, in seconds
        """
        make_bot(bot_kind, bot_depth)  # fail fast on an unknown kind
        self.history_path = history_path
        self.max_active = max(1, max_active)
        self.stale_after_seconds = stale_after_seconds
        self.width = width
        self.height = height
        self.bot_kind = bot_kind
        self.bot_depth = bot_depth
        self.allow_self_play = allow_self_play
        self.clock = clock
        self.sessions: Dict[SessionKey, GameSession] = {}
        self._game_ids = itertools.count(1)
        self._start_lock = asyncio.Lock()

    # --- Text command ---

    async def receive(self, update, context) -> None:
        message = update.effective_message
        args = message.text.split()[1:]

        if args and args[0].lower() == "stats":
            await self._reply(message, await self.stats_text(update.effective_user))
            return

        parsed = self.parse_arguments(args)
        if parsed is None:
            await self._reply(message, USAGE)
            return

        mode, width, height = parsed
        await self.start_game(message, mode, width, height)

    def parse_arguments(self, args: List[str]) -> Optional[Tuple[InteractionMode, int, int]]:
        """
        Parse the words after `!c4`.

        Returns:
            (mode, width, height), or None when the words make no sense
        """
        mode = InteractionMode.TWO_PLAYER
        if args and args[0].lower() in ("1p", "2p"):
            mode = InteractionMode(args[0].lower())
            args = args[1:]

        if not args:
            return mode, self.width, self.height
        if len(args) != 2:
            return None

        try:
            width, height = int(args[0]), int(args[1])
        except ValueError:
            return None

        if not (1 <= width <= MAX_COLUMNS and 1 <= height <= MAX_HEIGHT):
            return None
        return mode, width, height

    async def stats_text(self, user) -> str:
        """A user's record. The history file is read in a worker thread."""
        if not self.history_path:
            return "Game history is not enabled."
        stats = await asyncio.to_thread(get_player_stats, self.history_path, user.id)
        return (f"🏆 {display_name(user)}: {stats['played']} played, {stats['wins']} won, "
                f"{stats['losses']} lost, {stats['draws']} drawn")

    # --- Game lifecycle ---

    def _new_game(self, mode: InteractionMode, width: int, height: int) -> ConnectFour:
        if mode == InteractionMode.ONE_PLAYER:
            return OnePlayerGame(width, height, bot=make_bot(self.bot_kind, self.bot_depth))
        return TwoPlayerGame(width, height)

    async def start_game(self, message, mode: InteractionMode = InteractionMode.TWO_PLAYER,
                         width: int = None, height: int = None) -> Optional[GameSession]:
        """
        Post a new board in reply to `message` and start tracking it.

        Returns:
            The new session, or None if the board could not be posted
        """
        width = width or self.width
        height = height or self.height

        async with self._start_lock:
            await self._make_room()

            view = GameMessage(self._new_game(mode, width, height), mode)
            try:
                posted = await message.reply_text(view.render_text(), reply_markup=view.controls())
            except TelegramError as e:
                debug.warning(f"Could not post board because {e}", "c4")
                return None

            view.message = posted
            session = GameSession(
                game_id=next(self._game_ids),
                chat_id=posted.chat_id,
                message_id=posted.message_id,
                view=view,
                started_at=datetime.datetime.now(),
                last_activity=self.clock(),
            )
            self.sessions[session.key] = session

        debug.info(f"Started {mode.value} game {session.game_id} ({width}x{height}), "
                   f"{len(self.sessions)} active", "c4")
        return session

    async def _make_room(self) -> None:
        """Prune stale games, then the least recently played ones, until a new game fits."""
        doomed = self._stale_sessions()

        survivors = sorted((s for s in self.sessions.values() if s not in doomed),
                           key=lambda s: s.last_activity)
        surplus = len(survivors) + 1 - self.max_active
        doomed.extend(survivors[:max(0, surplus)])

        # Unregister before awaiting so no other task can pick these sessions up
        for session in doomed:
            self.sessions.pop(session.key, None)

        if doomed:
            debug.info(f"Pruning {len(doomed)} game(s)", "c4")
            await asyncio.gather(*(self._prune(session) for session in doomed))

    async def prune_stale(self) -> int:
        """
        Prune every game idle for longer than `stale_after_seconds`.

        Returns:
            The number of games pruned
        """
        stale = self._stale_sessions()
        for session in stale:
            self.sessions.pop(session.key, None)
        await asyncio.gather(*(self._prune(session) for session in stale))
        return len(stale)

    def _stale_sessions(self) -> List[GameSession]:
        now = self.clock()
        return [session for session in self.sessions.values()
                if now - session.last_activity > self.stale_after_seconds]

    async def _prune(self, session: GameSession) -> None:
        async with session.lock:
            debug.debug(f"Pruning game {session.game_id}", "c4")
            await self._end_session(session, "pruned")

    async def _end_session(self, session: GameSession, reason: str) -> None:
        """Finalize the board and record the game. The session must already be unregistered."""
        await session.view.finalize()
        debug.info(f"Game {session.game_id} ended ({reason})", "c4")

        if self.history_path:
            record = build_record(session, reason)
            await asyncio.to_thread(record_game, self.history_path, record)

    # --- Control presses ---

    async def reaction_add(self, update, context) -> None:
        query = update.callback_query
        if query is None:
            return
        column = column_from_callback_data(query.data)
        if column is None:
            return  # Someone else's button

        message = query.message
        session = None
        if message is not None:
            session = self.sessions.get((message.chat_id, message.message_id))
        if session is None:
            await self._answer(query, GAME_OVER_TEXT)
            return

        async with session.lock:
            # The game may have been pruned or finished while we waited for the lock
            if self.sessions.get(session.key) is not session:
                await self._answer(query, GAME_OVER_TEXT)
                return

            rejection = self.resolve_move(session, query.from_user, column)
            if rejection is not None:
                await self._answer(query, rejection)
                return

            if session.game.is_game_over():
                self.sessions.pop(session.key, None)
                await self._end_session(session, end_reason(session.game))
            else:
                await session.view.render()

        await self._answer(query, None)

    def resolve_move(self, session: GameSession, user, column: int) -> Optional[str]:
        """
        Apply a button press to a session's game.

        The press plays for the colour whose turn it is. An empty seat is
        claimed by the presser; a taken seat only accepts its holder.

        Returns:
            None if the move was made, otherwise the reason it was refused
        """
        game = session.game
        color = game.turn

        if color not in session.human_colors:
            return NOT_YOUR_TURN_TEXT
        if not 0 <= column < game.board.width:
            return f"Column {column} does not exist."

        claimed = False
        seat = session.seats.get(color)
        if seat is None:
            other = session.seats.get(color.other())
            if other is not None and other[0] == user.id and not self.allow_self_play:
                return f"You are already playing as {session.view.player_label(color.other())}."
            session.seats[color] = (user.id, display_name(user))
            claimed = True
            debug.debug(f"{display_name(user)} takes {color.name} in game {session.game_id}", "c4")
        elif seat[0] != user.id:
            return NOT_YOUR_TURN_TEXT

        if not game.emplace(column):
            if claimed:
                del session.seats[color]
            return f"Column {column} is full."

        session.last_activity = self.clock()
        return None

    @property
    def active_games(self) -> int:
        return len(self.sessions)

    # --- Chat I/O ---

    async def _reply(self, message, text: str) -> None:
        try:
            await message.reply_text(text)
        except TelegramError as e:
            debug.warning(f"Could not send message because {e}", "c4")

    async def _answer(self, query, text: Optional[str]) -> None:
        try:
            await query.answer(text)
        except TelegramError as e:
            debug.debug(f"Could not answer button press because {e}", "c4")
