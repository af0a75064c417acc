"""
arbiter.py - Routes chat events to commands and event handlers

Text messages that start with the command prefix are sent to the command
registered under their first word. Event handlers see every event: the bot
becoming ready, every message, and every control press.
"""

from typing import Dict, List

from c4bot.debug import debug


class EventSubHandler:
    """Base class for objects that want to hear about chat events. All hooks are optional."""

    async def ready(self, bot_user) -> None:
        """Called once the bot is connected, with the bot's own user."""

    async def message(self, update, context) -> None:
        """Called for every text message."""

    async def reaction_add(self, update, context) -> None:
        """Called for every control (inline button) press."""


class MessageRecipient:
    """A text command. `receive` is awaited for messages naming the command."""

    async def receive(self, update, context) -> None:
        raise NotImplementedError


class Arbiter:
    """Dispatches chat updates to registered text commands and event handlers."""

    def __init__(self, prefix: str = "!"):
        self.prefix = prefix
        self.text_commands: Dict[str, MessageRecipient] = {}
        self.event_handlers: List[EventSubHandler] = []

    def register_text_command(self, name: str, recipient: MessageRecipient) -> None:
        if name in self.text_commands:
            raise ValueError(f"A text command named '{name}' already exists!")
        debug.debug(f"Registered text command '{name}'", "arbiter")
        self.text_commands[name] = recipient

    def register_event_handler(self, handler: EventSubHandler) -> None:
        debug.debug(f"Registered event handler {type(handler).__name__}", "arbiter")
        self.event_handlers.append(handler)

    def get_command_name(self, text: str) -> str:
        """
        Extract the command name from a message.

        The first space separated word is used, with one leading prefix removed:
        "!c4 1p" gives "c4" and "hello there!" gives "hello".
        """
        first_word = text.split(' ')[0]
        if self.prefix and first_word.startswith(self.prefix):
            first_word = first_word[len(self.prefix):]
        return first_word

    async def on_message(self, update, context) -> None:
        message = update.effective_message
        text = message.text if message is not None else None
        if not text:
            return

        for handler in self.event_handlers:
            await handler.message(update, context)

        if text.startswith(self.prefix):
            command_name = self.get_command_name(text)
            recipient = self.text_commands.get(command_name)
            if recipient is not None:
                debug.debug(f"Dispatching '{command_name}'", "arbiter")
                await recipient.receive(update, context)

    async def on_reaction(self, update, context) -> None:
        for handler in self.event_handlers:
            await handler.reaction_add(update, context)

    async def on_ready(self, bot_user) -> None:
        for handler in self.event_handlers:
            await handler.ready(bot_user)
