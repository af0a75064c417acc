"""Small chat commands: ping and the ready announcement."""

from telegram.error import TelegramError

from c4bot.debug import debug
from c4bot.interfaces.arbiter import EventSubHandler, MessageRecipient

PING_NAMES = ("ping", "hello", "welcome")


class PingCommand(MessageRecipient):
    """Replies with a running welcome count."""

    def __init__(self):
        self.value = 0

    async def receive(self, update, context) -> None:
        self.value += 1
        try:
            await update.effective_message.reply_text(f"Welcome #{self.value}!")
        except TelegramError as e:
            debug.warning(f"Could not send message because {e}", "ping")


class AnnounceHandler(EventSubHandler):
    """Logs when the bot comes online."""

    async def ready(self, bot_user) -> None:
        name = getattr(bot_user, "first_name", None) or getattr(bot_user, "username", "Bot")
        debug.info(f"{name} is now online!", "announce")
