"""Telegram bot setup and runner."""

from pathlib import Path
from typing import Any, Dict, Optional

from telegram.ext import Application, CallbackQueryHandler, MessageHandler, filters

from c4bot import config as config_module
from c4bot.debug import debug
from c4bot.interfaces.arbiter import Arbiter
from c4bot.interfaces.commands import PING_NAMES, AnnounceHandler, PingCommand
from c4bot.interfaces.connect_four import ConnectFourCommand


def _get(config: Dict[str, Any], key: str) -> Any:
    value: Any = config
    for part in key.split("."):
        value = value[part]
    return value


def build_arbiter(config: Dict[str, Any]) -> Arbiter:
    """Create the arbiter with every command and event handler registered."""
    arbiter = Arbiter(prefix=_get(config, "prefix"))

    ping = PingCommand()
    for name in PING_NAMES:
        arbiter.register_text_command(name, ping)

    connect_four = ConnectFourCommand(
        history_path=_get(config, "history.path"),
        max_active=_get(config, "games.max_active"),
        stale_after_seconds=_get(config, "games.stale_after_seconds"),
        width=_get(config, "board.width"),
        height=_get(config, "board.height"),
        bot_kind=_get(config, "bot.kind"),
        bot_depth=_get(config, "bot.depth"),
        allow_self_play=_get(config, "games.allow_self_play"),
    )
    arbiter.register_text_command("c4", connect_four)
    arbiter.register_event_handler(AnnounceHandler())
    arbiter.register_event_handler(connect_four)

    return arbiter


async def prune_stale_games(context):
    """Job queue callback: prune the idle games of the command in `context.job.data`."""
    pruned = await context.job.data.prune_stale()
    if pruned:
        debug.info(f"Pruned {pruned} idle game(s)", "telegram")


async def error_handler(update, context):
    """Handle errors in the bot."""
    debug.error(f"Update {update} caused error: {context.error}", "telegram")


def create_bot(config: Optional[Dict[str, Any]] = None) -> Application:
    """Create and configure the Telegram bot application."""
    if config is None:
        config = config_module.get_config()

    token = config_module.get_token()
    arbiter = build_arbiter(config)

    async def post_init(app: Application) -> None:
        await arbiter.on_ready(await app.bot.get_me())

    # Updates for different games are handled concurrently; each game serializes its own
    app = (
        Application.builder()
        .token(token)
        .concurrent_updates(True)
        .post_init(post_init)
        .build()
    )

    app.add_handler(MessageHandler(filters.TEXT, arbiter.on_message))
    app.add_handler(CallbackQueryHandler(arbiter.on_reaction))
    app.add_error_handler(error_handler)

    # Idle games lose their controls even when nobody starts a new one
    interval = _get(config, "games.prune_interval_seconds")
    app.job_queue.run_repeating(
        prune_stale_games,
        interval=interval,
        first=interval,
        name="prune_stale_games",
        data=arbiter.text_commands["c4"],
    )

    app.bot_data["arbiter"] = arbiter
    return app


def run_bot(config_path: Optional[str] = None, log_level: Optional[str] = None):
    """Run the bot. `log_level` overrides the config file's logging.level."""
    config = config_module.load_config(config_path)

    debug.set_from_string(log_level or config["logging"]["level"])
    log_file = config["logging"]["file"]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        debug.configure(log_file=log_file)

    debug.info("Starting c4bot...", "telegram")

    app = create_bot(config)
    app.run_polling(allowed_updates=["message", "callback_query"])


if __name__ == "__main__":
    run_bot()
