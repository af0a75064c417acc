"""Tests for wiring the commands into a Telegram application."""

import copy
from unittest.mock import AsyncMock, Mock

import pytest
from telegram.ext import CallbackQueryHandler, MessageHandler

from c4bot.config import DEFAULTS
from c4bot.interfaces.arbiter import Arbiter
from c4bot.interfaces.commands import AnnounceHandler, PingCommand
from c4bot.interfaces.connect_four import ConnectFourCommand
from c4bot.interfaces.telegram_bot import build_arbiter, create_bot, prune_stale_games


def test_build_arbiter_registers_commands():
    config = copy.deepcopy(DEFAULTS)
    config["games"]["max_active"] = 4
    arbiter = build_arbiter(config)

    assert set(arbiter.text_commands) == {"ping", "hello", "welcome", "c4"}
    assert isinstance(arbiter.text_commands["welcome"], PingCommand)
    connect_four = arbiter.text_commands["c4"]
    assert isinstance(connect_four, ConnectFourCommand)
    assert connect_four.max_active == 4
    assert [type(h) for h in arbiter.event_handlers] == [AnnounceHandler, ConnectFourCommand]


def test_create_bot_routes_updates_to_arbiter(monkeypatch):
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123456:TEST-TOKEN")
    app = create_bot(copy.deepcopy(DEFAULTS))

    assert isinstance(app.bot_data["arbiter"], Arbiter)
    handler_types = [type(h) for h in app.handlers[0]]
    assert handler_types == [MessageHandler, CallbackQueryHandler]


def test_create_bot_schedules_idle_game_pruning(monkeypatch):
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123456:TEST-TOKEN")
    config = copy.deepcopy(DEFAULTS)
    config["games"]["prune_interval_seconds"] = 120
    app = create_bot(config)

    jobs = app.job_queue.get_jobs_by_name("prune_stale_games")
    assert len(jobs) == 1
    assert jobs[0].callback is prune_stale_games
    assert jobs[0].data is app.bot_data["arbiter"].text_commands["c4"]


@pytest.mark.asyncio
async def test_prune_job_prunes_the_command():
    context = Mock()
    context.job.data.prune_stale = AsyncMock(return_value=2)

    await prune_stale_games(context)

    context.job.data.prune_stale.assert_awaited_once()
