"""Tests for the ping command and the ready announcement."""

from unittest.mock import Mock

import pytest
from telegram.error import NetworkError

from c4bot.debug import debug
from c4bot.interfaces.commands import AnnounceHandler, PING_NAMES, PingCommand


class TestPingCommand:

    @pytest.mark.asyncio
    async def test_counts_welcomes(self, chat, alice):
        command = PingCommand()

        first = chat.command("!ping", alice)
        await command.receive(first, Mock())
        second = chat.command("!hello", alice)
        await command.receive(second, Mock())

        first.effective_message.reply_text.assert_awaited_once_with("Welcome #1!")
        second.effective_message.reply_text.assert_awaited_once_with("Welcome #2!")

    @pytest.mark.asyncio
    async def test_send_failure_is_logged_not_raised(self, chat, alice):
        command = PingCommand()
        update = chat.command("!ping", alice)
        update.effective_message.reply_text.side_effect = NetworkError("down")

        await command.receive(update, Mock())

        assert command.value == 1

    def test_names(self):
        assert PING_NAMES == ("ping", "hello", "welcome")


class TestAnnounceHandler:

    @pytest.mark.asyncio
    async def test_logs_bot_name(self, monkeypatch):
        bot_user = Mock()
        bot_user.first_name = "Rusty"
        info = Mock()
        monkeypatch.setattr(debug, "info", info)

        await AnnounceHandler().ready(bot_user)

        info.assert_called_once_with("Rusty is now online!", "announce")
