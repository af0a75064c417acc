"""Shared test fixtures for the c4bot test suite."""

import itertools
import os
import sys
from unittest.mock import AsyncMock, Mock

import pytest

# Add parent directory to path so we can import c4bot modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_user():
    """Factory for chat users with a fixed id and name."""
    def _make_user(user_id=123456789, full_name='Test Player', username='testplayer'):
        user = Mock()
        user.id = user_id
        user.full_name = full_name
        user.username = username
        user.first_name = full_name.split(' ')[0]
        return user
    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user(111, 'Alice Smith', 'alice')


@pytest.fixture
def bob(make_user):
    return make_user(222, 'Bob Jones', 'bob')


@pytest.fixture
def chat():
    """
    A fake chat. `chat.command(text)` builds the message a user sends, and
    every reply it gets is posted as a new message with its own id.
    """
    message_ids = itertools.count(500)
    posted = []

    def _post(text, reply_markup=None):
        message = Mock()
        message.chat_id = -100
        message.message_id = next(message_ids)
        message.text = text
        message.reply_markup = reply_markup
        message.edit_text = AsyncMock()
        posted.append(message)
        return message

    def command(text, user=None):
        update = Mock()
        update.effective_message = Mock()
        update.effective_message.text = text
        update.effective_message.chat_id = -100
        update.effective_message.reply_text = AsyncMock(side_effect=_post)
        update.effective_user = user
        return update

    fake = Mock()
    fake.posted = posted
    fake.command = command
    return fake


@pytest.fixture
def press():
    """Factory for inline button presses on a posted board message."""
    def _press(message, user, data):
        update = Mock()
        update.callback_query = Mock()
        update.callback_query.data = data
        update.callback_query.message = message
        update.callback_query.from_user = user
        update.callback_query.answer = AsyncMock()
        return update
    return _press


@pytest.fixture
def history_path(tmp_path):
    return str(tmp_path / "history" / "games.json")
