"""Tests for the finished game history."""

import datetime
import json
import threading
from unittest.mock import Mock

import pytest

from c4bot.data import history
from c4bot.data.history import (build_record, end_reason, get_player_stats, record_game,
                                safe_read_json)
from c4bot.game.rules import TwoPlayerGame
from c4bot.utils import Player


def finished_session(game, seats, game_id=1):
    session = Mock()
    session.game_id = game_id
    session.game = game
    session.mode_label = "2p"
    session.seats = seats
    session.started_at = datetime.datetime(2024, 5, 1, 12, 0, 0)
    return session


@pytest.fixture
def red_win():
    game = TwoPlayerGame(7, 6)
    for column in (0, 1, 0, 1, 0, 1, 0):
        game.emplace(column)
    return game


class TestRecords:

    def test_build_record(self, red_win):
        session = finished_session(red_win, {Player.RED: (1, "Ann"), Player.BLUE: (2, "Ben")})
        record = build_record(session, "won")

        assert record["game_id"] == 1
        assert record["mode"] == "2p"
        assert (record["width"], record["height"]) == (7, 6)
        assert record["players"] == {"red": {"id": 1, "name": "Ann"},
                                     "blue": {"id": 2, "name": "Ben"}}
        assert record["winner"] == "red"
        assert record["moves"] == [0, 1, 0, 1, 0, 1, 0]
        assert record["started_at"] == "2024-05-01T12:00:00"
        json.dumps(record)

    def test_unclaimed_seat_and_unknown_reason(self):
        session = finished_session(TwoPlayerGame(7, 6), {})
        record = build_record(session, "pruned")
        assert record["players"] == {"red": None, "blue": None}
        assert record["winner"] is None

        with pytest.raises(ValueError):
            build_record(session, "forfeit")

    def test_end_reason(self, red_win):
        assert end_reason(red_win) == "won"

        draw = TwoPlayerGame(2, 2)
        for column in (0, 1, 1, 0):
            draw.emplace(column)
        assert end_reason(draw) == "draw"

        closed = TwoPlayerGame(7, 6)
        closed.close()
        assert end_reason(closed) == "closed"


class TestHistoryFile:

    def test_record_creates_directories(self, history_path):
        assert record_game(history_path, {"game_id": 1, "reason": "closed"})
        assert safe_read_json(history_path) == [{"game_id": 1, "reason": "closed"}]

    def test_missing_file_reads_empty(self, tmp_path):
        assert safe_read_json(str(tmp_path / "nothing.json")) == []

    def test_corrupt_file_reads_empty(self, tmp_path):
        path = tmp_path / "games.json"
        path.write_text("{not json")
        assert safe_read_json(str(path)) == []

    def test_invalid_utf8_file_reads_empty(self, tmp_path):
        path = tmp_path / "games.json"
        path.write_bytes(b"\xff\xfe[not utf-8")
        assert safe_read_json(str(path)) == []

    def test_non_list_file_is_replaced_on_record(self, history_path):
        record_game(history_path, {"game_id": 1})
        with open(history_path, "w") as f:
            json.dump({"game_id": 0}, f)

        assert safe_read_json(history_path) == []
        assert record_game(history_path, {"game_id": 2})
        assert safe_read_json(history_path) == [{"game_id": 2}]

    def test_games_recorded_from_many_threads_are_all_kept(self, history_path):
        threads = [threading.Thread(target=record_game, args=(history_path, {"game_id": n}))
                   for n in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        records = safe_read_json(history_path)
        assert len(records) == 20
        assert sorted(r["game_id"] for r in records) == list(range(20))

    def test_keeps_most_recent_records(self, history_path, monkeypatch):
        monkeypatch.setattr(history, "MAX_RECORDS", 3)
        for game_id in range(5):
            record_game(history_path, {"game_id": game_id})
        assert [r["game_id"] for r in safe_read_json(history_path)] == [2, 3, 4]

    def test_player_stats(self, history_path):
        ann = {"id": 1, "name": "Ann"}
        ben = {"id": 2, "name": "Ben"}
        record_game(history_path, {"players": {"red": ann, "blue": ben}, "winner": "red"})
        record_game(history_path, {"players": {"red": ben, "blue": ann}, "winner": "red"})
        record_game(history_path, {"players": {"red": ann, "blue": None}, "winner": None})
        record_game(history_path, {"players": {"red": ben, "blue": None}, "winner": "red"})

        assert get_player_stats(history_path, 1) == {"played": 3, "wins": 1, "losses": 1, "draws": 1}
        assert get_player_stats(history_path, 2) == {"played": 3, "wins": 2, "losses": 1, "draws": 0}
        assert get_player_stats(history_path, 3) == {"played": 0, "wins": 0, "losses": 0, "draws": 0}
