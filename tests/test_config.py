"""Tests for configuration loading and token lookup."""

import pytest

from c4bot import config
from c4bot.config import ConfigError, DEFAULTS, get_token, load_config


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    monkeypatch.setattr(config, "_config", {})


class TestLoadConfig:

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_config() == DEFAULTS

    def test_file_overrides_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "prefix: '?'\n"
            "games:\n"
            "  max_active: 3\n"
            "bot:\n"
            "  kind: minimax\n"
        )
        loaded = load_config(str(path))

        assert loaded["prefix"] == "?"
        assert loaded["games"]["max_active"] == 3
        assert loaded["games"]["stale_after_seconds"] == DEFAULTS["games"]["stale_after_seconds"]
        assert loaded["bot"] == {"kind": "minimax", "depth": 4}

    def test_relative_paths_follow_config_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("history:\n  path: games.json\nlogging:\n  file: logs/bot.log\n")
        loaded = load_config(str(path))

        assert loaded["history"]["path"] == str(tmp_path / "games.json")
        assert loaded["logging"]["file"] == str(tmp_path / "logs" / "bot.log")

    def test_search_finds_config_directory(self, tmp_path, monkeypatch):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "config.yaml").write_text("prefix: '.'\n")
        monkeypatch.chdir(tmp_path)
        assert load_config()["prefix"] == "."

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_dot_notation_get(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        load_config()
        assert config.get("games.max_active") == 10
        assert config.get("games.nothing", "fallback") == "fallback"
        assert config.get("prefix.too.deep") is None

    def test_defaults_are_not_shared(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        load_config()["games"]["max_active"] = 99
        assert DEFAULTS["games"]["max_active"] == 10


class TestGetToken:

    def test_environment_wins(self, tmp_path, monkeypatch):
        secret = tmp_path / "secret"
        secret.write_text("from-file\n")
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "from-env")
        assert get_token(str(secret)) == "from-env"

    def test_secret_file_is_trimmed(self, tmp_path, monkeypatch):
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
        secret = tmp_path / "secret"
        secret.write_text("  123:abc \n")
        assert get_token(str(secret)) == "123:abc"

    def test_no_token(self, tmp_path, monkeypatch):
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
        with pytest.raises(ConfigError):
            get_token(str(tmp_path / "secret"))
