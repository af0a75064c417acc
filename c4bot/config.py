"""Configuration management."""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

TOKEN_ENV_VAR = "TELEGRAM_BOT_TOKEN"
TOKEN_FILE = "secret"

DEFAULTS: Dict[str, Any] = {
    "prefix": "!",
    "board": {
        "width": 7,
        "height": 6,
    },
    "games": {
        "max_active": 10,
        "stale_after_seconds": 3600,
        "allow_self_play": False,
        "prune_interval_seconds": 300,
    },
    "bot": {
        "kind": "random",
        "depth": 4,
    },
    "history": {
        "path": "data/history.json",
    },
    "logging": {
        "level": "info",
        "file": None,
    },
}

_config: Dict[str, Any] = {}


class ConfigError(Exception):
    """Raised when configuration or credentials cannot be loaded."""


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge `override` into a copy of `base`."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: str = None) -> Dict[str, Any]:
    """Load configuration from a YAML file, falling back to the defaults."""
    global _config

    if config_path is None:
        for path in (Path("config/config.yaml"), Path("config.yaml")):
            if path.exists():
                config_path = str(path)
                break

    if config_path is None:
        _config = copy.deepcopy(DEFAULTS)
        return _config

    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        loaded = yaml.safe_load(f) or {}

    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping at the top level")

    _config = _merge(DEFAULTS, loaded)
    _resolve_paths(config_path.parent)
    return _config


def _resolve_paths(base_path: Path):
    """Resolve relative paths in config against the config file's directory."""
    for section, key in (("history", "path"), ("logging", "file")):
        value = _config.get(section, {}).get(key)
        if value and not Path(value).is_absolute():
            _config[section][key] = str(base_path / value)


def get_config() -> Dict[str, Any]:
    """Get the loaded configuration."""
    if not _config:
        load_config()
    return _config


def get(key: str, default: Any = None) -> Any:
    """Get a config value by dot-notation key (e.g., 'games.max_active')."""
    value: Any = get_config()
    for part in key.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return default
    return value


def get_token(secret_path: Optional[str] = None) -> str:
    """
    Find the bot token.

    The environment variable wins; otherwise the trimmed contents of the
    `secret` file are used.
    """
    token = os.environ.get(TOKEN_ENV_VAR)
    if token:
        return token

    path = Path(secret_path or TOKEN_FILE)
    if path.exists():
        token = path.read_text().strip()
        if token:
            return token

    raise ConfigError(
        f"Could not find bot token in environment variable '{TOKEN_ENV_VAR}' "
        f"or file '{TOKEN_FILE}'"
    )
