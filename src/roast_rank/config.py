"""Configuration file management for roast-rank.

Reads and writes ~/.roast-rank/config.json for settings that don't belong in the DB
(database location, display language, log level, season scoring overrides).
"""
from __future__ import annotations

import json
from pathlib import Path

from roast_rank.seasons import SeasonConfig

DEFAULT_CONFIG_PATH: Path = Path.home() / ".roast-rank" / "config.json"
DEFAULT_LANGUAGE = "en"
DEFAULT_LOG_LEVEL = "WARNING"


def load_config(config_path: Path | None = None) -> dict:
    """Load config from JSON file. Returns {} if file missing or invalid."""
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict, config_path: Path | None = None) -> None:
    """Write config dict to JSON file. Creates parent dirs if needed."""
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def set_config_value(key: str, value: object, config_path: Path | None = None) -> None:
    """Persist a single top-level key, keeping the others."""
    config = load_config(config_path)
    config[key] = value
    save_config(config, config_path)


def get_db_path(config_path: Path | None = None) -> Path | None:
    """Return the configured database path, or None to use the default."""
    raw = load_config(config_path).get("db_path")
    if raw:
        return Path(raw).expanduser()
    return None


def get_standings_dir(config_path: Path | None = None) -> Path | None:
    raw = load_config(config_path).get("standings_dir")
    if raw:
        return Path(raw).expanduser()
    return None


def get_language(config_path: Path | None = None) -> str:
    return load_config(config_path).get("language") or DEFAULT_LANGUAGE


def get_log_level(config_path: Path | None = None) -> str:
    return load_config(config_path).get("log_level") or DEFAULT_LOG_LEVEL


def get_season_config(config_path: Path | None = None) -> SeasonConfig:
    """Season scoring config with any overrides from the "season" section applied."""
    overrides = load_config(config_path).get("season")
    if not isinstance(overrides, dict):
        return SeasonConfig()
    return SeasonConfig.from_dict(overrides)
