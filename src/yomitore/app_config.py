"""
Application Configuration

Manages loading from environment variables and default values.
"""

import os
from dataclasses import dataclass, field, asdict
from pathlib import Path

from yomitore.domain.constants import (
    BADGE_INTERVAL,
    CUMULATIVE_BADGE_CAP,
    DEFAULT_BASE_URL,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT_SECONDS,
    EVENT_POLL_INTERVAL_MS,
    LENGTH_OPTIONS,
    STREAK_BADGE_CAP,
)

DEFAULT_DATA_DIR = "~/.config/yomitore"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_int(key: str, default: int) -> int:
    """Convert an environment variable to int"""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"The value '{val}' of environment variable '{key}' cannot be converted to an integer.")


def _env_str(key: str, default: str) -> str:
    """Get an environment variable as a string"""
    return os.environ.get(key, default)


def _env_log_level(key: str, default: str) -> str:
    """Get an environment variable as a logging level name"""
    val = os.environ.get(key)
    if val is None:
        return default
    level = val.strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"The value '{val}' of environment variable '{key}' is not a log level ({', '.join(LOG_LEVELS)}).")
    return level


def _env_int_list(key: str, default: list[int]) -> list[int]:
    """Convert an environment variable to a comma-separated list of ints"""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return [int(x.strip()) for x in val.split(",") if x.strip()]
    except ValueError:
        raise ValueError(f"The value '{val}' of environment variable '{key}' cannot be converted to a comma-separated list of integers.")


@dataclass
class ApiConfig:
    """Model endpoint configuration"""
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    api_key: str | None = None
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    max_tokens: int = 2048


@dataclass
class SessionConfig:
    """Control loop configuration"""
    poll_interval_ms: int = EVENT_POLL_INTERVAL_MS
    length_options: list[int] = field(default_factory=lambda: list(LENGTH_OPTIONS))


@dataclass
class BadgeConfig:
    """Badge award configuration"""
    interval: int = BADGE_INTERVAL
    streak_cap: int = STREAK_BADGE_CAP
    cumulative_cap: int = CUMULATIVE_BADGE_CAP


@dataclass
class StorageConfig:
    """Where history and logs live"""
    data_dir: str = DEFAULT_DATA_DIR
    history_file: str = "stats.json"
    log_file: str = "yomitore.log"
    log_level: str = "INFO"

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir).expanduser()

    @property
    def history_path(self) -> Path:
        return self.data_path / self.history_file

    @property
    def log_path(self) -> Path:
        return self.data_path / self.log_file


@dataclass
class AppConfig:
    """Overall application configuration"""
    api: ApiConfig = field(default_factory=ApiConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    badges: BadgeConfig = field(default_factory=BadgeConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    def to_dict(self) -> dict:
        """Convert to dictionary format (the API key is never included)"""
        data = asdict(self)
        data["api"].pop("api_key", None)
        return {"yomitore": data}

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        """Create from dictionary (handles presence/absence of the yomitore key)"""
        config_data = data.get("yomitore", data)
        return cls(
            api=ApiConfig(**config_data.get("api", {})),
            session=SessionConfig(**config_data.get("session", {})),
            badges=BadgeConfig(**config_data.get("badges", {})),
            storage=StorageConfig(**config_data.get("storage", {})),
        )


def load_config() -> AppConfig:
    """
    Load configuration from environment variables

    Uses default values when environment variables are not set.

    Returns:
        AppConfig
    """
    api = ApiConfig(
        model=_env_str("YOMITORE_MODEL", DEFAULT_MODEL),
        base_url=_env_str("YOMITORE_BASE_URL", DEFAULT_BASE_URL),
        api_key=os.environ.get("GROQ_API_KEY") or None,
        timeout_seconds=_env_int("YOMITORE_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        max_tokens=_env_int("YOMITORE_MAX_TOKENS", 2048),
    )
    session = SessionConfig(
        poll_interval_ms=_env_int("YOMITORE_POLL_INTERVAL_MS", EVENT_POLL_INTERVAL_MS),
        length_options=_env_int_list("YOMITORE_LENGTH_OPTIONS", list(LENGTH_OPTIONS)),
    )
    badges = BadgeConfig(
        interval=_env_int("YOMITORE_BADGE_INTERVAL", BADGE_INTERVAL),
        streak_cap=_env_int("YOMITORE_BADGE_STREAK_CAP", STREAK_BADGE_CAP),
        cumulative_cap=_env_int("YOMITORE_BADGE_CUMULATIVE_CAP", CUMULATIVE_BADGE_CAP),
    )
    storage = StorageConfig(
        data_dir=_env_str("YOMITORE_DATA_DIR", DEFAULT_DATA_DIR),
        log_level=_env_log_level("YOMITORE_LOG_LEVEL", "INFO"),
    )
    return AppConfig(api=api, session=session, badges=badges, storage=storage)
