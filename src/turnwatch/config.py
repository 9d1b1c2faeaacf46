"""XDG config loading/saving."""

from __future__ import annotations

import os
import sys
from contextlib import suppress
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

from turnwatch.errors import ErrorCode, TurnWatchError

DEFAULT_CONFIG_PATH = Path("~/.config/turnwatch/config.toml").expanduser()
DEFAULT_CHECK_INTERVAL_MINUTES = 5
MIN_CHECK_INTERVAL_MINUTES = 1
MAX_CHECK_INTERVAL_MINUTES = 1440
DEFAULT_LOG_LEVEL = "INFO"
USER_ID_ENV = "TURNWATCH_USER_ID"

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARN", "WARNING", "ERROR"}


class TurnWatchConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    user_id: str = ""
    check_interval_minutes: int = Field(
        default=DEFAULT_CHECK_INTERVAL_MINUTES,
        ge=MIN_CHECK_INTERVAL_MINUTES,
        le=MAX_CHECK_INTERVAL_MINUTES,
    )
    persistent_notification_enabled: bool = True
    state_path: str = ""
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: str = ""

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in _VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {value}")
        return normalized


def get_config_path(path: str | Path | None = None) -> Path:
    if path is None:
        return DEFAULT_CONFIG_PATH
    return Path(path).expanduser()


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _toml_scalar(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return f'"{_escape(value)}"'
    raise TypeError(f"Unsupported TOML scalar type: {type(value)!r}")


def _sanitize(raw: dict[str, object]) -> TurnWatchConfig:
    cfg = TurnWatchConfig()

    user_id = raw.get("user_id", cfg.user_id)
    if isinstance(user_id, str):
        cfg.user_id = user_id.strip()
    env_user_id = os.getenv(USER_ID_ENV, "").strip()
    if env_user_id:
        cfg.user_id = env_user_id

    interval = raw.get("check_interval_minutes", cfg.check_interval_minutes)
    if (
        isinstance(interval, int)
        and not isinstance(interval, bool)
        and MIN_CHECK_INTERVAL_MINUTES <= interval <= MAX_CHECK_INTERVAL_MINUTES
    ):
        cfg.check_interval_minutes = interval

    persistent = raw.get("persistent_notification_enabled", cfg.persistent_notification_enabled)
    if isinstance(persistent, bool):
        cfg.persistent_notification_enabled = persistent

    state_path = raw.get("state_path", cfg.state_path)
    if isinstance(state_path, str):
        cfg.state_path = state_path.strip()

    log_level = raw.get("log_level", cfg.log_level)
    if isinstance(log_level, str) and log_level.upper() in _VALID_LOG_LEVELS:
        cfg.log_level = log_level

    log_file = raw.get("log_file", cfg.log_file)
    if isinstance(log_file, str):
        cfg.log_file = log_file.strip()

    return cfg


def load_config(path: str | Path | None = None) -> TurnWatchConfig:
    resolved = get_config_path(path)
    if not resolved.exists():
        return _sanitize({})
    try:
        with resolved.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, OSError):
        return _sanitize({})
    if not isinstance(raw, dict):
        return _sanitize({})
    return _sanitize(raw)


def save_config(config: TurnWatchConfig, path: str | Path | None = None) -> Path:
    resolved = get_config_path(path)
    resolved.parent.mkdir(parents=True, exist_ok=True)

    lines = [
        f"user_id = {_toml_scalar(config.user_id)}",
        f"check_interval_minutes = {_toml_scalar(config.check_interval_minutes)}",
        f"persistent_notification_enabled = {_toml_scalar(config.persistent_notification_enabled)}",
        f"state_path = {_toml_scalar(config.state_path)}",
        f"log_level = {_toml_scalar(config.log_level)}",
        f"log_file = {_toml_scalar(config.log_file)}",
    ]

    resolved.write_text("\n".join(lines) + "\n", encoding="utf-8")
    with suppress(OSError):
        resolved.chmod(0o600)
    return resolved


def set_check_interval(minutes: int, path: str | Path | None = None) -> TurnWatchConfig:
    if not MIN_CHECK_INTERVAL_MINUTES <= minutes <= MAX_CHECK_INTERVAL_MINUTES:
        raise TurnWatchError(
            f"Invalid check interval: {minutes}",
            code=ErrorCode.CONFIG_ERROR,
            hint=(
                f"Use a value between {MIN_CHECK_INTERVAL_MINUTES} "
                f"and {MAX_CHECK_INTERVAL_MINUTES} minutes."
            ),
        )
    config = load_config(path)
    config.check_interval_minutes = minutes
    save_config(config, path)
    return config
