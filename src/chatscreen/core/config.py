"""chatscreen configuration: Pydantic model, load, and save."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator

from chatscreen.core.constants import (
    CHATSCREEN_DIR_NAME,
    CONFIG_FILENAME,
    DEFAULT_INITIAL_STATE,
    DEFAULT_START_COMMAND,
    DEFAULT_TELEGRAM_POLL_TIMEOUT,
)
from chatscreen.core.exceptions import ConfigError, ConfigNotFoundError


def chatscreen_dir() -> Path:
    """Return the chatscreen config directory (~/.chatscreen), creating it if needed."""
    d = Path.home() / CHATSCREEN_DIR_NAME
    d.mkdir(mode=0o700, parents=True, exist_ok=True)
    return d


# ---------------------------------------------------------------------------
# Sub-models
# ---------------------------------------------------------------------------


class TelegramConfig(BaseModel):
    bot_token: SecretStr
    allowed_users: list[int] = Field(default_factory=list)  # empty → anyone
    poll_timeout: int = DEFAULT_TELEGRAM_POLL_TIMEOUT

    @field_validator("bot_token", mode="before")
    @classmethod
    def validate_token_format(cls, v: Any) -> Any:
        token = str(v.get_secret_value() if hasattr(v, "get_secret_value") else v)
        if not re.fullmatch(r"\d{8,12}:[A-Za-z0-9_\-]{35,}", token):
            raise ValueError(
                "Invalid Telegram bot token format. "
                "Expected: <digits>:<35+ chars>. Get one from @BotFather."
            )
        return v

    @field_validator("allowed_users", mode="before")
    @classmethod
    def parse_allowed_users(cls, v: Any) -> Any:
        """Accept both list and comma-separated string."""
        if isinstance(v, str):
            return [int(uid.strip()) for uid in v.split(",") if uid.strip()]
        return v

    @field_validator("poll_timeout")
    @classmethod
    def validate_poll_timeout(cls, v: int) -> int:
        if not (1 <= v <= 50):
            raise ValueError("poll_timeout must be between 1 and 50 seconds")
        return v


class UIConfig(BaseModel):
    start_command: str = DEFAULT_START_COMMAND
    initial_state: str = DEFAULT_INITIAL_STATE

    @field_validator("start_command")
    @classmethod
    def validate_start_command(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("start_command must begin with '/'")
        return v


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "text"  # "text" | "json"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v.lower() not in ("text", "json"):
            raise ValueError("Log format must be 'text' or 'json'")
        return v.lower()


# ---------------------------------------------------------------------------
# Root config
# ---------------------------------------------------------------------------


class ChatScreenConfig(BaseModel):
    """Root chatscreen configuration model."""

    telegram: TelegramConfig | None = None
    ui: UIConfig = Field(default_factory=UIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def require_channel(self) -> ChatScreenConfig:
        if self.telegram is None:
            raise ValueError(
                "A channel must be configured: add a [telegram] section "
                "or set CHATSCREEN_TELEGRAM_BOT_TOKEN."
            )
        return self

    def require_telegram(self) -> TelegramConfig:
        """Return the Telegram section, or raise ConfigError if it is absent."""
        if self.telegram is None:
            raise ConfigError("Telegram channel is not configured")
        return self.telegram


# ---------------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------------


def config_file_path() -> Path:
    if env_path := os.environ.get("CHATSCREEN_CONFIG"):
        return Path(env_path)
    return chatscreen_dir() / CONFIG_FILENAME


def load_config(path: Path | None = None) -> ChatScreenConfig:
    """
    Load ChatScreenConfig from TOML file, overlaid with environment variables.

    Priority (highest to lowest):
      1. Environment variables (CHATSCREEN_*)
      2. Config file (~/.chatscreen/config.toml)
    """
    import tomllib

    cfg_path = path or config_file_path()

    if not cfg_path.exists():
        raise ConfigNotFoundError(f"Config file not found: {cfg_path}")

    try:
        with open(cfg_path, "rb") as f:
            data = tomllib.load(f)
    except Exception as exc:
        raise ConfigError(f"Cannot read config file {cfg_path}: {exc}") from exc

    _apply_env_overrides(data)

    try:
        return ChatScreenConfig.model_validate(data)
    except Exception as exc:
        raise ConfigError(f"Invalid config at {cfg_path}: {exc}") from exc


def _apply_env_overrides(data: dict[str, Any]) -> None:
    """Overlay CHATSCREEN_* environment variables onto the parsed TOML data."""
    if token := os.environ.get("CHATSCREEN_TELEGRAM_BOT_TOKEN"):
        data.setdefault("telegram", {})["bot_token"] = token
    if users := os.environ.get("CHATSCREEN_TELEGRAM_ALLOWED_USERS"):
        data.setdefault("telegram", {})["allowed_users"] = users
    if level := os.environ.get("CHATSCREEN_LOG_LEVEL"):
        data.setdefault("logging", {})["level"] = level
    if fmt := os.environ.get("CHATSCREEN_LOG_FORMAT"):
        data.setdefault("logging", {})["format"] = fmt


def save_config(config_data: dict[str, Any], path: Path | None = None) -> Path:
    """Write config dict to TOML file with secure permissions (0600)."""
    import tomli_w

    cfg_path = path or config_file_path()
    cfg_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    # Write atomically
    tmp_path = cfg_path.with_suffix(".tmp")
    try:
        with open(tmp_path, "wb") as f:
            tomli_w.dump(config_data, f)
        tmp_path.rename(cfg_path)
    except Exception as exc:
        tmp_path.unlink(missing_ok=True)
        raise ConfigError(f"Cannot write config to {cfg_path}: {exc}") from exc

    cfg_path.chmod(0o600)
    return cfg_path
