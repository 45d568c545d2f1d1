"""chatscreen exception hierarchy."""

from __future__ import annotations


class ChatScreenError(Exception):
    """Base exception for all chatscreen errors."""


class ConfigError(ChatScreenError):
    """Raised when the configuration is invalid or cannot be read."""


class ConfigNotFoundError(ConfigError):
    """Raised when the configuration file does not exist."""


class ChannelError(ChatScreenError):
    """Raised when a delivery channel fails."""
