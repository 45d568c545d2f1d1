"""chatscreen constants: reserved callback tokens, defaults, and filesystem layout."""

from __future__ import annotations

from enum import IntEnum

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class ExitCode(IntEnum):
    SUCCESS = 0
    ERROR = 1
    CONFIG_ERROR = 2
    NETWORK_ERROR = 4


# ---------------------------------------------------------------------------
# Filesystem layout
# ---------------------------------------------------------------------------

CHATSCREEN_DIR_NAME = ".chatscreen"
CONFIG_FILENAME = "config.toml"

# ---------------------------------------------------------------------------
# Callback token grammar
# ---------------------------------------------------------------------------

NAVIGATION_PREFIX = "screen:"  # "screen:<screen_id>" → navigate
BACK_TOKEN = "back"  # synthetic back button
TEXT_INPUT_PREFIX = "text_input:"  # handler key for free text in a named state
CAROUSEL_PREFIX = "carousel:"  # "carousel:<id>:prev|info|next"
ACCORDION_PREFIX = "accordion:"  # "accordion:<id>:expand|collapse"

# ---------------------------------------------------------------------------
# State keys
# ---------------------------------------------------------------------------

STATE_KEY = "state"  # reserved key holding the current named state
LAST_INPUT_KEY = "last_input"  # last free-text input routed to a handler

# ---------------------------------------------------------------------------
# UI defaults
# ---------------------------------------------------------------------------

DEFAULT_START_COMMAND = "/start"
DEFAULT_INITIAL_STATE = "initial"
DEFAULT_BACK_BUTTON_TEXT = "⬅️ Back"
SHORT_ID_LENGTH = 7

# ---------------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------------

TELEGRAM_API_BASE = "https://api.telegram.org"
DEFAULT_TELEGRAM_POLL_TIMEOUT = 30  # long-poll timeout (seconds)
