"""
Per-chat state store.

Each chat owns a mapping of arbitrary string keys to values. The reserved
key ``"state"`` holds the chat's current *named state*, the workflow label
used to route free-text input to ``text_input:<state>`` handlers. A separate
slot tracks the current screen id per chat.

Typed reads never raise: ``get_state`` returns the default when the key is
absent or when the stored value is not of the expected type. Chats never
share entries.
"""

from __future__ import annotations

from typing import Any, TypeVar

from chatscreen.core.constants import STATE_KEY

T = TypeVar("T")


class StateMachine:
    """In-memory key/value state per chat. Lives for the process lifetime."""

    def __init__(self) -> None:
        self._states: dict[int, dict[str, Any]] = {}
        self._current_screens: dict[int, str] = {}

    # ------------------------------------------------------------------
    # Key/value
    # ------------------------------------------------------------------

    def get_state(
        self,
        chat_id: int,
        key: str,
        default: T | None = None,
        expected_type: type[T] | None = None,
    ) -> T | Any:
        """
        Return the value stored under ``key`` for ``chat_id``.

        The expected type is ``expected_type`` when given, otherwise the type
        of ``default`` (when it is not None). A value of a different type is
        treated as absent.
        """
        chat_state = self._states.get(chat_id)
        if chat_state is None or key not in chat_state:
            return default
        value = chat_state[key]
        expected = expected_type or (type(default) if default is not None else None)
        if expected is not None and not _is_instance(value, expected):
            return default
        return value

    def set_state(self, chat_id: int, key: str, value: Any) -> None:
        self._states.setdefault(chat_id, {})[key] = value

    def remove_state(self, chat_id: int, key: str) -> bool:
        """Remove one key. Returns True if it was present."""
        chat_state = self._states.get(chat_id)
        if chat_state is None or key not in chat_state:
            return False
        del chat_state[key]
        return True

    def clear_state(self, chat_id: int) -> None:
        """Drop the chat's whole key/value map."""
        self._states.pop(chat_id, None)

    def get_all_state(self, chat_id: int) -> dict[str, Any]:
        """Return a copy of the chat's key/value map (empty if none)."""
        return dict(self._states.get(chat_id, {}))

    # ------------------------------------------------------------------
    # Named state
    # ------------------------------------------------------------------

    def set_current_state(self, chat_id: int, state_name: str) -> None:
        self.set_state(chat_id, STATE_KEY, state_name)

    def get_current_state(self, chat_id: int) -> str | None:
        return self.get_state(chat_id, STATE_KEY, expected_type=str)

    def is_in_state(self, chat_id: int, state_name: str) -> bool:
        return self.get_current_state(chat_id) == state_name

    # ------------------------------------------------------------------
    # Current screen slot
    # ------------------------------------------------------------------

    def set_current_screen(self, chat_id: int, screen_id: str) -> None:
        self._current_screens[chat_id] = screen_id

    def get_current_screen(self, chat_id: int) -> str | None:
        return self._current_screens.get(chat_id)


def _is_instance(value: Any, expected: type) -> bool:
    # bool is an int subclass; a stored flag is not a count.
    if expected is int and isinstance(value, bool):
        return False
    return isinstance(value, expected)
