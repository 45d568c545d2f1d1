"""
Inbound events — the two shapes an update source delivers to the engine.

    CallbackEvent      a button press carrying a callback token
    TextMessageEvent   a free-text message

Both can be built from a raw Telegram Bot API update dict with
``from_update``; the raw payload is kept on the event so handlers can reach
fields the engine does not model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CallbackEvent:
    callback_id: str
    token: str
    chat_id: int
    message_id: int = 0
    sender_id: int = 0
    sender_username: str = ""
    sender_first_name: str = ""
    sender_last_name: str = ""
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_update(cls, callback_query: dict[str, Any]) -> CallbackEvent | None:
        """Build from a ``callback_query`` object; None when it has no chat."""
        message = callback_query.get("message") or {}
        chat = message.get("chat") or {}
        if "id" not in chat:
            return None
        sender = callback_query.get("from") or {}
        return cls(
            callback_id=str(callback_query.get("id", "")),
            token=callback_query.get("data") or "",
            chat_id=int(chat["id"]),
            message_id=int(message.get("message_id", 0)),
            sender_id=int(sender.get("id", 0)),
            sender_username=sender.get("username", ""),
            sender_first_name=sender.get("first_name", ""),
            sender_last_name=sender.get("last_name", ""),
            raw=callback_query,
        )


@dataclass(frozen=True)
class TextMessageEvent:
    chat_id: int
    text: str
    message_id: int = 0
    sender_id: int = 0
    sender_username: str = ""
    sender_first_name: str = ""
    sender_last_name: str = ""
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_update(cls, message: dict[str, Any]) -> TextMessageEvent | None:
        """Build from a ``message`` object; None for non-text messages."""
        text = message.get("text")
        chat = message.get("chat") or {}
        if text is None or "id" not in chat:
            return None
        sender = message.get("from") or {}
        return cls(
            chat_id=int(chat["id"]),
            text=text,
            message_id=int(message.get("message_id", 0)),
            sender_id=int(sender.get("id", 0)),
            sender_username=sender.get("username", ""),
            sender_first_name=sender.get("first_name", ""),
            sender_last_name=sender.get("last_name", ""),
            raw=message,
        )


InboundEvent = CallbackEvent | TextMessageEvent


def parse_update(update: dict[str, Any]) -> InboundEvent | None:
    """Parse one Bot API ``Update``; None for update kinds the engine ignores."""
    if "callback_query" in update:
        return CallbackEvent.from_update(update["callback_query"])
    if "message" in update:
        return TextMessageEvent.from_update(update["message"])
    return None
