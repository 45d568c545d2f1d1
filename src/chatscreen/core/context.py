"""Context bundle passed to every callback and text-input handler."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from chatscreen.core.events import CallbackEvent, TextMessageEvent


@dataclass(frozen=True)
class HandlerContext:
    """
    Sender and chat metadata for one handler invocation.

    Exactly one of ``callback_query`` / ``message`` is set, depending on
    whether the handler was reached by a button press or by free text.
    """

    chat_id: int
    user_id: int
    username: str
    first_name: str
    last_name: str
    message_id: int
    callback_query: CallbackEvent | None = None
    message: TextMessageEvent | None = None

    @classmethod
    def from_callback(cls, event: CallbackEvent) -> HandlerContext:
        return cls(
            chat_id=event.chat_id,
            user_id=event.sender_id,
            username=event.sender_username,
            first_name=event.sender_first_name,
            last_name=event.sender_last_name,
            message_id=event.message_id,
            callback_query=event,
        )

    @classmethod
    def from_message(cls, event: TextMessageEvent) -> HandlerContext:
        return cls(
            chat_id=event.chat_id,
            user_id=event.sender_id,
            username=event.sender_username,
            first_name=event.sender_first_name,
            last_name=event.sender_last_name,
            message_id=event.message_id,
            message=event,
        )

    @property
    def raw_event(self) -> CallbackEvent | TextMessageEvent:
        return self.callback_query if self.callback_query is not None else self.message  # type: ignore[return-value]

    def as_dict(self) -> dict[str, Any]:
        """Map form with the fixed camelCase keys."""
        data: dict[str, Any] = {
            "chatId": self.chat_id,
            "userId": self.user_id,
            "username": self.username,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "messageId": self.message_id,
        }
        if self.callback_query is not None:
            data["callbackQuery"] = self.callback_query
        else:
            data["message"] = self.message
        return data
