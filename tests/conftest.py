"""Shared fixtures: an in-memory channel that records every delivery call."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

import pytest

from chatscreen.channels.base import BaseChannel, Keyboard
from chatscreen.core.events import CallbackEvent, InboundEvent, TextMessageEvent
from chatscreen.core.exceptions import ChannelError
from chatscreen.core.manager import ScreenManager


@dataclass
class SentMessage:
    chat_id: int
    text: str
    parse_markdown: bool
    keyboard: Keyboard | None
    image_url: str
    message_id: int


@dataclass
class RecordingChannel(BaseChannel):
    """
    BaseChannel double. Message ids count up from 100.

    With ``yield_on_io`` set, send and delete suspend once mid-call so
    concurrent renders interleave; ``max_in_flight`` records the most
    delivery calls seen at once for a single chat.
    """

    sent: list[SentMessage] = field(default_factory=list)
    deleted: list[tuple[int, int]] = field(default_factory=list)
    answered: list[str] = field(default_factory=list)
    inbound: list[InboundEvent] = field(default_factory=list)
    allowed: set[int] = field(default_factory=set)
    fail_send: bool = False
    fail_delete: bool = False
    started: bool = False
    closed: bool = False
    yield_on_io: bool = False
    max_in_flight: int = 0
    _in_flight: dict[int, int] = field(default_factory=dict)
    _next_id: int = 100

    async def start(self) -> None:
        self.started = True

    async def close(self) -> None:
        self.closed = True

    async def send_text(
        self,
        chat_id: int,
        text: str,
        parse_markdown: bool = True,
        keyboard: Keyboard | None = None,
        image_url: str = "",
    ) -> int:
        await self._io(chat_id)
        if self.fail_send:
            raise ChannelError("send failed")
        self._next_id += 1
        self.sent.append(
            SentMessage(chat_id, text, parse_markdown, keyboard, image_url, self._next_id)
        )
        return self._next_id

    async def delete_message(self, chat_id: int, message_id: int) -> bool:
        await self._io(chat_id)
        self.deleted.append((chat_id, message_id))
        return not self.fail_delete

    async def answer_callback(self, callback_id: str) -> bool:
        self.answered.append(callback_id)
        return True

    async def receive_updates(self) -> AsyncIterator[InboundEvent]:  # type: ignore[override]
        for event in self.inbound:
            yield event

    def is_allowed(self, user_id: int) -> bool:
        return not self.allowed or user_id in self.allowed

    def keyboard_tokens(self, index: int = -1) -> list[str]:
        """Flatten the callback tokens of one sent keyboard."""
        keyboard = self.sent[index].keyboard or []
        return [b.get("callback_data", "") for row in keyboard for b in row]

    def orphaned(self, chat_id: int) -> list[int]:
        """Ids sent to ``chat_id`` that were never deleted, except the newest."""
        ids = [m.message_id for m in self.sent if m.chat_id == chat_id]
        deleted = {mid for cid, mid in self.deleted if cid == chat_id}
        return [mid for mid in ids[:-1] if mid not in deleted]

    async def _io(self, chat_id: int) -> None:
        if not self.yield_on_io:
            return
        self._in_flight[chat_id] = self._in_flight.get(chat_id, 0) + 1
        self.max_in_flight = max(self.max_in_flight, self._in_flight[chat_id])
        try:
            await asyncio.sleep(0)
        finally:
            self._in_flight[chat_id] -= 1


def callback(token: str, chat_id: int = 1, callback_id: str = "cb-1", **kw: Any) -> CallbackEvent:
    return CallbackEvent(callback_id=callback_id, token=token, chat_id=chat_id, **kw)


def text_message(text: str, chat_id: int = 1, **kw: Any) -> TextMessageEvent:
    return TextMessageEvent(chat_id=chat_id, text=text, **kw)


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def manager(channel: RecordingChannel) -> ScreenManager:
    return ScreenManager(channel)
