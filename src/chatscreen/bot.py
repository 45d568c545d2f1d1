"""
ScreenBot — the update loop connecting a channel to a ScreenManager.

Each inbound event is dispatched in its own asyncio task so one slow
handler does not stall other chats; renders for one chat are serialised by the
manager's chat locks. Events from users the channel does not allow are
dropped before they reach the manager.
"""

from __future__ import annotations

import asyncio
import logging

from chatscreen.channels.base import BaseChannel
from chatscreen.core.events import CallbackEvent, InboundEvent, TextMessageEvent
from chatscreen.core.manager import ScreenManager

logger = logging.getLogger(__name__)


class ScreenBot:
    def __init__(self, manager: ScreenManager, channel: BaseChannel) -> None:
        self.manager = manager
        self.channel = channel
        self._tasks: set[asyncio.Task[None]] = set()
        self._stopping = asyncio.Event()

    async def run(self) -> None:
        """Start the channel and dispatch updates until stopped or closed."""
        await self.channel.start()
        logger.info("Bot running on %s", self.channel.display_name)
        try:
            async for event in self.channel.receive_updates():
                if self._stopping.is_set():
                    break
                self.dispatch(event)
        finally:
            await self._drain()
            await self.channel.close()
            logger.info("Bot stopped")

    async def stop(self) -> None:
        self._stopping.set()
        await self.channel.close()

    def dispatch(self, event: InboundEvent) -> asyncio.Task[None] | None:
        """Schedule handling of ``event``; returns None if the sender is not allowed."""
        if not self.channel.is_allowed(event.sender_id):
            logger.warning("Dropping update from unauthorised user %s", event.sender_id)
            return None
        task = asyncio.create_task(self._handle(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _handle(self, event: InboundEvent) -> None:
        try:
            if isinstance(event, CallbackEvent):
                await self.manager.handle_callback(event)
            elif isinstance(event, TextMessageEvent):
                await self.manager.handle_text_message(event)
        except Exception as exc:  # noqa: BLE001
            logger.error("Update handling failed in chat %s: %s", event.chat_id, exc)

    async def _drain(self) -> None:
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
