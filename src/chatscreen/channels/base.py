"""
BaseChannel — the contract between the screen engine and a chat platform.

A channel plays two roles:

  Outbound delivery client   send_text / delete_message / answer_callback
  Inbound update source      receive_updates() yields CallbackEvent and
                             TextMessageEvent objects

Delivery calls are async and may fail. The ScreenManager treats delete and
answer failures as non-fatal; a send failure propagates, since a failed
render has no message id to record.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

from chatscreen.core.events import InboundEvent

Keyboard = list[list[dict[str, Any]]]


class BaseChannel(ABC):
    """Abstract chat channel."""

    INTERFACE_VERSION = "1.0.0"

    channel_name: str = "base"
    display_name: str = "Base"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @abstractmethod
    async def start(self) -> None:
        """Open connections and begin receiving updates."""

    @abstractmethod
    async def close(self) -> None:
        """Stop receiving and release resources."""

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    @abstractmethod
    async def send_text(
        self,
        chat_id: int,
        text: str,
        parse_markdown: bool = True,
        keyboard: Keyboard | None = None,
        image_url: str = "",
    ) -> int:
        """Send one message and return its platform message id."""

    @abstractmethod
    async def delete_message(self, chat_id: int, message_id: int) -> bool:
        """Delete a previously sent message. Returns False on failure."""

    @abstractmethod
    async def answer_callback(self, callback_id: str) -> bool:
        """Acknowledge a button press so the client clears its spinner."""

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    @abstractmethod
    def receive_updates(self) -> AsyncIterator[InboundEvent]:
        """Yield inbound events until the channel is closed."""

    @abstractmethod
    def is_allowed(self, user_id: int) -> bool:
        """Return True if ``user_id`` may interact with the bot."""

    # ------------------------------------------------------------------
    # Optional
    # ------------------------------------------------------------------

    def healthcheck(self) -> dict[str, Any]:
        return {"status": "ok", "channel": self.channel_name}
