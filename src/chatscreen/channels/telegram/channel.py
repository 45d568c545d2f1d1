"""
TelegramChannel — Telegram Bot API over httpx with long polling.

Outbound:
  sendMessage / sendPhoto      one rendered screen, inline keyboard attached
  deleteMessage                replace-on-navigate
  answerCallbackQuery          clear the client-side spinner

Inbound:
  getUpdates long polling in a background task. Each update is parsed into
  a CallbackEvent or TextMessageEvent and queued for receive_updates().

A 409 Conflict from getUpdates means another process is polling with the
same token: polling stops and the channel keeps running in send-only mode.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from chatscreen.channels.base import BaseChannel, Keyboard
from chatscreen.core.constants import DEFAULT_TELEGRAM_POLL_TIMEOUT, TELEGRAM_API_BASE
from chatscreen.core.events import InboundEvent, parse_update
from chatscreen.core.exceptions import ChannelError

logger = logging.getLogger(__name__)

_ERROR_BACKOFF_SECONDS = 1.0


class TelegramConflictError(ChannelError):
    """Raised when getUpdates answers 409: another poller holds this token."""


class TelegramChannel(BaseChannel):
    channel_name = "telegram"
    display_name = "Telegram"

    def __init__(
        self,
        bot_token: str,
        allowed_user_ids: list[int] | None = None,
        poll_timeout: int = DEFAULT_TELEGRAM_POLL_TIMEOUT,
        api_base: str = TELEGRAM_API_BASE,
    ) -> None:
        self._base_url = f"{api_base}/bot{bot_token}"
        self._allowed = set(allowed_user_ids or [])
        self._poll_timeout = poll_timeout
        self._client: httpx.AsyncClient | None = None
        self._queue: asyncio.Queue[InboundEvent | None] = asyncio.Queue()
        self._poll_task: asyncio.Task[None] | None = None
        self._offset = 0
        self._running = False
        self._polling = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        self._ensure_client()
        self._running = True
        self._polling = True
        self._poll_task = asyncio.create_task(self._poll_loop(), name="telegram_poll")
        logger.info("Telegram channel started")

    async def close(self) -> None:
        self._polling = False
        self._running = False
        if self._poll_task is not None:
            self._poll_task.cancel()
            await asyncio.gather(self._poll_task, return_exceptions=True)
            self._poll_task = None
        await self._queue.put(None)
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        logger.info("Telegram channel closed")

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    async def send_text(
        self,
        chat_id: int,
        text: str,
        parse_markdown: bool = True,
        keyboard: Keyboard | None = None,
        image_url: str = "",
    ) -> int:
        payload: dict[str, Any] = {"chat_id": chat_id}
        if parse_markdown:
            payload["parse_mode"] = "Markdown"
        if keyboard:
            payload["reply_markup"] = {"inline_keyboard": keyboard}

        if image_url:
            payload["photo"] = image_url
            if text:
                payload["caption"] = text
            result = await self._api("sendPhoto", payload)
        else:
            payload["text"] = text
            result = await self._api("sendMessage", payload)

        if not result or "message_id" not in result:
            raise ChannelError(f"Telegram did not accept the message for chat {chat_id}")
        return int(result["message_id"])

    async def delete_message(self, chat_id: int, message_id: int) -> bool:
        result = await self._api("deleteMessage", {"chat_id": chat_id, "message_id": message_id})
        return result is True

    async def answer_callback(self, callback_id: str) -> bool:
        result = await self._api("answerCallbackQuery", {"callback_query_id": callback_id})
        return result is True

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    async def receive_updates(self) -> AsyncIterator[InboundEvent]:  # type: ignore[override]
        while self._running or not self._queue.empty():
            event = await self._queue.get()
            if event is None:
                return
            yield event

    def is_allowed(self, user_id: int) -> bool:
        return not self._allowed or user_id in self._allowed

    def healthcheck(self) -> dict[str, Any]:
        return {
            "status": "ok" if self._running else "stopped",
            "channel": self.channel_name,
            "polling": self._polling,
            "offset": self._offset,
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            # Long polls hold the request open for poll_timeout seconds.
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self._poll_timeout + 10))
        return self._client

    async def _api(self, method: str, payload: dict[str, Any] | None = None) -> Any:
        """
        Call one Bot API method and return its ``result``.

        Returns None on transport errors and non-409 API errors (logged).
        Raises TelegramConflictError on 409.
        """
        client = self._ensure_client()
        try:
            response = await client.post(f"{self._base_url}/{method}", json=payload or {})
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Telegram %s failed: %s", method, exc)
            return None

        if not data.get("ok"):
            if data.get("error_code") == 409:
                raise TelegramConflictError(data.get("description", "Conflict"))
            logger.warning(
                "Telegram %s error %s: %s",
                method,
                data.get("error_code"),
                data.get("description", ""),
            )
            return None
        return data.get("result")

    async def _poll_loop(self) -> None:
        while self._polling:
            try:
                updates = await self._api(
                    "getUpdates",
                    {
                        "offset": self._offset,
                        "timeout": self._poll_timeout,
                        "allowed_updates": ["message", "callback_query"],
                    },
                )
            except TelegramConflictError as exc:
                logger.error("Polling stopped, another instance is polling: %s", exc)
                self._polling = False
                return

            if updates is None:
                await asyncio.sleep(_ERROR_BACKOFF_SECONDS)
                continue

            for update in updates:
                self._offset = max(self._offset, int(update.get("update_id", 0)) + 1)
                event = parse_update(update)
                if event is not None:
                    await self._queue.put(event)
