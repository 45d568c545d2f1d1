"""
ScreenManager — screen registry, per-chat navigation and event routing.

The manager owns three things:

  - the id-keyed registry of screens (plus the main-screen pointer)
  - one NavigationState per chat: current screen id + last rendered message id
  - the StateMachine holding per-chat key/value and named state

Navigation replaces the chat's rendered screen: the previous message is
deleted (best effort) and the target screen is composed and sent as one new
message. Inbound button presses are routed navigation > back > handler;
free-text input goes to the current screen's ``text_input:<state>`` handler.

Failure policy is "fail silent, log loud": unknown screens, handler
exceptions and delivery errors are logged and never reach the chat or the
update loop.

Concurrency: each chat has an asyncio.Lock guarding its NavigationState
update together with the delete + send pair. The lock is never held while
application handlers run, so a handler may navigate or refresh any chat,
its own included, and tasks it spawns simply queue for the lock.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from chatscreen.channels.base import BaseChannel
from chatscreen.core.constants import (
    DEFAULT_INITIAL_STATE,
    DEFAULT_START_COMMAND,
    LAST_INPUT_KEY,
)
from chatscreen.core.context import HandlerContext
from chatscreen.core.events import CallbackEvent, TextMessageEvent
from chatscreen.core.render import compose_screen
from chatscreen.core.routing import DEFAULT_MATCHERS, RouteKind, TokenMatcher, resolve_callback
from chatscreen.core.screen import Handler, Screen
from chatscreen.core.state import StateMachine

logger = logging.getLogger(__name__)

@dataclass
class NavigationState:
    """Where one chat is. ``last_message_id`` 0 means nothing rendered yet."""

    current_screen_id: str = ""
    last_message_id: int = 0


class ScreenManager:
    """
    Registry, navigator and router for one bot.

    Usage::

        manager = ScreenManager(channel)
        manager.register_screen(main, is_main=True)
        manager.register_screen(settings)
        await manager.navigate_to_main_screen(chat_id)
        await manager.handle_callback(event)
    """

    def __init__(
        self,
        channel: BaseChannel,
        state_machine: StateMachine | None = None,
        *,
        start_command: str = DEFAULT_START_COMMAND,
        initial_state: str = DEFAULT_INITIAL_STATE,
        matchers: tuple[TokenMatcher, ...] = DEFAULT_MATCHERS,
    ) -> None:
        self._channel = channel
        self.state_machine = state_machine or StateMachine()
        self.start_command = start_command
        self.initial_state = initial_state
        self._matchers = matchers
        self._screens: dict[str, Screen] = {}
        self._navigation: dict[int, NavigationState] = {}
        self._locks: dict[int, asyncio.Lock] = {}
        self._main_screen: Screen | None = None

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def register_screen(self, screen: Screen, is_main: bool = False) -> None:
        """Register ``screen`` by id. A later screen with the same id wins."""
        if screen.id in self._screens and self._screens[screen.id] is not screen:
            logger.warning("Screen id %s re-registered; replacing previous screen", screen.id)
        self._screens[screen.id] = screen
        if is_main:
            self._main_screen = screen

    def set_main_screen(self, screen: Screen) -> None:
        if screen.id not in self._screens:
            self.register_screen(screen)
        self._main_screen = screen

    def unregister_screen(self, screen_id: str) -> Screen | None:
        screen = self._screens.pop(screen_id, None)
        if screen is not None and screen is self._main_screen:
            self._main_screen = None
        return screen

    def lookup_screen(self, screen_id: str) -> Screen | None:
        return self._screens.get(screen_id)

    @property
    def main_screen(self) -> Screen | None:
        return self._main_screen

    @property
    def screens(self) -> Mapping[str, Screen]:
        return MappingProxyType(self._screens)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def navigation_state(self, chat_id: int) -> NavigationState | None:
        return self._navigation.get(chat_id)

    def current_screen(self, chat_id: int) -> Screen | None:
        nav = self._navigation.get(chat_id)
        if nav is None or not nav.current_screen_id:
            return None
        return self._screens.get(nav.current_screen_id)

    async def navigate_to_screen(self, chat_id: int, screen_id: str) -> None:
        """
        Show ``screen_id`` in ``chat_id``, replacing the previous screen.

        Unknown ids are logged and ignored. A send failure propagates and
        leaves the chat pointing at the target screen with no rendered message.
        """
        async with self._chat_lock(chat_id):
            await self._navigate(chat_id, screen_id)

    async def navigate_to_main_screen(self, chat_id: int) -> None:
        if self._main_screen is None:
            logger.error("No main screen set")
            return
        await self.navigate_to_screen(chat_id, self._main_screen.id)

    async def update_screen(self, chat_id: int) -> None:
        """Re-render the chat's current screen in place of the previous message."""
        async with self._chat_lock(chat_id):
            screen = self.current_screen(chat_id)
            if screen is None:
                logger.warning("No current screen for chat %s", chat_id)
                return
            await self._render_and_replace(chat_id, self._navigation[chat_id], screen)

    async def _navigate(self, chat_id: int, screen_id: str) -> None:
        screen = self._screens.get(screen_id)
        if screen is None:
            logger.error("Screen not found: %s", screen_id)
            return

        nav = self._navigation.setdefault(chat_id, NavigationState())
        nav.current_screen_id = screen_id
        self.state_machine.set_current_screen(chat_id, screen_id)
        logger.debug("Chat %s → screen %s", chat_id, screen_id)

        await self._render_and_replace(chat_id, nav, screen)

    async def _render_and_replace(self, chat_id: int, nav: NavigationState, screen: Screen) -> None:
        if nav.last_message_id:
            try:
                deleted = await self._channel.delete_message(chat_id, nav.last_message_id)
                if not deleted:
                    logger.warning(
                        "Failed to delete previous message %s in chat %s",
                        nav.last_message_id,
                        chat_id,
                    )
            except Exception as exc:  # noqa: BLE001
                logger.warning("Failed to delete previous message: %s", exc)
            nav.last_message_id = 0

        message = compose_screen(screen)
        nav.last_message_id = await self._channel.send_text(
            chat_id,
            message.text,
            parse_markdown=message.parse_markdown,
            keyboard=message.to_keyboard(),
            image_url=message.image_url,
        )

    # ------------------------------------------------------------------
    # Inbound: button presses
    # ------------------------------------------------------------------

    async def handle_callback(self, event: CallbackEvent) -> None:
        """
        Route one button press.

        Order: navigation token, back token, exact handler key. Every routed
        press is acknowledged; a press for a chat with no current screen is
        dropped without acknowledgment. The handler runs outside the chat
        lock; only the refresh that follows it takes the lock.
        """
        screen = self.current_screen(event.chat_id)
        if screen is None:
            logger.warning("No current screen for chat %s", event.chat_id)
            return

        route = resolve_callback(event.token, screen, self._matchers)
        logger.debug("Callback %r in chat %s → %s", event.token, event.chat_id, route.kind.value)

        if route.kind in (RouteKind.NAVIGATE, RouteKind.BACK):
            await self._navigate_safely(event.chat_id, route.target_screen_id)
            await self._answer(event.callback_id)
            return

        refresh = False
        if route.kind is RouteKind.HANDLER and route.handler is not None:
            refresh = await self._invoke(
                route.handler, event.token, HandlerContext.from_callback(event)
            )

        await self._answer(event.callback_id)

        if refresh:
            await self._refresh_safely(event.chat_id)

    # ------------------------------------------------------------------
    # Inbound: text messages
    # ------------------------------------------------------------------

    async def handle_text_message(self, event: TextMessageEvent) -> None:
        """
        Route one free-text message.

        The start command resets the chat: main screen, cleared state, named
        state set to the initial state. Any other text goes to the current
        screen's handler for the chat's named state, if there is one.
        """
        if event.text.strip() == self.start_command:
            await self._reset_chat(event.chat_id)
            return

        state_name = self.state_machine.get_current_state(event.chat_id)
        screen = self.current_screen(event.chat_id)
        if not state_name or screen is None:
            logger.debug("Ignoring text in chat %s: no state or screen", event.chat_id)
            return

        handler = screen.get_text_input_handler(state_name)
        if handler is None:
            logger.debug(
                "Ignoring text in chat %s: screen %s has no input handler for state %r",
                event.chat_id,
                screen.id,
                state_name,
            )
            return

        self.state_machine.set_state(event.chat_id, LAST_INPUT_KEY, event.text)
        refresh = await self._invoke(handler, event.text, HandlerContext.from_message(event))
        if refresh:
            await self._refresh_safely(event.chat_id)

    async def _reset_chat(self, chat_id: int) -> None:
        if self._main_screen is None:
            logger.error("No main screen set")
        else:
            await self._navigate_safely(chat_id, self._main_screen.id)
        self.state_machine.clear_state(chat_id)
        self.state_machine.set_current_state(chat_id, self.initial_state)

    # ------------------------------------------------------------------
    # State pass-through
    # ------------------------------------------------------------------

    def set_state(self, chat_id: int, key: str, value: Any) -> None:
        self.state_machine.set_state(chat_id, key, value)

    def get_state(self, chat_id: int, key: str, default: Any = None, expected_type: type | None = None) -> Any:
        return self.state_machine.get_state(chat_id, key, default, expected_type)

    def remove_state(self, chat_id: int, key: str) -> bool:
        return self.state_machine.remove_state(chat_id, key)

    def clear_state(self, chat_id: int) -> None:
        self.state_machine.clear_state(chat_id)

    def set_current_state(self, chat_id: int, state_name: str) -> None:
        self.state_machine.set_current_state(chat_id, state_name)

    def get_current_state(self, chat_id: int) -> str | None:
        return self.state_machine.get_current_state(chat_id)

    def is_in_state(self, chat_id: int, state_name: str) -> bool:
        return self.state_machine.is_in_state(chat_id, state_name)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _invoke(self, handler: Handler, data: str, ctx: HandlerContext) -> bool:
        """Run an application handler. A failing handler means no refresh."""
        try:
            result = handler(data, ctx)
            if inspect.isawaitable(result):
                result = await result
            return bool(result)
        except Exception:
            logger.exception("Error in event handler for chat %s", ctx.chat_id)
            return False

    async def _navigate_safely(self, chat_id: int, screen_id: str) -> None:
        try:
            async with self._chat_lock(chat_id):
                await self._navigate(chat_id, screen_id)
        except Exception as exc:  # noqa: BLE001
            logger.error("Navigation to %s failed in chat %s: %s", screen_id, chat_id, exc)

    async def _refresh_safely(self, chat_id: int) -> None:
        async with self._chat_lock(chat_id):
            # Re-read under the lock: the handler may have navigated.
            screen = self.current_screen(chat_id)
            if screen is None:
                return
            try:
                await self._render_and_replace(chat_id, self._navigation[chat_id], screen)
            except Exception as exc:  # noqa: BLE001
                logger.error("Refresh of screen %s failed in chat %s: %s", screen.id, chat_id, exc)

    async def _answer(self, callback_id: str) -> None:
        try:
            await self._channel.answer_callback(callback_id)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to answer callback %s: %s", callback_id, exc)

    def _chat_lock(self, chat_id: int) -> asyncio.Lock:
        """The lock serialising navigation state and rendering for one chat."""
        return self._locks.setdefault(chat_id, asyncio.Lock())
