"""
Tests for free-text routing through ScreenManager.handle_text_message.

Covers:
  - the start command resets the chat to the main screen and initial state
  - text goes to the current screen's handler for the chat's named state
  - last_input is recorded before the handler runs
  - texts with no state, screen or handler are ignored
"""

from __future__ import annotations

import pytest

from chatscreen.core.constants import LAST_INPUT_KEY
from chatscreen.core.context import HandlerContext
from chatscreen.core.manager import ScreenManager
from chatscreen.core.message import Message
from chatscreen.core.screen import Screen
from tests.conftest import RecordingChannel, text_message


def _setup(manager: ScreenManager) -> tuple[Screen, Screen]:
    main = Screen(id="main", content=Message(text="Welcome"))
    form = Screen(id="form", content=Message(text="Your name?")).with_parent(main)
    manager.register_screen(main, is_main=True)
    manager.register_screen(form)
    return main, form


class TestStartCommand:
    @pytest.mark.asyncio
    async def test_start_resets_chat(self, manager: ScreenManager, channel: RecordingChannel) -> None:
        _setup(manager)
        await manager.navigate_to_screen(1, "form")
        manager.set_state(1, "draft", "half-written")
        manager.set_current_state(1, "awaiting_name")

        await manager.handle_text_message(text_message("/start"))

        assert manager.current_screen(1).id == "main"
        assert manager.get_state(1, "draft") is None
        assert manager.get_current_state(1) == "initial"
        assert channel.sent[-1].text == "Welcome"

    @pytest.mark.asyncio
    async def test_start_with_surrounding_whitespace(
        self, manager: ScreenManager, channel: RecordingChannel
    ) -> None:
        _setup(manager)
        await manager.handle_text_message(text_message("  /start \n"))
        assert manager.current_screen(1).id == "main"

    @pytest.mark.asyncio
    async def test_custom_start_command_and_initial_state(self, channel: RecordingChannel) -> None:
        manager = ScreenManager(channel, start_command="/menu", initial_state="idle")
        _setup(manager)
        await manager.handle_text_message(text_message("/start"))
        assert channel.sent == []
        await manager.handle_text_message(text_message("/menu"))
        assert manager.get_current_state(1) == "idle"
        assert len(channel.sent) == 1

    @pytest.mark.asyncio
    async def test_start_without_main_screen_still_resets_state(
        self, manager: ScreenManager, channel: RecordingChannel
    ) -> None:
        manager.set_state(1, "k", "v")
        await manager.handle_text_message(text_message("/start"))
        assert channel.sent == []
        assert manager.get_state(1, "k") is None
        assert manager.get_current_state(1) == "initial"


class TestTextInputRouting:
    @pytest.mark.asyncio
    async def test_routes_to_state_handler(self, manager: ScreenManager, channel: RecordingChannel) -> None:
        _, form = _setup(manager)
        received: list[tuple[str, HandlerContext, object]] = []

        async def on_name(text: str, ctx: HandlerContext) -> bool:
            received.append((text, ctx, manager.get_state(ctx.chat_id, LAST_INPUT_KEY)))
            return False

        form.on_text_input("awaiting_name", on_name)
        await manager.navigate_to_screen(1, "form")
        manager.set_current_state(1, "awaiting_name")

        await manager.handle_text_message(text_message("Ada", sender_first_name="Ada"))

        assert len(received) == 1
        text, ctx, last_input = received[0]
        assert text == "Ada"
        assert last_input == "Ada"
        assert ctx.first_name == "Ada"
        assert ctx.message is not None
        assert ctx.callback_query is None
        assert len(channel.sent) == 1

    @pytest.mark.asyncio
    async def test_handler_true_refreshes(self, manager: ScreenManager, channel: RecordingChannel) -> None:
        _, form = _setup(manager)

        def on_name(text: str, ctx: HandlerContext) -> bool:
            form.content = Message(text=f"Hello {text}")
            return True

        form.on_text_input("awaiting_name", on_name)
        await manager.navigate_to_screen(1, "form")
        manager.set_current_state(1, "awaiting_name")
        await manager.handle_text_message(text_message("Ada"))

        assert [m.text for m in channel.sent] == ["Your name?", "Hello Ada"]
        assert len(channel.deleted) == 1

    @pytest.mark.asyncio
    async def test_no_named_state_ignored(self, manager: ScreenManager, channel: RecordingChannel) -> None:
        _, form = _setup(manager)
        form.on_text_input("awaiting_name", lambda t, c: True)
        await manager.navigate_to_screen(1, "form")
        await manager.handle_text_message(text_message("hello"))
        assert len(channel.sent) == 1
        assert manager.get_state(1, LAST_INPUT_KEY) is None

    @pytest.mark.asyncio
    async def test_no_handler_for_state_ignored(
        self, manager: ScreenManager, channel: RecordingChannel
    ) -> None:
        _setup(manager)
        await manager.navigate_to_screen(1, "form")
        manager.set_current_state(1, "awaiting_name")
        await manager.handle_text_message(text_message("hello"))
        assert len(channel.sent) == 1
        assert manager.get_state(1, LAST_INPUT_KEY) is None

    @pytest.mark.asyncio
    async def test_no_current_screen_ignored(self, manager: ScreenManager, channel: RecordingChannel) -> None:
        _setup(manager)
        manager.set_current_state(1, "awaiting_name")
        await manager.handle_text_message(text_message("hello"))
        assert channel.sent == []

    @pytest.mark.asyncio
    async def test_handler_on_other_screen_not_used(
        self, manager: ScreenManager, channel: RecordingChannel
    ) -> None:
        main, form = _setup(manager)
        calls: list[str] = []
        form.on_text_input("awaiting_name", lambda t, c: calls.append(t) or False)
        await manager.navigate_to_screen(1, "main")
        manager.set_current_state(1, "awaiting_name")
        await manager.handle_text_message(text_message("hello"))
        assert calls == []

    @pytest.mark.asyncio
    async def test_raising_handler_is_contained(
        self, manager: ScreenManager, channel: RecordingChannel, caplog
    ) -> None:
        _, form = _setup(manager)

        def broken(text: str, ctx: HandlerContext) -> bool:
            raise ValueError("bad input")

        form.on_text_input("awaiting_name", broken)
        await manager.navigate_to_screen(1, "form")
        manager.set_current_state(1, "awaiting_name")
        await manager.handle_text_message(text_message("x"))

        assert len(channel.sent) == 1
        assert "Error in event handler" in caplog.text
