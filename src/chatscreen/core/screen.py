"""
Screen — an addressable unit of UI state.

A screen holds a title, one content Message, an ordered list of controls
(insertion order is render order), a table of event handlers and an optional
back-reference to a parent screen. The parent link is a reference only: the
ScreenManager owns registration, and a parent may be unregistered while a
child still points at it.

Handler keys:

    "<callback token>"          button press with that exact token
    "text_input:<state name>"   free text while the chat is in that named state
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chatscreen.core.constants import DEFAULT_BACK_BUTTON_TEXT, NAVIGATION_PREFIX, TEXT_INPUT_PREFIX
from chatscreen.core.controls import MAX_RATING, Accordion, ImageCarousel, Rating, Toggle, UIControl
from chatscreen.core.ids import short_id
from chatscreen.core.message import Button, Message

if TYPE_CHECKING:
    from chatscreen.core.context import HandlerContext

# Returning True asks the manager to re-render the screen.
Handler = Callable[[str, "HandlerContext"], Awaitable[bool] | bool]


def text_input_key(state_name: str) -> str:
    return f"{TEXT_INPUT_PREFIX}{state_name}"


def navigation_button(text: str, screen_id: str) -> Button:
    """A button that opens ``screen_id`` when pressed. No handler is needed."""
    return Button(text, callback_data=f"{NAVIGATION_PREFIX}{screen_id}")


@dataclass(eq=False)
class Screen:
    title: str = ""
    content: Message = field(default_factory=Message)
    controls: list[UIControl] = field(default_factory=list)
    event_handlers: dict[str, Handler] = field(default_factory=dict, repr=False)
    parent_screen: Screen | None = field(default=None, repr=False)
    allow_back_navigation: bool = True
    back_button_text: str = DEFAULT_BACK_BUTTON_TEXT
    is_main_screen: bool = False
    id: str = field(default_factory=short_id)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_callback(self, token: str, handler: Handler) -> Screen:
        self.event_handlers[token] = handler
        return self

    def on_text_input(self, state_name: str, handler: Handler) -> Screen:
        self.event_handlers[text_input_key(state_name)] = handler
        return self

    def get_handler(self, key: str) -> Handler | None:
        return self.event_handlers.get(key)

    def get_text_input_handler(self, state_name: str) -> Handler | None:
        return self.event_handlers.get(text_input_key(state_name))

    # ------------------------------------------------------------------
    # Controls and content
    # ------------------------------------------------------------------

    def add_control(self, control: UIControl) -> Screen:
        self.controls.append(control)
        return self

    def add_controls(self, controls: Iterable[UIControl]) -> Screen:
        self.controls.extend(controls)
        return self

    def find_control(self, control_id: str) -> UIControl | None:
        for control in self.controls:
            if control.id == control_id:
                return control
        return None

    def with_content(self, message: Message) -> Screen:
        self.content = message
        return self

    def with_parent(self, parent: Screen | None) -> Screen:
        self.parent_screen = parent
        return self

    def allow_back(self, allow: bool = True) -> Screen:
        self.allow_back_navigation = allow
        return self

    def with_back_button_text(self, text: str) -> Screen:
        self.back_button_text = text
        return self

    def as_main_screen(self, is_main: bool = True) -> Screen:
        self.is_main_screen = is_main
        return self

    # ------------------------------------------------------------------
    # Control handler wiring
    # ------------------------------------------------------------------

    def bind_toggle(self, toggle: Toggle) -> Screen:
        """Add ``toggle`` and register its on/off handlers."""
        if toggle not in self.controls:
            self.add_control(toggle)

        async def _set(token: str, ctx: HandlerContext) -> bool:
            toggle.is_on = token.endswith(":on")
            return True

        self.on_callback(f"{toggle.callback_data}:on", _set)
        self.on_callback(f"{toggle.callback_data}:off", _set)
        return self

    def bind_carousel(self, carousel: ImageCarousel) -> Screen:
        """Add ``carousel`` and register prev/next/info handlers."""
        if carousel not in self.controls:
            self.add_control(carousel)

        async def _prev(token: str, ctx: HandlerContext) -> bool:
            if carousel.current_index > 0:
                carousel.current_index -= 1
            return True

        async def _next(token: str, ctx: HandlerContext) -> bool:
            if carousel.current_index < len(carousel.image_urls) - 1:
                carousel.current_index += 1
            return True

        async def _info(token: str, ctx: HandlerContext) -> bool:
            return False

        self.on_callback(carousel.token("prev"), _prev)
        self.on_callback(carousel.token("next"), _next)
        self.on_callback(carousel.token("info"), _info)
        return self

    def bind_accordion(self, accordion: Accordion) -> Screen:
        """Add ``accordion`` and register expand/collapse handlers."""
        if accordion not in self.controls:
            self.add_control(accordion)

        async def _expand(token: str, ctx: HandlerContext) -> bool:
            accordion.is_expanded = True
            return True

        async def _collapse(token: str, ctx: HandlerContext) -> bool:
            accordion.is_expanded = False
            return True

        self.on_callback(accordion.token("expand"), _expand)
        self.on_callback(accordion.token("collapse"), _collapse)
        return self

    def bind_rating(self, rating: Rating) -> Screen:
        """Add ``rating`` and register one handler per star value."""
        if rating not in self.controls:
            self.add_control(rating)

        async def _rate(token: str, ctx: HandlerContext) -> bool:
            rating.value = int(token.rsplit(":", 1)[1])
            return True

        for n in range(1, MAX_RATING + 1):
            self.on_callback(f"{rating.callback_prefix}:{n}", _rate)
        return self
