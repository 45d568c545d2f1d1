"""
Content fragments: Button and Message.

A Message is the unit every screen and control renders into: text, a
markdown flag, an ordered list of buttons and the number of buttons per
keyboard row. Buttons carry exactly one of a callback token or an external
link; both constraints are enforced at construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class FluentStyle(IntEnum):
    """Cosmetic style tag. Carried through rendering, no behavioural effect."""

    DEFAULT = 0
    LIGHT = 1
    DARK = 2
    COLORFUL = 3
    MODERN = 4
    MINIMALIST = 5
    PROFESSIONAL = 6
    FUN = 7
    TECHNICAL = 8


@dataclass
class Button:
    """An inline keyboard button."""

    text: str
    callback_data: str | None = None
    url: str | None = None
    style: FluentStyle = FluentStyle.DEFAULT

    def __post_init__(self) -> None:
        if not self.text:
            raise ValueError("Button text cannot be empty")
        if bool(self.callback_data) == bool(self.url):
            raise ValueError(
                f"Button {self.text!r} needs exactly one of callback_data or url"
            )

    @property
    def is_link(self) -> bool:
        return bool(self.url)

    def to_keyboard_button(self) -> dict[str, str]:
        """Return the Bot API InlineKeyboardButton dict."""
        if self.url:
            return {"text": self.text, "url": self.url}
        return {"text": self.text, "callback_data": self.callback_data or ""}


@dataclass
class Message:
    """A content fragment: text plus an inline keyboard."""

    text: str = ""
    parse_markdown: bool = True
    style: FluentStyle = FluentStyle.DEFAULT
    buttons: list[Button] = field(default_factory=list)
    buttons_per_row: int = 1
    image_url: str = ""
    image_caption: str = ""

    def __post_init__(self) -> None:
        if self.buttons_per_row < 1:
            raise ValueError("buttons_per_row must be at least 1")

    @property
    def has_image(self) -> bool:
        return bool(self.image_url)

    def effective_image_caption(self) -> str:
        return self.image_caption or self.text

    def to_keyboard(self) -> list[list[dict[str, Any]]] | None:
        """
        Lay the buttons out into rows of ``buttons_per_row``.

        Row-major, left to right; the last row may be short. Returns None
        when there are no buttons so callers can omit ``reply_markup``.
        """
        if not self.buttons:
            return None
        return layout_keyboard(self.buttons, self.buttons_per_row)


def layout_keyboard(buttons: list[Button], buttons_per_row: int) -> list[list[dict[str, Any]]]:
    per_row = max(1, buttons_per_row)
    return [
        [b.to_keyboard_button() for b in buttons[i : i + per_row]]
        for i in range(0, len(buttons), per_row)
    ]
