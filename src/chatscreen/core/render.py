"""
Screen composition — turn a Screen into the one Message sent to the chat.

Algorithm:
  1. Start from a copy of the screen's content (its text, flags, buttons).
  2. Render each control in order. The first non-empty control text becomes
     the primary text if the content text is empty (first wins, never
     concatenated). Every control's buttons are appended in control order.
  3. Append the synthetic back button when the screen has a parent and back
     navigation is allowed.
  4. Prefix the text with the bold title when the title is non-empty.

Per-control ``buttons_per_row`` hints are flattened away: the whole grid is
laid out with the content's ``buttons_per_row``.

Composition never mutates the screen, so rendering twice yields the same
Message as long as no handler changed a control in between.
"""

from __future__ import annotations

from chatscreen.core.constants import BACK_TOKEN, DEFAULT_BACK_BUTTON_TEXT
from chatscreen.core.controls import render_control
from chatscreen.core.message import Button, Message
from chatscreen.core.screen import Screen


def back_button(screen: Screen) -> Button:
    return Button(screen.back_button_text or DEFAULT_BACK_BUTTON_TEXT, callback_data=BACK_TOKEN)


def compose_screen(screen: Screen) -> Message:
    """Compose ``screen`` into a single outbound Message."""
    content = screen.content
    text = content.text
    image_url = content.image_url
    image_caption = content.image_caption
    buttons = list(content.buttons)

    for control in screen.controls:
        fragment = render_control(control)
        if fragment.text and not text:
            text = fragment.text
        if fragment.image_url and not image_url:
            image_url = fragment.image_url
        buttons.extend(fragment.buttons)

    if screen.parent_screen is not None and screen.allow_back_navigation:
        buttons.append(back_button(screen))

    if screen.title:
        text = f"*{screen.title}*\n\n{text}"

    return Message(
        text=text,
        parse_markdown=content.parse_markdown,
        style=content.style,
        buttons=buttons,
        buttons_per_row=max(1, content.buttons_per_row),
        image_url=image_url,
        image_caption=image_caption,
    )
