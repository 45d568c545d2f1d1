"""
Unit tests for control rendering.

Each control renders to a Message; the expected strings here are the exact
text and button labels users see in the chat.
"""

from __future__ import annotations

import pytest

from chatscreen.core.controls import (
    Accordion,
    ButtonGroup,
    ImageCarousel,
    ProgressIndicator,
    Rating,
    RichText,
    TextAlignment,
    TextButton,
    TextInput,
    Toggle,
    render_control,
)
from chatscreen.core.message import Button, FluentStyle


def _tokens(message) -> list[str]:
    return [b.callback_data for b in message.buttons]


def _labels(message) -> list[str]:
    return [b.text for b in message.buttons]


class TestSimpleControls:
    def test_text_button(self) -> None:
        msg = render_control(TextButton("Hello", "hello", style=FluentStyle.FUN))
        assert msg.text == ""
        assert _labels(msg) == ["Hello"]
        assert _tokens(msg) == ["hello"]
        assert msg.buttons[0].style is FluentStyle.FUN

    def test_button_group_keeps_order_and_hint(self) -> None:
        group = ButtonGroup(buttons_per_row=2)
        group.add_button(Button("a", callback_data="a")).add_button(Button("b", callback_data="b"))
        msg = render_control(group)
        assert _tokens(msg) == ["a", "b"]
        assert msg.buttons_per_row == 2

    def test_text_input_shows_label(self) -> None:
        msg = render_control(TextInput("Your name?", placeholder="Jane"))
        assert msg.text == "Your name?"
        assert msg.buttons == []

    def test_ids_are_unique(self) -> None:
        ids = {TextButton("x", "x").id for _ in range(50)}
        assert len(ids) == 50

    def test_unknown_control_rejected(self) -> None:
        with pytest.raises(TypeError):
            render_control(object())  # type: ignore[arg-type]


class TestToggle:
    def test_off(self) -> None:
        msg = render_control(Toggle("Notifications", "notif"))
        assert msg.text == "Notifications: OFF"
        assert _labels(msg) == ["Turn ON"]
        assert _tokens(msg) == ["notif:on"]

    def test_on(self) -> None:
        msg = render_control(Toggle("Notifications", "notif", is_on=True))
        assert msg.text == "Notifications: ON"
        assert _labels(msg) == ["Turn OFF"]
        assert _tokens(msg) == ["notif:off"]

    def test_custom_texts(self) -> None:
        msg = render_control(Toggle("Mode", "mode", is_on=True, on_text="Dark", off_text="Light"))
        assert msg.text == "Mode: Dark"
        assert _labels(msg) == ["Turn Light"]


class TestImageCarousel:
    def _carousel(self, index: int = 0) -> ImageCarousel:
        return ImageCarousel(["u1", "u2", "u3"], captions=["one", "two"], current_index=index)

    def test_first_image_has_no_prev(self) -> None:
        c = self._carousel()
        msg = render_control(c)
        assert msg.image_url == "u1"
        assert msg.text == "one"
        assert _labels(msg) == ["1/3", "Next ▶️"]
        assert _tokens(msg) == [c.token("info"), c.token("next")]
        assert msg.buttons_per_row == 3

    def test_middle_image_has_both(self) -> None:
        c = self._carousel(1)
        msg = render_control(c)
        assert _labels(msg) == ["◀️ Prev", "2/3", "Next ▶️"]
        assert _tokens(msg)[0] == f"carousel:{c.id}:prev"

    def test_last_image_has_no_next_and_padded_caption(self) -> None:
        msg = render_control(self._carousel(2))
        assert _labels(msg) == ["◀️ Prev", "3/3"]
        assert msg.text == ""

    def test_empty_carousel(self) -> None:
        msg = render_control(ImageCarousel([]))
        assert msg.text == ""
        assert msg.buttons == []
        assert not msg.has_image


class TestProgressIndicator:
    def test_with_percentage(self) -> None:
        msg = render_control(ProgressIndicator("Upload", progress=40))
        assert msg.text == "Upload: ████░░░░░░ 40%"

    def test_without_percentage(self) -> None:
        msg = render_control(ProgressIndicator("Upload", progress=100, show_percentage=False))
        assert msg.text == "Upload: ██████████"

    def test_clamped(self) -> None:
        assert render_control(ProgressIndicator("x", progress=150)).text.endswith("100%")
        assert render_control(ProgressIndicator("x", progress=-5)).text == "x: ░░░░░░░░░░ 0%"

    def test_rounds_half_to_even(self) -> None:
        # 25% of 10 cells = 2.5 → 2; 35% → 3.5 → 4
        assert render_control(ProgressIndicator("x", progress=25)).text.count("█") == 2
        assert render_control(ProgressIndicator("x", progress=35)).text.count("█") == 4

    def test_custom_chars_and_width(self) -> None:
        msg = render_control(
            ProgressIndicator("x", progress=50, filled_char="#", empty_char="-", width=4)
        )
        assert msg.text == "x: ##-- 50%"


class TestAccordion:
    def test_collapsed(self) -> None:
        a = Accordion("Title", "Body")
        msg = render_control(a)
        assert msg.text == "*Title*"
        assert _labels(msg) == ["▶ Expand"]
        assert _tokens(msg) == [f"accordion:{a.id}:expand"]

    def test_expanded(self) -> None:
        a = Accordion("Title", "Body", is_expanded=True)
        msg = render_control(a)
        assert msg.text == "*Title*\n\nBody"
        assert _labels(msg) == ["▼ Collapse"]
        assert _tokens(msg) == [a.token("collapse")]
        assert msg.parse_markdown is True


class TestRichText:
    def test_plain(self) -> None:
        assert render_control(RichText("hi")).text == "hi"

    def test_bold_italic(self) -> None:
        assert render_control(RichText("hi", is_bold=True, is_italic=True)).text == "*_hi_*"

    def test_underline_has_no_markup(self) -> None:
        assert render_control(RichText("hi", is_underlined=True)).text == "hi"

    def test_center(self) -> None:
        msg = render_control(RichText("a\nb", alignment=TextAlignment.CENTER))
        assert msg.text == "      a      \n      b      "

    def test_right(self) -> None:
        msg = render_control(RichText("a", alignment=TextAlignment.RIGHT))
        assert msg.text == " " * 16 + "a"


class TestRating:
    def test_not_rated(self) -> None:
        msg = render_control(Rating("Service", "rate"))
        assert msg.text == "Service: Not rated"
        assert _labels(msg) == ["1", "2", "3", "4", "5"]
        assert _tokens(msg) == [f"rate:{n}" for n in range(1, 6)]
        assert msg.buttons_per_row == 5

    def test_stars(self) -> None:
        assert render_control(Rating("Service", "rate", value=3)).text == "Service: ⭐⭐⭐"

    def test_value_clamped(self) -> None:
        assert Rating("x", "r", value=9).value == 5
        assert Rating("x", "r", value=-1).value == 0
