"""
UI controls — self-rendering primitives owned by a Screen.

The set of controls is closed: ``UIControl`` is the union of the dataclasses
below and ``render_control`` is the single dispatch point turning any of them
into a Message. Rendering is a pure function of the control's current fields;
handlers mutate those fields and ask for a refresh.

Callback tokens emitted by controls:

    toggle      "{callback_data}:on" / "{callback_data}:off"
    carousel    "carousel:{id}:prev" / ":info" / ":next"
    accordion   "accordion:{id}:expand" / ":collapse"
    rating      "{callback_prefix}:{1..5}"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from chatscreen.core.constants import ACCORDION_PREFIX, CAROUSEL_PREFIX
from chatscreen.core.ids import short_id
from chatscreen.core.message import Button, FluentStyle, Message

MAX_RATING = 5
CENTER_PADDING = " " * 6
RIGHT_PADDING = " " * 16


class TextAlignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------


@dataclass
class TextButton:
    text: str
    callback_data: str
    id: str = field(default_factory=short_id)
    style: FluentStyle = FluentStyle.DEFAULT


@dataclass
class ButtonGroup:
    buttons: list[Button] = field(default_factory=list)
    buttons_per_row: int = 1
    id: str = field(default_factory=short_id)
    style: FluentStyle = FluentStyle.DEFAULT

    def add_button(self, button: Button) -> ButtonGroup:
        self.buttons.append(button)
        return self


@dataclass
class TextInput:
    label: str
    placeholder: str = ""
    id: str = field(default_factory=short_id)
    style: FluentStyle = FluentStyle.DEFAULT


@dataclass
class Toggle:
    label: str
    callback_data: str
    is_on: bool = False
    on_text: str = "ON"
    off_text: str = "OFF"
    id: str = field(default_factory=short_id)
    style: FluentStyle = FluentStyle.DEFAULT


@dataclass
class ImageCarousel:
    image_urls: list[str]
    captions: list[str] = field(default_factory=list)
    current_index: int = 0
    id: str = field(default_factory=short_id)
    style: FluentStyle = FluentStyle.DEFAULT

    def __post_init__(self) -> None:
        # Captions run parallel to the images; missing ones are blank.
        missing = len(self.image_urls) - len(self.captions)
        if missing > 0:
            self.captions = list(self.captions) + [""] * missing

    def token(self, action: str) -> str:
        return f"{CAROUSEL_PREFIX}{self.id}:{action}"


@dataclass
class ProgressIndicator:
    label: str
    progress: int = 0
    show_percentage: bool = True
    filled_char: str = "█"
    empty_char: str = "░"
    width: int = 10
    id: str = field(default_factory=short_id)
    style: FluentStyle = FluentStyle.DEFAULT


@dataclass
class Accordion:
    title: str
    content: str
    is_expanded: bool = False
    id: str = field(default_factory=short_id)
    style: FluentStyle = FluentStyle.DEFAULT

    def token(self, action: str) -> str:
        return f"{ACCORDION_PREFIX}{self.id}:{action}"


@dataclass
class RichText:
    text: str
    is_bold: bool = False
    is_italic: bool = False
    is_underlined: bool = False
    alignment: TextAlignment = TextAlignment.LEFT
    id: str = field(default_factory=short_id)
    style: FluentStyle = FluentStyle.DEFAULT


@dataclass
class Rating:
    label: str
    callback_prefix: str
    value: int = 0
    id: str = field(default_factory=short_id)
    style: FluentStyle = FluentStyle.DEFAULT

    def __post_init__(self) -> None:
        self.value = _clamp(self.value, 0, MAX_RATING)


UIControl = Union[
    TextButton,
    ButtonGroup,
    TextInput,
    Toggle,
    ImageCarousel,
    ProgressIndicator,
    Accordion,
    RichText,
    Rating,
]

CONTROL_TYPES: tuple[type, ...] = (
    TextButton,
    ButtonGroup,
    TextInput,
    Toggle,
    ImageCarousel,
    ProgressIndicator,
    Accordion,
    RichText,
    Rating,
)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render_control(control: UIControl) -> Message:
    """Render any control variant into a Message."""
    if isinstance(control, TextButton):
        return Message(
            buttons=[Button(control.text, callback_data=control.callback_data, style=control.style)],
            style=control.style,
        )

    elif isinstance(control, ButtonGroup):
        return Message(
            buttons=list(control.buttons),
            buttons_per_row=control.buttons_per_row,
            style=control.style,
        )

    elif isinstance(control, TextInput):
        return Message(text=control.label, style=control.style)

    elif isinstance(control, Toggle):
        return _render_toggle(control)

    elif isinstance(control, ImageCarousel):
        return _render_carousel(control)

    elif isinstance(control, ProgressIndicator):
        return Message(text=_progress_text(control), style=control.style)

    elif isinstance(control, Accordion):
        return _render_accordion(control)

    elif isinstance(control, RichText):
        return Message(text=_rich_text(control), parse_markdown=True, style=control.style)

    elif isinstance(control, Rating):
        return _render_rating(control)

    raise TypeError(f"Unknown control type: {type(control).__name__}")


def _render_toggle(toggle: Toggle) -> Message:
    current = toggle.on_text if toggle.is_on else toggle.off_text
    other = toggle.off_text if toggle.is_on else toggle.on_text
    action = "off" if toggle.is_on else "on"
    return Message(
        text=f"{toggle.label}: {current}",
        buttons=[
            Button(f"Turn {other}", callback_data=f"{toggle.callback_data}:{action}", style=toggle.style)
        ],
        style=toggle.style,
    )


def _render_carousel(carousel: ImageCarousel) -> Message:
    count = len(carousel.image_urls)
    if count == 0:
        return Message(style=carousel.style, buttons_per_row=3)

    index = _clamp(carousel.current_index, 0, count - 1)
    buttons: list[Button] = []
    if index > 0:
        buttons.append(Button("◀️ Prev", callback_data=carousel.token("prev"), style=carousel.style))
    buttons.append(
        Button(f"{index + 1}/{count}", callback_data=carousel.token("info"), style=carousel.style)
    )
    if index < count - 1:
        buttons.append(Button("Next ▶️", callback_data=carousel.token("next"), style=carousel.style))

    caption = carousel.captions[index] if index < len(carousel.captions) else ""
    return Message(
        text=caption,
        image_url=carousel.image_urls[index],
        image_caption=caption,
        buttons=buttons,
        buttons_per_row=3,
        style=carousel.style,
    )


def _progress_text(indicator: ProgressIndicator) -> str:
    progress = _clamp(indicator.progress, 0, 100)
    filled = round(progress * indicator.width / 100)
    bar = indicator.filled_char * filled + indicator.empty_char * (indicator.width - filled)
    if indicator.show_percentage:
        return f"{indicator.label}: {bar} {progress}%"
    return f"{indicator.label}: {bar}"


def _render_accordion(accordion: Accordion) -> Message:
    if accordion.is_expanded:
        text = f"*{accordion.title}*\n\n{accordion.content}"
        button = Button("▼ Collapse", callback_data=accordion.token("collapse"), style=accordion.style)
    else:
        text = f"*{accordion.title}*"
        button = Button("▶ Expand", callback_data=accordion.token("expand"), style=accordion.style)
    return Message(text=text, parse_markdown=True, buttons=[button], style=accordion.style)


def _rich_text(rich: RichText) -> str:
    text = rich.text
    if rich.is_italic:
        text = f"_{text}_"
    if rich.is_bold:
        text = f"*{text}*"
    # Underline has no plain-markdown form; it is kept as metadata only.

    if rich.alignment == TextAlignment.CENTER:
        return "\n".join(f"{CENTER_PADDING}{line}{CENTER_PADDING}" for line in text.split("\n"))
    if rich.alignment == TextAlignment.RIGHT:
        return "\n".join(f"{RIGHT_PADDING}{line}" for line in text.split("\n"))
    return text


def _render_rating(rating: Rating) -> Message:
    value = _clamp(rating.value, 0, MAX_RATING)
    stars = "⭐" * value if value else "Not rated"
    return Message(
        text=f"{rating.label}: {stars}",
        buttons=[
            Button(str(n), callback_data=f"{rating.callback_prefix}:{n}", style=rating.style)
            for n in range(1, MAX_RATING + 1)
        ],
        buttons_per_row=MAX_RATING,
        style=rating.style,
    )


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))
