"""
Demo screen tree used by ``chatscreen run --demo``.

    main
    ├── settings     toggle + rating
    ├── gallery      image carousel
    ├── progress     progress bar driven by +/- buttons
    ├── faq          accordion + rich text
    └── feedback     text input bound to the "awaiting_feedback" state
"""

from __future__ import annotations

from chatscreen.core.context import HandlerContext
from chatscreen.core.controls import (
    Accordion,
    ImageCarousel,
    ProgressIndicator,
    Rating,
    RichText,
    TextAlignment,
    TextButton,
    TextInput,
    Toggle,
)
from chatscreen.core.manager import ScreenManager
from chatscreen.core.message import Message
from chatscreen.core.screen import Screen, navigation_button

FEEDBACK_STATE = "awaiting_feedback"


def build_demo(manager: ScreenManager) -> Screen:
    """Register the demo screens on ``manager`` and return the main screen."""
    main = Screen(
        id="main",
        title="chatscreen demo",
        content=Message(
            text="Pick a screen to explore the controls.",
            buttons=[
                navigation_button("⚙️ Settings", "settings"),
                navigation_button("🖼 Gallery", "gallery"),
                navigation_button("📊 Progress", "progress"),
                navigation_button("❓ FAQ", "faq"),
                navigation_button("✉️ Feedback", "feedback"),
            ],
            buttons_per_row=2,
        ),
    ).as_main_screen()

    settings = Screen(id="settings", title="Settings").with_parent(main)
    settings.bind_toggle(Toggle("Notifications", callback_data="notifications"))
    settings.bind_rating(Rating("Your rating", callback_prefix="rate"))

    gallery = Screen(id="gallery", title="Gallery").with_parent(main)
    gallery.bind_carousel(
        ImageCarousel(
            image_urls=[
                "https://picsum.photos/id/10/600/400",
                "https://picsum.photos/id/20/600/400",
                "https://picsum.photos/id/30/600/400",
            ],
            captions=["Forest", "Desk", "Coffee"],
        )
    )

    progress_screen = Screen(id="progress", title="Progress").with_parent(main)
    bar = ProgressIndicator("Upload", progress=40)
    progress_screen.add_controls([bar, TextButton("➖ 10", "progress:down"), TextButton("➕ 10", "progress:up")])

    async def _step(token: str, ctx: HandlerContext) -> bool:
        delta = 10 if token.endswith(":up") else -10
        bar.progress = max(0, min(100, bar.progress + delta))
        return True

    progress_screen.on_callback("progress:up", _step).on_callback("progress:down", _step)

    faq = Screen(id="faq", title="FAQ").with_parent(main)
    faq.bind_accordion(
        Accordion("What is this?", "A bot whose UI is a set of screens rendered as messages.")
    )
    faq.add_control(RichText("Tap a button to navigate.", is_italic=True, alignment=TextAlignment.CENTER))

    feedback = Screen(id="feedback", title="Feedback").with_parent(main)
    feedback.add_controls(
        [
            TextInput("Tap below, then type your feedback.", placeholder="Your message"),
            TextButton("✍️ Write feedback", "feedback:start"),
        ]
    )

    async def _start_feedback(token: str, ctx: HandlerContext) -> bool:
        manager.set_current_state(ctx.chat_id, FEEDBACK_STATE)
        feedback.content = Message(text="Send your feedback as a message.")
        return True

    async def _receive_feedback(text: str, ctx: HandlerContext) -> bool:
        manager.set_current_state(ctx.chat_id, manager.initial_state)
        feedback.content = Message(text=f"Thanks, {ctx.first_name or 'friend'}! We got: {text}")
        return True

    feedback.on_callback("feedback:start", _start_feedback)
    feedback.on_text_input(FEEDBACK_STATE, _receive_feedback)

    manager.register_screen(main, is_main=True)
    for screen in (settings, gallery, progress_screen, faq, feedback):
        manager.register_screen(screen)
    return main
