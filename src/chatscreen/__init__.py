"""
chatscreen — screen, navigation and event-routing engine for chat bot UIs.

A bot built on chatscreen is a set of registered *screens*. Each screen is a
title, a content message and a list of interactive controls. The engine
renders the chat's current screen as one message with an inline keyboard,
tracks where every chat is, and routes button presses and free-text input
back to handlers registered by the application.

Package layout (src/chatscreen/):
  core/       — screens, controls, rendering, routing, state, config
  channels/   — delivery clients / update sources (Telegram, ...)
  bot.py      — update loop dispatching inbound events to the ScreenManager
  demo.py     — demo screen set
  cli/        — Click CLI entry point
"""

__version__ = "0.3.0"
__all__ = ["__version__"]
