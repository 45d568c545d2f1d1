"""
chatscreen.channels — outbound delivery clients and inbound update sources.

Available channels:
    telegram/   Telegram Bot API (long polling over httpx)

All channels implement the abstract BaseChannel interface defined
in base.py, making them interchangeable behind the ScreenManager.
"""
