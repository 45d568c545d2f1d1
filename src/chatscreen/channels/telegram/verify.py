"""Verify a Telegram bot token against the getMe endpoint."""

from __future__ import annotations

import httpx

from chatscreen.core.constants import TELEGRAM_API_BASE


def verify_telegram_token(token: str, timeout: float = 10.0) -> tuple[bool, str]:
    """Return ``(ok, detail)``; detail names the bot or explains the failure."""
    try:
        resp = httpx.get(f"{TELEGRAM_API_BASE}/bot{token}/getMe", timeout=timeout)
        data = resp.json()
    except httpx.TimeoutException:
        return False, "Timed out contacting api.telegram.org"
    except httpx.HTTPError as exc:
        return False, f"Could not connect to api.telegram.org: {exc}"

    if not data.get("ok"):
        return False, data.get("description", "Token rejected by Telegram")
    username = data.get("result", {}).get("username", "")
    return True, f"Bot: @{username}"
