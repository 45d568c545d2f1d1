"""Short identifiers for screens and controls."""

from __future__ import annotations

import secrets
import string

from chatscreen.core.constants import SHORT_ID_LENGTH

_ALPHABET = string.ascii_letters + string.digits + "_-"


def short_id(length: int = SHORT_ID_LENGTH) -> str:
    """Return a random URL-safe id of at most ``length`` characters."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))
