"""
Callback-token routing grammar.

A callback token is either a reserved command or an opaque application key:

    "screen:<id>"   navigate to screen <id>            (NavigationMatcher)
    "back"          navigate to the current parent     (BackMatcher)
    anything else   exact key in the screen's handlers (HandlerMatcher)

Matchers are tried in a fixed priority order and the first match wins, so a
"screen:" token navigates even when the current screen also registered a
handler under the very same key.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from chatscreen.core.constants import BACK_TOKEN, NAVIGATION_PREFIX
from chatscreen.core.screen import Handler, Screen


class RouteKind(str, Enum):
    NAVIGATE = "navigate"
    BACK = "back"
    HANDLER = "handler"
    UNMATCHED = "unmatched"


@dataclass(frozen=True)
class Route:
    kind: RouteKind
    target_screen_id: str = ""
    handler: Handler | None = None


UNMATCHED = Route(kind=RouteKind.UNMATCHED)


class TokenMatcher(Protocol):
    def match(self, token: str, screen: Screen) -> Route | None: ...


class NavigationMatcher:
    """``screen:<id>`` — prefix match, the remainder is the target id."""

    prefix = NAVIGATION_PREFIX

    def match(self, token: str, screen: Screen) -> Route | None:
        if token.startswith(self.prefix):
            return Route(kind=RouteKind.NAVIGATE, target_screen_id=token[len(self.prefix) :])
        return None


class BackMatcher:
    """The back sentinel, only when the current screen has a parent."""

    token = BACK_TOKEN

    def match(self, token: str, screen: Screen) -> Route | None:
        if token == self.token and screen.parent_screen is not None:
            return Route(kind=RouteKind.BACK, target_screen_id=screen.parent_screen.id)
        return None


class HandlerMatcher:
    """Verbatim lookup in the current screen's handler table."""

    def match(self, token: str, screen: Screen) -> Route | None:
        handler = screen.get_handler(token)
        if handler is not None:
            return Route(kind=RouteKind.HANDLER, handler=handler)
        return None


DEFAULT_MATCHERS: tuple[TokenMatcher, ...] = (
    NavigationMatcher(),
    BackMatcher(),
    HandlerMatcher(),
)


def resolve_callback(
    token: str,
    screen: Screen,
    matchers: tuple[TokenMatcher, ...] = DEFAULT_MATCHERS,
) -> Route:
    """Return the first matching route for ``token`` on ``screen``."""
    for matcher in matchers:
        route = matcher.match(token, screen)
        if route is not None:
            return route
    return UNMATCHED
