"""Unit tests for callback token resolution."""

from __future__ import annotations

from chatscreen.core.routing import (
    BackMatcher,
    HandlerMatcher,
    NavigationMatcher,
    RouteKind,
    resolve_callback,
)
from chatscreen.core.screen import Screen


def _noop(data, ctx) -> bool:
    return False


class TestResolveCallback:
    def test_navigation_prefix(self) -> None:
        route = resolve_callback("screen:settings", Screen())
        assert route.kind is RouteKind.NAVIGATE
        assert route.target_screen_id == "settings"

    def test_navigation_beats_literal_handler(self) -> None:
        s = Screen().on_callback("screen:settings", _noop)
        assert resolve_callback("screen:settings", s).kind is RouteKind.NAVIGATE

    def test_back_with_parent(self) -> None:
        s = Screen(parent_screen=Screen(id="home"))
        route = resolve_callback("back", s)
        assert route.kind is RouteKind.BACK
        assert route.target_screen_id == "home"

    def test_back_without_parent_falls_through_to_handlers(self) -> None:
        assert resolve_callback("back", Screen()).kind is RouteKind.UNMATCHED
        s = Screen().on_callback("back", _noop)
        route = resolve_callback("back", s)
        assert route.kind is RouteKind.HANDLER
        assert route.handler is _noop

    def test_exact_handler_match_only(self) -> None:
        s = Screen().on_callback("go", _noop)
        assert resolve_callback("go", s).kind is RouteKind.HANDLER
        assert resolve_callback("go:1", s).kind is RouteKind.UNMATCHED
        assert resolve_callback("Go", s).kind is RouteKind.UNMATCHED

    def test_custom_matcher_order(self) -> None:
        s = Screen().on_callback("screen:x", _noop)
        route = resolve_callback("screen:x", s, (HandlerMatcher(), NavigationMatcher(), BackMatcher()))
        assert route.kind is RouteKind.HANDLER
