"""Window stack manager behavior and invariants."""

from __future__ import annotations

import random
from unittest.mock import MagicMock

import pytest

from core.errors import InvalidReferenceError
from geometry.placement import CascadePlacement
from geometry.rect import Rect, ResizeEdge, Size
from routes.pages import AppWindowRoute, build_default_registry
from stacks.entity_state import EntityState
from stacks.window_stack import WindowStackManager

FINDER = AppWindowRoute("finder")
NOTES = AppWindowRoute("notes")
TERMINAL = AppWindowRoute("terminal")


def build_windows(**kwargs) -> WindowStackManager[AppWindowRoute]:
    return WindowStackManager(
        placement=CascadePlacement(seed=7), codec=build_default_registry(), **kwargs
    )


def keys(routes: list[AppWindowRoute]) -> list[str]:
    return [route.key for route in routes]


def test_push_minimize_focus_scenario() -> None:
    windows = build_windows()
    for route in (FINDER, NOTES, TERMINAL):
        windows.push(route)

    assert keys(windows.z_order) == ["/finder", "/notes", "/terminal"]
    assert windows.active_window == TERMINAL

    windows.minimize_window(TERMINAL)
    assert windows.active_window == NOTES
    assert keys(windows.visible_windows) == ["/finder", "/notes"]
    assert keys(windows.minimized_windows) == ["/terminal"]

    windows.focus_window(TERMINAL)
    assert windows.window_entry(TERMINAL).state is EntityState.FLOATING
    assert keys(windows.z_order) == ["/finder", "/notes", "/terminal"]
    assert windows.active_window == TERMINAL


def test_push_existing_focuses_instead_of_duplicating() -> None:
    windows = build_windows()
    windows.push(FINDER)
    windows.push(NOTES)
    windows.minimize_window(FINDER)

    result = windows.push(AppWindowRoute("finder"))

    assert result is None
    assert len(windows) == 2
    assert keys(windows.z_order) == ["/notes", "/finder"]
    assert windows.active_window == FINDER
    assert windows.window_entry(FINDER).is_floating


def test_minimize_reassigns_active_by_stack_order_not_z_order() -> None:
    windows = build_windows()
    for route in (FINDER, NOTES, TERMINAL):
        windows.push(route)
    windows.bring_to_front(FINDER)

    windows.minimize_window(FINDER)

    # Last visible in stack order, even though NOTES is lower in z-order.
    assert windows.active_window == TERMINAL


def test_minimizing_last_visible_window_clears_active() -> None:
    windows = build_windows()
    windows.push(FINDER)

    windows.minimize_window(FINDER)

    assert windows.active_window is None
    assert windows.paint_order() == []


def test_minimizing_inactive_window_keeps_active() -> None:
    windows = build_windows()
    windows.push(FINDER)
    windows.push(NOTES)

    windows.minimize_window(FINDER)

    assert windows.active_window == NOTES


def test_maximize_twice_restores_geometry_and_brings_to_front() -> None:
    windows = build_windows()
    windows.push(FINDER)
    windows.push(NOTES)
    before = windows.window_entry(FINDER).rect

    windows.maximize_window(FINDER, Size(1440, 900))
    assert windows.window_entry(FINDER).rect == Rect(0, 0, 1440, 900)
    assert windows.active_window == FINDER

    windows.bring_to_front(NOTES)
    windows.maximize_window(FINDER, Size(1440, 900))

    entry = windows.window_entry(FINDER)
    assert entry.state is EntityState.FLOATING
    assert entry.rect == before
    assert windows.z_order[-1] == FINDER


def test_restore_window_brings_to_front() -> None:
    windows = build_windows()
    windows.push(FINDER)
    windows.push(NOTES)
    windows.maximize_window(FINDER, Size(800, 600))
    windows.bring_to_front(NOTES)

    windows.restore_window(FINDER)

    assert windows.window_entry(FINDER).is_floating
    assert windows.active_window == FINDER


def test_toggle_pin_does_not_touch_z_order() -> None:
    windows = build_windows()
    windows.push(FINDER)
    windows.push(NOTES)

    windows.toggle_pin_window(FINDER)

    assert windows.window_entry(FINDER).is_pinned
    assert keys(windows.z_order) == ["/finder", "/notes"]
    assert windows.active_window == NOTES


def test_resize_clamps_to_minimum() -> None:
    windows = build_windows()
    windows.push(FINDER)

    windows.resize_window(FINDER, 50, 50)

    rect = windows.window_entry(FINDER).rect
    assert (rect.width, rect.height) == (200, 150)


def test_geometry_ignored_while_minimized_without_notification() -> None:
    windows = build_windows()
    windows.push(FINDER)
    windows.minimize_window(FINDER)
    listener = MagicMock()
    windows.subscribe(listener)
    before = windows.window_entry(FINDER).rect

    windows.move_window(FINDER, 30, 30)
    windows.drag_resize_window(FINDER, ResizeEdge.RIGHT, 30, 0)

    assert windows.window_entry(FINDER).rect == before
    listener.assert_not_called()


def test_move_and_drag_resize_update_rect() -> None:
    windows = build_windows()
    windows.push(FINDER)
    start = windows.window_entry(FINDER).rect

    windows.move_window(FINDER, 10, -10)
    windows.drag_resize_window(FINDER, ResizeEdge.BOTTOM_RIGHT, 20, 30)

    rect = windows.window_entry(FINDER).rect
    assert (rect.x, rect.y) == (start.x + 10, start.y - 10)
    assert (rect.width, rect.height) == (start.width + 20, start.height + 30)


def test_drag_resize_ignored_for_fixed_size_routes() -> None:
    windows = build_windows()
    calculator = AppWindowRoute("calculator", resizable=False)
    windows.push(calculator)
    before = windows.window_entry(calculator).rect

    windows.drag_resize_window(calculator, ResizeEdge.RIGHT, 100, 0)

    assert windows.window_entry(calculator).rect == before


def test_update_window_rect_replaces_geometry() -> None:
    windows = build_windows()
    windows.push(FINDER)

    windows.update_window_rect(FINDER, Rect(1, 2, 300, 200))

    assert windows.window_entry(FINDER).rect == Rect(1, 2, 300, 200)


def test_close_runs_teardown_before_unlinking() -> None:
    seen: list[bool] = []
    windows = build_windows(on_remove=lambda route: seen.append(route in windows))
    windows.push(FINDER)
    windows.push(NOTES)
    windows.push(TERMINAL)
    windows.bring_to_front(FINDER)

    windows.close_window(FINDER)

    assert seen == [True]
    assert FINDER not in windows
    assert windows.active_window == TERMINAL
    assert keys(windows.z_order) == ["/notes", "/terminal"]


def test_closing_inactive_window_keeps_active() -> None:
    windows = build_windows()
    windows.push(FINDER)
    windows.push(NOTES)

    windows.remove(FINDER)

    assert windows.active_window == NOTES


def test_closing_last_window_clears_active() -> None:
    windows = build_windows()
    windows.push(FINDER)

    windows.close_window(FINDER)

    assert windows.active_window is None
    assert windows.z_order == []


def test_route_teardown_hook_runs() -> None:
    route = AppWindowRoute("mail")
    route.on_remove = MagicMock()
    windows = build_windows()
    windows.push(route)

    windows.remove(route)

    route.on_remove.assert_called_once_with()


def test_invalid_references_fail_without_side_effects() -> None:
    windows = build_windows()
    windows.push(FINDER)
    listener = MagicMock()
    windows.subscribe(listener)

    with pytest.raises(InvalidReferenceError):
        windows.bring_to_front(NOTES)
    with pytest.raises(InvalidReferenceError):
        windows.remove(NOTES)
    with pytest.raises(InvalidReferenceError):
        windows.minimize_window(NOTES)

    assert keys(windows.z_order) == ["/finder"]
    listener.assert_not_called()


def test_z_order_stays_a_permutation_of_stack() -> None:
    windows = build_windows()
    pool = [AppWindowRoute(f"app{i}") for i in range(6)]
    rng = random.Random(3)

    for _ in range(300):
        route = rng.choice(pool)
        action = rng.choice(["push", "remove", "minimize", "focus", "maximize", "front"])
        present = route in windows
        if action == "push":
            windows.push(route)
        elif not present:
            continue
        elif action == "remove":
            windows.remove(route)
        elif action == "minimize":
            windows.minimize_window(route)
        elif action == "focus":
            windows.focus_window(route)
        elif action == "maximize":
            windows.maximize_window(route, Size(1000, 800))
        else:
            windows.bring_to_front(route)

        assert sorted(keys(windows.z_order)) == sorted(keys(windows.stack))
        assert len(set(keys(windows.z_order))) == len(windows.z_order)
        active = windows.active_window
        assert active is None or active in windows


def test_single_notification_per_compound_operation() -> None:
    windows = build_windows()
    windows.push(FINDER)
    listener = MagicMock()
    windows.subscribe(listener)

    windows.maximize_window(FINDER, Size(800, 600))

    listener.assert_called_once()
    payload = listener.call_args.args[0]
    assert payload["operations"] == ["maximize", "bring_to_front"]
    assert payload["surface"] == "windows"
    assert payload["active"] == "/finder"

    listener.reset_mock()
    windows.push(AppWindowRoute("finder"))
    listener.assert_called_once()

    listener.reset_mock()
    windows.activate_route(NOTES)
    listener.assert_called_once()
    assert windows.active_window == NOTES


def test_unsubscribe_stops_notifications() -> None:
    windows = build_windows()
    listener = MagicMock()
    windows.subscribe(listener)
    windows.unsubscribe(listener)

    windows.push(FINDER)

    listener.assert_not_called()


def test_activate_route_restores_minimized_window() -> None:
    windows = build_windows()
    windows.push(FINDER)
    windows.minimize_window(FINDER)

    windows.activate_route(FINDER)

    assert windows.window_entry(FINDER).is_floating
    assert windows.active_window == FINDER


def test_navigate_pushes_or_focuses() -> None:
    windows = build_windows()
    windows.navigate(FINDER)
    windows.navigate(NOTES)
    windows.navigate(FINDER)

    assert keys(windows.stack) == ["/finder", "/notes"]
    assert windows.active_window == FINDER


def test_pop_closes_active_window() -> None:
    windows = build_windows()
    assert windows.pop() is False
    windows.push(FINDER)
    windows.push(NOTES)

    assert windows.pop() is True
    assert keys(windows.stack) == ["/finder"]
    assert windows.active_window == FINDER


def test_paint_order_skips_minimized_windows() -> None:
    windows = build_windows()
    for route in (FINDER, NOTES, TERMINAL):
        windows.push(route)
    windows.bring_to_front(FINDER)
    windows.minimize_window(NOTES)

    assert keys(windows.paint_order()) == ["/terminal", "/finder"]


def test_reset_clears_everything_without_teardown() -> None:
    hook = MagicMock()
    windows = build_windows(on_remove=hook)
    windows.push(FINDER)
    windows.push(NOTES)

    windows.reset()

    assert windows.stack == []
    assert windows.z_order == []
    assert windows.active_window is None
    hook.assert_not_called()


def test_manager_minimums_flow_into_entries() -> None:
    windows = build_windows(min_width=320, min_height=240)
    windows.push(FINDER)

    windows.resize_window(FINDER, 10, 10)

    rect = windows.window_entry(FINDER).rect
    assert (rect.width, rect.height) == (320, 240)
