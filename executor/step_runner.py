"""Scripted driver for window and tab surfaces.

A script is a list of step mappings such as::

    {"op": "push", "route": {"kind": "app", "params": {"app": "notes"}}}
    {"op": "move", "route": {...}, "dx": 10, "dy": -5}
    {"op": "go_to_indexed", "index": 2}

Each step is routed to the matching manager operation and reported back as
a standardized result record.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from core.errors import StackError
from geometry.rect import Rect, ResizeEdge, Size
from routes.codec import RouteCodec
from stacks.tab_stack import TabStackManager
from stacks.window_stack import WindowStackManager

logger = logging.getLogger("deskstack.step_runner")

StepHandler = Callable[[dict[str, Any]], Any]


class StepRunner:
    """Routes script steps to one surface manager."""

    def __init__(
        self,
        manager: WindowStackManager[Any] | TabStackManager[Any],
        codec: RouteCodec,
        viewport: Size | None = None,
    ) -> None:
        self.manager = manager
        self.codec = codec
        self.viewport = viewport or Size(1280.0, 800.0)
        if isinstance(manager, WindowStackManager):
            self._handlers = self._window_handlers(manager)
        else:
            self._handlers = self._tab_handlers(manager)

    def operations(self) -> list[str]:
        return sorted(self._handlers)

    def run(self, steps: Iterable[dict[str, Any]], strict: bool = False) -> list[dict[str, Any]]:
        """Execute steps in order; with ``strict`` the first failure is raised."""
        results: list[dict[str, Any]] = []
        for position, step in enumerate(steps):
            result = self.run_step(step, strict=strict)
            result["step"] = position
            results.append(result)
        return results

    def run_step(self, step: dict[str, Any], strict: bool = False) -> dict[str, Any]:
        op = str(step.get("op", "")).strip().lower()
        handler = self._handlers.get(op)
        if handler is None:
            if strict:
                raise StackError(f"Unknown operation: {op!r}")
            logger.warning("Unknown operation '%s' on %s", op, self.manager.label)
            return {"op": op, "success": False, "outcome": f"Unknown operation: {op!r}"}
        try:
            value = handler(step)
        except (StackError, KeyError, TypeError, ValueError) as exc:
            if strict:
                raise
            logger.warning("Step '%s' failed on %s: %s", op, self.manager.label, exc)
            return {"op": op, "success": False, "outcome": str(exc)}
        return {"op": op, "success": True, "outcome": _outcome(value)}

    # ------------------------------------------------------------------
    # Handler tables
    # ------------------------------------------------------------------

    def _route(self, step: dict[str, Any]) -> Any:
        return self.codec.deserialize(step["route"])

    def _size(self, step: dict[str, Any]) -> Size:
        size = step.get("size")
        if not size:
            return self.viewport
        return Size(float(size["width"]), float(size["height"]))

    def _window_handlers(self, windows: WindowStackManager[Any]) -> dict[str, StepHandler]:
        route = self._route
        return {
            "push": lambda s: windows.push(route(s)),
            "focus": lambda s: windows.focus_window(route(s)),
            "bring_to_front": lambda s: windows.bring_to_front(route(s)),
            "minimize": lambda s: windows.minimize_window(route(s)),
            "maximize": lambda s: windows.maximize_window(route(s), self._size(s)),
            "restore": lambda s: windows.restore_window(route(s)),
            "toggle_pin": lambda s: windows.toggle_pin_window(route(s)),
            "close": lambda s: windows.close_window(route(s)),
            "remove": lambda s: windows.remove(route(s)),
            "activate": lambda s: windows.activate_route(route(s)),
            "navigate": lambda s: windows.navigate(route(s)),
            "pop": lambda s: windows.pop(),
            "reset": lambda s: windows.reset(),
            "move": lambda s: windows.move_window(
                route(s), float(s.get("dx", 0)), float(s.get("dy", 0))
            ),
            "resize": lambda s: windows.resize_window(
                route(s),
                float(s["width"]),
                float(s["height"]),
                _optional_float(s.get("x")),
                _optional_float(s.get("y")),
            ),
            "drag_resize": lambda s: windows.drag_resize_window(
                route(s), ResizeEdge(s["edge"]), float(s.get("dx", 0)), float(s.get("dy", 0))
            ),
            "update_rect": lambda s: windows.update_window_rect(
                route(s), Rect.from_dict(s["rect"])
            ),
        }

    def _tab_handlers(self, tabs: TabStackManager[Any]) -> dict[str, StepHandler]:
        route = self._route
        return {
            "push": lambda s: tabs.push(route(s)),
            "go_to": lambda s: tabs.go_to(route(s)),
            "go_to_indexed": lambda s: tabs.go_to_indexed(int(s["index"])),
            "activate": lambda s: tabs.activate_route(route(s)),
            "navigate": lambda s: tabs.navigate(route(s)),
            "close": lambda s: tabs.remove(route(s)),
            "remove": lambda s: tabs.remove(route(s)),
            "pop": lambda s: tabs.pop(),
            "reset": lambda s: tabs.reset(),
        }


def describe_surface(manager: WindowStackManager[Any] | TabStackManager[Any]) -> dict[str, Any]:
    """Plain-data view of a surface for printing."""

    def key(entity: Any) -> str:
        return str(getattr(entity, "key", entity))

    active = manager.active_route
    if isinstance(manager, WindowStackManager):
        return {
            "surface": manager.label,
            "stack": [key(e) for e in manager.stack],
            "z_order": [key(e) for e in manager.z_order],
            "active": key(active) if active is not None else None,
            "visible": [key(e) for e in manager.visible_windows],
            "minimized": [key(e) for e in manager.minimized_windows],
            "windows": {
                key(e): {
                    "state": manager.window_entry(e).state.value,
                    "rect": manager.window_entry(e).rect.to_dict(),
                }
                for e in manager.stack
            },
        }
    return {
        "surface": manager.label,
        "stack": [key(e) for e in manager.stack],
        "active_index": manager.active_index,
        "active": key(active) if active is not None else None,
    }


def _optional_float(value: Any) -> float | None:
    return None if value is None else float(value)


def _outcome(value: Any) -> str:
    if isinstance(value, bool):
        return "done" if value else "no-op"
    return "done"
