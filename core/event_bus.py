"""Simple in-process event bus with coalesced emission."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

EventHandler = Callable[[dict[str, Any]], None]

STACK_CHANGED = "stack_changed"


class EventBus:
    """Dispatches events to subscribers by event name.

    Inside a ``coalesce()`` block emissions are held back and merged so each
    event name fires once when the outermost block exits. Payload keys are
    overwritten by later emissions, except ``operations`` which accumulates.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._depth = 0
        self._pending: dict[str, dict[str, Any]] = {}

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        """Register a callback for an event."""
        self._handlers[event_name].append(handler)

    def unsubscribe(self, event_name: str, handler: EventHandler) -> None:
        """Remove a previously registered callback; unknown handlers are ignored."""
        handlers = self._handlers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Emit an event to all subscribers, or queue it while coalescing."""
        if self._depth:
            self._merge_pending(event_name, payload)
            return
        self._dispatch(event_name, payload)

    @contextmanager
    def coalesce(self) -> Iterator[None]:
        """Hold emissions until the outermost block exits.

        Queued events are dropped when the block raises.
        """
        self._depth += 1
        try:
            yield
        except BaseException:
            self._depth -= 1
            if not self._depth:
                self._pending.clear()
            raise
        self._depth -= 1
        if self._depth:
            return
        pending, self._pending = self._pending, {}
        for event_name, payload in pending.items():
            self._dispatch(event_name, payload)

    def _merge_pending(self, event_name: str, payload: dict[str, Any]) -> None:
        queued = self._pending.get(event_name)
        if queued is None:
            queued = {**payload, "operations": list(payload.get("operations", []))}
            self._pending[event_name] = queued
            return
        operations = queued["operations"] + list(payload.get("operations", []))
        queued.update(payload)
        queued["operations"] = operations

    def _dispatch(self, event_name: str, payload: dict[str, Any]) -> None:
        for handler in list(self._handlers.get(event_name, [])):
            handler(payload)
