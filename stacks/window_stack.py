"""Window surface: stack, z-order, active pointer and per-window state."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from core.event_bus import EventBus
from geometry.placement import CascadePlacement
from geometry.rect import MIN_HEIGHT, MIN_WIDTH, Rect, ResizeEdge, Size
from routes.codec import RouteCodec
from stacks.base import RemoveHook, StackManager
from stacks.entity_state import EntityState, WindowEntry
from stacks.ordered_stack import Handle
from stacks.snapshot import (
    WindowSnapshot,
    WindowStackModel,
    WindowStateRecord,
    decode_entries,
    dump,
    parse_record,
    resolve_active_index,
)

logger = logging.getLogger("deskstack.window_stack")

T = TypeVar("T")


class WindowStackManager(StackManager[T]):
    """Floating windows with minimize/maximize/pin and a dock.

    ``stack`` is push order; ``z_order`` is paint order with the topmost
    window last. ``z_order`` always holds exactly the windows in ``stack``,
    and the active window, when set, is one of them.
    """

    def __init__(
        self,
        label: str = "windows",
        *,
        placement: CascadePlacement | None = None,
        min_width: float = MIN_WIDTH,
        min_height: float = MIN_HEIGHT,
        codec: RouteCodec | None = None,
        event_bus: EventBus | None = None,
        on_remove: RemoveHook | None = None,
    ) -> None:
        super().__init__(label, codec=codec, event_bus=event_bus, on_remove=on_remove)
        self.placement = placement or CascadePlacement()
        self.min_width = min_width
        self.min_height = min_height
        self._entries: dict[Handle, WindowEntry] = {}
        self._z_order: list[Handle] = []
        self._active: Handle | None = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def active_window(self) -> T | None:
        return self._stack.get(self._active) if self._active is not None else None

    @property
    def active_route(self) -> T | None:
        return self.active_window

    @property
    def z_order(self) -> list[T]:
        return [self._stack.get(handle) for handle in self._z_order]

    @property
    def minimized_windows(self) -> list[T]:
        """Windows shown in the dock, in stack order."""
        return [
            self._stack.get(handle)
            for handle in self._stack.handles()
            if self._entries[handle].is_minimized
        ]

    @property
    def visible_windows(self) -> list[T]:
        return [
            self._stack.get(handle)
            for handle in self._stack.handles()
            if not self._entries[handle].is_minimized
        ]

    def paint_order(self) -> list[T]:
        """Visible windows bottom to top."""
        return [
            self._stack.get(handle)
            for handle in self._z_order
            if not self._entries[handle].is_minimized
        ]

    def window_entry(self, entity: T) -> WindowEntry:
        return self._entries[self._stack.handle_of(entity)]

    # ------------------------------------------------------------------
    # Stack operations
    # ------------------------------------------------------------------

    def push(self, entity: T) -> Handle | None:
        """Open a window, or focus it when it is already open.

        Returns the new handle, or ``None`` when nothing was added.
        """
        with self._batch():
            if entity in self._stack:
                self.focus_window(entity)
                return None
            handle = self._stack.add(entity)
            self._entries[handle] = self._new_entry()
            self._z_order.append(handle)
            self._active = handle
            logger.info("Opened window %s on %s", self._stack.key_of(entity), self.label)
            self._notify("push")
        return handle

    def bring_to_front(self, entity: T) -> None:
        handle = self._stack.handle_of(entity)
        with self._batch():
            if handle in self._z_order:
                self._z_order.remove(handle)
            self._z_order.append(handle)
            self._active = handle
            self._notify("bring_to_front")

    def focus_window(self, entity: T) -> None:
        """Restore if minimized, then bring to front."""
        entry = self.window_entry(entity)
        with self._batch():
            if entry.is_minimized:
                entry.restore()
            self._notify("focus")
            self.bring_to_front(entity)

    def minimize_window(self, entity: T) -> None:
        handle = self._stack.handle_of(entity)
        with self._batch():
            self._entries[handle].minimize()
            if self._active == handle:
                self._active = self._last_visible_handle()
            self._notify("minimize")

    def maximize_window(self, entity: T, available_size: Size) -> None:
        """Maximize, or restore when already maximized; then bring to front."""
        entry = self.window_entry(entity)
        with self._batch():
            entry.maximize(available_size)
            self._notify("maximize")
            self.bring_to_front(entity)

    def restore_window(self, entity: T) -> None:
        entry = self.window_entry(entity)
        with self._batch():
            entry.restore()
            self._notify("restore")
            self.bring_to_front(entity)

    def toggle_pin_window(self, entity: T) -> None:
        entry = self.window_entry(entity)
        with self._batch():
            entry.toggle_pin()
            self._notify("toggle_pin")

    def close_window(self, entity: T) -> None:
        self.remove(entity)

    def remove(self, entity: T) -> None:
        """Tear down and unlink a window; the next window in z-order becomes active."""
        handle = self._stack.handle_of(entity)
        stored = self._stack.get(handle)
        with self._batch():
            self._teardown(stored)
            self._stack.remove(stored)
            del self._entries[handle]
            if handle in self._z_order:
                self._z_order.remove(handle)
            if self._active == handle:
                self._active = self._z_order[-1] if self._z_order else None
            logger.info("Closed window %s on %s", self._stack.key_of(stored), self.label)
            self._notify("remove")

    def pop(self) -> bool:
        """Close the active window if it allows closing."""
        active = self.active_window
        if active is None or not getattr(active, "can_close", True):
            return False
        self.remove(active)
        return True

    def reset(self) -> None:
        with self._batch():
            self._stack.clear()
            self._entries.clear()
            self._z_order.clear()
            self._active = None
            self._notify("reset")

    def activate_route(self, entity: T) -> None:
        with self._batch():
            if entity not in self._stack:
                self.push(entity)
            self.focus_window(entity)

    def navigate(self, entity: T) -> None:
        if entity in self._stack:
            self.focus_window(entity)
        else:
            self.push(entity)

    # ------------------------------------------------------------------
    # Geometry (deltas come from the host's drag handlers)
    # ------------------------------------------------------------------

    def move_window(self, entity: T, dx: float, dy: float) -> None:
        if self.window_entry(entity).move(dx, dy):
            self._notify("move")

    def resize_window(
        self,
        entity: T,
        width: float,
        height: float,
        x: float | None = None,
        y: float | None = None,
    ) -> None:
        if self.window_entry(entity).resize(width, height, x, y):
            self._notify("resize")

    def drag_resize_window(self, entity: T, edge: ResizeEdge, dx: float, dy: float) -> None:
        entry = self.window_entry(entity)
        if not getattr(entity, "can_resize", True):
            return
        if entry.drag_resize(edge, dx, dy):
            self._notify("resize")

    def update_window_rect(self, entity: T, rect: Rect) -> None:
        if self.window_entry(entity).update_rect(rect):
            self._notify("update_rect")

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def serialize(self) -> dict[str, Any]:
        codec = self._require_codec()
        handles = self._stack.handles()
        active_index = handles.index(self._active) if self._active is not None else None
        record = WindowSnapshot(
            entries=[codec.serialize(self._stack.get(handle)) for handle in handles],
            per_entity_state=[
                WindowStateRecord.from_entry(self._entries[handle]) for handle in handles
            ],
            active_index=active_index,
        )
        return dump(record)

    def deserialize(self, record: Any) -> WindowStackModel[T]:
        snapshot: WindowSnapshot = parse_record(WindowSnapshot, record)
        stack: list[T] = decode_entries(
            snapshot.entries, self._require_codec(), self._stack.key_of
        )
        states = snapshot.per_entity_state[: len(stack)]
        if len(states) < len(stack):
            logger.warning(
                "Snapshot for %s has %d window states for %d entries; padding with defaults",
                self.label,
                len(states),
                len(stack),
            )
        index = resolve_active_index(snapshot.active_index, len(stack))
        active = stack[index] if index is not None else None
        return WindowStackModel(stack=stack, states=states, active=active)

    def restore(self, model: WindowStackModel[T], available_size: Size) -> None:
        """Rebuild the surface from a deserialized snapshot.

        Z-order becomes stack order. Maximized windows are replayed against
        ``available_size``, which the caller should take from its viewport.
        """
        self._check_unique(model.stack)
        displaced = self._displaced_by(model.stack)
        with self._batch():
            handles = self._stack.bind(model.stack)
            self._entries = {handle: self._new_entry() for handle in handles}
            self._z_order = list(handles)
            for handle, state in zip(handles, model.states):
                self._replay(self._entries[handle], state, available_size)
            self._active = self._stack.find(model.active) if model.active is not None else None
            logger.info("Restored %d windows on %s", len(handles), self.label)
            self._notify("restore_snapshot")
        self._teardown_all(displaced)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _new_entry(self) -> WindowEntry:
        return WindowEntry(
            self.placement.next_rect(), min_width=self.min_width, min_height=self.min_height
        )

    def _last_visible_handle(self) -> Handle | None:
        for handle in reversed(self._stack.handles()):
            if not self._entries[handle].is_minimized:
                return handle
        return None

    @staticmethod
    def _replay(entry: WindowEntry, state: WindowStateRecord, available_size: Size) -> None:
        entry.update_rect(state.rect.to_rect())
        if state.state is EntityState.MINIMIZED:
            entry.minimize()
        elif state.state is EntityState.MAXIMIZED:
            entry.maximize(available_size)
        elif state.state is EntityState.PINNED:
            entry.toggle_pin()
        if state.saved_rect is not None:
            entry.saved_rect = state.saved_rect.to_rect()
