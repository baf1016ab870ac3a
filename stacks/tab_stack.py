"""Tab surface: ordered tabs with a single active index."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from core.errors import OutOfRangeError
from core.event_bus import EventBus
from routes.codec import RouteCodec
from stacks.base import RemoveHook, StackManager
from stacks.ordered_stack import Handle
from stacks.snapshot import (
    TabSnapshot,
    TabStackModel,
    decode_entries,
    dump,
    parse_record,
    resolve_active_index,
)

logger = logging.getLogger("deskstack.tab_stack")

T = TypeVar("T")


class TabStackManager(StackManager[T]):
    """Browser-style tabs.

    The active tab is tracked by identity across removals: closing a tab to
    the left of the active one shifts the index so the same tab stays
    selected. Closing the active tab selects the tab that slides into its
    slot, or the new last tab.
    """

    def __init__(
        self,
        label: str = "tabs",
        *,
        codec: RouteCodec | None = None,
        event_bus: EventBus | None = None,
        on_remove: RemoveHook | None = None,
    ) -> None:
        super().__init__(label, codec=codec, event_bus=event_bus, on_remove=on_remove)
        self._active_index: int | None = None

    @property
    def active_index(self) -> int | None:
        return self._active_index

    @property
    def active_route(self) -> T | None:
        if self._active_index is None or not 0 <= self._active_index < len(self._stack):
            return None
        return self._stack[self._active_index]

    def push(self, entity: T) -> Handle | None:
        """Open a tab and select it; an open tab is selected instead."""
        with self._batch():
            if entity in self._stack:
                self.go_to(entity)
                return None
            handle = self._stack.add(entity)
            self._active_index = len(self._stack) - 1
            logger.debug("Opened tab %s at %d", self._stack.key_of(entity), self._active_index)
            self._notify("push")
        return handle

    def go_to(self, entity: T) -> None:
        if self._stack.find(entity) is None:
            self.push(entity)
            return
        self._active_index = self._stack.index_of(entity)
        self._notify("go_to")

    def activate_route(self, entity: T) -> None:
        self.go_to(entity)

    def navigate(self, entity: T) -> None:
        self.go_to(entity)

    def go_to_indexed(self, index: int) -> None:
        if not 0 <= index < len(self._stack):
            raise OutOfRangeError(
                f"Tab index {index} out of range for {len(self._stack)} tabs on {self.label!r}"
            )
        self._active_index = index
        self._notify("go_to_indexed")

    def remove(self, entity: T) -> None:
        index = self._stack.index_of(entity)
        stored = self._stack[index]
        with self._batch():
            self._teardown(stored)
            self._stack.remove(stored)
            self._active_index = self._index_after_removal(index)
            logger.debug(
                "Closed tab %s; active index now %s",
                self._stack.key_of(stored),
                self._active_index,
            )
            self._notify("remove")

    def pop(self) -> bool:
        """Close the last tab."""
        if not len(self._stack):
            return False
        self.remove(self._stack[-1])
        return True

    def reset(self) -> None:
        with self._batch():
            self._stack.clear()
            self._active_index = None
            self._notify("reset")

    def _index_after_removal(self, removed: int) -> int | None:
        length = len(self._stack)
        if not length:
            return None
        if self._active_index is None:
            return length - 1
        if removed < self._active_index:
            return self._active_index - 1
        return min(self._active_index, length - 1)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def serialize(self) -> dict[str, Any]:
        codec = self._require_codec()
        record = TabSnapshot(
            entries=[codec.serialize(entity) for entity in self._stack],
            active_index=self._active_index,
        )
        return dump(record)

    def deserialize(self, record: Any) -> TabStackModel[T]:
        snapshot: TabSnapshot = parse_record(TabSnapshot, record)
        stack: list[T] = decode_entries(
            snapshot.entries, self._require_codec(), self._stack.key_of
        )
        return TabStackModel(
            stack=stack, active_index=resolve_active_index(snapshot.active_index, len(stack))
        )

    def restore(self, model: TabStackModel[T]) -> None:
        self._check_unique(model.stack)
        displaced = self._displaced_by(model.stack)
        with self._batch():
            self._stack.bind(model.stack)
            self._active_index = resolve_active_index(model.active_index, len(self._stack))
            logger.info("Restored %d tabs on %s", len(self._stack), self.label)
            self._notify("restore_snapshot")
        self._teardown_all(displaced)
