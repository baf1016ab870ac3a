"""Shared plumbing for window and tab stack managers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import Any, Generic, TypeVar

from core.errors import MalformedSnapshotError, StackError
from core.event_bus import STACK_CHANGED, EventBus, EventHandler
from routes.codec import RouteCodec
from stacks.ordered_stack import OrderedStack

logger = logging.getLogger("deskstack.stack")

T = TypeVar("T")

RemoveHook = Callable[[Any], None]


class StackManager(ABC, Generic[T]):
    """Owns an ordered stack of entities and reports changes on an event bus.

    Every public mutation emits at most one ``stack_changed`` event; nested
    calls are coalesced by the bus. Listeners must not mutate the manager
    while being notified.
    """

    def __init__(
        self,
        label: str,
        *,
        codec: RouteCodec | None = None,
        event_bus: EventBus | None = None,
        on_remove: RemoveHook | None = None,
    ) -> None:
        self.label = label
        self.codec = codec
        self.event_bus = event_bus or EventBus()
        self.on_remove = on_remove
        self._stack: OrderedStack[T] = OrderedStack()

    def __len__(self) -> int:
        return len(self._stack)

    def __contains__(self, entity: object) -> bool:
        return entity in self._stack

    @property
    def stack(self) -> list[T]:
        return list(self._stack)

    @property
    @abstractmethod
    def active_route(self) -> T | None:
        """The focused or selected entity, if any."""

    def subscribe(self, handler: EventHandler) -> None:
        """Listen for ``stack_changed`` events from this manager's bus."""
        self.event_bus.subscribe(STACK_CHANGED, handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        self.event_bus.unsubscribe(STACK_CHANGED, handler)

    def _batch(self) -> AbstractContextManager[None]:
        return self.event_bus.coalesce()

    def _notify(self, operation: str) -> None:
        active = self.active_route
        self.event_bus.emit(
            STACK_CHANGED,
            {
                "surface": self.label,
                "operations": [operation],
                "size": len(self._stack),
                "active": self._stack.key_of(active) if active is not None else None,
            },
        )

    def _teardown(self, entity: T) -> None:
        """Run the entity's own hook, then the manager-level one."""
        hook = getattr(entity, "on_remove", None)
        if callable(hook):
            hook()
        if self.on_remove is not None:
            self.on_remove(entity)

    def _displaced_by(self, incoming: list[T]) -> list[T]:
        keep = {self._stack.key_of(entity) for entity in incoming}
        return [entity for entity in self._stack if self._stack.key_of(entity) not in keep]

    def _teardown_all(self, entities: list[T]) -> None:
        """Tear down routes that are already unlinked; the first failing hook propagates."""
        for entity in entities:
            self._teardown(entity)

    def _require_codec(self) -> RouteCodec:
        if self.codec is None:
            raise StackError(f"No route codec configured for surface {self.label!r}")
        return self.codec

    def _check_unique(self, entities: list[T]) -> None:
        keys = [self._stack.key_of(entity) for entity in entities]
        if len(set(keys)) != len(keys):
            raise MalformedSnapshotError(f"Duplicate entities in restored stack for {self.label!r}")
        logger.debug("Restoring %d entities into %s", len(keys), self.label)
