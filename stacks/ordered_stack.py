"""Insertion-ordered entity container with explicit handles."""

from __future__ import annotations

import itertools
from collections.abc import Callable, Hashable, Iterable, Iterator
from operator import attrgetter
from typing import Generic, NewType, TypeVar

from core.errors import InvalidReferenceError

T = TypeVar("T")

Handle = NewType("Handle", int)


class OrderedStack(Generic[T]):
    """Ordered collection of entities, addressed by handle or by key.

    Each entity gets a ``Handle`` when it is added; handles are never
    reused within one stack. Membership is decided by the entity key
    (``entity.key`` by default), so two objects with the same key are the
    same entity.
    """

    def __init__(self, key: Callable[[T], Hashable] = attrgetter("key")) -> None:
        self._key = key
        self._counter = itertools.count(1)
        self._items: dict[Handle, T] = {}
        self._by_key: dict[Hashable, Handle] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items.values()))

    def __contains__(self, entity: object) -> bool:
        try:
            return self._key(entity) in self._by_key  # type: ignore[arg-type]
        except AttributeError:
            return False

    def __getitem__(self, index: int) -> T:
        return list(self._items.values())[index]

    def key_of(self, entity: T) -> Hashable:
        return self._key(entity)

    def handles(self) -> list[Handle]:
        return list(self._items)

    def add(self, entity: T) -> Handle:
        key = self._key(entity)
        if key in self._by_key:
            raise InvalidReferenceError(f"Entity already in stack: {key!r}")
        handle = Handle(next(self._counter))
        self._items[handle] = entity
        self._by_key[key] = handle
        return handle

    def remove(self, entity: T) -> Handle:
        handle = self.handle_of(entity)
        del self._items[handle]
        del self._by_key[self._key(entity)]
        return handle

    def find(self, entity: T) -> Handle | None:
        return self._by_key.get(self._key(entity))

    def handle_of(self, entity: T) -> Handle:
        handle = self.find(entity)
        if handle is None:
            raise InvalidReferenceError(f"Entity not in stack: {self._key(entity)!r}")
        return handle

    def get(self, handle: Handle) -> T:
        try:
            return self._items[handle]
        except KeyError:
            raise InvalidReferenceError(f"Unknown handle: {handle}") from None

    def index_of(self, entity: T) -> int:
        return self.handles().index(self.handle_of(entity))

    def clear(self) -> None:
        self._items.clear()
        self._by_key.clear()

    def bind(self, entities: Iterable[T]) -> list[Handle]:
        """Replace the contents with ``entities`` in order."""
        self.clear()
        return [self.add(entity) for entity in entities]
