"""Snapshot records for window and tab stacks.

The persisted shape is::

    {
        "entries": [<route blob>, ...],
        "perEntityState": [{"rect": {...}, "state": "floating", "savedRect": {...}}, ...],
        "activeIndex": 0,
    }

``perEntityState`` is correlated with ``entries`` by position and may be
shorter. The active pointer is an index into ``entries``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Annotated, Any, Generic, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from core.errors import MalformedSnapshotError
from geometry.rect import Rect
from routes.codec import RouteCodec
from stacks.entity_state import EntityState, WindowEntry

logger = logging.getLogger("deskstack.snapshot")

T = TypeVar("T")


class RectRecord(BaseModel):
    """Serialized rectangle."""

    model_config = ConfigDict(populate_by_name=True)

    x: float
    y: float
    width: float = Field(validation_alias=AliasChoices("width", "w"))
    height: float = Field(validation_alias=AliasChoices("height", "h"))

    @classmethod
    def from_rect(cls, rect: Rect) -> RectRecord:
        return cls(x=rect.x, y=rect.y, width=rect.width, height=rect.height)

    def to_rect(self) -> Rect:
        return Rect(x=self.x, y=self.y, width=self.width, height=self.height)


class WindowStateRecord(BaseModel):
    """Serialized geometry and state of one window."""

    model_config = ConfigDict(populate_by_name=True)

    rect: RectRecord
    state: EntityState = EntityState.FLOATING
    saved_rect: RectRecord | None = Field(
        default=None,
        validation_alias=AliasChoices("saved_rect", "savedRect", "floatingRect"),
        serialization_alias="savedRect",
    )

    @field_validator("state", mode="before")
    @classmethod
    def _known_state(cls, value: Any) -> Any:
        try:
            return EntityState(value)
        except ValueError:
            return EntityState.FLOATING

    @classmethod
    def from_entry(cls, entry: WindowEntry) -> WindowStateRecord:
        return cls(
            rect=RectRecord.from_rect(entry.rect),
            state=entry.state,
            saved_rect=(
                RectRecord.from_rect(entry.saved_rect) if entry.saved_rect is not None else None
            ),
        )


def _lenient_index(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def _list_or_empty(value: Any) -> Any:
    return [] if value is None else value


ActiveIndex = Annotated[int | None, BeforeValidator(_lenient_index)]
EntryList = Annotated[list[Any], BeforeValidator(_list_or_empty)]
StateList = Annotated[list[WindowStateRecord], BeforeValidator(_list_or_empty)]


class WindowSnapshot(BaseModel):
    """Window surface snapshot."""

    model_config = ConfigDict(populate_by_name=True)

    entries: EntryList = Field(
        default_factory=list, validation_alias=AliasChoices("entries", "stack")
    )
    per_entity_state: StateList = Field(
        default_factory=list,
        validation_alias=AliasChoices("perEntityState", "per_entity_state", "windowStates"),
        serialization_alias="perEntityState",
    )
    active_index: ActiveIndex = Field(
        default=None,
        validation_alias=AliasChoices("activeIndex", "active_index", "activeWindowIndex"),
        serialization_alias="activeIndex",
    )


class TabSnapshot(BaseModel):
    """Tab surface snapshot."""

    model_config = ConfigDict(populate_by_name=True)

    entries: EntryList = Field(
        default_factory=list, validation_alias=AliasChoices("entries", "stack")
    )
    active_index: ActiveIndex = Field(
        default=None,
        validation_alias=AliasChoices("activeIndex", "active_index"),
        serialization_alias="activeIndex",
    )


@dataclass
class WindowStackModel(Generic[T]):
    """Deserialized window surface, ready to be restored."""

    stack: list[T]
    states: list[WindowStateRecord] = field(default_factory=list)
    active: T | None = None


@dataclass
class TabStackModel(Generic[T]):
    """Deserialized tab surface, ready to be restored."""

    stack: list[T]
    active_index: int | None = None


def dump(record: BaseModel) -> dict[str, Any]:
    return record.model_dump(mode="json", by_alias=True)


def parse_record(model: type[BaseModel], record: Any) -> Any:
    """Validate a raw mapping into a snapshot record."""
    if not isinstance(record, dict):
        raise MalformedSnapshotError(f"Snapshot must be a mapping, got {type(record).__name__}")
    try:
        return model.model_validate(record)
    except ValidationError as exc:
        raise MalformedSnapshotError(f"Invalid snapshot: {exc}") from exc


def decode_entries(blobs: Iterable[Any], codec: RouteCodec, key: Any) -> list[Any]:
    """Rebuild every route; any bad blob fails the whole snapshot."""
    routes = [codec.deserialize(blob) for blob in blobs]
    seen: set[Any] = set()
    for route in routes:
        route_key = key(route)
        if route_key in seen:
            raise MalformedSnapshotError(f"Duplicate entry in snapshot: {route_key!r}")
        seen.add(route_key)
    return routes


def resolve_active_index(index: int | None, length: int) -> int | None:
    if index is None:
        return None
    if index < 0 or index >= length:
        logger.warning("Dropping active index %d outside %d entries", index, length)
        return None
    return index
