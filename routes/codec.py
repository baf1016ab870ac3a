"""Route serialization collaborators used by snapshots."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from core.errors import MalformedSnapshotError
from routes.route import Route

logger = logging.getLogger("deskstack.codec")

RouteFactory = Callable[..., Route]


class RouteCodec(ABC):
    """Turns routes into snapshot blobs and back."""

    @abstractmethod
    def serialize(self, route: Route) -> dict[str, Any]:
        """Encode one route."""

    @abstractmethod
    def deserialize(self, blob: Any) -> Route:
        """Rebuild a route; raise ``MalformedSnapshotError`` on bad input."""


class RouteRegistry(RouteCodec):
    """Codec dispatching on the route ``kind``.

    Blobs look like ``{"kind": "app", "params": {"app": "notes"}}``.
    """

    def __init__(self) -> None:
        self._factories: dict[str, RouteFactory] = {}

    def register(self, kind: str, factory: RouteFactory) -> None:
        self._factories[kind] = factory

    def kinds(self) -> list[str]:
        return sorted(self._factories)

    def serialize(self, route: Route) -> dict[str, Any]:
        if route.kind not in self._factories:
            raise MalformedSnapshotError(f"Route kind not registered: {route.kind!r}")
        return {"kind": route.kind, "params": dict(route.params())}

    def deserialize(self, blob: Any) -> Route:
        if not isinstance(blob, dict):
            raise MalformedSnapshotError(f"Route blob must be a mapping, got {type(blob).__name__}")
        kind = blob.get("kind")
        factory = self._factories.get(str(kind))
        if factory is None:
            raise MalformedSnapshotError(f"Unknown route kind: {kind!r}")
        params = blob.get("params") or {}
        if not isinstance(params, dict):
            raise MalformedSnapshotError(f"Route params must be a mapping for kind {kind!r}")
        try:
            return factory(**params)
        except (TypeError, ValueError) as exc:
            logger.warning("Failed to rebuild %s route from %s: %s", kind, params, exc)
            raise MalformedSnapshotError(f"Cannot rebuild {kind!r} route: {exc}") from exc
