"""Entity interface for routes presented as windows or tabs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar


class Route(ABC):
    """A navigable entity that a window or tab surface can host.

    Identity is the ``key``: routes with equal keys are the same entity.
    Capability flags are read by the managers; ``on_remove`` is the teardown
    hook that runs before the route leaves its stack.
    """

    kind: ClassVar[str] = "route"

    @property
    @abstractmethod
    def key(self) -> str:
        """Stable identity of this route."""

    @abstractmethod
    def params(self) -> dict[str, Any]:
        """Constructor arguments, used by the codec to rebuild the route."""

    def title(self) -> str:
        return self.key

    @property
    def can_minimize(self) -> bool:
        return True

    @property
    def can_maximize(self) -> bool:
        return True

    @property
    def can_close(self) -> bool:
        return True

    @property
    def can_resize(self) -> bool:
        return True

    def on_remove(self) -> None:
        """Release resources held for this route."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Route):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.key!r})"
