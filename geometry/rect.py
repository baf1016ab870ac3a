"""Immutable rectangle and size values for window geometry."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

MIN_WIDTH = 200.0
MIN_HEIGHT = 150.0


@dataclass(frozen=True)
class Size:
    """Available area supplied by the host, e.g. the viewport."""

    width: float
    height: float


class ResizeEdge(str, Enum):
    """Drag handles around a window frame."""

    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"

    @property
    def moves_left(self) -> bool:
        return self in (ResizeEdge.LEFT, ResizeEdge.TOP_LEFT, ResizeEdge.BOTTOM_LEFT)

    @property
    def moves_right(self) -> bool:
        return self in (ResizeEdge.RIGHT, ResizeEdge.TOP_RIGHT, ResizeEdge.BOTTOM_RIGHT)

    @property
    def moves_top(self) -> bool:
        return self in (ResizeEdge.TOP, ResizeEdge.TOP_LEFT, ResizeEdge.TOP_RIGHT)

    @property
    def moves_bottom(self) -> bool:
        return self in (ResizeEdge.BOTTOM, ResizeEdge.BOTTOM_LEFT, ResizeEdge.BOTTOM_RIGHT)


@dataclass(frozen=True)
class Rect:
    """Window bounds. Construction is unchecked; ``resize`` clamps."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def move(self, dx: float, dy: float) -> Rect:
        """Translate by a delta. Off-screen results are allowed."""
        return replace(self, x=self.x + dx, y=self.y + dy)

    def resize(
        self,
        width: float,
        height: float,
        x: float | None = None,
        y: float | None = None,
        *,
        min_width: float = MIN_WIDTH,
        min_height: float = MIN_HEIGHT,
    ) -> Rect:
        """Return a resized copy with width/height clamped to the minimums."""
        return Rect(
            x=self.x if x is None else x,
            y=self.y if y is None else y,
            width=max(width, min_width),
            height=max(height, min_height),
        )

    def drag_resize(
        self,
        edge: ResizeEdge,
        dx: float,
        dy: float,
        *,
        min_width: float = MIN_WIDTH,
        min_height: float = MIN_HEIGHT,
    ) -> Rect:
        """Apply a drag delta on one of the frame handles.

        Left/top handles shrink the size and shift the origin; once the
        minimum is reached the opposite edge stays where it was.
        """
        x, y, width, height = self.x, self.y, self.width, self.height
        if edge.moves_right:
            width = max(self.width + dx, min_width)
        elif edge.moves_left:
            width = max(self.width - dx, min_width)
            x = self.right - width
        if edge.moves_bottom:
            height = max(self.height + dy, min_height)
        elif edge.moves_top:
            height = max(self.height - dy, min_height)
            y = self.bottom - height
        return Rect(x=x, y=y, width=width, height=height)

    @classmethod
    def from_size(cls, size: Size) -> Rect:
        return cls(x=0.0, y=0.0, width=size.width, height=size.height)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Rect:
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
        )
