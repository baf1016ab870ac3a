"""Per-window state machine: floating, minimized, maximized, pinned."""

from __future__ import annotations

from enum import Enum

from geometry.rect import MIN_HEIGHT, MIN_WIDTH, Rect, ResizeEdge, Size


class EntityState(str, Enum):
    """Life-cycle state of a window. Exactly one holds at a time."""

    FLOATING = "floating"
    MINIMIZED = "minimized"
    MAXIMIZED = "maximized"
    PINNED = "pinned"


class WindowEntry:
    """Geometry and life-cycle state of one window.

    ``saved_rect`` holds the floating geometry captured when the window was
    minimized or maximized, and is what ``restore`` goes back to. Geometry
    mutators only act while floating or pinned so a late drag event cannot
    disturb a minimized or maximized window.

    Every transition returns ``True`` when it changed the entry.
    """

    def __init__(
        self,
        rect: Rect,
        state: EntityState = EntityState.FLOATING,
        saved_rect: Rect | None = None,
        *,
        min_width: float = MIN_WIDTH,
        min_height: float = MIN_HEIGHT,
    ) -> None:
        self.rect = rect
        self.state = state
        self.saved_rect = saved_rect
        self.min_width = min_width
        self.min_height = min_height

    def __repr__(self) -> str:
        return f"WindowEntry(rect={self.rect!r}, state={self.state.value})"

    @property
    def is_floating(self) -> bool:
        return self.state is EntityState.FLOATING

    @property
    def is_minimized(self) -> bool:
        return self.state is EntityState.MINIMIZED

    @property
    def is_maximized(self) -> bool:
        return self.state is EntityState.MAXIMIZED

    @property
    def is_pinned(self) -> bool:
        return self.state is EntityState.PINNED

    @property
    def is_movable(self) -> bool:
        return self.state in (EntityState.FLOATING, EntityState.PINNED)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def update_rect(self, rect: Rect) -> bool:
        if not self.is_movable:
            return False
        return self._set_rect(rect)

    def move(self, dx: float, dy: float) -> bool:
        if not self.is_movable:
            return False
        return self._set_rect(self.rect.move(dx, dy))

    def resize(
        self,
        width: float,
        height: float,
        x: float | None = None,
        y: float | None = None,
    ) -> bool:
        if not self.is_movable:
            return False
        return self._set_rect(
            self.rect.resize(
                width, height, x, y, min_width=self.min_width, min_height=self.min_height
            )
        )

    def drag_resize(self, edge: ResizeEdge, dx: float, dy: float) -> bool:
        if not self.is_movable:
            return False
        return self._set_rect(
            self.rect.drag_resize(
                edge, dx, dy, min_width=self.min_width, min_height=self.min_height
            )
        )

    def _set_rect(self, rect: Rect) -> bool:
        if rect == self.rect:
            return False
        self.rect = rect
        return True

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def minimize(self) -> bool:
        if self.is_minimized:
            return False
        self.saved_rect = self.rect
        self.state = EntityState.MINIMIZED
        return True

    def maximize(self, available_size: Size) -> bool:
        """Maximize, or restore when already maximized."""
        if self.is_maximized:
            if self.saved_rect is not None:
                self.rect = self.saved_rect
            self.state = EntityState.FLOATING
            return True
        self.saved_rect = self.rect
        self.rect = Rect.from_size(available_size)
        self.state = EntityState.MAXIMIZED
        return True

    def restore(self) -> bool:
        if self.saved_rect is not None:
            self.rect = self.saved_rect
        self.state = EntityState.FLOATING
        return True

    def toggle_pin(self) -> bool:
        self.state = EntityState.FLOATING if self.is_pinned else EntityState.PINNED
        return True
