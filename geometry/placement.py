"""Initial placement for newly opened windows."""

from __future__ import annotations

import random

from geometry.rect import Rect


class CascadePlacement:
    """Staggers new windows so stacked windows don't overlap exactly.

    Offsets come from a seeded generator, so a fixed seed gives a
    reproducible layout.
    """

    def __init__(
        self,
        base_offset: float = 50.0,
        spread: int = 200,
        default_width: float = 600.0,
        default_height: float = 400.0,
        seed: int | None = None,
    ) -> None:
        self.base_offset = base_offset
        self.spread = max(int(spread), 1)
        self.default_width = default_width
        self.default_height = default_height
        self._rng = random.Random(seed)

    def next_rect(self) -> Rect:
        offset = self.base_offset + self._rng.randrange(self.spread)
        return Rect(x=offset, y=offset, width=self.default_width, height=self.default_height)
