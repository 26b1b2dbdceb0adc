"""Bounded navigation over a candidate list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TypeVar

T = TypeVar("T")


def advance(items: Sequence[object], index: int) -> int:
    """Step forward, stopping at the last index."""

    if not items:
        return 0
    return min(index + 1, len(items) - 1)


def retreat(items: Sequence[object], index: int) -> int:
    """Step back, stopping at zero."""

    return max(index - 1, 0)


def clamp(items: Sequence[object], index: int) -> int:
    """Bring ``index`` back in range after ``items`` changed."""

    if not items:
        return 0
    return max(0, min(index, len(items) - 1))


@dataclass(slots=True)
class SelectionCursor:
    """Current position in one candidate list."""

    index: int = 0

    def advance(self, items: Sequence[object]) -> int:
        self.index = advance(items, self.index)
        return self.index

    def retreat(self, items: Sequence[object]) -> int:
        self.index = retreat(items, self.index)
        return self.index

    def clamp(self, items: Sequence[object]) -> int:
        self.index = clamp(items, self.index)
        return self.index

    def current(self, items: Sequence[T]) -> T | None:
        if 0 <= self.index < len(items):
            return items[self.index]
        return None
