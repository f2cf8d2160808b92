"""Cached layout targets and the border inset applied to layout slots.

A layout slot encloses the whole window including its border; the
content rectangle sits inside it, inset by the border width on every
side, so neighbouring tiles never share border pixels.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from typing import Generic, TypeVar

from gharial.layout import Rect

Id = TypeVar("Id", bound=Hashable)

_U64_MASK = 0xFFFF_FFFF_FFFF_FFFF


class TargetCache(Generic[Id]):
    """Slot rectangles per window, reused until marked dirty."""

    def __init__(self) -> None:
        self._targets: dict[Id, Rect] = {}
        self._dirty = True
        self._recompute_count = 0

    @property
    def recompute_count(self) -> int:
        """How many times the targets have been replaced."""
        return self._recompute_count

    def mark_dirty(self) -> None:
        """Force the next lookup to recompute."""
        self._dirty = True

    def snapshot(self) -> dict[Id, Rect] | None:
        """A copy of the cached targets, or None when they are stale."""
        if self._dirty:
            return None
        return dict(self._targets)

    def replace(self, targets: Mapping[Id, Rect]) -> None:
        """Store freshly computed targets and mark the cache clean."""
        self._targets = dict(targets)
        self._dirty = False
        self._recompute_count = (self._recompute_count + 1) & _U64_MASK


def inset(slot: Rect, border: int) -> Rect | None:
    """Shrink ``slot`` by ``border`` on every side.

    Returns None if the slot is too small to hold the border on both sides.
    """
    inner_w = slot.w - 2 * border
    inner_h = slot.h - 2 * border
    if inner_w <= 0 or inner_h <= 0:
        return None
    return Rect(slot.x + border, slot.y + border, inner_w, inner_h)