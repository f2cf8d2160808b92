"""Master-stack layout algorithm, independent of any compositor connection."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class Orientation(Enum):
    """Where the main area sits relative to the stack."""

    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"

    def __str__(self) -> str:
        return self.value

    @property
    def stacks_vertically(self) -> bool:
        """True when areas are sliced into rows rather than columns."""
        return self in (Orientation.LEFT, Orientation.RIGHT)


@dataclass
class Params:
    """Tunable layout parameters."""

    main_count: int = 1
    main_ratio: float = 0.55
    gaps: int = 8
    outer_padding: int = 8
    orientation: Orientation = Orientation.LEFT
    smart_gaps: bool = True

    def clamp(self) -> None:
        """Keep the ratio within [0.05, 0.95] and the main count at least 1."""
        self.main_ratio = min(max(self.main_ratio, 0.05), 0.95)
        if self.main_count < 1:
            self.main_count = 1


@dataclass(frozen=True)
class Rect:
    """A placed rectangle: position and non-negative size."""

    x: int
    y: int
    w: int
    h: int


def _round_half_away(value: float) -> int:
    if value >= 0:
        return math.floor(value + 0.5)
    return -math.floor(-value + 0.5)


def _split(
    x: int, y: int, w: int, h: int, n: int, gap: int, orientation: Orientation
) -> list[Rect]:
    """Divide a rectangle into ``n`` rows or columns separated by ``gap``.

    Left/right orientations slice into rows, top/bottom into columns;
    leftover pixels go to the first slices.
    """
    if n == 0:
        return []
    out: list[Rect] = []
    if orientation.stacks_vertically:
        total = max(h - gap * (n - 1), n)
        each, rem = divmod(total, n)
        cy = y
        for i in range(n):
            hh = each + (1 if i < rem else 0)
            out.append(Rect(x, cy, max(w, 0), max(hh, 0)))
            cy += hh + gap
    else:
        total = max(w - gap * (n - 1), n)
        each, rem = divmod(total, n)
        cx = x
        for i in range(n):
            ww = each + (1 if i < rem else 0)
            out.append(Rect(cx, y, max(ww, 0), max(h, 0)))
            cx += ww + gap
    return out


def compute(view_count: int, usable: tuple[int, int], params: Params) -> list[Rect]:
    """Compute view rectangles for ``view_count`` views in the usable area."""
    if view_count == 0:
        return []
    uw, uh = usable

    if params.smart_gaps and view_count == 1:
        outer, gap = 0, 0
    else:
        outer, gap = params.outer_padding, params.gaps

    ix, iy = outer, outer
    iw = uw - 2 * outer
    ih = uh - 2 * outer
    if iw <= 0 or ih <= 0:
        return [Rect(0, 0, uw, uh) for _ in range(view_count)]

    n = view_count
    main_count = min(params.main_count, n)
    stack_count = n - main_count
    orientation = params.orientation

    if stack_count == 0 or main_count == 0:
        return _split(ix, iy, iw, ih, n, gap, orientation)

    if orientation.stacks_vertically:
        avail = iw - gap
        main_w = _round_half_away(avail * params.main_ratio)
        stack_w = avail - main_w
        if orientation is Orientation.LEFT:
            main_box = (ix, iy, main_w, ih)
            stack_box = (ix + main_w + gap, iy, stack_w, ih)
        else:
            main_box = (ix + stack_w + gap, iy, main_w, ih)
            stack_box = (ix, iy, stack_w, ih)
    else:
        avail = ih - gap
        main_h = _round_half_away(avail * params.main_ratio)
        stack_h = avail - main_h
        if orientation is Orientation.TOP:
            main_box = (ix, iy, iw, main_h)
            stack_box = (ix, iy + main_h + gap, iw, stack_h)
        else:
            main_box = (ix, iy + stack_h + gap, iw, main_h)
            stack_box = (ix, iy, iw, stack_h)

    return [
        *_split(*main_box, main_count, gap, orientation),
        *_split(*stack_box, stack_count, gap, orientation),
    ]