"""Pick the neighbouring window in a cardinal direction.

Candidates on the wrong side of the focused window (by centre) are
discarded. The rest are ranked by distance perpendicular to the movement
axis first, so the most aligned window wins, and by distance along the
axis second. On a full tie the earliest candidate wins.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable
from typing import TypeVar

from gharial.action import Direction
from gharial.layout import Rect

Id = TypeVar("Id", bound=Hashable)


def _center(rect: Rect) -> tuple[int, int]:
    return rect.x + rect.w // 2, rect.y + rect.h // 2


def _on_correct_side(direction: Direction, dx: int, dy: int) -> bool:
    if direction is Direction.LEFT:
        return dx < 0
    if direction is Direction.RIGHT:
        return dx > 0
    if direction is Direction.UP:
        return dy < 0
    return dy > 0


def pick_neighbor(
    rects: Iterable[tuple[Id, Rect]],
    focused_id: Id,
    focused: Rect,
    direction: Direction,
) -> Id | None:
    """Return the id of the best neighbour of ``focused`` in ``direction``.

    Returns None when no window lies on that side. Raises ValueError for a
    non-spatial direction.
    """
    if not direction.is_spatial():
        raise ValueError(f"pick_neighbor needs a cardinal direction, got {direction.value}")

    fx, fy = _center(focused)
    horizontal = direction in (Direction.LEFT, Direction.RIGHT)
    best: tuple[int, int] | None = None
    best_id: Id | None = None

    for window_id, rect in rects:
        if window_id == focused_id:
            continue
        cx, cy = _center(rect)
        dx, dy = cx - fx, cy - fy
        if not _on_correct_side(direction, dx, dy):
            continue
        key = (abs(dy), abs(dx)) if horizontal else (abs(dx), abs(dy))
        if best is None or key < best:
            best, best_id = key, window_id
    return best_id