"""Focus policy: remembered focus per tag and fallback candidate selection."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Iterator
from typing import Generic, Optional, TypeVar

from gharial.tags import TAG_COUNT

Id = TypeVar("Id", bound=Hashable)


def _tag_indexes(mask: int) -> Iterator[int]:
    return (idx for idx in range(TAG_COUNT) if mask & (1 << idx))


class FocusMemory(Generic[Id]):
    """Remembers the last focused window for each tag."""

    def __init__(self) -> None:
        self._by_tag: list[Optional[Id]] = [None] * TAG_COUNT

    def remember(self, active_tags: int, window_tags: int, window_id: Id) -> None:
        """Remember ``window_id`` for every active tag the window belongs to."""
        for idx in _tag_indexes(active_tags & window_tags):
            self._by_tag[idx] = window_id

    def forget(self, window_id: Id) -> None:
        """Drop every reference to a removed window."""
        self._by_tag = [None if slot == window_id else slot for slot in self._by_tag]

    def candidates(self, active_tags: int) -> list[Id]:
        """Remembered windows for the active tags, de-duplicated in tag order."""
        out: list[Id] = []
        for idx in _tag_indexes(active_tags):
            remembered = self._by_tag[idx]
            if remembered is not None and remembered not in out:
                out.append(remembered)
        return out


def pick_candidate(
    remembered: Iterable[Id],
    ordered: Iterable[Id],
    is_visible: Callable[[Id], bool],
) -> Id | None:
    """First visible remembered window, else the first visible in stack order."""
    for window_id in remembered:
        if is_visible(window_id):
            return window_id
    return next((window_id for window_id in ordered if is_visible(window_id)), None)