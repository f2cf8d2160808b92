"""Tag bitmasks and the active binding mode.

Tags 1..32 map to bits 0..31. Modes are named buckets of bindings; the
starting mode is ``default``, which is also where exiting a mode returns.
"""

from __future__ import annotations

from dataclasses import dataclass

TAG_COUNT = 32
DEFAULT_MODE = "default"


def tag_mask(n: int) -> int:
    """Return the bit for tag ``n`` (1..32); raise ValueError outside that range."""
    if not 1 <= n <= TAG_COUNT:
        raise ValueError(f"tag {n} out of range 1..{TAG_COUNT}")
    return 1 << (n - 1)


@dataclass
class Tags:
    """The bitmask of currently visible tags."""

    active: int = 1


@dataclass
class Modes:
    """The currently active binding mode."""

    active: str = DEFAULT_MODE