"""Actions that flow from the control socket and key bindings to the window manager."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Union

from gharial.keysyms import parse_keysym, parse_modifier

_U8 = re.compile(r"\+?[0-9]+")

LAYOUT_KEYS = frozenset(
    {
        "main-ratio",
        "main-count",
        "gaps",
        "outer-padding",
        "orientation",
        "smart-gaps",
        "border-width",
        "border-color-focused",
        "border-color-unfocused",
    }
)


class Direction(Enum):
    """A focus or swap direction: stack order or spatial."""

    NEXT = "next"
    PREV = "prev"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"

    @classmethod
    def parse(cls, text: str) -> Direction:
        """Parse a direction name or its short alias; raise ValueError otherwise."""
        try:
            return _DIRECTION_ALIASES[text]
        except KeyError:
            raise ValueError(
                f"invalid direction: {text} (next|prev|left|right|up|down)"
            ) from None

    def is_spatial(self) -> bool:
        """True for the four cardinal directions that depend on geometry."""
        return self in (Direction.LEFT, Direction.RIGHT, Direction.UP, Direction.DOWN)


_DIRECTION_ALIASES = {
    "next": Direction.NEXT,
    "n": Direction.NEXT,
    "prev": Direction.PREV,
    "previous": Direction.PREV,
    "p": Direction.PREV,
    "left": Direction.LEFT,
    "h": Direction.LEFT,
    "right": Direction.RIGHT,
    "l": Direction.RIGHT,
    "up": Direction.UP,
    "k": Direction.UP,
    "down": Direction.DOWN,
    "j": Direction.DOWN,
}


@dataclass(frozen=True)
class BindingSpec:
    """A key chord: a keysym with a modifier bitmask."""

    modifiers: int
    keysym: int

    @classmethod
    def parse(cls, chord: str) -> BindingSpec:
        """Parse a ``Super+Shift+Q``-style chord (case-insensitive)."""
        parts = [part for part in chord.split("+") if part]
        if not parts:
            raise ValueError("empty chord")
        *mods, key = parts
        modifiers = 0
        for mod in mods:
            modifiers |= parse_modifier(mod)
        keysym = parse_keysym(key)
        if keysym is None:
            raise ValueError(f"unknown keysym: {key}")
        return cls(modifiers, keysym)


@dataclass(frozen=True)
class Spawn:
    """Launch a detached program."""

    cmd: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class Close:
    """Close the focused window."""


@dataclass(frozen=True)
class FocusDirection:
    """Move keyboard focus in a direction."""

    direction: Direction


@dataclass(frozen=True)
class SwapDirection:
    """Swap the focused window with its neighbour in a direction."""

    direction: Direction


@dataclass(frozen=True)
class ToggleFloat:
    """Toggle the focused window between tiled and floating."""


@dataclass(frozen=True)
class Layout:
    """Adjust a layout or border parameter."""

    key: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class EnterMode:
    """Switch to a named binding mode."""

    name: str


@dataclass(frozen=True)
class ExitMode:
    """Return to the default binding mode."""


@dataclass(frozen=True)
class Bind:
    """Install a key binding in a mode."""

    spec: BindingSpec
    action: Action
    mode: str


@dataclass(frozen=True)
class Unbind:
    """Remove a key binding from a mode."""

    spec: BindingSpec
    mode: str


@dataclass(frozen=True)
class FocusTag:
    """Show only one tag."""

    tag: int


@dataclass(frozen=True)
class ToggleTag:
    """Add or remove a tag from the active set."""

    tag: int


@dataclass(frozen=True)
class MoveToTag:
    """Send the focused window to a tag."""

    tag: int


@dataclass(frozen=True)
class ToggleWindowTag:
    """Add or remove a tag from the focused window."""

    tag: int


Action = Union[
    Spawn,
    Close,
    FocusDirection,
    SwapDirection,
    ToggleFloat,
    Layout,
    EnterMode,
    ExitMode,
    Bind,
    Unbind,
    FocusTag,
    ToggleTag,
    MoveToTag,
    ToggleWindowTag,
]

_TAG_ACTIONS = {
    "focus": FocusTag,
    "toggle": ToggleTag,
    "move": MoveToTag,
    "send": MoveToTag,
    "window-toggle": ToggleWindowTag,
    "wtoggle": ToggleWindowTag,
}


def _parse_tag_action(tokens: Sequence[str]) -> Action:
    if not tokens:
        raise ValueError("tag: expected focus|toggle|move|window-toggle")
    sub, *rest = tokens
    if not rest:
        raise ValueError(f"tag {sub}: missing tag number 1..32")
    raw = rest[0]
    if not _U8.fullmatch(raw) or int(raw) > 255:
        raise ValueError(f"tag {sub}: invalid tag number")
    n = int(raw)
    if not 1 <= n <= 32:
        raise ValueError(f"tag {sub}: tag {n} out of range 1..32")
    try:
        return _TAG_ACTIONS[sub](n)
    except KeyError:
        raise ValueError(f"tag: unknown subcommand {sub}") from None


def parse_action(tokens: Sequence[str]) -> Action:
    """Parse an action from command tokens; raise ValueError if invalid.

    Extra trailing tokens after a complete action are ignored.
    """
    if not tokens:
        raise ValueError("empty action")
    cmd, *rest = tokens
    if cmd == "close":
        return Close()
    if cmd in ("focus", "swap"):
        if not rest:
            raise ValueError(f"{cmd}: expected next|prev")
        direction = Direction.parse(rest[0])
        return FocusDirection(direction) if cmd == "focus" else SwapDirection(direction)
    if cmd == "spawn":
        if not rest:
            raise ValueError("spawn: missing command")
        program, *args = rest
        return Spawn(program, tuple(args))
    if cmd == "toggle-float":
        return ToggleFloat()
    if cmd == "mode":
        if not rest:
            raise ValueError("mode: expected <name|exit>")
        target = rest[0]
        return ExitMode() if target == "exit" else EnterMode(target)
    if cmd == "tag":
        return _parse_tag_action(rest)
    if cmd in LAYOUT_KEYS:
        return Layout(cmd, tuple(rest))
    raise ValueError(f"unknown action: {cmd}")