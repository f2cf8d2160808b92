"""Shared daemon state: layout parameters, border settings and the action bridge.

``Shared`` is the single lock-protected store used by the window-manager
loop and control-socket handlers. Every mutation reports whether the
state really changed; real changes set a dirty flag that the window
manager drains with ``take_dirty``.
"""

from __future__ import annotations

import dataclasses
import re
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from gharial.action import Action
from gharial.layout import Orientation, Params

BorderColor = tuple[int, int, int, int]

_U32_MAX = 0xFFFF_FFFF
_BYTE_SPREAD = 0x0101_0101
_UNSIGNED = re.compile(r"\+?[0-9]+")
_HEX_BYTE = re.compile(r"\+?[0-9a-fA-F]+")

_BORDER_KEYS = frozenset(
    {"border-width", "border-color-focused", "border-color-unfocused"}
)
_TRUE_WORDS = frozenset({"on", "true", "yes", "1"})
_FALSE_WORDS = frozenset({"off", "false", "no", "0"})


class CommandError(ValueError):
    """A layout or border command was malformed or unknown."""


def premultiply_straight(r: int, g: int, b: int, a: int) -> BorderColor:
    """Convert straight RGBA bytes to pre-multiplied 32-bit channels.

    Each byte spans 0..0xff and each output spans 0..0xffffffff, so
    ``0xff`` maps to ``0xffffffff``.
    """

    def scale(channel: int) -> int:
        return (channel * a) // 0xFF * _BYTE_SPREAD

    return (scale(r), scale(g), scale(b), a * _BYTE_SPREAD)


def format_color(color: BorderColor) -> str:
    """Render a pre-multiplied colour as ``0xRRGGBBAA`` with alpha divided out."""

    def to_byte(value: int) -> int:
        return min(min(value + 0x0080_0080, _U32_MAX) // _BYTE_SPREAD, 0xFF)

    alpha = to_byte(color[3])

    def demultiply(value: int) -> int:
        if alpha == 0:
            return 0
        return min(to_byte(value) * 0xFF // alpha, 0xFF)

    r, g, b = (demultiply(channel) for channel in color[:3])
    return f"0x{r:02X}{g:02X}{b:02X}{alpha:02X}"


def parse_color(raw: str) -> BorderColor:
    """Parse ``0xRRGGBBAA`` or ``#RRGGBBAA`` into the pre-multiplied form."""
    hex_digits = raw
    for prefix in ("0x", "0X", "#"):
        if raw.startswith(prefix):
            hex_digits = raw[len(prefix):]
            break
    if len(hex_digits.encode("utf-8")) != 8:
        raise CommandError(f"invalid color {raw}: expected 8 hex digits (RRGGBBAA)")

    def byte_at(pos: int) -> int:
        pair = hex_digits[pos:pos + 2]
        if not hex_digits.isascii() or not _HEX_BYTE.fullmatch(pair):
            raise CommandError(f"invalid color {raw}: non-hex byte at position {pos}")
        return int(pair, 16)

    r, g, b, a = (byte_at(pos) for pos in (0, 2, 4, 6))
    return premultiply_straight(r, g, b, a)


@dataclass(frozen=True)
class BorderConfig:
    """Border thickness and the focused/unfocused colours."""

    width: int = 3
    focused: BorderColor = premultiply_straight(0xC8, 0x32, 0x4B, 0xFF)
    unfocused: BorderColor = premultiply_straight(0x00, 0xC8, 0x96, 0xFF)


@dataclass(frozen=True)
class Applied:
    """Outcome of a command: a short summary and whether anything changed."""

    summary: str
    changed: bool


def _require_one(cmd: str, args: Sequence[str]) -> str:
    if not args:
        raise CommandError(f"{cmd}: missing value")
    return args[0]


def _split_op(raw: str) -> tuple[str, str]:
    if raw.startswith(("+", "-")):
        return raw[0], raw[1:]
    return "=", raw


def _apply_float(current: float, raw: str) -> float:
    op, rest = _split_op(raw)
    if not rest or "_" in rest or rest != rest.strip():
        raise CommandError(f"invalid number: {raw}")
    try:
        value = float(rest)
    except ValueError:
        raise CommandError(f"invalid number: {raw}") from None
    if op == "+":
        return current + value
    if op == "-":
        return current - value
    return value


def _apply_u32(current: int, raw: str) -> int:
    op, rest = _split_op(raw)
    if not _UNSIGNED.fullmatch(rest) or int(rest) > _U32_MAX:
        raise CommandError(f"invalid integer: {raw}")
    value = int(rest)
    if op == "+":
        return min(current + value, _U32_MAX)
    if op == "-":
        return max(current - value, 0)
    return value


def _apply_bool(current: bool, raw: str) -> bool:
    if raw in _TRUE_WORDS:
        return True
    if raw in _FALSE_WORDS:
        return False
    if raw == "toggle":
        return not current
    raise CommandError(f"invalid boolean: {raw} (on|off|toggle)")


def _apply_params(params: Params, cmd: str, args: Sequence[str]) -> Params:
    if cmd == "main-ratio":
        value = _apply_float(params.main_ratio, _require_one(cmd, args))
        return dataclasses.replace(params, main_ratio=value)
    if cmd in ("main-count", "gaps", "outer-padding"):
        attr = cmd.replace("-", "_")
        value = _apply_u32(getattr(params, attr), _require_one(cmd, args))
        return dataclasses.replace(params, **{attr: value})
    if cmd == "orientation":
        raw = _require_one(cmd, args)
        try:
            orientation = Orientation(raw)
        except ValueError:
            raise CommandError(
                f"invalid orientation: {raw} (left|right|top|bottom)"
            ) from None
        return dataclasses.replace(params, orientation=orientation)
    if cmd == "smart-gaps":
        value = _apply_bool(params.smart_gaps, _require_one(cmd, args))
        return dataclasses.replace(params, smart_gaps=value)
    raise CommandError(f"unknown command: {cmd}")


def _apply_borders(borders: BorderConfig, cmd: str, args: Sequence[str]) -> BorderConfig:
    if cmd == "border-width":
        width = _apply_u32(borders.width, _require_one(cmd, args))
        return dataclasses.replace(borders, width=width)
    if cmd == "border-color-focused":
        return dataclasses.replace(borders, focused=parse_color(_require_one(cmd, args)))
    if cmd == "border-color-unfocused":
        return dataclasses.replace(
            borders, unfocused=parse_color(_require_one(cmd, args))
        )
    raise CommandError(f"unknown border command: {cmd}")


def _param_value(params: Params, key: str) -> str | None:
    if key == "main-ratio":
        return f"{params.main_ratio:.4f}"
    if key in ("main-count", "gaps", "outer-padding"):
        return str(getattr(params, key.replace("-", "_")))
    if key == "orientation":
        return params.orientation.value
    if key == "smart-gaps":
        return "true" if params.smart_gaps else "false"
    return None


def _border_value(borders: BorderConfig, key: str) -> str | None:
    if key == "border-width":
        return str(borders.width)
    if key == "border-color-focused":
        return format_color(borders.focused)
    if key == "border-color-unfocused":
        return format_color(borders.unfocused)
    return None


class Shared:
    """Lock-protected store of layout parameters and border settings."""

    def __init__(self, params: Params | None = None) -> None:
        self._lock = threading.Lock()
        self._params = dataclasses.replace(params) if params is not None else Params()
        self._borders = BorderConfig()
        self._dirty = False
        self._sender_lock = threading.Lock()
        self._sender: Callable[[Action], object] | None = None

    def set_action_sender(self, sender: Callable[[Action], object]) -> None:
        """Install the callable that forwards actions to the window manager."""
        with self._sender_lock:
            self._sender = sender

    def send_action(self, action: Action) -> None:
        """Forward an action; raise CommandError if no sender accepts it."""
        with self._sender_lock:
            sender = self._sender
        if sender is None:
            raise CommandError("wayland thread not ready (no action channel yet)")
        try:
            sender(action)
        except Exception as exc:
            raise CommandError(f"wayland thread not accepting actions: {exc}") from exc

    def snapshot(self) -> Params:
        """Return a copy of the current layout parameters."""
        with self._lock:
            return dataclasses.replace(self._params)

    def borders(self) -> BorderConfig:
        """Return the current border configuration."""
        with self._lock:
            return self._borders

    def apply(self, cmd: str, args: Sequence[str]) -> Applied:
        """Apply a layout or border command, marking state dirty on a real change."""
        with self._lock:
            if cmd in _BORDER_KEYS:
                before = self._borders
                self._borders = _apply_borders(before, cmd, args)
                changed = self._borders != before
                summary = f"{cmd}={_border_value(self._borders, cmd)}"
            else:
                before = self._params
                updated = _apply_params(before, cmd, args)
                updated.clamp()
                self._params = updated
                changed = updated != before
                value = _param_value(updated, cmd)
                summary = f"{cmd}={value}" if value is not None else ""
            if changed:
                self._dirty = True
            return Applied(summary, changed)

    def get(self, key: str) -> str:
        """Return a single value as text; raise CommandError for an unknown key."""
        with self._lock:
            value = _param_value(self._params, key)
            if value is None:
                value = _border_value(self._borders, key)
        if value is None:
            raise CommandError(f"unknown key: {key}")
        return value

    def status_line(self) -> str:
        """All values as ``key=value`` pairs joined by semicolons."""
        with self._lock:
            params, borders = self._params, self._borders
        keys = ("main-ratio", "main-count", "gaps", "outer-padding", "orientation",
                "smart-gaps")
        pairs = [f"{key}={_param_value(params, key)}" for key in keys]
        pairs += [
            f"{key}={_border_value(borders, key)}"
            for key in ("border-width", "border-color-focused", "border-color-unfocused")
        ]
        return ";".join(pairs)

    def take_dirty(self) -> bool:
        """Return whether a change is pending, clearing the flag."""
        with self._lock:
            dirty, self._dirty = self._dirty, False
            return dirty