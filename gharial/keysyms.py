"""Key and modifier names mapped to xkb keysym values and modifier bits.

ASCII letters and digits resolve from their character codes, a set of
punctuation maps to its ASCII value, and anything else may be written as
a ``0x``-prefixed hexadecimal keysym.
"""

from __future__ import annotations

import re

_HEX = re.compile(r"\+?[0-9a-fA-F]+")
_U32_MAX = 0xFFFF_FFFF

_PUNCTUATION = frozenset(" !\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")

_NAMED: dict[str, int] = {
    # Whitespace / editing
    "space": 0x0020,
    "return": 0xFF0D,
    "enter": 0xFF0D,
    "tab": 0xFF09,
    "backspace": 0xFF08,
    "bspc": 0xFF08,
    "delete": 0xFFFF,
    "del": 0xFFFF,
    "escape": 0xFF1B,
    "esc": 0xFF1B,
    "insert": 0xFF63,
    "home": 0xFF50,
    "end": 0xFF57,
    "page_up": 0xFF55,
    "pageup": 0xFF55,
    "pgup": 0xFF55,
    "page_down": 0xFF56,
    "pagedown": 0xFF56,
    "pgdn": 0xFF56,
    "menu": 0xFF67,
    "print": 0xFF61,
    "pause": 0xFF13,
    # Arrows
    "left": 0xFF51,
    "up": 0xFF52,
    "right": 0xFF53,
    "down": 0xFF54,
    # Function keys
    **{f"f{n}": 0xFFBE + n - 1 for n in range(1, 21)},
    # Numpad
    **{f"kp_{n}": 0xFFB0 + n for n in range(10)},
    "kp_add": 0xFFAB,
    "kp_subtract": 0xFFAD,
    "kp_multiply": 0xFFAA,
    "kp_divide": 0xFFAF,
    "kp_enter": 0xFF8D,
    "kp_decimal": 0xFFAE,
    # XF86 media and brightness
    "xf86audioraisevolume": 0x1008FF13,
    "xf86audiolowervolume": 0x1008FF11,
    "xf86audiomute": 0x1008FF12,
    "xf86audiomicmute": 0x1008FFB2,
    "xf86audioplay": 0x1008FF14,
    "xf86audiopause": 0x1008FF31,
    "xf86audionext": 0x1008FF17,
    "xf86audioprev": 0x1008FF16,
    "xf86audiostop": 0x1008FF15,
    "xf86monbrightnessup": 0x1008FF02,
    "xf86monbrightnessdown": 0x1008FF03,
    "[iban]": 0x1008FF05,
    "xf86kbdbrightnessdown": 0x1008FF06,
    "xf86display": 0x1008FF59,
    "xf86wlan": 0x1008FF95,
    "xf86touchpadtoggle": 0x1008FFA9,
    "xf86search": 0x1008FF1B,
    "xf86mail": 0x1008FF19,
    "xf86launch1": 0x1008FF41,
    "xf86launch2": 0x1008FF42,
}

_MODIFIERS: dict[str, int] = {
    "shift": 1,
    "ctrl": 4,
    "control": 4,
    "alt": 8,
    "mod1": 8,
    "mod3": 32,
    "super": 64,
    "mod4": 64,
    "logo": 64,
    "win": 64,
    "meta": 64,
    "mod5": 128,
}

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def _ascii_lower(text: str) -> str:
    return text.translate(_ASCII_LOWER)


def parse_keysym(name: str) -> int | None:
    """Return the keysym for a key name, or ``None`` if it is unknown."""
    if name.startswith(("0x", "0X")):
        digits = name[2:]
        if not _HEX.fullmatch(digits):
            return None
        value = int(digits, 16)
        return value if value <= _U32_MAX else None
    if len(name) == 1 and name.isascii():
        if name.isalnum():
            return ord(_ascii_lower(name))
        if name in _PUNCTUATION:
            return ord(name)
    return _NAMED.get(_ascii_lower(name))


def parse_modifier(name: str) -> int:
    """Return the modifier bit for a modifier name.

    Raises ValueError for an unknown name.
    """
    lowered = _ascii_lower(name)
    try:
        return _MODIFIERS[lowered]
    except KeyError:
        raise ValueError(f"unknown modifier: {lowered}") from None