"""Command-line control tool for the gharial daemon."""

from __future__ import annotations

import os
import re
import sys
import time
from collections.abc import Sequence
from datetime import timedelta
from pathlib import Path

from gharial.protocol import Request, send_one, socket_path
from gharial.server import VERSION

POLL_INTERVAL = 0.05
DEFAULT_WAIT = timedelta(seconds=2)

_U64_MAX = 0xFFFF_FFFF_FFFF_FFFF
_LEADING_DIGITS = re.compile(r"[0-9]*")

_LONG_HELP = """\

Layout parameters:
  set <key> <value>          Set or adjust a parameter (see KEYS)
  get <key>                  Print the current value
  status                     Print all parameters as key=value pairs

Shorthands (equivalent to `set <key> <value>`):
  main-ratio <value>
  main-count <value>
  gaps <value>
  outer-padding <value>
  orientation <left|right|top|bottom>
  smart-gaps <on|off|toggle>

Window management:
  spawn <cmd> [args...]      Launch a program, detached
  close                      Close the focused window
  toggle-float               Toggle the focused window's float state
  focus <direction>          Shift keyboard focus to a neighbour
  swap <direction>           Swap the focused window with the neighbour
                             <direction> = next|prev|left|right|up|down
                             (next/prev cycle stack order; left/right/up/down
                              pick the spatially closest tiled neighbour)

Tags (1..32):
  tag focus <N>              Show only tag N
  tag toggle <N>             Add/remove tag N from the active set
  tag move <N>               Send focused window to tag N
  tag window-toggle <N>      Add/remove tag N from focused window

Bindings and modes:
  bind [--mode MODE] <chord> <action ...>
                             Install a keyboard binding. Chord is
                             '+'-separated, case-insensitive, e.g.
                             Super+Shift+Q. Action is any of the
                             gharialctl verbs above (close, focus,
                             spawn, tag focus, main-ratio, ...).
  unbind [--mode MODE] <chord>
                             Remove a binding by chord.
  mode <name>                Enter a named binding mode
  mode exit                  Return to the default mode

Misc:
  ping                       Verify the daemon is reachable
  version                    Print the daemon's version
  wait [TIMEOUT]             Block until the daemon answers ping
                             (TIMEOUT defaults to 2000ms; suffixes: ms, s)

VALUES
  Numeric values accept absolute (`0.55`, `8`), relative-add (`+0.05`,
  `+1`) or relative-subtract (`-0.05`, `-1`) forms. Booleans accept
  on|off|true|false|yes|no|toggle.

SOCKET
  Defaults to $GHARIAL_SOCKET, then
  $XDG_RUNTIME_DIR/gharial-$WAYLAND_DISPLAY.sock."""


def split_socket_flag(args: Sequence[str]) -> tuple[Path | None, list[str]]:
    """Take a leading ``-s PATH`` / ``--socket PATH`` off the argument list.

    Returns the socket override (or None) and the remaining arguments.
    Raises ValueError if the flag has no value.
    """
    if not args:
        return None, []
    first, *rest = args
    if first in ("-s", "--socket"):
        if not rest:
            raise ValueError("--socket requires a path argument")
        path, *remaining = rest
        return Path(path), remaining
    return None, [first, *rest]


def parse_timeout(arg: str | None) -> timedelta | None:
    """Parse ``2000``, ``2000ms`` or ``2s``; bare numbers are milliseconds.

    Returns None if the value cannot be parsed.
    """
    if arg is None:
        return None
    digits = _LEADING_DIGITS.match(arg).group()
    unit = arg[len(digits):] if len(digits) < len(arg) else "ms"
    if not digits or int(digits) > _U64_MAX:
        return None
    amount = int(digits)
    try:
        if unit == "ms":
            return timedelta(milliseconds=amount)
        if unit == "s":
            return timedelta(seconds=amount)
    except OverflowError:
        return timedelta.max
    return None


def usage(long: bool) -> None:
    """Print the short or full help text."""
    print(f"gharialctl {VERSION} - control the gharial window manager")
    print()
    print("Usage: gharialctl [-s SOCKET] <command> [args...]")
    if not long:
        print("Try `gharialctl --help` for the full command list.")
        return
    print(_LONG_HELP)


def _format_duration(duration: timedelta) -> str:
    millis = duration // timedelta(milliseconds=1)
    if millis % 1000 == 0:
        return f"{millis // 1000}s"
    if millis < 1000:
        return f"{millis}ms"
    return f"{duration.total_seconds():g}s"


def _responds(path: Path) -> bool:
    try:
        return send_one(path, Request("ping")).ok
    except (OSError, ValueError):
        return False


def wait_for_daemon(path: str | os.PathLike[str], timeout: timedelta) -> int:
    """Poll the daemon with ``ping`` until it answers; return an exit code."""
    path = Path(path)
    deadline = time.monotonic() + timeout.total_seconds()
    while True:
        if _responds(path):
            return 0
        if time.monotonic() >= deadline:
            print(
                f"gharialctl: daemon did not respond at {path} "
                f"within {_format_duration(timeout)}",
                file=sys.stderr,
            )
            return 1
        time.sleep(POLL_INTERVAL)


def main(argv: Sequence[str] | None = None) -> int:
    """Run gharialctl with ``argv`` (defaults to the process arguments)."""
    raw = list(sys.argv[1:] if argv is None else argv)
    if not raw:
        usage(False)
        return 2

    try:
        socket_override, rest = split_socket_flag(raw)
    except ValueError as exc:
        print(f"gharialctl: {exc}", file=sys.stderr)
        return 2

    if not rest:
        usage(False)
        return 2
    command, *cmd_args = rest

    if command in ("-h", "--help", "help"):
        usage(True)
        return 0
    if command in ("-V", "--version"):
        print(f"gharialctl {VERSION}")
        return 0

    path = socket_override if socket_override is not None else socket_path()

    if command == "wait":
        timeout = parse_timeout(cmd_args[0] if cmd_args else None)
        return wait_for_daemon(path, timeout if timeout is not None else DEFAULT_WAIT)

    try:
        response = send_one(path, Request(command, cmd_args))
    except (OSError, ValueError) as exc:
        print(
            f"gharialctl: cannot reach gharial at {path}: {exc}\n"
            "(is the daemon running? try: pgrep -a gharial)",
            file=sys.stderr,
        )
        return 1
    if response.ok:
        if response.body:
            print(response.body)
        return 0
    print(f"gharialctl: {response.body}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())