"""Unix-socket control server for the gharial daemon.

Each connection carries exactly one request line and receives exactly one
response line. Requests that change layout state invoke an optional
notifier so the window-manager loop can schedule a fresh layout.
"""

from __future__ import annotations

import errno
import os
import socket
import sys
import threading
import time
from collections.abc import Callable, Sequence
from pathlib import Path

from gharial.action import (
    LAYOUT_KEYS,
    Action,
    Bind,
    BindingSpec,
    Close,
    Direction,
    EnterMode,
    ExitMode,
    FocusDirection,
    Spawn,
    SwapDirection,
    ToggleFloat,
    Unbind,
    parse_action,
)
from gharial.protocol import ParseError, Request, Response, socket_path
from gharial.state import Shared

VERSION = "0.2.0"
DEFAULT_MODE = "default"

_CLIENT_TIMEOUT = 2.0
_ACCEPT_POLL = 0.1
_ACCEPT_RETRY_DELAY = 0.05

Notifier = Callable[[], object]
Outcome = tuple[Response, bool]


def _send(shared: Shared, action: Action, ok_message: str) -> Outcome:
    try:
        shared.send_action(action)
    except ValueError as exc:
        return Response.failure(str(exc)), False
    return Response.success(ok_message), False


def _apply(shared: Shared, key: str, args: Sequence[str]) -> Outcome:
    try:
        applied = shared.apply(key, args)
    except ValueError as exc:
        return Response.failure(str(exc)), False
    return Response.success(applied.summary), applied.changed


def _set(shared: Shared, args: Sequence[str]) -> Outcome:
    if not args:
        return Response.failure("set: missing key"), False
    key, *rest = args
    return _apply(shared, key, rest)


def _get(shared: Shared, args: Sequence[str]) -> Outcome:
    if not args:
        return Response.failure("get: missing key"), False
    try:
        return Response.success(shared.get(args[0])), False
    except ValueError as exc:
        return Response.failure(str(exc)), False


def _directional(
    shared: Shared,
    args: Sequence[str],
    verb: str,
    make: Callable[[Direction], Action],
) -> Outcome:
    if not args:
        return Response.failure(f"{verb}: expected next|prev"), False
    try:
        direction = Direction.parse(args[0])
    except ValueError as exc:
        return Response.failure(str(exc)), False
    return _send(shared, make(direction), f"{verb} queued")


def _spawn(shared: Shared, args: Sequence[str]) -> Outcome:
    if not args:
        return Response.failure("spawn: missing command"), False
    cmd, *rest = args
    return _send(shared, Spawn(cmd, tuple(rest)), "spawn queued")


def _split_mode(args: Sequence[str]) -> tuple[str, Sequence[str]]:
    if args and args[0] == "--mode":
        if len(args) < 2:
            raise ValueError("--mode requires a name")
        return args[1], args[2:]
    return DEFAULT_MODE, args


def _bind(shared: Shared, args: Sequence[str]) -> Outcome:
    try:
        mode, rest = _split_mode(args)
        if not rest:
            return Response.failure("bind: expected <chord> <action ...>"), False
        chord, *action_tokens = rest
        spec = BindingSpec.parse(chord)
        action = parse_action(action_tokens)
    except ValueError as exc:
        return Response.failure(str(exc)), False
    return _send(shared, Bind(spec, action, mode), "bind queued")


def _unbind(shared: Shared, args: Sequence[str]) -> Outcome:
    try:
        mode, rest = _split_mode(args)
        if not rest:
            return Response.failure("unbind: expected <chord>"), False
        spec = BindingSpec.parse(rest[0])
    except ValueError as exc:
        return Response.failure(str(exc)), False
    return _send(shared, Unbind(spec, mode), "unbind queued")


def _mode(shared: Shared, args: Sequence[str]) -> Outcome:
    if not args:
        return Response.failure("mode: expected <name|exit>"), False
    target = args[0]
    action: Action = ExitMode() if target == "exit" else EnterMode(target)
    return _send(shared, action, "mode queued")


def _tag(shared: Shared, args: Sequence[str]) -> Outcome:
    try:
        action = parse_action(["tag", *args])
    except ValueError as exc:
        return Response.failure(str(exc)), False
    return _send(shared, action, "tag queued")


def dispatch(request: Request, shared: Shared) -> Outcome:
    """Handle one request; return the response and whether state changed."""
    cmd, args = request.command, request.args
    if cmd in LAYOUT_KEYS:
        return _apply(shared, cmd, args)
    handlers: dict[str, Callable[[], Outcome]] = {
        "set": lambda: _set(shared, args),
        "get": lambda: _get(shared, args),
        "status": lambda: (Response.success(shared.status_line()), False),
        "close": lambda: _send(shared, Close(), "close queued"),
        "toggle-float": lambda: _send(shared, ToggleFloat(), "toggle-float queued"),
        "focus": lambda: _directional(shared, args, "focus", FocusDirection),
        "swap": lambda: _directional(shared, args, "swap", SwapDirection),
        "spawn": lambda: _spawn(shared, args),
        "bind": lambda: _bind(shared, args),
        "unbind": lambda: _unbind(shared, args),
        "mode": lambda: _mode(shared, args),
        "tag": lambda: _tag(shared, args),
        "ping": lambda: (Response.success("pong"), False),
        "version": lambda: (Response.success(VERSION), False),
    }
    handler = handlers.get(cmd)
    if handler is None:
        return Response.failure(f"unknown command: {cmd}"), False
    return handler()


def handle_client(
    conn: socket.socket, shared: Shared, notifier: Notifier | None
) -> None:
    """Read one request line from ``conn`` and write back one response line."""
    with conn.makefile("rb") as reader:
        raw = reader.readline()
    if not raw:
        return
    line = raw.decode("utf-8").rstrip("\r\n")
    try:
        response, changed = dispatch(Request.parse(line), shared)
    except ParseError as exc:
        response, changed = Response.failure(str(exc)), False
    if changed and notifier is not None:
        notifier()
    conn.sendall(response.encode().encode("utf-8"))


def _probe(path: Path) -> bool:
    """Return True if something is listening on ``path``."""
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
        sock.settimeout(_CLIENT_TIMEOUT)
        try:
            sock.connect(os.fspath(path))
        except OSError:
            return False
    return True


class Server:
    """Accept loop for the control socket, run on a background thread."""

    def __init__(
        self,
        path: str | os.PathLike[str],
        shared: Shared,
        notifier: Notifier | None = None,
    ) -> None:
        self.socket_path = Path(path)
        self.shared = shared
        self.notifier = notifier
        self._listener: socket.socket | None = None
        self._thread: threading.Thread | None = None
        self._stop = threading.Event()

    @classmethod
    def with_default_path(
        cls, shared: Shared, notifier: Notifier | None = None
    ) -> Server:
        """Create a server bound to the resolved default socket path."""
        return cls(socket_path(), shared, notifier)

    def start(self) -> Server:
        """Bind the socket and start serving.

        Raises OSError (EADDRINUSE) if another daemon already answers on
        the path; a stale socket file is removed first.
        """
        path = self.socket_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError:
            pass
        if path.exists():
            if _probe(path):
                raise OSError(
                    errno.EADDRINUSE,
                    f"another gharial daemon is listening on {path}",
                )
            path.unlink(missing_ok=True)

        listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            listener.bind(os.fspath(path))
            os.chmod(path, 0o600)
            listener.listen()
            listener.settimeout(_ACCEPT_POLL)
        except BaseException:
            listener.close()
            raise
        self._listener = listener
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._serve, name="gharial-ipc", daemon=True
        )
        self._thread.start()
        return self

    def _serve(self) -> None:
        listener = self._listener
        assert listener is not None
        while not self._stop.is_set():
            try:
                conn, _ = listener.accept()
            except TimeoutError:
                continue
            except OSError as exc:
                if self._stop.is_set():
                    break
                print(f"gharial: ipc accept error: {exc}", file=sys.stderr)
                time.sleep(_ACCEPT_RETRY_DELAY)
                continue
            with conn:
                conn.settimeout(_CLIENT_TIMEOUT)
                try:
                    handle_client(conn, self.shared, self.notifier)
                except (OSError, UnicodeDecodeError) as exc:
                    print(f"gharial: ipc client error: {exc}", file=sys.stderr)

    def close(self) -> None:
        """Stop serving and remove the socket file."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        if self._listener is not None:
            self._listener.close()
            self._listener = None
            self.socket_path.unlink(missing_ok=True)

    def __enter__(self) -> Server:
        if self._listener is None:
            self.start()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()