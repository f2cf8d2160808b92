"""Line-based request/response protocol spoken over the gharial control socket.

Wire format: one newline-terminated request line, answered by one
newline-terminated response line. Request tokens are whitespace-separated;
double-quoted tokens support ``\\"``, ``\\\\``, ``\\n`` and ``\\t`` escapes.
"""

from __future__ import annotations

import os
import re
import socket
from dataclasses import dataclass, field
from pathlib import Path

SOCKET_ENV = "GHARIAL_SOCKET"
SOCKET_BASENAME = "gharial"

_SPACE = re.compile(r"\s*")
_QUOTED = re.compile(r'"((?:[^"\\]|\\.)*)"', re.S)
_BARE = re.compile(r"\S+")
_ESCAPE = re.compile(r"\\(.)", re.S)
_NEEDS_QUOTE = frozenset(' \t"\\\n')

_QUOTED_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t"}
_BODY_ESCAPES = {"n": "\n", "r": "\r", "\\": "\\"}


class ParseError(ValueError):
    """A request or response line could not be parsed."""


def socket_path() -> Path:
    """Resolve the control socket path.

    Precedence: ``$GHARIAL_SOCKET``; then
    ``$XDG_RUNTIME_DIR/gharial-<WAYLAND_DISPLAY>.sock`` (or
    ``gharial.sock`` without a display); then ``/tmp/gharial-<user>.sock``.
    """
    explicit = os.environ.get(SOCKET_ENV)
    if explicit is not None:
        return Path(explicit)
    display = os.environ.get("WAYLAND_DISPLAY")
    if display:
        basename = f"{SOCKET_BASENAME}-{display}.sock"
    else:
        basename = f"{SOCKET_BASENAME}.sock"
    runtime_dir = os.environ.get("XDG_RUNTIME_DIR")
    if runtime_dir is not None:
        return Path(runtime_dir) / basename
    user = os.environ.get("USER", "default")
    return Path(f"/tmp/{SOCKET_BASENAME}-{user}.sock")


def _push_token(token: str) -> str:
    if token and not any(c in _NEEDS_QUOTE for c in token):
        return token
    escaped = token.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def _unescape_quoted(text: str) -> str:
    return _ESCAPE.sub(
        lambda m: _QUOTED_ESCAPES.get(m.group(1), "\\" + m.group(1)), text
    )


def _unescape_body(text: str) -> str:
    return _ESCAPE.sub(lambda m: _BODY_ESCAPES.get(m.group(1), "\\" + m.group(1)), text)


def _tokenize(line: str) -> list[str]:
    tokens: list[str] = []
    pos = _SPACE.match(line).end()
    while pos < len(line):
        if line[pos] == '"':
            match = _QUOTED.match(line, pos)
            if match is None:
                raise ParseError("unterminated quoted string")
            tokens.append(_unescape_quoted(match.group(1)))
        else:
            match = _BARE.match(line, pos)
            tokens.append(match.group())
        pos = _SPACE.match(line, match.end()).end()
    return tokens


@dataclass
class Request:
    """A command with its arguments."""

    command: str
    args: list[str] = field(default_factory=list)

    def encode(self) -> str:
        """Encode as a single line including the trailing newline."""
        parts = [self.command, *(_push_token(arg) for arg in self.args)]
        return " ".join(parts) + "\n"

    @classmethod
    def parse(cls, line: str) -> Request:
        """Parse a line (without trailing newline)."""
        tokens = _tokenize(line)
        if not tokens:
            raise ParseError("empty request")
        command, *args = tokens
        return cls(command, args)


@dataclass
class Response:
    """A success or failure reply carrying a text body."""

    ok: bool
    body: str = ""

    @classmethod
    def success(cls, body: str = "") -> Response:
        return cls(True, body)

    @classmethod
    def failure(cls, body: str = "") -> Response:
        return cls(False, body)

    def encode(self) -> str:
        """Encode as one line; newlines in the body are escaped."""
        tag = "ok" if self.ok else "err"
        if not self.body:
            return tag + "\n"
        body = self.body.replace("\n", "\\n").replace("\r", "\\r")
        return f"{tag} {body}\n"

    @classmethod
    def parse(cls, line: str) -> Response:
        """Parse a response line; a trailing newline is tolerated."""
        line = line.rstrip("\r\n")
        tag, _, rest = line.partition(" ")
        body = _unescape_body(rest)
        if tag == "ok":
            return cls(True, body)
        if tag == "err":
            return cls(False, body)
        raise ParseError(f"unknown response tag: {tag}")


def send_one(path: str | os.PathLike[str], request: Request) -> Response:
    """Send one request to the daemon at ``path`` and read one response."""
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
        sock.connect(os.fspath(path))
        sock.sendall(request.encode().encode("utf-8"))
        with sock.makefile("rb") as reader:
            raw = reader.readline()
    if not raw:
        raise ConnectionError("no response")
    return Response.parse(raw.decode("utf-8"))