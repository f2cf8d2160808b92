import socket
import tempfile
import threading
from pathlib import Path

import pytest

from gharial.protocol import (
    ParseError,
    Request,
    Response,
    send_one,
    socket_path,
)


def test_request_roundtrip_simple():
    r = Request("set", ["main-ratio", "0.55"])
    encoded = r.encode()
    assert encoded == "set main-ratio 0.55\n"
    assert Request.parse(encoded.rstrip()) == r


def test_request_roundtrip_quoted():
    r = Request("bind", ["super+q", "spawn rio -e nvim foo"])
    encoded = r.encode()
    assert encoded == 'bind super+q "spawn rio -e nvim foo"\n'
    assert Request.parse(encoded.rstrip()) == r


def test_response_roundtrip():
    r = Response.success("main-ratio=0.5;main-count=1")
    assert Response.parse(r.encode()) == r


def test_response_multiline_body_is_escaped():
    r = Response.success("a\nb")
    s = r.encode()
    assert s.startswith("ok a\\nb")
    assert Response.parse(s) == r


def test_request_escapes_roundtrip():
    r = Request("spawn", ["", 'say "hi"', "back\\slash", "two\nlines", "tab\there"])
    assert Request.parse(r.encode().rstrip("\n")) == r


def test_request_parse_empty_raises():
    with pytest.raises(ParseError, match="empty request"):
        Request.parse("   ")


def test_request_parse_unterminated_quote():
    with pytest.raises(ParseError, match="unterminated"):
        Request.parse('bind "abc')
    with pytest.raises(ParseError, match="unterminated"):
        Request.parse('bind "abc\\')


def test_request_parse_unknown_escape_is_kept():
    assert Request.parse('x "a\\qb"').args == ["a\\qb"]


def test_request_bare_token_may_contain_quote():
    assert Request.parse('x a"b').args == ['a"b']


def test_response_error_and_empty_body():
    assert Response.failure("boom").encode() == "err boom\n"
    assert Response.success().encode() == "ok\n"
    assert Response.parse("err unknown command: x") == Response.failure("unknown command: x")
    assert Response.parse("ok\r\n") == Response.success("")


def test_response_bad_tag():
    with pytest.raises(ParseError, match="unknown response tag: nope"):
        Response.parse("nope body")


def test_socket_path_explicit(monkeypatch):
    monkeypatch.setenv("GHARIAL_SOCKET", "/run/custom.sock")
    assert socket_path() == Path("/run/custom.sock")


def test_socket_path_runtime_dir_with_display(monkeypatch):
    monkeypatch.delenv("GHARIAL_SOCKET", raising=False)
    monkeypatch.setenv("WAYLAND_DISPLAY", "wayland-1")
    monkeypatch.setenv("XDG_RUNTIME_DIR", "/run/user/1000")
    assert socket_path() == Path("/run/user/1000/gharial-wayland-1.sock")


def test_socket_path_runtime_dir_without_display(monkeypatch):
    monkeypatch.delenv("GHARIAL_SOCKET", raising=False)
    monkeypatch.setenv("WAYLAND_DISPLAY", "")
    monkeypatch.setenv("XDG_RUNTIME_DIR", "/run/user/1000")
    assert socket_path() == Path("/run/user/1000/gharial.sock")


def test_socket_path_fallback(monkeypatch):
    monkeypatch.delenv("GHARIAL_SOCKET", raising=False)
    monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
    monkeypatch.delenv("XDG_RUNTIME_DIR", raising=False)
    monkeypatch.setenv("USER", "alice")
    assert socket_path() == Path("/tmp/gharial-alice.sock")
    monkeypatch.delenv("USER")
    assert socket_path() == Path("/tmp/gharial-default.sock")


def _serve_once(path, reply):
    listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    listener.bind(str(path))
    listener.listen(1)
    received = []

    def run():
        conn, _ = listener.accept()
        with conn, conn.makefile("rb") as reader:
            received.append(reader.readline().decode())
            conn.sendall(reply)
        listener.close()

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    return thread, received


def test_send_one_roundtrip():
    with tempfile.TemporaryDirectory(prefix="gh") as tmp:
        path = Path(tmp) / "s.sock"
        thread, received = _serve_once(path, b"ok pong\n")
        resp = send_one(path, Request("ping"))
        thread.join(timeout=2)
    assert resp == Response.success("pong")
    assert received == ["ping\n"]


def test_send_one_no_response():
    with tempfile.TemporaryDirectory(prefix="gh") as tmp:
        path = Path(tmp) / "s.sock"
        thread, _ = _serve_once(path, b"")
        with pytest.raises(ConnectionError, match="no response"):
            send_one(path, Request("ping"))
        thread.join(timeout=2)


def test_send_one_missing_socket():
    with tempfile.TemporaryDirectory(prefix="gh") as tmp:
        with pytest.raises(OSError):
            send_one(Path(tmp) / "missing.sock", Request("ping"))