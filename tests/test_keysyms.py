import pytest

from gharial.keysyms import parse_keysym, parse_modifier


def test_ascii_letters_resolve():
    assert parse_keysym("a") == 0x61
    assert parse_keysym("Q") == 0x71
    assert parse_keysym("z") == 0x7A


def test_ascii_digits_resolve():
    assert parse_keysym("0") == 0x30
    assert parse_keysym("9") == 0x39


def test_named_keys_case_insensitive():
    assert parse_keysym("Return") == 0xFF0D
    assert parse_keysym("enter") == 0xFF0D
    assert parse_keysym("ESCAPE") == 0xFF1B
    assert parse_keysym("Left") == 0xFF51


def test_function_keys():
    assert parse_keysym("F1") == 0xFFBE
    assert parse_keysym("f12") == 0xFFC9
    assert parse_keysym("F20") == 0xFFD1


def test_numpad_keys():
    assert parse_keysym("KP_0") == 0xFFB0
    assert parse_keysym("kp_9") == 0xFFB9
    assert parse_keysym("kp_enter") == 0xFF8D


def test_xf86_media_keys():
    assert parse_keysym("XF86AudioRaiseVolume") == 0x1008FF13
    assert parse_keysym("xf86monbrightnessup") == 0x1008FF02


def test_hex_fallback():
    assert parse_keysym("0xff0d") == 0xFF0D
    assert parse_keysym("0x1008ff13") == 0x1008FF13
    assert parse_keysym("0xnotahex") is None


def test_hex_edge_cases():
    assert parse_keysym("0X41") == 0x41
    assert parse_keysym("0x") is None
    assert parse_keysym("0x100000000") is None


def test_unknown_keysym_is_none():
    assert parse_keysym("PaperJam") is None


def test_modifier_aliases():
    assert parse_modifier("super") == 64
    assert parse_modifier("Super") == 64
    assert parse_modifier("mod4") == 64
    assert parse_modifier("logo") == 64
    assert parse_modifier("ctrl") == 4
    assert parse_modifier("Control") == 4
    assert parse_modifier("alt") == 8
    assert parse_modifier("SHIFT") == 1
    assert parse_modifier("mod5") == 128
    with pytest.raises(ValueError, match="unknown modifier: hyper"):
        parse_modifier("hyper")


def test_printable_punctuation():
    assert parse_keysym(",") == ord(",")
    assert parse_keysym("/") == ord("/")
    assert parse_keysym(";") == ord(";")
    assert parse_keysym(" ") == 0x20