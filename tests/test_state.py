import pytest

from gharial.action import Direction, FocusDirection
from gharial.layout import Orientation, Params
from gharial.state import (
    Applied,
    BorderConfig,
    CommandError,
    Shared,
    format_color,
    parse_color,
    premultiply_straight,
)


def test_set_main_ratio_absolute():
    s = Shared(Params())
    res = s.apply("main-ratio", ["0.7"])
    assert s.snapshot().main_ratio == pytest.approx(0.7)
    assert res.changed


def test_relative_increment_and_decrement():
    s = Shared(Params(main_ratio=0.5))
    s.apply("main-ratio", ["+0.1"])
    assert abs(s.snapshot().main_ratio - 0.6) < 1e-5
    s.apply("main-ratio", ["-0.2"])
    assert abs(s.snapshot().main_ratio - 0.4) < 1e-5


def test_ratio_is_clamped():
    s = Shared(Params())
    s.apply("main-ratio", ["10"])
    assert s.snapshot().main_ratio <= 0.95
    s.apply("main-ratio", ["-100"])
    assert s.snapshot().main_ratio >= 0.05


def test_main_count_saturates_at_one():
    s = Shared(Params(main_count=1))
    s.apply("main-count", ["-5"])
    assert s.snapshot().main_count == 1


def test_smart_gaps_toggle():
    s = Shared(Params(smart_gaps=True))
    s.apply("smart-gaps", ["toggle"])
    assert s.snapshot().smart_gaps is False
    s.apply("smart-gaps", ["toggle"])
    assert s.snapshot().smart_gaps is True


def test_unknown_command_is_rejected():
    s = Shared(Params())
    with pytest.raises(CommandError, match="unknown command"):
        s.apply("frobnicate", ["x"])


def test_status_line_round_format():
    line = Shared(Params()).status_line()
    for key in ["main-ratio=", "main-count=", "gaps=", "outer-padding=",
                "orientation=", "smart-gaps="]:
        assert key in line


def test_status_line_default_values():
    line = Shared(Params()).status_line()
    assert line.startswith(
        "main-ratio=0.5500;main-count=1;gaps=8;outer-padding=8;"
        "orientation=left;smart-gaps=true;border-width=3;"
    )


def test_dirty_flag_only_trips_on_real_change():
    s = Shared(Params(gaps=8))
    s.take_dirty()
    r = s.apply("gaps", ["8"])
    assert not r.changed
    assert not s.take_dirty()

    r = s.apply("gaps", ["12"])
    assert r.changed
    assert s.take_dirty()
    assert not s.take_dirty()


def test_send_action_errors_before_sender_is_installed():
    s = Shared(Params())
    with pytest.raises(CommandError, match="not ready"):
        s.send_action(FocusDirection(Direction.NEXT))


def test_send_action_forwards_to_sender():
    s = Shared(Params())
    received = []
    s.set_action_sender(received.append)
    s.send_action(FocusDirection(Direction.PREV))
    assert received == [FocusDirection(Direction.PREV)]


def test_send_action_wraps_sender_failure():
    def refuse(_action):
        raise RuntimeError("closed")

    s = Shared(Params())
    s.set_action_sender(refuse)
    with pytest.raises(CommandError, match="not accepting actions: closed"):
        s.send_action(FocusDirection(Direction.NEXT))


def test_border_width_roundtrip():
    s = Shared(Params())
    s.take_dirty()
    r = s.apply("border-width", ["6"])
    assert r.changed
    assert s.take_dirty()
    assert s.get("border-width") == "6"


def test_border_color_premultiplied_at_zero_and_full_alpha():
    s = Shared(Params())
    s.apply("border-color-focused", ["0x80808000"])
    printed = s.get("border-color-focused")
    assert printed.endswith("00")

    s.apply("border-color-focused", ["0xFFFFFFFF"])
    assert s.get("border-color-focused") == "0xFFFFFFFF"


def test_border_color_rejects_malformed_input():
    s = Shared(Params())
    with pytest.raises(CommandError):
        s.apply("border-color-focused", ["red"])
    with pytest.raises(CommandError, match="non-hex"):
        s.apply("border-color-focused", ["0xZZAA00FF"])
    with pytest.raises(CommandError, match="8 hex digits"):
        s.apply("border-color-focused", ["0xABCDEF"])


def test_status_line_includes_borders():
    line = Shared(Params()).status_line()
    for key in ["border-width=", "border-color-focused=", "border-color-unfocused="]:
        assert key in line


def test_border_width_zero_clears_borders():
    s = Shared(Params())
    s.apply("border-width", ["0"])
    assert s.get("border-width") == "0"
    assert s.borders().width == 0


def test_border_color_accepts_hash_prefix():
    s = Shared(Params())
    s.apply("border-color-focused", ["#80808080"])
    assert s.get("border-color-focused").startswith("0x")


def test_user_config_colors_round_trip():
    s = Shared(Params())
    s.apply("border-color-focused", ["0xC8324BFF"])
    assert s.get("border-color-focused") == "0xC8324BFF"
    s.apply("border-color-unfocused", ["0x00C896FF"])
    assert s.get("border-color-unfocused") == "0x00C896FF"


def test_default_border_colors():
    s = Shared(Params())
    assert s.get("border-color-focused") == "0xC8324BFF"
    assert s.get("border-color-unfocused") == "0x00C896FF"
    assert BorderConfig().width == 3


def test_premultiply_full_byte_spans_full_range():
    assert premultiply_straight(0xFF, 0xFF, 0xFF, 0xFF) == (0xFFFFFFFF,) * 4


def test_premultiply_zero_alpha_zeroes_colours():
    assert premultiply_straight(0x80, 0x40, 0x20, 0) == (0, 0, 0, 0)


def test_format_parse_round_trip():
    assert format_color(parse_color("#00C896FF")) == "0x00C896FF"


def test_get_unknown_key_errors():
    with pytest.raises(CommandError, match="unknown key: nope"):
        Shared(Params()).get("nope")


def test_orientation_and_summary():
    s = Shared(Params())
    applied = s.apply("orientation", ["top"])
    assert applied == Applied("orientation=top", True)
    assert s.snapshot().orientation is Orientation.TOP
    with pytest.raises(CommandError, match="invalid orientation"):
        s.apply("orientation", ["diagonal"])


def test_missing_value_and_invalid_numbers():
    s = Shared(Params())
    with pytest.raises(CommandError, match="gaps: missing value"):
        s.apply("gaps", [])
    with pytest.raises(CommandError, match="invalid integer"):
        s.apply("gaps", ["abc"])
    with pytest.raises(CommandError, match="invalid number"):
        s.apply("main-ratio", ["wide"])
    with pytest.raises(CommandError, match="invalid boolean"):
        s.apply("smart-gaps", ["maybe"])


def test_gaps_subtraction_saturates_at_zero():
    s = Shared(Params(gaps=3))
    assert s.apply("gaps", ["-10"]).summary == "gaps=0"
    assert s.get("gaps") == "0"


def test_snapshot_is_a_copy():
    s = Shared(Params())
    snap = s.snapshot()
    snap.gaps = 99
    assert s.get("gaps") == "8"