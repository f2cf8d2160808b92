import pytest

from gharial.tags import DEFAULT_MODE, Modes, Tags, tag_mask


def test_tag_mask_is_one_indexed():
    assert tag_mask(1) == 0x0000_0001
    assert tag_mask(2) == 0x0000_0002
    assert tag_mask(9) == 0x0000_0100
    assert tag_mask(32) == 0x8000_0000


def test_tag_mask_rejects_out_of_range():
    with pytest.raises(ValueError):
        tag_mask(0)
    with pytest.raises(ValueError):
        tag_mask(33)


def test_default_tags_show_tag_one():
    assert Tags().active == 0x1


def test_default_mode_is_default():
    assert Modes().active == DEFAULT_MODE == "default"