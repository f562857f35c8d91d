"""
Tests for color string parsing
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from gis_utils.errors import ColorParseError
from gis_utils.styles import RGBA, parse_color, parse_hex_color, parse_rgba_color


def test_short_hex_doubles_digits():
    assert parse_hex_color("#fff") == (255, 255, 255, 255)
    assert parse_hex_color("#f90") == (255, 153, 0, 255)


def test_long_hex():
    assert parse_hex_color("#1a6499") == RGBA(26, 100, 153, 255)
    assert parse_hex_color("#1A6499") == RGBA(26, 100, 153, 255)


def test_rgba():
    color = parse_rgba_color("rgba(10, 20, 30, 255)")

    assert color == (10, 20, 30, 255)
    assert (color.r, color.g, color.b, color.a) == (10, 20, 30, 255)


def test_rgba_keeps_alpha():
    assert parse_color("rgba(0, 0, 0, 128)").a == 128


def test_parse_color_dispatches_on_hash():
    assert parse_color("#fff") == RGBA(255, 255, 255)
    assert parse_color("rgba(1, 2, 3, 4)") == RGBA(1, 2, 3, 4)


@pytest.mark.parametrize("value", ["#12", "#1234", "#1234567", "#ggg", "fff", ""])
def test_invalid_hex(value):
    with pytest.raises(ColorParseError):
        parse_hex_color(value)


@pytest.mark.parametrize("value", [
    "rgba(1,2,3,4)",
    "rgb(1, 2, 3)",
    "rgba(256, 0, 0, 255)",
    "rgba(-1, 0, 0, 255)",
    "",
])
def test_invalid_rgba(value):
    with pytest.raises(ColorParseError):
        parse_rgba_color(value)


def test_parse_color_rejects_garbage():
    with pytest.raises(ValueError):
        parse_color("blue")
