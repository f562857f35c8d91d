"""
Color string parsing

Accepts "#RGB", "#RRGGBB" and "rgba(R, G, B, A)".
"""

import re
from typing import NamedTuple

from ..errors import ColorParseError

_HEX_DIGITS = re.compile(r"^[0-9a-fA-F]+$")
_RGBA = re.compile(r"^rgba\((\d+), (\d+), (\d+), (\d+)\)")


class RGBA(NamedTuple):
    r: int
    g: int
    b: int
    a: int = 255


def parse_hex_color(hex_color: str) -> RGBA:
    """Parse "#RRGGBB" or "#RGB" (each digit doubled); alpha is always 255"""
    if not hex_color or hex_color[0] != "#":
        raise ColorParseError(f"invalid color string '{hex_color}'")

    digits = hex_color[1:]

    if len(digits) not in (3, 6):
        raise ColorParseError(f"invalid hex color length in '{hex_color}' (must be 6 or 3)")
    if not _HEX_DIGITS.match(digits):
        raise ColorParseError(f"invalid hex digits in '{hex_color}'")

    if len(digits) == 3:
        r, g, b = (int(d, 16) * 17 for d in digits)
    else:
        r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))

    return RGBA(r, g, b, 255)


def parse_rgba_color(rgba_color: str) -> RGBA:
    """Parse "rgba(R, G, B, A)" with integer channels 0-255"""
    match = _RGBA.match(rgba_color or "")
    if not match:
        raise ColorParseError(f"invalid string color '{rgba_color}'")

    channels = [int(c) for c in match.groups()]
    if any(c > 255 for c in channels):
        raise ColorParseError(f"color channel out of range in '{rgba_color}'")

    return RGBA(*channels)


def parse_color(color: str) -> RGBA:
    if color and color[0] == "#":
        return parse_hex_color(color)
    return parse_rgba_color(color)
