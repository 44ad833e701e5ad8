"""Colour conversion between RGB, hex web colours and CIE 1931 xy.

All functions are stateless. Results are corrected into the supplied gamut, so
the xy values returned can always be displayed by the device they were
computed for.
"""

import re

from core.errors import FormatError
from models.gamut import Gamut, Point

# Wide gamut RGB D65 conversion matrices
RGB_TO_XYZ = (
    (0.664511, 0.154324, 0.162028),
    (0.283881, 0.668433, 0.047685),
    (0.000088, 0.072310, 0.986039),
)
XYZ_TO_RGB = (
    (1.656492, -0.354851, -0.255038),
    (-0.707196, 1.655397, 0.036152),
    (0.051713, -0.121364, 1.011530),
)

HEX_PATTERN = re.compile(r'#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})')


def _to_linear(c: float) -> float:
    if c > 0.04045:
        return ((c + 0.055) / 1.055) ** 2.4
    return c / 12.92


def _from_linear(c: float) -> float:
    if c <= 0.0031308:
        return 12.92 * c
    return 1.055 * c ** (1.0 / 2.4) - 0.055


def _linear_rgb(red: int, green: int, blue: int) -> tuple[float, float, float]:
    for channel in (red, green, blue):
        if not 0 <= channel <= 255:
            raise ValueError(f"RGB channel {channel} is outside 0-255")
    return _to_linear(red / 255.0), _to_linear(green / 255.0), _to_linear(blue / 255.0)


def _xyz(r: float, g: float, b: float) -> tuple[float, float, float]:
    return tuple(row[0] * r + row[1] * g + row[2] * b for row in RGB_TO_XYZ)


def luminance(red: int, green: int, blue: int) -> float:
    """Return the Y (luminance) component of an 8-bit RGB colour.

    Passing this value back into rgb_from_xy() keeps the brightness of the
    source colour.
    """
    return _xyz(*_linear_rgb(red, green, blue))[1]


def xy_from_rgb(gamut: Gamut, red: int, green: int, blue: int) -> Point:
    """Convert an 8-bit RGB colour to xy chromaticity inside the gamut.

    Black has no chromaticity; it maps to the gamut-corrected origin.
    """
    x, y, z = _xyz(*_linear_rgb(red, green, blue))
    total = x + y + z
    if total == 0:
        return gamut.correct(0.0, 0.0)
    return gamut.correct(x / total, y / total)


def rgb_from_xy(gamut: Gamut, level: float, x: float, y: float) -> tuple[int, int, int]:
    """Convert an xy chromaticity at luminance `level` back to 8-bit RGB.

    Negative channels are clipped to zero. If any channel overshoots after
    gamma correction, every channel is divided by the largest one so the hue
    is kept and the brightest channel becomes 255.
    """
    x, y = gamut.correct(x, y)
    if y == 0:
        return 0, 0, 0
    cx = (level / y) * x
    cz = (level / y) * (1 - x - y)
    channels = [
        _from_linear(row[0] * cx + row[1] * level + row[2] * cz)
        for row in XYZ_TO_RGB
    ]
    channels = [max(c, 0.0) for c in channels]
    peak = max(channels)
    if peak > 1:
        channels = [c / peak for c in channels]
    r, g, b = (int(round(c * 255)) for c in channels)
    return r, g, b


def parse_hex(value: str) -> tuple[int, int, int]:
    """Parse a 6 digit hex colour, with optional leading '#', into RGB.

    Raises:
        FormatError: if the string is not exactly six hex digits
    """
    match = HEX_PATTERN.fullmatch(value) if isinstance(value, str) else None
    if not match:
        raise FormatError(f'hex value "{value}" is invalid')
    r, g, b = (int(part, 16) for part in match.groups())
    return r, g, b


def xy_from_hex(gamut: Gamut, value: str) -> Point:
    """Convert a hex web colour to xy chromaticity inside the gamut."""
    return xy_from_rgb(gamut, *parse_hex(value))


def hex_from_rgb(red: int, green: int, blue: int) -> str:
    """Format an RGB colour as an upper-case '#RRGGBB' string."""
    return f"#{red:02X}{green:02X}{blue:02X}"
