"""
Color Model - Functional Core

Pure functions that turn every accepted color representation into the
canonical (R, G, B, A) byte tuple stored in the pixel buffer.
No side effects: no buffer access, no I/O, no logging.

Accepted inputs:
    [r, g, b] / [r, g, b, a]   numeric sequence, alpha defaults to 255
    '#RRGGBB' / '#RRGGBBAA'    hex string, 8-digit form carries alpha
    'hsl(h, s, l)'             integer hue/saturation/lightness, alpha 255
"""

import numbers
import re
from typing import Any, Tuple

from raster_types import Color, ColorKind, InvalidColor, ParsedColor, round_half_up


_HEX_PATTERN = re.compile(r'^#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{8})\Z')
_HSL_PATTERN = re.compile(r'^hsl\((\d+),\s*(\d+),\s*(\d+)\)\Z', re.ASCII)


# ============================================================================
# Channel Helpers
# ============================================================================

def clamp_channel(value: float) -> int:
    """Saturate a channel value into a byte

    Out-of-range values clamp to [0, 255]; fractional values round to the
    nearest integer with ties to even, the way a clamped byte array stores
    them.

    Examples:
        >>> clamp_channel(300)
        255
        >>> clamp_channel(-4)
        0
        >>> clamp_channel(127.5)
        128
    """
    return int(round(min(255.0, max(0.0, float(value)))))


def _is_channel_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return value == value  # NaN check


def hsl_to_rgb(hue: int, saturation: int, lightness: int) -> Tuple[int, int, int]:
    """Convert HSL to 8-bit RGB using the standard chroma formula

    Args:
        hue: Hue in degrees, [0, 360)
        saturation: Saturation percentage, [0, 100]
        lightness: Lightness percentage, [0, 100]

    Returns:
        (r, g, b) tuple, 0-255 per channel

    Examples:
        >>> hsl_to_rgb(120, 100, 50)
        (0, 255, 0)
    """
    s = saturation / 100
    l = lightness / 100

    c = (1 - abs(2 * l - 1)) * s
    x = c * (1 - abs(((hue / 60) % 2) - 1))
    m = l - c / 2

    if hue < 60:
        r, g, b = c, x, 0.0
    elif hue < 120:
        r, g, b = x, c, 0.0
    elif hue < 180:
        r, g, b = 0.0, c, x
    elif hue < 240:
        r, g, b = 0.0, x, c
    elif hue < 300:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x

    return (
        round_half_up((r + m) * 255),
        round_half_up((g + m) * 255),
        round_half_up((b + m) * 255),
    )


# ============================================================================
# Parsing
# ============================================================================

def _parse_hex(value: str) -> Color:
    if not _HEX_PATTERN.match(value):
        raise InvalidColor(f"Invalid hex color {value!r}, expected #RRGGBB or #RRGGBBAA")

    digits = value[1:]
    r = int(digits[0:2], 16)
    g = int(digits[2:4], 16)
    b = int(digits[4:6], 16)
    a = int(digits[6:8], 16) if len(digits) == 8 else 255
    return (r, g, b, a)


def _parse_hsl(value: str) -> Color:
    match = _HSL_PATTERN.match(value)
    if not match:
        raise InvalidColor(f"Invalid hsl color {value!r}, expected hsl(H, S, L)")

    hue, saturation, lightness = (int(group) for group in match.groups())
    if saturation > 100 or lightness > 100:
        raise InvalidColor(
            f"Saturation and lightness must be in range [0, 100], got {value!r}"
        )

    r, g, b = hsl_to_rgb(hue % 360, saturation, lightness)
    return (r, g, b, 255)


def _parse_channels(value: Any) -> Color:
    try:
        channels = list(value)
    except TypeError:
        raise InvalidColor(f"Unsupported color value {value!r}")

    if len(channels) not in (3, 4):
        raise InvalidColor(f"Color must have 3 or 4 channels, got {len(channels)}")

    if not all(_is_channel_number(c) for c in channels):
        raise InvalidColor(f"Color channels must be numbers, got {value!r}")

    if len(channels) == 3:
        channels.append(255)

    return tuple(clamp_channel(c) for c in channels)


def parse_color(value: Any) -> ParsedColor:
    """Parse any accepted color representation into a tagged, validated color

    Args:
        value: Channel sequence, '#hex' string, 'hsl()' string or ParsedColor

    Returns:
        ParsedColor carrying the canonical RGBA tuple

    Raises:
        InvalidColor: If value is not one of the accepted shapes

    Examples:
        >>> parse_color('#FF000080')
        ParsedColor(kind=<ColorKind.HEX: 'hex'>, rgba=(255, 0, 0, 128))
    """
    if isinstance(value, ParsedColor):
        return value

    if isinstance(value, str):
        if value.startswith('#'):
            return ParsedColor(ColorKind.HEX, _parse_hex(value))
        if value.startswith('hsl('):
            return ParsedColor(ColorKind.HSL, _parse_hsl(value))
        raise InvalidColor(f"Unsupported color string {value!r}")

    if isinstance(value, (bytes, bytearray, dict)):
        raise InvalidColor(f"Unsupported color value {value!r}")

    return ParsedColor(ColorKind.CHANNELS, _parse_channels(value))


def to_color(value: Any) -> Color:
    """Normalize a color to its canonical (R, G, B, A) byte tuple

    Examples:
        >>> to_color([10, 20, 30])
        (10, 20, 30, 255)
        >>> to_color('hsl(0, 100, 50)')
        (255, 0, 0, 255)
    """
    return parse_color(value).rgba


def color_to_hex(color: Any) -> str:
    """Render a color as '#RRGGBBAA' (uppercase)

    Examples:
        >>> color_to_hex([255, 128, 0])
        '#FF8000FF'
    """
    r, g, b, a = to_color(color)
    return f"#{r:02X}{g:02X}{b:02X}{a:02X}"
