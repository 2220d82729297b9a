"""
Raster Data Types - Shared Contract

Defines the data contract shared by the color model, the pixel buffer,
the drawing engine and the export shell.

Type Hierarchy:
    ColorInput (anything a caller may pass) → ParsedColor (validated, tagged)
    ParsedColor.rgba → Color (canonical 4-byte tuple stored in the buffer)
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Sequence, Union


# ============================================================================
# Type Aliases
# ============================================================================

# Canonical in-memory color: (R, G, B, A), each 0-255
Color = Tuple[int, int, int, int]

# (x, y), may be fractional until the moment a pixel is written
Point = Tuple[float, float]

Triangle = Tuple[Point, Point, Point]

# Surface representations accepted at the API boundary:
# [r, g, b], [r, g, b, a], '#RRGGBB', '#RRGGBBAA', 'hsl(h, s, l)'
ColorInput = Union[Sequence[float], str, 'ParsedColor']


# ============================================================================
# Export Defaults
# ============================================================================

DEFAULT_FFMPEG_PATH = 'ffmpeg'
DEFAULT_CODEC = 'png'
SUPPORTED_CODECS = ('png', 'mjpeg', 'libwebp')

BYTES_PER_PIXEL = 4


# ============================================================================
# Errors
# ============================================================================

class RasterError(Exception):
    """Base class for errors raised by the raster core"""


class InvalidColor(RasterError, ValueError):
    """Color value is not a 3/4 channel sequence, #hex or hsl() string"""


class InvalidInput(RasterError, ValueError):
    """Shape or buffer arguments are malformed (e.g. too few points)"""


# ============================================================================
# Tagged Color Variant
# ============================================================================

class ColorKind(Enum):
    """Which surface representation a color was parsed from"""
    CHANNELS = 'channels'
    HEX = 'hex'
    HSL = 'hsl'


@dataclass(frozen=True)
class ParsedColor:
    """Validated color with the representation it came from

    Produced once at the API boundary by color_core.parse_color(); code
    downstream only reads `rgba` and never re-validates.

    Attributes:
        kind: Source representation
        rgba: Canonical (R, G, B, A) byte tuple
    """
    kind: ColorKind
    rgba: Color


# ============================================================================
# Rounding
# ============================================================================

def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 always rounding towards +infinity

    Pixel coordinates and blended channels use this rule so that e.g. 2.5
    lands on pixel 3 and -0.5 on pixel 0 (Python's round() would give 2 and 0
    by rounding half to even).

    Examples:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(-2.5)
        -2
    """
    return int(math.floor(value + 0.5))


def round_point(point: Sequence[float]) -> Tuple[int, int]:
    """Round an (x, y) pair to integer pixel coordinates

    Raises:
        InvalidInput: If point is not a pair of numbers
    """
    try:
        x, y = point
        return (round_half_up(x), round_half_up(y))
    except (TypeError, ValueError, OverflowError):
        raise InvalidInput(f"Point must be an (x, y) pair of numbers, got {point!r}")
