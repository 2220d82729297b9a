"""
Unit tests for color_core.py - Functional Core

Tests normalization of channel sequences, hex strings and hsl() strings
into canonical RGBA byte tuples.
"""

import pytest
import numpy as np

from raster_types import ColorKind, InvalidColor, ParsedColor
from color_core import (
    clamp_channel,
    hsl_to_rgb,
    parse_color,
    to_color,
    color_to_hex,
)


# ============================================================================
# Channel Sequences
# ============================================================================

class TestChannelColors:
    """Tests for [r, g, b] / [r, g, b, a] input"""

    @pytest.mark.parametrize("rgb", [[0, 0, 0], [255, 255, 255], [12, 200, 99], [1, 2, 3]])
    def test_three_channels_get_opaque_alpha(self, rgb):
        """3-element sequences normalize with alpha 255"""
        assert to_color(rgb) == (*rgb, 255)

    def test_four_channels_preserved(self):
        """Explicit alpha is kept"""
        assert to_color([10, 20, 30, 40]) == (10, 20, 30, 40)

    def test_tuple_and_numpy_input(self):
        """Tuples and numpy arrays are accepted like lists"""
        assert to_color((1, 2, 3)) == (1, 2, 3, 255)
        assert to_color(np.array([4, 5, 6, 7], dtype=np.uint8)) == (4, 5, 6, 7)

    def test_out_of_range_values_saturate(self):
        """Values outside [0, 255] clamp"""
        assert to_color([300, -5, 128, 1000]) == (255, 0, 128, 255)

    def test_fractional_values_round(self):
        """Fractional channels round to nearest, ties to even"""
        assert to_color([12.5, 13.5, 0.4, 254.6]) == (12, 14, 0, 255)

    def test_result_is_plain_ints(self):
        """Normalized channels are Python ints"""
        color = to_color(np.array([1.0, 2.0, 3.0]))
        assert all(type(c) is int for c in color)

    @pytest.mark.parametrize("value", [
        [1, 2],
        [1, 2, 3, 4, 5],
        [],
        ['a', 1, 2],
        [None, 0, 0],
        [True, 0, 0],
        [float('nan'), 0, 0],
    ])
    def test_invalid_sequences(self, value):
        """Wrong length or non-numeric channels fail"""
        with pytest.raises(InvalidColor):
            to_color(value)

    @pytest.mark.parametrize("value", [None, 42, 3.5, {'r': 1}, b'#FFFFFF'])
    def test_unsupported_types(self, value):
        """Anything that is not a sequence or string fails"""
        with pytest.raises(InvalidColor):
            to_color(value)


# ============================================================================
# Hex Strings
# ============================================================================

class TestHexColors:
    """Tests for #RRGGBB / #RRGGBBAA input"""

    def test_six_digits_opaque(self):
        """#RRGGBB has alpha 255"""
        assert to_color('#FF8000') == (255, 128, 0, 255)

    def test_eight_digits_alpha(self):
        """#RRGGBBAA keeps the alpha byte"""
        assert to_color('#FF800080') == (255, 128, 0, 128)
        assert to_color('#00000000') == (0, 0, 0, 0)

    def test_lowercase(self):
        """Hex digits are case-insensitive"""
        assert to_color('#abcdef') == (171, 205, 239, 255)

    @pytest.mark.parametrize("value", [
        '#FFF',
        '#FF00000',
        '#FF0000FF00',
        '#GG0000',
        '# FF000',
        'FF0000',
        '#',
        '#FFFFFF\n',
        '#FF000080\n',
        ' #FFFFFF',
    ])
    def test_malformed_hex(self, value):
        """Wrong length or non-hex digits fail"""
        with pytest.raises(InvalidColor):
            to_color(value)


# ============================================================================
# HSL Strings
# ============================================================================

class TestHslColors:
    """Tests for hsl(h, s, l) input"""

    def test_primary_hues(self):
        """Hue 0/120/240 at full saturation and half lightness are pure RGB"""
        assert to_color('hsl(0, 100, 50)') == (255, 0, 0, 255)
        assert to_color('hsl(120, 100, 50)') == (0, 255, 0, 255)
        assert to_color('hsl(240, 100, 50)') == (0, 0, 255, 255)

    def test_secondary_hues(self):
        """Hue 60/180/300 mix two primaries"""
        assert to_color('hsl(60, 100, 50)') == (255, 255, 0, 255)
        assert to_color('hsl(180, 100, 50)') == (0, 255, 255, 255)
        assert to_color('hsl(300, 100, 50)') == (255, 0, 255, 255)

    def test_no_spaces(self):
        """hsl(H,S,L) without spaces is accepted"""
        assert to_color('hsl(120,100,50)') == (0, 255, 0, 255)

    def test_lightness_extremes(self):
        """Lightness 0 is black and 100 is white regardless of hue"""
        assert to_color('hsl(200, 100, 0)') == (0, 0, 0, 255)
        assert to_color('hsl(200, 100, 100)') == (255, 255, 255, 255)

    def test_zero_saturation_is_gray(self):
        """No saturation gives equal channels"""
        r, g, b, a = to_color('hsl(45, 0, 50)')
        assert r == g == b == 128

    def test_hue_wraps(self):
        """Hue 360 is the same as hue 0"""
        assert to_color('hsl(360, 100, 50)') == to_color('hsl(0, 100, 50)')

    def test_hsl_to_rgb_intermediate(self):
        """Intermediate hue uses the X component"""
        assert hsl_to_rgb(30, 100, 50) == (255, 128, 0)
        assert hsl_to_rgb(210, 50, 40) == (51, 102, 153)

    @pytest.mark.parametrize("value", [
        'hsl(-10, 100, 50)',
        'hsl(10, 101, 50)',
        'hsl(10, 50, 120)',
        'hsl(1.5, 10, 10)',
        'hsl(10, 10)',
        'hsl(10, 10, 10',
        'hsla(0, 0, 0, 1)',
        'rgb(1, 2, 3)',
        '',
        'hsl(0, 100, 50)\n',
        'hsl(0, 100, 50) ',
    ])
    def test_malformed_hsl(self, value):
        """Malformed or out-of-range hsl strings fail"""
        with pytest.raises(InvalidColor):
            to_color(value)


# ============================================================================
# Tagged Parsing & Helpers
# ============================================================================

class TestParseColor:
    """Tests for the tagged ParsedColor variant"""

    def test_kinds(self):
        """Each representation is tagged with its kind"""
        assert parse_color([1, 2, 3]).kind is ColorKind.CHANNELS
        assert parse_color('#010203').kind is ColorKind.HEX
        assert parse_color('hsl(0, 0, 0)').kind is ColorKind.HSL

    def test_parsed_color_passes_through(self):
        """An already parsed color is returned as-is"""
        parsed = ParsedColor(ColorKind.HEX, (1, 2, 3, 4))
        assert parse_color(parsed) is parsed
        assert to_color(parsed) == (1, 2, 3, 4)

    def test_invalid_color_is_value_error(self):
        """InvalidColor can be caught as ValueError"""
        with pytest.raises(ValueError):
            to_color('not a color')


class TestHelpers:
    """Tests for channel and formatting helpers"""

    def test_clamp_channel(self):
        """Clamp saturates then rounds"""
        assert clamp_channel(-1) == 0
        assert clamp_channel(256) == 255
        assert clamp_channel(63.75) == 64
        assert clamp_channel(127.5) == 128

    def test_color_to_hex(self):
        """Colors render as uppercase #RRGGBBAA"""
        assert color_to_hex([255, 128, 0]) == '#FF8000FF'
        assert color_to_hex('hsl(240, 100, 50)') == '#0000FFFF'
        assert color_to_hex('#ab12cd34') == '#AB12CD34'


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
