"""Tests for colour conversion in models/color.py"""

import pytest

from core.errors import FormatError
from models.color import (
    hex_from_rgb,
    luminance,
    parse_hex,
    rgb_from_xy,
    xy_from_hex,
    xy_from_rgb,
)
from models.gamut import DEFAULT_GAMUT


class TestRoundTrip:
    """RGB -> xy -> RGB for colours the default gamut can reproduce."""

    @pytest.mark.parametrize('rgb', [
        (200, 120, 80),
        (100, 150, 200),
        (128, 128, 128),
        (180, 60, 90),
        (60, 180, 90),
        (255, 200, 150),
        (10, 20, 30),
    ])
    def test_in_gamut_colours(self, rgb):
        """Each channel comes back within one step when the luminance is kept."""
        x, y = xy_from_rgb(DEFAULT_GAMUT, *rgb)
        result = rgb_from_xy(DEFAULT_GAMUT, luminance(*rgb), x, y)
        for got, expected in zip(result, rgb):
            assert abs(got - expected) <= 1

    def test_white_at_full_level(self):
        x, y = xy_from_rgb(DEFAULT_GAMUT, 255, 255, 255)
        for channel in rgb_from_xy(DEFAULT_GAMUT, 1.0, x, y):
            assert channel >= 254

    def test_red_stays_red(self):
        """Pure red lies outside the gamut but comes back red dominant."""
        # sRGB primaries are clipped onto the gamut edge, so no exact round trip
        x, y = xy_from_rgb(DEFAULT_GAMUT, 255, 0, 0)
        r, g, b = rgb_from_xy(DEFAULT_GAMUT, 1.0, x, y)
        assert r == 255
        assert g < 64
        assert b == 0

    def test_overshoot_is_normalised(self):
        """Full level on a saturated colour scales the brightest channel to 255."""
        x, y = xy_from_rgb(DEFAULT_GAMUT, 255, 200, 150)
        r, g, b = rgb_from_xy(DEFAULT_GAMUT, 1.0, x, y)
        assert r == 255
        assert 195 <= g <= 205
        assert 145 <= b <= 155


class TestXyFromRgb:
    """Tests for RGB to xy conversion."""

    def test_primaries_are_corrected(self):
        """Out of gamut primaries land on the triangle's boundary."""
        x, y = xy_from_rgb(DEFAULT_GAMUT, 255, 0, 0)
        assert x == pytest.approx(0.692, abs=0.005)
        assert y == pytest.approx(0.308, abs=0.005)

    def test_black_maps_to_corrected_origin(self):
        assert xy_from_rgb(DEFAULT_GAMUT, 0, 0, 0) == DEFAULT_GAMUT.correct(0.0, 0.0)

    def test_white_near_d65(self):
        x, y = xy_from_rgb(DEFAULT_GAMUT, 255, 255, 255)
        assert x == pytest.approx(0.3227, abs=0.01)
        assert y == pytest.approx(0.329, abs=0.01)

    @pytest.mark.parametrize('rgb', [(256, 0, 0), (0, -1, 0), (0, 0, 300)])
    def test_channel_out_of_range(self, rgb):
        with pytest.raises(ValueError):
            xy_from_rgb(DEFAULT_GAMUT, *rgb)


class TestLuminance:
    """Tests for the Y component helper."""

    def test_black_and_white(self):
        assert luminance(0, 0, 0) == 0
        assert luminance(255, 255, 255) == pytest.approx(1.0, abs=0.001)

    def test_green_brighter_than_blue(self):
        assert luminance(0, 255, 0) > luminance(0, 0, 255)


class TestHex:
    """Tests for hex web colours."""

    def test_accepted_forms_are_equal(self):
        """With or without '#', upper or lower case."""
        assert parse_hex('#FF8000') == parse_hex('FF8000') == parse_hex('ff8000') == (255, 128, 0)

    @pytest.mark.parametrize('value', ['FF80', '#FF80000', 'GG8000', '', '##FF8000', 'FF8000\n', None])
    def test_invalid_values(self, value):
        with pytest.raises(FormatError):
            parse_hex(value)

    def test_format_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_hex('nope')

    def test_xy_from_hex_matches_rgb(self):
        assert xy_from_hex(DEFAULT_GAMUT, '#C87850') == xy_from_rgb(DEFAULT_GAMUT, 200, 120, 80)

    def test_hex_from_rgb(self):
        assert hex_from_rgb(255, 128, 0) == '#FF8000'
        assert hex_from_rgb(0, 0, 0) == '#000000'
