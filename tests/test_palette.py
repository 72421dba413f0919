"""Tests for services/palette.py."""

import itertools

import pytest

from domain.dtos import BLACK, WHITE, Color
from services.palette import (
    background_for,
    best_text_colors,
    contrast_ratio,
    five_stop_palette,
    lighten,
    text_colors,
)

_LEVELS = (0, 1, 37, 64, 100, 127, 128, 180, 200, 239, 254, 255)
_GRID = [Color(r, g, b) for r, g, b in itertools.product(_LEVELS, repeat=3)]


class TestColor:
    def test_hex_is_normalized_upper_case(self):
        assert Color.from_hex("1e3a8a").hex == "#1E3A8A"
        assert Color.from_hex("#1E3A8A") == Color(30, 58, 138)

    def test_out_of_range_channel_rejected(self):
        with pytest.raises(ValueError):
            Color(256, 0, 0)
        with pytest.raises(ValueError):
            Color(0, -1, 0)

    def test_bad_hex_rejected(self):
        with pytest.raises(ValueError):
            Color.from_hex("#FFF")

    def test_luma(self):
        assert Color(30, 58, 138).luma == pytest.approx(58.748)


class TestChannelBounds:
    def test_all_generated_colors_in_range(self):
        for c in _GRID:
            p = five_stop_palette(c)
            generated = [background_for(c), p.darkest, p.dark, p.medium, p.light, p.lightest,
                         lighten(c, 0.15), lighten(c, 0.3), lighten(c, 0.4), lighten(c, 1.0)]
            for g in generated:
                assert all(0 <= ch <= 255 for ch in g.rgb)


class TestBackground:
    def test_background_lighter_than_primary(self):
        for c in _GRID:
            if c.luma < 240:
                assert background_for(c).luma > c.luma

    def test_tiers(self):
        # dark: c*0.3 + 220
        assert background_for(Color(30, 58, 138)) == Color(229, 237, 255)
        # medium (luma 128): c*0.2 + 230
        assert background_for(Color(128, 128, 128)) == Color(255, 255, 255)
        assert background_for(Color(100, 120, 110)) == Color(250, 254, 252)
        # light: c*0.15 + 240 clamps to white
        assert background_for(Color(200, 200, 200)) == WHITE


class TestFiveStop:
    def test_known_values(self):
        p = five_stop_palette(Color(100, 50, 200))
        assert p.darkest == Color(30, 15, 60)
        assert p.dark == Color(50, 25, 100)
        assert p.medium == Color(120, 85, 190)
        assert p.light == Color(185, 142, 255)
        assert p.lightest == Color(245, 197, 255)

    def test_ordered_dark_to_light(self):
        p = five_stop_palette(Color(30, 58, 138))
        lumas = [p.darkest.luma, p.dark.luma, p.medium.luma, p.light.luma, p.lightest.luma]
        assert lumas == sorted(lumas)


class TestLighten:
    def test_factor_zero_is_identity(self):
        assert lighten(Color(12, 34, 56), 0) == Color(12, 34, 56)

    def test_floor(self):
        assert lighten(Color(0, 100, 255), 0.3) == Color(76, 146, 255)


class TestTextColors:
    def test_light_background_black_text(self):
        pair = text_colors(Color(229, 237, 255))
        assert pair.text_color == BLACK and pair.stroke_color == WHITE

    def test_dark_background_white_text(self):
        pair = text_colors(Color(30, 58, 138))
        assert pair.text_color == WHITE and pair.stroke_color == BLACK

    def test_only_two_pairs(self):
        pairs = {(p.text_color, p.stroke_color) for p in map(text_colors, _GRID)}
        assert pairs <= {(WHITE, BLACK), (BLACK, WHITE)}

    def test_exact_midpoint_gets_black_text(self):
        assert text_colors(Color(128, 128, 128)).text_color == BLACK

    def test_contrast_variant_agrees_on_greys_away_from_boundary(self):
        for v in (0, 20, 60, 90, 200, 230, 255):
            grey = Color(v, v, v)
            assert best_text_colors(grey) == text_colors(grey)

    def test_contrast_ratio_extremes(self):
        assert contrast_ratio(WHITE, BLACK) == pytest.approx(21.0)
        assert contrast_ratio(WHITE, WHITE) == pytest.approx(1.0)
