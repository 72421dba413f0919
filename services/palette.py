"""Palette synthesis from a single seed color.

Everything here is plain 8-bit arithmetic: results are floored and clamped to
[0, 255] so callers never see an out-of-range channel.
"""
from __future__ import annotations

from domain.dtos import BLACK, WHITE, Color, FiveStopPalette, TextColorPair

LIGHT_TIER = 180
MEDIUM_TIER = 100
TEXT_LUMA_THRESHOLD = 128

def _mix(c: Color, keep: float, base: float) -> Color:
    return Color.clamped(c.r * keep + base, c.g * keep + base, c.b * keep + base)

def background_for(primary: Color) -> Color:
    """Light canvas fill derived from ``primary``; always lighter than a non-white input."""
    brightness = primary.luma
    if brightness > LIGHT_TIER:
        return _mix(primary, 0.15, 240)
    if brightness > MEDIUM_TIER:
        return _mix(primary, 0.2, 230)
    return _mix(primary, 0.3, 220)

def five_stop_palette(primary: Color) -> FiveStopPalette:
    return FiveStopPalette(
        darkest=_mix(primary, 0.3, 0),
        dark=_mix(primary, 0.5, 0),
        medium=_mix(primary, 0.7, 50),
        light=_mix(primary, 0.85, 100),
        lightest=_mix(primary, 0.95, 150),
    )

def lighten(c: Color, factor: float) -> Color:
    return Color.clamped(*(ch + (255 - ch) * factor for ch in c.rgb))

def text_colors(background: Color) -> TextColorPair:
    # strict '<': luma exactly 128 gets black text
    if background.luma < TEXT_LUMA_THRESHOLD:
        return TextColorPair(text_color=WHITE, stroke_color=BLACK)
    return TextColorPair(text_color=BLACK, stroke_color=WHITE)

def relative_luminance(c: Color) -> float:
    def lin(ch: int) -> float:
        v = ch / 255
        return v / 12.92 if v <= 0.03928 else ((v + 0.055) / 1.055) ** 2.4
    r, g, b = (lin(ch) for ch in c.rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b

def contrast_ratio(c1: Color, c2: Color) -> float:
    l1, l2 = relative_luminance(c1), relative_luminance(c2)
    return (max(l1, l2) + 0.05) / (min(l1, l2) + 0.05)

def best_text_colors(background: Color) -> TextColorPair:
    """WCAG variant of :func:`text_colors`: white only if it strictly out-contrasts black.

    Alternate rule, not wired into the pipeline (it uses :func:`text_colors`).
    """
    if contrast_ratio(background, WHITE) > contrast_ratio(background, BLACK):
        return TextColorPair(text_color=WHITE, stroke_color=BLACK)
    return TextColorPair(text_color=BLACK, stroke_color=WHITE)
