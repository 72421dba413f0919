from __future__ import annotations
import logging

import numpy as np
from PIL import Image, ImageDraw

from domain.dtos import Color
from domain.enums import BackgroundStyle
from services.palette import five_stop_palette, lighten

log = logging.getLogger(__name__)

# Upstream placeholders: a palette from these carries no brand information.
PLACEHOLDER_PRIMARIES = {Color.from_hex("#FFFFFF"), Color.from_hex("#F8FAFC")}
FALLBACK_FILL = Color.from_hex("#F0F9FF")

GRADIENT_OFFSETS = (0.0, 0.3, 0.6, 1.0)
DOT_RADIUS = 4
DOT_SPACING = 20
BORDER_WIDTH = 8

def render_background(canvas: Image.Image, primary: Color,
                      style: BackgroundStyle = BackgroundStyle.gradient) -> None:
    """Paint the whole canvas. Must run before any foreground drawing."""
    if primary in PLACEHOLDER_PRIMARIES:
        log.debug("Placeholder primary %s, flat fallback fill", primary)
        canvas.paste(FALLBACK_FILL.rgb + (255,), (0, 0, canvas.width, canvas.height))
        return
    if style == BackgroundStyle.gradient:
        _gradient(canvas, primary)
    elif style == BackgroundStyle.pattern:
        _pattern(canvas, primary)
    elif style == BackgroundStyle.solid:
        _solid(canvas, primary)
    else:
        raise ValueError(f"unknown background style: {style}")

def _gradient(canvas: Image.Image, primary: Color) -> None:
    w, h = canvas.size
    p = five_stop_palette(primary)
    stops = [p.lightest, p.light, p.medium, p.dark]
    radius = max(w, h) / 2
    ys, xs = np.mgrid[0:h, 0:w].astype(np.float32)
    # beyond the radius np.interp holds the last stop
    t = np.hypot(xs - w / 2, ys - h / 2) / radius
    rgb = np.empty((h, w, 3), dtype=np.float32)
    for ch in range(3):
        rgb[..., ch] = np.interp(t, GRADIENT_OFFSETS, [s.rgb[ch] for s in stops])
    layer = np.dstack([np.clip(rgb, 0, 255).astype(np.uint8), np.full((h, w), 255, np.uint8)])
    canvas.paste(Image.fromarray(layer), (0, 0))

def _pattern(canvas: Image.Image, primary: Color) -> None:
    w, h = canvas.size
    canvas.paste(lighten(primary, 0.3).rgb + (255,), (0, 0, w, h))
    dot = lighten(primary, 0.15).rgb
    draw = ImageDraw.Draw(canvas)
    for x in range(0, w, DOT_SPACING):
        for y in range(0, h, DOT_SPACING):
            if (x + y) % (DOT_SPACING * 2) == 0:
                draw.ellipse((x - DOT_RADIUS, y - DOT_RADIUS, x + DOT_RADIUS, y + DOT_RADIUS), fill=dot)

def _solid(canvas: Image.Image, primary: Color) -> None:
    w, h = canvas.size
    canvas.paste(lighten(primary, 0.4).rgb + (255,), (0, 0, w, h))
    draw = ImageDraw.Draw(canvas)
    draw.rectangle((0, 0, w - 1, h - 1), outline=lighten(primary, 0.2).rgb, width=BORDER_WIDTH)
