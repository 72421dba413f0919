from __future__ import annotations

import io
import logging
import threading
from pathlib import Path
from typing import List, Optional, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFilter, ImageFont

from domain.dtos import Color, ImagePlacement, TextColorPair, Typography
from domain.enums import BackgroundStyle, MemeStyle
from domain.errors import RenderError
from services.background_renderer import render_background
from services.image_utils import bgra_to_pil

log = logging.getLogger(__name__)

CANVAS_WIDTH = 800
CANVAS_HEIGHT = 600
WIDE_FIT = 0.9  # of canvas width
TALL_FIT = 0.7  # of canvas height, leaves room for captions
TEXT_WIDTH = 0.9
LINE_HEIGHT = 1.2
SHADOW_OFFSET = (2, 2)

TYPOGRAPHY = {
    MemeStyle.classic: Typography(font_size=48, stroke_width=6, shadow_blur=4),
    MemeStyle.modern: Typography(font_size=42, stroke_width=5, shadow_blur=3),
    MemeStyle.bold: Typography(font_size=54, stroke_width=7, shadow_blur=5),
}

# Bold display faces, best match first.
_FONT_CANDIDATES = (
    "Impact.ttf",
    "Anton-Regular.ttf",
    "LiberationSans-Bold.ttf",
    "DejaVuSans-Bold.ttf",
)
_SYSTEM_FONT_DIRS = (
    Path("/usr/share/fonts/truetype/msttcorefonts"),
    Path("/usr/share/fonts/truetype/liberation"),
    Path("/usr/share/fonts/truetype/liberation2"),
    Path("/usr/share/fonts/truetype/dejavu"),
    Path("/Library/Fonts"),
    Path("C:/Windows/Fonts"),
)

AnyFont = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

def find_font_file(preferred: Optional[str] = None) -> Optional[Path]:
    if preferred:
        p = Path(preferred)
        if p.is_file():
            return p
        log.warning("Configured font %s not found, falling back", preferred)
    dirs = (Path(__file__).resolve().parent.parent / "assets" / "fonts",) + _SYSTEM_FONT_DIRS
    for name in _FONT_CANDIDATES:
        for d in dirs:
            candidate = d / name
            if candidate.is_file():
                return candidate
    return None

def fit_image(img_w: int, img_h: int, canvas_w: int = CANVAS_WIDTH, canvas_h: int = CANVAS_HEIGHT) -> ImagePlacement:
    """Aspect-preserving placement, centered on both axes."""
    aspect = img_w / img_h
    if aspect > canvas_w / canvas_h:
        w = canvas_w * WIDE_FIT
        h = w / aspect
    else:
        h = canvas_h * TALL_FIT
        w = h * aspect
    return ImagePlacement(x=(canvas_w - w) / 2, y=(canvas_h - h) / 2, width=w, height=h)

def wrap_text(text: str, font: AnyFont, max_width: float) -> List[str]:
    """Greedy word wrap. A word wider than ``max_width`` gets a line of its own."""
    lines: List[str] = []
    current = ""
    for word in text.split(" "):
        candidate = f"{current} {word}" if current else word
        if font.getlength(candidate) > max_width and current:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines

class MemeCompositor:
    """Renders one meme variation onto a fresh 800x600 surface and returns PNG bytes."""

    _lock = threading.Lock()  # FreeType faces are cached and shared between pool threads

    def __init__(self, font_path: Optional[str] = None,
                 background_style: BackgroundStyle = BackgroundStyle.gradient) -> None:
        self.font_file = find_font_file(font_path)
        if self.font_file is None:
            log.warning("No bold display font found, using Pillow's default face")
        self.background_style = BackgroundStyle(background_style)
        self._fonts: dict = {}

    def font(self, size: int) -> AnyFont:
        if size not in self._fonts:
            if self.font_file is not None:
                self._fonts[size] = ImageFont.truetype(str(self.font_file), size=size)
            else:
                self._fonts[size] = ImageFont.load_default(size=size)
        return self._fonts[size]

    def render(self, image_bgra: np.ndarray, top_text: str, bottom_text: str, style: MemeStyle,
               primary: Color, colors: TextColorPair) -> bytes:
        with self._lock:
            return self._render(image_bgra, top_text, bottom_text, style, primary, colors)

    def _render(self, image_bgra: np.ndarray, top_text: str, bottom_text: str, style: MemeStyle,
                primary: Color, colors: TextColorPair) -> bytes:
        canvas = self._new_surface()
        render_background(canvas, primary, self.background_style)

        h, w = image_bgra.shape[:2]
        place = fit_image(w, h)
        logo = bgra_to_pil(image_bgra).resize(
            (max(1, round(place.width)), max(1, round(place.height))), Image.LANCZOS)
        canvas.alpha_composite(logo, (round(place.x), round(place.y)))

        typo = TYPOGRAPHY[style]
        font = self.font(typo.font_size)
        if top_text.strip():
            anchor_y = max(typo.font_size + 30, place.y - 50)
            self.draw_caption(canvas, top_text.upper(), anchor_y, font, typo, colors)
        if bottom_text.strip():
            anchor_y = min(CANVAS_HEIGHT - 50, place.bottom + 50)
            self.draw_caption(canvas, bottom_text.upper(), anchor_y, font, typo, colors)

        canvas = apply_overlay(canvas, style)
        return encode_png(canvas)

    @staticmethod
    def _new_surface() -> Image.Image:
        try:
            return Image.new("RGBA", (CANVAS_WIDTH, CANVAS_HEIGHT), (0, 0, 0, 0))
        except (MemoryError, ValueError, OSError) as e:
            raise RenderError(f"could not allocate drawing surface: {e}") from e

    def draw_caption(self, canvas: Image.Image, text: str, anchor_y: float, font: AnyFont,
                     typo: Typography, colors: TextColorPair) -> None:
        lines = wrap_text(text, font, CANVAS_WIDTH * TEXT_WIDTH)
        line_h = typo.font_size * LINE_HEIGHT
        start_y = anchor_y - len(lines) * line_h / 2
        x = CANVAS_WIDTH / 2
        for i, line in enumerate(lines):
            y = start_y + i * line_h + line_h / 2
            self._draw_line(canvas, line, x, y, font, typo, colors)

    @staticmethod
    def _draw_line(canvas: Image.Image, line: str, x: float, y: float, font: AnyFont,
                   typo: Typography, colors: TextColorPair) -> None:
        # The outline is centred on the glyph edge, so half of it shows outside the fill.
        outline = max(1, typo.stroke_width // 2)
        stroke = colors.stroke_color.rgb

        shadow = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        ImageDraw.Draw(shadow).text((x + SHADOW_OFFSET[0], y + SHADOW_OFFSET[1]), line, font=font,
                                    anchor="mm", fill=stroke, stroke_width=outline, stroke_fill=stroke)
        canvas.alpha_composite(shadow.filter(ImageFilter.GaussianBlur(typo.shadow_blur / 2)))

        draw = ImageDraw.Draw(canvas)
        draw.text((x, y), line, font=font, anchor="mm", fill=stroke, stroke_width=outline, stroke_fill=stroke)
        draw.text((x, y), line, font=font, anchor="mm", fill=colors.text_color.rgb)

def apply_overlay(canvas: Image.Image, style: MemeStyle) -> Image.Image:
    w, h = canvas.size
    if style == MemeStyle.modern:
        # 5% black at the top and bottom edges, clear in the middle
        t = np.arange(h, dtype=np.float32) / max(1, h - 1)
        column = 0.05 * np.abs(2 * t - 1)
        alpha = np.repeat(column[:, None], w, axis=1)
    elif style == MemeStyle.bold:
        radius = max(w, h) * 0.7
        ys, xs = np.mgrid[0:h, 0:w].astype(np.float32)
        r = np.hypot(xs - w / 2, ys - h / 2) / radius
        alpha = 0.2 * np.clip((r - 0.7) / 0.3, 0, 1)
    else:
        return canvas
    a = np.round(alpha * 255).astype(np.uint8)
    overlay = np.dstack([np.zeros((h, w, 3), np.uint8), a])
    return Image.alpha_composite(canvas, Image.fromarray(overlay))

def encode_png(canvas: Image.Image) -> bytes:
    buf = io.BytesIO()
    canvas.save(buf, format="PNG")
    return buf.getvalue()
