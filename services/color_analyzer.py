from __future__ import annotations
import logging
import math
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from domain.dtos import BLACK, WHITE, Color, ColorSample, ExtractedPalette
from domain.errors import DecodeError, ExtractionError
from services.palette import background_for
from services.pixel_sampler import PixelSampler

log = logging.getLogger(__name__)

SIMILARITY_DISTANCE = 100.0

EMPTY_PALETTE = ExtractedPalette(
    primary=Color.from_hex("#3B82F6"),
    secondary=Color.from_hex("#EF4444"),
    accent=Color.from_hex("#10B981"),
    background=Color.from_hex("#F8FAFC"),
)
EMPTY_SIMPLE_PALETTE = ExtractedPalette(
    primary=Color.from_hex("#3B82F6"),
    background=Color.from_hex("#F0F9FF"),
)

class ColorAnalyzer:
    def __init__(self, sampler: Optional[PixelSampler] = None, bucket_size: int = 32,
                 min_brightness: float = 30, max_brightness: float = 240) -> None:
        self.sampler = sampler or PixelSampler()
        self.bucket_size = bucket_size
        self.min_brightness = min_brightness
        self.max_brightness = max_brightness

    def extract_palette(self, image_bgra: np.ndarray) -> ExtractedPalette:
        """Bucketed, brightness-filtered extraction. The canonical path."""
        ranked = self._rank(self.sampler, image_bgra, self.bucket_size)
        log.debug("Top colors: %s", [(s.color.hex, s.count) for s in ranked[:10]])
        filtered = [s for s in ranked if self.min_brightness <= s.color.luma <= self.max_brightness]
        candidates = filtered or ranked
        if not candidates:
            log.info("No opaque pixels sampled, using fallback palette")
            return EMPTY_PALETTE

        primary = candidates[0].color
        secondary = candidates[1].color if len(candidates) > 1 else primary
        if self.is_color_similar(primary, secondary):
            secondary = self.contrasting_color(primary)
        accent = candidates[2].color if len(candidates) > 2 else primary
        if self.is_color_similar(accent, primary) or self.is_color_similar(accent, secondary):
            accent = self.complementary_color(primary)
        return ExtractedPalette(primary=primary, background=background_for(primary),
                                secondary=secondary, accent=accent)

    def extract_simple(self, image_bgra: np.ndarray) -> ExtractedPalette:
        """Exact-color mode over a coarse sample. Fast path, no secondary/accent.

        Not used by :class:`MemePipeline`, which always runs :meth:`extract_palette`.
        """
        ranked = self._rank(PixelSampler.simple(), image_bgra, 1)
        if not ranked:
            return EMPTY_SIMPLE_PALETTE
        primary = ranked[0].color
        return ExtractedPalette(primary=primary, background=background_for(primary))

    def _rank(self, sampler: PixelSampler, image_bgra: np.ndarray, bucket_size: int) -> List[ColorSample]:
        try:
            return self.count_colors(sampler.sample(image_bgra), bucket_size)
        except DecodeError:
            raise
        except Exception as e:
            raise ExtractionError(f"color analysis failed: {e}") from e

    @staticmethod
    def count_colors(pixels: Iterable[Tuple[int, ...]], bucket_size: int = 1) -> List[ColorSample]:
        """Frequency table of bucketed colors, most frequent first.

        Each bucket is represented by its most frequent exact color, so the
        result is always a color that actually occurs in the image.
        """
        buckets: Dict[Tuple[int, int, int], Dict[Tuple[int, int, int], int]] = {}
        for px in pixels:
            exact = (px[0], px[1], px[2])
            key = tuple(ch // bucket_size * bucket_size for ch in exact)
            members = buckets.setdefault(key, {})
            members[exact] = members.get(exact, 0) + 1
        # dicts keep insertion order and sorted()/max() are stable: ties go to the first seen
        ranked = sorted(buckets.values(), key=lambda m: sum(m.values()), reverse=True)
        return [ColorSample(color=Color(*max(m, key=m.get)), count=sum(m.values())) for m in ranked]

    @staticmethod
    def color_distance(c1: Color, c2: Color) -> float:
        return math.sqrt((c1.r - c2.r) ** 2 + (c1.g - c2.g) ** 2 + (c1.b - c2.b) ** 2)

    @staticmethod
    def is_color_similar(c1: Color, c2: Color) -> bool:
        return ColorAnalyzer.color_distance(c1, c2) < SIMILARITY_DISTANCE

    @staticmethod
    def contrasting_color(c: Color) -> Color:
        return WHITE if c.luma < 128 else BLACK

    @staticmethod
    def complementary_color(c: Color) -> Color:
        return Color(255 - c.r, 255 - c.g, 255 - c.b)
