from __future__ import annotations

import asyncio
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import numpy as np

from domain.dtos import CaptionTemplate, Color, ExtractedPalette, MemeResult, TextColorPair
from domain.enums import MemeStyle
from domain.errors import DecodeError, ExtractionError
from services.caption_selector import CaptionSelector
from services.color_analyzer import ColorAnalyzer
from services.compositor import MemeCompositor
from services.image_utils import bytes_to_bgra
from services.palette import text_colors

log = logging.getLogger(__name__)

FALLBACK_PALETTE = ExtractedPalette(primary=Color.from_hex("#3B82F6"), background=Color.from_hex("#E0F2FE"))
FALLBACK_TEXT = TextColorPair(text_color=Color.from_hex("#000000"), stroke_color=Color.from_hex("#FFFFFF"))

@dataclass
class RunTracker:
    """Latest accepted run for one call site (a chat, a CLI session, ...)."""
    latest: int = 0

    def begin(self) -> int:
        self.latest += 1
        return self.latest

    def is_current(self, run_id: int) -> bool:
        return run_id == self.latest

class MemePipeline:
    """Sampler -> analyzer -> palette once per run, then background + compositor per variation."""

    def __init__(self, analyzer: ColorAnalyzer, compositor: MemeCompositor, selector: CaptionSelector,
                 max_count: int = 6, decode: Callable[[bytes], np.ndarray] = bytes_to_bgra,
                 pool: Optional[ThreadPoolExecutor] = None) -> None:
        self.analyzer = analyzer
        self.compositor = compositor
        self.selector = selector
        self.max_count = max_count
        self.decode = decode
        self.pool = pool or ThreadPoolExecutor(max_workers=min(4, os.cpu_count() or 2))

    def extract(self, image_bgra: np.ndarray) -> Tuple[ExtractedPalette, TextColorPair]:
        try:
            palette = self.analyzer.extract_palette(image_bgra)
        except ExtractionError:
            log.warning("Color extraction failed, using default colors", exc_info=True)
            return FALLBACK_PALETTE, FALLBACK_TEXT
        colors = text_colors(palette.background)
        log.info("Extracted primary=%s background=%s text=%s",
                 palette.primary, palette.background, colors.text_color)
        return palette, colors

    def captions_for(self, custom_caption: Optional[Tuple[str, str]]) -> List[CaptionTemplate]:
        if custom_caption is not None:
            top, bottom = custom_caption
            return [CaptionTemplate(top_text=top, bottom_text=bottom)]
        return self.selector.pick()

    def generate(self, image_bgra: np.ndarray, count: int,
                 custom_caption: Optional[Tuple[str, str]] = None) -> List[MemeResult]:
        """Render ``min(count, len(captions))`` variations from one palette extraction."""
        clamped = max(1, min(self.max_count, count))
        if clamped != count:
            log.warning("Meme count %s clamped to %s", count, clamped)
        captions = self.captions_for(custom_caption)
        palette, colors = self.extract(image_bgra)
        return [self._variation(image_bgra, i, c, palette.primary, colors)
                for i, c in enumerate(captions[:clamped])]

    def _variation(self, image_bgra: np.ndarray, i: int, caption: CaptionTemplate,
                   primary: Color, colors: TextColorPair) -> MemeResult:
        style = MemeStyle.for_index(i)
        png = self.compositor.render(image_bgra, caption.top_text, caption.bottom_text, style, primary, colors)
        return MemeResult(id=f"meme-{i}", encoded_image=png, top_text=caption.top_text,
                          bottom_text=caption.bottom_text, style=style)

    async def run(self, tracker: RunTracker, data: bytes, count: int,
                  custom_caption: Optional[Tuple[str, str]] = None,
                  run_id: Optional[int] = None) -> Optional[List[MemeResult]]:
        """One generation run for ``tracker``'s call site.

        Callers that wait for the image themselves (downloads) should take
        ``run_id`` from ``tracker.begin()`` before waiting and pass it here.

        Returns the results, ``[]`` if the image cannot be decoded, or ``None``
        when a newer run started on the same tracker before this one finished.
        """
        if run_id is None:
            run_id = tracker.begin()
        if not tracker.is_current(run_id):
            log.info("Run %s superseded before decode", run_id)
            return None
        loop = asyncio.get_running_loop()
        try:
            image = await loop.run_in_executor(self.pool, self.decode, data)
            if not tracker.is_current(run_id):
                log.info("Run %s superseded after decode", run_id)
                return None
            results = await loop.run_in_executor(self.pool, self.generate, image, count, custom_caption)
        except DecodeError:
            log.warning("Run %s: image is not usable", run_id, exc_info=True)
            return [] if tracker.is_current(run_id) else None

        if not tracker.is_current(run_id):
            log.info("Run %s superseded, discarding %d memes", run_id, len(results))
            return None
        return results
