#!/usr/bin/env python3
"""Render memes for a logo file without the bot: writes meme-<n>.png files."""

from __future__ import annotations

import argparse
import logging
import random
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import Settings
from domain.captions import CATALOG
from domain.enums import BackgroundStyle
from domain.errors import DecodeError
from services.caption_selector import CaptionSelector
from services.color_analyzer import ColorAnalyzer
from services.compositor import MemeCompositor
from services.image_utils import bytes_to_bgra
from services.meme_pipeline import MemePipeline
from services.pixel_sampler import PixelSampler

log = logging.getLogger("generate_memes")


def main() -> int:
    settings = Settings()
    parser = argparse.ArgumentParser(description="Turn a logo into captioned memes.")
    parser.add_argument("logo", type=Path, help="PNG/JPEG logo")
    parser.add_argument("--count", "-n", type=int, default=settings.default_meme_count,
                        help=f"number of memes, 1-{settings.max_meme_count}")
    parser.add_argument("--top", help="custom top caption (implies a single meme)")
    parser.add_argument("--bottom", default="", help="custom bottom caption")
    parser.add_argument("--out", "-o", type=Path, default=Path("."), help="output directory")
    parser.add_argument("--background", choices=[s.value for s in BackgroundStyle],
                        default=settings.background_style)
    parser.add_argument("--seed", type=int, help="seed for caption shuffling")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    pipeline = MemePipeline(
        analyzer=ColorAnalyzer(PixelSampler(settings.analysis_max_size, settings.sample_budget)),
        compositor=MemeCompositor(settings.font_path, BackgroundStyle(args.background)),
        selector=CaptionSelector(CATALOG, rng=random.Random(args.seed)),
        max_count=settings.max_meme_count,
    )
    try:
        image = bytes_to_bgra(args.logo.read_bytes())
        custom = (args.top[:100], args.bottom[:100]) if args.top is not None else None
        memes = pipeline.generate(image, args.count, custom)
    except DecodeError as e:
        log.error("Cannot use %s: %s", args.logo, e)
        return 1

    args.out.mkdir(parents=True, exist_ok=True)
    for m in memes:
        (args.out / m.filename).write_bytes(m.encoded_image)
        print(f"{m.filename}: [{m.style.value}] {m.top_text} / {m.bottom_text}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
