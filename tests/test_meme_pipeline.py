"""End-to-end tests for services/meme_pipeline.py."""

import asyncio
import random
import threading
from concurrent.futures import ThreadPoolExecutor

import cv2
import numpy as np
import pytest

from domain.captions import CATALOG
from domain.dtos import BLACK, WHITE
from domain.enums import MemeStyle
from domain.errors import DecodeError
from services.caption_selector import CaptionSelector
from services.color_analyzer import ColorAnalyzer
from services.compositor import MemeCompositor
from services.meme_pipeline import FALLBACK_PALETTE, FALLBACK_TEXT, MemePipeline, RunTracker
from services.palette import text_colors
from services.pixel_sampler import PixelSampler


class _BrokenSampler(PixelSampler):
    def sample(self, image_bgra):
        raise RuntimeError("boom")


def _pipeline(analyzer=None, decode=None, pool=None):
    kwargs = {}
    if decode is not None:
        kwargs["decode"] = decode
    return MemePipeline(
        analyzer=analyzer or ColorAnalyzer(),
        compositor=MemeCompositor(),
        selector=CaptionSelector(CATALOG, rng=random.Random(0)),
        pool=pool or ThreadPoolExecutor(max_workers=4),
        **kwargs,
    )


def _png_bytes(img):
    ok, buf = cv2.imencode(".png", img)
    assert ok
    return buf.tobytes()


def test_dark_blue_logo_end_to_end(striped_image):
    img = striped_image([("#1E3A8A", 8), ("#FFFFFF", 2)])
    pipeline = _pipeline()

    palette, colors = pipeline.extract(img)
    assert palette.primary.hex == "#1E3A8A"
    assert colors == text_colors(palette.background)
    assert (colors.text_color, colors.stroke_color) == (BLACK, WHITE)

    memes = pipeline.generate(img, 3)
    assert len(memes) == 3
    assert [m.style for m in memes] == [MemeStyle.classic, MemeStyle.modern, MemeStyle.bold]
    assert [m.id for m in memes] == ["meme-0", "meme-1", "meme-2"]
    assert [m.filename for m in memes] == ["meme-1.png", "meme-2.png", "meme-3.png"]
    assert all(m.encoded_image.startswith(b"\x89PNG") for m in memes)
    assert memes[0].data_uri.startswith("data:image/png;base64,")


def test_transparent_logo_still_produces_memes(solid_image):
    img = solid_image("#000000", 10, 10, alpha=0)
    pipeline = _pipeline()
    palette, _ = pipeline.extract(img)
    assert palette.primary.hex == "#3B82F6"
    assert len(pipeline.generate(img, 4)) == 4


def test_extraction_error_uses_fallback_palette(solid_image):
    pipeline = _pipeline(analyzer=ColorAnalyzer(sampler=_BrokenSampler()))
    img = solid_image("#FF0000", 20, 20)
    assert pipeline.extract(img) == (FALLBACK_PALETTE, FALLBACK_TEXT)
    assert FALLBACK_PALETTE.background.hex == "#E0F2FE"
    assert len(pipeline.generate(img, 2)) == 2


def test_custom_caption_bypasses_catalog(solid_image):
    memes = _pipeline().generate(solid_image("#1E3A8A", 50, 50), 5, ("Our Brand", "is Great"))
    assert len(memes) == 1
    assert (memes[0].top_text, memes[0].bottom_text) == ("Our Brand", "is Great")
    assert memes[0].style == MemeStyle.classic


@pytest.mark.parametrize("requested,expected", [(0, 1), (6, 6), (9, 6)])
def test_count_is_clamped(solid_image, requested, expected):
    assert len(_pipeline().generate(solid_image("#1E3A8A", 30, 30), requested)) == expected


def test_zero_size_image_raises_decode_error():
    with pytest.raises(DecodeError):
        _pipeline().generate(np.zeros((0, 0, 4), dtype=np.uint8), 1)


class TestRun:
    def test_run_returns_results(self, solid_image):
        data = _png_bytes(solid_image("#1E3A8A", 40, 40))
        memes = asyncio.run(_pipeline().run(RunTracker(), data, 2))
        assert len(memes) == 2

    def test_undecodable_bytes_give_empty_result(self):
        assert asyncio.run(_pipeline().run(RunTracker(), b"not an image", 3)) == []

    def test_superseded_run_is_discarded(self, solid_image):
        img = solid_image("#1E3A8A", 40, 40)
        gate = threading.Event()

        def decode(data):
            if data == b"first":
                gate.wait(10)
            return img

        pipeline = _pipeline(decode=decode)
        tracker = RunTracker()

        async def scenario():
            first = asyncio.create_task(pipeline.run(tracker, b"first", 2))
            await asyncio.sleep(0)  # first run begins and suspends in decode
            try:
                second = await pipeline.run(tracker, b"second", 3)
            finally:
                gate.set()
            return await first, second

        first, second = asyncio.run(scenario())
        assert first is None
        assert len(second) == 3

    def test_run_id_taken_before_a_newer_run_is_discarded(self):
        tracker = RunTracker()
        stale = tracker.begin()
        tracker.begin()

        def decode(data):
            raise AssertionError("stale run should not decode")

        assert asyncio.run(_pipeline(decode=decode).run(tracker, b"x", 1, run_id=stale)) is None

    def test_trackers_are_independent(self):
        a, b = RunTracker(), RunTracker()
        ra = a.begin()
        b.begin()
        assert a.is_current(ra)
        a.begin()
        assert not a.is_current(ra)
