"""Tests for the bot handlers in app.py, driven with fake Telegram objects."""

import asyncio
from types import SimpleNamespace

import cv2

from app import BotApp, parse_caption
from config import Settings


def _png(img):
    ok, buf = cv2.imencode(".png", img)
    assert ok
    return buf.tobytes()


class _File:
    def __init__(self, data, delay):
        self.data = data
        self.delay = delay

    async def download_to_memory(self, out):
        await asyncio.sleep(self.delay)
        out.write(self.data)


def _context(chat_data, data, delay):
    async def get_file(file_id):
        return _File(data, delay)
    return SimpleNamespace(chat_data=chat_data, bot=SimpleNamespace(get_file=get_file), args=[])


def _update(label, delivered):
    async def reply_document(document, filename):
        delivered.append(label)

    async def reply_media_group(media):
        delivered.append(label)

    async def reply_text(text):
        delivered.append(f"{label}: {text}")

    message = SimpleNamespace(reply_document=reply_document, reply_media_group=reply_media_group,
                              reply_text=reply_text)
    return SimpleNamespace(message=message)


def _bot():
    return BotApp(Settings(_env_file=None, db_url="sqlite://"))


class TestGenerate:
    def test_single_upload_is_delivered(self, solid_image):
        bot = _bot()
        delivered = []
        data = _png(solid_image("#1E3A8A", 40, 40))
        asyncio.run(bot._generate(_update("only", delivered), _context({"count": 1}, data, 0), "f", 100))
        assert delivered == ["only"]

    def test_slow_older_download_does_not_outlive_newer_upload(self, solid_image):
        bot = _bot()
        delivered = []
        chat_data = {"count": 1}
        data = _png(solid_image("#1E3A8A", 40, 40))

        async def scenario():
            older = asyncio.create_task(
                bot._generate(_update("older", delivered), _context(chat_data, data, 0.5), "a", 100))
            await asyncio.sleep(0.05)  # older is now waiting on its download
            await bot._generate(_update("newer", delivered), _context(chat_data, data, 0), "b", 100)
            await older

        asyncio.run(scenario())
        assert delivered == ["newer"]

    def test_oversized_upload_is_rejected_without_download(self):
        bot = _bot()
        delivered = []

        async def get_file(file_id):
            raise AssertionError("oversized upload should not be fetched")

        context = SimpleNamespace(chat_data={}, bot=SimpleNamespace(get_file=get_file), args=[])
        asyncio.run(bot._generate(_update("big", delivered), context, "f", 11 * 1024 * 1024))
        assert len(delivered) == 1 and delivered[0].startswith("big: ")

    def test_unreadable_upload_gets_a_reply(self):
        bot = _bot()
        delivered = []
        asyncio.run(bot._generate(_update("bad", delivered), _context({}, b"not an image", 0), "f", 100))
        assert len(delivered) == 1 and delivered[0].startswith("bad: ")


class TestParseCaption:
    def test_top_and_bottom(self):
        assert parse_caption(["Our", "Brand", "|", "is", "Great"]) == ("Our Brand", "is Great")

    def test_empty_clears(self):
        assert parse_caption([]) is None

    def test_sides_are_capped(self):
        top, bottom = parse_caption(["x" * 150, "|", "y"])
        assert len(top) == 100 and bottom == "y"
