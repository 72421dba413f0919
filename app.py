# app.py

import io
import logging
from typing import List, Optional, Tuple

from telegram import InputMediaDocument, Update
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)
from telegram.request import HTTPXRequest

from config import Settings
from domain.captions import CATALOG
from domain.dtos import MemeResult
from domain.enums import BackgroundStyle
from services.caption_repository import CaptionRepository
from services.caption_selector import CaptionSelector
from services.color_analyzer import ColorAnalyzer
from services.compositor import MemeCompositor
from services.meme_pipeline import MemePipeline, RunTracker
from services.pixel_sampler import PixelSampler

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
log = logging.getLogger("app")

MAX_CAPTION_CHARS = 100


def parse_caption(args: List[str]) -> Optional[Tuple[str, str]]:
    """'/caption TOP | BOTTOM' -> (top, bottom), each side capped at 100 chars."""
    raw = " ".join(args).strip()
    if not raw:
        return None
    top, _, bottom = raw.partition("|")
    return top.strip()[:MAX_CAPTION_CHARS], bottom.strip()[:MAX_CAPTION_CHARS]


class BotApp:
    """Composition root. Wires services and Telegram handlers."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.repo = CaptionRepository(settings.db_url)
        seeded = self.repo.seed(CATALOG)
        if seeded:
            log.info("Seeded %d caption templates", seeded)
        self.pipeline = MemePipeline(
            analyzer=ColorAnalyzer(PixelSampler(settings.analysis_max_size, settings.sample_budget)),
            compositor=MemeCompositor(settings.font_path, BackgroundStyle(settings.background_style)),
            selector=CaptionSelector(self.repo.all),  # re-read per run, picks up new templates
            max_count=settings.max_meme_count,
        )

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await update.message.reply_html(
            "<b>Привет!</b> Пришли мне <u>логотип</u> (png/jpg) — я подберу цвета\n"
            "и сделаю из него мемы.\n\n"
            "Команды: /help, /count, /caption, /stats"
        )

    async def help(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await update.message.reply_text(
            "Отправь логотип фото или файлом (png/jpg, до "
            f"{self.settings.max_upload_mb} МБ). SVG не поддерживается.\n"
            f"/count N — сколько мемов делать (1-{self.settings.max_meme_count}).\n"
            "/caption ВЕРХ | НИЗ — своя подпись (один мем). /caption без текста — снова случайные."
        )

    async def stats(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        counts = self.repo.count_by_category()
        formatted = "\n".join(f"{cat}: {n}" for cat, n in counts.items()) or "пусто"
        await update.message.reply_text(f"Подписей в базе:\n{formatted}")

    async def count(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        limit = self.settings.max_meme_count
        try:
            n = int(context.args[0])
        except (IndexError, ValueError):
            await update.message.reply_text(f"Использование: /count N, где N от 1 до {limit}")
            return
        if not 1 <= n <= limit:
            await update.message.reply_text(f"N должно быть от 1 до {limit}")
            return
        context.chat_data["count"] = n
        await update.message.reply_text(f"Буду делать {n} мем(ов).")

    async def caption(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        caption = parse_caption(context.args or [])
        context.chat_data["caption"] = caption
        if caption is None:
            await update.message.reply_text("Своя подпись сброшена, беру случайные.")
        else:
            await update.message.reply_text(f"Подпись сохранена: {caption[0]} / {caption[1]}")

    async def on_photo(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.message
        if not message or not message.photo:
            return
        await self._generate(update, context, message.photo[-1].file_id, message.photo[-1].file_size)

    async def on_document(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.message
        if not message or not message.document:
            return
        doc = message.document
        if (doc.mime_type or "").startswith("image/svg"):
            await message.reply_text("SVG не поддерживается, пришли png или jpg.")
            return
        await self._generate(update, context, doc.file_id, doc.file_size)

    async def _generate(self, update: Update, context: ContextTypes.DEFAULT_TYPE,
                        file_id: str, file_size: Optional[int]) -> None:
        message = update.message
        if file_size and file_size > self.settings.max_upload_mb * 1024 * 1024:
            await message.reply_text(f"Файл больше {self.settings.max_upload_mb} МБ.")
            return
        # the run starts on arrival, so a slow download cannot outlive a newer upload
        tracker = context.chat_data.setdefault("runs", RunTracker())
        run_id = tracker.begin()
        count = context.chat_data.get("count", self.settings.default_meme_count)
        caption = context.chat_data.get("caption")

        file = await context.bot.get_file(file_id)
        # PTB v21: download_to_memory(out=buffer) — обязателен параметр out
        bio = io.BytesIO()
        await file.download_to_memory(out=bio)
        if not tracker.is_current(run_id):
            log.info("Run %s superseded during download", run_id)
            return

        try:
            memes = await self.pipeline.run(tracker, bio.getvalue(), count, caption, run_id=run_id)
        except Exception:
            log.exception("Meme generation failed")
            await message.reply_text("Не получилось сделать мемы. Попробуйте другой логотип.")
            return

        if memes is None:
            # a newer upload in this chat took over
            return
        if not memes:
            await message.reply_text("Не удалось прочитать изображение. Попробуйте другой файл.")
            return
        await self._send(update, memes)

    async def _send(self, update: Update, memes: List[MemeResult]) -> None:
        message = update.message
        if len(memes) == 1:
            m = memes[0]
            await message.reply_document(document=m.encoded_image, filename=m.filename)
            return
        # media groups need 2-10 items
        await message.reply_media_group(media=[
            InputMediaDocument(media=m.encoded_image, filename=m.filename) for m in memes
        ])

    def build_application(self) -> Application:
        # Таймауты по отдельности для PTB v21
        request = HTTPXRequest(
            connect_timeout=20.0,
            read_timeout=40.0,
            write_timeout=40.0,  # медиагруппы по 6 PNG
            pool_timeout=10.0,
            connection_pool_size=8,
        )

        app = (
            Application.builder()
            .token(self.settings.bot_token)
            .request(request)
            .concurrent_updates(True)
            .build()
        )
        app.add_handler(CommandHandler("start", self.start))
        app.add_handler(CommandHandler("help", self.help))
        app.add_handler(CommandHandler("stats", self.stats))
        app.add_handler(CommandHandler("count", self.count))
        app.add_handler(CommandHandler("caption", self.caption))
        app.add_handler(MessageHandler(filters.PHOTO, self.on_photo))
        app.add_handler(MessageHandler(filters.Document.IMAGE, self.on_document))
        return app


def main() -> None:
    settings = Settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    if not settings.bot_token:
        log.error("BOT_TOKEN is not set")
        return
    bot = BotApp(settings)
    app = bot.build_application()
    log.info("Bot started")
    app.run_polling(close_loop=False)


if __name__ == "__main__":
    try:
        main()
    except (KeyboardInterrupt, SystemExit):
        pass
