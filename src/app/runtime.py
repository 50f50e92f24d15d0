"""Bootstrap logic for running the Telegram bot."""

from __future__ import annotations

import asyncio
import logging

from src.app.settings import AppSettings
from src.bot import LessonBot, build_application, register_handlers
from src.bot.favourites_flow import FavouritesFlow
from src.bot.session_controller import LessonController
from src.bot.transport import TelegramTransport
from src.db import get_engine, get_session_factory, run_migrations_if_needed
from src.db.content import import_content


LOGGER = logging.getLogger(__name__)


def _configure_logging(log_level: str) -> None:
    """Set up project-wide logging configuration."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=log_level,
    )
    # Polling requests are logged by httpx at INFO on every update.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _ensure_event_loop() -> None:
    """Guarantee that an asyncio event loop exists for the current thread."""
    try:
        asyncio.get_event_loop()
    except RuntimeError:
        asyncio.set_event_loop(asyncio.new_event_loop())


async def _import_content(settings: AppSettings) -> None:
    session_factory = get_session_factory()
    try:
        async with session_factory() as session:
            async with session.begin():
                summary = await import_content(session, settings.content_dir)
        LOGGER.info(
            "Imported %s sentences in %s categories from %s (%s files skipped).",
            summary.sentences,
            summary.categories,
            settings.content_dir,
            summary.skipped_files,
        )
    finally:
        # Pooled connections belong to this temporary loop.
        await get_engine().dispose()


def run_bot(settings: AppSettings) -> None:
    """Start the Telegram bot using the provided settings."""
    _configure_logging(settings.log_level)
    print(f"{settings.app_name} is running in {settings.app_env} mode.")

    try:
        run_migrations_if_needed()
    except Exception:
        LOGGER.exception("Database migrations failed. Aborting startup.")
        raise

    if settings.import_content_on_startup:
        asyncio.run(_import_content(settings))

    session_factory = get_session_factory()
    application = build_application(settings.telegram_bot_token)
    transport = TelegramTransport(application.bot)
    controller = LessonController(
        session_factory,
        transport,
        default_language=settings.default_target_language,
        line_width=settings.lesson_line_width,
        skeleton_enabled=settings.lesson_skeleton,
    )
    favourites = FavouritesFlow(
        session_factory,
        transport,
        controller,
        default_language=settings.default_target_language,
        line_width=settings.lesson_line_width,
    )
    bot = LessonBot(
        session_factory,
        transport,
        controller,
        favourites,
        default_language=settings.default_target_language,
    )
    register_handlers(application, bot)

    _ensure_event_loop()

    LOGGER.info("Starting Telegram bot for %s in %s mode.", settings.app_name, settings.app_env)
    application.run_polling()
