"""Telegram application wiring for the Bulgarian lessons bot."""

from telegram.ext import Application, ApplicationBuilder, CallbackQueryHandler, CommandHandler

from .keyboards import CATEGORY_PREFIX, FAVOURITE_PREFIX, FOLDER_PREFIX, LANGUAGE_PREFIX, LESSON_PREFIX, MENU_PREFIX
from .lesson_bot import LessonBot


def build_application(bot_token: str) -> Application:
    """Create the Telegram application; handlers are attached by ``register_handlers``."""
    return ApplicationBuilder().token(bot_token).concurrent_updates(True).build()


def register_handlers(application: Application, bot: LessonBot) -> Application:
    """Attach command and callback handlers of the lesson bot."""
    application.add_handler(CommandHandler("start", bot.handle_start))
    application.add_handler(CommandHandler("progress", bot.handle_progress))
    application.add_handler(CommandHandler("profile", bot.handle_profile))
    application.add_handler(CommandHandler("refresh", bot.handle_refresh))
    application.add_handler(CommandHandler("help", bot.handle_help))
    application.add_handler(CommandHandler(["favourites", "favourite"], bot.handle_favourites))
    application.add_handler(CallbackQueryHandler(bot.handle_language, pattern=rf"^{LANGUAGE_PREFIX}:"))
    application.add_handler(CallbackQueryHandler(bot.handle_folder, pattern=rf"^{FOLDER_PREFIX}:"))
    application.add_handler(CallbackQueryHandler(bot.handle_category, pattern=rf"^{CATEGORY_PREFIX}:"))
    application.add_handler(CallbackQueryHandler(bot.handle_lesson_action, pattern=rf"^{LESSON_PREFIX}:"))
    application.add_handler(CallbackQueryHandler(bot.handle_favourite_action, pattern=rf"^{FAVOURITE_PREFIX}:"))
    application.add_handler(CallbackQueryHandler(bot.handle_menu, pattern=rf"^{MENU_PREFIX}:"))
    application.add_error_handler(bot.handle_error)
    return application
