"""Telegram bot components for the Bulgarian lessons bot."""

from .lesson_bot import LessonBot
from .telegram import build_application, register_handlers

__all__ = ["LessonBot", "build_application", "register_handlers"]
