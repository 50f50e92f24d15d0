"""Inline keyboards and callback tokens."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from src.bot.catalog import LANGUAGES, category_label, folder_label
from src.bot.ui_text import get_ui_text


LANGUAGE_PREFIX = "lang"
FOLDER_PREFIX = "folder"
CATEGORY_PREFIX = "cat"
LESSON_PREFIX = "lesson"
FAVOURITE_PREFIX = "fav"
MENU_PREFIX = "menu"

LESSON_ACTIONS = {"show", "next", "prev", "skip", "exit", "resume", "new"}
FAVOURITE_ACTIONS = {"add", "show", "listen", "remove", "next"}
MENU_ACTIONS = {"folders"}

# Telegram rejects callback data longer than 64 bytes.
MAX_CALLBACK_BYTES = 64


@dataclass(frozen=True)
class CallbackToken:
    prefix: str
    value: str

    def encode(self) -> str:
        return f"{self.prefix}:{self.value}"


def callback_data(prefix: str, value: str) -> str:
    data = CallbackToken(prefix, value).encode()
    if len(data.encode("utf-8")) > MAX_CALLBACK_BYTES:
        raise ValueError(f"Callback data too long: {data!r}")
    return data


def parse_callback(data: Optional[str]) -> Optional[CallbackToken]:
    """Parse ``prefix:value`` callback data, returning ``None`` when malformed."""
    if not data or ":" not in data:
        return None
    prefix, value = data.split(":", 1)
    if not value:
        return None
    if prefix == LESSON_PREFIX and value not in LESSON_ACTIONS:
        return None
    if prefix == FAVOURITE_PREFIX and value not in FAVOURITE_ACTIONS:
        return None
    if prefix == MENU_PREFIX and value not in MENU_ACTIONS:
        return None
    if prefix not in {LANGUAGE_PREFIX, FOLDER_PREFIX, CATEGORY_PREFIX, LESSON_PREFIX, FAVOURITE_PREFIX, MENU_PREFIX}:
        return None
    return CallbackToken(prefix, value)


def _button(text: str, prefix: str, value: str) -> InlineKeyboardButton:
    return InlineKeyboardButton(text, callback_data=callback_data(prefix, value))


def build_language_keyboard(language: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [[_button(get_ui_text(f"language_{code}", language), LANGUAGE_PREFIX, code)] for code in LANGUAGES]
    )


def build_folder_keyboard(folders: Iterable[str]) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([[_button(folder_label(folder), FOLDER_PREFIX, folder)] for folder in folders])


def build_category_keyboard(
    categories: Sequence[Tuple[str, int]],
    language: str,
) -> InlineKeyboardMarkup:
    """Category menu; each entry is ``(category, completion_percent)``."""
    rows = []
    for category, percent in categories:
        label = category_label(category)
        if percent > 0:
            label = f"{label} · {percent}%"
        rows.append([_button(label, CATEGORY_PREFIX, category)])
    rows.append([_button(get_ui_text("change_folder", language), MENU_PREFIX, "folders")])
    return InlineKeyboardMarkup(rows)


def build_lesson_keyboard(language: str, revealed: bool) -> InlineKeyboardMarkup:
    favourite = _button(get_ui_text("add_favourite", language), FAVOURITE_PREFIX, "add")
    if not revealed:
        return InlineKeyboardMarkup(
            [
                [_button(get_ui_text("show_translation", language), LESSON_PREFIX, "show"), favourite],
                [_button(get_ui_text("skip_next", language), LESSON_PREFIX, "skip")],
            ]
        )
    return InlineKeyboardMarkup(
        [
            [
                _button(get_ui_text("previous", language), LESSON_PREFIX, "prev"),
                _button(get_ui_text("next", language), LESSON_PREFIX, "next"),
            ],
            [favourite, _button(get_ui_text("exit_lesson", language), LESSON_PREFIX, "exit")],
        ]
    )


def build_completion_keyboard(folder: str, language: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [_button(get_ui_text("choose_another", language), FOLDER_PREFIX, folder)],
            [_button(get_ui_text("change_folder", language), MENU_PREFIX, "folders")],
        ]
    )


def build_resume_keyboard(language: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [_button(get_ui_text("resume_lesson", language), LESSON_PREFIX, "resume")],
            [_button(get_ui_text("start_new", language), LESSON_PREFIX, "new")],
        ]
    )


def build_favourite_keyboard(language: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [
                _button(get_ui_text("show_translation", language), FAVOURITE_PREFIX, "show"),
                _button(get_ui_text("listen", language), FAVOURITE_PREFIX, "listen"),
            ],
            [
                _button(get_ui_text("remove", language), FAVOURITE_PREFIX, "remove"),
                _button(get_ui_text("fav_next", language), FAVOURITE_PREFIX, "next"),
            ],
            [_button(get_ui_text("main_menu", language), MENU_PREFIX, "folders")],
        ]
    )
