"""Pure text builders for lesson cards."""

from __future__ import annotations

from html import escape
from typing import Callable, Dict, Optional, Protocol, Sequence, Tuple

from src.bot.catalog import category_name, get_language
from src.bot.padding import DEFAULT_LINE_WIDTH, pad_to_width
from src.bot.ui_text import get_ui_text


NO_CONTENT_KEY = "no_sentences"
SKELETON_BLOCK = "▮"
FALSE_FRIEND_TAG = "false-friend"


class SentenceLike(Protocol):
    bg: str
    eng: str
    ru: str
    ua: str
    grammar: Optional[Sequence[str]]
    explanation: Optional[str]
    tag: Optional[str]
    false_friend: Optional[str]
    comparison: Optional[str]
    rule_eng: Optional[str]
    rule_ru: Optional[str]
    rule_ua: Optional[str]


AnnotationSelector = Callable[[SentenceLike, str], Optional[str]]


def translation_for(sentence: SentenceLike, language_to: str) -> str:
    """Return the translation for the target language, falling back to English."""
    language = get_language(language_to)
    value = getattr(sentence, language.translation_field, None) or sentence.eng
    return value or ""


def _grammar_note(sentence: SentenceLike, language_to: str) -> Optional[str]:
    if not sentence.grammar or not sentence.explanation:
        return None
    tags = " ".join(f"#{escape(str(tag))}" for tag in sentence.grammar)
    return f"📝 <b>Grammar:</b> {tags}\n💡 <i>{escape(sentence.explanation)}</i>"


def _false_friend_warning(sentence: SentenceLike, language_to: str) -> Optional[str]:
    if sentence.tag != FALSE_FRIEND_TAG or not sentence.false_friend:
        return None
    return f"⚠️ <b>FALSE FRIEND!</b>\n🔴 <i>{escape(sentence.false_friend)}</i>"


def _slavic_bridge(sentence: SentenceLike, language_to: str) -> Optional[str]:
    if not sentence.comparison:
        return None
    return f"🔗 <b>Slavic Bridge:</b> <i>{escape(sentence.comparison)}</i>"


def _usage_rule(sentence: SentenceLike, language_to: str) -> Optional[str]:
    rule = getattr(sentence, get_language(language_to).rule_field, None)
    if not rule:
        return None
    return f"📖 <i>{escape(rule)}</i>"


# Annotation blocks appended after the translation, in order, per folder.
FOLDER_ANNOTATIONS: Dict[str, Tuple[AnnotationSelector, ...]] = {
    "middle": (_grammar_note,),
    "middle-slavic": (_false_friend_warning, _slavic_bridge, _usage_rule),
    "misc": (_usage_rule,),
    "language-comparison": (_usage_rule,),
    "expressions": (_usage_rule,),
}


def _header(category: str, index: int, total: int, language_to: str) -> str:
    language = get_language(language_to)
    return (
        f"<b>📚 {escape(category.upper())} | 🇧🇬 → {language.emoji}</b>\n\n"
        f"⏳ <b>{index + 1}/{total}</b>"
    )


def compose_lesson_text(
    sentence: Optional[SentenceLike],
    folder: str,
    category: str,
    index: int,
    total: int,
    language_to: str,
    revealed: bool = False,
    width: int = DEFAULT_LINE_WIDTH,
) -> str:
    """Build the lesson card for a sentence.

    The translation is wrapped in a spoiler unless ``revealed`` is set. A
    missing sentence yields the localized "no content" notice.
    """
    if sentence is None:
        return no_content_text(language_to)

    translation = escape(translation_for(sentence, language_to))
    if revealed:
        translation_block = f"🎯 <b>{translation}</b>"
    else:
        translation_block = f"<tg-spoiler>{translation}</tg-spoiler>"

    blocks = [_header(category, index, total, language_to), escape(sentence.bg), translation_block]
    for selector in FOLDER_ANNOTATIONS.get(folder, ()):
        block = selector(sentence, language_to)
        if block:
            blocks.append(block)

    return pad_to_width("\n\n".join(blocks), width)


def no_content_text(language_to: str) -> str:
    return get_ui_text(NO_CONTENT_KEY, language_to)


def compose_skeleton_text(category: str, index: int, total: int, width: int = DEFAULT_LINE_WIDTH) -> str:
    """Placeholder card shown while the next sentence is being rendered."""
    text = (
        f"<b>📚 {escape(category.upper())} | ⏳ {index + 1}/{total}</b>\n\n"
        f"<i>{SKELETON_BLOCK * 25}</i>\n\n"
        f"<tg-spoiler><i>{SKELETON_BLOCK * 22}</i></tg-spoiler>"
    )
    return pad_to_width(text, width)


def compose_completion_text(category: str, mastered: int, total: int, language_to: str) -> str:
    """Summary shown after the last sentence of a category."""
    return (
        f"{get_ui_text('congratulations', language_to)}\n\n"
        f"✅ {get_ui_text('lesson_completed', language_to)} <b>{escape(category_name(category).upper())}</b>!\n\n"
        f"📊 <b>{mastered}/{total}</b> {get_ui_text('sentences_mastered', language_to)}\n\n"
        f"{get_ui_text('great_job', language_to)}"
    )


def compose_favourite_text(
    sentence: SentenceLike,
    category: str,
    index: int,
    total: int,
    language_to: str,
    revealed: bool = False,
    width: int = DEFAULT_LINE_WIDTH,
) -> str:
    translation = escape(translation_for(sentence, language_to))
    translation_block = f"🎯 <b>{translation}</b>" if revealed else f"<tg-spoiler>{translation}</tg-spoiler>"
    text = (
        f"<b>{get_ui_text('favourites_title', language_to)} {index + 1}/{total}</b>\n"
        f"<i>{escape(category_name(category))}</i>\n\n"
        f"{escape(sentence.bg)}\n\n"
        f"{translation_block}"
    )
    return pad_to_width(text, width)


def progress_bar(done: int, total: int, blocks: int = 10) -> str:
    if total <= 0:
        return "░" * blocks
    filled = min(blocks, round(blocks * done / total))
    return "▓" * filled + "░" * (blocks - filled)
