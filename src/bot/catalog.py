"""Static metadata about folders, categories and target languages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class TargetLanguage:
    """A language the Bulgarian sentences can be translated into."""

    code: str
    name: str
    emoji: str
    translation_field: str
    rule_field: str


@dataclass(frozen=True)
class FolderInfo:
    name: str
    emoji: str
    description: str


LANGUAGES: Dict[str, TargetLanguage] = {
    "eng": TargetLanguage("eng", "English", "🇬🇧", "eng", "rule_eng"),
    "ua": TargetLanguage("ua", "Українська", "🇺🇦", "ua", "rule_ua"),
    # The Kharkiv dialect reuses the Russian translation column.
    "kharkiv": TargetLanguage("kharkiv", "Kharkiv (Ukrainian Dialect)", "🎭", "ru", "rule_ru"),
}
DEFAULT_LANGUAGE = "eng"

FOLDERS: Dict[str, FolderInfo] = {
    "basic": FolderInfo("Basic", "🌱", "Simple sentences, no grammar explanation"),
    "middle": FolderInfo("Middle", "🌿", "Sentences with grammar tags and explanations"),
    "middle-slavic": FolderInfo("Middle Slavic", "🔗", "False friends, Slavic comparisons, cultural notes"),
    "misc": FolderInfo("Miscellaneous", "📖", "Folklore, idioms, names, slang, weather"),
    "language-comparison": FolderInfo("Language Comparison", "🌐", "Grammar, vocabulary, phonetics, syntax"),
    "expressions": FolderInfo("Expressions", "💬", "Food, love, rakiya, soft insults"),
}

CATEGORIES: Dict[str, Tuple[str, str]] = {
    "direction": ("Direction", "🗺️"),
    "greetings": ("Greetings", "👋"),
    "help": ("Help", "🆘"),
    "restaurant": ("Restaurant", "🍽️"),
    "shopping": ("Shopping", "🛒"),
    "aorist-past": ("Aorist Past", "⏮️"),
    "future": ("Future", "⏭️"),
    "imperfect-past": ("Imperfect Past", "⏪"),
    "present": ("Present", "⏱️"),
    "question": ("Question", "❓"),
    "false-friends": ("False Friends", "⚠️"),
    "modern-lexicon": ("Modern Lexicon", "📱"),
    "swear-words": ("Swear Words", "🤬"),
    "folkclore": ("Folklore", "🎭"),
    "idioms": ("Idioms", "💭"),
    "names": ("Names", "👤"),
    "political-slang": ("Political Slang", "🗣️"),
    "weather": ("Weather", "⛅"),
    "youth-slang": ("Youth Slang", "👨‍🎓"),
    "grammar": ("Grammar", "📝"),
    "vocabulary": ("Vocabulary", "📖"),
    "phonetics": ("Phonetics", "🔊"),
    "syntax": ("Syntax", "⚙️"),
    "food": ("Food", "🍕"),
    "love": ("Love", "❤️"),
    "rakiya": ("Rakiya", "🥃"),
    "soft-insult": ("Soft Insults", "😏"),
}
DEFAULT_CATEGORY_EMOJI = "📚"


def get_language(code: Optional[str]) -> TargetLanguage:
    """Return a target language, falling back to English for unknown codes."""
    if code and code in LANGUAGES:
        return LANGUAGES[code]
    return LANGUAGES[DEFAULT_LANGUAGE]


def is_known_language(code: Optional[str]) -> bool:
    return bool(code) and code in LANGUAGES


def is_known_folder(folder: Optional[str]) -> bool:
    return bool(folder) and folder in FOLDERS


def folder_label(folder: str) -> str:
    info = FOLDERS.get(folder)
    if info is None:
        return f"📁 {folder}"
    return f"{info.emoji} {info.name}"


def category_name(category: str) -> str:
    entry = CATEGORIES.get(category)
    if entry is not None:
        return entry[0]
    return category.replace("-", " ").replace("_", " ").title()


def category_emoji(category: str) -> str:
    entry = CATEGORIES.get(category)
    return entry[1] if entry is not None else DEFAULT_CATEGORY_EMOJI


def category_label(category: str) -> str:
    return f"{category_emoji(category)} {category_name(category)}"
