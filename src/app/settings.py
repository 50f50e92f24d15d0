"""Configuration helpers for the Bulgarian lessons bot runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from src.bot.catalog import LANGUAGES
from src.bot.padding import DEFAULT_LINE_WIDTH


PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONTENT_DIR = PROJECT_ROOT / "data"
DEFAULT_TTS_MODEL = "gpt-4o-mini-tts"
DEFAULT_TTS_VOICE = "alloy"
MIN_LINE_WIDTH = 20
MAX_LINE_WIDTH = 400

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _read_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise RuntimeError(f"{name} must be a boolean flag (true/false).")


@dataclass(frozen=True)
class AppSettings:
    """Strongly typed application settings loaded from environment variables."""

    app_name: str
    app_env: str
    log_level: str
    telegram_bot_token: str
    default_target_language: str
    lesson_line_width: int
    lesson_skeleton: bool
    content_dir: Path
    import_content_on_startup: bool

    @classmethod
    def from_env(cls) -> AppSettings:
        """Construct settings directly from environment variables."""
        app_name = os.getenv("APP_NAME", "Bulgarian Lessons Bot")
        app_env = os.getenv("APP_ENV", "development")
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        telegram_bot_token = os.getenv("TELEGRAM_BOT_TOKEN")

        if not telegram_bot_token:
            raise RuntimeError(
                "TELEGRAM_BOT_TOKEN environment variable is required to start the Telegram bot."
            )

        default_target_language = os.getenv("DEFAULT_TARGET_LANGUAGE", "eng")
        if default_target_language not in LANGUAGES:
            raise RuntimeError(
                "DEFAULT_TARGET_LANGUAGE must be one of: " + ", ".join(sorted(LANGUAGES)) + "."
            )

        try:
            lesson_line_width = int(os.getenv("LESSON_LINE_WIDTH", str(DEFAULT_LINE_WIDTH)))
        except ValueError as exc:
            raise RuntimeError("LESSON_LINE_WIDTH must be an integer.") from exc
        if lesson_line_width < MIN_LINE_WIDTH or lesson_line_width > MAX_LINE_WIDTH:
            raise RuntimeError(f"LESSON_LINE_WIDTH must be between {MIN_LINE_WIDTH} and {MAX_LINE_WIDTH}.")

        content_dir = Path(os.getenv("CONTENT_DIR") or DEFAULT_CONTENT_DIR).expanduser()

        return cls(
            app_name=app_name,
            app_env=app_env,
            log_level=log_level,
            telegram_bot_token=telegram_bot_token,
            default_target_language=default_target_language,
            lesson_line_width=lesson_line_width,
            lesson_skeleton=_read_flag("LESSON_SKELETON", True),
            content_dir=content_dir,
            import_content_on_startup=_read_flag("IMPORT_CONTENT_ON_STARTUP", False),
        )


@dataclass(frozen=True)
class SpeechSettings:
    """Settings for the sentence audio generation tool."""

    openai_api_key: str
    model: str
    voice: str

    @classmethod
    def from_env(cls) -> SpeechSettings:
        openai_api_key = os.getenv("OPENAI_API_KEY")
        if not openai_api_key:
            raise RuntimeError("OPENAI_API_KEY environment variable is required to generate audio.")
        return cls(
            openai_api_key=openai_api_key,
            model=os.getenv("TTS_MODEL", DEFAULT_TTS_MODEL),
            voice=os.getenv("TTS_VOICE", DEFAULT_TTS_VOICE),
        )
