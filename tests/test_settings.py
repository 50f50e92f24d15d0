from pathlib import Path

import pytest

from src.app.settings import DEFAULT_CONTENT_DIR, AppSettings, SpeechSettings
from src.bot.padding import DEFAULT_LINE_WIDTH


_ENV_NAMES = (
    "APP_NAME",
    "APP_ENV",
    "LOG_LEVEL",
    "DEFAULT_TARGET_LANGUAGE",
    "LESSON_LINE_WIDTH",
    "LESSON_SKELETON",
    "CONTENT_DIR",
    "IMPORT_CONTENT_ON_STARTUP",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
    return monkeypatch


def test_settings_defaults(clean_env: pytest.MonkeyPatch) -> None:
    settings = AppSettings.from_env()

    assert settings.telegram_bot_token == "123:abc"
    assert settings.default_target_language == "eng"
    assert settings.lesson_line_width == DEFAULT_LINE_WIDTH
    assert settings.lesson_skeleton is True
    assert settings.import_content_on_startup is False
    assert settings.content_dir == DEFAULT_CONTENT_DIR
    assert settings.log_level == "INFO"


def test_settings_read_overrides(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("DEFAULT_TARGET_LANGUAGE", "kharkiv")
    clean_env.setenv("LESSON_LINE_WIDTH", "80")
    clean_env.setenv("LESSON_SKELETON", "off")
    clean_env.setenv("CONTENT_DIR", str(tmp_path))
    clean_env.setenv("IMPORT_CONTENT_ON_STARTUP", "yes")
    clean_env.setenv("LOG_LEVEL", "debug")

    settings = AppSettings.from_env()

    assert settings.default_target_language == "kharkiv"
    assert settings.lesson_line_width == 80
    assert settings.lesson_skeleton is False
    assert settings.content_dir == tmp_path
    assert settings.import_content_on_startup is True
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("TELEGRAM_BOT_TOKEN", ""),
        ("DEFAULT_TARGET_LANGUAGE", "greek"),
        ("LESSON_LINE_WIDTH", "wide"),
        ("LESSON_LINE_WIDTH", "5"),
        ("LESSON_SKELETON", "maybe"),
    ],
)
def test_settings_reject_invalid_values(clean_env: pytest.MonkeyPatch, name: str, value: str) -> None:
    clean_env.setenv(name, value)

    with pytest.raises(RuntimeError):
        AppSettings.from_env()


def test_speech_settings_require_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(RuntimeError):
        SpeechSettings.from_env()

    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("TTS_VOICE", "nova")
    settings = SpeechSettings.from_env()

    assert settings.openai_api_key == "sk-test"
    assert settings.voice == "nova"
