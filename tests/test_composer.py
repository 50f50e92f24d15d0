from types import SimpleNamespace

from src.bot.composer import (
    compose_completion_text,
    compose_favourite_text,
    compose_lesson_text,
    compose_skeleton_text,
    progress_bar,
    translation_for,
)
from src.bot.padding import visible_text


def _sentence(**overrides):
    values = dict(
        bg="Здравей!",
        eng="Hello!",
        ru="Привет!",
        ua="Привіт!",
        grammar=None,
        explanation=None,
        tag=None,
        false_friend=None,
        comparison=None,
        rule_eng=None,
        rule_ru=None,
        rule_ua=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def test_translation_for_uses_language_field_with_english_fallback() -> None:
    sentence = _sentence(ua="")

    assert translation_for(sentence, "eng") == "Hello!"
    assert translation_for(sentence, "kharkiv") == "Привет!"
    assert translation_for(sentence, "ua") == "Hello!"


def test_lesson_text_hides_translation_until_revealed() -> None:
    hidden = compose_lesson_text(_sentence(), "basic", "greetings", 0, 3, "eng")
    revealed = compose_lesson_text(_sentence(), "basic", "greetings", 0, 3, "eng", revealed=True)

    assert hidden.startswith("<b>📚 GREETINGS | 🇧🇬 → 🇬🇧</b>")
    assert "⏳ <b>1/3</b>" in hidden
    assert "<tg-spoiler>Hello!</tg-spoiler>" in hidden
    assert "🎯 <b>Hello!</b>" in revealed
    assert "tg-spoiler" not in revealed


def test_lesson_text_escapes_sentence_markup() -> None:
    text = compose_lesson_text(_sentence(bg="a < b & c", eng="<i>x</i>"), "basic", "greetings", 0, 1, "eng")

    assert "a &lt; b &amp; c" in text
    assert "&lt;i&gt;x&lt;/i&gt;" in text


def test_lesson_text_adds_folder_annotations() -> None:
    sentence = _sentence(
        grammar=["present", "verb"],
        explanation="First person singular.",
        tag="false-friend",
        false_friend="Means 'to look', not 'to guard'.",
        comparison="Compare with Russian смотреть.",
        rule_eng="Use for everyday situations.",
    )

    middle = compose_lesson_text(sentence, "middle", "present", 0, 2, "eng")
    slavic = compose_lesson_text(sentence, "middle-slavic", "false-friends", 0, 2, "eng")
    basic = compose_lesson_text(sentence, "basic", "greetings", 0, 2, "eng")

    assert "#present #verb" in middle
    assert "First person singular." in middle
    assert "FALSE FRIEND!" in slavic
    assert "Slavic Bridge" in slavic
    assert "Use for everyday situations." in slavic
    assert slavic.index("FALSE FRIEND!") < slavic.index("Slavic Bridge") < slavic.index("everyday")
    assert "Grammar" not in basic and "FALSE FRIEND" not in basic


def test_missing_sentence_yields_no_content_notice() -> None:
    text = compose_lesson_text(None, "basic", "greetings", 0, 0, "eng")

    assert text == "❌ No sentences available."


def test_skeleton_keeps_header_and_hides_content() -> None:
    text = compose_skeleton_text("greetings", 1, 3)

    assert text.startswith("<b>📚 GREETINGS | ⏳ 2/3</b>")
    assert "▮" * 25 in text
    assert "<tg-spoiler><i>" + "▮" * 22 + "</i></tg-spoiler>" in text


def test_completion_text_reports_mastered_count() -> None:
    text = compose_completion_text("greetings", 3, 3, "eng")

    assert "🎉 CONGRATULATIONS! 🎉" in text
    assert "<b>GREETINGS</b>!" in text
    assert "📊 <b>3/3</b> sentences mastered" in text


def test_favourite_text_shows_position() -> None:
    text = compose_favourite_text(_sentence(), "greetings", 1, 4, "eng", revealed=True)

    assert "2/4" in visible_text(text)
    assert "🎯 <b>Hello!</b>" in text


def test_progress_bar_fills_proportionally() -> None:
    assert progress_bar(0, 4) == "░" * 10
    assert progress_bar(2, 4) == "▓" * 5 + "░" * 5
    assert progress_bar(9, 4) == "▓" * 10
    assert progress_bar(1, 0) == "░" * 10


def test_lesson_text_is_deterministic() -> None:
    sentence = _sentence(grammar=["present"], explanation="Note.")

    first = compose_lesson_text(sentence, "middle", "present", 1, 2, "ua")
    second = compose_lesson_text(sentence, "middle", "present", 1, 2, "ua")

    assert first == second
