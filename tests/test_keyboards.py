import pytest

from src.bot.keyboards import (
    CallbackToken,
    build_category_keyboard,
    build_lesson_keyboard,
    callback_data,
    parse_callback,
)


def _callbacks(markup) -> list[list[str]]:
    return [[button.callback_data for button in row] for row in markup.inline_keyboard]


def test_parse_callback_accepts_known_tokens() -> None:
    assert parse_callback("lesson:next") == CallbackToken("lesson", "next")
    assert parse_callback("cat:false-friends") == CallbackToken("cat", "false-friends")
    assert parse_callback("fav:listen") == CallbackToken("fav", "listen")


@pytest.mark.parametrize("data", [None, "", "lesson", "lesson:", "lesson:jump", "fav:share", "menu:home", "other:x"])
def test_parse_callback_rejects_malformed_data(data) -> None:
    assert parse_callback(data) is None


def test_callback_data_respects_telegram_limit() -> None:
    assert callback_data("cat", "greetings") == "cat:greetings"
    with pytest.raises(ValueError):
        callback_data("cat", "x" * 70)


def test_lesson_keyboard_depends_on_reveal_state() -> None:
    hidden = _callbacks(build_lesson_keyboard("eng", revealed=False))
    revealed = _callbacks(build_lesson_keyboard("eng", revealed=True))

    assert hidden == [["lesson:show", "fav:add"], ["lesson:skip"]]
    assert revealed == [["lesson:prev", "lesson:next"], ["fav:add", "lesson:exit"]]


def test_category_keyboard_shows_progress_and_folder_switch() -> None:
    markup = build_category_keyboard([("greetings", 0), ("shopping", 40)], "eng")

    labels = [row[0].text for row in markup.inline_keyboard]
    assert labels[0] == "👋 Greetings"
    assert labels[1].endswith("· 40%")
    assert markup.inline_keyboard[-1][0].callback_data == "menu:folders"
