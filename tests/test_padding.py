from src.bot.padding import JOINER, count_graphemes, pad_to_width, visible_text, visible_width


def test_count_graphemes_handles_plain_and_cyrillic_text() -> None:
    assert count_graphemes("") == 0
    assert count_graphemes("abc") == 3
    assert count_graphemes("Здравей") == 7


def test_count_graphemes_folds_emoji_sequences() -> None:
    assert count_graphemes("🇧🇬") == 1
    assert count_graphemes("🇧🇬🇬🇧") == 2
    assert count_graphemes("👍🏽") == 1
    assert count_graphemes("👨‍👩‍👧") == 1
    assert count_graphemes("❤️") == 1
    assert count_graphemes("é") == 1


def test_visible_text_strips_markup_and_entities() -> None:
    assert visible_text("<b>A &amp; B</b> <tg-spoiler>x</tg-spoiler>") == "A & B x"
    assert visible_width("<i>&lt;3</i>") == 2


def test_pad_to_width_pads_only_the_longest_line() -> None:
    text = "<b>short</b>\na much longer line"

    padded = pad_to_width(text, 30)
    first, second = padded.split("\n")

    assert first == "<b>short</b>"
    assert second.startswith("a much longer line")
    assert second.endswith(JOINER)
    assert visible_width(second) == 30


def test_pad_to_width_is_idempotent_and_keeps_wide_text() -> None:
    padded = pad_to_width("Здравей! 🇧🇬", 40)

    assert pad_to_width(padded, 40) == padded
    assert pad_to_width("x" * 50, 40) == "x" * 50


def test_padded_text_reaches_width_without_changing_visible_content() -> None:
    samples = [
        "",
        "<b>📚 GREETINGS | 🇧🇬 → 🇬🇧</b>\n\n⏳ <b>1/3</b>",
        "Здравей!\n\n<tg-spoiler>Hello!</tg-spoiler>",
        "👨‍👩‍👧 семейство",
    ]
    for text in samples:
        padded = pad_to_width(text, 60)
        assert max(visible_width(line) for line in padded.split("\n")) >= 60
        shown = [line.removesuffix(JOINER).rstrip(" ") for line in visible_text(padded).split("\n")]
        assert shown == visible_text(text).split("\n")
