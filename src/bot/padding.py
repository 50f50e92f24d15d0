"""Width padding for lesson messages.

Telegram sizes inline keyboards after the widest line of the message they are
attached to. Lesson cards pad their longest visible line with trailing spaces
and a zero width joiner so the buttons always render at the same width.
"""

from __future__ import annotations

import html
import re
import unicodedata


DEFAULT_LINE_WIDTH = 150
PAD_CHAR = " "
JOINER = "\u200d"

_TAG_RE = re.compile(r"<[^>]*>")
_COMBINING_CATEGORIES = {"Mn", "Me", "Mc"}


def _extends_cluster(char: str) -> bool:
    code = ord(char)
    if char == JOINER:
        return True
    if unicodedata.category(char) in _COMBINING_CATEGORIES:
        return True
    if 0xFE00 <= code <= 0xFE0F or 0xE0100 <= code <= 0xE01EF:
        return True
    if 0x1F3FB <= code <= 0x1F3FF:
        return True
    return 0xE0020 <= code <= 0xE007F


def _is_regional_indicator(char: str) -> bool:
    return 0x1F1E6 <= ord(char) <= 0x1F1FF


def count_graphemes(text: str) -> int:
    """Count user-perceived characters in ``text``.

    Combining marks, variation selectors, skin tone modifiers, tag sequences
    and zero width joiner sequences are folded into the preceding character;
    regional indicators are counted in pairs (one flag).
    """
    count = 0
    previous = ""
    pending_indicator = False
    for char in text:
        if previous == JOINER or (count and _extends_cluster(char)):
            previous = char
            continue
        if _is_regional_indicator(char):
            if pending_indicator:
                pending_indicator = False
                previous = char
                continue
            pending_indicator = True
        else:
            pending_indicator = False
        count += 1
        previous = char
    return count


def visible_text(text: str) -> str:
    """Strip markup tags and decode entities so only displayed text remains."""
    return html.unescape(_TAG_RE.sub("", text))


def visible_width(line: str) -> int:
    return count_graphemes(visible_text(line))


def pad_to_width(text: str, width: int = DEFAULT_LINE_WIDTH) -> str:
    """Pad the longest visible line of ``text`` up to ``width`` characters.

    Text that already reaches the width is returned unchanged, so applying the
    transform twice yields the same result.
    """
    lines = text.split("\n")
    widths = [visible_width(line) for line in lines]
    longest = max(range(len(lines)), key=lambda index: widths[index])
    missing = width - widths[longest]
    if missing <= 0:
        return text

    # The joiner merges with the last space, so it adds no visible width.
    lines[longest] = f"{lines[longest]}{PAD_CHAR * missing}{JOINER}"
    return "\n".join(lines)
