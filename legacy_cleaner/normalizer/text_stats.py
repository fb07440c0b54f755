"""Word and character counts for display alongside converted output."""

import re
from typing import NamedTuple

from bs4 import NavigableString, Tag
from bs4.element import PreformattedString

from .markup_parser import parse_markup

_LINE_STARTS = frozenset({'br', 'p', 'li', 'ul', 'ol'})
_BLANK_LINES = re.compile(r"\n{3,}")


class TextStats(NamedTuple):
    """Counts for the HTML source and for the text a reader would see."""
    words: int
    chars: int
    visible_words: int
    visible_chars: int


def count_words(text: str) -> int:
    return len([word for word in text.split() if word])


def visible_text(html: str) -> str:
    """Text content of markup, with breaks and block starts as newlines."""
    soup = parse_markup(html)
    parts = []
    for node in soup.descendants:
        if isinstance(node, Tag):
            if node.name in _LINE_STARTS:
                parts.append('\n')
        elif isinstance(node, NavigableString) and not isinstance(node, PreformattedString):
            parts.append(str(node))
    return _BLANK_LINES.sub('\n\n', ''.join(parts)).strip()


def summarize(html: str) -> TextStats:
    """Count words and characters in markup and in its visible text."""
    text = visible_text(html) if html else ''
    return TextStats(
        words=count_words(html),
        chars=len(html),
        visible_words=count_words(text),
        visible_chars=len(text),
    )
