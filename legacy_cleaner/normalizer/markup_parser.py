"""Markup decoding and parsing.

Turns the raw input (str or bytes) into a BeautifulSoup tree. Uses the
``html.parser`` tree builder, which keeps a fragment as a fragment: it does
not synthesize <html>, <body> or <p> wrappers around bare text, so plain
clipboard text stays recognizable as plain text.
"""

import logging
from typing import Union

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from .errors import MalformedInputError
from .tag_policy import BLOCK_TAGS

logger = logging.getLogger(__name__)

PARSER = "html.parser"

# Share of non-whitespace control characters above which input is binary
_BINARY_CONTROL_RATIO = 0.10
_WHITESPACE_CONTROLS = frozenset('\t\n\r\f\v')


def coerce_markup(raw: Union[str, bytes]) -> str:
    """Return the input as text, rejecting binary payloads.

    Args:
        raw: Markup string, or UTF-8 encoded bytes

    Returns:
        Decoded markup text

    Raises:
        MalformedInputError: If bytes are not valid UTF-8 or the content
            looks like a binary blob
    """
    if isinstance(raw, bytes):
        try:
            text = raw.decode('utf-8-sig')
        except UnicodeDecodeError as e:
            raise MalformedInputError(f"input is not valid UTF-8 ({e.reason})") from e
    else:
        text = raw

    if '\x00' in text:
        raise MalformedInputError("input contains NUL characters")

    if text:
        controls = sum(
            1 for ch in text
            if ord(ch) < 32 and ch not in _WHITESPACE_CONTROLS
        )
        if controls / len(text) > _BINARY_CONTROL_RATIO:
            raise MalformedInputError("input looks like binary data")

    return text


def parse_markup(markup: str) -> BeautifulSoup:
    """Parse markup into a read-only BeautifulSoup tree.

    Raises:
        MalformedInputError: If the parser rejects the markup
    """
    try:
        return BeautifulSoup(markup, PARSER)
    except ParserRejectedMarkup as e:
        logger.warning(f"Parser rejected markup: {e}")
        raise MalformedInputError("parser rejected markup structure") from e


def is_plain_text(soup: BeautifulSoup) -> bool:
    """Detect plain-text mode.

    Input is plain text when no block-level source tag appears anywhere in
    the tree and the text content is not blank. Raw line breaks in such input
    are preserved and later rendered as <br>.
    """
    if soup.find(sorted(BLOCK_TAGS)) is not None:
        return False
    return bool(soup.get_text().strip())
