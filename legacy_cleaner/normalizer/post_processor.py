"""Textual post-processing of the serialized rewriter output.

Runs a fixed, ordered sequence of passes over the HTML string:

1. Plain-text mode: raw newlines become <br>
2. Break spellings are normalized to <br>
3. Whitespace between block tags and just inside them is dropped, nested
   paragraph tags are collapsed and leading breaks inside a paragraph are
   stripped
4. Empty formatting, paragraph and list elements are removed; with
   aggressive whitespace collapse, the whitespace runs this leaves behind
   shrink to one space
5. Line-break mode: <p> is removed and </p> becomes <br><br>
6. The result is trimmed, including breaks at either edge of the document,
   also when they sit inside its first or last elements

Passes 3 and 4 repeat until the string stops changing, since removing one
empty element can expose another. Whitespace that separates text from a
block tag is kept: line-break mode removes <p> textually and would
otherwise join the words on either side.
"""

import logging
import re

from legacy_cleaner.models import ConversionConfig

from .tag_policy import FORMATTING_TAGS

logger = logging.getLogger(__name__)

BREAK = '<br>'

_BLOCK = r"(?:p|ul|ol|li)"
_EDGE_TAG = r"(?:b|i|u|sub|sup|p|ul|ol|li)"

_ANY_BREAK = re.compile(r"<br\s*/?>", re.IGNORECASE)
_BETWEEN_BLOCK_TAGS = re.compile(r"(</?%s>)\s+(?=</?%s>)" % (_BLOCK, _BLOCK))
_AFTER_BLOCK_OPEN = re.compile(r"(<%s>)\s+" % _BLOCK)
_BEFORE_BLOCK_CLOSE = re.compile(r"\s+(</%s>)" % _BLOCK)
_NESTED_P_OPEN = re.compile(r"<p>(?:<p>)+")
_NESTED_P_CLOSE = re.compile(r"</p>(?:</p>)+")
_LEADING_BREAKS_IN_P = re.compile(r"<p>(?:\s*<br>)+\s*")
_EMPTY_FORMATTING = re.compile(
    r"<(%s)>((?:\s|&nbsp;)*)</\1>" % "|".join(sorted(FORMATTING_TAGS))
)
_EMPTY_BLOCK = re.compile(r"<(p|li|ul|ol)>(?:\s|&nbsp;)*</\1>")
_WHITESPACE_RUN = re.compile(r"\s{2,}")
_LEADING_BREAKS = re.compile(r"^((?:\s*<%s>)*)(?:\s*<br>)+\s*" % _EDGE_TAG)
_TRAILING_BREAKS = re.compile(r"(?:\s*<br>)+((?:\s*</%s>)*)\s*$" % _EDGE_TAG)

# Guards the fixed-point loops; each iteration strictly shortens the string
_MAX_CLEANUP_ROUNDS = 1000


def convert_newlines(html: str) -> str:
    """Render raw line breaks of plain-text input as break elements."""
    return html.replace('\r\n', '\n').replace('\r', '\n').replace('\n', BREAK)


def normalize_breaks(html: str) -> str:
    """Rewrite <br/>, <br />, <BR> and friends as <br>."""
    return _ANY_BREAK.sub(BREAK, html)


def collapse_paragraphs(html: str) -> str:
    """Drop whitespace inside and between block tags, collapse nested paragraphs.

    Whitespace between a block tag and surrounding text is left alone.
    """
    html = _BETWEEN_BLOCK_TAGS.sub(r'\1', html)
    html = _AFTER_BLOCK_OPEN.sub(r'\1', html)
    html = _BEFORE_BLOCK_CLOSE.sub(r'\1', html)
    html = _NESTED_P_OPEN.sub('<p>', html)
    html = _NESTED_P_CLOSE.sub('</p>', html)
    return _LEADING_BREAKS_IN_P.sub('<p>', html)


def remove_empty_elements(html: str) -> str:
    """Remove elements whose content is empty or whitespace.

    Whitespace-only formatting elements are replaced by the whitespace they
    held so that neighbouring words stay apart; whitespace-only blocks
    disappear entirely.
    """
    html = _EMPTY_FORMATTING.sub(r'\2', html)
    return _EMPTY_BLOCK.sub('', html)


def collapse_whitespace(html: str) -> str:
    """Shrink runs of whitespace to a single space."""
    return _WHITESPACE_RUN.sub(' ', html)


def paragraphs_to_breaks(html: str) -> str:
    """Replace paragraph tags with double line breaks."""
    return html.replace('<p>', '').replace('</p>', BREAK * 2)


def trim(html: str) -> str:
    """Trim whitespace and any run of breaks at the start or end.

    Breaks count as leading when only opening tags come before them and as
    trailing when only closing tags follow, so ``<b>Title<br><br></b>``
    trims to ``<b>Title</b>``. Elements emptied this way are removed too.
    """
    for _ in range(_MAX_CLEANUP_ROUNDS):
        trimmed = _LEADING_BREAKS.sub(r'\1', html.strip())
        trimmed = _TRAILING_BREAKS.sub(r'\1', trimmed)
        trimmed = remove_empty_elements(trimmed).strip()
        if trimmed == html:
            break
        html = trimmed
    return html


def _cleanup_round(html: str, config: ConversionConfig) -> str:
    html = remove_empty_elements(collapse_paragraphs(html))
    if config.aggressive_whitespace:
        html = collapse_whitespace(html)
    return html


def post_process(html: str, config: ConversionConfig, plain_text: bool = False) -> str:
    """Run every post-processing pass in order.

    Args:
        html: Serialized output of the tree rewriter
        config: Conversion settings (paragraph mode, whitespace collapse)
        plain_text: Input was detected as plain text

    Returns:
        Final legacy-dialect HTML string
    """
    if plain_text:
        html = convert_newlines(html)
    html = normalize_breaks(html)

    for _ in range(_MAX_CLEANUP_ROUNDS):
        cleaned = _cleanup_round(html, config)
        if cleaned == html:
            break
        html = cleaned

    if not config.uses_paragraphs:
        html = paragraphs_to_breaks(html)

    html = trim(html)
    logger.debug(f"Post-processing produced {len(html)} character(s)")
    return html
