"""Defensive sanitization of untrusted markup.

Runs before the tree rewriter, independently of the tag policy table:
executable and embedding elements are removed with their content, event
handler attributes and script URLs are stripped, comments and processing
instructions are dropped. A second, allowlist-based pass re-sanitizes engine
output before it is previewed.
"""

import logging
import re
from typing import NamedTuple

from bs4 import BeautifulSoup, Comment, Declaration, Doctype, ProcessingInstruction, Tag

from .markup_parser import parse_markup

logger = logging.getLogger(__name__)

FORBIDDEN_TAGS = frozenset({
    'script', 'style', 'iframe', 'object', 'embed', 'applet', 'noscript',
    'template', 'frame', 'frameset',
})

URL_ATTRIBUTES = frozenset({'href', 'src', 'action', 'formaction', 'xlink:href', 'data'})

PREVIEW_ALLOWED_TAGS = frozenset({
    'b', 'i', 'u', 'strong', 'em', 'p', 'br', 'ul', 'ol', 'li', 'sub', 'sup', 'span',
})

_SCRIPT_URL = re.compile(r"^\s*(javascript|vbscript)\s*:", re.IGNORECASE)


class SanitizeReport(NamedTuple):
    """Sanitized markup plus what was removed from it."""
    html: str
    tags_removed: int = 0
    attributes_removed: int = 0


def _is_event_handler(attr_name: str) -> bool:
    return attr_name.lower().startswith('on')


def _is_script_url(attr_name: str, value) -> bool:
    if attr_name.lower() not in URL_ATTRIBUTES:
        return False
    if isinstance(value, list):
        value = ' '.join(value)
    return bool(_SCRIPT_URL.match(value or ''))


def _strip_markup_noise(soup: BeautifulSoup) -> None:
    """Remove comments, doctypes, declarations and processing instructions."""
    noise = soup.find_all(
        string=lambda s: isinstance(s, (Comment, Doctype, Declaration, ProcessingInstruction))
    )
    for node in noise:
        node.extract()


def sanitize(markup: str) -> SanitizeReport:
    """Strip dangerous elements and attributes from raw markup.

    Args:
        markup: Decoded, untrusted markup string

    Returns:
        SanitizeReport with the cleaned markup and removal counters

    Raises:
        MalformedInputError: If the parser rejects the markup
    """
    soup = parse_markup(markup)
    tags_removed = 0
    attributes_removed = 0

    for element in soup.find_all(sorted(FORBIDDEN_TAGS)):
        # Already gone if an ancestor was decomposed first
        if element.decomposed:
            continue
        element.decompose()
        tags_removed += 1

    _strip_markup_noise(soup)

    for element in soup.find_all(True):
        for attr_name in list(element.attrs):
            value = element.attrs[attr_name]
            if _is_event_handler(attr_name) or _is_script_url(attr_name, value):
                del element.attrs[attr_name]
                attributes_removed += 1

    if tags_removed or attributes_removed:
        logger.debug(
            f"Sanitizer removed {tags_removed} element(s) and "
            f"{attributes_removed} attribute(s)"
        )

    return SanitizeReport(
        html=soup.decode(),
        tags_removed=tags_removed,
        attributes_removed=attributes_removed,
    )


def sanitize_for_preview(html: str) -> str:
    """Re-sanitize engine output before it is rendered as a preview.

    Keeps only the preview allowlist with no attributes; any other element is
    unwrapped (forbidden elements are removed with their content).

    Args:
        html: Engine output (or any markup) to be previewed

    Returns:
        Markup safe to render
    """
    soup = parse_markup(sanitize(html).html)
    for element in soup.find_all(True):
        if not isinstance(element, Tag) or element.decomposed:
            continue
        if element.name in PREVIEW_ALLOWED_TAGS:
            element.attrs = {}
        else:
            element.unwrap()
    return soup.decode()
