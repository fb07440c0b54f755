"""Inline style classification.

Answers whether a raw ``style`` declaration string asks for bold, italic or
underline text. Matching is tolerant: case-insensitive, whitespace around the
colon is allowed, and anything unrecognized simply yields False.
"""

import re
from typing import NamedTuple

_BOLD_PATTERN = re.compile(r"font-weight\s*:\s*(bold|700|800|900)", re.IGNORECASE)
_ITALIC_PATTERN = re.compile(r"font-style\s*:\s*italic", re.IGNORECASE)
# text-decoration may list several values ("underline overline"), and
# text-decoration-line is what Word and Google Docs emit
_UNDERLINE_PATTERN = re.compile(
    r"text-decoration(?:-line)?\s*:[^;]*underline", re.IGNORECASE
)


class StyleFlags(NamedTuple):
    """Visual formatting requested by a style declaration."""
    bold: bool = False
    italic: bool = False
    underline: bool = False


def is_bold_style(style: str) -> bool:
    return bool(style) and _BOLD_PATTERN.search(style) is not None


def is_italic_style(style: str) -> bool:
    return bool(style) and _ITALIC_PATTERN.search(style) is not None


def is_underline_style(style: str) -> bool:
    return bool(style) and _UNDERLINE_PATTERN.search(style) is not None


def classify_style(style: str) -> StyleFlags:
    """Classify a style declaration string.

    Args:
        style: Raw value of a style attribute (may be empty)

    Returns:
        StyleFlags with independent bold/italic/underline booleans

    Example:
        >>> classify_style("font-weight: 700; font-style:italic")
        StyleFlags(bold=True, italic=True, underline=False)
    """
    if not style:
        return StyleFlags()
    return StyleFlags(
        bold=is_bold_style(style),
        italic=is_italic_style(style),
        underline=is_underline_style(style),
    )
