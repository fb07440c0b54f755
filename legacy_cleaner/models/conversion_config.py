"""Conversion configuration data model."""

from dataclasses import dataclass
from enum import Enum


class ParagraphMode(str, Enum):
    """How paragraph boundaries are written in the output.

    - PARAGRAPHS: paragraphs are wrapped in <p>...</p>
    - LINE_BREAKS: paragraph tags are replaced by a double <br><br>
    """
    PARAGRAPHS = "paragraphs"
    LINE_BREAKS = "line_breaks"


@dataclass(frozen=True)
class ConversionConfig:
    """Immutable settings for a single conversion call.

    Attributes:
        paragraph_mode: Paragraph tags or double line breaks
        aggressive_whitespace: Collapse every whitespace run to one space
        convert_divs_to_paragraphs: Map <div> to <p>; when False a div
            becomes a line break before its content
        flatten_lists: Replace ul/ol/li with synthesized "• " / "1. "
            prefixes and line breaks
        max_depth: Maximum markup nesting depth before the conversion fails

    Example:
        >>> config = ConversionConfig(paragraph_mode=ParagraphMode.LINE_BREAKS)
        >>> config.uses_paragraphs
        False
    """
    paragraph_mode: ParagraphMode = ParagraphMode.PARAGRAPHS
    aggressive_whitespace: bool = True
    convert_divs_to_paragraphs: bool = True
    flatten_lists: bool = False
    max_depth: int = 200

    def __post_init__(self):
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")

    @property
    def uses_paragraphs(self) -> bool:
        """True when paragraphs are emitted as <p> elements."""
        return self.paragraph_mode is ParagraphMode.PARAGRAPHS
