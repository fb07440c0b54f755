"""Markup normalization engine.

Rewrites arbitrary rich-text markup into the nine-tag legacy HTML dialect.
``clean_html`` is the entry point; the other names are exported for callers
that need a single stage (tests, preview rendering, statistics).
"""

from .cleaner import (
    MALFORMED_INPUT_MESSAGE,
    UNEXPECTED_FAILURE_MESSAGE,
    ConversionStage,
    HtmlCleaner,
    clean_html,
)
from .errors import (
    MalformedInputError,
    NestingDepthError,
    NormalizationError,
    UnexpectedFailureError,
)
from .sanitizer import sanitize, sanitize_for_preview
from .text_stats import TextStats, summarize, visible_text

__all__ = [
    'clean_html',
    'HtmlCleaner',
    'ConversionStage',
    'MALFORMED_INPUT_MESSAGE',
    'UNEXPECTED_FAILURE_MESSAGE',
    'MalformedInputError',
    'NestingDepthError',
    'NormalizationError',
    'UnexpectedFailureError',
    'sanitize',
    'sanitize_for_preview',
    'TextStats',
    'summarize',
    'visible_text',
]
