"""Conversion facade for the markup normalization engine.

Orchestrates sanitize -> parse -> rewrite -> post-process -> stats and is the
only part of the engine that talks to callers. ``HtmlCleaner.convert`` uses
typed exceptions internally; ``clean_html`` never raises and always returns a
ConversionSuccess or ConversionFailure.
"""

import logging
from enum import Enum
from typing import Optional, Union

from legacy_cleaner.models import (
    ConversionConfig,
    ConversionFailure,
    ConversionResult,
    ConversionSuccess,
    ErrorKind,
    ProcessingStats,
)

from .errors import MalformedInputError, NormalizationError, UnexpectedFailureError
from .markup_parser import coerce_markup, is_plain_text, parse_markup
from .nodes import serialize
from .post_processor import post_process
from .sanitizer import sanitize
from .tree_rewriter import TreeRewriter

logger = logging.getLogger(__name__)

MALFORMED_INPUT_MESSAGE = "Malformed HTML structure detected."
UNEXPECTED_FAILURE_MESSAGE = "Could not process content. An unexpected error occurred during processing."


class ConversionStage(str, Enum):
    """States of a single conversion call."""
    IDLE = "idle"
    SANITIZING = "sanitizing"
    PARSING = "parsing"
    REWRITING = "rewriting"
    POST_PROCESSING = "post_processing"
    DONE = "done"
    FAILED = "failed"


class HtmlCleaner:
    """Runs one conversion pipeline with a fixed configuration.

    Holds no state between calls; the same instance can convert any number
    of inputs, from any number of threads.

    Example:
        >>> cleaner = HtmlCleaner(ConversionConfig())
        >>> html, stats = cleaner.convert("<strong>Hi</strong>")
        >>> html
        '<b>Hi</b>'
    """

    def __init__(self, config: Optional[ConversionConfig] = None):
        self.config = config or ConversionConfig()

    def convert(self, raw: Union[str, bytes]):
        """Convert markup, raising on failure.

        Args:
            raw: Markup string (HTML document, fragment or plain text) or
                UTF-8 bytes

        Returns:
            Tuple of (html, ProcessingStats)

        Raises:
            MalformedInputError: If the input cannot be parsed
            NestingDepthError: If nesting exceeds config.max_depth
            UnexpectedFailureError: If any other step fails
        """
        stage = ConversionStage.SANITIZING
        try:
            markup = coerce_markup(raw)
            report = sanitize(markup)

            stage = ConversionStage.PARSING
            soup = parse_markup(report.html)
            plain_text = is_plain_text(soup)
            logger.debug(f"Parsed input ({len(markup)} chars), plain_text={plain_text}")

            stage = ConversionStage.REWRITING
            rewriter = TreeRewriter(self.config, plain_text=plain_text)
            fragment = rewriter.rewrite(soup)

            stage = ConversionStage.POST_PROCESSING
            html = post_process(serialize(fragment), self.config, plain_text=plain_text)
        except NormalizationError:
            raise
        except Exception as e:
            raise UnexpectedFailureError(stage.value, str(e) or type(e).__name__) from e

        stats = ProcessingStats(
            original_length=len(markup),
            final_length=len(html),
            tags_removed=report.tags_removed + rewriter.tags_removed,
            attributes_removed=report.attributes_removed + rewriter.attributes_removed,
        )
        return html, stats

    def clean(self, raw: Union[str, bytes]) -> ConversionResult:
        """Convert markup into a ConversionResult. Never raises."""
        try:
            html, stats = self.convert(raw)
        except MalformedInputError as e:
            logger.warning(f"Conversion failed: {e}")
            return ConversionFailure(MALFORMED_INPUT_MESSAGE, ErrorKind.MALFORMED_INPUT)
        except Exception:
            logger.exception("Conversion failed")
            return ConversionFailure(UNEXPECTED_FAILURE_MESSAGE, ErrorKind.UNEXPECTED_FAILURE)

        logger.info(
            f"Converted {stats.original_length} -> {stats.final_length} chars "
            f"({stats.tags_removed} tag(s), {stats.attributes_removed} attribute(s) removed)"
        )
        return ConversionSuccess(html=html, stats=stats)


def clean_html(raw: Union[str, bytes], config: Optional[ConversionConfig] = None) -> ConversionResult:
    """Convert arbitrary rich-text markup into the legacy HTML dialect.

    Args:
        raw: Markup string or UTF-8 bytes
        config: Conversion settings (defaults to ConversionConfig())

    Returns:
        ConversionSuccess(html, stats) or ConversionFailure(message, kind)

    Example:
        >>> result = clean_html('<h1>Title</h1><p>Body</p>')
        >>> result.html
        '<p><b>Title</b></p><p>Body</p>'
    """
    return HtmlCleaner(config).clean(raw)
