"""Typed exception hierarchy for the markup normalization engine.

These exceptions are internal to the engine: the conversion facade converts
every one of them into a ConversionFailure before returning to the caller.
"""

from legacy_cleaner.errors import CleanerError


class NormalizationError(CleanerError):
    """Base exception for all normalization errors."""
    pass


class MalformedInputError(NormalizationError):
    """Raised when the input cannot be parsed as markup.

    Covers parser rejection, undecodable bytes and binary payloads.
    """

    def __init__(self, reason: str):
        super().__init__(f"Malformed input: {reason}")
        self.reason = reason


class NestingDepthError(NormalizationError):
    """Raised when markup nesting exceeds the configured depth limit."""

    def __init__(self, max_depth: int):
        super().__init__(f"Markup nesting exceeds maximum depth of {max_depth}")
        self.max_depth = max_depth


class UnexpectedFailureError(NormalizationError):
    """Raised when rewriting or post-processing fails for any other reason."""

    def __init__(self, stage: str, message: str):
        super().__init__(f"{stage} failed: {message}")
        self.stage = stage
