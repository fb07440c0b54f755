"""Conversion result data model.

A conversion returns exactly one of two variants: ConversionSuccess with the
cleaned HTML and its statistics, or ConversionFailure with a user-readable
message. Callers branch on ``result.ok`` (or isinstance) instead of catching
exceptions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class ProcessingStats:
    """Summary statistics for one conversion.

    Attributes:
        original_length: Length of the raw input, measured before sanitization
        final_length: Length of the output after post-processing
        tags_removed: Elements discarded with their subtree
        attributes_removed: Presentational/event attributes stripped
    """
    original_length: int = 0
    final_length: int = 0
    tags_removed: int = 0
    attributes_removed: int = 0

    def as_dict(self) -> dict:
        return {
            'original_length': self.original_length,
            'final_length': self.final_length,
            'tags_removed': self.tags_removed,
            'attributes_removed': self.attributes_removed,
        }


class ErrorKind(str, Enum):
    """Failure taxonomy for the conversion boundary."""
    MALFORMED_INPUT = "malformed_input"
    UNEXPECTED_FAILURE = "unexpected_failure"


@dataclass(frozen=True)
class ConversionSuccess:
    """Successful conversion.

    Attributes:
        html: Fragment using only b, i, u, sub, sup, p, br, ul, ol, li
        stats: Processing statistics
    """
    html: str
    stats: ProcessingStats = field(default_factory=ProcessingStats)

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ConversionFailure:
    """Failed conversion. Stats are always zero.

    Attributes:
        message: Stable, user-readable summary (never a stack trace)
        kind: Which failure class occurred
    """
    message: str
    kind: ErrorKind = ErrorKind.UNEXPECTED_FAILURE

    @property
    def ok(self) -> bool:
        return False

    @property
    def stats(self) -> ProcessingStats:
        return ProcessingStats()


ConversionResult = Union[ConversionSuccess, ConversionFailure]
