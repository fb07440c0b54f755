"""Data models for conversion configuration and conversion results."""

from legacy_cleaner.models.conversion_config import ConversionConfig, ParagraphMode
from legacy_cleaner.models.conversion_result import (
    ConversionFailure,
    ConversionResult,
    ConversionSuccess,
    ErrorKind,
    ProcessingStats,
)

__all__ = [
    'ConversionConfig',
    'ParagraphMode',
    'ConversionFailure',
    'ConversionResult',
    'ConversionSuccess',
    'ErrorKind',
    'ProcessingStats',
]
