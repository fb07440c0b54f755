"""Legacy HTML cleaner.

Converts rich-text markup pasted from word processors, mail clients and PDFs
into the nine-tag legacy HTML dialect (b, i, u, sub, sup, p, br, ul, ol, li).
"""

from legacy_cleaner.models import (
    ConversionConfig,
    ConversionFailure,
    ConversionResult,
    ConversionSuccess,
    ErrorKind,
    ParagraphMode,
    ProcessingStats,
)
from legacy_cleaner.normalizer import clean_html

__version__ = "0.1.0"

__all__ = [
    'clean_html',
    'ConversionConfig',
    'ConversionFailure',
    'ConversionResult',
    'ConversionSuccess',
    'ErrorKind',
    'ParagraphMode',
    'ProcessingStats',
]
