"""Root pytest configuration for all tests."""

import logging

import pytest

from legacy_cleaner.models import ConversionConfig, ParagraphMode


@pytest.fixture
def paragraph_config():
    """Default configuration: paragraphs as <p>."""
    return ConversionConfig()


@pytest.fixture
def line_break_config():
    """Paragraphs written as <br><br>."""
    return ConversionConfig(paragraph_mode=ParagraphMode.LINE_BREAKS)


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Remove handlers the CLI attaches to the application loggers."""
    yield
    for name in ("legacy_cleaner", "legacy-clean"):
        app_logger = logging.getLogger(name)
        for handler in list(app_logger.handlers):
            app_logger.removeHandler(handler)
            handler.close()
        app_logger.setLevel(logging.NOTSET)
