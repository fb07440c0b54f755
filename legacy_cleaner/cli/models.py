"""Data models for CLI operations."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum

from legacy_cleaner.ai_client import AISettings
from legacy_cleaner.models import ConversionConfig


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Conversion completed
    - GENERAL_ERROR (1): Config issues, unreadable input, bad options
    - CONVERSION_FAILED (2): The engine returned a failure result
    - AUTH_ERROR (3): Generative path has no API key
    - NETWORK_ERROR (4): Generative service unreachable or rate limited
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    CONVERSION_FAILED = 2
    AUTH_ERROR = 3
    NETWORK_ERROR = 4


class Engine(str, Enum):
    """Which conversion path to run."""
    STANDARD = "standard"
    AI = "ai"


@dataclass(frozen=True)
class CLISettings:
    """Settings resolved from the config file and command line.

    Attributes:
        conversion: Engine configuration
        engine: Rule-based engine or generative cleanup
        ai: Generative cleanup settings
    """
    conversion: ConversionConfig = field(default_factory=ConversionConfig)
    engine: Engine = Engine.STANDARD
    ai: AISettings = field(default_factory=AISettings)
