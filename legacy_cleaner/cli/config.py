"""YAML settings loading and validation.

Settings file structure (every key optional):

    paragraph_mode: paragraphs        # or line_breaks
    aggressive_whitespace: true
    convert_divs_to_paragraphs: true
    flatten_lists: false
    max_depth: 200
    engine: standard                  # or ai
    ai:
      model: gemini-2.5-flash
      temperature: 0.1
      timeout: 60
"""

import logging
import os
from typing import Any, Dict, Optional

import yaml

from legacy_cleaner.ai_client import AISettings
from legacy_cleaner.models import ConversionConfig, ParagraphMode

from .errors import ConfigError, ConfigFilesystemError
from .models import CLISettings, Engine

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads CLI settings from a YAML file.

    A missing default settings file is not an error: defaults apply. A
    settings file named explicitly on the command line must exist.
    """

    DEFAULT_CONFIG_FILE = '.legacy-cleaner.yaml'

    KNOWN_FIELDS = {
        'paragraph_mode',
        'aggressive_whitespace',
        'convert_divs_to_paragraphs',
        'flatten_lists',
        'max_depth',
        'engine',
        'ai',
    }

    KNOWN_AI_FIELDS = {'model', 'temperature', 'timeout'}

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> CLISettings:
        """Load settings from a YAML file.

        Args:
            config_path: Explicit settings file; when None the default file
                in the working directory is used if present

        Returns:
            CLISettings with defaults applied for absent keys

        Raises:
            ConfigFilesystemError: If an explicit file cannot be read
            ConfigError: If the file is malformed or has invalid values
        """
        explicit = config_path is not None
        path = config_path if explicit else cls.DEFAULT_CONFIG_FILE

        if not explicit and not os.path.exists(path):
            logger.debug(f"No settings file at {path}, using defaults")
            return CLISettings()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise ConfigFilesystemError(path, 'read', 'Settings file not found')
        except PermissionError:
            raise ConfigFilesystemError(path, 'read', 'Permission denied')
        except OSError as e:
            raise ConfigFilesystemError(path, 'read', str(e))

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if config_dict is None:
            return CLISettings()

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Settings must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        logger.info(f"Loaded settings from {path}")
        return cls.parse(config_dict)

    @classmethod
    def parse(cls, config_dict: Dict[str, Any]) -> CLISettings:
        """Validate a settings dictionary and build CLISettings."""
        unknown = set(config_dict) - cls.KNOWN_FIELDS
        if unknown:
            logger.warning(f"Ignoring unknown settings: {', '.join(sorted(unknown))}")

        conversion = ConversionConfig(
            paragraph_mode=cls._parse_enum(config_dict, 'paragraph_mode', ParagraphMode, ParagraphMode.PARAGRAPHS),
            aggressive_whitespace=cls._parse_bool(config_dict, 'aggressive_whitespace', True),
            convert_divs_to_paragraphs=cls._parse_bool(config_dict, 'convert_divs_to_paragraphs', True),
            flatten_lists=cls._parse_bool(config_dict, 'flatten_lists', False),
            max_depth=cls._parse_positive_int(config_dict, 'max_depth', 200),
        )
        engine = cls._parse_enum(config_dict, 'engine', Engine, Engine.STANDARD)
        ai = cls._parse_ai(config_dict.get('ai'))
        return CLISettings(conversion=conversion, engine=engine, ai=ai)

    @classmethod
    def _parse_ai(cls, ai_dict: Any) -> AISettings:
        if ai_dict is None:
            return AISettings()
        if not isinstance(ai_dict, dict):
            raise ConfigError(
                f"must be a dictionary, got {type(ai_dict).__name__}", 'ai'
            )

        defaults = AISettings()
        model = ai_dict.get('model', defaults.model)
        if not isinstance(model, str) or not model.strip():
            raise ConfigError("must be a non-empty string", 'ai.model')

        temperature = ai_dict.get('temperature', defaults.temperature)
        timeout = ai_dict.get('timeout', defaults.timeout)
        for name, value in (('temperature', temperature), ('timeout', timeout)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(
                    f"must be a number, got {type(value).__name__}", f'ai.{name}'
                )
        if timeout <= 0:
            raise ConfigError("must be positive", 'ai.timeout')

        return AISettings(model=model.strip(), temperature=float(temperature), timeout=float(timeout))

    @staticmethod
    def _parse_bool(config_dict: Dict[str, Any], key: str, default: bool) -> bool:
        value = config_dict.get(key, default)
        if not isinstance(value, bool):
            raise ConfigError(f"must be true or false, got {value!r}", key)
        return value

    @staticmethod
    def _parse_positive_int(config_dict: Dict[str, Any], key: str, default: int) -> int:
        value = config_dict.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigError(f"must be a positive integer, got {value!r}", key)
        return value

    @staticmethod
    def _parse_enum(config_dict: Dict[str, Any], key: str, enum_cls, default):
        value = config_dict.get(key, default.value)
        try:
            return enum_cls(value)
        except ValueError:
            allowed = ', '.join(member.value for member in enum_cls)
            raise ConfigError(f"must be one of: {allowed}, got {value!r}", key)
