"""Generative cleanup through the Gemini ``generateContent`` REST API.

This is the optional, non-deterministic alternative to the rule-based
engine. The model is instructed to produce the legacy dialect, but its
output is returned as-is: callers choosing this path accept a weaker
guarantee than ``clean_html`` gives.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import requests
from requests.exceptions import ConnectionError, Timeout

from legacy_cleaner.models import (
    ConversionConfig,
    ConversionFailure,
    ConversionResult,
    ConversionSuccess,
    ErrorKind,
    ProcessingStats,
)

from .auth import Authenticator
from .errors import AIClientError, AIRequestError
from .prompt import build_system_prompt
from .retry_logic import RETRYABLE_STATUS_CODES, retry_on_rate_limit

logger = logging.getLogger(__name__)

API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash"

# Retry-After seconds, or a google.rpc.RetryInfo duration such as "19s" or "0.5s"
_DELAY_SECONDS = re.compile(r"(\d+(?:\.\d+)?)s?")


@dataclass(frozen=True)
class AISettings:
    """Settings for the generative cleanup path.

    Attributes:
        model: Gemini model name
        temperature: Sampling temperature (low for repeatable output)
        timeout: Request timeout in seconds
    """
    model: str = DEFAULT_MODEL
    temperature: float = 0.1
    timeout: float = 60.0


class GeminiCleaner:
    """Sends markup to Gemini with the legacy-dialect instructions.

    Example:
        >>> cleaner = GeminiCleaner(Authenticator())
        >>> html = cleaner.clean("<span style='font-weight:bold'>Hi</span>", ConversionConfig())
    """

    def __init__(
        self,
        authenticator: Authenticator,
        settings: Optional[AISettings] = None,
        session: Optional[requests.Session] = None,
    ):
        self._authenticator = authenticator
        self.settings = settings or AISettings()
        self._session = session or requests.Session()

    def clean(self, markup: str, config: ConversionConfig) -> str:
        """Ask the model to convert markup into the legacy dialect.

        Args:
            markup: Raw input markup or text
            config: Conversion settings (only paragraph mode is used)

        Returns:
            The model's trimmed output

        Raises:
            MissingAPIKeyError: If no API key is configured
            AIRequestError: If the request fails or the response is unusable
            AIAccessError: If rate limiting persists after retries
        """
        api_key = self._authenticator.get_api_key()
        payload = self._build_payload(markup, config)
        logger.info(f"Requesting generative cleanup from {self.settings.model}")
        data = retry_on_rate_limit(self._post, api_key, payload)
        return self._extract_text(data).strip()

    def _build_payload(self, markup: str, config: ConversionConfig) -> Dict[str, Any]:
        return {
            'system_instruction': {
                'parts': [{'text': build_system_prompt(config)}],
            },
            'contents': [
                {'role': 'user', 'parts': [{'text': markup}]},
            ],
            'generationConfig': {
                'temperature': self.settings.temperature,
            },
        }

    def _post(self, api_key: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{API_BASE_URL}/models/{self.settings.model}:generateContent"
        try:
            response = self._session.post(
                url,
                json=payload,
                headers={'x-goog-api-key': api_key},
                timeout=self.settings.timeout,
            )
        except Timeout as e:
            raise AIRequestError(
                f"Generative service timed out (>{self.settings.timeout:g}s)"
            ) from e
        except ConnectionError as e:
            raise AIRequestError("Generative service is unreachable") from e

        if response.status_code >= 400:
            retry_delay = None
            if response.status_code in RETRYABLE_STATUS_CODES:
                retry_delay = _retry_delay(response)
            raise AIRequestError(
                "Generative service request failed", response.status_code, retry_delay
            )

        try:
            return response.json()
        except ValueError as e:
            raise AIRequestError("Generative service returned invalid JSON") from e

    def _extract_text(self, data: Dict[str, Any]) -> str:
        candidates = data.get('candidates') or []
        if not candidates:
            feedback = data.get('promptFeedback', {}).get('blockReason')
            reason = f" (blocked: {feedback})" if feedback else ""
            raise AIRequestError(f"Generative service returned no candidates{reason}")

        parts = (candidates[0].get('content') or {}).get('parts') or []
        return ''.join(part.get('text', '') for part in parts)


def _retry_delay(response: requests.Response) -> Optional[float]:
    """Wait the service asked for, from Retry-After or the error's RetryInfo."""
    match = _DELAY_SECONDS.fullmatch((response.headers.get('Retry-After') or '').strip())
    if match:
        return float(match.group(1))

    try:
        body = response.json()
    except ValueError:
        return None
    error = body.get('error') if isinstance(body, dict) else None
    details = error.get('details') if isinstance(error, dict) else None
    for detail in details or []:
        delay = detail.get('retryDelay') if isinstance(detail, dict) else None
        match = _DELAY_SECONDS.fullmatch(delay) if isinstance(delay, str) else None
        if match:
            return float(match.group(1))
    return None


def clean_with_ai(
    raw: Union[str, bytes],
    config: ConversionConfig,
    cleaner: GeminiCleaner,
) -> ConversionResult:
    """Run the generative cleanup path and wrap it in a ConversionResult.

    Only lengths are reported in the stats: the model does not report what
    it removed. Never raises.
    """
    markup = raw.decode('utf-8', errors='replace') if isinstance(raw, bytes) else raw
    try:
        html = cleaner.clean(markup, config)
    except AIClientError as e:
        logger.error(f"Generative cleanup failed: {e}")
        return ConversionFailure(str(e), ErrorKind.UNEXPECTED_FAILURE)

    return ConversionSuccess(
        html=html,
        stats=ProcessingStats(original_length=len(markup), final_length=len(html)),
    )
