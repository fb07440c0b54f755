"""Optional generative cleanup path (Gemini REST API).

Provides the AI-based alternative to the rule-based engine. Its output is
not verified against the legacy dialect.
"""

from .auth import Authenticator
from .errors import AIAccessError, AIClientError, AIRequestError, MissingAPIKeyError
from .gemini_client import AISettings, GeminiCleaner, clean_with_ai
from .prompt import build_system_prompt

__all__ = [
    'Authenticator',
    'AIAccessError',
    'AIClientError',
    'AIRequestError',
    'MissingAPIKeyError',
    'AISettings',
    'GeminiCleaner',
    'clean_with_ai',
    'build_system_prompt',
]
