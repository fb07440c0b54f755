"""Authentication module for loading the generative service API key.

The key is read from environment variables, optionally populated from a
.env file with python-dotenv. It is never cached or logged.
"""

import os
from typing import Optional

from dotenv import load_dotenv

from .errors import MissingAPIKeyError

# Checked in order; API_KEY is the name the browser build used
API_KEY_VARIABLES = ('GEMINI_API_KEY', 'API_KEY')


class Authenticator:
    """Loads and validates the API key from environment variables.

    Example:
        >>> auth = Authenticator()
        >>> key = auth.get_api_key()
    """

    def __init__(self, explicit_key: Optional[str] = None):
        """Load environment variables from a .env file.

        Args:
            explicit_key: Key supplied directly (e.g. from a CLI option);
                takes precedence over the environment
        """
        load_dotenv()
        self._explicit_key = explicit_key

    def get_api_key(self) -> str:
        """Get the API key.

        Returns:
            The configured API key

        Raises:
            MissingAPIKeyError: If no key is configured
        """
        if self._explicit_key:
            return self._explicit_key
        for name in API_KEY_VARIABLES:
            value = os.getenv(name)
            if value:
                return value
        raise MissingAPIKeyError(API_KEY_VARIABLES)
