"""Typed exception hierarchy for the generative cleanup client.

All exceptions inherit from AIClientError so callers can handle any
failure of the optional AI path with a single except clause.
"""

from typing import Optional

from legacy_cleaner.errors import CleanerError


class AIClientError(CleanerError):
    """Base exception for all generative cleanup errors."""
    pass


class MissingAPIKeyError(AIClientError):
    """Raised when no API key is configured for the generative service."""

    def __init__(self, variables: tuple):
        super().__init__(
            f"API key is missing (set one of: {', '.join(variables)})"
        )
        self.variables = variables


class AIRequestError(AIClientError):
    """Raised when a request to the generative service fails.

    Attributes:
        status_code: HTTP status of the response, if one was received
        retry_delay: Seconds the service asked the caller to wait, if any
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        retry_delay: Optional[float] = None,
    ):
        if status_code is not None:
            message = f"{message} (HTTP {status_code})"
        super().__init__(message)
        self.status_code = status_code
        self.retry_delay = retry_delay


class AIAccessError(AIClientError):
    """Raised when throttling or overload persists after retries."""

    def __init__(self, message: str = "Generative service failure (after 3 retries)"):
        super().__init__(message)
