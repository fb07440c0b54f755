"""Retry logic for throttled or overloaded Gemini requests.

Gemini answers HTTP 429 (RESOURCE_EXHAUSTED) when a quota is used up and
HTTP 503 (UNAVAILABLE) when the model is overloaded. Both are retried up to
3 times. The wait is the exponential backoff (1s, 2s, 4s) or the delay the
service asked for, whichever is longer, capped at MAX_WAIT_SECONDS. Every
other error fails fast.
"""

import logging
import time
from typing import Callable, TypeVar

from .errors import AIAccessError, AIRequestError

logger = logging.getLogger(__name__)

T = TypeVar('T')

MAX_RETRIES = 3
MAX_WAIT_SECONDS = 60.0
RETRYABLE_STATUS_CODES = frozenset({429, 503})


def retry_on_rate_limit(func: Callable[..., T], *args, **kwargs) -> T:
    """Call func, retrying throttled or overloaded requests.

    Args:
        func: Request function raising AIRequestError on failure
        *args: Positional arguments to pass to the function
        **kwargs: Keyword arguments to pass to the function

    Returns:
        The return value of the function

    Raises:
        AIAccessError: If the service is still throttling after 3 retries
        AIRequestError: Any other request failure, without retry
    """
    for retry_num in range(MAX_RETRIES + 1):
        try:
            return func(*args, **kwargs)
        except AIRequestError as e:
            if not is_retryable(e):
                raise

            if retry_num >= MAX_RETRIES:
                logger.error(
                    f"Generative service still unavailable after {MAX_RETRIES} retries, giving up"
                )
                raise AIAccessError() from e

            wait_time = backoff_seconds(e, retry_num)
            logger.info(
                f"{e}; retrying in {wait_time:g}s (retry {retry_num + 1}/{MAX_RETRIES})"
            )
            time.sleep(wait_time)

    raise AIAccessError()


def is_retryable(error: AIRequestError) -> bool:
    """Whether a failed request is worth repeating."""
    if error.status_code in RETRYABLE_STATUS_CODES:
        return True
    # Quota errors relayed without a status code
    return 'resource_exhausted' in str(error).lower()


def backoff_seconds(error: AIRequestError, retry_num: int) -> float:
    """Seconds to wait before retry number ``retry_num + 1``."""
    wait_time = float(2 ** retry_num)
    if error.retry_delay is not None:
        wait_time = max(wait_time, error.retry_delay)
    return min(wait_time, MAX_WAIT_SECONDS)
