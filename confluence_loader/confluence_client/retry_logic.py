"""Retry logic for transient Confluence API failures.

Every failed attempt counts toward a fixed attempt budget. By default
attempts are retried immediately; a backoff factor switches on exponential
waits (factor, 2*factor, 4*factor, ...).
"""

import time
import logging
from typing import Callable, Optional, TypeVar

from .errors import FetchError

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_MAX_RETRIES = 5


class AttemptFailed(Exception):
    """Raised by a single attempt to mark it as retryable.

    Attributes:
        status_code: HTTP status of the failed response, if there was one
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def retry_on_failure(
    func: Callable[[], T],
    url: str,
    max_retries: int = DEFAULT_MAX_RETRIES,
    backoff_factor: float = 0.0,
) -> T:
    """Call func until it succeeds or the attempt budget is spent.

    Any exception raised by func is treated as transient. max_retries is the
    total number of attempts, so max_retries=5 means one call plus up to four
    retries.

    Args:
        func: Zero-argument callable performing one attempt
        url: URL being fetched (used for logging and the final error)
        max_retries: Total number of attempts (values below 1 mean 1)
        backoff_factor: Base wait in seconds between attempts, 0 for none

    Returns:
        The return value of the first successful attempt

    Raises:
        FetchError: If every attempt failed

    Example:
        >>> data = retry_on_failure(lambda: fetch(url), url, max_retries=3)
    """
    attempts = max(1, max_retries)
    last_error: Optional[BaseException] = None

    for attempt in range(1, attempts + 1):
        try:
            return func()
        except Exception as e:
            last_error = e

            if attempt >= attempts:
                break

            wait_time = backoff_factor * (2 ** (attempt - 1))
            logger.warning(
                f"Attempt {attempt}/{attempts} for {url} failed: {e}. Retrying..."
            )
            if wait_time > 0:
                time.sleep(wait_time)

    logger.error(f"Giving up on {url} after {attempts} attempts")
    status_code = getattr(last_error, 'status_code', None)
    raise FetchError(
        url=url,
        attempts=attempts,
        status_code=status_code,
        cause=last_error,
    ) from last_error
