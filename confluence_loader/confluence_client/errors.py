"""Typed exception hierarchy for Confluence-related errors.

This module defines the custom exceptions raised by the Confluence client.
All exceptions inherit from LoaderError so callers can catch every
application-level failure in one place, and carry enough context to debug
a failed fetch without ever including credentials.
"""

from typing import Optional


class LoaderError(Exception):
    """Base exception for all confluence-loader errors.

    Use this to catch any application-level error from the loader.
    """
    pass


class ConfluenceError(LoaderError):
    """Base exception for all Confluence-related errors."""
    pass


class InvalidCredentialsError(ConfluenceError):
    """Raised when the supplied credentials cannot form a usable auth header."""

    def __init__(self, reason: str, endpoint: Optional[str] = None):
        message = f"Invalid Confluence credentials: {reason}"
        if endpoint:
            message += f" (endpoint: {endpoint})"
        super().__init__(message)
        self.reason = reason
        self.endpoint = endpoint


class FetchError(ConfluenceError):
    """Raised when a Confluence request keeps failing after all retries.

    Attributes:
        url: The URL that was requested
        attempts: Number of attempts made before giving up
        status_code: HTTP status of the last response (None for transport errors)
        cause: The last underlying exception, if any
    """

    def __init__(
        self,
        url: str,
        attempts: int,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        if status_code is not None:
            detail = f"HTTP {status_code}"
        elif cause is not None:
            detail = f"{type(cause).__name__}: {cause}"
        else:
            detail = "unknown error"
        super().__init__(
            f"Failed to fetch {url} from Confluence (retry: {attempts}): {detail}"
        )
        self.url = url
        self.attempts = attempts
        self.status_code = status_code
        self.cause = cause
