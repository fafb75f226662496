"""Confluence client library for the page loader.

This package wraps the Confluence REST content search endpoint: credential
resolution, retries, and offset pagination.
"""

from .auth import Authenticator, Credentials, resolve_credentials
from .errors import (
    LoaderError,
    ConfluenceError,
    InvalidCredentialsError,
    FetchError,
)
from .page_fetcher import PageFetcher

__all__ = [
    "Authenticator",
    "Credentials",
    "resolve_credentials",
    "LoaderError",
    "ConfluenceError",
    "InvalidCredentialsError",
    "FetchError",
    "PageFetcher",
]
