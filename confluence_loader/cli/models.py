"""Data models for CLI operations."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional, Union

from confluence_loader.confluence_client.page_fetcher import DEFAULT_EXPAND, DEFAULT_LIMIT
from confluence_loader.confluence_client.retry_logic import DEFAULT_MAX_RETRIES


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): Config issues, invalid options or metadata
    - AUTH_ERROR (3): Credentials could not be resolved
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 3


@dataclass
class LoaderConfig:
    """Settings for one load run.

    Credentials are not part of the config file; they come from the
    environment (see Authenticator).

    Attributes:
        base_url: Confluence base URL (e.g., https://example.atlassian.net/wiki)
        space_key: Space to load
        label: Optional label filter
        limit: Page size per request
        start: Initial offset
        expand: Page fields to inline in search results
        max_retries: Total attempts per request
        retry_backoff: Base wait in seconds between attempts
        request_timeout: Per-request timeout in seconds (None for none)
        output: "document" or "text"
        metadata: Extra metadata merged into every document
        omit_metadata_keys: Comma-separated default keys to drop, or "*"
    """
    base_url: str
    space_key: str
    label: Optional[str] = None
    limit: int = DEFAULT_LIMIT
    start: int = 0
    expand: str = DEFAULT_EXPAND
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_backoff: float = 0.0
    request_timeout: Optional[float] = None
    output: str = 'document'
    metadata: Optional[Union[str, Dict[str, Any]]] = None
    omit_metadata_keys: Optional[str] = None
