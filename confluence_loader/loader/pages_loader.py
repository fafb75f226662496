"""Best-effort loader for all pages of a Confluence space.

ConfluencePagesLoader ties the PageFetcher and the DocumentNormalizer
together. Unlike the fetcher, load() does not raise on fetch failures: the
error is logged and an empty list is returned.
"""

import logging
from typing import List, Optional

import requests

from confluence_loader.confluence_client.auth import Credentials
from confluence_loader.confluence_client.errors import ConfluenceError
from confluence_loader.confluence_client.page_fetcher import (
    DEFAULT_EXPAND,
    DEFAULT_LIMIT,
    PageFetcher,
)
from confluence_loader.confluence_client.retry_logic import DEFAULT_MAX_RETRIES
from confluence_loader.content_converter import DocumentNormalizer
from confluence_loader.models import Document

logger = logging.getLogger(__name__)


class ConfluencePagesLoader:
    """Loads the pages of a Confluence space as plain-text Documents.

    Example:
        >>> loader = ConfluencePagesLoader(
        ...     base_url="https://example.atlassian.net/wiki",
        ...     space_key="~EXAMPLE362906de5d343d49dcdbae5dEXAMPLE",
        ...     username="your-username",
        ...     access_token="your-access-token",
        ... )
        >>> documents = loader.load()
    """

    def __init__(
        self,
        base_url: str,
        space_key: str,
        username: Optional[str] = None,
        access_token: Optional[str] = None,
        personal_access_token: Optional[str] = None,
        label: Optional[str] = None,
        limit: Optional[int] = DEFAULT_LIMIT,
        expand: Optional[str] = DEFAULT_EXPAND,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_backoff: float = 0.0,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the loader.

        Args:
            base_url: Confluence base URL
            space_key: Key of the space to load
            username: Confluence Cloud username (used with access_token)
            access_token: Confluence Cloud API token
            personal_access_token: Server / Data Center token (takes precedence)
            label: Only load pages carrying this label
            limit: Page size per request
            expand: Page fields to inline; see
                https://developer.atlassian.com/server/confluence/expansions-in-the-rest-api/
            max_retries: Total attempts per request
            retry_backoff: Base wait in seconds between attempts
            timeout: Per-request timeout in seconds (None for no timeout)
            session: Optional requests session to reuse
        """
        self.base_url = base_url
        self.space_key = space_key
        self.label = label
        self.credentials = Credentials(
            username=username,
            access_token=access_token,
            personal_access_token=personal_access_token,
        )
        self.fetcher = PageFetcher(
            base_url=base_url,
            space_key=space_key,
            credentials=self.credentials,
            label=label,
            limit=limit,
            expand=expand,
            max_retries=max_retries,
            retry_backoff=retry_backoff,
            timeout=timeout,
            session=session,
        )
        self.normalizer = DocumentNormalizer(base_url=base_url, space_key=space_key)

    def __enter__(self) -> 'ConfluencePagesLoader':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Release the fetcher's HTTP session; the loader can still load again."""
        self.fetcher.close()

    @property
    def limit(self) -> int:
        return self.fetcher.limit

    @property
    def max_retries(self) -> int:
        return self.fetcher.max_retries

    def load(self, start: Optional[int] = None, label: Optional[str] = None,
             limit: Optional[int] = None) -> List[Document]:
        """Fetch every page in the space and convert each to a Document.

        Fetch errors are logged and swallowed, so an empty list means either
        an empty space or a failed fetch.

        Args:
            start: Initial offset (default 0)
            label: Label filter overriding the loader's own
            limit: Page size overriding the loader's own

        Returns:
            List[Document]: One document per page, in API order
        """
        try:
            pages = self.fetcher.fetch_all(start=start or 0, label=label, limit=limit)
        except ConfluenceError as e:
            logger.error(f"Error loading Confluence space {self.space_key}: {e}")
            return []

        documents = [self.normalizer.to_document(page) for page in pages]
        logger.info(f"Loaded {len(documents)} documents from space {self.space_key}")
        return documents
