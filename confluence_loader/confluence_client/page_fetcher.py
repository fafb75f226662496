"""Page fetcher for the Confluence content search REST endpoint.

This module walks the offset-paginated results of a CQL space search using
requests, retrying transient failures through retry_logic. It is strict:
any batch that cannot be fetched fails the whole walk, so callers never see
a partial result set.
"""

import logging
from typing import Dict, List, Optional
from urllib.parse import quote

import requests

from confluence_loader.models import ConfluencePage, SearchResponse
from .auth import Credentials
from .retry_logic import AttemptFailed, DEFAULT_MAX_RETRIES, retry_on_failure

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 25
DEFAULT_EXPAND = 'body.storage,version'
SEARCH_PATH = '/rest/api/content/search'


class PageFetcher:
    """Fetches every page of a Confluence space, optionally filtered by label.

    The Authorization header is resolved once at construction time from the
    given credentials: a personal access token (bearer) wins over a
    username + access token pair (basic); with neither, requests are
    anonymous.

    Example:
        >>> fetcher = PageFetcher(
        ...     base_url="https://example.atlassian.net/wiki",
        ...     space_key="TEAM",
        ...     credentials=Credentials(username="me@example.com", access_token="..."),
        ... )
        >>> pages = fetcher.fetch_all()
    """

    def __init__(
        self,
        base_url: str,
        space_key: str,
        credentials: Optional[Credentials] = None,
        label: Optional[str] = None,
        limit: Optional[int] = DEFAULT_LIMIT,
        expand: Optional[str] = DEFAULT_EXPAND,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_backoff: float = 0.0,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the fetcher.

        Args:
            base_url: Confluence base URL (e.g., https://example.atlassian.net/wiki)
            space_key: Key of the space to search
            credentials: Credentials to authenticate with (None for anonymous)
            label: Default label filter
            limit: Default page size per request (0 or None means 25)
            expand: Page fields to inline in the response
            max_retries: Total attempts per request
            retry_backoff: Base wait in seconds between attempts
            timeout: Per-request timeout passed to requests (None waits forever)
            session: Optional requests session to reuse
        """
        self.base_url = base_url.rstrip('/')
        self.space_key = space_key
        self.label = label
        self.limit = limit or DEFAULT_LIMIT
        self.expand = expand or DEFAULT_EXPAND
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff
        self.timeout = timeout
        self._authorization_header = (credentials or Credentials()).authorization_header()
        self._session = session
        # a session passed in by the caller stays open on close()
        self._owns_session = session is None

    def __enter__(self) -> 'PageFetcher':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def authorization_header(self) -> Optional[str]:
        """The resolved Authorization header value, or None."""
        return self._authorization_header

    def _get_session(self) -> requests.Session:
        """Get or lazily create the HTTP session."""
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
        return self._session

    def close(self) -> None:
        """Close the HTTP session if this fetcher created it."""
        if self._session is not None and self._owns_session:
            logger.debug("Closing HTTP session")
            self._session.close()
            self._session = None

    def _headers(self) -> Dict[str, str]:
        headers = {
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }
        if self._authorization_header:
            headers['Authorization'] = self._authorization_header
        return headers

    def build_search_url(self, start: int = 0, label: Optional[str] = None,
                         limit: Optional[int] = None) -> str:
        """Build the CQL search URL for one batch.

        Args:
            start: Offset of the first result
            label: Label filter (None for all pages)
            limit: Batch size (None for the fetcher default)

        Returns:
            str: Fully encoded request URL
        """
        cql = f"space={quote(self.space_key, safe='~')}+AND+type=page"
        if label:
            cql += f"+AND+label={quote(label, safe='')}"
        return (
            f"{self.base_url}{SEARCH_PATH}?cql={cql}"
            f"&limit={limit or self.limit}&start={start}"
            f"&expand={quote(self.expand, safe=',.')}"
        )

    def fetch_confluence_data(self, url: str) -> SearchResponse:
        """Fetch and decode one batch, retrying failed attempts.

        A non-2xx status, a transport error, or a body that is not valid JSON
        each count as one failed attempt.

        Args:
            url: Search URL built by build_search_url

        Returns:
            SearchResponse: Decoded batch

        Raises:
            FetchError: If all max_retries attempts failed
        """
        def attempt() -> SearchResponse:
            logger.debug(f"GET {url}")
            response = self._get_session().get(
                url, headers=self._headers(), timeout=self.timeout
            )
            if not response.ok:
                raise AttemptFailed(
                    f"Failed to fetch {url} from Confluence: {response.status_code}",
                    status_code=response.status_code,
                )
            return SearchResponse.from_api(response.json())

        return retry_on_failure(
            attempt,
            url,
            max_retries=self.max_retries,
            backoff_factor=self.retry_backoff,
        )

    def fetch_all(self, start: int = 0, label: Optional[str] = None,
                  limit: Optional[int] = None) -> List[ConfluencePage]:
        """Fetch every page of the space, following the start offset.

        The offset advances by the size of each batch; a batch of size 0 ends
        the walk. Results keep the API order.

        Args:
            start: Initial offset
            label: Label filter (None for the fetcher default)
            limit: Batch size (None for the fetcher default)

        Returns:
            List[ConfluencePage]: All matching pages

        Raises:
            FetchError: If any batch could not be fetched
        """
        label = label if label is not None else self.label
        limit = limit or self.limit
        offset = start or 0
        pages: List[ConfluencePage] = []

        while True:
            batch = self.fetch_confluence_data(self.build_search_url(offset, label, limit))
            if batch.size == 0:
                break
            pages.extend(batch.results)
            offset += batch.size
            logger.debug(f"Fetched {batch.size} pages (next start={offset})")

        logger.info(f"Fetched {len(pages)} pages from space {self.space_key}")
        return pages
