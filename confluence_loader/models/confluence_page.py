"""Confluence page data model."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class PageVersion:
    """Version information inlined with a page when `version` is expanded.

    Attributes:
        number: Version number
        when: ISO 8601 timestamp of the version
        by_display_name: Display name of the author of the version
    """
    number: Optional[int] = None
    when: Optional[str] = None
    by_display_name: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'PageVersion':
        by = data.get('by') or {}
        return cls(
            number=data.get('number'),
            when=data.get('when'),
            by_display_name=by.get('displayName'),
        )


@dataclass(frozen=True)
class ConfluencePage:
    """Confluence page as returned by the content search endpoint.

    A read-only snapshot of the API response; the loader never mutates it.

    Attributes:
        page_id: Unique identifier for the page
        title: Page title
        type: Content type (always "page" for the search this loader runs)
        status: Content status (e.g., "current")
        body_storage: Page body in Confluence storage format (XHTML)
        version: Version info, None when the API did not expand it
    """
    page_id: str
    title: str
    type: str
    status: str
    body_storage: str
    version: Optional[PageVersion] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'ConfluencePage':
        """Build a page from one entry of the search response `results`."""
        body = data.get('body') or {}
        storage = body.get('storage') or {}
        version = data.get('version')
        return cls(
            page_id=str(data.get('id', '')),
            title=data.get('title', ''),
            type=data.get('type', ''),
            status=data.get('status', ''),
            body_storage=storage.get('value') or '',
            version=PageVersion.from_api(version) if version else None,
        )


@dataclass
class SearchResponse:
    """One batch of the content search endpoint.

    Attributes:
        size: Number of results in this batch (0 ends pagination)
        results: Pages in API order
    """
    size: int
    results: List[ConfluencePage] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'SearchResponse':
        results = [ConfluencePage.from_api(item) for item in data.get('results') or []]
        size = data.get('size')
        if size is None:
            size = len(results)
        return cls(size=int(size), results=results)
