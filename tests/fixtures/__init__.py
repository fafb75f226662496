"""Test fixtures for the Confluence loader.

This module provides:
- Sample Confluence storage-format page bodies
- Builders for mocked content search responses
"""

from .sample_pages import (
    SAMPLE_PAGE_SIMPLE,
    SAMPLE_PAGE_SIMPLE_TEXT,
    SAMPLE_PAGE_WITH_CODE_MACRO,
    SAMPLE_PAGE_WITH_CODE_BLOCKS,
    SAMPLE_PAGE_WITH_ATTACHMENTS,
    SAMPLE_PAGE_WITH_MACROS,
    SAMPLE_PAGE_WITH_TABLES,
    SAMPLE_PAGE_COMPLEX,
)
from .api_responses import (
    BASE_URL,
    SPACE_KEY,
    make_page,
    make_batch,
    make_response,
    make_session,
)

__all__ = [
    "SAMPLE_PAGE_SIMPLE",
    "SAMPLE_PAGE_SIMPLE_TEXT",
    "SAMPLE_PAGE_WITH_CODE_MACRO",
    "SAMPLE_PAGE_WITH_CODE_BLOCKS",
    "SAMPLE_PAGE_WITH_ATTACHMENTS",
    "SAMPLE_PAGE_WITH_MACROS",
    "SAMPLE_PAGE_WITH_TABLES",
    "SAMPLE_PAGE_COMPLEX",
    "BASE_URL",
    "SPACE_KEY",
    "make_page",
    "make_batch",
    "make_response",
    "make_session",
]
