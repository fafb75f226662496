"""Data models for Confluence pages and normalized documents."""

from confluence_loader.models.confluence_page import ConfluencePage, PageVersion, SearchResponse
from confluence_loader.models.document import Document

__all__ = ['ConfluencePage', 'PageVersion', 'SearchResponse', 'Document']
