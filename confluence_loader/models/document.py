"""Normalized document data model."""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class Document:
    """Plain-text document produced from one Confluence page.

    Attributes:
        page_content: Normalized page text with code blocks fenced as markdown
        metadata: Page metadata (id, status, title, type, url, version,
            updated_by, updated_at), possibly merged or trimmed by the caller
    """
    page_content: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'pageContent': self.page_content,
            'metadata': self.metadata,
        }
