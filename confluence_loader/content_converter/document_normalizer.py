"""Conversion of Confluence pages into plain-text documents.

The DocumentNormalizer runs a fixed pipeline over a page body:

1. attachments/view-file macros become [ATTACHMENT]
2. code macros are swapped for CODE_BLOCK_<n> placeholders
3. the remaining XHTML is converted to plain text
4. code blocks are reinserted as fenced markdown
5. blank lines are removed

and attaches the page metadata. It performs no I/O and never raises on
malformed macro markup.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from confluence_loader.models import ConfluencePage, Document
from .macro_extractor import CodeBlock, MacroExtractor, placeholder_for
from .text_converter import PlainTextConverter

logger = logging.getLogger(__name__)

_BLANK_LINES = re.compile(r'^\s*[\r\n]', re.MULTILINE)


class DocumentNormalizer:
    """Maps ConfluencePage snapshots to Documents.

    Example:
        >>> normalizer = DocumentNormalizer("https://example.atlassian.net/wiki", "TEAM")
        >>> doc = normalizer.to_document(page)
        >>> doc.metadata["url"]
        'https://example.atlassian.net/wiki/spaces/TEAM/pages/123'
    """

    def __init__(
        self,
        base_url: str,
        space_key: str,
        text_converter: Optional[PlainTextConverter] = None,
        macro_extractor: Optional[MacroExtractor] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.space_key = space_key
        self.text_converter = text_converter or PlainTextConverter(
            wordwrap=None, preserve_newlines=True
        )
        self.macro_extractor = macro_extractor or MacroExtractor()

    def page_url(self, page: ConfluencePage) -> str:
        return f"{self.base_url}/spaces/{self.space_key}/pages/{page.page_id}"

    def to_text(self, xhtml: str) -> str:
        """Convert a storage-format body to normalized plain text.

        Args:
            xhtml: Confluence storage-format XHTML

        Returns:
            Text with fenced code blocks and no blank lines
        """
        soup, code_blocks = self.macro_extractor.process(xhtml)
        text = self.text_converter.convert(soup)
        text = self._reinsert_code_blocks(text, code_blocks)
        return _BLANK_LINES.sub('', text)

    def _reinsert_code_blocks(self, text: str, code_blocks: List[CodeBlock]) -> str:
        for index, block in enumerate(code_blocks):
            # (?!\d) keeps CODE_BLOCK_1 from matching CODE_BLOCK_10
            pattern = re.escape(placeholder_for(index)) + r'(?!\d)'
            fenced = block.to_markdown()
            text, replaced = re.subn(pattern, lambda _: fenced, text, count=1)
            if not replaced:
                logger.warning(f"Placeholder for code block {index} was lost during conversion")
        return text

    def build_metadata(self, page: ConfluencePage) -> Dict[str, Any]:
        version = page.version
        return {
            'id': page.page_id,
            'status': page.status,
            'title': page.title,
            'type': page.type,
            'url': self.page_url(page),
            'version': version.number if version else None,
            'updated_by': version.by_display_name if version else None,
            'updated_at': version.when if version else None,
        }

    def to_document(self, page: ConfluencePage) -> Document:
        """Create a Document from a page.

        Args:
            page: Page snapshot from the fetcher

        Returns:
            Document: Normalized text plus default metadata
        """
        return Document(
            page_content=self.to_text(page.body_storage),
            metadata=self.build_metadata(page),
        )
