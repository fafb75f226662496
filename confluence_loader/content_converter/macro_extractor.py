"""Structured macro handling for Confluence storage format.

This module provides the MacroExtractor class which prepares storage-format
XHTML for plain-text conversion:

1. Attachment and view-file macros are replaced with an [ATTACHMENT] token.
2. Code macros are pulled out into CodeBlock objects and replaced with
   CODE_BLOCK_<index> placeholders, so that text conversion cannot touch the
   code's whitespace. The blocks are put back afterwards as fenced markdown.

Macros that do not match either shape are left in the tree untouched.
"""

import html
import logging
import re
from dataclasses import dataclass
from typing import List, Tuple

from bs4 import BeautifulSoup, NavigableString

logger = logging.getLogger(__name__)

ATTACHMENT_MACROS = ('attachments', 'view-file')
ATTACHMENT_TOKEN = '[ATTACHMENT]'
CODE_MACROS = ('code', 'noformat')
CODE_PLACEHOLDER = 'CODE_BLOCK_{index}'

_CDATA_PATTERN = re.compile(r'<!\[CDATA\[(.*?)\]\]>', re.DOTALL)


@dataclass
class CodeBlock:
    """A code macro lifted out of a page body.

    Attributes:
        language: Value of the macro's language parameter ('' if absent)
        code: Macro body with surrounding whitespace stripped
    """

    language: str
    code: str

    def to_markdown(self) -> str:
        """Render as a fenced markdown block."""
        return f"```{self.language}\n{self.code}\n```"


def placeholder_for(index: int) -> str:
    return CODE_PLACEHOLDER.format(index=index)


class MacroExtractor:
    """Replaces attachment macros and extracts code macros from XHTML.

    CDATA sections are decoded to escaped text before parsing, so the code
    bodies come back verbatim from get_text() regardless of how the parser
    treats CDATA.
    """

    def __init__(self):
        """Initialize MacroExtractor."""
        # html.parser honours self-closing <ac:structured-macro ... /> tags
        self.parser = "html.parser"

    def parse(self, xhtml: str) -> BeautifulSoup:
        """Parse storage-format XHTML into a soup with CDATA decoded."""
        decoded = _CDATA_PATTERN.sub(
            lambda match: html.escape(match.group(1), quote=False), xhtml or ""
        )
        return BeautifulSoup(decoded, self.parser)

    def replace_attachments(self, soup: BeautifulSoup) -> int:
        """Replace attachments/view-file macros with the [ATTACHMENT] token.

        Returns:
            Number of macros replaced
        """
        count = 0
        for macro in list(soup.find_all("ac:structured-macro")):
            if macro.get("ac:name") in ATTACHMENT_MACROS:
                macro.replace_with(NavigableString(ATTACHMENT_TOKEN))
                count += 1
        return count

    def extract_code_blocks(self, soup: BeautifulSoup) -> List[CodeBlock]:
        """Replace code macros with placeholders and return their contents.

        A macro counts as a code block when it has a plain-text body and
        either a language parameter or a code/noformat macro name. The
        placeholder for block N is CODE_BLOCK_N on a line of its own.

        Returns:
            Code blocks in document order
        """
        blocks: List[CodeBlock] = []
        for macro in list(soup.find_all("ac:structured-macro")):
            body = macro.find("ac:plain-text-body", recursive=False)
            if body is None:
                continue

            language_param = macro.find(
                "ac:parameter", attrs={"ac:name": "language"}, recursive=False
            )
            if language_param is None and macro.get("ac:name") not in CODE_MACROS:
                continue

            language = language_param.get_text().strip() if language_param else ""
            placeholder = placeholder_for(len(blocks))
            blocks.append(CodeBlock(language=language, code=body.get_text().strip()))
            macro.replace_with(NavigableString(f"\n{placeholder}\n"))

        return blocks

    def process(self, xhtml: str) -> Tuple[BeautifulSoup, List[CodeBlock]]:
        """Run both passes over a page body.

        Args:
            xhtml: Confluence storage-format XHTML

        Returns:
            Tuple of (soup with tokens and placeholders, extracted code blocks)
        """
        soup = self.parse(xhtml)
        attachments = self.replace_attachments(soup)
        blocks = self.extract_code_blocks(soup)
        logger.debug(f"Replaced {attachments} attachment macros, extracted {len(blocks)} code blocks")
        return soup, blocks
