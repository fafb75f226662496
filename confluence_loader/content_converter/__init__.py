"""Content conversion module for storage format → plain text.

This module provides the DocumentNormalizer that turns Confluence pages into
plain-text documents, along with its building blocks.
"""

from .document_normalizer import DocumentNormalizer
from .macro_extractor import CodeBlock, MacroExtractor, ATTACHMENT_TOKEN
from .text_converter import PlainTextConverter, html_to_text

__all__ = [
    'DocumentNormalizer',
    'CodeBlock',
    'MacroExtractor',
    'ATTACHMENT_TOKEN',
    'PlainTextConverter',
    'html_to_text',
]
