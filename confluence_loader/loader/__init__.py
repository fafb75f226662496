"""Loader for Confluence spaces.

This package provides the best-effort ConfluencePagesLoader and the document
pipeline that splits documents, post-processes their metadata and renders
the requested output.
"""

from .errors import MetadataError
from .metadata import apply_metadata, omit_keys, parse_metadata, parse_omit_keys
from .pages_loader import ConfluencePagesLoader
from .pipeline import (
    OutputMode,
    TextSplitter,
    documents_to_text,
    handle_escape_characters,
    run_pipeline,
)

__all__ = [
    'ConfluencePagesLoader',
    'MetadataError',
    'OutputMode',
    'TextSplitter',
    'apply_metadata',
    'documents_to_text',
    'handle_escape_characters',
    'omit_keys',
    'parse_metadata',
    'parse_omit_keys',
    'run_pipeline',
]
