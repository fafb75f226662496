"""Document pipeline: load, split, post-process metadata, render output.

run_pipeline reproduces what a host application does with the loader:
optionally split the loaded documents with a text splitter, merge or omit
metadata, then return either the documents or their concatenated text.
"""

import logging
from enum import Enum
from typing import Any, List, Optional, Protocol, Sequence, Union

from confluence_loader.models import Document
from .metadata import MetadataInput, OmitKeysInput, apply_metadata
from .pages_loader import ConfluencePagesLoader

logger = logging.getLogger(__name__)


class OutputMode(str, Enum):
    """Shape of the pipeline result."""
    DOCUMENT = 'document'
    TEXT = 'text'


class TextSplitter(Protocol):
    """Anything that can split documents into smaller documents."""

    def split_documents(self, documents: Sequence[Document]) -> List[Document]:
        ...


def handle_escape_characters(text: str, reverse: bool) -> str:
    """Escape newlines as literal \\n, or undo it when reverse is True."""
    if reverse:
        return text.replace('\\n', '\n')
    return text.replace('\n', '\\n')


def documents_to_text(documents: Sequence[Document]) -> str:
    """Join page contents, one newline after each, with newlines escaped."""
    text = ''.join(f"{doc.page_content}\n" for doc in documents)
    return handle_escape_characters(text, reverse=False)


def run_pipeline(
    loader: ConfluencePagesLoader,
    text_splitter: Optional[TextSplitter] = None,
    metadata: MetadataInput = None,
    omit_metadata_keys: OmitKeysInput = None,
    output: Union[OutputMode, str] = OutputMode.DOCUMENT,
    **load_options: Any,
) -> Union[List[Document], str]:
    """Load a space and shape the result.

    Args:
        loader: Configured pages loader
        text_splitter: Optional splitter applied after loading
        metadata: Extra metadata (dict or JSON string) for every document
        omit_metadata_keys: Default keys to drop, comma-separated or "*"
        output: OutputMode.DOCUMENT or OutputMode.TEXT
        **load_options: start / label / limit passed to loader.load()

    Returns:
        List of documents, or the concatenated text in TEXT mode

    Raises:
        MetadataError: If metadata is not a JSON object
        ValueError: If output is not a known mode
    """
    mode = OutputMode(output)

    documents = loader.load(**load_options)
    if text_splitter is not None:
        documents = text_splitter.split_documents(documents)
        logger.debug(f"Split into {len(documents)} documents")

    documents = apply_metadata(documents, metadata, omit_metadata_keys)

    if mode is OutputMode.DOCUMENT:
        return documents
    return documents_to_text(documents)
