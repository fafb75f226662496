"""Exceptions raised by the document pipeline."""

from confluence_loader.confluence_client.errors import LoaderError


class MetadataError(LoaderError):
    """Raised when caller-supplied metadata cannot be used."""

    def __init__(self, message: str):
        super().__init__(f"Invalid metadata: {message}")
