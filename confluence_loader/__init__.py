"""Load Confluence spaces as plain-text documents.

Pages are fetched through the Confluence REST content search endpoint,
their storage-format bodies converted to text with code blocks kept as
fenced markdown, and each page returned as a Document with metadata.
"""

__version__ = "0.1.0"
