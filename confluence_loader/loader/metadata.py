"""Metadata post-processing for loaded documents.

Callers can merge extra metadata into every document and drop some or all of
the default keys. Omit keys are given as a comma-separated string or a list;
"*" drops every default key, and dotted keys ("a.b") remove nested entries.
"""

import copy
import json
from typing import Any, Dict, List, Optional, Sequence, Union

from confluence_loader.models import Document
from .errors import MetadataError

OMIT_ALL = '*'

MetadataInput = Optional[Union[str, Dict[str, Any]]]
OmitKeysInput = Optional[Union[str, Sequence[str]]]


def parse_metadata(metadata: MetadataInput) -> Dict[str, Any]:
    """Turn caller metadata (dict or JSON object string) into a dict.

    Raises:
        MetadataError: If the string is not valid JSON or not a JSON object
    """
    if metadata is None or metadata == '':
        return {}
    if isinstance(metadata, dict):
        return dict(metadata)
    try:
        parsed = json.loads(metadata)
    except (TypeError, ValueError) as e:
        raise MetadataError(f"not valid JSON ({e})") from e
    if not isinstance(parsed, dict):
        raise MetadataError(f"expected a JSON object, got {type(parsed).__name__}")
    return parsed


def parse_omit_keys(omit_metadata_keys: OmitKeysInput) -> List[str]:
    """Split a comma-separated key list, trimming whitespace and empties."""
    if not omit_metadata_keys:
        return []
    if isinstance(omit_metadata_keys, str):
        keys = omit_metadata_keys.split(',')
    else:
        keys = list(omit_metadata_keys)
    return [key.strip() for key in keys if key and key.strip()]


def omit_keys(data: Dict[str, Any], keys: Sequence[str]) -> Dict[str, Any]:
    """Return a deep copy of data without the given (possibly dotted) keys."""
    result = copy.deepcopy(data)
    for key in keys:
        if key in result:
            del result[key]
            continue

        *parents, leaf = key.split('.')
        target = result
        for part in parents:
            target = target.get(part) if isinstance(target, dict) else None
            if target is None:
                break
        if isinstance(target, dict):
            target.pop(leaf, None)
    return result


def apply_metadata(
    documents: Sequence[Document],
    metadata: MetadataInput = None,
    omit_metadata_keys: OmitKeysInput = None,
) -> List[Document]:
    """Merge caller metadata into documents and drop omitted keys.

    With "*" only the caller metadata is kept. Otherwise caller metadata
    overrides default keys of the same name and the listed keys are removed
    from the merged result.

    Args:
        documents: Documents to post-process (left unchanged)
        metadata: Extra metadata as a dict or JSON string
        omit_metadata_keys: Comma-separated keys, a list of keys, or "*"

    Returns:
        New Document objects with updated metadata

    Raises:
        MetadataError: If metadata is not a JSON object
    """
    extra = parse_metadata(metadata)
    keys = parse_omit_keys(omit_metadata_keys)
    omit_all = OMIT_ALL in keys

    processed = []
    for doc in documents:
        if omit_all:
            merged = copy.deepcopy(extra)
        else:
            merged = omit_keys({**doc.metadata, **extra}, keys)
        processed.append(Document(page_content=doc.page_content, metadata=merged))
    return processed
