"""
Envelope builder for tool results.

Every successful tool result is normalized to ``{"data": ..., "metadata": ...}``
before it is handed to the transport. ``metadata`` only appears when something
was paginated.

Compatibility notes:
  - When several fields of a mapping are paginated, each one is sliced but only
    the last one (in key order) is described by ``metadata``.
  - Nested mappings are sliced and walked with the same page token; their own
    pagination bookkeeping is not reported.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional, Tuple

from algorand_mcp.response.paginator import PaginationMetadata, paginate
from algorand_mcp.response.settings import get_items_per_page
from algorand_mcp.response.shapes import Shape, classify, is_exempt, needs_pagination

logger = logging.getLogger(__name__)


def _process_mapping(
    mapping: Mapping,
    page_token: Optional[str],
    items_per_page: int,
) -> Tuple[Dict[Any, Any], Optional[Any], Optional[PaginationMetadata]]:
    """Walk one mapping level, returning (processed, last paginated key, its metadata)."""
    processed: Dict[Any, Any] = {}
    paginated_field: Optional[Any] = None
    pagination: Optional[PaginationMetadata] = None

    for key, value in mapping.items():
        shape = classify(value)
        if shape is Shape.SEQUENCE:
            if not is_exempt(mapping, key) and needs_pagination(value, items_per_page):
                value, pagination = paginate(value, page_token, items_per_page=items_per_page)
                paginated_field = key
        elif shape is Shape.MAPPING:
            if needs_pagination(value, items_per_page):
                value, pagination = paginate(value, page_token, items_per_page=items_per_page)
                paginated_field = key
            value, _, _ = _process_mapping(value, page_token, items_per_page)
        processed[key] = value

    return processed, paginated_field, pagination


def build_envelope(
    value: Any,
    page_token: Optional[str] = None,
    *,
    items_per_page: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Normalize ``value`` into a size-bounded envelope.

    Args:
        value: Any JSON-like result (scalar, list/tuple, or mapping). It is not
            mutated.
        page_token: Continuation token from a previous envelope's metadata.
        items_per_page: Page size for this call. Defaults to a snapshot of the
            process-wide setting taken once, on entry.

    Returns:
        ``{"data": ...}`` plus ``"metadata"`` when a page was cut.
    """
    if items_per_page is None:
        items_per_page = get_items_per_page()

    shape = classify(value)
    if shape is Shape.SEQUENCE:
        if needs_pagination(value, items_per_page):
            page, metadata = paginate(value, page_token, items_per_page=items_per_page)
            return {"data": page, "metadata": metadata.to_dict()}
        return {"data": value}

    if shape is Shape.MAPPING:
        processed, paginated_field, pagination = _process_mapping(
            copy.deepcopy(value), page_token, items_per_page
        )
        if pagination is None:
            return {"data": processed}
        logger.debug("paginated field=%s page=%d", paginated_field, pagination.current_page)
        metadata = pagination.to_dict()
        metadata["arrayField"] = paginated_field
        return {"data": processed, "metadata": metadata}

    return {"data": value}


def render_text(envelope: Dict[str, Any]) -> str:
    """Render an envelope as the single text block sent over the protocol."""
    return json.dumps(envelope, indent=2, default=str)
