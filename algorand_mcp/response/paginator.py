"""
Positional pagination of sequences and mappings.

Page tokens are stateless: a token only encodes the 1-based number of the page
to return next. The same token is applied to whichever collection is being
sliced on the following call.
"""

from __future__ import annotations

import base64
import binascii
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

TOKEN_PREFIX = "page_"


@dataclass(slots=True)
class PaginationMetadata:
    total_items: int
    items_per_page: int
    current_page: int
    total_pages: int
    has_next_page: bool
    page_token: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "totalItems": self.total_items,
            "itemsPerPage": self.items_per_page,
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "hasNextPage": self.has_next_page,
        }
        if self.page_token is not None:
            payload["pageToken"] = self.page_token
        return payload


def encode_page_token(page: int) -> str:
    """Mint an opaque token pointing at ``page``."""
    return base64.b64encode(f"{TOKEN_PREFIX}{page}".encode("utf-8")).decode("ascii")


def decode_page_token(token: Optional[str]) -> int:
    """
    Decode a page token. Anything unreadable resolves to page 1.

    Tokens are client-supplied, so foreign or tampered values are expected and
    must not surface as errors.
    """
    if not token:
        return 1
    try:
        decoded = base64.b64decode(token, validate=True).decode("utf-8")
        if decoded.startswith(TOKEN_PREFIX):
            decoded = decoded[len(TOKEN_PREFIX):]
        page = int(decoded)
    except (binascii.Error, ValueError, TypeError):
        logger.debug("unreadable page token %r, using page 1", token)
        return 1
    return max(page, 1)


def _page_bounds(total_items: int, current_page: int, items_per_page: int) -> Tuple[int, int, bool]:
    start = (current_page - 1) * items_per_page
    end = start + items_per_page
    return start, end, end < total_items


def paginate(
    collection: List[Any] | Tuple[Any, ...] | Mapping,
    page_token: Optional[str] = None,
    *,
    items_per_page: int,
) -> Tuple[List[Any] | Dict[Any, Any], PaginationMetadata]:
    """
    Slice one page out of a sequence or a mapping.

    Mappings are paginated by entry, in insertion order, and the page is a new
    dict holding only the sliced entries. Pages past the end are empty.
    """
    current_page = decode_page_token(page_token) if page_token else 1
    if isinstance(collection, Mapping):
        entries = list(collection.items())
        total_items = len(entries)
        start, end, has_next = _page_bounds(total_items, current_page, items_per_page)
        page: List[Any] | Dict[Any, Any] = dict(entries[start:end])
    else:
        total_items = len(collection)
        start, end, has_next = _page_bounds(total_items, current_page, items_per_page)
        page = list(collection[start:end])

    metadata = PaginationMetadata(
        total_items=total_items,
        items_per_page=items_per_page,
        current_page=current_page,
        total_pages=math.ceil(total_items / items_per_page),
        has_next_page=has_next,
        page_token=encode_page_token(current_page + 1) if has_next else None,
    )
    logger.debug(
        "paginated total=%d page=%d/%d start=%d end=%d has_next=%s",
        total_items,
        current_page,
        metadata.total_pages,
        start,
        end,
        has_next,
    )
    return page, metadata
