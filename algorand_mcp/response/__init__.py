"""Response normalization and pagination for tool results."""

from .envelope import build_envelope, render_text
from .paginator import PaginationMetadata, decode_page_token, encode_page_token, paginate
from .settings import get_items_per_page, page_size, set_items_per_page
from .shapes import GLOBAL_STATE_KEY, Shape, classify, is_exempt, needs_pagination

__all__ = [
    "build_envelope",
    "render_text",
    "PaginationMetadata",
    "decode_page_token",
    "encode_page_token",
    "paginate",
    "get_items_per_page",
    "page_size",
    "set_items_per_page",
    "GLOBAL_STATE_KEY",
    "Shape",
    "classify",
    "is_exempt",
    "needs_pagination",
]
