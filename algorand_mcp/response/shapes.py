"""Shape classification for arbitrary tool results."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Sized

# Key of the application global state array; it is returned whole.
GLOBAL_STATE_KEY = "global-state"


class Shape(str, Enum):
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def classify(value: Any) -> Shape:
    """Classify a JSON-like value. Strings and bytes are scalars."""
    if isinstance(value, (list, tuple)):
        return Shape.SEQUENCE
    if isinstance(value, Mapping):
        return Shape.MAPPING
    return Shape.SCALAR


def needs_pagination(collection: Sized, items_per_page: int) -> bool:
    """True when a sequence's length or a mapping's key count exceeds the page size."""
    return len(collection) > items_per_page


def is_exempt(parent: Mapping, key: Any) -> bool:
    """
    Return True when ``parent[key]`` must never be sliced.

    Application records carry both ``id`` and ``params``; their global state is
    a complete key/value dump and slicing it would hand the caller a partial
    state.
    """
    if key != GLOBAL_STATE_KEY:
        return False
    return _is_set(parent.get("id")) and _is_set(parent.get("params"))


def _is_set(value: Any) -> bool:
    # Empty containers still count as set; only null, false, zero and "" do not.
    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)) and value == 0:
        return False
    return True
