"""Process-wide page size used by the envelope builder.

The value is shared by every tool call in the process and is not locked: the
last writer wins. ``build_envelope`` reads it once per call, so a change made
mid-call only affects subsequent calls.
"""

from __future__ import annotations

import logging

from algorand_mcp.config import default_config

logger = logging.getLogger(__name__)


class PageSizeSetting:
    def __init__(self, default: int) -> None:
        self._default = default
        self._value = default

    @property
    def default(self) -> int:
        return self._default

    def get(self) -> int:
        return self._value

    def set(self, value: int) -> None:
        # bool is an int subclass but never a meaningful page size.
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f"items per page must be a positive integer, got {value!r}")
        if value != self._value:
            logger.info("items per page changed from %d to %d", self._value, value)
        self._value = value

    def reset(self) -> None:
        self._value = self._default


page_size = PageSizeSetting(default_config.items_per_page)


def get_items_per_page() -> int:
    """Return the current process-wide page size."""
    return page_size.get()


def set_items_per_page(value: int) -> None:
    """Replace the process-wide page size (e.g. at session start)."""
    page_size.set(value)
