"""Map client exceptions to safe, user-facing tool errors."""

from __future__ import annotations

from typing import Dict

from algorand_mcp.algorand_api import (
    AlgorandApiError,
    InvalidRequestError,
    NodeUnreachableError,
    NotFoundError,
    UnauthorizedError,
)


def api_error_result(exc: AlgorandApiError, *, not_found: str = "Resource not found.") -> Dict[str, str]:
    if isinstance(exc, UnauthorizedError):
        return {"error": "Unauthorized or API token required."}
    if isinstance(exc, NodeUnreachableError):
        return {"error": "Node unreachable"}
    if isinstance(exc, NotFoundError):
        return {"error": not_found}
    if isinstance(exc, InvalidRequestError):
        return {"error": "Invalid request parameters."}
    return {"error": "Algorand API error."}
