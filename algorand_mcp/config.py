"""
Configuration helpers for the Algorand MCP server.

This module centralizes node/indexer URL selection, API token loading, default
timeouts, the pagination page size, and safety limits. No secrets are stored in
the repository; the token is read from environment or a local file if present.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Default connection settings
DEFAULT_ALGOD_URL = os.getenv("ALGORAND_ALGOD", "https://mainnet-api.algonode.cloud")
DEFAULT_INDEXER_URL = os.getenv("ALGORAND_INDEXER", "https://mainnet-idx.algonode.cloud")


def _load_timeout() -> float:
    raw_timeout = os.getenv("ALGORAND_HTTP_TIMEOUT")
    if raw_timeout:
        try:
            return float(raw_timeout)
        except ValueError:
            return 10.0
    return 10.0


def _load_items_per_page() -> int:
    raw_value = os.getenv("ALGORAND_MCP_ITEMS_PER_PAGE")
    if raw_value:
        try:
            parsed = int(raw_value)
        except ValueError:
            return 10
        if parsed < 1:
            return 10
        return min(parsed, MAX_ITEMS_PER_PAGE)
    return 10


DEFAULT_TIMEOUT = _load_timeout()

# API token handling
API_TOKEN_ENV_VAR = "ALGORAND_TOKEN"
API_TOKEN_FILE_ENV_VAR = "ALGORAND_TOKEN_FILE"
DEFAULT_API_TOKEN_FILE = "algod.token"

# Pagination and safety limits
MAX_ITEMS_PER_PAGE = 100
DEFAULT_ITEMS_PER_PAGE = _load_items_per_page()
MAX_SEARCH_LIMIT = 1000
DEFAULT_SEARCH_LIMIT = 50
MAX_PENDING_TRANSACTIONS = 1000
DEFAULT_PENDING_TRANSACTIONS = 50
LOG_LEVEL = os.getenv("ALGORAND_MCP_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("ALGORAND_MCP_LOG_FORMAT", "json")  # json or plain


def load_api_token() -> Optional[str]:
    """
    Load the algod/indexer API token from environment or a local file.

    Returns:
        The token string if available, otherwise None. The token is never logged
        or returned to callers.
    """
    env_token = os.getenv(API_TOKEN_ENV_VAR)
    if env_token:
        return env_token.strip()

    token_path = os.getenv(API_TOKEN_FILE_ENV_VAR, DEFAULT_API_TOKEN_FILE)
    if token_path:
        path = Path(token_path)
        if path.is_file():
            return path.read_text(encoding="utf-8").strip() or None

    return None


@dataclass(slots=True)
class AlgorandMcpConfig:
    """Runtime configuration for node access and response shaping."""

    algod_url: str = DEFAULT_ALGOD_URL
    indexer_url: str = DEFAULT_INDEXER_URL
    timeout: float = DEFAULT_TIMEOUT
    api_token: Optional[str] = load_api_token()
    items_per_page: int = DEFAULT_ITEMS_PER_PAGE
    max_items_per_page: int = MAX_ITEMS_PER_PAGE
    max_search_limit: int = MAX_SEARCH_LIMIT
    default_search_limit: int = DEFAULT_SEARCH_LIMIT
    max_pending_transactions: int = MAX_PENDING_TRANSACTIONS
    default_pending_transactions: int = DEFAULT_PENDING_TRANSACTIONS
    log_level: str = LOG_LEVEL
    log_format: str = LOG_FORMAT


default_config = AlgorandMcpConfig()
