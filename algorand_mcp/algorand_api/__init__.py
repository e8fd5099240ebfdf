"""HTTP client wrappers for the algod and indexer APIs."""

from .client import (
    AlgodClient,
    AlgorandApiError,
    IndexerClient,
    InvalidRequestError,
    NodeUnreachableError,
    NotFoundError,
    UnauthorizedError,
    default_algod_client,
    default_indexer_client,
)

__all__ = [
    "AlgodClient",
    "IndexerClient",
    "AlgorandApiError",
    "InvalidRequestError",
    "NotFoundError",
    "UnauthorizedError",
    "NodeUnreachableError",
    "default_algod_client",
    "default_indexer_client",
]
