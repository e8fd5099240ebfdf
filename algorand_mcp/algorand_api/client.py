"""
Thin HTTP clients for whitelisted algod and indexer endpoints.

All methods are read-only and map node errors to internal exceptions that the
tool layer can turn into safe, user-facing messages.
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from algorand_mcp.config import AlgorandMcpConfig, default_config

logger = logging.getLogger(__name__)


class AlgorandApiError(Exception):
    """Base exception for algod/indexer errors."""

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class InvalidRequestError(AlgorandApiError):
    """Raised when the node rejects request parameters."""


class NotFoundError(AlgorandApiError):
    """Raised when the requested account, asset, application or transaction is unknown."""


class UnauthorizedError(AlgorandApiError):
    """Raised when the node rejects the request due to a missing or bad token."""


class NodeUnreachableError(AlgorandApiError):
    """Raised when the node cannot be reached."""


class _AlgorandHttpClient:
    """Shared request plumbing for algod and indexer."""

    token_header = "X-Algo-API-Token"
    label = "algod"

    def __init__(
        self,
        base_url: str,
        config: AlgorandMcpConfig | None = None,
        *,
        async_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.config = config or default_config
        self._client: Optional[httpx.AsyncClient] = async_client
        self._owns_client = async_client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.config.timeout)
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _build_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if self.config.api_token:
            headers[self.token_header] = self.config.api_token
        return headers

    def _map_error(self, status_code: int, message: Optional[str]) -> AlgorandApiError:
        lowered = (message or "").lower()
        if status_code in {401, 403}:
            return UnauthorizedError("Unauthorized or API token required.", status_code=status_code)
        if status_code == 404 or "no accounts found" in lowered or "does not exist" in lowered:
            return NotFoundError("Resource not found.", code=message, status_code=status_code)
        if status_code == 400:
            return InvalidRequestError("Invalid request.", code=message, status_code=status_code)
        return AlgorandApiError("Algorand API error.", code=message, status_code=status_code)

    def _process_response(self, response: httpx.Response) -> Any:
        try:
            data: Any = response.json()
        except ValueError:
            data = None

        if response.status_code >= 400:
            message: Optional[str] = None
            if isinstance(data, dict) and isinstance(data.get("message"), str):
                message = data["message"]
            raise self._map_error(response.status_code, message)

        if not isinstance(data, dict):
            raise AlgorandApiError("Unexpected response from node.", status_code=response.status_code)
        return data

    async def _request(self, path: str, *, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        client = await self._get_client()
        try:
            response = await client.get(path, params=params, headers=self._build_headers())
        except httpx.RequestError as exc:
            logger.warning("%s unreachable for path %s", self.label, path)
            raise NodeUnreachableError("Node unreachable") from exc
        return self._process_response(response)


def _drop_none(params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    cleaned = {key: value for key, value in params.items() if value is not None}
    return cleaned or None


def _box_name_param(name: bytes) -> str:
    # Both APIs take box names as "<encoding>:<value>".
    return "b64:" + base64.b64encode(name).decode("ascii")


class AlgodClient(_AlgorandHttpClient):
    """Async client for the algod v2 REST surface."""

    async def fetch_account(self, address: str) -> Dict[str, Any]:
        """Current balance, holdings and auth address of an account."""
        return await self._request(f"/v2/accounts/{quote(address, safe='')}")

    async def fetch_account_asset(self, address: str, asset_id: int) -> Dict[str, Any]:
        return await self._request(f"/v2/accounts/{quote(address, safe='')}/assets/{asset_id}")

    async def fetch_account_application(self, address: str, app_id: int) -> Dict[str, Any]:
        return await self._request(f"/v2/accounts/{quote(address, safe='')}/applications/{app_id}")

    async def fetch_application(self, app_id: int) -> Dict[str, Any]:
        """Application params, including its global state."""
        return await self._request(f"/v2/applications/{app_id}")

    async def fetch_application_box(self, app_id: int, name: bytes) -> Dict[str, Any]:
        return await self._request(f"/v2/applications/{app_id}/box", params={"name": _box_name_param(name)})

    async def fetch_application_boxes(self, app_id: int, *, limit: Optional[int] = None) -> Dict[str, Any]:
        return await self._request(f"/v2/applications/{app_id}/boxes", params=_drop_none({"max": limit}))

    async def fetch_asset(self, asset_id: int) -> Dict[str, Any]:
        return await self._request(f"/v2/assets/{asset_id}")

    async def fetch_pending_transactions(self, *, limit: Optional[int] = None) -> Dict[str, Any]:
        return await self._request("/v2/transactions/pending", params=_drop_none({"max": limit}))

    async def fetch_pending_transaction(self, txid: str) -> Dict[str, Any]:
        return await self._request(f"/v2/transactions/pending/{quote(txid, safe='')}")


class IndexerClient(_AlgorandHttpClient):
    """Async client for the indexer v2 REST surface."""

    token_header = "X-Indexer-API-Token"
    label = "indexer"

    async def lookup_account(self, address: str) -> Dict[str, Any]:
        return await self._request(f"/v2/accounts/{quote(address, safe='')}")

    async def lookup_account_assets(
        self,
        address: str,
        *,
        asset_id: Optional[int] = None,
        limit: Optional[int] = None,
        next_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        params = _drop_none({"asset-id": asset_id, "limit": limit, "next": next_token})
        return await self._request(f"/v2/accounts/{quote(address, safe='')}/assets", params=params)

    async def lookup_application(self, app_id: int) -> Dict[str, Any]:
        return await self._request(f"/v2/applications/{app_id}")

    async def lookup_application_logs(
        self,
        app_id: int,
        *,
        limit: Optional[int] = None,
        min_round: Optional[int] = None,
        max_round: Optional[int] = None,
        txid: Optional[str] = None,
        sender: Optional[str] = None,
        next_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        params = _drop_none(
            {
                "limit": limit,
                "min-round": min_round,
                "max-round": max_round,
                "txid": txid,
                "sender-address": sender,
                "next": next_token,
            }
        )
        return await self._request(f"/v2/applications/{app_id}/logs", params=params)

    async def search_transactions(self, **filters: Any) -> Dict[str, Any]:
        """Search transactions; ``filters`` are indexer query parameter names."""
        return await self._request("/v2/transactions", params=_drop_none(filters))

    async def lookup_account_transactions(self, address: str, **filters: Any) -> Dict[str, Any]:
        return await self._request(
            f"/v2/accounts/{quote(address, safe='')}/transactions", params=_drop_none(filters)
        )

    async def lookup_account_app_local_states(self, address: str) -> Dict[str, Any]:
        return await self._request(f"/v2/accounts/{quote(address, safe='')}/apps-local-state")

    async def lookup_account_created_applications(self, address: str) -> Dict[str, Any]:
        return await self._request(f"/v2/accounts/{quote(address, safe='')}/created-applications")

    async def search_accounts(self, **filters: Any) -> Dict[str, Any]:
        return await self._request("/v2/accounts", params=_drop_none(filters))

    async def lookup_asset_balances(self, asset_id: int, **filters: Any) -> Dict[str, Any]:
        return await self._request(f"/v2/assets/{asset_id}/balances", params=_drop_none(filters))

    async def search_assets(self, **filters: Any) -> Dict[str, Any]:
        return await self._request("/v2/assets", params=_drop_none(filters))

    async def search_applications(self, **filters: Any) -> Dict[str, Any]:
        return await self._request("/v2/applications", params=_drop_none(filters))

    async def lookup_application_boxes(
        self,
        app_id: int,
        *,
        limit: Optional[int] = None,
        next_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        params = _drop_none({"limit": limit, "next": next_token})
        return await self._request(f"/v2/applications/{app_id}/boxes", params=params)

    async def lookup_application_box(self, app_id: int, name: bytes) -> Dict[str, Any]:
        return await self._request(f"/v2/applications/{app_id}/box", params={"name": _box_name_param(name)})

    async def lookup_transaction(self, txid: str) -> Dict[str, Any]:
        return await self._request(f"/v2/transactions/{quote(txid, safe='')}")


default_algod_client = AlgodClient(default_config.algod_url)
default_indexer_client = IndexerClient(default_config.indexer_url)
