import httpx
import pytest

from algorand_mcp.algorand_api.client import (
    AlgodClient,
    AlgorandApiError,
    IndexerClient,
    InvalidRequestError,
    NodeUnreachableError,
    NotFoundError,
    UnauthorizedError,
)
from algorand_mcp.config import AlgorandMcpConfig


class MockResponse:
    def __init__(self, status_code: int, json_body):
        self.status_code = status_code
        self._json = json_body

    def json(self):
        if self._json is None:
            raise ValueError("no json")
        return self._json


class MockAsyncClient:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    async def get(self, path, params=None, headers=None):
        self.calls.append({"path": path, "params": params, "headers": headers})
        if not self.responses:
            raise RuntimeError("No mock responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def aclose(self):
        return None


def _algod(responses, config=None):
    mock = MockAsyncClient(responses)
    return AlgodClient("http://algod", config=config or AlgorandMcpConfig(api_token=None), async_client=mock), mock


@pytest.mark.asyncio
async def test_fetch_account_success():
    client, mock = _algod([MockResponse(200, {"address": "A", "amount": 5})])
    assert await client.fetch_account("A") == {"address": "A", "amount": 5}
    assert mock.calls[0]["path"] == "/v2/accounts/A"
    assert mock.calls[0]["headers"] == {}


@pytest.mark.asyncio
async def test_not_found_mapping():
    client, _ = _algod([MockResponse(404, {"message": "application does not exist"})])
    with pytest.raises(NotFoundError):
        await client.fetch_application(99)


@pytest.mark.asyncio
async def test_missing_account_message_maps_to_not_found():
    client, _ = _algod([MockResponse(400, {"message": "no accounts found for address"})])
    with pytest.raises(NotFoundError):
        await client.fetch_account("A")


@pytest.mark.asyncio
async def test_bad_request_mapping():
    client, _ = _algod([MockResponse(400, {"message": "failed to parse the application-id"})])
    with pytest.raises(InvalidRequestError) as excinfo:
        await client.fetch_application(1)
    assert excinfo.value.status_code == 400


@pytest.mark.asyncio
async def test_unauthorized_mapping():
    client, _ = _algod([MockResponse(401, {"message": "Invalid API Token"})])
    with pytest.raises(UnauthorizedError):
        await client.fetch_asset(1)


@pytest.mark.asyncio
async def test_server_error_maps_to_generic():
    client, _ = _algod([MockResponse(500, None)])
    with pytest.raises(AlgorandApiError) as excinfo:
        await client.fetch_asset(1)
    assert type(excinfo.value) is AlgorandApiError
    assert excinfo.value.status_code == 500


@pytest.mark.asyncio
async def test_unexpected_response_shape():
    client, _ = _algod([MockResponse(200, ["unexpected"])])
    with pytest.raises(AlgorandApiError):
        await client.fetch_pending_transactions()


@pytest.mark.asyncio
async def test_request_error_maps_to_unreachable():
    client, _ = _algod([httpx.ConnectError("boom")])
    with pytest.raises(NodeUnreachableError):
        await client.fetch_account("A")


@pytest.mark.asyncio
async def test_token_headers():
    cfg = AlgorandMcpConfig(api_token="secret")
    algod, algod_mock = _algod([MockResponse(200, {})], config=cfg)
    await algod.fetch_asset(1)
    assert algod_mock.calls[0]["headers"] == {"X-Algo-API-Token": "secret"}

    indexer_mock = MockAsyncClient([MockResponse(200, {})])
    indexer = IndexerClient("http://indexer", config=cfg, async_client=indexer_mock)
    await indexer.lookup_application(1)
    assert indexer_mock.calls[0]["headers"] == {"X-Indexer-API-Token": "secret"}


@pytest.mark.asyncio
async def test_optional_params_are_dropped():
    mock = MockAsyncClient([MockResponse(200, {}), MockResponse(200, {})])
    indexer = IndexerClient("http://indexer", config=AlgorandMcpConfig(api_token=None), async_client=mock)
    await indexer.lookup_application_logs(5, limit=10, sender="S")
    assert mock.calls[0]["path"] == "/v2/applications/5/logs"
    assert mock.calls[0]["params"] == {"limit": 10, "sender-address": "S"}

    await indexer.lookup_account_assets("A")
    assert mock.calls[1]["params"] is None


@pytest.mark.asyncio
async def test_search_transactions_passes_filters():
    mock = MockAsyncClient([MockResponse(200, {"transactions": []})])
    indexer = IndexerClient("http://indexer", config=AlgorandMcpConfig(api_token=None), async_client=mock)
    await indexer.search_transactions(**{"tx-type": "pay", "limit": 5, "next": None})
    assert mock.calls[0]["params"] == {"tx-type": "pay", "limit": 5}


@pytest.mark.asyncio
async def test_aclose_keeps_injected_client():
    client, mock = _algod([])
    await client.aclose()
    assert client._client is mock


@pytest.mark.asyncio
async def test_box_lookups_encode_name_as_base64():
    algod, algod_mock = _algod([MockResponse(200, {"name": "Ym94MQ==", "value": ""})])
    await algod.fetch_application_box(5, b"box1")
    assert algod_mock.calls[0]["path"] == "/v2/applications/5/box"
    assert algod_mock.calls[0]["params"] == {"name": "b64:Ym94MQ=="}

    mock = MockAsyncClient([MockResponse(200, {}), MockResponse(200, {"boxes": []})])
    indexer = IndexerClient("http://indexer", config=AlgorandMcpConfig(api_token=None), async_client=mock)
    await indexer.lookup_application_box(5, b"box1")
    assert mock.calls[0]["params"] == {"name": "b64:Ym94MQ=="}
    await indexer.lookup_application_boxes(5, limit=3)
    assert mock.calls[1]["path"] == "/v2/applications/5/boxes"
    assert mock.calls[1]["params"] == {"limit": 3}


@pytest.mark.asyncio
async def test_indexer_lookup_paths():
    mock = MockAsyncClient([MockResponse(200, {}) for _ in range(8)])
    indexer = IndexerClient("http://indexer", config=AlgorandMcpConfig(api_token=None), async_client=mock)
    await indexer.lookup_transaction("T" * 52)
    await indexer.lookup_account_transactions("A", **{"tx-type": "pay", "round": None})
    await indexer.lookup_account_app_local_states("A")
    await indexer.lookup_account_created_applications("A")
    await indexer.search_accounts(**{"asset-id": 7})
    await indexer.lookup_asset_balances(7, limit=2)
    await indexer.search_assets(unit="USDC")
    await indexer.search_applications(creator=None)

    assert [call["path"] for call in mock.calls] == [
        "/v2/transactions/" + "T" * 52,
        "/v2/accounts/A/transactions",
        "/v2/accounts/A/apps-local-state",
        "/v2/accounts/A/created-applications",
        "/v2/accounts",
        "/v2/assets/7/balances",
        "/v2/assets",
        "/v2/applications",
    ]
    assert mock.calls[1]["params"] == {"tx-type": "pay"}
    assert mock.calls[4]["params"] == {"asset-id": 7}
    assert mock.calls[5]["params"] == {"limit": 2}
    assert mock.calls[7]["params"] is None


@pytest.mark.asyncio
async def test_account_application_path():
    client, mock = _algod([MockResponse(200, {"app-local-state": {}})])
    await client.fetch_account_application("A", 9)
    assert mock.calls[0]["path"] == "/v2/accounts/A/applications/9"
