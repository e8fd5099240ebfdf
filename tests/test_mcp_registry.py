import pytest

from algorand_mcp import mcp
from algorand_mcp.mcp import PAGE_TOKEN_PARAM, ToolDefinition, call_tool, list_tools
from algorand_mcp.response import encode_page_token
from algorand_mcp.tools import get_application_info, search_for_accounts


def _register(monkeypatch, name, func):
    definition = ToolDefinition(
        name=name,
        description="test tool",
        input_schema=mcp._input_schema({}),
        callable=func,
    )
    monkeypatch.setitem(mcp.TOOL_REGISTRY, name, definition)


def test_every_tool_accepts_page_token():
    tools = list_tools()
    assert any(tool["name"] == "sdk_validate_address" for tool in tools)
    for tool in tools:
        schema = tool["inputSchema"]
        assert schema["type"] == "object"
        assert PAGE_TOKEN_PARAM in schema["properties"]
        assert PAGE_TOKEN_PARAM not in schema["required"]


@pytest.mark.asyncio
async def test_call_tool_wraps_results_in_envelope():
    result = await call_tool("sdk_validate_address", {"address": "bad"})
    assert result == {"data": {"isValid": False}}


@pytest.mark.asyncio
async def test_call_tool_unknown_and_bad_params():
    assert await call_tool("missing_tool") == {"error": "Unknown tool: missing_tool"}
    assert await call_tool("sdk_validate_address", {"nope": 1}) == {"error": "Invalid parameters."}


@pytest.mark.asyncio
async def test_call_tool_errors_are_not_enveloped():
    result = await call_tool("sdk_app_address_by_id", {"app_id": 0})
    assert result == {"error": "Invalid application id."}


@pytest.mark.asyncio
async def test_call_tool_routes_page_token(monkeypatch):
    async def many_assets():
        return {"assets": list(range(25))}

    _register(monkeypatch, "many_assets", many_assets)
    first = await call_tool("many_assets")
    assert first["metadata"]["arrayField"] == "assets"

    second = await call_tool("many_assets", {PAGE_TOKEN_PARAM: first["metadata"]["pageToken"]})
    assert second["data"]["assets"] == list(range(10, 20))
    assert second["metadata"]["currentPage"] == 2


@pytest.mark.asyncio
async def test_call_tool_ignores_non_string_token(monkeypatch):
    _register(monkeypatch, "numbers", lambda: list(range(15)))
    result = await call_tool("numbers", {PAGE_TOKEN_PARAM: 2})
    assert result["data"] == list(range(10))


@pytest.mark.asyncio
async def test_call_tool_unexpected_exception(monkeypatch):
    def explode():
        raise RuntimeError("boom")

    _register(monkeypatch, "explode", explode)
    assert await call_tool("explode") == {"error": "Unexpected error while calling tool."}


@pytest.mark.asyncio
async def test_application_global_state_is_not_paginated(monkeypatch):
    state = [{"key": f"k{i}", "value": {"type": 2, "uint": i}} for i in range(30)]

    class StubClient:
        async def fetch_application(self, app_id):
            return {"id": app_id, "params": {"creator": "C", "global-state": state}}

    _register(monkeypatch, "app_info", lambda app_id: get_application_info(app_id, client=StubClient()))
    result = await call_tool("app_info", {"app_id": 7, PAGE_TOKEN_PARAM: encode_page_token(2)})
    assert result == {"data": {"id": 7, "params": {"creator": "C"}, "global-state": state}}


def test_registry_covers_read_only_lookups():
    names = {tool["name"] for tool in list_tools()}
    assert {
        "algod_get_account_application_info",
        "algod_get_application_state",
        "algod_get_application_box_value",
        "api_indexer_lookup_transaction_by_id",
        "api_indexer_lookup_account_transactions",
        "api_indexer_lookup_account_app_local_states",
        "api_indexer_lookup_account_created_applications",
        "api_indexer_search_for_accounts",
        "api_indexer_search_for_applications",
        "api_indexer_lookup_application_boxes",
        "api_indexer_lookup_application_box",
        "api_indexer_lookup_asset_balances",
        "api_indexer_search_for_assets",
    } <= names
    assert len(names) == 29


@pytest.mark.asyncio
async def test_search_results_are_paginated(monkeypatch):
    class StubClient:
        async def search_accounts(self, **filters):
            return {"accounts": [{"address": f"A{i}"} for i in range(12)], "next-token": "idx"}

    _register(monkeypatch, "accounts", lambda: search_for_accounts(client=StubClient()))
    result = await call_tool("accounts")
    assert result["data"]["accounts"] == [{"address": f"A{i}"} for i in range(10)]
    assert result["data"]["nextToken"] == "idx"
    assert result["metadata"]["arrayField"] == "accounts"
    assert result["metadata"]["totalItems"] == 12
