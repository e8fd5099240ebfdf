"""
Tool registry for the MCP-style JSON-RPC surface.

Maps tool names to implementations and input schemas. Every tool accepts an
optional ``pageToken``; it is stripped before the tool is called and handed to
the envelope builder together with the tool's result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from algorand_mcp.config import default_config
from algorand_mcp.response import build_envelope
from algorand_mcp.tools import (
    get_account_application_info,
    get_account_asset_info,
    get_account_info,
    get_application_box_value,
    get_application_boxes,
    get_application_info,
    get_application_state,
    get_asset_info,
    get_pending_transactions,
    get_transaction_info,
    lookup_account_app_local_states,
    lookup_account_assets,
    lookup_account_by_id,
    lookup_account_created_applications,
    lookup_account_transactions,
    lookup_application_box,
    lookup_application_boxes,
    lookup_application_logs,
    lookup_applications,
    lookup_asset_balances,
    lookup_transaction_by_id,
    sdk_app_address_by_id,
    sdk_decode_address,
    sdk_encode_address,
    sdk_validate_address,
    search_for_accounts,
    search_for_applications,
    search_for_assets,
    search_for_transactions,
)
from algorand_mcp.tools.indexer import TX_TYPES
from algorand_mcp.tools.validators import ADDRESS_LENGTH, ADDRESS_REGEX, TXID_REGEX

logger = logging.getLogger(__name__)

PAGE_TOKEN_PARAM = "pageToken"

ADDRESS_SCHEMA: Dict[str, Any] = {
    "type": "string",
    "description": "Algorand address (58 characters, base32)",
    "pattern": ADDRESS_REGEX.pattern,
    "minLength": ADDRESS_LENGTH,
    "maxLength": ADDRESS_LENGTH,
}
TXID_SCHEMA: Dict[str, Any] = {
    "type": "string",
    "description": "Transaction id (52 characters, base32)",
    "pattern": TXID_REGEX.pattern,
}
ID_SCHEMA: Dict[str, Any] = {"type": "integer", "minimum": 1}
ROUND_SCHEMA: Dict[str, Any] = {"type": "integer", "minimum": 0}
NEXT_TOKEN_SCHEMA: Dict[str, Any] = {
    "type": "string",
    "description": "Indexer continuation token (not the pagination pageToken)",
}
TX_TYPE_SCHEMA: Dict[str, Any] = {"type": "string", "enum": sorted(TX_TYPES)}
TIME_SCHEMA: Dict[str, Any] = {"type": "string", "description": "RFC 3339 timestamp"}


def _limit_schema(max_value: int) -> Dict[str, Any]:
    return {
        "type": "integer",
        "minimum": 0,
        "maximum": max_value,
        "description": f"Optional max items (0-{max_value})",
    }


def _input_schema(properties: Dict[str, Any], required: Optional[List[str]] = None) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            **properties,
            PAGE_TOKEN_PARAM: {
                "type": "string",
                "description": "Page token from a previous response's metadata",
            },
        },
        "required": required or [],
        "additionalProperties": False,
    }


ToolCallable = Callable[..., Awaitable[Any]] | Callable[..., Any]


@dataclass(slots=True)
class ToolDefinition:
    name: str
    description: str
    input_schema: Dict[str, Any]
    callable: ToolCallable


def _tool(name: str, description: str, input_schema: Dict[str, Any], callable: ToolCallable) -> ToolDefinition:
    return ToolDefinition(name=name, description=description, input_schema=input_schema, callable=callable)


_search_limit = _limit_schema(default_config.max_search_limit)

TOOL_REGISTRY: Dict[str, ToolDefinition] = {
    tool.name: tool
    for tool in (
        _tool(
            "sdk_validate_address",
            "Check if an Algorand address is valid.",
            _input_schema({"address": {"type": "string"}}, ["address"]),
            sdk_validate_address,
        ),
        _tool(
            "sdk_encode_address",
            "Encode a public key to an Algorand address.",
            _input_schema(
                {"public_key": {"type": "string", "description": "32-byte public key in hex"}},
                ["public_key"],
            ),
            sdk_encode_address,
        ),
        _tool(
            "sdk_decode_address",
            "Decode an Algorand address to a public key.",
            _input_schema({"address": ADDRESS_SCHEMA}, ["address"]),
            sdk_decode_address,
        ),
        _tool(
            "sdk_app_address_by_id",
            "Get the address for a given application ID.",
            _input_schema({"app_id": ID_SCHEMA}, ["app_id"]),
            sdk_app_address_by_id,
        ),
        _tool(
            "algod_get_account_info",
            "Get current account balance, assets, and auth address from algod.",
            _input_schema({"address": ADDRESS_SCHEMA}, ["address"]),
            get_account_info,
        ),
        _tool(
            "algod_get_account_asset_info",
            "Get account-specific asset information from algod.",
            _input_schema({"address": ADDRESS_SCHEMA, "asset_id": ID_SCHEMA}, ["address", "asset_id"]),
            get_account_asset_info,
        ),
        _tool(
            "algod_get_account_application_info",
            "Get account-specific application information from algod.",
            _input_schema({"address": ADDRESS_SCHEMA, "app_id": ID_SCHEMA}, ["address", "app_id"]),
            get_account_application_info,
        ),
        _tool(
            "algod_get_application_info",
            "Get application details, including global state, from algod.",
            _input_schema({"app_id": ID_SCHEMA}, ["app_id"]),
            get_application_info,
        ),
        _tool(
            "algod_get_application_state",
            "Get application global state from algod, with keys and byte values decoded.",
            _input_schema({"app_id": ID_SCHEMA}, ["app_id"]),
            get_application_state,
        ),
        _tool(
            "algod_get_application_box_value",
            "Get application box contents from algod.",
            _input_schema(
                {"app_id": ID_SCHEMA, "name": {"type": "string", "description": "Box name (UTF-8 encoded)"}},
                ["app_id", "name"],
            ),
            get_application_box_value,
        ),
        _tool(
            "algod_get_application_boxes",
            "Get all application box names from algod.",
            _input_schema({"app_id": ID_SCHEMA, "limit": _search_limit}, ["app_id"]),
            get_application_boxes,
        ),
        _tool(
            "algod_get_asset_info",
            "Get asset details from algod.",
            _input_schema({"asset_id": ID_SCHEMA}, ["asset_id"]),
            get_asset_info,
        ),
        _tool(
            "algod_get_pending_transactions",
            "Get pending transactions from the algod mempool.",
            _input_schema({"limit": _limit_schema(default_config.max_pending_transactions)}),
            get_pending_transactions,
        ),
        _tool(
            "algod_get_transaction_info",
            "Get pending transaction details from algod by transaction ID.",
            _input_schema({"txid": TXID_SCHEMA}, ["txid"]),
            get_transaction_info,
        ),
        _tool(
            "api_indexer_lookup_account_by_id",
            "Get account information from indexer.",
            _input_schema({"address": ADDRESS_SCHEMA}, ["address"]),
            lookup_account_by_id,
        ),
        _tool(
            "api_indexer_lookup_account_assets",
            "Get account assets from indexer.",
            _input_schema(
                {
                    "address": ADDRESS_SCHEMA,
                    "asset_id": ID_SCHEMA,
                    "limit": _search_limit,
                    "next_token": NEXT_TOKEN_SCHEMA,
                },
                ["address"],
            ),
            lookup_account_assets,
        ),
        _tool(
            "api_indexer_lookup_applications",
            "Get application information from indexer.",
            _input_schema({"app_id": ID_SCHEMA}, ["app_id"]),
            lookup_applications,
        ),
        _tool(
            "api_indexer_lookup_application_logs",
            "Get application log messages.",
            _input_schema(
                {
                    "app_id": ID_SCHEMA,
                    "limit": _search_limit,
                    "min_round": ROUND_SCHEMA,
                    "max_round": ROUND_SCHEMA,
                    "txid": TXID_SCHEMA,
                    "sender": ADDRESS_SCHEMA,
                    "next_token": NEXT_TOKEN_SCHEMA,
                },
                ["app_id"],
            ),
            lookup_application_logs,
        ),
        _tool(
            "api_indexer_search_for_transactions",
            "Search for transactions with various criteria.",
            _input_schema(
                {
                    "address": ADDRESS_SCHEMA,
                    "address_role": {"type": "string", "enum": ["sender", "receiver", "freeze-target"]},
                    "tx_type": TX_TYPE_SCHEMA,
                    "asset_id": ID_SCHEMA,
                    "application_id": ID_SCHEMA,
                    "min_round": ROUND_SCHEMA,
                    "max_round": ROUND_SCHEMA,
                    "note_prefix": {"type": "string", "description": "Base64 note prefix"},
                    "limit": _search_limit,
                    "next_token": NEXT_TOKEN_SCHEMA,
                }
            ),
            search_for_transactions,
        ),
        _tool(
            "api_indexer_lookup_account_transactions",
            "Get transaction history for an account from indexer.",
            _input_schema(
                {
                    "address": ADDRESS_SCHEMA,
                    "tx_type": TX_TYPE_SCHEMA,
                    "sig_type": {"type": "string", "enum": ["sig", "msig", "lsig"]},
                    "asset_id": ID_SCHEMA,
                    "before_time": TIME_SCHEMA,
                    "after_time": TIME_SCHEMA,
                    "currency_greater_than": ROUND_SCHEMA,
                    "currency_less_than": ROUND_SCHEMA,
                    "round": ROUND_SCHEMA,
                    "min_round": ROUND_SCHEMA,
                    "max_round": ROUND_SCHEMA,
                    "limit": _search_limit,
                    "next_token": NEXT_TOKEN_SCHEMA,
                },
                ["address"],
            ),
            lookup_account_transactions,
        ),
        _tool(
            "api_indexer_lookup_account_app_local_states",
            "Get account application local states from indexer.",
            _input_schema({"address": ADDRESS_SCHEMA}, ["address"]),
            lookup_account_app_local_states,
        ),
        _tool(
            "api_indexer_lookup_account_created_applications",
            "Get applications created by an account from indexer.",
            _input_schema({"address": ADDRESS_SCHEMA}, ["address"]),
            lookup_account_created_applications,
        ),
        _tool(
            "api_indexer_search_for_accounts",
            "Search for accounts with various criteria.",
            _input_schema(
                {
                    "asset_id": ID_SCHEMA,
                    "application_id": ID_SCHEMA,
                    "currency_greater_than": ROUND_SCHEMA,
                    "currency_less_than": ROUND_SCHEMA,
                    "limit": _search_limit,
                    "next_token": NEXT_TOKEN_SCHEMA,
                }
            ),
            search_for_accounts,
        ),
        _tool(
            "api_indexer_search_for_applications",
            "Search for applications with various criteria.",
            _input_schema(
                {"creator": ADDRESS_SCHEMA, "limit": _search_limit, "next_token": NEXT_TOKEN_SCHEMA}
            ),
            search_for_applications,
        ),
        _tool(
            "api_indexer_lookup_application_boxes",
            "Get all application box names from indexer.",
            _input_schema(
                {"app_id": ID_SCHEMA, "limit": _search_limit, "next_token": NEXT_TOKEN_SCHEMA},
                ["app_id"],
            ),
            lookup_application_boxes,
        ),
        _tool(
            "api_indexer_lookup_application_box",
            "Get an application box by name from indexer.",
            _input_schema(
                {
                    "app_id": ID_SCHEMA,
                    "box_name": {"type": "string", "description": "Box name (text, number, address or base64)"},
                },
                ["app_id", "box_name"],
            ),
            lookup_application_box,
        ),
        _tool(
            "api_indexer_lookup_asset_balances",
            "Get accounts that hold a specific asset.",
            _input_schema(
                {
                    "asset_id": ID_SCHEMA,
                    "currency_greater_than": ROUND_SCHEMA,
                    "currency_less_than": ROUND_SCHEMA,
                    "limit": _search_limit,
                    "next_token": NEXT_TOKEN_SCHEMA,
                },
                ["asset_id"],
            ),
            lookup_asset_balances,
        ),
        _tool(
            "api_indexer_search_for_assets",
            "Search for assets with various criteria.",
            _input_schema(
                {
                    "name": {"type": "string"},
                    "unit": {"type": "string"},
                    "creator": ADDRESS_SCHEMA,
                    "limit": _search_limit,
                    "next_token": NEXT_TOKEN_SCHEMA,
                }
            ),
            search_for_assets,
        ),
        _tool(
            "api_indexer_lookup_transaction_by_id",
            "Get a confirmed transaction by ID from indexer.",
            _input_schema({"txid": TXID_SCHEMA}, ["txid"]),
            lookup_transaction_by_id,
        ),
    )
}


def list_tools() -> List[Dict[str, Any]]:
    """Return a simple list of available tools."""
    return [
        {
            "name": tool.name,
            "description": tool.description,
            "inputSchema": tool.input_schema,
        }
        for tool in TOOL_REGISTRY.values()
    ]


async def call_tool(tool_name: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Dispatch to a tool by name and normalize its result.

    Tool errors come back unchanged as ``{"error": ...}``; anything else is
    wrapped by ``build_envelope`` using the caller's ``pageToken``.
    """
    params = dict(params or {})
    page_token = params.pop(PAGE_TOKEN_PARAM, None)
    tool = TOOL_REGISTRY.get(tool_name)
    if tool is None:
        return {"error": f"Unknown tool: {tool_name}"}

    # Match parameters by name; tools already handle validation and error shaping.
    try:
        result = tool.callable(**params)
        if isinstance(result, Awaitable):
            result = await result
    except TypeError:
        return {"error": "Invalid parameters."}
    except Exception:
        logger.exception("Unexpected error calling tool %s", tool_name)
        return {"error": "Unexpected error while calling tool."}

    if isinstance(result, dict) and "error" in result:
        return result
    return build_envelope(result, page_token if isinstance(page_token, str) else None)
