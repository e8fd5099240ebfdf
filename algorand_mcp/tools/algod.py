"""Tools backed by algod (node state and mempool)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from algorand_mcp.algorand_api import AlgorandApiError, default_algod_client
from algorand_mcp.config import AlgorandMcpConfig, default_config
from algorand_mcp.response import GLOBAL_STATE_KEY
from algorand_mcp.tools.errors import api_error_result
from algorand_mcp.tools.validators import (
    box_name_entry,
    clamp_limit,
    is_valid_algorand_address,
    is_valid_txid,
    parse_non_negative_int,
    utf8_view,
)

logger = logging.getLogger(__name__)


async def get_account_info(address: str, *, client=default_algod_client) -> Dict[str, Any]:
    """
    Return current balance, asset holdings and auth address for an account.
    """
    if not is_valid_algorand_address(address):
        return {"error": "Invalid Algorand address."}

    try:
        raw = await client.fetch_account(address.strip())
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Account not found.")
    except Exception:
        logger.exception("Unexpected error fetching account info")
        return {"error": "Unexpected error while retrieving account info."}
    return raw


async def get_account_asset_info(address: str, asset_id: int, *, client=default_algod_client) -> Dict[str, Any]:
    """Return one account's holding of one asset."""
    if not is_valid_algorand_address(address):
        return {"error": "Invalid Algorand address."}
    parsed_asset_id = parse_non_negative_int(asset_id)
    if parsed_asset_id is None:
        return {"error": "Invalid asset id."}

    try:
        return await client.fetch_account_asset(address.strip(), parsed_asset_id)
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Asset holding not found.")
    except Exception:
        logger.exception("Unexpected error fetching asset holding")
        return {"error": "Unexpected error while retrieving asset holding."}


async def get_account_application_info(address: str, app_id: int, *, client=default_algod_client) -> Dict[str, Any]:
    """Return one account's local state and created params for one application."""
    if not is_valid_algorand_address(address):
        return {"error": "Invalid Algorand address."}
    parsed_app_id = parse_non_negative_int(app_id)
    if not parsed_app_id:
        return {"error": "Invalid application id."}

    try:
        return await client.fetch_account_application(address.strip(), parsed_app_id)
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Application not found for account.")
    except Exception:
        logger.exception("Unexpected error fetching account application info")
        return {"error": "Unexpected error while retrieving account application info."}


async def get_application_info(app_id: int, *, client=default_algod_client) -> Dict[str, Any]:
    """
    Return application params and the complete global state.

    Unlike algod's own response, ``global-state`` (when the node reports one)
    sits next to ``id`` and ``params`` rather than inside ``params``, so the
    response envelope returns it whole instead of paging through it.
    """
    parsed_app_id = parse_non_negative_int(app_id)
    if not parsed_app_id:
        return {"error": "Invalid application id."}

    try:
        raw = await client.fetch_application(parsed_app_id)
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Application not found.")
    except Exception:
        logger.exception("Unexpected error fetching application %s", parsed_app_id)
        return {"error": "Unexpected error while retrieving application info."}

    params = dict(raw.get("params") or {})
    result: Dict[str, Any] = {"id": raw.get("id", parsed_app_id), "params": params}
    if GLOBAL_STATE_KEY in params:
        result[GLOBAL_STATE_KEY] = params.pop(GLOBAL_STATE_KEY)
    return result


def _decode_state_value(value: Dict[str, Any]) -> Dict[str, Any]:
    # TEAL value type 1 is bytes, 2 is uint.
    if value.get("type") == 1:
        decoded: Dict[str, Any] = {"raw": value.get("bytes", ""), "type": "bytes"}
        as_string = utf8_view(value.get("bytes", ""))
        if as_string is not None:
            decoded["asString"] = as_string
        return decoded
    return {"raw": value.get("uint", 0), "type": "uint"}


async def get_application_state(app_id: int, *, client=default_algod_client) -> Dict[str, Any]:
    """Return an application's global state with keys and byte values decoded."""
    parsed_app_id = parse_non_negative_int(app_id)
    if not parsed_app_id:
        return {"error": "Invalid application id."}

    try:
        raw = await client.fetch_application(parsed_app_id)
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Application not found.")
    except Exception:
        logger.exception("Unexpected error fetching state of application %s", parsed_app_id)
        return {"error": "Unexpected error while retrieving application state."}

    global_state = (raw.get("params") or {}).get(GLOBAL_STATE_KEY) or []
    processed: List[Dict[str, Any]] = []
    for item in global_state:
        if not isinstance(item, dict):
            continue
        key = item.get("key", "")
        processed.append(
            {
                "key": utf8_view(key) or key,
                "keyAsBase64": key,
                "value": _decode_state_value(item.get("value") or {}),
            }
        )
    return {"appId": parsed_app_id, "globalState": processed, "raw": global_state}


async def get_application_box_value(app_id: int, name: str, *, client=default_algod_client) -> Dict[str, Any]:
    """Return one box's contents; ``name`` is taken as UTF-8 text."""
    parsed_app_id = parse_non_negative_int(app_id)
    if not parsed_app_id:
        return {"error": "Invalid application id."}
    if not isinstance(name, str) or not name:
        return {"error": "Invalid box name."}

    try:
        raw = await client.fetch_application_box(parsed_app_id, name.encode("utf-8"))
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Box not found.")
    except Exception:
        logger.exception("Unexpected error fetching box of application %s", parsed_app_id)
        return {"error": "Unexpected error while retrieving box value."}

    result: Dict[str, Any] = {"appId": parsed_app_id, "name": raw.get("name"), "value": raw.get("value")}
    value_as_string = utf8_view(raw.get("value"))
    if value_as_string is not None:
        result["valueAsString"] = value_as_string
    return result


async def get_application_boxes(
    app_id: int,
    *,
    limit: Optional[int] = None,
    client=default_algod_client,
    config: AlgorandMcpConfig = default_config,
) -> Dict[str, Any]:
    """List box names of an application."""
    parsed_app_id = parse_non_negative_int(app_id)
    if not parsed_app_id:
        return {"error": "Invalid application id."}
    effective_limit = clamp_limit(limit, default=config.default_search_limit, max_value=config.max_search_limit)

    try:
        raw = await client.fetch_application_boxes(parsed_app_id, limit=effective_limit)
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Application not found.")
    except Exception:
        logger.exception("Unexpected error listing boxes for application %s", parsed_app_id)
        return {"error": "Unexpected error while listing application boxes."}

    boxes: List[Dict[str, Any]] = []
    for box in raw.get("boxes") or []:
        if isinstance(box, dict):
            boxes.append(box_name_entry(box.get("name")))
    return {"appId": parsed_app_id, "boxes": boxes}


async def get_asset_info(asset_id: int, *, client=default_algod_client) -> Dict[str, Any]:
    """Return asset params (creator, decimals, unit name, ...)."""
    parsed_asset_id = parse_non_negative_int(asset_id)
    if not parsed_asset_id:
        return {"error": "Invalid asset id."}

    try:
        return await client.fetch_asset(parsed_asset_id)
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Asset not found.")
    except Exception:
        logger.exception("Unexpected error fetching asset %s", parsed_asset_id)
        return {"error": "Unexpected error while retrieving asset info."}


async def get_pending_transactions(
    *,
    limit: Optional[int] = None,
    client=default_algod_client,
    config: AlgorandMcpConfig = default_config,
) -> Dict[str, Any]:
    """Return transactions waiting in the node's pool."""
    effective_limit = clamp_limit(
        limit,
        default=config.default_pending_transactions,
        max_value=config.max_pending_transactions,
    )
    try:
        raw = await client.fetch_pending_transactions(limit=effective_limit)
    except AlgorandApiError as exc:
        return api_error_result(exc)
    except Exception:
        logger.exception("Unexpected error fetching pending transactions")
        return {"error": "Unexpected error while retrieving pending transactions."}

    return {
        "totalTransactions": raw.get("total-transactions", 0),
        "topTransactions": (raw.get("top-transactions") or [])[:effective_limit],
    }


async def get_transaction_info(txid: str, *, client=default_algod_client) -> Dict[str, Any]:
    """Return a pending (or recently confirmed) transaction by id."""
    if not is_valid_txid(txid):
        return {"error": "Invalid transaction id."}

    try:
        return await client.fetch_pending_transaction(txid)
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Transaction not found.")
    except Exception:
        logger.exception("Unexpected error fetching transaction %s", txid)
        return {"error": "Unexpected error while retrieving transaction."}
