"""Tools backed by the indexer (historical and searchable chain data)."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from algorand_mcp.algorand_api import AlgorandApiError, default_indexer_client
from algorand_mcp.config import AlgorandMcpConfig, default_config
from algorand_mcp.tools.errors import api_error_result
from algorand_mcp.tools.validators import (
    box_name_bytes,
    box_name_entry,
    clamp_limit,
    is_valid_algorand_address,
    is_valid_txid,
    parse_non_negative_int,
    utf8_view,
)

logger = logging.getLogger(__name__)

TX_TYPES = {"pay", "keyreg", "acfg", "axfer", "afrz", "appl", "stpf", "hb"}
ADDRESS_ROLES = {"sender", "receiver", "freeze-target"}
SIG_TYPES = {"sig", "msig", "lsig"}


def _with_next_token(result: Dict[str, Any], raw: Dict[str, Any]) -> Dict[str, Any]:
    if raw.get("next-token"):
        result["nextToken"] = raw["next-token"]
    return result


async def lookup_account_by_id(address: str, *, client=default_indexer_client) -> Dict[str, Any]:
    """Return the indexer's view of an account."""
    if not is_valid_algorand_address(address):
        return {"error": "Invalid Algorand address."}

    try:
        raw = await client.lookup_account(address.strip())
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Account not found.")
    except Exception:
        logger.exception("Unexpected error looking up account")
        return {"error": "Unexpected error while looking up account."}
    return {"account": raw.get("account") or {}, "currentRound": raw.get("current-round")}


async def lookup_account_assets(
    address: str,
    *,
    asset_id: Optional[int] = None,
    limit: Optional[int] = None,
    next_token: Optional[str] = None,
    client=default_indexer_client,
    config: AlgorandMcpConfig = default_config,
) -> Dict[str, Any]:
    """Return asset holdings of an account."""
    if not is_valid_algorand_address(address):
        return {"error": "Invalid Algorand address."}
    parsed_asset_id = parse_non_negative_int(asset_id)
    if asset_id is not None and parsed_asset_id is None:
        return {"error": "Invalid asset id."}
    effective_limit = clamp_limit(limit, default=config.default_search_limit, max_value=config.max_search_limit)

    try:
        return await client.lookup_account_assets(
            address.strip(),
            asset_id=parsed_asset_id,
            limit=effective_limit,
            next_token=next_token or None,
        )
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Account not found.")
    except Exception:
        logger.exception("Unexpected error looking up account assets")
        return {"error": "Unexpected error while looking up account assets."}


async def lookup_applications(app_id: int, *, client=default_indexer_client) -> Dict[str, Any]:
    """Return an application record (id, params, global state)."""
    parsed_app_id = parse_non_negative_int(app_id)
    if not parsed_app_id:
        return {"error": "Invalid application id."}

    try:
        raw = await client.lookup_application(parsed_app_id)
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Application not found.")
    except Exception:
        logger.exception("Unexpected error looking up application %s", parsed_app_id)
        return {"error": "Unexpected error while looking up application."}
    # Only the application object, not the round bookkeeping around it.
    return {"application": raw.get("application") or {}}


async def lookup_application_logs(
    app_id: int,
    *,
    limit: Optional[int] = None,
    min_round: Optional[int] = None,
    max_round: Optional[int] = None,
    txid: Optional[str] = None,
    sender: Optional[str] = None,
    next_token: Optional[str] = None,
    client=default_indexer_client,
    config: AlgorandMcpConfig = default_config,
) -> Dict[str, Any]:
    """Return log messages emitted by an application."""
    parsed_app_id = parse_non_negative_int(app_id)
    if not parsed_app_id:
        return {"error": "Invalid application id."}
    if txid is not None and not is_valid_txid(txid):
        return {"error": "Invalid transaction id."}
    if sender is not None and not is_valid_algorand_address(sender):
        return {"error": "Invalid Algorand address."}
    effective_limit = clamp_limit(limit, default=config.default_search_limit, max_value=config.max_search_limit)

    try:
        return await client.lookup_application_logs(
            parsed_app_id,
            limit=effective_limit,
            min_round=parse_non_negative_int(min_round),
            max_round=parse_non_negative_int(max_round),
            txid=txid,
            sender=sender,
            next_token=next_token or None,
        )
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Application not found.")
    except Exception:
        logger.exception("Unexpected error looking up logs for application %s", parsed_app_id)
        return {"error": "Unexpected error while looking up application logs."}


async def search_for_transactions(
    *,
    address: Optional[str] = None,
    address_role: Optional[str] = None,
    tx_type: Optional[str] = None,
    asset_id: Optional[int] = None,
    application_id: Optional[int] = None,
    min_round: Optional[int] = None,
    max_round: Optional[int] = None,
    note_prefix: Optional[str] = None,
    limit: Optional[int] = None,
    next_token: Optional[str] = None,
    client=default_indexer_client,
    config: AlgorandMcpConfig = default_config,
) -> Dict[str, Any]:
    """Search confirmed transactions with indexer filters."""
    if address is not None and not is_valid_algorand_address(address):
        return {"error": "Invalid Algorand address."}
    normalized_role = address_role.strip().lower() if isinstance(address_role, str) else None
    if normalized_role is not None and normalized_role not in ADDRESS_ROLES:
        return {"error": "Invalid address role."}
    normalized_type = tx_type.strip().lower() if isinstance(tx_type, str) else None
    if normalized_type is not None and normalized_type not in TX_TYPES:
        return {"error": "Invalid transaction type."}
    effective_limit = clamp_limit(limit, default=config.default_search_limit, max_value=config.max_search_limit)

    filters: Dict[str, Any] = {
        "address": address.strip() if address else None,
        "address-role": normalized_role,
        "tx-type": normalized_type,
        "asset-id": parse_non_negative_int(asset_id),
        "application-id": parse_non_negative_int(application_id),
        "min-round": parse_non_negative_int(min_round),
        "max-round": parse_non_negative_int(max_round),
        "note-prefix": note_prefix or None,
        "limit": effective_limit,
        "next": next_token or None,
    }
    try:
        return await client.search_transactions(**filters)
    except AlgorandApiError as exc:
        return api_error_result(exc)
    except Exception:
        logger.exception("Unexpected error searching transactions")
        return {"error": "Unexpected error while searching transactions."}


async def lookup_transaction_by_id(txid: str, *, client=default_indexer_client) -> Dict[str, Any]:
    """Return a confirmed transaction by id."""
    if not is_valid_txid(txid):
        return {"error": "Invalid transaction id."}

    try:
        return await client.lookup_transaction(txid)
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Transaction not found.")
    except Exception:
        logger.exception("Unexpected error looking up transaction %s", txid)
        return {"error": "Unexpected error while looking up transaction."}


async def lookup_account_transactions(
    address: str,
    *,
    tx_type: Optional[str] = None,
    sig_type: Optional[str] = None,
    asset_id: Optional[int] = None,
    before_time: Optional[str] = None,
    after_time: Optional[str] = None,
    currency_greater_than: Optional[int] = None,
    currency_less_than: Optional[int] = None,
    round: Optional[int] = None,
    min_round: Optional[int] = None,
    max_round: Optional[int] = None,
    limit: Optional[int] = None,
    next_token: Optional[str] = None,
    client=default_indexer_client,
    config: AlgorandMcpConfig = default_config,
) -> Dict[str, Any]:
    """Return the confirmed transaction history of one account."""
    if not is_valid_algorand_address(address):
        return {"error": "Invalid Algorand address."}
    normalized_type = tx_type.strip().lower() if isinstance(tx_type, str) else None
    if normalized_type is not None and normalized_type not in TX_TYPES:
        return {"error": "Invalid transaction type."}
    normalized_sig = sig_type.strip().lower() if isinstance(sig_type, str) else None
    if normalized_sig is not None and normalized_sig not in SIG_TYPES:
        return {"error": "Invalid signature type."}
    effective_limit = clamp_limit(limit, default=config.default_search_limit, max_value=config.max_search_limit)

    filters: Dict[str, Any] = {
        "tx-type": normalized_type,
        "sig-type": normalized_sig,
        "asset-id": parse_non_negative_int(asset_id),
        "before-time": before_time or None,
        "after-time": after_time or None,
        "currency-greater-than": parse_non_negative_int(currency_greater_than),
        "currency-less-than": parse_non_negative_int(currency_less_than),
        "round": parse_non_negative_int(round),
        "min-round": parse_non_negative_int(min_round),
        "max-round": parse_non_negative_int(max_round),
        "limit": effective_limit,
        "next": next_token or None,
    }
    try:
        return await client.lookup_account_transactions(address.strip(), **filters)
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Account not found.")
    except Exception:
        logger.exception("Unexpected error looking up account transactions")
        return {"error": "Unexpected error while looking up account transactions."}


async def lookup_account_app_local_states(address: str, *, client=default_indexer_client) -> Dict[str, Any]:
    """Return the local state an account holds in each opted-in application."""
    if not is_valid_algorand_address(address):
        return {"error": "Invalid Algorand address."}

    try:
        return await client.lookup_account_app_local_states(address.strip())
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Account not found.")
    except Exception:
        logger.exception("Unexpected error looking up account local states")
        return {"error": "Unexpected error while looking up account local states."}


async def lookup_account_created_applications(address: str, *, client=default_indexer_client) -> Dict[str, Any]:
    """Return applications created by an account."""
    if not is_valid_algorand_address(address):
        return {"error": "Invalid Algorand address."}

    try:
        raw = await client.lookup_account_created_applications(address.strip())
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Account not found.")
    except Exception:
        logger.exception("Unexpected error looking up created applications")
        return {"error": "Unexpected error while looking up created applications."}
    return {"applications": raw.get("applications") or []}


async def search_for_accounts(
    *,
    asset_id: Optional[int] = None,
    application_id: Optional[int] = None,
    currency_greater_than: Optional[int] = None,
    currency_less_than: Optional[int] = None,
    limit: Optional[int] = None,
    next_token: Optional[str] = None,
    client=default_indexer_client,
    config: AlgorandMcpConfig = default_config,
) -> Dict[str, Any]:
    """Search accounts by holding, opt-in or balance."""
    effective_limit = clamp_limit(limit, default=config.default_search_limit, max_value=config.max_search_limit)
    filters: Dict[str, Any] = {
        "asset-id": parse_non_negative_int(asset_id),
        "application-id": parse_non_negative_int(application_id),
        "currency-greater-than": parse_non_negative_int(currency_greater_than),
        "currency-less-than": parse_non_negative_int(currency_less_than),
        "limit": effective_limit,
        "next": next_token or None,
    }
    try:
        raw = await client.search_accounts(**filters)
    except AlgorandApiError as exc:
        return api_error_result(exc)
    except Exception:
        logger.exception("Unexpected error searching accounts")
        return {"error": "Unexpected error while searching accounts."}
    return _with_next_token({"accounts": raw.get("accounts") or []}, raw)


async def lookup_asset_balances(
    asset_id: int,
    *,
    currency_greater_than: Optional[int] = None,
    currency_less_than: Optional[int] = None,
    limit: Optional[int] = None,
    next_token: Optional[str] = None,
    client=default_indexer_client,
    config: AlgorandMcpConfig = default_config,
) -> Dict[str, Any]:
    """Return accounts holding an asset, with their balances."""
    parsed_asset_id = parse_non_negative_int(asset_id)
    if not parsed_asset_id:
        return {"error": "Invalid asset id."}
    effective_limit = clamp_limit(limit, default=config.default_search_limit, max_value=config.max_search_limit)

    try:
        return await client.lookup_asset_balances(
            parsed_asset_id,
            **{
                "currency-greater-than": parse_non_negative_int(currency_greater_than),
                "currency-less-than": parse_non_negative_int(currency_less_than),
                "limit": effective_limit,
                "next": next_token or None,
            },
        )
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Asset not found.")
    except Exception:
        logger.exception("Unexpected error looking up balances of asset %s", parsed_asset_id)
        return {"error": "Unexpected error while looking up asset balances."}


async def search_for_assets(
    *,
    name: Optional[str] = None,
    unit: Optional[str] = None,
    creator: Optional[str] = None,
    limit: Optional[int] = None,
    next_token: Optional[str] = None,
    client=default_indexer_client,
    config: AlgorandMcpConfig = default_config,
) -> Dict[str, Any]:
    """Search assets by name, unit name or creator."""
    if creator is not None and not is_valid_algorand_address(creator):
        return {"error": "Invalid Algorand address."}
    effective_limit = clamp_limit(limit, default=config.default_search_limit, max_value=config.max_search_limit)

    filters: Dict[str, Any] = {
        "name": name or None,
        "unit": unit or None,
        "creator": creator.strip() if creator else None,
        "limit": effective_limit,
        "next": next_token or None,
    }
    try:
        return await client.search_assets(**filters)
    except AlgorandApiError as exc:
        return api_error_result(exc)
    except Exception:
        logger.exception("Unexpected error searching assets")
        return {"error": "Unexpected error while searching assets."}


async def search_for_applications(
    *,
    creator: Optional[str] = None,
    limit: Optional[int] = None,
    next_token: Optional[str] = None,
    client=default_indexer_client,
    config: AlgorandMcpConfig = default_config,
) -> Dict[str, Any]:
    """Search applications, optionally by creator."""
    if creator is not None and not is_valid_algorand_address(creator):
        return {"error": "Invalid Algorand address."}
    effective_limit = clamp_limit(limit, default=config.default_search_limit, max_value=config.max_search_limit)

    filters: Dict[str, Any] = {
        "creator": creator.strip() if creator else None,
        "limit": effective_limit,
        "next": next_token or None,
    }
    try:
        raw = await client.search_applications(**filters)
    except AlgorandApiError as exc:
        return api_error_result(exc)
    except Exception:
        logger.exception("Unexpected error searching applications")
        return {"error": "Unexpected error while searching applications."}
    return _with_next_token({"applications": raw.get("applications") or []}, raw)


async def lookup_application_boxes(
    app_id: int,
    *,
    limit: Optional[int] = None,
    next_token: Optional[str] = None,
    client=default_indexer_client,
    config: AlgorandMcpConfig = default_config,
) -> Dict[str, Any]:
    """List box names of an application from the indexer."""
    parsed_app_id = parse_non_negative_int(app_id)
    if not parsed_app_id:
        return {"error": "Invalid application id."}
    effective_limit = clamp_limit(limit, default=config.default_search_limit, max_value=config.max_search_limit)

    try:
        raw = await client.lookup_application_boxes(
            parsed_app_id, limit=effective_limit, next_token=next_token or None
        )
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Application not found.")
    except Exception:
        logger.exception("Unexpected error listing indexer boxes for application %s", parsed_app_id)
        return {"error": "Unexpected error while listing application boxes."}

    boxes = [box_name_entry(box.get("name")) for box in raw.get("boxes") or [] if isinstance(box, dict)]
    return _with_next_token({"boxes": boxes}, raw)


async def lookup_application_box(app_id: int, box_name: str, *, client=default_indexer_client) -> Dict[str, Any]:
    """
    Return one box of an application.

    Numeric names and addresses are used as literal text; other names are
    decoded as base64 when they are valid base64.
    """
    parsed_app_id = parse_non_negative_int(app_id)
    if not parsed_app_id:
        return {"error": "Invalid application id."}
    if not isinstance(box_name, str) or not box_name:
        return {"error": "Invalid box name."}

    try:
        raw = await client.lookup_application_box(parsed_app_id, box_name_bytes(box_name))
    except AlgorandApiError as exc:
        return api_error_result(exc, not_found="Box not found.")
    except Exception:
        logger.exception("Unexpected error looking up box of application %s", parsed_app_id)
        return {"error": "Unexpected error while looking up application box."}

    result = dict(raw)
    value_as_string = utf8_view(raw.get("value"))
    if value_as_string is not None:
        result["valueAsString"] = value_as_string
    return result
