"""LLM-facing tool implementations."""

from .utility import (
    sdk_app_address_by_id,
    sdk_decode_address,
    sdk_encode_address,
    sdk_validate_address,
)
from .algod import (
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
)
from .indexer import (
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
    search_for_accounts,
    search_for_applications,
    search_for_assets,
    search_for_transactions,
)
from . import validators

__all__ = [
    "sdk_validate_address",
    "sdk_encode_address",
    "sdk_decode_address",
    "sdk_app_address_by_id",
    "get_account_info",
    "get_account_asset_info",
    "get_account_application_info",
    "get_application_info",
    "get_application_state",
    "get_application_box_value",
    "get_application_boxes",
    "get_asset_info",
    "get_pending_transactions",
    "get_transaction_info",
    "lookup_account_by_id",
    "lookup_account_assets",
    "lookup_account_transactions",
    "lookup_account_app_local_states",
    "lookup_account_created_applications",
    "search_for_accounts",
    "lookup_applications",
    "lookup_application_logs",
    "lookup_application_boxes",
    "lookup_application_box",
    "search_for_applications",
    "lookup_asset_balances",
    "search_for_assets",
    "lookup_transaction_by_id",
    "search_for_transactions",
    "validators",
]
