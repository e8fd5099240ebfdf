"""Address utilities that never touch the network."""

from __future__ import annotations

import binascii
from typing import Any, Dict

from algorand_mcp.tools.validators import (
    application_address,
    decode_address,
    encode_address,
    is_valid_algorand_address,
    parse_non_negative_int,
)

MAX_UINT64 = 2**64 - 1


def sdk_validate_address(address: str) -> Dict[str, bool]:
    """Check if an Algorand address is well formed and its checksum matches."""
    return {"isValid": is_valid_algorand_address(address)}


def sdk_encode_address(public_key: str) -> Dict[str, str]:
    """Encode a hex public key to an Algorand address."""
    if not isinstance(public_key, str):
        return {"error": "Public key must be a hex string."}
    try:
        key_bytes = binascii.unhexlify(public_key.strip())
        address = encode_address(key_bytes)
    except (binascii.Error, ValueError):
        return {"error": "Public key must be 32 bytes of hex."}
    return {"address": address}


def sdk_decode_address(address: str) -> Dict[str, str]:
    """Decode an Algorand address to its hex public key."""
    try:
        public_key = decode_address(address.strip() if isinstance(address, str) else address)
    except ValueError:
        return {"error": "Invalid Algorand address."}
    return {"publicKey": public_key.hex()}


def sdk_app_address_by_id(app_id: Any) -> Dict[str, str]:
    """Return the escrow address of an application."""
    parsed = parse_non_negative_int(app_id)
    if parsed is None or parsed == 0 or parsed > MAX_UINT64:
        return {"error": "Invalid application id."}
    return {"address": application_address(parsed)}
