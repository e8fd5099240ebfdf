"""Shared validation helpers and thin wrappers over the algosdk address codec."""

from __future__ import annotations

import base64
import binascii
import re
from typing import Any, Dict, Optional

from algosdk import constants, encoding, error, logic

# Algorand addresses are 58 characters of unpadded RFC 4648 base32.
ADDRESS_REGEX = re.compile(r"^[A-Z2-7]{58}$")
TXID_REGEX = re.compile(r"^[A-Z2-7]{52}$")
ADDRESS_LENGTH = constants.address_len
PUBLIC_KEY_LENGTH = constants.key_len_bytes


def encode_address(public_key: bytes) -> str:
    """Encode a 32-byte public key as an Algorand address."""
    # algosdk encodes keys of any length; only real public keys are accepted here.
    if not isinstance(public_key, bytes) or len(public_key) != PUBLIC_KEY_LENGTH:
        raise ValueError("Public key must be 32 bytes.")
    return encoding.encode_address(public_key)


def decode_address(address: str) -> bytes:
    """Return the public key of ``address``; raises ValueError when malformed or the checksum fails."""
    if not isinstance(address, str) or not ADDRESS_REGEX.fullmatch(address):
        raise ValueError("Invalid Algorand address.")
    try:
        return encoding.decode_address(address)
    except (error.WrongChecksumError, error.WrongKeyLengthError, binascii.Error) as exc:
        raise ValueError("Invalid Algorand address.") from exc


def is_valid_algorand_address(address: Optional[str]) -> bool:
    """Format and checksum validation for Algorand addresses."""
    if not address or not isinstance(address, str):
        return False
    return encoding.is_valid_address(address.strip())


def application_address(app_id: int) -> str:
    """Escrow address controlled by an application."""
    return logic.get_application_address(app_id)


def utf8_view(encoded: Any) -> Optional[str]:
    """UTF-8 text of a base64 value, or None when it is not clean text."""
    if not isinstance(encoded, str):
        return None
    try:
        return base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, ValueError):
        return None


def box_name_bytes(name: str) -> bytes:
    """
    Interpret a user-supplied box name.

    Numbers and addresses are taken literally; anything else is decoded as
    base64 when it is valid base64 and used as UTF-8 text otherwise.
    """
    if name.strip().isdigit() or is_valid_algorand_address(name):
        return name.encode("utf-8")
    try:
        return base64.b64decode(name, validate=True)
    except binascii.Error:
        return name.encode("utf-8")


def is_valid_txid(value: Optional[str]) -> bool:
    if not value or not isinstance(value, str):
        return False
    return bool(TXID_REGEX.fullmatch(value))


def parse_non_negative_int(value: Any) -> Optional[int]:
    """Parse ids (asset, application, round); None when missing or invalid."""
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return None
    if parsed < 0:
        return None
    return parsed


def clamp_limit(value: Optional[int], *, default: int, max_value: int) -> int:
    """Clamp limit-style integers to configured bounds."""
    if value is None:
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    if parsed < 0:
        return default
    return min(parsed, max_value)


def box_name_entry(raw_name: Any) -> Dict[str, Any]:
    """Boxes are listed by base64 name; add a UTF-8 view when it decodes cleanly."""
    entry: Dict[str, Any] = {"name": raw_name}
    name_as_string = utf8_view(raw_name)
    if name_as_string is not None:
        entry["nameAsString"] = name_as_string
    return entry
