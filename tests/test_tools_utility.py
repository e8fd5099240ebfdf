from algosdk import logic

from algorand_mcp.tools import (
    sdk_app_address_by_id,
    sdk_decode_address,
    sdk_encode_address,
    sdk_validate_address,
)
from algorand_mcp.tools.validators import is_valid_algorand_address

ZERO_ADDRESS = "AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAY5HFKQ"


def test_validate_address():
    assert sdk_validate_address(ZERO_ADDRESS) == {"isValid": True}
    assert sdk_validate_address("bad") == {"isValid": False}


def test_encode_address():
    assert sdk_encode_address("00" * 32) == {"address": ZERO_ADDRESS}
    assert sdk_encode_address("zz") == {"error": "Public key must be 32 bytes of hex."}
    assert sdk_encode_address("00" * 31) == {"error": "Public key must be 32 bytes of hex."}
    assert sdk_encode_address(None) == {"error": "Public key must be a hex string."}


def test_decode_address():
    assert sdk_decode_address(ZERO_ADDRESS) == {"publicKey": "00" * 32}
    assert sdk_decode_address("bad") == {"error": "Invalid Algorand address."}
    assert sdk_decode_address(None) == {"error": "Invalid Algorand address."}


def test_app_address_by_id():
    result = sdk_app_address_by_id(1234)
    assert result == {"address": logic.get_application_address(1234)}
    assert is_valid_algorand_address(result["address"])
    assert sdk_app_address_by_id("1234") == result
    assert is_valid_algorand_address(sdk_app_address_by_id(2**64 - 1)["address"])
    for bad in (0, -5, "x", 2**64, None):
        assert sdk_app_address_by_id(bad) == {"error": "Invalid application id."}
