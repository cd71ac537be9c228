"""Field validators shared by the protocol strategies.

Every helper raises ValidationFailed (or its InvalidAmount subclass) with a
short reason naming the rule that failed.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from bip_utils import Base58Decoder
from eth_utils import is_address
from solders.pubkey import Pubkey

from polychain.errors import InvalidAmount, ValidationFailed
from polychain.hdwallet.btc import HATHOR_ADDRESS_VERSIONS

_HATHOR_TOKEN_UID_RE = re.compile(r"^[0-9a-fA-F]{64}$")

UINT256_LIMIT = 2**256


def require(condition: Any, reason: str) -> None:
    """Raise ValidationFailed(reason) unless condition holds."""
    if not condition:
        raise ValidationFailed(reason)


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def to_decimal(value: Any) -> Optional[Decimal]:
    """Parse a numeric value, or None if it is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def parse_amount(value: Any, reason: str = "Invalid amount") -> Decimal:
    """Amount must be present, numeric and >= 0."""
    number = to_decimal(value)
    if number is None or number < 0:
        raise InvalidAmount(reason)
    return number


def check_optional_amount(value: Any, reason: str = "Invalid amount") -> None:
    """Amount may be absent; if present it must be numeric and >= 0."""
    if value is not None:
        parse_amount(value, reason)


def parse_positive_integer(value: Any, reason: str, maximum: int) -> int:
    """Whole number in [1, maximum] (UTXO outputs, SPL amounts)."""
    number = to_decimal(value)
    # Range checks stay ahead of int(), which expands the exponent
    if number is None or number <= 0 or number > maximum:
        raise InvalidAmount(reason)
    if number != number.to_integral_value():
        raise InvalidAmount(reason)
    return int(number)


def parse_uint256(value: Any, reason: str) -> int:
    """Whole number in [0, 2^256) for ABI uint256 parameters."""
    number = to_decimal(value)
    if number is None or number < 0 or number >= UINT256_LIMIT:
        raise InvalidAmount(reason)
    if number != number.to_integral_value():
        raise InvalidAmount(reason)
    return int(number)


def parse_token_id(value: Any) -> int:
    """Token id must be a whole number in the uint256 range."""
    number = to_decimal(value)
    if number is None or number < 0 or number >= UINT256_LIMIT or number != number.to_integral_value():
        raise ValidationFailed("Invalid token id")
    return int(number)


def is_evm_address(value: Any) -> bool:
    return isinstance(value, str) and is_address(value)


def is_hathor_address(value: Any) -> bool:
    """Base58check, 21-byte payload with a known Hathor version byte."""
    if not is_non_empty_string(value):
        return False
    try:
        payload = Base58Decoder.CheckDecode(value)
    except Exception:
        return False
    return len(payload) == 21 and payload[0] in HATHOR_ADDRESS_VERSIONS


def is_hathor_token_uid(value: Any) -> bool:
    """32-byte token uid in hex."""
    return isinstance(value, str) and bool(_HATHOR_TOKEN_UID_RE.match(value))


def is_solana_address(value: Any) -> bool:
    if not is_non_empty_string(value):
        return False
    try:
        Pubkey.from_string(value)
    except Exception:
        return False
    return True
