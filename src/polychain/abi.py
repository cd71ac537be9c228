"""Minimal contract-call encoding.

Function signatures are kept in canonical form, e.g.
"safeTransferFrom(address,address,uint256)"; the selector and argument
types are both read from that string.
"""

from typing import Any, Sequence

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector


def parse_signature(signature: str) -> tuple[str, list[str]]:
    """Split a canonical signature into (name, argument types)."""
    name, _, rest = signature.partition("(")
    args = rest.rstrip(")")
    return name, [arg for arg in args.split(",") if arg]


def selector(signature: str) -> str:
    """4-byte function selector as 0x-prefixed hex."""
    return "0x" + function_signature_to_4byte_selector(signature).hex()


def encode_call(signature: str, params: Sequence[Any]) -> str:
    """ABI-encode a call (selector + arguments) as 0x-prefixed hex."""
    _, types = parse_signature(signature)
    data = function_signature_to_4byte_selector(signature) + encode(types, list(params))
    return "0x" + data.hex()


def decode_bool(result: str) -> bool:
    """Decode a single bool return value from eth_call hex output."""
    raw = bytes.fromhex(result.removeprefix("0x"))
    (value,) = decode(["bool"], raw)
    return bool(value)
