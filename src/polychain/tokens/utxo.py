"""Hathor token strategy.

Hathor tokens are UTXO outputs tagged with a token uid, so a transfer is a
list of outputs. A request carries either one destination+amount pair or a
destinations fan-out list, never both.
"""

from typing import Optional

from polychain.chains import Protocol
from polychain.tokens.base import (
    OperationKind,
    TokenCapability,
    TokenOperationRequest,
    TokenStrategy,
    UnsignedTransaction,
)
from polychain.tokens.validation import (
    is_hathor_address,
    is_hathor_token_uid,
    parse_positive_integer,
    require,
)

# Output values are signed 8-byte integers
HATHOR_MAX_OUTPUT_AMOUNT = 2**63 - 1

HATHOR_KINDS = frozenset({
    OperationKind.INFO,
    OperationKind.BALANCE,
    OperationKind.METADATA,
    OperationKind.TRANSFER,
})


class HathorTokenStrategy(TokenStrategy):
    """Builds Hathor token outputs."""

    def supports(self, kind: OperationKind) -> bool:
        return kind in HATHOR_KINDS

    def validate(self, request: TokenOperationRequest) -> None:
        require(is_hathor_token_uid(request.token), "Invalid token uid")
        if request.sender is not None:
            require(is_hathor_address(request.sender), "Invalid sender address")

        has_single = request.destination is not None
        has_many = request.destinations is not None
        require(
            has_single != has_many,
            "Exactly one of destination or destinations is required",
        )

        if has_single:
            require(is_hathor_address(request.destination), "Invalid destination address")
            parse_positive_integer(request.amount, "Invalid amount", HATHOR_MAX_OUTPUT_AMOUNT)
        else:
            require(request.destinations, "Destinations list is empty")
            require(request.amount is None, "Amount must be set per destination")
            for index, item in enumerate(request.destinations):
                require(
                    is_hathor_address(item.address),
                    f"Invalid destination address at index {index}",
                )
                parse_positive_integer(
                    item.amount, f"Invalid amount at index {index}", HATHOR_MAX_OUTPUT_AMOUNT
                )

    def validate_query(self, request: TokenOperationRequest) -> None:
        require(is_hathor_token_uid(request.token), "Invalid token uid")
        if request.kind == OperationKind.BALANCE:
            require(is_hathor_address(request.address), "Invalid address")

    def encode(
        self,
        request: TokenOperationRequest,
        capability: Optional[TokenCapability] = None,
        testnet: bool = False,
    ) -> UnsignedTransaction:
        if request.destination is not None:
            outputs = [{
                "address": request.destination,
                "amount": parse_positive_integer(request.amount, "Invalid amount", HATHOR_MAX_OUTPUT_AMOUNT),
                "token": request.token,
            }]
        else:
            outputs = [
                {
                    "address": item.address,
                    "amount": parse_positive_integer(
                        item.amount, "Invalid amount", HATHOR_MAX_OUTPUT_AMOUNT
                    ),
                    "token": request.token,
                }
                for item in request.destinations
            ]

        payload = {"outputs": outputs}
        if request.sender:
            payload["wallet"] = request.sender

        return UnsignedTransaction(
            protocol=Protocol.HATHOR,
            target=request.token,
            payload=payload,
            description=f"Transfer token {request.token[:8]}... to {len(outputs)} output(s)",
        )
