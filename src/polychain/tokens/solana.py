"""Solana token strategy.

An NFT on Solana is an SPL mint with supply 1, so a transfer is a single
token-transfer instruction with the non-fungible flag set.
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
from polychain.tokens.validation import is_solana_address, parse_positive_integer, require

SOLANA_KINDS = frozenset({
    OperationKind.INFO,
    OperationKind.BALANCE,
    OperationKind.METADATA,
    OperationKind.TRANSFER,
})

# SPL token amounts are u64
SOLANA_MAX_AMOUNT = 2**64 - 1

# Default quantity for a non-fungible transfer
DEFAULT_NFT_AMOUNT = 1


class SolanaTokenStrategy(TokenStrategy):
    """Builds a single SPL transfer instruction."""

    def supports(self, kind: OperationKind) -> bool:
        return kind in SOLANA_KINDS

    def validate(self, request: TokenOperationRequest) -> None:
        require(is_solana_address(request.sender), "Invalid sender address")
        require(is_solana_address(request.token), "Invalid token address")
        require(is_solana_address(request.destination), "Invalid destination address")
        require(request.destinations is None, "Solana transfers take a single destination")
        if request.amount is not None:
            parse_positive_integer(request.amount, "Invalid amount", SOLANA_MAX_AMOUNT)

    def validate_query(self, request: TokenOperationRequest) -> None:
        require(is_solana_address(request.token), "Invalid token address")
        if request.kind == OperationKind.BALANCE:
            require(is_solana_address(request.address), "Invalid address")

    def encode(
        self,
        request: TokenOperationRequest,
        capability: Optional[TokenCapability] = None,
        testnet: bool = False,
    ) -> UnsignedTransaction:
        amount = DEFAULT_NFT_AMOUNT
        if request.amount is not None:
            amount = parse_positive_integer(request.amount, "Invalid amount", SOLANA_MAX_AMOUNT)

        instruction = {
            "source": request.sender,
            "destination": request.destination,
            "token": request.token,
            "amount": amount,
            "nft": True,
        }

        return UnsignedTransaction(
            protocol=Protocol.SOLANA,
            target=request.token,
            payload={"instructions": [instruction]},
            description=f"Transfer NFT {request.token[:8]}... to {request.destination[:8]}...",
        )
