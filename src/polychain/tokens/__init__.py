"""Token (NFT) operations across UTXO, EVM and account-based chains."""

from polychain.tokens.base import (
    Destination,
    OperationKind,
    TokenCapability,
    TokenOperationRequest,
    TransactionReceipt,
    UnsignedTransaction,
)
from polychain.tokens.capability import CapabilityProber
from polychain.tokens.dispatcher import DispatchContext, DispatchState, OperationDispatcher
from polychain.tokens.encoder import TransactionEncoder
from polychain.tokens.factory import get_token_protocols, get_token_strategy

__all__ = [
    "Destination",
    "OperationKind",
    "TokenCapability",
    "TokenOperationRequest",
    "TransactionReceipt",
    "UnsignedTransaction",
    "CapabilityProber",
    "DispatchContext",
    "DispatchState",
    "OperationDispatcher",
    "TransactionEncoder",
    "get_token_protocols",
    "get_token_strategy",
]
