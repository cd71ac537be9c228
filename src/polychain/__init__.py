"""Multi-chain wallet derivation and NFT transaction construction."""

from polychain.chains import Protocol
from polychain.hdwallet import KeyDerivationEngine, describe
from polychain.tokens import OperationDispatcher, TransactionEncoder

__all__ = [
    "Protocol",
    "KeyDerivationEngine",
    "describe",
    "OperationDispatcher",
    "TransactionEncoder",
]

__version__ = "0.1.0"
