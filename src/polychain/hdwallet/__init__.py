"""HD wallet module for multi-protocol key derivation."""

from polychain.hdwallet.base import (
    ChainScheme,
    Curve,
    DerivationPath,
    GeneratedWallet,
    WalletKeySet,
)
from polychain.hdwallet.engine import KeyDerivationEngine
from polychain.hdwallet.registry import describe, get_supported_protocols

__all__ = [
    "ChainScheme",
    "Curve",
    "DerivationPath",
    "GeneratedWallet",
    "WalletKeySet",
    "KeyDerivationEngine",
    "describe",
    "get_supported_protocols",
]
