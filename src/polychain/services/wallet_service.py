"""Wallet service.

Entry points for wallet creation and lookup on every supported protocol.
Key material is returned to the caller and never stored or logged here.
"""

import logging
from typing import Optional, Sequence, Union

from polychain.chains import Protocol, to_protocol
from polychain.config import Settings, get_settings
from polychain.errors import InvalidKeyMaterial, ValidationFailed
from polychain.hdwallet import (
    DerivationPath,
    GeneratedWallet,
    KeyDerivationEngine,
    WalletKeySet,
)
from polychain.providers.api import HttpChainQueryClient
from polychain.providers.base import ChainQueryClient
from polychain.tokens.queries import build_wallet_query

logger = logging.getLogger(__name__)


class WalletService:
    """Wallet generation, import and read-only wallet info.

    A fresh mnemonic is only created by create_wallet(); every other entry
    point works on material the caller supplies.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        query_client: Optional[ChainQueryClient] = None,
    ):
        self.settings = settings or get_settings()
        self.engine = KeyDerivationEngine(self.settings)
        self.query_client = query_client or HttpChainQueryClient(self.settings)

    def create_wallet(
        self,
        protocol: Union[Protocol, str],
        derivation: Union[DerivationPath, dict, None] = None,
        testnet: Optional[bool] = None,
    ) -> GeneratedWallet:
        """Create a wallet from fresh entropy, returning its new mnemonic."""
        return self.engine.generate_wallet(protocol, derivation, testnet)

    def generate_wallet(
        self,
        protocol: Union[Protocol, str],
        mnemonic: str,
        derivation: Union[DerivationPath, dict, None] = None,
        testnet: Optional[bool] = None,
    ) -> WalletKeySet:
        """Derive the wallet at a derivation path from a mnemonic."""
        if not mnemonic:
            raise InvalidKeyMaterial("Mnemonic is required; use create_wallet() for a new one")
        return self.engine.derive_from_seed(mnemonic, protocol, derivation, testnet)

    def generate_wallet_from_private_key(
        self,
        private_key: str,
        protocol: Union[Protocol, str],
        testnet: Optional[bool] = None,
    ) -> WalletKeySet:
        """Compute address and public key for an existing private key."""
        if not private_key:
            raise InvalidKeyMaterial("Private key is required")
        return self.engine.derive_from_private_key(private_key, protocol, testnet)

    def generate_address_from_xpub(
        self,
        xpub: str,
        protocol: Union[Protocol, str],
        index: int = 0,
        testnet: Optional[bool] = None,
    ) -> str:
        """Derive a receive address from an extended public key."""
        return self.engine.derive_address_from_xpub(xpub, protocol, index, testnet)

    async def get_wallet_info(
        self,
        protocol: Union[Protocol, str],
        address: str,
        token_addresses: Optional[Sequence[str]] = None,
    ) -> dict:
        """Get balances and info of a wallet from the chain data API.

        Args:
            protocol: Wallet protocol
            address: Wallet address or public key
            token_addresses: Token contracts to include balances for

        Raises:
            ValidationFailed: If address or token addresses are malformed
            ChainQueryError: If the API request fails
        """
        protocol = to_protocol(protocol)
        if not address or not isinstance(address, str):
            raise ValidationFailed("Invalid address")
        if token_addresses is not None:
            if isinstance(token_addresses, str) or not all(
                isinstance(token, str) and token for token in token_addresses
            ):
                raise ValidationFailed("Invalid token addresses")

        path, params = build_wallet_query(protocol, address, token_addresses)
        logger.debug(f"Fetching wallet info for {address[:10]}... on {protocol.value}")
        return await self.query_client.query(protocol, path, params)
