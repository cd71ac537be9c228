"""Supported protocols and per-chain network metadata.

Protocol families:
- UTXO: BITCOIN (wallets), HATHOR (token outputs)
- EVM: ETHEREUM, BSC, CELO, POLYGON, AVAXCCHAIN
- Account-based: STELLAR, RIPPLE, SOLANA
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from polychain.errors import UnsupportedProtocol


class Protocol(str, Enum):
    """Blockchain protocol identifier."""

    BITCOIN = "BITCOIN"
    HATHOR = "HATHOR"
    ETHEREUM = "ETHEREUM"
    BSC = "BSC"
    CELO = "CELO"
    POLYGON = "POLYGON"
    AVAXCCHAIN = "AVAXCCHAIN"
    STELLAR = "STELLAR"
    RIPPLE = "RIPPLE"
    SOLANA = "SOLANA"

    def is_evm(self) -> bool:
        return self in EVM_PROTOCOLS


EVM_PROTOCOLS = frozenset({
    Protocol.ETHEREUM,
    Protocol.BSC,
    Protocol.CELO,
    Protocol.POLYGON,
    Protocol.AVAXCCHAIN,
})


@dataclass(frozen=True)
class EvmNetwork:
    """Chain IDs and native asset of an EVM protocol."""

    name: str
    native_asset: str
    chain_id: int
    testnet_chain_id: int

    def get_chain_id(self, testnet: bool) -> int:
        return self.testnet_chain_id if testnet else self.chain_id


EVM_NETWORKS: dict[Protocol, EvmNetwork] = {
    Protocol.ETHEREUM: EvmNetwork("Ethereum", "ETH", 1, 11155111),  # Sepolia
    Protocol.BSC: EvmNetwork("BNB Smart Chain", "BNB", 56, 97),
    Protocol.CELO: EvmNetwork("Celo", "CELO", 42220, 44787),  # Alfajores
    Protocol.POLYGON: EvmNetwork("Polygon", "MATIC", 137, 80002),  # Amoy
    Protocol.AVAXCCHAIN: EvmNetwork("Avalanche C-Chain", "AVAX", 43114, 43113),  # Fuji
}


def to_protocol(value: Union[Protocol, str, None]) -> Protocol:
    """Coerce a protocol name to the enum.

    Raises:
        UnsupportedProtocol: If the name is not a known protocol
    """
    if isinstance(value, Protocol):
        return value
    if not value:
        raise UnsupportedProtocol("Unsupported blockchain protocol: (none)")
    try:
        return Protocol(str(value).upper())
    except ValueError:
        raise UnsupportedProtocol(f"Unsupported blockchain protocol: {value}")


def get_evm_network(protocol: Protocol) -> Optional[EvmNetwork]:
    """Get EVM network metadata, or None for non-EVM protocols."""
    return EVM_NETWORKS.get(protocol)
