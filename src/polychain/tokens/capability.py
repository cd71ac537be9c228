"""Capability prober.

Classifies an EVM token contract by asking it, through ERC-165
supportsInterface, which NFT standard it implements:

1. ERC-721 (0x80ac58cd): stop here if supported
2. ERC-1155 (0xd9b67a26)
3. Neither: UNKNOWN, encoded downstream as amount-based

Network failures are never downgraded to UNKNOWN; a wrong guess would
build a transaction the contract rejects.
"""

import asyncio
import logging
from typing import Optional, Union

from polychain.chains import Protocol, to_protocol
from polychain.config import Settings, get_settings
from polychain.errors import ProbeTimeout, UnsupportedProtocol
from polychain.providers.base import ContractReader
from polychain.tokens.base import TokenCapability
from polychain.tokens.evm import ERC721_INTERFACE_ID, ERC1155_INTERFACE_ID, SUPPORTS_INTERFACE

logger = logging.getLogger(__name__)

# Probe order matters: a contract reporting both is treated as ERC-721
PROBE_ORDER: tuple[tuple[str, TokenCapability], ...] = (
    (ERC721_INTERFACE_ID, TokenCapability.NON_FUNGIBLE_UNIQUE),
    (ERC1155_INTERFACE_ID, TokenCapability.NON_FUNGIBLE_SEMI_FUNGIBLE),
)

CapabilityCache = dict[tuple[Protocol, str], TokenCapability]


class CapabilityProber:
    """Resolves TokenCapability through a ContractReader."""

    def __init__(self, reader: ContractReader, settings: Optional[Settings] = None):
        self.reader = reader
        self.settings = settings or get_settings()

    async def supports_interface(
        self,
        protocol: Protocol,
        contract: str,
        interface_id: str,
        testnet: bool = False,
    ) -> bool:
        """Call supportsInterface(bytes4) on a contract."""
        return await self.reader.call(
            protocol,
            contract,
            SUPPORTS_INTERFACE,
            [bytes.fromhex(interface_id.removeprefix("0x"))],
            testnet=testnet,
        )

    async def classify(
        self,
        protocol: Union[Protocol, str],
        contract: str,
        cache: Optional[CapabilityCache] = None,
        testnet: bool = False,
    ) -> TokenCapability:
        """Classify a token contract.

        Args:
            protocol: EVM protocol the contract lives on
            contract: Contract address
            cache: Optional per-call cache keyed by (protocol, contract)
            testnet: Network selection

        Raises:
            UnsupportedProtocol: If protocol is not EVM
            ProbeUnavailable: If the node could not be reached
            ProbeTimeout: If probing exceeded settings.probe_timeout or was cancelled
        """
        protocol = to_protocol(protocol)
        if not protocol.is_evm():
            raise UnsupportedProtocol(
                f"Capability probing is only available on EVM protocols, not {protocol.value}"
            )

        key = (protocol, contract.lower())
        if cache is not None and key in cache:
            return cache[key]

        try:
            capability = await asyncio.wait_for(
                self._probe(protocol, contract, testnet),
                timeout=self.settings.probe_timeout,
            )
        except asyncio.TimeoutError as e:
            raise ProbeTimeout(
                f"Capability probe timed out after {self.settings.probe_timeout}s "
                f"for {contract} on {protocol.value}"
            ) from e
        except asyncio.CancelledError as e:
            raise ProbeTimeout(f"Capability probe cancelled for {contract} on {protocol.value}") from e

        logger.info(f"Classified {contract} on {protocol.value} as {capability.value}")
        if cache is not None:
            cache[key] = capability
        return capability

    async def _probe(self, protocol: Protocol, contract: str, testnet: bool) -> TokenCapability:
        for interface_id, capability in PROBE_ORDER:
            if await self.supports_interface(protocol, contract, interface_id, testnet):
                return capability
        return TokenCapability.UNKNOWN
