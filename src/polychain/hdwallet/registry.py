"""Curve and encoding registry.

Maps each protocol to the ChainScheme describing its curve, derivation path
convention and address encoder. Pure lookup, no side effects.
"""

from typing import Union

from polychain.chains import Protocol, to_protocol
from polychain.errors import UnsupportedProtocol
from polychain.hdwallet.altchains import RippleScheme, SolanaScheme, StellarScheme
from polychain.hdwallet.base import ChainScheme
from polychain.hdwallet.btc import BitcoinScheme, HathorScheme
from polychain.hdwallet.eth import CELO_COIN_TYPE, EvmScheme

# Protocol to scheme mapping
SCHEMES: dict[Protocol, ChainScheme] = {
    Protocol.BITCOIN: BitcoinScheme(),
    Protocol.HATHOR: HathorScheme(),
    Protocol.ETHEREUM: EvmScheme(Protocol.ETHEREUM),
    Protocol.BSC: EvmScheme(Protocol.BSC),
    Protocol.POLYGON: EvmScheme(Protocol.POLYGON),
    Protocol.AVAXCCHAIN: EvmScheme(Protocol.AVAXCCHAIN),
    Protocol.CELO: EvmScheme(Protocol.CELO, coin_type=CELO_COIN_TYPE),
    Protocol.RIPPLE: RippleScheme(),
    Protocol.STELLAR: StellarScheme(),
    Protocol.SOLANA: SolanaScheme(),
}


def get_supported_protocols() -> list[Protocol]:
    """Get list of protocols with a registered scheme."""
    return list(SCHEMES.keys())


def describe(protocol: Union[Protocol, str]) -> ChainScheme:
    """Get the scheme for a protocol.

    Raises:
        UnsupportedProtocol: If no scheme is registered
    """
    scheme = SCHEMES.get(to_protocol(protocol))
    if scheme is None:
        raise UnsupportedProtocol(f"No key scheme registered for {protocol}")
    return scheme


def get_scheme_info(protocol: Union[Protocol, str]) -> dict:
    """Get a summary of the scheme for a protocol."""
    scheme = describe(protocol)
    return {
        "protocol": scheme.protocol.value,
        "scheme": type(scheme).__name__,
        "curve": scheme.curve.value,
        "purpose": scheme.purpose,
        "coin_type": scheme.coin_type(),
        "testnet_coin_type": scheme.coin_type(testnet=True),
        "supports_public_derivation": scheme.supports_public_derivation,
    }
