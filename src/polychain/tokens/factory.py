"""Token strategy registry.

Adding a protocol is a one-line change here plus its strategy module.
"""

from typing import Union

from polychain.chains import EVM_PROTOCOLS, Protocol, to_protocol
from polychain.errors import UnsupportedProtocol
from polychain.tokens.base import TokenStrategy
from polychain.tokens.evm import EvmTokenStrategy
from polychain.tokens.solana import SolanaTokenStrategy
from polychain.tokens.utxo import HathorTokenStrategy

STRATEGIES: dict[Protocol, TokenStrategy] = {
    Protocol.HATHOR: HathorTokenStrategy(),
    Protocol.SOLANA: SolanaTokenStrategy(),
    **{protocol: EvmTokenStrategy(protocol) for protocol in EVM_PROTOCOLS},
}


def get_token_strategy(protocol: Union[Protocol, str]) -> TokenStrategy:
    """Get the token strategy for a protocol.

    Raises:
        UnsupportedProtocol: If the protocol has no token support
    """
    strategy = STRATEGIES.get(to_protocol(protocol))
    if strategy is None:
        raise UnsupportedProtocol(f"Token operations are not supported on {protocol}")
    return strategy


def get_token_protocols() -> list[Protocol]:
    """Get list of protocols with token support."""
    return [protocol for protocol in Protocol if protocol in STRATEGIES]
