"""EVM scheme using BIP44.

Derivation path: m/44'/60'/account'/change/index
Address format: 0x... (EIP-55 checksum encoded)

Works for ETH, BSC, Polygon, Avalanche C-Chain and Celo (coin type 52752).
"""

from bip_utils import EthAddrEncoder
from eth_account import Account

from polychain.chains import Protocol
from polychain.errors import InvalidKeyMaterial
from polychain.hdwallet.base import ChainScheme, Curve

ETH_COIN_TYPE = 60
CELO_COIN_TYPE = 52752


class EvmScheme(ChainScheme):
    """Ethereum-compatible chain.

    Example:
        scheme = EvmScheme(Protocol.BSC)
        scheme.encode_address(pubkey)
        # "0x..."
    """

    supports_public_derivation = True

    def __init__(self, protocol: Protocol, coin_type: int = ETH_COIN_TYPE):
        super().__init__(protocol)
        self._coin_type = coin_type

    @property
    def curve(self) -> Curve:
        return Curve.SECP256K1

    @property
    def purpose(self) -> int:
        return 44

    def coin_type(self, testnet: bool = False) -> int:
        return self._coin_type  # EVM chains do not switch coin type on testnet

    def encode_address(self, public_key: bytes, testnet: bool = False) -> str:
        # keccak256 of the uncompressed key, last 20 bytes
        return EthAddrEncoder.EncodeKey(public_key)

    def encode_public_key(self, public_key: bytes) -> str:
        return f"0x{public_key.hex()}"

    def encode_private_key(self, private_key: bytes, testnet: bool = False) -> str:
        return f"0x{private_key.hex()}"

    def decode_private_key(self, value: str, testnet: bool = False) -> bytes:
        try:
            account = Account.from_key(value)
        except Exception as e:
            raise InvalidKeyMaterial(f"Invalid EVM private key: {e}") from e
        return bytes(account.key)
