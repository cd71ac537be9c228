"""Account-based non-EVM schemes: Ripple, Stellar and Solana.

Ripple (XRP):
    Coin type: 144, secp256k1
    Address format: base58 with XRP alphabet ('r' prefix)

Stellar (XLM):
    Coin type: 148, Ed25519, SEP-0005 path m/44'/148'/index'
    Address format: StrKey 'G...', secret seed 'S...'

Solana (SOL):
    Coin type: 501, Ed25519, path m/44'/501'/index'/change'
    Address format: base58 public key
"""

from bip_utils import (
    Base32Decoder,
    Base32Encoder,
    Base58Decoder,
    XlmAddrEncoder,
    XlmAddrTypes,
    XrpAddrEncoder,
)
from bip_utils.utils.crypto import XModemCrc
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from polychain.chains import Protocol
from polychain.errors import InvalidDerivationPath, InvalidKeyMaterial
from polychain.hdwallet.base import ChainScheme, Curve, DerivationPath, parse_hex_key

# StrKey version byte for ed25519 secret seeds ('S')
XLM_SECRET_SEED_VERSION = 18 << 3


# ============================================================================
# Ripple (XRP)
# ============================================================================

class RippleScheme(ChainScheme):
    """Ripple account derived with the BIP44 secp256k1 path."""

    def __init__(self):
        super().__init__(Protocol.RIPPLE)

    @property
    def curve(self) -> Curve:
        return Curve.SECP256K1

    @property
    def purpose(self) -> int:
        return 44

    def coin_type(self, testnet: bool = False) -> int:
        return 144

    def encode_address(self, public_key: bytes, testnet: bool = False) -> str:
        return XrpAddrEncoder.EncodeKey(public_key)

    def encode_public_key(self, public_key: bytes) -> str:
        return public_key.hex().upper()

    def encode_private_key(self, private_key: bytes, testnet: bool = False) -> str:
        # rippled convention: 33 bytes with a leading zero byte
        return f"00{private_key.hex().upper()}"

    def decode_private_key(self, value: str, testnet: bool = False) -> bytes:
        if isinstance(value, str) and len(value) == 66 and value.startswith("00"):
            value = value[2:]
        return parse_hex_key(value)


# ============================================================================
# Stellar (XLM)
# ============================================================================

def encode_stellar_secret(seed: bytes) -> str:
    """Encode a 32-byte ed25519 seed as a Stellar 'S...' secret."""
    payload = bytes([XLM_SECRET_SEED_VERSION]) + seed
    checksum = XModemCrc.QuickDigest(payload)[::-1]  # little-endian CRC16
    return Base32Encoder.EncodeNoPadding(payload + checksum)


def decode_stellar_secret(secret: str) -> bytes:
    """Decode a Stellar 'S...' secret into its 32-byte seed."""
    try:
        data = Base32Decoder.Decode(secret)
    except Exception as e:
        raise InvalidKeyMaterial(f"Invalid Stellar secret encoding: {e}") from e

    if len(data) != 35:
        raise InvalidKeyMaterial("Invalid Stellar secret length")
    payload, checksum = data[:-2], data[-2:]
    if payload[0] != XLM_SECRET_SEED_VERSION:
        raise InvalidKeyMaterial("Stellar secret must start with 'S'")
    if XModemCrc.QuickDigest(payload)[::-1] != checksum:
        raise InvalidKeyMaterial("Invalid Stellar secret checksum")
    return payload[1:]


class StellarScheme(ChainScheme):
    """Stellar account (SEP-0005).

    Only one hardened level exists below the coin: the address index.
    The public key is reported as the account id.
    """

    def __init__(self):
        super().__init__(Protocol.STELLAR)

    @property
    def curve(self) -> Curve:
        return Curve.ED25519

    @property
    def purpose(self) -> int:
        return 44

    def coin_type(self, testnet: bool = False) -> int:
        return 148

    def derivation_path(self, path: DerivationPath, testnet: bool = False) -> str:
        if path.account or path.change:
            raise InvalidDerivationPath(
                "Stellar paths only use the address index (m/44'/148'/index')"
            )
        return f"m/{self.purpose}'/{self.coin_type(testnet)}'/{path.address}'"

    def encode_address(self, public_key: bytes, testnet: bool = False) -> str:
        return XlmAddrEncoder.EncodeKey(public_key, addr_type=XlmAddrTypes.PUB_KEY)

    def encode_public_key(self, public_key: bytes) -> str:
        return self.encode_address(public_key)

    def encode_private_key(self, private_key: bytes, testnet: bool = False) -> str:
        return encode_stellar_secret(private_key)

    def decode_private_key(self, value: str, testnet: bool = False) -> bytes:
        if not isinstance(value, str) or not value.startswith("S"):
            raise InvalidKeyMaterial("Stellar secret must start with 'S'")
        return decode_stellar_secret(value)


# ============================================================================
# Solana (SOL)
# ============================================================================

class SolanaScheme(ChainScheme):
    """Solana account.

    Uses m/44'/501'/index'/change' (all hardened, Ed25519).
    Private keys are rendered as the base58 64-byte keypair.
    """

    def __init__(self):
        super().__init__(Protocol.SOLANA)

    @property
    def curve(self) -> Curve:
        return Curve.ED25519

    @property
    def purpose(self) -> int:
        return 44

    def coin_type(self, testnet: bool = False) -> int:
        return 501

    def derivation_path(self, path: DerivationPath, testnet: bool = False) -> str:
        if path.account:
            raise InvalidDerivationPath(
                "Solana paths use the address index as the account level (m/44'/501'/index'/change')"
            )
        return f"m/{self.purpose}'/{self.coin_type(testnet)}'/{path.address}'/{path.change}'"

    def encode_address(self, public_key: bytes, testnet: bool = False) -> str:
        return str(Pubkey.from_bytes(public_key))

    def encode_public_key(self, public_key: bytes) -> str:
        return self.encode_address(public_key)

    def encode_private_key(self, private_key: bytes, testnet: bool = False) -> str:
        return str(Keypair.from_seed(private_key))

    def decode_private_key(self, value: str, testnet: bool = False) -> bytes:
        """Accept a base58 64-byte keypair or a 32-byte hex seed."""
        if isinstance(value, str) and len(value.removeprefix("0x")) == 64:
            return parse_hex_key(value)
        try:
            raw = Base58Decoder.Decode(value)
        except Exception as e:
            raise InvalidKeyMaterial(f"Invalid Solana keypair encoding: {e}") from e
        if len(raw) != 64:
            raise InvalidKeyMaterial("Solana keypair must be 64 bytes")
        seed, public_key = raw[:32], raw[32:]
        if self.public_key_from_private(seed) != public_key:
            raise InvalidKeyMaterial("Solana keypair public half does not match its seed")
        return seed
