"""HD wallet base types and the per-chain scheme interface.

A ChainScheme describes one protocol: the curve it signs with, its BIP44-style
derivation path convention and how public/private keys are rendered as
addresses and strings. Schemes are pure; the derivation engine drives them.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from bip_utils import Bip32KeyNetVersions, Secp256k1PrivateKey
from nacl.signing import SigningKey

from polychain.chains import Protocol
from polychain.errors import InvalidDerivationPath, InvalidKeyMaterial

# BIP32 hardened index boundary
HARDENED_OFFSET = 2**31

# Standard extended key versions
XPUB_NET_VER = Bip32KeyNetVersions(b"\x04\x88\xb2\x1e", b"\x04\x88\xad\xe4")  # xpub / xprv
TPUB_NET_VER = Bip32KeyNetVersions(b"\x04\x35\x87\xcf", b"\x04\x35\x83\x94")  # tpub / tprv

_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


class Curve(str, Enum):
    """Elliptic curve used by a protocol."""

    SECP256K1 = "secp256k1"
    ED25519 = "ed25519"


@dataclass(frozen=True)
class DerivationPath:
    """BIP44-style coordinate below the coin level.

    Attributes:
        account: Account index (hardened)
        change: 0 = receiving, 1 = change
        address: Address index
    """

    account: int = 0
    change: int = 0
    address: int = 0

    def __post_init__(self) -> None:
        for name in ("account", "change", "address"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidDerivationPath(f"{name} index must be an integer, got {value!r}")
            if value < 0 or value >= HARDENED_OFFSET:
                raise InvalidDerivationPath(
                    f"{name} index out of range [0, 2^31): {value}"
                )

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "DerivationPath":
        """Build from a {account, change, address} mapping (missing keys default to 0)."""
        if not data:
            return cls()
        return cls(
            account=data.get("account", 0),
            change=data.get("change", 0),
            address=data.get("address", 0),
        )


@dataclass(frozen=True)
class WalletKeySet:
    """Key material derived for one protocol.

    private_key is None whenever the keys came from an extended public key.
    """

    address: str
    public_key: str
    protocol: Protocol
    testnet: bool
    private_key: Optional[str] = None
    xpub: Optional[str] = None
    derivation_path: Optional[str] = None

    def __repr__(self) -> str:
        # Never render the private key
        return (
            f"WalletKeySet(address={self.address!r}, protocol={self.protocol.value}, "
            f"testnet={self.testnet}, has_private_key={self.private_key is not None})"
        )


@dataclass(frozen=True)
class GeneratedWallet:
    """Wallet created from freshly generated entropy."""

    mnemonic: str
    wallet: WalletKeySet

    def __repr__(self) -> str:
        return f"GeneratedWallet(wallet={self.wallet!r})"


def parse_hex_key(value: str, length: int = 32) -> bytes:
    """Parse a fixed-length hex key, with or without 0x prefix."""
    if not isinstance(value, str):
        raise InvalidKeyMaterial("Private key must be a string")
    raw = value[2:] if value.lower().startswith("0x") else value
    if len(raw) != length * 2 or not _HEX_RE.match(raw):
        raise InvalidKeyMaterial(f"Expected {length}-byte hex key")
    return bytes.fromhex(raw)


class ChainScheme(ABC):
    """Curve, derivation path convention and encoders for one protocol."""

    #: Whether non-hardened public (xpub) derivation is defined for the chain
    supports_public_derivation: bool = False

    def __init__(self, protocol: Protocol):
        self.protocol = protocol

    @property
    @abstractmethod
    def curve(self) -> Curve:
        """Signing curve."""
        pass

    @property
    @abstractmethod
    def purpose(self) -> int:
        """BIP purpose number (44, 84, ...)."""
        pass

    @abstractmethod
    def coin_type(self, testnet: bool = False) -> int:
        """SLIP-44 coin type."""
        pass

    @abstractmethod
    def encode_address(self, public_key: bytes, testnet: bool = False) -> str:
        """Encode a raw public key as an address or account id."""
        pass

    def derivation_path(self, path: DerivationPath, testnet: bool = False) -> str:
        """Full path: m/purpose'/coin_type'/account'/change/index."""
        return f"{self.change_level_path(path, testnet)}/{path.address}"

    def change_level_path(self, path: DerivationPath, testnet: bool = False) -> str:
        """Path of the node whose extended public key is exported."""
        return f"m/{self.purpose}'/{self.coin_type(testnet)}'/{path.account}'/{path.change}"

    def key_net_versions(self, testnet: bool = False) -> Bip32KeyNetVersions:
        """Extended key versions used when exporting the xpub."""
        return TPUB_NET_VER if testnet else XPUB_NET_VER

    def xpub_net_versions(self, testnet: bool = False) -> dict[str, Bip32KeyNetVersions]:
        """Extended public key prefixes accepted on a network."""
        if testnet:
            return {"tpub": TPUB_NET_VER}
        return {"xpub": XPUB_NET_VER}

    def public_key_from_private(self, private_key: bytes) -> bytes:
        """Raw public key (compressed secp256k1 or 32-byte ed25519)."""
        try:
            if self.curve == Curve.SECP256K1:
                return Secp256k1PrivateKey.FromBytes(private_key).PublicKey().RawCompressed().ToBytes()
            return SigningKey(private_key).verify_key.encode()
        except (ValueError, TypeError) as e:
            raise InvalidKeyMaterial(f"Invalid {self.curve.value} private key: {e}") from e

    def encode_public_key(self, public_key: bytes) -> str:
        return public_key.hex()

    def encode_private_key(self, private_key: bytes, testnet: bool = False) -> str:
        return private_key.hex()

    def decode_private_key(self, value: str, testnet: bool = False) -> bytes:
        return parse_hex_key(value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(protocol={self.protocol.value}, curve={self.curve.value})"
