"""UTXO chain schemes: Bitcoin (BIP84) and Hathor (BIP44 P2PKH).

Bitcoin:
    Derivation path: m/84'/0'/account'/change/index (coin type 1 on testnet)
    Address format: bech32 P2WPKH (bc1q... / tb1q...)
    Private key format: WIF

Hathor:
    Derivation path: m/44'/280'/account'/change/index
    Address format: base58check P2PKH (H... mainnet, W... testnet)
"""

from bip_utils import (
    Bip32KeyNetVersions,
    CoinsConf,
    P2PKHAddrEncoder,
    P2WPKHAddrEncoder,
    WifDecoder,
    WifEncoder,
)

from polychain.chains import Protocol
from polychain.errors import InvalidKeyMaterial
from polychain.hdwallet.base import (
    TPUB_NET_VER,
    XPUB_NET_VER,
    ChainScheme,
    Curve,
    parse_hex_key,
)

# Network version bytes for BIP84 extended keys
ZPUB_NET_VER = Bip32KeyNetVersions(b"\x04\xb2\x47\x46", b"\x04\xb2\x43\x0c")  # BIP84 mainnet
VPUB_NET_VER = Bip32KeyNetVersions(b"\x04\x5f\x1c\xf6", b"\x04\x5f\x18\xbc")  # BIP84 testnet

# Hathor P2PKH / P2SH version bytes
HATHOR_P2PKH_MAINNET = b"\x28"
HATHOR_P2PKH_TESTNET = b"\x49"
HATHOR_P2SH_MAINNET = b"\x64"
HATHOR_P2SH_TESTNET = b"\x87"

HATHOR_ADDRESS_VERSIONS = frozenset({
    HATHOR_P2PKH_MAINNET[0],
    HATHOR_P2PKH_TESTNET[0],
    HATHOR_P2SH_MAINNET[0],
    HATHOR_P2SH_TESTNET[0],
})


class BitcoinScheme(ChainScheme):
    """Bitcoin native SegWit (BIP84).

    Exported extended keys are zpub (mainnet) / vpub (testnet); plain
    xpub/tpub keys are accepted for address derivation as well.
    """

    supports_public_derivation = True

    def __init__(self):
        super().__init__(Protocol.BITCOIN)

    @property
    def curve(self) -> Curve:
        return Curve.SECP256K1

    @property
    def purpose(self) -> int:
        return 84  # BIP84 for native SegWit

    def coin_type(self, testnet: bool = False) -> int:
        return 1 if testnet else 0

    def key_net_versions(self, testnet: bool = False) -> Bip32KeyNetVersions:
        return VPUB_NET_VER if testnet else ZPUB_NET_VER

    def xpub_net_versions(self, testnet: bool = False) -> dict[str, Bip32KeyNetVersions]:
        if testnet:
            return {"vpub": VPUB_NET_VER, "tpub": TPUB_NET_VER}
        return {"zpub": ZPUB_NET_VER, "xpub": XPUB_NET_VER}

    def encode_address(self, public_key: bytes, testnet: bool = False) -> str:
        hrp = "tb" if testnet else "bc"
        return P2WPKHAddrEncoder.EncodeKey(public_key, hrp=hrp, wit_ver=0)

    def encode_private_key(self, private_key: bytes, testnet: bool = False) -> str:
        return WifEncoder.Encode(private_key, net_ver=self._wif_net_ver(testnet))

    def decode_private_key(self, value: str, testnet: bool = False) -> bytes:
        """Accept WIF for the selected network, or raw 32-byte hex."""
        if isinstance(value, str) and len(value) in (51, 52):
            try:
                private_key, _ = WifDecoder.Decode(value, net_ver=self._wif_net_ver(testnet))
                return private_key
            except Exception as e:
                raise InvalidKeyMaterial(f"Invalid WIF private key: {e}") from e
        return parse_hex_key(value)

    @staticmethod
    def _wif_net_ver(testnet: bool) -> bytes:
        conf = CoinsConf.BitcoinTestNet if testnet else CoinsConf.BitcoinMainNet
        return conf.ParamByKey("wif_net_ver")


class HathorScheme(ChainScheme):
    """Hathor Network (SLIP-44 coin type 280)."""

    supports_public_derivation = True

    def __init__(self):
        super().__init__(Protocol.HATHOR)

    @property
    def curve(self) -> Curve:
        return Curve.SECP256K1

    @property
    def purpose(self) -> int:
        return 44

    def coin_type(self, testnet: bool = False) -> int:
        return 280  # Same coin type on every network

    def key_net_versions(self, testnet: bool = False) -> Bip32KeyNetVersions:
        return XPUB_NET_VER

    def xpub_net_versions(self, testnet: bool = False) -> dict[str, Bip32KeyNetVersions]:
        # Hathor exports xpub on every network
        return {"xpub": XPUB_NET_VER}

    def encode_address(self, public_key: bytes, testnet: bool = False) -> str:
        net_ver = HATHOR_P2PKH_TESTNET if testnet else HATHOR_P2PKH_MAINNET
        return P2PKHAddrEncoder.EncodeKey(public_key, net_ver=net_ver)
