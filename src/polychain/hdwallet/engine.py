"""Key derivation engine.

Derives addresses, public keys and private keys for every registered
protocol from a BIP39 mnemonic, from a raw private key, or (public
derivation only) from an extended public key.

secp256k1 chains use BIP32; ed25519 chains use SLIP-10 and build the key
pair straight from the derived 32-byte seed.
"""

import logging
from typing import Optional, Union

from bip_utils import (
    Bip32Secp256k1,
    Bip32Slip10Ed25519,
    Bip39MnemonicGenerator,
    Bip39SeedGenerator,
    Bip39WordsNum,
)

from polychain.chains import Protocol
from polychain.config import Settings, get_settings
from polychain.errors import InvalidKeyMaterial, UnsupportedProtocol
from polychain.hdwallet.base import (
    ChainScheme,
    Curve,
    DerivationPath,
    GeneratedWallet,
    WalletKeySet,
)
from polychain.hdwallet.registry import describe

logger = logging.getLogger(__name__)

PathLike = Union[DerivationPath, dict, None]


def _relative(path: str) -> str:
    """Strip the master marker so bip_utils parses the path as relative."""
    return path[2:] if path.startswith("m/") else path


def _to_derivation_path(path: PathLike) -> DerivationPath:
    if isinstance(path, DerivationPath):
        return path
    return DerivationPath.from_dict(path)


class KeyDerivationEngine:
    """Multi-protocol HD key derivation.

    Usage:
        engine = KeyDerivationEngine(settings)
        wallet = engine.derive_from_seed(mnemonic, Protocol.ETHEREUM)
        address = engine.derive_address_from_xpub(wallet.xpub, Protocol.ETHEREUM, 1)
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def _resolve_testnet(self, testnet: Optional[bool]) -> bool:
        return self.settings.default_testnet if testnet is None else testnet

    @staticmethod
    def mnemonic_to_seed(mnemonic: str, passphrase: str = "") -> bytes:
        """Convert a BIP39 mnemonic to its 512-bit seed.

        Raises:
            InvalidKeyMaterial: If the mnemonic is empty or fails BIP39 checks
        """
        if not mnemonic or not isinstance(mnemonic, str):
            raise InvalidKeyMaterial("Mnemonic is required")
        try:
            return Bip39SeedGenerator(mnemonic.strip()).Generate(passphrase)
        except Exception as e:
            raise InvalidKeyMaterial(f"Invalid mnemonic: {e}") from e

    def generate_wallet(
        self,
        protocol: Union[Protocol, str],
        path: PathLike = None,
        testnet: Optional[bool] = None,
    ) -> GeneratedWallet:
        """Create a wallet from fresh 256-bit entropy.

        Returns the generated 24-word mnemonic together with the keys; the
        caller owns both.
        """
        scheme = describe(protocol)
        mnemonic = Bip39MnemonicGenerator().FromWordsNumber(Bip39WordsNum.WORDS_NUM_24).ToStr()
        logger.info(f"Generated new 24-word mnemonic for {scheme.protocol.value}")
        wallet = self.derive_from_seed(mnemonic, protocol, path, testnet)
        return GeneratedWallet(mnemonic=mnemonic, wallet=wallet)

    def derive_from_seed(
        self,
        mnemonic: str,
        protocol: Union[Protocol, str],
        path: PathLike = None,
        testnet: Optional[bool] = None,
    ) -> WalletKeySet:
        """Derive the wallet at a path from a mnemonic.

        Args:
            mnemonic: BIP39 mnemonic phrase
            protocol: Target protocol
            path: Derivation coordinates (defaults to 0/0/0)
            testnet: Network selection (defaults from settings.environment)

        Returns:
            WalletKeySet with address, public key, private key and, for chains
            with public derivation, the change-level extended public key

        Raises:
            UnsupportedProtocol, InvalidDerivationPath, InvalidKeyMaterial
        """
        scheme = describe(protocol)
        coords = _to_derivation_path(path)
        testnet = self._resolve_testnet(testnet)
        full_path = scheme.derivation_path(coords, testnet)
        seed = self.mnemonic_to_seed(mnemonic)

        if scheme.curve == Curve.SECP256K1:
            master = Bip32Secp256k1.FromSeed(seed, scheme.key_net_versions(testnet))
            node = master.DerivePath(_relative(full_path))
            private_key = node.PrivateKey().Raw().ToBytes()
            public_key = node.PublicKey().RawCompressed().ToBytes()

            xpub = None
            if scheme.supports_public_derivation:
                change_node = master.DerivePath(_relative(scheme.change_level_path(coords, testnet)))
                xpub = change_node.PublicKey().ToExtended()
        else:
            node = Bip32Slip10Ed25519.FromSeed(seed).DerivePath(_relative(full_path))
            private_key = node.PrivateKey().Raw().ToBytes()
            public_key = scheme.public_key_from_private(private_key)
            xpub = None

        logger.debug(f"Derived {scheme.protocol.value} wallet at {full_path} (testnet={testnet})")

        return WalletKeySet(
            address=scheme.encode_address(public_key, testnet),
            public_key=scheme.encode_public_key(public_key),
            private_key=scheme.encode_private_key(private_key, testnet),
            protocol=scheme.protocol,
            testnet=testnet,
            xpub=xpub,
            derivation_path=full_path,
        )

    def derive_from_private_key(
        self,
        private_key: str,
        protocol: Union[Protocol, str],
        testnet: Optional[bool] = None,
    ) -> WalletKeySet:
        """Compute address and public key for a private key.

        Only the structure of the key is checked (length, encoding, curve
        range); entropy quality is not assessed.

        Raises:
            UnsupportedProtocol, InvalidKeyMaterial
        """
        scheme = describe(protocol)
        testnet = self._resolve_testnet(testnet)
        raw_key = scheme.decode_private_key(private_key, testnet)
        public_key = scheme.public_key_from_private(raw_key)

        return WalletKeySet(
            address=scheme.encode_address(public_key, testnet),
            public_key=scheme.encode_public_key(public_key),
            private_key=private_key,
            protocol=scheme.protocol,
            testnet=testnet,
        )

    def derive_public_wallet_from_xpub(
        self,
        xpub: str,
        protocol: Union[Protocol, str],
        index: int = 0,
        testnet: Optional[bool] = None,
    ) -> WalletKeySet:
        """Derive the public wallet at a child index of an extended public key.

        The result never carries a private key.

        Raises:
            UnsupportedProtocol: If the protocol has no public derivation scheme
            InvalidDerivationPath: If index is out of the non-hardened range
            InvalidKeyMaterial: If xpub is malformed, is a private key or belongs
                to the other network
        """
        scheme = describe(protocol)
        if not scheme.supports_public_derivation:
            raise UnsupportedProtocol(
                f"{scheme.protocol.value} has no public key derivation scheme"
            )
        DerivationPath(address=index)
        testnet = self._resolve_testnet(testnet)

        ctx = self._parse_xpub(scheme, xpub, testnet)
        child = ctx.ChildKey(index)
        public_key = child.PublicKey().RawCompressed().ToBytes()

        return WalletKeySet(
            address=scheme.encode_address(public_key, testnet),
            public_key=scheme.encode_public_key(public_key),
            private_key=None,
            protocol=scheme.protocol,
            testnet=testnet,
            xpub=xpub,
            derivation_path=str(index),
        )

    def derive_address_from_xpub(
        self,
        xpub: str,
        protocol: Union[Protocol, str],
        index: int = 0,
        testnet: Optional[bool] = None,
    ) -> str:
        """Derive only the address at a child index of an extended public key."""
        return self.derive_public_wallet_from_xpub(xpub, protocol, index, testnet).address

    @staticmethod
    def _parse_xpub(scheme: ChainScheme, xpub: str, testnet: bool) -> Bip32Secp256k1:
        """Parse an extended public key with the versions its prefix implies.

        The prefix must belong to the requested network.
        """
        if not xpub or not isinstance(xpub, str):
            raise InvalidKeyMaterial("Extended public key is required")

        net_versions = scheme.xpub_net_versions(testnet)
        prefix = xpub[:4]
        if prefix not in net_versions:
            if prefix in scheme.xpub_net_versions(not testnet):
                network = "testnet" if testnet else "mainnet"
                raise InvalidKeyMaterial(
                    f"{prefix} key does not belong to {scheme.protocol.value} {network}"
                )
            raise InvalidKeyMaterial(
                f"Invalid extended public key prefix. Expected one of {sorted(net_versions)}"
            )

        try:
            ctx = Bip32Secp256k1.FromExtendedKey(xpub, net_versions[prefix])
        except Exception as e:
            raise InvalidKeyMaterial(f"Invalid {scheme.protocol.value} xpub: {e}") from e

        if not ctx.IsPublicOnly():
            raise InvalidKeyMaterial("Extended private key supplied where a public key is expected")
        return ctx
