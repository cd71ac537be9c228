#!/usr/bin/env python3
"""Derive addresses and xpub keys from a seed phrase.

Usage:
    python scripts/derive_wallet.py "your seed phrase here"
    python scripts/derive_wallet.py  # prompts for seed phrase

Set ENVIRONMENT=production for mainnet addresses.
"""

import sys
from getpass import getpass

from polychain.config import configure_logging, get_settings
from polychain.errors import PolychainError
from polychain.hdwallet import KeyDerivationEngine, get_supported_protocols


def derive_wallets(mnemonic: str, index: int = 0) -> dict[str, dict[str, str]]:
    """Derive the public wallet at an address index for every protocol.

    Returns:
        Dict mapping protocol names to address/xpub/path
    """
    engine = KeyDerivationEngine(get_settings())
    wallets = {}

    for protocol in get_supported_protocols():
        try:
            wallet = engine.derive_from_seed(mnemonic, protocol, {"address": index})
        except PolychainError as e:
            print(f"{protocol.value} derivation error: {e}")
            continue

        wallets[protocol.value] = {
            "address": wallet.address,
            "xpub": wallet.xpub or "",
            "path": wallet.derivation_path or "",
        }

    return wallets


def main():
    """Main entry point."""
    configure_logging(get_settings())

    if len(sys.argv) > 1:
        mnemonic = " ".join(sys.argv[1:])
    else:
        print("Enter your seed phrase (12 or 24 words):")
        mnemonic = getpass("Seed phrase: ")

    # Validate mnemonic
    words = mnemonic.strip().split()
    if len(words) not in [12, 24]:
        print(f"Error: Expected 12 or 24 words, got {len(words)}")
        sys.exit(1)

    testnet = get_settings().default_testnet
    print(f"\nDeriving wallets ({'testnet' if testnet else 'mainnet'})...\n")
    wallets = derive_wallets(mnemonic)

    print("=" * 60)
    print("Addresses:")
    print("=" * 60)
    for protocol, info in wallets.items():
        print(f"{protocol:<12} {info['address']}  ({info['path']})")

    print("\n" + "=" * 60)
    print("Extended public keys (address-only derivation):")
    print("=" * 60)
    for protocol, info in wallets.items():
        if info["xpub"]:
            print(f"XPUB_{protocol}={info['xpub']}")


if __name__ == "__main__":
    main()
