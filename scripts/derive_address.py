#!/usr/bin/env python3
"""Show which address a seed phrase resolves to.

Usage:
    python scripts/derive_address.py "your seed phrase here"
    python scripts/derive_address.py  # prompts for seed phrase
    python scripts/derive_address.py --path "m/44'/501'/1'/0'"

Prints the address the default derivation produces (and which step produced
it) alongside the standard-path address, so a user can tell which one an
older signature came from.
"""

import argparse
import sys
from getpass import getpass
from typing import Optional

from solsign.config import SOLANA_DERIVATION_PATH
from solsign.errors import SigningError
from solsign.keys.seed import SeedPhraseDeriver
from solsign.messages import describe_error


def derive_addresses(phrase: str, path: Optional[str] = None) -> dict[str, str]:
    """Derive addresses for a seed phrase.

    Returns:
        Dict mapping derivation label to base58 address
    """
    deriver = SeedPhraseDeriver()
    addresses = {}

    default = deriver.derive_detailed(phrase)
    addresses[f"default ({default.method.value})"] = default.keypair.address

    standard = deriver.derive(phrase, use_custom_path=True, path=SOLANA_DERIVATION_PATH)
    addresses[f"standard {SOLANA_DERIVATION_PATH}"] = standard.address

    if path:
        custom = deriver.derive(phrase, use_custom_path=True, path=path)
        addresses[f"custom {path}"] = custom.address

    if not default.checksum_valid:
        addresses["warning"] = "BIP39 checksum failed"

    return addresses


def main():
    parser = argparse.ArgumentParser(description="Derive addresses from a seed phrase")
    parser.add_argument("phrase", nargs="?", help="Seed phrase (prompted if omitted)")
    parser.add_argument("--path", type=str, help="Additional custom derivation path")
    args = parser.parse_args()

    phrase = args.phrase or getpass("Seed phrase: ")

    try:
        addresses = derive_addresses(phrase, args.path)
    except SigningError as e:
        print(f"Error: {describe_error(e).description}")
        sys.exit(1)

    for label, address in addresses.items():
        print(f"{label:40s} {address}")


if __name__ == "__main__":
    main()
