"""Key material parsing and seed phrase derivation."""

from solsign.keys.base import (
    Base58Key,
    ByteArrayKey,
    Keypair,
    PrivateKeyInput,
    PrivateKeyType,
    SeedPhraseKey,
    build_key_input,
)
from solsign.keys.parser import KeyMaterialParser
from solsign.keys.seed import DerivationMethod, SeedDerivation, SeedPhraseDeriver

__all__ = [
    "Base58Key",
    "ByteArrayKey",
    "SeedPhraseKey",
    "PrivateKeyInput",
    "PrivateKeyType",
    "Keypair",
    "build_key_input",
    "KeyMaterialParser",
    "SeedPhraseDeriver",
    "SeedDerivation",
    "DerivationMethod",
]
