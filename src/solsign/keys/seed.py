"""Seed phrase (BIP39) keypair derivation.

Default derivation is an ordered list of steps, each of which either returns
a keypair or raises SigningError:

1. Direct seed: Ed25519 keypair from the first 32 bytes of the BIP39 seed.
   Non-standard, but it is what earlier versions of this tool produced, so
   addresses generated before stay reachable.
2. Standard path: SLIP-10 Ed25519 derivation at m/44'/501'/0'/0'.

A custom path skips the chain and derives at that path only. SLIP-10 for
Ed25519 supports hardened indexes only.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from bip_utils import Bip32Slip10Ed25519, Bip39Languages, Bip39MnemonicValidator
from mnemonic import Mnemonic

from solsign.config import SOLANA_DERIVATION_PATH, get_settings
from solsign.errors import DerivationFailedError, InvalidWordCountError, SigningError
from solsign.keys.base import Keypair

logger = logging.getLogger(__name__)

VALID_WORD_COUNTS = (12, 15, 18, 21, 24)
HARDENED_OFFSET = 0x80000000

_PATH_RE = re.compile(r"^m(/[0-9]+')+$")


class DerivationMethod(str, Enum):
    """Which step produced a seed phrase keypair."""
    DIRECT_SEED = "direct_seed"
    STANDARD_PATH = "standard_path"
    CUSTOM_PATH = "custom_path"


@dataclass(frozen=True)
class SeedDerivation:
    """Keypair derived from a seed phrase plus how it was obtained."""

    keypair: Keypair
    method: DerivationMethod
    path: Optional[str] = None
    checksum_valid: bool = True

    @property
    def warnings(self) -> list[str]:
        if self.checksum_valid:
            return []
        return ["Seed phrase failed BIP39 checksum validation; derivation continued"]


def normalize_phrase(words: str) -> str:
    """Trim and collapse internal whitespace to single spaces."""
    return " ".join(words.split())


def validate_derivation_path(path: str) -> list[int]:
    """Parse a hardened-only derivation path like m/44'/501'/0'/0'.

    Returns:
        Hardened child indexes (without the hardened offset)

    Raises:
        DerivationFailedError: If the path is malformed or an index is out of range
    """
    if not _PATH_RE.match(path):
        raise DerivationFailedError(path)

    indexes = [int(level.rstrip("'")) for level in path.split("/")[1:]]
    if any(index >= HARDENED_OFFSET for index in indexes):
        raise DerivationFailedError(path)
    return indexes


def derive_at_path(seed: bytes, path: str) -> Keypair:
    """Derive an Ed25519 keypair from a BIP39 seed at a hardened path."""
    validate_derivation_path(path)

    try:
        bip32_ctx = Bip32Slip10Ed25519.FromSeed(seed)
        derived = bip32_ctx.DerivePath(path)
        private_key = derived.PrivateKey().Raw().ToBytes()
    except Exception as e:
        raise DerivationFailedError(path) from e

    return Keypair.from_seed(private_key)


class SeedPhraseDeriver:
    """Derives Ed25519 keypairs from BIP39 seed phrases.

    Usage:
        deriver = SeedPhraseDeriver()
        keypair = deriver.derive("nation goddess judge ...")
        keypair = deriver.derive(words, use_custom_path=True, path="m/44'/501'/1'/0'")
    """

    def __init__(
        self,
        standard_path: Optional[str] = None,
        prefer_standard_path: Optional[bool] = None,
        language: Optional[str] = None,
    ):
        settings = get_settings()
        self.standard_path = standard_path or settings.default_derivation_path or SOLANA_DERIVATION_PATH
        self.prefer_standard_path = (
            settings.prefer_standard_path if prefer_standard_path is None else prefer_standard_path
        )
        self.language = (language or settings.bip39_language).lower()

    def derive(self, words: str, use_custom_path: bool = False, path: Optional[str] = None) -> Keypair:
        """Derive a keypair from a seed phrase.

        Raises:
            InvalidWordCountError: If the phrase does not have 12/15/18/21/24 words
            DerivationFailedError: If no keypair could be derived
        """
        return self.derive_detailed(words, use_custom_path, path).keypair

    def derive_detailed(
        self, words: str, use_custom_path: bool = False, path: Optional[str] = None
    ) -> SeedDerivation:
        """Derive a keypair and report which step produced it."""
        phrase = normalize_phrase(words)
        word_count = len(phrase.split()) if phrase else 0
        if word_count not in VALID_WORD_COUNTS:
            raise InvalidWordCountError(word_count)

        checksum_valid = self.is_valid_checksum(phrase)
        if not checksum_valid:
            logger.warning("BIP39 validation failed, continuing with derivation")

        seed = Mnemonic.to_seed(phrase, passphrase="")

        if use_custom_path:
            custom_path = (path or "").strip()
            if not custom_path:
                raise DerivationFailedError("")
            keypair = derive_at_path(seed, custom_path)
            logger.debug(f"Derived keypair at custom path {custom_path}")
            return SeedDerivation(
                keypair=keypair,
                method=DerivationMethod.CUSTOM_PATH,
                path=custom_path,
                checksum_valid=checksum_valid,
            )

        for method, step_path, step in self._default_steps(seed):
            try:
                keypair = step()
            except SigningError as e:
                logger.debug(f"Derivation step {method.value} failed: {e}")
                continue

            logger.info(f"Seed phrase keypair derived via {method.value}")
            return SeedDerivation(
                keypair=keypair,
                method=method,
                path=step_path,
                checksum_valid=checksum_valid,
            )

        raise DerivationFailedError("all methods")

    def is_valid_checksum(self, phrase: str) -> bool:
        """Check the phrase against the configured BIP39 wordlist and checksum."""
        try:
            lang = Bip39Languages[self.language.upper()]
        except KeyError:
            lang = Bip39Languages.ENGLISH
        return Bip39MnemonicValidator(lang).IsValid(phrase)

    def _default_steps(self, seed: bytes) -> list[tuple[DerivationMethod, Optional[str], Callable[[], Keypair]]]:
        steps = [
            (DerivationMethod.DIRECT_SEED, None, lambda: Keypair.from_seed(seed[:32])),
            (DerivationMethod.STANDARD_PATH, self.standard_path, lambda: derive_at_path(seed, self.standard_path)),
        ]
        if self.prefer_standard_path:
            steps.reverse()
        return steps
