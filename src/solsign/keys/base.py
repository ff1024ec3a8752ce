"""Key material types.

Private key inputs are modeled as one frozen dataclass per encoding so that
exactly one encoding is in play for a signing attempt. Keypair follows the
Ed25519 expanded-key convention: secret_key = seed(32) + public_key(32).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

import base58
from nacl.signing import SigningKey

from solsign.errors import InvalidEncodingError, InvalidKeyLengthError

SEED_LENGTH = 32
PUBLIC_KEY_LENGTH = 32
SECRET_KEY_LENGTH = 64


class PrivateKeyType(str, Enum):
    """Encoding of a locally supplied private key."""
    BASE58 = "base58"
    SEED_PHRASE = "seedPhrase"
    BYTE_ARRAY = "uint8Array"


@dataclass(frozen=True)
class Base58Key:
    """64-byte secret key encoded with the base58 alphabet."""

    text: str

    @property
    def raw_text(self) -> str:
        return self.text


@dataclass(frozen=True)
class SeedPhraseKey:
    """BIP39 mnemonic with an optional custom HD derivation path."""

    words: str
    use_custom_path: bool = False
    path: Optional[str] = None

    @property
    def raw_text(self) -> str:
        return self.words


@dataclass(frozen=True)
class ByteArrayKey:
    """64-byte secret key written as a JSON array of integers."""

    json: str

    @property
    def raw_text(self) -> str:
        return self.json


PrivateKeyInput = Union[Base58Key, SeedPhraseKey, ByteArrayKey]


def build_key_input(
    key_type: Union[PrivateKeyType, str],
    text: str,
    use_custom_path: bool = False,
    path: Optional[str] = None,
) -> PrivateKeyInput:
    """Build the key input variant for raw form text.

    Args:
        key_type: Encoding of the text (base58, seedPhrase, uint8Array)
        text: Raw key text as entered by the user
        use_custom_path: Seed phrases only - derive at ``path``
        path: Seed phrases only - custom derivation path

    Raises:
        ValueError: If key_type is unknown
    """
    key_type = PrivateKeyType(key_type)

    if key_type == PrivateKeyType.BASE58:
        return Base58Key(text)
    if key_type == PrivateKeyType.SEED_PHRASE:
        return SeedPhraseKey(text, use_custom_path=use_custom_path, path=path)
    return ByteArrayKey(text)


@dataclass(frozen=True)
class Keypair:
    """Ed25519 keypair. Lives for a single signing call."""

    public_key: bytes
    secret_key: bytes = field(repr=False)

    @classmethod
    def from_seed(cls, seed: bytes) -> "Keypair":
        """Build a keypair from a 32-byte Ed25519 seed."""
        seed = bytes(seed)
        if len(seed) != SEED_LENGTH:
            raise InvalidKeyLengthError(SEED_LENGTH, len(seed))

        public_key = SigningKey(seed).verify_key.encode()
        return cls(public_key=public_key, secret_key=seed + public_key)

    @classmethod
    def from_secret_key(cls, secret_key: bytes) -> "Keypair":
        """Build a keypair from a 64-byte secret key.

        The trailing 32 bytes must be the public key of the leading seed.
        """
        secret_key = bytes(secret_key)
        if len(secret_key) != SECRET_KEY_LENGTH:
            raise InvalidKeyLengthError(SECRET_KEY_LENGTH, len(secret_key))

        keypair = cls.from_seed(secret_key[:SEED_LENGTH])
        if keypair.public_key != secret_key[SEED_LENGTH:]:
            raise InvalidEncodingError("Provided secret key is invalid: public key does not match seed")
        return keypair

    @property
    def seed(self) -> bytes:
        return self.secret_key[:SEED_LENGTH]

    @property
    def address(self) -> str:
        """Base58-encoded public key."""
        return base58.b58encode(self.public_key).decode()
