"""Private key parsing.

Turns one of the three private key encodings into a validated Keypair.
Nothing is returned unless the whole input checks out.
"""

import json
import logging
from typing import Optional

import base58

from solsign.errors import InvalidEncodingError, InvalidKeyLengthError
from solsign.keys.base import (
    SECRET_KEY_LENGTH,
    Base58Key,
    ByteArrayKey,
    Keypair,
    PrivateKeyInput,
    SeedPhraseKey,
)
from solsign.keys.seed import SeedDerivation, SeedPhraseDeriver

logger = logging.getLogger(__name__)

BYTE_ARRAY_FORMAT = f"a JSON array of {SECRET_KEY_LENGTH} numbers"


def decode_base58_key(text: str) -> bytes:
    """Decode a base58 secret key to exactly 64 bytes."""
    try:
        raw = base58.b58decode(text.strip())
    except ValueError as e:
        raise InvalidEncodingError("Invalid base58 private key") from e

    if len(raw) != SECRET_KEY_LENGTH:
        raise InvalidKeyLengthError(SECRET_KEY_LENGTH, len(raw))
    return raw


def decode_byte_array_key(text: str) -> bytes:
    """Decode a JSON array literal of 64 integers in [0, 255]."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError, RecursionError) as e:
        raise InvalidEncodingError(f"Invalid byte array format: expected {BYTE_ARRAY_FORMAT}") from e

    if not isinstance(data, list):
        raise InvalidEncodingError(f"Invalid byte array format: expected {BYTE_ARRAY_FORMAT}")

    for value in data:
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
            raise InvalidEncodingError(
                f"Invalid byte array value {value!r}: expected integers in [0, 255]"
            )

    if len(data) != SECRET_KEY_LENGTH:
        raise InvalidKeyLengthError(SECRET_KEY_LENGTH, len(data))
    return bytes(data)


class KeyMaterialParser:
    """Resolves a PrivateKeyInput into a Keypair.

    Seed phrases are delegated to a SeedPhraseDeriver.
    """

    def __init__(self, deriver: Optional[SeedPhraseDeriver] = None):
        self.deriver = deriver or SeedPhraseDeriver()

    def parse(self, key_input: PrivateKeyInput) -> Keypair:
        """Parse key material into a keypair.

        Raises:
            SigningError: InvalidEncoding, InvalidKeyLength, InvalidWordCount
                or DerivationFailed depending on the input
        """
        return self.parse_detailed(key_input)[0]

    def parse_detailed(self, key_input: PrivateKeyInput) -> tuple[Keypair, Optional[SeedDerivation]]:
        """Parse key material, also returning seed phrase derivation details."""
        if isinstance(key_input, Base58Key):
            return Keypair.from_secret_key(decode_base58_key(key_input.text)), None

        if isinstance(key_input, ByteArrayKey):
            return Keypair.from_secret_key(decode_byte_array_key(key_input.json)), None

        if isinstance(key_input, SeedPhraseKey):
            derivation = self.deriver.derive_detailed(
                key_input.words,
                use_custom_path=key_input.use_custom_path,
                path=key_input.path,
            )
            return derivation.keypair, derivation

        raise TypeError(f"Unsupported private key input: {type(key_input).__name__}")
