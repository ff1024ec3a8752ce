"""Local signing backend.

Signs with a keypair resolved from user-supplied key material. Ed25519
signing is deterministic, needs no network, and cannot fail once the
keypair is well formed.
"""

import logging
from typing import Optional, Union

import base58
from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from solsign.keys.base import PUBLIC_KEY_LENGTH, Keypair
from solsign.keys.seed import SeedDerivation
from solsign.signing.base import SignerBackend, SignerType

logger = logging.getLogger(__name__)

SIGNATURE_LENGTH = 64


def sign_detached(keypair: Keypair, message: bytes) -> bytes:
    """Produce a 64-byte Ed25519 detached signature."""
    return SigningKey(keypair.seed).sign(message).signature


def verify_signature(address: Union[str, bytes], message: bytes, signature: bytes) -> bool:
    """Verify a detached signature against a base58 address or raw public key."""
    if isinstance(address, str):
        try:
            public_key = base58.b58decode(address)
        except ValueError:
            return False
    else:
        public_key = bytes(address)

    if len(public_key) != PUBLIC_KEY_LENGTH or len(signature) != SIGNATURE_LENGTH:
        return False

    try:
        VerifyKey(public_key).verify(message, signature)
        return True
    except BadSignatureError:
        return False


class LocalSigner(SignerBackend):
    """Local signing backend wrapping a resolved keypair.

    derivation is set when the keypair came from a seed phrase.
    """

    def __init__(self, keypair: Keypair, derivation: Optional[SeedDerivation] = None):
        super().__init__(SignerType.LOCAL)
        self._keypair = keypair
        self.derivation = derivation

    @property
    def address(self) -> str:
        return self._keypair.address

    async def sign(self, message: bytes) -> bytes:
        """Sign a message with the local keypair."""
        signature = sign_detached(self._keypair, message)
        logger.debug(f"Signed {len(message)} bytes with local key {self.address}")
        return signature
