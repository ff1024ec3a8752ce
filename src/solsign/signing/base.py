"""Base interfaces for message signing.

Signing flow:
1. Validate message and key source
2. Resolve a signer (local key material or wallet extension)
3. Signer returns the raw 64-byte Ed25519 signature
4. Signature is base64-encoded into a SigningResult
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Union

from solsign.keys.base import PrivateKeyInput

logger = logging.getLogger(__name__)


class SignerType(str, Enum):
    """Type of signing backend."""
    LOCAL = "local"      # Key material supplied by the user
    WALLET = "wallet"    # Browser wallet extension


class WalletProviderId(str, Enum):
    """Supported wallet extensions."""
    PHANTOM = "phantom"
    SOLFLARE = "solflare"


@dataclass(frozen=True)
class LocalMethod:
    """Sign with locally supplied key material."""

    key: PrivateKeyInput


@dataclass(frozen=True)
class RemoteMethod:
    """Sign with a wallet extension."""

    provider: WalletProviderId


SigningMethod = Union[LocalMethod, RemoteMethod]


@dataclass(frozen=True)
class SigningResult:
    """Result of a successful signing attempt.

    Attributes:
        address: Base58 public key of the signer
        message: Message exactly as supplied
        signature_base64: Standard padded base64 of the 64-byte signature
    """
    address: str
    message: str
    signature_base64: str

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "message": self.message,
            "signature": self.signature_base64,
        }


class SignerBackend(ABC):
    """Abstract base class for signing backends.

    Implementations return signatures only; key material never leaves them.
    """

    def __init__(self, signer_type: SignerType):
        self.signer_type = signer_type

    @property
    @abstractmethod
    def address(self) -> str:
        """Base58 address of the signing key.

        For wallet signers this is only known after sign() connected.
        """
        pass

    @abstractmethod
    async def sign(self, message: bytes) -> bytes:
        """Sign a message.

        Args:
            message: Raw message bytes

        Returns:
            64-byte Ed25519 detached signature

        Raises:
            SigningError: If the signer cannot produce a signature
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(type={self.signer_type.value})"
