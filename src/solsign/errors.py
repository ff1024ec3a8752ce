"""Signing error taxonomy.

Every failure the engine can report is a SigningError subclass carrying
structured attributes. Components raise these; the orchestrator turns them
into a failed SigningOutcome so callers never see an unstructured fault.
"""

from enum import Enum
from typing import Optional


class SigningErrorKind(str, Enum):
    """Kind of signing failure."""
    EMPTY_MESSAGE = "empty_message"
    EMPTY_KEY = "empty_key"
    INVALID_ENCODING = "invalid_encoding"
    INVALID_WORD_COUNT = "invalid_word_count"
    INVALID_KEY_LENGTH = "invalid_key_length"
    DERIVATION_FAILED = "derivation_failed"
    PROVIDER_NOT_FOUND = "provider_not_found"
    CONNECT_REJECTED = "connect_rejected"
    SIGN_REJECTED = "sign_rejected"


class SigningError(Exception):
    """Exception raised when signing fails."""

    kind: SigningErrorKind

    def to_dict(self) -> dict:
        """Structured form of the error, without presentation text."""
        data = {"kind": self.kind.value}
        data.update({k: v for k, v in vars(self).items() if not k.startswith("_")})
        return data


class EmptyMessageError(SigningError):
    """No message was supplied."""

    kind = SigningErrorKind.EMPTY_MESSAGE

    def __init__(self):
        super().__init__("Message is empty")


class EmptyKeyError(SigningError):
    """No private key text was supplied."""

    kind = SigningErrorKind.EMPTY_KEY

    def __init__(self):
        super().__init__("Private key is empty")


class InvalidEncodingError(SigningError):
    """Key material could not be decoded."""

    kind = SigningErrorKind.INVALID_ENCODING

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class InvalidWordCountError(SigningError):
    """Seed phrase has an unsupported number of words."""

    kind = SigningErrorKind.INVALID_WORD_COUNT

    def __init__(self, count: int):
        self.count = count
        super().__init__(f"Invalid seed phrase length: {count} words")


class InvalidKeyLengthError(SigningError):
    """Decoded key material has the wrong number of bytes."""

    kind = SigningErrorKind.INVALID_KEY_LENGTH

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} bytes, got {actual}")


class DerivationFailedError(SigningError):
    """No keypair could be derived from a seed phrase."""

    kind = SigningErrorKind.DERIVATION_FAILED

    def __init__(self, context: str):
        self.context = context
        super().__init__(f"Derivation failed: {context}")


class ProviderNotFoundError(SigningError):
    """Wallet extension is not available."""

    kind = SigningErrorKind.PROVIDER_NOT_FOUND

    def __init__(self, name: str, reason: Optional[str] = None):
        self.name = name
        self.reason = reason
        super().__init__(reason or f"{name} wallet not found")


class ProviderIncompatibleError(ProviderNotFoundError):
    """Wallet extension is present but lacks a required capability."""

    def __init__(self, name: str, missing: str):
        self.missing = missing
        super().__init__(name, reason=f"{name} wallet does not support {missing}")


class ConnectRejectedError(SigningError):
    """Wallet refused or failed to connect."""

    kind = SigningErrorKind.CONNECT_REJECTED

    def __init__(self, name: str, reason: Optional[str] = None):
        self.name = name
        self.reason = reason
        super().__init__(reason or f"{name} wallet connection rejected")


class SignRejectedError(SigningError):
    """Wallet refused or failed to sign (often because it is locked)."""

    kind = SigningErrorKind.SIGN_REJECTED

    def __init__(self, reason: str, name: Optional[str] = None):
        self.reason = reason
        self.name = name
        super().__init__(reason)
