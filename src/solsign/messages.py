"""User-facing notices for signing outcomes.

The engine returns structured errors; this module turns them into the
title/description pairs a presentation layer shows.
"""

from dataclasses import dataclass

from solsign.errors import SigningError, SigningErrorKind
from solsign.keys.seed import VALID_WORD_COUNTS
from solsign.signing.base import LocalMethod, RemoteMethod, SigningMethod
from solsign.signing.wallet import PROVIDERS

FAILURE_TITLE = "Failed to sign message"
SUCCESS_TITLE = "Message signed successfully"


@dataclass(frozen=True)
class Notice:
    """Notification text for a signing outcome."""

    title: str
    description: str
    variant: str = "error"


def _word_counts() -> str:
    counts = [str(n) for n in VALID_WORD_COUNTS]
    return f"{', '.join(counts[:-1])}, or {counts[-1]}"


def _derivation_failed(context: str) -> str:
    if context == "all methods":
        return (
            "Could not derive keypair using any method. "
            "Please check your seed phrase or try using a private key."
        )
    if not context:
        return "Please enter a derivation path, e.g. m/44'/501'/0'/0'."
    return f"Failed to derive keypair using path {context}. Please check the path format."


def describe_error(error: SigningError) -> Notice:
    """Human-readable notice for a signing error."""
    kind = error.kind

    if kind == SigningErrorKind.EMPTY_MESSAGE:
        description = "Please enter a message to sign."
    elif kind == SigningErrorKind.EMPTY_KEY:
        description = "Please enter a private key."
    elif kind == SigningErrorKind.INVALID_ENCODING:
        description = f"{error.reason}."
    elif kind == SigningErrorKind.INVALID_WORD_COUNT:
        description = (
            f"Invalid seed phrase length: {error.count} words. "
            f"Expected {_word_counts()} words."
        )
    elif kind == SigningErrorKind.INVALID_KEY_LENGTH:
        description = f"Private key should be {error.expected} bytes, got {error.actual}."
    elif kind == SigningErrorKind.DERIVATION_FAILED:
        description = _derivation_failed(error.context)
    elif kind == SigningErrorKind.PROVIDER_NOT_FOUND:
        description = error.reason or f"{error.name} wallet not found. Please install the extension."
    elif kind == SigningErrorKind.CONNECT_REJECTED:
        description = f"Could not connect to {error.name} wallet."
        if error.reason:
            description = f"{description} {error.reason}"
    elif kind == SigningErrorKind.SIGN_REJECTED:
        description = error.reason
    else:
        description = str(error) or "An unknown error occurred"

    return Notice(title=FAILURE_TITLE, description=description)


def describe_success(method: SigningMethod) -> Notice:
    """Human-readable notice for a successful signature."""
    if isinstance(method, RemoteMethod):
        name = PROVIDERS[method.provider].display_name
        description = f"Your message has been signed with {name} wallet."
    elif isinstance(method, LocalMethod):
        description = "Your message has been signed with the provided private key."
    else:
        description = "Your message has been signed."
    return Notice(title=SUCCESS_TITLE, description=description, variant="success")
