"""Signing orchestrator.

Runs one signing attempt through its states:

    IDLE -> VALIDATING -> RESOLVING -> SIGNING -> SIGNED | FAILED

and returns a SigningOutcome holding either a SigningResult or the
SigningError that stopped the attempt. The orchestrator keeps no state
between calls; each attempt tracks its own transitions.
"""

import base64
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from solsign.errors import EmptyKeyError, EmptyMessageError, InvalidEncodingError, SigningError
from solsign.keys.parser import KeyMaterialParser
from solsign.keys.seed import SeedDerivation
from solsign.signing.base import LocalMethod, SigningMethod, SigningResult
from solsign.signing.factory import create_signer, get_signer_type
from solsign.signing.local import LocalSigner
from solsign.signing.wallet import ProviderRegistry

logger = logging.getLogger(__name__)


class SigningState(str, Enum):
    """State of a signing attempt."""
    IDLE = "idle"
    VALIDATING = "validating"
    RESOLVING = "resolving"
    SIGNING = "signing"
    SIGNED = "signed"
    FAILED = "failed"


TERMINAL_STATES = (SigningState.SIGNED, SigningState.FAILED)


@dataclass(frozen=True)
class SigningOutcome:
    """Outcome of a signing attempt.

    Exactly one of result and error is set.
    """
    state: SigningState
    result: Optional[SigningResult] = None
    error: Optional[SigningError] = None
    warnings: tuple[str, ...] = ()
    history: tuple[SigningState, ...] = ()
    derivation: Optional[SeedDerivation] = None

    @property
    def success(self) -> bool:
        return self.state == SigningState.SIGNED

    def unwrap(self) -> SigningResult:
        """Return the result or raise the error."""
        if self.error is not None:
            raise self.error
        return self.result


class _Attempt:
    """Per-call state tracker."""

    def __init__(self):
        self.history = [SigningState.IDLE]
        self.warnings: list[str] = []
        self.derivation: Optional[SeedDerivation] = None

    @property
    def state(self) -> SigningState:
        return self.history[-1]

    def advance(self, state: SigningState) -> None:
        self.history.append(state)

    def succeed(self, result: SigningResult) -> SigningOutcome:
        self.advance(SigningState.SIGNED)
        return self._outcome(result=result)

    def fail(self, error: SigningError) -> SigningOutcome:
        failed_in = self.state
        self.advance(SigningState.FAILED)
        logger.info(f"Signing failed during {failed_in.value}: {error.kind.value}")
        return self._outcome(error=error)

    def _outcome(self, **kwargs) -> SigningOutcome:
        return SigningOutcome(
            state=self.state,
            warnings=tuple(self.warnings),
            history=tuple(self.history),
            derivation=self.derivation,
            **kwargs,
        )


def validate_request(method: SigningMethod, message: str) -> bytes:
    """Check preconditions before any key material is touched.

    Returns:
        The message encoded as UTF-8

    Raises:
        EmptyMessageError: If message is empty or only whitespace
        InvalidEncodingError: If message cannot be encoded as UTF-8
        EmptyKeyError: If a local method has no key text
    """
    if not message.strip():
        raise EmptyMessageError()

    try:
        message_bytes = message.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidEncodingError("Message is not valid UTF-8 text") from e

    if isinstance(method, LocalMethod) and not method.key.raw_text.strip():
        raise EmptyKeyError()
    return message_bytes


def encode_signature(signature: bytes) -> str:
    """Standard, padded base64."""
    return base64.b64encode(signature).decode("ascii")


class SigningOrchestrator:
    """Selects a signer for a method and signs a text message.

    Usage:
        orchestrator = SigningOrchestrator(registry)
        outcome = await orchestrator.sign(LocalMethod(Base58Key(key)), "hello")
        if outcome.success:
            print(outcome.result.signature_base64)
    """

    def __init__(
        self,
        registry: Optional[ProviderRegistry] = None,
        parser: Optional[KeyMaterialParser] = None,
    ):
        self.registry = registry or ProviderRegistry()
        self.parser = parser or KeyMaterialParser()

    async def sign(self, method: SigningMethod, message: str) -> SigningOutcome:
        """Sign a message with the selected method.

        Returns:
            SigningOutcome in state SIGNED with a result, or FAILED with an error
        """
        attempt = _Attempt()

        try:
            attempt.advance(SigningState.VALIDATING)
            message_bytes = validate_request(method, message)

            attempt.advance(SigningState.RESOLVING)
            signer = create_signer(method, self.registry, self.parser)
            if isinstance(signer, LocalSigner) and signer.derivation is not None:
                attempt.derivation = signer.derivation
                attempt.warnings.extend(signer.derivation.warnings)

            attempt.advance(SigningState.SIGNING)
            signature = await signer.sign(message_bytes)
            address = signer.address
        except SigningError as e:
            return attempt.fail(e)

        logger.info(f"Message signed via {get_signer_type(method).value} signer by {address}")
        return attempt.succeed(
            SigningResult(
                address=address,
                message=message,
                signature_base64=encode_signature(signature),
            )
        )
