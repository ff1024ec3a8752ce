"""Wallet extension signing backend.

Wallet extensions are external, duck-typed objects published at well-known
global slots (``window.solana`` for Phantom, ``window.solflare`` for
Solflare). Here the host hands those slots over as a ProviderRegistry and
each object is checked against the WalletCapability interface before use.

Two capability variants exist:
- Phantom: sign_message(message, encoding) accepts an encoding hint
- Solflare: sign_message(message) takes no hint

Every failure is terminal for the attempt; nothing is retried and no
timeout is applied here. The wallet decides when connect/sign resolve.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import base58

from solsign.config import get_settings
from solsign.errors import (
    ConnectRejectedError,
    ProviderIncompatibleError,
    ProviderNotFoundError,
    SignRejectedError,
)
from solsign.keys.base import PUBLIC_KEY_LENGTH
from solsign.signing.base import (
    LocalMethod,
    RemoteMethod,
    SignerBackend,
    SignerType,
    SigningMethod,
    WalletProviderId,
)
from solsign.signing.local import SIGNATURE_LENGTH

logger = logging.getLogger(__name__)


class WalletCapability(Protocol):
    """Operations a wallet extension object must expose."""

    public_key: Any

    async def connect(self) -> Any:
        ...

    async def sign_message(self, message: bytes, encoding: Optional[str] = None) -> Any:
        ...


@dataclass(frozen=True)
class ProviderSpec:
    """Where a wallet extension lives and how to call it.

    Attributes:
        id: Provider identifier
        slot: Global slot name the extension publishes itself at
        display_name: Name shown to users
        accepts_encoding: sign_message takes an encoding hint
        marker: Attribute that must be truthy on the slot object
    """
    id: WalletProviderId
    slot: str
    display_name: str
    accepts_encoding: bool = False
    marker: Optional[str] = None


PROVIDERS: dict[WalletProviderId, ProviderSpec] = {
    WalletProviderId.PHANTOM: ProviderSpec(
        id=WalletProviderId.PHANTOM,
        slot="solana",
        display_name="Phantom",
        accepts_encoding=True,
        marker="is_phantom",
    ),
    WalletProviderId.SOLFLARE: ProviderSpec(
        id=WalletProviderId.SOLFLARE,
        slot="solflare",
        display_name="Solflare",
    ),
}

REQUIRED_CAPABILITIES = ("connect", "sign_message")


class ProviderRegistry:
    """Global slots a host exposes wallet extensions through.

    Every slot is optional; lookups never assume a provider is present.
    """

    def __init__(self, slots: Optional[Mapping[str, Any]] = None):
        self._slots: dict[str, Any] = dict(slots or {})

    def install(self, slot: str, provider: Any) -> None:
        """Publish a provider object at a slot."""
        self._slots[slot] = provider

    def remove(self, slot: str) -> None:
        self._slots.pop(slot, None)

    def find(self, provider_id: WalletProviderId) -> Optional[Any]:
        """Return the provider object if the extension is present."""
        spec = PROVIDERS[WalletProviderId(provider_id)]
        provider = self._slots.get(spec.slot)
        if provider is None:
            return None
        if spec.marker and not getattr(provider, spec.marker, False):
            return None
        return provider

    def resolve(self, provider_id: WalletProviderId) -> WalletCapability:
        """Return the provider object, checked against WalletCapability.

        Raises:
            ProviderNotFoundError: If the extension is absent
            ProviderIncompatibleError: If it lacks connect or sign_message
        """
        spec = PROVIDERS[WalletProviderId(provider_id)]
        provider = self.find(spec.id)
        if provider is None:
            raise ProviderNotFoundError(
                spec.display_name,
                reason=f"{spec.display_name} wallet not found. Please install the extension.",
            )

        for capability in REQUIRED_CAPABILITIES:
            if not callable(getattr(provider, capability, None)):
                raise ProviderIncompatibleError(spec.display_name, capability)
        return provider

    def available(self) -> list[WalletProviderId]:
        """Providers whose extension is present."""
        return [provider_id for provider_id in PROVIDERS if self.find(provider_id) is not None]


def detect_default_method(registry: ProviderRegistry) -> Optional[WalletProviderId]:
    """Pick the initial signing method: Phantom, then Solflare.

    Returns None when no wallet is present, meaning a local private key.
    """
    available = registry.available()
    for provider_id in (WalletProviderId.PHANTOM, WalletProviderId.SOLFLARE):
        if provider_id in available:
            return provider_id
    return None


def is_method_available(method: SigningMethod, registry: ProviderRegistry) -> bool:
    """Check whether a signing method can be attempted at all."""
    if isinstance(method, LocalMethod):
        return True
    if isinstance(method, RemoteMethod):
        return registry.find(method.provider) is not None
    return False


def _coerce_public_key(value: Any) -> Optional[bytes]:
    """Normalize a wallet-reported public key to 32 raw bytes."""
    if value is None:
        return None
    if isinstance(value, str):
        try:
            raw = base58.b58decode(value)
        except ValueError:
            return None
    elif isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
    elif hasattr(value, "__bytes__"):
        raw = bytes(value)
    else:
        return None
    return raw if len(raw) == PUBLIC_KEY_LENGTH else None


def _extract_signature(response: Any) -> Optional[bytes]:
    """Pull the signature bytes out of a sign_message response."""
    if isinstance(response, Mapping):
        response = response.get("signature")
    if isinstance(response, (bytes, bytearray, memoryview)):
        return bytes(response)
    return None


class RemoteWalletSigner(SignerBackend):
    """Signing backend that delegates to a wallet extension.

    Usage:
        signer = RemoteWalletSigner(WalletProviderId.PHANTOM, registry)
        signature = await signer.sign(b"hello")
        signer.address
    """

    def __init__(
        self,
        provider_id: WalletProviderId,
        registry: ProviderRegistry,
        encoding_hint: Optional[str] = None,
    ):
        super().__init__(SignerType.WALLET)
        self.spec = PROVIDERS[WalletProviderId(provider_id)]
        self.encoding_hint = encoding_hint or get_settings().phantom_encoding_hint
        self._provider = registry.resolve(self.spec.id)
        self._public_key: Optional[bytes] = None

    @property
    def name(self) -> str:
        return self.spec.display_name

    @property
    def connected(self) -> bool:
        return self._public_key is not None

    @property
    def address(self) -> str:
        if self._public_key is None:
            raise RuntimeError(f"{self.name} wallet is not connected")
        return base58.b58encode(self._public_key).decode()

    async def connect(self) -> str:
        """Connect to the wallet and return its address.

        Raises:
            ConnectRejectedError: If the user rejects or the wallet fails
        """
        try:
            response = await self._provider.connect()
        except Exception as e:
            logger.warning(f"{self.name} connect failed: {e}")
            raise ConnectRejectedError(self.name, reason=str(e) or None) from e

        reported = response.get("public_key") if isinstance(response, Mapping) else None
        if reported is None:
            reported = getattr(self._provider, "public_key", None)

        public_key = _coerce_public_key(reported)
        if public_key is None:
            raise ConnectRejectedError(self.name, reason=f"{self.name} wallet did not report a valid public key")

        self._public_key = public_key
        logger.info(f"Connected to {self.name} wallet {self.address}")
        return self.address

    async def sign(self, message: bytes) -> bytes:
        """Ask the wallet to sign a message, connecting first if needed.

        Raises:
            ConnectRejectedError: If connecting fails
            SignRejectedError: If signing is refused or unavailable
        """
        if not self.connected:
            await self.connect()

        try:
            if self.spec.accepts_encoding:
                response = await self._provider.sign_message(message, self.encoding_hint)
            else:
                response = await self._provider.sign_message(message)
        except Exception as e:
            logger.warning(f"{self.name} sign_message failed: {e}")
            raise SignRejectedError(
                f"Unable to sign with {self.name}. Please make sure your wallet is unlocked.",
                name=self.name,
            ) from e

        signature = _extract_signature(response)
        if signature is None or len(signature) != SIGNATURE_LENGTH:
            raise SignRejectedError(f"{self.name} returned a malformed signature", name=self.name)
        return signature
