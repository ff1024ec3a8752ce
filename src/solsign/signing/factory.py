"""Signer factory.

Creates the signing backend for a signing method. Local methods resolve
their key material here, so parse errors surface before anything is signed.
"""

import logging
from typing import Optional

from solsign.keys.parser import KeyMaterialParser
from solsign.signing.base import LocalMethod, RemoteMethod, SignerBackend, SignerType, SigningMethod
from solsign.signing.local import LocalSigner
from solsign.signing.wallet import ProviderRegistry, RemoteWalletSigner

logger = logging.getLogger(__name__)


def get_signer_type(method: SigningMethod) -> SignerType:
    """Determine which backend a signing method needs."""
    if isinstance(method, LocalMethod):
        return SignerType.LOCAL
    if isinstance(method, RemoteMethod):
        return SignerType.WALLET
    raise TypeError(f"Unsupported signing method: {type(method).__name__}")


def create_signer(
    method: SigningMethod,
    registry: Optional[ProviderRegistry] = None,
    parser: Optional[KeyMaterialParser] = None,
) -> SignerBackend:
    """Create the signer for a signing method.

    Args:
        method: LocalMethod with key material or RemoteMethod with a provider
        registry: Wallet slots; an empty registry is used if omitted
        parser: Key material parser; a default one is used if omitted

    Returns:
        LocalSigner or RemoteWalletSigner

    Raises:
        SigningError: If key material is invalid or the wallet is unavailable
    """
    signer_type = get_signer_type(method)
    logger.debug(f"Resolving {signer_type.value} signer")

    if signer_type == SignerType.WALLET:
        return RemoteWalletSigner(method.provider, registry or ProviderRegistry())

    parser = parser or KeyMaterialParser()
    keypair, derivation = parser.parse_detailed(method.key)
    return LocalSigner(keypair, derivation=derivation)
