"""Message signing services.

Provides signing implementations:
- LocalSigner: Key material supplied by the user (base58, seed phrase, byte array)
- RemoteWalletSigner: Phantom or Solflare wallet extension
"""

from solsign.signing.base import (
    LocalMethod,
    RemoteMethod,
    SignerBackend,
    SigningMethod,
    SigningResult,
    WalletProviderId,
)
from solsign.signing.factory import create_signer
from solsign.signing.local import LocalSigner, sign_detached, verify_signature
from solsign.signing.orchestrator import SigningOrchestrator, SigningOutcome, SigningState
from solsign.signing.wallet import ProviderRegistry, RemoteWalletSigner, detect_default_method

__all__ = [
    "LocalMethod",
    "RemoteMethod",
    "SigningMethod",
    "SigningResult",
    "SignerBackend",
    "WalletProviderId",
    "LocalSigner",
    "RemoteWalletSigner",
    "ProviderRegistry",
    "SigningOrchestrator",
    "SigningOutcome",
    "SigningState",
    "create_signer",
    "detect_default_method",
    "sign_detached",
    "verify_signature",
]
