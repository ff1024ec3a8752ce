"""Pytest configuration and fixtures."""

import json
import os
from types import SimpleNamespace
from unittest.mock import AsyncMock

import base58
import pytest

# Set test environment
os.environ["SOLSIGN_ENVIRONMENT"] = "test"
os.environ["SOLSIGN_DEBUG"] = "true"

from solsign.config import get_settings
from solsign.keys.base import Keypair
from solsign.signing.local import sign_detached
from solsign.signing.wallet import ProviderRegistry

# RFC 8032 test vector 1
RFC8032_SEED = bytes.fromhex("9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60")
RFC8032_PUBLIC_KEY = bytes.fromhex("d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a")

ABANDON_PHRASE = " ".join(["abandon"] * 11 + ["about"])

SCENARIO_PHRASE = (
    "nation goddess judge attend whip media access attack brother acquire sand vacant "
    "teach ranch robust weather sick reunion injury frame poet drop wash differ"
)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; reset around each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def keypair() -> Keypair:
    return Keypair.from_seed(RFC8032_SEED)


@pytest.fixture
def base58_secret(keypair: Keypair) -> str:
    return base58.b58encode(keypair.secret_key).decode()


@pytest.fixture
def byte_array_secret(keypair: Keypair) -> str:
    return json.dumps(list(keypair.secret_key))


def make_wallet(keypair: Keypair, phantom: bool = False, **overrides) -> SimpleNamespace:
    """Build a fake wallet extension object that signs with keypair."""

    def _sign(message, encoding=None):
        return {"signature": sign_detached(keypair, message)}

    attrs = {
        "public_key": keypair.public_key,
        "connect": AsyncMock(return_value=None),
        "sign_message": AsyncMock(side_effect=_sign),
    }
    if phantom:
        attrs["is_phantom"] = True
    attrs.update(overrides)
    return SimpleNamespace(**attrs)


@pytest.fixture
def phantom_wallet(keypair: Keypair) -> SimpleNamespace:
    return make_wallet(keypair, phantom=True)


@pytest.fixture
def solflare_wallet(keypair: Keypair) -> SimpleNamespace:
    return make_wallet(keypair)


@pytest.fixture
def registry(phantom_wallet, solflare_wallet) -> ProviderRegistry:
    return ProviderRegistry({"solana": phantom_wallet, "solflare": solflare_wallet})
