"""Tests for local signing and the signing orchestrator."""

import base64
import os
from unittest.mock import patch

import base58
import pytest

from conftest import ABANDON_PHRASE, RFC8032_SEED, SCENARIO_PHRASE
from solsign.errors import SigningErrorKind
from solsign.keys.base import Base58Key, ByteArrayKey, Keypair, SeedPhraseKey
from solsign.keys.seed import DerivationMethod
from solsign.signing.base import LocalMethod, RemoteMethod, SignerType, WalletProviderId
from solsign.signing.factory import create_signer, get_signer_type
from solsign.signing.local import LocalSigner, sign_detached, verify_signature
from solsign.signing.orchestrator import SigningOrchestrator, SigningState
from solsign.signing.wallet import ProviderRegistry, RemoteWalletSigner


class TestLocalSigning:
    """Tests for Ed25519 detached signatures."""

    def test_rfc8032_vector(self):
        """RFC 8032 test vector 2 (one-byte message 0x72)."""
        keypair = Keypair.from_seed(
            bytes.fromhex("4ccd089b28ff96da9db6c346ec114e0f5b8a319f35aba624da8cf6ed4fb8a6fb")
        )
        expected = bytes.fromhex(
            "92a009a9f0d4cab8720e820b5f642540a2b27b5416503f8fb3762223ebdb69da"
            "085ac1e43e15996e458f3613d0f11d8c387b2eaeb4302aeeb00d291612bb0c00"
        )

        assert keypair.public_key.hex() == "3d4017c3e843895a92b70aa74d1b7ebc9c982ccf2ec4968cc0cd55f12af4660c"
        assert sign_detached(keypair, b"\x72") == expected

    def test_signature_is_deterministic(self, keypair):
        assert sign_detached(keypair, b"hello") == sign_detached(keypair, b"hello")

    def test_verify(self, keypair):
        signature = sign_detached(keypair, b"hello")

        assert verify_signature(keypair.address, b"hello", signature) is True
        assert verify_signature(keypair.public_key, b"hello", signature) is True
        assert verify_signature(keypair.address, b"hello!", signature) is False

    def test_verify_rejects_garbage(self, keypair):
        signature = sign_detached(keypair, b"hello")

        assert verify_signature("0OIl", b"hello", signature) is False
        assert verify_signature(keypair.address, b"hello", signature[:63]) is False

    @pytest.mark.asyncio
    async def test_local_signer(self, keypair):
        signer = LocalSigner(keypair)

        signature = await signer.sign(b"hello")

        assert signer.address == keypair.address
        assert signer.signer_type == SignerType.LOCAL
        assert signature == sign_detached(keypair, b"hello")


class TestSignerFactory:
    """Tests for signer creation."""

    def test_signer_types(self):
        assert get_signer_type(LocalMethod(Base58Key("x"))) == SignerType.LOCAL
        assert get_signer_type(RemoteMethod(WalletProviderId.PHANTOM)) == SignerType.WALLET

    def test_local_signer_from_base58(self, keypair, base58_secret):
        signer = create_signer(LocalMethod(Base58Key(base58_secret)))

        assert isinstance(signer, LocalSigner)
        assert signer.address == keypair.address
        assert signer.derivation is None

    def test_local_signer_from_seed_phrase_keeps_derivation(self):
        signer = create_signer(LocalMethod(SeedPhraseKey(ABANDON_PHRASE)))

        assert signer.derivation.method == DerivationMethod.DIRECT_SEED

    def test_remote_signer(self, registry):
        signer = create_signer(RemoteMethod(WalletProviderId.SOLFLARE), registry)

        assert isinstance(signer, RemoteWalletSigner)

    def test_unknown_method(self):
        with pytest.raises(TypeError):
            get_signer_type("phantom")


class TestOrchestratorLocal:
    """Tests for orchestrated signing with local keys."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "seed",
        [
            RFC8032_SEED,
            bytes.fromhex("4ccd089b28ff96da9db6c346ec114e0f5b8a319f35aba624da8cf6ed4fb8a6fb"),
            bytes.fromhex("c5aa8df43f9f837bedb7442f31dcb7b166d38535076f094b85ce3a2e0b4458f7"),
            bytes(range(32)),
            os.urandom(32),
        ],
    )
    async def test_base58_sign_and_verify(self, seed):
        keypair = Keypair.from_seed(seed)
        secret = base58.b58encode(keypair.secret_key).decode()

        outcome = await SigningOrchestrator().sign(LocalMethod(Base58Key(secret)), "Hello, Solana!")

        assert outcome.success
        assert outcome.error is None
        assert outcome.result.address == keypair.address
        assert outcome.result.message == "Hello, Solana!"
        signature = base64.b64decode(outcome.result.signature_base64, validate=True)
        assert len(signature) == 64
        assert verify_signature(outcome.result.address, "Hello, Solana!".encode("utf-8"), signature)

    @pytest.mark.asyncio
    async def test_byte_array_matches_base58(self, base58_secret, byte_array_secret):
        orchestrator = SigningOrchestrator()

        from_base58 = await orchestrator.sign(LocalMethod(Base58Key(base58_secret)), "msg")
        from_array = await orchestrator.sign(LocalMethod(ByteArrayKey(byte_array_secret)), "msg")

        assert from_base58.result == from_array.result

    @pytest.mark.asyncio
    async def test_unicode_message_is_utf8(self, keypair, base58_secret):
        message = "héllo 🌍"

        outcome = await SigningOrchestrator().sign(LocalMethod(Base58Key(base58_secret)), message)

        signature = base64.b64decode(outcome.result.signature_base64)
        assert signature == sign_detached(keypair, message.encode("utf-8"))

    @pytest.mark.asyncio
    async def test_state_history(self, base58_secret):
        outcome = await SigningOrchestrator().sign(LocalMethod(Base58Key(base58_secret)), "msg")

        assert outcome.state == SigningState.SIGNED
        assert outcome.history == (
            SigningState.IDLE,
            SigningState.VALIDATING,
            SigningState.RESOLVING,
            SigningState.SIGNING,
            SigningState.SIGNED,
        )

    @pytest.mark.asyncio
    async def test_scenario_seed_phrase(self):
        """Scenario phrase signs via direct seed and gives a stable address."""
        orchestrator = SigningOrchestrator()
        method = LocalMethod(SeedPhraseKey(SCENARIO_PHRASE, use_custom_path=False))

        first = await orchestrator.sign(method, "message")
        second = await orchestrator.sign(method, "message")

        assert first.success
        assert first.derivation.method == DerivationMethod.DIRECT_SEED
        assert first.result == second.result

    @pytest.mark.asyncio
    async def test_checksum_warning_surfaces(self):
        phrase = " ".join(["abandon"] * 12)

        outcome = await SigningOrchestrator().sign(LocalMethod(SeedPhraseKey(phrase)), "msg")

        assert outcome.success
        assert len(outcome.warnings) == 1

    @pytest.mark.asyncio
    async def test_custom_path(self):
        method = LocalMethod(SeedPhraseKey(ABANDON_PHRASE, use_custom_path=True, path="m/44'/501'/0'/0'"))

        outcome = await SigningOrchestrator().sign(method, "msg")

        assert outcome.success
        assert outcome.derivation.method == DerivationMethod.CUSTOM_PATH


class TestOrchestratorFailures:
    """Tests for failed signing attempts."""

    @pytest.mark.asyncio
    async def test_empty_message_short_circuits(self, base58_secret):
        """Empty messages fail before any key material is parsed."""
        orchestrator = SigningOrchestrator()

        with patch.object(orchestrator.parser, "parse_detailed") as mock_parse:
            outcome = await orchestrator.sign(LocalMethod(Base58Key(base58_secret)), "")

        mock_parse.assert_not_called()
        assert outcome.state == SigningState.FAILED
        assert outcome.error.kind == SigningErrorKind.EMPTY_MESSAGE
        assert outcome.result is None
        assert outcome.history[-2] == SigningState.VALIDATING

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", [" ", "   ", "\n\t "])
    async def test_whitespace_message_is_empty(self, base58_secret, message):
        orchestrator = SigningOrchestrator()

        with patch.object(orchestrator.parser, "parse_detailed") as mock_parse:
            outcome = await orchestrator.sign(LocalMethod(Base58Key(base58_secret)), message)

        mock_parse.assert_not_called()
        assert outcome.error.kind == SigningErrorKind.EMPTY_MESSAGE
        assert outcome.history[-2] == SigningState.VALIDATING

    @pytest.mark.asyncio
    async def test_unencodable_message(self, base58_secret):
        """Lone surrogates cannot be UTF-8 encoded and fail validation."""
        outcome = await SigningOrchestrator().sign(LocalMethod(Base58Key(base58_secret)), "hi \ud800")

        assert outcome.state == SigningState.FAILED
        assert outcome.result is None
        assert outcome.error.kind == SigningErrorKind.INVALID_ENCODING
        assert outcome.history[-2] == SigningState.VALIDATING

    @pytest.mark.asyncio
    async def test_deeply_nested_byte_array(self):
        outcome = await SigningOrchestrator().sign(LocalMethod(ByteArrayKey("[" * 100000)), "msg")

        assert outcome.state == SigningState.FAILED
        assert outcome.error.kind == SigningErrorKind.INVALID_ENCODING
        assert outcome.history[-2] == SigningState.RESOLVING

    @pytest.mark.asyncio
    async def test_empty_message_checked_before_empty_key(self):
        outcome = await SigningOrchestrator().sign(LocalMethod(Base58Key("")), "")

        assert outcome.error.kind == SigningErrorKind.EMPTY_MESSAGE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("key", [Base58Key(""), SeedPhraseKey("   "), ByteArrayKey("\n")])
    async def test_empty_key(self, key):
        outcome = await SigningOrchestrator().sign(LocalMethod(key), "msg")

        assert outcome.error.kind == SigningErrorKind.EMPTY_KEY

    @pytest.mark.asyncio
    async def test_short_byte_array(self):
        outcome = await SigningOrchestrator().sign(LocalMethod(ByteArrayKey("[1,2,3]")), "msg")

        assert not outcome.success
        assert outcome.result is None
        assert outcome.error.kind == SigningErrorKind.INVALID_KEY_LENGTH
        assert outcome.history[-2] == SigningState.RESOLVING

    @pytest.mark.asyncio
    async def test_invalid_base58(self):
        outcome = await SigningOrchestrator().sign(LocalMethod(Base58Key("not-base58!")), "msg")

        assert outcome.error.kind == SigningErrorKind.INVALID_ENCODING

    @pytest.mark.asyncio
    async def test_invalid_word_count(self):
        outcome = await SigningOrchestrator().sign(LocalMethod(SeedPhraseKey("one two three")), "msg")

        assert outcome.error.kind == SigningErrorKind.INVALID_WORD_COUNT
        assert outcome.error.count == 3

    @pytest.mark.asyncio
    async def test_bad_custom_path(self):
        method = LocalMethod(SeedPhraseKey(ABANDON_PHRASE, use_custom_path=True, path="m/44/501"))

        outcome = await SigningOrchestrator().sign(method, "msg")

        assert outcome.error.kind == SigningErrorKind.DERIVATION_FAILED
        assert outcome.error.context == "m/44/501"

    @pytest.mark.asyncio
    async def test_missing_provider(self):
        """No wallet at the known slot -> provider not found."""
        orchestrator = SigningOrchestrator(ProviderRegistry())

        outcome = await orchestrator.sign(RemoteMethod(WalletProviderId.PHANTOM), "msg")

        assert outcome.error.kind == SigningErrorKind.PROVIDER_NOT_FOUND
        assert outcome.error.name == "Phantom"

    @pytest.mark.asyncio
    async def test_unwrap(self, base58_secret):
        orchestrator = SigningOrchestrator()

        ok = await orchestrator.sign(LocalMethod(Base58Key(base58_secret)), "msg")
        failed = await orchestrator.sign(LocalMethod(Base58Key(base58_secret)), "")

        assert ok.unwrap() is ok.result
        with pytest.raises(Exception) as exc_info:
            failed.unwrap()
        assert exc_info.value is failed.error

    @pytest.mark.asyncio
    async def test_error_is_structured(self):
        outcome = await SigningOrchestrator().sign(LocalMethod(ByteArrayKey("[1,2,3]")), "msg")

        assert outcome.error.to_dict() == {"kind": "invalid_key_length", "expected": 64, "actual": 3}
