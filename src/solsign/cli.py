"""Command-line entry point.

Usage:
    solsign sign --message "hello" --base58 [--key KEY]
    solsign sign --message "hello" --seed-phrase [--path "m/44'/501'/0'/0'"]
    solsign sign --message "hello" --byte-array --key "[1,2,...]"
    solsign verify --address ADDR --message "hello" --signature SIG
    solsign config

The private key is prompted for (without echo) when --key is omitted.
"""

import argparse
import asyncio
import base64
import binascii
import json
import logging
import sys
from getpass import getpass
from typing import Optional

from solsign.config import get_settings
from solsign.keys.base import PrivateKeyType, build_key_input
from solsign.messages import describe_error, describe_success
from solsign.signing.base import LocalMethod
from solsign.signing.local import verify_signature
from solsign.signing.orchestrator import SigningOrchestrator

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure logging from settings."""
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="solsign", description="Sign messages with Ed25519 keys")
    commands = parser.add_subparsers(dest="command", required=True)

    sign = commands.add_parser("sign", help="Sign a message with a private key")
    sign.add_argument("--message", "-m", required=True, help="Message to sign")
    key_type = sign.add_mutually_exclusive_group()
    key_type.add_argument("--base58", dest="key_type", action="store_const",
                          const=PrivateKeyType.BASE58, help="Base58 secret key (default)")
    key_type.add_argument("--seed-phrase", dest="key_type", action="store_const",
                          const=PrivateKeyType.SEED_PHRASE, help="BIP39 seed phrase")
    key_type.add_argument("--byte-array", dest="key_type", action="store_const",
                          const=PrivateKeyType.BYTE_ARRAY, help="JSON array of 64 bytes")
    sign.add_argument("--key", "-k", help="Private key text (prompted if omitted)")
    sign.add_argument("--path", help="Custom derivation path for seed phrases")
    sign.add_argument("--json", action="store_true", help="Print the result as JSON")
    sign.set_defaults(key_type=PrivateKeyType.BASE58)

    verify = commands.add_parser("verify", help="Verify a base64 signature")
    verify.add_argument("--address", "-a", required=True, help="Base58 signer address")
    verify.add_argument("--message", "-m", required=True, help="Signed message")
    verify.add_argument("--signature", "-s", required=True, help="Base64 signature")

    commands.add_parser("config", help="Show effective settings")
    return parser


def run_sign(args: argparse.Namespace) -> int:
    key_text = args.key if args.key is not None else getpass("Private key: ")
    key_input = build_key_input(
        args.key_type,
        key_text,
        use_custom_path=bool(args.path),
        path=args.path,
    )
    method = LocalMethod(key_input)

    outcome = asyncio.run(SigningOrchestrator().sign(method, args.message))

    for warning in outcome.warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    if not outcome.success:
        notice = describe_error(outcome.error)
        print(f"{notice.title}: {notice.description}", file=sys.stderr)
        return 1

    result = outcome.result
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(describe_success(method).description)
        print(f"Address:   {result.address}")
        print(f"Message:   {result.message}")
        print(f"Signature: {result.signature_base64}")
    return 0


def run_verify(args: argparse.Namespace) -> int:
    try:
        signature = base64.b64decode(args.signature, validate=True)
    except binascii.Error:
        print("Signature is not valid base64", file=sys.stderr)
        return 1

    if verify_signature(args.address, args.message.encode("utf-8"), signature):
        print("Signature is valid")
        return 0
    print("Signature is NOT valid", file=sys.stderr)
    return 1


def run_config(args: argparse.Namespace) -> int:
    print(json.dumps(get_settings().get_safe_dict(), indent=2))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    handlers = {
        "sign": run_sign,
        "verify": run_verify,
        "config": run_config,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
