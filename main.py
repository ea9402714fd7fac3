"""
YubiKey validation client – command-line entry point.

Usage
-----
    python main.py --secret <base64> sign id=1 otp=<otp> nonce=<nonce>
    python main.py --secret <base64> verify status=OK ... h=<signature>
    python main.py parse-otp <otp>
    python main.py nonce

The client secret may also be supplied through ``YUBIKEY_CLIENT_SECRET``.
"""

import argparse
import logging
import os
import sys
from typing import Dict, List, Optional

from core.crypto import generate_nonce
from core.exceptions import InvalidArgumentError
from core.signer import Signer
from core.utils import build_query_string
from otp.parser import Otp

# ── Logging setup ─────────────────────────────────────────────────────────────

logger = logging.getLogger("yubikey_client")

SECRET_ENV_VAR = "YUBIKEY_CLIENT_SECRET"

EXIT_OK = 0
EXIT_INVALID_SIGNATURE = 1
EXIT_INVALID_ARGUMENT = 2


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    # Keep signing internals quiet unless asked for
    if not verbose:
        logging.getLogger("core.signer").setLevel(logging.WARNING)


# ── Argument helpers ──────────────────────────────────────────────────────────

def _parse_pairs(pairs: List[str]) -> Dict[str, str]:
    """Turn ``["key=value", ...]`` into a dict, splitting on the first ``=``."""
    params: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise InvalidArgumentError(f"Expected KEY=VALUE, got '{pair}'.")
        params[key] = value
    return params


def _build_signer(secret: Optional[str]) -> Signer:
    secret = secret if secret is not None else os.environ.get(SECRET_ENV_VAR)
    if secret is None:
        raise InvalidArgumentError(
            f"No client secret given; use --secret or set {SECRET_ENV_VAR}."
        )
    return Signer(secret)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yubikey-client",
        description="Sign and verify YubiKey validation messages, parse OTPs.",
    )
    parser.add_argument("--secret", help=f"base64 client secret (default: ${SECRET_ENV_VAR})")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    sign = sub.add_parser("sign", help="print the signed canonical query string")
    sign.add_argument("params", nargs="*", metavar="KEY=VALUE")

    verify = sub.add_parser("verify", help="verify the 'h' signature of a response")
    verify.add_argument("params", nargs="+", metavar="KEY=VALUE")

    parse_otp = sub.add_parser("parse-otp", help="split an OTP into its parts")
    parse_otp.add_argument("otp")

    sub.add_parser("nonce", help="print a fresh 40-character hex nonce")
    return parser


# ── Commands ──────────────────────────────────────────────────────────────────

def _run(args: argparse.Namespace) -> int:
    if args.command == "nonce":
        print(generate_nonce())
        return EXIT_OK

    if args.command == "parse-otp":
        otp = Otp.from_string(args.otp)
        print(f"otp:         {otp.otp}")
        print(f"public_id:   {otp.public_id}")
        print(f"cipher_text: {otp.cipher_text}")
        if otp.password is not None:
            print(f"password:    {otp.password}")
        return EXIT_OK

    signer = _build_signer(args.secret)
    params = _parse_pairs(args.params)

    if args.command == "sign":
        print(build_query_string(signer.sign(params)))
        return EXIT_OK

    if signer.verify_signature(params):
        logger.info("Signature valid.")
        return EXIT_OK
    logger.warning("Signature INVALID.")
    return EXIT_INVALID_SIGNATURE


# ── Main ──────────────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    try:
        return _run(args)
    except InvalidArgumentError as exc:
        logger.error("%s", exc)
        return EXIT_INVALID_ARGUMENT


if __name__ == "__main__":
    sys.exit(main())
