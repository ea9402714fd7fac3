"""Tests for the command-line entry point in main.py."""

import re

import pytest

from main import (
    EXIT_INVALID_ARGUMENT,
    EXIT_INVALID_SIGNATURE,
    EXIT_OK,
    SECRET_ENV_VAR,
    main,
)

CLIENT_SECRET = "c2VjcmV0LXNoYXJlZC13aXRoLXl1Ymljbw=="
NONCE = "0123456789abcdef0123456789abcdef01234567"
OTP = "ccccccbtbhnhcjhkdcnjjndelnunclchkgvnjbvtdkgl"

RESPONSE = [
    f"nonce={NONCE}",
    f"otp={OTP}",
    "sl=100",
    "status=OK",
    "t=2014-06-26T12:00:00Z0000",
    "h=sta7dLqUbVQSk32J6NzZ5cxPSCQ=",
]


# ── nonce / parse-otp ─────────────────────────────────────────────────────────

def test_nonce_command(capsys: pytest.CaptureFixture) -> None:
    assert main(["nonce"]) == EXIT_OK
    assert re.fullmatch(r"[a-f0-9]{40}\n", capsys.readouterr().out)


def test_parse_otp_command(capsys: pytest.CaptureFixture) -> None:
    assert main(["parse-otp", "pw:" + OTP.upper()]) == EXIT_OK
    out = capsys.readouterr().out
    assert "public_id:   ccccccbtbhnh" in out
    assert "password:    pw" in out


def test_parse_otp_invalid() -> None:
    assert main(["parse-otp", "hello"]) == EXIT_INVALID_ARGUMENT


# ── sign / verify ─────────────────────────────────────────────────────────────

def test_sign_command(capsys: pytest.CaptureFixture) -> None:
    code = main(["--secret", CLIENT_SECRET, "sign", f"otp={OTP}", f"nonce={NONCE}", "id=1"])
    assert code == EXIT_OK
    assert capsys.readouterr().out == (
        f"h=96wquuk68yIsQew2BpGT2GW8Zu0=&id=1&nonce={NONCE}&otp={OTP}\n"
    )


def test_verify_command_valid() -> None:
    assert main(["--secret", CLIENT_SECRET, "verify", *RESPONSE, "extra=1"]) == EXIT_OK


def test_verify_command_tampered() -> None:
    tampered = [p if not p.startswith("status=") else "status=BAD_OTP" for p in RESPONSE]
    assert main(["--secret", CLIENT_SECRET, "verify", *tampered]) == EXIT_INVALID_SIGNATURE


def test_verify_command_missing_signature() -> None:
    assert main(["--secret", CLIENT_SECRET, "verify", *RESPONSE[:-1]]) == EXIT_INVALID_ARGUMENT


def test_secret_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(SECRET_ENV_VAR, CLIENT_SECRET)
    assert main(["verify", *RESPONSE]) == EXIT_OK


def test_missing_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(SECRET_ENV_VAR, raising=False)
    assert main(["sign", "id=1"]) == EXIT_INVALID_ARGUMENT


def test_invalid_secret() -> None:
    assert main(["--secret", "a", "sign", "id=1"]) == EXIT_INVALID_ARGUMENT


def test_malformed_pair() -> None:
    assert main(["--secret", CLIENT_SECRET, "sign", "novalue"]) == EXIT_INVALID_ARGUMENT
