"""
Cryptographic primitives for the validation client.

Message authentication : HMAC-SHA1 (required by the validation protocol)
Nonces                 : 160 bits from the OS CSPRNG, hex encoded
"""

import hmac
import secrets

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac

# ── Constants ────────────────────────────────────────────────────────────────

NONCE_SIZE = 20         # 160-bit nonce -> 40 hex characters


# ── HMAC ──────────────────────────────────────────────────────────────────────

def hmac_sha1(key: bytes, message: bytes) -> bytes:
    """
    Compute the raw HMAC-SHA1 digest of ``message``.

    Args:
        key:     Raw (already base64-decoded) shared secret.
        message: Bytes to authenticate.

    Returns:
        20-byte digest.
    """
    mac = crypto_hmac.HMAC(key, hashes.SHA1())
    mac.update(message)
    return mac.finalize()


# ── Nonces ────────────────────────────────────────────────────────────────────

def generate_nonce() -> str:
    """Return a random 40-character lowercase hexadecimal nonce."""
    return secrets.token_hex(NONCE_SIZE)


# ── Comparison ────────────────────────────────────────────────────────────────

def constant_time_compare(a: str, b: str) -> bool:
    """Return True if *a* == *b* in constant time (timing-safe)."""
    return hmac.compare_digest(a.encode(), b.encode())
