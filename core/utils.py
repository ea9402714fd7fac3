"""
Utility helpers for the validation client.
"""

import base64
import binascii
from typing import Mapping

from core.exceptions import InvalidArgumentError

_INVALID_SECRET = "Given client secret is not a base64-decodable string."


# ── Base64 ────────────────────────────────────────────────────────────────────

def decode_secret(secret: str) -> bytes:
    """
    Decode a base64 client secret, accepting only its canonical encoding.

    The decoded bytes are re-encoded and compared against ``secret``, so
    stray characters, missing padding or non-zero padding bits are all
    rejected even where the decoder itself would tolerate them.

    Args:
        secret: Base64 client secret as issued by the validation service.

    Returns:
        Raw secret bytes.

    Raises:
        InvalidArgumentError: If ``secret`` is not canonical base64.
    """
    if not isinstance(secret, str):
        raise InvalidArgumentError(_INVALID_SECRET)
    try:
        raw = base64.b64decode(secret)
    except (binascii.Error, ValueError) as exc:
        raise InvalidArgumentError(_INVALID_SECRET) from exc
    if encode_signature(raw) != secret:
        raise InvalidArgumentError(_INVALID_SECRET)
    return raw


def encode_signature(raw: bytes) -> str:
    """Encode raw bytes as standard, padded base64 text."""
    return base64.b64encode(raw).decode("ascii")


# ── Query strings ─────────────────────────────────────────────────────────────

def build_query_string(params: Mapping[str, object]) -> str:
    """
    Serialise ``params`` into the canonical string that gets signed.

    Keys are sorted ascending and joined as ``key=value`` pairs with ``&``.
    Nothing is URL-encoded; values containing ``&`` or ``=`` produce an
    ambiguous string, which is what the remote service signs as well.

    Example::

        >>> build_query_string({"otp": "cccc", "id": "1"})
        "id=1&otp=cccc"
    """
    return "&".join(f"{key}={params[key]}" for key in sorted(params))
