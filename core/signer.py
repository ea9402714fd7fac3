"""
Request signing and response verification for the validation protocol.

Requests and responses are authenticated with HMAC-SHA1 over the canonical
query string (see :func:`core.utils.build_query_string`), keyed with the
base64-decoded client secret. The base64 signature travels in the ``h``
parameter.
"""

import logging
from typing import Dict, Mapping

from core.crypto import constant_time_compare, hmac_sha1
from core.exceptions import InvalidArgumentError
from core.utils import build_query_string, decode_secret, encode_signature

logger = logging.getLogger(__name__)

SIGNATURE_KEY = "h"

# Response parameters covered by the server's signature; anything else is ignored.
VALID_RESPONSE_PARAMS = frozenset(
    {
        "nonce",
        "otp",
        "sessioncounter",
        "sessionuse",
        "sl",
        "status",
        "t",
        "timeout",
        "timestamp",
    }
)


class Signer:
    """Sign request parameters and verify signed response parameters."""

    def __init__(self, client_secret: str) -> None:
        """
        Args:
            client_secret: Base64-encoded client secret.

        Raises:
            InvalidArgumentError: If ``client_secret`` is not canonical base64.
        """
        self._client_secret = decode_secret(client_secret)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(client_secret=<redacted>)"

    # ── Public API ───────────────────────────────────────────────────────

    def sign(self, data: Mapping[str, object]) -> Dict[str, str]:
        """
        Return a copy of ``data``, sorted by key, with the ``h`` signature added.

        Args:
            data: Request parameters. Must not already contain ``h``.

        Returns:
            New dict holding the sorted parameters plus ``h``.
        """
        signed = {key: str(data[key]) for key in sorted(data)}
        signed[SIGNATURE_KEY] = self._signature(signed)
        logger.debug("Signed request with parameters %s", sorted(data))
        return signed

    def verify_signature(self, data: Mapping[str, object]) -> bool:
        """
        Check the ``h`` signature of a response.

        Only keys in :data:`VALID_RESPONSE_PARAMS` are signed over; unknown
        keys (and ``h`` itself) are left out of the computation.

        Args:
            data: Parsed response parameters including ``h``.

        Returns:
            True if the signature matches.

        Raises:
            InvalidArgumentError: If ``data`` has no ``h`` key.
        """
        if SIGNATURE_KEY not in data:
            raise InvalidArgumentError("Response data carries no 'h' signature.")

        signed_data = {
            key: value for key, value in data.items() if key in VALID_RESPONSE_PARAMS
        }
        expected = self._signature(signed_data)
        valid = constant_time_compare(expected, str(data[SIGNATURE_KEY]))
        if not valid:
            logger.debug("Response signature mismatch over %s", sorted(signed_data))
        return valid

    # ── Internals ────────────────────────────────────────────────────────

    def _signature(self, params: Mapping[str, object]) -> str:
        query = build_query_string(params)
        return encode_signature(hmac_sha1(self._client_secret, query.encode("utf-8")))
