"""
Parse OTP strings typed by a YubiKey.

A YubiKey emits "modhex": a 16-character alphabet chosen so that the key
codes come out the same on most keyboard layouts. Users on a Dvorak layout
still produce a different set of characters, so both alphabets are accepted
and Dvorak input is mapped back onto the QWERTY one.

Accepted format (case-insensitive)::

    [password:]<public id, 0-16 chars><cipher text, 32 chars>
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from core.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

# Same index in both alphabets = same modhex symbol.
QWERTY_ALPHABET = "cbdefghijklnrtuv"
DVORAK_ALPHABET = "jxe.uidchtnbpygk"

PUBLIC_ID_MAX_LENGTH = 16
CIPHER_TEXT_LENGTH = 32

_DVORAK_TO_QWERTY = str.maketrans(DVORAK_ALPHABET, QWERTY_ALPHABET)


def _otp_pattern(alphabet: str) -> "re.Pattern[str]":
    chars = f"[{re.escape(alphabet)}]"
    return re.compile(
        rf"(?:(?P<password>.*):)?"
        rf"(?P<otp>(?P<public_id>{chars}{{0,{PUBLIC_ID_MAX_LENGTH}}})"
        rf"(?P<cipher_text>{chars}{{{CIPHER_TEXT_LENGTH}}}))",
        re.IGNORECASE | re.ASCII,
    )


OTP_PATTERN_QWERTY = _otp_pattern(QWERTY_ALPHABET)
OTP_PATTERN_DVORAK = _otp_pattern(DVORAK_ALPHABET)


def dvorak_to_qwerty(text: str) -> str:
    """Translate lowercase Dvorak modhex characters to their QWERTY equivalents."""
    return text.translate(_DVORAK_TO_QWERTY)


def _dvorak_lower(text: str) -> str:
    # The translation table only maps lowercase characters.
    return dvorak_to_qwerty(text.lower())


@dataclass(frozen=True)
class Otp:
    """An OTP split into its parts. Modhex fields are lowercase QWERTY."""

    otp: str                 # public_id + cipher_text
    password: Optional[str]  # text before the last usable ':' (None if absent)
    public_id: str           # identifies the YubiKey, may be empty
    cipher_text: str         # encrypted 32-character payload

    @classmethod
    def from_string(cls, string: str) -> "Otp":
        """
        Parse ``string`` into an :class:`Otp`.

        QWERTY is tried before Dvorak, so input valid under both is read as
        QWERTY. The password prefix is kept exactly as typed.

        Raises:
            InvalidArgumentError: If ``string`` is not a string or not an OTP.
        """
        if not isinstance(string, str):
            raise InvalidArgumentError("Given OTP is not a string.")

        match = OTP_PATTERN_QWERTY.fullmatch(string)
        if match:
            normalise = str.lower
        else:
            match = OTP_PATTERN_DVORAK.fullmatch(string)
            if not match:
                raise InvalidArgumentError("Given string is not a valid OTP.")
            logger.debug("OTP matched the Dvorak alphabet; translating.")
            normalise = _dvorak_lower

        return cls(
            otp=normalise(match.group("otp")),
            password=match.group("password"),
            public_id=normalise(match.group("public_id")),
            cipher_text=normalise(match.group("cipher_text")),
        )

    @staticmethod
    def is_valid_string(string: str) -> bool:
        """Return True if ``string`` is an OTP in either alphabet. Never raises."""
        if not isinstance(string, str):
            return False
        return bool(
            OTP_PATTERN_QWERTY.fullmatch(string) or OTP_PATTERN_DVORAK.fullmatch(string)
        )


def parse_otp(string: str) -> Otp:
    """Module-level shortcut for :meth:`Otp.from_string`."""
    return Otp.from_string(string)


def is_valid_otp(string: str) -> bool:
    """Module-level shortcut for :meth:`Otp.is_valid_string`."""
    return Otp.is_valid_string(string)
