"""
Exception types shared by the signer and the OTP parser.
"""


class InvalidArgumentError(ValueError):
    """Raised when a secret, parameter set or OTP string fails validation."""
