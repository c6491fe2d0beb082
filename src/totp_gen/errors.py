"""Exceptions raised by totp-gen."""

from typing import Optional


class OTPError(Exception):
    """Base class for all totp-gen errors."""


class InvalidSecretCharacter(OTPError, ValueError):
    """A base32 secret contains a character outside the alphabet."""

    def __init__(self, character: str, position: int):
        self.character = character
        self.position = position
        super().__init__(
            f"Invalid base32 character {character!r} at position {position}"
        )


class UnsupportedAlgorithm(OTPError, ValueError):
    """The requested HMAC hash algorithm cannot be used."""

    def __init__(self, algorithm: Optional[str], reason: Optional[str] = None):
        self.algorithm = algorithm
        if algorithm is None:
            message = "Unsupported HMAC algorithm"
        else:
            message = f"Unsupported HMAC algorithm: {algorithm!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidLength(OTPError, ValueError):
    """A length, count, digit or period argument is out of range."""


class InvalidCounter(OTPError, ValueError):
    """A counter does not fit in an unsigned 64-bit integer."""
