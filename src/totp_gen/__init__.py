"""RFC 6238 TOTP / RFC 4226 HOTP code generation."""

from totp_gen.base32 import ALPHABET
from totp_gen.base32 import decode_to_hex as decode_base32_to_hex
from totp_gen.errors import (
    InvalidCounter,
    InvalidLength,
    InvalidSecretCharacter,
    OTPError,
    UnsupportedAlgorithm,
)
from totp_gen.factory import generate_backup_codes, random_base32
from totp_gen.hotp import generate_hotp
from totp_gen.totp import Clock, SystemClock, generate_totp, generate_totp_at
from totp_gen.totp import build_url as generate_totp_url


__version__ = "0.1.0"

__all__ = [
    "ALPHABET",
    "Clock",
    "InvalidCounter",
    "InvalidLength",
    "InvalidSecretCharacter",
    "OTPError",
    "SystemClock",
    "UnsupportedAlgorithm",
    "decode_base32_to_hex",
    "generate_backup_codes",
    "generate_hotp",
    "generate_totp",
    "generate_totp_at",
    "generate_totp_url",
    "random_base32",
]
