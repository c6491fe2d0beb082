"""RFC 4226 HOTP (HMAC-based One-Time Password) implementation."""

import logging
from typing import Optional, Union

from cryptography import exceptions as crypto_exceptions
from cryptography.hazmat.primitives import hashes, hmac

from totp_gen import base32
from totp_gen.errors import InvalidCounter, InvalidLength, UnsupportedAlgorithm


logger = logging.getLogger(__name__)

MAX_COUNTER = 2**64 - 1
MAX_DIGITS = 10

# Every entry produces at least 20 bytes, so offset + 4 never overruns.
ALGORITHMS = {
    "SHA1": hashes.SHA1,
    "SHA224": hashes.SHA224,
    "SHA256": hashes.SHA256,
    "SHA384": hashes.SHA384,
    "SHA512": hashes.SHA512,
}


def resolve_algorithm(name: str) -> hashes.HashAlgorithm:
    """
    Look up a hash algorithm by name.

    Args:
        name: Algorithm name such as "SHA1", "sha256" or "SHA-512".

    Returns:
        A cryptography HashAlgorithm instance.

    Raises:
        UnsupportedAlgorithm: If the name is not a known HMAC hash.
    """
    key = name.upper().replace("-", "")
    try:
        algorithm = ALGORITHMS[key]()
    except KeyError:
        raise UnsupportedAlgorithm(name) from None
    logger.debug("Resolved HMAC algorithm %r to %s", name, algorithm.name)
    return algorithm


def counter_to_bytes(counter: int) -> bytes:
    """Serialize a counter as 8 bytes, big-endian."""
    if not 0 <= counter <= MAX_COUNTER:
        raise InvalidCounter(
            f"Counter must be between 0 and {MAX_COUNTER}, got {counter}"
        )
    return counter.to_bytes(8, byteorder="big")


def hmac_digest(key: bytes, counter: int, algorithm: str = "SHA1") -> bytes:
    """
    Compute HMAC(algorithm, key, counter) over the 8-byte counter.

    Raises:
        UnsupportedAlgorithm: If the algorithm is unknown or refused by the
            cryptography backend.
        InvalidCounter: If the counter is out of range.
    """
    message = counter_to_bytes(counter)
    hash_algorithm = resolve_algorithm(algorithm)
    try:
        mac = hmac.HMAC(key, hash_algorithm)
    except crypto_exceptions.UnsupportedAlgorithm as e:
        raise UnsupportedAlgorithm(algorithm, str(e)) from e
    mac.update(message)
    return mac.finalize()


def truncate(digest: bytes, algorithm: Optional[str] = None) -> int:
    """
    Dynamic truncation (RFC 4226, Section 5.3).

    The low nibble of the last byte selects an offset; the four bytes at that
    offset are read big-endian and the sign bit is cleared.

    Args:
        digest: HMAC output.
        algorithm: Name of the hash that produced the digest, used in errors.

    Returns:
        A 31-bit non-negative integer.
    """
    offset = digest[-1] & 0x0F
    if offset + 4 > len(digest):
        raise UnsupportedAlgorithm(
            algorithm,
            f"{len(digest)}-byte digest too short for dynamic truncation",
        )
    return int.from_bytes(digest[offset : offset + 4], byteorder="big") & 0x7FFFFFFF


def hash_counter(key: bytes, counter: int, algorithm: str = "SHA1") -> int:
    """HMAC the counter with key and return the truncated 31-bit value."""
    return truncate(hmac_digest(key, counter, algorithm), algorithm)


def format_code(value: int, digits: int = 6) -> str:
    """
    Reduce a truncated value to a zero-padded decimal code.

    Args:
        value: Truncated HMAC value.
        digits: Code length, 1 to 10.

    Returns:
        A string of exactly `digits` characters.

    Raises:
        InvalidLength: If digits is out of range.
    """
    if not 1 <= digits <= MAX_DIGITS:
        raise InvalidLength(f"digits must be between 1 and {MAX_DIGITS}, got {digits}")
    code = value % (10**digits)
    return f"{code:0{digits}d}"


def _secret_bytes(secret: Union[str, bytes]) -> bytes:
    if isinstance(secret, str):
        raw_secret = base32.decode(secret)
    else:
        raw_secret = bytes(secret)
    if not raw_secret:
        raise InvalidLength("Secret must not be empty")
    return raw_secret


def generate_hotp(
    secret: Union[str, bytes],
    counter: int,
    digits: int = 6,
    algorithm: str = "SHA1",
) -> str:
    """
    Generate an HOTP code using RFC 4226.

    Args:
        secret: The shared secret as base32 text or raw bytes.
        counter: The moving counter value.
        digits: Number of digits in the output code (default: 6).
        algorithm: HMAC hash algorithm name (default: "SHA1").

    Returns:
        A zero-padded HOTP code string.

    Raises:
        InvalidSecretCharacter: If a base32 secret cannot be decoded.
        InvalidLength: If the secret is empty or digits is out of range.
        InvalidCounter: If the counter is out of range.
        UnsupportedAlgorithm: If the algorithm cannot be used.
    """
    raw_secret = _secret_bytes(secret)
    return format_code(hash_counter(raw_secret, counter, algorithm), digits)
