"""Random secret and backup code generation."""

import logging
import secrets

from totp_gen import base32
from totp_gen.errors import InvalidLength


logger = logging.getLogger(__name__)


def random_base32(length: int = 32) -> str:
    """
    Generate a random base32 secret.

    Characters are drawn uniformly from the base32 alphabet using the
    operating system CSPRNG. An odd length is rounded up so the result
    always has an even number of characters.

    Args:
        length: Desired number of characters (default: 32, i.e. 160 bits).

    Returns:
        Uppercase base32 string of even length >= length.

    Raises:
        InvalidLength: If length is not positive.
    """
    if length <= 0:
        raise InvalidLength(f"length must be positive, got {length}")
    if length % 2:
        length += 1
    return "".join(secrets.choice(base32.ALPHABET) for _ in range(length))


def generate_backup_codes(count: int = 10, length: int = 10) -> list[str]:
    """
    Generate one-time backup codes for account recovery.

    Each code is `length` random bytes encoded as base32. Codes are not
    checked for uniqueness and tracking which ones were used is up to the
    caller.

    Args:
        count: Number of codes to generate.
        length: Number of random bytes behind each code.

    Returns:
        List of `count` base32 strings.

    Raises:
        InvalidLength: If count or length is not positive.
    """
    if count <= 0:
        raise InvalidLength(f"count must be positive, got {count}")
    if length <= 0:
        raise InvalidLength(f"length must be positive, got {length}")

    logger.debug("Generating %d backup codes of %d bytes", count, length)
    return [base32.encode(secrets.token_bytes(length)) for _ in range(count)]
