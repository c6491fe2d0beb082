"""RFC 6238 TOTP (Time-based One-Time Password) generation and provisioning URLs."""

import logging
import time
from typing import Optional, Protocol, Union
from urllib.parse import quote

from totp_gen.errors import InvalidCounter, InvalidLength
from totp_gen.hotp import generate_hotp


logger = logging.getLogger(__name__)

DEFAULT_PERIOD = 30

# Characters left unescaped by JavaScript's encodeURIComponent, on top of
# the alphanumerics and "_.-~" that quote() never escapes.
_URI_COMPONENT_SAFE = "!*'()"


class Clock(Protocol):
    """Source of the current Unix time in seconds."""

    def now(self) -> float:
        ...


class SystemClock:
    """Clock backed by the system wall clock."""

    def now(self) -> float:
        return time.time()


def time_counter(
    timestamp: float, period: int = DEFAULT_PERIOD, initial_time: int = 0
) -> int:
    """
    Compute the TOTP time step for a Unix timestamp.

    Args:
        timestamp: Unix time in seconds.
        period: Length of one time step in seconds.
        initial_time: Unix time at which counting starts (T0).

    Returns:
        floor((timestamp - initial_time) / period)

    Raises:
        InvalidLength: If period is not positive.
        InvalidCounter: If timestamp is earlier than initial_time.
    """
    if period <= 0:
        raise InvalidLength(f"period must be positive, got {period}")
    if timestamp < initial_time:
        raise InvalidCounter(
            f"Timestamp {timestamp} is before the initial time {initial_time}"
        )
    return int((timestamp - initial_time) // period)


def generate_totp_at(
    secret: Union[str, bytes],
    timestamp: float,
    algorithm: str = "SHA1",
    period: int = DEFAULT_PERIOD,
    *,
    digits: int = 6,
    initial_time: int = 0,
) -> str:
    """Generate the TOTP code valid at the given Unix timestamp."""
    counter = time_counter(timestamp, period, initial_time)
    logger.debug("TOTP time step %d (period=%ds, T0=%d)", counter, period, initial_time)
    return generate_hotp(secret, counter, digits=digits, algorithm=algorithm)


def generate_totp(
    secret: Union[str, bytes],
    algorithm: str = "SHA1",
    period: int = DEFAULT_PERIOD,
    *,
    digits: int = 6,
    initial_time: int = 0,
    clock: Optional[Clock] = None,
) -> str:
    """
    Generate the current TOTP code.

    Args:
        secret: The shared secret as base32 text or raw bytes.
        algorithm: HMAC hash algorithm name (default: "SHA1").
        period: Time step in seconds (default: 30).
        digits: Number of digits in the code (default: 6).
        initial_time: Unix time T0 at which time steps start (default: 0).
        clock: Source of the current time; defaults to the system clock.

    Returns:
        A zero-padded TOTP code string.
    """
    clock = clock or SystemClock()
    return generate_totp_at(
        secret,
        clock.now(),
        algorithm,
        period,
        digits=digits,
        initial_time=initial_time,
    )


def _encode_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_url(
    secret: str,
    id: str,
    issuer: str,
    algorithm: str = "SHA1",
    digits: int = 6,
    period: int = DEFAULT_PERIOD,
    counter: int = 0,
    initial_time: int = 0,
    window: int = 1,
) -> str:
    """
    Build an otpauth://totp provisioning URL for authenticator apps.

    String fields are percent-encoded; numeric fields are written as
    decimal text. The label takes the form "<issuer>:<id>".

    Example:
        otpauth://totp/ACME%20Co:alice%40example.com?secret=JBSWY3DPEHPK3PXP&issuer=ACME%20Co&algorithm=SHA1&digits=6&period=30&counter=0&initial_time=0&window=1
    """
    encoded_issuer = _encode_component(issuer)
    encoded_id = _encode_component(id)
    query = "&".join(
        [
            f"secret={_encode_component(secret)}",
            f"issuer={encoded_issuer}",
            f"algorithm={_encode_component(algorithm)}",
            f"digits={int(digits)}",
            f"period={int(period)}",
            f"counter={int(counter)}",
            f"initial_time={int(initial_time)}",
            f"window={int(window)}",
        ]
    )
    return f"otpauth://totp/{encoded_issuer}:{encoded_id}?{query}"
