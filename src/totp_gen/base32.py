"""Base32 (RFC 4648 alphabet, unpadded) encoding of OTP secrets."""

from totp_gen.errors import InvalidSecretCharacter


ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

_INDEX = {char: value for value, char in enumerate(ALPHABET)}


def _bits(text: str) -> str:
    """Concatenate the 5-bit groups of a base32 string."""
    groups = []
    for position, char in enumerate(text):
        try:
            value = _INDEX[char.upper()]
        except KeyError:
            raise InvalidSecretCharacter(char, position) from None
        groups.append(f"{value:05b}")
    return "".join(groups)


def decode_to_hex(text: str) -> str:
    """
    Convert a base32 string to its hexadecimal representation.

    The 5-bit groups are regrouped into 4-bit nibbles starting from the most
    significant end. Bits left over at the end that do not fill a nibble are
    dropped, so the result may have an odd number of hex digits.

    Args:
        text: Base32 text (case-insensitive, no padding).

    Returns:
        Lowercase hex string, one digit per complete nibble.

    Raises:
        InvalidSecretCharacter: If a character is not in ALPHABET.
    """
    bits = _bits(text)
    usable = len(bits) - len(bits) % 4
    return "".join(
        format(int(bits[i : i + 4], 2), "x") for i in range(0, usable, 4)
    )


def decode(text: str) -> bytes:
    """
    Decode a base32 secret into raw key bytes.

    The result has floor(len(text) * 5 / 8) bytes; an odd trailing nibble
    from decode_to_hex is discarded.

    Raises:
        InvalidSecretCharacter: If a character is not in ALPHABET.
    """
    hex_digits = decode_to_hex(text)
    return bytes.fromhex(hex_digits[: len(hex_digits) - len(hex_digits) % 2])


def encode(data: bytes) -> str:
    """Encode bytes as uppercase base32, zero-filling the last 5-bit group."""
    bits = "".join(f"{byte:08b}" for byte in data)
    bits += "0" * (-len(bits) % 5)
    return "".join(ALPHABET[int(bits[i : i + 5], 2)] for i in range(0, len(bits), 5))
