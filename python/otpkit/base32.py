"""
Base32 codec (RFC 4648) for shared secrets.

Authenticator apps exchange secrets as unpadded, upper-case Base32. Decoding
is case-insensitive, tolerates trailing ``=`` padding and drops leftover bits
that do not fill a whole byte.
"""

import base64

from otpkit.errors import InvalidSecret

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

_VALUES = {char: index for index, char in enumerate(ALPHABET)}


def encode(data: bytes) -> str:
    """
    Encode bytes as Base32.

    Args:
        data: Raw bytes

    Returns:
        Upper-case Base32 string without padding
    """
    return base64.b32encode(data).decode("ascii").rstrip("=")


def decode(text: str) -> bytes:
    """
    Decode a Base32 secret into raw key bytes.

    Args:
        text: Base32 text (any case, padding optional)

    Returns:
        Decoded bytes (empty for empty input)

    Raises:
        InvalidSecret: Character outside the alphabet, or padding that is
            not at the end of the text
    """
    if not isinstance(text, str):
        raise InvalidSecret(f"Secret must be text, got {type(text).__name__}")

    body = text.rstrip("=")
    if "=" in body:
        raise InvalidSecret("Padding is only allowed at the end of the secret")

    out = bytearray()
    buffer = 0
    bits = 0
    for char in body.upper():
        value = _VALUES.get(char)
        if value is None:
            raise InvalidSecret(f"Invalid Base32 character: {char!r}")
        buffer = (buffer << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((buffer >> bits) & 0xFF)
    return bytes(out)

