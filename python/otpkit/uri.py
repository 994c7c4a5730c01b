"""
Key URI codec (``otpauth://``) and random secret generation.

Format (Google Authenticator Key URI):

    otpauth://{totp|hotp}/{label}?secret=...[&issuer=...][&algorithm=...]
        [&digits=...][&counter=...][&period=...]

Parameters equal to their defaults are left out when serializing, and the
order is fixed so the same key always yields the same URI. Parsing is strict:
unknown parameters are rejected rather than ignored.
"""

import secrets
from typing import Dict, Optional
from urllib.parse import parse_qsl, quote, unquote_plus, urlsplit

from otpkit.base32 import ALPHABET
from otpkit.errors import InvalidLength, InvalidSecret, InvalidUri, UnsupportedAlgorithm
from otpkit.key import (
    DEFAULT_DIGITS,
    DEFAULT_PERIOD,
    MAX_COUNTER,
    MAX_DIGITS,
    Algorithm,
    AuthType,
    OtpKey,
)

SCHEME = "otpauth"

DEFAULT_SECRET_LENGTH = 32


def to_uri(key: OtpKey) -> str:
    """
    Serialize a key as an otpauth:// URI.

    Args:
        key: Key to serialize

    Returns:
        Key URI string, e.g. ``otpauth://totp/Example%3Aalice?secret=...&issuer=Example``
    """
    issuer = key.issuer if key.issuer and key.issuer.strip() else None
    label = f"{issuer}:{key.account}" if issuer else key.account

    uri = f"{SCHEME}://{key.auth_type.value}/{quote(label, safe='')}?secret={key.secret}"
    if issuer:
        uri += f"&issuer={quote(issuer, safe='')}"
    if key.algorithm is not Algorithm.SHA1:
        uri += f"&algorithm={key.algorithm.value}"
    if key.digits not in (0, DEFAULT_DIGITS):
        uri += f"&digits={key.digits}"
    if key.auth_type is AuthType.HOTP:
        uri += f"&counter={key.counter}"
    if key.period not in (0, DEFAULT_PERIOD):
        uri += f"&period={key.period}"
    return uri


def from_uri(uri: str) -> OtpKey:
    """
    Parse an otpauth:// URI.

    Args:
        uri: Key URI

    Returns:
        Parsed key

    Raises:
        InvalidUri: Any malformed component; ``field`` names which one
    """
    parts = urlsplit(uri)
    if parts.scheme.lower() != SCHEME:
        raise InvalidUri("scheme")

    authority = parts.netloc.lower()
    if authority == AuthType.TOTP.value:
        auth_type = AuthType.TOTP
    elif authority == AuthType.HOTP.value:
        auth_type = AuthType.HOTP
    else:
        raise InvalidUri("authority")

    segments = parts.path.split("/")
    label = unquote_plus(segments[1]) if len(segments) > 1 else ""
    issuer: Optional[str] = None

    fields: Dict[str, object] = {}
    for name, value in parse_qsl(parts.query, keep_blank_values=True):
        field = name.lower()
        if field == "secret":
            fields["secret"] = value
        elif field == "issuer":
            issuer = value
        elif field == "algorithm":
            try:
                fields["algorithm"] = Algorithm.parse(value)
            except UnsupportedAlgorithm:
                raise InvalidUri("algorithm")
        elif field == "digits":
            digits = _parse_uint(value, field) or DEFAULT_DIGITS
            if digits > MAX_DIGITS:
                raise InvalidUri("digits")
            fields["digits"] = digits
        elif field == "counter":
            if auth_type is not AuthType.HOTP:
                raise InvalidUri("counter")
            counter = _parse_uint(value, field)
            if counter > MAX_COUNTER:
                raise InvalidUri("counter")
            fields["counter"] = counter
        elif field == "period":
            fields["period"] = _parse_uint(value, field) or DEFAULT_PERIOD
        else:
            raise InvalidUri(name)

    if issuer and label.startswith(f"{issuer}:"):
        account = label[len(issuer) + 1:]
    elif ":" in label:
        label_issuer, account = label.split(":", 1)
        issuer = issuer or label_issuer
    else:
        account = label
    if not account:
        raise InvalidUri("label")

    if not fields.get("secret"):
        raise InvalidUri("secret")

    try:
        return OtpKey(
            account=account,
            auth_type=auth_type,
            issuer=issuer or None,
            **fields,
        )
    except InvalidSecret as e:
        raise InvalidUri("secret") from e


def generate_random_secret(length: int = DEFAULT_SECRET_LENGTH) -> str:
    """
    Generate a random Base32 secret for a new enrollment.

    Args:
        length: Number of Base32 characters (default: 32, i.e. 160 bits)

    Returns:
        Secret text

    Raises:
        InvalidLength: Length is zero or negative
    """
    if length <= 0:
        raise InvalidLength("Secret length must be positive")
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def _parse_uint(value: str, field: str) -> int:
    if not value or not value.isascii() or not value.isdigit():
        raise InvalidUri(field)
    return int(value)
