"""
otpkit key model - one authenticator enrollment.

Example:
    >>> from otpkit.key import OtpKey, AuthType
    >>> key = OtpKey("alice@example.com", "JBSWY3DPEHPK3PXP", issuer="Example")
    >>> key.auth_type
    <AuthType.TOTP: 'totp'>
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union

from otpkit import base32
from otpkit.errors import InvalidKey, InvalidSecret, UnsupportedAlgorithm

DEFAULT_DIGITS = 6
DEFAULT_PERIOD = 30

MIN_DIGITS = 1
MAX_DIGITS = 9  # 10**digits must stay below the 31-bit truncated value

MAX_COUNTER = 0xFFFFFFFFFFFFFFFF


class AuthType(Enum):
    """Source of the challenge value."""
    TOTP = "totp"
    HOTP = "hotp"

    @classmethod
    def parse(cls, value: Union["AuthType", str]) -> "AuthType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidKey(f"Unknown auth type: {value!r}")


class Algorithm(Enum):
    """HMAC hash function."""
    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @classmethod
    def parse(cls, value: Union["Algorithm", str]) -> "Algorithm":
        """
        Coerce an algorithm name (any case) to the enum.

        Raises:
            UnsupportedAlgorithm: Name is not SHA1, SHA256 or SHA512
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise UnsupportedAlgorithm(f"Unsupported algorithm: {value!r}")


@dataclass
class OtpKey:
    """
    Authenticator enrollment.

    Fields are validated on construction. The library never changes a key
    after that; advancing an HOTP counter is the owner's job (see
    ``advance``).

    Args:
        account: Account label (e.g., email)
        secret: Shared secret as Base32 text
        auth_type: TOTP (time-based) or HOTP (counter-based)
        issuer: Optional service name
        algorithm: HMAC hash (default: SHA1)
        digits: Code length, 1-9 (default: 6)
        counter: HOTP counter, unsigned 64-bit
        period: TOTP time step in seconds (default: 30)

    Raises:
        InvalidSecret: Secret is empty, not Base32, or shorter than one byte
        UnsupportedAlgorithm: Unknown algorithm name
        InvalidKey: Other field out of range
    """

    account: str
    secret: str
    auth_type: AuthType = AuthType.TOTP
    issuer: Optional[str] = None
    algorithm: Algorithm = Algorithm.SHA1
    digits: int = DEFAULT_DIGITS
    counter: int = 0
    period: int = DEFAULT_PERIOD

    def __post_init__(self):
        self.auth_type = AuthType.parse(self.auth_type)
        self.algorithm = Algorithm.parse(self.algorithm)

        if not isinstance(self.account, str) or not self.account:
            raise InvalidKey("Account is required")
        if self.issuer is not None and not isinstance(self.issuer, str):
            raise InvalidKey("Issuer must be text")

        if not isinstance(self.secret, str) or not self.secret:
            raise InvalidSecret("Secret is required")
        if not base32.decode(self.secret):
            raise InvalidSecret("Secret decodes to an empty key")

        if not _is_int(self.digits) or not MIN_DIGITS <= self.digits <= MAX_DIGITS:
            raise InvalidKey(f"Digits must be between {MIN_DIGITS} and {MAX_DIGITS}")
        if not _is_int(self.counter) or not 0 <= self.counter <= MAX_COUNTER:
            raise InvalidKey("Counter must be an unsigned 64-bit integer")
        if not _is_int(self.period) or self.period < 0:
            raise InvalidKey("Period must be a non-negative integer")

    @property
    def is_totp(self) -> bool:
        return self.auth_type is AuthType.TOTP

    @property
    def is_hotp(self) -> bool:
        return self.auth_type is AuthType.HOTP

    def secret_bytes(self) -> bytes:
        """Decoded HMAC key."""
        return base32.decode(self.secret)

    def advance(self, steps: int = 1) -> "OtpKey":
        """
        Return a copy with the HOTP counter moved forward.

        Args:
            steps: Number of counter values to skip (default: 1)

        Raises:
            InvalidKey: Key is not HOTP, or counter would overflow
        """
        if not self.is_hotp:
            raise InvalidKey("Only HOTP keys have a counter to advance")
        return replace(self, counter=self.counter + steps)

    def to_uri(self) -> str:
        """Serialize as an otpauth:// key URI."""
        from otpkit.uri import to_uri
        return to_uri(self)

    @classmethod
    def from_uri(cls, uri: str) -> "OtpKey":
        """Parse an otpauth:// key URI."""
        from otpkit.uri import from_uri
        return from_uri(uri)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
