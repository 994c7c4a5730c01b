"""
otpkit errors.

Every failure raised by the library is an ``OTPError``. Each subclass carries
a short machine-readable ``code`` so callers can branch without matching on
message text.
"""

from typing import Optional


class OTPError(ValueError):
    """Base class for all otpkit errors."""

    default_code = "OTP_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code or self.default_code
        self.message = message


class InvalidSecret(OTPError):
    """Secret is not valid Base32."""

    default_code = "INVALID_SECRET"


class UnsupportedAlgorithm(OTPError):
    """HMAC algorithm is not one of SHA1, SHA256, SHA512."""

    default_code = "UNSUPPORTED_ALGORITHM"


class NotApplicable(OTPError):
    """Operation does not apply to this kind of key."""

    default_code = "NOT_APPLICABLE"


class InvalidLength(OTPError):
    """Requested secret length is not usable."""

    default_code = "INVALID_LENGTH"


class InvalidKey(OTPError):
    """Key field out of range (digits, counter, period)."""

    default_code = "INVALID_KEY"


class InvalidUri(OTPError):
    """
    Key URI could not be parsed.

    Attributes:
        field: Name of the URI component that failed (``authority``,
            ``algorithm``, ``counter``, an unknown query key, ...)
    """

    default_code = "INVALID_URI"

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"Invalid uri:{field}")
        self.field = field


class TimeSyncError(OTPError):
    """Clock offset could not be obtained from the time server."""

    default_code = "TIME_SYNC_FAILED"
