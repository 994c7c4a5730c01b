"""
otpkit - One-time passwords (RFC 4226 HOTP, RFC 6238 TOTP)

Generates and checks authenticator codes, and reads/writes otpauth:// key
URIs as used by Google Authenticator, Authy, Microsoft Authenticator, etc.

Usage:
    from otpkit import OtpKey, generate_from_key, check, generate_random_secret

    key = OtpKey("alice@example.com", generate_random_secret(), issuer="Example")
    uri = key.to_uri()              # hand to a QR renderer
    code = generate_from_key(key)   # what the app shows right now
    check(key, code, window=1)      # True

Security:
    Secrets come from the ``secrets`` CSPRNG. Codes are compared in
    constant time. Validation never mutates the key or the clock offset.
"""

__version__ = "0.1.0"
__license__ = "CC0-1.0"

from otpkit.errors import (
    OTPError,
    InvalidSecret,
    UnsupportedAlgorithm,
    NotApplicable,
    InvalidUri,
    InvalidLength,
    InvalidKey,
    TimeSyncError,
)
from otpkit.key import OtpKey, AuthType, Algorithm
from otpkit.drift import DriftState, DEFAULT_DRIFT
from otpkit.generator import (
    generate,
    generate_from_key,
    time_challenge,
    time_remaining,
)
from otpkit.validator import check, DEFAULT_WINDOW
from otpkit.uri import to_uri, from_uri, generate_random_secret
from otpkit.timesync import sync_time, fetch_clock_offset

__all__ = [
    # Key model
    "OtpKey",
    "AuthType",
    "Algorithm",
    # Codes
    "generate",
    "generate_from_key",
    "time_challenge",
    "time_remaining",
    "check",
    "DEFAULT_WINDOW",
    # Key URI
    "to_uri",
    "from_uri",
    "generate_random_secret",
    # Clock drift
    "DriftState",
    "DEFAULT_DRIFT",
    "sync_time",
    "fetch_clock_offset",
    # Errors
    "OTPError",
    "InvalidSecret",
    "UnsupportedAlgorithm",
    "NotApplicable",
    "InvalidUri",
    "InvalidLength",
    "InvalidKey",
    "TimeSyncError",
]
