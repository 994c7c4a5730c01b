"""
Code generation (RFC 4226 HOTP, RFC 6238 TOTP).

Example:
    >>> from otpkit import OtpKey, generate, generate_from_key
    >>> key = OtpKey("alice", "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ")
    >>> generate(key, 0)
    '755224'
    >>> code = generate_from_key(key)  # current time step
"""

import hashlib
import hmac
import struct
import time
from typing import Optional

from otpkit.drift import Drift, resolve_offset
from otpkit.errors import InvalidKey, NotApplicable, UnsupportedAlgorithm
from otpkit.key import Algorithm, AuthType, OtpKey

_U64 = 0xFFFFFFFFFFFFFFFF

_DIGESTS = {
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.SHA512: hashlib.sha512,
}


def generate(key: OtpKey, challenge: int) -> str:
    """
    Compute the code for an explicit challenge value.

    Args:
        key: Key to generate for
        challenge: Time step or counter. Reduced modulo 2**64, so -1 is the
            largest counter.

    Returns:
        Code as a zero-padded string of ``key.digits`` characters
    """
    # Counter as 8-byte big-endian
    challenge_bytes = struct.pack(">Q", challenge & _U64)

    digestmod = _DIGESTS.get(key.algorithm)
    if digestmod is None:
        raise UnsupportedAlgorithm(f"Unsupported algorithm: {key.algorithm!r}")
    h = hmac.new(key.secret_bytes(), challenge_bytes, digestmod).digest()

    # Dynamic truncation
    offset = h[-1] & 0x0F
    code_int = struct.unpack(">I", h[offset : offset + 4])[0] & 0x7FFFFFFF

    code = str(code_int % (10**key.digits))
    return code.zfill(key.digits)


def corrected_time(now: Optional[float] = None, drift: Optional[Drift] = None) -> float:
    """Unix time in seconds with the drift offset applied."""
    if now is None:
        now = time.time()
    return now + resolve_offset(drift)


def time_challenge(
    key: OtpKey,
    now: Optional[float] = None,
    drift: Optional[Drift] = None,
) -> int:
    """
    Current TOTP time step for a key.

    Args:
        key: Key whose period is used
        now: Unix timestamp (default: current time)
        drift: Clock offset (default: process-wide drift)

    Raises:
        InvalidKey: Period is zero
    """
    if key.period <= 0:
        raise InvalidKey("Period must be positive to compute a time step")
    return int(corrected_time(now, drift) // key.period)


def challenge_for(
    key: OtpKey,
    now: Optional[float] = None,
    drift: Optional[Drift] = None,
) -> int:
    """The key's natural challenge: time step for TOTP, counter for HOTP."""
    if key.auth_type is AuthType.TOTP:
        return time_challenge(key, now, drift)
    return key.counter


def generate_from_key(
    key: OtpKey,
    now: Optional[float] = None,
    drift: Optional[Drift] = None,
) -> str:
    """
    Current code for a key.

    Args:
        key: Key to generate for
        now: Unix timestamp (default: current time); ignored for HOTP
        drift: Clock offset (default: process-wide drift); ignored for HOTP

    Returns:
        Code string
    """
    return generate(key, challenge_for(key, now, drift))


def time_remaining(
    key: OtpKey,
    now: Optional[float] = None,
    drift: Optional[Drift] = None,
) -> float:
    """
    Seconds until the current TOTP code changes.

    Returns:
        Value in ``(0, period]``

    Raises:
        NotApplicable: Key is not time-based
        InvalidKey: Period is zero
    """
    if key.auth_type is not AuthType.TOTP:
        raise NotApplicable("Remaining time is only defined for TOTP keys")
    if key.period <= 0:
        raise InvalidKey("Period must be positive to compute a time step")
    elapsed = corrected_time(now, drift) % key.period
    # float modulo of a tiny negative value rounds up to the period itself
    if elapsed >= key.period:
        elapsed = 0.0
    return key.period - elapsed
