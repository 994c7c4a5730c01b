"""
Code validation with a sliding window.

Candidate challenges are computed as plain integers and handed to the
generator; neither the key nor the drift is touched while probing, so
concurrent checks against the same key are safe.
"""

import hmac
from typing import Optional

from otpkit.drift import Drift
from otpkit.generator import challenge_for, generate
from otpkit.key import AuthType, OtpKey

# Exact match only, as authenticator-side callers expect by default
DEFAULT_WINDOW = 0


def check(
    key: OtpKey,
    candidate_code: str,
    window: int = DEFAULT_WINDOW,
    now: Optional[float] = None,
    drift: Optional[Drift] = None,
) -> bool:
    """
    Check a user-supplied code.

    The code for the key's current challenge is tried first. With a non-zero
    window, TOTP keys also try the time steps exactly ``window`` periods
    before and after now. HOTP keys try ``counter - 1`` and ``counter + 1``
    whatever the window size; the window only switches that probing on.

    Args:
        key: Key to validate against
        candidate_code: Code entered by the user
        window: Probe distance in time steps (0 disables probing)
        now: Unix timestamp (default: current time)
        drift: Clock offset (default: process-wide drift)

    Returns:
        True if the code matches one of the probed challenges
    """
    if window < 0:
        raise ValueError("Window must be non-negative")
    if not isinstance(candidate_code, str):
        return False

    challenge = challenge_for(key, now, drift)
    if _matches(key, challenge, candidate_code):
        return True

    if window == 0:
        return False

    if key.auth_type is AuthType.TOTP:
        candidates = (challenge - window, challenge + window)
    elif key.auth_type is AuthType.HOTP:
        # counter - 1 wraps at zero like the unsigned counter it models
        candidates = (challenge - 1, challenge + 1)
    else:
        return False

    return any(_matches(key, c, candidate_code) for c in candidates)


def _matches(key: OtpKey, challenge: int, candidate_code: str) -> bool:
    expected = generate(key, challenge)
    return hmac.compare_digest(expected.encode("ascii"), candidate_code.encode("utf-8"))
