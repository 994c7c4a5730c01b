"""
Clock drift correction.

TOTP challenges are computed from ``local time + drift``. The drift is fed by
the time sync collaborator (``otpkit.timesync``) and read by the generator.
Writers are serialized; readers take a single attribute load, so they always
see a whole value.
"""

import threading
from typing import Optional, Union


class DriftState:
    """
    Signed clock offset in seconds (server time - local time).

    Args:
        offset: Initial offset in seconds (default: 0)

    Example:
        >>> drift = DriftState()
        >>> drift.set(-2.5)
        >>> drift.offset
        -2.5
    """

    def __init__(self, offset: float = 0.0):
        self._offset = float(offset)
        self._lock = threading.Lock()

    @property
    def offset(self) -> float:
        """Current offset in seconds."""
        return self._offset

    def set(self, offset: float) -> None:
        """Replace the offset."""
        value = float(offset)
        with self._lock:
            self._offset = value

    def reset(self) -> None:
        """Set the offset back to zero."""
        self.set(0.0)

    def __repr__(self) -> str:
        return f"DriftState(offset={self._offset!r})"


# Process-wide offset used when a call does not pass its own
DEFAULT_DRIFT = DriftState()

Drift = Union[DriftState, float, int]


def resolve_offset(drift: Optional[Drift]) -> float:
    """Offset in seconds for an explicit drift, or the process-wide one."""
    if drift is None:
        return DEFAULT_DRIFT.offset
    if isinstance(drift, DriftState):
        return drift.offset
    return float(drift)
