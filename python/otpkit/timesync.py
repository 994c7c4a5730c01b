"""
Clock synchronization against an HTTP server's ``Date`` header.

If the local clock is off, TOTP codes will not match the authenticator app.
``sync_time`` asks a well-known server for its time and stores the
difference in the drift state. A failed sync keeps the last good offset.

Usage:
    from otpkit.timesync import sync_time

    if not sync_time():
        print("Time sync failed, using local clock")
"""

import logging
import time
from email.utils import parsedate_to_datetime
from http.client import HTTPException
from typing import Optional
from urllib.error import URLError
from urllib.request import Request, urlopen

from otpkit.drift import DEFAULT_DRIFT, DriftState
from otpkit.errors import TimeSyncError

logger = logging.getLogger(__name__)

DEFAULT_TIME_URL = "https://www.google.com"
DEFAULT_SYNC_TIMEOUT = 5.0


def fetch_clock_offset(
    url: str = DEFAULT_TIME_URL,
    timeout: float = DEFAULT_SYNC_TIMEOUT,
) -> float:
    """
    Measure the offset between a server clock and the local clock.

    Args:
        url: Server to query
        timeout: Socket timeout in seconds

    Returns:
        Server time minus local time, in seconds

    Raises:
        TimeSyncError: Bad URL, request failed, non-200 status, or no usable Date header
    """
    try:
        request = Request(url, method="GET")
        request.add_header("Cache-Control", "no-cache")

        started = time.time()
        with urlopen(request, timeout=timeout) as response:
            finished = time.time()
            status = getattr(response, "status", 200)
            header = response.headers.get("Date")
    except (URLError, OSError, HTTPException, ValueError) as e:
        raise TimeSyncError(f"Failed to reach time server {url}: {e}")

    if status != 200:
        raise TimeSyncError(f"Time server {url} answered {status}")
    if not header:
        raise TimeSyncError(f"Time server {url} sent no Date header")

    try:
        server_time = parsedate_to_datetime(header).timestamp()
    except (TypeError, ValueError) as e:
        raise TimeSyncError(f"Unparseable Date header {header!r}: {e}")

    # Compare against the middle of the round trip
    local_time = (started + finished) / 2
    return server_time - local_time


def sync_time(
    drift: Optional[DriftState] = None,
    url: str = DEFAULT_TIME_URL,
    timeout: float = DEFAULT_SYNC_TIMEOUT,
) -> bool:
    """
    Update the drift state from a time server.

    Args:
        drift: State to update (default: process-wide drift)
        url: Server to query
        timeout: Socket timeout in seconds

    Returns:
        True if the offset was updated, False if the sync failed
    """
    if drift is None:
        drift = DEFAULT_DRIFT

    try:
        offset = fetch_clock_offset(url, timeout)
    except TimeSyncError as e:
        logger.warning("Time sync failed, keeping offset %.3fs: %s", drift.offset, e)
        return False

    drift.set(offset)
    logger.info("Clock offset set to %.3fs from %s", offset, url)
    return True
