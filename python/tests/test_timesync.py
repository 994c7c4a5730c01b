"""Tests for otpkit time sync."""

import time
from email.utils import formatdate
from http.client import BadStatusLine
from urllib.error import URLError

import pytest
import otpkit.timesync as timesync
from otpkit.drift import DriftState
from otpkit.errors import TimeSyncError


class FakeResponse:
    """Minimal urlopen response."""

    def __init__(self, status=200, date=None):
        self.status = status
        self.headers = {"Date": date} if date is not None else {}

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def serve(monkeypatch, response=None, error=None):
    calls = []

    def fake_urlopen(request, timeout=None):
        calls.append((request.full_url, timeout))
        if error is not None:
            raise error
        return response

    monkeypatch.setattr(timesync, "urlopen", fake_urlopen)
    return calls


class TestFetchClockOffset:
    """Test fetch_clock_offset."""

    def test_offset_from_date_header(self, monkeypatch):
        """Offset is server time minus local time."""
        serve(monkeypatch, FakeResponse(date=formatdate(time.time() + 120, usegmt=True)))
        offset = timesync.fetch_clock_offset("http://time.test")
        # Date headers have one-second resolution
        assert 118 <= offset <= 121

    def test_passes_timeout(self, monkeypatch):
        """Timeout and URL reach urlopen."""
        calls = serve(monkeypatch, FakeResponse(date=formatdate(usegmt=True)))
        timesync.fetch_clock_offset("http://time.test", timeout=2.5)
        assert calls == [("http://time.test", 2.5)]

    def test_network_error(self, monkeypatch):
        """Unreachable server raises TimeSyncError."""
        serve(monkeypatch, error=URLError("no route"))
        with pytest.raises(TimeSyncError):
            timesync.fetch_clock_offset("http://time.test")

    def test_timeout_error(self, monkeypatch):
        """Socket timeouts raise TimeSyncError."""
        serve(monkeypatch, error=TimeoutError("timed out"))
        with pytest.raises(TimeSyncError):
            timesync.fetch_clock_offset("http://time.test")

    def test_protocol_error(self, monkeypatch):
        """Garbled HTTP responses raise TimeSyncError."""
        serve(monkeypatch, error=BadStatusLine("garbage"))
        with pytest.raises(TimeSyncError):
            timesync.fetch_clock_offset("http://time.test")

    def test_url_without_scheme(self, monkeypatch):
        """A bare host name raises TimeSyncError before any request."""
        calls = serve(monkeypatch, FakeResponse(date=formatdate(usegmt=True)))
        with pytest.raises(TimeSyncError):
            timesync.fetch_clock_offset("www.google.com")
        assert calls == []

    def test_missing_date(self, monkeypatch):
        """No Date header raises TimeSyncError."""
        serve(monkeypatch, FakeResponse())
        with pytest.raises(TimeSyncError):
            timesync.fetch_clock_offset("http://time.test")

    def test_bad_date(self, monkeypatch):
        """Unparseable Date header raises TimeSyncError."""
        serve(monkeypatch, FakeResponse(date="yesterday-ish"))
        with pytest.raises(TimeSyncError):
            timesync.fetch_clock_offset("http://time.test")

    def test_non_200(self, monkeypatch):
        """Non-200 status raises TimeSyncError."""
        serve(monkeypatch, FakeResponse(status=204, date=formatdate(usegmt=True)))
        with pytest.raises(TimeSyncError) as exc:
            timesync.fetch_clock_offset("http://time.test")
        assert exc.value.code == "TIME_SYNC_FAILED"


class TestSyncTime:
    """Test sync_time."""

    def test_success_updates_drift(self, monkeypatch):
        """Successful sync replaces the offset."""
        serve(monkeypatch, FakeResponse(date=formatdate(time.time() - 300, usegmt=True)))
        drift = DriftState()
        assert timesync.sync_time(drift, url="http://time.test")
        assert -302 <= drift.offset <= -298

    def test_failure_keeps_last_offset(self, monkeypatch, caplog):
        """Failed sync leaves the drift alone and logs a warning."""
        serve(monkeypatch, error=URLError("down"))
        drift = DriftState(7.0)
        with caplog.at_level("WARNING", logger="otpkit.timesync"):
            assert not timesync.sync_time(drift, url="http://time.test")
        assert drift.offset == 7.0
        assert "Time sync failed" in caplog.text

    def test_default_drift(self, monkeypatch):
        """Without an argument the process-wide drift is updated."""
        state = DriftState()
        monkeypatch.setattr(timesync, "DEFAULT_DRIFT", state)
        serve(monkeypatch, FakeResponse(date=formatdate(time.time() + 60, usegmt=True)))
        assert timesync.sync_time(url="http://time.test")
        assert 58 <= state.offset <= 61

    @pytest.mark.parametrize(
        "url,error",
        [
            ("www.google.com", None),
            ("http://time.test", BadStatusLine("garbage")),
            ("http://time.test", ConnectionResetError("reset")),
        ],
    )
    def test_any_failure_returns_false(self, monkeypatch, url, error):
        """Bad URLs and protocol errors never escape sync_time."""
        serve(monkeypatch, error=error)
        drift = DriftState(7.0)
        assert timesync.sync_time(drift, url=url) is False
        assert drift.offset == 7.0
