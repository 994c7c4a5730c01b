"""Tests for otpkit CLI."""

import pytest
from otpkit.cli import main
from otpkit.uri import from_uri

HOTP_URI = "otpauth://hotp/rfc?secret=GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ&counter=0"
TOTP_URI = "otpauth://totp/rfc?secret=GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


class TestCLI:
    """Test command-line interface."""

    def test_no_command(self, capsys):
        """Prints help and succeeds."""
        assert main([]) == 0
        assert "otpkit" in capsys.readouterr().out

    def test_new(self, capsys):
        """new prints a secret and a parseable URI."""
        assert main(["new", "--account", "alice", "--issuer", "Example"]) == 0
        out = capsys.readouterr().out
        uri = next(line for line in out.splitlines() if line.startswith("Key URI:"))
        key = from_uri(uri.split(": ", 1)[1])
        assert key.account == "alice"
        assert key.issuer == "Example"
        assert len(key.secret) == 32

    def test_uri(self, capsys):
        """uri builds the URI from flags."""
        assert main([
            "uri", "--account", "bob", "--secret", "JBSWY3DPEHPK3PXP",
            "--hotp", "--counter", "3", "--digits", "8",
        ]) == 0
        assert capsys.readouterr().out.strip() == (
            "otpauth://hotp/bob?secret=JBSWY3DPEHPK3PXP&digits=8&counter=3"
        )

    def test_code(self, capsys):
        """code prints the HOTP code for the URI counter."""
        assert main(["code", HOTP_URI]) == 0
        assert capsys.readouterr().out.strip() == "755224"

    def test_check(self, capsys):
        """check exits 0 for valid and 1 for invalid codes."""
        assert main(["check", HOTP_URI, "755224"]) == 0
        assert main(["check", HOTP_URI, "287082"]) == 1
        assert main(["check", HOTP_URI, "287082", "--window", "1"]) == 0

    def test_remaining(self, capsys):
        """remaining prints seconds for TOTP."""
        assert main(["remaining", TOTP_URI]) == 0
        assert 0 < int(capsys.readouterr().out.strip()) <= 30

    def test_remaining_hotp(self, capsys):
        """remaining fails for HOTP."""
        assert main(["remaining", HOTP_URI]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_invalid_uri(self, capsys):
        """Parse errors are reported, not raised."""
        assert main(["code", "otpauth://totp/Foo?counter=5"]) == 1
        assert "Invalid uri:counter" in capsys.readouterr().err

    def test_sync_failure(self, capsys, monkeypatch):
        """sync reports failures with exit code 1."""
        import otpkit.cli as cli

        monkeypatch.setattr(cli, "sync_time", lambda url=None, timeout=None: False)
        assert main(["sync", "--url", "http://time.test"]) == 1
        assert "Time sync failed" in capsys.readouterr().err

    def test_qr_svg(self, tmp_path):
        """qr writes an SVG file."""
        pytest.importorskip("qrcode")
        out = tmp_path / "key.svg"
        assert main(["qr", TOTP_URI, "-o", str(out)]) == 0
        assert "<svg" in out.read_text(encoding="utf-8")

    def test_check_negative_window(self, capsys):
        """A negative window is a usage error, not a crash."""
        with pytest.raises(SystemExit) as exc:
            main(["check", HOTP_URI, "755224", "--window", "-1"])
        assert exc.value.code == 2
        assert "non-negative" in capsys.readouterr().err

    def test_sync_bad_url(self, capsys):
        """A URL without a scheme is reported, not raised."""
        assert main(["sync", "--url", "www.google.com"]) == 1
        assert "Time sync failed" in capsys.readouterr().err
