"""Tests for otpkit QR rendering."""

import pytest

pytest.importorskip("qrcode")

from otpkit.key import OtpKey
from otpkit.qr import render_png, render_svg

URI = "otpauth://totp/Example%3Aalice?secret=JBSWY3DPEHPK3PXP&issuer=Example"


class TestQR:
    """Test QR rendering."""

    def test_svg_from_uri(self):
        """SVG text for a URI string."""
        svg = render_svg(URI)
        assert "<svg" in svg
        assert "path" in svg

    def test_svg_from_key(self):
        """Keys are serialized before rendering."""
        key = OtpKey.from_uri(URI)
        assert render_svg(key) == render_svg(URI)

    def test_png(self):
        """PNG bytes start with the PNG signature."""
        pytest.importorskip("PIL")
        png = render_png(URI)
        assert png.startswith(b"\x89PNG\r\n\x1a\n")
