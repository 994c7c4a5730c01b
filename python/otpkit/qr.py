"""
QR code rendering for key URIs.

Authenticator apps enroll by scanning the key URI as a QR code. SVG output
needs only ``qrcode``; PNG output also needs Pillow (``pip install otpkit[qr]``).

Usage:
    from otpkit.qr import render_svg

    svg = render_svg(key)  # or render_svg(key.to_uri())
"""

import io
from typing import Union

import qrcode
import qrcode.image.svg

from otpkit.key import OtpKey


def _uri(source: Union[OtpKey, str]) -> str:
    if isinstance(source, OtpKey):
        return source.to_uri()
    return source


def render_svg(source: Union[OtpKey, str]) -> str:
    """
    Render a key URI as SVG.

    Args:
        source: Key or finished key URI

    Returns:
        SVG document text
    """
    img = qrcode.make(_uri(source), image_factory=qrcode.image.svg.SvgPathImage)
    buf = io.BytesIO()
    img.save(buf)
    return buf.getvalue().decode("utf-8")


def render_png(source: Union[OtpKey, str], box_size: int = 10, border: int = 4) -> bytes:
    """
    Render a key URI as PNG.

    Args:
        source: Key or finished key URI
        box_size: Pixels per module
        border: Quiet zone width in modules

    Returns:
        PNG image bytes
    """
    qr = qrcode.QRCode(box_size=box_size, border=border)
    qr.add_data(_uri(source))
    qr.make(fit=True)
    img = qr.make_image()
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
