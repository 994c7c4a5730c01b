"""
Flask Integration for otpkit

Provides an extension and a decorator that require a valid one-time code
on Flask routes.

Usage:
    from flask import Flask, g
    from otpkit.integrations.flask import OTPFlask, otp_required

    app = Flask(__name__)
    otp = OTPFlask(app)

    def current_key():
        return load_key_for(session["user_id"])  # caller-owned storage

    @app.route("/transfer", methods=["POST"])
    @otp_required(current_key)
    def transfer():
        return {"account": g.otp_key.account}

Configuration (``app.config``):
    OTP_WINDOW: Sliding window passed to ``check`` (default: 0)
    OTP_HEADER: Request header carrying the code (default: ``X-OTP``)
    OTP_SYNC_TIME: Sync the clock offset when the extension starts (default: False)
"""

from __future__ import annotations

import functools
import logging
from typing import Callable, Optional

from flask import Flask, abort, current_app, g, request

from otpkit.key import OtpKey
from otpkit.timesync import sync_time
from otpkit.validator import DEFAULT_WINDOW, check

logger = logging.getLogger(__name__)

DEFAULT_HEADER = "X-OTP"

KeyLoader = Callable[[], Optional[OtpKey]]


class OTPFlask:
    """
    Flask extension holding otpkit settings.

    Args:
        app: Flask application (optional, can use init_app later)
        window: Default sliding window (overrides ``OTP_WINDOW``)
        header_name: Header carrying the code (overrides ``OTP_HEADER``)

    Usage:
        otp = OTPFlask()
        otp.init_app(app)
    """

    def __init__(
        self,
        app: Optional[Flask] = None,
        window: Optional[int] = None,
        header_name: Optional[str] = None,
    ):
        self.window = window
        self.header_name = header_name

        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Initialize the extension with a Flask app."""
        app.extensions = getattr(app, "extensions", {})
        app.extensions["otpkit"] = self

        app.config.setdefault("OTP_WINDOW", DEFAULT_WINDOW)
        app.config.setdefault("OTP_HEADER", DEFAULT_HEADER)
        app.config.setdefault("OTP_SYNC_TIME", False)

        if self.window is None:
            self.window = app.config["OTP_WINDOW"]
        if self.header_name is None:
            self.header_name = app.config["OTP_HEADER"]

        if app.config["OTP_SYNC_TIME"]:
            sync_time()

    def check(self, key: OtpKey, code: str) -> bool:
        """Check a code with the configured window."""
        return check(key, code, self.window)


def _setting(attr: str, config_name: str, explicit, default):
    """Explicit argument, then extension attribute, then app config."""
    if explicit is not None:
        return explicit
    ext = current_app.extensions.get("otpkit")
    if ext is not None and getattr(ext, attr) is not None:
        return getattr(ext, attr)
    return current_app.config.get(config_name, default)


def otp_required(
    key_loader: KeyLoader,
    header_name: Optional[str] = None,
    window: Optional[int] = None,
):
    """
    Decorator to require a valid one-time code on a Flask route.

    Args:
        key_loader: Returns the key for the current request, or None
        header_name: Header carrying the code (default: app config)
        window: Sliding window (default: app config)

    Usage:
        @app.route("/protected")
        @otp_required(lambda: keys.get(session["user"]))
        def protected():
            return {"account": g.otp_key.account}
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            name = _setting("header_name", "OTP_HEADER", header_name, DEFAULT_HEADER)
            code = request.headers.get(name)
            if not code:
                abort(401, description=f"Missing {name} header")

            key = key_loader()
            if key is None:
                abort(401, description="No one-time password enrolled")

            if not check(key, code, _setting("window", "OTP_WINDOW", window, DEFAULT_WINDOW)):
                logger.info("Rejected one-time code for %s", key.account)
                abort(401, description="Invalid one-time code")

            g.otp_key = key
            return func(*args, **kwargs)

        return wrapper
    return decorator
