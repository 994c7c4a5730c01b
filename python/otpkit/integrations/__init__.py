"""
otpkit Web Framework Integrations

Require one-time codes on web endpoints.

Supported frameworks:
- FastAPI: OTPHeaderAuth dependency, OTPRouter enrollment/verification routes
- Flask: OTPFlask extension, otp_required decorator

Each framework is imported only when one of its names is used, so installing
one framework is enough.
"""

_EXPORTS = {
    "OTPHeaderAuth": "fastapi",
    "OTPRouter": "fastapi",
    "EnrollRequest": "fastapi",
    "EnrollResponse": "fastapi",
    "VerifyRequest": "fastapi",
    "VerifyResponse": "fastapi",
    "OTPFlask": "flask",
    "otp_required": "flask",
}


def __getattr__(name):
    """Lazy import for framework integrations."""
    if name in _EXPORTS:
        from importlib import import_module
        module = import_module(f"otpkit.integrations.{_EXPORTS[name]}")
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_EXPORTS)
