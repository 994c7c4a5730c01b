"""
FastAPI Integration for otpkit

Provides a dependency that requires a valid one-time code on an endpoint,
and a router with enrollment/verification endpoints.

Usage:
    from fastapi import Depends, FastAPI
    from otpkit.integrations.fastapi import OTPHeaderAuth, OTPRouter

    app = FastAPI()

    def load_key(account: str):
        return keys.get(account)  # caller-owned storage

    auth = OTPHeaderAuth(lambda request: load_key(request.headers["X-User"]))

    @app.post("/transfer")
    async def transfer(key=Depends(auth)):
        return {"account": key.account}

    app.include_router(
        OTPRouter(load_key, on_enroll=lambda key: keys.__setitem__(key.account, key)).router
    )
"""

import logging
from typing import Callable, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from otpkit.errors import OTPError
from otpkit.key import DEFAULT_DIGITS, DEFAULT_PERIOD, Algorithm, AuthType, OtpKey
from otpkit.uri import DEFAULT_SECRET_LENGTH, generate_random_secret, to_uri
from otpkit.validator import DEFAULT_WINDOW, check

logger = logging.getLogger(__name__)

DEFAULT_HEADER = "X-OTP"


class EnrollRequest(BaseModel):
    """Request to enroll a new authenticator"""

    account: str = Field(..., min_length=1, max_length=255)
    issuer: Optional[str] = Field(None, max_length=255)
    auth_type: AuthType = AuthType.TOTP
    algorithm: Algorithm = Algorithm.SHA1
    digits: int = Field(DEFAULT_DIGITS, ge=1, le=9)
    period: int = Field(DEFAULT_PERIOD, ge=1)


class EnrollResponse(BaseModel):
    """New secret and its key URI"""

    account: str
    secret: str
    uri: str


class VerifyRequest(BaseModel):
    """Request to verify a one-time code"""

    account: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=1, max_length=9)
    window: int = Field(DEFAULT_WINDOW, ge=0, le=10)


class VerifyResponse(BaseModel):
    """Verification outcome"""

    account: str
    valid: bool


class OTPHeaderAuth:
    """
    FastAPI dependency requiring a one-time code in a request header.

    Args:
        key_loader: Returns the key for a request, or None
        header_name: Header carrying the code (default: X-OTP)
        window: Sliding window passed to ``check``

    Usage:
        auth = OTPHeaderAuth(lambda request: keys.get(request.headers["X-User"]))

        @app.get("/protected")
        async def protected(key=Depends(auth)):
            return {"account": key.account}
    """

    def __init__(
        self,
        key_loader: Callable[[Request], Optional[OtpKey]],
        header_name: str = DEFAULT_HEADER,
        window: int = DEFAULT_WINDOW,
    ):
        self.key_loader = key_loader
        self.header_name = header_name
        self.window = window

    async def __call__(self, request: Request) -> OtpKey:
        """FastAPI dependency for one-time code authentication."""
        code = request.headers.get(self.header_name)
        if not code:
            raise HTTPException(
                status_code=401,
                detail=f"Missing {self.header_name} header",
            )

        key = self.key_loader(request)
        if key is None:
            raise HTTPException(status_code=401, detail="No one-time password enrolled")

        if not check(key, code, self.window):
            logger.info("Rejected one-time code for %s", key.account)
            raise HTTPException(status_code=401, detail="Invalid one-time code")

        return key


class OTPRouter:
    """
    FastAPI router for enrollment and verification endpoints.

    Keys are never stored here: ``on_enroll`` receives each new key and
    ``key_loader`` fetches one back by account.

    Args:
        key_loader: Returns the key for an account, or None
        on_enroll: Called with every newly created key
        on_verified: Called with the key after a successful verification
        secret_length: Base32 characters in generated secrets
        prefix: Route prefix (default: /otp)
    """

    def __init__(
        self,
        key_loader: Callable[[str], Optional[OtpKey]],
        on_enroll: Optional[Callable[[OtpKey], None]] = None,
        on_verified: Optional[Callable[[OtpKey], None]] = None,
        secret_length: int = DEFAULT_SECRET_LENGTH,
        prefix: str = "/otp",
    ):
        self.key_loader = key_loader
        self.on_enroll = on_enroll
        self.on_verified = on_verified
        self.secret_length = secret_length

        self.router = APIRouter(prefix=prefix, tags=["otp"])
        self._setup_routes()

    def _setup_routes(self) -> None:
        """Set up API routes"""

        @self.router.post("/enroll", response_model=EnrollResponse)
        async def enroll(request: EnrollRequest) -> EnrollResponse:
            """Create a key with a fresh random secret"""
            try:
                key = OtpKey(
                    account=request.account,
                    secret=generate_random_secret(self.secret_length),
                    auth_type=request.auth_type,
                    issuer=request.issuer,
                    algorithm=request.algorithm,
                    digits=request.digits,
                    period=request.period,
                )
            except OTPError as e:
                raise HTTPException(status_code=400, detail=e.message)

            if self.on_enroll is not None:
                self.on_enroll(key)

            return EnrollResponse(account=key.account, secret=key.secret, uri=to_uri(key))

        @self.router.post("/verify", response_model=VerifyResponse)
        async def verify(request: VerifyRequest) -> VerifyResponse:
            """Check a one-time code for an enrolled account"""
            key = self.key_loader(request.account)
            if key is None:
                raise HTTPException(status_code=404, detail="Account not enrolled")

            valid = check(key, request.code, request.window)
            if valid and self.on_verified is not None:
                self.on_verified(key)

            return VerifyResponse(account=request.account, valid=valid)
