# nfclink/schemas/login.py
from typing import Optional

from pydantic import Field

from nfclink.schemas.common import RequestModel, ResponseModel
from nfclink.schemas.user import UserPublic


class LoginRequest(RequestModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)
    otp_token: Optional[str] = Field(None, alias="otpToken", max_length=16)
    recovery_code: Optional[str] = Field(None, alias="recoveryCode", max_length=32)
    # A trusted device skips the second factor
    device_id: Optional[str] = Field(None, alias="deviceId", max_length=64)


class LoginSuccessResponse(ResponseModel):
    success: bool = True
    user: UserPublic
    two_factor_enabled: bool = Field(..., alias="twoFactorEnabled")


class LoginTwoFactorResponse(ResponseModel):
    requires_2fa: bool = Field(True, alias="requires2FA")
    user: UserPublic


class RateLimitedResponse(ResponseModel):
    error: str
    rate_limited: bool = Field(True, alias="rateLimited")
