# nfclink/schemas/two_factor.py
"""
Schemas for second-factor enrollment, confirmation and recovery codes.

The TOTP secret itself is only ever returned inside the QR code.
"""
from typing import List

from pydantic import Field

from nfclink.schemas.common import RequestModel, ResponseModel


class TwoFactorSetupRequest(RequestModel):
    user_id: int = Field(..., alias="userId")
    # Shown as the account name in the authenticator app
    email: str = Field(..., min_length=1, max_length=255)


class TwoFactorSetupResponse(ResponseModel):
    success: bool = True
    qr_code: str = Field(..., alias="qrCode", description="data:image/png;base64 URL")
    recovery_codes: List[str] = Field(..., alias="recoveryCodes")


class TwoFactorVerifyRequest(RequestModel):
    user_id: int = Field(..., alias="userId")
    token: str = Field(..., min_length=1, max_length=16)


class RecoveryCodeRequest(RequestModel):
    user_id: int = Field(..., alias="userId")
    recovery_code: str = Field(..., alias="recoveryCode", min_length=1, max_length=32)


class RecoveryCodeResponse(ResponseModel):
    success: bool = True
    remaining_codes: int = Field(..., alias="remainingCodes")


class TwoFactorStatusResponse(ResponseModel):
    enabled: bool
    remaining_codes: int = Field(..., alias="remainingCodes")
