# nfclink/api/v1/endpoints/two_factor.py
"""
API endpoints for TOTP second factor.

Endpoints:
- POST  /2fa - Enroll: secret, QR code and recovery codes (not yet enabled)
- PUT   /2fa - Confirm enrollment with a code from the authenticator app
- PATCH /2fa - Redeem a single-use recovery code
- GET   /2fa - Enrollment status

The secret only leaves the server inside the QR code.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from nfclink.api.deps import get_client_info, get_db
from nfclink.models.user import User
from nfclink.schemas.common import SuccessResponse
from nfclink.schemas.two_factor import (
    RecoveryCodeRequest,
    RecoveryCodeResponse,
    TwoFactorSetupRequest,
    TwoFactorSetupResponse,
    TwoFactorStatusResponse,
    TwoFactorVerifyRequest,
)
from nfclink.services import audit
from nfclink.services import two_factor as two_factor_service
from nfclink.services.context import ClientInfo

router = APIRouter()

NOT_ENROLLED = "Two-factor authentication is not set up for this user"


@router.post("", response_model=TwoFactorSetupResponse)
async def setup_two_factor(
    request: TwoFactorSetupRequest,
    db: AsyncSession = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    """
    Start (or restart) second-factor enrollment.

    The returned recovery codes are shown once; store them somewhere safe.
    The second factor stays disabled until confirmed with PUT.
    """
    user = await db.get(User, request.user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    record, qr_code = await two_factor_service.enroll(db, user.id, request.email)

    await audit.record_audit(
        db,
        action="2fa_setup",
        entity="user_2fa",
        entity_id=record.id,
        user_id=user.id,
        client=client,
    )

    return TwoFactorSetupResponse(qr_code=qr_code, recovery_codes=list(record.recovery_codes))


@router.put("", response_model=SuccessResponse)
async def verify_two_factor(
    request: TwoFactorVerifyRequest,
    db: AsyncSession = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    record = await two_factor_service.get_two_factor(db, request.user_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_ENROLLED)

    was_enabled = record.is_enabled
    if not await two_factor_service.confirm(db, record, request.token):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid code")

    if not was_enabled:
        await audit.record_audit(
            db,
            action="2fa_enabled",
            entity="user_2fa",
            entity_id=record.id,
            user_id=record.user_id,
            client=client,
        )
    return SuccessResponse()


@router.patch("", response_model=RecoveryCodeResponse)
async def use_recovery_code(
    request: RecoveryCodeRequest,
    db: AsyncSession = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    record = await two_factor_service.get_two_factor(db, request.user_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_ENROLLED)

    if not await two_factor_service.redeem_recovery_code(db, record, request.recovery_code):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid recovery code")

    remaining = len(record.recovery_codes)
    await audit.record_audit(
        db,
        action="recovery_code_used",
        entity="user_2fa",
        entity_id=record.id,
        user_id=record.user_id,
        details={"remaining": remaining},
        client=client,
    )
    return RecoveryCodeResponse(remaining_codes=remaining)


@router.get("", response_model=TwoFactorStatusResponse)
async def get_two_factor_status(
    user_id: int = Query(..., alias="userId"),
    db: AsyncSession = Depends(get_db),
):
    record = await two_factor_service.get_two_factor(db, user_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_ENROLLED)

    return TwoFactorStatusResponse(
        enabled=record.is_enabled,
        remaining_codes=len(record.recovery_codes or []),
    )
