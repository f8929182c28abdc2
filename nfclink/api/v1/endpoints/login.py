# nfclink/api/v1/endpoints/login.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from nfclink.api.deps import get_client_info, get_db
from nfclink.schemas.common import ErrorResponse
from nfclink.schemas.login import (
    LoginRequest,
    LoginSuccessResponse,
    LoginTwoFactorResponse,
    RateLimitedResponse,
)
from nfclink.schemas.user import UserPublic
from nfclink.services import login as login_service
from nfclink.services.context import ClientInfo

router = APIRouter()

# Unknown email and wrong password share one message so responses
# do not reveal which accounts exist
INVALID_CREDENTIALS = "Invalid email or password"
INVALID_CODE = "Invalid verification code"
RATE_LIMITED = "Too many failed login attempts. Try again later."


@router.post(
    "",
    response_model=None,
    responses={
        200: {"model": LoginSuccessResponse, "description": "Logged in, or second factor required"},
        401: {"model": ErrorResponse},
        429: {"model": RateLimitedResponse},
    },
)
async def login(
    login_in: LoginRequest,
    db: AsyncSession = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    outcome = await login_service.authenticate(
        db,
        email=login_in.email,
        password=login_in.password,
        client=client,
        otp_token=login_in.otp_token,
        recovery_code=login_in.recovery_code,
        device_id=login_in.device_id,
    )

    if isinstance(outcome, login_service.Success):
        return LoginSuccessResponse(
            user=UserPublic.model_validate(outcome.user),
            two_factor_enabled=outcome.two_factor_enabled,
        )

    if isinstance(outcome, login_service.NeedsSecondFactor):
        return LoginTwoFactorResponse(user=UserPublic.model_validate(outcome.user))

    if isinstance(outcome, login_service.RateLimited):
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content=RateLimitedResponse(error=RATE_LIMITED).model_dump(by_alias=True),
        )

    if isinstance(outcome, login_service.BadSecondFactor):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CODE)

    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)
