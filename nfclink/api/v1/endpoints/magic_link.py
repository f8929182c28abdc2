# nfclink/api/v1/endpoints/magic_link.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from nfclink.api.deps import get_client_info, get_db
from nfclink.core.config import settings
from nfclink.schemas.magic_link import MagicLinkRequest, MagicLinkResponse, MagicLoginResponse
from nfclink.schemas.user import UserPublic
from nfclink.services import magic_links
from nfclink.services.context import ClientInfo

router = APIRouter()


@router.post("", response_model=MagicLinkResponse, response_model_exclude_none=True)
async def request_magic_link(
    request: MagicLinkRequest,
    db: AsyncSession = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    """
    Send a one-hour, single-use login link to the account's owner.

    The answer is the same whether or not the email is registered.
    """
    url = await magic_links.issue_magic_link(db, request.email, client)

    if url and settings.expose_magic_link:
        return MagicLinkResponse(magic_link=url)
    return MagicLinkResponse()


@router.get("", response_model=MagicLoginResponse)
async def redeem_magic_link(
    token: str = Query(..., min_length=1, max_length=128),
    db: AsyncSession = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    user = await magic_links.redeem_magic_link(db, token, client)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    return MagicLoginResponse(user=UserPublic.model_validate(user))
