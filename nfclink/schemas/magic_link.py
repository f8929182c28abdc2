# nfclink/schemas/magic_link.py
from typing import Optional

from pydantic import Field

from nfclink.schemas.common import RequestModel, ResponseModel
from nfclink.schemas.user import UserPublic


class MagicLinkRequest(RequestModel):
    email: str = Field(..., min_length=1, max_length=255)


class MagicLinkResponse(ResponseModel):
    success: bool = True
    # Only populated outside production when RETURN_MAGIC_LINK is on
    magic_link: Optional[str] = Field(None, alias="magicLink")


class MagicLoginResponse(ResponseModel):
    success: bool = True
    user: UserPublic
