# nfclink/schemas/card.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from nfclink.schemas.user import UserSummary


class CardCreate(BaseModel):
    uid: str = Field(..., min_length=1, max_length=64)
    link: str = Field(..., min_length=1, max_length=2048)
    user_id: int


class CardDelete(BaseModel):
    id: int


class CardResponse(BaseModel):
    id: int
    uid: str
    link: str
    user_id: int
    created_at: datetime
    user: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)
