# nfclink/schemas/user.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# Registration request
class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


# Public profile, never includes the password hash
class UserPublic(BaseModel):
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class UserListItem(UserPublic):
    created_at: datetime


# Owner details embedded in card and audit-log listings
class UserSummary(BaseModel):
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)
