# nfclink/schemas/trusted_device.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from nfclink.schemas.common import RequestModel, ResponseModel


class TrustedDeviceCreate(RequestModel):
    user_id: int = Field(..., alias="userId")
    device_name: Optional[str] = Field(None, alias="deviceName", max_length=255)
    remember_days: int = Field(30, alias="rememberDays", ge=1, le=365)


class TrustedDeviceCreated(ResponseModel):
    success: bool = True
    device_id: str = Field(..., alias="deviceId")


class TrustedDeviceValidate(RequestModel):
    user_id: int = Field(..., alias="userId")
    device_id: str = Field(..., alias="deviceId", min_length=1, max_length=64)


class TrustedDeviceValidation(BaseModel):
    valid: bool


class TrustedDeviceResponse(BaseModel):
    id: int
    user_id: int
    device_id: str
    device_name: Optional[str]
    ip_address: Optional[str]
    expires_at: datetime
    last_used_at: datetime
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TrustedDeviceList(BaseModel):
    devices: List[TrustedDeviceResponse]
