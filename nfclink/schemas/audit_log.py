# nfclink/schemas/audit_log.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from nfclink.schemas.common import RequestModel
from nfclink.schemas.user import UserSummary


class AuditLogCreate(RequestModel):
    user_id: Optional[int] = Field(None, alias="userId")
    action: str = Field(..., min_length=1, max_length=64)
    entity: str = Field(..., min_length=1, max_length=64)
    entity_id: Optional[str] = Field(None, alias="entityId", max_length=64)
    details: Optional[Dict[str, Any]] = None


class AuditLogResponse(BaseModel):
    id: int
    user_id: Optional[int]
    action: str
    entity: str
    entity_id: Optional[str]
    details: Optional[Dict[str, Any]]
    ip_address: Optional[str]
    user_agent: Optional[str]
    created_at: datetime
    user: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)


class AuditLogPage(BaseModel):
    logs: List[AuditLogResponse]
    total: int
    limit: int
    offset: int
