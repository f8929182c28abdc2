# nfclink/api/v1/endpoints/audit_logs.py
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from nfclink.api.deps import get_client_info, get_db
from nfclink.db.base import as_utc
from nfclink.models.audit_log import AuditLog
from nfclink.schemas.audit_log import AuditLogCreate, AuditLogPage
from nfclink.schemas.common import SuccessResponse
from nfclink.services.context import ClientInfo

router = APIRouter()


@router.get("", response_model=AuditLogPage)
async def read_audit_logs(
    user_id: Optional[int] = Query(None, alias="userId"),
    action: Optional[str] = None,
    entity: Optional[str] = None,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """Audit trail, newest first, with optional filters."""
    filters = []
    if user_id is not None:
        filters.append(AuditLog.user_id == user_id)
    if action:
        filters.append(AuditLog.action == action)
    if entity:
        filters.append(AuditLog.entity == entity)
    if start_date:
        filters.append(AuditLog.created_at >= as_utc(start_date).astimezone(timezone.utc))
    if end_date:
        filters.append(AuditLog.created_at <= as_utc(end_date).astimezone(timezone.utc))

    total_result = await db.execute(select(func.count(AuditLog.id)).where(*filters))
    total = total_result.scalar_one()

    result = await db.execute(
        select(AuditLog)
        .options(selectinload(AuditLog.user))
        .where(*filters)
        .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .offset(offset)
        .limit(limit)
    )

    return {
        "logs": result.scalars().all(),
        "total": total,
        "limit": limit,
        "offset": offset,
    }


@router.post("", response_model=SuccessResponse)
async def create_audit_log(
    entry_in: AuditLogCreate,
    db: AsyncSession = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    db.add(
        AuditLog(
            user_id=entry_in.user_id,
            action=entry_in.action,
            entity=entry_in.entity,
            entity_id=entry_in.entity_id,
            details=entry_in.details,
            ip_address=client.ip_address,
            user_agent=client.user_agent,
        )
    )
    await db.commit()
    return SuccessResponse()
