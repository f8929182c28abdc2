# nfclink/services/audit.py
"""
Audit trail writes.

An audit entry is written in its own short-lived session after the
primary write has been committed. If it fails the failure is logged and
dropped; the primary operation and its session are unaffected.
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from nfclink.models.audit_log import AuditLog
from nfclink.services.context import ClientInfo

logger = logging.getLogger(__name__)


async def record_audit(
    db: AsyncSession,
    *,
    action: str,
    entity: str,
    client: ClientInfo,
    user_id: Optional[int] = None,
    entity_id: Optional[Any] = None,
    details: Optional[Dict[str, Any]] = None,
) -> bool:
    entry = AuditLog(
        user_id=user_id,
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        details=details,
        ip_address=client.ip_address,
        user_agent=client.user_agent,
    )
    async with AsyncSession(db.bind, expire_on_commit=False) as audit_db:
        audit_db.add(entry)
        try:
            await audit_db.commit()
        except SQLAlchemyError:
            logger.exception("Audit write failed: action=%s entity=%s user_id=%s", action, entity, user_id)
            return False
    return True
