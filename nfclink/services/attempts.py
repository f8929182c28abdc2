# nfclink/services/attempts.py
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from nfclink.models.login_attempt import LoginAttempt
from nfclink.services.context import ClientInfo


async def count_recent_failures(db: AsyncSession, ip_address: str, since: datetime) -> int:
    """Failed attempts from `ip_address` created at or after `since`."""
    result = await db.execute(
        select(func.count(LoginAttempt.id)).where(
            LoginAttempt.ip_address == ip_address,
            LoginAttempt.success == False,
            LoginAttempt.created_at >= since,
        )
    )
    return result.scalar_one()


def build_attempt(
    email: str,
    client: ClientInfo,
    *,
    success: bool,
    user_id: Optional[int] = None,
    blocked: bool = False,
    twofa_failed: bool = False,
    created_at: Optional[datetime] = None,
) -> LoginAttempt:
    attempt = LoginAttempt(
        email=email,
        ip_address=client.ip_address,
        user_agent=client.user_agent,
        user_id=user_id,
        success=success,
        blocked=blocked,
        twofa_failed=twofa_failed,
    )
    if created_at is not None:
        attempt.created_at = created_at
    return attempt
