# nfclink/services/trusted_devices.py
"""
Trusted-device registration and validation.

Validation is a single conditional UPDATE (match + not expired), so the
expiry check and the last_used_at refresh cannot be split by another
request.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from nfclink.db.base import utcnow
from nfclink.models.trusted_device import TrustedDevice
from nfclink.security import tokens
from nfclink.services.context import ClientInfo


async def register_device(
    db: AsyncSession,
    user_id: int,
    client: ClientInfo,
    device_name: Optional[str] = None,
    remember_days: Optional[int] = None,
) -> TrustedDevice:
    now = utcnow()
    device = TrustedDevice(
        user_id=user_id,
        device_id=tokens.generate_device_id(),
        device_name=device_name or client.user_agent,
        ip_address=client.ip_address,
        expires_at=tokens.device_expiry(remember_days, now),
        last_used_at=now,
        created_at=now,
    )
    db.add(device)
    await db.commit()
    return device


async def list_devices(db: AsyncSession, user_id: int) -> List[TrustedDevice]:
    result = await db.execute(
        select(TrustedDevice)
        .where(TrustedDevice.user_id == user_id)
        .order_by(TrustedDevice.last_used_at.desc())
    )
    return list(result.scalars().all())


async def is_device_trusted(
    db: AsyncSession, user_id: int, device_id: str, now: Optional[datetime] = None
) -> bool:
    """Read-only check, used by the login flow before credentials are known to be good."""
    result = await db.execute(
        select(TrustedDevice.id).where(
            TrustedDevice.user_id == user_id,
            TrustedDevice.device_id == device_id,
            TrustedDevice.expires_at > (now or utcnow()),
        )
    )
    return result.first() is not None


async def touch_device(
    db: AsyncSession, user_id: int, device_id: str, now: Optional[datetime] = None
) -> bool:
    """
    Refresh last_used_at of a matching, unexpired device.

    Does not commit. Returns False when no such device exists.
    """
    now = now or utcnow()
    result = await db.execute(
        update(TrustedDevice)
        .where(
            TrustedDevice.user_id == user_id,
            TrustedDevice.device_id == device_id,
            TrustedDevice.expires_at > now,
        )
        .values(last_used_at=now)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def validate_device(db: AsyncSession, user_id: int, device_id: str) -> bool:
    valid = await touch_device(db, user_id, device_id)
    await db.commit()
    return valid


async def remove_device(db: AsyncSession, user_id: int, device_id: str) -> bool:
    result = await db.execute(
        delete(TrustedDevice)
        .where(
            TrustedDevice.user_id == user_id,
            TrustedDevice.device_id == device_id,
        )
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount > 0
