# nfclink/services/two_factor.py
"""
Second-factor enrollment, confirmation and recovery-code redemption.

Flow:
1. enroll()   - new secret + recovery codes stored with is_enabled=False
2. confirm()  - first valid TOTP code flips is_enabled to True
3. redeem_recovery_code() - removes one matching code for good
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from nfclink.core.config import settings
from nfclink.models.two_factor import TwoFactorAuth
from nfclink.security import recovery_codes as recovery
from nfclink.security import totp

logger = logging.getLogger(__name__)


async def get_two_factor(db: AsyncSession, user_id: int) -> Optional[TwoFactorAuth]:
    result = await db.execute(select(TwoFactorAuth).where(TwoFactorAuth.user_id == user_id))
    return result.scalars().first()


async def enroll(db: AsyncSession, user_id: int, account: str) -> Tuple[TwoFactorAuth, str]:
    """
    Create (or replace) the user's enrollment.

    Re-enrolling discards the previous secret and codes and disables the
    second factor until the new secret is confirmed.

    Returns:
        (record, QR code data URL)
    """
    secret = totp.generate_totp_secret()
    codes = recovery.generate_recovery_codes(settings.RECOVERY_CODE_COUNT)
    qr_code = totp.generate_qr_code_data_url(totp.get_totp_uri(secret, account))

    record = await get_two_factor(db, user_id)
    if record:
        record.secret = secret
        record.recovery_codes = codes
        record.is_enabled = False
    else:
        record = TwoFactorAuth(
            user_id=user_id,
            secret=secret,
            recovery_codes=codes,
            is_enabled=False,
        )
    db.add(record)
    await db.commit()

    return record, qr_code


async def confirm(db: AsyncSession, record: TwoFactorAuth, token: str) -> bool:
    if not totp.verify_totp(record.secret, token):
        logger.info("2FA confirmation failed for user_id=%s", record.user_id)
        return False

    if not record.is_enabled:
        record.is_enabled = True
        db.add(record)
        await db.commit()
    return True


def consume_code(record: TwoFactorAuth, index: int) -> List[str]:
    """Drop the code at `index`; the caller commits."""
    record.recovery_codes = recovery.without_code(record.recovery_codes or [], index)
    return record.recovery_codes


async def redeem_recovery_code(db: AsyncSession, record: TwoFactorAuth, code: str) -> bool:
    """
    Remove `code` from the record's recovery codes.

    Returns False when the code is unknown, or when the codes changed since
    `record` was read (another request may have spent the same code).
    """
    index = recovery.find_recovery_code(record.recovery_codes or [], code)
    if index is None:
        return False

    user_id = record.user_id
    consume_code(record, index)
    db.add(record)
    try:
        await db.commit()
    except StaleDataError:
        await db.rollback()
        logger.info("Recovery codes changed concurrently for user_id=%s", user_id)
        return False
    return True
