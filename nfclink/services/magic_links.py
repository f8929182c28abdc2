# nfclink/services/magic_links.py
"""
Magic-link issuance and redemption.

Redemption marks the link used with one conditional UPDATE
(token matches, used is false, not expired). Of two concurrent
redemptions of the same token only one can change the row.
"""
import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from nfclink.core.config import settings
from nfclink.db.base import utcnow
from nfclink.models.magic_link import MagicLink
from nfclink.models.user import User
from nfclink.security import tokens
from nfclink.services import audit
from nfclink.services.attempts import build_attempt
from nfclink.services.context import ClientInfo

logger = logging.getLogger(__name__)


def deliver_magic_link(user: User, url: str) -> None:
    """
    Hand the link to the user out of band.

    No mail transport is wired up; the delivery is logged. The URL itself
    is only written to the log outside production.
    """
    if settings.is_production:
        logger.info("Magic link issued for user_id=%s", user.id)
    else:
        logger.info("Magic link for %s: %s", user.email, url)


async def issue_magic_link(db: AsyncSession, email: str, client: ClientInfo) -> Optional[str]:
    """
    Mint a link for the account registered under `email`.

    Returns the link URL, or None when no account matches.
    """
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalars().first()
    if not user:
        logger.info("Magic link requested for unknown email from %s", client.ip_address)
        return None

    issued_at, expires_at = tokens.magic_link_window()
    link = MagicLink(
        user_id=user.id,
        token=tokens.generate_magic_token(),
        used=False,
        expires_at=expires_at,
        created_at=issued_at,
    )
    db.add(link)
    await db.commit()

    url = tokens.build_magic_link_url(link.token)
    deliver_magic_link(user, url)

    await audit.record_audit(
        db,
        action="magic_link_created",
        entity="magic_links",
        entity_id=link.id,
        user_id=user.id,
        details={"email": user.email},
        client=client,
    )
    return url


async def redeem_magic_link(db: AsyncSession, token: str, client: ClientInfo) -> Optional[User]:
    """
    Redeem `token` once.

    Returns the account's user, or None when the token is unknown,
    already used or expired.
    """
    now = utcnow()
    result = await db.execute(
        update(MagicLink)
        .where(
            MagicLink.token == token,
            MagicLink.used == False,
            MagicLink.expires_at > now,
        )
        .values(used=True)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await db.rollback()
        return None

    link_result = await db.execute(
        select(MagicLink).options(selectinload(MagicLink.user)).where(MagicLink.token == token)
    )
    user = link_result.scalars().one().user

    db.add(build_attempt(user.email, client, success=True, user_id=user.id, created_at=now))
    await db.commit()

    await audit.record_audit(
        db,
        action="magic_link_login",
        entity="users",
        entity_id=user.id,
        user_id=user.id,
        client=client,
    )
    return user
