# nfclink/services/login.py
"""
Password login with rate limiting and an optional second factor.

The decision itself is `evaluate_login`, a pure function of the facts
loaded from the store and the submitted credentials. `gather_login_facts`
and `apply_login_outcome` are the I/O on either side of it.

Gates, in order; the first one that fails decides the outcome:
1. more than LOGIN_MAX_FAILED_ATTEMPTS failures from the source address
   in the last LOGIN_WINDOW_MINUTES          -> RateLimited
2. no user with that exact email             -> UserNotFound
3. bcrypt mismatch                           -> BadPassword
4. 2FA enabled, not on a trusted device:
   no code                                   -> NeedsSecondFactor
   wrong TOTP / unknown recovery code        -> BadSecondFactor
5.                                           -> Success

Every outcome except NeedsSecondFactor writes exactly one login attempt.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from nfclink.db.base import utcnow
from nfclink.models.two_factor import TwoFactorAuth
from nfclink.models.user import User
from nfclink.security import hashing, rate_limit, totp
from nfclink.security.recovery_codes import find_recovery_code
from nfclink.services import audit, trusted_devices
from nfclink.services.attempts import build_attempt, count_recent_failures
from nfclink.services.context import ClientInfo
from nfclink.services.two_factor import consume_code, get_two_factor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginFacts:
    failed_attempts: int
    user: Optional[User] = None
    two_factor: Optional[TwoFactorAuth] = None
    device_trusted: bool = False


@dataclass(frozen=True)
class RateLimited:
    pass


@dataclass(frozen=True)
class UserNotFound:
    pass


@dataclass(frozen=True)
class BadPassword:
    user: User


@dataclass(frozen=True)
class NeedsSecondFactor:
    user: User


@dataclass(frozen=True)
class BadSecondFactor:
    user: User


@dataclass(frozen=True)
class Success:
    user: User
    two_factor_enabled: bool
    # Position of the recovery code that satisfied the second factor
    recovery_code_index: Optional[int] = None
    trusted_device: bool = False

    @property
    def method(self) -> str:
        if self.recovery_code_index is not None:
            return "recovery_code"
        if self.trusted_device:
            return "trusted_device"
        if self.two_factor_enabled:
            return "totp"
        return "password"


LoginOutcome = Union[RateLimited, UserNotFound, BadPassword, NeedsSecondFactor, BadSecondFactor, Success]


def evaluate_login(
    facts: LoginFacts,
    password: str,
    otp_token: Optional[str] = None,
    recovery_code: Optional[str] = None,
) -> LoginOutcome:
    if rate_limit.is_rate_limited(facts.failed_attempts):
        return RateLimited()

    user = facts.user
    if user is None:
        return UserNotFound()

    if not hashing.verify_password(password, user.password_hash):
        return BadPassword(user)

    two_factor = facts.two_factor
    if two_factor is None or not two_factor.is_enabled:
        return Success(user, two_factor_enabled=False)

    if facts.device_trusted:
        return Success(user, two_factor_enabled=True, trusted_device=True)

    if otp_token:
        if totp.verify_totp(two_factor.secret, otp_token):
            return Success(user, two_factor_enabled=True)
        return BadSecondFactor(user)

    if recovery_code:
        index = find_recovery_code(two_factor.recovery_codes or [], recovery_code.strip())
        if index is None:
            return BadSecondFactor(user)
        return Success(user, two_factor_enabled=True, recovery_code_index=index)

    return NeedsSecondFactor(user)


async def gather_login_facts(
    db: AsyncSession,
    email: str,
    client: ClientInfo,
    device_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> LoginFacts:
    """
    Load what `evaluate_login` needs.

    A rate-limited address gets nothing but its failure count; the account
    is not even looked up.
    """
    now = now or utcnow()
    failed = await count_recent_failures(db, client.ip_address, rate_limit.window_start(now))
    if rate_limit.is_rate_limited(failed):
        return LoginFacts(failed_attempts=failed)

    result = await db.execute(select(User).where(User.email == email))
    user = result.scalars().first()
    if user is None:
        return LoginFacts(failed_attempts=failed)

    two_factor = await get_two_factor(db, user.id)
    device_trusted = False
    if device_id and two_factor is not None and two_factor.is_enabled:
        device_trusted = await trusted_devices.is_device_trusted(db, user.id, device_id, now)

    return LoginFacts(
        failed_attempts=failed,
        user=user,
        two_factor=two_factor,
        device_trusted=device_trusted,
    )


async def apply_login_outcome(
    db: AsyncSession,
    outcome: LoginOutcome,
    facts: LoginFacts,
    email: str,
    client: ClientInfo,
    device_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> LoginOutcome:
    """
    Write the attempt row (and, on success, the side effects) for `outcome`.

    Returns the outcome that was actually recorded. A Success that relied on
    store state which changed after `gather_login_facts` is downgraded: a
    trusted device that is gone or expired by now gives NeedsSecondFactor,
    a recovery code spent by a concurrent login gives BadSecondFactor.
    """
    now = now or utcnow()

    if isinstance(outcome, NeedsSecondFactor):
        return outcome

    if isinstance(outcome, RateLimited):
        logger.warning(
            "Login blocked for %s: %d failed attempts in window", client.ip_address, facts.failed_attempts
        )
        db.add(build_attempt(email, client, success=False, blocked=True, created_at=now))
    elif isinstance(outcome, UserNotFound):
        db.add(build_attempt(email, client, success=False, created_at=now))
    elif isinstance(outcome, BadPassword):
        db.add(build_attempt(email, client, success=False, user_id=outcome.user.id, created_at=now))
    elif isinstance(outcome, BadSecondFactor):
        logger.info("Second factor rejected for user_id=%s", outcome.user.id)
        db.add(
            build_attempt(
                email, client, success=False, user_id=outcome.user.id, twofa_failed=True, created_at=now
            )
        )
    elif isinstance(outcome, Success):
        user_id = outcome.user.id
        if outcome.trusted_device:
            if not device_id or not await trusted_devices.touch_device(db, user_id, device_id, now):
                logger.info("Trusted device no longer valid for user_id=%s", user_id)
                return NeedsSecondFactor(outcome.user)
        if outcome.recovery_code_index is not None:
            consume_code(facts.two_factor, outcome.recovery_code_index)
            db.add(facts.two_factor)
        db.add(build_attempt(email, client, success=True, user_id=user_id, created_at=now))
        try:
            await db.commit()
        except StaleDataError:
            await db.rollback()
            logger.info("Recovery code spent concurrently for user_id=%s", user_id)
            db.add(
                build_attempt(
                    email, client, success=False, user_id=user_id, twofa_failed=True, created_at=now
                )
            )
            await db.commit()
            return BadSecondFactor(outcome.user)

        await audit.record_audit(
            db,
            action="login",
            entity="users",
            entity_id=user_id,
            user_id=user_id,
            details={"method": outcome.method},
            client=client,
        )
        return outcome

    await db.commit()
    return outcome


async def authenticate(
    db: AsyncSession,
    email: str,
    password: str,
    client: ClientInfo,
    otp_token: Optional[str] = None,
    recovery_code: Optional[str] = None,
    device_id: Optional[str] = None,
) -> LoginOutcome:
    now = utcnow()
    facts = await gather_login_facts(db, email, client, device_id, now)
    outcome = evaluate_login(facts, password, otp_token, recovery_code)
    return await apply_login_outcome(db, outcome, facts, email, client, device_id, now)
