# nfclink/security/tokens.py
import secrets
import uuid
from datetime import datetime, timedelta
from typing import Optional, Tuple

from nfclink.core.config import settings
from nfclink.db.base import utcnow


def generate_magic_token() -> str:
    """256 bits of randomness, hex-encoded (64 characters)."""
    return secrets.token_hex(32)


def generate_device_id() -> str:
    return str(uuid.uuid4())


def magic_link_window(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """(issued_at, expires_at) for a magic link minted at `now`."""
    issued = now or utcnow()
    return issued, issued + timedelta(minutes=settings.MAGIC_LINK_EXPIRE_MINUTES)


def device_expiry(remember_days: Optional[int] = None, now: Optional[datetime] = None) -> datetime:
    days = settings.TRUSTED_DEVICE_DAYS if remember_days is None else remember_days
    return (now or utcnow()) + timedelta(days=days)


def build_magic_link_url(token: str) -> str:
    return f"{settings.APP_URL.rstrip('/')}/magic-login?token={token}"
