# nfclink/security/rate_limit.py
"""
Arithmetic for the per-source-address login rate limit.

The caller counts failed login attempts for an address since
`window_start(now)`; an address is blocked once that count EXCEEDS the
allowed number of failures. With the defaults (10 minutes, 5), six
failures block the seventh attempt.
"""
from datetime import datetime, timedelta
from typing import Optional

from nfclink.core.config import settings


def window_start(now: datetime, window_minutes: Optional[int] = None) -> datetime:
    minutes = settings.LOGIN_WINDOW_MINUTES if window_minutes is None else window_minutes
    return now - timedelta(minutes=minutes)


def is_rate_limited(failed_attempts: int, max_failed: Optional[int] = None) -> bool:
    limit = settings.LOGIN_MAX_FAILED_ATTEMPTS if max_failed is None else max_failed
    return failed_attempts > limit
