# nfclink/db/base.py
"""
SQLAlchemy declarative base and shared column helpers.
"""
from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    """Timezone-aware current time; used for every application-written timestamp."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ─────────────────────────────────────────────────────────────────────────────
# Declarative Base for ORM Models
# All models inherit from this class
# ─────────────────────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Usage:
        class Card(Base):
            __tablename__ = "cards"
            id = Column(Integer, primary_key=True)
            ...
    """
    pass


__all__ = [
    "Base",
    "utcnow",
    "as_utc",
]
