"""
ORM model for TOTP second-factor enrollment.

A row is created at setup with is_enabled=False and flips to True once the
user proves they can produce a code. recovery_codes shrinks as codes are
redeemed; used codes are removed, not marked.

`version` is the mapper's version counter: an UPDATE only applies to the
row version it was read at, otherwise the flush raises StaleDataError.
"""
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean, JSON

from nfclink.db.base import Base, utcnow


class TwoFactorAuth(Base):
    __tablename__ = "user_2fa"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    # Base32 TOTP secret
    secret = Column(String(64), nullable=False)
    is_enabled = Column(Boolean, default=False, nullable=False)

    # Ordered list of unused "XXXXX-XXXXX" codes.
    # Always assign a new list; in-place mutation is not tracked.
    recovery_codes = Column(JSON, default=list, nullable=False)

    version = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version}
