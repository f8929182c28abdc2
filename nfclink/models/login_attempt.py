# nfclink/models/login_attempt.py
"""
Append-only record of every login outcome.

Rows are never updated or deleted. The rate limiter counts failed rows per
ip_address inside a trailing window.
"""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, Index

from nfclink.db.base import Base, utcnow


class LoginAttempt(Base):
    __tablename__ = "login_attempts"
    __table_args__ = (
        Index("ix_login_attempts_ip_created", "ip_address", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False)
    ip_address = Column(String(64), nullable=False)
    user_agent = Column(String(512), nullable=True)

    # NULL when the email matched no account
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    success = Column(Boolean, nullable=False)
    # Rejected by the rate limiter before any credential check
    blocked = Column(Boolean, default=False, nullable=False)
    # Password was right, second factor was wrong
    twofa_failed = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
