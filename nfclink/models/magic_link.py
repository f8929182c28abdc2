# nfclink/models/magic_link.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean
from sqlalchemy.orm import relationship

from nfclink.db.base import Base, utcnow


class MagicLink(Base):
    """Single-use, time-limited login token. Redeemed rows stay with used=True."""
    __tablename__ = "magic_links"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # 32 random bytes, hex-encoded
    token = Column(String(64), unique=True, index=True, nullable=False)
    used = Column(Boolean, default=False, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User")
