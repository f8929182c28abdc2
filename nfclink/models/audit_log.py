# nfclink/models/audit_log.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, JSON, Index
from sqlalchemy.orm import relationship

from nfclink.db.base import Base, utcnow


class AuditLog(Base):
    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_user_created", "user_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # e.g. "login", "magic_link_created", "add_trusted_device"
    action = Column(String(64), index=True, nullable=False)
    # Table the action touched, e.g. "users", "cards"
    entity = Column(String(64), index=True, nullable=False)
    entity_id = Column(String(64), nullable=True)
    details = Column(JSON, nullable=True)

    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(512), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, index=True, nullable=False)

    user = relationship("User")
