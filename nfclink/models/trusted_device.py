# nfclink/models/trusted_device.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime

from nfclink.db.base import Base, utcnow


class TrustedDevice(Base):
    """
    A browser remembered for a limited period so it can skip the second factor.

    Expired rows are not purged; every lookup filters on expires_at.
    """
    __tablename__ = "trusted_devices"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)

    # uuid4 handed to the client
    device_id = Column(String(36), unique=True, index=True, nullable=False)
    device_name = Column(String(255), nullable=True)
    ip_address = Column(String(64), nullable=True)

    expires_at = Column(DateTime(timezone=True), nullable=False)
    last_used_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
