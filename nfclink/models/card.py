# nfclink/models/card.py
from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from nfclink.db.base import Base, utcnow


class Card(Base):
    """A URL written to an NFC tag, keyed by the tag's UID."""
    __tablename__ = "cards"

    id = Column(Integer, primary_key=True, index=True)

    # Tag identifier as read from the chip (e.g. "04:A2:2B:1A:5C:80:00").
    # One UID per physical tag, but not enforced here.
    uid = Column(String(64), index=True, nullable=False)
    link = Column(Text, nullable=False)

    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User")
