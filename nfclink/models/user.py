# nfclink/models/user.py
from sqlalchemy import Column, Integer, String, DateTime

from nfclink.db.base import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    # Matched exactly at login; no case folding
    email = Column(String(255), unique=True, index=True, nullable=False)

    # bcrypt hash, salt embedded
    password_hash = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
