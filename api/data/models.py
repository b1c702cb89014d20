"""
Database Models
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Player(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Uniqueness here is what keeps concurrent first logins from duplicating a player
    google_id = Column(String(255), nullable=False, unique=True)
    email = Column(String(255), nullable=True)
    name = Column(String(255), nullable=True)
    picture = Column(String(1024), nullable=True)
    display_name = Column(String(64), nullable=False)
    total_score = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
