"""Lifter accounts and their running XP total."""
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from liftengine.db.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=True)
    xp = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
