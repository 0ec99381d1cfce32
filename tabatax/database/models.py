"""SQLAlchemy ORM models for TabataX."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class SavedWorkout(Base):
    """Key/value store for workout documents (JSON text)."""

    __tablename__ = "saved_workouts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(64), nullable=False, unique=True)
    payload = Column(Text, nullable=False)
    saved_at = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self) -> str:
        return f"<SavedWorkout key={self.key} saved_at={self.saved_at}>"
