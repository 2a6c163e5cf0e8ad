"""
Challenge model.

Models:
- Challenge: A user's goal with progress, completion flag and streak
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Float, Boolean, ForeignKey
import uuid

from app.models.base import Base


class Challenge(Base):
    """
    User challenge.

    ``completed`` is true exactly when progress >= target.
    ``streak`` only grows on a false -> true completion transition and
    survives daily resets.
    ``version`` is bumped on every progress write (compare-and-set).
    """

    __tablename__ = "challenges"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String(100), nullable=False)
    category = Column(String(20), nullable=False, index=True)  # ChallengeCategory
    target = Column(Float, nullable=False)
    progress = Column(Float, nullable=False, default=0.0)
    unit = Column(String(20), nullable=False)

    completed = Column(Boolean, nullable=False, default=False)
    streak = Column(Integer, nullable=False, default=0)

    version = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return (
            f"<Challenge {self.id} {self.name!r} "
            f"{self.progress}/{self.target} completed={self.completed}>"
        )
