"""
Activity log model.

Models:
- Activity: A self-logged exercise, sleep or biohacking entry
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Float, ForeignKey, Text
import uuid

from app.models.base import Base


class Activity(Base):
    """
    Logged activity.

    Append-only in normal flow; ``category`` is one of
    ActivityCategory (exercise / sleep / biohacking).
    """

    __tablename__ = "activities"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    category = Column(String(20), nullable=False, index=True)
    subtype = Column(String(100), nullable=False)  # "running", "cold plunge", ...
    value = Column(Float, nullable=False)
    unit = Column(String(20), nullable=False)  # "minutes", "hours", "km", ...
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<Activity {self.id} {self.category}/{self.subtype} {self.value} {self.unit}>"
