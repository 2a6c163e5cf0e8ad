"""
Wellness check-in model.

Models:
- WellnessLog: Last night's sleep and current mood, as reported by the user
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Float, ForeignKey
import uuid

from app.models.base import Base


class WellnessLog(Base):
    """Daily wellness check-in. Append-only."""

    __tablename__ = "wellness_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    sleep_hours = Column(Float, nullable=False)
    mood = Column(String(50), nullable=True)  # free text: "rested", "grumpy", ...

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<WellnessLog {self.id} {self.sleep_hours}h mood={self.mood}>"
