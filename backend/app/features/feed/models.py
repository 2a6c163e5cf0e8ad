"""
Feed model.

Models:
- FeedMessage: A short status message posted by a user
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Text
import uuid

from app.models.base import Base


class FeedMessage(Base):
    """Message on a user's feed."""

    __tablename__ = "feed_messages"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    message = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<FeedMessage {self.id} by {self.owner_id}>"
