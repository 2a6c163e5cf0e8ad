"""
User-related models.

Models:
- User: Application user with XP, evolution stage and cosmetic
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer
import uuid

from app.models.base import Base
from app.shared.constants import DEFAULT_COSMETIC


class User(Base):
    """
    Application user.

    Identity comes from the external identity provider; ``id`` is the
    provider's user id. ``stage`` is derived from ``experience`` and is
    rewritten together with it.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(100), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=True)

    # Progression
    experience = Column(Integer, nullable=False, default=0)
    stage = Column(String(50), nullable=False, default="Batchling Hatchling")

    # Cosmetic ("skin") with optional expiry
    cosmetic = Column(String(50), nullable=False, default=DEFAULT_COSMETIC)
    cosmetic_expiry = Column(DateTime, nullable=True)

    # Optimistic concurrency token
    version = Column(Integer, nullable=False, default=0)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def effective_cosmetic(self, now: datetime | None = None) -> str:
        """Cosmetic to show, falling back to the default once expired."""
        now = now or datetime.utcnow()
        if self.cosmetic_expiry is not None and self.cosmetic_expiry <= now:
            return DEFAULT_COSMETIC
        return self.cosmetic or DEFAULT_COSMETIC

    def __repr__(self):
        return f"<User {self.id} ({self.username}) xp={self.experience}>"
