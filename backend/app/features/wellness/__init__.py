"""
Wellness check-in module.

Usage:
    from app.features.wellness import WellnessService

Components:
- WellnessLog: SQLAlchemy model
- WellnessRepository: Data access
- WellnessService: Check-ins with the well-rested XP bonus
"""
from .models import WellnessLog
from .repository import WellnessRepository
from .service import WellnessResult, WellnessService

__all__ = [
    "WellnessLog",
    "WellnessRepository",
    "WellnessResult",
    "WellnessService",
]
