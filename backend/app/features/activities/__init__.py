"""
Activity logging module.

Usage:
    from app.features.activities import ActivityService

Components:
- Activity: SQLAlchemy model for a logged exercise/sleep/biohacking entry
- ActivityRepository: Data access
- ActivityService: Logging with XP rewards, daily/weekly summaries
"""
from .models import Activity
from .repository import ActivityRepository
from .service import ActivityService, LoggedActivity

__all__ = [
    "Activity",
    "ActivityRepository",
    "ActivityService",
    "LoggedActivity",
]
