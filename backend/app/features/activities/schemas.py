"""
Activity schemas.

Pydantic models for API request/response.
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from app.shared.constants import ActivityCategory
from app.features.challenges.schemas import ProgressResponse
from app.features.users.schemas import UserResponse


class ActivityCreate(BaseModel):
    """Log a new activity."""
    owner_id: str
    category: ActivityCategory
    subtype: str = Field(..., min_length=1, max_length=100)
    value: float = Field(..., ge=0)
    unit: str = Field(..., min_length=1, max_length=20)
    notes: Optional[str] = None
    challenge_name: Optional[str] = Field(default=None, min_length=1, max_length=100)


class ActivityUpdate(BaseModel):
    """Partial update of a logged activity."""
    subtype: Optional[str] = Field(default=None, min_length=1, max_length=100)
    value: Optional[float] = Field(default=None, ge=0)
    unit: Optional[str] = Field(default=None, min_length=1, max_length=20)
    notes: Optional[str] = None


class ActivityResponse(BaseModel):
    """Logged activity."""
    id: str
    owner_id: str
    category: str
    subtype: str
    value: float
    unit: str
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ActivityLogged(BaseModel):
    """Result of logging an activity: the row plus the rewarded user."""
    activity: ActivityResponse
    xp_awarded: int
    user: UserResponse
    challenge: Optional[ProgressResponse] = None


class CategoryTotals(BaseModel):
    """Sum and entries for one category on one day."""
    total: float = 0.0
    activities: List[ActivityResponse] = []


class DailyStats(BaseModel):
    """Per-category totals for a day."""
    exercise: CategoryTotals
    sleep: CategoryTotals
    biohacking: CategoryTotals


class WeeklyStats(BaseModel):
    """Seven-day summary."""
    total_activities: int
    exercise_minutes: float
    sleep_hours: float
    biohacking_sessions: int
    activities: List[ActivityResponse] = []
