"""
Wellness schemas.

Pydantic models for API request/response.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.features.users.schemas import UserResponse


class WellnessCreate(BaseModel):
    """Record a wellness check-in."""
    owner_id: str
    sleep_hours: float = Field(..., ge=0, le=24)
    mood: Optional[str] = Field(default=None, max_length=50)


class WellnessResponse(BaseModel):
    """Stored check-in."""
    id: str
    owner_id: str
    sleep_hours: float
    mood: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class WellnessLogged(BaseModel):
    """Check-in plus the bonus it earned (0 below eight hours)."""
    entry: WellnessResponse
    xp_awarded: int
    user: UserResponse
