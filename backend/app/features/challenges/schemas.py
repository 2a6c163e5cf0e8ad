"""
Challenge schemas.

Pydantic models for API request/response.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.shared.constants import ChallengeCategory
from app.features.users.schemas import UserResponse


class ChallengeCreate(BaseModel):
    """Create a challenge."""
    owner_id: str
    name: str = Field(..., min_length=1, max_length=100)
    category: ChallengeCategory
    target: float = Field(..., gt=0)
    unit: str = Field(..., min_length=1, max_length=20)


class ProgressDelta(BaseModel):
    """Add to a challenge's progress."""
    delta: float = Field(..., ge=0)


class ProgressValue(BaseModel):
    """Set a challenge's progress."""
    progress: float = Field(..., ge=0)


class ChallengeResponse(BaseModel):
    """Challenge with progress."""
    id: str
    owner_id: str
    name: str
    category: str
    target: float
    progress: float
    unit: str
    completed: bool
    streak: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProgressResponse(BaseModel):
    """Result of a progress write."""
    challenge: ChallengeResponse
    just_completed: bool
    xp_awarded: int = 0
    user: Optional[UserResponse] = None


class ResetResponse(BaseModel):
    """Daily reset result."""
    reset_count: int
