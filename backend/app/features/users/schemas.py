"""
User schemas.

Pydantic models for user operations.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class UserCreate(BaseModel):
    """Create user request."""

    id: str = Field(..., min_length=1, max_length=36)
    username: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = None


class CosmeticUpdate(BaseModel):
    """Change the active cosmetic."""

    cosmetic: str = Field(..., min_length=1, max_length=50)
    expiry: Optional[datetime] = None


class UserResponse(BaseModel):
    """User response."""

    id: str
    username: str
    email: Optional[str]
    experience: int
    stage: str
    cosmetic: str
    cosmetic_expiry: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class StageProgressResponse(BaseModel):
    """Where the user sits on the stage ladder."""

    stage: str
    stage_rank: int
    next_stage: Optional[str]
    xp_to_next_stage: int


class UserProfileResponse(UserResponse):
    """User with stage progress and the cosmetic currently in effect."""

    active_cosmetic: str
    progress: StageProgressResponse


class LeaderboardEntry(BaseModel):
    """Single leaderboard row."""

    rank: int
    username: str
    experience: int
    stage: str
