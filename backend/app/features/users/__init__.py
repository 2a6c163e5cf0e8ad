"""
User management module.

Usage:
    from app.features.users import User, UserRepository

Models:
- User: Application user with experience, stage and cosmetic

Repositories:
- UserRepository: Data access for users (registration, leaderboard)
"""

from .models import User
from .schemas import (
    UserCreate,
    CosmeticUpdate,
    UserResponse,
    UserProfileResponse,
    StageProgressResponse,
    LeaderboardEntry,
)
from .repository import UserRepository

__all__ = [
    # Models
    "User",
    # Schemas
    "UserCreate",
    "CosmeticUpdate",
    "UserResponse",
    "UserProfileResponse",
    "StageProgressResponse",
    "LeaderboardEntry",
    # Repositories
    "UserRepository",
]
