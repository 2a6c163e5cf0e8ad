"""
User repositories.

Data access layer for the User model.
"""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.progression import HATCHLING
from app.shared.repository import BaseRepository
from .models import User


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, User)

    async def get_by_username(self, username: str) -> User | None:
        """
        Get user by username.

        Args:
            username: Public username

        Returns:
            User if found, None otherwise
        """
        return await self.get_by(username=username)

    async def register(
        self,
        user_id: str,
        username: str,
        email: str | None = None
    ) -> User:
        """
        Create the profile row for a newly registered identity.

        Args:
            user_id: Identity provider's user id
            username: Public username
            email: Optional email

        Returns:
            Created user at 0 XP in the hatchling stage
        """
        return await self.create(
            id=user_id,
            username=username,
            email=email,
            experience=0,
            stage=HATCHLING,
        )

    async def leaderboard(self, limit: int = 10) -> list[User]:
        """
        Get top users by experience.

        Args:
            limit: Maximum users to return

        Returns:
            Users ordered by experience (highest first)
        """
        result = await self.db.execute(
            select(User)
            .order_by(User.experience.desc(), User.created_at.asc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def set_cosmetic(
        self,
        user: User,
        cosmetic: str,
        expiry: datetime | None = None
    ) -> User:
        """
        Change the user's cosmetic.

        Args:
            user: User to update
            cosmetic: Cosmetic name
            expiry: When the cosmetic stops applying (None = never)

        Returns:
            Updated user
        """
        return await self.update(user, cosmetic=cosmetic, cosmetic_expiry=expiry)
