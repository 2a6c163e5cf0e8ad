"""
Challenge repository.

Data access layer for the Challenge model.
"""

from sqlalchemy import select, update, desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from .models import Challenge


class ChallengeRepository(BaseRepository[Challenge]):
    """Repository for challenges."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Challenge)

    async def get_for_owner(
        self,
        owner_id: str,
        category: str | None = None
    ) -> list[Challenge]:
        """
        Get owner's challenges.

        Args:
            owner_id: User's ID
            category: Optional category filter

        Returns:
            Challenges ordered by creation time (newest first)
        """
        query = select(Challenge).where(Challenge.owner_id == owner_id)
        if category:
            query = query.where(Challenge.category == category)
        result = await self.db.execute(
            query.order_by(desc(Challenge.created_at))
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_completed(self, owner_id: str) -> list[Challenge]:
        """
        Get owner's completed challenges.

        Returns:
            Challenges ordered by last update (most recent first)
        """
        result = await self.db.execute(
            select(Challenge)
            .where(Challenge.owner_id == owner_id)
            .where(Challenge.completed == True)  # noqa: E712
            .order_by(desc(Challenge.updated_at))
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_by_name(self, owner_id: str, name: str) -> Challenge | None:
        """
        Get owner's challenge by name.

        Returns:
            Challenge if the owner has one with this name yet, None otherwise
        """
        return await self.get_by(owner_id=owner_id, name=name)

    async def reset_for_owner(self, owner_id: str) -> int:
        """
        Zero progress and clear completion on all owner's challenges.

        Streaks are kept. Versions are bumped so in-flight
        compare-and-set writers notice the reset.

        Returns:
            Number of challenges reset
        """
        result = await self.db.execute(
            update(Challenge)
            .where(Challenge.owner_id == owner_id)
            .values(
                progress=0.0,
                completed=False,
                version=Challenge.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()
        return result.rowcount
