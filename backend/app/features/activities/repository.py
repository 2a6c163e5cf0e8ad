"""
Activity repository.

Data access layer for the Activity model.
"""

from datetime import datetime

from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from .models import Activity


class ActivityRepository(BaseRepository[Activity]):
    """Repository for logged activities."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Activity)

    async def get_for_owner(
        self,
        owner_id: str,
        category: str | None = None,
        limit: int = 50
    ) -> list[Activity]:
        """
        Get owner's activities.

        Args:
            owner_id: User's ID
            category: Optional category filter
            limit: Maximum activities to return

        Returns:
            List of activities ordered by creation time (newest first)
        """
        query = self._select(owner_id=owner_id)
        if category:
            query = query.where(Activity.category == category)
        query = query.order_by(desc(Activity.created_at)).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_in_range(
        self,
        owner_id: str,
        start: datetime,
        end: datetime
    ) -> list[Activity]:
        """
        Get owner's activities created within [start, end].

        Returns:
            List of activities ordered by creation time (newest first)
        """
        result = await self.db.execute(
            self._select(owner_id=owner_id)
            .where(Activity.created_at >= start)
            .where(Activity.created_at <= end)
            .order_by(desc(Activity.created_at))
        )
        return list(result.scalars().all())
