"""
Wellness repository.

Data access layer for the WellnessLog model.
"""

from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from .models import WellnessLog


class WellnessRepository(BaseRepository[WellnessLog]):
    """Repository for wellness check-ins."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, WellnessLog)

    async def get_for_owner(self, owner_id: str, limit: int = 30) -> list[WellnessLog]:
        """Owner's check-ins, newest first."""
        result = await self.db.execute(
            self._select(owner_id=owner_id)
            .order_by(desc(WellnessLog.created_at))
            .limit(limit)
        )
        return list(result.scalars().all())
