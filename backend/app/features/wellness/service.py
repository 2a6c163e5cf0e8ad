"""
Wellness check-ins.

Stores sleep and mood reports. A full night's sleep earns a small XP
bonus on top of anything logged through activities.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.features.challenges.tracker import ChallengeTracker
from app.features.progression import xp_for_wellness
from app.features.users import User, UserRepository
from app.shared.exceptions import NotFoundError
from .models import WellnessLog
from .repository import WellnessRepository

logger = logging.getLogger(__name__)


@dataclass
class WellnessResult:
    entry: WellnessLog
    user: User
    xp_awarded: int


class WellnessService:
    """
    Usage:
        result = await WellnessService(db).check_in(owner_id, sleep_hours=8, mood="rested")
        await db.commit()
    """

    def __init__(self, db: AsyncSession, tracker: ChallengeTracker | None = None):
        self.db = db
        self.entries = WellnessRepository(db)
        self.users = UserRepository(db)
        self.tracker = tracker or ChallengeTracker(db)

    async def check_in(
        self,
        owner_id: str,
        sleep_hours: float,
        mood: Optional[str] = None
    ) -> WellnessResult:
        """
        Store a check-in and award the well-rested bonus if earned.

        Raises:
            NotFoundError: If the owner does not exist
            ValidationError: If sleep_hours is negative
        """
        xp = xp_for_wellness(sleep_hours)

        user = await self.users.get_by_id(owner_id)
        if user is None:
            raise NotFoundError("user", owner_id)

        entry = await self.entries.create(owner_id=owner_id, sleep_hours=sleep_hours, mood=mood)
        if xp:
            user = await self.tracker.record_xp_gain(owner_id, xp)

        logger.info(f"Wellness check-in for user {owner_id}: {sleep_hours}h, mood={mood}, +{xp} XP")
        return WellnessResult(entry=entry, user=user, xp_awarded=xp)

    async def list_for_owner(self, owner_id: str, limit: int = 30) -> list[WellnessLog]:
        return await self.entries.get_for_owner(owner_id, limit=limit)
