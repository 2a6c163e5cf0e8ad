"""
Activity logging service.

Writes activity rows and rewards the owner with XP for each logged action.
A logged value can also count towards one of the owner's challenges,
named by the caller.
Also builds the daily and weekly summaries shown on the dashboard.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.features.challenges.tracker import ChallengeTracker, ProgressResult
from app.features.progression import xp_for
from app.features.users import User, UserRepository
from app.shared.constants import ActivityCategory
from app.shared.exceptions import NotFoundError, ValidationError
from .models import Activity
from .repository import ActivityRepository

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("subtype", "value", "unit", "notes")


def _category(value) -> str:
    try:
        return ActivityCategory(value).value
    except ValueError:
        raise ValidationError(f"Unknown activity category: {value}", field="category", value=value)


@dataclass
class LoggedActivity:
    """Outcome of log_activity."""
    activity: Activity
    user: User
    xp_awarded: int
    challenge: Optional[ProgressResult] = None  # set when a named challenge was advanced
    challenge_xp: int = 0


class ActivityService:
    """
    Activity logging and summaries.

    Usage:
        service = ActivityService(db)
        logged = await service.log_activity(
            owner_id, "exercise", "running", 5, "km", challenge_name="Run 5 km"
        )
    """

    def __init__(self, db: AsyncSession, tracker: ChallengeTracker | None = None):
        self.db = db
        self.activities = ActivityRepository(db)
        self.users = UserRepository(db)
        self.tracker = tracker or ChallengeTracker(db)

    async def log_activity(
        self,
        owner_id: str,
        category: ActivityCategory | str,
        subtype: str,
        value: float,
        unit: str,
        notes: Optional[str] = None,
        challenge_name: Optional[str] = None
    ) -> LoggedActivity:
        """
        Log an activity and award its XP.

        With challenge_name, the value is also added to the owner's
        challenge of that name (clamped at its target); completing it
        awards the completion XP as well. A missing challenge is skipped.

        Raises:
            NotFoundError: If the owner has no user row
            ValidationError: If category is unknown or value is negative
        """
        category = _category(category)
        if value < 0:
            raise ValidationError("Value cannot be negative", field="value", value=value)

        if await self.users.get_by_id(owner_id) is None:
            raise NotFoundError("user", owner_id)

        activity = await self.activities.create(
            owner_id=owner_id,
            category=category,
            subtype=subtype,
            value=value,
            unit=unit,
            notes=notes,
        )

        xp = xp_for(category)
        user = await self.tracker.record_xp_gain(owner_id, xp)

        logger.info(
            f"Logged {category}/{subtype} for user {owner_id}: "
            f"{value} {unit}, +{xp} XP"
        )
        logged = LoggedActivity(activity=activity, user=user, xp_awarded=xp)

        if challenge_name:
            await self._advance_challenge(logged, challenge_name, value)
        return logged

    async def _advance_challenge(self, logged: LoggedActivity, name: str, value: float) -> None:
        owner_id = logged.activity.owner_id
        challenge = await self.tracker.get_by_name(owner_id, name)
        if challenge is None:
            logger.info(f"No challenge {name!r} for user {owner_id}; activity not counted")
            return

        logged.challenge = await self.tracker.add_progress(challenge.id, value)
        logged.challenge_xp, user = await self.tracker.award_completion(logged.challenge)
        if user is not None:
            logged.user = user

    async def log_exercise(self, owner_id: str, subtype: str, value: float,
                           unit: str, notes: Optional[str] = None, challenge_name: Optional[str] = None):
        return await self.log_activity(
            owner_id, ActivityCategory.EXERCISE, subtype, value, unit, notes, challenge_name
        )

    async def log_sleep(self, owner_id: str, value: float, unit: str = "hours",
                        notes: Optional[str] = None):
        return await self.log_activity(owner_id, ActivityCategory.SLEEP, "sleep", value, unit, notes)

    async def log_biohacking(self, owner_id: str, subtype: str, value: float,
                             unit: str, notes: Optional[str] = None):
        return await self.log_activity(owner_id, ActivityCategory.BIOHACKING, subtype, value, unit, notes)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def list_for_owner(self, owner_id: str, limit: int = 50) -> list[Activity]:
        return await self.activities.get_for_owner(owner_id, limit=limit)

    async def list_by_category(
        self,
        owner_id: str,
        category: ActivityCategory | str,
        limit: int = 20
    ) -> list[Activity]:
        return await self.activities.get_for_owner(
            owner_id, category=_category(category), limit=limit
        )

    async def list_in_range(self, owner_id: str, start: datetime, end: datetime) -> list[Activity]:
        return await self.activities.get_in_range(owner_id, start, end)

    # -------------------------------------------------------------------------
    # Explicit edits
    # -------------------------------------------------------------------------

    async def update_activity(self, activity_id: str, **fields) -> Activity:
        """
        Update mutable fields of a logged activity.

        Raises:
            NotFoundError: If the activity does not exist
            ValidationError: If a non-updatable field is given
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        activity = await self.activities.get_by_id(activity_id)
        if activity is None:
            raise NotFoundError("activity", activity_id)
        return await self.activities.update(activity, **fields)

    async def delete_activity(self, activity_id: str) -> None:
        activity = await self.activities.get_by_id(activity_id)
        if activity is None:
            raise NotFoundError("activity", activity_id)
        await self.activities.delete(activity)
        logger.info(f"Deleted activity {activity_id}")

    # -------------------------------------------------------------------------
    # Summaries
    # -------------------------------------------------------------------------

    async def daily_stats(self, owner_id: str, day: date) -> dict:
        """
        Per-category totals for one calendar day.

        Returns:
            {category: {"total": float, "activities": [Activity, ...]}}
        """
        start = datetime.combine(day, time.min)
        end = datetime.combine(day, time.max)
        rows = await self.activities.get_in_range(owner_id, start, end)

        stats = {c.value: {"total": 0.0, "activities": []} for c in ActivityCategory}
        for activity in rows:
            bucket = stats.get(activity.category)
            if bucket is None:
                continue
            bucket["total"] += activity.value
            bucket["activities"].append(activity)
        return stats

    async def weekly_stats(self, owner_id: str, start: date) -> dict:
        """
        Seven-day summary starting at ``start``.

        Exercise counts only entries logged in minutes, sleep only
        entries logged in hours; biohacking counts sessions.
        """
        start_dt = datetime.combine(start, time.min)
        end_dt = start_dt + timedelta(days=7)
        rows = await self.activities.get_in_range(owner_id, start_dt, end_dt)

        summary = {
            "total_activities": len(rows),
            "exercise_minutes": 0.0,
            "sleep_hours": 0.0,
            "biohacking_sessions": 0,
        }
        for activity in rows:
            if activity.category == ActivityCategory.EXERCISE.value:
                if activity.unit == "minutes":
                    summary["exercise_minutes"] += activity.value
            elif activity.category == ActivityCategory.SLEEP.value:
                if activity.unit == "hours":
                    summary["sleep_hours"] += activity.value
            elif activity.category == ActivityCategory.BIOHACKING.value:
                summary["biohacking_sessions"] += 1

        summary["activities"] = rows
        return summary
