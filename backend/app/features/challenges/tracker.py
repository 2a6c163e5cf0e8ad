"""
Challenge Tracker

Reads and writes challenge progress and user XP.

Progress rules:
- add_progress clamps at the target: progress never exceeds target here
- completed == (progress >= target)
- streak += 1 only on a false -> true completion transition
- reset_daily zeroes progress and completion, never the streak

Every read is a fresh fetch. Each write is a single conditional UPDATE
keyed on the row version the caller read (compare-and-set); if another
writer got there first the tracker re-reads and recomputes, up to
settings.update_max_attempts times.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.features.progression import stage_for, xp_for_challenge_completion
from app.features.users import User, UserRepository
from app.shared.constants import ChallengeCategory
from app.shared.exceptions import ConflictError, NotFoundError, ValidationError
from .models import Challenge
from .repository import ChallengeRepository

logger = logging.getLogger(__name__)


def _category(value) -> str:
    try:
        return ChallengeCategory(value).value
    except ValueError:
        raise ValidationError(f"Unknown challenge category: {value}", field="category", value=value)


@dataclass
class ProgressResult:
    """Challenge after a progress write."""
    challenge: Challenge
    just_completed: bool  # this write flipped completed false -> true


class ChallengeTracker:
    """
    Challenge progress, daily resets and XP bookkeeping.

    Usage:
        tracker = ChallengeTracker(db)
        result = await tracker.add_progress(challenge_id, 3)
        user = await tracker.record_xp_gain(owner_id, 25)
        await db.commit()
    """

    def __init__(self, db: AsyncSession, max_attempts: Optional[int] = None):
        self.db = db
        self.challenges = ChallengeRepository(db)
        self.users = UserRepository(db)
        self.max_attempts = max_attempts or settings.update_max_attempts

    # -------------------------------------------------------------------------
    # Progress
    # -------------------------------------------------------------------------

    async def add_progress(self, challenge_id: str, delta: float) -> ProgressResult:
        """
        Add to a challenge's progress, clamped at its target.

        Raises:
            ValidationError: If delta is negative
            NotFoundError: If the challenge does not exist
            ConflictError: If every compare-and-set attempt lost
        """
        if delta < 0:
            raise ValidationError("Progress delta cannot be negative", field="delta", value=delta)
        return await self._write_progress(
            challenge_id,
            lambda challenge: min(challenge.progress + delta, challenge.target),
        )

    async def set_progress(self, challenge_id: str, progress: float) -> ProgressResult:
        """
        Overwrite a challenge's progress with an absolute value.

        Not clamped: externally verified totals may exceed the target.
        """
        if progress < 0:
            raise ValidationError("Progress cannot be negative", field="progress", value=progress)
        return await self._write_progress(challenge_id, lambda challenge: progress)

    async def _write_progress(
        self,
        challenge_id: str,
        compute: Callable[[Challenge], float]
    ) -> ProgressResult:
        for attempt in range(1, self.max_attempts + 1):
            challenge = await self.challenges.get_by_id(challenge_id)
            if challenge is None:
                raise NotFoundError("challenge", challenge_id)

            new_progress = compute(challenge)
            completed = new_progress >= challenge.target
            just_completed = completed and not challenge.completed
            streak = challenge.streak + 1 if just_completed else challenge.streak

            written = await self.challenges.update_if_version(
                challenge_id,
                challenge.version,
                progress=new_progress,
                completed=completed,
                streak=streak,
            )
            if written:
                updated = await self.challenges.get_by_id(challenge_id)
                if just_completed:
                    logger.info(
                        f"Challenge {challenge_id} completed "
                        f"({new_progress}/{challenge.target}), streak {streak}"
                    )
                return ProgressResult(challenge=updated, just_completed=just_completed)

            logger.warning(
                f"Challenge {challenge_id} changed concurrently "
                f"(attempt {attempt}/{self.max_attempts}), retrying"
            )

        raise ConflictError(
            f"Challenge {challenge_id} kept changing; progress not saved",
            context={"challenge_id": challenge_id},
        )

    async def reset_daily(self, owner_id: str) -> int:
        """
        Reset progress and completion for all owner's challenges.

        Returns:
            Number of challenges reset
        """
        count = await self.challenges.reset_for_owner(owner_id)
        logger.info(f"Daily reset for user {owner_id}: {count} challenges")
        return count

    # -------------------------------------------------------------------------
    # XP
    # -------------------------------------------------------------------------

    async def record_xp_gain(self, owner_id: str, delta: int) -> User:
        """
        Add XP to a user and recompute their stage.

        Experience and stage are written by one conditional UPDATE.

        Raises:
            ValidationError: If delta is negative
            NotFoundError: If the user does not exist
            ConflictError: If every compare-and-set attempt lost
        """
        if delta < 0:
            raise ValidationError("XP gain cannot be negative", field="delta", value=delta)

        for attempt in range(1, self.max_attempts + 1):
            user = await self.users.get_by_id(owner_id)
            if user is None:
                raise NotFoundError("user", owner_id)

            old_stage = user.stage
            new_xp = user.experience + delta
            new_stage = stage_for(new_xp)

            written = await self.users.update_if_version(
                owner_id,
                user.version,
                experience=new_xp,
                stage=new_stage,
            )
            if written:
                logger.info(f"Awarded {delta} XP to user {owner_id}. Total: {new_xp} XP, Stage: {new_stage}")
                if new_stage != old_stage:
                    logger.info(f"User {owner_id} evolved from {old_stage} to {new_stage}!")
                return await self.users.get_by_id(owner_id)

            logger.warning(
                f"User {owner_id} XP changed concurrently "
                f"(attempt {attempt}/{self.max_attempts}), retrying"
            )

        raise ConflictError(
            f"XP for user {owner_id} kept changing; gain not saved",
            context={"user_id": owner_id},
        )

    async def award_completion(self, result: ProgressResult) -> tuple[int, Optional[User]]:
        """
        Award completion XP if ``result`` flipped its challenge to completed.

        Returns:
            (xp awarded, updated user) or (0, None) when nothing was completed
        """
        if not result.just_completed:
            return 0, None
        xp = xp_for_challenge_completion(result.challenge.category)
        user = await self.record_xp_gain(result.challenge.owner_id, xp)
        return xp, user

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    async def create_challenge(
        self,
        owner_id: str,
        name: str,
        category: ChallengeCategory | str,
        target: float,
        unit: str
    ) -> Challenge:
        """
        Create a challenge at zero progress.

        Raises:
            ValidationError: If category is unknown or target is not positive
            NotFoundError: If the owner does not exist
        """
        category = _category(category)
        if target <= 0:
            raise ValidationError("Target must be positive", field="target", value=target)
        if await self.users.get_by_id(owner_id) is None:
            raise NotFoundError("user", owner_id)

        challenge = await self.challenges.create(
            owner_id=owner_id,
            name=name,
            category=category,
            target=target,
            unit=unit,
            progress=0.0,
            completed=False,
            streak=0,
        )
        logger.info(f"Created challenge {challenge.id} ({name!r}) for user {owner_id}")
        return challenge

    async def get_challenge(self, challenge_id: str) -> Challenge:
        challenge = await self.challenges.get_by_id(challenge_id)
        if challenge is None:
            raise NotFoundError("challenge", challenge_id)
        return challenge

    async def get_by_name(self, owner_id: str, name: str) -> Challenge | None:
        """Absence is not an error: callers create on first use."""
        return await self.challenges.get_by_name(owner_id, name)

    async def delete_challenge(self, challenge_id: str) -> None:
        challenge = await self.get_challenge(challenge_id)
        await self.challenges.delete(challenge)
        logger.info(f"Deleted challenge {challenge_id}")

    async def list_for_owner(self, owner_id: str) -> list[Challenge]:
        return await self.challenges.get_for_owner(owner_id)

    async def list_completed(self, owner_id: str) -> list[Challenge]:
        return await self.challenges.get_completed(owner_id)

    async def list_by_category(self, owner_id: str, category: ChallengeCategory | str) -> list[Challenge]:
        return await self.challenges.get_for_owner(
            owner_id, category=_category(category)
        )
