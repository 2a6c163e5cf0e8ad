"""
Challenge Routes

Endpoints for challenges and their progress:
- POST   /challenges                         - create
- GET    /challenges/{owner_id}              - list (optional category filter)
- GET    /challenges/{owner_id}/completed    - completed ones
- POST   /challenges/{owner_id}/reset        - daily reset (streaks kept)
- POST   /challenges/item/{id}/progress      - add progress (clamped)
- PUT    /challenges/item/{id}/progress      - set progress
- DELETE /challenges/item/{id}               - delete

Completing a challenge awards XP by category.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.features.challenges import ChallengeTracker, ProgressResult
from app.features.challenges.schemas import (
    ChallengeCreate,
    ChallengeResponse,
    ProgressDelta,
    ProgressResponse,
    ProgressValue,
    ResetResponse,
)
from app.features.users import User, UserResponse
from app.shared.constants import ChallengeCategory

logger = logging.getLogger(__name__)

router = APIRouter()


def progress_response(result: ProgressResult, xp: int = 0, user: Optional[User] = None) -> ProgressResponse:
    return ProgressResponse(
        challenge=ChallengeResponse.model_validate(result.challenge),
        just_completed=result.just_completed,
        xp_awarded=xp,
        user=UserResponse.model_validate(user) if user is not None else None,
    )


async def award_completion(tracker: ChallengeTracker, result: ProgressResult) -> ProgressResponse:
    """Build the progress response, awarding XP if this write completed the challenge."""
    xp, user = await tracker.award_completion(result)
    return progress_response(result, xp, user)


@router.post("/challenges", response_model=ChallengeResponse, status_code=201)
async def create_challenge(request: ChallengeCreate, db: AsyncSession = Depends(get_async_db)):
    """Create a challenge at zero progress."""
    challenge = await ChallengeTracker(db).create_challenge(
        request.owner_id,
        request.name,
        request.category,
        request.target,
        request.unit,
    )
    await db.commit()
    return challenge


@router.get("/challenges/{owner_id}", response_model=list[ChallengeResponse])
async def list_challenges(
    owner_id: str,
    category: Optional[ChallengeCategory] = None,
    db: AsyncSession = Depends(get_async_db)
):
    """Owner's challenges, newest first."""
    tracker = ChallengeTracker(db)
    if category:
        return await tracker.list_by_category(owner_id, category)
    return await tracker.list_for_owner(owner_id)


@router.get("/challenges/{owner_id}/completed", response_model=list[ChallengeResponse])
async def list_completed(owner_id: str, db: AsyncSession = Depends(get_async_db)):
    """Owner's completed challenges, most recently updated first."""
    return await ChallengeTracker(db).list_completed(owner_id)


@router.post("/challenges/{owner_id}/reset", response_model=ResetResponse)
async def reset_daily(owner_id: str, db: AsyncSession = Depends(get_async_db)):
    """Zero progress on all owner's challenges; streaks are kept."""
    count = await ChallengeTracker(db).reset_daily(owner_id)
    await db.commit()
    return ResetResponse(reset_count=count)


@router.post("/challenges/item/{challenge_id}/progress", response_model=ProgressResponse)
async def add_progress(
    challenge_id: str,
    request: ProgressDelta,
    db: AsyncSession = Depends(get_async_db)
):
    """Add to progress (never past the target)."""
    tracker = ChallengeTracker(db)
    result = await tracker.add_progress(challenge_id, request.delta)
    response = await award_completion(tracker, result)
    await db.commit()
    return response


@router.put("/challenges/item/{challenge_id}/progress", response_model=ProgressResponse)
async def set_progress(
    challenge_id: str,
    request: ProgressValue,
    db: AsyncSession = Depends(get_async_db)
):
    """Overwrite progress with an absolute value."""
    tracker = ChallengeTracker(db)
    result = await tracker.set_progress(challenge_id, request.progress)
    response = await award_completion(tracker, result)
    await db.commit()
    return response


@router.delete("/challenges/item/{challenge_id}", status_code=204)
async def delete_challenge(challenge_id: str, db: AsyncSession = Depends(get_async_db)):
    """Delete a challenge."""
    await ChallengeTracker(db).delete_challenge(challenge_id)
    await db.commit()
    return Response(status_code=204)
