"""
Activity Routes

Endpoints for logging activities and reading summaries:
- POST   /activities                   - log + award XP (optionally advance a named challenge)
- GET    /activities/{owner_id}        - recent activities
- GET    /activities/{owner_id}/daily  - per-category totals for a day
- GET    /activities/{owner_id}/weekly - 7-day summary
- PATCH  /activities/item/{id}         - edit
- DELETE /activities/item/{id}         - delete
"""

from datetime import date, datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.features.activities import ActivityService
from app.features.activities.schemas import (
    ActivityCreate,
    ActivityLogged,
    ActivityResponse,
    ActivityUpdate,
    DailyStats,
    WeeklyStats,
)
from app.features.users import UserResponse
from app.shared.constants import ActivityCategory
from app.api.v1.routes.challenges import progress_response

router = APIRouter()


@router.post("/activities", response_model=ActivityLogged, status_code=201)
async def log_activity(request: ActivityCreate, db: AsyncSession = Depends(get_async_db)):
    """Log an activity and award its XP."""
    service = ActivityService(db)
    logged = await service.log_activity(
        request.owner_id,
        request.category,
        request.subtype,
        request.value,
        request.unit,
        request.notes,
        challenge_name=request.challenge_name,
    )
    await db.commit()

    challenge = None
    if logged.challenge is not None:
        challenge = progress_response(
            logged.challenge,
            logged.challenge_xp,
            logged.user if logged.challenge_xp else None,
        )

    return ActivityLogged(
        activity=ActivityResponse.model_validate(logged.activity),
        xp_awarded=logged.xp_awarded,
        user=UserResponse.model_validate(logged.user),
        challenge=challenge,
    )


@router.get("/activities/{owner_id}", response_model=list[ActivityResponse])
async def list_activities(
    owner_id: str,
    category: Optional[ActivityCategory] = None,
    limit: int = Query(default=50, ge=1, le=200),
    db: AsyncSession = Depends(get_async_db)
):
    """Owner's activities, newest first."""
    service = ActivityService(db)
    if category:
        return await service.list_by_category(owner_id, category, limit=limit)
    return await service.list_for_owner(owner_id, limit=limit)


@router.get("/activities/{owner_id}/daily", response_model=DailyStats)
async def daily_stats(
    owner_id: str,
    day: Optional[date] = None,
    db: AsyncSession = Depends(get_async_db)
):
    """Per-category totals for ``day`` (default today)."""
    return await ActivityService(db).daily_stats(owner_id, day or datetime.utcnow().date())


@router.get("/activities/{owner_id}/weekly", response_model=WeeklyStats)
async def weekly_stats(
    owner_id: str,
    start: Optional[date] = None,
    db: AsyncSession = Depends(get_async_db)
):
    """Summary of the 7 days from ``start`` (default: the last 7 days)."""
    start = start or datetime.utcnow().date() - timedelta(days=6)
    return await ActivityService(db).weekly_stats(owner_id, start)


@router.patch("/activities/item/{activity_id}", response_model=ActivityResponse)
async def update_activity(
    activity_id: str,
    request: ActivityUpdate,
    db: AsyncSession = Depends(get_async_db)
):
    """Edit a logged activity."""
    activity = await ActivityService(db).update_activity(
        activity_id, **request.model_dump(exclude_unset=True)
    )
    await db.commit()
    return activity


@router.delete("/activities/item/{activity_id}", status_code=204)
async def delete_activity(activity_id: str, db: AsyncSession = Depends(get_async_db)):
    """Delete a logged activity."""
    await ActivityService(db).delete_activity(activity_id)
    await db.commit()
    return Response(status_code=204)
