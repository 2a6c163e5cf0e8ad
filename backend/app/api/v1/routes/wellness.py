"""
Wellness Routes

- POST /wellness             - check in (sleep + mood), bonus XP for 8h+ sleep
- GET  /wellness/{owner_id}  - recent check-ins
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.features.users import UserResponse
from app.features.wellness import WellnessService
from app.features.wellness.schemas import WellnessCreate, WellnessLogged, WellnessResponse

router = APIRouter()


@router.post("/wellness", response_model=WellnessLogged, status_code=201)
async def check_in(request: WellnessCreate, db: AsyncSession = Depends(get_async_db)):
    """Record a wellness check-in."""
    result = await WellnessService(db).check_in(request.owner_id, request.sleep_hours, request.mood)
    await db.commit()

    return WellnessLogged(
        entry=WellnessResponse.model_validate(result.entry),
        xp_awarded=result.xp_awarded,
        user=UserResponse.model_validate(result.user),
    )


@router.get("/wellness/{owner_id}", response_model=list[WellnessResponse])
async def list_check_ins(
    owner_id: str,
    limit: int = Query(default=30, ge=1, le=200),
    db: AsyncSession = Depends(get_async_db)
):
    return await WellnessService(db).list_for_owner(owner_id, limit=limit)
