"""
Feed Routes

- POST /feed             - post a message
- GET  /feed/{owner_id}  - user's messages, newest first
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.features.feed import FeedRepository
from app.features.feed.schemas import FeedMessageResponse, FeedPost

router = APIRouter()


@router.post("/feed", response_model=FeedMessageResponse, status_code=201)
async def post_message(request: FeedPost, db: AsyncSession = Depends(get_async_db)):
    """Post a message to the user's feed."""
    entry = await FeedRepository(db).post(request.owner_id, request.message)
    await db.commit()
    return entry


@router.get("/feed/{owner_id}", response_model=list[FeedMessageResponse])
async def list_messages(
    owner_id: str,
    limit: int = Query(default=50, ge=1, le=200),
    db: AsyncSession = Depends(get_async_db)
):
    return await FeedRepository(db).get_for_owner(owner_id, limit=limit)
