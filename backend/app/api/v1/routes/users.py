"""
User Routes

Endpoints for registration, profile, cosmetics and the leaderboard.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.session import get_async_db
from app.features.progression import stage_progress
from app.features.users import (
    CosmeticUpdate,
    LeaderboardEntry,
    StageProgressResponse,
    User,
    UserCreate,
    UserProfileResponse,
    UserRepository,
    UserResponse,
)
from app.shared.exceptions import ConflictError, NotFoundError

router = APIRouter()


def _profile(user: User) -> UserProfileResponse:
    return UserProfileResponse(
        **UserResponse.model_validate(user).model_dump(),
        active_cosmetic=user.effective_cosmetic(),
        progress=StageProgressResponse(**stage_progress(user.experience)),
    )


async def _get_user(repo: UserRepository, user_id: str) -> User:
    user = await repo.get_by_id(user_id)
    if not user:
        raise NotFoundError("user", user_id)
    return user


# === Endpoints ===

@router.post("/users", response_model=UserProfileResponse, status_code=201)
async def register_user(request: UserCreate, db: AsyncSession = Depends(get_async_db)):
    """
    Create the profile row for a new identity.

    Called once after sign-up with the identity provider's user id.
    """
    user_repo = UserRepository(db)

    if await user_repo.get_by_id(request.id):
        raise ConflictError(f"User already exists: {request.id}")
    if await user_repo.get_by_username(request.username):
        raise ConflictError(f"Username taken: {request.username}")

    user = await user_repo.register(request.id, request.username, request.email)
    await db.commit()
    return _profile(user)


@router.get("/users/{user_id}", response_model=UserProfileResponse)
async def get_user(user_id: str, db: AsyncSession = Depends(get_async_db)):
    """Get user with XP, stage progress and active cosmetic."""
    user = await _get_user(UserRepository(db), user_id)
    return _profile(user)


@router.put("/users/{user_id}/cosmetic", response_model=UserProfileResponse)
async def update_cosmetic(
    user_id: str,
    request: CosmeticUpdate,
    db: AsyncSession = Depends(get_async_db)
):
    """Change the user's cosmetic (optionally until ``expiry``)."""
    user_repo = UserRepository(db)
    user = await _get_user(user_repo, user_id)
    user = await user_repo.set_cosmetic(user, request.cosmetic, request.expiry)
    await db.commit()
    return _profile(user)


@router.get("/leaderboard", response_model=list[LeaderboardEntry])
async def get_leaderboard(
    limit: int = Query(default=settings.leaderboard_limit, ge=1, le=100),
    db: AsyncSession = Depends(get_async_db)
):
    """Top users by experience."""
    users = await UserRepository(db).leaderboard(limit=limit)
    return [
        LeaderboardEntry(
            rank=position,
            username=user.username,
            experience=user.experience,
            stage=user.stage,
        )
        for position, user in enumerate(users, start=1)
    ]
