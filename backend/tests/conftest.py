"""
Shared fixtures.

Each test gets a fresh in-memory SQLite database (aiosqlite).
StaticPool keeps a single connection so every session sees the same tables.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.models import Base, load_all_models
from app.features.users import UserRepository


load_all_models()


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(db):
    """Factory: await make_user("u1", experience=40)."""

    async def _make_user(user_id: str = "user-1", username: str | None = None, **fields):
        repo = UserRepository(db)
        user = await repo.register(user_id, username or user_id)
        if fields:
            user = await repo.update(user, **fields)
        return user

    return _make_user
