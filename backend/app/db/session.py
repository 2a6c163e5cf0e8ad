"""
Async database access.

settings.database_url may be given in its plain form
(sqlite:///..., postgresql://...); the async driver (aiosqlite / asyncpg)
is substituted here. Sessions don't expire objects on commit so routes can
serialize rows after committing.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.config import settings

_ASYNC_DRIVERS = {
    "sqlite:///": "sqlite+aiosqlite:///",
    "postgresql://": "postgresql+asyncpg://",
}


def _get_async_url(url: str) -> str:
    """Swap a plain DB URL for its async-driver form (other URLs unchanged)."""
    for plain, driver in _ASYNC_DRIVERS.items():
        if url.startswith(plain):
            return driver + url[len(plain):]
    return url


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    if url.startswith("postgresql"):
        return {"pool_size": 5, "max_overflow": 10, "pool_pre_ping": True, "pool_recycle": 1800}
    return {}


_async_url = _get_async_url(settings.database_url)
async_engine = create_async_engine(_async_url, **_engine_options(_async_url))

AsyncSessionLocal = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, rolled back unless committed."""
    async with AsyncSessionLocal() as session:
        yield session


async def init_db() -> None:
    """Create missing tables for every feature model."""
    from app.models import Base, load_all_models

    load_all_models()

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
