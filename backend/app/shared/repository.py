"""
Base repository shared by the feature repositories.

Reads always go to the database (populate_existing), so a row loaded
earlier in the same session is overwritten with what is stored now.
Writes flush but never commit: the route owns the transaction.

Usage:
    class ChallengeRepository(BaseRepository[Challenge]):
        def __init__(self, db: AsyncSession):
            super().__init__(db, Challenge)

    written = await repo.update_if_version(challenge.id, challenge.version, progress=5)
"""

from datetime import datetime
from typing import Any, Generic, Type, TypeVar

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Fresh reads, flushed writes and version-checked updates for one model."""

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    def _select(self, **criteria: Any) -> Select:
        query = select(self.model).execution_options(populate_existing=True)
        for column, value in criteria.items():
            query = query.where(getattr(self.model, column) == value)
        return query

    async def get_by_id(self, id: str) -> T | None:
        result = await self.db.execute(self._select(id=id))
        return result.scalar_one_or_none()

    async def get_by(self, **criteria: Any) -> T | None:
        """First row whose columns equal ``criteria``, or None."""
        result = await self.db.execute(self._select(**criteria).limit(1))
        return result.scalars().first()

    async def create(self, **values: Any) -> T:
        """Insert a row; defaults (id, timestamps, version) are filled in."""
        entity = self.model(**values)
        self.db.add(entity)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def update(self, entity: T, **values: Any) -> T:
        """
        Plain ORM update of a loaded row.

        Not version-checked; use update_if_version for counters that
        concurrent requests may change (progress, experience).
        """
        for column, value in values.items():
            setattr(entity, column, value)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def update_if_version(self, id: str, expected_version: int, **values: Any) -> bool:
        """
        Compare-and-set: write ``values`` only if the row is still at
        ``expected_version``.

        One UPDATE statement matches on id and version and bumps the
        version, so of two writers holding the same version exactly one
        matches a row.

        Returns:
            True if this call wrote the row, False if someone else did first
        """
        result = await self.db.execute(
            update(self.model)
            .where(self.model.id == id, self.model.version == expected_version)
            .values(version=expected_version + 1, updated_at=datetime.utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()
        return result.rowcount == 1

    async def delete(self, entity: T) -> None:
        await self.db.delete(entity)
        await self.db.flush()
