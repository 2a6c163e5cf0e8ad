"""
Feed repository.

Posting checks the author exists; reads are newest first.
"""

import logging

from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.users import UserRepository
from app.shared.exceptions import NotFoundError, ValidationError
from app.shared.repository import BaseRepository
from .models import FeedMessage

logger = logging.getLogger(__name__)


class FeedRepository(BaseRepository[FeedMessage]):
    """Repository for feed messages."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, FeedMessage)
        self.users = UserRepository(db)

    async def post(self, owner_id: str, message: str) -> FeedMessage:
        """
        Add a message to the owner's feed.

        Raises:
            ValidationError: If the message is blank
            NotFoundError: If the owner does not exist
        """
        if not message or not message.strip():
            raise ValidationError("Message cannot be empty", field="message")
        if await self.users.get_by_id(owner_id) is None:
            raise NotFoundError("user", owner_id)

        entry = await self.create(owner_id=owner_id, message=message.strip())
        logger.info(f"Feed message {entry.id} posted by user {owner_id}")
        return entry

    async def get_for_owner(self, owner_id: str, limit: int = 50) -> list[FeedMessage]:
        """Owner's messages, newest first."""
        result = await self.db.execute(
            self._select(owner_id=owner_id)
            .order_by(desc(FeedMessage.created_at))
            .limit(limit)
        )
        return list(result.scalars().all())
