"""Conversation index: per-user ordered list of conversation summaries."""

import logging
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from tenacity import AsyncRetrying, before_sleep_log, retry_if_exception_type, stop_after_attempt

from app.core.config import settings
from app.database import dialect_insert
from app.exceptions.conversation import StorageFailureError
from models.base import utcnow
from models.user_index import ConversationSummary, UserIndex

logger = logging.getLogger(__name__)


class ConversationIndex:
    """Owns each user's conversation index."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def ensure_and_append_summary(self, owner_id: str, conversation_id: UUID, title: str) -> ConversationSummary:
        """Append a summary to the owner's index, creating the index on first use.

        The index row is written with a single ``INSERT ... ON CONFLICT DO
        UPDATE``, so concurrent first use by the same owner cannot produce two
        indexes, and the row stays locked until the summary is committed.
        Appending a conversation that is already indexed returns the existing
        summary unchanged.

        Raises:
            StorageFailureError: If the write could not be committed
        """
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(IntegrityError),
                stop=stop_after_attempt(settings.append_max_retries),
                before_sleep=before_sleep_log(logger, logging.WARNING),
                reraise=True,
            ):
                with attempt:
                    summary = await self._append_summary_once(owner_id, conversation_id, title)
        except IntegrityError as e:
            logger.error(f"Gave up indexing conversation {conversation_id}: {str(e)}")
            raise StorageFailureError(
                "Failed to update conversation index",
                details={"attempts": settings.append_max_retries},
            ) from e

        return summary

    async def list_summaries(self, owner_id: str) -> list[ConversationSummary]:
        """List the owner's summaries in creation order; empty when the owner has no index yet."""
        query = (
            select(ConversationSummary)
            .where(ConversationSummary.owner_id == owner_id)
            .order_by(ConversationSummary.position)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    # Private helper methods

    async def _upsert_index(self, owner_id: str) -> None:
        now = utcnow()
        stmt = dialect_insert(self.db, UserIndex.__table__).values(owner_id=owner_id, created_at=now, updated_at=now)
        stmt = stmt.on_conflict_do_update(index_elements=["owner_id"], set_={"updated_at": now})
        await self.db.execute(stmt)

    async def _get_summary(self, conversation_id: UUID) -> ConversationSummary | None:
        query = select(ConversationSummary).where(ConversationSummary.conversation_id == conversation_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _next_position(self, owner_id: str) -> int:
        query = select(func.coalesce(func.max(ConversationSummary.position) + 1, 0)).where(
            ConversationSummary.owner_id == owner_id
        )
        result = await self.db.execute(query)
        return result.scalar_one()

    async def _append_summary_once(self, owner_id: str, conversation_id: UUID, title: str) -> ConversationSummary:
        try:
            await self._upsert_index(owner_id)

            summary = await self._get_summary(conversation_id)
            if summary is None:
                summary = ConversationSummary(
                    owner_id=owner_id,
                    conversation_id=conversation_id,
                    position=await self._next_position(owner_id),
                    title=title,
                )
                self.db.add(summary)
            await self.db.commit()
            return summary
        except IntegrityError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to index conversation {conversation_id}: {str(e)}")
            raise StorageFailureError("Failed to update conversation index") from e
