"""Conversation store: persistence of conversation transcripts."""

import logging
import uuid
from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from tenacity import AsyncRetrying, before_sleep_log, retry_if_exception_type, stop_after_attempt

from app.core.config import settings
from app.exceptions.conversation import ConversationNotFoundError, StorageFailureError
from app.schemas.conversation import TurnCreate
from models.base import utcnow
from models.conversation import Conversation, ConversationTurn, TurnRole

logger = logging.getLogger(__name__)


class ConversationStore:
    """Owns conversation transcripts.

    Every lookup is scoped by ``owner_id``: a conversation that does not exist
    and one that belongs to another user are reported identically, as
    ``ConversationNotFoundError``.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_conversation(
        self,
        owner_id: str,
        first_user_text: str,
        attachment: str | None = None,
        idempotency_key: str | None = None,
    ) -> UUID:
        """Persist a new conversation holding a single user turn.

        Args:
            owner_id: Identifier of the creating user
            first_user_text: Text of the mandatory first turn
            attachment: Optional image URL for the first turn
            idempotency_key: Optional client token; a conversation already
                created with the same token is returned instead of a new one

        Returns:
            The conversation id

        Raises:
            StorageFailureError: If the write could not be committed
        """
        if idempotency_key:
            existing_id = await self._get_id_by_idempotency_key(owner_id, idempotency_key)
            if existing_id:
                logger.info("Reusing conversation %s for idempotency key", existing_id)
                return existing_id

        conversation_id = uuid.uuid4()
        conversation = Conversation(
            id=conversation_id,
            owner_id=owner_id,
            idempotency_key=idempotency_key,
            turns=[
                ConversationTurn(
                    position=0,
                    role=TurnRole.USER,
                    content=first_user_text,
                    attachment=attachment,
                )
            ],
        )

        try:
            self.db.add(conversation)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if idempotency_key:
                # A concurrent request with the same key won the insert
                existing_id = await self._get_id_by_idempotency_key(owner_id, idempotency_key)
                if existing_id:
                    return existing_id
            logger.error(f"Failed to create conversation: {str(e)}")
            raise StorageFailureError("Failed to create conversation") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to create conversation: {str(e)}")
            raise StorageFailureError("Failed to create conversation") from e

        logger.info("Created conversation %s", conversation_id)
        return conversation_id

    async def append_turns(self, conversation_id: UUID, owner_id: str, turns: Sequence[TurnCreate]) -> int:
        """Append ``turns``, in order, to an owned conversation.

        All turns are written in one transaction, so either every turn is
        appended or none is. A transaction that loses a race for the next
        position is rolled back and retried up to
        ``settings.append_max_retries`` times.

        Returns:
            Number of turns appended

        Raises:
            ConversationNotFoundError: If no conversation matches (id, owner)
            StorageFailureError: If the write could not be committed
        """
        if not turns:
            raise ValueError("At least one turn is required")

        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(IntegrityError),
                stop=stop_after_attempt(settings.append_max_retries),
                before_sleep=before_sleep_log(logger, logging.WARNING),
                reraise=True,
            ):
                with attempt:
                    await self._append_once(conversation_id, owner_id, turns)
        except IntegrityError as e:
            logger.error(f"Gave up appending to conversation {conversation_id}: {str(e)}")
            raise StorageFailureError(
                "Failed to add conversation",
                details={"attempts": settings.append_max_retries},
            ) from e

        return len(turns)

    async def get_conversation(self, conversation_id: UUID, owner_id: str) -> Conversation:
        """Get an owned conversation with its turns in conversational order."""
        query = (
            select(Conversation)
            .options(selectinload(Conversation.turns))
            .where(Conversation.id == conversation_id, Conversation.owner_id == owner_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        conversation = result.scalar_one_or_none()

        if not conversation:
            raise ConversationNotFoundError()

        return conversation

    async def get_first_turn_text(self, conversation_id: UUID, owner_id: str) -> str:
        """Get the text of the user turn an owned conversation was started with."""
        query = (
            select(ConversationTurn.content)
            .join(ConversationTurn.conversation)
            .where(
                Conversation.id == conversation_id,
                Conversation.owner_id == owner_id,
                ConversationTurn.position == 0,
            )
        )
        result = await self.db.execute(query)
        content = result.scalar_one_or_none()

        if content is None:
            raise ConversationNotFoundError()

        return content

    # Private helper methods

    async def _next_position(self, conversation_id: UUID) -> int:
        query = select(func.coalesce(func.max(ConversationTurn.position) + 1, 0)).where(
            ConversationTurn.conversation_id == conversation_id
        )
        result = await self.db.execute(query)
        return result.scalar_one()

    async def _get_id_by_idempotency_key(self, owner_id: str, idempotency_key: str) -> UUID | None:
        query = select(Conversation.id).where(
            Conversation.owner_id == owner_id, Conversation.idempotency_key == idempotency_key
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _append_once(self, conversation_id: UUID, owner_id: str, turns: Sequence[TurnCreate]) -> None:
        # The conditional update comes first: it checks ownership and locks the
        # conversation row until commit, serializing concurrent appends.
        try:
            touched = await self.db.execute(
                update(Conversation)
                .where(Conversation.id == conversation_id, Conversation.owner_id == owner_id)
                .values(updated_at=utcnow())
                .execution_options(synchronize_session=False)
            )
            if touched.rowcount == 0:
                await self.db.rollback()
                raise ConversationNotFoundError()

            start = await self._next_position(conversation_id)
            self.db.add_all(
                [
                    ConversationTurn(
                        conversation_id=conversation_id,
                        position=start + offset,
                        role=turn.role,
                        content=turn.content,
                        attachment=turn.attachment,
                    )
                    for offset, turn in enumerate(turns)
                ]
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to append turns to conversation {conversation_id}: {str(e)}")
            raise StorageFailureError("Failed to add conversation") from e
