"""Conversation service: orchestrates the conversation store and index."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.domains.chat.index import ConversationIndex
from app.domains.chat.store import ConversationStore
from app.exceptions.conversation import ConversationCreationError, StorageFailureError
from app.schemas.conversation import TurnCreate
from models.conversation import Conversation, TurnRole
from models.user_index import ConversationSummary

logger = logging.getLogger(__name__)


def truncate_title(text: str, max_length: int | None = None) -> str:
    """Cut ``text`` to the conversation title length. No ellipsis is added."""
    return text[: max_length or settings.conversation_title_max_length]


def build_exchange_turns(question: str | None, answer: str, attachment: str | None = None) -> list[TurnCreate]:
    """Build the turns for one question/answer exchange.

    A missing or empty question yields only the model turn; the attachment
    travels with the question and is dropped when there is none.
    """
    turns = []
    if question:
        turns.append(TurnCreate(role=TurnRole.USER, content=question, attachment=attachment or None))
    turns.append(TurnCreate(role=TurnRole.MODEL, content=answer))
    return turns


class ConversationService:
    """Service class for conversation operations.

    Starting a conversation writes two independent records: the transcript
    (store) and then its summary (index). The store is always written first,
    so a summary can never reference a missing conversation. If the index
    write fails the transcript is left in place and the failure is reported
    to the caller.
    """

    def __init__(
        self,
        db: AsyncSession,
        store: ConversationStore | None = None,
        index: ConversationIndex | None = None,
    ):
        """Initialize conversation service with database session.

        Args:
            db: Async database session for data operations.
            store: Conversation store, defaults to one bound to ``db``.
            index: Conversation index, defaults to one bound to ``db``.
        """
        self.db = db
        self.store = store if store is not None else ConversationStore(db)
        self.index = index if index is not None else ConversationIndex(db)

    async def start_conversation(
        self,
        owner_id: str,
        text: str,
        attachment: str | None = None,
        idempotency_key: str | None = None,
    ) -> UUID:
        """Create a conversation from its first user message and index it.

        Args:
            owner_id: Identifier of the authenticated user
            text: First user message; its first characters become the title
            attachment: Optional image URL for the first message
            idempotency_key: Optional client token making retries safe

        Returns:
            The new conversation id

        Raises:
            ConversationCreationError: If either write failed
        """
        try:
            conversation_id = await self.store.create_conversation(
                owner_id, text, attachment=attachment, idempotency_key=idempotency_key
            )
        except StorageFailureError as e:
            raise ConversationCreationError(stage="store") from e

        if idempotency_key:
            # A reused key keeps the title of the first turn actually stored
            text = await self.store.get_first_turn_text(conversation_id, owner_id)
        title = truncate_title(text)

        try:
            await self.index.ensure_and_append_summary(owner_id, conversation_id, title)
        except StorageFailureError as e:
            logger.warning(
                "Conversation %s of owner %s was stored but could not be indexed",
                conversation_id,
                owner_id,
            )
            raise ConversationCreationError(stage="index") from e

        return conversation_id

    async def continue_conversation(
        self,
        conversation_id: UUID,
        owner_id: str,
        question: str | None,
        answer: str,
        attachment: str | None = None,
    ) -> int:
        """Append a question/answer exchange to an owned conversation.

        The summary is not touched: titles never change after creation.

        Returns:
            Number of turns appended (1 or 2)

        Raises:
            ConversationNotFoundError: If the conversation is missing or not owned
        """
        turns = build_exchange_turns(question, answer, attachment)
        return await self.store.append_turns(conversation_id, owner_id, turns)

    async def list_conversations(self, owner_id: str) -> list[ConversationSummary]:
        """List the owner's conversation summaries in creation order."""
        return await self.index.list_summaries(owner_id)

    async def get_conversation(self, conversation_id: UUID, owner_id: str) -> Conversation:
        """Get an owned conversation transcript."""
        return await self.store.get_conversation(conversation_id, owner_id)
