"""
Conversation and turn models for assistant conversations.

A conversation is an append-only transcript owned by one user. Its turns
carry an explicit ``position`` so that conversational order never depends on
timestamps or on insertion order of rows.
"""

import enum

from sqlalchemy import Column, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class TurnRole(str, enum.Enum):
    """Author of a turn."""

    USER = "user"
    MODEL = "model"


class Conversation(BaseModel):
    """
    Represents a single conversation with the assistant.

    :ivar owner_id: Identifier of the user who created the conversation.
    :type owner_id: str
    :ivar idempotency_key: Optional client token used to deduplicate retried creations.
    :type idempotency_key: str
    """

    __tablename__ = "conversations"
    __table_args__ = (
        UniqueConstraint("owner_id", "idempotency_key", name="uq_conversations_owner_idempotency_key"),
    )

    owner_id = Column(String(255), nullable=False, index=True)
    idempotency_key = Column(String(255), nullable=True)

    turns = relationship(
        "ConversationTurn",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="ConversationTurn.position",
    )


class ConversationTurn(BaseModel):
    """
    Represents one message in a conversation.
    """

    __tablename__ = "conversation_turns"
    __table_args__ = (UniqueConstraint("conversation_id", "position", name="uq_conversation_turns_position"),)

    conversation_id = Column(UUID(), ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    role = Column(
        Enum(TurnRole, name="turnrole", values_callable=lambda roles: [role.value for role in roles]),
        nullable=False,
    )
    content = Column(Text, nullable=False)
    attachment = Column(Text, nullable=True)  # image URL, user turns only

    conversation = relationship("Conversation", back_populates="turns")
