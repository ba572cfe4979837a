"""
Per-user conversation index models.

The index is what a client renders as its conversation list: one
``UserIndex`` row per owner and an ordered list of lightweight summaries,
so listing never has to load transcripts.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import UUID, Base, BaseModel, utcnow

TITLE_MAX_LENGTH = 40


class UserIndex(Base):
    """
    Represents the conversation index of a single owner.

    ``owner_id`` is the primary key, so a second index row for the same owner
    cannot exist.
    """

    __tablename__ = "user_indexes"

    owner_id = Column(String(255), primary_key=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    summaries = relationship(
        "ConversationSummary",
        back_populates="index",
        cascade="all, delete-orphan",
        order_by="ConversationSummary.position",
    )


class ConversationSummary(BaseModel):
    """
    Represents the (conversation id, title) entry of a conversation in its owner's index.
    """

    __tablename__ = "conversation_summaries"
    __table_args__ = (UniqueConstraint("owner_id", "position", name="uq_conversation_summaries_position"),)

    owner_id = Column(String(255), ForeignKey("user_indexes.owner_id", ondelete="CASCADE"), nullable=False)
    conversation_id = Column(UUID(), ForeignKey("conversations.id"), nullable=False, unique=True)
    position = Column(Integer, nullable=False)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)

    index = relationship("UserIndex", back_populates="summaries")
