"""Conversation schemas for request/response serialization."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from models.conversation import TurnRole

from .base import BaseSchema


class TurnCreate(BaseSchema):
    """A turn to be appended to a conversation."""

    role: TurnRole
    content: str
    attachment: str | None = Field(None, description="Image URL, user turns only")


class TurnResponse(BaseSchema):
    """Schema for a stored turn."""

    position: int
    role: TurnRole
    content: str
    attachment: str | None = None
    created_at: datetime | None = None


class ConversationResponse(BaseSchema):
    """Schema for a full conversation transcript."""

    id: UUID
    owner_id: str
    turns: list[TurnResponse] = Field(default=[], description="Turns in conversational order")
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ConversationSummaryResponse(BaseSchema):
    """Schema for an entry of the user's conversation list."""

    conversation_id: UUID
    title: str


class ConversationListResponse(BaseSchema):
    """Schema for the user's conversation list, in creation order."""

    conversations: list[ConversationSummaryResponse]
    total: int


class StartConversationRequest(BaseSchema):
    """Schema for starting a conversation with its first user message."""

    text: str = Field(..., min_length=1, max_length=10000, description="First user message")
    img: str | None = Field(None, max_length=2048, description="Optional image URL")
    idempotency_key: str | None = Field(
        None,
        min_length=1,
        max_length=255,
        description="Client token; retries with the same token return the same conversation",
    )

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message text cannot be blank")
        return v


class StartConversationResponse(BaseSchema):
    """Schema for a newly started conversation."""

    conversation_id: UUID


class ContinueConversationRequest(BaseSchema):
    """Schema for appending a question/answer exchange.

    An empty or missing ``question`` appends only the model's answer, e.g. a
    regenerated reply with no new user input.
    """

    question: str | None = Field(None, max_length=10000, description="User question")
    answer: str = Field(..., min_length=1, description="Model answer")
    img: str | None = Field(None, max_length=2048, description="Optional image URL for the question")


class ContinueConversationResponse(BaseSchema):
    """Schema acknowledging an append."""

    conversation_id: UUID
    appended: int = Field(..., description="Number of turns appended")


class UploadAuthResponse(BaseSchema):
    """Signed parameters for a client-side image upload."""

    token: str
    expire: int
    signature: str
