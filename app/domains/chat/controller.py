"""Conversation API controller with FastAPI endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Request

from app.core.dependencies import get_conversation_service, get_current_owner_id, validate_token
from app.domains.chat.service import ConversationService
from app.schemas.base import ResponseSchema
from app.schemas.conversation import (
    ContinueConversationRequest,
    ContinueConversationResponse,
    ConversationListResponse,
    ConversationResponse,
    ConversationSummaryResponse,
    StartConversationRequest,
    StartConversationResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["chats"],
    dependencies=[Depends(validate_token)],
)


@router.post("/chats", response_model=ResponseSchema, status_code=201)
async def start_conversation(
    _request: Request,
    chat_request: StartConversationRequest = Body(...),
    owner_id: str = Depends(get_current_owner_id),
    service: ConversationService = Depends(get_conversation_service),
):
    """Start a conversation from the user's first message.

    Returns:
        The new conversation id
    """
    conversation_id = await service.start_conversation(
        owner_id,
        chat_request.text,
        attachment=chat_request.img,
        idempotency_key=chat_request.idempotency_key,
    )

    return ResponseSchema(
        status="success",
        message="Conversation created successfully",
        data=StartConversationResponse(conversation_id=conversation_id).model_dump(mode="json"),
    )


@router.get("/userchats", response_model=ResponseSchema)
async def list_conversations(
    _request: Request,
    owner_id: str = Depends(get_current_owner_id),
    service: ConversationService = Depends(get_conversation_service),
):
    """List the current user's conversations, oldest first."""
    summaries = await service.list_conversations(owner_id)

    result = ConversationListResponse(
        conversations=[ConversationSummaryResponse.model_validate(summary) for summary in summaries],
        total=len(summaries),
    )
    return ResponseSchema(
        status="success",
        message="Conversations retrieved successfully",
        data=result.model_dump(mode="json"),
    )


@router.get("/chats/{conversation_id}", response_model=ResponseSchema)
async def get_conversation(
    _request: Request,
    conversation_id: UUID = Path(..., description="Conversation ID"),
    owner_id: str = Depends(get_current_owner_id),
    service: ConversationService = Depends(get_conversation_service),
):
    """Get a conversation with all its turns."""
    conversation = await service.get_conversation(conversation_id, owner_id)

    return ResponseSchema(
        status="success",
        message="Conversation retrieved successfully",
        data=ConversationResponse.model_validate(conversation).model_dump(mode="json"),
    )


@router.put("/chats/{conversation_id}", response_model=ResponseSchema)
async def continue_conversation(
    _request: Request,
    conversation_id: UUID = Path(..., description="Conversation ID"),
    chat_request: ContinueConversationRequest = Body(...),
    owner_id: str = Depends(get_current_owner_id),
    service: ConversationService = Depends(get_conversation_service),
):
    """Append a question/answer exchange to a conversation."""
    appended = await service.continue_conversation(
        conversation_id,
        owner_id,
        chat_request.question,
        chat_request.answer,
        attachment=chat_request.img,
    )
    logger.debug("Appended %d turns to conversation %s", appended, conversation_id)

    return ResponseSchema(
        status="success",
        message="Conversation updated successfully",
        data=ContinueConversationResponse(conversation_id=conversation_id, appended=appended).model_dump(
            mode="json"
        ),
    )
