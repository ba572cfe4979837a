"""Conversation-related exceptions."""

from typing import Any

from .base import NotFoundError, ServiceUnavailableError


class ConversationNotFoundError(NotFoundError):
    """Raised when a conversation does not exist or is owned by someone else."""

    def __init__(self, message: str = "Conversation not found"):
        super().__init__(message=message, error_code="CONVERSATION_NOT_FOUND")


class StorageFailureError(ServiceUnavailableError):
    """Raised when a durable write could not be committed."""

    def __init__(self, message: str = "Storage write failed", details: dict[str, Any] | None = None):
        super().__init__(message=message, error_code="STORAGE_FAILURE", details=details)


class ConversationCreationError(ServiceUnavailableError):
    """Raised when starting a conversation did not complete.

    ``details["stage"]`` is ``"store"`` when nothing was written and
    ``"index"`` when the transcript exists but its summary does not.
    """

    def __init__(self, message: str = "Error creating chat", stage: str = "store"):
        super().__init__(message=message, error_code="CONVERSATION_CREATION_FAILED", details={"stage": stage})
        self.stage = stage
