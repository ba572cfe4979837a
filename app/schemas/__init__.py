# ruff: noqa: F403, F401
"""Schemas package initialization."""

# Import all schemas to ensure they're registered
from .base import *
from .conversation import *
from .conversation import ConversationListResponse, ConversationResponse

# Rebuild models after all schemas are loaded
ConversationResponse.model_rebuild()
ConversationListResponse.model_rebuild()
