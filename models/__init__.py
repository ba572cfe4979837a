"""
Models package initialization.
"""

from .base import Base, BaseModel
from .conversation import Conversation, ConversationTurn, TurnRole
from .user_index import ConversationSummary, UserIndex

__all__ = [
    "Base",
    "BaseModel",
    "Conversation",
    "ConversationTurn",
    "TurnRole",
    "UserIndex",
    "ConversationSummary",
]
