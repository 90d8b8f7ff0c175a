"""Conversation session: model-state and UI-state logs."""

from .models import ConversationEntry, Role, UITurn
from .session import ChatSession

__all__ = [
    "ChatSession",
    "ConversationEntry",
    "Role",
    "UITurn",
]
