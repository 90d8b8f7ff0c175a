"""
Alfred: a housing-policy research chat assistant.

Answers questions with retrieval-augmented context from a vector index,
and can call out to the Federal Register, FRED and Google Custom Search
while streaming its reply into a live UI handle.
"""

__version__ = "0.1.0"

from .chat import ChatOrchestrator
from .config import Settings
from .errors import AlfredError
from .functions import FunctionRegistry, create_function_registry
from .session import ChatSession, ConversationEntry, UITurn
from .ui import StreamableHandle

__all__ = [
    "AlfredError",
    "ChatOrchestrator",
    "ChatSession",
    "ConversationEntry",
    "FunctionRegistry",
    "Settings",
    "StreamableHandle",
    "UITurn",
    "create_function_registry",
]
