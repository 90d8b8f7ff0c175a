"""Data models for conversation state.

Model-state is a tuple of ConversationEntry; UI-state is a tuple of
UITurn. Both are only ever replaced wholesale, never edited in place.
"""

from dataclasses import dataclass, field
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from ..llm.models import ChatMessage
from ..ui.handle import StreamableHandle

Role = Literal["user", "assistant", "system", "function"]


class ConversationEntry(BaseModel):
    """One entry of the model-facing conversation history."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    name: str | None = Field(default=None, description="Function name for 'function' entries")
    id: str | None = Field(default_factory=lambda: uuid4().hex, description="Internal id, never sent")

    def to_model_message(self) -> dict[str, Any]:
        """Project onto the fields the model reads: role, content and name."""
        message: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.name is not None:
            message["name"] = self.name
        return message

    def to_chat_message(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.content, name=self.name)

    @classmethod
    def from_model_message(cls, message: dict[str, Any]) -> "ConversationEntry":
        return cls(
            role=message["role"],
            content=message["content"],
            name=message.get("name"),
            id=None,
        )


@dataclass
class UITurn:
    """A renderable turn: creation time in milliseconds plus its live handle."""

    id: int
    display: StreamableHandle
    execution_trace: list[dict[str, Any]] = field(default_factory=list, repr=False)
