from collections.abc import AsyncIterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CompletionDelta(BaseModel):
    """One incremental piece of a streamed completion.

    A delta carries either a text fragment or a fragment of a function
    call (name and/or a slice of the JSON arguments string). Fragments of
    the same call share a `function_index`. The last delta of a choice
    carries the finish reason.
    """

    model_config = ConfigDict(frozen=True)

    content: str | None = None
    function_name: str | None = None
    function_arguments: str | None = None
    function_index: int = 0
    finish_reason: str | None = None

    @property
    def is_function_call(self) -> bool:
        return self.function_name is not None or self.function_arguments is not None


class StreamingResponse:
    """Wrapper for streaming LLM responses that captures usage info.

    Acts as an async iterator of CompletionDelta while storing token usage
    that becomes available at the end of the stream.

    Usage:
        stream = await provider.chat_completion_stream(messages)
        async for delta in stream:
            ...
        # After iteration, usage is available
        stream.usage  # {"prompt_tokens": 100, "completion_tokens": 50, ...}
    """

    def __init__(self, async_iter: AsyncIterator[CompletionDelta]):
        self._iter = async_iter
        self._usage: dict[str, Any] | None = None

    @property
    def usage(self) -> dict[str, Any] | None:
        """Get token usage info (available after iteration completes)."""
        return self._usage

    def set_usage(self, usage: dict[str, Any]) -> None:
        """Set token usage info (called by provider at end of stream)."""
        self._usage = usage

    def __aiter__(self) -> "StreamingResponse":
        return self

    async def __anext__(self) -> CompletionDelta:
        return await self._iter.__anext__()


class ChatMessage(BaseModel):
    """Represents a chat message sent to the model."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the sender: 'user', 'assistant', 'system' or 'function'")
    content: str = Field(description="Content of the message")
    name: str | None = Field(default=None, description="Function name for 'function' messages")

    def to_api_dict(self) -> dict[str, str]:
        """Convert to the provider wire format, omitting an unset name."""
        message = {"role": self.role, "content": self.content}
        if self.name is not None:
            message["name"] = self.name
        return message
