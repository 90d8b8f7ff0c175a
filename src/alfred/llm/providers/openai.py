from collections.abc import AsyncIterator
from typing import Any

from openai import AsyncOpenAI

from ...config import DEFAULT_CHAT_MODEL
from ..base import LLMProvider
from ..models import ChatMessage, CompletionDelta, StreamingResponse


class OpenAIProvider(LLMProvider):
    """OpenAI LLM provider implementation.

    Hidden design decisions:
    - OpenAI API client initialization
    - Message format conversion
    - Function declaration wire format (legacy `functions` parameter,
      which is what allows `function` role messages in the history)
    - Authentication mechanism
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_CHAT_MODEL,
        base_url: str | None = None,
        organization: str | None = None,
        **client_kwargs: Any
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Default model to use
            base_url: Optional custom API base URL
            organization: Optional organization ID
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            organization=organization,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        functions: list[dict[str, Any]] | None = None,
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Generate a streaming chat completion using OpenAI.

        Args:
            messages: Conversation history
            functions: Function declarations the model may call
            model: Model to use (overrides default)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **kwargs: Additional OpenAI-specific parameters

        Returns:
            StreamingResponse that yields CompletionDelta items
        """
        request_params: dict[str, Any] = {
            "model": model or self._model,
            "messages": [msg.to_api_dict() for msg in messages],
            "temperature": temperature,
            "stream": True,
            "stream_options": {"include_usage": True},
            **kwargs,
        }
        if functions:
            request_params["functions"] = functions
        if max_tokens is not None:
            request_params["max_tokens"] = max_tokens

        response = StreamingResponse(self._chat_stream_generator(request_params))
        self._current_stream_response = response
        return response

    async def _chat_stream_generator(
        self,
        request_params: dict[str, Any],
    ) -> AsyncIterator[CompletionDelta]:
        """Internal generator for Chat Completions streaming with usage capture."""
        stream = await self._client.chat.completions.create(**request_params)

        async for chunk in stream:
            # Usage arrives on a final chunk with no choices
            if getattr(chunk, "usage", None) is not None:
                self._current_stream_response.set_usage({
                    "prompt_tokens": chunk.usage.prompt_tokens,
                    "completion_tokens": chunk.usage.completion_tokens,
                    "total_tokens": chunk.usage.total_tokens,
                })
            if not chunk.choices:
                continue

            choice = chunk.choices[0]
            delta = choice.delta
            function_call = getattr(delta, "function_call", None)

            yield CompletionDelta(
                content=delta.content or None,
                function_name=getattr(function_call, "name", None) if function_call else None,
                function_arguments=getattr(function_call, "arguments", None) if function_call else None,
                finish_reason=choice.finish_reason,
            )

    async def close(self) -> None:
        """Close the OpenAI client.

        Note: Uses the OpenAI SDK's async context manager for proper cleanup.
        See: https://github.com/openai/openai-python#async-usage
        """
        await self._client.close()
