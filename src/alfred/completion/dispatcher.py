"""Completion dispatcher.

Wraps one streaming completion request and demultiplexes its deltas into
text events and function-call events. Consumers either iterate
`events()` directly or register callbacks and call `run()`.

State machine per stream:

    IDLE -> STREAMING -> FINALIZING -> DONE

Text is accumulated while STREAMING. The first function-call fragment
switches the stream to call mode: text callbacks stop and the final text
event is never sent, so a stream produces a final text or function
calls, not both. Calls are assembled from their fragments and validated
in FINALIZING, then delivered in the order they were emitted.
"""

import inspect
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from ..config import DEFAULT_TEMPERATURE
from ..errors import SchemaValidationError, StreamError, UnknownFunctionError
from ..functions import FunctionCallRequest, FunctionRegistry
from ..functions.base import DebugCallback
from ..llm import ChatMessage, LLMProvider
from .models import DispatcherState, FunctionCallEvent, TextDelta

TextCallback = Callable[[str, bool], Awaitable[None] | None]
FunctionHandler = Callable[[FunctionCallRequest], Awaitable[None] | None]
FunctionErrorCallback = Callable[[str, Exception], Awaitable[None] | None]

Event = TextDelta | FunctionCallEvent


async def _call(callback: Callable[..., Any], *args: Any) -> None:
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


class CompletionDispatcher:
    """One streaming completion, exposed as events or subscriptions."""

    def __init__(
        self,
        llm: LLMProvider,
        registry: FunctionRegistry,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        """Initialize the dispatcher. Nothing is sent until iteration starts.

        Args:
            llm: LLM provider to stream from
            registry: Declared functions, used for specs and validation
            messages: Full prompt, system message first
            model: Model override (None uses the provider default)
            temperature: Sampling temperature
        """
        self._llm = llm
        self._registry = registry
        self._messages = messages
        self._model = model
        self._temperature = temperature

        self._state = DispatcherState.IDLE
        self._usage: dict[str, Any] | None = None
        self._text_callbacks: list[TextCallback] = []
        self._function_handlers: dict[str, FunctionHandler] = {}
        self._error_callbacks: list[FunctionErrorCallback] = []
        self._debug_callback: DebugCallback | None = None

    @property
    def state(self) -> DispatcherState:
        return self._state

    @property
    def usage(self) -> dict[str, Any] | None:
        """Token usage reported by the provider, once the stream is done."""
        return self._usage

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Dispatcher", message)

    def on_text_content(self, callback: TextCallback) -> None:
        """Subscribe to text: called with the cumulative text on every delta,
        then once more with `is_final=True` when the stream ends."""
        self._text_callbacks.append(callback)

    def on_function_call(self, name: str, handler: FunctionHandler) -> None:
        """Subscribe to validated calls of one declared function.

        Raises:
            UnknownFunctionError: If `name` is not a declared function
        """
        self._function_handlers[self._registry.get(name).name] = handler

    def on_function_error(self, callback: FunctionErrorCallback) -> None:
        """Subscribe to calls that named an unknown function or failed validation."""
        self._error_callbacks.append(callback)

    async def events(self) -> AsyncIterator[Event]:
        """Open the stream and yield events in stream order.

        Raises:
            RuntimeError: If the dispatcher was already started
            StreamError: If the provider fails to open or continue the stream
        """
        if self._state is not DispatcherState.IDLE:
            raise RuntimeError("A dispatcher can only be run once")
        self._state = DispatcherState.STREAMING

        text = ""
        calls: dict[int, tuple[list[str], list[str]]] = {}

        try:
            stream = await self._llm.chat_completion_stream(
                self._messages,
                functions=self._registry.specs(),
                model=self._model,
                temperature=self._temperature,
            )
            async for delta in stream:
                if delta.is_function_call:
                    if not calls:
                        self._debug("debug", "Function call started, text output suppressed")
                    name_parts, arg_parts = calls.setdefault(delta.function_index, ([], []))
                    if delta.function_name:
                        name_parts.append(delta.function_name)
                    if delta.function_arguments:
                        arg_parts.append(delta.function_arguments)
                elif delta.content and not calls:
                    text += delta.content
                    yield TextDelta(content=text, delta=delta.content)
            self._usage = stream.usage
        except Exception as e:
            self._state = DispatcherState.DONE
            raise StreamError(f"Completion stream failed: {e}") from e

        self._state = DispatcherState.FINALIZING
        if calls:
            for name_parts, arg_parts in calls.values():
                yield self._resolve_call("".join(name_parts), "".join(arg_parts))
        else:
            yield TextDelta(content=text, delta="", is_final=True)
        self._state = DispatcherState.DONE

    def _resolve_call(self, name: str, arguments: str) -> FunctionCallEvent:
        try:
            request = self._registry.validate(name, arguments)
        except (UnknownFunctionError, SchemaValidationError) as e:
            self._debug("warning", f"Rejected call to '{name}': {e}")
            return FunctionCallEvent(name=name, error=e)
        self._debug("info", f"Function call: {name}")
        return FunctionCallEvent(name=name, request=request)

    async def run(self) -> None:
        """Drive the stream to completion, dispatching to subscribers in order.

        Raises:
            StreamError: If the stream fails
        """
        async for event in self.events():
            if isinstance(event, TextDelta):
                for callback in self._text_callbacks:
                    await _call(callback, event.content, event.is_final)
            elif not event.ok:
                for callback in self._error_callbacks:
                    await _call(callback, event.name, event.error)
            else:
                handler = self._function_handlers.get(event.request.name.value)
                if handler is None:
                    self._debug("warning", f"No handler subscribed for '{event.name}'")
                    continue
                await _call(handler, event.request)
