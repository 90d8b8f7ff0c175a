"""Unit tests for the completion dispatcher."""
import pytest

from alfred.completion import CompletionDispatcher, DispatcherState, FunctionCallEvent, TextDelta
from alfred.errors import SchemaValidationError, StreamError, UnknownFunctionError
from alfred.functions import FunctionKind
from alfred.llm import ChatMessage, CompletionDelta

from conftest import ScriptedLLM, function_call_deltas, text_deltas

MESSAGES = [
    ChatMessage(role="system", content="You are ALFRED."),
    ChatMessage(role="user", content="What is the unemployment rate?"),
]

UNRATE_ARGS = {
    "series_id": "UNRATE",
    "observation_start": "2023-01-01",
    "observation_end": "2024-01-01",
}


def _dispatcher(registry, *scripts) -> tuple[CompletionDispatcher, ScriptedLLM]:
    llm = ScriptedLLM(*scripts)
    return CompletionDispatcher(llm=llm, registry=registry, messages=MESSAGES, temperature=1.2), llm


async def _collect(dispatcher: CompletionDispatcher) -> list:
    return [event async for event in dispatcher.events()]


class TestTextStreaming:
    """Tests for plain text replies."""

    @pytest.mark.asyncio
    async def test_cumulative_text_then_final(self, registry):
        """Test that each delta carries the text so far, then a final event."""
        dispatcher, _ = _dispatcher(registry, text_deltas("Hel", "lo", " world"))

        events = await _collect(dispatcher)

        assert [e.content for e in events] == ["Hel", "Hello", "Hello world", "Hello world"]
        assert [e.is_final for e in events] == [False, False, False, True]
        assert events[1].delta == "lo"
        assert dispatcher.state == DispatcherState.DONE

    @pytest.mark.asyncio
    async def test_request_declares_functions(self, registry):
        """Test that the request carries every declared function and the prompt."""
        dispatcher, llm = _dispatcher(registry, text_deltas("ok"))

        await _collect(dispatcher)

        request = llm.requests[0]
        assert request["messages"] == MESSAGES
        assert request["functions"] == registry.specs()
        assert request["temperature"] == 1.2

    @pytest.mark.asyncio
    async def test_usage_recorded(self, registry):
        """Test that provider usage is available after the stream."""
        dispatcher, _ = _dispatcher(registry, text_deltas("a", "b"))

        assert dispatcher.usage is None
        await _collect(dispatcher)

        assert dispatcher.usage["prompt_tokens"] == 10

    @pytest.mark.asyncio
    async def test_empty_stream_yields_empty_final(self, registry):
        """Test that a stream without content still ends with a final event."""
        dispatcher, _ = _dispatcher(registry, [CompletionDelta(finish_reason="stop")])

        events = await _collect(dispatcher)

        assert events == [TextDelta(content="", delta="", is_final=True)]


class TestFunctionCalls:
    """Tests for function-call assembly and validation."""

    @pytest.mark.asyncio
    async def test_fragments_assembled_into_one_call(self, registry):
        """Test that streamed argument slices are joined and validated."""
        script = function_call_deltas("getFredData", UNRATE_ARGS) + [
            CompletionDelta(finish_reason="function_call"),
        ]
        dispatcher, _ = _dispatcher(registry, script)

        events = await _collect(dispatcher)

        assert len(events) == 1
        event = events[0]
        assert isinstance(event, FunctionCallEvent)
        assert event.ok
        assert event.request.name == FunctionKind.GET_FRED_DATA
        assert event.request.arguments.observation_end == "2024-01-01"

    @pytest.mark.asyncio
    async def test_text_suppressed_after_function_call(self, registry):
        """A stream produces a final text or function calls, never both."""
        script = (
            [CompletionDelta(content="Let me check. ")]
            + function_call_deltas("getFredData", UNRATE_ARGS)
            + [CompletionDelta(content="ignored")]
        )
        dispatcher, _ = _dispatcher(registry, script)

        events = await _collect(dispatcher)

        text_events = [e for e in events if isinstance(e, TextDelta)]
        assert [e.content for e in text_events] == ["Let me check. "]
        assert not any(e.is_final for e in text_events)
        assert isinstance(events[-1], FunctionCallEvent)

    @pytest.mark.asyncio
    async def test_multiple_calls_in_emission_order(self, registry):
        """Test that several calls in one stream are delivered in index order."""
        script = (
            function_call_deltas("searchFederalRegisterDocuments", {"conditions[term]": "housing"}, index=0)
            + function_call_deltas("getFredData", UNRATE_ARGS, index=1)
        )
        dispatcher, _ = _dispatcher(registry, script)

        events = await _collect(dispatcher)

        assert [e.name for e in events] == ["searchFederalRegisterDocuments", "getFredData"]
        assert all(e.ok for e in events)

    @pytest.mark.asyncio
    async def test_schema_violation_reported(self, registry):
        """Test that invalid arguments surface as an error event."""
        args = {"series_id": "UNRATE", "observation_start": "2023-01-01"}
        dispatcher, _ = _dispatcher(registry, function_call_deltas("getFredData", args))

        events = await _collect(dispatcher)

        assert not events[0].ok
        assert events[0].request is None
        assert isinstance(events[0].error, SchemaValidationError)

    @pytest.mark.asyncio
    async def test_unknown_function_reported(self, registry):
        """Test that a hallucinated function name surfaces as an error event."""
        dispatcher, _ = _dispatcher(registry, function_call_deltas("getStockPrice", {"ticker": "X"}))

        events = await _collect(dispatcher)

        assert isinstance(events[0].error, UnknownFunctionError)
        assert events[0].name == "getStockPrice"


class TestFailures:
    """Tests for stream failures and misuse."""

    @pytest.mark.asyncio
    async def test_stream_error_wrapped(self, registry):
        """Test that a provider failure mid-stream raises StreamError."""
        script = [CompletionDelta(content="partial"), ConnectionResetError("peer reset")]
        dispatcher, _ = _dispatcher(registry, script)
        seen = []

        with pytest.raises(StreamError, match="peer reset"):
            async for event in dispatcher.events():
                seen.append(event)

        assert [e.content for e in seen] == ["partial"]
        assert dispatcher.state == DispatcherState.DONE

    @pytest.mark.asyncio
    async def test_run_only_once(self, registry):
        """Test that a dispatcher cannot be started twice."""
        dispatcher, _ = _dispatcher(registry, text_deltas("a"), text_deltas("b"))
        await dispatcher.run()

        with pytest.raises(RuntimeError, match="only be run once"):
            await dispatcher.run()


class TestSubscriptions:
    """Tests for the callback interface driven by run()."""

    @pytest.mark.asyncio
    async def test_text_callback(self, registry):
        """Test that text subscribers see each cumulative text and the final one."""
        dispatcher, _ = _dispatcher(registry, text_deltas("a", "b"))
        calls = []
        dispatcher.on_text_content(lambda content, is_final: calls.append((content, is_final)))

        await dispatcher.run()

        assert calls == [("a", False), ("ab", False), ("ab", True)]

    @pytest.mark.asyncio
    async def test_async_function_handler(self, registry):
        """Test that async handlers are awaited with the validated request."""
        dispatcher, _ = _dispatcher(registry, function_call_deltas("getFredData", UNRATE_ARGS))
        received = []

        async def handler(request):
            received.append(request)

        dispatcher.on_function_call("getFredData", handler)
        await dispatcher.run()

        assert len(received) == 1
        assert received[0].arguments.series_id == "UNRATE"

    @pytest.mark.asyncio
    async def test_error_callback(self, registry):
        """Test that rejected calls reach the error subscribers only."""
        dispatcher, _ = _dispatcher(registry, function_call_deltas("getFredData", "{not json"))
        handled, errors = [], []
        dispatcher.on_function_call("getFredData", handled.append)
        dispatcher.on_function_error(lambda name, error: errors.append((name, error)))

        await dispatcher.run()

        assert handled == []
        assert errors[0][0] == "getFredData"
        assert isinstance(errors[0][1], SchemaValidationError)

    def test_subscribing_to_unknown_function_raises(self, registry):
        """Test that handlers can only be registered for declared functions."""
        dispatcher, _ = _dispatcher(registry, text_deltas("a"))

        with pytest.raises(UnknownFunctionError):
            dispatcher.on_function_call("getWeather", lambda request: None)
