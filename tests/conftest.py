"""Pytest configuration and shared fixtures."""
import json
import os
from collections.abc import Callable
from typing import Any

import httpx
import numpy as np
import pytest

from alfred.functions import create_function_registry
from alfred.llm import ChatMessage, CompletionDelta, LLMProvider, StreamingResponse
from alfred.retrieval import RetrievedDocument, Retriever

UNRATE_OBSERVATIONS = [
    {"realtime_start": "2024-03-01", "realtime_end": "2024-03-01", "date": "2023-11-01", "value": "3.7"},
    {"realtime_start": "2024-03-01", "realtime_end": "2024-03-01", "date": "2023-12-01", "value": "3.7"},
    {"realtime_start": "2024-03-01", "realtime_end": "2024-03-01", "date": "2024-01-01", "value": "3.7"},
    {"realtime_start": "2024-03-01", "realtime_end": "2024-03-01", "date": "2024-02-01", "value": "3.9"},
]


class ScriptedLLM(LLMProvider):
    """LLM provider that replays scripted streams, one per request.

    A script is a list of CompletionDelta; an Exception item is raised
    at that point of the stream.
    """

    def __init__(self, *scripts: list[Any]):
        self._scripts = list(scripts)
        self.requests: list[dict[str, Any]] = []
        self.closed = False

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        functions: list[dict[str, Any]] | None = None,
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        self.requests.append({
            "messages": list(messages),
            "functions": functions,
            "model": model,
            "temperature": temperature,
        })
        script = self._scripts.pop(0)
        response = StreamingResponse(self._replay(script))
        self._response = response
        return response

    async def _replay(self, script: list[Any]):
        for item in script:
            if isinstance(item, Exception):
                raise item
            yield item
        self._response.set_usage({"prompt_tokens": 10, "completion_tokens": len(script), "total_tokens": 10 + len(script)})

    async def close(self) -> None:
        self.closed = True


class StaticRetriever(Retriever):
    """Retriever returning fixed documents, or raising `error` if given."""

    def __init__(self, documents: list[RetrievedDocument] | None = None, error: Exception | None = None):
        self.documents = documents or []
        self.error = error
        self.queries: list[str] = []
        self.closed = False

    async def embed(self, text: str):
        return np.zeros(3, dtype=np.float32)

    async def query_nearest(self, text: str) -> list[RetrievedDocument]:
        self.queries.append(text)
        if self.error is not None:
            raise self.error
        return self.documents

    async def close(self) -> None:
        self.closed = True


def text_deltas(*parts: str) -> list[CompletionDelta]:
    """Script a plain text reply."""
    return [CompletionDelta(content=part) for part in parts] + [CompletionDelta(finish_reason="stop")]


def function_call_deltas(name: str, arguments: dict[str, Any] | str, index: int = 0, chunk: int = 7) -> list[CompletionDelta]:
    """Script one function call, with the arguments streamed in small slices."""
    raw = arguments if isinstance(arguments, str) else json.dumps(arguments)
    deltas = [CompletionDelta(function_name=name, function_arguments="", function_index=index)]
    deltas += [
        CompletionDelta(function_arguments=raw[i:i + chunk], function_index=index)
        for i in range(0, len(raw), chunk)
    ]
    return deltas


class RecordingTransport:
    """httpx MockTransport handler that records requests and routes by host."""

    def __init__(self, routes: dict[str, Callable[[httpx.Request], httpx.Response]] | None = None):
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.host)
        if route is None:
            return httpx.Response(404, json={"error": "no route"})
        return route(request)


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "openai": os.getenv("OPENAI_API_KEY"),
        "fred": os.getenv("FRED_API_KEY"),
    }


@pytest.fixture
def transport():
    """Routes for the three external data APIs with canned responses."""
    return RecordingTransport({
        "api.stlouisfed.org": lambda request: httpx.Response(
            200, json={"observations": UNRATE_OBSERVATIONS}
        ),
        "www.federalregister.gov": lambda request: httpx.Response(
            200,
            json={
                "count": 1,
                "results": [{
                    "title": "Truth in Lending (Regulation Z)",
                    "publication_date": "2024-03-15",
                    "document_number": "2024-05555",
                    "html_url": "https://www.federalregister.gov/d/2024-05555",
                    "type": "Rule",
                }],
            },
        ),
        "www.googleapis.com": lambda request: httpx.Response(
            200,
            json={
                "searchInformation": {"formattedTotalResults": "1"},
                "items": [{
                    "title": "Homeownership rate",
                    "link": "https://example.org/h",
                    "displayLink": "example.org",
                    "snippet": "The rate rose.",
                }],
            },
        ),
    })


@pytest.fixture
def registry(transport):
    """Function registry wired to the mock transport."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
    return create_function_registry(
        fred_api_key="fred-test-key",
        google_api_key="google-test-key",
        google_cse_id="engine-123",
        client=client,
    )
