"""Conversation orchestrator.

Drives one user submission end to end: retrieval, prompt construction,
the streaming completion and any function-call round trips, keeping
model-state and UI-state consistent throughout.
"""

import asyncio
import time
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from ..completion import CompletionDispatcher
from ..config import DEFAULT_TEMPERATURE
from ..errors import AlfredError, ExternalAPIError, RetrievalError
from ..functions import FunctionCallRequest, FunctionRegistry, FunctionResult
from ..functions.base import DebugCallback
from ..llm import ChatMessage, LLMProvider
from ..prompts import build_system_prompt
from ..retrieval import RetrievedDocument, Retriever
from ..session import ChatSession, ConversationEntry, UITurn
from ..ui import ErrorView, MarkdownView, SpinnerView, StreamableHandle, View


class ChatOrchestrator:
    """Conversation orchestrator for one chat session.

    Hidden design decisions:
    - Ordering of retrieval, prompt building and streaming
    - Which view a turn shows at each stage
    - How failures are turned into views and function-result entries
    """

    def __init__(
        self,
        llm: LLMProvider,
        registry: FunctionRegistry,
        retriever: Retriever | None = None,
        session: ChatSession | None = None,
        model: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
        system_prompt_builder: Callable[[str], str] = build_system_prompt,
    ):
        """Initialize the orchestrator.

        Args:
            llm: LLM provider for streaming completions
            registry: Functions declared to the model
            retriever: Retrieval client; None skips retrieval entirely
            session: Session holding both conversation logs (new one if omitted)
            model: Model override (None uses the provider default)
            temperature: Sampling temperature for every completion
            system_prompt_builder: Builds the system prompt from the context block
        """
        self._llm = llm
        self._registry = registry
        self._retriever = retriever
        self._session = session or ChatSession()
        self._model = model
        self._temperature = temperature
        self._build_system_prompt = system_prompt_builder
        self._debug_callback: DebugCallback | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def session(self) -> ChatSession:
        return self._session

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback
        self._registry.set_debug_callback(callback)

    def _debug(self, level: str, component: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, component, message)

    def submit(self, user_text: str) -> UITurn:
        """Submit a user message and return its UI turn immediately.

        The user entry is recorded and the turn's handle is created before
        this returns; everything else runs in a background task on the
        current event loop.

        Raises:
            RuntimeError: If called outside a running event loop
            SessionBusyError: If the previous turn is still in flight
        """
        asyncio.get_running_loop()
        self._session.begin_turn()
        try:
            version = self._session.append_entry(
                ConversationEntry(role="user", content=user_text)
            )
            turn = UITurn(
                id=time.time_ns() // 1_000_000,
                display=StreamableHandle(SpinnerView()),
            )
            self._session.append_turn(turn)
            runner = self.TurnRunner(self, turn, user_text, version)
            task = asyncio.create_task(runner.execute())
        except BaseException:
            self._session.end_turn()
            raise

        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return turn

    async def ask(self, user_text: str) -> View:
        """Submit a message and wait for the turn's final view."""
        turn = self.submit(user_text)
        return await turn.display.wait()

    async def wait_idle(self) -> None:
        """Wait for every background turn to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks)

    async def _fetch_context(self, text: str) -> str:
        """Embed, query and format the nearest documents.

        Raises:
            RetrievalError: Wrapping any embedding, lookup or formatting failure
        """
        try:
            documents: list[RetrievedDocument] = await self._retriever.query_nearest(text)
            context = self._retriever.format_for_prompt(documents)
        except Exception as e:
            raise RetrievalError(f"Retrieval failed: {e}") from e
        self._debug("info", "Retrieval", f"{len(documents)} documents retrieved")
        return context

    async def retrieve_context(self, text: str) -> str:
        """Formatted context block for `text`, or "" when retrieval fails."""
        if self._retriever is None:
            return ""
        try:
            return await self._fetch_context(text)
        except RetrievalError as e:
            self._debug("warning", "Retrieval", f"{e.message}; continuing without context")
            return ""

    async def close(self) -> None:
        """Wait for in-flight turns, then release all clients."""
        await self.wait_idle()
        await self._registry.close()
        if self._retriever is not None:
            await self._retriever.close()
        await self._llm.close()

    class TurnRunner:
        """Runs one turn in the background and records its execution trace.

        Every model-state write is a compare-and-swap against the version
        this turn last wrote, so a turn never overwrites a log that was
        replaced underneath it.
        """

        def __init__(
            self,
            orchestrator: "ChatOrchestrator",
            turn: UITurn,
            user_text: str,
            version: int,
        ):
            self.orchestrator = orchestrator
            self.turn = turn
            self.user_text = user_text
            self._version = version
            self._start_time = time.time()

        @property
        def handle(self) -> StreamableHandle:
            return self.turn.display

        async def execute(self) -> None:
            """Run the turn. Never raises; failures end up in the handle."""
            orchestrator = self.orchestrator
            try:
                self._log_step("retrieval_start", {"query": self.user_text})
                context = await orchestrator.retrieve_context(self.user_text)
                self._log_step("retrieval_complete", {"context_length": len(context)})

                messages = [
                    ChatMessage(role="system", content=orchestrator._build_system_prompt(context)),
                    *orchestrator._session.to_chat_messages(),
                ]
                self._log_step("prompt_built", {"messages": len(messages)})

                dispatcher = CompletionDispatcher(
                    llm=orchestrator._llm,
                    registry=orchestrator._registry,
                    messages=messages,
                    model=orchestrator._model,
                    temperature=orchestrator._temperature,
                )
                dispatcher.set_debug_callback(orchestrator._debug_callback)
                dispatcher.on_text_content(self._on_text_content)
                for function in orchestrator._registry:
                    dispatcher.on_function_call(function.name, self._on_function_call)
                dispatcher.on_function_error(self._on_function_error)

                self._log_step("generation_start", {})
                await dispatcher.run()
                self._log_step("generation_complete", {"usage": dispatcher.usage})

                # Function-call turns keep showing their last result view
                if not self.handle.is_done:
                    self.handle.done()

            except Exception as e:
                self._log_step("error", {"error": str(e)})
                orchestrator._debug("error", "Orchestrator", f"Turn {self.turn.id} failed: {e}")
                if not self.handle.is_done:
                    title = type(e).__name__ if isinstance(e, AlfredError) else "Something went wrong"
                    self.handle.done(ErrorView(title=title, message=str(e)))
            finally:
                orchestrator._session.end_turn()

        def _append(self, entry: ConversationEntry) -> None:
            session = self.orchestrator._session
            self._version = session.replace_model_state(
                self._version,
                (*session.model_state, entry),
            )

        def _on_text_content(self, content: str, is_final: bool) -> None:
            if not is_final:
                self.handle.update(MarkdownView(content=content))
                return
            self.handle.done(MarkdownView(content=content))
            self._append(ConversationEntry(role="assistant", content=content))

        async def _on_function_call(self, request: FunctionCallRequest) -> None:
            registry = self.orchestrator._registry
            function = registry.get(request.name)
            self.handle.update(function.skeleton_view())
            self._log_step("function_call", {"name": function.name})

            try:
                result = await registry.invoke(request)
                view = self._result_view(request, result)
            except ExternalAPIError as e:
                self.orchestrator._debug("error", function.name, e.message)
                result = FunctionResult(name=function.name, payload=e.to_payload(), error=True)
                view = ErrorView(
                    title=f"{function.name} failed",
                    message=e.message,
                    details=result.payload["error"],
                )

            self.handle.update(view)
            self._append(ConversationEntry(
                role="function",
                name=function.name,
                content=result.to_content(),
            ))
            self._log_step("function_result", {"name": function.name, "error": result.error})

        def _result_view(self, request: FunctionCallRequest, result: FunctionResult) -> View:
            function = self.orchestrator._registry.get(request.name)
            try:
                return function.result_view(request.arguments, result.payload)
            except ValidationError as e:
                return ErrorView(
                    title=f"Unexpected response from {function.name}",
                    message=str(e),
                )

        def _on_function_error(self, name: str, error: AlfredError) -> None:
            payload = error.to_payload()
            self.handle.update(ErrorView(
                title="Invalid function call",
                message=error.message,
                details=payload["error"],
            ))
            self._append(ConversationEntry(
                role="function",
                name=name or "unknown_function",
                content=FunctionResult(name=name, payload=payload, error=True).to_content(),
            ))
            self._log_step("function_rejected", {"name": name, "error": error.message})

        def _log_step(self, step_name: str, data: dict[str, Any]) -> None:
            """Append a step to the turn's execution trace."""
            self.turn.execution_trace.append({
                "step": step_name,
                "timestamp": time.time() - self._start_time,
                "data": data,
            })
