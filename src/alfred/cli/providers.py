"""Provider factory functions for CLI.

Centralizes creation of the LLM, retriever, function registry and
orchestrator from environment variables. Hides configuration details
from command implementations.
"""

from collections.abc import Callable

import typer
from rich.console import Console
from rich.markup import escape

from ..chat import ChatOrchestrator
from ..config import LogLevel, Settings
from ..embedding import create_embedding_provider
from ..functions import FunctionRegistry, create_function_registry
from ..llm import LLMProvider, create_llm_provider
from ..retrieval import Retriever, create_retriever

# Default console for output
_console = Console()

_LEVEL_STYLES = {
    "debug": "dim",
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
}


def require_llm(settings: Settings, console: Console | None = None) -> LLMProvider:
    """Create the LLM provider, exiting if it is not configured.

    Raises:
        SystemExit: If OPENAI_API_KEY is not set
    """
    con = console or _console
    if not settings.openai_api_key:
        con.print("[red]Error: OPENAI_API_KEY not set in environment[/red]")
        raise typer.Exit(code=1)
    return create_llm_provider("openai", api_key=settings.openai_api_key, model=settings.chat_model)


def get_retriever(settings: Settings, console: Console | None = None) -> Retriever | None:
    """Create the retrieval client, or None if Pinecone is not configured.

    Environment variables:
        PINECONE_API_KEY: Pinecone API key
        PINECONE_BASE_URL: Pinecone index host URL
        OPENAI_API_KEY: Used for query embeddings
    """
    con = console or _console
    if not (settings.pinecone_api_key and settings.pinecone_base_url and settings.openai_api_key):
        con.print("[yellow]Warning: Pinecone not configured, answering without retrieved context[/yellow]")
        return None

    embedder = create_embedding_provider(
        "openai",
        api_key=settings.openai_api_key,
        model=settings.embedding_model,
    )
    return create_retriever(
        "pinecone",
        embedder=embedder,
        api_key=settings.pinecone_api_key,
        base_url=settings.pinecone_base_url,
        top_k=settings.top_k,
    )


def get_registry(settings: Settings, console: Console | None = None) -> FunctionRegistry:
    """Create the function registry, warning about missing API keys."""
    con = console or _console
    if not settings.fred_api_key:
        con.print("[yellow]Warning: FRED_API_KEY not set, getFredData calls will be rejected by FRED[/yellow]")
    if not settings.google_api_key:
        con.print("[yellow]Warning: GOOGLE_API_KEY not set, googleCSESearch calls will fail[/yellow]")
    return create_function_registry(
        fred_api_key=settings.fred_api_key,
        google_api_key=settings.google_api_key,
        google_cse_id=settings.google_cse_id,
    )


def make_debug_callback(
    log_level: str,
    console: Console | None = None,
) -> Callable[[str, str, str], None]:
    """Build a debug callback that prints messages at or above `log_level`."""
    con = console or _console
    threshold = LogLevel.from_string(log_level)

    def _callback(level: str, component: str, message: str) -> None:
        if LogLevel.from_string(level) < threshold:
            return
        style = _LEVEL_STYLES.get(level, "dim")
        name = LogLevel.name(LogLevel.from_string(level))
        con.print(f"[{style}]{name}[/] [bold]{escape(component)}[/]: {escape(message)}", highlight=False)

    return _callback


def build_orchestrator(
    settings: Settings,
    log_level: str = "warning",
    console: Console | None = None,
) -> ChatOrchestrator:
    """Wire every collaborator into a ready-to-use orchestrator."""
    con = console or _console
    orchestrator = ChatOrchestrator(
        llm=require_llm(settings, con),
        registry=get_registry(settings, con),
        retriever=get_retriever(settings, con),
        temperature=settings.temperature,
    )
    orchestrator.set_debug_callback(make_debug_callback(log_level, con))
    return orchestrator
