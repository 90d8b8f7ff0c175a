"""Main CLI application using Typer."""
import asyncio
import json

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from ..config import Settings
from ..errors import SessionBusyError
from ..functions import create_function_registry
from ..session import UITurn
from ..ui.render import render_view
from .providers import build_orchestrator

# Load environment variables
load_dotenv()

app = typer.Typer(
    name="alfred",
    help="Housing-policy research assistant with Federal Register, FRED and web search",
    no_args_is_help=True,
    add_completion=True,
)

console = Console()

EXAMPLE_MESSAGES = [
    "Get the most recent Federal Register docs for the CFPB",
    "How has the homeownership rate changed during Biden's presidency?",
    "What are this week's releases from Federal agencies?",
]

_LOG_LEVEL_OPTION = typer.Option(
    "warning",
    "--log-level",
    "-l",
    help="Minimum log level to show (debug, info, warning, error)",
)


async def _follow(turn: UITurn) -> None:
    """Render a turn live until its handle is sealed."""
    with Live(render_view(turn.display.value), console=console, refresh_per_second=12) as live:
        async for view in turn.display.watch():
            live.update(render_view(view))


@app.command()
def ask(
    message: str = typer.Argument(..., help="Message to send"),
    log_level: str = _LOG_LEVEL_OPTION,
):
    """Ask a single question and print the reply."""
    async def _ask():
        orchestrator = build_orchestrator(Settings.from_env(), log_level, console)
        try:
            turn = orchestrator.submit(message)
            await _follow(turn)
        finally:
            await orchestrator.close()

    asyncio.run(_ask())


@app.command()
def chat(log_level: str = _LOG_LEVEL_OPTION):
    """Start an interactive chat session."""
    async def _chat():
        orchestrator = build_orchestrator(Settings.from_env(), log_level, console)

        console.print(Panel(
            "[bold]Ask ALFRED![/bold]\n[dim]Know better...[/dim]\n\n"
            + "\n".join(f"  [cyan]-[/] {example}" for example in EXAMPLE_MESSAGES)
            + "\n\n[dim]Type /clear to start over, /exit to quit.[/dim]",
            border_style="cyan",
        ))

        try:
            while True:
                try:
                    message = await asyncio.to_thread(console.input, "[bold green]You:[/] ")
                except (EOFError, KeyboardInterrupt):
                    break

                message = message.strip()
                if not message:
                    continue
                if message in ("/exit", "/quit"):
                    break
                if message == "/clear":
                    orchestrator.session.clear()
                    console.print("[dim]Conversation cleared.[/dim]")
                    continue

                try:
                    turn = orchestrator.submit(message)
                except SessionBusyError as e:
                    console.print(f"[yellow]{e.message}[/yellow]")
                    continue
                await _follow(turn)
                await orchestrator.wait_idle()
        finally:
            await orchestrator.close()

    asyncio.run(_chat())


@app.command()
def functions(
    schema: str | None = typer.Option(
        None,
        "--schema",
        "-s",
        help="Print the JSON schema of one function",
    ),
):
    """List the functions the model may call."""
    async def _functions():
        settings = Settings.from_env()
        registry = create_function_registry(google_cse_id=settings.google_cse_id)
        try:
            if schema:
                function = registry.get(schema)
                console.print_json(json.dumps(function.parameters_schema))
                return

            table = Table(title="Declared functions")
            table.add_column("Name", style="bold cyan")
            table.add_column("Endpoint", style="dim")
            table.add_column("Required parameters")
            for function in registry:
                required = function.parameters_schema.get("required", [])
                table.add_row(function.name, function.endpoint, ", ".join(required) or "-")
            console.print(table)
        finally:
            await registry.close()

    try:
        asyncio.run(_functions())
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
