"""CLI interface for the chat resume service."""

import json
import threading
from collections.abc import Iterator
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.prompt import Prompt
from rich.table import Table

from ....common.exception_handler import format_exception_json
from ....config import settings, setup_logging
from ....core.domain import (
    FinishEvent,
    Message,
    Role,
    StreamEvent,
    TextDelta,
    TextMessage,
    ToolCallEvent,
    ToolResultEvent,
)

app = typer.Typer(
    name="chat-resume",
    help="Chat resume - conversational resume assistant backed by a document knowledge base",
    add_completion=False,
)

console = Console(force_terminal=True, legacy_windows=False)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    setup_logging(
        "DEBUG" if verbose else settings.log_level,
        log_file=settings.log_file,
        json_format=settings.log_json,
    )


def handle_cli_error(exc: Exception) -> None:
    """Handle and display errors in CLI with structured format.

    In debug mode, shows full JSON error details.
    In normal mode, shows a user-friendly message with error code.

    Args:
        exc: The exception to handle.
    """
    error_data = format_exception_json(exc, include_trace=settings.debug)

    if settings.debug:
        console.print(
            Panel(
                json.dumps(error_data, indent=2),
                title="[bold red]Error Details[/]",
                border_style="red",
            )
        )
    else:
        error_type = error_data["error"]["type"]
        error_msg = error_data["error"]["message"]
        error_code = error_data["error"].get("code", "UNKNOWN")
        location = error_data.get("location", {})

        console.print(f"\n[red]Error [{error_code}]:[/] {error_msg}")
        console.print(f"[dim]Type: {error_type}[/]")

        if location:
            loc_str = f"{location.get('file', '?')}:{location.get('line', '?')} in {location.get('method', '?')}"
            console.print(f"[dim]Location: {loc_str}[/]")

        console.print("[dim]Set DEBUG=true for full details[/]")


def _require_api_key() -> None:
    if not settings.google_api_key:
        console.print(
            "[red]Error:[/] Google API key not set.\n"
            "Get a free key at https://aistudio.google.com/ and set GOOGLE_API_KEY in .env"
        )
        raise typer.Exit(1)


def render_events(events: Iterator[StreamEvent]) -> str:
    """Print a conversation stream and return the assistant's text."""
    parts: list[str] = []
    for event in events:
        if isinstance(event, TextDelta):
            parts.append(event.text)
            console.print(event.text, end="", markup=False, highlight=False)
        elif isinstance(event, ToolCallEvent):
            console.print(f"\n[dim]> {event.call.name}[/]")
        elif isinstance(event, ToolResultEvent):
            console.print(f"[dim]< {json.dumps(event.result.result)}[/]")
        elif isinstance(event, FinishEvent) and event.aborted:
            console.print(f"\n[yellow]Stopped ({event.metadata.get('error', 'cancelled')})[/]")
    console.print()
    return "".join(parts)


def _stream_reply(history: list[Message]) -> str:
    from ....composition.container import get_conversation_service

    cancel = threading.Event()
    events = get_conversation_service().stream_reply(history, cancel_event=cancel)
    try:
        return render_events(events)
    except KeyboardInterrupt:
        cancel.set()
        console.print("\n[yellow]Cancelled[/]")
        return ""
    finally:
        close = getattr(events, "close", None)
        if close is not None:
            close()


@app.command()
def ingest(
    paths: list[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Files to add (md, txt, pdf, docx)"),
    title: str | None = typer.Option(None, help="Document title (single file only)"),
) -> None:
    """Extract, chunk, embed and store documents in the knowledge base."""
    from ....adapters.outbound.file_processor import extract_text, get_file_type, is_supported_file
    from ....composition.container import get_ingestion_service

    _require_api_key()
    settings.ensure_directories()

    if title and len(paths) > 1:
        console.print("[red]Error:[/] --title can only be used with a single file")
        raise typer.Exit(1)

    unsupported = [p for p in paths if not is_supported_file(p.name)]
    if unsupported:
        console.print(f"[red]Error:[/] Unsupported file type: {', '.join(p.name for p in unsupported)}")
        raise typer.Exit(1)

    ingestion = get_ingestion_service()
    failures = 0
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Ingesting", total=len(paths))
        for path in paths:
            progress.update(task, description=f"Ingesting {path.name}")
            try:
                data = path.read_bytes()
                document = ingestion.register_document(
                    title=title or path.stem,
                    content=extract_text(path.name, data),
                    file_type=get_file_type(path.name),
                    file_name=path.name,
                    file_size=len(data),
                    uploaded_by="cli",
                    metadata={"source": "cli"},
                )
                progress.console.print(f"[green]OK[/] {path.name} -> {document.id}")
            except Exception as exc:
                failures += 1
                handle_cli_error(exc)
            progress.advance(task)

    if failures:
        console.print(f"\n[yellow]{failures} of {len(paths)} files failed[/]")
        raise typer.Exit(1)
    console.print(f"\n[green]Indexed {len(paths)} document(s)[/]")


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question about the resume owner"),
) -> None:
    """Ask a single question and stream the answer."""
    _require_api_key()
    settings.ensure_directories()
    try:
        _stream_reply([TextMessage(Role.USER, question)])
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)


@app.command()
def chat() -> None:
    """Start an interactive chat session."""
    _require_api_key()
    settings.ensure_directories()
    console.print(
        Panel.fit(
            f"[bold cyan]Chat with {settings.persona_name}'s resume[/]\n\n"
            "Examples:\n"
            "- Tell me about your work experience\n"
            "- Where did you study?\n"
            "- What are your hobbies?\n\n"
            "[dim]Type 'quit' or 'exit' to leave[/]",
            title="Chat Resume",
            border_style="cyan",
        )
    )

    history: list[Message] = []
    while True:
        query = Prompt.ask("\n[bold cyan]You[/]")
        if query.lower() in ("quit", "exit", "q"):
            console.print("[dim]Goodbye![/]")
            break
        if not query.strip():
            continue

        history.append(TextMessage(Role.USER, query))
        console.print("\n[bold green]Assistant[/]")
        try:
            answer = _stream_reply(history)
        except Exception as exc:
            handle_cli_error(exc)
            continue
        if answer:
            history.append(TextMessage(Role.ASSISTANT, answer))


@app.command()
def intent(
    message: str = typer.Argument(..., help="Visitor message to classify"),
) -> None:
    """Show which component, if any, a message would surface."""
    from ....composition.container import get_intent_router

    _require_api_key()
    settings.ensure_directories()
    with console.status("[bold green]Detecting intent...[/]"):
        decision = get_intent_router().detect_intent(message)
    console.print_json(json.dumps(decision.to_dict()))


@app.command("seed-components")
def seed_components() -> None:
    """Register the default timeline, education and passions components."""
    from ....composition.container import get_repository
    from ....core.services.component_catalog import seed_default_components

    settings.ensure_directories()
    try:
        created = seed_default_components(get_repository())
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    if created:
        console.print(f"[green]Registered:[/] {', '.join(created)}")
    else:
        console.print("[dim]All default components already registered[/]")


@app.command()
def status() -> None:
    """Show configuration and knowledge base counts."""
    from ....composition.container import get_repository, get_vector_store

    console.print("[bold]Chat Resume Status[/]\n")

    if settings.google_api_key:
        console.print("[green]OK[/] Google API key configured")
    else:
        console.print("[red]X[/] Google API key not set (set GOOGLE_API_KEY in .env)")

    if settings.qdrant_url:
        console.print(f"[green]OK[/] Qdrant Cloud: {settings.qdrant_url}")
    else:
        console.print(f"[green]OK[/] Local Qdrant storage: {settings.qdrant_path}")

    console.print(
        "[green]OK[/] Admin API enabled" if settings.admin_api_key else "[dim]-[/] Admin API disabled"
    )

    settings.ensure_directories()
    try:
        repository = get_repository()
        table = Table(title="Knowledge Base")
        table.add_column("Item")
        table.add_column("Count", justify="right")
        table.add_row("Documents", str(repository.count_documents()))
        table.add_row("Chunks", str(get_vector_store().count()))
        table.add_row("Active components", str(len(repository.list_active_components())))
        console.print()
        console.print(table)
    except Exception as exc:
        handle_cli_error(exc)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("chat_resume.adapters.inbound.api.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
