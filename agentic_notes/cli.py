"""
Agentic Notes CLI.

Command-line client over the note view-model.
Built with Typer for commands and Rich for formatted output.

Usage:
    agentic-notes --help
    agentic-notes migrate                       # Upgrade the database schema
    agentic-notes list                          # Active notes
    agentic-notes list --query milk             # Active notes matching "milk"
    agentic-notes list --bin                    # Notes in the bin
    agentic-notes show NOTE_ID
    agentic-notes new --title "Groceries" --content "milk"
    agentic-notes edit NOTE_ID --content "milk, eggs"
    agentic-notes bin NOTE_ID [NOTE_ID ...]
    agentic-notes restore NOTE_ID
    agentic-notes config

Options:
    --verbose, -v     Enable verbose output
    --debug, -d       Enable debug mode (detailed logging)
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import NoReturn, Optional, TypeVar

import structlog
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from agentic_notes.core.config import get_app_config, get_retention_days, validate_project_root
from agentic_notes.core.database import create_database
from agentic_notes.core.logging import get_logger, setup_logging
from agentic_notes.schemas.note import NoteRecord
from agentic_notes.services.selection import BatchResult
from agentic_notes.viewmodels.notes import NoteViewModel

T = TypeVar("T")

app = typer.Typer(help="Agentic Notes command-line client.", no_args_is_help=True)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output (INFO level logging)."),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output (DEBUG level logging)."),
) -> None:
    """Agentic Notes command-line client."""
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    structlog.contextvars.bind_contextvars(source="cli")
    get_logger(__name__).debug("CLI invoked", extra={"log_level": log_level})


async def _with_view_model(action: Callable[[NoteViewModel], Awaitable[T]]) -> T:
    """Open the configured database, run the action, then close everything."""
    view_model = await NoteViewModel.create(
        create_database(),
        retention_days=get_retention_days(),
    )
    try:
        return await action(view_model)
    finally:
        await view_model.close()


def _run(action: Callable[[NoteViewModel], Awaitable[T]]) -> T:
    return asyncio.run(_with_view_model(action))


def _fail(message: str) -> NoReturn:
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


def _check_errors(view_model: NoteViewModel) -> None:
    error = view_model.errors.value
    if error is not None:
        _fail(f"Write failed: {error.payload['message']}")


@app.command()
def migrate() -> None:
    """Upgrade the database schema to the latest revision."""

    async def _migrate() -> str | None:
        database = create_database()
        try:
            return await database.migrate()
        finally:
            await database.dispose()

    revision = asyncio.run(_migrate())
    console.print(f"Database at revision [bold]{revision}[/bold]")


@app.command("list")
def list_notes(
    query: str = typer.Option("", "--query", "-q", help="Only show notes containing this text."),
    binned: bool = typer.Option(False, "--bin", "-b", help="Show the bin instead of active notes."),
) -> None:
    """List active notes, or the notes in the bin."""

    async def _list(view_model: NoteViewModel) -> tuple[list[NoteRecord], list[int | None], bool]:
        view_model.set_search_query(query)
        notes = list(view_model.binned_notes.value if binned else view_model.active_notes.value)
        days = [view_model.days_until_purge(note) for note in notes]
        return notes, days, view_model.show_empty_state

    notes, days, empty = _run(_list)

    if not notes:
        if binned:
            console.print("The bin is empty.")
        elif empty:
            console.print("No notes yet. Use 'new' to add one!")
        else:
            console.print(f"No notes match '{query}'.")
        return

    table = Table(title="Bin" if binned else "Notes")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Content")
    if binned:
        table.add_column("Deletes in")

    for note, days_left in zip(notes, days):
        row = [note.id, note.title, note.content.splitlines()[0] if note.content else ""]
        if binned:
            row.append(f"{days_left} days")
        table.add_row(*row)

    console.print(table)


@app.command()
def show(note_id: str = typer.Argument(..., help="Note ID.")) -> None:
    """Show a single note."""
    draft = _run(lambda view_model: view_model.create_or_open_note(note_id))
    if draft is None:
        _fail(f"Note not found: {note_id}")

    subtitle = "in bin" if draft.is_binned else None
    console.print(Panel(draft.content, title=draft.title or "(untitled)", subtitle=subtitle))


@app.command()
def new(
    title: str = typer.Option("", "--title", "-t", help="Note title."),
    content: str = typer.Option("", "--content", "-c", help="Note content."),
) -> None:
    """Create a note. Blank notes are not saved."""

    async def _new(view_model: NoteViewModel) -> NoteRecord | None:
        note = await view_model.save_on_exit(None, title, content)
        _check_errors(view_model)
        return note

    note = _run(_new)
    if note is None:
        console.print("Nothing to save: note is blank.")
        return
    console.print(f"Created note [bold]{note.id}[/bold]")


@app.command()
def edit(
    note_id: str = typer.Argument(..., help="Note ID."),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title."),
    content: Optional[str] = typer.Option(None, "--content", "-c", help="New content."),
) -> None:
    """Edit a note's title and/or content."""

    async def _edit(view_model: NoteViewModel) -> NoteRecord | None:
        draft = await view_model.create_or_open_note(note_id)
        if draft is None:
            _fail(f"Note not found: {note_id}")
        note = await view_model.save_on_exit(
            note_id,
            draft.title if title is None else title,
            draft.content if content is None else content,
        )
        _check_errors(view_model)
        return note

    note = _run(_edit)
    if note is None:
        console.print("Nothing to save: note is blank.")
        return
    console.print(f"Saved note [bold]{note.id}[/bold]")


@app.command("bin")
def bin_notes(note_ids: list[str] = typer.Argument(..., help="IDs of the notes to move to the bin.")) -> None:
    """Move notes to the bin."""

    async def _bin(view_model: NoteViewModel) -> BatchResult:
        for note_id in note_ids:
            if note_id not in view_model.selection_manager:
                view_model.toggle_select(note_id)
        result = await view_model.bin_selected()
        _check_errors(view_model)
        return result

    result = _run(_bin)
    for note_id in result.missing:
        console.print(f"[yellow]Note not found: {note_id}[/yellow]")
    console.print(f"Moved {len(result.binned)} note(s) to the bin.")


@app.command()
def restore(note_id: str = typer.Argument(..., help="Note ID.")) -> None:
    """Restore a note from the bin."""

    async def _restore(view_model: NoteViewModel) -> NoteRecord | None:
        note = await view_model.restore(note_id)
        _check_errors(view_model)
        return note

    note = _run(_restore)
    if note is None:
        _fail(f"Note not found: {note_id}")
    console.print(f"Restored note [bold]{note.id}[/bold]")


@app.command()
def config(
    section: Optional[str] = typer.Argument(None, help="Config section to show (application, database, logging)"),
) -> None:
    """Display configuration settings."""
    app_config = get_app_config()
    sections = {
        "application": app_config.application.model_dump(),
        "database": app_config.database.model_dump(),
        "logging": app_config.logging.model_dump(),
    }

    if section:
        if section not in sections:
            console.print(f"[red]Unknown section: {section}[/red]")
            console.print(f"Available sections: {', '.join(sections.keys())}")
            raise typer.Exit(1)
        _display_config_section(section, sections[section])
        return

    for name, data in sections.items():
        _display_config_section(name, data)
        console.print()


def _display_config_section(name: str, data: dict) -> None:
    """Display a configuration section as a tree."""
    tree = Tree(f"[bold cyan]{name}[/bold cyan]")

    def add_items(parent: Tree, items: dict) -> None:
        for key, value in items.items():
            if isinstance(value, dict):
                branch = parent.add(f"[cyan]{key}[/cyan]")
                add_items(branch, value)
            else:
                parent.add(f"[cyan]{key}[/cyan]: {value}")

    add_items(tree, data)
    console.print(tree)


if __name__ == "__main__":
    app()
