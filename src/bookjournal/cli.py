"""Command-line interface for bookjournal.

Built with Typer for commands and Rich for output.
"""

import logging
from datetime import datetime
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .api import CatalogClient, CatalogError
from .config import get_config
from .db import get_db
from .db.models import JournalEntry
from .db.schemas import BookRecord, JournalEntryCreate, ReadingStatus
from .discovery import SearchOrchestrator
from .errors import BookJournalError, InvalidQueryError, JournalError, SearchError
from .journal import JournalManager

# Create the main app
app = typer.Typer(
    name="bookjournal",
    help="Search academic Japanese books and keep a reading journal.",
    no_args_is_help=True,
)

# Rich console for pretty output
console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def setup_logging(level: str) -> None:
    """Send package logs through Rich at the given level."""
    logger = logging.getLogger("bookjournal")
    logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


def get_client() -> CatalogClient:
    """Create a catalog client from configuration."""
    return CatalogClient(config=get_config())


def format_book_table(books: list[BookRecord], title: str = "Books") -> Table:
    """Create a rich table for displaying catalog books."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan", no_wrap=False, max_width=40)
    table.add_column("Author", style="green", max_width=25)
    table.add_column("Publisher", style="yellow", max_width=20)
    table.add_column("Published", justify="center")

    for book in books:
        table.add_row(
            book.id,
            book.title,
            book.author or "-",
            book.publisher or "-",
            book.publish_date.isoformat() if book.publish_date else "-",
        )

    return table


def find_entry(entry_id: str, manager: JournalManager) -> JournalEntry:
    """Look up an entry by full ID or by the short ID shown in listings."""
    try:
        found = manager.get_entry(entry_id)
    except JournalError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not found:
        print_error(f"Entry not found: {entry_id}")
        raise typer.Exit(1)
    return found


def find_book(book_id: str, manager: JournalManager) -> BookRecord:
    """Look up a book in the journal first, then in the catalog."""
    book = manager.get_book(book_id)
    if book:
        return book

    try:
        raw = get_client().get_book(book_id)
    except CatalogError as e:
        print_error(f"Catalog error: {e}")
        raise typer.Exit(1)

    if not raw:
        print_error(f"No book found with ID: {book_id}")
        raise typer.Exit(1)
    return raw.to_book_record()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
) -> None:
    """Search academic Japanese books and keep a reading journal."""
    setup_logging("DEBUG" if verbose else get_config().log_level)


# ============================================================================
# Search Commands
# ============================================================================


@app.command()
def search(
    query: str = typer.Argument(..., help="Search text"),
    limit: int = typer.Option(50, "--limit", "-l", help="Max books to show"),
) -> None:
    """Search the catalog for academic books and related titles."""
    orchestrator = SearchOrchestrator(client=get_client(), config=get_config())

    try:
        with console.status(f"[dim]Searching for '{query}'...[/dim]"):
            result = orchestrator.search(query)
    except InvalidQueryError as e:
        print_error(str(e))
        raise typer.Exit(1)
    except SearchError as e:
        print_error(str(e))
        raise typer.Exit(1)
    finally:
        orchestrator.close()

    if result.is_empty:
        console.print(f"[dim]No academic books found matching '{result.query}'[/dim]")
        return

    console.print(format_book_table(result.books[:limit], f"Search Results: '{result.query}'"))
    console.print(
        f"[dim]Found {len(result.books)} book(s): "
        f"{len(result.primary_books)} direct, {len(result.related_books)} related[/dim]"
    )
    if result.related_keywords:
        console.print(f"[bold]Related keywords:[/bold] {', '.join(result.related_keywords)}")
    if result.failed_keywords:
        print_warning(f"Some related searches failed: {', '.join(result.failed_keywords)}")


@app.command()
def show(
    book_id: str = typer.Argument(..., help="Catalog book ID"),
) -> None:
    """Show book details and journal entries."""
    manager = JournalManager(get_db())
    book = find_book(book_id, manager)

    lines = [f"[bold]{book.title}[/bold]"]
    if book.author:
        lines.append(f"Author: {book.author}")
    if book.publisher:
        lines.append(f"Publisher: {book.publisher}")
    if book.publish_date:
        lines.append(f"Published: {book.publish_date.isoformat()}")
    if book.image_url:
        lines.append(f"Cover: {book.image_url}")
    if book.description:
        lines.append("")
        lines.append(book.description)

    console.print(Panel("\n".join(lines), title="Book Details"))

    entries = manager.entries_for_book(book.id)
    if not entries:
        console.print("[dim]No journal entries for this book.[/dim]")
        console.print(f"[dim]Use 'bookjournal log {book.id}' to add one.[/dim]")
        return

    table = Table(title="Journal Entries", show_header=True, header_style="bold magenta")
    table.add_column("Date")
    table.add_column("Status", style="yellow")
    table.add_column("Rating", justify="center")
    table.add_column("Content", max_width=50)

    for entry in entries:
        table.add_row(
            entry.entry_date,
            entry.status.label,
            entry.rating_stars,
            entry.short_content or "-",
        )

    console.print(table)


# ============================================================================
# Journal Commands
# ============================================================================


@app.command()
def log(
    book_id: str = typer.Argument(..., help="Catalog book ID"),
    rating: int = typer.Option(3, "--rating", "-r", min=1, max=5, help="Rating 1-5"),
    status: ReadingStatus = typer.Option(
        ReadingStatus.COMPLETED, "--status", "-s", help="Reading status"
    ),
    tag: Optional[list[str]] = typer.Option(None, "--tag", "-t", help="Tag (repeatable)"),
    quote: Optional[list[str]] = typer.Option(None, "--quote", "-q", help="Quote (repeatable)"),
    content: str = typer.Option("", "--content", "-c", help="Thoughts about the book"),
    entry_date: Optional[datetime] = typer.Option(
        None, "--date", "-d", formats=["%Y-%m-%d"], help="Entry date (YYYY-MM-DD)"
    ),
) -> None:
    """Add a journal entry for a book."""
    manager = JournalManager(get_db())
    book = find_book(book_id, manager)

    data = JournalEntryCreate(
        book_id=book.id,
        entry_date=entry_date.date() if entry_date else None,
        content=content,
        rating=rating,
        tags=tag or [],
        quotes=quote or [],
        reading_status=status,
    )
    entry = manager.add_entry(data, book)

    print_success(f"Logged: {book.title} ({entry.status.label}, {entry.rating_stars})")
    console.print(f"[dim]Entry ID: {entry.id}[/dim]")


@app.command()
def journal(
    status: Optional[ReadingStatus] = typer.Option(
        None, "--status", "-s", help="Filter by status"
    ),
    limit: int = typer.Option(20, "--limit", "-l", help="Max entries to show"),
) -> None:
    """List journal entries, newest first."""
    manager = JournalManager(get_db())
    entries = manager.list_entries(status=status, limit=limit)

    if not entries:
        console.print("[dim]No journal entries yet.[/dim]")
        return

    title = f"Journal - {status.label}" if status else "Journal"
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Date")
    table.add_column("Book", style="cyan", max_width=35)
    table.add_column("Status", style="yellow")
    table.add_column("Rating", justify="center")
    table.add_column("Tags", style="green")
    table.add_column("ID", style="dim")

    for entry in entries:
        book = manager.get_book(entry.book_id)
        table.add_row(
            entry.entry_date,
            book.title if book else "不明な書籍",
            entry.status.label,
            entry.rating_stars,
            ", ".join(entry.get_tags()) or "-",
            entry.id[:8],
        )

    console.print(table)


@app.command()
def entry(
    entry_id: str = typer.Argument(..., help="Journal entry ID or a unique prefix"),
) -> None:
    """Show a journal entry."""
    manager = JournalManager(get_db())
    found = find_entry(entry_id, manager)

    book = manager.get_book(found.book_id)
    lines = [
        f"[bold]{book.title if book else '不明な書籍'}[/bold]",
        f"{found.entry_date}  {found.rating_stars}  {found.status.label}",
    ]
    tags = found.get_tags()
    if tags:
        lines.append(f"Tags: {', '.join(tags)}")
    if found.content:
        lines.append("")
        lines.append(found.content)
    quotes = found.get_quotes()
    if quotes:
        lines.append("")
        lines.append("[bold]Quotes:[/bold]")
        lines.extend(f"  「{q}」" for q in quotes)

    console.print(Panel("\n".join(lines), title="Journal Entry"))


@app.command()
def remove(
    entry_id: str = typer.Argument(..., help="Journal entry ID or a unique prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a journal entry."""
    manager = JournalManager(get_db())
    found = find_entry(entry_id, manager)

    if not yes and not typer.confirm(f"Delete entry {found.id}?"):
        console.print("[dim]Cancelled.[/dim]")
        return

    manager.remove_entry(found.id)
    print_success(f"Deleted entry {found.id}")


@app.command()
def stats() -> None:
    """Show journal statistics."""
    manager = JournalManager(get_db())
    summary = manager.stats()

    table = Table(title="Journal Statistics", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Entries", str(summary.total_entries))
    table.add_row("Books", str(summary.total_books))
    for status in ReadingStatus:
        table.add_row(status.label, str(summary.by_status.get(status.value, 0)))
    table.add_row(
        "Average rating",
        f"{summary.average_rating:.2f}" if summary.average_rating is not None else "-",
    )

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"bookjournal version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    try:
        app()
    except BookJournalError as e:
        print_error(str(e))
        raise SystemExit(1)


if __name__ == "__main__":
    main()
