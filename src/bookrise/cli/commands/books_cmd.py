# ABOUTME: The `bookrise books` and `bookrise highlights` commands.
# ABOUTME: Display the remote library and a book's highlights as Rich tables.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bookrise.api.types import Book, Highlight
from bookrise.cli import runtime
from bookrise.cli.options import api_key_option, settings_option
from bookrise.config import Settings


def _progress(book: Book) -> str:
    if book.percent_read is None:
        return "[dim]-[/dim]"
    return f"{book.percent_read:.0%}"


async def _fetch_books(settings: Settings) -> list[Book]:
    async with runtime.open_client(settings) as client:
        return await client.list_books()


async def _fetch_highlights(settings: Settings, book_id: str) -> list[Highlight]:
    async with runtime.open_client(settings) as client:
        return await client.list_highlights(book_id)


@click.command()
@settings_option
@api_key_option
def books(settings_path: Path | None, api_key: str | None) -> None:
    """List the books in your BookRise library."""
    console = Console()
    settings = runtime.resolve_settings(console, settings_path, api_key)
    records = runtime.run(console, _fetch_books(settings))

    if not records:
        console.print("[yellow]No books found in your BookRise library.[/yellow]")
        return

    table = Table()
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Read", justify="right")
    table.add_column("ID", style="dim")
    for book in records:
        table.add_row(escape(book.title), escape(book.author or ""), _progress(book), book.id)
    console.print(table)


@click.command()
@click.argument("book_id")
@settings_option
@api_key_option
def highlights(book_id: str, settings_path: Path | None, api_key: str | None) -> None:
    """List the highlights of one book."""
    console = Console()
    settings = runtime.resolve_settings(console, settings_path, api_key)
    records = runtime.run(console, _fetch_highlights(settings, book_id))

    if not records:
        console.print("[yellow]No highlights found for this book.[/yellow]")
        return

    table = Table()
    table.add_column("Text")
    table.add_column("Note")
    table.add_column("Page", justify="right")
    table.add_column("Color")
    for hl in records:
        table.add_row(
            escape(hl.text_content or ""),
            escape(hl.note or ""),
            str(hl.page) if hl.page is not None else "",
            hl.color or "",
        )
    console.print(table)
