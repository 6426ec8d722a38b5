# ABOUTME: The `bookrise chat` command for asking questions about a book.
# ABOUTME: Streams the assistant's answer to the terminal as it arrives.

from pathlib import Path

import click
from rich.console import Console

from bookrise.api.types import ChatResponse
from bookrise.cli import runtime
from bookrise.cli.options import api_key_option, settings_option
from bookrise.config import Settings


async def _chat(
    console: Console,
    settings: Settings,
    book_id: str,
    prompt: str,
    context_ids: list[str],
    stream: bool,
) -> ChatResponse:
    def on_chunk(chunk: str) -> None:
        console.print(chunk, end="", markup=False, highlight=False)

    async with runtime.open_client(settings) as client:
        return await client.chat(
            book_id, prompt, context_ids, on_chunk=on_chunk if stream else None
        )


@click.command()
@click.argument("book_id")
@click.argument("prompt")
@click.option(
    "-c",
    "--context-id",
    "context_ids",
    multiple=True,
    help="Paragraph id to give the assistant as context (repeatable).",
)
@click.option(
    "--stream/--no-stream",
    default=True,
    help="Print the answer as it is generated (default: --stream).",
)
@settings_option
@api_key_option
def chat(
    book_id: str,
    prompt: str,
    context_ids: tuple[str, ...],
    stream: bool,
    settings_path: Path | None,
    api_key: str | None,
) -> None:
    """Ask BookRise AI a question about a book."""
    console = Console()
    settings = runtime.resolve_settings(console, settings_path, api_key)
    response = runtime.run(
        console, _chat(console, settings, book_id, prompt, list(context_ids), stream)
    )

    if stream:
        console.print()
    elif response.answer:
        console.print(response.answer, markup=False, highlight=False)

    if not response.answer:
        console.print("[yellow]Received an empty response from BookRise AI.[/yellow]")
    if response.cited_chapters:
        chapters = ", ".join(str(ch) for ch in sorted(response.cited_chapters))
        console.print(f"[dim]Cited chapters: {chapters}[/dim]")
