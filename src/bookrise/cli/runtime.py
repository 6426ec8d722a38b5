# ABOUTME: Glue between CLI commands and the library: settings, client lifetime, errors.
# ABOUTME: Commands build their client through open_client so tests can swap the executor.

import asyncio
from collections.abc import AsyncIterator, Coroutine
from contextlib import asynccontextmanager
from dataclasses import replace
from pathlib import Path
from typing import Any, TypeVar

from rich.console import Console
from rich.markup import escape

from bookrise.api.client import BookriseClient
from bookrise.api.errors import BookriseError
from bookrise.api.http import HttpExecutor, HttpxExecutor
from bookrise.config import Settings, build_client, load_settings

T = TypeVar("T")


def create_executor() -> HttpExecutor:
    """Create the default HTTP executor (httpx)."""
    return HttpxExecutor()


def resolve_settings(
    console: Console, settings_path: Path | None, api_key: str | None = None
) -> Settings:
    """Load stored settings, let an explicit API key win, and require a key."""
    try:
        settings = load_settings(settings_path)
    except BookriseError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise SystemExit(1) from exc

    if api_key:
        settings = replace(settings, api_key=api_key)
    if not settings.api_key:
        console.print(
            "[red]No BookRise API key set.[/red] "
            "Run `bookrise config set --api-key KEY` or set BOOKRISE_API_KEY."
        )
        raise SystemExit(1)
    return settings


@asynccontextmanager
async def open_client(settings: Settings) -> AsyncIterator[BookriseClient]:
    executor = create_executor()
    try:
        yield build_client(settings, executor)
    finally:
        await executor.aclose()


def run(console: Console, coro: Coroutine[Any, Any, T]) -> T:
    """Run a command coroutine, reporting library errors and exiting 1."""
    try:
        return asyncio.run(coro)
    except BookriseError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise SystemExit(1) from exc
