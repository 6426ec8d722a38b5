# ABOUTME: The `bookrise config` commands for viewing and changing settings.
# ABOUTME: Changes go through apply_settings, which also rebuilds the API client.

import asyncio
from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bookrise.cli import runtime
from bookrise.cli.options import mode_option, settings_option
from bookrise.config import ConfigError, Settings, apply_settings, load_settings


def _mask(api_key: str) -> str:
    if not api_key:
        return "[dim]not set[/dim]"
    if len(api_key) <= 8:
        return "*" * len(api_key)
    return f"{api_key[:4]}{'*' * (len(api_key) - 8)}{api_key[-4:]}"


def _load(console: Console, settings_path: Path | None) -> Settings:
    try:
        return load_settings(settings_path)
    except ConfigError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise SystemExit(1) from exc


@click.group()
def config() -> None:
    """View or change BookRise settings."""


@config.command("show")
@settings_option
def show(settings_path: Path | None) -> None:
    """Show the current settings."""
    console = Console()
    settings = _load(console, settings_path)

    table = Table(title="BookRise settings", show_header=False, pad_edge=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_row("API key", _mask(settings.api_key))
    table.add_row("Sync folder", settings.sync_folder)
    table.add_row(
        "Note per highlight", "yes" if settings.create_note_per_highlight else "no"
    )
    console.print(table)


@config.command("set")
@settings_option
@click.option("--api-key", default=None, help="BookRise API key (empty string clears it).")
@click.option("--sync-folder", default=None, help="Vault folder notes are synced into.")
@mode_option
def set_(
    settings_path: Path | None,
    api_key: str | None,
    sync_folder: str | None,
    per_highlight: bool | None,
) -> None:
    """Change one or more settings."""
    console = Console()
    settings = _load(console, settings_path)

    changes: dict[str, object] = {}
    if api_key is not None:
        changes["api_key"] = api_key
    if sync_folder is not None:
        if not sync_folder.strip():
            console.print("[red]Error:[/red] sync folder cannot be empty.")
            raise SystemExit(1)
        changes["sync_folder"] = sync_folder.strip()
    if per_highlight is not None:
        changes["create_note_per_highlight"] = per_highlight

    if not changes:
        console.print("[yellow]Nothing to change.[/yellow]")
        return

    executor = runtime.create_executor()
    try:
        client = apply_settings(replace(settings, **changes), settings_path, executor)
    finally:
        asyncio.run(executor.aclose())
    console.print(f"[green]Saved:[/green] {', '.join(sorted(changes))}")
    if client is None:
        console.print(
            "[yellow]BookRise API key is not set. Functionality requiring API access "
            "is disabled.[/yellow]"
        )
