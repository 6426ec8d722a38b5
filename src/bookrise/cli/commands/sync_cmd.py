# ABOUTME: The `bookrise sync` command for mirroring highlights into a vault.
# ABOUTME: Runs the note synchronizer against a local vault directory and reports per-book results.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from bookrise.cli import runtime
from bookrise.cli.options import api_key_option, mode_option, settings_option
from bookrise.config import Settings
from bookrise.sync import LocalVault, NoteSynchronizer, SyncMode, SyncReport


async def _sync(settings: Settings, vault: LocalVault, mode: SyncMode) -> SyncReport:
    async with runtime.open_client(settings) as client:
        synchronizer = NoteSynchronizer(client, vault, settings.sync_folder, mode)
        return await synchronizer.sync_all()


@click.command()
@click.option(
    "--vault",
    "vault_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Vault root directory the sync folder lives in.",
)
@mode_option
@settings_option
@api_key_option
def sync(
    vault_dir: Path,
    per_highlight: bool | None,
    settings_path: Path | None,
    api_key: str | None,
) -> None:
    """Sync BookRise highlights into notes."""
    console = Console()
    settings = runtime.resolve_settings(console, settings_path, api_key)
    if per_highlight is None:
        per_highlight = settings.create_note_per_highlight
    mode = SyncMode.from_flag(per_highlight)

    vault_dir.mkdir(parents=True, exist_ok=True)
    console.print(f"[dim]Starting BookRise highlight sync ({mode.value})...[/dim]")
    report = runtime.run(console, _sync(settings, LocalVault(vault_dir), mode))

    if report.total == 0:
        console.print("[yellow]No books found in your BookRise library.[/yellow]")
        return

    for failure in report.failures:
        title = escape(failure.book.title)
        console.print(f"  [red]Error syncing {title}:[/red] {escape(str(failure.error))}")

    parts = []
    if report.succeeded:
        parts.append(f"[green]Synced {report.succeeded} books.[/green]")
    if report.failed:
        parts.append(f"[red]Failed for {report.failed} books.[/red]")
    console.print(f"\nBookRise highlight sync finished. {' '.join(parts)}")
