# ABOUTME: CLI package for BookRise, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.logging import RichHandler

from bookrise.cli.commands import books_cmd, chat_cmd, config_cmd, sync_cmd


@click.group()
@click.version_option(package_name="bookrise")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """BookRise - sync highlights into notes and chat about your books."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


cli.add_command(books_cmd.books)
cli.add_command(books_cmd.highlights)
cli.add_command(chat_cmd.chat)
cli.add_command(config_cmd.config)
cli.add_command(sync_cmd.sync)
