# ABOUTME: Shared Click options for BookRise CLI commands.
# ABOUTME: Provides reusable decorators for the settings file and API key overrides.

from pathlib import Path

import click

from bookrise.config import DEFAULT_SETTINGS_PATH

settings_option = click.option(
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Path to the settings file (default: {DEFAULT_SETTINGS_PATH})",
)

api_key_option = click.option(
    "--api-key",
    "api_key",
    envvar="BOOKRISE_API_KEY",
    default=None,
    help="BookRise API key; overrides the stored one (env: BOOKRISE_API_KEY).",
)

mode_option = click.option(
    "--per-highlight/--aggregate",
    "per_highlight",
    default=None,
    help="Write one note per highlight, or all highlights in the book note.",
)
