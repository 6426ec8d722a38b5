# ABOUTME: Persistent settings for the BookRise tool and the client they configure.
# ABOUTME: Settings are merged over defaults on load; applying them rebuilds the client.

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from bookrise.api.client import BookriseClient
from bookrise.api.errors import BookriseError
from bookrise.api.http import HttpExecutor, HttpxExecutor

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path.home() / ".bookrise" / "settings.json"


class ConfigError(BookriseError):
    """Raised when the settings file exists but cannot be read."""


@dataclass
class Settings:
    """User settings. Read-only while a sync or chat is running."""

    api_key: str = ""
    sync_folder: str = "BookRise"
    create_note_per_highlight: bool = False


def load_settings(path: Path | None = None) -> Settings:
    """Load settings, filling anything missing from the defaults.

    A missing file yields the defaults. Unknown keys are ignored.

    Raises:
        ConfigError: If the file cannot be read, is not a JSON object, or holds
            a value of the wrong type.
    """
    settings_path = path or DEFAULT_SETTINGS_PATH
    if not settings_path.exists():
        return Settings()

    try:
        stored = json.loads(settings_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Cannot read settings from {settings_path}: {exc}") from exc
    if not isinstance(stored, dict):
        raise ConfigError(f"Settings file {settings_path} does not hold a JSON object")

    values = {}
    for f in fields(Settings):
        if f.name not in stored:
            continue
        value = stored[f.name]
        if not isinstance(value, type(f.default)):
            raise ConfigError(
                f"Setting {f.name!r} in {settings_path} must be a "
                f"{type(f.default).__name__}, got {json.dumps(value)}"
            )
        values[f.name] = value
    return Settings(**values)


def save_settings(settings: Settings, path: Path | None = None) -> None:
    settings_path = path or DEFAULT_SETTINGS_PATH
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    settings_path.write_text(json.dumps(asdict(settings), indent=2) + "\n", encoding="utf-8")


def build_client(settings: Settings, executor: HttpExecutor | None = None) -> BookriseClient:
    """Construct a client for the settings' API key."""
    return BookriseClient(settings.api_key, executor or HttpxExecutor())


def apply_settings(
    settings: Settings,
    path: Path | None = None,
    executor: HttpExecutor | None = None,
) -> BookriseClient | None:
    """Persist new settings and rebuild the client from them.

    Returns None when the API key is empty: API access is disabled until a
    key is configured again.
    """
    save_settings(settings, path)
    if not settings.api_key:
        logger.warning(
            "BookRise API key has been cleared. Functionality requiring API access "
            "will be disabled."
        )
        return None
    return build_client(settings, executor)
