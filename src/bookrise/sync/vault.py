# ABOUTME: File-store abstraction the note synchronizer writes through.
# ABOUTME: LocalVault maps vault-relative paths onto a directory on disk.

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from bookrise.api.errors import InvalidArgument


@dataclass(frozen=True)
class VaultEntry:
    """A file or folder that exists in the vault."""

    path: str
    is_folder: bool


@runtime_checkable
class FileStore(Protocol):
    """Protocol for the minimal vault operations the synchronizer needs.

    Paths are vault-relative and `/`-separated. Create-or-update is the
    caller's job: check `exists`, then branch.
    """

    async def exists(self, path: str) -> VaultEntry | None: ...

    async def create_folder(self, path: str) -> None: ...

    async def create_file(self, path: str, content: str) -> None: ...

    async def modify_file(self, entry: VaultEntry, content: str) -> None: ...


class LocalVault:
    """FileStore over a plain directory, such as an Obsidian vault root."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def resolve(self, path: str) -> Path:
        """Map a vault-relative path to its location on disk.

        Raises:
            InvalidArgument: If a segment is "." or "..".
        """
        parts = [part for part in path.split("/") if part]
        if any(part in (".", "..") for part in parts):
            raise InvalidArgument(f"Vault path may not contain . or .. segments: {path}")
        return self.root.joinpath(*parts)

    async def exists(self, path: str) -> VaultEntry | None:
        target = self.resolve(path)
        if not target.exists():
            return None
        return VaultEntry(path=path, is_folder=target.is_dir())

    async def create_folder(self, path: str) -> None:
        self.resolve(path).mkdir(parents=True, exist_ok=True)

    async def create_file(self, path: str, content: str) -> None:
        target = self.resolve(path)
        # "x" mode: creating must never clobber an existing note
        with target.open("x", encoding="utf-8", newline="") as f:
            f.write(content)

    async def modify_file(self, entry: VaultEntry, content: str) -> None:
        if entry.is_folder:
            raise IsADirectoryError(entry.path)
        self.resolve(entry.path).write_text(content, encoding="utf-8", newline="")
