# ABOUTME: Mirrors BookRise books and highlights into a vault folder tree.
# ABOUTME: Each run fully regenerates the notes; one book's failure never stops the others.

import enum
import logging
from dataclasses import dataclass, field

from bookrise.api.client import BookriseClient
from bookrise.api.errors import BookriseError, PathCollision
from bookrise.api.types import Book, Highlight
from bookrise.sync.naming import highlight_file_name, join_vault_path, sanitize_file_name
from bookrise.sync.render import (
    HIGHLIGHTS_FOLDER,
    highlight_index_link,
    render_aggregate_note,
    render_highlight_note,
    render_index_note,
)
from bookrise.sync.vault import FileStore

logger = logging.getLogger(__name__)


class SyncMode(enum.Enum):
    AGGREGATE = "aggregate"
    PER_HIGHLIGHT = "per-highlight"

    @classmethod
    def from_flag(cls, create_note_per_highlight: bool) -> "SyncMode":
        return cls.PER_HIGHLIGHT if create_note_per_highlight else cls.AGGREGATE


@dataclass
class BookFailure:
    """A book that could not be synced, and why."""

    book: Book
    error: Exception


@dataclass
class SyncReport:
    """Outcome of one sync run."""

    total: int = 0
    succeeded: int = 0
    failures: list[BookFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    def summary(self) -> str:
        text = "BookRise highlight sync finished."
        if self.succeeded:
            text += f" Synced {self.succeeded} books."
        if self.failed:
            text += f" Failed for {self.failed} books."
        return text


@dataclass(frozen=True)
class BookNotePaths:
    """Where one book's notes live in the vault."""

    folder: str
    note_name: str

    @property
    def main_note(self) -> str:
        return join_vault_path(self.folder, f"{self.note_name}.md")

    @property
    def highlights_folder(self) -> str:
        return join_vault_path(self.folder, HIGHLIGHTS_FOLDER)

    def highlight_note(self, file_name: str) -> str:
        return join_vault_path(self.highlights_folder, file_name)


class NoteSynchronizer:
    """Writes one folder per book under `sync_folder`.

    In aggregate mode each book gets a single note listing its highlights.
    In per-highlight mode every highlight gets its own note under
    `_Highlights`, and the book note becomes an index of links. Notes left
    over from highlights deleted remotely are not removed.
    """

    def __init__(
        self,
        client: BookriseClient,
        store: FileStore,
        sync_folder: str,
        mode: SyncMode = SyncMode.AGGREGATE,
    ) -> None:
        self._client = client
        self._store = store
        self._sync_folder = sync_folder
        self._mode = mode

    def paths_for(self, book: Book) -> BookNotePaths:
        name = sanitize_file_name(book.title)
        return BookNotePaths(folder=join_vault_path(self._sync_folder, name), note_name=name)

    async def sync_all(self) -> SyncReport:
        """Sync every book in the library.

        Raises:
            BookriseError: If the library cannot be listed or the root folder
                cannot be created (PathCollision when a file is in the way).
        """
        report = SyncReport()
        books = await self._client.list_books()
        if not books:
            logger.info("No books found in the BookRise library.")
            return report

        logger.info("Found %d books. Fetching highlights...", len(books))
        await self.ensure_folder(self._sync_folder)

        report.total = len(books)
        for book in books:
            try:
                await self.sync_book(book)
            except (BookriseError, OSError) as exc:
                logger.error("Failed to sync highlights for book: %s: %s", book.title, exc)
                report.failures.append(BookFailure(book=book, error=exc))
            else:
                report.succeeded += 1

        logger.info(report.summary())
        return report

    async def sync_book(self, book: Book) -> None:
        """Regenerate every note belonging to one book."""
        paths = self.paths_for(book)
        await self.ensure_folder(paths.folder)

        highlights = await self._client.list_highlights(book.id)
        if not highlights:
            logger.info("No highlights found for book: %s", book.title)
        else:
            logger.info("Processing %d highlights for book: %s", len(highlights), book.title)

        if self._mode is SyncMode.PER_HIGHLIGHT:
            await self._sync_per_highlight(book, highlights, paths)
        else:
            await self.write_note(paths.main_note, render_aggregate_note(book, highlights))
        logger.debug("Created/Updated main book file for: %s at %s", book.title, paths.main_note)

    async def _sync_per_highlight(
        self, book: Book, highlights: list[Highlight], paths: BookNotePaths
    ) -> None:
        links = []
        if highlights:
            await self.ensure_folder(paths.highlights_folder)
        for hl in highlights:
            file_name = highlight_file_name(hl)
            await self.write_note(
                paths.highlight_note(file_name), render_highlight_note(hl, book, paths.note_name)
            )
            logger.debug("Created/Updated highlight note: %s for book %s", file_name, book.title)
            links.append(highlight_index_link(hl, file_name))
        await self.write_note(paths.main_note, render_index_note(book, links))

    async def ensure_folder(self, path: str) -> None:
        """Create the folder if missing.

        Raises:
            PathCollision: If a file already occupies the path.
        """
        entry = await self._store.exists(path)
        if entry is None:
            await self._store.create_folder(path)
            logger.debug("Created folder: %s", path)
        elif not entry.is_folder:
            raise PathCollision(path)

    async def write_note(self, path: str, content: str) -> None:
        """Create the note, or overwrite it if it already exists."""
        entry = await self._store.exists(path)
        if entry is None:
            await self._store.create_file(path, content)
        else:
            await self._store.modify_file(entry, content)
