# ABOUTME: Integration tests for the note synchronizer against a real directory vault.
# ABOUTME: Covers both layout modes, idempotence, overwrite-on-resync, and failure isolation.

import asyncio
from pathlib import Path

import pytest

from bookrise.api.client import BookriseClient
from bookrise.api.errors import ApiError, InvalidArgument, PathCollision
from bookrise.api.http import HttpResponse
from bookrise.sync import LocalVault, NoteSynchronizer, SyncMode, SyncReport
from tests.fixtures.bookrise_responses import (
    BOOKS_RESPONSE,
    FOO_ID,
    HIGHLIGHTS_RESPONSE,
    ROSE_ID,
)
from tests.fixtures.fake_http import FakeExecutor, json_response

ROSE_FOLDER = Path("BookRise") / "The Name of the Rose"


def _snapshot(root: Path) -> dict[str, str]:
    return {
        str(path.relative_to(root)): path.read_text(encoding="utf-8")
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


def _sync(
    client: BookriseClient, vault: LocalVault, mode: SyncMode, folder: str = "BookRise"
) -> SyncReport:
    return asyncio.run(NoteSynchronizer(client, vault, folder, mode).sync_all())


class TestAggregateMode:
    def test_one_note_per_book(self, library_client: BookriseClient, vault: LocalVault) -> None:
        report = _sync(library_client, vault, SyncMode.AGGREGATE)
        assert (report.total, report.succeeded, report.failed) == (2, 2, 0)

        rose_note = vault.root / ROSE_FOLDER / "The Name of the Rose.md"
        content = rose_note.read_text(encoding="utf-8")
        assert content.count("^h000000") == 2
        assert not (vault.root / ROSE_FOLDER / "_Highlights").exists()
        assert [p.name for p in (vault.root / ROSE_FOLDER).iterdir()] == [rose_note.name]

    def test_highlights_in_api_order(
        self, library_client: BookriseClient, vault: LocalVault
    ) -> None:
        _sync(library_client, vault, SyncMode.AGGREGATE)
        content = (vault.root / ROSE_FOLDER / "The Name of the Rose.md").read_text()
        assert content.index("Books are not made") < content.index("Stat rosa")

    def test_sanitized_folder_for_unsafe_title(
        self, library_client: BookriseClient, vault: LocalVault
    ) -> None:
        _sync(library_client, vault, SyncMode.AGGREGATE)
        foo_note = vault.root / "BookRise" / "Foo- Bar-Baz-" / "Foo- Bar-Baz-.md"
        assert foo_note.is_file()
        assert "(No highlights found or synced for this book.)" in foo_note.read_text()


class TestPerHighlightMode:
    def test_individual_notes_and_index(
        self, library_client: BookriseClient, vault: LocalVault
    ) -> None:
        report = _sync(library_client, vault, SyncMode.PER_HIGHLIGHT)
        assert report.succeeded == 2

        highlights_dir = vault.root / ROSE_FOLDER / "_Highlights"
        names = sorted(p.name for p in highlights_dir.iterdir())
        assert names == [
            "Books are not made to (h0000001).md",
            "Stat rosa pristina nomine (h0000002).md",
        ]

        index = (vault.root / ROSE_FOLDER / "The Name of the Rose.md").read_text()
        assert "## Highlights Index\n" in index
        assert "[[_Highlights/Books are not made to (h0000001)|" in index
        assert "[[_Highlights/Stat rosa pristina nomine (h0000002)|" in index

        note = (highlights_dir / names[0]).read_text()
        assert 'book: "[[The Name of the Rose]]"' in note
        assert f"highlight_id: {HIGHLIGHTS_RESPONSE[0]['id']}" in note

    def test_book_without_highlights_gets_one_note(
        self, library_client: BookriseClient, vault: LocalVault
    ) -> None:
        _sync(library_client, vault, SyncMode.PER_HIGHLIGHT)
        foo_folder = vault.root / "BookRise" / "Foo- Bar-Baz-"
        assert [p.name for p in foo_folder.iterdir()] == ["Foo- Bar-Baz-.md"]
        assert "No highlights found for this book." in (foo_folder / "Foo- Bar-Baz-.md").read_text()


class TestEmptyBook:
    def test_empty_book_scenario(self, vault: LocalVault) -> None:
        """A book with zero highlights still produces exactly one note."""
        executor = FakeExecutor(
            {
                "/api/highlights": json_response([]),
                "/api/books": json_response([{"id": "b1", "title": "Empty Book"}]),
            }
        )
        report = _sync(BookriseClient("t", executor), vault, SyncMode.AGGREGATE)
        assert report.succeeded == 1
        files = list((vault.root / "BookRise").rglob("*.md"))
        assert [f.relative_to(vault.root).as_posix() for f in files] == [
            "BookRise/Empty Book/Empty Book.md"
        ]
        assert "No highlights found" in files[0].read_text()


class TestIdempotence:
    @pytest.mark.parametrize("mode", list(SyncMode))
    def test_second_run_is_identical(
        self, library_client: BookriseClient, vault: LocalVault, mode: SyncMode
    ) -> None:
        _sync(library_client, vault, mode)
        first = _snapshot(vault.root)
        _sync(library_client, vault, mode)
        assert _snapshot(vault.root) == first

    def test_resync_overwrites_local_edits(
        self, library_client: BookriseClient, vault: LocalVault
    ) -> None:
        _sync(library_client, vault, SyncMode.AGGREGATE)
        note = vault.root / ROSE_FOLDER / "The Name of the Rose.md"
        original = note.read_text()
        note.write_text(original + "\nmy own thoughts\n", encoding="utf-8")

        _sync(library_client, vault, SyncMode.AGGREGATE)
        assert note.read_text() == original

    def test_removed_highlight_notes_are_left_in_place(self, vault: LocalVault) -> None:
        books = json_response([BOOKS_RESPONSE[0]])
        before = FakeExecutor(
            {"/api/highlights": json_response(HIGHLIGHTS_RESPONSE), "/api/books": books}
        )
        after = FakeExecutor(
            {"/api/highlights": json_response(HIGHLIGHTS_RESPONSE[:1]), "/api/books": books}
        )

        _sync(BookriseClient("t", before), vault, SyncMode.PER_HIGHLIGHT)
        _sync(BookriseClient("t", after), vault, SyncMode.PER_HIGHLIGHT)

        highlights_dir = vault.root / ROSE_FOLDER / "_Highlights"
        assert len(list(highlights_dir.iterdir())) == 2
        index = (vault.root / ROSE_FOLDER / "The Name of the Rose.md").read_text()
        assert "Stat rosa" not in index


class TestFailures:
    def test_no_books_reports_zero(self, vault: LocalVault) -> None:
        executor = FakeExecutor({"/api/books": json_response([])})
        report = _sync(BookriseClient("t", executor), vault, SyncMode.AGGREGATE)
        assert (report.total, report.succeeded, report.failed) == (0, 0, 0)
        assert not (vault.root / "BookRise").exists()

    def test_one_book_failing_does_not_stop_others(self, vault: LocalVault) -> None:
        executor = FakeExecutor(
            {
                f"book_id={ROSE_ID}": HttpResponse(500, '{"detail": "db down"}'),
                f"book_id={FOO_ID}": json_response([]),
                "/api/books": json_response(BOOKS_RESPONSE),
            }
        )
        report = _sync(BookriseClient("t", executor), vault, SyncMode.AGGREGATE)
        assert report.succeeded == 1
        assert report.failed == 1
        assert report.failures[0].book.id == ROSE_ID
        assert isinstance(report.failures[0].error, ApiError)
        assert (vault.root / "BookRise" / "Foo- Bar-Baz-" / "Foo- Bar-Baz-.md").exists()
        assert report.summary() == (
            "BookRise highlight sync finished. Synced 1 books. Failed for 1 books."
        )

    def test_root_collision_aborts_run(
        self, library_client: BookriseClient, vault: LocalVault
    ) -> None:
        (vault.root / "BookRise").write_text("not a folder")
        with pytest.raises(PathCollision):
            _sync(library_client, vault, SyncMode.AGGREGATE)

    def test_book_folder_collision_is_per_book(
        self, library_client: BookriseClient, vault: LocalVault
    ) -> None:
        (vault.root / "BookRise").mkdir()
        (vault.root / "BookRise" / "The Name of the Rose").write_text("file in the way")
        report = _sync(library_client, vault, SyncMode.AGGREGATE)
        assert report.failed == 1
        assert isinstance(report.failures[0].error, PathCollision)
        assert report.succeeded == 1

    def test_library_error_propagates(self, vault: LocalVault) -> None:
        executor = FakeExecutor({"/api/books": HttpResponse(401, '{"detail": "Bad key"}')})
        with pytest.raises(ApiError):
            _sync(BookriseClient("t", executor), vault, SyncMode.AGGREGATE)

    def test_nested_sync_folder(self, library_client: BookriseClient, vault: LocalVault) -> None:
        _sync(library_client, vault, SyncMode.AGGREGATE, folder="Reading/BookRise/")
        assert (vault.root / "Reading" / "BookRise" / "The Name of the Rose").is_dir()


ID_LESS_HIGHLIGHTS = [{"text_content": "no id here"}, {"id": "abcdef123", "text_content": "ok"}]


def _single_book_executor(book: dict, highlights: list) -> FakeExecutor:
    return FakeExecutor(
        {
            "/api/highlights": json_response(highlights),
            "/api/books": json_response([book]),
        }
    )


class TestUnusualInput:
    def test_highlight_without_id_still_syncs(self, vault: LocalVault) -> None:
        executor = _single_book_executor({"id": "b1", "title": "Book"}, ID_LESS_HIGHLIGHTS)
        report = _sync(BookriseClient("t", executor), vault, SyncMode.AGGREGATE)
        assert (report.succeeded, report.failed) == (1, 0)
        note = (vault.root / "BookRise" / "Book" / "Book.md").read_text(encoding="utf-8")
        assert "- no id here ^" in note
        assert "- ok ^abcdef12" in note

    def test_highlight_without_id_gets_stable_note(self, vault: LocalVault) -> None:
        executor = _single_book_executor({"id": "b1", "title": "Book"}, ID_LESS_HIGHLIGHTS)
        client = BookriseClient("t", executor)
        _sync(client, vault, SyncMode.PER_HIGHLIGHT)
        first = _snapshot(vault.root)
        _sync(client, vault, SyncMode.PER_HIGHLIGHT)
        assert _snapshot(vault.root) == first
        highlights_dir = vault.root / "BookRise" / "Book" / "_Highlights"
        names = sorted(p.name for p in highlights_dir.iterdir())
        assert len(names) == 2
        assert "ok (abcdef12).md" in names

    @pytest.mark.parametrize("title", [".", ".."])
    def test_dot_title_stays_under_sync_folder(self, vault: LocalVault, title: str) -> None:
        executor = _single_book_executor(
            {"id": "b1", "title": title}, [{"id": "h1", "text_content": "inside"}]
        )
        report = _sync(BookriseClient("t", executor), vault, SyncMode.AGGREGATE)
        assert report.succeeded == 1
        dashes = "-" * len(title)
        assert [p.relative_to(vault.root).as_posix() for p in vault.root.rglob("*.md")] == [
            f"BookRise/{dashes}/{dashes}.md"
        ]

    def test_dot_segment_in_sync_folder_aborts_run(
        self, library_client: BookriseClient, vault: LocalVault
    ) -> None:
        with pytest.raises(InvalidArgument):
            _sync(library_client, vault, SyncMode.AGGREGATE, folder="../Outside")
        assert not (vault.root.parent / "Outside").exists()


class TestSyncMode:
    @pytest.mark.parametrize(
        ("flag", "mode"), [(True, SyncMode.PER_HIGHLIGHT), (False, SyncMode.AGGREGATE)]
    )
    def test_from_flag(self, flag: bool, mode: SyncMode) -> None:
        assert SyncMode.from_flag(flag) is mode
