# ABOUTME: Shared pytest fixtures for BookRise tests.
# ABOUTME: Provides canned API executors, parsed books and highlights, and a temporary vault.

from pathlib import Path

import pytest

from bookrise.api.client import BookriseClient
from bookrise.api.parser import parse_books, parse_highlights
from bookrise.api.types import Book, Highlight
from bookrise.sync.vault import LocalVault
from tests.fixtures.bookrise_responses import (
    BOOKS_RESPONSE,
    CHAT_RESPONSE,
    CHAT_STREAM_LINES,
    FOO_ID,
    HIGHLIGHTS_RESPONSE,
    ROSE_ID,
)
from tests.fixtures.fake_http import FakeExecutor, FakeStream, json_response


@pytest.fixture
def rose() -> Book:
    """The fully-populated sample book."""
    return parse_books(BOOKS_RESPONSE)[0]


@pytest.fixture
def rose_highlights() -> list[Highlight]:
    return parse_highlights(HIGHLIGHTS_RESPONSE)


@pytest.fixture
def library_executor() -> FakeExecutor:
    """Executor serving the sample library: two highlights for Rose, none for Foo."""
    return FakeExecutor(
        responses={
            f"book_id={ROSE_ID}": json_response(HIGHLIGHTS_RESPONSE),
            f"book_id={FOO_ID}": json_response([]),
            "/api/books": json_response(BOOKS_RESPONSE),
            "/chat": json_response(CHAT_RESPONSE),
        },
        streams={"/chat": FakeStream(CHAT_STREAM_LINES)},
    )


@pytest.fixture
def library_client(library_executor: FakeExecutor) -> BookriseClient:
    return BookriseClient("test-token", library_executor, base_url="https://bookrise.test")


@pytest.fixture
def vault(tmp_path: Path) -> LocalVault:
    root = tmp_path / "vault"
    root.mkdir()
    return LocalVault(root)


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / "config" / "settings.json"
