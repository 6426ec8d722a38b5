# ABOUTME: Data structures mirroring the BookRise API resources.
# ABOUTME: Book and Highlight are read-only mirrors; ChatResponse is built per exchange.

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Book:
    """A book in the user's BookRise library.

    Identity is `id`. Tags keep the order the API returned them in.
    """

    id: str
    title: str
    author: str | None = None
    isbn: str | None = None
    tags: tuple[str, ...] = ()
    percent_read: float | None = None
    assistant_id: str | None = None


@dataclass(frozen=True)
class Highlight:
    """A highlight or annotation captured in one book."""

    id: str | None
    book_id: str | None = None
    text_content: str | None = None
    note: str | None = None
    page: int | None = None
    location: str | None = None
    color: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    user_id: str | None = None
    cfi_range: str | None = None


@dataclass
class ChatResponse:
    """Answer to one chat exchange, with whatever citations the backend sent."""

    answer: str
    cited_paragraph_ids: list[str] = field(default_factory=list)
    cited_chapters: set[int] = field(default_factory=set)
