# ABOUTME: Maps decoded BookRise JSON payloads onto Book, Highlight and ChatResponse.
# ABOUTME: Shape mismatches raise MalformedResponse instead of leaking KeyErrors.

import json
from typing import Any

from bookrise.api.errors import MalformedResponse
from bookrise.api.types import Book, ChatResponse, Highlight


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None or value == "":
        return None
    return str(value)


def _optional_number(data: dict[str, Any], key: str) -> Any:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _require_list(data: Any, what: str) -> list[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise MalformedResponse(f"Expected a JSON array of {what}", json.dumps(data))
    return data


def _require_object(item: Any, what: str) -> dict[str, Any]:
    if not isinstance(item, dict):
        raise MalformedResponse(f"Expected a JSON object for {what}", json.dumps(item))
    return item


def _require_id(item: dict[str, Any], what: str) -> str:
    value = item.get("id")
    if value is None or value == "":
        raise MalformedResponse(f"{what} is missing its id", json.dumps(item))
    return str(value)


def parse_book(data: Any) -> Book:
    """Build a Book from one element of the /api/books array."""
    item = _require_object(data, "book")
    book_id = _require_id(item, "Book")
    title = item.get("title")
    if not isinstance(title, str) or not title:
        raise MalformedResponse(f"Book {book_id} is missing its title", json.dumps(item))

    tags = item.get("tags") or []
    if not isinstance(tags, list):
        tags = []

    return Book(
        id=book_id,
        title=title,
        author=_optional_str(item, "author"),
        isbn=_optional_str(item, "isbn"),
        tags=tuple(str(tag) for tag in tags),
        percent_read=_optional_number(item, "percent_read"),
        assistant_id=_optional_str(item, "assistant_id"),
    )


def parse_books(data: Any) -> list[Book]:
    """Parse the /api/books response body. A null body is an empty library."""
    return [parse_book(item) for item in _require_list(data, "books")]


def parse_highlight(data: Any) -> Highlight:
    """Build a Highlight from one element of the /api/highlights array."""
    item = _require_object(data, "highlight")
    page = _optional_number(item, "page")
    return Highlight(
        id=_optional_str(item, "id"),
        book_id=_optional_str(item, "book_id"),
        text_content=_optional_str(item, "text_content"),
        note=_optional_str(item, "note"),
        page=int(page) if page is not None else None,
        location=_optional_str(item, "location"),
        color=_optional_str(item, "color"),
        created_at=_optional_str(item, "created_at"),
        updated_at=_optional_str(item, "updated_at"),
        user_id=_optional_str(item, "user_id"),
        cfi_range=_optional_str(item, "cfi_range"),
    )


def parse_highlights(data: Any) -> list[Highlight]:
    """Parse the /api/highlights response body."""
    return [parse_highlight(item) for item in _require_list(data, "highlights")]


def parse_chat_response(data: Any) -> ChatResponse:
    """Parse a non-streaming /chat response body.

    Chapters that are not integers are dropped; paragraph ids keep their order.
    """
    item = _require_object(data, "chat response")
    answer = item.get("answer")
    if not isinstance(answer, str):
        raise MalformedResponse("Chat response is missing its answer", json.dumps(item))

    paragraph_ids = item.get("cited_paragraph_ids") or []
    chapters = item.get("cited_chapters") or []
    return ChatResponse(
        answer=answer,
        cited_paragraph_ids=(
            [str(pid) for pid in paragraph_ids] if isinstance(paragraph_ids, list) else []
        ),
        cited_chapters={
            int(ch)
            for ch in (chapters if isinstance(chapters, list) else [])
            if isinstance(ch, (int, float)) and not isinstance(ch, bool)
        },
    )
