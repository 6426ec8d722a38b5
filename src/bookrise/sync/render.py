# ABOUTME: Renders BookRise books and highlights as Markdown notes with YAML frontmatter.
# ABOUTME: Output is deterministic for a given input so repeated syncs are byte-identical.

import uuid

from bookrise.api.types import Book, Highlight
from bookrise.sync.naming import (
    HIGHLIGHT_ID_PREFIX_LEN,
    author_tag,
    color_tag,
    highlight_file_stem,
    highlight_title,
    sanitize_file_name,
)

PROVENANCE_TAG = "BookRise"
HIGHLIGHT_TAG = "BookRiseHighlight"
HIGHLIGHTS_FOLDER = "_Highlights"

NO_HIGHLIGHTS_AGGREGATE = "(No highlights found or synced for this book.)"
NO_HIGHLIGHTS_PER_HIGHLIGHT = "No highlights found for this book."
EMPTY_HIGHLIGHT_BODY = "(This highlight has no text or note content from BookRise.)"


def _quoted(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _tag_list(tags: list[str]) -> str:
    return "[" + ", ".join(_quoted(tag.replace(":", "-")) for tag in tags) + "]"


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


def book_tags(book: Book) -> list[str]:
    """The book's own tags followed by the tags this tool adds, without duplicates."""
    added = [PROVENANCE_TAG]
    if book.author:
        added.append(author_tag(book.author))
    return _unique([*book.tags, *added])


def book_frontmatter(book: Book) -> str:
    lines = ["---", f"title: {_quoted(book.title.replace(':', '-'))}", f"id: {book.id}"]
    if book.author:
        lines.append(f"author: {_quoted(book.author)}")
    if book.isbn:
        lines.append(f"isbn: {_quoted(book.isbn)}")
    if book.percent_read is not None:
        lines.append(f"percent_read: {book.percent_read}")
    lines.append(f"tags: {_tag_list(book_tags(book))}")
    lines.append(f"source: {PROVENANCE_TAG}")
    lines.append("---")
    return "\n".join(lines) + "\n\n"


def highlight_tags(highlight: Highlight, book: Book) -> list[str]:
    tags = [PROVENANCE_TAG, HIGHLIGHT_TAG]
    if book.author:
        tags.append(author_tag(book.author))
    if highlight.color:
        tags.append(color_tag(highlight.color))
    return tags


def highlight_frontmatter(highlight: Highlight, book: Book, book_note_name: str) -> str:
    """Frontmatter for an individual highlight note, linking back to the book note."""
    title = sanitize_file_name(highlight_title(highlight).replace(":", "-"))
    lines = [
        "---",
        f"title: {_quoted(title)}",
        f'book: "[[{book_note_name}]]"',
        f"book_id: {book.id}",
    ]
    if highlight.id:
        lines.append(f"highlight_id: {highlight.id}")
    if highlight.color:
        lines.append(f"color: {highlight.color}")
    if highlight.page is not None:
        lines.append(f"page: {highlight.page}")
    if highlight.location:
        lines.append(f"location: {_quoted(highlight.location)}")
    if highlight.created_at:
        lines.append(f"highlight_created_at: {highlight.created_at}")
    lines.append(f"tags: {_tag_list(highlight_tags(highlight, book))}")
    lines.append("---")
    return "\n".join(lines) + "\n\n"


def block_id(highlight: Highlight) -> str:
    """Block reference id for deep-linking a list item to its highlight."""
    if highlight.id:
        return highlight.id[:HIGHLIGHT_ID_PREFIX_LEN]
    return uuid.uuid4().hex[:HIGHLIGHT_ID_PREFIX_LEN]


def format_highlight_list_item(highlight: Highlight) -> str:
    """Render a highlight as one list item of the aggregate book note.

    The primary line is the highlighted text, or the note when there is no
    text. When both exist the note becomes an indented sub-item.
    """
    metadata = []
    if highlight.page is not None:
        metadata.append(f"p. {highlight.page}")
    if highlight.location:
        metadata.append(f"loc. {highlight.location}")
    suffix = f" ({', '.join(metadata)})" if metadata else ""
    if highlight.color:
        suffix += f" #{color_tag(highlight.color)}"

    sub_note = ""
    if highlight.text_content:
        primary = highlight.text_content.replace("\n", "\n  ")
        if highlight.note:
            note = highlight.note.replace("\n", "\n    ")
            sub_note = f"  - **Note:** {note}\n"
    elif highlight.note:
        primary = "**Note:** " + highlight.note.replace("\n", "\n  ")
    else:
        primary = ""

    line = (primary.strip() + suffix).strip()
    item = f"- {line} ^{block_id(highlight)}\n" if line else f"- ^{block_id(highlight)}\n"
    return item + sub_note + "\n"


def format_highlight_note_body(highlight: Highlight) -> str:
    body = ""
    if highlight.text_content:
        body += f"{highlight.text_content}\n\n"
    if highlight.note:
        body += f"**Note:**\n{highlight.note}\n\n"
    if not highlight.text_content and not highlight.note:
        body += f"{EMPTY_HIGHLIGHT_BODY}\n"
    return body


def book_note_header(book: Book) -> str:
    return book_frontmatter(book) + f"# {book.title}\n\n"


def render_aggregate_note(book: Book, highlights: list[Highlight]) -> str:
    """The single book note holding every highlight as a list item, in API order."""
    content = book_note_header(book) + f"# Highlights for {book.title}\n\n"
    if not highlights:
        return content + f"{NO_HIGHLIGHTS_AGGREGATE}\n"
    return content + "".join(format_highlight_list_item(hl) for hl in highlights)


def render_highlight_note(highlight: Highlight, book: Book, book_note_name: str) -> str:
    return highlight_frontmatter(highlight, book, book_note_name) + format_highlight_note_body(
        highlight
    )


def highlight_index_link(highlight: Highlight, file_name: str) -> str:
    """Index line in the book note pointing at a per-highlight note."""
    stem = file_name.removesuffix(".md")
    label = highlight_file_stem(highlight)
    return f"- [[{HIGHLIGHTS_FOLDER}/{stem}|{label} ({highlight.color or 'highlight'})]]"


def render_index_note(book: Book, links: list[str]) -> str:
    """The book note for per-highlight mode: an index of links to each highlight note."""
    content = book_note_header(book)
    if not links:
        return content + f"{NO_HIGHLIGHTS_PER_HIGHLIGHT}\n"
    content += (
        f'This book\'s highlights are stored as individual notes in the "{HIGHLIGHTS_FOLDER}" '
        "subfolder.\n\n## Highlights Index\n"
    )
    return content + "\n".join(links) + "\n"
