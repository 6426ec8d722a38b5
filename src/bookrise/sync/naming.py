# ABOUTME: File-name and tag helpers for notes generated from BookRise data.
# ABOUTME: Sanitizes titles into vault-safe names and derives author and color tags.

import hashlib
import re

from bookrise.api.types import Highlight

_FORBIDDEN_CHARS_RE = re.compile(r'[/\\:*?"<>|]')
_WHITESPACE_RE = re.compile(r"\s+")
_AUTHOR_TAG_RE = re.compile(r"[^a-zA-Z0-9\-_]")
_DOTS_ONLY_RE = re.compile(r"\.+")

HIGHLIGHT_ID_PREFIX_LEN = 8


def sanitize_file_name(name: str) -> str:
    """Replace characters that are illegal in file names with '-' and collapse whitespace.

    Names made only of dots ('.', '..') would point at the current or parent
    folder, so every dot becomes '-'.
    """
    sanitized = _WHITESPACE_RE.sub(" ", _FORBIDDEN_CHARS_RE.sub("-", name))
    if _DOTS_ONLY_RE.fullmatch(sanitized):
        return "-" * len(sanitized)
    return sanitized


def join_vault_path(*parts: str) -> str:
    """Join vault path segments with '/' without producing '//'."""
    joined = "/".join(parts)
    while "//" in joined:
        joined = joined.replace("//", "/")
    return joined


def author_tag(author: str) -> str:
    """Tag for an author: every character outside [A-Za-z0-9_-] becomes '_'."""
    return f"author/{_AUTHOR_TAG_RE.sub('_', author)}"


def color_tag(color: str) -> str:
    return f"hlcolor/{_WHITESPACE_RE.sub('_', color.lower())}"


def _leading_words(text: str, count: int) -> tuple[str, bool]:
    words = text.split()
    return " ".join(words[:count]), len(words) > count


def highlight_file_stem(highlight: Highlight) -> str:
    """Short, sanitized label used to name a per-highlight note.

    Returns the label without the id suffix; see `highlight_file_name`.
    """
    if highlight.text_content:
        label, _ = _leading_words(highlight.text_content, 5)
    elif highlight.note:
        label = "Note - " + _leading_words(highlight.note, 4)[0]
    else:
        label = "Highlight"
    return sanitize_file_name(label)


def highlight_file_name(highlight: Highlight) -> str:
    """File name of a per-highlight note, unique through the id prefix."""
    return f"{highlight_file_stem(highlight)} ({highlight_short_id(highlight)}).md"


def highlight_short_id(highlight: Highlight) -> str:
    """Id prefix that keeps a highlight's note name the same across syncs.

    Highlights without an id fall back to a digest of their content.
    """
    if highlight.id:
        return sanitize_file_name(highlight.id)[:HIGHLIGHT_ID_PREFIX_LEN]
    content = "\n".join(
        value or ""
        for value in (highlight.cfi_range, highlight.text_content, highlight.note)
    )
    return hashlib.sha1(content.encode("utf-8")).hexdigest()[:HIGHLIGHT_ID_PREFIX_LEN]


def highlight_title(highlight: Highlight) -> str:
    """Title for a highlight note's frontmatter, with '...' when truncated."""
    if highlight.text_content:
        title, truncated = _leading_words(highlight.text_content, 7)
    elif highlight.note:
        words, truncated = _leading_words(highlight.note, 6)
        title = f"Note: {words}"
    else:
        return "BookRise Highlight"
    return title + "..." if truncated else title
