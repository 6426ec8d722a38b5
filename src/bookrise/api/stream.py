# ABOUTME: Decoder for the event-stream bodies returned by the streaming chat endpoint.
# ABOUTME: Emits incremental answer text per `data:` line and aggregates citations.

import enum
import inspect
import json
import logging
from collections.abc import AsyncIterable, Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from bookrise.api.errors import StreamFailure, TransportError
from bookrise.api.types import ChatResponse

logger = logging.getLogger(__name__)

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"

# Fields that may carry answer text, highest priority first.
_TEXT_FIELDS = ("content", "answer", "delta")

ChunkCallback = Callable[[str], Awaitable[None] | None]


class EventKind(enum.Enum):
    DONE = "done"
    TEXT = "text"
    EMPTY = "empty"


@dataclass(frozen=True)
class StreamEvent:
    """One decoded `data:` payload."""

    kind: EventKind
    text: str = ""
    cited_chapters: tuple[int, ...] = ()
    cited_paragraph_ids: tuple[str, ...] = ()


def _chapters(parsed: dict[str, Any]) -> tuple[int, ...]:
    raw = parsed.get("cited_chapters")
    if not isinstance(raw, list):
        return ()
    return tuple(
        int(ch) for ch in raw if isinstance(ch, (int, float)) and not isinstance(ch, bool)
    )


def _paragraph_ids(parsed: dict[str, Any]) -> tuple[str, ...]:
    raw = parsed.get("cited_paragraph_ids")
    if not isinstance(raw, list):
        return ()
    return tuple(str(pid) for pid in raw)


def decode_payload(payload: str) -> StreamEvent:
    """Decode the text after `data:` into a StreamEvent.

    Text is taken from the first non-empty string among `content`, `answer`
    and `delta`, or from the payload itself when it is a bare JSON string.
    Payloads that are not JSON are passed through verbatim as text.
    """
    if payload == DONE_SENTINEL:
        return StreamEvent(EventKind.DONE)

    try:
        parsed = json.loads(payload)
    except ValueError as exc:
        logger.warning("Failed to parse chat stream chunk %r: %s", payload, exc)
        return StreamEvent(EventKind.TEXT, text=payload)

    if isinstance(parsed, str):
        return StreamEvent(EventKind.TEXT if parsed else EventKind.EMPTY, text=parsed)
    if not isinstance(parsed, dict):
        return StreamEvent(EventKind.EMPTY)

    logger.debug("Parsed stream data chunk: %s", payload)
    chapters = _chapters(parsed)
    paragraph_ids = _paragraph_ids(parsed)
    for name in _TEXT_FIELDS:
        value = parsed.get(name)
        if isinstance(value, str) and value:
            return StreamEvent(EventKind.TEXT, value, chapters, paragraph_ids)
    return StreamEvent(EventKind.EMPTY, "", chapters, paragraph_ids)


@dataclass
class ChatStreamDecoder:
    """Accumulates a chat answer line by line.

    Feed raw lines in stream order; `result()` returns the aggregate so far.
    """

    chunks: list[str] = field(default_factory=list)
    cited_chapters: set[int] = field(default_factory=set)
    cited_paragraph_ids: list[str] = field(default_factory=list)
    done: bool = False
    lines_seen: int = 0

    def feed_line(self, raw_line: str) -> str | None:
        """Consume one line and return the chunk it carries, if any."""
        self.lines_seen += 1
        line = raw_line.strip()
        if not line.startswith(DATA_PREFIX):
            return None

        payload = line[len(DATA_PREFIX):].strip()
        if not payload:
            return None

        event = decode_payload(payload)
        if event.kind is EventKind.DONE:
            self.done = True
            return None

        self.cited_chapters.update(event.cited_chapters)
        for pid in event.cited_paragraph_ids:
            if pid not in self.cited_paragraph_ids:
                self.cited_paragraph_ids.append(pid)

        if event.kind is EventKind.TEXT:
            self.chunks.append(event.text)
            return event.text
        return None

    def result(self) -> ChatResponse:
        return ChatResponse(
            answer="".join(self.chunks),
            cited_paragraph_ids=list(self.cited_paragraph_ids),
            cited_chapters=set(self.cited_chapters),
        )


async def _deliver(on_chunk: ChunkCallback | None, chunk: str) -> None:
    if on_chunk is None:
        return
    outcome = on_chunk(chunk)
    if inspect.isawaitable(outcome):
        await outcome


async def decode_lines(
    lines: AsyncIterable[str],
    on_chunk: ChunkCallback | None = None,
    decoder: ChatStreamDecoder | None = None,
) -> ChatResponse:
    """Decode an async line stream, calling on_chunk for each chunk before reading on.

    Raises:
        StreamFailure: If the underlying reader fails. Chunks already passed
            to on_chunk stay delivered.
    """
    if decoder is None:
        decoder = ChatStreamDecoder()
    try:
        async for line in lines:
            chunk = decoder.feed_line(line)
            if chunk is not None:
                await _deliver(on_chunk, chunk)
    except (TransportError, OSError) as exc:
        logger.warning(
            "Chat stream interrupted after %d chunks: %s", len(decoder.chunks), exc
        )
        raise StreamFailure(f"Chat stream interrupted: {exc}") from exc
    return decoder.result()


def decode_text(
    text: str, on_chunk: Callable[[str], Any] | None = None
) -> ChatResponse:
    """Decode a fully-buffered event-stream body."""
    decoder = ChatStreamDecoder()
    for line in text.splitlines():
        chunk = decoder.feed_line(line)
        if chunk is not None and on_chunk is not None:
            on_chunk(chunk)
    return decoder.result()
