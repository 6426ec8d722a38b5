# ABOUTME: Typed async client for the BookRise REST and chat endpoints.
# ABOUTME: Lists books and highlights and sends chat prompts, streamed or buffered.

import json
import logging
from typing import Any
from urllib.parse import urlencode

from bookrise.api.errors import (
    BookriseError,
    ChatFailure,
    EmptyResponse,
    InvalidArgument,
    NotFound,
)
from bookrise.api.http import HttpExecutor, HttpRequest, HttpResponse
from bookrise.api.normalizer import raise_for_status, send
from bookrise.api.parser import parse_books, parse_chat_response, parse_highlights
from bookrise.api.stream import ChatStreamDecoder, ChunkCallback, decode_lines
from bookrise.api.types import Book, ChatResponse, Highlight

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://app.bookrise.io"
CHAT_ENDPOINT = "/chat"


class BookriseClient:
    """Client for the BookRise API.

    Uses a dependency-injected HttpExecutor so tests never touch the network.
    Every request carries the bearer token it was constructed with.
    """

    def __init__(
        self, token: str, executor: HttpExecutor, base_url: str = DEFAULT_BASE_URL
    ) -> None:
        self._token = token
        self._executor = executor
        self._base_url = base_url.rstrip("/")

    def _headers(self, **extra: str) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }
        headers.update(extra)
        return headers

    def _request(self, endpoint: str, method: str = "GET", body: str | None = None) -> HttpRequest:
        return HttpRequest(
            url=f"{self._base_url}{endpoint}",
            method=method,
            headers=self._headers(),
            body=body,
        )

    async def _send(self, request: HttpRequest) -> Any:
        logger.debug("Requesting: %s %s", request.method, request.url)
        return await send(self._executor, request)

    async def list_books(self) -> list[Book]:
        """Fetch the whole library. The API does not paginate this collection."""
        data = await self._send(self._request("/api/books"))
        return parse_books(data)

    async def list_highlights(self, book_id: str) -> list[Highlight]:
        """Fetch every highlight of one book, in API order."""
        if not book_id:
            raise InvalidArgument("book_id is required to list highlights.")
        query = urlencode({"book_id": book_id})
        data = await self._send(self._request(f"/api/highlights?{query}"))
        return parse_highlights(data)

    async def get_book(self, book_id: str) -> Book:
        """Look a book up in a freshly fetched library listing.

        Raises:
            NotFound: If no book has the given id.
        """
        for book in await self.list_books():
            if book.id == book_id:
                return book
        raise NotFound(book_id)

    async def chat(
        self,
        book_id: str,
        prompt: str,
        context_ids: list[str] | None = None,
        on_chunk: ChunkCallback | None = None,
    ) -> ChatResponse:
        """Ask the book's assistant a question.

        With on_chunk the answer is streamed and on_chunk is called once per
        text chunk, in order; the aggregated response is returned at the end.
        Without it a single buffered request is made.

        Raises:
            InvalidArgument: If book_id or prompt is empty.
            NotFound: If the book is not in the library. No chat request is sent.
            ChatFailure: For any network, status or decoding failure after that.
        """
        if not book_id or not prompt:
            raise InvalidArgument("book_id and prompt are required for chat.")

        # The chat backend is routed separately from the REST collection, so
        # the book is validated against the library first.
        await self.get_book(book_id)

        body = json.dumps(
            {"book_id": book_id, "message": prompt, "context_ids": list(context_ids or [])}
        )
        request = self._request(CHAT_ENDPOINT, method="POST", body=body)
        try:
            if on_chunk is not None:
                return await self._chat_stream(request, on_chunk)
            return await self._chat_buffered(request)
        except BookriseError as exc:
            logger.error("Error with chat endpoint %s: %s", CHAT_ENDPOINT, exc)
            raise ChatFailure(exc) from exc

    async def _chat_buffered(self, request: HttpRequest) -> ChatResponse:
        data = await self._send(request)
        if data is None:
            raise EmptyResponse("Received empty response from chat API")
        return parse_chat_response(data)

    async def _chat_stream(self, request: HttpRequest, on_chunk: ChunkCallback) -> ChatResponse:
        stream_request = HttpRequest(
            url=request.url,
            method=request.method,
            headers=self._headers(Accept="text/event-stream"),
            body=request.body,
        )
        logger.debug("Requesting stream: %s %s", stream_request.method, stream_request.url)
        async with self._executor.stream(stream_request) as response:
            if not 200 <= response.status < 300:
                text = await response.aread_text()
                raise_for_status(HttpResponse(response.status, text), stream_request.url)

            decoder = ChatStreamDecoder()
            result = await decode_lines(response.aiter_lines(), on_chunk, decoder)
            if decoder.lines_seen == 0:
                raise EmptyResponse("Received empty response from chat API stream")
            return result
