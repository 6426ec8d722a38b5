# ABOUTME: HTTP request descriptors and the executor abstraction used by the API client.
# ABOUTME: Provides an httpx-backed executor with injectable transport for testing.

import logging
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import httpx

from bookrise.api.errors import TransportError

logger = logging.getLogger(__name__)

USER_AGENT = "bookrise/0.1.0"


@dataclass(frozen=True)
class HttpRequest:
    """Everything needed to issue one HTTP request."""

    url: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None


@dataclass(frozen=True)
class HttpResponse:
    """Status and raw body text of a completed HTTP exchange."""

    status: int
    text: str


@runtime_checkable
class StreamedResponse(Protocol):
    """A response whose body is read incrementally, one line at a time."""

    @property
    def status(self) -> int: ...

    def aiter_lines(self) -> AsyncIterator[str]: ...

    async def aread_text(self) -> str: ...


@runtime_checkable
class HttpExecutor(Protocol):
    """Protocol for executing HTTP requests.

    Error statuses are returned, not raised. Only transport-level failures
    raise, as TransportError.
    """

    async def execute(self, request: HttpRequest) -> HttpResponse: ...

    def stream(self, request: HttpRequest) -> AbstractAsyncContextManager[StreamedResponse]: ...

    async def aclose(self) -> None: ...


class _HttpxStreamedResponse:
    """Adapts an open httpx streaming response to StreamedResponse."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def status(self) -> int:
        return self._response.status_code

    async def aiter_lines(self) -> AsyncIterator[str]:
        try:
            async for line in self._response.aiter_lines():
                yield line
        except httpx.HTTPError as exc:
            raise TransportError(f"Stream interrupted: {self._response.url}: {exc}") from exc

    async def aread_text(self) -> str:
        try:
            await self._response.aread()
        except httpx.HTTPError as exc:
            raise TransportError(f"Failed reading body: {self._response.url}: {exc}") from exc
        return self._response.text


class HttpxExecutor:
    """HttpExecutor backed by httpx.AsyncClient.

    No retries are attempted; callers decide whether to try again.
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "headers": {"User-Agent": USER_AGENT},
            "timeout": timeout,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**client_kwargs)

    async def execute(self, request: HttpRequest) -> HttpResponse:
        """Send a request and buffer the whole body.

        Raises:
            TransportError: If the request could not be completed.
        """
        try:
            response = await self._client.request(
                request.method,
                request.url,
                headers=request.headers,
                content=request.body,
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"Request failed: {request.url}: {exc}") from exc
        return HttpResponse(status=response.status_code, text=response.text)

    @asynccontextmanager
    async def stream(self, request: HttpRequest) -> AsyncIterator[StreamedResponse]:
        """Open a streaming request; the body is read by iterating lines."""
        try:
            async with self._client.stream(
                request.method,
                request.url,
                headers=request.headers,
                content=request.body,
            ) as response:
                yield _HttpxStreamedResponse(response)
        except httpx.HTTPError as exc:
            raise TransportError(f"Request failed: {request.url}: {exc}") from exc

    async def aclose(self) -> None:
        await self._client.aclose()
