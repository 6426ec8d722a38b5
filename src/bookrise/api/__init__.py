# ABOUTME: BookRise API package: HTTP plumbing, response decoding and the typed client.
# ABOUTME: Exports the client, the data types and the error hierarchy.

from bookrise.api.client import BookriseClient
from bookrise.api.errors import (
    ApiError,
    BookriseError,
    ChatFailure,
    EmptyResponse,
    InvalidArgument,
    MalformedResponse,
    NotFound,
    PathCollision,
    StreamFailure,
    TransportError,
)
from bookrise.api.http import HttpExecutor, HttpRequest, HttpResponse, HttpxExecutor
from bookrise.api.types import Book, ChatResponse, Highlight

__all__ = [
    "ApiError",
    "Book",
    "BookriseClient",
    "BookriseError",
    "ChatFailure",
    "ChatResponse",
    "EmptyResponse",
    "Highlight",
    "HttpExecutor",
    "HttpRequest",
    "HttpResponse",
    "HttpxExecutor",
    "InvalidArgument",
    "MalformedResponse",
    "NotFound",
    "PathCollision",
    "StreamFailure",
    "TransportError",
]
