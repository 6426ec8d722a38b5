# ABOUTME: Exception hierarchy for the BookRise API client and note synchronizer.
# ABOUTME: Every failure the library raises derives from BookriseError.


class BookriseError(Exception):
    """Base class for all BookRise errors."""


class InvalidArgument(BookriseError, ValueError):
    """Raised when a required call parameter is missing or empty."""


class TransportError(BookriseError):
    """Raised when an HTTP exchange could not be completed at the transport level."""


class ApiError(BookriseError):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"Error calling BookRise API: Status {status} - {message}")
        self.status = status
        self.message = message


class MalformedResponse(BookriseError):
    """Raised when a body that should be JSON cannot be decoded into the expected shape."""

    def __init__(self, message: str, body: str = "") -> None:
        super().__init__(message)
        self.body = body


class NotFound(BookriseError):
    """Raised when a referenced book id is absent from the fetched book list."""

    def __init__(self, book_id: str) -> None:
        super().__init__(f"Book with ID {book_id} not found")
        self.book_id = book_id


class StreamFailure(BookriseError):
    """Raised when a chat stream breaks mid-read.

    Chunks delivered before the failure are not retracted.
    """


class EmptyResponse(BookriseError):
    """Raised when the chat endpoint returns no body."""


class ChatFailure(BookriseError):
    """Wraps any failure that happens while talking to the chat backend."""

    def __init__(self, cause: BookriseError) -> None:
        super().__init__(f"Failed to get chat response: {cause}")
        self.cause = cause


class PathCollision(BookriseError):
    """Raised when a file occupies a path where a folder is required."""

    def __init__(self, path: str) -> None:
        super().__init__(f"{path} exists but is a file, not a folder.")
        self.path = path
