# ABOUTME: Turns raw HTTP status codes and bodies into parsed values or typed errors.
# ABOUTME: The single place where BookRise response bodies are decoded as JSON.

import json
import logging
from typing import Any

from bookrise.api.errors import ApiError, MalformedResponse
from bookrise.api.http import HttpExecutor, HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


def _is_success(status: int) -> bool:
    return 200 <= status < 300


def error_message(text: str) -> str:
    """Extract a human-readable message from an error body.

    FastAPI-style bodies carry the message in `detail`; anything else is
    reported as the raw text.
    """
    try:
        parsed = json.loads(text)
    except ValueError:
        return text
    if not isinstance(parsed, dict):
        return text
    detail = parsed.get("detail")
    if not detail:
        return text
    return detail if isinstance(detail, str) else json.dumps(detail)


def raise_for_status(response: HttpResponse, url: str) -> None:
    """Raise ApiError if the response status is outside [200, 300)."""
    if _is_success(response.status):
        return
    message = error_message(response.text)
    logger.error("API Error: %d from %s: %s", response.status, url, message)
    raise ApiError(response.status, message)


def normalize_response(response: HttpResponse, url: str) -> Any:
    """Convert a response into its parsed JSON body.

    Returns:
        The decoded body, or None for 204 and for empty 2xx bodies.

    Raises:
        ApiError: For any non-2xx status.
        MalformedResponse: If a non-empty 2xx body is not valid JSON.
    """
    raise_for_status(response, url)

    if response.status == 204:
        return None
    if not response.text:
        logger.warning("Empty response for status %d from %s", response.status, url)
        return None

    try:
        return json.loads(response.text)
    except ValueError as exc:
        raise MalformedResponse(
            f"Invalid JSON in response from {url}: {exc}", response.text
        ) from exc


async def send(executor: HttpExecutor, request: HttpRequest) -> Any:
    """Execute a request and normalize its response."""
    response = await executor.execute(request)
    return normalize_response(response, request.url)
