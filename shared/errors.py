"""Error classification for failed dispatches.

Maps whatever the transport raised onto the closed ``ErrorKind`` taxonomy and
renders the assistant-visible text for a ``Failure``.
"""

import asyncio
import re

import httpx

from shared.constants import (
    ERROR_EMPTY_BODY,
    ERROR_MALFORMED,
    ERROR_NETWORK,
    ERROR_REMOTE,
    ERROR_TIMEOUT,
    ERROR_UNKNOWN,
    ERROR_UNRECOGNIZED,
)
from shared.models import ErrorKind, Failure

HTTP_STATUS_PATTERN = re.compile(r"\b(?:HTTP|Error:?|status(?: code)?:?)\s*(\d{3})\b", re.IGNORECASE)

NETWORK_ERROR_PATTERN = re.compile(
    r"failed to fetch|networkerror|network error|load failed|connection refused"
    r"|connection reset|name or service not known|nodename nor servname"
    r"|getaddrinfo failed|no route to host|network is unreachable",
    re.IGNORECASE,
)


def format_seconds(seconds: float) -> str:
    return f"{seconds:g}"


def _status_from_error(exc: BaseException) -> int | None:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    match = HTTP_STATUS_PATTERN.search(str(exc))
    if not match:
        return None
    return int(match.group(1))


def classify(exc: BaseException, deadline: float) -> tuple[ErrorKind, str]:
    """Map a raised failure to (kind, human-readable message).

    Args:
        exc: Exception raised by the transport or the deadline timer
        deadline: Deadline of the dispatch in seconds (echoed for timeouts)

    Returns:
        Tuple of (ErrorKind, message)
    """
    # httpx.TimeoutException subclasses TransportError, so check it first
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError, httpx.TimeoutException)):
        return ErrorKind.TIMEOUT, f"Request timed out after {format_seconds(deadline)} seconds"

    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return ErrorKind.REMOTE_ERROR, f"Server responded with HTTP {status}"

    message = str(exc) or type(exc).__name__

    if isinstance(exc, (httpx.TransportError, ConnectionError, OSError)) or (
        NETWORK_ERROR_PATTERN.search(message)
    ):
        return (
            ErrorKind.NETWORK_UNREACHABLE,
            f"Could not reach the endpoint ({message}). "
            "Check the URL or your network connection.",
        )

    status = _status_from_error(exc)
    if status is not None:
        return ErrorKind.REMOTE_ERROR, f"Server responded with HTTP {status}"

    return ErrorKind.UNKNOWN, f"Unexpected error: {message}"


def to_failure(exc: BaseException, deadline: float) -> Failure:
    """Classify ``exc`` and wrap the result into a ``Failure`` outcome."""
    kind, message = classify(exc, deadline)
    status = _status_from_error(exc) if kind is ErrorKind.REMOTE_ERROR else None
    return Failure(kind=kind, detail=message, status=status)


def describe_failure(failure: Failure, deadline: float | None = None) -> str:
    """Return the assistant-visible explanation for a failed dispatch."""
    if failure.kind is ErrorKind.TIMEOUT:
        if deadline is None:
            return f"Sorry, the agent did not respond in time ({failure.detail})."
        return ERROR_TIMEOUT.format(seconds=format_seconds(deadline))
    if failure.kind is ErrorKind.NETWORK_UNREACHABLE:
        return ERROR_NETWORK
    if failure.kind is ErrorKind.REMOTE_ERROR:
        return ERROR_REMOTE.format(status=failure.status if failure.status is not None else "?")
    if failure.kind is ErrorKind.EMPTY_BODY:
        return ERROR_EMPTY_BODY
    if failure.kind is ErrorKind.MALFORMED_PAYLOAD:
        return ERROR_MALFORMED
    if failure.kind is ErrorKind.UNRECOGNIZED_SHAPE:
        return ERROR_UNRECOGNIZED
    return f"{ERROR_UNKNOWN} ({failure.detail})" if failure.detail else ERROR_UNKNOWN
