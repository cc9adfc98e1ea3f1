"""HTTP client for dispatching chat messages to the remote agent endpoint."""

import asyncio
import logging

import httpx

from shared.constants import DEFAULT_CHAT_TIMEOUT
from shared.errors import format_seconds, to_failure
from shared.models import ErrorKind, Failure, Outcome
from shared.normalizer import normalize

logger = logging.getLogger("chat_relay")

JSON_HEADERS = {"Content-Type": "application/json"}


async def post_message(url: str, message: str, deadline: float) -> httpx.Response:
    """POST ``{"message": message}`` to ``url``, racing the call against ``deadline``.

    Redirects are followed and the final response is returned. The whole
    exchange (connect, redirects, send, read body) must finish before the
    deadline; otherwise the in-flight request is cancelled.

    Raises:
        asyncio.TimeoutError: If the deadline elapses first
        httpx.TransportError: On connection / protocol failures
    """
    async with httpx.AsyncClient(follow_redirects=True) as client:
        return await asyncio.wait_for(
            client.post(
                url,
                json={"message": message},
                headers=JSON_HEADERS,
                timeout=deadline,
            ),
            timeout=deadline,
        )


async def send_message(
    url: str,
    message: str,
    deadline: float = DEFAULT_CHAT_TIMEOUT,
) -> Outcome:
    """Send a chat message and return exactly one Outcome.

    Args:
        url: Remote agent endpoint (read from the config store by the caller)
        message: User message text
        deadline: Seconds to wait for the full response

    Returns:
        Success(content) with the normalized reply, or a typed Failure.
        Never raises for transport, status or payload problems.
    """
    logger.info("Dispatching to %s (deadline=%ss)", url, format_seconds(deadline))
    try:
        resp = await post_message(url, message, deadline)
    except Exception as exc:
        failure = to_failure(exc, deadline)
        logger.error("Dispatch to %s failed [%s]: %s", url, failure.kind.value, failure.detail)
        return failure

    if not resp.is_success:
        logger.error("Remote agent error %s %s", resp.status_code, resp.reason_phrase)
        return Failure(
            kind=ErrorKind.REMOTE_ERROR,
            detail=resp.reason_phrase or f"HTTP {resp.status_code}",
            status=resp.status_code,
        )

    body = resp.content
    if not body.strip():
        logger.warning("Empty response body from %s", url)
        return Failure(
            kind=ErrorKind.EMPTY_BODY,
            detail="Empty response received from the server",
        )

    outcome = normalize(body, encoding=resp.charset_encoding or "utf-8")
    logger.info("Reply from %s: ok=%s", url, outcome.ok)
    return outcome
