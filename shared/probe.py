"""Connection probe: validate an endpoint before committing it to settings."""

import json
import logging

from shared.constants import DEFAULT_PROBE_TIMEOUT, PROBE_MESSAGE
from shared.errors import to_failure
from shared.http_client import post_message
from shared.models import ProbeResult

logger = logging.getLogger("chat_relay")


def _error_message_from_body(body: bytes) -> str | None:
    """Return the ``message`` field of a JSON error body, if any."""
    try:
        data = json.loads(body)
    except (ValueError, RecursionError):
        return None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return None


async def check_connection(url: str, deadline: float = DEFAULT_PROBE_TIMEOUT) -> ProbeResult:
    """Send the fixed probe payload and report whether the endpoint answers 2xx.

    The body never decides success; it only flavours the message.
    """
    logger.info("Probing %s (deadline=%ss)", url, deadline)
    try:
        resp = await post_message(url, PROBE_MESSAGE, deadline)
    except Exception as exc:
        failure = to_failure(exc, deadline)
        logger.warning("Probe of %s failed [%s]: %s", url, failure.kind.value, failure.detail)
        return ProbeResult(ok=False, message=f"Connection failed: {failure.detail}")

    if not resp.is_success:
        reason = _error_message_from_body(resp.content) or resp.reason_phrase
        logger.warning("Probe of %s returned %s", url, resp.status_code)
        return ProbeResult(
            ok=False,
            message=f"Connection failed: HTTP {resp.status_code} {reason}".rstrip(),
            status=resp.status_code,
        )

    body = resp.content
    if not body.strip():
        message = "Connection successful (empty response)"
    else:
        try:
            json.loads(body)
        except (ValueError, RecursionError):
            message = "Connection successful, but the response is not JSON"
        else:
            message = "Connection successful, response format looks good"
    return ProbeResult(ok=True, message=message, status=resp.status_code)
