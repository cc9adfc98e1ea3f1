"""Chat session — the application state shared by the TUI and the HTTP API.

Holds the endpoint store, the conversation log and the in-flight flag, and
wires a user message through the dispatcher into the log.
"""

import asyncio
import logging

import httpx

from chat.config import CHAT_TIMEOUT_SECONDS, PROBE_TIMEOUT_SECONDS
from chat.config_store import ConfigStore
from chat.conversation import ConversationLog
from shared.errors import describe_failure
from shared.http_client import send_message
from shared.models import Message, Outcome, ProbeResult
from shared.probe import check_connection

logger = logging.getLogger("chat_relay")


class InvalidEndpointError(ValueError):
    """Raised when a user-supplied endpoint URL is not a usable http(s) URL."""


def validate_endpoint_url(url: str) -> str:
    """Return the stripped URL if it is an absolute http(s) URL with a host."""
    url = url.strip()
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise InvalidEndpointError(f"Please enter a valid URL ({exc})") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidEndpointError("Please enter a valid URL")
    return url


class ChatSession:
    """One conversation with the remote agent.

    ``busy`` is True while a send is in flight. Callers must not start a
    second send until it clears; the session does not queue.
    """

    def __init__(
        self,
        config_store: ConfigStore,
        log: ConversationLog | None = None,
        chat_timeout: float = CHAT_TIMEOUT_SECONDS,
        probe_timeout: float = PROBE_TIMEOUT_SECONDS,
    ):
        self.config_store = config_store
        self.log = log if log is not None else ConversationLog()
        self.chat_timeout = chat_timeout
        self.probe_timeout = probe_timeout
        self.busy = False
        self._background: set[asyncio.Task] = set()

    @property
    def endpoint_url(self) -> str:
        return self.config_store.get()

    async def send(self, text: str) -> tuple[Message, Outcome]:
        """Append the user message, dispatch it, append and return the reply."""
        text = text.strip()
        if not text:
            raise ValueError("Cannot send an empty message")

        self.busy = True
        try:
            self.log.append(Message(role="user", content=text))
            endpoint = self.config_store.endpoint()
            outcome = await send_message(endpoint.url, text, self.chat_timeout)
            if outcome.ok:
                content = outcome.content
            else:
                content = describe_failure(outcome, self.chat_timeout)
            reply = Message(role="assistant", content=content)
            self.log.append(reply)
        finally:
            self.busy = False
        return reply, outcome

    async def test_endpoint(self, url: str) -> ProbeResult:
        """Probe a candidate URL without saving it."""
        return await check_connection(validate_endpoint_url(url), self.probe_timeout)

    def save_endpoint(self, url: str, probe: bool = True) -> asyncio.Task | None:
        """Save the URL unconditionally, then probe it in the background.

        Must be called with a running event loop when ``probe`` is True.
        The returned task resolves to the ProbeResult, or None if the probe
        itself blew up.
        """
        url = validate_endpoint_url(url)
        self.config_store.set(url)
        logger.info("Endpoint saved: %s", url)
        if not probe:
            return None
        task = asyncio.create_task(self._probe_quietly(url))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def _probe_quietly(self, url: str) -> ProbeResult | None:
        try:
            result = await check_connection(url, self.probe_timeout)
        except Exception as exc:
            logger.warning("Background probe of %s failed: %s", url, exc)
            return None
        if not result.ok:
            logger.warning("Saved endpoint %s did not pass the probe: %s", url, result.message)
        return result

    def clear(self) -> None:
        self.log.clear()
