"""Root conftest.py — shared fixtures for the entire test suite."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import httpx
import pytest

# ---------------------------------------------------------------------------
# Make project modules importable
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_WEBHOOK_URL = "http://agent.test/webhook/chat"


# ---------------------------------------------------------------------------
# Common fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def make_response():
    """Factory returning real httpx.Response objects for the dispatcher."""
    def _make(status_code: int = 200, body: str | bytes = b"", headers: dict | None = None):
        if isinstance(body, str):
            body = body.encode("utf-8")
        return httpx.Response(
            status_code,
            content=body,
            headers=headers,
            request=httpx.Request("POST", TEST_WEBHOOK_URL),
        )
    return _make


@pytest.fixture
def mock_http_client():
    """Patch httpx.AsyncClient used by the dispatcher; yields the client instance."""
    with patch("shared.http_client.httpx.AsyncClient") as MockClient:
        instance = AsyncMock()
        instance.__aenter__ = AsyncMock(return_value=instance)
        instance.__aexit__ = AsyncMock(return_value=False)
        MockClient.return_value = instance
        yield instance


@pytest.fixture
def config_store(tmp_path):
    """ConfigStore on a temporary SQLite file."""
    from chat.config_store import ConfigStore

    return ConfigStore(db_path=tmp_path / "test_chat.db", default_url=TEST_WEBHOOK_URL)


@pytest.fixture
def chat_session(config_store):
    """ChatSession with short deadlines and an empty log."""
    from chat.service import ChatSession

    return ChatSession(config_store, chat_timeout=5, probe_timeout=2)


@pytest.fixture
def routed_client():
    """Serve httpx.AsyncClient from an in-memory MockTransport.

    Yields a dict mapping URL path -> handler(request) -> httpx.Response;
    the client keeps every other keyword (e.g. follow_redirects) as given.
    """
    real_client = httpx.AsyncClient
    routes = {}

    def _handler(request: httpx.Request) -> httpx.Response:
        return routes[request.url.path](request)

    def _make_client(**kwargs):
        return real_client(transport=httpx.MockTransport(_handler), **kwargs)

    with patch("shared.http_client.httpx.AsyncClient", side_effect=_make_client):
        yield routes
