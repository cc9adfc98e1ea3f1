"""Tests for shared/http_client.py — the request dispatcher."""

import asyncio
import json
import sys
import time
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from shared.http_client import JSON_HEADERS, post_message, send_message
from shared.models import ErrorKind, Failure, Success

URL = "http://agent.test/webhook/chat"


# ════════════════════════════════════════════════════════════
#  Wire contract
# ════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_send_message_posts_json_payload(mock_http_client, make_response):
    mock_http_client.post.return_value = make_response(200, '{"output": "ok"}')

    await send_message(URL, "hello")

    mock_http_client.post.assert_called_once_with(
        URL,
        json={"message": "hello"},
        headers={"Content-Type": "application/json"},
        timeout=60,
    )


@pytest.mark.asyncio
async def test_send_message_custom_deadline_passed(mock_http_client, make_response):
    mock_http_client.post.return_value = make_response(200, "hi")

    await send_message(URL, "hello", deadline=12)

    _, kwargs = mock_http_client.post.call_args
    assert kwargs["timeout"] == 12


def test_json_headers():
    assert JSON_HEADERS == {"Content-Type": "application/json"}


# ════════════════════════════════════════════════════════════
#  Success path
# ════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_array_output_reply(mock_http_client, make_response):
    mock_http_client.post.return_value = make_response(200, '[{"output":"hello"}]')
    assert await send_message(URL, "hi") == Success(content="hello")


@pytest.mark.asyncio
async def test_object_response_reply(mock_http_client, make_response):
    mock_http_client.post.return_value = make_response(200, '{"response":"hi there"}')
    assert await send_message(URL, "hi") == Success(content="hi there")


@pytest.mark.asyncio
async def test_plain_text_reply(mock_http_client, make_response):
    mock_http_client.post.return_value = make_response(
        200, "plain text, not json", headers={"Content-Type": "text/plain"}
    )
    assert await send_message(URL, "hi") == Success(content="plain text, not json")


@pytest.mark.asyncio
async def test_charset_from_content_type(mock_http_client, make_response):
    body = '{"output": "café"}'.encode("latin-1")
    mock_http_client.post.return_value = make_response(
        200, body, headers={"Content-Type": "application/json; charset=iso-8859-1"}
    )
    assert await send_message(URL, "hi") == Success(content="café")


@pytest.mark.asyncio
async def test_201_counts_as_success(mock_http_client, make_response):
    mock_http_client.post.return_value = make_response(201, '"created"')
    assert await send_message(URL, "hi") == Success(content="created")


@pytest.mark.asyncio
async def test_deeply_nested_body_is_passed_through(mock_http_client, make_response):
    body = "[" * 100_000
    mock_http_client.post.return_value = make_response(200, body)
    assert await send_message(URL, "hi") == Success(content=body)


# ════════════════════════════════════════════════════════════
#  Redirects
# ════════════════════════════════════════════════════════════

@pytest.mark.asyncio
@pytest.mark.parametrize("status", [301, 302, 307, 308])
async def test_redirect_is_followed_to_final_reply(routed_client, status):
    routed_client["/webhook/old"] = lambda req: httpx.Response(
        status, headers={"Location": "http://agent.test/webhook/chat"}
    )
    routed_client["/webhook/chat"] = lambda req: httpx.Response(200, json={"output": "hello"})

    outcome = await send_message("http://agent.test/webhook/old", "hi")
    assert outcome == Success(content="hello")


@pytest.mark.asyncio
async def test_redirect_keeps_post_payload(routed_client):
    seen = []

    def _final(req):
        seen.append((req.method, json.loads(req.content)))
        return httpx.Response(200, text="ok")

    routed_client["/webhook/old"] = lambda req: httpx.Response(
        307, headers={"Location": "/webhook/chat"}
    )
    routed_client["/webhook/chat"] = _final

    await send_message("http://agent.test/webhook/old", "hi")
    assert seen == [("POST", {"message": "hi"})]


@pytest.mark.asyncio
async def test_redirect_to_error_reports_final_status(routed_client):
    routed_client["/webhook/old"] = lambda req: httpx.Response(
        308, headers={"Location": "/webhook/chat"}
    )
    routed_client["/webhook/chat"] = lambda req: httpx.Response(502)

    outcome = await send_message("http://agent.test/webhook/old", "hi")
    assert outcome.kind is ErrorKind.REMOTE_ERROR
    assert outcome.status == 502


# ════════════════════════════════════════════════════════════
#  Empty body
# ════════════════════════════════════════════════════════════

@pytest.mark.asyncio
@pytest.mark.parametrize("body", ["", "   ", "\n\t "])
async def test_empty_body_never_reaches_normalizer(mock_http_client, make_response, body):
    mock_http_client.post.return_value = make_response(200, body)

    with patch("shared.http_client.normalize") as mock_normalize:
        outcome = await send_message(URL, "hi")

    assert isinstance(outcome, Failure)
    assert outcome.kind is ErrorKind.EMPTY_BODY
    mock_normalize.assert_not_called()


# ════════════════════════════════════════════════════════════
#  Remote errors
# ════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_500_is_remote_error_and_body_not_parsed(mock_http_client, make_response):
    mock_http_client.post.return_value = make_response(500, '{"output": "should be ignored"}')

    with patch("shared.http_client.normalize") as mock_normalize:
        outcome = await send_message(URL, "hi")

    assert outcome == Failure(
        kind=ErrorKind.REMOTE_ERROR, detail="Internal Server Error", status=500
    )
    mock_normalize.assert_not_called()


@pytest.mark.asyncio
async def test_404_is_remote_error(mock_http_client, make_response):
    mock_http_client.post.return_value = make_response(404, "")
    outcome = await send_message(URL, "hi")
    assert outcome.kind is ErrorKind.REMOTE_ERROR
    assert outcome.status == 404


# ════════════════════════════════════════════════════════════
#  Transport failures
# ════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_connect_error_is_network_unreachable(mock_http_client):
    mock_http_client.post.side_effect = httpx.ConnectError("Connection refused")
    outcome = await send_message(URL, "hi")
    assert outcome.kind is ErrorKind.NETWORK_UNREACHABLE
    assert "Connection refused" in outcome.detail


@pytest.mark.asyncio
async def test_httpx_timeout_is_timeout(mock_http_client):
    mock_http_client.post.side_effect = httpx.ReadTimeout("Timeout")
    outcome = await send_message(URL, "hi", deadline=30)
    assert outcome.kind is ErrorKind.TIMEOUT
    assert "30 seconds" in outcome.detail


@pytest.mark.asyncio
async def test_unexpected_exception_is_unknown(mock_http_client):
    mock_http_client.post.side_effect = ValueError("weird")
    outcome = await send_message(URL, "hi")
    assert outcome.kind is ErrorKind.UNKNOWN
    assert "weird" in outcome.detail


@pytest.mark.asyncio
async def test_invalid_url_never_raises():
    # Real client: an unsupported scheme fails before any I/O
    outcome = await send_message("ftp://agent.test/chat", "hi", deadline=1)
    assert isinstance(outcome, Failure)


# ════════════════════════════════════════════════════════════
#  Deadline
# ════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_deadline_cancels_slow_call(mock_http_client):
    cancelled = asyncio.Event()

    async def _hang(*args, **kwargs):
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.set()
            raise

    mock_http_client.post.side_effect = _hang

    deadline = 0.2
    start = time.monotonic()
    outcome = await send_message(URL, "hi", deadline=deadline)
    elapsed = time.monotonic() - start

    assert outcome.kind is ErrorKind.TIMEOUT
    assert "0.2 seconds" in outcome.detail
    assert deadline - 0.02 <= elapsed < deadline + 0.5
    assert cancelled.is_set()


@pytest.mark.asyncio
async def test_fast_response_beats_deadline(mock_http_client, make_response):
    async def _quick(*args, **kwargs):
        await asyncio.sleep(0.01)
        return make_response(200, "fast")

    mock_http_client.post.side_effect = _quick
    assert await send_message(URL, "hi", deadline=1) == Success(content="fast")


@pytest.mark.asyncio
async def test_post_message_raises_timeout(mock_http_client):
    async def _hang(*args, **kwargs):
        await asyncio.sleep(10)

    mock_http_client.post.side_effect = _hang
    with pytest.raises(asyncio.TimeoutError):
        await post_message(URL, "hi", 0.05)


@pytest.mark.asyncio
async def test_post_message_returns_response(mock_http_client, make_response):
    resp = make_response(200, "ok")
    mock_http_client.post.return_value = resp
    assert await post_message(URL, "hi", 5) is resp
