# -*- coding: utf-8 -*-

"""
Shared fixtures for Relay Gateway tests.

The upstream API is faked with httpx.MockTransport, so no test touches
the network.
"""

import json
from typing import Any, Dict, List

import httpx
import pytest
from fastapi.testclient import TestClient

from relay.http_client import UpstreamHttpClient


UPSTREAM_TEST_BASE_URL = "http://upstream.test/v1"
UPSTREAM_TEST_API_KEY = "test-upstream-key"

CHAT_COMPLETION_RESPONSE: Dict[str, Any] = {
    "id": "chatcmpl-test",
    "object": "chat.completion",
    "created": 1700000000,
    "model": "qwen3-coder-plus",
    "choices": [
        {
            "index": 0,
            "message": {"role": "assistant", "content": "Hello!"},
            "finish_reason": "stop",
        }
    ],
    "usage": {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5},
}

SSE_STREAM_BYTES = (
    b'data: {"id":"chatcmpl-test","object":"chat.completion.chunk","choices":'
    b'[{"index":0,"delta":{"content":"Hel"},"finish_reason":null}]}\n\n'
    b'data: {"id":"chatcmpl-test","object":"chat.completion.chunk","choices":'
    b'[{"index":0,"delta":{"content":"lo"},"finish_reason":"stop"}]}\n\n'
    b"data: [DONE]\n\n"
)


@pytest.fixture
def upstream_requests() -> List[httpx.Request]:
    """Requests received by the fake upstream, in order."""
    return []


@pytest.fixture
def upstream_handler(upstream_requests):
    """
    Fake upstream: answers stream requests with SSE bytes and
    regular requests with a chat.completion JSON body.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        upstream_requests.append(request)
        body = json.loads(request.content)
        if body.get("stream"):
            return httpx.Response(
                200,
                headers={"content-type": "text/event-stream"},
                content=SSE_STREAM_BYTES,
            )
        return httpx.Response(200, json=CHAT_COMPLETION_RESPONSE)

    return handler


@pytest.fixture
def upstream_client(upstream_handler):
    """UpstreamHttpClient wired to the fake upstream, no retries."""
    print("Setup: Creating UpstreamHttpClient with MockTransport...")
    return UpstreamHttpClient(
        base_url=UPSTREAM_TEST_BASE_URL,
        api_key=UPSTREAM_TEST_API_KEY,
        max_retries=1,
        base_retry_delay=0,
        transport=httpx.MockTransport(upstream_handler),
    )


@pytest.fixture
def test_client(upstream_client):
    """
    TestClient for the full application.

    Not used as a context manager, so the lifespan does not replace
    the fake upstream client.
    """
    from main import create_app

    print("Setup: Creating application with fake upstream...")
    app = create_app()
    app.state.upstream_client = upstream_client
    return TestClient(app)


@pytest.fixture
def minimal_body() -> Dict[str, Any]:
    """Smallest valid request body."""
    return {"messages": [{"role": "user", "content": "Hi"}]}


@pytest.fixture
def multimodal_body() -> Dict[str, Any]:
    """Request body with text and image blocks in one message."""
    return {
        "model": "qwen-vl-max",
        "messages": [
            {"role": "system", "content": "You describe images."},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "a"},
                    {
                        "type": "image_url",
                        "image_url": {"url": "https://example.com/cat.png", "detail": "low"},
                    },
                    {"type": "text", "text": "b"},
                ],
            },
        ],
    }


@pytest.fixture
def chat_completion_response() -> Dict[str, Any]:
    """JSON body the fake upstream answers non-stream requests with."""
    return CHAT_COMPLETION_RESPONSE


@pytest.fixture
def sse_stream_bytes() -> bytes:
    """SSE body the fake upstream answers stream requests with."""
    return SSE_STREAM_BYTES
