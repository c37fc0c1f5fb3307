"""Tests for the Anthropic completion client."""

import json

import httpx
import pytest

from mindmate_relay.errors import UpstreamError
from mindmate_relay.llm import ANTHROPIC_VERSION, AnthropicClient
from mindmate_relay.models import ChatTurn

MESSAGES = [ChatTurn(role="user", content="I feel stuck")]


def _client(handler, **kwargs) -> AnthropicClient:
    return AnthropicClient(transport=httpx.MockTransport(handler), **kwargs)


class TestAnthropicClient:
    """Test suite for AnthropicClient."""

    async def test_request_shape(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"id": "msg_abc", "content": [{"type": "text", "text": "You're not alone."}]},
            )

        client = _client(handler, model="claude-test", max_tokens=256)
        completion = await client.send_completion("sk-test", "be kind", MESSAGES)

        assert completion.text == "You're not alone."
        assert completion.id == "msg_abc"

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.anthropic.com/v1/messages"
        assert request.headers["x-api-key"] == "sk-test"
        assert request.headers["anthropic-version"] == ANTHROPIC_VERSION
        assert json.loads(request.content) == {
            "model": "claude-test",
            "max_tokens": 256,
            "system": "be kind",
            "messages": [{"role": "user", "content": "I feel stuck"}],
        }

    @pytest.mark.parametrize("status", [400, 401, 429, 500, 529])
    async def test_error_status(self, status):
        client = _client(lambda request: httpx.Response(status, text="nope"))

        with pytest.raises(UpstreamError) as excinfo:
            await client.send_completion("sk-test", "system", MESSAGES)
        assert excinfo.value.status_code == status

    async def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamError) as excinfo:
            await _client(handler).send_completion("sk-test", "system", MESSAGES)
        assert excinfo.value.status_code is None

    async def test_unexpected_body(self):
        client = _client(lambda request: httpx.Response(200, json={"id": "msg_1", "content": []}))

        with pytest.raises(UpstreamError):
            await client.send_completion("sk-test", "system", MESSAGES)
