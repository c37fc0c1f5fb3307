"""Shared fakes for the MindMate Relay tests."""

from collections.abc import Sequence
from typing import Any

import pytest

from mindmate_relay.errors import UpstreamError
from mindmate_relay.kv import InMemoryKeyValueStore
from mindmate_relay.models import ChatTurn, Completion


class FakeCompletionClient:
    """Completion client that records calls and returns a canned reply."""

    def __init__(self, reply: str = "I hear you.", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def send_completion(
        self, api_key: str, system: str, messages: Sequence[ChatTurn]
    ) -> Completion:
        self.calls.append({"api_key": api_key, "system": system, "messages": list(messages)})
        if self.error is not None:
            raise self.error
        return Completion(text=self.reply, id=f"msg_{len(self.calls)}")


class FailingKeyValueStore(InMemoryKeyValueStore):
    """Key-value store whose every operation fails."""

    async def put(self, key, value):
        raise RuntimeError("disk on fire")

    async def scan_prefix(self, prefix):
        raise RuntimeError("disk on fire")


@pytest.fixture
def fake_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def upstream_down() -> FakeCompletionClient:
    return FakeCompletionClient(error=UpstreamError(status_code=529))


@pytest.fixture
def failing_kv() -> FailingKeyValueStore:
    return FailingKeyValueStore()
