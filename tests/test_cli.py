"""Tests for the CLI formatting and chat helpers."""

import httpx

from mindmate_relay.cli import _format_entry, _format_summary, _send_chat
from mindmate_relay.models import ChatTurn, MoodEntry, MoodSummary
from mindmate_relay.prompts import FALLBACK_REPLY


class TestFormatting:
    def test_format_entry(self):
        entry = MoodEntry(
            user_id="guest", mood="sad", note="rainy day", timestamp="2026-10-19T08:15:30.123Z"
        )
        assert _format_entry(entry) == "2026-10-19 08:15 > sad (rainy day)"

    def test_format_entry_without_note(self):
        entry = MoodEntry(user_id="guest", mood="great", timestamp="2026-10-19T08:15:30.123Z")
        assert _format_entry(entry) == "2026-10-19 08:15 > great"

    def test_format_summary(self):
        summary = MoodSummary(
            count=3,
            average_score=10 / 3,
            trend="up",
            distribution={"sad": 1, "great": 2},
            timeline=[],
        )
        lines = _format_summary(summary).splitlines()

        assert lines[0] == "Check-ins: 3"
        assert lines[1] == "Average:   3.3 / 4"
        assert lines[2] == "Trend:     up"
        assert lines[3].split() == ["great", "2"]

    def test_format_empty_summary(self):
        summary = MoodSummary(
            count=0, average_score=0.0, trend="neutral", distribution={}, timeline=[]
        )
        assert _format_summary(summary) == "No moods recorded"


class TestSendChat:
    async def test_reply(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"message": "Breathe with me.", "conversationId": "c1"})

        turns = [ChatTurn(role="user", content="hi"), ChatTurn(role="assistant", content="hey")]
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            reply = await _send_chat(client, "http://test", "I'm anxious", turns)

        assert reply == "Breathe with me."

    async def test_fallback_on_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "Failed to get response from Claude AI"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            reply = await _send_chat(client, "http://test", "hello", [])

        assert reply == FALLBACK_REPLY
