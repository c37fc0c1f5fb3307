"""
Command-line interface tools for the MindMate Relay service.
"""

import asyncio
import json
from collections.abc import Coroutine
from datetime import datetime
from typing import Any

import httpx
import typer

from .models import ChatTurn, MoodEntry, MoodSummary
from .prompts import FALLBACK_REPLY

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_USER_ID = "guest"

app = typer.Typer(help="MindMate Relay CLI tools")


# MARK: - CLI Entry Points


def cli_save_mood() -> None:
    """Entry point for mood-save CLI command."""
    typer.run(save_mood)


def cli_history() -> None:
    """Entry point for mood-history CLI command."""
    typer.run(history)


def cli_chat() -> None:
    """Entry point for mindmate-chat CLI command."""
    typer.run(chat)


# MARK: - Commands


@app.command()
def save_mood(
    mood: str = typer.Argument(..., help="great, okay, sad, stressed, or any other word"),
    note: str = typer.Option("", "--note", "-n", help="Optional note"),
    user_id: str = typer.Option(DEFAULT_USER_ID, "--user", help="User id"),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the MindMate service"
    ),
) -> None:
    """Record a mood check-in."""

    async def _save_mood() -> None:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                f"{base_url}/mood",
                json={"userId": user_id, "mood": mood, "note": note},
            )
            response.raise_for_status()
            print(response.json()["message"])

    _run_with_error_handling(_save_mood(), base_url)


@app.command()
def history(
    user_id: str = typer.Option(DEFAULT_USER_ID, "--user", help="User id"),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the MindMate service"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
) -> None:
    """List mood check-ins, newest first."""

    async def _history() -> None:
        async with httpx.AsyncClient() as client:
            response = await client.get(f"{base_url}/mood/history/{user_id}")
            response.raise_for_status()
            result = response.json()

            if json_output:
                print(json.dumps(result, indent=2))
                return

            moods = [MoodEntry.model_validate(m) for m in result["moods"]]
            if not moods:
                print("No moods recorded")
            for entry in moods:
                print(_format_entry(entry))

    _run_with_error_handling(_history(), base_url)


@app.command()
def summary(
    user_id: str = typer.Option(DEFAULT_USER_ID, "--user", help="User id"),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the MindMate service"
    ),
) -> None:
    """Show mood trend, average and distribution."""

    async def _summary() -> None:
        async with httpx.AsyncClient() as client:
            response = await client.get(f"{base_url}/mood/summary/{user_id}")
            response.raise_for_status()
            print(_format_summary(MoodSummary.model_validate(response.json()["summary"])))

    _run_with_error_handling(_summary(), base_url)


@app.command()
def chat(
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the MindMate service"
    ),
) -> None:
    """Talk to MindMate interactively. Empty line or Ctrl+C to stop."""

    async def _chat() -> None:
        turns: list[ChatTurn] = []
        async with httpx.AsyncClient(timeout=None) as client:
            while True:
                message = await asyncio.to_thread(input, "you > ")
                if not message.strip():
                    return

                reply = await _send_chat(client, base_url, message, turns)
                print(f"mindmate > {reply}")
                turns.append(ChatTurn(role="user", content=message))
                turns.append(ChatTurn(role="assistant", content=reply))

    _run_with_error_handling(_chat(), base_url)


# MARK: - Private Helpers


async def _send_chat(
    client: httpx.AsyncClient, base_url: str, message: str, turns: list[ChatTurn]
) -> str:
    """Send one chat message, substituting the fallback reply on failure."""
    try:
        response = await client.post(
            f"{base_url}/chat",
            json={
                "message": message,
                "conversationHistory": [turn.model_dump() for turn in turns],
            },
        )
        response.raise_for_status()
        return response.json()["message"]
    except httpx.HTTPError:
        return FALLBACK_REPLY


def _format_entry(entry: MoodEntry) -> str:
    """Format a mood entry as a single line."""
    dt = datetime.fromisoformat(entry.timestamp.replace("Z", "+00:00"))
    line = f"{dt.strftime('%Y-%m-%d %H:%M')} > {entry.mood}"
    if entry.note:
        line += f" ({entry.note})"
    return line


def _format_summary(mood_summary: MoodSummary) -> str:
    """Format a mood summary as a short report."""
    if mood_summary.count == 0:
        return "No moods recorded"

    lines = [
        f"Check-ins: {mood_summary.count}",
        f"Average:   {mood_summary.average_score:.1f} / 4",
        f"Trend:     {mood_summary.trend}",
    ]
    for mood, count in sorted(mood_summary.distribution.items(), key=lambda kv: -kv[1]):
        lines.append(f"  {mood:<10} {count}")
    return "\n".join(lines)


def _run_with_error_handling(coro: Coroutine[Any, Any, Any], base_url: str) -> None:
    """Run an async coroutine with standardized error handling."""
    try:
        asyncio.run(coro)
    except (KeyboardInterrupt, EOFError):
        print("\nStopped")
        raise typer.Exit(0)
    except httpx.ConnectError:
        print(f"Error: Could not connect to {base_url}")
        raise typer.Exit(1)
    except httpx.HTTPStatusError as e:
        print(f"Error: HTTP {e.response.status_code}")
        raise typer.Exit(1)
    except Exception as e:
        error_msg = str(e) if str(e) else f"Unknown error of type {type(e).__name__}"
        print(f"Error: {error_msg}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
