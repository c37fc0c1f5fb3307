"""
Shared data models for the MindMate Relay service.

This module defines the core domain models used across multiple layers
of the application (journal store, analytics, relay, API, CLI). Field names
are snake_case in Python and camelCase on the wire.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Trend = Literal["up", "down", "neutral"]


class ChatTurn(BaseModel):
    """One message of a conversation transcript."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"] = Field(..., description="Who said it")
    content: str = Field(..., description="The message text")


class ConversationRequest(BaseModel):
    """A message plus the transcript that precedes it."""

    model_config = ConfigDict(frozen=True)

    message: str
    history: list[ChatTurn] = Field(default_factory=list)


class Completion(BaseModel):
    """Reply of the completion service."""

    text: str = Field(..., description="The model's reply, verbatim")
    id: str = Field(..., description="Opaque conversation id from the model")


class MoodEntry(BaseModel):
    """A single timestamped mood check-in."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user_id: str = Field(..., alias="userId", description="Owner of the entry")
    mood: str = Field(..., min_length=1, description="Canonical or free-text mood")
    note: str = Field("", description="Optional free-text note")
    timestamp: str = Field(..., description="ISO-8601 UTC instant")


class TimelinePoint(BaseModel):
    """A mood entry reduced to its calendar day and score."""

    date: str
    score: int
    mood: str


class MoodSummary(BaseModel):
    """Analytics derived from a user's mood history."""

    model_config = ConfigDict(populate_by_name=True)

    count: int
    average_score: float = Field(..., alias="averageScore")
    trend: Trend
    distribution: dict[str, int]
    timeline: list[TimelinePoint]
