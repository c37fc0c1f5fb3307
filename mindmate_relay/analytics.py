"""
Mood analytics over a user's check-in history.

Every function takes entries ordered newest first, as returned by
``MoodJournal.history``, and is recomputed from scratch on each call.
"""

from collections import Counter
from collections.abc import Sequence
from datetime import datetime

from .models import MoodEntry, MoodSummary, TimelinePoint, Trend

MOOD_SCORES = {
    "great": 4,
    "okay": 3,
    "sad": 2,
    "stressed": 1,
}
DEFAULT_SCORE = 2
TIMELINE_WINDOW = 7


def score(mood: str) -> int:
    """Map a mood to its score; unknown moods get ``DEFAULT_SCORE``."""
    return MOOD_SCORES.get(mood, DEFAULT_SCORE)


def average_score(entries: Sequence[MoodEntry]) -> float:
    """Mean score over all entries, or 0.0 when there are none."""
    if not entries:
        return 0.0
    return sum(score(entry.mood) for entry in entries) / len(entries)


def trend(entries: Sequence[MoodEntry]) -> Trend:
    """Direction from the second most recent score to the most recent one."""
    if len(entries) < 2:
        return "neutral"

    recent = score(entries[0].mood)
    previous = score(entries[1].mood)
    if recent > previous:
        return "up"
    if recent < previous:
        return "down"
    return "neutral"


def distribution(entries: Sequence[MoodEntry]) -> dict[str, int]:
    """Count entries per raw mood value."""
    return dict(Counter(entry.mood for entry in entries))


def _calendar_day(timestamp: str) -> str:
    # fromisoformat only accepts the "Z" suffix from Python 3.11 on
    return datetime.fromisoformat(timestamp.replace("Z", "+00:00")).date().isoformat()


def timeline(entries: Sequence[MoodEntry], window: int = TIMELINE_WINDOW) -> list[TimelinePoint]:
    """
    Reduce the most recent entries to chart points.

    Args:
        entries: Mood entries, newest first
        window: How many of the most recent entries to keep

    Returns:
        Up to ``window`` points ordered oldest to newest
    """
    recent = list(entries[:window])
    recent.reverse()
    return [
        TimelinePoint(
            date=_calendar_day(entry.timestamp),
            score=score(entry.mood),
            mood=entry.mood,
        )
        for entry in recent
    ]


def summarize(entries: Sequence[MoodEntry]) -> MoodSummary:
    """Compute every derivation over ``entries`` at once."""
    return MoodSummary(
        count=len(entries),
        average_score=average_score(entries),
        trend=trend(entries),
        distribution=distribution(entries),
        timeline=timeline(entries),
    )
