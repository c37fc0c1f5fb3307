"""Tests for the mood analytics derivations."""

from mindmate_relay import analytics
from mindmate_relay.models import MoodEntry


def entries(*moods: str) -> list[MoodEntry]:
    """Build newest-first entries, one day apart, ending on 2026-10-19."""
    return [
        MoodEntry(
            user_id="guest",
            mood=mood,
            timestamp=f"2026-10-{19 - i:02d}T12:00:00.000Z",
        )
        for i, mood in enumerate(moods)
    ]


class TestScore:
    def test_canonical_scores(self):
        assert [analytics.score(m) for m in ["great", "okay", "sad", "stressed"]] == [4, 3, 2, 1]

    def test_unknown_mood_defaults(self):
        assert analytics.score("anxious") == 2
        assert analytics.score("Great") == 2


class TestAverage:
    def test_average(self):
        assert analytics.average_score(entries("great", "okay", "sad", "stressed")) == 2.5

    def test_empty_history(self):
        assert analytics.average_score([]) == 0.0

    def test_unknown_moods_use_default_score(self):
        assert analytics.average_score(entries("great", "meh")) == 3.0


class TestTrend:
    def test_up(self):
        assert analytics.trend(entries("great", "sad")) == "up"

    def test_down(self):
        assert analytics.trend(entries("sad", "great")) == "down"

    def test_equal_scores(self):
        assert analytics.trend(entries("sad", "whatever")) == "neutral"

    def test_too_few_entries(self):
        assert analytics.trend(entries("great")) == "neutral"
        assert analytics.trend([]) == "neutral"

    def test_only_two_most_recent_count(self):
        assert analytics.trend(entries("okay", "sad", "great", "great")) == "up"


class TestDistribution:
    def test_distribution(self):
        assert analytics.distribution(entries("great", "great", "sad")) == {"great": 2, "sad": 1}

    def test_case_is_preserved(self):
        assert analytics.distribution(entries("Sad", "sad")) == {"Sad": 1, "sad": 1}

    def test_empty(self):
        assert analytics.distribution([]) == {}


class TestTimeline:
    def test_window_is_most_recent_seven_oldest_first(self):
        history = entries("great", "okay", "sad", "stressed", "great", "okay", "sad", "stressed", "great")
        points = analytics.timeline(history)

        assert len(points) == 7
        assert [p.date for p in points] == [f"2026-10-{d}" for d in range(13, 20)]
        assert points[-1].mood == "great"
        assert points[-1].score == 4
        assert points[0].mood == "sad"

    def test_short_history(self):
        points = analytics.timeline(entries("okay", "stressed"))
        assert [(p.date, p.score) for p in points] == [("2026-10-18", 1), ("2026-10-19", 3)]

    def test_date_is_utc_calendar_day(self):
        entry = MoodEntry(user_id="guest", mood="okay", timestamp="2026-10-19T23:59:59.999Z")
        assert analytics.timeline([entry])[0].date == "2026-10-19"


class TestSummarize:
    def test_summary(self):
        summary = analytics.summarize(entries("great", "great", "sad"))

        assert summary.count == 3
        assert summary.trend == "neutral"
        assert summary.distribution == {"great": 2, "sad": 1}
        assert summary.average_score == 10 / 3
        assert len(summary.timeline) == 3

    def test_empty_summary(self):
        summary = analytics.summarize([])

        assert summary.count == 0
        assert summary.average_score == 0.0
        assert summary.trend == "neutral"
        assert summary.timeline == []

    def test_wire_names(self):
        dumped = analytics.summarize(entries("okay")).model_dump(by_alias=True)
        assert "averageScore" in dumped
