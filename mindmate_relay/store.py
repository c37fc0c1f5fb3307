"""
Mood journal storage for the MindMate Relay service.

This module persists mood check-ins in a key-value store under composite
keys ``mood:{user_id}:{timestamp}``. ISO-8601 UTC timestamps sort
lexicographically in chronological order, so a prefix scan over one user's
keys covers exactly that user's history. User ids may not contain the
key separator, otherwise one user's prefix would also match another's keys.
"""

import logging
from datetime import datetime, timezone

from pydantic import ValidationError as PydanticValidationError

from . import analytics
from .errors import StorageError, ValidationError
from .kv import KeyValueStore
from .models import MoodEntry, MoodSummary

logger = logging.getLogger(__name__)

KEY_PREFIX = "mood"
KEY_SEPARATOR = ":"


def mood_key(user_id: str, timestamp: str) -> str:
    """Build the storage key for one mood entry."""
    return KEY_SEPARATOR.join((KEY_PREFIX, user_id, timestamp))


def check_user_id(user_id: str) -> None:
    """Reject user ids that are empty or contain the key separator."""
    if not user_id or KEY_SEPARATOR in user_id:
        raise ValidationError(f"invalid user id {user_id!r}", field="userId")


def utc_timestamp(now: datetime | None = None) -> str:
    """Format an instant as ISO-8601 UTC with millisecond precision."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


class MoodJournal:
    """
    Mood check-in persistence on top of a key-value store.

    Entries are immutable: there is no update or delete. Two saves for the
    same user within the same millisecond share a key, and the later one
    overwrites the earlier.
    """

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    async def save(self, user_id: str, mood: str | None, note: str | None = None) -> MoodEntry:
        """
        Record a mood check-in for a user.

        Args:
            user_id: Owner of the entry
            mood: Canonical or free-text mood value; must be non-empty
            note: Optional free-text note

        Returns:
            The stored MoodEntry

        Raises:
            ValidationError: If ``mood`` is missing or blank, or ``user_id`` is
                invalid (nothing is written)
            StorageError: If the underlying store fails
        """
        if not mood or not mood.strip():
            raise ValidationError("mood required", field="mood")
        check_user_id(user_id)

        entry = MoodEntry(
            user_id=user_id,
            mood=mood,
            note=note or "",
            timestamp=utc_timestamp(),
        )
        key = mood_key(user_id, entry.timestamp)
        try:
            await self._kv.put(key, entry.model_dump(by_alias=True))
        except Exception as e:
            logger.error(f"Failed to write {key}: {e}")
            raise StorageError(f"write failed for {key}") from e

        logger.info(f"Saved mood {entry.mood!r} for user {user_id}")
        return entry

    async def history(self, user_id: str) -> list[MoodEntry]:
        """
        Fetch a user's mood entries, newest first.

        Returns:
            Every stored entry for ``user_id``; empty if there are none

        Raises:
            ValidationError: If ``user_id`` is empty or contains ``:``
            StorageError: If the underlying store fails or holds a malformed record
        """
        check_user_id(user_id)
        prefix = f"{KEY_PREFIX}{KEY_SEPARATOR}{user_id}{KEY_SEPARATOR}"
        try:
            records = await self._kv.scan_prefix(prefix)
            entries = [
                MoodEntry.model_validate({"userId": user_id, **value})
                for _, value in records
            ]
        except PydanticValidationError as e:
            logger.error(f"Malformed mood record under {prefix}: {e}")
            raise StorageError(f"malformed record under {prefix}") from e
        except Exception as e:
            logger.error(f"Failed to scan {prefix}: {e}")
            raise StorageError(f"scan failed for {prefix}") from e

        # Don't rely on the backend's ordering
        entries.sort(key=lambda entry: entry.timestamp, reverse=True)
        return entries

    async def summary(self, user_id: str) -> MoodSummary:
        """Derive analytics over a user's full mood history."""
        return analytics.summarize(await self.history(user_id))
