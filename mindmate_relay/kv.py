"""
Key-value storage backends for the MindMate Relay service.

The journal store only depends on the narrow ``KeyValueStore`` protocol, so
any backend offering point writes, point reads and prefix scans can be
plugged in. Two backends ship: an in-memory one and a JSON-file one.
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Persistent mapping from string key to JSON-compatible value."""

    async def put(self, key: str, value: dict[str, Any]) -> None: ...

    async def get(self, key: str) -> dict[str, Any] | None: ...

    async def delete(self, key: str) -> None: ...

    async def scan_prefix(self, prefix: str) -> list[tuple[str, dict[str, Any]]]: ...


class InMemoryKeyValueStore:
    """
    Dict-backed key-value store.

    Writes to an existing key overwrite it. All operations are serialized
    through an asyncio lock.
    """

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def put(self, key: str, value: dict[str, Any]) -> None:
        async with self._lock:
            self._data[key] = dict(value)

    async def get(self, key: str) -> dict[str, Any] | None:
        async with self._lock:
            value = self._data.get(key)
            return dict(value) if value is not None else None

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._data.pop(key, None)

    async def scan_prefix(self, prefix: str) -> list[tuple[str, dict[str, Any]]]:
        """Return every (key, value) pair whose key starts with ``prefix``."""
        async with self._lock:
            return [
                (key, dict(value))
                for key, value in self._data.items()
                if key.startswith(prefix)
            ]

    def __len__(self) -> int:
        return len(self._data)


class JsonFileKeyValueStore(InMemoryKeyValueStore):
    """
    Key-value store persisted to a single JSON file.

    The whole mapping is loaded on construction and rewritten after every
    mutation. A mutation only becomes visible in memory once the file has
    been replaced, so a failed write leaves both the file and the in-memory
    view unchanged.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        super().__init__()
        self.path = Path(path)
        if self.path.exists():
            with self.path.open(encoding="utf-8") as fh:
                self._data = json.load(fh)
            logger.info(f"Loaded {len(self._data)} records from {self.path}")

    async def put(self, key: str, value: dict[str, Any]) -> None:
        async with self._lock:
            data = {**self._data, key: dict(value)}
            await asyncio.to_thread(self._flush, data)
            self._data = data

    async def delete(self, key: str) -> None:
        async with self._lock:
            if key not in self._data:
                return
            data = {k: v for k, v in self._data.items() if k != key}
            await asyncio.to_thread(self._flush, data)
            self._data = data

    def _flush(self, data: dict[str, dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        finally:
            tmp_path.unlink(missing_ok=True)
