"""String key/value stores with per-key expiry.

The core only ever hands these stores JSON strings; the medium behind them
(process memory, a directory of files) is interchangeable.
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_TTL_DAYS = 365


class KeyValueStore(ABC):

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored string, or None when missing or expired."""

    @abstractmethod
    def set(self, key: str, value: str, ttl_days: int = DEFAULT_TTL_DAYS) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass


class MemoryStore(KeyValueStore):

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock
        self._entries: dict[str, tuple[str, datetime]] = {}

    def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires = entry
        if expires <= self._clock():
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: str, ttl_days: int = DEFAULT_TTL_DAYS) -> None:
        self._entries[key] = (value, self._clock() + timedelta(days=ttl_days))

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)


class FileStore(KeyValueStore):
    """One JSON file per key: {"value": "...", "expires": "<iso timestamp>"}."""

    def __init__(self, directory: Union[str, Path], clock: Callable[[], datetime] = datetime.now):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._clock = clock

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            entry = json.loads(path.read_text(encoding="utf-8"))
            value = entry["value"]
            expires = datetime.fromisoformat(entry["expires"])
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error("Unreadable store entry %s: %s", path, e)
            return None
        if expires <= self._clock():
            logger.info("Store entry %s expired at %s", key, expires.isoformat())
            self.delete(key)
            return None
        return value

    def set(self, key: str, value: str, ttl_days: int = DEFAULT_TTL_DAYS) -> None:
        entry = {"value": value, "expires": (self._clock() + timedelta(days=ttl_days)).isoformat()}
        self._path(key).write_text(json.dumps(entry), encoding="utf-8")

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
