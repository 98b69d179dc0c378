"""
In-memory query cache.

Holds the last known server data per query key, plus whether it is stale.
Optimistic mutations snapshot the keys they touch, overwrite them with a
speculative value, and either reconcile with the server's answer or put
the snapshot back.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    data: Any
    stale: bool = False


# Snapshot value for a key that was not cached
_ABSENT = None


class QueryCache:
    def __init__(self):
        self._entries: dict[tuple, CacheEntry] = {}

    def __contains__(self, key) -> bool:
        return key in self._entries

    def get(self, key, default=None):
        entry = self._entries.get(key)
        return entry.data if entry is not None else default

    def get_many(self, keys: Iterable[tuple]) -> dict:
        return {key: self.get(key) for key in keys}

    def set(self, key, data) -> None:
        self._entries[key] = CacheEntry(data=data)

    def set_many(self, values: dict) -> None:
        for key, data in values.items():
            self.set(key, data)

    def update(self, key, fn: Callable[[Any], Any]) -> None:
        """Replace the cached value with ``fn(current)``; missing keys are skipped."""
        if key in self._entries:
            self.set(key, fn(self.get(key)))

    def remove(self, key) -> None:
        self._entries.pop(key, None)

    def invalidate(self, key) -> None:
        """Mark a key stale so the next read refetches it."""
        entry = self._entries.get(key)
        if entry is not None:
            entry.stale = True

    def invalidate_prefix(self, prefix: tuple) -> int:
        count = 0
        for key, entry in self._entries.items():
            if key[: len(prefix)] == prefix:
                entry.stale = True
                count += 1
        return count

    def is_stale(self, key) -> bool:
        """Missing keys count as stale."""
        entry = self._entries.get(key)
        return entry is None or entry.stale

    def snapshot(self, keys: Iterable[tuple]) -> dict[tuple, Optional[CacheEntry]]:
        """Deep copy of the entries for ``keys``, for ``restore``."""
        return {
            key: copy.deepcopy(self._entries[key]) if key in self._entries else _ABSENT
            for key in keys
        }

    def restore(self, snapshot: dict[tuple, Optional[CacheEntry]]) -> None:
        """Put every key back exactly as it was when the snapshot was taken."""
        for key, entry in snapshot.items():
            if entry is _ABSENT:
                self._entries.pop(key, None)
            else:
                self._entries[key] = copy.deepcopy(entry)
        logger.debug(f"Restored {len(snapshot)} cache key(s)")
