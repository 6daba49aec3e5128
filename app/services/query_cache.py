"""
Read-through cache for data-layer queries.

Keys are tuples; invalidation works on key prefixes so that
``("menu_items", "mama-put")`` also covers ``("menu_items", "mama-put", "available")``.
"""
from __future__ import annotations

import asyncio
import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

log = logging.getLogger(__name__)

CacheKey = tuple
Fetcher = Callable[[], Awaitable[Any]]


@dataclass
class CacheEntry:
    data: Any
    fetcher: Fetcher
    fetched_at: float = field(default_factory=time.monotonic)
    stale: bool = False


class QueryCache:
    def __init__(self, stale_seconds: float = 30.0):
        self.stale_seconds = stale_seconds
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._active: Counter = Counter()
        self._tasks: set[asyncio.Task] = set()

    def peek(self, key: CacheKey) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def is_stale(self, key: CacheKey) -> bool:
        entry = self._entries.get(key)
        if entry is None or entry.stale:
            return True
        return (time.monotonic() - entry.fetched_at) > self.stale_seconds

    async def fetch(self, key: CacheKey, fetcher: Fetcher) -> Any:
        if not self.is_stale(key):
            return self._entries[key].data
        data = await fetcher()
        # Concurrent fetches for the same key: last write wins
        self._entries[key] = CacheEntry(data=data, fetcher=fetcher)
        return data

    def invalidate(self, prefix: CacheKey) -> int:
        """Mark every entry under ``prefix`` stale; refetch the watched ones."""
        count = 0
        for key, entry in list(self._entries.items()):
            if key[: len(prefix)] != prefix:
                continue
            entry.stale = True
            count += 1
            if self._is_active(key):
                self._schedule_refetch(key, entry)
        log.debug("invalidated %s entries under %s", count, prefix)
        return count

    def clear(self) -> None:
        self._entries.clear()

    def retain(self, prefix: CacheKey) -> None:
        self._active[prefix] += 1

    def release(self, prefix: CacheKey) -> None:
        self._active[prefix] -= 1
        if self._active[prefix] <= 0:
            del self._active[prefix]

    def _is_active(self, key: CacheKey) -> bool:
        return any(key[: len(prefix)] == prefix for prefix in self._active)

    def _schedule_refetch(self, key: CacheKey, entry: CacheEntry) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = loop.create_task(self._refetch(key, entry))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _refetch(self, key: CacheKey, entry: CacheEntry) -> None:
        try:
            data = await entry.fetcher()
        except Exception:
            # The entry stays stale; the next read fetches again and raises
            log.warning("background refetch failed for %s", key, exc_info=True)
            return
        self._entries[key] = CacheEntry(data=data, fetcher=entry.fetcher)

    async def wait_idle(self) -> None:
        """Wait for background refetches started so far."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
