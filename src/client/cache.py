from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

QueryKey = tuple[str, ...]
Fetcher = Callable[[], Awaitable[Any]]


@dataclass
class CacheEntry:
    data: Any
    fetcher: Fetcher
    fetched_at: datetime
    stale: bool = False


class QueryCache:
    """
    Results of async fetches keyed by a query key.

    There is no merging: a key's data is whatever its most recently resolved
    fetch returned, so when two refetches overlap the later one to finish wins.
    """

    def __init__(self) -> None:
        self._entries: dict[QueryKey, CacheEntry] = {}

    async def fetch(self, key: QueryKey, fetcher: Fetcher) -> Any:
        data = await fetcher()
        self._entries[key] = CacheEntry(data=data, fetcher=fetcher, fetched_at=datetime.now(UTC))
        return data

    async def invalidate(self, key: QueryKey) -> Any:
        """Mark ``key`` stale and refetch it with the fetcher that last filled it."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        entry.stale = True
        return await self.fetch(key, entry.fetcher)

    def get(self, key: QueryKey) -> Any:
        entry = self._entries.get(key)
        return entry.data if entry is not None else None

    def is_stale(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        return entry is None or entry.stale
