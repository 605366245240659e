"""In-memory metadata cache with a freshness window and bounded size.

Entries live for the lifetime of the process. Freshness is checked when an
entry is read; stale entries are not swept and stay resident until the same
URL is stored again or capacity pressure evicts them.

Eviction removes the oldest-inserted key in dict order. Overwriting an
existing key keeps its original position, so this is approximate FIFO, not
LRU. Reads never reorder.
"""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog

from linkmeta.models.metadata import CacheEntry, MetadataResult

log = structlog.get_logger()


class MetadataCache:
    """Bounded, time-expiring URL → MetadataResult store implementing CacheProtocol."""

    def __init__(
        self,
        *,
        max_entries: int = 100,
        duration_seconds: float = 60 * 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._max_entries = max_entries
        self._duration = duration_seconds
        self._clock = clock

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, url: str) -> MetadataResult | None:
        """Return the cached result for ``url`` if present and fresh."""
        entry = self._entries.get(url)
        if entry is None:
            return None
        if self._clock() - entry.timestamp >= self._duration:
            return None
        return entry.data

    def store(self, url: str, result: MetadataResult) -> None:
        """Insert or overwrite ``url``, evicting the oldest entry when full."""
        if url not in self._entries and len(self._entries) >= self._max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            log.debug("cache_evicted", url=oldest, size=len(self._entries))

        self._entries[url] = CacheEntry(data=result, timestamp=self._clock())
