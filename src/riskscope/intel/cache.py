"""Bounded TTL + LRU cache of enrichment data keyed by vulnerability id."""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable

from pydantic import BaseModel

from riskscope.intel.epss import EpssRecord
from riskscope.intel.nvd import NvdRecord

DEFAULT_TTL_SECONDS = 4 * 60 * 60
DEFAULT_MAX_SIZE = 10_000


class CachedEntry(BaseModel):
    identifier: str
    reputation: NvdRecord | None = None
    exploit: EpssRecord | None = None
    cached_at: float


class CacheStats(BaseModel):
    size: int
    hits: int
    misses: int
    hit_rate: int


class EnrichmentCache:
    """Entries older than ``ttl`` read as absent and are dropped on access."""

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        max_size: int = DEFAULT_MAX_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self.max_size = max_size
        self._clock = clock
        self._entries: OrderedDict[str, CachedEntry] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, identifier: str) -> bool:
        return self.peek(identifier) is not None

    def peek(self, identifier: str) -> CachedEntry | None:
        """Like :meth:`get` without touching LRU order or statistics."""
        entry = self._entries.get(identifier)
        if entry is None or self._clock() - entry.cached_at > self.ttl:
            return None
        return entry

    def get(self, identifier: str) -> CachedEntry | None:
        entry = self._entries.get(identifier)
        if entry is None:
            self.misses += 1
            return None

        if self._clock() - entry.cached_at > self.ttl:
            del self._entries[identifier]
            self.misses += 1
            return None

        self._entries.move_to_end(identifier)
        self.hits += 1
        return entry

    def set(
        self,
        identifier: str,
        reputation: NvdRecord | None = None,
        exploit: EpssRecord | None = None,
    ) -> CachedEntry:
        entry = CachedEntry(
            identifier=identifier,
            reputation=reputation,
            exploit=exploit,
            cached_at=self._clock(),
        )
        if identifier in self._entries:
            del self._entries[identifier]
        while len(self._entries) >= self.max_size and self._entries:
            self._entries.popitem(last=False)
        self._entries[identifier] = entry
        return entry

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def stats(self) -> CacheStats:
        total = self.hits + self.misses
        return CacheStats(
            size=len(self._entries),
            hits=self.hits,
            misses=self.misses,
            hit_rate=round(self.hits / total * 100) if total else 0,
        )
