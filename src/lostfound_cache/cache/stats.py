"""Cache entry and metrics models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, computed_field


class CacheEntry(BaseModel):
    """A cached value plus its expiry and recency bookkeeping."""

    data: Any = None
    timestamp: float
    ttl: float = Field(gt=0)
    size: int = Field(default=0, ge=0)
    access_count: int = Field(default=0, ge=0)
    last_accessed: float

    def is_expired(self, now: float) -> bool:
        return now - self.timestamp > self.ttl

    def touch(self, now: float) -> None:
        """Record a successful read."""
        self.access_count += 1
        self.last_accessed = max(now, self.timestamp)


class CacheMetrics(BaseModel):
    """Point-in-time copy of one engine's counters and gauges."""

    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    evictions: int = 0
    total_size: int = 0
    entry_count: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class MetricsTracker:
    """Live counters behind CacheMetrics.

    With ``enabled=False`` the hit/miss/set/delete/eviction counters stay at
    zero. The size and count gauges are always kept because eviction reads
    them.
    """

    def __init__(self, enabled: bool = True) -> None:
        self._enabled = enabled
        self._metrics = CacheMetrics()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def total_size(self) -> int:
        return self._metrics.total_size

    def record_hit(self) -> None:
        if self._enabled:
            self._metrics.hits += 1

    def record_miss(self) -> None:
        if self._enabled:
            self._metrics.misses += 1

    def record_set(self) -> None:
        if self._enabled:
            self._metrics.sets += 1

    def record_delete(self) -> None:
        if self._enabled:
            self._metrics.deletes += 1

    def record_eviction(self) -> None:
        if self._enabled:
            self._metrics.evictions += 1

    def add_size(self, size: int) -> None:
        self._metrics.total_size += size

    def remove_size(self, size: int) -> None:
        self._metrics.total_size = max(0, self._metrics.total_size - size)

    def sync_count(self, count: int) -> None:
        self._metrics.entry_count = count

    def snapshot(self) -> CacheMetrics:
        return self._metrics.model_copy()

    def reset(self) -> None:
        self._metrics = CacheMetrics()
