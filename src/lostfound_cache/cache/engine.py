"""In-memory look-aside cache with TTL expiry and LRU eviction."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from lostfound_cache.cache.eviction import EvictionPolicy
from lostfound_cache.cache.scheduler import CleanupScheduler
from lostfound_cache.cache.sizing import estimate_size, format_bytes
from lostfound_cache.cache.stats import CacheEntry, CacheMetrics, MetricsTracker
from lostfound_cache.config.schema import CacheOptions
from lostfound_cache.types import CacheKey, Clock

logger = logging.getLogger(__name__)


class CacheEngine:
    """Bounded TTL + LRU cache for one kind of data.

    Callers consult the cache first and, on a miss, fetch from the backing
    store themselves and ``set`` the result. Every operation is synchronous
    and total: missing or expired keys yield ``None``/``False``.

    Entries expire lazily on ``get``/``has`` and actively on ``cleanup()``,
    which a CleanupScheduler runs every ``cleanup_interval`` seconds once
    an event loop is available. ``destroy()`` must be called to stop it.
    """

    def __init__(
        self,
        options: CacheOptions | None = None,
        *,
        name: str = "cache",
        clock: Clock = time.monotonic,
        autostart: bool = True,
        **overrides: Any,
    ) -> None:
        if options is None:
            options = CacheOptions.build(**overrides)
        elif overrides:
            options = options.merged(**overrides)

        self._options = options
        self._name = name
        self._clock = clock
        self._store: dict[CacheKey, CacheEntry] = {}
        self._policy = EvictionPolicy(options.max_size, options.max_entries)
        self._metrics = MetricsTracker(enabled=options.enable_metrics)
        self._scheduler = CleanupScheduler(options.cleanup_interval, self.cleanup, name=name)
        self._destroyed = False

        if autostart:
            self._scheduler.start()

        logger.info(
            "Cache '%s' initialized with %s / %d entries limit",
            name,
            format_bytes(options.max_size),
            options.max_entries,
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def options(self) -> CacheOptions:
        return self._options

    @property
    def scheduler(self) -> CleanupScheduler:
        return self._scheduler

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def start(self, loop: asyncio.AbstractEventLoop | None = None) -> bool:
        """Start periodic cleanup on ``loop`` or the running loop."""
        if self._destroyed:
            logger.warning("Cache '%s' is destroyed, not starting cleanup", self._name)
            return False
        return self._scheduler.start(loop)

    # ── Public operations ──

    def get(self, key: CacheKey) -> Any | None:
        """Return the cached value, or None on a miss or expired entry."""
        entry = self._store.get(key)
        if entry is None:
            self._metrics.record_miss()
            return None

        now = self._clock()
        if entry.is_expired(now):
            self._remove(key)
            self._metrics.record_miss()
            logger.debug("Cache '%s' expired %s", self._name, key)
            return None

        entry.touch(now)
        self._metrics.record_hit()
        return entry.data

    def set(self, key: CacheKey, value: Any, ttl: float | None = None) -> None:
        """Store ``value`` under ``key``, replacing any existing entry.

        ``ttl`` overrides the default time-to-live for this entry only;
        a missing or non-positive value uses the default.
        """
        if ttl is None or not ttl > 0:
            ttl = self._options.ttl
        size = estimate_size(value)

        self.ensure_space(size)

        existing = self._store.pop(key, None)
        if existing is not None:
            self._metrics.remove_size(existing.size)

        now = self._clock()
        self._store[key] = CacheEntry(
            data=value,
            timestamp=now,
            ttl=ttl,
            size=size,
            last_accessed=now,
        )
        self._metrics.add_size(size)
        self._metrics.sync_count(len(self._store))
        self._metrics.record_set()
        logger.debug("Cache '%s' set %s: %s", self._name, key, format_bytes(size))

    def delete(self, key: CacheKey) -> bool:
        entry = self._remove(key)
        if entry is None:
            return False
        self._metrics.record_delete()
        logger.debug("Cache '%s' deleted %s: %s", self._name, key, format_bytes(entry.size))
        return True

    def has(self, key: CacheKey) -> bool:
        """True if ``key`` holds an unexpired entry. Does not count as an access."""
        entry = self._store.get(key)
        if entry is None:
            return False
        if entry.is_expired(self._clock()):
            self._remove(key)
            return False
        return True

    def clear(self) -> None:
        """Drop every entry and reset all metrics."""
        freed = self._metrics.total_size
        self._store.clear()
        self._metrics.reset()
        logger.debug("Cache '%s' cleared: %s freed", self._name, format_bytes(freed))

    def cleanup(self) -> int:
        """Reap expired entries, then trim to the count budget.

        Returns the number of entries evicted.
        """
        now = self._clock()
        expired = [key for key, entry in self._store.items() if entry.is_expired(now)]
        removed = self._evict(expired)
        if removed:
            logger.info("Cache '%s' cleaned up %d expired entries", self._name, removed)

        # Only once the store is over budget, not merely full
        over_budget = self._policy.select_for_count(
            self._store, threshold=self._options.max_entries + 1
        )
        removed += self._evict(over_budget)
        return removed

    def destroy(self) -> None:
        """Stop periodic cleanup and drop all entries."""
        if self._destroyed:
            return
        self._scheduler.stop()
        self.clear()
        self._destroyed = True
        logger.info("Cache '%s' destroyed", self._name)

    def get_metrics(self) -> CacheMetrics:
        return self._metrics.snapshot()

    def get_keys(self) -> list[CacheKey]:
        return list(self._store)

    def size(self) -> int:
        return len(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return self.has(key)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return (
            f"CacheEngine(name={self._name!r}, entries={len(self._store)}, "
            f"size={format_bytes(self._metrics.total_size)})"
        )

    # ── Eviction ──

    def ensure_space(self, new_size: int) -> int:
        """Evict LRU entries so an insert of ``new_size`` bytes fits both budgets.

        Returns the number of entries evicted.
        """
        evicted = self._evict(
            self._policy.select_for_space(self._store, self._metrics.total_size, new_size)
        )
        evicted += self._evict(self._policy.select_for_count(self._store))
        return evicted

    def _evict(self, keys: list[CacheKey]) -> int:
        count = 0
        freed = 0
        for key in keys:
            entry = self._remove(key)
            if entry is None:
                continue
            self._metrics.record_eviction()
            count += 1
            freed += entry.size
        if count:
            logger.debug(
                "Cache '%s' evicted %d entries, %s freed", self._name, count, format_bytes(freed)
            )
        return count

    def _remove(self, key: CacheKey) -> CacheEntry | None:
        entry = self._store.pop(key, None)
        if entry is not None:
            self._metrics.remove_size(entry.size)
            self._metrics.sync_count(len(self._store))
        return entry
