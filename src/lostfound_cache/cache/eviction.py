"""LRU eviction against a size budget and a count budget."""

from __future__ import annotations

import math
from collections.abc import Mapping

from lostfound_cache.cache.stats import CacheEntry
from lostfound_cache.config.defaults import DEFAULT_EVICTION_RATIO
from lostfound_cache.types import CacheKey


class EvictionPolicy:
    """Chooses which keys to drop when a budget is exceeded.

    The policy only selects; the engine removes the entries and records
    the evictions. Candidates are ordered by ``last_accessed`` with a stable
    sort, so entries sharing an access time keep their store order.
    Both budgets are soft: selection returns what it can and the pending
    insert proceeds regardless.
    """

    def __init__(
        self,
        max_size: int,
        max_entries: int,
        ratio: float = DEFAULT_EVICTION_RATIO,
    ) -> None:
        self._max_size = max_size
        self._max_entries = max_entries
        self._ratio = ratio

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def batch_size(self) -> int:
        """Entries dropped by one count-budget eviction."""
        # 30 * 0.1 == 3.0000000000000004
        return max(1, math.ceil(round(self._max_entries * self._ratio, 9)))

    def needs_space(self, total_size: int, new_size: int) -> bool:
        return total_size + new_size > self._max_size

    def select_for_space(
        self,
        entries: Mapping[CacheKey, CacheEntry],
        total_size: int,
        new_size: int,
    ) -> list[CacheKey]:
        """Least-recently-used keys whose removal lets ``new_size`` fit."""
        if not self.needs_space(total_size, new_size):
            return []

        required = total_size + new_size - self._max_size
        freed = 0
        selected: list[CacheKey] = []
        for key, entry in _by_recency(entries):
            selected.append(key)
            freed += entry.size
            if freed >= required:
                break
        return selected

    def select_for_count(
        self,
        entries: Mapping[CacheKey, CacheEntry],
        threshold: int | None = None,
    ) -> list[CacheKey]:
        """The oldest ``batch_size`` keys once the store reaches ``threshold``.

        ``threshold`` defaults to ``max_entries``, i.e. a pending insert
        would overflow the count budget.
        """
        limit = self._max_entries if threshold is None else threshold
        if len(entries) < limit:
            return []
        return [key for key, _ in _by_recency(entries)[: self.batch_size]]


def _by_recency(entries: Mapping[CacheKey, CacheEntry]) -> list[tuple[CacheKey, CacheEntry]]:
    return sorted(entries.items(), key=lambda item: item[1].last_accessed)
