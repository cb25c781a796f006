"""Tests for the TTL + LRU cache engine."""

import math

import pytest

from lostfound_cache.cache.engine import CacheEngine
from lostfound_cache.cache.stats import CacheEntry
from lostfound_cache.config.schema import CacheOptions
from lostfound_cache.errors.exceptions import CacheConfigError


def _cache(clock, **overrides) -> CacheEngine:
    return CacheEngine(name="test", clock=clock, autostart=False, **overrides)


class TestGetSet:
    def test_round_trip(self, clock):
        cache = _cache(clock)
        value = {"title": "Blue umbrella", "type": "lost"}
        cache.set("post_1", value)
        assert cache.get("post_1") is value
        assert cache.get_metrics().hits == 1

    def test_miss(self, clock):
        cache = _cache(clock)
        assert cache.get("nonexistent") is None
        assert cache.get_metrics().misses == 1

    def test_integer_keys(self, clock):
        cache = _cache(clock)
        cache.set(42, "answer")
        assert cache.get(42) == "answer"
        assert cache.get("42") is None

    def test_none_value_is_cacheable(self, clock):
        cache = _cache(clock)
        cache.set("k", None)
        assert cache.has("k")

    def test_get_updates_access_stats(self, clock):
        cache = _cache(clock)
        cache.set("k", "v")
        clock.advance(5)
        cache.get("k")
        cache.get("k")
        entry = cache._store["k"]
        assert entry.access_count == 2
        assert entry.last_accessed == clock.now
        assert entry.last_accessed >= entry.timestamp

    def test_set_creates_fresh_entry(self, clock):
        cache = _cache(clock)
        cache.set("k", "v")
        entry = cache._store["k"]
        assert entry.access_count == 0
        assert entry.timestamp == entry.last_accessed == clock.now
        assert entry.size == 2

    def test_overwrite_does_not_double_count(self, clock):
        cache = _cache(clock)
        cache.set("k", "a" * 50)
        cache.set("k", "b" * 10)
        metrics = cache.get_metrics()
        assert cache.get("k") == "b" * 10
        assert metrics.total_size == 20
        assert metrics.entry_count == 1
        assert metrics.sets == 2
        assert metrics.deletes == 0

    def test_overwrite_resets_access_count(self, clock):
        cache = _cache(clock)
        cache.set("k", "v1")
        cache.get("k")
        cache.set("k", "v2")
        assert cache._store["k"].access_count == 0

    def test_each_set_counted_once(self, clock):
        cache = _cache(clock)
        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.get_metrics().sets == 2


class TestExpiration:
    def test_expired_get_returns_none(self, clock):
        cache = _cache(clock)
        cache.set("k", "v", ttl=0.1)
        clock.advance(0.101)
        assert cache.get("k") is None
        metrics = cache.get_metrics()
        assert metrics.misses == 1
        assert metrics.hits == 0
        assert not cache.has("k")

    def test_lazy_expiration_removes_entry(self, clock):
        cache = _cache(clock)
        cache.set("k", "a" * 10, ttl=1)
        clock.advance(2)
        cache.get("k")
        metrics = cache.get_metrics()
        assert cache.size() == 0
        assert metrics.total_size == 0
        assert metrics.entry_count == 0
        assert metrics.deletes == 0
        assert metrics.evictions == 0

    def test_not_expired_at_exact_ttl(self, clock):
        cache = _cache(clock)
        cache.set("k", "v", ttl=10)
        clock.advance(10)
        assert cache.get("k") == "v"

    def test_default_ttl_applies(self, clock):
        cache = _cache(clock, ttl=60)
        cache.set("k", "v")
        clock.advance(59)
        assert cache.has("k")
        clock.advance(2)
        assert not cache.has("k")

    def test_custom_ttl_overrides_default(self, clock):
        cache = _cache(clock, ttl=60)
        cache.set("k", "v", ttl=600)
        clock.advance(120)
        assert cache.get("k") == "v"

    @pytest.mark.parametrize("ttl", [0, -5, math.nan])
    def test_non_positive_ttl_uses_default(self, clock, ttl):
        cache = _cache(clock, ttl=60)
        cache.set("k", "v", ttl=ttl)
        assert cache._store["k"].ttl == 60

    def test_access_does_not_extend_ttl(self, clock):
        cache = _cache(clock)
        cache.set("k", "v", ttl=10)
        clock.advance(8)
        cache.get("k")
        clock.advance(8)
        assert cache.get("k") is None

    def test_has_does_not_touch_metrics(self, clock):
        cache = _cache(clock)
        cache.set("k", "v", ttl=1)
        assert cache.has("k")
        assert not cache.has("missing")
        clock.advance(5)
        assert not cache.has("k")
        metrics = cache.get_metrics()
        assert metrics.hits == 0
        assert metrics.misses == 0
        assert cache._store == {}

    def test_has_does_not_update_recency(self, clock):
        cache = _cache(clock)
        cache.set("k", "v")
        clock.advance(3)
        cache.has("k")
        entry = cache._store["k"]
        assert entry.access_count == 0
        assert entry.last_accessed == entry.timestamp

    def test_contains(self, clock):
        cache = _cache(clock)
        cache.set("k", "v")
        assert "k" in cache
        assert "other" not in cache


class TestDelete:
    def test_delete_idempotent(self, clock):
        cache = _cache(clock)
        cache.set("k", "v")
        assert cache.delete("k") is True
        assert cache.delete("k") is False
        assert cache.delete("k") is False
        assert cache.get_metrics().deletes == 1

    def test_delete_missing(self, clock):
        cache = _cache(clock)
        assert cache.delete("nope") is False
        assert cache.get_metrics().deletes == 0

    def test_delete_adjusts_gauges(self, clock):
        cache = _cache(clock)
        cache.set("a", "x" * 10)
        cache.set("b", "y" * 5)
        cache.delete("a")
        metrics = cache.get_metrics()
        assert metrics.total_size == 10
        assert metrics.entry_count == 1


class TestClear:
    def test_clear_resets_state(self, clock):
        cache = _cache(clock, max_entries=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        cache.get("a")
        cache.get("zzz")
        cache.delete("c")
        cache.clear()
        metrics = cache.get_metrics()
        assert metrics.total_size == 0
        assert metrics.entry_count == 0
        assert metrics.hits == 0
        assert metrics.misses == 0
        assert metrics.sets == 0
        assert metrics.deletes == 0
        assert metrics.evictions == 0
        assert cache.size() == 0
        assert cache.get_keys() == []


class TestSizeBudget:
    def test_evicts_least_recently_used(self, clock):
        # Each "x" * 50 string is estimated at 100 bytes
        cache = _cache(clock, max_size=300)
        for key in ("k1", "k2", "k3"):
            cache.set(key, "x" * 50)
            clock.advance(1)
        cache.set("k4", "x" * 50)
        assert cache.get_keys() == ["k2", "k3", "k4"]
        metrics = cache.get_metrics()
        assert metrics.evictions == 1
        assert metrics.total_size == 300

    def test_recent_access_protects_entry(self, clock):
        cache = _cache(clock, max_size=300)
        for key in ("k1", "k2", "k3"):
            cache.set(key, "x" * 50)
            clock.advance(1)
        cache.get("k1")
        clock.advance(1)
        cache.set("k4", "x" * 50)
        assert cache.has("k1")
        assert not cache.has("k2")

    def test_evicts_until_new_entry_fits(self, clock):
        cache = _cache(clock, max_size=400)
        for key in ("k1", "k2", "k3", "k4"):
            cache.set(key, "x" * 50)
            clock.advance(1)
        cache.set("big", "y" * 150)
        metrics = cache.get_metrics()
        assert metrics.evictions == 3
        assert metrics.total_size <= 400
        assert cache.get_keys() == ["k4", "big"]

    def test_oversized_entry_still_inserted(self, clock):
        cache = _cache(clock, max_size=100)
        cache.set("small", "x" * 10)
        cache.set("huge", "y" * 500)
        assert cache.get("huge") == "y" * 500
        assert not cache.has("small")
        assert cache.get_metrics().total_size == 1000

    def test_evictions_match_removed_entries(self, clock):
        cache = _cache(clock, max_size=1000)
        for i in range(25):
            cache.set(f"k{i}", "x" * 50)
            clock.advance(1)
        metrics = cache.get_metrics()
        assert metrics.evictions == 25 - cache.size()
        assert metrics.total_size <= 1000


class TestCountBudget:
    def test_evicts_ten_percent(self, clock):
        cache = _cache(clock, max_entries=20)
        for i in range(21):
            cache.set(f"k{i}", i)
            cache.get(f"k{i}")
            clock.advance(1)
        assert cache.size() == 19
        assert cache.get_metrics().evictions == 2
        assert not cache.has("k0")
        assert not cache.has("k1")
        assert cache.has("k2")

    def test_small_budget_evicts_at_least_one(self, clock):
        cache = _cache(clock, max_entries=3)
        for key in ("a", "b", "c", "d"):
            cache.set(key, 1)
            clock.advance(1)
        assert cache.size() == 3
        assert cache.get_keys() == ["b", "c", "d"]

    def test_end_to_end_scenario(self, clock):
        cache = _cache(clock, max_entries=3)
        cache.set("A", 1)
        clock.advance(1)
        cache.set("B", 2)
        clock.advance(1)
        cache.set("C", 3)
        clock.advance(1)
        cache.get("A")
        clock.advance(1)
        cache.set("D", 4)
        assert cache.size() == 3
        assert cache.has("A")
        assert cache.has("D")
        assert not cache.has("B")
        assert cache.has("C")

    def test_end_to_end_scenario_with_equal_timestamps(self, clock):
        cache = _cache(clock, max_entries=3)
        cache.set("A", 1)
        cache.set("B", 2)
        cache.set("C", 3)
        clock.advance(1)
        cache.get("A")
        cache.set("D", 4)
        assert cache.size() == 3
        assert cache.has("A")
        assert cache.has("D")
        assert [cache.has("B"), cache.has("C")].count(True) == 1


class TestCleanup:
    def test_removes_expired_as_evictions(self, clock):
        cache = _cache(clock)
        cache.set("short1", "v", ttl=5)
        cache.set("short2", "v", ttl=5)
        cache.set("long", "v", ttl=500)
        clock.advance(10)
        removed = cache.cleanup()
        assert removed == 2
        assert cache.get_keys() == ["long"]
        metrics = cache.get_metrics()
        assert metrics.evictions == 2
        assert metrics.deletes == 0
        assert metrics.entry_count == 1

    def test_nothing_expired(self, clock):
        cache = _cache(clock)
        cache.set("k", "v")
        assert cache.cleanup() == 0
        assert cache.size() == 1

    def test_full_cache_not_trimmed(self, clock):
        cache = _cache(clock, max_entries=3)
        for key in ("a", "b", "c"):
            cache.set(key, 1)
        assert cache.cleanup() == 0
        assert cache.size() == 3

    def test_over_budget_store_trimmed(self, clock):
        cache = _cache(clock, max_entries=20)
        for i in range(23):
            cache._store[f"k{i}"] = CacheEntry(
                data=i, timestamp=clock.now, ttl=600, size=8, last_accessed=clock.now + i
            )
        assert cache.cleanup() == 2
        assert cache.size() == 21
        assert not cache.has("k0")
        assert not cache.has("k1")
        assert cache.has("k2")
        assert cache.get_metrics().evictions == 2

    def test_expired_and_over_budget_together(self, clock):
        cache = _cache(clock, max_entries=10)
        for i in range(12):
            cache._store[f"k{i}"] = CacheEntry(
                data=i,
                timestamp=clock.now,
                ttl=5 if i == 11 else 600,
                size=8,
                last_accessed=clock.now + i,
            )
        clock.advance(20)
        # One expired entry leaves 11, still over budget by one batch
        assert cache.cleanup() == 2
        assert cache.get_keys() == [f"k{i}" for i in range(1, 11)]


class TestMetrics:
    def test_hit_rate(self, clock):
        cache = _cache(clock)
        cache.set("a", 1)
        cache.get("a")
        cache.get("a")
        cache.get("a")
        cache.get("b")
        assert cache.get_metrics().hit_rate == 0.75

    def test_hit_rate_zero_without_reads(self, clock):
        cache = _cache(clock)
        cache.set("a", 1)
        assert cache.get_metrics().hit_rate == 0.0

    def test_metrics_is_a_copy(self, clock):
        cache = _cache(clock)
        snapshot = cache.get_metrics()
        snapshot.hits = 99
        assert cache.get_metrics().hits == 0

    def test_disabled_metrics_keep_gauges(self, clock):
        cache = _cache(clock, enable_metrics=False)
        cache.set("a", "x" * 10)
        cache.get("a")
        cache.get("b")
        cache.delete("a")
        cache.set("c", "y")
        metrics = cache.get_metrics()
        assert metrics.hits == 0
        assert metrics.misses == 0
        assert metrics.sets == 0
        assert metrics.deletes == 0
        assert metrics.total_size == 2
        assert metrics.entry_count == 1

    def test_keys_and_size(self, clock):
        cache = _cache(clock)
        cache.set("a", 1)
        cache.set(2, "b")
        assert cache.get_keys() == ["a", 2]
        assert cache.size() == 2
        assert len(cache) == 2


class TestConstruction:
    def test_accepts_options(self, clock):
        options = CacheOptions(ttl=5, max_entries=7)
        cache = CacheEngine(options, clock=clock, autostart=False)
        assert cache.options.max_entries == 7

    def test_overrides_layer_over_options(self, clock):
        options = CacheOptions(ttl=5, max_entries=7)
        cache = CacheEngine(options, clock=clock, autostart=False, max_entries=9)
        assert cache.options.ttl == 5
        assert cache.options.max_entries == 9

    def test_invalid_options_raise(self, clock):
        with pytest.raises(CacheConfigError) as exc_info:
            _cache(clock, ttl=-1)
        assert exc_info.value.field == "ttl"

    def test_autostart_without_loop_is_manual(self, clock):
        cache = CacheEngine(clock=clock)
        assert not cache.scheduler.running
        cache.destroy()

    def test_destroy_clears_and_is_idempotent(self, clock):
        cache = _cache(clock)
        cache.set("a", 1)
        cache.destroy()
        cache.destroy()
        assert cache.destroyed
        assert cache.size() == 0
        assert cache.get_metrics().sets == 0

    def test_destroyed_cache_does_not_restart(self, clock):
        cache = _cache(clock)
        cache.destroy()
        assert cache.start() is False

    def test_repr(self, clock):
        cache = _cache(clock)
        cache.set("a", "x" * 512)
        assert "entries=1" in repr(cache)
        assert "1 KB" in repr(cache)
