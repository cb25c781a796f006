"""Cache subsystem — TTL + LRU engines, key builders, and the named registry."""

from lostfound_cache.cache.engine import CacheEngine
from lostfound_cache.cache.eviction import EvictionPolicy
from lostfound_cache.cache.invalidation import CacheInvalidator
from lostfound_cache.cache.keys import (
    image_key,
    notifications_key,
    optimized_image_key,
    post_key,
    posts_key,
    user_key,
)
from lostfound_cache.cache.registry import CacheRegistry
from lostfound_cache.cache.scheduler import CleanupScheduler
from lostfound_cache.cache.sizing import estimate_size, format_bytes
from lostfound_cache.cache.stats import CacheEntry, CacheMetrics, MetricsTracker

__all__ = [
    "CacheEngine",
    "CacheEntry",
    "CacheInvalidator",
    "CacheMetrics",
    "CacheRegistry",
    "CleanupScheduler",
    "EvictionPolicy",
    "MetricsTracker",
    "estimate_size",
    "format_bytes",
    "image_key",
    "notifications_key",
    "optimized_image_key",
    "post_key",
    "posts_key",
    "user_key",
]
