"""lostfound_cache — bounded in-memory look-aside caching for lost-and-found data."""

from lostfound_cache.cache import (
    CacheEngine,
    CacheInvalidator,
    CacheMetrics,
    CacheRegistry,
)
from lostfound_cache.config import CacheOptions, RegistryConfig
from lostfound_cache.errors import CacheConfigError, LostFoundCacheError, UnknownCacheError

__version__ = "0.1.0"

__all__ = [
    "CacheConfigError",
    "CacheEngine",
    "CacheInvalidator",
    "CacheMetrics",
    "CacheOptions",
    "CacheRegistry",
    "LostFoundCacheError",
    "RegistryConfig",
    "UnknownCacheError",
    "__version__",
]
