"""Error handling: the exception hierarchy."""

from lostfound_cache.errors.exceptions import (
    CacheConfigError,
    LostFoundCacheError,
    UnknownCacheError,
)

__all__ = [
    "LostFoundCacheError",
    "CacheConfigError",
    "UnknownCacheError",
]
