"""Named cache engines owned by the application."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterator
from typing import Any

from lostfound_cache.cache.engine import CacheEngine
from lostfound_cache.cache.stats import CacheMetrics
from lostfound_cache.config.defaults import (
    IMAGE_CACHE,
    NOTIFICATION_CACHE,
    POST_CACHE,
    USER_CACHE,
)
from lostfound_cache.config.schema import RegistryConfig
from lostfound_cache.errors.exceptions import UnknownCacheError
from lostfound_cache.types import Clock

logger = logging.getLogger(__name__)

_MB = 1024 * 1024


class CacheRegistry:
    """Container for the image, post, user and notification caches.

    Constructed once at application startup and passed to whatever needs a
    cache. ``init()`` starts periodic cleanup on the running event loop and
    ``destroy()`` tears every engine down; ``async with`` does both.
    """

    def __init__(
        self,
        config: RegistryConfig | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self._config = config or RegistryConfig()
        self._caches: dict[str, CacheEngine] = {
            name: CacheEngine(options, name=name, clock=clock, autostart=False)
            for name, options in self._config.profiles.items()
        }
        self._destroyed = False

    @property
    def config(self) -> RegistryConfig:
        return self._config

    @property
    def image(self) -> CacheEngine:
        return self.get(IMAGE_CACHE)

    @property
    def post(self) -> CacheEngine:
        return self.get(POST_CACHE)

    @property
    def user(self) -> CacheEngine:
        return self.get(USER_CACHE)

    @property
    def notification(self) -> CacheEngine:
        return self.get(NOTIFICATION_CACHE)

    def get(self, name: str) -> CacheEngine:
        try:
            return self._caches[name]
        except KeyError:
            raise UnknownCacheError(name, known=self.names()) from None

    def __getitem__(self, name: str) -> CacheEngine:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._caches

    def __iter__(self) -> Iterator[tuple[str, CacheEngine]]:
        return iter(self._caches.items())

    def __len__(self) -> int:
        return len(self._caches)

    def names(self) -> list[str]:
        return list(self._caches)

    # ── Lifecycle ──

    def init(self, loop: asyncio.AbstractEventLoop | None = None) -> int:
        """Start periodic cleanup for every cache. Returns how many started."""
        started = sum(1 for cache in self._caches.values() if cache.start(loop))
        if started < len(self._caches):
            logger.info(
                "Periodic cleanup running for %d of %d caches, others expire lazily",
                started,
                len(self._caches),
            )
        return started

    start = init

    def destroy(self) -> None:
        """Destroy every cache exactly once."""
        if self._destroyed:
            return
        for cache in self._caches.values():
            cache.destroy()
        self._destroyed = True

    def __enter__(self) -> CacheRegistry:
        self.init()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.destroy()

    async def __aenter__(self) -> CacheRegistry:
        self.init()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.destroy()

    # ── Bulk operations ──

    def clear_all(self) -> None:
        for cache in self._caches.values():
            cache.clear()

    def get_metrics(self) -> dict[str, CacheMetrics]:
        return {name: cache.get_metrics() for name, cache in self._caches.items()}

    def log_metrics(self, level: int = logging.INFO) -> None:
        """Log hit rate, size and entry count for each cache."""
        for name, metrics in self.get_metrics().items():
            logger.log(
                level,
                "Cache '%s': hit rate %.1f%%, %.2f MB, %d entries",
                name,
                metrics.hit_rate * 100,
                metrics.total_size / _MB,
                metrics.entry_count,
            )
