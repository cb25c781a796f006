"""Package-level default configuration values."""

from __future__ import annotations

from typing import Any

_MB = 1024 * 1024

# Default engine settings (seconds / bytes)
DEFAULT_TTL = 24 * 60 * 60.0
DEFAULT_MAX_SIZE = 50 * _MB
DEFAULT_MAX_ENTRIES = 1000
DEFAULT_CLEANUP_INTERVAL = 5 * 60.0
DEFAULT_ENABLE_METRICS = True

# Share of max_entries dropped by one count-budget eviction
DEFAULT_EVICTION_RATIO = 0.10

# Named registry caches
IMAGE_CACHE = "image"
POST_CACHE = "post"
USER_CACHE = "user"
NOTIFICATION_CACHE = "notification"

DEFAULT_PROFILES: dict[str, dict[str, Any]] = {
    # Images change rarely but are large
    IMAGE_CACHE: {"ttl": 60 * 60.0, "max_size": 100 * _MB, "max_entries": 500},
    POST_CACHE: {"ttl": 10 * 60.0, "max_size": 20 * _MB, "max_entries": 200},
    USER_CACHE: {"ttl": 30 * 60.0, "max_size": 10 * _MB, "max_entries": 300},
    # Near real-time data
    NOTIFICATION_CACHE: {"ttl": 5 * 60.0, "max_size": 5 * _MB, "max_entries": 100},
}

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return the engine defaults as a flat dictionary for merging."""
    return {
        "ttl": DEFAULT_TTL,
        "max_size": DEFAULT_MAX_SIZE,
        "max_entries": DEFAULT_MAX_ENTRIES,
        "cleanup_interval": DEFAULT_CLEANUP_INTERVAL,
        "enable_metrics": DEFAULT_ENABLE_METRICS,
    }


def get_profile(name: str) -> dict[str, Any]:
    """Return the defaults merged with the named registry profile.

    Unknown names fall back to the plain engine defaults.
    """
    profile = get_defaults()
    profile.update(DEFAULT_PROFILES.get(name, {}))
    return profile
