"""Custom exception hierarchy for lostfound_cache."""

from __future__ import annotations

from typing import Any


class LostFoundCacheError(Exception):
    """Base exception for all lostfound_cache errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class CacheConfigError(LostFoundCacheError, ValueError):
    """Invalid cache options, raised at construction and never from operations.

    Examples: non-positive ttl, zero max_entries, unknown option name.
    """

    def __init__(
        self,
        message: str = "",
        field: str | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.original = original


class UnknownCacheError(LostFoundCacheError, KeyError):
    """Registry lookup for a cache name that was never configured."""

    def __init__(self, name: str, known: list[str] | None = None) -> None:
        known = known or []
        message = f"Unknown cache '{name}'"
        if known:
            message += f" (known: {', '.join(known)})"
        super().__init__(message)
        self.name = name
        self.known = known

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.message
