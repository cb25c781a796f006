"""Shared type aliases for lostfound_cache."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeAlias

CacheKey: TypeAlias = str | int

# Returns a monotonic instant in seconds
Clock: TypeAlias = Callable[[], float]
