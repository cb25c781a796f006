"""Pydantic models for cache configuration."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lostfound_cache.config.defaults import (
    DEFAULT_CLEANUP_INTERVAL,
    DEFAULT_ENABLE_METRICS,
    DEFAULT_MAX_ENTRIES,
    DEFAULT_MAX_SIZE,
    DEFAULT_PROFILES,
    DEFAULT_TTL,
    get_profile,
)
from lostfound_cache.errors.exceptions import CacheConfigError


class CacheOptions(BaseModel):
    """Construction-time settings of one cache engine.

    Durations are in seconds, sizes in bytes. Options are frozen once
    built; a running engine is never retuned.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    ttl: float = Field(default=DEFAULT_TTL, gt=0)
    max_size: int = Field(default=DEFAULT_MAX_SIZE, gt=0)
    max_entries: int = Field(default=DEFAULT_MAX_ENTRIES, gt=0)
    cleanup_interval: float = Field(default=DEFAULT_CLEANUP_INTERVAL, gt=0)
    enable_metrics: bool = DEFAULT_ENABLE_METRICS

    @classmethod
    def build(cls, **values: Any) -> CacheOptions:
        """Validate ``values`` into options, raising CacheConfigError on failure.

        ``None`` values are dropped so callers can pass optional overrides
        straight through.
        """
        values = {k: v for k, v in values.items() if v is not None}
        try:
            return cls(**values)
        except ValidationError as e:
            raise _config_error(e) from e

    def merged(self, **overrides: Any) -> CacheOptions:
        """Return a copy with ``overrides`` applied and re-validated."""
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return CacheOptions.build(**{**self.model_dump(), **overrides})


def _default_profiles() -> dict[str, CacheOptions]:
    return {name: CacheOptions(**get_profile(name)) for name in DEFAULT_PROFILES}


class RegistryConfig(BaseModel):
    """Named cache profiles owned by a CacheRegistry."""

    profiles: dict[str, CacheOptions] = Field(default_factory=_default_profiles)

    @classmethod
    def build(cls, profiles: dict[str, dict[str, Any]] | None = None) -> RegistryConfig:
        """Layer raw per-cache settings over the built-in profiles.

        A name not among the built-in profiles starts from the engine
        defaults.
        """
        merged = _default_profiles()
        for name, raw in (profiles or {}).items():
            if not isinstance(raw, dict):
                raise CacheConfigError(
                    f"Profile '{name}' must be a mapping, got {type(raw).__name__}",
                    field=name,
                )
            base = merged.get(name) or CacheOptions(**get_profile(name))
            merged[name] = base.merged(**raw)
        return cls(profiles=merged)

    def names(self) -> list[str]:
        return list(self.profiles)


def _config_error(exc: ValidationError) -> CacheConfigError:
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = first.get("loc", ())
    field = str(loc[0]) if loc else None
    message = first.get("msg", str(exc))
    if field:
        message = f"Invalid cache option '{field}': {message}"
    return CacheConfigError(message, field=field, original=exc)
