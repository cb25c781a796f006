"""Configuration — defaults, option models, and YAML profiles."""

from lostfound_cache.config.loader import load_registry_yaml
from lostfound_cache.config.schema import CacheOptions, RegistryConfig

__all__ = ["CacheOptions", "RegistryConfig", "load_registry_yaml"]
