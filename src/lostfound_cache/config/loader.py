"""YAML loading of cache registry profiles."""

from __future__ import annotations

from pathlib import Path

import yaml

from lostfound_cache.config.schema import RegistryConfig


def load_registry_yaml(path: str | Path) -> RegistryConfig:
    """Load a registry YAML file and return a validated RegistryConfig.

    Expected shape::

        caches:
          post:
            ttl: 300
            max_entries: 50
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Registry YAML not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict) or "caches" not in raw:
        raise ValueError(f"Invalid registry YAML: missing top-level 'caches' key in {path}")

    caches = raw["caches"] or {}
    if not isinstance(caches, dict):
        raise ValueError(
            f"Expected 'caches' to be a mapping, got {type(caches).__name__} in {path}"
        )

    return RegistryConfig.build(caches)
