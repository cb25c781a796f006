"""Approximate byte-size estimation for cached values.

Flat per-type heuristics rather than true serialized size: an estimate must
stay cheap because it runs on every ``set``.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)

_SCALAR_SIZE = 8
_SEQUENCE_ITEM_SIZE = 100
_CHAR_SIZE = 2

_UNITS = ("B", "KB", "MB", "GB")


def estimate_size(value: Any) -> int:
    """Return an approximate byte cost for ``value``. Never raises."""
    if value is None or isinstance(value, (bool, int, float, complex)):
        return _SCALAR_SIZE
    if isinstance(value, str):
        return len(value) * _CHAR_SIZE
    if isinstance(value, (bytes, bytearray, memoryview)):
        return len(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) * _SEQUENCE_ITEM_SIZE
    return _estimate_serialized(value)


def format_bytes(size: float) -> str:
    """Human-readable byte count, e.g. ``1.5 KB``."""
    if size <= 0:
        return "0 B"
    i = 0
    while size >= 1024 and i < len(_UNITS) - 1:
        size /= 1024
        i += 1
    return f"{round(size, 2):g} {_UNITS[i]}"


def _estimate_serialized(value: Any) -> int:
    try:
        if isinstance(value, BaseModel):
            serialized = value.model_dump_json()
        elif dataclasses.is_dataclass(value) and not isinstance(value, type):
            serialized = json.dumps(dataclasses.asdict(value), default=str)
        else:
            serialized = json.dumps(value, default=str)
        return len(serialized) * _CHAR_SIZE
    except Exception as e:
        logger.debug("Falling back to repr() size for %s: %s", type(value).__name__, e)

    try:
        return len(repr(value)) * _CHAR_SIZE
    except Exception:
        logger.debug("Cannot size %s, using flat estimate", type(value).__name__)
        return _SCALAR_SIZE
