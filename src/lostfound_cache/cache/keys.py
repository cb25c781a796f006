"""Deterministic cache keys per domain entity."""

from __future__ import annotations

DEFAULT_CATEGORY = "all"


def image_key(url: str) -> str:
    return f"img_{url}"


def optimized_image_key(url: str, width: int, height: int) -> str:
    """Key for a resized rendition of an image."""
    return f"opt_{url}_{width}_{height}"


def post_key(post_id: str) -> str:
    return f"post_{post_id}"


def posts_key(post_type: str, category: str | None = None) -> str:
    """Key for a post listing, e.g. ``posts_lost_electronics``.

    An omitted or empty category means the unfiltered listing.
    """
    return f"posts_{post_type}_{category or DEFAULT_CATEGORY}"


def user_key(user_id: str) -> str:
    return f"user_{user_id}"


def notifications_key(user_id: str) -> str:
    return f"notifications_{user_id}"
