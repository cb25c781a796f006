"""Coarse invalidation of an entity and the listings that may contain it.

Related listing keys are enumerated by hand and deleted whether or not
they hold the entity; there is no reverse index from entity to listing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lostfound_cache.cache.keys import (
    notifications_key,
    post_key,
    posts_key,
    user_key,
)

if TYPE_CHECKING:
    from lostfound_cache.cache.registry import CacheRegistry

logger = logging.getLogger(__name__)

POST_TYPES = ("lost", "found")
ALL_POSTS = "all"
_LISTING_TYPES = (ALL_POSTS, *POST_TYPES)


class CacheInvalidator:
    """Invalidation helpers bound to one registry.

    Each method returns how many keys were actually removed.
    """

    def __init__(self, registry: CacheRegistry) -> None:
        self._registry = registry

    def invalidate_post(self, post_id: str) -> int:
        """Drop a post and every post listing."""
        cache = self._registry.post
        removed = int(cache.delete(post_key(post_id)))
        for post_type in _LISTING_TYPES:
            removed += int(cache.delete(posts_key(post_type)))
        logger.debug("Invalidated post %s (%d keys)", post_id, removed)
        return removed

    def invalidate_user(self, user_id: str) -> int:
        """Drop a user profile and that user's notifications."""
        removed = int(self._registry.user.delete(user_key(user_id)))
        removed += int(self._registry.notification.delete(notifications_key(user_id)))
        logger.debug("Invalidated user %s (%d keys)", user_id, removed)
        return removed

    def invalidate_posts_by_type(self, post_type: str) -> int:
        """Drop the listing for ``post_type``; ``all`` also drops lost and found."""
        if post_type not in _LISTING_TYPES:
            raise ValueError(
                f"Unknown post type '{post_type}', expected one of {', '.join(_LISTING_TYPES)}"
            )
        cache = self._registry.post
        removed = int(cache.delete(posts_key(post_type)))
        if post_type == ALL_POSTS:
            for other in POST_TYPES:
                removed += int(cache.delete(posts_key(other)))
        return removed

    def invalidate_notifications(self, user_id: str) -> int:
        return int(self._registry.notification.delete(notifications_key(user_id)))

    def clear_all(self) -> None:
        self._registry.clear_all()
