"""Per-user cache of rendered dashboard views"""

import logging
import time
from typing import Dict, Optional, Tuple

from app import config
from app.features.tasks.schemas import DashboardView

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str, str]


class DashboardCache:
    """
    In-process TTL cache keyed by (user_id, filter, sort).

    Entries are only ever looked up with the caller's own user id. Task
    actions call invalidate() after each successful write so the next
    dashboard read goes back to the store.

    Invalidation only reaches the process that handled the write, so the
    cache must stay disabled (ttl 0, the default) when the app runs with
    more than one worker.
    """

    def __init__(self, ttl_seconds: float = config.DASHBOARD_CACHE_TTL_SECONDS):
        self.ttl_seconds = ttl_seconds
        self._entries: Dict[CacheKey, Tuple[float, DashboardView]] = {}

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def _is_expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl_seconds

    def get(self, key: CacheKey) -> Optional[DashboardView]:
        if not self.enabled:
            return None

        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, view = entry
        if self._is_expired(stored_at, time.monotonic()):
            self._entries.pop(key, None)
            return None

        return view

    def set(self, key: CacheKey, view: DashboardView) -> None:
        if not self.enabled:
            return

        now = time.monotonic()
        # Evict expired views of users who never came back to read them
        expired = [k for k, (stored_at, _) in self._entries.items() if self._is_expired(stored_at, now)]
        for k in expired:
            del self._entries[k]

        self._entries[key] = (now, view)

    def invalidate(self, user_id: str, path: str = config.DASHBOARD_PATH) -> None:
        """Drop every cached view of path belonging to user_id"""
        if path != config.DASHBOARD_PATH:
            return

        stale = [key for key in self._entries if key[0] == user_id]
        for key in stale:
            del self._entries[key]

        if stale:
            logger.debug(f"Invalidated {len(stale)} dashboard views for user {user_id}")


dashboard_cache = DashboardCache()
