"""In-process cache of rendered public page payloads.

Public routes are rendered from several tables (content, announcement,
section visibility). The render endpoint stores each payload here keyed by
route path; publish, rollback, and inline edits invalidate the routes they
affect so the next request re-renders from the database.
"""

import logging
import threading
from typing import Any, Iterable, Optional

logger = logging.getLogger(__name__)

# Public routes whose renders depend on editable content.
PUBLIC_ROUTES: dict[str, str] = {
    "/": "Homepage",
    "/about": "About",
    "/flag-football": "Flag Football",
    "/tackle-football": "Tackle Football",
    "/academies-clinics": "Academies & Clinics",
}

# Routes invalidated after a draft is published or a version restored.
PUBLISH_REVALIDATE_PATHS: tuple[str, ...] = tuple(PUBLIC_ROUTES)


def normalize_route(path: str) -> Optional[str]:
    """Canonical public route for ``path``, or None if it is not one.

    Only these routes are ever cached, so invalidating
    ``PUBLISH_REVALIDATE_PATHS`` clears every cached render.
    """
    route = "/" + (path or "").strip().strip("/")
    return route if route in PUBLIC_ROUTES else None


class PageCache:
    """Thread-safe dict of route path -> rendered payload."""

    def __init__(self):
        self._entries: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, path: str) -> Optional[Any]:
        with self._lock:
            return self._entries.get(path)

    def set(self, path: str, payload: Any) -> None:
        with self._lock:
            self._entries[path] = payload

    def invalidate(self, paths: Iterable[str]) -> int:
        """Drop cached renders for ``paths``. Returns how many were cached."""
        removed = 0
        with self._lock:
            for path in paths:
                if self._entries.pop(path, None) is not None:
                    removed += 1
        logger.debug("Invalidated %d cached page(s)", removed)
        return removed

    def invalidate_all(self) -> int:
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
        logger.debug("Invalidated all %d cached page(s)", removed)
        return removed

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return path in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


page_cache = PageCache()
