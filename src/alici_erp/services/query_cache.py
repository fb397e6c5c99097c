"""
Client-side cache of server collections.

Values are stored under tuple keys (see query_keys). A value is served
until its key is invalidated; the next fetch() then re-runs the fetcher.
Invalidation only marks entries stale, re-fetching is lazy.

A fetch that was already in flight when its key was invalidated, removed
or cleared does not write its result back: it belongs to a state of the
server the user has since changed.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .logging_utils import get_service_logger, log_operation
from .query_keys import QueryKey, is_prefix

logger = get_service_logger(__name__)


@dataclass
class _Entry:
    value: Any
    stale: bool = False


class QueryCache:
    """
    Example:
        >>> cache = QueryCache()
        >>> cache.fetch(("productos",), lambda: ["pan"])
        ['pan']
        >>> cache.invalidate(("productos",))
        [('productos',)]
        >>> cache.is_stale(("productos",))
        True
    """

    def __init__(self):
        self._entries: Dict[QueryKey, _Entry] = {}
        # Only keys with a fetch in flight: fetch count and a generation
        # bumped when the key is invalidated or removed meanwhile
        self._in_flight: Dict[QueryKey, int] = {}
        self._generations: Dict[QueryKey, int] = {}
        self._lock = threading.RLock()

    def get(self, key: QueryKey, default: Any = None) -> Any:
        """Cached value for key (stale or not), or default."""
        with self._lock:
            entry = self._entries.get(tuple(key))
            return entry.value if entry is not None else default

    def set(self, key: QueryKey, value: Any) -> None:
        """Store a fresh value for key."""
        with self._lock:
            self._entries[tuple(key)] = _Entry(value)

    def contains(self, key: QueryKey) -> bool:
        with self._lock:
            return tuple(key) in self._entries

    def is_stale(self, key: QueryKey) -> bool:
        """True if key has no value or its value has been invalidated."""
        with self._lock:
            entry = self._entries.get(tuple(key))
            return entry is None or entry.stale

    def fetch(self, key: QueryKey, fetcher: Callable[[], Any], force: bool = False) -> Any:
        """
        Return the cached value, running fetcher when missing, stale or forced.

        Exceptions from fetcher propagate and leave the cache untouched.
        """
        key = tuple(key)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and not entry.stale and not force:
                return entry.value
            generation = self._generations.setdefault(key, 0)
            self._in_flight[key] = self._in_flight.get(key, 0) + 1

        try:
            value = fetcher()
            with self._lock:
                if self._generations[key] == generation:
                    self._entries[key] = _Entry(value)
                else:
                    logger.debug(f"Discarding fetch result for {key}: invalidated while in flight")
            return value
        finally:
            with self._lock:
                self._fetch_done(key)

    def _fetch_done(self, key: QueryKey) -> None:
        remaining = self._in_flight[key] - 1
        if remaining:
            self._in_flight[key] = remaining
        else:
            del self._in_flight[key]
            del self._generations[key]

    def _bump(self, key: QueryKey) -> None:
        if key in self._generations:
            self._generations[key] += 1

    def invalidate(self, prefix: QueryKey) -> List[QueryKey]:
        """
        Mark prefix and every key it prefixes stale.

        Returns:
            Cached keys that were marked stale
        """
        prefix = tuple(prefix)
        marked = []
        with self._lock:
            for key in set(self._entries) | set(self._generations):
                if not is_prefix(prefix, key):
                    continue
                self._bump(key)
                entry = self._entries.get(key)
                if entry is not None:
                    entry.stale = True
                    marked.append(key)
        log_operation(
            logger,
            operation="invalidate",
            outcome="marked_stale",
            level=logging.DEBUG,
            prefix=prefix,
            keys=marked,
        )
        return marked

    def remove(self, prefix: QueryKey) -> None:
        """Drop prefix and every key it prefixes."""
        prefix = tuple(prefix)
        with self._lock:
            for key in set(self._entries) | set(self._generations):
                if is_prefix(prefix, key):
                    self._entries.pop(key, None)
                    self._bump(key)

    def clear(self) -> None:
        """Drop everything (on logout)."""
        with self._lock:
            for key in self._generations:
                self._generations[key] += 1
            self._entries.clear()

    def keys(self, prefix: Optional[QueryKey] = None) -> List[QueryKey]:
        with self._lock:
            return [key for key in self._entries if prefix is None or is_prefix(tuple(prefix), key)]
