"""
Signed URL cache.

Signed storage URLs are relatively expensive to mint and every mint is a
round trip to the storage API, so attachment listings reuse them while they
are still comfortably valid. The cache is in-process and non-durable: a
restart simply mints fresh URLs.

Two margins keep clients from receiving a URL that dies in their hands:

- ``set`` records an expiry ``EXPIRY_OFFSET`` seconds before the real one.
- ``get`` treats an entry as gone ``EXPIRY_MARGIN`` seconds before that.
"""

from __future__ import annotations

import asyncio
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from telloom.core.logging_config import get_logger

logger = get_logger(__name__)

EXPIRY_OFFSET = 60.0
EXPIRY_MARGIN = 60.0
SWEEP_INTERVAL = 300.0


@dataclass(frozen=True)
class CacheEntry:
    url: str
    expiry: float


class URLCache:
    """Thread-safe TTL cache mapping an object key to a signed URL."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def set(self, key: str, url: str, expiry_seconds: float) -> None:
        """Store ``url`` for ``key``; ``expiry_seconds`` is the URL's real lifetime."""
        expiry = self._clock() + (expiry_seconds - EXPIRY_OFFSET)
        with self._lock:
            self._entries[key] = CacheEntry(url=url, expiry=expiry)

    def get(self, key: str) -> Optional[str]:
        """Return the cached URL, or None when missing or about to expire."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() > entry.expiry - EXPIRY_MARGIN:
                del self._entries[key]
                return None
            return entry.url

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clean_expired(self) -> int:
        """Drop every entry inside the expiry margin. Returns the number removed."""
        now = self._clock()
        with self._lock:
            stale = [key for key, entry in self._entries.items() if now > entry.expiry - EXPIRY_MARGIN]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug(f"Evicted {len(stale)} expired signed URLs")
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


url_cache = URLCache()


async def sweep_expired(cache: URLCache = url_cache, interval: float = SWEEP_INTERVAL) -> None:
    """Evict stale entries every ``interval`` seconds until cancelled."""
    while True:
        await asyncio.sleep(interval)
        cache.clean_expired()
