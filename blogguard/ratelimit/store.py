"""Bounded, access-expiring registry of token buckets keyed by client."""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, TypeVar

from blogguard.logmask import mask_key
from blogguard.ratelimit.bucket import TokenBucket

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Removal causes, reported in debug logs
EXPIRED = "expired"
SIZE = "size"
EXPLICIT = "explicit"


@dataclass
class _Entry:
    bucket: TokenBucket
    last_access: float


class BucketStore:
    """
    Maps client keys to TokenBuckets with expire-after-access and an LRU cap.

    Entries are kept in access order, so the least recently used entry is
    always at the front. Expired entries are purged lazily from the front
    on every store operation; when an insert pushes the store past
    ``max_entries`` the least recently used entries are dropped.

    Every operation runs under one lock, so a bucket is never observed
    half-created or half-evicted. All public methods are thread-safe.
    """

    def __init__(
        self,
        expire_after_access: float = 600.0,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not math.isfinite(expire_after_access) or expire_after_access <= 0:
            raise ValueError("expire_after_access must be a positive, finite number")
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._expire_after_access = expire_after_access
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, _Entry] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def expire_after_access(self) -> float:
        return self._expire_after_access

    def access(
        self,
        key: str,
        create: Callable[[str, float], TokenBucket],
        action: Callable[[TokenBucket, float], T],
    ) -> T:
        """
        Run ``action(bucket, now)`` on the bucket for key, creating it if absent.

        Lookup, creation and the action itself happen under the store lock,
        which makes the action atomic with respect to every other caller.
        """
        with self._lock:
            now = self._clock()
            self._purge_expired(now)

            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry(bucket=create(key, now), last_access=now)
                self._entries[key] = entry
                self._evict_overflow()
            else:
                entry.last_access = now
                self._entries.move_to_end(key)

            return action(entry.bucket, now)

    def invalidate(self, key: str) -> bool:
        """Remove key if present. Returns True if an entry was removed."""
        with self._lock:
            if key not in self._entries:
                return False
            self._remove(key, EXPLICIT)
            return True

    def invalidate_all(self) -> int:
        """Remove every entry. Returns the number removed."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def cleanup(self) -> int:
        """Purge expired entries now. Returns the number purged."""
        with self._lock:
            return self._purge_expired(self._clock())

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired(self._clock())
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            self._purge_expired(self._clock())
            return key in self._entries

    # ------------------------------------------------------------------
    # Internals (caller holds the lock)
    # ------------------------------------------------------------------

    def _purge_expired(self, now: float) -> int:
        purged = 0
        while self._entries:
            key, entry = next(iter(self._entries.items()))
            if now - entry.last_access < self._expire_after_access:
                break
            self._remove(key, EXPIRED)
            purged += 1
        return purged

    def _evict_overflow(self) -> None:
        while len(self._entries) > self._max_entries:
            key = next(iter(self._entries))
            self._remove(key, SIZE)

    def _remove(self, key: str, cause: str) -> None:
        del self._entries[key]
        logger.debug("Rate limit bucket removed for client: %s, cause: %s", mask_key(key), cause)
