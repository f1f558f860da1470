"""Per-client token bucket rate limiter with automatic eviction."""

from __future__ import annotations

import logging
import math
import time
from typing import Callable

from blogguard.config.settings import RateLimitSettings
from blogguard.logmask import mask_key
from blogguard.ratelimit.bucket import TokenBucket
from blogguard.ratelimit.store import BucketStore

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Per-client token bucket rate limiter.

    Each client key (an IP, or ``"<operation>:<ip>"`` for a per-operation
    quota) gets its own bucket of ``capacity`` tokens, refilled by
    ``refill_tokens`` every ``refill_period`` seconds. Buckets idle for
    ``expire_after_access`` seconds are evicted, and at most
    ``max_entries`` keys are tracked at once.

    Usage::

        limiter = RateLimiter(capacity=5, refill_tokens=5, refill_period=60)
        if not limiter.allow_request(client_ip):
            ...  # reject with 429
        limiter.reset_limit(client_ip)  # after a successful login

    All public methods are thread-safe.
    """

    def __init__(
        self,
        capacity: int = 5,
        refill_tokens: int = 5,
        refill_period: float = 60.0,
        expire_after_access: float = 600.0,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        if refill_tokens <= 0:
            raise ValueError("refill_tokens must be positive")
        if not math.isfinite(refill_period) or refill_period <= 0:
            raise ValueError("refill_period must be a positive, finite number")

        self._capacity = capacity
        self._refill_tokens = refill_tokens
        self._refill_period = refill_period
        self._store = BucketStore(
            expire_after_access=expire_after_access,
            max_entries=max_entries,
            clock=clock,
        )

        logger.info(
            "RateLimiter initialized: capacity=%d, refill=%d/%.1fs, "
            "cache expire=%.1fs, max=%d",
            capacity, refill_tokens, refill_period, expire_after_access, max_entries,
        )

    @classmethod
    def from_settings(
        cls,
        settings: RateLimitSettings,
        clock: Callable[[], float] = time.monotonic,
    ) -> "RateLimiter":
        """Build a limiter from the rate_limit section of Settings."""
        return cls(
            capacity=settings.capacity,
            refill_tokens=settings.refill_tokens,
            refill_period=settings.refill_period_seconds,
            expire_after_access=settings.expire_after_access_seconds,
            max_entries=settings.max_entries,
            clock=clock,
        )

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def refill_tokens(self) -> int:
        return self._refill_tokens

    @property
    def refill_period(self) -> float:
        return self._refill_period

    @property
    def expire_after_access(self) -> float:
        return self._store.expire_after_access

    @property
    def max_entries(self) -> int:
        return self._store.max_entries

    def allow_request(self, key: str) -> bool:
        """Consume one token for key. Returns False if the client is over its limit."""
        allowed = self._store.access(key, self._create_bucket, TokenBucket.try_consume)
        if not allowed:
            logger.warning("Rate limit exceeded for client: %s", mask_key(key))
        return allowed

    def reset_limit(self, key: str) -> None:
        """Forget key's bucket so its next request starts with a full quota."""
        if self._store.invalidate(key):
            logger.debug("Reset rate limit for client: %s", mask_key(key))

    def bucket_count(self) -> int:
        """Number of live buckets (for monitoring)."""
        return len(self._store)

    def clear_all_buckets(self) -> int:
        """Drop every bucket. Returns how many were cleared."""
        count = self._store.invalidate_all()
        logger.info("Cleared %d rate limit buckets", count)
        return count

    def evict_stale(self) -> int:
        """Remove buckets idle past expire_after_access. Returns count evicted."""
        return self._store.cleanup()

    def _create_bucket(self, key: str, now: float) -> TokenBucket:
        logger.debug("Created new rate limit bucket for client: %s", mask_key(key))
        return TokenBucket(
            capacity=self._capacity,
            refill_tokens=self._refill_tokens,
            refill_period=self._refill_period,
            last_refill=now,
            tokens=self._capacity,
        )
