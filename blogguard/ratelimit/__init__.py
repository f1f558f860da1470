"""Keyed token bucket rate limiting with idle-bucket eviction."""

from blogguard.ratelimit.bucket import TokenBucket
from blogguard.ratelimit.limiter import RateLimiter
from blogguard.ratelimit.store import BucketStore

__all__ = [
    "BucketStore",
    "RateLimiter",
    "TokenBucket",
]
