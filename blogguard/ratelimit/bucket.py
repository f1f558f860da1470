"""Token bucket with interval refill."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class TokenBucket:
    """
    A single token bucket for one client key.

    Refill is interval based: every full ``refill_period`` that has elapsed
    since ``last_refill`` credits ``refill_tokens`` tokens, capped at
    ``capacity``. Partial periods are carried over, not dropped. The bucket
    holds no lock of its own; the owning store serialises access.
    """

    capacity: int
    refill_tokens: int
    refill_period: float
    last_refill: float
    tokens: Optional[int] = None

    def __post_init__(self) -> None:
        # A new bucket starts full
        if self.tokens is None:
            self.tokens = self.capacity

    def refill(self, now: float) -> None:
        """Credit tokens for every whole period elapsed since last_refill."""
        elapsed = now - self.last_refill
        # Clock stepped backwards or same instant: nothing to credit.
        if elapsed < self.refill_period:
            return

        periods = int(elapsed // self.refill_period)
        self.tokens = min(self.capacity, self.tokens + periods * self.refill_tokens)
        self.last_refill += periods * self.refill_period

    def try_consume(self, now: float) -> bool:
        """Refill, then take one token. Returns True if a token was taken."""
        self.refill(now)
        if self.tokens >= 1:
            self.tokens -= 1
            return True
        return False
