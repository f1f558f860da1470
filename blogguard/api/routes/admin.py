"""Admin API routes: rate limiter inspection and maintenance."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from blogguard.api.guard import rate_limit_guard, require_admin_token
from blogguard.api.schemas import (
    RateLimitClearResponse,
    RateLimitResetResponse,
    RateLimitStatusResponse,
)
from blogguard.logmask import mask_key

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(rate_limit_guard("admin")), Depends(require_admin_token)],
)


@router.get("/rate-limits", response_model=RateLimitStatusResponse)
def rate_limit_status(request: Request) -> RateLimitStatusResponse:
    """Current bucket count and limiter parameters."""
    limiter = request.app.state.rate_limiter
    return RateLimitStatusResponse(
        bucket_count=limiter.bucket_count(),
        capacity=limiter.capacity,
        refill_tokens=limiter.refill_tokens,
        refill_period_seconds=limiter.refill_period,
        expire_after_access_seconds=limiter.expire_after_access,
        max_entries=limiter.max_entries,
    )


@router.delete("/rate-limits", response_model=RateLimitClearResponse)
def clear_rate_limits(request: Request) -> RateLimitClearResponse:
    """Drop every bucket, including the caller's own admin bucket."""
    logger.info("Admin clear of all rate limit buckets")
    cleared = request.app.state.rate_limiter.clear_all_buckets()
    return RateLimitClearResponse(cleared=cleared)


@router.delete("/rate-limits/{key:path}", response_model=RateLimitResetResponse)
def reset_rate_limit(request: Request, key: str) -> RateLimitResetResponse:
    """Clear the penalty for one key, e.g. ``203.0.113.7`` or ``register:203.0.113.7``."""
    request.app.state.rate_limiter.reset_limit(key)
    logger.info("Admin reset of rate limit key %s", mask_key(key))
    return RateLimitResetResponse(key=key)
