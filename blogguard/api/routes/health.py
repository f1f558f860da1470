"""Health route."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from blogguard.api.schemas import (
    HealthComponents,
    HealthResponse,
    RateLimiterHealth,
)

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse)
def health(request: Request) -> HealthResponse:
    """Liveness check with rate limiter occupancy."""
    limiter = request.app.state.rate_limiter
    return HealthResponse(
        message="Server is healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        components=HealthComponents(
            rate_limiter=RateLimiterHealth(status="UP", bucket_count=limiter.bucket_count()),
        ),
    )
