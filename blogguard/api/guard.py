"""Rate limit guard dependency for API routes."""

from __future__ import annotations

import hmac
import logging
from typing import Callable, Optional

from fastapi import Request

from blogguard.api.client_ip import build_rate_limit_key, resolve_client_ip
from blogguard.api.errors import ApiError, RateLimitExceeded
from blogguard.logmask import mask_ip

logger = logging.getLogger(__name__)

ADMIN_TOKEN_HEADER = "X-Admin-Token"


def rate_limit_guard(operation: Optional[str] = None) -> Callable[[Request], str]:
    """
    Build a dependency that rejects the request once its client is over quota.

    The dependency returns the rate limit key it charged, so a handler can
    clear the penalty after success::

        @router.post("/login")
        def login(request: Request, key: str = Depends(rate_limit_guard())):
            ...
            request.app.state.rate_limiter.reset_limit(key)

    Args:
        operation: Key namespace. None charges the bare client IP.
    """

    def guard(request: Request) -> str:
        settings = request.app.state.settings
        ip = resolve_client_ip(request, settings.api.trust_proxy_headers)
        key = build_rate_limit_key(ip, operation)

        if not request.app.state.rate_limiter.allow_request(key):
            logger.warning(
                "Rejected %s %s from %s: rate limit exceeded",
                request.method, request.url.path, mask_ip(ip),
            )
            raise RateLimitExceeded()
        return key

    return guard


def require_admin_token(request: Request) -> None:
    """Reject the request unless it carries the configured admin token."""
    expected = request.app.state.settings.api.admin_token
    supplied = request.headers.get(ADMIN_TOKEN_HEADER, "")
    if not expected or not hmac.compare_digest(supplied.encode(), expected.encode()):
        ip = resolve_client_ip(request, request.app.state.settings.api.trust_proxy_headers)
        logger.warning(
            "Rejected %s %s from %s: bad admin token",
            request.method, request.url.path, mask_ip(ip),
        )
        raise ApiError(401, "ADMIN_AUTH_FAILED", "Missing or invalid admin token")
