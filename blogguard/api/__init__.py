"""FastAPI layer: auth routes behind a per-client rate limit guard."""

from blogguard.api.app import create_app
from blogguard.api.client_ip import build_rate_limit_key, resolve_client_ip
from blogguard.api.errors import ApiError, RateLimitExceeded
from blogguard.api.guard import rate_limit_guard

__all__ = [
    "create_app",
    "ApiError",
    "RateLimitExceeded",
    "build_rate_limit_key",
    "rate_limit_guard",
    "resolve_client_ip",
]
