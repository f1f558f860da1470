"""FastAPI application factory."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from blogguard.accounts import AccountStore
from blogguard.api.errors import install_error_handlers
from blogguard.api.routes.admin import router as admin_router
from blogguard.api.routes.auth import router as auth_router
from blogguard.api.routes.health import router as health_router
from blogguard.config.settings import Settings, get_settings
from blogguard.ratelimit.limiter import RateLimiter


def create_app(
    settings: Settings | None = None,
    rate_limiter: Optional[RateLimiter] = None,
    account_store: Optional[AccountStore] = None,
) -> FastAPI:
    """
    Build and return a fully wired FastAPI application.

    This is the composition root: the rate limiter and account store are
    created here (or injected by tests) and shared with routes through
    app.state, never through module globals.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api.title,
        version=settings.api.version,
        description="Login rate limiting for the blog backend",
    )

    # Shared state, accessible via request.app.state in routes
    app.state.settings = settings
    app.state.rate_limiter = rate_limiter or RateLimiter.from_settings(settings.rate_limit)
    app.state.account_store = account_store or AccountStore()

    install_error_handlers(app)

    # Mount routes
    app.include_router(health_router)
    app.include_router(auth_router)
    if settings.api.admin_enabled:
        app.include_router(admin_router)

    return app
