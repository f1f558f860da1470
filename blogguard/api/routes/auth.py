"""Login and registration routes, both behind the rate limit guard."""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, Request

from blogguard.accounts import AuthenticationError
from blogguard.api.client_ip import resolve_client_ip
from blogguard.api.guard import rate_limit_guard
from blogguard.api.schemas import (
    ErrorResponse,
    LoginData,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
)
from blogguard.logmask import mask_email, mask_ip

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

_RATE_LIMITED = {429: {"model": ErrorResponse, "description": "Too many requests"}}


def _masked_ip(request: Request) -> str:
    return mask_ip(resolve_client_ip(request, request.app.state.settings.api.trust_proxy_headers))


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse}, **_RATE_LIMITED},
)
def login(
    request: Request,
    body: LoginRequest,
    key: str = Depends(rate_limit_guard()),
) -> LoginResponse:
    """Check credentials. A successful login clears the client's penalty."""
    logger.info("Received login request for %s from IP %s", mask_email(body.email), _masked_ip(request))
    accounts = request.app.state.account_store
    try:
        account = accounts.authenticate(body.email, body.password)
    except AuthenticationError:
        # Failed attempts keep counting against the quota
        logger.warning("Login failed for %s", mask_email(body.email))
        raise

    request.app.state.rate_limiter.reset_limit(key)
    logger.info("Login successful for %s", mask_email(body.email))
    return LoginResponse(
        data=LoginData(user=UserResponse(**asdict(account))),
        message="Login successful",
    )


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=201,
    dependencies=[Depends(rate_limit_guard("register"))],
    responses={400: {"model": ErrorResponse}, **_RATE_LIMITED},
)
def register(request: Request, body: RegisterRequest) -> RegisterResponse:
    """Create an account. Quota is tracked separately from login."""
    logger.info("Received register request for %s from IP %s", mask_email(body.email), _masked_ip(request))
    accounts = request.app.state.account_store
    account = accounts.register(
        email=body.email,
        password=body.password,
        confirm_password=body.confirm_password,
        name=body.name,
    )
    return RegisterResponse(data=UserResponse(**asdict(account)), message="Registration successful")
