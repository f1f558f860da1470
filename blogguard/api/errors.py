"""Error envelope and exception handlers for the API."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from blogguard.accounts import (
    AccountError,
    AuthenticationError,
    DuplicateEmailError,
    PasswordMismatchError,
)

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """An error that maps directly to an HTTP response."""

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.details = details


class RateLimitExceeded(ApiError):
    """The client has used up its quota for the gated operation."""

    def __init__(self, message: str = "Too many requests, please try again later") -> None:
        super().__init__(429, "RATE_LIMIT_EXCEEDED", message)


_ACCOUNT_STATUS: dict[type[AccountError], int] = {
    AuthenticationError: 401,
    DuplicateEmailError: 400,
    PasswordMismatchError: 400,
}


def error_body(error_code: str, message: str, details: Optional[dict] = None) -> dict:
    body: dict[str, Any] = {
        "success": False,
        "error": error_code,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if details is not None:
        body["details"] = details
    return body


async def _handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    logger.warning("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.error_code)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error_code, exc.message, exc.details),
    )


async def _handle_account_error(request: Request, exc: AccountError) -> JSONResponse:
    status_code = _ACCOUNT_STATUS.get(type(exc), 400)
    logger.warning("%s %s -> %d %s", request.method, request.url.path, status_code, exc.error_code)
    return JSONResponse(
        status_code=status_code,
        content=error_body(exc.error_code, str(exc)),
    )


def install_error_handlers(app: FastAPI) -> None:
    """Register the error envelope handlers on app."""
    app.add_exception_handler(ApiError, _handle_api_error)
    app.add_exception_handler(AccountError, _handle_account_error)
