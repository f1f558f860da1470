"""Pydantic request/response models for the API."""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
_LETTER = re.compile(r"[A-Za-z]")
_DIGIT = re.compile(r"\d")


def _check_password_strength(value: str) -> str:
    if not (_LETTER.search(value) and _DIGIT.search(value)):
        raise ValueError("password must contain letters and digits")
    return value


class LoginRequest(BaseModel):
    """Credentials for POST /api/auth/login."""

    email: str = Field(..., min_length=3, max_length=100, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6, max_length=50)

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return _check_password_strength(value)


class RegisterRequest(BaseModel):
    """Body for POST /api/auth/register."""

    email: str = Field(..., min_length=3, max_length=100, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6, max_length=50)
    confirm_password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=2, max_length=50)

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return _check_password_strength(value)


class UserResponse(BaseModel):
    """Public view of an account."""

    id: int
    email: str
    name: str
    role: str
    created_at: str


class LoginData(BaseModel):
    user: UserResponse


class LoginResponse(BaseModel):
    success: bool = True
    data: LoginData
    message: str


class RegisterResponse(BaseModel):
    success: bool = True
    data: UserResponse
    message: str


class RateLimiterHealth(BaseModel):
    status: str
    bucket_count: int


class HealthComponents(BaseModel):
    rate_limiter: RateLimiterHealth


class HealthResponse(BaseModel):
    """Liveness plus per-component status."""

    success: bool = True
    message: str
    timestamp: str
    components: HealthComponents


class RateLimitStatusResponse(BaseModel):
    """Current limiter parameters and occupancy."""

    bucket_count: int
    capacity: int
    refill_tokens: int
    refill_period_seconds: float
    expire_after_access_seconds: float
    max_entries: int


class RateLimitClearResponse(BaseModel):
    cleared: int


class RateLimitResetResponse(BaseModel):
    key: str
    reset: bool = True


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    success: bool = False
    error: str
    message: str
    timestamp: str
    details: Optional[dict] = None
