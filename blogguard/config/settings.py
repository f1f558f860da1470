"""
Central configuration for the blogguard service.

All tunables live here. Nothing is hardcoded in module code.
Values can be overridden from the environment via Settings.from_env().
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field, fields, replace
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional

ENV_PREFIX = "BLOGGUARD_"


class ConfigError(ValueError):
    """Raised when an environment override cannot be parsed."""


def _project_root() -> Path:
    """Walk up from this file to find the project root (where pyproject.toml lives)."""
    current = Path(__file__).resolve().parent
    while current != current.parent:
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent
    # Fallback: two levels up from config/settings.py
    return Path(__file__).resolve().parent.parent.parent


@dataclass(frozen=True)
class RateLimitSettings:
    """Settings for the login rate limiter (token bucket)."""

    # Maximum tokens per client bucket (burst size)
    capacity: int = 5

    # Tokens credited back every refill period
    refill_tokens: int = 5

    # Length of one refill period (seconds)
    refill_period_seconds: float = 60.0

    # Buckets idle for this long are evicted (seconds)
    expire_after_access_seconds: float = 600.0

    # Soft cap on concurrently tracked client keys
    max_entries: int = 10_000


@dataclass(frozen=True)
class ApiSettings:
    """Settings for the HTTP layer."""

    title: str = "blogguard API"
    version: str = "0.1.0"

    # Honour X-Forwarded-For / X-Real-IP when deriving the client key.
    # Disable when the service is reachable without a reverse proxy.
    trust_proxy_headers: bool = True

    # Mount the /admin rate limit routes. Off unless an operator opts in,
    # and then every call must carry admin_token in the X-Admin-Token header.
    admin_enabled: bool = False
    admin_token: str = ""

    def __post_init__(self) -> None:
        if self.admin_enabled and not self.admin_token:
            raise ConfigError("admin routes are enabled but no admin token is set")


@dataclass(frozen=True)
class LoggingSettings:
    """Settings for application logging."""

    level: str = "INFO"
    log_file: str = "blogguard.log"

    # Rotation for the file handler
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5

    @property
    def level_number(self) -> int:
        number = logging.getLevelName(self.level.upper())
        if not isinstance(number, int):
            raise ConfigError(f"Unknown log level: {self.level!r}")
        return number


# env var suffix -> (section, field name)
_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "RATELIMIT_CAPACITY": ("rate_limit", "capacity"),
    "RATELIMIT_REFILL_TOKENS": ("rate_limit", "refill_tokens"),
    "RATELIMIT_REFILL_PERIOD_SECONDS": ("rate_limit", "refill_period_seconds"),
    "RATELIMIT_EXPIRE_AFTER_ACCESS_SECONDS": ("rate_limit", "expire_after_access_seconds"),
    "RATELIMIT_MAX_ENTRIES": ("rate_limit", "max_entries"),
    "TRUST_PROXY_HEADERS": ("api", "trust_proxy_headers"),
    "ADMIN_TOKEN": ("api", "admin_token"),
    "ADMIN_ENABLED": ("api", "admin_enabled"),
    "LOG_LEVEL": ("logging", "level"),
    "LOG_MAX_BYTES": ("logging", "max_bytes"),
    "LOG_BACKUP_COUNT": ("logging", "backup_count"),
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _coerce(env_name: str, raw: str, target_type: type):
    """Convert a raw environment string to the type of the settings field."""
    value = raw.strip()
    if target_type is bool:
        lowered = value.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ConfigError(f"{env_name} must be a boolean, got {raw!r}")

    if target_type in (int, float):
        try:
            number = target_type(value)
        except ValueError:
            raise ConfigError(
                f"{env_name} must be a {target_type.__name__}, got {raw!r}"
            ) from None
        if not math.isfinite(number):
            raise ConfigError(f"{env_name} must be a finite number, got {raw!r}")
        if number <= 0:
            raise ConfigError(f"{env_name} must be positive, got {raw!r}")
        return number

    if not value:
        raise ConfigError(f"{env_name} must not be empty")
    return value


_FIELD_TYPES = {"int": int, "float": float, "bool": bool, "str": str}


@dataclass
class Settings:
    """
    Top-level settings container. Aggregates all subsystem settings.

    Usage:
        settings = get_settings()
        print(settings.rate_limit.capacity)
        print(settings.api.trust_proxy_headers)
    """

    project_root: Path = field(default_factory=_project_root)
    rate_limit: RateLimitSettings = field(default_factory=RateLimitSettings)
    api: ApiSettings = field(default_factory=ApiSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @property
    def data_dir(self) -> Path:
        """Root directory for runtime data."""
        return self.project_root / "data"

    @property
    def logs_dir(self) -> Path:
        """Root directory for log files."""
        return self.data_dir / "logs"

    def ensure_dirs(self) -> None:
        """Create all required data directories if they don't exist."""
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build Settings with BLOGGUARD_* environment overrides applied.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Raises:
            ConfigError: If an override is malformed or not positive.
        """
        environ = os.environ if environ is None else environ
        settings = cls()

        for suffix, (section_name, field_name) in _ENV_OVERRIDES.items():
            env_name = ENV_PREFIX + suffix
            raw = environ.get(env_name)
            if raw is None:
                continue

            section = getattr(settings, section_name)
            field_type = next(f.type for f in fields(section) if f.name == field_name)
            if isinstance(field_type, str):
                field_type = _FIELD_TYPES[field_type]
            value = _coerce(env_name, raw, field_type)
            setattr(settings, section_name, replace(section, **{field_name: value}))

        return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Returns the singleton Settings instance.

    Call this instead of constructing Settings() directly so the entire
    application shares one config object.
    """
    settings = Settings.from_env()
    settings.ensure_dirs()
    return settings
