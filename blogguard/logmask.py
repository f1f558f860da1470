"""
Masking helpers for personal data in log lines.

    mask_email("test@example.com")  -> "t***@example.com"
    mask_ip("192.168.1.100")        -> "192.168.*.*"
    mask_key("register:10.0.0.1")   -> "register:10.0.*.*"
"""

from __future__ import annotations

from typing import Optional

EMPTY = "[empty]"


def mask_string(value: Optional[str]) -> str:
    """Keep the first and last character, star out the rest."""
    if not value:
        return EMPTY
    if len(value) <= 2:
        return "*" * len(value)
    return value[0] + "*" * (len(value) - 2) + value[-1]


def mask_email(email: Optional[str]) -> str:
    if not email:
        return EMPTY

    at = email.find("@")
    if at <= 0:
        return mask_string(email)

    local, domain = email[:at], email[at:]
    if len(local) == 1:
        return "*" + domain
    return local[0] + "***" + domain


def mask_ip(ip: Optional[str]) -> str:
    """Hide the host part of an IPv4 address; truncate anything else."""
    if not ip:
        return EMPTY

    parts = ip.split(".")
    if len(parts) == 4:
        return f"{parts[0]}.{parts[1]}.*.*"

    if len(ip) > 8:
        return ip[:8] + "***"
    return mask_string(ip)


def mask_key(key: Optional[str]) -> str:
    """Mask the client part of a rate limit key such as ``register:10.0.0.1``."""
    if not key:
        return EMPTY

    operation, sep, client = key.partition(":")
    if sep and operation.isalpha() and client:
        return f"{operation}:{mask_ip(client)}"
    return mask_ip(key)
