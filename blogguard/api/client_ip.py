"""Client address resolution for rate limit keys."""

from __future__ import annotations

from typing import Optional

from fastapi import Request

UNKNOWN = "unknown"


def _usable(value: Optional[str]) -> bool:
    return bool(value) and value.strip().lower() != UNKNOWN


def resolve_client_ip(request: Request, trust_proxy_headers: bool = True) -> str:
    """
    Best guess at the originating client address.

    Order: first entry of X-Forwarded-For, then X-Real-IP, then the
    connection peer. Proxy headers are ignored unless trust_proxy_headers.
    """
    ip: Optional[str] = None
    if trust_proxy_headers:
        forwarded = request.headers.get("x-forwarded-for")
        if _usable(forwarded):
            ip = forwarded
        else:
            real_ip = request.headers.get("x-real-ip")
            if _usable(real_ip):
                ip = real_ip

    if ip is None:
        ip = request.client.host if request.client else UNKNOWN

    # Several proxies: the first hop is the client
    if "," in ip:
        ip = ip.split(",")[0]
    return ip.strip() or UNKNOWN


def build_rate_limit_key(ip: str, operation: Optional[str] = None) -> str:
    """Namespace ip by operation so each operation has its own quota."""
    return f"{operation}:{ip}" if operation else ip
