"""
Rate limiting middleware for the public intake endpoints.

Simple in-memory sliding window per (client IP, path prefix). State is per
process; a multi-worker deployment gets one window per worker. Keys whose hits
have all left the window are swept at most once per window, so the store only
holds recently active clients.
"""

import logging
import time
from collections import defaultdict
from collections.abc import Callable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import settings

logger = logging.getLogger(__name__)

# {(client_ip, path_prefix): [timestamp, ...]}
_rate_limit_store: dict[tuple[str, str], list[float]] = defaultdict(list)
_last_sweep: float = 0.0


def _sweep_expired(cutoff: float) -> None:
    """Drop keys with no hits newer than cutoff."""
    stale = [key for key, hits in _rate_limit_store.items() if not hits or hits[-1] <= cutoff]
    for key in stale:
        del _rate_limit_store[key]
    if stale:
        logger.debug(f"Rate limit store: swept {len(stale)} idle clients")


def _is_rate_limited(key: tuple[str, str]) -> bool:
    """Record a hit for key and report whether it is over the limit."""
    global _last_sweep

    if not settings.rate_limit_enabled:
        return False

    now = time.time()
    cutoff = now - settings.rate_limit_window_seconds
    if now - _last_sweep >= settings.rate_limit_window_seconds:
        _sweep_expired(cutoff)
        _last_sweep = now

    hits = [ts for ts in _rate_limit_store[key] if ts > cutoff]

    if len(hits) >= settings.rate_limit_requests:
        _rate_limit_store[key] = hits
        return True

    hits.append(now)
    _rate_limit_store[key] = hits
    return False


def get_client_ip(request: Request) -> str:
    """Extract client IP; proxy headers are used only when configured as trusted."""
    if settings.rate_limit_trust_proxy_headers:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # First IP in the chain is the original client
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip.strip()

    if request.client:
        return request.client.host

    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rate limiting middleware for specific path prefixes."""

    def __init__(self, app, rate_limited_paths: list[str]):
        super().__init__(app)
        self.rate_limited_paths = rate_limited_paths

    def _matching_prefix(self, path: str) -> str | None:
        return next((p for p in self.rate_limited_paths if path.startswith(p)), None)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        prefix = self._matching_prefix(request.url.path)
        if prefix is not None and request.method != "OPTIONS":
            client_ip = get_client_ip(request)
            if _is_rate_limited((client_ip, prefix)):
                logger.warning(
                    f"Rate limit exceeded for {client_ip} on {request.url.path} "
                    f"({settings.rate_limit_requests} requests per "
                    f"{settings.rate_limit_window_seconds}s)"
                )
                return JSONResponse(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    content={
                        "error": "Rate limit exceeded",
                        "details": f"Too many requests. Limit: {settings.rate_limit_requests} "
                        f"requests per {settings.rate_limit_window_seconds} seconds.",
                        "retry_after": settings.rate_limit_window_seconds,
                    },
                    headers={"Retry-After": str(settings.rate_limit_window_seconds)},
                )

        return await call_next(request)
