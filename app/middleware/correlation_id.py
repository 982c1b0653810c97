"""
Correlation ID middleware for request tracing.

Reads X-Correlation-ID from the incoming request or generates a UUID, exposes it
on request.state and a contextvar, and echoes it on the response. Intake log
lines and SystemEvent payloads carry it so a form submission can be followed
from the HTTP request through to its email sends.
"""

import logging
import re
import uuid
from contextvars import ContextVar
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

HEADER_CORRELATION_ID = "X-Correlation-ID"

# Accept client-supplied IDs only if they are short and header-safe
_VALID_CORRELATION_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id(request: Request | None = None) -> str | None:
    """
    Get correlation ID for the current request.
    Prefers request.state, then contextvar. Returns None outside a request.
    """
    if request is not None and getattr(request.state, "correlation_id", None):
        return request.state.correlation_id
    return _correlation_id_var.get()


def resolve_correlation_id(incoming: str | None) -> str:
    """Use the caller's ID when it is well-formed, otherwise a fresh UUID."""
    if incoming:
        candidate = incoming.strip()
        if _VALID_CORRELATION_ID.match(candidate):
            return candidate
        logger.debug("Ignoring malformed X-Correlation-ID header")
    return str(uuid.uuid4())


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Sets correlation_id on every request and echoes it back."""

    async def dispatch(self, request: Request, call_next: Callable):
        cid = resolve_correlation_id(request.headers.get(HEADER_CORRELATION_ID))
        request.state.correlation_id = cid
        token = _correlation_id_var.set(cid)
        try:
            response = await call_next(request)
        finally:
            _correlation_id_var.reset(token)
        response.headers[HEADER_CORRELATION_ID] = cid
        return response
