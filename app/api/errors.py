"""
Shared API error responses.

Intake endpoints answer errors as {"error": <message>} plus an optional
"details" string, matching what the Elevate form already parses.
"""

from typing import Any

from fastapi.responses import JSONResponse

ERROR_CONTACT_EMAIL_REQUIRED = "contact_email is required"
ERROR_INVALID_REQUEST = "Invalid request"
ERROR_DB_INSERT_FAILED = "Database insert failed"


def error_response(status_code: int, error: str, details: Any = None) -> JSONResponse:
    """Build a JSONResponse {"error": ..., "details"?: ...}."""
    content: dict[str, Any] = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def validation_details(exc: Exception) -> str:
    """Short human-readable reason for a rejected request body."""
    errors = getattr(exc, "errors", None)
    if callable(errors):
        parts = []
        for err in errors():
            loc = ".".join(str(p) for p in err.get("loc", ()))
            parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
        if parts:
            return "; ".join(parts)
    return str(exc)
