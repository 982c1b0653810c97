"""
Pydantic schemas for API request/response validation.
"""

from app.schemas.intake import (
    IntakeSubmitRequest,
    QuotePreviewRequest,
    QuotePreviewResponse,
)

__all__ = [
    "IntakeSubmitRequest",
    "QuotePreviewRequest",
    "QuotePreviewResponse",
]
