"""Elevate quote engine: answers -> price range, support tier, follow-ups."""

from app.services.quote.answers import IntakeProfile, normalize_answers
from app.services.quote.quote_engine import (
    Quote,
    QuoteResult,
    SupportRecommendation,
    compute_quote,
)

__all__ = [
    "IntakeProfile",
    "Quote",
    "QuoteResult",
    "SupportRecommendation",
    "compute_quote",
    "normalize_answers",
]
