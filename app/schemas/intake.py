"""
Elevate intake API request/response schemas.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class IntakeSubmitRequest(BaseModel):
    """Request schema for an Elevate form submission."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    # Bounds match the intake_submissions column sizes
    contact_name: str | None = Field(default=None, max_length=200)
    contact_email: str = Field(max_length=320)
    contact_phone: str | None = Field(default=None, max_length=64)
    company_name: str | None = Field(default=None, max_length=200)
    company_website: str | None = Field(default=None, max_length=500)
    # Open questionnaire mapping (legacy flat answers and/or structured services)
    answers: dict[str, Any] = Field(default_factory=dict)


class QuotePreviewRequest(BaseModel):
    """Request schema for a live estimate (nothing is stored)."""

    model_config = ConfigDict(extra="ignore")

    answers: dict[str, Any] = Field(default_factory=dict)


class QuoteBody(BaseModel):
    currency: str
    low: int
    high: int
    confidence: str
    drivers: list[str]
    assumptions: list[str]


class SupportBody(BaseModel):
    recommended: str
    monthly: int
    annual_value: int


class QuotePreviewResponse(BaseModel):
    """Quote engine output."""

    quote: QuoteBody
    support: SupportBody | None = None
    followups: list[str]
