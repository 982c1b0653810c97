"""
Answer reconciliation - folds the two questionnaire shapes into one profile.

The Elevate form has shipped two payload shapes:
- legacy: flat strings (need_help, website_type, has_branding, branding_need, budget, timing)
- structured: services list, primary_service, and per-service buckets (website, branding)

Both may arrive in the same payload. Pricing rules only ever read an IntakeProfile,
so they never branch on which shape was sent.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

logger = logging.getLogger(__name__)

Service = Literal["website", "automation", "branding", "strategy", "unknown"]

SERVICE_WEBSITE = "website"
SERVICE_AUTOMATION = "automation"
SERVICE_BRANDING = "branding"
SERVICE_STRATEGY = "strategy"
SERVICE_UNKNOWN = "unknown"

# Free-text keywords in need_help -> service. Matching is substring-based and
# multi-label: one answer may hit several services, or none.
NEED_HELP_KEYWORDS: tuple[tuple[str, Service], ...] = (
    ("website", SERVICE_WEBSITE),
    ("automation", SERVICE_AUTOMATION),
    ("backend", SERVICE_AUTOMATION),
    ("branding", SERVICE_BRANDING),
    ("consult", SERVICE_STRATEGY),
    ("not sure", SERVICE_UNKNOWN),
)


@dataclass(frozen=True)
class IntakeProfile:
    """Normalized view of one submission's answers."""

    services: tuple[str, ...]
    primary: str

    # Website details
    pages: str | None  # "2_5", "6_10", "10_plus"
    integrations_count: int
    content_ready: str | None
    website_type: str  # legacy free text, lower-cased

    # Branding details
    branding_scope: str | None  # "refresh", "full_identity"
    has_branding: str  # legacy "no" / "partial" / "yes", lower-cased
    branding_need: str  # legacy free text, original casing

    # Heuristic signals
    budget: str  # lower-cased
    timing: str  # lower-cased

    def has(self, service: str) -> bool:
        return service in self.services


def _text(value: Any) -> str:
    """Coerce a free-text answer to a stripped string; anything else is no signal."""
    if isinstance(value, str):
        return value.strip()
    return ""


def _optional_text(value: Any) -> str | None:
    text = _text(value)
    return text or None


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _string_list(value: Any) -> list[str]:
    """Sequence of strings (order kept); strings and non-sequences count as empty."""
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, str)]
    return []


def services_from_need_help(need_help: str) -> list[str]:
    """
    Derive services from the legacy need_help answer.

    Args:
        need_help: Free text, e.g. "Automation / backend system"

    Returns:
        Services in keyword-table order, without duplicates (may be empty)
    """
    text = need_help.lower()
    services: list[str] = []
    for keyword, service in NEED_HELP_KEYWORDS:
        if keyword in text and service not in services:
            services.append(service)
    return services


def normalize_answers(answers: Any) -> IntakeProfile:
    """
    Build an IntakeProfile from a raw answers payload.

    Never raises: missing or wrongly-typed fields become empty strings,
    empty tuples or None.

    Args:
        answers: Raw answers mapping from the intake form (any JSON value accepted)

    Returns:
        IntakeProfile
    """
    data = _mapping(answers)
    website = _mapping(data.get("website"))
    branding = _mapping(data.get("branding"))

    structured_services = _string_list(data.get("services"))
    if structured_services:
        services = structured_services
    else:
        services = services_from_need_help(_text(data.get("need_help")))

    primary = _text(data.get("primary_service")) or (services[0] if services else SERVICE_UNKNOWN)

    profile = IntakeProfile(
        services=tuple(services),
        primary=primary,
        pages=_optional_text(website.get("pages")),
        integrations_count=len(_string_list(website.get("integrations"))),
        content_ready=_optional_text(website.get("content_ready")),
        website_type=_text(data.get("website_type")).lower(),
        branding_scope=_optional_text(branding.get("scope")),
        has_branding=_text(data.get("has_branding")).lower(),
        branding_need=_text(data.get("branding_need")),
        budget=_text(data.get("budget")).lower(),
        timing=_text(data.get("timing")).lower(),
    )
    logger.debug(f"Normalized answers: services={profile.services} primary={profile.primary}")
    return profile
