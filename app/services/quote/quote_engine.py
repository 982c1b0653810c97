"""
Quote engine - maps Elevate questionnaire answers to an indicative price range.

The estimate is built from:
- A fixed base range per requested service
- Website scope modifiers (pages, integrations, content, legacy website type)
- Branding scope modifiers, or branding cost signals from the website branch
- A bundle uplift when website and branding work overlap
- Budget/timing heuristics that only add caveats (and a little headroom)

The result also carries a confidence label, a recurring support recommendation
and the follow-up questions the intake should clarify.

Pure and deterministic: no I/O, no shared state, integer arithmetic only.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Literal

from app.services.quote.answers import (
    SERVICE_AUTOMATION,
    SERVICE_BRANDING,
    SERVICE_STRATEGY,
    SERVICE_UNKNOWN,
    SERVICE_WEBSITE,
    IntakeProfile,
    normalize_answers,
)
from app.services.quote.money import publishable_range

logger = logging.getLogger(__name__)

Confidence = Literal["high", "medium", "low"]
SupportTier = Literal["essential", "growth", "partner"]

CURRENCY = "EUR"

# (service, low, high, driver) - applied in this order
SERVICE_BASES: tuple[tuple[str, int, int, str], ...] = (
    (SERVICE_WEBSITE, 2500, 4000, "Website base"),
    (SERVICE_AUTOMATION, 2000, 5000, "Systems base"),
    (SERVICE_BRANDING, 800, 2500, "Branding base"),
    (SERVICE_STRATEGY, 600, 1500, "Strategy base"),
)

PAGE_BUCKETS: dict[str, tuple[int, int, str]] = {
    "2_5": (600, 1200, "Pages: 2–5"),
    "6_10": (1200, 2400, "Pages: 6–10"),
    "10_plus": (2400, 4500, "Pages: 10+"),
}

INTEGRATION_LOW = 250
INTEGRATION_HIGH = 600

# Legacy website_type keyword -> (low, high, driver); keywords are independent
WEBSITE_TYPE_KEYWORDS: tuple[tuple[str, int, int, str], ...] = (
    ("multi", 800, 1600, "Website: multi-page"),
    ("landing", 0, 400, "Website: landing page"),
    ("ecom", 2500, 5000, "Website: ecommerce"),
)

BRANDING_SCOPES: dict[str, tuple[int, int, str]] = {
    "refresh": (600, 1200, "Brand refresh"),
    "full_identity": (1500, 3000, "Full identity"),
}

# has_branding answer from the website branch -> (low, high, driver)
BRANDING_GAPS: dict[str, tuple[int, int, str]] = {
    "no": (600, 1500, "Branding needed"),
    "partial": (300, 900, "Branding partial"),
}

BUNDLE_UPLIFT = (300, 800, "Website + Branding alignment")

SMALL_BUDGET_HEADROOM = 250

FOLLOWUP_WEBSITE_SIZE = "Confirm website size / page count"
FOLLOWUP_BRANDING_SCOPE = "Branding: refresh or full identity?"
ASSUMPTION_SMALL_BUDGET = "Budget indicated: under €3k (may require phased scope)"
ASSUMPTION_ASAP = "Timeline: ASAP (may require prioritisation / phased delivery)"

# Monthly support price per tier (EUR)
SUPPORT_MONTHLY: dict[str, int] = {
    "essential": 79,
    "growth": 149,
    "partner": 249,
}


@dataclass(frozen=True)
class Quote:
    """Published price range with the reasoning behind it."""

    low: int
    high: int
    confidence: Confidence
    drivers: tuple[str, ...]
    assumptions: tuple[str, ...]
    currency: str = CURRENCY


@dataclass(frozen=True)
class SupportRecommendation:
    """Recurring post-delivery support tier."""

    recommended: SupportTier
    monthly: int

    @property
    def annual_value(self) -> int:
        return self.monthly * 12


@dataclass(frozen=True)
class QuoteResult:
    quote: Quote
    support: SupportRecommendation | None
    followups: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form, as embedded in the submission record and notification email."""
        support = None
        if self.support is not None:
            support = {
                "recommended": self.support.recommended,
                "monthly": self.support.monthly,
                "annual_value": self.support.annual_value,
            }
        return {
            "quote": {
                "currency": self.quote.currency,
                "low": self.quote.low,
                "high": self.quote.high,
                "confidence": self.quote.confidence,
                "drivers": list(self.quote.drivers),
                "assumptions": list(self.quote.assumptions),
            },
            "support": support,
            "followups": list(self.followups),
        }


@dataclass
class _Estimate:
    """Running totals while rules are applied."""

    low: int = 0
    high: int = 0
    drivers: list[str] = field(default_factory=list)
    assumptions: list[str] = field(default_factory=list)
    followups: list[str] = field(default_factory=list)

    def add(self, low: int, high: int, driver: str) -> None:
        self.low += low
        self.high += high
        self.drivers.append(driver)


def _apply_service_bases(profile: IntakeProfile, est: _Estimate) -> None:
    for service, low, high, driver in SERVICE_BASES:
        if profile.has(service):
            est.add(low, high, driver)


def _apply_website_modifiers(profile: IntakeProfile, est: _Estimate) -> None:
    if not profile.has(SERVICE_WEBSITE):
        return

    bucket = PAGE_BUCKETS.get(profile.pages or "")
    if bucket:
        est.add(*bucket)

    if profile.integrations_count:
        n = profile.integrations_count
        est.add(INTEGRATION_LOW * n, INTEGRATION_HIGH * n, f"Integrations: {n}")

    if profile.content_ready == "none":
        est.add(600, 1500, "Content support needed")

    for keyword, low, high, driver in WEBSITE_TYPE_KEYWORDS:
        if keyword in profile.website_type:
            est.add(low, high, driver)

    if not profile.website_type and not profile.pages:
        est.followups.append(FOLLOWUP_WEBSITE_SIZE)


def _apply_branding_modifiers(profile: IntakeProfile, est: _Estimate) -> None:
    if profile.has(SERVICE_BRANDING):
        scope = BRANDING_SCOPES.get(profile.branding_scope or "")
        if scope:
            est.add(*scope)
        if not profile.branding_scope and not profile.branding_need:
            est.followups.append(FOLLOWUP_BRANDING_SCOPE)
        return

    # Branding is not a requested service: treat the website-branch answers as cost signals
    gap = BRANDING_GAPS.get(profile.has_branding)
    if gap:
        est.add(*gap)
    if profile.branding_need:
        est.drivers.append(f"Branding need: {profile.branding_need}")


def has_branding_signal(profile: IntakeProfile) -> bool:
    """True when the submission asks for, or lacks, branding in any form."""
    return (
        profile.has(SERVICE_BRANDING)
        or profile.has_branding in BRANDING_GAPS
        or bool(profile.branding_need)
    )


def _apply_bundle_uplift(profile: IntakeProfile, est: _Estimate) -> None:
    if profile.has(SERVICE_WEBSITE) and has_branding_signal(profile):
        est.add(*BUNDLE_UPLIFT)


def _apply_budget_and_timing(profile: IntakeProfile, est: _Estimate) -> None:
    budget = profile.budget
    if "under" in budget and ("3k" in budget or "3000" in budget):
        est.assumptions.append(ASSUMPTION_SMALL_BUDGET)
        est.high += SMALL_BUDGET_HEADROOM
    if "asap" in profile.timing:
        est.assumptions.append(ASSUMPTION_ASAP)


def assess_confidence(profile: IntakeProfile) -> Confidence:
    """
    Confidence in the published range.

    Missing website or branding scope lowers it to medium. An unresolved service
    set (empty, "unknown", or unknown primary) forces low and always wins over medium.
    """
    confidence: Confidence = "high"

    if profile.has(SERVICE_WEBSITE) and not profile.pages and not profile.website_type:
        confidence = "medium"
    if profile.has(SERVICE_BRANDING) and not profile.branding_scope and not profile.branding_need:
        confidence = "medium"

    if (
        not profile.services
        or profile.has(SERVICE_UNKNOWN)
        or profile.primary == SERVICE_UNKNOWN
    ):
        confidence = "low"

    return confidence


def is_larger_website(profile: IntakeProfile) -> bool:
    return "multi" in profile.website_type or profile.pages in PAGE_BUCKETS


def recommend_support(profile: IntakeProfile) -> SupportRecommendation | None:
    """
    Recommend a support tier (first match wins).

    automation -> partner; website -> essential, or growth for larger sites;
    anything else (branding/strategy only) -> None.
    """
    if profile.has(SERVICE_AUTOMATION):
        tier: SupportTier = "partner"
    elif profile.has(SERVICE_WEBSITE):
        tier = "growth" if is_larger_website(profile) else "essential"
    else:
        return None
    return SupportRecommendation(recommended=tier, monthly=SUPPORT_MONTHLY[tier])


def estimate(profile: IntakeProfile) -> QuoteResult:
    """Price an already-normalized profile."""
    est = _Estimate()

    _apply_service_bases(profile, est)
    _apply_website_modifiers(profile, est)
    _apply_branding_modifiers(profile, est)
    _apply_bundle_uplift(profile, est)
    _apply_budget_and_timing(profile, est)

    low, high = publishable_range(est.low, est.high)

    quote = Quote(
        low=low,
        high=high,
        confidence=assess_confidence(profile),
        drivers=tuple(est.drivers),
        assumptions=tuple(est.assumptions),
    )
    return QuoteResult(
        quote=quote,
        support=recommend_support(profile),
        followups=tuple(est.followups),
    )


def compute_quote(answers: Any) -> QuoteResult:
    """
    Compute the quote, support recommendation and follow-ups for raw answers.

    Accepts both the legacy flat answers and the structured services payload
    (or a mix). Never raises for malformed input.

    Args:
        answers: Raw answers mapping from the intake form

    Returns:
        QuoteResult
    """
    profile = normalize_answers(answers)
    result = estimate(profile)
    logger.debug(
        f"Quote computed: services={profile.services} "
        f"range={result.quote.low}-{result.quote.high} {result.quote.currency} "
        f"confidence={result.quote.confidence}"
    )
    return result
