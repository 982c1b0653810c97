"""
Tests for folding legacy and structured answers into an IntakeProfile.
"""

import pytest

from app.services.quote import normalize_answers
from app.services.quote.answers import services_from_need_help


def test_structured_services_kept_in_order():
    profile = normalize_answers({"services": ["branding", "website"]})
    assert profile.services == ("branding", "website")
    assert profile.primary == "branding"


def test_explicit_primary_service_wins():
    profile = normalize_answers({"services": ["branding", "website"], "primary_service": "website"})
    assert profile.primary == "website"


def test_empty_services_fall_back_to_need_help():
    profile = normalize_answers({"services": [], "need_help": "Website"})
    assert profile.services == ("website",)


def test_no_services_means_unknown_primary():
    profile = normalize_answers({})
    assert profile.services == ()
    assert profile.primary == "unknown"


@pytest.mark.parametrize(
    "need_help,expected",
    [
        ("Website", ["website"]),
        ("WEBSITE and Branding", ["website", "branding"]),
        ("Automation / backend system", ["automation"]),
        ("Consultancy", ["strategy"]),
        ("Not sure yet", ["unknown"]),
        ("Something else entirely", []),
        ("", []),
    ],
)
def test_services_from_need_help(need_help, expected):
    assert services_from_need_help(need_help) == expected


def test_website_bucket_fields():
    profile = normalize_answers(
        {
            "services": ["website"],
            "website": {
                "pages": " 6_10 ",
                "integrations": ["stripe", "calendly", 3, None],
                "content_ready": "none",
            },
        }
    )
    assert profile.pages == "6_10"
    assert profile.integrations_count == 2  # non-string entries are ignored
    assert profile.content_ready == "none"


def test_branding_bucket_scope():
    profile = normalize_answers({"branding": {"scope": "refresh"}})
    assert profile.branding_scope == "refresh"


def test_legacy_fields_are_lowercased_except_branding_need():
    profile = normalize_answers(
        {
            "website_type": "Multi-page",
            "has_branding": "Partial",
            "branding_need": "  New Logo ",
            "budget": "Under €3k",
            "timing": "ASAP",
        }
    )
    assert profile.website_type == "multi-page"
    assert profile.has_branding == "partial"
    assert profile.branding_need == "New Logo"
    assert profile.budget == "under €3k"
    assert profile.timing == "asap"


@pytest.mark.parametrize("answers", [None, [], "website", 7, {"website": None, "branding": "x"}])
def test_malformed_payloads_give_empty_profile(answers):
    profile = normalize_answers(answers)
    assert profile.services == ()
    assert profile.pages is None
    assert profile.integrations_count == 0
    assert profile.branding_scope is None
    assert profile.website_type == ""


def test_wrongly_typed_fields_are_ignored():
    profile = normalize_answers(
        {"need_help": ["website"], "website_type": 3, "website": {"pages": 5, "integrations": "crm"}}
    )
    assert profile.services == ()
    assert profile.website_type == ""
    assert profile.pages is None
    assert profile.integrations_count == 0
