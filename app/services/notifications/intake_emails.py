"""
Intake emails - internal notification and submitter auto-reply.

Both sends are best-effort: they run after the submission is committed, each one
is caught independently, and the outcome is reported as a status dict:

    {"attempted": False, "reason": "..."}               # not configured / disabled
    {"attempted": True, "sent": True, "data": {...}}    # accepted by the provider
    {"attempted": True, "sent": False, "error": ...}    # rejected or failed
"""

import asyncio
import json
import logging
from html import escape
from typing import Any

from app.core.config import settings
from app.db.models import IntakeSubmission
from app.services.notifications.email_client import EmailClient

logger = logging.getLogger(__name__)

REASON_MISSING_API_KEY = "Missing RESEND_API_KEY"
REASON_MISSING_NOTIFY_EMAIL = "Missing ELEVATE_NOTIFY_EMAIL"
REASON_NOTIFICATIONS_DISABLED = "Notifications disabled"
REASON_AUTOREPLY_DISABLED = "Auto-reply disabled"

AUTOREPLY_SUBJECT = "Thanks — we've received your Elevate enquiry"


def _not_attempted(reason: str) -> dict[str, Any]:
    return {"attempted": False, "reason": reason}


def format_money(amount: int) -> str:
    return f"€{amount:,}"


def format_estimate_lines(computed: dict[str, Any]) -> list[str]:
    """Plain-text lines describing a quote engine result (QuoteResult.to_dict())."""
    quote = computed.get("quote") or {}
    lines = [
        f"Range: {format_money(quote.get('low', 0))} – {format_money(quote.get('high', 0))} "
        f"{quote.get('currency', '')}".rstrip(),
        f"Confidence: {quote.get('confidence', '')}",
    ]
    drivers = quote.get("drivers") or []
    if drivers:
        lines.append("Drivers:")
        lines.extend(f"  - {d}" for d in drivers)
    assumptions = quote.get("assumptions") or []
    if assumptions:
        lines.append("Assumptions:")
        lines.extend(f"  - {a}" for a in assumptions)

    support = computed.get("support")
    if support:
        lines.append(
            f"Support: {support['recommended']} – {format_money(support['monthly'])}/month "
            f"({format_money(support['annual_value'])}/year)"
        )
    else:
        lines.append("Support: none recommended")

    followups = computed.get("followups") or []
    if followups:
        lines.append("Follow-ups:")
        lines.extend(f"  - {f}" for f in followups)
    return lines


def _raw_answers(submission: IntakeSubmission) -> dict[str, Any]:
    return {k: v for k, v in (submission.answers or {}).items() if k != "computed"}


def build_notification_text(submission: IntakeSubmission, computed: dict[str, Any]) -> str:
    lines = [
        "New Elevate Intake Submission",
        "",
        f"Name: {submission.contact_name or ''}",
        f"Email: {submission.contact_email or ''}",
        f"Phone: {submission.contact_phone or ''}",
        f"Company: {submission.company_name or ''}",
        f"Website: {submission.company_website or ''}",
        "",
        "Estimate:",
        *format_estimate_lines(computed),
        "",
        "Answers:",
        json.dumps(_raw_answers(submission), indent=2, ensure_ascii=False),
        "",
        f"Submission ID: {submission.id}",
    ]
    if submission.created_at is not None:
        lines.append(f"Submitted at: {submission.created_at.isoformat()}")
    return "\n".join(lines)


def build_notification_html(submission: IntakeSubmission, computed: dict[str, Any]) -> str:
    contact_rows = [
        ("Name", submission.contact_name),
        ("Email", submission.contact_email),
        ("Phone", submission.contact_phone),
        ("Company", submission.company_name),
        ("Website", submission.company_website),
    ]
    rows = "".join(
        f"<tr><th align='left'>{label}</th><td>{escape(value or '')}</td></tr>"
        for label, value in contact_rows
    )
    estimate = "".join(f"<li>{escape(line.strip())}</li>" for line in format_estimate_lines(computed))
    answers = escape(json.dumps(_raw_answers(submission), indent=2, ensure_ascii=False))
    return (
        "<h2>New Elevate Intake Submission</h2>"
        f"<table>{rows}</table>"
        f"<h3>Estimate</h3><ul>{estimate}</ul>"
        f"<h3>Answers</h3><pre>{answers}</pre>"
        f"<p>Submission ID: {escape(submission.id)}</p>"
    )


def build_autoreply_text(submission: IntakeSubmission) -> str:
    name = (submission.contact_name or "").strip() or "there"
    return "\n".join(
        [
            f"Hi {name},",
            "",
            "Thanks for telling us about your project. We've received your Elevate enquiry",
            "and will review it and get back to you within two working days.",
            "",
            "If there's anything you'd like to add in the meantime, just reply to this email.",
            "",
            "— The OTwoOne team",
        ]
    )


def build_autoreply_html(submission: IntakeSubmission) -> str:
    name = escape((submission.contact_name or "").strip() or "there")
    return (
        f"<p>Hi {name},</p>"
        "<p>Thanks for telling us about your project. We've received your Elevate enquiry "
        "and will review it and get back to you within two working days.</p>"
        "<p>If there's anything you'd like to add in the meantime, just reply to this email.</p>"
        "<p>— The OTwoOne team</p>"
    )


async def _send(client: EmailClient, label: str, submission_id: str, **message) -> dict[str, Any]:
    """Attempt one send and translate the outcome into a status dict."""
    try:
        res = await client.send(**message)
    except Exception as e:
        logger.error(
            f"Email send failed ({label}) for submission {submission_id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        return {"attempted": True, "sent": False, "error": str(e) or type(e).__name__}

    if res.get("error"):
        logger.warning(f"Email rejected ({label}) for submission {submission_id}: {res['error']}")
        return {"attempted": True, "sent": False, "error": res["error"]}

    logger.info(f"Email sent ({label}) for submission {submission_id}")
    return {"attempted": True, "sent": True, "data": res.get("data", res)}


async def send_notification(
    client: EmailClient, submission: IntakeSubmission, computed: dict[str, Any]
) -> dict[str, Any]:
    """Send the internal new-submission notification to the operator inbox."""
    if not settings.feature_notifications_enabled:
        return _not_attempted(REASON_NOTIFICATIONS_DISABLED)
    if not client.configured:
        return _not_attempted(REASON_MISSING_API_KEY)
    if not settings.elevate_notify_email:
        return _not_attempted(REASON_MISSING_NOTIFY_EMAIL)

    return await _send(
        client,
        "notification",
        submission.id,
        sender=settings.elevate_from_email,
        to=settings.elevate_notify_email,
        subject=f"New Elevate intake — {submission.contact_name or 'New lead'}",
        text=build_notification_text(submission, computed),
        html=build_notification_html(submission, computed),
        reply_to=submission.contact_email,
    )


async def send_autoreply(client: EmailClient, submission: IntakeSubmission) -> dict[str, Any]:
    """Send the acknowledgement email to the submitter."""
    if not settings.feature_autoreply_enabled:
        return _not_attempted(REASON_AUTOREPLY_DISABLED)
    if not client.configured:
        return _not_attempted(REASON_MISSING_API_KEY)

    return await _send(
        client,
        "auto_reply",
        submission.id,
        sender=settings.elevate_from_email,
        to=submission.contact_email,
        subject=AUTOREPLY_SUBJECT,
        text=build_autoreply_text(submission),
        html=build_autoreply_html(submission),
        reply_to=settings.elevate_notify_email,
    )


async def send_intake_emails(
    client: EmailClient, submission: IntakeSubmission, computed: dict[str, Any]
) -> dict[str, Any]:
    """
    Send notification and auto-reply concurrently.

    Args:
        client: Email client (injected)
        submission: Committed submission
        computed: Quote engine output (QuoteResult.to_dict())

    Returns:
        Notification status dict with the auto-reply status under "auto_reply"
    """
    notification, auto_reply = await asyncio.gather(
        send_notification(client, submission, computed),
        send_autoreply(client, submission),
    )
    return {**notification, "auto_reply": auto_reply}
