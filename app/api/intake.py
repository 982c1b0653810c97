"""
Elevate intake endpoints.

POST /api/elevate/submit  - store a form submission, then email the team and the submitter
POST /api/elevate/quote   - live estimate for the form (nothing is stored)

Submit order of operations:
1. Parse + validate the body (400 on failure)
2. Compute the quote (never fails)
3. Insert the submission (500 on failure; no emails)
4. Send notification + auto-reply (failures reported inline, never undo step 3)
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.api.errors import (
    ERROR_CONTACT_EMAIL_REQUIRED,
    ERROR_DB_INSERT_FAILED,
    ERROR_INVALID_REQUEST,
    error_response,
    validation_details,
)
from app.constants.event_types import EVENT_EMAIL_SEND_FAILURE
from app.constants.providers import PROVIDER_RESEND
from app.db.deps import get_db
from app.middleware.correlation_id import get_correlation_id
from app.schemas.intake import IntakeSubmitRequest, QuotePreviewRequest, QuotePreviewResponse
from app.services.intake_service import create_submission
from app.services.notifications.email_client import EmailClient, get_email_client
from app.services.notifications.intake_emails import send_intake_emails
from app.services.quote import compute_quote
from app.services.system_event_service import warn

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_json_object(request: Request) -> dict[str, Any]:
    """
    Read the request body as JSON; null or any non-object value yields {}.

    Raises:
        ValueError: body is not valid UTF-8 JSON
        RecursionError: body nests deeper than the JSON decoder allows
    """
    raw_body = await request.body()
    payload = json.loads(raw_body.decode("utf-8"))
    return payload if isinstance(payload, dict) else {}


def _record_email_failures(db: Session, submission_id: str, email_status: dict[str, Any]) -> None:
    """Write a WARN SystemEvent for each attempted-but-failed send."""
    sends = {"notification": email_status, "auto_reply": email_status.get("auto_reply") or {}}
    for label, status in sends.items():
        if not status.get("attempted") or status.get("sent"):
            continue
        try:
            warn(
                db=db,
                event_type=EVENT_EMAIL_SEND_FAILURE,
                submission_id=submission_id,
                payload={
                    "provider": PROVIDER_RESEND,
                    "email": label,
                    "error": str(status.get("error"))[:500],
                },
            )
        except Exception as event_error:
            db.rollback()
            logger.error(
                f"Failed to record {EVENT_EMAIL_SEND_FAILURE} event for submission "
                f"{submission_id}: {event_error}"
            )


@router.post("/submit")
async def submit_intake(
    request: Request,
    db: Session = Depends(get_db),
    email_client: EmailClient = Depends(get_email_client),
):
    correlation_id = get_correlation_id(request)

    try:
        body = await _read_json_object(request)
    except (ValueError, RecursionError) as e:
        logger.warning(f"Invalid JSON in intake submission: {e}")
        return error_response(400, ERROR_INVALID_REQUEST, details=str(e))

    contact_email = body.get("contact_email")
    if not isinstance(contact_email, str) or not contact_email.strip():
        return error_response(400, ERROR_CONTACT_EMAIL_REQUIRED)

    if body.get("answers") is None:
        body["answers"] = {}
    try:
        intake = IntakeSubmitRequest.model_validate(body)
    except ValidationError as e:
        logger.warning(f"Rejected intake submission: {validation_details(e)}")
        return error_response(400, ERROR_INVALID_REQUEST, details=validation_details(e))

    computed = compute_quote(intake.answers).to_dict()

    try:
        submission = create_submission(db, intake, computed)
    except Exception as e:
        logger.error(
            f"Database insert failed for intake submission: {type(e).__name__}: {e}",
            exc_info=True,
            extra={"correlation_id": correlation_id, "event_type": "intake.db_failure"},
        )
        return error_response(500, ERROR_DB_INSERT_FAILED, details=str(e))

    logger.info(
        f"intake.submitted id={submission.id} correlation_id={correlation_id}",
        extra={"correlation_id": correlation_id, "event_type": "intake.submitted"},
    )

    email_status = await send_intake_emails(email_client, submission, computed)
    _record_email_failures(db, submission.id, email_status)

    return {
        "success": True,
        "id": submission.id,
        "email": email_status,
    }


@router.post("/quote", response_model=QuotePreviewResponse)
async def preview_quote(request: Request):
    try:
        body = await _read_json_object(request)
        if body.get("answers") is None:
            body["answers"] = {}
        preview = QuotePreviewRequest.model_validate(body)
    except ValidationError as e:
        return error_response(400, ERROR_INVALID_REQUEST, details=validation_details(e))
    except (ValueError, RecursionError) as e:
        return error_response(400, ERROR_INVALID_REQUEST, details=str(e))

    return compute_quote(preview.answers).to_dict()
