"""
Intake submission persistence.

The submission row is the source of truth: it is written (and committed) before
any email is attempted, and nothing after the commit may undo it.
"""

import logging
import uuid
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from app.constants.statuses import SOURCE_ELEVATE, STATUS_SUBMITTED
from app.db.models import IntakeSubmission
from app.schemas.intake import IntakeSubmitRequest

logger = logging.getLogger(__name__)


def create_submission(
    db: Session,
    request: IntakeSubmitRequest,
    computed: dict[str, Any],
) -> IntakeSubmission:
    """
    Insert one intake submission.

    Args:
        db: Database session
        request: Validated intake payload
        computed: Quote engine output, embedded as answers["computed"]

    Returns:
        Committed IntakeSubmission. Timestamps are None if the row could not
        be reloaded after the commit.

    Raises:
        sqlalchemy.exc.SQLAlchemyError: insert/commit failed; the session is rolled back
    """
    values: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "status": STATUS_SUBMITTED,
        "source": SOURCE_ELEVATE,
        "contact_name": request.contact_name,
        "contact_email": request.contact_email.strip(),
        "contact_phone": request.contact_phone,
        "company_name": request.company_name,
        "company_website": request.company_website,
        "answers": {**request.answers, "computed": computed},
    }
    submission = IntakeSubmission(**values)
    db.add(submission)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    try:
        db.refresh(submission)
    except SQLAlchemyError as e:
        # Row is committed: keep the submission usable from the values we wrote
        logger.error(
            f"Intake submission {values['id']} stored but could not be reloaded: {e}",
            exc_info=True,
        )
        for key, value in {**values, "created_at": None, "updated_at": None}.items():
            set_committed_value(submission, key, value)

    logger.info(f"Intake submission {submission.id} stored (source={submission.source})")
    return submission
