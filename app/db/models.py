import uuid
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.constants.statuses import SOURCE_ELEVATE, STATUS_SUBMITTED
from app.db.base import Base


def _new_submission_id() -> str:
    return str(uuid.uuid4())


class IntakeSubmission(Base):
    __tablename__ = "intake_submissions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_submission_id)
    status: Mapped[str] = mapped_column(String(32), default=STATUS_SUBMITTED, index=True)
    source: Mapped[str] = mapped_column(String(32), default=SOURCE_ELEVATE)

    # Contact fields
    contact_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    contact_email: Mapped[str] = mapped_column(String(320), index=True)
    contact_phone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    company_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    company_website: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Raw questionnaire answers; answers["computed"] holds the quote engine output
    answers: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)

    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class SystemEvent(Base):
    """Structured log of notable failures, e.g. an email send that failed after a submission was stored."""
    __tablename__ = "system_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    level: Mapped[str] = mapped_column(String(10), index=True)  # INFO, WARN, ERROR
    event_type: Mapped[str] = mapped_column(String(100), index=True)
    submission_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("intake_submissions.id"), nullable=True, index=True
    )
    payload: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), index=True)
