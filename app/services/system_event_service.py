"""
System event logging service.

Provides structured logging of notable failures to the database (e.g. an email
send that failed after a submission was stored). All SystemEvent creation goes
through log_event (or info/warn/error) to keep the payload shape consistent.
"""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy import delete
from sqlalchemy.orm import Session

from app.db.models import SystemEvent
from app.middleware.correlation_id import get_correlation_id

logger = logging.getLogger(__name__)

# Default retention: delete events older than this many days
DEFAULT_RETENTION_DAYS = 90


def log_event(
    db: Session,
    level: str,
    event_type: str,
    submission_id: str | None = None,
    payload: dict | None = None,
    exc: BaseException | None = None,
    correlation_id: str | None = None,
) -> SystemEvent:
    """
    Log a system event to the database.

    Args:
        db: Database session
        level: Event level (INFO, WARN, ERROR)
        event_type: Type of event (e.g., "email.send_failure")
        submission_id: Optional intake submission the event relates to
        payload: Optional additional event data (dict). Will be copied.
        exc: Optional exception; its type and message are added to payload.
        correlation_id: Optional correlation ID; defaults to the current request's.

    Returns:
        Created SystemEvent object
    """
    normalized: dict = dict(payload) if payload else {}
    if exc is not None:
        normalized["error"] = {
            "type": type(exc).__name__,
            "message": str(exc)[:500],  # Truncate to avoid huge payloads
        }
    cid = correlation_id if correlation_id is not None else get_correlation_id()
    if cid is not None:
        normalized["correlation_id"] = cid

    event = SystemEvent(
        level=level.upper(),
        event_type=event_type,
        submission_id=submission_id,
        payload=normalized if normalized else None,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def info(db: Session, event_type: str, **kwargs) -> SystemEvent:
    """Log an INFO-level system event (kwargs as for log_event)."""
    return log_event(db, level="INFO", event_type=event_type, **kwargs)


def warn(db: Session, event_type: str, **kwargs) -> SystemEvent:
    """Log a WARN-level system event (kwargs as for log_event)."""
    return log_event(db, level="WARN", event_type=event_type, **kwargs)


def error(db: Session, event_type: str, **kwargs) -> SystemEvent:
    """Log an ERROR-level system event (kwargs as for log_event)."""
    return log_event(db, level="ERROR", event_type=event_type, **kwargs)


def cleanup_old_events(
    db: Session,
    *,
    retention_days: int = DEFAULT_RETENTION_DAYS,
    cutoff: datetime | None = None,
) -> int:
    """
    Delete SystemEvents older than retention_days (or before cutoff if provided).

    Args:
        db: Database session
        retention_days: Delete events older than this many days (default 90)
        cutoff: Optional explicit cutoff datetime (overrides retention_days)

    Returns:
        Number of rows deleted
    """
    if cutoff is None:
        cutoff = datetime.now(UTC) - timedelta(days=retention_days)
    if cutoff.tzinfo is None:
        cutoff = cutoff.replace(tzinfo=UTC)
    result = db.execute(delete(SystemEvent).where(SystemEvent.created_at < cutoff))
    db.commit()
    deleted = result.rowcount
    logger.info(f"SystemEvent retention: deleted {deleted} events older than {cutoff.isoformat()}")
    return deleted
