"""
Scheduled job for SystemEvent retention cleanup.

Run via: python -m app.jobs.cleanup_system_events [--retention-days 90] [--dry-run]
"""

import argparse
import logging
import sys
from datetime import UTC, datetime, timedelta

from sqlalchemy import func, select

from app.db.models import SystemEvent
from app.db.session import SessionLocal
from app.services.system_event_service import DEFAULT_RETENTION_DAYS, cleanup_old_events

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Clean up old SystemEvents (retention)")
    parser.add_argument(
        "--retention-days",
        type=int,
        default=DEFAULT_RETENTION_DAYS,
        help=f"Delete events older than this many days (default: {DEFAULT_RETENTION_DAYS})",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only count the events that would be deleted",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for SystemEvent retention cleanup."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    db = SessionLocal()
    try:
        if args.dry_run:
            cutoff = datetime.now(UTC) - timedelta(days=args.retention_days)
            count = db.scalar(
                select(func.count()).select_from(SystemEvent).where(SystemEvent.created_at < cutoff)
            )
            logger.info(f"[DRY-RUN] Would delete {count} events older than {cutoff.isoformat()}")
        else:
            deleted = cleanup_old_events(db, retention_days=args.retention_days)
            logger.info(f"Retention cleanup completed: deleted {deleted} events")
    except Exception as e:
        logger.error(f"Retention cleanup failed: {e}", exc_info=True)
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
