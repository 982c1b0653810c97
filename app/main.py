import logging

from fastapi import Depends, FastAPI, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.api.intake import router as intake_router
from app.core.config import settings
from app.db.deps import get_db
from app.middleware.correlation_id import CorrelationIdMiddleware
from app.middleware.rate_limit import RateLimitMiddleware

logger = logging.getLogger(__name__)

app = FastAPI(title="Elevate Intake")

# Rate limit the public intake endpoints (form posts are unauthenticated)
app.add_middleware(
    RateLimitMiddleware,
    rate_limited_paths=["/api/elevate"],
)
app.add_middleware(CorrelationIdMiddleware)


def _create_tables_for_sqlite() -> None:
    """Local/dev databases are created on the fly; production schemas are managed externally."""
    from app.db import models  # noqa: F401
    from app.db import session as db_session
    from app.db.base import Base

    if settings.database_url.startswith("sqlite"):
        Base.metadata.create_all(bind=db_session.engine)


@app.on_event("startup")
async def startup_event():
    """Run startup checks and validation."""
    # Validate critical settings (fail-fast if missing)
    required_settings = ["database_url"]
    missing = [key for key in required_settings if not getattr(settings, key, None)]
    if missing:
        raise RuntimeError(
            f"Missing required environment variables: {', '.join(missing)}. "
            "Please check your .env file or environment configuration."
        )

    # Production-specific validation (fail-fast if in production)
    if settings.app_env == "production":
        production_errors = []

        if settings.email_dry_run:
            production_errors.append(
                "EMAIL_DRY_RUN must be False in production. "
                "Set EMAIL_DRY_RUN=false or remove it from environment variables."
            )

        if not settings.rate_limit_enabled:
            production_errors.append(
                "RATE_LIMIT_ENABLED must be True in production: the intake endpoints are public."
            )

        if production_errors:
            error_message = (
                "Production environment validation failed:\n\n"
                + "\n".join(f"  - {error}" for error in production_errors)
                + "\n\n"
                "The application cannot start in production with these invalid settings. "
                "Please fix the configuration and restart."
            )
            logger.error(error_message)
            raise RuntimeError(error_message)

    # Email is optional: submissions are still stored, sends are reported as not attempted
    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY not set - intake emails will not be sent")
    elif not settings.elevate_notify_email:
        logger.warning("ELEVATE_NOTIFY_EMAIL not set - internal notifications will not be sent")

    _create_tables_for_sqlite()

    # Log enabled integrations summary (no secrets)
    logger.info(
        "Startup: Configuration loaded - "
        f"Environment: {settings.app_env}, "
        f"Email configured: {bool(settings.resend_api_key)}, "
        f"Email dry-run: {settings.email_dry_run}"
    )


@app.get("/health")
def health():
    """
    Health check endpoint with feature flag visibility.

    Returns 200 immediately - used for basic health checks.
    """
    return {
        "ok": True,
        "features": {
            "notifications_enabled": settings.feature_notifications_enabled,
            "autoreply_enabled": settings.feature_autoreply_enabled,
            "rate_limit_enabled": settings.rate_limit_enabled,
        },
        "integrations": {
            "email_configured": bool(settings.resend_api_key),
            "notify_email_configured": bool(settings.elevate_notify_email),
            "email_dry_run": settings.email_dry_run,
        },
    }


@app.get("/ready")
def ready(db: Session = Depends(get_db)):
    """
    Readiness check endpoint - verifies database connectivity.

    Returns 200 if database is accessible, 503 if not.
    """
    try:
        db.execute(text("SELECT 1"))
        return {"ok": True, "database": "connected"}
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"ok": False, "database": "disconnected", "error": str(e)},
        )


app.include_router(intake_router, prefix="/api/elevate", tags=["intake"])
