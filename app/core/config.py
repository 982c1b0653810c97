from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        validate_assignment=True,
    )

    app_env: str = "dev"
    database_url: str

    # Resend (transactional email)
    resend_api_key: str | None = None  # Missing key -> emails reported as not attempted
    resend_api_base_url: str = "https://api.resend.com"
    email_dry_run: bool = False  # Log emails instead of calling Resend (dev only)

    # Elevate intake emails
    elevate_notify_email: str | None = None  # Operator inbox for new submissions
    elevate_from_email: str = "OTwoOne Elevate <onboarding@resend.dev>"

    # Feature flags
    feature_notifications_enabled: bool = True  # Internal notification email
    feature_autoreply_enabled: bool = True  # Auto-reply to the submitter

    # Rate limiting (intake endpoints)
    rate_limit_enabled: bool = True
    rate_limit_requests: int = 10  # Number of requests allowed per window
    rate_limit_window_seconds: int = 60  # Time window in seconds
    rate_limit_trust_proxy_headers: bool = False  # Key on X-Forwarded-For / X-Real-IP (only behind a trusted proxy)


# Settings will load from environment variables or .env file
# Required fields will raise ValidationError if missing (fail-fast)
settings = Settings()
