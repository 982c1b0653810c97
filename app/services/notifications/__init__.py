"""Outbound email: Resend client and intake email composition."""

from app.services.notifications.email_client import (
    EmailClient,
    EmailNotConfiguredError,
    EmailSendError,
    get_email_client,
)
from app.services.notifications.intake_emails import send_intake_emails

__all__ = [
    "EmailClient",
    "EmailNotConfiguredError",
    "EmailSendError",
    "get_email_client",
    "send_intake_emails",
]
