"""
Resend email client with dry-run mode for development.

Talks to the Resend REST API (POST /emails) through the shared httpx helper.
The client is built per request by the get_email_client dependency so tests
and alternative providers can be swapped in without touching module state.
"""

import logging
from typing import Any

import httpx

from app.core.config import settings
from app.services.integrations.http_client import create_httpx_client

logger = logging.getLogger(__name__)


class EmailNotConfiguredError(RuntimeError):
    """Raised when a send is attempted without an API key."""


class EmailSendError(RuntimeError):
    """Raised when Resend answers with a non-2xx status and no error body."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class EmailClient:
    """Minimal Resend API client."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.resend.com",
        dry_run: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.dry_run = dry_run
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def send(
        self,
        sender: str,
        to: str,
        subject: str,
        text: str,
        html: str | None = None,
        reply_to: str | None = None,
    ) -> dict[str, Any]:
        """
        Send one email.

        Args:
            sender: From identity, e.g. "OTwoOne Elevate <onboarding@resend.dev>"
            to: Recipient address
            subject: Subject line
            text: Plain-text body
            html: Optional HTML body
            reply_to: Optional Reply-To address

        Returns:
            {"data": {...}} on success, {"error": {...}} when Resend rejects the email

        Raises:
            EmailNotConfiguredError: API key missing
            EmailSendError: non-2xx response without a parsable error body
            httpx.HTTPError: transport failures (timeouts, connection errors)
        """
        if not self.configured:
            raise EmailNotConfiguredError("RESEND_API_KEY not configured. Cannot send email.")

        payload: dict[str, Any] = {
            "from": sender,
            "to": [to],
            "subject": subject,
            "text": text,
        }
        if html:
            payload["html"] = html
        if reply_to:
            payload["reply_to"] = reply_to

        if self.dry_run:
            logger.info(f"[DRY-RUN] Would send email to {to}: {subject}")
            return {"data": {"id": None, "dry_run": True}}

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        async with create_httpx_client(
            base_url=self.base_url, headers=headers, transport=self._transport
        ) as client:
            response = await client.post("/emails", json=payload)

        if response.is_success:
            return {"data": response.json()}

        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body:
            logger.warning(f"Resend rejected email to {to}: status={response.status_code} body={body}")
            return {"error": body}
        raise EmailSendError(
            f"Resend returned HTTP {response.status_code}", status_code=response.status_code
        )


def get_email_client() -> EmailClient:
    """FastAPI dependency: email client built from current settings."""
    return EmailClient(
        api_key=settings.resend_api_key,
        base_url=settings.resend_api_base_url,
        dry_run=settings.email_dry_run,
    )
