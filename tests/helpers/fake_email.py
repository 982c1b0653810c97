"""
In-memory stand-in for the Resend client.

Records every message instead of calling the API; can be told to raise or to
return a provider error for specific recipients.
"""

from typing import Any

from app.services.notifications.email_client import EmailClient


class FakeEmailClient(EmailClient):
    def __init__(self, api_key: str | None = "re_test_key"):
        super().__init__(api_key=api_key, base_url="https://resend.test")
        self.sent: list[dict[str, Any]] = []
        self.raise_for: dict[str, Exception] = {}
        self.reject_for: dict[str, dict[str, Any]] = {}

    async def send(self, sender, to, subject, text, html=None, reply_to=None):
        message = {
            "sender": sender,
            "to": to,
            "subject": subject,
            "text": text,
            "html": html,
            "reply_to": reply_to,
        }
        if to in self.raise_for:
            raise self.raise_for[to]
        if to in self.reject_for:
            return {"error": self.reject_for[to]}
        self.sent.append(message)
        return {"data": {"id": f"email_{len(self.sent)}"}}

    def sent_to(self, address: str) -> list[dict[str, Any]]:
        return [m for m in self.sent if m["to"] == address]
